"""Renderable adapters for module-level declarations."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..logging import get_logger
from ..manifest.declarations import (
    ClassLike,
    CustomElement,
    CustomElementExport,
    FunctionDeclaration,
    MixinDeclaration,
    Module,
    VariableDeclaration,
)
from ..manifest.deprecation import Deprecated
from ..manifest.models import Attribute, ClassField, CustomElementField, type_text
from .base import MissingCrossReference, Predicate, Renderable, Section, TreeNode, group_node
from .members import (
    MemberRenderable,
    RenderableAttribute,
    RenderableClassField,
    RenderableClassMethod,
    RenderableCssCustomProperty,
    RenderableCssCustomState,
    RenderableCssPart,
    RenderableCustomElementField,
    RenderableEvent,
    RenderableSlot,
)
from .style import dim, highlight_if_deprecated, join_label, keyword, row

_LOGGER = get_logger("render.declarations")


class RenderableFunction(MemberRenderable):
    def __init__(self, function: FunctionDeclaration, **context) -> None:
        super().__init__(**context)
        self.function = function

    def name(self) -> str:
        return self.function.name

    def label(self) -> str:
        return join_label(keyword("function"), highlight_if_deprecated(self), dim(self.function.summary))

    def deprecation(self) -> Deprecated:
        return self.function.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Return Type", "Summary"]

    def to_table_row(self) -> List[str]:
        returns = self.function.returns
        return row(
            highlight_if_deprecated(self),
            type_text(returns.type) if returns is not None else "",
            self.function.summary,
        )


class RenderableVariable(MemberRenderable):
    def __init__(self, variable: VariableDeclaration, **context) -> None:
        super().__init__(**context)
        self.variable = variable

    def name(self) -> str:
        return self.variable.name

    def label(self) -> str:
        return join_label(keyword("const"), highlight_if_deprecated(self), dim(self.variable.summary))

    def deprecation(self) -> Deprecated:
        return self.variable.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Type", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(highlight_if_deprecated(self), type_text(self.variable.type), self.variable.summary)


class RenderableClass(Renderable):
    """A class or mixin, with its members grouped as Fields then Methods."""

    def __init__(
        self,
        declaration: ClassLike,
        *,
        module: Optional[Module] = None,
        export: Optional[CustomElementExport] = None,
    ) -> None:
        self.declaration = declaration
        self.module = module
        self.export = export
        self.fields: List[RenderableClassField] = []
        self.methods: List[RenderableClassMethod] = []
        for member in declaration.members:
            if isinstance(member, ClassField):
                self.fields.append(self._wrap_field(member))
            else:
                self.methods.append(RenderableClassMethod(member, **self._context()))

    def _context(self) -> Dict[str, object]:
        return {"declaration": self.declaration, "module": self.module, "export": self.export}

    def _wrap_field(self, member: ClassField) -> RenderableClassField:
        return RenderableClassField(member, **self._context())

    def name(self) -> str:
        return self.declaration.name

    def kind_keyword(self) -> str:
        return "mixin" if isinstance(self.declaration, MixinDeclaration) else "class"

    def label(self) -> str:
        return join_label(
            keyword(self.kind_keyword()),
            highlight_if_deprecated(self),
            dim(self.summary()),
        )

    def deprecation(self) -> Deprecated:
        return self.declaration.deprecated

    def summary(self) -> str:
        return self.declaration.summary

    def module_path(self) -> str:
        return self.module.path if self.module is not None else ""

    def children(self) -> List[Renderable]:
        return [*self.fields, *self.methods]

    def groups(self) -> List[Section]:
        return [Section("Fields", list(self.fields)), Section("Methods", list(self.methods))]

    def tree_children(self, predicate: Predicate) -> List[TreeNode]:
        nodes = (group_node(group.title, group.items, predicate) for group in self.groups())
        return [node for node in nodes if node is not None]

    def sections(self) -> Optional[List[Section]]:
        return self.groups()

    def column_headings(self) -> List[str]:
        return ["Name", "Module Path", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(highlight_if_deprecated(self), self.module_path(), self.declaration.summary)


class RenderableCustomElement(RenderableClass):
    """A custom element class or mixin, keyed by its tag name.

    Fields that mirror attributes are cross-linked with those attributes in
    both directions. A field naming an undeclared attribute is recorded in
    ``missing_references`` and rendered without the link.
    """

    declaration: CustomElement

    def __init__(
        self,
        declaration: CustomElement,
        *,
        module: Optional[Module] = None,
        export: Optional[CustomElementExport] = None,
    ) -> None:
        self.missing_references: List[MissingCrossReference] = []
        self._attributes_by_name: Dict[str, Attribute] = {
            attribute.name: attribute for attribute in declaration.attributes
        }
        self._fields_by_name: Dict[str, CustomElementField] = {}
        for member in declaration.members:  # type: ignore[attr-defined]
            if isinstance(member, CustomElementField):
                self._fields_by_name.setdefault(member.name, member)
        super().__init__(declaration, module=module, export=export)  # type: ignore[arg-type]
        context = self._context()
        self.attributes = [
            RenderableAttribute(attribute, self._reflecting_field(attribute), **context)
            for attribute in declaration.attributes
        ]
        self.slots = [RenderableSlot(slot, **context) for slot in declaration.slots]
        self.events = [RenderableEvent(event, **context) for event in declaration.events]
        self.css_properties = [
            RenderableCssCustomProperty(prop, **context) for prop in declaration.css_properties
        ]
        self.css_parts = [RenderableCssPart(part, **context) for part in declaration.css_parts]
        self.css_states = [
            RenderableCssCustomState(state, **context) for state in declaration.css_states
        ]

    def _reflecting_field(self, attribute: Attribute) -> Optional[CustomElementField]:
        found = self.declaration.attribute_field(attribute.name)
        if found is None and attribute.field_name:
            found = self._fields_by_name.get(attribute.field_name)
        return found

    def _wrap_field(self, member: ClassField) -> RenderableClassField:
        if not isinstance(member, CustomElementField):
            return super()._wrap_field(member)
        attribute = self._attributes_by_name.get(member.attribute) if member.attribute else None
        if member.attribute and attribute is None:
            missing = MissingCrossReference(self.name(), member.name, member.attribute)
            self.missing_references.append(missing)
            _LOGGER.debug("Skipping attribute link: %s", missing)
        return RenderableCustomElementField(member, attribute, **self._context())

    def name(self) -> str:
        return self.declaration.tag_name

    def class_name(self) -> str:
        return self.declaration.name  # type: ignore[attr-defined]

    def label(self) -> str:
        tag = highlight_if_deprecated(self, "<", ">")
        if isinstance(self.declaration, MixinDeclaration):
            return join_label(keyword("mixin"), tag)
        return tag

    def children(self) -> List[Renderable]:
        return [
            *self.attributes,
            *self.slots,
            *self.events,
            *self.fields,
            *self.methods,
            *self.css_properties,
            *self.css_parts,
            *self.css_states,
        ]

    def groups(self) -> List[Section]:
        return [
            Section("Attributes", list(self.attributes)),
            Section("Slots", list(self.slots)),
            Section("Events", list(self.events)),
            Section("Fields", list(self.fields)),
            Section("Methods", list(self.methods)),
            Section("CSS Properties", list(self.css_properties)),
            Section("Parts", list(self.css_parts)),
            Section("States", list(self.css_states)),
        ]

    def column_headings(self) -> List[str]:
        return ["Tag", "Class", "Module", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(
            highlight_if_deprecated(self),
            self.class_name(),
            self.module_path(),
            self.declaration.summary,  # type: ignore[attr-defined]
        )


def wrap_declaration(
    declaration: object,
    *,
    module: Optional[Module] = None,
    export: Optional[CustomElementExport] = None,
) -> Renderable:
    """Project any module-level declaration into its renderable adapter."""
    if isinstance(declaration, CustomElement):
        return RenderableCustomElement(declaration, module=module, export=export)
    if isinstance(declaration, ClassLike):
        return RenderableClass(declaration, module=module, export=export)
    if isinstance(declaration, FunctionDeclaration):
        return RenderableFunction(declaration, module=module, export=export)
    if isinstance(declaration, VariableDeclaration):
        return RenderableVariable(declaration, module=module, export=export)
    raise TypeError(f"Cannot render declaration of type {type(declaration).__name__}")


__all__ = [
    "RenderableClass",
    "RenderableCustomElement",
    "RenderableFunction",
    "RenderableVariable",
    "wrap_declaration",
]

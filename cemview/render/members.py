"""Renderable adapters for the leaf members of classes and custom elements."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from ..manifest.deprecation import Deprecated
from ..manifest.models import (
    Attribute,
    ClassField,
    ClassMethod,
    CssCustomProperty,
    CssCustomState,
    CssPart,
    CustomElementField,
    Event,
    Slot,
    type_text,
)
from .base import Renderable
from .style import dim, highlight_if_deprecated, join_label, row

if TYPE_CHECKING:
    from ..manifest.declarations import ClassLike, CustomElementExport, Module

CHECK = "✅"


class MemberRenderable(Renderable):
    """Leaf adapter carrying its owning declaration, module and export."""

    def __init__(
        self,
        *,
        declaration: Optional["ClassLike"] = None,
        module: Optional["Module"] = None,
        export: Optional["CustomElementExport"] = None,
    ) -> None:
        self.declaration = declaration
        self.module = module
        self.export = export

    def label(self) -> str:
        return join_label(highlight_if_deprecated(self), dim(self.summary()))


class RenderableAttribute(MemberRenderable):
    def __init__(
        self,
        attribute: Attribute,
        field: Optional[CustomElementField] = None,
        **context,
    ) -> None:
        super().__init__(**context)
        self.attribute = attribute
        self.field = field

    def name(self) -> str:
        return self.attribute.name

    def summary(self) -> str:
        return self.attribute.summary

    def deprecation(self) -> Deprecated:
        return self.attribute.deprecated

    def reflects(self) -> bool:
        return self.field is not None and self.field.reflects

    def label(self) -> str:
        reflects = "(reflects)" if self.reflects() else ""
        return join_label(highlight_if_deprecated(self), reflects, dim(self.summary()))

    def column_headings(self) -> List[str]:
        return ["Name", "DOM Property", "Reflects", "Summary", "Default", "Type"]

    def to_table_row(self) -> List[str]:
        return row(
            highlight_if_deprecated(self),
            self.field.name if self.field is not None else "",
            CHECK if self.reflects() else "",
            self.attribute.summary,
            self.attribute.default,
            type_text(self.attribute.type),
        )


class RenderableClassField(MemberRenderable):
    def __init__(self, field: ClassField, **context) -> None:
        super().__init__(**context)
        self.field = field

    def name(self) -> str:
        return self.field.name

    def summary(self) -> str:
        return self.field.summary

    def deprecation(self) -> Deprecated:
        return self.field.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Type", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(highlight_if_deprecated(self), type_text(self.field.type), self.field.summary)


class RenderableCustomElementField(RenderableClassField):
    """A field mirroring an attribute; ``attribute`` is set once cross-linked."""

    def __init__(
        self,
        field: CustomElementField,
        attribute: Optional[Attribute] = None,
        **context,
    ) -> None:
        super().__init__(field, **context)
        self.attribute = attribute

    def label(self) -> str:
        linked = self.attribute is not None and self.field.reflects
        annotation = "(reflects)" if linked else ""
        return join_label(highlight_if_deprecated(self), annotation, dim(self.summary()))


class RenderableClassMethod(MemberRenderable):
    def __init__(self, method: ClassMethod, **context) -> None:
        super().__init__(**context)
        self.method = method

    def name(self) -> str:
        return self.method.name

    def summary(self) -> str:
        return self.method.summary

    def deprecation(self) -> Deprecated:
        return self.method.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Return Type", "Privacy", "Static", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(
            highlight_if_deprecated(self),
            self.method.return_type() or "void",
            self.method.privacy or "public",
            CHECK if self.method.static else "",
            self.method.summary,
        )


class RenderableEvent(MemberRenderable):
    def __init__(self, event: Event, **context) -> None:
        super().__init__(**context)
        self.event = event

    def name(self) -> str:
        return self.event.name

    def summary(self) -> str:
        return self.event.summary

    def deprecation(self) -> Deprecated:
        return self.event.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Type", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(highlight_if_deprecated(self), type_text(self.event.type), self.event.summary)


class RenderableSlot(MemberRenderable):
    def __init__(self, slot: Slot, **context) -> None:
        super().__init__(**context)
        self.slot = slot

    def name(self) -> str:
        return self.slot.name or "<default>"

    def summary(self) -> str:
        return self.slot.summary

    def deprecation(self) -> Deprecated:
        return self.slot.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(highlight_if_deprecated(self), self.slot.summary)


class RenderableCssCustomProperty(MemberRenderable):
    def __init__(self, prop: CssCustomProperty, **context) -> None:
        super().__init__(**context)
        self.prop = prop

    def name(self) -> str:
        return self.prop.name

    def summary(self) -> str:
        return self.prop.summary

    def deprecation(self) -> Deprecated:
        return self.prop.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Syntax", "Default", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(highlight_if_deprecated(self), self.prop.syntax, self.prop.default, self.prop.summary)


class RenderableCssPart(MemberRenderable):
    def __init__(self, part: CssPart, **context) -> None:
        super().__init__(**context)
        self.part = part

    def name(self) -> str:
        return self.part.name

    def summary(self) -> str:
        return self.part.summary

    def deprecation(self) -> Deprecated:
        return self.part.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(highlight_if_deprecated(self), self.part.summary)


class RenderableCssCustomState(MemberRenderable):
    def __init__(self, state: CssCustomState, **context) -> None:
        super().__init__(**context)
        self.state = state

    def name(self) -> str:
        return self.state.name

    def summary(self) -> str:
        return self.state.summary

    def deprecation(self) -> Deprecated:
        return self.state.deprecated

    def column_headings(self) -> List[str]:
        return ["Name", "Summary"]

    def to_table_row(self) -> List[str]:
        return row(highlight_if_deprecated(self), self.state.summary)


__all__ = [
    "MemberRenderable",
    "RenderableAttribute",
    "RenderableClassField",
    "RenderableClassMethod",
    "RenderableCssCustomProperty",
    "RenderableCssCustomState",
    "RenderableCssPart",
    "RenderableCustomElementField",
    "RenderableEvent",
    "RenderableSlot",
]

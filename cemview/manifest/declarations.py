"""Declarations, exports, modules and the package root of a manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from .deprecation import Deprecated, decode_deprecated, encode_deprecated, is_deprecated
from .dispatch import dispatch
from .errors import UnknownDeclarationKindError, UnknownExportKindError
from .models import (
    Attribute,
    ClassMember,
    ClassMethod,
    ClassField,
    CssCustomProperty,
    CssCustomState,
    CssPart,
    CustomElementField,
    Demo,
    Entity,
    Event,
    FullyQualified,
    Parameter,
    PropertyLike,
    Reference,
    Return,
    Slot,
    SourceReference,
    as_list,
    as_optional,
    as_str,
    decode_member,
    expect_object,
    put,
)
from .paths import normalize_module_path

SCHEMA_VERSION = "1.0.0"


# ----------------------------------------------------------------------
# Functions and variables


@dataclass
class FunctionDeclaration(FullyQualified):
    parameters: List[Parameter] = field(default_factory=list)
    returns: Optional[Return] = None
    source: Optional[SourceReference] = None
    deprecated: Deprecated = None
    start_byte: int = 0

    KIND = "function"

    @classmethod
    def from_dict(cls, payload: object) -> "FunctionDeclaration":
        data = expect_object(payload, "function")
        kwargs = cls._fq_kwargs(data, "function")
        return cls(
            **kwargs,
            parameters=as_list(data, "parameters", "function", Parameter.from_dict),
            returns=as_optional(data, "return", Return.from_dict),
            source=as_optional(data, "source", SourceReference.from_dict),
            deprecated=decode_deprecated(data, owner=f"function {kwargs['name']!r}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.KIND}
        out.update(self._fq_dict())
        put(out, "parameters", self.parameters)
        if self.returns is not None:
            out["return"] = self.returns.to_dict()
        put(out, "source", self.source)
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)


@dataclass
class VariableDeclaration(PropertyLike):
    source: Optional[SourceReference] = None
    start_byte: int = 0

    KIND = "variable"

    @classmethod
    def from_dict(cls, payload: object) -> "VariableDeclaration":
        data = expect_object(payload, "variable")
        return cls(
            **cls._property_kwargs(data, "variable"),
            source=as_optional(data, "source", SourceReference.from_dict),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.KIND}
        out.update(self._property_dict())
        put(out, "source", self.source)
        return out


# ----------------------------------------------------------------------
# Classes, mixins and custom elements


@dataclass
class ClassLike(FullyQualified):
    superclass: Optional[Reference] = None
    mixins: List[Reference] = field(default_factory=list)
    members: List[ClassMember] = field(default_factory=list)
    source: Optional[SourceReference] = None
    deprecated: Deprecated = None
    start_byte: int = 0

    KIND = ""

    @classmethod
    def _class_kwargs(cls, data: Mapping[str, Any], what: str) -> Dict[str, Any]:
        kwargs = cls._fq_kwargs(data, what)
        kwargs.update(
            superclass=as_optional(data, "superclass", Reference.from_dict),
            mixins=as_list(data, "mixins", what, Reference.from_dict),
            members=as_list(data, "members", what, decode_member),
            source=as_optional(data, "source", SourceReference.from_dict),
            deprecated=decode_deprecated(data, owner=f"{what} {kwargs['name']!r}"),
        )
        return kwargs

    def _class_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.KIND}
        out.update(self._fq_dict())
        put(out, "superclass", self.superclass)
        put(out, "mixins", self.mixins)
        put(out, "members", self.members)
        put(out, "source", self.source)
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)

    def fields(self) -> List[ClassField]:
        return [member for member in self.members if isinstance(member, ClassField)]

    def methods(self) -> List[ClassMethod]:
        return [member for member in self.members if isinstance(member, ClassMethod)]


@dataclass
class ClassDeclaration(ClassLike):
    KIND = "class"

    @classmethod
    def from_dict(cls, payload: object) -> "ClassDeclaration":
        return cls(**cls._class_kwargs(expect_object(payload, "class"), "class"))

    def to_dict(self) -> Dict[str, Any]:
        return self._class_dict()


@dataclass
class MixinDeclaration(ClassLike):
    parameters: List[Parameter] = field(default_factory=list)
    returns: Optional[Return] = None

    KIND = "mixin"

    @classmethod
    def _mixin_kwargs(cls, data: Mapping[str, Any]) -> Dict[str, Any]:
        kwargs = cls._class_kwargs(data, "mixin")
        kwargs.update(
            parameters=as_list(data, "parameters", "mixin", Parameter.from_dict),
            returns=as_optional(data, "return", Return.from_dict),
        )
        return kwargs

    @classmethod
    def from_dict(cls, payload: object) -> "MixinDeclaration":
        return cls(**cls._mixin_kwargs(expect_object(payload, "mixin")))

    def to_dict(self) -> Dict[str, Any]:
        out = self._class_dict()
        put(out, "parameters", self.parameters)
        if self.returns is not None:
            out["return"] = self.returns.to_dict()
        return out


@dataclass
class CustomElement(Entity):
    """Custom element facets layered onto a class or mixin."""

    tag_name: str = ""
    attributes: List[Attribute] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    slots: List[Slot] = field(default_factory=list)
    css_parts: List[CssPart] = field(default_factory=list)
    css_properties: List[CssCustomProperty] = field(default_factory=list)
    css_states: List[CssCustomState] = field(default_factory=list)
    demos: List[Demo] = field(default_factory=list)

    @staticmethod
    def _custom_element_kwargs(data: Mapping[str, Any], what: str) -> Dict[str, Any]:
        return {
            "tag_name": as_str(data, "tagName", what),
            "attributes": as_list(data, "attributes", what, Attribute.from_dict),
            "events": as_list(data, "events", what, Event.from_dict),
            "slots": as_list(data, "slots", what, Slot.from_dict),
            "css_parts": as_list(data, "cssParts", what, CssPart.from_dict),
            "css_properties": as_list(data, "cssProperties", what, CssCustomProperty.from_dict),
            "css_states": as_list(data, "cssStates", what, CssCustomState.from_dict),
            "demos": as_list(data, "demos", what, Demo.from_dict),
        }

    def _custom_element_dict(self, out: Dict[str, Any]) -> Dict[str, Any]:
        out["customElement"] = True
        put(out, "tagName", self.tag_name)
        put(out, "attributes", self.attributes)
        put(out, "events", self.events)
        put(out, "slots", self.slots)
        put(out, "cssParts", self.css_parts)
        put(out, "cssProperties", self.css_properties)
        put(out, "cssStates", self.css_states)
        put(out, "demos", self.demos)
        return out

    @cached_property
    def attribute_fields(self) -> Dict[str, CustomElementField]:
        """Fields indexed by the attribute they mirror, built on first use."""
        members = getattr(self, "members", [])
        index: Dict[str, CustomElementField] = {}
        for member in members:
            if isinstance(member, CustomElementField) and member.attribute:
                index.setdefault(member.attribute, member)
        return index

    def attribute_field(self, attribute_name: str) -> Optional[CustomElementField]:
        return self.attribute_fields.get(attribute_name)

    def __getstate__(self) -> Dict[str, Any]:
        # Copies rebuild the index from their own members on first use.
        state = dict(self.__dict__)
        state.pop("attribute_fields", None)
        return state


@dataclass
class CustomElementDeclaration(CustomElement, ClassDeclaration):
    @classmethod
    def from_dict(cls, payload: object) -> "CustomElementDeclaration":
        data = expect_object(payload, "custom element")
        return cls(
            **cls._class_kwargs(data, "custom element"),
            **cls._custom_element_kwargs(data, "custom element"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self._custom_element_dict(self._class_dict())


@dataclass
class CustomElementMixinDeclaration(CustomElement, MixinDeclaration):
    @classmethod
    def from_dict(cls, payload: object) -> "CustomElementMixinDeclaration":
        data = expect_object(payload, "custom element mixin")
        return cls(
            **cls._mixin_kwargs(data),
            **cls._custom_element_kwargs(data, "custom element mixin"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self._custom_element_dict(MixinDeclaration.to_dict(self))


Declaration = (
    ClassDeclaration
    | CustomElementDeclaration
    | MixinDeclaration
    | CustomElementMixinDeclaration
    | FunctionDeclaration
    | VariableDeclaration
)

_DECLARATION_DECODERS: Mapping[str, Callable[[Mapping[str, Any]], Any]] = {
    "class": ClassDeclaration.from_dict,
    "custom-element": CustomElementDeclaration.from_dict,
    "mixin": MixinDeclaration.from_dict,
    "custom-element-mixin": CustomElementMixinDeclaration.from_dict,
    "function": FunctionDeclaration.from_dict,
    "variable": VariableDeclaration.from_dict,
}


def _refine_declaration(kind: str, payload: Mapping[str, Any]) -> str:
    if kind in ("class", "mixin") and (
        payload.get("customElement") is True or "tagName" in payload
    ):
        return "custom-element" if kind == "class" else "custom-element-mixin"
    return kind


def decode_declaration(payload: object) -> Declaration:
    """Decode one entry of a module's ``declarations`` array."""
    return dispatch(
        payload,
        _DECLARATION_DECODERS,
        UnknownDeclarationKindError,
        what="declaration",
        refine=_refine_declaration,
    )


# ----------------------------------------------------------------------
# Exports


@dataclass
class _ExportBase(Entity):
    name: str = ""
    declaration: Optional[Reference] = None
    deprecated: Deprecated = None

    KIND = ""

    @classmethod
    def from_dict(cls, payload: object):
        data = expect_object(payload, "export")
        name = as_str(data, "name", "export")
        return cls(
            name=name,
            declaration=as_optional(data, "declaration", Reference.from_dict),
            deprecated=decode_deprecated(data, owner=f"export {name!r}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.KIND, "name": self.name}
        put(out, "declaration", self.declaration)
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)

    def refers_to(self, declaration_name: str, module_path: str) -> bool:
        """True when this export names ``declaration_name`` in ``module_path``."""
        ref = self.declaration
        if ref is None:
            return False
        return ref.name == declaration_name and ref.module in ("", module_path)


@dataclass
class JavaScriptExport(_ExportBase):
    KIND = "js"


@dataclass
class CustomElementExport(_ExportBase):
    """Registers ``declaration`` under the tag name held in ``name``."""

    KIND = "custom-element-definition"


Export = JavaScriptExport | CustomElementExport

_EXPORT_DECODERS: Mapping[str, Callable[[Mapping[str, Any]], Any]] = {
    JavaScriptExport.KIND: JavaScriptExport.from_dict,
    CustomElementExport.KIND: CustomElementExport.from_dict,
}


def decode_export(payload: object) -> Export:
    """Decode one entry of a module's ``exports`` array."""
    return dispatch(payload, _EXPORT_DECODERS, UnknownExportKindError, what="export")


# ----------------------------------------------------------------------
# Modules and the package root


@dataclass
class Module(Entity):
    path: str = ""
    summary: str = ""
    description: str = ""
    declarations: List[Declaration] = field(default_factory=list)
    exports: List[Export] = field(default_factory=list)
    deprecated: Deprecated = None

    KIND = "javascript-module"

    def __post_init__(self) -> None:
        self.path = normalize_module_path(self.path)

    @classmethod
    def from_dict(cls, payload: object) -> "Module":
        data = expect_object(payload, "module")
        path = as_str(data, "path", "module")
        return cls(
            path=path,
            summary=as_str(data, "summary", "module"),
            description=as_str(data, "description", "module"),
            declarations=as_list(data, "declarations", "module", decode_declaration),
            exports=as_list(data, "exports", "module", decode_export),
            deprecated=decode_deprecated(data, owner=f"module {path!r}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.KIND, "path": self.path}
        put(out, "summary", self.summary)
        put(out, "description", self.description)
        put(out, "declarations", self.declarations)
        put(out, "exports", self.exports)
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)

    def custom_element_exports(self) -> List[CustomElementExport]:
        return [exp for exp in self.exports if isinstance(exp, CustomElementExport)]


@dataclass
class Package(Entity):
    schema_version: str = SCHEMA_VERSION
    readme: str = ""
    modules: List[Module] = field(default_factory=list)
    deprecated: Deprecated = None

    @classmethod
    def from_dict(cls, payload: object) -> "Package":
        data = expect_object(payload, "package")
        return cls(
            schema_version=as_str(data, "schemaVersion", "package") or SCHEMA_VERSION,
            readme=as_str(data, "readme", "package"),
            modules=as_list(data, "modules", "package", Module.from_dict),
            deprecated=decode_deprecated(data, owner="package"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "schemaVersion": self.schema_version,
            "modules": [module.to_dict() for module in self.modules],
        }
        put(out, "readme", self.readme)
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)

    def iter_custom_elements(
        self,
    ) -> Iterator[Tuple[CustomElementDeclaration, Module]]:
        for module in self.modules:
            for declaration in module.declarations:
                if isinstance(declaration, CustomElementDeclaration):
                    yield declaration, module

    def tag_names(self) -> List[str]:
        return [ced.tag_name for ced, _ in self.iter_custom_elements() if ced.tag_name]

    def find_custom_element(
        self, tag_name: str
    ) -> Optional[Tuple[CustomElementDeclaration, Module, Optional[CustomElementExport]]]:
        """Locate the first declaration registered as ``tag_name``.

        Tag names are global, so the search stops at the first match.
        """
        for ced, module in self.iter_custom_elements():
            if ced.tag_name != tag_name:
                continue
            export = next(
                (exp for exp in module.custom_element_exports() if exp.name == tag_name),
                None,
            )
            return ced, module, export
        return None


__all__ = [
    "ClassDeclaration",
    "ClassLike",
    "CustomElement",
    "CustomElementDeclaration",
    "CustomElementExport",
    "CustomElementMixinDeclaration",
    "Declaration",
    "Export",
    "FunctionDeclaration",
    "JavaScriptExport",
    "MixinDeclaration",
    "Module",
    "Package",
    "SCHEMA_VERSION",
    "VariableDeclaration",
    "decode_declaration",
    "decode_export",
]

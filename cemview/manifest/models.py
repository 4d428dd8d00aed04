"""Leaf and member entities of a custom elements manifest."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from .deprecation import Deprecated, decode_deprecated, encode_deprecated, is_deprecated
from .dispatch import dispatch
from .errors import ManifestError, UnknownMemberKindError
from .paths import normalize_module_path

T = TypeVar("T")


# ----------------------------------------------------------------------
# Decode helpers


def expect_object(value: object, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ManifestError(f"Expected a JSON object for {what}, got {type(value).__name__}")
    return value


def as_str(payload: Mapping[str, Any], key: str, what: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ManifestError(f"Expected string '{key}' on {what}, got {type(value).__name__}")
    return value


def as_bool(payload: Mapping[str, Any], key: str, what: str) -> bool:
    value = payload.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ManifestError(f"Expected boolean '{key}' on {what}, got {type(value).__name__}")
    return value


def as_int(payload: Mapping[str, Any], key: str, what: str) -> Optional[int]:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ManifestError(f"Expected integer '{key}' on {what}, got {type(value).__name__}")
    return value


def as_list(
    payload: Mapping[str, Any], key: str, what: str, decode: Callable[[Any], T]
) -> List[T]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ManifestError(f"Expected array '{key}' on {what}, got {type(value).__name__}")
    return [decode(item) for item in value]


def as_optional(
    payload: Mapping[str, Any], key: str, decode: Callable[[Any], T]
) -> Optional[T]:
    value = payload.get(key)
    if value is None:
        return None
    return decode(value)


def put(out: Dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` unless ``value`` is empty; entities are written via ``to_dict``."""
    if value is None or value == "" or value == [] or value is False:
        return
    if hasattr(value, "to_dict"):
        out[key] = value.to_dict()
    elif isinstance(value, list):
        out[key] = [item.to_dict() if hasattr(item, "to_dict") else item for item in value]
    else:
        out[key] = value


class Entity:
    """Behaviour shared by every decoded manifest entity."""

    def clone(self: T) -> T:
        """Return a structurally equal copy sharing no mutable state."""
        return copy.deepcopy(self)


# ----------------------------------------------------------------------
# Identity, references and types


@dataclass
class FullyQualified(Entity):
    name: str = ""
    summary: str = ""
    description: str = ""

    @staticmethod
    def _fq_kwargs(payload: Mapping[str, Any], what: str) -> Dict[str, Any]:
        return {
            "name": as_str(payload, "name", what),
            "summary": as_str(payload, "summary", what),
            "description": as_str(payload, "description", what),
        }

    def _fq_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        put(out, "summary", self.summary)
        put(out, "description", self.description)
        return out


@dataclass
class Reference(Entity):
    """Non-owning, name-based link to a declaration elsewhere."""

    name: str = ""
    package: str = ""
    module: str = ""

    def __post_init__(self) -> None:
        self.module = normalize_module_path(self.module)

    @classmethod
    def from_dict(cls, payload: object) -> "Reference":
        data = expect_object(payload, "reference")
        return cls(
            name=as_str(data, "name", "reference"),
            package=as_str(data, "package", "reference"),
            module=as_str(data, "module", "reference"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        put(out, "package", self.package)
        put(out, "module", self.module)
        return out


@dataclass
class SourceReference(Entity):
    href: str = ""

    @classmethod
    def from_dict(cls, payload: object) -> "SourceReference":
        data = expect_object(payload, "source reference")
        return cls(href=as_str(data, "href", "source reference"))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        put(out, "href", self.href)
        return out


@dataclass
class TypeReference(Reference):
    start: Optional[int] = None
    end: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: object) -> "TypeReference":
        data = expect_object(payload, "type reference")
        return cls(
            name=as_str(data, "name", "type reference"),
            package=as_str(data, "package", "type reference"),
            module=as_str(data, "module", "type reference"),
            start=as_int(data, "start", "type reference"),
            end=as_int(data, "end", "type reference"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        if self.start is not None:
            out["start"] = self.start
        if self.end is not None:
            out["end"] = self.end
        return out


@dataclass
class Type(Entity):
    text: str = ""
    references: List[TypeReference] = field(default_factory=list)
    source: Optional[SourceReference] = None

    @classmethod
    def from_dict(cls, payload: object) -> "Type":
        data = expect_object(payload, "type")
        return cls(
            text=as_str(data, "text", "type"),
            references=as_list(data, "references", "type", TypeReference.from_dict),
            source=as_optional(data, "source", SourceReference.from_dict),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        put(out, "text", self.text)
        put(out, "references", self.references)
        put(out, "source", self.source)
        return out


def type_text(value: Optional[Type]) -> str:
    return value.text if value is not None else ""


# ----------------------------------------------------------------------
# Property-like shapes


@dataclass
class PropertyLike(FullyQualified):
    type: Optional[Type] = None
    default: str = ""
    deprecated: Deprecated = None

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)

    @classmethod
    def _property_kwargs(cls, payload: Mapping[str, Any], what: str) -> Dict[str, Any]:
        kwargs = cls._fq_kwargs(payload, what)
        kwargs.update(
            type=as_optional(payload, "type", Type.from_dict),
            default=as_str(payload, "default", what),
            deprecated=decode_deprecated(payload, owner=f"{what} {kwargs['name']!r}"),
        )
        return kwargs

    def _property_dict(self) -> Dict[str, Any]:
        out = self._fq_dict()
        put(out, "type", self.type)
        put(out, "default", self.default)
        encode_deprecated(self.deprecated, out)
        return out


@dataclass
class Parameter(PropertyLike):
    optional: bool = False
    rest: bool = False

    @classmethod
    def from_dict(cls, payload: object) -> "Parameter":
        data = expect_object(payload, "parameter")
        return cls(
            **cls._property_kwargs(data, "parameter"),
            optional=as_bool(data, "optional", "parameter"),
            rest=as_bool(data, "rest", "parameter"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = self._property_dict()
        put(out, "optional", self.optional)
        put(out, "rest", self.rest)
        return out


@dataclass
class Return(Entity):
    type: Optional[Type] = None
    summary: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, payload: object) -> "Return":
        data = expect_object(payload, "return")
        return cls(
            type=as_optional(data, "type", Type.from_dict),
            summary=as_str(data, "summary", "return"),
            description=as_str(data, "description", "return"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        put(out, "type", self.type)
        put(out, "summary", self.summary)
        put(out, "description", self.description)
        return out


# ----------------------------------------------------------------------
# Custom element members


@dataclass
class Attribute(FullyQualified):
    inherited_from: Optional[Reference] = None
    type: Optional[Type] = None
    default: str = ""
    field_name: str = ""
    deprecated: Deprecated = None
    start_byte: int = 0

    @classmethod
    def from_dict(cls, payload: object) -> "Attribute":
        data = expect_object(payload, "attribute")
        kwargs = cls._fq_kwargs(data, "attribute")
        return cls(
            **kwargs,
            inherited_from=as_optional(data, "inheritedFrom", Reference.from_dict),
            type=as_optional(data, "type", Type.from_dict),
            default=as_str(data, "default", "attribute"),
            field_name=as_str(data, "fieldName", "attribute"),
            deprecated=decode_deprecated(data, owner=f"attribute {kwargs['name']!r}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = self._fq_dict()
        put(out, "inheritedFrom", self.inherited_from)
        put(out, "type", self.type)
        put(out, "default", self.default)
        put(out, "fieldName", self.field_name)
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)

    def is_enum(self) -> bool:
        """True when the attribute type is a union of literal values."""
        return "|" in type_text(self.type)

    def enum_values(self) -> List[str]:
        if not self.is_enum():
            return []
        return [part.strip() for part in type_text(self.type).split("|") if part.strip()]

    def is_valid_value(self, value: str) -> bool:
        if not self.is_enum():
            return True
        for candidate in self.enum_values():
            unquoted = candidate
            if len(candidate) >= 2 and candidate[0] == candidate[-1] and candidate[0] in "\"'":
                unquoted = candidate[1:-1]
            if value in (candidate, unquoted):
                return True
        return False


@dataclass
class Event(FullyQualified):
    type: Optional[Type] = None
    inherited_from: Optional[Reference] = None
    deprecated: Deprecated = None
    start_byte: int = 0

    @classmethod
    def from_dict(cls, payload: object) -> "Event":
        data = expect_object(payload, "event")
        kwargs = cls._fq_kwargs(data, "event")
        return cls(
            **kwargs,
            type=as_optional(data, "type", Type.from_dict),
            inherited_from=as_optional(data, "inheritedFrom", Reference.from_dict),
            deprecated=decode_deprecated(data, owner=f"event {kwargs['name']!r}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = self._fq_dict()
        put(out, "type", self.type)
        put(out, "inheritedFrom", self.inherited_from)
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)


@dataclass
class _NamedMember(FullyQualified):
    """Slots, parts and states share the same bare shape."""

    deprecated: Deprecated = None
    start_byte: int = 0

    _what = "member"

    @classmethod
    def from_dict(cls, payload: object):
        data = expect_object(payload, cls._what)
        kwargs = cls._fq_kwargs(data, cls._what)
        return cls(
            **kwargs,
            deprecated=decode_deprecated(data, owner=f"{cls._what} {kwargs['name']!r}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = self._fq_dict()
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)


@dataclass
class Slot(_NamedMember):
    _what = "slot"


@dataclass
class CssPart(_NamedMember):
    _what = "CSS part"


@dataclass
class CssCustomState(_NamedMember):
    _what = "CSS state"


@dataclass
class CssCustomProperty(FullyQualified):
    syntax: str = ""
    default: str = ""
    deprecated: Deprecated = None
    start_byte: int = 0

    @classmethod
    def from_dict(cls, payload: object) -> "CssCustomProperty":
        data = expect_object(payload, "CSS property")
        kwargs = cls._fq_kwargs(data, "CSS property")
        return cls(
            **kwargs,
            syntax=as_str(data, "syntax", "CSS property"),
            default=as_str(data, "default", "CSS property"),
            deprecated=decode_deprecated(data, owner=f"CSS property {kwargs['name']!r}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = self._fq_dict()
        put(out, "syntax", self.syntax)
        put(out, "default", self.default)
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)


@dataclass
class Demo(Entity):
    url: str = ""
    description: str = ""
    source: Optional[SourceReference] = None

    @classmethod
    def from_dict(cls, payload: object) -> "Demo":
        data = expect_object(payload, "demo")
        return cls(
            url=as_str(data, "url", "demo"),
            description=as_str(data, "description", "demo"),
            source=as_optional(data, "source", SourceReference.from_dict),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        put(out, "url", self.url)
        put(out, "description", self.description)
        put(out, "source", self.source)
        return out


# ----------------------------------------------------------------------
# Class members


@dataclass
class ClassField(PropertyLike):
    static: bool = False
    privacy: str = ""
    inherited_from: Optional[Reference] = None
    source: Optional[SourceReference] = None
    start_byte: int = 0

    KIND = "field"

    @classmethod
    def _field_kwargs(cls, data: Mapping[str, Any]) -> Dict[str, Any]:
        kwargs = cls._property_kwargs(data, "field")
        kwargs.update(
            static=as_bool(data, "static", "field"),
            privacy=as_str(data, "privacy", "field"),
            inherited_from=as_optional(data, "inheritedFrom", Reference.from_dict),
            source=as_optional(data, "source", SourceReference.from_dict),
        )
        return kwargs

    @classmethod
    def from_dict(cls, payload: object) -> "ClassField":
        return cls(**cls._field_kwargs(expect_object(payload, "field")))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.KIND}
        out.update(self._property_dict())
        put(out, "static", self.static)
        put(out, "privacy", self.privacy)
        put(out, "inheritedFrom", self.inherited_from)
        put(out, "source", self.source)
        return out


@dataclass
class CustomElementField(ClassField):
    """A field that mirrors an HTML attribute."""

    attribute: str = ""
    reflects: bool = False

    @classmethod
    def from_dict(cls, payload: object) -> "CustomElementField":
        data = expect_object(payload, "field")
        return cls(
            **cls._field_kwargs(data),
            attribute=as_str(data, "attribute", "field"),
            reflects=as_bool(data, "reflects", "field"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        put(out, "attribute", self.attribute)
        # A bare ``reflects`` key marks the custom element flavour when no attribute is set.
        if self.reflects or not self.attribute:
            out["reflects"] = self.reflects
        return out


@dataclass
class ClassMethod(FullyQualified):
    static: bool = False
    privacy: str = ""
    inherited_from: Optional[Reference] = None
    source: Optional[SourceReference] = None
    parameters: List[Parameter] = field(default_factory=list)
    returns: Optional[Return] = None
    deprecated: Deprecated = None
    start_byte: int = 0

    KIND = "method"

    @classmethod
    def from_dict(cls, payload: object) -> "ClassMethod":
        data = expect_object(payload, "method")
        kwargs = cls._fq_kwargs(data, "method")
        return cls(
            **kwargs,
            static=as_bool(data, "static", "method"),
            privacy=as_str(data, "privacy", "method"),
            inherited_from=as_optional(data, "inheritedFrom", Reference.from_dict),
            source=as_optional(data, "source", SourceReference.from_dict),
            parameters=as_list(data, "parameters", "method", Parameter.from_dict),
            returns=as_optional(data, "return", Return.from_dict),
            deprecated=decode_deprecated(data, owner=f"method {kwargs['name']!r}"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.KIND}
        out.update(self._fq_dict())
        put(out, "static", self.static)
        put(out, "privacy", self.privacy)
        put(out, "inheritedFrom", self.inherited_from)
        put(out, "source", self.source)
        put(out, "parameters", self.parameters)
        if self.returns is not None:
            out["return"] = self.returns.to_dict()
        encode_deprecated(self.deprecated, out)
        return out

    def is_deprecated(self) -> bool:
        return is_deprecated(self.deprecated)

    def return_type(self) -> str:
        return type_text(self.returns.type) if self.returns is not None else ""


ClassMember = ClassField | ClassMethod

_CUSTOM_ELEMENT_FIELD = "custom-element-field"

_MEMBER_DECODERS: Mapping[str, Callable[[Mapping[str, Any]], Any]] = {
    "field": ClassField.from_dict,
    _CUSTOM_ELEMENT_FIELD: CustomElementField.from_dict,
    "method": ClassMethod.from_dict,
}


def _refine_member(kind: str, payload: Mapping[str, Any]) -> str:
    if kind == "field" and ("attribute" in payload or "reflects" in payload):
        return _CUSTOM_ELEMENT_FIELD
    return kind


def decode_member(payload: object) -> ClassMember:
    """Decode one entry of a class ``members`` array."""
    return dispatch(
        payload,
        _MEMBER_DECODERS,
        UnknownMemberKindError,
        what="class member",
        refine=_refine_member,
    )


__all__ = [
    "Attribute",
    "ClassField",
    "ClassMember",
    "ClassMethod",
    "CssCustomProperty",
    "CssCustomState",
    "CssPart",
    "CustomElementField",
    "Demo",
    "Entity",
    "Event",
    "FullyQualified",
    "Parameter",
    "PropertyLike",
    "Reference",
    "Return",
    "Slot",
    "SourceReference",
    "Type",
    "TypeReference",
    "decode_member",
    "type_text",
]

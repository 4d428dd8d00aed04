"""Typed model of a custom elements manifest."""

from .codec import decode_package, encode_package
from .declarations import (
    ClassDeclaration,
    CustomElementDeclaration,
    CustomElementExport,
    CustomElementMixinDeclaration,
    FunctionDeclaration,
    JavaScriptExport,
    MixinDeclaration,
    Module,
    Package,
    VariableDeclaration,
)
from .deprecation import Deprecated, DeprecatedFlag, DeprecatedReason, is_deprecated
from .errors import (
    InvalidDeprecatedShapeError,
    ManifestError,
    ManifestNotFoundError,
    ManifestSyntaxError,
    TagNotFoundError,
    UnknownDeclarationKindError,
    UnknownDiscriminatorError,
    UnknownExportKindError,
    UnknownMemberKindError,
)

__all__ = [
    "ClassDeclaration",
    "CustomElementDeclaration",
    "CustomElementExport",
    "CustomElementMixinDeclaration",
    "Deprecated",
    "DeprecatedFlag",
    "DeprecatedReason",
    "FunctionDeclaration",
    "InvalidDeprecatedShapeError",
    "JavaScriptExport",
    "ManifestError",
    "ManifestNotFoundError",
    "ManifestSyntaxError",
    "MixinDeclaration",
    "Module",
    "Package",
    "TagNotFoundError",
    "UnknownDeclarationKindError",
    "UnknownDiscriminatorError",
    "UnknownExportKindError",
    "UnknownMemberKindError",
    "VariableDeclaration",
    "decode_package",
    "encode_package",
    "is_deprecated",
]

"""Exceptions raised while decoding or querying a custom elements manifest."""

from __future__ import annotations


class ManifestError(ValueError):
    """Base class for manifest decode failures."""


class ManifestSyntaxError(ManifestError):
    """Raised when the manifest bytes are not valid JSON."""

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"Invalid manifest JSON{location}: {message}")
        self.line = line
        self.column = column


class UnknownDiscriminatorError(ManifestError):
    """Raised when a kind-tagged object carries a kind we cannot decode."""

    family = "object"

    def __init__(self, kind: object) -> None:
        super().__init__(f"Unknown {self.family} kind: {kind!r}")
        self.kind = kind


class UnknownExportKindError(UnknownDiscriminatorError):
    family = "export"


class UnknownDeclarationKindError(UnknownDiscriminatorError):
    family = "declaration"


class UnknownMemberKindError(UnknownDiscriminatorError):
    family = "class member"


class InvalidDeprecatedShapeError(ManifestError):
    """Raised when a ``deprecated`` field is neither boolean, string, nor null."""

    def __init__(self, raw: str, *, owner: str | None = None) -> None:
        where = f" on {owner}" if owner else ""
        super().__init__(f"Invalid type for deprecated field{where}: {raw}")
        self.raw = raw
        self.owner = owner


class TagNotFoundError(ManifestError, LookupError):
    """Raised when a tag name is not declared anywhere in the manifest."""

    def __init__(self, tag_name: str) -> None:
        super().__init__(f"Tag not found: {tag_name}")
        self.tag_name = tag_name


class ManifestNotFoundError(ManifestError, FileNotFoundError):
    """Raised when no manifest file can be located on disk."""


__all__ = [
    "InvalidDeprecatedShapeError",
    "ManifestError",
    "ManifestNotFoundError",
    "ManifestSyntaxError",
    "TagNotFoundError",
    "UnknownDeclarationKindError",
    "UnknownDiscriminatorError",
    "UnknownExportKindError",
    "UnknownMemberKindError",
]

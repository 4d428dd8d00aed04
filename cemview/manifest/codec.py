"""Decode and encode whole manifest documents."""

from __future__ import annotations

import json
from typing import Union

from ..logging import get_logger
from .declarations import Package
from .errors import ManifestError, ManifestSyntaxError

_LOGGER = get_logger("manifest.codec")


def decode_package(data: Union[bytes, str]) -> Package:
    """Decode raw manifest bytes into a :class:`Package`.

    Any failure aborts the whole decode; no partially built package escapes.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ManifestSyntaxError(f"manifest is not UTF-8 ({exc.reason})") from exc
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ManifestSyntaxError(exc.msg, line=exc.lineno, column=exc.colno) from exc
    if not isinstance(payload, dict):
        raise ManifestError(f"Expected a JSON object at the manifest root, got {type(payload).__name__}")
    package = Package.from_dict(payload)
    _LOGGER.debug(
        "Decoded manifest schema %s with %d module(s)",
        package.schema_version or "<unset>",
        len(package.modules),
    )
    return package


def encode_package(package: Package, *, indent: int = 2) -> str:
    """Serialise ``package`` back to JSON text with stable indentation."""
    return json.dumps(package.to_dict(), indent=indent, ensure_ascii=False)


__all__ = ["decode_package", "encode_package"]

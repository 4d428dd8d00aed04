"""Module path normalization for cross-entity references."""

from __future__ import annotations

from typing import Tuple

# Manifest module paths name the emitted artifact, never the authoring source.
_SOURCE_EXTENSIONS: Tuple[Tuple[str, str], ...] = (
    (".mts", ".mjs"),
    (".cts", ".cjs"),
    (".tsx", ".js"),
    (".ts", ".js"),
)

_DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")


def normalize_module_path(path: str) -> str:
    """Rewrite a trailing TypeScript extension to its JavaScript counterpart."""
    if not path or path.endswith(_DECLARATION_SUFFIXES):
        return path
    for source, emitted in _SOURCE_EXTENSIONS:
        if path.endswith(source):
            return path[: -len(source)] + emitted
    return path


__all__ = ["normalize_module_path"]

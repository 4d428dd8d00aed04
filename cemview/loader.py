"""Locate and read a custom elements manifest from disk."""

from __future__ import annotations

import json
from pathlib import Path

from .logging import get_logger
from .manifest import Package, decode_package
from .manifest.errors import ManifestError, ManifestNotFoundError

DEFAULT_MANIFEST = "custom-elements.json"
PACKAGE_JSON = "package.json"

_LOGGER = get_logger("loader")


def resolve_manifest_path(path: Path) -> Path:
    """Return the manifest file for ``path``, which may be a file or a package directory.

    Directories are resolved through ``package.json``'s ``customElements``
    field, then ``custom-elements.json``.
    """
    path = path.expanduser()
    if path.is_file():
        return path
    if not path.is_dir():
        raise ManifestNotFoundError(f"No manifest found at {path}")

    package_json = path / PACKAGE_JSON
    if package_json.is_file():
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Invalid {PACKAGE_JSON} at {package_json}: {exc.msg}") from exc
        ref = data.get("customElements") if isinstance(data, dict) else None
        if isinstance(ref, str) and ref:
            candidate = path / ref
            if candidate.is_file():
                _LOGGER.debug("Using manifest %s from %s", ref, PACKAGE_JSON)
                return candidate
            raise ManifestNotFoundError(
                f"{PACKAGE_JSON} points to {ref}, which does not exist under {path}"
            )

    candidate = path / DEFAULT_MANIFEST
    if candidate.is_file():
        return candidate
    raise ManifestNotFoundError(f"No {DEFAULT_MANIFEST} found under {path}")


def load_manifest(path: Path) -> Package:
    """Read the manifest bytes once and decode them."""
    manifest_path = resolve_manifest_path(path)
    _LOGGER.debug("Reading manifest %s", manifest_path)
    return decode_package(manifest_path.read_bytes())


__all__ = ["DEFAULT_MANIFEST", "load_manifest", "resolve_manifest_path"]

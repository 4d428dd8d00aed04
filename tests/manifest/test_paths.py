"""Tests for module path normalization."""

from __future__ import annotations

import pytest

from cemview.manifest.models import Reference
from cemview.manifest.paths import normalize_module_path


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("src/my-el.ts", "src/my-el.js"),
        ("src/my-el.mts", "src/my-el.mjs"),
        ("src/my-el.cts", "src/my-el.cjs"),
        ("src/my-el.tsx", "src/my-el.js"),
        ("src/my-el.js", "src/my-el.js"),
        ("types/my-el.d.ts", "types/my-el.d.ts"),
        ("types/my-el.d.mts", "types/my-el.d.mts"),
        ("styles/theme.css", "styles/theme.css"),
        ("", ""),
    ],
)
def test_normalize_module_path(source: str, expected: str) -> None:
    assert normalize_module_path(source) == expected


def test_normalization_is_idempotent() -> None:
    once = normalize_module_path("a/b.ts")
    assert normalize_module_path(once) == once


def test_reference_module_is_normalized_on_decode() -> None:
    ref = Reference.from_dict({"name": "MyEl", "module": "src/my-el.ts"})

    assert ref.module == "src/my-el.js"
    assert ref.to_dict() == {"name": "MyEl", "module": "src/my-el.js"}

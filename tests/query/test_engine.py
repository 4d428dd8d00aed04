"""Tests for the path query engine and data fetchers."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from cemview.manifest import Package
from cemview.query import (
    DataFetcher,
    PathNotFoundError,
    PathQueryEngine,
    QueryError,
    SourceNotFoundError,
    VariableNotFoundError,
    apply_filter,
)
from cemview.query.engine import rewrite_bracket_keys, split_path


@pytest.fixture
def engine() -> PathQueryEngine:
    return PathQueryEngine()


@pytest.fixture
def sources(package: Package) -> Dict[str, Any]:
    return {
        "manifest": package.to_dict(),
        "registry": {"elements": {"button-element": {"tag": "button-element"}}},
        "args": {"tag": "my-button", "index": 1},
    }


def test_dotted_path_with_index(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    assert engine.resolve_path(sources, "manifest", "modules.1.path") == "lib/utils.js"


def test_bracket_key_equals_dotted_form(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    bracketed = engine.resolve_path(sources, "registry", "elements[button-element]")
    dotted = engine.resolve_path(sources, "registry", "elements.button-element")

    assert bracketed == dotted == {"tag": "button-element"}


def test_length_and_collect(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    assert engine.resolve_path(sources, "manifest", "modules.#") == 3
    assert engine.resolve_path(sources, "manifest", "modules.#.path") == [
        "elements/my-button/my-button.js",
        "lib/utils.js",
        "elements/old-card/old-card.js",
    ]


def test_selector_forms(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    by_query = engine.resolve_path(sources, "manifest", "modules[?path==lib/utils.js].declarations.0.name")
    by_anchor = engine.resolve_path(sources, "manifest", "modules.0.declarations[?@.tagName==my-button].name")
    by_hash = engine.resolve_path(sources, "manifest", "modules.#(path==lib/utils.js).declarations.#")

    assert by_query == "formatLabel"
    assert by_anchor == "MyButton"
    assert by_hash == 4


def test_selector_matches_booleans(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    result = engine.resolve_path(sources, "manifest", "modules.0.declarations.0.members[?static==true].name")

    assert result == "legacyClick"


def test_variable_substitution_from_args(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    tag = engine.resolve_path(sources, "manifest", "modules.0.declarations[?tagName==$.tag].tagName")
    path = engine.resolve_path(sources, "manifest", "modules.$.index.path")

    assert tag == "my-button"
    assert path == "lib/utils.js"


def test_missing_variable(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    with pytest.raises(VariableNotFoundError):
        engine.resolve_path(sources, "manifest", "modules.$.nope")


def test_missing_source(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    with pytest.raises(SourceNotFoundError) as excinfo:
        engine.resolve_path(sources, "nowhere", "a")

    assert excinfo.value.source == "nowhere"
    assert "data source 'nowhere' not found" in str(excinfo.value)


def test_missing_path(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    with pytest.raises(PathNotFoundError) as excinfo:
        engine.resolve_path(sources, "manifest", "modules.9.path")

    assert (excinfo.value.source, excinfo.value.path) == ("manifest", "modules.9.path")
    assert isinstance(excinfo.value, LookupError)


def test_null_value_is_found_not_missing(engine: PathQueryEngine) -> None:
    assert engine.resolve_path({"s": {"a": None}}, "s", "a") is None


@pytest.mark.parametrize(
    ("value", "name", "expected"),
    [
        ([1, 2], "first", 1),
        ([], "first", []),
        ("solo", "first", "solo"),
        ([1, 2, 3], "count", 3),
        ({"a": 1}, "count", 1),
        ([1], "exists", True),
        ([], "exists", True),
        (None, "exists", False),
        (0, "exists", True),
        ([1, 2], "mystery", [1, 2]),
        ([1, 2], None, [1, 2]),
    ],
)
def test_apply_filter(value: object, name: str | None, expected: object) -> None:
    assert apply_filter(value, name) == expected


def test_exists_on_missing_path_is_false(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    assert engine.resolve_path_with_filter(sources, "manifest", "modules.9", "exists") is False


def test_other_filters_propagate_missing_path(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    with pytest.raises(PathNotFoundError):
        engine.resolve_path_with_filter(sources, "manifest", "modules.9", "count")


def test_execute_fetchers_chains_results(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    fetchers = [
        DataFetcher(name="first_module", source="manifest", path="modules", filter="first"),
        DataFetcher(name="path", source="first_module", path="path"),
        DataFetcher(name="optional", source="manifest", path="nothing.here"),
        DataFetcher(name="args_copy", source="args"),
    ]

    results = engine.execute_fetchers(fetchers, sources)

    assert results["path"] == "elements/my-button/my-button.js"
    assert "optional" not in results
    assert results["args_copy"] == {"tag": "my-button", "index": 1}
    assert "first_module" not in sources


def test_required_fetcher_failure_raises(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    fetcher = DataFetcher(name="needed", source="manifest", path="nothing", required=True)

    with pytest.raises(QueryError, match="required fetcher 'needed' failed"):
        engine.execute_fetchers([fetcher], sources)


def test_fetcher_without_source_is_rejected(engine: PathQueryEngine) -> None:
    with pytest.raises(QueryError, match="missing required 'source'"):
        engine.execute_fetcher(DataFetcher(name="x", source=""), {})


def test_rewrite_bracket_keys_keeps_selectors() -> None:
    assert rewrite_bracket_keys("a[b].c[?d==e]") == "a.b.c[?d==e]"


def test_split_path_respects_brackets() -> None:
    assert split_path("a[?p==x.js].b.#(q==y.z)") == ["a[?p==x.js]", "b", "#(q==y.z)"]


def test_resolved_values_are_detached_from_sources(engine: PathQueryEngine, sources: Dict[str, Any]) -> None:
    module = engine.resolve_path(sources, "manifest", "modules.0")
    module["path"] = "changed.js"
    results = engine.execute_fetchers([DataFetcher(name="args", source="args")], sources)
    results["args"]["tag"] = "changed"

    assert sources["manifest"]["modules"][0]["path"] == "elements/my-button/my-button.js"
    assert sources["args"]["tag"] == "my-button"

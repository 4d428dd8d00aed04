"""Tests for the rich-backed tree and table sink."""

from __future__ import annotations

import pytest

from cemview.render import RenderablePackage, TreeNode, everything, is_deprecated
from cemview.render.sink import (
    UnknownColumnError,
    remove_empty_columns,
    render_items,
    render_sections,
    render_table,
    render_tree,
    select_columns,
)


def test_render_tree_draws_nested_labels() -> None:
    node = TreeNode("root", [TreeNode("[blue]child[/blue]", [TreeNode("leaf")])])

    text = render_tree("Title", node)

    lines = [line.rstrip() for line in text.splitlines()]
    assert lines[0] == "Title"
    assert lines[1] == "root"
    assert "child" in lines[2] and "[blue]" not in lines[2]
    assert lines[3].endswith("leaf")


def test_render_tree_of_package(renderable: RenderablePackage) -> None:
    text = render_tree(None, renderable.to_tree_node(everything))

    assert text.splitlines()[0].rstrip() == "<root>"
    assert "<my-button>" in text
    assert "CSS Properties" in text


def test_select_columns_is_case_insensitive_and_ordered() -> None:
    headers, rows = select_columns(["Name", "Type", "Summary"], [["a", "b", "c"]], ["summary", "NAME"])

    assert headers == ["Summary", "Name"]
    assert rows == [["c", "a"]]


def test_unknown_column_suggests_close_matches() -> None:
    with pytest.raises(UnknownColumnError) as excinfo:
        select_columns(["Name", "Summary"], [["a", "b"]], ["sumary"])

    assert excinfo.value.suggestions == ["Summary"]
    assert "did you mean 'Summary'" in str(excinfo.value)


def test_unknown_column_lists_available_when_nothing_is_close() -> None:
    with pytest.raises(UnknownColumnError) as excinfo:
        select_columns(["Name", "Summary"], [], ["zzz"])

    assert excinfo.value.suggestions == []
    assert "available columns: Name, Summary" in str(excinfo.value)


def test_remove_empty_columns() -> None:
    headers, rows = remove_empty_columns(
        ["Name", "Default", "Summary"],
        [["a", "", "x"], ["b", "  ", ""]],
    )

    assert headers == ["Name", "Summary"]
    assert rows == [["a", "x"], ["b", ""]]


def test_render_table_contains_headers_and_cells() -> None:
    text = render_table("Things", ["Name", "Type"], [["alpha", "string"]])

    assert "Things" in text
    assert "Name" in text and "Type" in text
    assert "alpha" in text and "string" in text


def test_render_items_drops_empty_columns(renderable: RenderablePackage) -> None:
    text = render_items("Slots", renderable.tag_slots("my-button"))

    assert "<default>" in text
    assert "Leading icon" in text


def test_render_items_honours_columns(renderable: RenderablePackage) -> None:
    text = render_items("Attributes", renderable.tag_attributes("my-button"), ["name", "dom property"])

    assert "DOM Property" in text
    assert "Visual style" not in text


def test_render_sections_walks_to_custom_elements(renderable: RenderablePackage) -> None:
    text = render_sections(renderable, everything)

    assert "<my-button>" in text
    assert "A clickable button" in text
    for title in ("Attributes", "Slots", "Events", "Methods", "CSS Properties", "Parts", "States"):
        assert title in text
    assert "Registry" in text


def test_render_sections_filters_items(renderable: RenderablePackage) -> None:
    text = render_sections(renderable, is_deprecated)

    assert "disabled" in text
    assert "Visual style" not in text
    assert "Registry" not in text


def test_render_sections_rejects_unknown_columns(renderable: RenderablePackage) -> None:
    with pytest.raises(UnknownColumnError):
        render_sections(renderable, everything, ["nonsense"])


def test_render_sections_shows_only_columns_a_section_has(renderable: RenderablePackage) -> None:
    text = render_sections(renderable, everything, ["name", "type"])

    assert "Leading icon" not in text
    assert "boolean" in text
    assert "Summary" not in text


def test_render_items_can_ignore_missing_columns(renderable: RenderablePackage) -> None:
    text = render_items("Slots", renderable.tag_slots("my-button"), ["type"], strict=False)

    assert "Leading icon" in text

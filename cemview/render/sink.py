"""Write trees and tables built by the projection layer as console text."""

from __future__ import annotations

import difflib
import io
import re
from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .base import Predicate, Renderable, TreeNode, everything, has_matching_descendants

DEFAULT_WIDTH = 120

_CODE_HEADER = re.compile(r"Code|Type|Syntax|Static|Default|DOM Property")


class UnknownColumnError(ValueError):
    """Raised when a requested column is not among a table's headings."""

    def __init__(self, column: str, available: Sequence[str]) -> None:
        lowered = [heading.lower() for heading in available]
        matches = difflib.get_close_matches(column.lower(), lowered, n=3, cutoff=0.5)
        self.column = column
        self.available = list(available)
        self.suggestions = [available[lowered.index(match)] for match in matches]
        message = f"Unknown column '{column}'"
        if self.suggestions:
            message += f"; did you mean {', '.join(repr(s) for s in self.suggestions)}?"
        else:
            message += f"; available columns: {', '.join(available)}"
        super().__init__(message)


def _console(color: bool, width: int) -> Console:
    return Console(
        file=io.StringIO(),
        record=True,
        width=width,
        color_system="standard" if color else None,
        force_terminal=color,
        highlight=False,
    )


def _export(console: Console, color: bool) -> str:
    return console.export_text(styles=color)


def render_tree(
    title: str | None,
    node: TreeNode,
    *,
    color: bool = False,
    width: int = DEFAULT_WIDTH,
) -> str:
    """Render ``node`` with rich's tree guides, optionally under a title line."""
    tree = Tree(Text.from_markup(node.label))
    _attach(tree, node.children)
    console = _console(color, width)
    if title:
        console.print(Text.from_markup(title, style="bold"))
    console.print(tree)
    return _export(console, color)


def _attach(parent: Tree, children: Sequence[TreeNode]) -> None:
    for child in children:
        branch = parent.add(Text.from_markup(child.label))
        _attach(branch, child.children)


def select_columns(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    columns: Sequence[str] | None,
) -> Tuple[List[str], List[List[str]]]:
    """Project ``rows`` onto ``columns``, matched case-insensitively, in the order given."""
    if not columns:
        return list(headers), [list(r) for r in rows]
    index = {heading.lower(): position for position, heading in enumerate(headers)}
    positions: List[int] = []
    for column in columns:
        position = index.get(column.strip().lower())
        if position is None:
            raise UnknownColumnError(column, headers)
        positions.append(position)
    selected_headers = [headers[p] for p in positions]
    selected_rows = [[r[p] if p < len(r) else "" for p in positions] for r in rows]
    return selected_headers, selected_rows


def remove_empty_columns(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
) -> Tuple[List[str], List[List[str]]]:
    """Drop every column whose cells are blank in all rows."""
    keep = [
        position
        for position in range(len(headers))
        if any(position < len(r) and r[position].strip() for r in rows)
    ]
    return [headers[p] for p in keep], [[r[p] for p in keep] for r in rows]


def build_table(
    title: str | None,
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    columns: Sequence[str] | None = None,
) -> Table:
    headers, selected = select_columns(headers, rows, columns)
    table = Table(title=title, title_justify="left", header_style="bold")
    for heading in headers:
        table.add_column(heading, style="cyan" if _CODE_HEADER.search(heading) else None)
    for cells in selected:
        table.add_row(*cells)
    return table


def render_table(
    title: str | None,
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    columns: Sequence[str] | None = None,
    *,
    color: bool = False,
    width: int = DEFAULT_WIDTH,
) -> str:
    """Render ``rows`` as one table. Cells are console markup."""
    table = build_table(title, headers, rows, columns)
    console = _console(color, width)
    console.print(table)
    return _export(console, color)


def present_columns(headers: Sequence[str], columns: Sequence[str]) -> List[str]:
    """The requested ``columns`` that ``headers`` has, matched case-insensitively."""
    available = {heading.lower() for heading in headers}
    return [column for column in columns if column.strip().lower() in available]


def render_items(
    title: str | None,
    items: Sequence[Renderable],
    columns: Sequence[str] | None = None,
    *,
    strict: bool = True,
    color: bool = False,
    width: int = DEFAULT_WIDTH,
) -> str:
    """Tabulate same-kind renderables, dropping empty columns unless ``columns`` is set.

    With ``strict`` off, requested columns the table lacks are ignored instead
    of raising :class:`UnknownColumnError`.
    """
    if not items:
        return ""
    headers = items[0].column_headings()
    rows = [item.to_table_row() for item in items]
    if columns and not strict:
        columns = present_columns(headers, columns)
    if not columns:
        headers, rows = remove_empty_columns(headers, rows)
    return render_table(title, headers, rows, columns, color=color, width=width)


def render_sections(
    renderable: Renderable,
    predicate: Predicate = everything,
    columns: Sequence[str] | None = None,
    *,
    color: bool = False,
    width: int = DEFAULT_WIDTH,
) -> str:
    """Render one titled block of tables per sectioned renderable under ``renderable``.

    Composites without sections are walked, skipping children that neither
    match ``predicate`` nor contain a match. Each section shows the requested
    ``columns`` it has, or all of its non-empty columns when it has none of
    them. A column no rendered section has raises :class:`UnknownColumnError`.
    """
    console = _console(color, width)
    seen: Dict[str, str] = {}
    _emit_sections(console, renderable, predicate, columns, seen)
    for column in columns or []:
        if seen and column.strip().lower() not in seen:
            raise UnknownColumnError(column, list(seen.values()))
    return _export(console, color)


def _emit_sections(
    console: Console,
    renderable: Renderable,
    predicate: Predicate,
    columns: Optional[Sequence[str]],
    seen: Dict[str, str],
) -> None:
    sections = renderable.sections()
    if sections is None:
        for child in renderable.children():
            if predicate(child) or has_matching_descendants(child, predicate):
                _emit_sections(console, child, predicate, columns, seen)
        return

    console.rule(Text.from_markup(renderable.label(), style="bold"), align="left")
    if renderable.summary():
        console.print(Text(renderable.summary()))
    for section in sections:
        items = [item for item in section.items if predicate(item)]
        if not items:
            continue
        headers = items[0].column_headings()
        rows = [item.to_table_row() for item in items]
        for heading in headers:
            seen.setdefault(heading.lower(), heading)
        selected = present_columns(headers, columns or [])
        if not selected:
            headers, rows = remove_empty_columns(headers, rows)
        if not headers:
            continue
        console.print(build_table(section.title, headers, rows, selected))


__all__ = [
    "DEFAULT_WIDTH",
    "UnknownColumnError",
    "build_table",
    "present_columns",
    "remove_empty_columns",
    "render_items",
    "render_sections",
    "render_table",
    "render_tree",
    "select_columns",
]

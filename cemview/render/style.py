"""Console markup used by renderable labels and rows."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from rich.markup import escape
from rich.text import Text

from ..manifest.deprecation import DeprecatedFlag, DeprecatedReason

if TYPE_CHECKING:
    from .base import Renderable


def highlight_if_deprecated(renderable: "Renderable", prefix: str = "", suffix: str = "") -> str:
    """Return the renderable's name as markup, flagged when deprecated.

    ``DeprecatedFlag(True)`` appends ``(DEPRECATED)``; a reason appends
    ``(DEPRECATED: reason)``. Anything else leaves the name unstyled.
    """
    text = escape(f"{prefix}{renderable.name()}{suffix}")
    value = renderable.deprecation()
    if isinstance(value, DeprecatedReason):
        return f"[red]{text} {escape(f'(DEPRECATED: {value.reason})')}[/red]"
    if isinstance(value, DeprecatedFlag) and value.value:
        return f"[red]{text} (DEPRECATED)[/red]"
    return text


def dim(text: str) -> str:
    return f"[grey50]{escape(text)}[/grey50]" if text else ""


def keyword(text: str) -> str:
    return f"[bright_blue]{escape(text)}[/bright_blue]"


def heading(text: str) -> str:
    return f"[blue]{escape(text)}[/blue]"


def join_label(*parts: str) -> str:
    """Join non-empty markup fragments with single spaces."""
    return " ".join(part for part in parts if part)


def row(name_markup: str, *values: str) -> List[str]:
    """A table row: the already-styled name cell followed by escaped values."""
    return [name_markup, *(escape(value) for value in values)]


def plain(markup: str) -> str:
    """Strip console markup, leaving the displayed text."""
    return Text.from_markup(markup).plain


__all__ = ["dim", "heading", "highlight_if_deprecated", "join_label", "keyword", "plain", "row"]

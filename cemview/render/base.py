"""Renderable capability set shared by every projected manifest entity."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..manifest.deprecation import Deprecated
from ..manifest.deprecation import is_deprecated as _deprecation_is_set
from .style import heading

Predicate = Callable[["Renderable"], bool]


@dataclass
class TreeNode:
    """Sink-neutral display tree."""

    label: str
    children: List["TreeNode"] = field(default_factory=list)

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class Section:
    """A titled group of same-kind items, rendered as one table."""

    title: str
    items: List["Renderable"] = field(default_factory=list)


@dataclass(frozen=True)
class MissingCrossReference:
    """A field names an attribute that the declaration never declares."""

    declaration: str
    field_name: str
    attribute: str

    def __str__(self) -> str:
        return (
            f"{self.declaration}: field '{self.field_name}' "
            f"references undeclared attribute '{self.attribute}'"
        )


class Renderable(ABC):
    """Uniform projection of a manifest entity into trees and tables."""

    @abstractmethod
    def name(self) -> str:
        """Identity used for lookups and table rows."""

    @abstractmethod
    def label(self) -> str:
        """Display label as console markup, deprecation highlighted."""

    @abstractmethod
    def deprecation(self) -> Deprecated:
        """The raw deprecation value of the wrapped entity."""

    def is_deprecated(self) -> bool:
        return _deprecation_is_set(self.deprecation())

    def summary(self) -> str:
        return ""

    def children(self) -> List["Renderable"]:
        return []

    def column_headings(self) -> List[str]:
        return []

    def to_table_row(self) -> List[str]:
        return []

    def sections(self) -> Optional[List[Section]]:
        """Per-kind member groups for sectioned table output, if any."""
        return None

    def to_tree_node(self, predicate: Predicate) -> TreeNode:
        """Build this node's tree. The node itself is always included."""
        return TreeNode(self.label(), self.tree_children(predicate))

    def tree_children(self, predicate: Predicate) -> List[TreeNode]:
        return filter_tree_children(self.children(), predicate)


def filter_tree_children(items: Sequence[Renderable], predicate: Predicate) -> List[TreeNode]:
    """Tree nodes for ``items`` the predicate accepts; rejected subtrees are pruned."""
    return [item.to_tree_node(predicate) for item in items if predicate(item)]


def group_node(title: str, items: Sequence[Renderable], predicate: Predicate) -> Optional[TreeNode]:
    """A heading node over the accepted ``items``, or ``None`` when none survive."""
    nodes = filter_tree_children(items, predicate)
    if not nodes:
        return None
    return TreeNode(heading(title), nodes)


# ----------------------------------------------------------------------
# Predicates


def everything(renderable: Renderable) -> bool:
    return True


def is_deprecated(renderable: Renderable) -> bool:
    return renderable.is_deprecated()


def not_deprecated(renderable: Renderable) -> bool:
    return not renderable.is_deprecated()


def has_matching_descendants(renderable: Renderable, predicate: Predicate) -> bool:
    return any(
        predicate(child) or has_matching_descendants(child, predicate)
        for child in renderable.children()
    )


def with_matching_descendants(predicate: Predicate) -> Predicate:
    """Accept a node when it or any of its descendants satisfies ``predicate``."""

    def _accept(renderable: Renderable) -> bool:
        return predicate(renderable) or has_matching_descendants(renderable, predicate)

    return _accept


__all__ = [
    "MissingCrossReference",
    "Predicate",
    "Renderable",
    "Section",
    "TreeNode",
    "everything",
    "filter_tree_children",
    "group_node",
    "has_matching_descendants",
    "is_deprecated",
    "not_deprecated",
    "with_matching_descendants",
]

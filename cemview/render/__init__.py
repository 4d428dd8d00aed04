"""Project a decoded manifest into renderable trees and tables."""

from .base import (
    MissingCrossReference,
    Predicate,
    Renderable,
    Section,
    TreeNode,
    everything,
    is_deprecated,
    not_deprecated,
    with_matching_descendants,
)
from .declarations import RenderableClass, RenderableCustomElement, RenderableFunction, RenderableVariable
from .package import RenderableModule, RenderablePackage
from .style import highlight_if_deprecated, plain

__all__ = [
    "MissingCrossReference",
    "Predicate",
    "Renderable",
    "RenderableClass",
    "RenderableCustomElement",
    "RenderableFunction",
    "RenderableModule",
    "RenderablePackage",
    "RenderableVariable",
    "Section",
    "TreeNode",
    "everything",
    "highlight_if_deprecated",
    "is_deprecated",
    "not_deprecated",
    "plain",
    "with_matching_descendants",
]

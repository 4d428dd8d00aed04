"""Renderable adapters for modules and the package root."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..manifest.declarations import (
    CustomElementDeclaration,
    CustomElementExport,
    Module,
    Package,
)
from ..manifest.deprecation import Deprecated
from ..manifest.errors import TagNotFoundError
from .base import Renderable
from .declarations import RenderableCustomElement, wrap_declaration
from .members import (
    RenderableAttribute,
    RenderableClassMethod,
    RenderableCssCustomProperty,
    RenderableCssCustomState,
    RenderableCssPart,
    RenderableEvent,
    RenderableSlot,
)
from .style import dim, highlight_if_deprecated, join_label, keyword, row

ROOT_NAME = "<root>"


def _export_index(module: Module) -> Dict[str, CustomElementExport]:
    """Custom element exports of ``module`` keyed by the declaration they register."""
    index: Dict[str, CustomElementExport] = {}
    for export in module.custom_element_exports():
        ref = export.declaration
        if ref is not None and ref.module in ("", module.path):
            index.setdefault(ref.name, export)
    return index


class RenderableModule(Renderable):
    def __init__(self, module: Module, package: Optional[Package] = None) -> None:
        self.module = module
        self.package = package
        self.custom_element_exports = module.custom_element_exports()
        exports = _export_index(module)
        self._children = [
            wrap_declaration(
                declaration,
                module=module,
                export=exports.get(getattr(declaration, "name", "")),
            )
            for declaration in module.declarations
        ]

    def name(self) -> str:
        return self.module.path

    def label(self) -> str:
        return join_label(keyword("module"), highlight_if_deprecated(self), dim(self.module.summary))

    def deprecation(self) -> Deprecated:
        return self.module.deprecated

    def children(self) -> List[Renderable]:
        return list(self._children)

    def custom_elements(self) -> List[RenderableCustomElement]:
        return [
            child
            for child in self._children
            if isinstance(child, RenderableCustomElement)
            and isinstance(child.declaration, CustomElementDeclaration)
        ]

    def column_headings(self) -> List[str]:
        return ["Path", "Tag Names"]

    def to_table_row(self) -> List[str]:
        tags = ", ".join(export.name for export in self.custom_element_exports)
        return row(highlight_if_deprecated(self), tags)


class RenderablePackage(Renderable):
    """Root of the projection, with tag-scoped lookups for list views."""

    def __init__(self, package: Package) -> None:
        self.package = package
        self._modules = [RenderableModule(module, package) for module in package.modules]

    def name(self) -> str:
        return ROOT_NAME

    def label(self) -> str:
        return ROOT_NAME

    def deprecation(self) -> Deprecated:
        return self.package.deprecated

    def children(self) -> List[Renderable]:
        return list(self._modules)

    def modules(self) -> List[RenderableModule]:
        return sorted(self._modules, key=lambda module: module.name())

    def custom_elements(self) -> List[RenderableCustomElement]:
        found = [element for module in self._modules for element in module.custom_elements()]
        return sorted(found, key=lambda element: element.declaration.start_byte)  # type: ignore[attr-defined]

    def custom_element(self, tag_name: str) -> RenderableCustomElement:
        for module in self._modules:
            for element in module.custom_elements():
                if element.name() == tag_name:
                    return element
        raise TagNotFoundError(tag_name)

    def tag_attributes(self, tag_name: str) -> List[RenderableAttribute]:
        return list(self.custom_element(tag_name).attributes)

    def tag_slots(self, tag_name: str) -> List[RenderableSlot]:
        return list(self.custom_element(tag_name).slots)

    def tag_events(self, tag_name: str) -> List[RenderableEvent]:
        return list(self.custom_element(tag_name).events)

    def tag_css_properties(self, tag_name: str) -> List[RenderableCssCustomProperty]:
        return list(self.custom_element(tag_name).css_properties)

    def tag_css_parts(self, tag_name: str) -> List[RenderableCssPart]:
        return list(self.custom_element(tag_name).css_parts)

    def tag_css_states(self, tag_name: str) -> List[RenderableCssCustomState]:
        return list(self.custom_element(tag_name).css_states)

    def tag_methods(self, tag_name: str) -> List[RenderableClassMethod]:
        return list(self.custom_element(tag_name).methods)


__all__ = ["ROOT_NAME", "RenderableModule", "RenderablePackage"]

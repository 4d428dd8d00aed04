from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from cemview.manifest import Package, decode_package
from cemview.render import RenderablePackage
from tests._fixtures.manifest_builder import ManifestBuilder
from tests._fixtures.manifests import kitchen_sink


@pytest.fixture
def manifest_dict() -> Dict[str, Any]:
    """Raw JSON-like manifest covering every entity kind."""
    return kitchen_sink()


@pytest.fixture
def package(manifest_dict: Dict[str, Any]) -> Package:
    return decode_package(json.dumps(manifest_dict))


@pytest.fixture
def renderable(package: Package) -> RenderablePackage:
    return RenderablePackage(package)


@pytest.fixture
def manifest_builder(tmp_path: Path) -> ManifestBuilder:
    """Provide a reusable package directory rooted at the pytest tmp_path."""
    return ManifestBuilder(tmp_path)

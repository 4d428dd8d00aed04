"""Tests for cemview.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from cemview.config import CemViewConfig, ConfigError, ListConfig, ServiceConfig, load_config
from tests._fixtures.manifest_builder import ManifestBuilder


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, CemViewConfig)
    assert config.root == tmp_path.resolve()
    assert config.manifest is None
    assert config.list == ListConfig()
    assert config.service == ServiceConfig()


def test_load_config_parses_expected_fields(manifest_builder: ManifestBuilder) -> None:
    config_file = manifest_builder.write_config(
        """
manifest: dist/custom-elements.json
list:
  format: Tree
  columns: name, summary
  deprecated: yes
service:
  host: 0.0.0.0
  port: "9001"
"""
    )

    config = load_config(config_file)

    assert config.root == manifest_builder.root.resolve()
    assert config.manifest == manifest_builder.root.resolve() / "dist/custom-elements.json"
    assert config.list.format == "tree"
    assert config.list.columns == ["name", "summary"]
    assert config.list.deprecated is True
    assert config.service.host == "0.0.0.0"
    assert config.service.port == 9001


def test_load_config_accepts_directory_and_column_lists(manifest_builder: ManifestBuilder) -> None:
    manifest_builder.write_config("list:\n  columns: [Name, Type]\n")

    config = load_config(manifest_builder.root)

    assert config.list.columns == ["Name", "Type"]
    assert config.list.format == "table"


def test_empty_config_file_yields_defaults(manifest_builder: ManifestBuilder) -> None:
    manifest_builder.write_config("   \n")

    assert load_config(manifest_builder.root).list == ListConfig()


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("list:\n  format: grid\n", "list.format must be one of table, tree"),
        ("service:\n  port: 70000\n", "service.port must be between 1 and 65535"),
        ("- just\n- a list\n", "must contain a mapping"),
        ("list: [unclosed\n", "Failed to parse .cemview.yml"),
    ],
)
def test_invalid_config_raises(manifest_builder: ManifestBuilder, text: str, message: str) -> None:
    manifest_builder.write_config(text)

    with pytest.raises(ConfigError, match=message):
        load_config(manifest_builder.root)

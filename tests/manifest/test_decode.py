"""Tests for decoding manifests into the typed model."""

from __future__ import annotations

import json
from typing import Any, Dict

import pytest

from cemview.manifest import (
    ClassDeclaration,
    CustomElementDeclaration,
    CustomElementExport,
    CustomElementMixinDeclaration,
    DeprecatedFlag,
    DeprecatedReason,
    FunctionDeclaration,
    InvalidDeprecatedShapeError,
    JavaScriptExport,
    ManifestError,
    ManifestSyntaxError,
    MixinDeclaration,
    Package,
    UnknownDeclarationKindError,
    UnknownDiscriminatorError,
    UnknownExportKindError,
    UnknownMemberKindError,
    VariableDeclaration,
    decode_package,
)
from cemview.manifest.models import ClassField, ClassMethod, CustomElementField


def _single_module(**module: Any) -> str:
    return json.dumps({"schemaVersion": "1.0.0", "modules": [{"kind": "javascript-module", **module}]})


def test_decodes_every_declaration_kind(package: Package) -> None:
    buttons, utils, old = package.modules

    assert isinstance(buttons.declarations[0], CustomElementDeclaration)
    kinds = [type(decl) for decl in utils.declarations]
    assert kinds == [FunctionDeclaration, VariableDeclaration, ClassDeclaration, MixinDeclaration]
    assert old.deprecated == DeprecatedReason("use my-card")


def test_decodes_exports_by_kind(package: Package) -> None:
    exports = package.modules[0].exports

    assert isinstance(exports[0], JavaScriptExport)
    assert isinstance(exports[1], CustomElementExport)
    assert exports[1].name == "my-button"
    assert exports[1].declaration.module == "elements/my-button/my-button.js"


def test_custom_element_members(package: Package) -> None:
    element = package.modules[0].declarations[0]
    assert isinstance(element, CustomElementDeclaration)

    assert element.tag_name == "my-button"
    assert [a.name for a in element.attributes] == ["variant", "disabled", "size"]
    assert element.attributes[1].deprecated == DeprecatedReason("use inert")
    assert element.attributes[2].deprecated == DeprecatedFlag(False)
    assert [s.name for s in element.slots] == ["", "icon"]
    assert element.css_properties[0].syntax == "<color>"
    assert element.demos[0].url == "demo/index.html"
    assert element.superclass is not None and element.superclass.package == "lit"


def test_field_with_attribute_or_reflects_is_custom_element_field(package: Package) -> None:
    element = package.modules[0].declarations[0]
    members = {member.name: member for member in element.members}

    assert isinstance(members["variant"], CustomElementField)
    assert members["variant"].reflects is True
    assert isinstance(members["disabled"], CustomElementField)
    assert members["disabled"].reflects is False
    assert type(members["internals"]) is ClassField
    assert isinstance(members["legacyClick"], ClassMethod)
    assert members["legacyClick"].return_type() == "boolean"
    assert members["legacyClick"].parameters[0].optional is True


def test_reflects_alone_marks_custom_element_field() -> None:
    data = _single_module(
        path="a.js",
        declarations=[
            {"kind": "class", "name": "A", "members": [{"kind": "field", "name": "x", "reflects": False}]}
        ],
    )
    field = decode_package(data).modules[0].declarations[0].members[0]

    assert isinstance(field, CustomElementField)
    assert field.to_dict()["reflects"] is False


def test_attribute_field_lookup(package: Package) -> None:
    element = package.modules[0].declarations[0]

    assert element.attribute_field("variant").name == "variant"
    assert element.attribute_field("ghost-mode").name == "ghost"
    assert element.attribute_field("size") is None


def test_custom_element_mixin_decodes_to_mixin_flavour() -> None:
    data = _single_module(
        path="mixins.js",
        declarations=[
            {
                "kind": "mixin",
                "customElement": True,
                "name": "FormMixin",
                "tagName": "form-mixin",
                "attributes": [{"name": "name"}],
            }
        ],
    )
    decl = decode_package(data).modules[0].declarations[0]

    assert isinstance(decl, CustomElementMixinDeclaration)
    assert decl.attributes[0].name == "name"
    assert decl.to_dict()["kind"] == "mixin"


def test_kind_may_follow_other_keys() -> None:
    data = '{"modules": [{"path": "a.js", "declarations": [{"name": "f", "kind": "function"}]}]}'
    decl = decode_package(data).modules[0].declarations[0]

    assert isinstance(decl, FunctionDeclaration)


def test_module_path_is_normalized() -> None:
    data = _single_module(path="src/a.ts")

    assert decode_package(data).modules[0].path == "src/a.js"


def test_missing_schema_version_defaults() -> None:
    assert decode_package('{"modules": []}').schema_version == "1.0.0"


@pytest.mark.parametrize(
    ("module", "error"),
    [
        ({"path": "a.js", "exports": [{"kind": "wat", "name": "x"}]}, UnknownExportKindError),
        ({"path": "a.js", "declarations": [{"kind": "enum", "name": "x"}]}, UnknownDeclarationKindError),
        (
            {
                "path": "a.js",
                "declarations": [
                    {"kind": "class", "name": "A", "members": [{"kind": "accessor", "name": "x"}]}
                ],
            },
            UnknownMemberKindError,
        ),
        ({"path": "a.js", "declarations": [{"name": "no-kind"}]}, UnknownDeclarationKindError),
    ],
)
def test_unknown_kinds_fail_the_whole_decode(module: Dict[str, Any], error: type) -> None:
    with pytest.raises(error) as excinfo:
        decode_package(_single_module(**module))

    assert isinstance(excinfo.value, UnknownDiscriminatorError)
    assert isinstance(excinfo.value, ManifestError)


def test_unknown_kind_error_names_the_kind() -> None:
    with pytest.raises(UnknownExportKindError) as excinfo:
        decode_package(_single_module(path="a.js", exports=[{"kind": "wat", "name": "x"}]))

    assert excinfo.value.kind == "wat"
    assert "'wat'" in str(excinfo.value)


def test_invalid_deprecated_shape_fails_decode(manifest_dict: Dict[str, Any]) -> None:
    manifest_dict["modules"][0]["declarations"][0]["events"][0]["deprecated"] = 42

    with pytest.raises(InvalidDeprecatedShapeError) as excinfo:
        decode_package(json.dumps(manifest_dict))

    assert excinfo.value.raw == "42"
    assert "my-click" in str(excinfo.value)


def test_invalid_json_reports_location() -> None:
    with pytest.raises(ManifestSyntaxError) as excinfo:
        decode_package(b'{"modules": [\n  {"path": }\n]}')

    assert excinfo.value.line == 2
    assert excinfo.value.column is not None


def test_wrong_field_type_is_rejected() -> None:
    with pytest.raises(ManifestError):
        decode_package(_single_module(path=42))


def test_non_object_root_is_rejected() -> None:
    with pytest.raises(ManifestError):
        decode_package("[]")


def test_find_custom_element(package: Package) -> None:
    found = package.find_custom_element("my-button")
    assert found is not None
    element, module, export = found

    assert element.name == "MyButton"
    assert module.path == "elements/my-button/my-button.js"
    assert export is not None and export.name == "my-button"
    assert package.find_custom_element("nope") is None


def test_tag_names(package: Package) -> None:
    assert package.tag_names() == ["my-button", "old-card"]


def test_attribute_enum_helpers(package: Package) -> None:
    variant = package.modules[0].declarations[0].attributes[0]

    assert variant.is_enum() is True
    assert variant.enum_values() == ["'primary'", "'secondary'"]
    assert variant.is_valid_value("primary") is True
    assert variant.is_valid_value("'secondary'") is True
    assert variant.is_valid_value("tertiary") is False

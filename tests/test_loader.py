"""Tests for loading schemas and documents from files."""

import tempfile

import pytest
import yaml

from shapecheck.exceptions import SchemaLoadError
from shapecheck.loader import load_document, load_schema
from shapecheck.validator import ViolationKind, validate
from shapecheck.vocabulary import TYPE_NAME_KEY


def _write_yaml(data, suffix: str = ".yaml") -> str:
    """Write data to a temporary YAML file and return the path."""
    f = tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False)
    yaml.dump(data, f)
    f.close()
    return f.name


def test_load_schema_keeps_declared_name():
    path = _write_yaml({TYPE_NAME_KEY: "User", "id": "Number"})
    assert load_schema(path)[TYPE_NAME_KEY] == "User"


def test_load_schema_name_override_and_default():
    path = _write_yaml({"id": "Number"}, suffix=".user.yaml")
    assert load_schema(path, name="Account")[TYPE_NAME_KEY] == "Account"
    assert load_schema(path)[TYPE_NAME_KEY].endswith(".user")


def test_loaded_schema_validates_with_markers():
    path = _write_yaml(
        {
            TYPE_NAME_KEY: "User",
            "id": "Number",
            "role": {"__type/equal": ["admin", "member"]},
            "address": {"city": "Maybe String"},
        }
    )
    report = validate(load_schema(path)).check(
        {"id": 1, "role": "guest", "address": {"city": None}}
    )
    (violation,) = report.violations
    assert violation.kind == ViolationKind.VALUE
    assert violation.key == "role"


def test_load_list_schema():
    path = _write_yaml(["Number", "String"])
    assert load_schema(path) == ["Number", "String"]


def test_load_json_document():
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False)
    f.write('{"id": 1, "tags": ["a"]}')
    f.close()
    assert load_document(f.name) == {"id": 1, "tags": ["a"]}


def test_missing_file():
    with pytest.raises(SchemaLoadError, match="not found"):
        load_document("/nonexistent/path.yaml")


def test_invalid_yaml():
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    f.write("{{invalid yaml::: [")
    f.close()
    with pytest.raises(SchemaLoadError, match="Invalid YAML"):
        load_document(f.name)


def test_scalar_schema_rejected():
    with pytest.raises(SchemaLoadError):
        load_schema(_write_yaml("Number"))

"""Load schemas and elements from YAML or JSON files.

Schema files are plain mappings of descriptor strings. Special markers use
their reserved keys and the schema name goes under ``__typeName``::

    __typeName: User
    id: Number
    name: String
    role:
      __type/equal: [admin, member]
    address:
      city: Maybe String
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from shapecheck.exceptions import SchemaLoadError
from shapecheck.vocabulary import TYPE_NAME_KEY

logger = logging.getLogger(__name__)


def load_document(path: str | Path) -> Any:
    """Parse a YAML (or JSON) file.

    Raises:
        SchemaLoadError: the file does not exist or is not valid YAML.
    """
    path = Path(path)
    if not path.exists():
        raise SchemaLoadError(f"File not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML in {path}: {e}") from e

    logger.debug("Loaded %s (%s)", path, type(data).__name__)
    return data


def load_schema(path: str | Path, name: str | None = None) -> Any:
    """Load a schema file, optionally tagging its root with ``name``.

    A top-level list is a positional schema for ``validate_list``; it is
    returned as is, and ``name`` goes to ``validate_list`` instead.
    """
    schema = load_document(path)
    if isinstance(schema, Mapping):
        schema = dict(schema)
        if name:
            schema[TYPE_NAME_KEY] = name
        elif TYPE_NAME_KEY not in schema:
            schema[TYPE_NAME_KEY] = Path(path).stem
        return schema
    if isinstance(schema, list):
        return schema
    raise SchemaLoadError(
        f"Schema file {path} must contain a mapping or a list, got {type(schema).__name__}"
    )

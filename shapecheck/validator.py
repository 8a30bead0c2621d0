"""Validator engine — recursive structural checks of elements against schemas.

A schema is compiled once into a tree of ``ObjectSchema`` / ``LeafSchema`` /
marker nodes. Each call walks the element in its own key order, alongside
the compiled schema, and records every violation:

- length mismatch (strict mode): key counts differ
- unknown key (strict mode): the element carries a key the schema lacks
- type: a leaf value fails its descriptor
- value: a leaf value fails an ``equal`` / ``promise`` marker

In fatal mode the first violation raises ``SchemaViolationError`` and the
walk stops. Otherwise violations are logged as warnings and the walk runs to
completion. Calling a validator always returns ``True``: use ``check()`` to
get the violations back as a ``ValidationReport``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from shapecheck.descriptors import Descriptor, matches, parse_descriptor
from shapecheck.exceptions import SchemaDefinitionError, SchemaViolationError
from shapecheck.vocabulary import (
    MARKER_TYPES,
    TYPE_NAME_KEY,
    PromiseMarker,
    marker_from_mapping,
)

logger = logging.getLogger(__name__)

UNKNOWN_TYPE_NAME = "Type (unknown or not defined)"


# ── Options ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ValidationOptions:
    """Per-call validation settings, passed unchanged down the recursion."""

    strict: bool = True  # Element keys must match schema keys exactly
    fatal: bool = False  # Raise on the first violation instead of logging


DEFAULT_OPTIONS = ValidationOptions()


def resolve_options(
    options: ValidationOptions | Mapping[str, Any] | None = None, **overrides: Any
) -> ValidationOptions:
    """Merge caller options onto the defaults without mutating either."""
    if options is None:
        resolved = DEFAULT_OPTIONS
    elif isinstance(options, ValidationOptions):
        resolved = options
    else:
        resolved = replace(DEFAULT_OPTIONS, **dict(options))
    if overrides:
        resolved = replace(resolved, **overrides)
    return resolved


# ── Violations ───────────────────────────────────────────────────────


class ViolationKind(Enum):
    LENGTH_MISMATCH = "length_mismatch"
    UNKNOWN_KEY = "unknown_key"
    TYPE = "type"
    VALUE = "value"


@dataclass(frozen=True)
class Violation:
    """A single mismatch between an element and its schema."""

    kind: ViolationKind
    type_name: str  # __typeName of the schema node the violation was found in
    message: str
    key: Any = None
    expected: str | None = None  # Descriptor or marker label
    actual: str | None = None
    path: str = ""  # Dotted location from the root element (e.g., "user.address.city")


@dataclass
class ValidationReport:
    """All violations found by one top-level validation call."""

    type_name: str
    violations: list[Violation] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]

    def of_kind(self, kind: ViolationKind) -> list[Violation]:
        return [v for v in self.violations if v.kind == kind]

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {self.type_name}: {len(self.violations)} violation(s)"

    def emit(self, fatal: bool = False) -> None:
        """Report the violations: raise on the first one, or log them all."""
        for violation in self.violations:
            if fatal:
                raise SchemaViolationError(violation)
            logger.warning("%s", violation.message)


class _Collector:
    def __init__(self, options: ValidationOptions):
        self.options = options
        self.violations: list[Violation] = []

    def add(self, violation: Violation) -> None:
        if self.options.fatal:
            raise SchemaViolationError(violation)
        self.violations.append(violation)


# ── Compiled schema ──────────────────────────────────────────────────


@dataclass(frozen=True)
class LeafSchema:
    source: str
    descriptor: Descriptor


@dataclass(frozen=True)
class ObjectSchema:
    name: str
    children: Mapping[Any, Any]  # key -> ObjectSchema | LeafSchema | marker

    @property
    def keys(self) -> list:
        return list(self.children)


def compile_schema(schema: Any) -> ObjectSchema:
    """Compile a schema mapping into an immutable node tree.

    Descriptor strings are parsed and ``__type/<kind>`` mappings turned into
    markers here, once, instead of on every validation call.

    Raises:
        SchemaDefinitionError: the schema is not a mapping, contains an
            unsupported node, or refers back to itself.
        DescriptorSyntaxError: a descriptor string is malformed.
    """
    if isinstance(schema, ObjectSchema):
        return schema
    return _compile_object(schema, path="", active=set())


def _compile_object(schema: Any, path: str, active: set[int]) -> ObjectSchema:
    if not isinstance(schema, Mapping):
        raise SchemaDefinitionError(
            f"Schema at '{path or '/'}' must be a mapping, got {type(schema).__name__}"
        )
    if id(schema) in active:
        raise SchemaDefinitionError(f"Schema at '{path or '/'}' refers back to itself")

    active = active | {id(schema)}
    children = {}
    for key, node in schema.items():
        if key == TYPE_NAME_KEY:
            continue
        children[key] = _compile_node(node, _join(path, key), active)

    return ObjectSchema(
        name=schema.get(TYPE_NAME_KEY) or UNKNOWN_TYPE_NAME,
        children=MappingProxyType(children),
    )


def _compile_node(node: Any, path: str, active: set[int]):
    if isinstance(node, str):
        return LeafSchema(source=node, descriptor=parse_descriptor(node))
    if isinstance(node, (*MARKER_TYPES, ObjectSchema)):
        return node
    if isinstance(node, Mapping):
        marker = marker_from_mapping(node)
        if marker is not None:
            return marker
        return _compile_object(node, path, active)
    raise SchemaDefinitionError(
        f"Unsupported schema node at '{path}': {node!r} ({type(node).__name__})"
    )


def _join(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


# ── Traversal ────────────────────────────────────────────────────────


def _format_keys(keys: Iterable) -> str:
    return " | ".join(str(k) for k in keys if k != TYPE_NAME_KEY)


def _check_object(
    schema: ObjectSchema,
    element: Any,
    options: ValidationOptions,
    collector: _Collector,
    path: str = "",
) -> None:
    if not isinstance(element, Mapping):
        collector.add(
            Violation(
                kind=ViolationKind.TYPE,
                type_name=schema.name,
                message=f"[{schema.name}] Invalid type '{element}'",
                expected="Object",
                actual=str(element),
                path=path,
            )
        )
        return

    type_keys = schema.keys
    element_keys = list(element.keys())

    if options.strict:
        if len(type_keys) != len(element_keys):
            collector.add(
                Violation(
                    kind=ViolationKind.LENGTH_MISMATCH,
                    type_name=schema.name,
                    message=(
                        f"[{schema.name} - Strict mode] Invalid type length\n"
                        f"  Element has '{_format_keys(element_keys)}' keys "
                        f"but schema has '{_format_keys(type_keys)}' keys."
                    ),
                    expected=_format_keys(type_keys),
                    actual=_format_keys(element_keys),
                    path=path,
                )
            )

        for key in element_keys:
            if key not in schema.children:
                collector.add(
                    Violation(
                        kind=ViolationKind.UNKNOWN_KEY,
                        type_name=schema.name,
                        message=f"[{schema.name} - Strict mode] Unknown type for key {key}",
                        key=key,
                        path=_join(path, key),
                    )
                )

    # Keys only present in the element were handled above; keys only present
    # in the schema are never visited.
    for key in element_keys:
        if key not in schema.children:
            continue
        node = schema.children[key]
        value = element[key]

        if isinstance(node, MARKER_TYPES):
            if not node.accepts(value):
                actual = "" if isinstance(node, PromiseMarker) else str(value)
                collector.add(_invalid_value(schema, key, node.label, actual, ViolationKind.VALUE, path))
        elif isinstance(node, ObjectSchema):
            _check_object(node, value, options, collector, _join(path, key))
        elif not matches(node.descriptor, value):
            collector.add(_invalid_value(schema, key, node.source, str(value), ViolationKind.TYPE, path))


def _invalid_value(
    schema: ObjectSchema, key: Any, expected: str, actual: str, kind: ViolationKind, path: str
) -> Violation:
    return Violation(
        kind=kind,
        type_name=schema.name,
        message=f"[{schema.name}] Invalid value '{actual}' supplied to '{key}' ({expected})",
        key=key,
        expected=expected,
        actual=actual,
        path=_join(path, key),
    )


# ── Entry points ─────────────────────────────────────────────────────


class Validator:
    """Validator bound to one compiled schema.

    Calling the validator reports violations (raise or log, per
    ``options.fatal``) and returns ``True`` whatever it found. ``check()``
    returns the violations instead of logging them.
    """

    def __init__(self, schema: Any):
        self.schema = compile_schema(schema)

    @property
    def name(self) -> str:
        return self.schema.name

    def _prepare(self, element: Any) -> Any:
        return element

    def check(
        self,
        element: Any,
        options: ValidationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> ValidationReport:
        """Collect every violation of ``element``.

        Raises:
            SchemaViolationError: in fatal mode, on the first violation.
        """
        resolved = resolve_options(options, **overrides)
        collector = _Collector(resolved)
        _check_object(self.schema, self._prepare(element), resolved, collector)
        return ValidationReport(type_name=self.name, violations=collector.violations)

    def __call__(
        self,
        element: Any,
        options: ValidationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> bool:
        resolved = resolve_options(options, **overrides)
        self.check(element, resolved).emit(fatal=resolved.fatal)
        return True


class SequenceValidator(Validator):
    """Validates a sequence positionally against a sequence of schema nodes."""

    def __init__(self, schema_sequence: Iterable, name: str | None = None):
        super().__init__(_indexed(schema_sequence, name))

    def _prepare(self, element: Any) -> Any:
        # Anything that is not iterable has no positions
        return _indexed(element if isinstance(element, Iterable) else ())

    def check(self, element: Any = None, options=None, **overrides: Any) -> ValidationReport:
        return super().check(element, options, **overrides)

    def __call__(self, element: Any = None, options=None, **overrides: Any) -> bool:
        return super().__call__(element, options, **overrides)


class ValueValidator(Validator):
    """Validates a single value against a single schema node."""

    def __init__(self, schema_token: Any, name: str | None = None):
        super().__init__(_indexed([schema_token], name))

    def _prepare(self, element: Any) -> Any:
        return {0: element}


def _indexed(items: Iterable, name: str | None = None) -> dict:
    indexed: dict = dict(enumerate(items))
    if name:
        indexed[TYPE_NAME_KEY] = name
    return indexed


def validate(schema: Any) -> Validator:
    """Return a validator for a schema mapping.

    Example:
        >>> validate({"id": "Number"})({"id": 1})
        True
    """
    return Validator(schema)


def validate_list(schema_sequence: Iterable, name: str | None = None) -> SequenceValidator:
    """Return a validator that checks a sequence position by position.

    ``name`` labels the diagnostics, as ``define_type`` does for mappings.
    """
    return SequenceValidator(schema_sequence, name)


def validate_tuple(schema_token: Any, name: str | None = None) -> ValueValidator:
    """Return a validator for a single value."""
    return ValueValidator(schema_token, name)

"""Schema vocabulary — the tokens and combinators schemas are built from.

Schemas are plain nested mappings. Leaves are descriptor strings built from
the tokens below, or special markers built by ``equal`` and ``promise``::

    from shapecheck import define_type, t

    User = define_type("User", {
        "id": t.number,
        "name": t.string,
        "tags": t.array_of(t.string),
        "role": t.equal("admin", "member"),
        "address": t.object_struct({"city": t.maybe(t.string)}),
    })
"""

from __future__ import annotations

import inspect
import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType, SimpleNamespace
from typing import Any

from shapecheck.descriptors import MAYBE_KEYWORD, UNION_SEPARATOR

TYPE_NAME_KEY = "__typeName"
MARKER_PREFIX = "__type/"
DEFAULT_STRUCT_NAME = "Type/objectStruct"

ANY = "*"
NUMBER = "Number"
STRING = "String"
BOOLEAN = "Boolean"
ARRAY = "Array"
FUNCTION = "Function"
OBJECT = "Object"
DATE = "Date"
NULL = "Null"


# ── Special markers ──────────────────────────────────────────────────


def _same_value(allowed: Any, value: Any) -> bool:
    # True == 1 in Python, but a flag never stands in for a number
    if isinstance(allowed, bool) or isinstance(value, bool):
        return allowed is value
    if isinstance(allowed, float) and isinstance(value, float) and math.isnan(allowed):
        return math.isnan(value)
    return allowed == value


@dataclass(frozen=True)
class EqualMarker:
    """Value must be one of ``values``."""

    values: tuple

    kind = "equal"
    label = "Type/Equal"

    def accepts(self, value: Any) -> bool:
        return any(_same_value(allowed, value) for allowed in self.values)


@dataclass(frozen=True)
class PromiseMarker:
    """Value must already be a pending async value (an awaitable)."""

    kind = "promise"
    label = "Type/Promise"

    def accepts(self, value: Any) -> bool:
        return inspect.isawaitable(value)


@dataclass(frozen=True)
class UnknownMarker:
    """Marker of a kind this version does not know; always passes."""

    kind: str
    label = "Type/Unknown"

    def accepts(self, value: Any) -> bool:
        return True


MARKER_TYPES = (EqualMarker, PromiseMarker, UnknownMarker)


def marker_key(kind: str) -> str:
    """Return the reserved mapping key for a marker kind (``__type/equal``)."""
    return f"{MARKER_PREFIX}{kind}"


def marker_from_mapping(node: Mapping) -> EqualMarker | PromiseMarker | UnknownMarker | None:
    """Turn a plain ``{"__type/<kind>": payload}`` mapping into a marker.

    Only the first key is inspected. Returns None when the mapping is an
    ordinary nested schema.
    """
    first_key = next(iter(node), None)
    if not isinstance(first_key, str) or not first_key.startswith(MARKER_PREFIX):
        return None

    kind = first_key[len(MARKER_PREFIX):]
    payload = node[first_key]
    if kind == EqualMarker.kind:
        if isinstance(payload, (str, bytes)) or not hasattr(payload, "__iter__"):
            payload = [payload]
        return EqualMarker(tuple(payload))
    if kind == PromiseMarker.kind:
        return PromiseMarker()
    return UnknownMarker(kind)


# ── Combinators ──────────────────────────────────────────────────────


def one_of(*types: str) -> str:
    """Union descriptor: matches when any of ``types`` matches."""
    return UNION_SEPARATOR.join(types)


def array_of(*types: str) -> str:
    """Array descriptor: every item matches one of ``types``."""
    return f"[{one_of(*types)}]"


def maybe(type_: str) -> str:
    """Nullable descriptor: ``None`` or ``type_``."""
    return f"{MAYBE_KEYWORD} {type_}"


def equal(*values: Any) -> EqualMarker:
    return EqualMarker(tuple(values))


promise = PromiseMarker()


def object_struct(children: Mapping | None = None) -> dict:
    """Nested object schema, named after its own ``__typeName`` if it has one."""
    children = dict(children or {})
    name = children.pop(TYPE_NAME_KEY, None) or DEFAULT_STRUCT_NAME
    return {TYPE_NAME_KEY: name, **children}


def define_type(name: str, schema: Mapping | None = None) -> Mapping:
    """Build a named, read-only root schema.

    The name appears in every diagnostic raised against this schema.
    """
    return MappingProxyType({TYPE_NAME_KEY: name, **dict(schema or {})})


t = SimpleNamespace(
    any=ANY,
    number=NUMBER,
    string=STRING,
    boolean=BOOLEAN,
    bool=BOOLEAN,
    array=ARRAY,
    func=FUNCTION,
    object=OBJECT,
    date=DATE,
    null=NULL,
    promise=promise,
    maybe=maybe,
    equal=equal,
    one_of=one_of,
    array_of=array_of,
    object_struct=object_struct,
)

"""Descriptor grammar and the primitive type matcher.

A descriptor is a short string naming the expected type of a leaf value:

- a primitive name: ``Number``, ``String``, ``Boolean``, ``Array``,
  ``Function``, ``Object``, ``Date``, ``Null`` or ``*`` (anything)
- a union of descriptors joined by ``|``: ``Number | String``
- an array whose items match a union: ``[Number | String]``
- a nullable descriptor: ``Maybe Number``

Strings are parsed once into a small tree (``Primitive``, ``Union``,
``ArrayOf``, ``Maybe``) and the tree is matched against values.
Names outside the built-in set match any value whose class, or one of its
base classes, carries that name (``"Decimal"`` matches a ``Decimal``).
"""

from __future__ import annotations

import datetime
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Union as TypingUnion

from shapecheck.exceptions import DescriptorSyntaxError

MAYBE_KEYWORD = "Maybe"
UNION_SEPARATOR = " | "

_TOKEN_RE = re.compile(r"\s*(\[|\]|\||\*|[A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class Primitive:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Union:
    options: tuple[Descriptor, ...]

    def __str__(self) -> str:
        return UNION_SEPARATOR.join(str(o) for o in self.options)


@dataclass(frozen=True)
class ArrayOf:
    item: Descriptor

    def __str__(self) -> str:
        return f"[{self.item}]"


@dataclass(frozen=True)
class Maybe:
    inner: Descriptor

    def __str__(self) -> str:
        return f"{MAYBE_KEYWORD} {self.inner}"


Descriptor = TypingUnion[Primitive, Union, ArrayOf, Maybe]


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a Number; NaN is not a Number either
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and not _is_nan(value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


BUILTIN_CHECKS = {
    "*": lambda value: True,
    "Number": _is_number,
    "Int": _is_int,
    "Float": _is_number,
    "NaN": _is_nan,
    "String": lambda value: isinstance(value, str),
    "Boolean": lambda value: isinstance(value, bool),
    "Array": _is_array,
    "Function": callable,
    "Object": lambda value: isinstance(value, Mapping),
    "Date": lambda value: isinstance(value, datetime.date),
    "Null": lambda value: value is None,
    "None": lambda value: value is None,
}


# ── Parsing ──────────────────────────────────────────────────────────


def _tokenize(descriptor: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    text = descriptor.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise DescriptorSyntaxError(descriptor, f"unexpected character at position {pos}")
        tokens.append(match.group(1))
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser over the token list of one descriptor."""

    def __init__(self, descriptor: str):
        self.descriptor = descriptor
        self.tokens = _tokenize(descriptor)
        self.pos = 0

    def parse(self) -> Descriptor:
        if not self.tokens:
            raise DescriptorSyntaxError(self.descriptor, "empty descriptor")
        node = self._union()
        if self.pos != len(self.tokens):
            raise DescriptorSyntaxError(
                self.descriptor, f"unexpected token '{self.tokens[self.pos]}'"
            )
        return node

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise DescriptorSyntaxError(self.descriptor, "unexpected end of descriptor")
        self.pos += 1
        return token

    def _union(self) -> Descriptor:
        options = [self._term()]
        while self._peek() == "|":
            self.pos += 1
            options.append(self._term())
        if len(options) == 1:
            return options[0]
        return Union(tuple(options))

    def _term(self) -> Descriptor:
        token = self._next()
        if token == MAYBE_KEYWORD:
            return Maybe(self._term())
        if token == "[":
            item = self._union()
            if self._next() != "]":
                raise DescriptorSyntaxError(self.descriptor, "expected ']'")
            return ArrayOf(item)
        if token in ("]", "|"):
            raise DescriptorSyntaxError(self.descriptor, f"unexpected token '{token}'")
        return Primitive(token)


@lru_cache(maxsize=512)
def parse_descriptor(descriptor: str) -> Descriptor:
    """Parse a descriptor string into its grammar tree.

    Raises:
        DescriptorSyntaxError: the string is not a valid descriptor.
    """
    if not isinstance(descriptor, str):
        raise DescriptorSyntaxError(repr(descriptor), "descriptor must be a string")
    return _Parser(descriptor).parse()


# ── Matching ─────────────────────────────────────────────────────────


def _class_names(value: Any) -> set[str]:
    return {cls.__name__ for cls in type(value).__mro__}


def matches(descriptor: Descriptor, value: Any) -> bool:
    """Check a value against a parsed descriptor."""
    if isinstance(descriptor, Primitive):
        check = BUILTIN_CHECKS.get(descriptor.name)
        if check is not None:
            return bool(check(value))
        return descriptor.name in _class_names(value)

    if isinstance(descriptor, Maybe):
        return value is None or matches(descriptor.inner, value)

    if isinstance(descriptor, Union):
        return any(matches(option, value) for option in descriptor.options)

    if isinstance(descriptor, ArrayOf):
        return _is_array(value) and all(matches(descriptor.item, item) for item in value)

    raise TypeError(f"Not a descriptor: {descriptor!r}")


def type_check(descriptor: str, value: Any) -> bool:
    """Check a value against a descriptor string."""
    return matches(parse_descriptor(descriptor), value)

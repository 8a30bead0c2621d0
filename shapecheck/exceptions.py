"""Exceptions raised by shapecheck."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shapecheck.validator import Violation


class ShapecheckError(Exception):
    """Base exception for shapecheck errors."""


class SchemaViolationError(ShapecheckError, TypeError):
    """Raised in fatal mode on the first violation found."""

    def __init__(self, violation: Violation):
        super().__init__(violation.message)
        self.violation = violation


class SchemaDefinitionError(ShapecheckError):
    """The schema itself is malformed."""


class DescriptorSyntaxError(SchemaDefinitionError, ValueError):
    """A descriptor string does not follow the descriptor grammar."""

    def __init__(self, descriptor: str, reason: str):
        super().__init__(f"Invalid descriptor '{descriptor}': {reason}")
        self.descriptor = descriptor
        self.reason = reason


class SchemaLoadError(ShapecheckError):
    """A schema or data file could not be read."""

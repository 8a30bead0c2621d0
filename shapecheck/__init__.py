"""shapecheck — runtime structural validation of nested data against declarative schemas."""

__version__ = "0.3.0"

from shapecheck.descriptors import type_check
from shapecheck.exceptions import (
    DescriptorSyntaxError,
    SchemaDefinitionError,
    SchemaViolationError,
    ShapecheckError,
)
from shapecheck.validator import (
    ValidationOptions,
    ValidationReport,
    Validator,
    Violation,
    ViolationKind,
    validate,
    validate_list,
    validate_tuple,
)
from shapecheck.vocabulary import TYPE_NAME_KEY, define_type, t

__all__ = [
    "DescriptorSyntaxError",
    "SchemaDefinitionError",
    "SchemaViolationError",
    "ShapecheckError",
    "TYPE_NAME_KEY",
    "ValidationOptions",
    "ValidationReport",
    "Validator",
    "Violation",
    "ViolationKind",
    "__version__",
    "define_type",
    "t",
    "type_check",
    "validate",
    "validate_list",
    "validate_tuple",
]

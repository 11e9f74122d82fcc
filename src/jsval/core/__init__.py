"""Constraint graph and error types."""

from jsval.core.constraints import Constraint, ConstraintKind, ConstraintMap, JSVal
from jsval.core.errors import (
    ConfigError,
    FormatFailure,
    GenerationError,
    InvalidIdentifier,
    StructuredError,
    UnrecognizedVariant,
    UnresolvedReference,
    UnsupportedScalarKind,
    ValidationError,
)

__all__ = [
    "Constraint",
    "ConstraintKind",
    "ConstraintMap",
    "JSVal",
    "ValidationError",
    "GenerationError",
    "UnsupportedScalarKind",
    "UnrecognizedVariant",
    "UnresolvedReference",
    "InvalidIdentifier",
    "FormatFailure",
    "StructuredError",
    "ConfigError",
]

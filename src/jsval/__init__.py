"""jsval - JSON-Schema-style validators and a generator that compiles them to Python."""

__version__ = "0.3.0"

from jsval.core.constraints import (
    CONSTRAINT_CLASSES,
    EMPTY_CONSTRAINT,
    AllConstraint,
    AnyConstraint,
    ArrayConstraint,
    BooleanConstraint,
    Constraint,
    ConstraintKind,
    ConstraintMap,
    EmptyConstraint,
    EnumConstraint,
    IntegerConstraint,
    JSVal,
    NotConstraint,
    NumberConstraint,
    ObjectConstraint,
    OneOfConstraint,
    ReferenceConstraint,
    StringConstraint,
)
from jsval.core.errors import GenerationError, ValidationError
from jsval.generators.program import Generator, GeneratorOptions

__all__ = [
    # Constraint graph
    "Constraint",
    "ConstraintKind",
    "ConstraintMap",
    "CONSTRAINT_CLASSES",
    "EMPTY_CONSTRAINT",
    "EmptyConstraint",
    "JSVal",
    "AnyConstraint",
    "AllConstraint",
    "OneOfConstraint",
    "NotConstraint",
    "ReferenceConstraint",
    "EnumConstraint",
    "StringConstraint",
    "NumberConstraint",
    "IntegerConstraint",
    "BooleanConstraint",
    "ArrayConstraint",
    "ObjectConstraint",
    # Errors
    "ValidationError",
    "GenerationError",
    # Code generation
    "Generator",
    "GeneratorOptions",
]

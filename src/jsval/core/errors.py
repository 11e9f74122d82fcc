"""Error types for jsval validation and code generation."""

from dataclasses import dataclass
from typing import Any


class ValidationError(Exception):
    """Raised by a constraint when a value does not satisfy it"""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path or '/'}: {message}")
        self.path = path
        self.message = message


class GenerationError(Exception):
    """Base class for every failure of the code generator"""


class UnsupportedScalarKind(GenerationError):
    """A literal value has a type the generator cannot render"""

    def __init__(self, value: Any):
        super().__init__(f"failed to stringify value {value!r} of type {type(value).__name__}")
        self.value = value


class UnrecognizedVariant(GenerationError):
    """A node is not one of the known constraint classes"""

    def __init__(self, node: Any):
        super().__init__(f"unrecognized constraint type: {type(node).__module__}.{type(node).__qualname__}")
        self.node = node


class UnresolvedReference(GenerationError):
    """A reference constraint names an entry missing from the reference table"""

    def __init__(self, name: str):
        super().__init__(f"reference {name!r} is not defined by any validator")
        self.name = name


class InvalidIdentifier(GenerationError):
    """A validator name cannot be used as a variable in the generated module"""

    def __init__(self, name: str, reason: str):
        super().__init__(f"invalid validator name {name!r}: {reason}")
        self.name = name
        self.reason = reason


class FormatFailure(GenerationError):
    """The assembled source was rejected by the formatter.

    The unformatted buffer is kept on ``raw_source`` so the caller can show it.
    """

    def __init__(self, raw_source: str, cause: Exception):
        super().__init__(f"failed to format generated source: {cause}")
        self.raw_source = raw_source
        self.cause = cause


@dataclass
class StructuredError:
    """Machine-processable description of a configuration problem"""

    path: str  # JSONPath into the config: "prefix", "formatter"
    code: str = ""  # "CFG-001"
    message: str = ""
    expected: Any = None
    actual: Any = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "path": self.path,
            "code": self.code,
            "message": self.message,
            "expected": self.expected,
            "actual": self.actual,
        }


class ConfigError(Exception):
    """Raised when the project configuration is invalid"""

    def __init__(self, errors: list[StructuredError]):
        details = "; ".join(f"{e.path}: {e.message}" for e in errors)
        super().__init__(f"invalid configuration: {details}")
        self.errors = errors

"""Constraint graph for jsval validators.

Every constraint exposes ``validate(value, path="")`` which returns None when
the value is acceptable and raises ValidationError otherwise. Constraints are
assembled with chained builder calls, each returning the receiver:

    jsval.ObjectConstraint().required("name").add_prop("name", jsval.StringConstraint())

The same calls are what the code generator emits, so a generated module
rebuilds an identical graph without parsing any schema.
"""

import itertools
import json
import re
from enum import Enum
from typing import Any

from jsval.core.errors import ValidationError
from jsval.core.formats import check_format


class ConstraintKind(Enum):
    """Closed set of constraint variants"""
    EMPTY = "empty"
    VALIDATOR = "validator"
    ANY = "any"
    ALL = "all"
    ONE_OF = "oneOf"
    NOT = "not"
    REFERENCE = "reference"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _json_equal(a: Any, b: Any) -> bool:
    # True == 1 in Python, but not in JSON
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    return a == b


# Identity tokens for shared sub-schemas, unique per node
_ref_tokens = itertools.count(1)


class Constraint:
    """Base class of every node in the constraint graph"""

    kind: ConstraintKind
    # Assigned when this node is first registered as a shared reference
    ref_token: int | None = None

    def validate(self, value: Any, path: str = "") -> None:
        raise NotImplementedError


class DefaultValueMixin:
    """Adds an optional default value to a constraint"""

    _default: Any = None
    _has_default: bool = False

    def default(self, value: Any):
        self._default = value
        self._has_default = True
        return self

    def has_default(self) -> bool:
        return self._has_default

    def default_value(self) -> Any:
        return self._default


class EmptyConstraint(Constraint):
    """Always-pass constraint"""

    kind = ConstraintKind.EMPTY

    def validate(self, value: Any, path: str = "") -> None:
        return None

    def __repr__(self) -> str:
        return "EMPTY_CONSTRAINT"


EMPTY_CONSTRAINT = EmptyConstraint()


class ConstraintMap:
    """Named constraints shared by reference constraints"""

    def __init__(self):
        self._refs: dict[str, Constraint] = {}

    def set_reference(self, name: str, constraint: Constraint) -> "ConstraintMap":
        self._refs[name] = constraint
        return self

    def get_reference(self, name: str) -> Constraint:
        return self._refs[name]

    def names(self) -> list[str]:
        return sorted(self._refs)

    def __contains__(self, name: str) -> bool:
        return name in self._refs

    def __len__(self) -> int:
        return len(self._refs)


class JSVal(Constraint):
    """A complete validator: a root constraint plus its named references"""

    kind = ConstraintKind.VALIDATOR

    def __init__(self, name: str = ""):
        self.name = name
        self.root: Constraint = EMPTY_CONSTRAINT
        self.refs: dict[str, Constraint] = {}
        self.cmap: ConstraintMap | None = None

    def set_name(self, name: str) -> "JSVal":
        self.name = name
        return self

    def set_root(self, root: Constraint) -> "JSVal":
        if root is None:
            raise ValueError("root constraint must not be None, use EMPTY_CONSTRAINT")
        self.root = root
        return self

    def set_constraint_map(self, cmap: ConstraintMap) -> "JSVal":
        self.cmap = cmap
        for name, constraint in self.refs.items():
            cmap.set_reference(name, constraint)
        return self

    def set_reference(self, name: str, constraint: Constraint) -> "JSVal":
        """Register a named sub-schema of this validator.

        The first registration stamps the constraint with ``ref_token`` so the
        generator can recognize it later without comparing object identity.
        """
        self.refs[name] = constraint
        if constraint is not EMPTY_CONSTRAINT and constraint.ref_token is None:
            constraint.ref_token = next(_ref_tokens)
        if self.cmap is not None:
            self.cmap.set_reference(name, constraint)
        return self

    def validate(self, value: Any, path: str = "") -> None:
        self.root.validate(value, path)

    def __repr__(self) -> str:
        return f"JSVal(name={self.name!r})"


class _ComboConstraint(Constraint):
    def __init__(self):
        self.constraints: list[Constraint] = []

    def add(self, constraint: Constraint):
        self.constraints.append(constraint)
        return self


class AnyConstraint(_ComboConstraint):
    """Passes when at least one child passes (anyOf)"""

    kind = ConstraintKind.ANY

    def validate(self, value: Any, path: str = "") -> None:
        # No children is the always-pass constraint
        if not self.constraints:
            return None
        for child in self.constraints:
            try:
                child.validate(value, path)
            except ValidationError:
                continue
            return None
        raise ValidationError(path, "value does not match any of the constraints")


class AllConstraint(_ComboConstraint):
    """Passes when every child passes (allOf)"""

    kind = ConstraintKind.ALL

    def validate(self, value: Any, path: str = "") -> None:
        for child in self.constraints:
            child.validate(value, path)


class OneOfConstraint(_ComboConstraint):
    """Passes when exactly one child passes (oneOf)"""

    kind = ConstraintKind.ONE_OF

    def validate(self, value: Any, path: str = "") -> None:
        if not self.constraints:
            return None
        matched = 0
        for child in self.constraints:
            try:
                child.validate(value, path)
            except ValidationError:
                continue
            matched += 1
        if matched != 1:
            raise ValidationError(path, f"value must match exactly one constraint, matched {matched}")


class NotConstraint(Constraint):
    """Passes when the child fails"""

    kind = ConstraintKind.NOT

    def __init__(self, child: Constraint):
        self.child = child

    def validate(self, value: Any, path: str = "") -> None:
        try:
            self.child.validate(value, path)
        except ValidationError:
            return None
        raise ValidationError(path, "value must not match the negated constraint")


class ReferenceConstraint(Constraint):
    """Resolves a named constraint through a ConstraintMap at validate time"""

    kind = ConstraintKind.REFERENCE

    def __init__(self, cmap: ConstraintMap | None = None):
        self.cmap = cmap
        self.reference = ""

    def refers_to(self, name: str) -> "ReferenceConstraint":
        self.reference = name
        return self

    def validate(self, value: Any, path: str = "") -> None:
        if self.cmap is None or self.reference not in self.cmap:
            raise ValidationError(path, f"reference {self.reference!r} could not be resolved")
        self.cmap.get_reference(self.reference).validate(value, path)


class EnumConstraint:
    """Ordered list of allowed scalar values"""

    def __init__(self, values):
        self.enums = list(values)

    def validate(self, value: Any, path: str = "") -> None:
        if not any(_json_equal(value, e) for e in self.enums):
            raise ValidationError(path, f"value {value!r} is not one of {self.enums!r}")


class StringConstraint(Constraint):
    kind = ConstraintKind.STRING

    def __init__(self):
        self.min_len: int | None = None
        self.max_len: int | None = None
        self.format_name = ""
        self.pattern: re.Pattern | None = None
        self.enums: EnumConstraint | None = None

    def min_length(self, n: int) -> "StringConstraint":
        self.min_len = n
        return self

    def max_length(self, n: int) -> "StringConstraint":
        self.max_len = n
        return self

    def format(self, name: str) -> "StringConstraint":
        self.format_name = name
        return self

    def regexp_string(self, pattern: str) -> "StringConstraint":
        self.pattern = re.compile(pattern)
        return self

    def enum(self, *values) -> "StringConstraint":
        self.enums = EnumConstraint(values)
        return self

    def validate(self, value: Any, path: str = "") -> None:
        if not isinstance(value, str):
            raise ValidationError(path, f"expected string, got {_json_type(value)}")
        if self.min_len is not None and len(value) < self.min_len:
            raise ValidationError(path, f"string length {len(value)} is shorter than {self.min_len}")
        if self.max_len is not None and len(value) > self.max_len:
            raise ValidationError(path, f"string length {len(value)} is longer than {self.max_len}")
        if self.format_name and not check_format(self.format_name, value):
            raise ValidationError(path, f"string {value!r} is not a valid {self.format_name}")
        if self.pattern is not None and not self.pattern.search(value):
            raise ValidationError(path, f"string {value!r} does not match {self.pattern.pattern!r}")
        if self.enums is not None:
            self.enums.validate(value, path)


class NumberConstraint(DefaultValueMixin, Constraint):
    kind = ConstraintKind.NUMBER

    def __init__(self):
        self.min_value: float | None = None
        self.max_value: float | None = None
        self.exclusive_min = False
        self.exclusive_max = False

    def minimum(self, n: float):
        self.min_value = n
        return self

    def maximum(self, n: float):
        self.max_value = n
        return self

    def exclusive_minimum(self, flag: bool):
        self.exclusive_min = flag
        return self

    def exclusive_maximum(self, flag: bool):
        self.exclusive_max = flag
        return self

    def _check_type(self, value: Any, path: str) -> None:
        if not _is_number(value):
            raise ValidationError(path, f"expected number, got {_json_type(value)}")

    def validate(self, value: Any, path: str = "") -> None:
        self._check_type(value, path)
        if self.min_value is not None:
            if self.exclusive_min and value <= self.min_value:
                raise ValidationError(path, f"{value} must be greater than {self.min_value}")
            if value < self.min_value:
                raise ValidationError(path, f"{value} is less than minimum {self.min_value}")
        if self.max_value is not None:
            if self.exclusive_max and value >= self.max_value:
                raise ValidationError(path, f"{value} must be less than {self.max_value}")
            if value > self.max_value:
                raise ValidationError(path, f"{value} is greater than maximum {self.max_value}")


class IntegerConstraint(NumberConstraint):
    kind = ConstraintKind.INTEGER

    def _check_type(self, value: Any, path: str) -> None:
        if isinstance(value, float) and value.is_integer():
            return
        if not _is_number(value) or isinstance(value, float):
            raise ValidationError(path, f"expected integer, got {_json_type(value)}")


class BooleanConstraint(DefaultValueMixin, Constraint):
    kind = ConstraintKind.BOOLEAN

    def validate(self, value: Any, path: str = "") -> None:
        if not isinstance(value, bool):
            raise ValidationError(path, f"expected boolean, got {_json_type(value)}")


class ArrayConstraint(Constraint):
    kind = ConstraintKind.ARRAY

    def __init__(self):
        self.items_constraint: Constraint | None = None
        self.additional_items_constraint: Constraint | None = None
        self.positional: list[Constraint] = []
        self.min_count: int | None = None
        self.max_count: int | None = None
        self.unique = False

    def items(self, constraint: Constraint) -> "ArrayConstraint":
        self.items_constraint = constraint
        return self

    def additional_items(self, constraint: Constraint) -> "ArrayConstraint":
        self.additional_items_constraint = constraint
        return self

    def positional_items(self, constraints) -> "ArrayConstraint":
        self.positional = list(constraints)
        return self

    def min_items(self, n: int) -> "ArrayConstraint":
        self.min_count = n
        return self

    def max_items(self, n: int) -> "ArrayConstraint":
        self.max_count = n
        return self

    def unique_items(self, flag: bool) -> "ArrayConstraint":
        self.unique = flag
        return self

    def validate(self, value: Any, path: str = "") -> None:
        if not isinstance(value, list):
            raise ValidationError(path, f"expected array, got {_json_type(value)}")
        n = len(value)
        if self.min_count is not None and n < self.min_count:
            raise ValidationError(path, f"array has {n} items, fewer than {self.min_count}")
        if self.max_count is not None and n > self.max_count:
            raise ValidationError(path, f"array has {n} items, more than {self.max_count}")
        if self.unique:
            seen = set()
            for i, item in enumerate(value):
                key = json.dumps(item, sort_keys=True)
                if key in seen:
                    raise ValidationError(f"{path}/{i}", "duplicate array item")
                seen.add(key)

        for i, item in enumerate(value):
            item_path = f"{path}/{i}"
            if self.items_constraint is not None:
                self.items_constraint.validate(item, item_path)
            elif i < len(self.positional):
                self.positional[i].validate(item, item_path)
            elif self.additional_items_constraint is not None:
                self.additional_items_constraint.validate(item, item_path)


class ObjectConstraint(DefaultValueMixin, Constraint):
    kind = ConstraintKind.OBJECT

    def __init__(self):
        self.properties: dict[str, Constraint] = {}
        self.required_names: set[str] = set()
        self.additional_constraint: Constraint | None = None
        self.propdeps: dict[str, list[str]] = {}

    def required(self, *names: str) -> "ObjectConstraint":
        self.required_names.update(names)
        return self

    def additional_properties(self, constraint: Constraint) -> "ObjectConstraint":
        self.additional_constraint = constraint
        return self

    def add_prop(self, name: str, constraint: Constraint) -> "ObjectConstraint":
        self.properties[name] = constraint
        return self

    def prop_dependency(self, from_name: str, *to_names: str) -> "ObjectConstraint":
        deps = self.propdeps.setdefault(from_name, [])
        deps.extend(to_names)
        return self

    def validate(self, value: Any, path: str = "") -> None:
        if not isinstance(value, dict):
            raise ValidationError(path, f"expected object, got {_json_type(value)}")

        for name in sorted(self.required_names):
            if name not in value:
                raise ValidationError(path, f"required property {name!r} is missing")

        for name, prop_value in value.items():
            prop_path = f"{path}/{name}"
            constraint = self.properties.get(name)
            if constraint is not None:
                constraint.validate(prop_value, prop_path)
            elif self.additional_constraint is not None:
                self.additional_constraint.validate(prop_value, prop_path)

        for from_name, to_names in self.propdeps.items():
            if from_name not in value:
                continue
            for to_name in to_names:
                if to_name not in value:
                    raise ValidationError(
                        path, f"property {from_name!r} requires property {to_name!r}"
                    )


CONSTRAINT_CLASSES: dict[ConstraintKind, type] = {
    cls.kind: cls
    for cls in (
        EmptyConstraint,
        JSVal,
        AnyConstraint,
        AllConstraint,
        OneOfConstraint,
        NotConstraint,
        ReferenceConstraint,
        StringConstraint,
        NumberConstraint,
        IntegerConstraint,
        BooleanConstraint,
        ArrayConstraint,
        ObjectConstraint,
    )
}

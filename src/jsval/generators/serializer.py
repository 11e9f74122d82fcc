"""Constraint to Python expression serializer.

Each constraint becomes a chain of builder calls that rebuilds it, e.g.

    jsval.ObjectConstraint()
        .required('name')
        .add_prop(
            'name',
            jsval.StringConstraint().min_length(1),
        )

Only fields that differ from their unset value produce a call. Anything with
no inherent order (required names, properties, property dependencies) is
emitted sorted so output never depends on dict or set iteration order.
"""

import math
from typing import Any

from jsval.core.constraints import (
    CONSTRAINT_CLASSES,
    EMPTY_CONSTRAINT,
    AllConstraint,
    AnyConstraint,
    ArrayConstraint,
    BooleanConstraint,
    Constraint,
    ConstraintKind,
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
from jsval.core.errors import UnrecognizedVariant, UnresolvedReference, UnsupportedScalarKind
from jsval.generators.context import GenerationContext


def float_literal(value: float) -> str:
    """Exact Python literal for a float, including non-finite values"""
    value = float(value)
    if math.isnan(value):
        return "float('nan')"
    if math.isinf(value):
        return "float('inf')" if value > 0 else "float('-inf')"
    return repr(value)


def scalar_literal(value: Any) -> str:
    """Render an enum scalar: string, integer or float"""
    # bool is an int subclass but not an allowed enum kind
    if isinstance(value, bool):
        raise UnsupportedScalarKind(value)
    if isinstance(value, str):
        return repr(value)
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return float_literal(value)
    raise UnsupportedScalarKind(value)


def pattern_literal(pattern: str) -> str:
    """Render a regular expression, as a raw string when it has backslashes"""
    raw_safe = (
        "\\" in pattern
        and "'" not in pattern
        and not pattern.endswith("\\")
        and pattern.isprintable()
    )
    if raw_safe:
        return f"r'{pattern}'"
    return repr(pattern)


def value_literal(value: Any) -> str:
    """Render a JSON-like default value as a Python literal"""
    if value is None or isinstance(value, bool):
        return repr(value)
    if isinstance(value, (str, int, float)):
        return scalar_literal(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(value_literal(v) for v in value) + "]"
    if isinstance(value, dict):
        parts = []
        for k, v in value.items():
            if not isinstance(k, str):
                raise UnsupportedScalarKind(k)
            parts.append(f"{k!r}: {value_literal(v)}")
        return "{" + ", ".join(parts) + "}"
    raise UnsupportedScalarKind(value)


class NodeSerializer:
    """Serializes one constraint node, recursing into its children"""

    HANDLERS = {
        ConstraintKind.EMPTY: "_serialize_empty",
        ConstraintKind.VALIDATOR: "_serialize_validator",
        ConstraintKind.ANY: "_serialize_any",
        ConstraintKind.ALL: "_serialize_all",
        ConstraintKind.ONE_OF: "_serialize_one_of",
        ConstraintKind.NOT: "_serialize_not",
        ConstraintKind.REFERENCE: "_serialize_reference",
        ConstraintKind.STRING: "_serialize_string",
        ConstraintKind.NUMBER: "_serialize_number",
        ConstraintKind.INTEGER: "_serialize_integer",
        ConstraintKind.BOOLEAN: "_serialize_boolean",
        ConstraintKind.ARRAY: "_serialize_array",
        ConstraintKind.OBJECT: "_serialize_object",
    }

    def serialize(self, node: Constraint, ctx: GenerationContext) -> str:
        """Return an expression for ``node``.

        The first line carries no indentation; continuation lines are
        indented relative to ``ctx``.
        """
        kind = getattr(node, "kind", None)
        cls = CONSTRAINT_CLASSES.get(kind) if isinstance(kind, ConstraintKind) else None
        # Subclasses may override validate(), which no builder chain can express
        if cls is None or type(node) is not cls:
            raise UnrecognizedVariant(node)
        handler = getattr(self, self.HANDLERS[kind])
        return handler(node, ctx)

    # ========== Layout helpers ==========

    def _chain(self, ctx: GenerationContext, base: str, calls: list[str]) -> str:
        step = ctx.indented().pad
        return base + "".join(f"\n{step}.{call}" for call in calls)

    def _inline(self, base: str, calls: list[str]) -> str:
        return base + "".join(f".{call}" for call in calls)

    def _block_call(self, ctx: GenerationContext, method: str, *args: str) -> str:
        """``method(`` with one argument per line, closed at the chain's indentation"""
        inner = ctx.indented(2).pad
        body = "".join(f"{inner}{arg},\n" for arg in args)
        return f"{method}(\n{body}{ctx.indented().pad})"

    def _child_call(self, ctx: GenerationContext, method: str, child: Constraint, *leading: str) -> str:
        expr = self.serialize(child, ctx.indented(2))
        return self._block_call(ctx, method, *leading, expr)

    # ========== Variants ==========

    def _serialize_empty(self, node: EmptyConstraint, ctx: GenerationContext) -> str:
        return ctx.qualify("EMPTY_CONSTRAINT")

    def _serialize_validator(self, node: JSVal, ctx: GenerationContext) -> str:
        calls = []
        if ctx.has_references:
            calls.append(f"set_constraint_map({ctx.table_name})")

        identifier = self._reference_identifier(node.root, ctx)
        if identifier is not None:
            # The root is a named reference: point at it instead of expanding
            # it, otherwise a self-referencing schema would never terminate
            calls.append(f"set_root({identifier})")
        else:
            calls.append(self._child_call(ctx, "set_root", node.root))

        return self._chain(ctx, f"{ctx.qualify('JSVal')}()", calls)

    def _reference_identifier(self, root: Constraint, ctx: GenerationContext) -> str | None:
        token = getattr(root, "ref_token", None)
        if token is None:
            return None
        return ctx.identifier_for_token(token)

    def _serialize_combo(self, ctx: GenerationContext, name: str, children: list[Constraint]) -> str:
        # A combinator without children accepts everything
        if not children:
            return self._serialize_empty(EMPTY_CONSTRAINT, ctx)
        calls = [self._child_call(ctx, "add", child) for child in children]
        return self._chain(ctx, f"{ctx.qualify(name)}()", calls)

    def _serialize_any(self, node: AnyConstraint, ctx: GenerationContext) -> str:
        return self._serialize_combo(ctx, "AnyConstraint", node.constraints)

    def _serialize_all(self, node: AllConstraint, ctx: GenerationContext) -> str:
        return self._serialize_combo(ctx, "AllConstraint", node.constraints)

    def _serialize_one_of(self, node: OneOfConstraint, ctx: GenerationContext) -> str:
        return self._serialize_combo(ctx, "OneOfConstraint", node.constraints)

    def _serialize_not(self, node: NotConstraint, ctx: GenerationContext) -> str:
        inner = ctx.indented()
        expr = self.serialize(node.child, inner)
        return f"{ctx.qualify('NotConstraint')}(\n{inner.pad}{expr},\n{ctx.pad})"

    def _serialize_reference(self, node: ReferenceConstraint, ctx: GenerationContext) -> str:
        if node.reference not in ctx.refs:
            raise UnresolvedReference(node.reference)
        return f"{ctx.qualify('ReferenceConstraint')}({ctx.table_name}).refers_to({node.reference!r})"

    def _serialize_enum(self, enum: EnumConstraint) -> str:
        return ", ".join(scalar_literal(v) for v in enum.enums)

    def _serialize_string(self, node: StringConstraint, ctx: GenerationContext) -> str:
        calls = []
        if node.max_len is not None:
            calls.append(f"max_length({int(node.max_len)})")
        if node.min_len is not None:
            calls.append(f"min_length({int(node.min_len)})")
        if node.format_name:
            calls.append(f"format({node.format_name!r})")
        if node.pattern is not None:
            calls.append(f"regexp_string({pattern_literal(node.pattern.pattern)})")
        if node.enums is not None:
            calls.append(f"enum({self._serialize_enum(node.enums)})")
        return self._inline(f"{ctx.qualify('StringConstraint')}()", calls)

    def _number_calls(self, node: NumberConstraint, render) -> list[str]:
        calls = []
        if node.min_value is not None:
            calls.append(f"minimum({render(node.min_value)})")
        if node.exclusive_min:
            calls.append("exclusive_minimum(True)")
        if node.max_value is not None:
            calls.append(f"maximum({render(node.max_value)})")
        if node.exclusive_max:
            calls.append("exclusive_maximum(True)")
        if node.has_default():
            default = node.default_value()
            if isinstance(default, bool) or not isinstance(default, (int, float)):
                raise UnsupportedScalarKind(default)
            calls.append(f"default({render(default)})")
        return calls

    def _serialize_number(self, node: NumberConstraint, ctx: GenerationContext) -> str:
        calls = self._number_calls(node, float_literal)
        return self._inline(f"{ctx.qualify('NumberConstraint')}()", calls)

    def _serialize_integer(self, node: IntegerConstraint, ctx: GenerationContext) -> str:
        calls = self._number_calls(node, lambda v: str(int(v)))
        return self._inline(f"{ctx.qualify('IntegerConstraint')}()", calls)

    def _serialize_boolean(self, node: BooleanConstraint, ctx: GenerationContext) -> str:
        calls = []
        if node.has_default():
            default = node.default_value()
            if not isinstance(default, bool):
                raise UnsupportedScalarKind(default)
            calls.append(f"default({default!r})")
        return self._inline(f"{ctx.qualify('BooleanConstraint')}()", calls)

    def _serialize_array(self, node: ArrayConstraint, ctx: GenerationContext) -> str:
        calls = []
        if node.items_constraint is not None:
            calls.append(self._child_call(ctx, "items", node.items_constraint))
        if node.additional_items_constraint is not None:
            calls.append(self._child_call(ctx, "additional_items", node.additional_items_constraint))
        if node.positional:
            # Positions are significant: keep list order
            inner = ctx.indented(2)
            body = "".join(f"{inner.pad}{self.serialize(c, inner)},\n" for c in node.positional)
            calls.append(f"positional_items([\n{body}{ctx.indented().pad}])")
        if node.min_count is not None:
            calls.append(f"min_items({int(node.min_count)})")
        if node.max_count is not None:
            calls.append(f"max_items({int(node.max_count)})")
        if node.unique:
            calls.append("unique_items(True)")
        return self._chain(ctx, f"{ctx.qualify('ArrayConstraint')}()", calls)

    def _serialize_object(self, node: ObjectConstraint, ctx: GenerationContext) -> str:
        calls = []
        if node.has_default():
            calls.append(f"default({value_literal(node.default_value())})")

        if node.required_names:
            names = ", ".join(repr(name) for name in sorted(node.required_names))
            calls.append(f"required({names})")

        if node.additional_constraint is not None:
            calls.append(self._child_call(ctx, "additional_properties", node.additional_constraint))

        for name in sorted(node.properties):
            calls.append(self._child_call(ctx, "add_prop", node.properties[name], repr(name)))

        pairs = sorted(
            (from_name, to_name)
            for from_name, to_names in node.propdeps.items()
            for to_name in to_names
        )
        for from_name, to_name in pairs:
            calls.append(f"prop_dependency({from_name!r}, {to_name!r})")

        return self._chain(ctx, f"{ctx.qualify('ObjectConstraint')}()", calls)


_missing = set(ConstraintKind) - set(NodeSerializer.HANDLERS)
if _missing:
    raise RuntimeError(f"NodeSerializer has no handler for {sorted(k.value for k in _missing)}")

"""Validator to Python module generator

Produces a module that rebuilds a set of validators at import time:

    import jsval
    Person: jsval.JSVal
    M: jsval.ConstraintMap
    R0: jsval.Constraint

    def _init():
        global Person, M, R0
        M = jsval.ConstraintMap()
        R0 = (...)
        M.set_reference('#/definitions/Address', R0)
        Person = (...)
    _init()

The order inside the init function is fixed: reference table, reference
definitions, registrations, then validators in the order they were given.
"""

import keyword
import logging
from dataclasses import dataclass
from typing import Iterable, TextIO

from jsval.core.constraints import Constraint, JSVal
from jsval.core.errors import FormatFailure, InvalidIdentifier
from jsval.generators.context import INDENT, GenerationContext
from jsval.generators.formatter import SourceFormatter, get_formatter
from jsval.generators.references import ReferenceTable, collect_references
from jsval.generators.serializer import NodeSerializer

logger = logging.getLogger(__name__)

HEADER = '"""Code generated by jsval-gen. DO NOT EDIT."""'


@dataclass(frozen=True)
class GeneratorOptions:
    """Names used in the generated module"""
    prefix: str = "jsval"
    table_name: str = "M"
    reference_prefix: str = "R"
    validator_prefix: str = "V"
    init_function: str = "_init"
    formatter: str = "ast"


class Generator:
    """Generates Python source that sets up validators"""

    def __init__(self, options: GeneratorOptions | None = None, formatter: SourceFormatter | None = None):
        self.options = options or GeneratorOptions()
        self.formatter = formatter or get_formatter(self.options.formatter)
        self.serializer = NodeSerializer()

    def process(self, out: TextIO, *validators: JSVal) -> None:
        """Generate code for ``validators`` and write it to ``out``.

        Nothing is written unless the whole module was generated and formatted.
        """
        out.write(self.generate(validators))

    def generate(self, validators: Iterable[JSVal]) -> str:
        """Generate the formatted module source.

        Every nested constraint opens one more bracket in its builder chain and
        CPython refuses to parse roughly 200 nested brackets, so a graph nested
        that deeply fails with FormatFailure. Register deep subtrees as named
        references to keep them flat.
        """
        source = self.render(list(validators))
        try:
            return self.formatter.format(source)
        except (SyntaxError, ValueError, RecursionError) as e:
            logger.debug("unformatted source:\n%s", source)
            raise FormatFailure(source, e) from e

    def render(self, validators: list[JSVal]) -> str:
        """Assemble the unformatted module source"""
        opts = self.options
        table = collect_references(validators, opts.reference_prefix)
        ctx = GenerationContext(
            prefix=opts.prefix,
            table_name=opts.table_name,
            refs=table.constraints,
            identifiers=table.identifiers,
            tokens=table.tokens,
        )
        names = self.validator_names(validators, table)

        lines = [HEADER, "", f"import {opts.prefix}", ""]

        declared = sorted(names)
        for name in declared:
            lines.append(f"{name}: {ctx.qualify('JSVal')}")
        if table:
            lines.append(f"{opts.table_name}: {ctx.qualify('ConstraintMap')}")
            declared.append(opts.table_name)
            for _, identifier, _ in table.items():
                lines.append(f"{identifier}: {ctx.qualify('Constraint')}")
                declared.append(identifier)

        body = []
        if declared:
            body.append(f"global {', '.join(declared)}")

        if table:
            body.append(f"{opts.table_name} = {ctx.qualify('ConstraintMap')}()")
            for _, identifier, constraint in table.items():
                body.append(self._assignment(identifier, constraint, ctx))
            for name, identifier, _ in table.items():
                body.append(f"{opts.table_name}.set_reference({name!r}, {identifier})")

        for name, v in zip(names, validators):
            logger.debug("generating validator %s", name)
            body.append(self._assignment(name, v, ctx))

        if not body:
            body.append("pass")

        lines.extend(["", "", f"def {opts.init_function}():"])
        lines.extend(f"{INDENT}{stmt}" for stmt in body)
        lines.extend(["", "", f"{opts.init_function}()", ""])
        return "\n".join(lines)

    def validator_names(self, validators: list[JSVal], table: ReferenceTable) -> list[str]:
        """Variable names for ``validators``, synthesizing ``V<index>`` for unnamed ones"""
        opts = self.options
        # float is called for non-finite literals inside the init function
        reserved = {opts.table_name, opts.init_function, opts.prefix.split(".")[0], "float"}
        reserved.update(table.identifiers.values())

        names = []
        seen = set()
        for i, v in enumerate(validators):
            name = v.name or f"{opts.validator_prefix}{i}"
            if not name.isidentifier() or keyword.iskeyword(name):
                raise InvalidIdentifier(name, "not a valid Python identifier")
            if name in reserved:
                raise InvalidIdentifier(name, "collides with a generated name")
            if name in seen:
                raise InvalidIdentifier(name, "used by more than one validator")
            seen.add(name)
            names.append(name)
        return names

    def _assignment(self, target: str, node: Constraint, ctx: GenerationContext) -> str:
        # Parentheses let the builder chain span lines
        inner = ctx.indented(2)
        expr = self.serializer.serialize(node, inner)
        return f"{target} = (\n{inner.pad}{expr}\n{ctx.indented().pad})"

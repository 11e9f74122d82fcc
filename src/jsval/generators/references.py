"""Reference collection for the code generator.

All named sub-schemas of every validator in a generation run are gathered
into one table. Identifiers are assigned in lexicographic order of the
reference names, never in discovery order, so the same graph always yields
the same ``R0``, ``R1``, ... assignment.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from jsval.core.constraints import Constraint, JSVal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceTable:
    """Immutable result of reference collection"""

    names: tuple[str, ...]
    constraints: Mapping[str, Constraint]
    identifiers: Mapping[str, str]
    # ref_token of each collected constraint -> its identifier
    tokens: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return len(self.names)

    def __bool__(self) -> bool:
        return bool(self.names)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def items(self) -> Iterator[tuple[str, str, Constraint]]:
        """Yield (name, identifier, constraint) in identifier order"""
        for name in self.names:
            yield name, self.identifiers[name], self.constraints[name]


def collect_references(validators: Iterable[JSVal], identifier_prefix: str = "R") -> ReferenceTable:
    """Gather every named reference across ``validators``.

    When two validators declare the same name, the first definition seen wins
    and later ones are ignored.
    """
    refs: dict[str, Constraint] = {}
    for v in validators:
        for name, constraint in v.refs.items():
            if name in refs:
                continue
            refs[name] = constraint

    names = tuple(sorted(refs))
    identifiers = {name: f"{identifier_prefix}{i}" for i, name in enumerate(names)}
    tokens: dict[int, str] = {}
    for name in names:
        token = refs[name].ref_token
        # One node registered under several names takes the first identifier
        if token is not None and token not in tokens:
            tokens[token] = identifiers[name]

    logger.debug("collected %d references", len(names))
    for name in names:
        logger.debug("reference %s -> %s", name, identifiers[name])

    return ReferenceTable(
        names=names,
        constraints=MappingProxyType(refs),
        identifiers=MappingProxyType(identifiers),
        tokens=MappingProxyType(tokens),
    )

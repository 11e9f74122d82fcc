"""Generation context threaded through the constraint serializer."""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from jsval.core.constraints import Constraint


INDENT = "    "


@dataclass(frozen=True)
class GenerationContext:
    """Read-only state for one generation run.

    Nested expressions get their own copy via ``indented()``; nothing is
    pushed or popped, so an exception can never leave indentation behind.
    """

    prefix: str = "jsval"
    table_name: str = "M"
    refs: Mapping[str, Constraint] = field(default_factory=lambda: MappingProxyType({}))
    identifiers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    tokens: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))
    indent: int = 0

    @property
    def has_references(self) -> bool:
        return len(self.refs) > 0

    @property
    def pad(self) -> str:
        return INDENT * self.indent

    def indented(self, levels: int = 1) -> "GenerationContext":
        return replace(self, indent=self.indent + levels)

    def qualify(self, name: str) -> str:
        """Prefix a runtime name with the output namespace"""
        return f"{self.prefix}.{name}"

    def identifier_for_token(self, token: int) -> str | None:
        """Identifier of the collected reference whose node carries ``token``"""
        return self.tokens.get(token)

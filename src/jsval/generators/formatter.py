"""Source formatters applied to generated code.

A formatter takes the assembled module text and returns the text to write,
or raises SyntaxError when the text is not valid Python.
"""

import ast
import io
import tokenize
from typing import Protocol


class SourceFormatter(Protocol):
    def format(self, source: str) -> str: ...


def _string_tokens(source: str):
    for tok in tokenize.generate_tokens(io.StringIO(source).readline):
        if tok.type == tokenize.STRING:
            yield tok


def restore_raw_strings(original: str, formatted: str) -> str:
    """Put back raw string literals that ``ast.unparse`` rewrote with ``repr``"""
    raw = {}
    for tok in _string_tokens(original):
        if tok.string[:1] in "rR":
            raw[ast.literal_eval(tok.string)] = tok.string
    if not raw:
        return formatted

    lines = formatted.splitlines(keepends=True)
    replacements = []
    for tok in _string_tokens(formatted):
        # unparse never splits a plain string literal across lines
        if tok.start[0] != tok.end[0] or tok.string[:1] in "rR":
            continue
        value = ast.literal_eval(tok.string)
        if isinstance(value, str) and value in raw:
            replacements.append((tok.start, tok.end[1], raw[value]))
    # Right to left, so earlier columns on the same line stay valid
    for (row, start), end, text in reversed(replacements):
        line = lines[row - 1]
        lines[row - 1] = line[:start] + text + line[end:]
    return "".join(lines)


class AstFormatter:
    """Canonical formatting: parse, then unparse the syntax tree"""

    name = "ast"

    def format(self, source: str) -> str:
        tree = ast.parse(source)
        return restore_raw_strings(source, ast.unparse(tree) + "\n")


class CheckedFormatter:
    """Syntax check only; the indented source is returned unchanged"""

    name = "none"

    def format(self, source: str) -> str:
        ast.parse(source)
        return source if source.endswith("\n") else source + "\n"


FORMATTERS = {
    AstFormatter.name: AstFormatter,
    CheckedFormatter.name: CheckedFormatter,
}


def get_formatter(name: str) -> SourceFormatter:
    """Look up a formatter by name"""
    try:
        return FORMATTERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown formatter '{name}'. Available: {', '.join(sorted(FORMATTERS))}"
        ) from None

"""Logic for reading the kind and name out of a declaration header."""

import re
from dataclasses import dataclass

from sdl_transpiler.declaration_kinds import KEYWORD_KINDS, SCHEMA
from sdl_transpiler.errors import SchemaSyntaxError
from sdl_transpiler.lexing import find_matching, split_top_level
from sdl_transpiler.type_expressions import NAME_RE

HEADER_RE = re.compile(
    r"^\s*(extend\s+)?(" + "|".join(KEYWORD_KINDS) + r")\b(.*)$",
    re.DOTALL,
)


@dataclass
class HeaderName:
    """Kind and name of a declaration plus the unparsed rest of its header."""

    kind: str
    is_extend: bool
    name: str
    generic_parameters: list[str] | None
    rest: str


def read_name(text: str) -> tuple[str, list[str] | None, str] | None:
    """Read `Name` or `Name<T, U>` from the start of text.

    Returns (name, generic parameters, remaining text) or None when no name
    is present.
    """
    stripped = text.lstrip()
    m = NAME_RE.match(stripped)
    if not m:
        return None
    base = m.group(0)
    rest = stripped[m.end() :]
    after = rest.lstrip()
    if not after.startswith("<"):
        return base, None, rest
    close = find_matching(after, 0, "<", ">")
    if close == -1:
        msg = f"Unbalanced generic parameters in '{stripped.strip()}'"
        raise SchemaSyntaxError(msg, name=base)
    params = [p for p in split_top_level(after[1:close]) if p]
    return f"{base}<{', '.join(params)}>", params or None, after[close + 1 :]


def read_header(line: str) -> HeaderName | None:
    """Parse the keyword and name of a header line, or None if it is not one."""
    m = HEADER_RE.match(line)
    if not m:
        return None
    kind = KEYWORD_KINDS[m.group(2)]
    if kind == SCHEMA:
        return HeaderName(SCHEMA, bool(m.group(1)), "schema", None, m.group(3))
    parsed = read_name(m.group(3))
    if parsed is None:
        return None
    name, params, rest = parsed
    return HeaderName(kind, bool(m.group(1)), name, params, rest)

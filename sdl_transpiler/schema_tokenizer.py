"""Logic for splitting schema text into raw declaration fragments."""

import logging
import re

from sdl_transpiler.declaration_kinds import (
    BLOCK_KINDS,
    ENUM,
    KEYWORD_KINDS,
    SCALAR,
    UNION,
)
from sdl_transpiler.errors import SchemaSyntaxError
from sdl_transpiler.lexing import (
    CLOSERS,
    OPENERS,
    collapse_whitespace,
    find_top_level,
    skip_comment,
    skip_string,
)
from sdl_transpiler.raw_bit import RawBit
from sdl_transpiler.type_expressions import NAME_RE

logger = logging.getLogger(__name__)

STATEMENT_WORDS = frozenset(KEYWORD_KINDS) | {"extend", "directive"}

# A body line starting with one of these continues the previous item.
CONTINUATION_CHARS = "@(:="

FIELD_START_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\s*[:(]")


def strip_comments(text: str) -> str:
    """Remove `#` comments that are not inside string literals."""
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = skip_string(text, i)
            out.append(text[i:end])
            i = end
        elif ch == "#":
            i = skip_comment(text, i)
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def line_states(text: str) -> list[tuple[int, bool]]:
    """Return (brace depth, inside a string) at the start of every line."""
    states = [(0, False)]
    depth = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = skip_string(text, i)
            states.extend((depth, True) for _ in range(text.count("\n", i, end)))
            i = end
            continue
        if ch == "#":
            i = skip_comment(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(depth - 1, 0)
        elif ch == "\n":
            states.append((depth, False))
        i += 1
    return states


def _line_end(text: str, i: int) -> int:
    end = text.find("\n", i)
    return len(text) if end == -1 else end


def _next_non_space(text: str, i: int) -> int:
    n = len(text)
    while i < n and text[i].isspace():
        i += 1
    return i


def _ends_field(body: str, i: int, item: str) -> bool:
    """Check if `item` is a complete field and another one starts after position i.

    `a: A b: B` holds two fields on one line.
    """
    item = item.strip()
    colon = find_top_level(item, ":")
    if colon == -1 or not item[colon + 1 :].strip() or item.endswith((":", "=", "|")):
        return False
    return FIELD_START_RE.match(body, _next_non_space(body, i)) is not None


class SchemaTokenizer:
    """Scans schema text once, tracking braces, comments and strings.

    Produces one RawBit per declaration: block kinds (type, input, enum,
    interface, abstract, schema) with their body split into logical lines,
    plus single statement kinds (scalar, union).
    """

    def tokenize(self, text: str) -> list[RawBit]:
        """Split a full schema into raw declaration fragments."""
        bits: list[RawBit] = []
        description: str | None = None
        i = 0
        n = len(text)
        while i < n:
            ch = text[i]
            if ch.isspace() or ch == ",":
                i += 1
                continue
            if ch == "#":
                i = skip_comment(text, i)
                continue
            if ch == '"':
                end = skip_string(text, i)
                description = text[i:end]
                i = end
                continue
            bit, i = self._read_statement(text, i)
            if bit is not None:
                bit.description = description
                bits.append(bit)
            description = None
        logger.debug("Extracted %s declaration fragments", len(bits))
        return bits

    def _read_statement(self, text: str, start: int) -> tuple[RawBit | None, int]:
        """Read the declaration starting at `start`."""
        m = NAME_RE.match(text, start)
        if not m:
            msg = f"Unexpected text near {text[start:start + 30]!r}"
            raise SchemaSyntaxError(msg)
        word, pos = m.group(0), m.end()
        is_extend = False
        if word == "extend":
            is_extend = True
            m = NAME_RE.match(text, _next_non_space(text, pos))
            if not m:
                msg = f"Dangling 'extend' near {text[start:start + 30]!r}"
                raise SchemaSyntaxError(msg)
            word, pos = m.group(0), m.end()

        kind = KEYWORD_KINDS.get(word)
        if kind is None:
            end = _line_end(text, start)
            logger.warning(
                "Skipping unrecognized statement: %s", text[start:end].strip()
            )
            return None, end
        if kind in BLOCK_KINDS:
            return self._read_block(text, start, pos, kind, is_extend=is_extend)
        if kind == UNION:
            return self._read_union(text, start, is_extend=is_extend)
        return self._read_scalar(text, start, pos, is_extend=is_extend)

    def _starts_statement(self, text: str, i: int) -> bool:
        """Check if the next word after position i opens a new declaration."""
        m = NAME_RE.match(text, _next_non_space(text, i))
        return bool(m) and m.group(0) in STATEMENT_WORDS

    def _starts_loose_text(self, text: str, i: int, *, is_extend: bool) -> bool:
        """Check if the next line opens a description, or a comment after an extend."""
        nxt = _next_non_space(text, i)
        if nxt >= len(text):
            return False
        return text[nxt] == '"' or (is_extend and text[nxt] == "#")

    def _read_block(
        self, text: str, start: int, pos: int, kind: str, *, is_extend: bool
    ) -> tuple[RawBit, int]:
        """Read a `kind Name ... { body }` declaration."""
        n = len(text)
        i = pos
        depth = 0
        brace = -1
        while i < n:
            ch = text[i]
            if ch == '"':
                i = skip_string(text, i)
                continue
            if ch == "#":
                i = skip_comment(text, i)
                continue
            if ch in "([":
                depth += 1
            elif ch in ")]":
                depth = max(depth - 1, 0)
            elif ch == "{" and depth == 0:
                brace = i
                break
            elif ch == "\n" and depth == 0 and (
                self._starts_statement(text, i + 1)
                or self._starts_loose_text(text, i + 1, is_extend=is_extend)
            ):
                break
            i += 1

        header = collapse_whitespace(strip_comments(text[start:i]))
        if brace == -1:
            if is_extend:
                # Directive-only extension, e.g. `extend type Foo @key(fields: "id")`
                return RawBit(kind, _drop_extend(header), [], is_extend=True), i
            msg = f"Missing block in '{header}'"
            raise SchemaSyntaxError(msg, kind=kind, reference=header)

        close = self._find_block_end(text, brace)
        if close == -1:
            msg = f"Missing closing brace for '{header}'"
            raise SchemaSyntaxError(msg, kind=kind, reference=header)

        body_lines = self._split_body(text[brace + 1 : close], kind)
        bit = RawBit(kind, _drop_extend(header), body_lines, is_extend=is_extend)
        return bit, close + 1

    def _find_block_end(self, text: str, brace: int) -> int:
        """Return the index of the brace closing the block opened at `brace`."""
        depth = 0
        i = brace
        n = len(text)
        while i < n:
            ch = text[i]
            if ch == '"':
                i = skip_string(text, i)
                continue
            if ch == "#":
                i = skip_comment(text, i)
                continue
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return i
            i += 1
        return -1

    def _split_body(self, body: str, kind: str) -> list[str]:
        """Split a block body into comment, description and property lines."""
        items: list[str] = []
        buf: list[str] = []
        depth = 0
        split_on_space = kind == ENUM
        line_start = 0
        i = 0
        n = len(body)

        def flush() -> None:
            item = collapse_whitespace("".join(buf)).strip().rstrip(",").strip()
            if item:
                items.append(item)
            buf.clear()

        while i < n:
            ch = body[i]
            if ch == '"':
                end = skip_string(body, i)
                if depth == 0 and not "".join(buf).strip():
                    items.append(body[i:end])
                else:
                    buf.append(body[i:end])
                i = end
                continue
            if ch == "#":
                end = skip_comment(body, i)
                if depth == 0:
                    flush()
                    comment = body[i:end].strip()
                    if len(items) > line_start and not items[-1].startswith(('"', "#")):
                        # Inline comment stays on the item it trails.
                        items[-1] = f"{items[-1]} {comment}"
                    else:
                        items.append(comment)
                i = end
                continue
            if ch in OPENERS:
                depth += 1
            elif ch in CLOSERS:
                depth = max(depth - 1, 0)

            at_break = depth == 0 and (
                ch in "\n,"
                or (
                    ch.isspace()
                    and "".join(buf).strip()
                    and (split_on_space or _ends_field(body, i, "".join(buf)))
                )
            )
            if at_break:
                nxt = _next_non_space(body, i)
                if nxt < n and body[nxt] in CONTINUATION_CHARS and ch != ",":
                    buf.append(" ")
                else:
                    flush()
                    if ch == "\n":
                        line_start = len(items)
                i += 1
                continue
            buf.append(ch)
            i += 1
        flush()
        return items

    def _read_union(
        self, text: str, start: int, *, is_extend: bool
    ) -> tuple[RawBit, int]:
        """Read `union Name = A | B`, which may continue over several lines."""
        n = len(text)
        end = _line_end(text, start)
        while end < n:
            current = strip_comments(text[start:end]).rstrip()
            nxt = _next_non_space(text, end)
            if current.endswith(("=", "|")) or (nxt < n and text[nxt] in "|="):
                end = _line_end(text, end + 1)
                continue
            break
        header = collapse_whitespace(strip_comments(text[start:end]))
        return RawBit(UNION, _drop_extend(header), [], is_extend=is_extend), end

    def _read_scalar(
        self, text: str, start: int, pos: int, *, is_extend: bool
    ) -> tuple[RawBit, int]:
        """Read `scalar Name` and any directives following it."""
        n = len(text)
        m = NAME_RE.match(text, _next_non_space(text, pos))
        if not m:
            msg = f"scalar with missing name near {text[start:start + 30]!r}"
            raise SchemaSyntaxError(msg, kind=SCALAR)
        end = m.end()
        while True:
            at = end
            while at < n and text[at] in " \t":
                at += 1
            d = NAME_RE.match(text, at + 1) if at < n and text[at] == "@" else None
            if not d:
                break
            end = d.end()
            if end < n and text[end] == "(":
                depth = 0
                while end < n:
                    if text[end] == '"':
                        end = skip_string(text, end)
                        continue
                    if text[end] == "(":
                        depth += 1
                    elif text[end] == ")":
                        depth -= 1
                        if depth == 0:
                            end += 1
                            break
                    end += 1
        header = collapse_whitespace(text[start:end])
        return RawBit(SCALAR, _drop_extend(header), [], is_extend=is_extend), end


def _drop_extend(header: str) -> str:
    return header[len("extend ") :] if header.startswith("extend ") else header

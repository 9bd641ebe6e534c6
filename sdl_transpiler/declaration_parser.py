"""Logic for turning raw fragments into structured declarations."""

import logging
import re
from collections.abc import Sequence

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.declaration_kinds import PROPERTY, SCALAR, UNION, keyword_of
from sdl_transpiler.errors import SchemaSyntaxError
from sdl_transpiler.header_names import read_header
from sdl_transpiler.lexing import find_matching, find_top_level, skip_string, split_top_level
from sdl_transpiler.metadata_annotation import MetadataAnnotation
from sdl_transpiler.raw_bit import RawBit
from sdl_transpiler.resolution_context import ResolutionContext
from sdl_transpiler.schema_property import Parameter, Property
from sdl_transpiler.type_expressions import NAME_RE
from sdl_transpiler.type_references import make_type_reference

logger = logging.getLogger(__name__)

CLAUSE_RE = re.compile(r"\b(inherits|implements)\b")
PARAMETER_START_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\s*:")


def split_parameters(text: str) -> list[str]:
    """Split an argument list on parameter boundaries.

    Commas between arguments are optional, so a new parameter starts at
    every top-level `name:` that is not part of a value.
    """
    starts: list[int] = []
    depth = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            i = skip_string(text, i)
            continue
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif depth == 0 and (i == 0 or text[i - 1] in " ,\t\n"):
            m = PARAMETER_START_RE.match(text, i)
            if m:
                starts.append(i)
                i = m.end()
                continue
        i += 1
    if not starts:
        return [text.strip()] if text.strip() else []
    bounds = [*starts, n]
    return [
        text[a:b].strip().rstrip(",").strip() for a, b in zip(bounds, bounds[1:], strict=False)
    ]


def _split_value(text: str) -> tuple[str, str | None, str | None]:
    """Split `Type = default @directive` into its three parts."""
    directive = None
    at = find_top_level(text, "@")
    if at != -1:
        directive = text[at:].strip()
        text = text[:at]
    default = None
    eq = find_top_level(text, "=")
    if eq != -1:
        default = text[eq + 1 :].strip()
        text = text[:eq]
    return text.strip(), default, directive


class DeclarationParser:
    """Parses RawBits into Declarations within one resolution context."""

    def __init__(
        self,
        context: ResolutionContext,
        annotations: Sequence[MetadataAnnotation] | None = None,
    ) -> None:
        """Initialize the parser with the call's context and metadata."""
        self.context = context
        self.annotations = list(annotations or [])

    def parse_all(self, bits: Sequence[RawBit]) -> list[Declaration]:
        """Parse every fragment, keeping their order."""
        declarations = [self.parse(bit) for bit in bits]
        logger.debug("Parsed %s declarations", len(declarations))
        return declarations

    def parse(self, bit: RawBit) -> Declaration:
        """Parse a single fragment into a declaration."""
        header = read_header(bit.header)
        if header is None:
            msg = f"{keyword_of(bit.kind)} with missing name in '{bit.header}'"
            raise SchemaSyntaxError(msg, kind=bit.kind, reference=bit.header)

        params = header.generic_parameters
        if params and len(set(params)) != len(params):
            msg = f"Duplicate type parameter in '{header.name}'"
            raise SchemaSyntaxError(msg, kind=header.kind, name=header.name)

        decl = Declaration(
            kind=header.kind,
            name=header.name,
            is_extend=bit.is_extend,
            generic_parameters=params,
            description=bit.description,
        )
        decl.metadata = self._metadata_for(decl.kind, decl.name)

        if decl.kind == UNION:
            self._parse_union(decl, header.rest)
        elif decl.kind == SCALAR:
            decl.directive = header.rest.strip() or None
        else:
            self._parse_header_clauses(decl, header.rest)
            self._parse_body(decl, bit.body_lines)
        return decl

    def _parse_header_clauses(self, decl: Declaration, rest: str) -> None:
        """Read `inherits`, `implements` and the trailing directive."""
        at = find_top_level(rest, "@")
        if at != -1:
            decl.directive = rest[at:].strip()
            rest = rest[:at]

        matches = list(CLAUSE_RE.finditer(rest))
        leading = rest[: matches[0].start()] if matches else rest
        if leading.strip():
            msg = f"Unexpected '{leading.strip()}' in {keyword_of(decl.kind)} {decl.name}"
            raise SchemaSyntaxError(msg, kind=decl.kind, name=decl.name)

        for idx, m in enumerate(matches):
            end = matches[idx + 1].start() if idx + 1 < len(matches) else len(rest)
            names = [
                nm.group(0)
                for part in re.split(r"[,&]", rest[m.end() : end])
                if (nm := NAME_RE.match(part.strip()))
            ]
            if m.group(1) == "inherits":
                decl.inherits = (decl.inherits or []) + names
            else:
                decl.implements = (decl.implements or []) + names

    def _parse_union(self, decl: Declaration, rest: str) -> None:
        """Read `@directive = A | B` after a union's name."""
        eq = find_top_level(rest, "=")
        head = rest if eq == -1 else rest[:eq]
        decl.directive = head.strip() or None
        if eq != -1:
            decl.members = [
                make_type_reference(m, self.context, decl.generic_parameters)
                for m in split_top_level(rest[eq + 1 :], "|")
                if m
            ]

    def _parse_body(self, decl: Declaration, lines: Sequence[str]) -> None:
        """Parse body lines; comments and descriptions go to the next property."""
        comments: list[str] = []
        description: str | None = None
        for line in lines:
            if line.startswith("#"):
                comments.append(line)
                continue
            if line.startswith('"'):
                description = line
                continue
            prop = self.parse_property(line, decl)
            prop.comments = "\n".join(comments)
            prop.description = description
            decl.properties.append(prop)
            comments = []
            description = None
        decl.closing_comments = "\n".join(comments) or None

    def parse_property(self, text: str, decl: Declaration) -> Property:
        """Parse `name[(params)][: Type[ = default][ @directive]]`."""
        inline_comment: str | None = None
        hash_at = find_top_level(text, "#")
        if hash_at != -1:
            text, inline_comment = text[:hash_at].rstrip(), text[hash_at:].strip()
        m = NAME_RE.match(text)
        if not m:
            msg = f"Invalid property '{text}' in {keyword_of(decl.kind)} {decl.name}"
            raise SchemaSyntaxError(msg, kind=decl.kind, name=decl.name, reference=text)
        prop = Property(name=m.group(0), inline_comment=inline_comment)
        letters = decl.generic_parameters
        rest = text[m.end() :].lstrip()

        if rest.startswith("("):
            close = find_matching(rest, 0, "(", ")")
            if close == -1:
                msg = f"Unclosed parameter list in '{text}'"
                raise SchemaSyntaxError(msg, kind=decl.kind, name=decl.name, reference=text)
            prop.parameters = [
                self._parse_parameter(p, decl) for p in split_parameters(rest[1:close])
            ]
            rest = rest[close + 1 :].strip()

        if rest.startswith(":"):
            type_text, prop.default_value, directive = _split_value(rest[1:])
            prop.result = make_type_reference(
                type_text, self.context, letters, directive=directive
            )
        elif rest.startswith("@"):
            prop.directive = rest
        elif rest:
            msg = f"Unexpected '{rest}' after '{prop.name}' in {decl.name}"
            raise SchemaSyntaxError(msg, kind=decl.kind, name=decl.name, reference=text)

        prop.metadata = self._metadata_for(PROPERTY, prop.name, (decl.kind, decl.name))
        return prop

    def _parse_parameter(self, text: str, decl: Declaration) -> Parameter:
        """Parse one `name: Type = default @directive` argument."""
        name, sep, value = text.partition(":")
        if not sep or not NAME_RE.fullmatch(name.strip()):
            msg = f"Invalid parameter '{text}' in {decl.name}"
            raise SchemaSyntaxError(msg, kind=decl.kind, name=decl.name, reference=text)
        type_text, default, directive = _split_value(value)
        ref = make_type_reference(
            type_text, self.context, decl.generic_parameters, directive=directive
        )
        return Parameter(name=name.strip(), type=ref, default_value=default)

    def _metadata_for(
        self,
        kind: str,
        name: str,
        parent: tuple[str, str] | None = None,
    ) -> MetadataAnnotation | None:
        """Return the first annotation targeting (kind, name)."""
        for a in self.annotations:
            if a.declaration_kind == kind and a.declaration_name == name and a.parent == parent:
                return a
        return None

"""Logic for rendering resolved declarations back to SDL text or plain data."""

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.declaration_kinds import (
    ABSTRACT,
    BLOCK_KINDS,
    DIRECTIVE,
    KIND_ORDER,
    SCHEMA,
    UNION,
    keyword_of,
)
from sdl_transpiler.generic_instantiation import GenericInstantiation
from sdl_transpiler.schema_property import Parameter, Property
from sdl_transpiler.type_reference import TypeReference

logger = logging.getLogger(__name__)


@dataclass
class RenderOptions:
    """Layout settings for the emitted SDL."""

    indent: int = 4
    implements_separator: str = ", "


def render_type(ref: TypeReference) -> str:
    """Render a resolved type and its directive."""
    return f"{ref.resolved_name} {ref.directive}" if ref.directive else ref.resolved_name


def render_parameter(param: Parameter) -> str:
    """Render one field argument."""
    text = f"{param.name}: {param.type.resolved_name}"
    if param.default_value is not None:
        text += f" = {param.default_value}"
    if param.type.directive:
        text += f" {param.type.directive}"
    return text


def render_property(prop: Property, options: RenderOptions | None = None) -> str:
    """Render one property with its description and comments above it.

    `name[(params)][: Type[ = default][ @directive]]`
    """
    options = options or RenderOptions()
    pad = " " * options.indent
    lines: list[str] = []
    if prop.description:
        lines.append(pad + prop.description)
    if prop.comments:
        lines.extend(pad + c for c in prop.comments.split("\n"))

    text = prop.name
    if prop.parameters is not None:
        text += "(" + ", ".join(render_parameter(p) for p in prop.parameters) + ")"
    if prop.result is not None:
        text += f": {prop.result.resolved_name}"
        if prop.default_value is not None:
            text += f" = {prop.default_value}"
        if prop.result.directive:
            text += f" {prop.result.directive}"
    elif prop.directive:
        text += f" {prop.directive}"
    if prop.inline_comment:
        text += f" {prop.inline_comment}"
    lines.append(pad + text)
    return "\n".join(lines)


def _render_header(decl: Declaration, options: RenderOptions) -> str:
    head = keyword_of(decl.kind)
    if decl.is_extend:
        head = f"extend {head}"
    if decl.kind != SCHEMA:
        head += f" {decl.name}"
    if decl.kind != UNION and decl.implements:
        head += " implements " + options.implements_separator.join(decl.implements)
    if decl.directive:
        head += f" {decl.directive}"
    if decl.kind == UNION and decl.members:
        head += " = " + " | ".join(render_type(m) for m in decl.members)
    return head


def render_declaration(decl: Declaration, options: RenderOptions | None = None) -> str:
    """Render a declaration as SDL.

    Block kinds get a `{ ... }` body; an `extend` fragment without
    properties is rendered without braces.
    """
    options = options or RenderOptions()
    lines: list[str] = []
    if decl.description:
        lines.append(decl.description)
    if decl.comments:
        lines.append(decl.comments)

    head = _render_header(decl, options)
    has_body = bool(decl.properties or decl.closing_comments)
    if decl.kind not in BLOCK_KINDS or (decl.is_extend and not has_body):
        lines.append(head)
        return "\n".join(lines)
    if not has_body:
        lines.append(f"{head} {{}}")
        return "\n".join(lines)

    lines.append(f"{head} {{")
    lines.extend(render_property(p, options) for p in decl.properties)
    if decl.closing_comments:
        pad = " " * options.indent
        lines.extend(pad + c for c in decl.closing_comments.split("\n"))
    lines.append("}")
    return "\n".join(lines)


def _emit_order(decl: Declaration) -> int:
    return KIND_ORDER.index(decl.kind) if decl.kind in KIND_ORDER else len(KIND_ORDER)


def build_text(
    declarations: Sequence[Declaration],
    instantiations: Sequence[GenericInstantiation] = (),
    options: RenderOptions | None = None,
) -> str:
    """Render the emitted part of a resolved schema.

    Generic templates and abstract declarations are left out. Directive
    definitions come first, then declarations grouped by kind, then the
    generic instantiations.
    """
    options = options or RenderOptions()
    emitted = [
        d
        for d in declarations
        if not d.is_generic and d.kind not in {ABSTRACT, DIRECTIVE}
    ]
    emitted.sort(key=_emit_order)
    directives = [d.raw for d in declarations if d.kind == DIRECTIVE and d.raw]

    blocks = [*directives]
    blocks.extend(render_declaration(d, options) for d in emitted)
    blocks.extend(i.text for i in instantiations)
    logger.debug(
        "Rendered %s declarations and %s instantiations", len(emitted), len(instantiations)
    )
    return "\n\n".join(blocks) + "\n" if blocks else ""


def build_ast(
    declarations: Sequence[Declaration],
    instantiations: Sequence[GenericInstantiation] = (),
) -> list[Declaration]:
    """Return every resolved declaration followed by the instantiations."""
    return [*declarations, *(i.declaration for i in instantiations)]


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def declaration_to_dict(decl: Declaration) -> dict[str, Any]:
    """Convert a declaration to plain data for JSON or YAML export."""
    return _plain(asdict(decl))

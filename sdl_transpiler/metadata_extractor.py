"""Logic for removing metadata annotations from a schema.

A metadata annotation is an `@name` or `@name(body)` written alone on the line
above a declaration or a property:

    @node
    type Brand {
        @edge(owns)
        products: [Product]
    }

Annotations are not part of the emitted SDL. They are returned alongside the
plain schema so they can be attached to the declarations they precede.
Top-level `directive @name ... on ...` definitions are removed as well and
returned as annotations named `directive`; they are emitted verbatim at the
top of the transpiled schema.
"""

import logging
import re

from sdl_transpiler.declaration_kinds import DIRECTIVE, PROPERTY
from sdl_transpiler.header_names import read_header
from sdl_transpiler.metadata_annotation import MetadataAnnotation, MetadataExtraction
from sdl_transpiler.schema_tokenizer import line_states
from sdl_transpiler.type_expressions import NAME_RE

logger = logging.getLogger(__name__)

DIRECTIVE_ANNOTATION = "directive"

ANNOTATION_RE = re.compile(r"^@([A-Za-z_][A-Za-z0-9_]*)\s*(?:\((.*)\))?\s*$")
DIRECTIVE_DEF_RE = re.compile(r"^directive\s+@([A-Za-z_][A-Za-z0-9_]*)")
DIRECTIVE_LOCATIONS_RE = re.compile(r"(?:^|\)|\s)(?:repeatable\s+)?on\s+[A-Z_|\s]+")


def _directive_end(lines: list[str], start: int) -> int:
    """Return the index of the last line of the directive definition at `start`."""
    end = start
    while end < len(lines) - 1:
        text = "\n".join(lines[start : end + 1])
        balanced = text.count("(") <= text.count(")")
        next_line = next((x.strip() for x in lines[end + 1 :] if x.strip()), "")
        done = (
            balanced
            and DIRECTIVE_LOCATIONS_RE.search(text) is not None
            and not text.rstrip().endswith("|")
            and not next_line.startswith("|")
        )
        if done:
            break
        end += 1
    return end


def remove_metadata_annotations(schema_text: str) -> MetadataExtraction:
    """Strip annotations and directive definitions out of a schema."""
    lines = schema_text.split("\n")
    states = line_states(schema_text)
    kept: list[str] = []
    annotations: list[MetadataAnnotation] = []
    pending: list[tuple[str, str | None]] = []
    parent: tuple[str, str] | None = None

    i = 0
    while i < len(lines):
        line = lines[i]
        depth, in_string = states[i] if i < len(states) else (0, False)
        stripped = line.strip()
        if in_string or not stripped or stripped.startswith(("#", '"')):
            kept.append(line)
            i += 1
            continue

        directive = DIRECTIVE_DEF_RE.match(stripped) if depth == 0 else None
        if directive:
            end = _directive_end(lines, i)
            body = "\n".join(lines[i : end + 1]).strip()
            annotations.append(
                MetadataAnnotation(DIRECTIVE_ANNOTATION, body, DIRECTIVE, directive.group(1))
            )
            i = end + 1
            continue

        annotation = ANNOTATION_RE.match(stripped)
        if annotation:
            pending.append((annotation.group(1), annotation.group(2)))
            i += 1
            continue

        header = read_header(line) if depth == 0 else None
        if header is not None:
            parent = (header.kind, header.name)
        if pending:
            prop = NAME_RE.match(stripped) if depth > 0 else None
            if header is not None:
                annotations.extend(
                    MetadataAnnotation(name, body, header.kind, header.name)
                    for name, body in pending
                )
            elif prop is not None:
                annotations.extend(
                    MetadataAnnotation(name, body, PROPERTY, prop.group(0), parent)
                    for name, body in pending
                )
            else:
                logger.warning(
                    "Dropping metadata %s: no declaration or property follows it",
                    ", ".join(f"@{name}" for name, _ in pending),
                )
            pending = []
        kept.append(line)
        i += 1

    for name, _ in pending:
        logger.warning("Dropping metadata @%s at the end of the schema", name)
    logger.debug("Extracted %s metadata annotations", len(annotations))
    return MetadataExtraction("\n".join(kept), annotations)

"""Logic for finding the comment block written above each declaration."""

import logging

from sdl_transpiler.comment_entry import CommentEntry
from sdl_transpiler.declaration import Declaration
from sdl_transpiler.header_names import read_header
from sdl_transpiler.schema_tokenizer import line_states

logger = logging.getLogger(__name__)


def locate_comments(text: str) -> list[CommentEntry]:
    """Find the `#` lines directly touching each top-level declaration header.

    Walking up from a header, blank lines are skipped and the walk stops at
    the first line that is not a comment. A header with no comment line
    right above it gets no entry.
    """
    lines = text.split("\n")
    states = line_states(text)
    entries: list[CommentEntry] = []
    for idx, line in enumerate(lines):
        depth, in_string = states[idx] if idx < len(states) else (0, False)
        if depth != 0 or in_string:
            continue
        header = read_header(line)
        if header is None:
            continue

        block: list[str] = []
        up = idx - 1
        while up >= 0:
            above = lines[up].strip()
            if above.startswith("#"):
                block.append(above)
            elif above:
                break
            up -= 1
        if block:
            entries.append(
                CommentEntry(
                    text="\n".join(reversed(block)),
                    owner=(header.kind, header.name),
                    is_extend=header.is_extend,
                )
            )
    logger.debug("Located %s declaration comment blocks", len(entries))
    return entries


def attach_comments(
    declarations: list[Declaration],
    entries: list[CommentEntry],
) -> list[Declaration]:
    """Set each declaration's comments from the first matching entry."""
    for decl in declarations:
        for entry in entries:
            if entry.owner == (decl.kind, decl.name) and entry.is_extend == decl.is_extend:
                decl.comments = entry.text
                break
    return declarations

"""Data model for a comment block found above a declaration header."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommentEntry:
    """Represents the comment lines directly above a declaration."""

    text: str
    owner: tuple[str, str]  # (kind, name)
    is_extend: bool = False

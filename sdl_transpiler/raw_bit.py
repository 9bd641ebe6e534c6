"""Data model for a raw declaration fragment produced by the tokenizer."""

from dataclasses import dataclass, field


@dataclass
class RawBit:
    """Represents one declaration as cut out of the schema text."""

    kind: str
    header: str  # e.g. "type Paged<T> implements Node"
    body_lines: list[str] = field(default_factory=list)
    is_extend: bool = False
    description: str | None = None

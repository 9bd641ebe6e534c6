"""Data models for metadata annotations removed from the schema text."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MetadataAnnotation:
    """Represents an `@name(body)` annotation and the declaration it targets."""

    name: str
    body: str | None
    declaration_kind: str
    declaration_name: str
    parent: tuple[str, str] | None = None  # (kind, name) of the enclosing block


@dataclass
class MetadataExtraction:
    """Result of stripping annotations from a schema."""

    plain_schema: str
    annotations: list[MetadataAnnotation] = field(default_factory=list)

"""Data model for a parsed schema declaration."""

from dataclasses import dataclass, field

from sdl_transpiler.metadata_annotation import MetadataAnnotation
from sdl_transpiler.schema_property import Property
from sdl_transpiler.type_reference import TypeReference


@dataclass
class Declaration:
    """Represents a type, input, enum, interface, abstract, scalar, union or directive."""

    kind: str
    name: str  # raw, may carry generic syntax e.g. "Paged<T>"
    is_extend: bool = False
    generic_parameters: list[str] | None = None
    directive: str | None = None
    properties: list[Property] = field(default_factory=list)
    inherits: list[str] | None = None
    implements: list[str] | None = None
    comments: str | None = None
    description: str | None = None
    metadata: MetadataAnnotation | None = None
    members: list[TypeReference] | None = None  # union members
    closing_comments: str | None = None
    raw: str | None = None  # verbatim body of a DIRECTIVE
    original_properties: list[Property] | None = None  # own properties, pre-merge

    @property
    def key(self) -> tuple[str, str, tuple[str, ...]]:
        """Identity used for resolution and memoization."""
        return (self.kind, self.name, tuple(self.generic_parameters or ()))

    @property
    def base_name(self) -> str:
        """Name without the generic parameter list."""
        return self.name.split("<", 1)[0].strip()

    @property
    def is_generic(self) -> bool:
        """Check if the declaration is a generic template."""
        return bool(self.generic_parameters)

"""Data model for a reference to a type inside a declaration."""

from dataclasses import dataclass


@dataclass
class TypeReference:
    """Represents a type expression such as `[Paged<Product>]!`."""

    origin_name: str  # as written, without directive
    is_generic: bool
    resolved_name: str
    depends_on_parent_generics: bool = False
    directive: str | None = None
    generic_parent_letters: list[str] | None = None

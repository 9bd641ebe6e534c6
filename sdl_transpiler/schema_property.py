"""Data models for declaration properties and their parameters."""

from dataclasses import dataclass

from sdl_transpiler.metadata_annotation import MetadataAnnotation
from sdl_transpiler.type_reference import TypeReference


@dataclass
class Parameter:
    """Represents one argument of a field, e.g. `first: Int = 10`."""

    name: str
    type: TypeReference
    default_value: str | None = None


@dataclass
class Property:
    """Represents a field, input field or enum value."""

    name: str
    comments: str = ""
    parameters: list[Parameter] | None = None
    result: TypeReference | None = None
    default_value: str | None = None
    directive: str | None = None  # directive of a result-less item (enum value)
    description: str | None = None
    metadata: MetadataAnnotation | None = None
    inline_comment: str | None = None  # `# ...` trailing the item on its line

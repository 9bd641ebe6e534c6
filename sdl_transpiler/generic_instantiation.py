"""Data model for a concrete declaration synthesized from a generic template."""

from dataclasses import dataclass

from sdl_transpiler.declaration import Declaration


@dataclass
class GenericInstantiation:
    """Represents e.g. `PagedProduct` built from `Paged<T>` and `Product`."""

    alias: str
    declaration: Declaration
    text: str

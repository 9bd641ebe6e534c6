"""Errors raised while parsing and resolving a schema.

Every error is fatal for the call that raised it. Each one carries the
declaration kind and name it was raised for, plus the offending reference,
so the location can be found without line numbers.
"""


class SchemaError(Exception):
    """Base class for all schema errors."""

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        name: str | None = None,
        reference: str | None = None,
    ) -> None:
        """Initialize the error with a message and its schema context."""
        super().__init__(f"Schema error: {message}")
        self.kind = kind
        self.name = name
        self.reference = reference


class SchemaSyntaxError(SchemaError):
    """Malformed declaration header or block."""


class MissingAncestorError(SchemaError):
    """An inherited declaration does not exist."""


class InvalidInheritanceError(SchemaError):
    """A declaration inherits from a kind it is not allowed to inherit from."""


class CyclicInheritanceError(SchemaError):
    """The inheritance graph contains a cycle."""


class MissingInterfaceError(SchemaError):
    """An implemented interface does not exist."""


class NotAnInterfaceError(SchemaError):
    """An implemented name resolves to a declaration that is not an interface."""


class CyclicInterfaceError(SchemaError):
    """The implements graph contains a cycle."""


class MissingGenericTemplateError(SchemaError):
    """No generic template exists for a generic reference."""


class NotGenericError(SchemaError):
    """A generic reference targets a declaration without type parameters."""


class GenericArityError(SchemaError):
    """Type argument count differs from the template's parameter count."""


class GenericTypeMismatchError(SchemaError):
    """A type parameter is used where a generic template is expected."""


class CyclicGenericError(SchemaError):
    """Generic instantiation keeps producing new nested instantiations."""


class InvalidAliasError(SchemaError):
    """An alias function returned something that is not a valid type name."""

"""Declaration kinds and predicates over them."""

TYPE = "TYPE"
INPUT = "INPUT"
ENUM = "ENUM"
INTERFACE = "INTERFACE"
ABSTRACT = "ABSTRACT"
SCALAR = "SCALAR"
UNION = "UNION"
DIRECTIVE = "DIRECTIVE"
SCHEMA = "SCHEMA"
PROPERTY = "PROPERTY"

# Schema keyword -> declaration kind
KEYWORD_KINDS = {
    "type": TYPE,
    "input": INPUT,
    "enum": ENUM,
    "interface": INTERFACE,
    "abstract": ABSTRACT,
    "scalar": SCALAR,
    "union": UNION,
    "schema": SCHEMA,
}

BLOCK_KINDS = frozenset({TYPE, INPUT, ENUM, INTERFACE, ABSTRACT, SCHEMA})

# Emission order of the serializer; source order is kept inside a kind.
KIND_ORDER = (SCHEMA, INTERFACE, ABSTRACT, TYPE, INPUT, ENUM, SCALAR, UNION)


def keyword_of(kind: str) -> str:
    """Return the schema keyword used to declare a kind."""
    return kind.lower()


def can_inherit(child_kind: str, parent_kind: str) -> bool:
    """Check whether a declaration of child_kind may inherit from parent_kind.

    A TYPE may inherit from a TYPE or an INTERFACE; every other kind only from
    its own kind.
    """
    if child_kind == TYPE:
        return parent_kind in {TYPE, INTERFACE}
    return child_kind == parent_kind

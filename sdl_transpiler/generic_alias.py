"""Logic for naming the concrete instantiations of generic templates."""

import re
from collections.abc import Callable

from sdl_transpiler.errors import InvalidAliasError

# Receives the argument names, e.g. ["Product"] for Paged<Product>.
AliasFunction = Callable[[list[str]], str]

ALIAS_NAME_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def default_alias(base: str, arguments: list[str]) -> str:
    """Concatenate a template's base name with its argument names.

    `Paged<Product>` -> `PagedProduct`, `Pair<User, Tag>` -> `PairUserTag`
    """
    return base + "".join(arguments)


def format_alias(template: str) -> AliasFunction:
    """Build an alias function from a format string.

    Positional fields take the arguments and `{args}` all of them joined,
    e.g. `"{0}Page"` or `"{args}Connection"`.
    """

    def alias(arguments: list[str]) -> str:
        try:
            return template.format(*arguments, args="".join(arguments))
        except (IndexError, KeyError) as e:
            msg = f"Alias format '{template}' does not fit arguments {arguments}"
            raise InvalidAliasError(msg, reference=template) from e

    return alias


def check_alias(alias: object, reference: str) -> str:
    """Ensure an alias function produced a usable type name."""
    if not isinstance(alias, str) or not ALIAS_NAME_RE.match(alias):
        msg = f"Alias {alias!r} generated for '{reference}' is not a valid type name"
        raise InvalidAliasError(msg, reference=reference)
    return alias

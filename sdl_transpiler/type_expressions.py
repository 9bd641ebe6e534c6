"""Helpers for picking apart type expressions like `[Paged<Product>!]!`."""

import re
from collections.abc import Sequence

from sdl_transpiler.errors import GenericArityError, SchemaSyntaxError
from sdl_transpiler.lexing import find_matching, split_top_level

NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
SUFFIX_RE = re.compile(r"[\]!]*")


def split_decoration(expression: str) -> tuple[str, str, str]:
    """Split an expression into list prefix, core type and suffix.

    `[Paged<Product>!]!` -> (`[`, `Paged<Product>`, `!]!`)
    """
    expr = expression.strip()
    i = 0
    while i < len(expr) and (expr[i] == "[" or expr[i].isspace()):
        i += 1
    m = NAME_RE.match(expr, i)
    end = m.end() if m else i
    lt = end
    while lt < len(expr) and expr[lt].isspace():
        lt += 1
    if lt < len(expr) and expr[lt] == "<":
        close = find_matching(expr, lt, "<", ">")
        if close == -1:
            msg = f"Unbalanced generic arguments in '{expr}'"
            raise SchemaSyntaxError(msg, reference=expr)
        end = close + 1
    prefix = re.sub(r"\s+", "", expr[:i])
    suffix = re.sub(r"\s+", "", expr[end:])
    if not SUFFIX_RE.fullmatch(suffix):
        msg = f"Unexpected '{suffix}' after type in '{expr}'"
        raise SchemaSyntaxError(msg, reference=expr)
    return prefix, expr[i:end].strip(), suffix


def strip_decoration(expression: str) -> str:
    """Return the core type of an expression, e.g. `[Product!]!` -> `Product`."""
    return split_decoration(expression)[1]


def split_generic(core: str) -> tuple[str, list[str]]:
    """Split `Paged<Product, Tag>` into (`Paged`, [`Product`, `Tag`])."""
    lt = core.find("<")
    if lt == -1:
        return core.strip(), []
    close = find_matching(core, lt, "<", ">")
    if close == -1:
        msg = f"Unbalanced generic arguments in '{core}'"
        raise SchemaSyntaxError(msg, reference=core)
    return core[:lt].strip(), split_top_level(core[lt + 1 : close])


def normalize_generic(core: str) -> str:
    """Rewrite a core type with canonical spacing, e.g. `Pair<A,B>` -> `Pair<A, B>`."""
    base, args = split_generic(core)
    if not args:
        return base
    compact = [re.sub(r"\s+", "", a) for a in args]
    return f"{base}<{', '.join(compact)}>"


def _letters(generic_letters: str | Sequence[str] | None) -> list[str]:
    if not generic_letters:
        return []
    if isinstance(generic_letters, str):
        generic_letters = generic_letters.split(",")
    return [x.strip() for x in generic_letters if x.strip()]


def is_generic_match(
    type_expression: str | None,
    generic_letters: str | Sequence[str] | None,
) -> bool:
    """Check if a type expression mentions any of the given type parameters.

    `Paged<T>`, `[T]`, `T!` all match `T`; `Tag` does not.
    """
    letters = set(_letters(generic_letters))
    if not type_expression or not letters:
        return False
    return any(tok in letters for tok in NAME_RE.findall(type_expression))


def substitute_generics(
    type_expression: str,
    generic_letters: Sequence[str],
    arguments: Sequence[str],
) -> str:
    """Replace type parameters positionally with concrete arguments.

    `[Paged<T>]!` with T=Product -> `[Paged<Product>]!`
    """
    if len(generic_letters) != len(arguments):
        msg = (
            f"Mismatch between type parameters ({', '.join(generic_letters)}) "
            f"and arguments ({', '.join(arguments)})"
        )
        raise GenericArityError(msg, reference=type_expression)
    mapping = dict(zip(generic_letters, arguments, strict=True))
    return NAME_RE.sub(lambda m: mapping.get(m.group(0), m.group(0)), type_expression)

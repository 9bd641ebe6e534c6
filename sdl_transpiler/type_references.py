"""Logic for resolving type expressions into TypeReference records."""

from collections.abc import Sequence

from sdl_transpiler.errors import GenericTypeMismatchError
from sdl_transpiler.lexing import find_top_level
from sdl_transpiler.resolution_context import ResolutionContext
from sdl_transpiler.type_expressions import is_generic_match, split_decoration, split_generic
from sdl_transpiler.type_reference import TypeReference


def make_type_reference(
    expression: str,
    context: ResolutionContext,
    parent_letters: Sequence[str] | None = None,
    *,
    directive: str | None = None,
) -> TypeReference:
    """Resolve a type expression written inside a declaration.

    A generic use whose type arguments mention the enclosing declaration's
    own parameters (`Paged<T>` inside `Box<T>`) is deferred until that
    declaration is instantiated. Any other generic use gets its alias as
    resolved name and is registered for instantiation.
    """
    at = find_top_level(expression, "@")
    if at != -1:
        directive = expression[at:].strip()
        expression = expression[:at]
    origin = expression.strip()
    letters = list(parent_letters) if parent_letters else None

    prefix, core, suffix = split_decoration(origin)
    if "<" not in core:
        return TypeReference(
            origin_name=origin,
            is_generic=False,
            resolved_name=origin,
            directive=directive,
            generic_parent_letters=letters,
        )

    base, args = split_generic(core)
    if letters and base in letters:
        msg = f"Type parameter '{base}' cannot take type arguments in '{origin}'"
        raise GenericTypeMismatchError(msg, reference=origin)

    if letters and any(is_generic_match(a, letters) for a in args):
        return TypeReference(
            origin_name=origin,
            is_generic=True,
            resolved_name=origin,
            depends_on_parent_generics=True,
            directive=directive,
            generic_parent_letters=letters,
        )

    alias = context.alias_name(core)
    ref = TypeReference(
        origin_name=origin,
        is_generic=True,
        resolved_name=f"{prefix}{alias}{suffix}",
        directive=directive,
        generic_parent_letters=letters,
    )
    context.pending_generics.setdefault(alias, ref)
    return ref

"""Per-call state shared by the resolution stages."""

from dataclasses import dataclass, field

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.errors import GenericArityError, InvalidAliasError
from sdl_transpiler.generic_alias import AliasFunction, check_alias, default_alias
from sdl_transpiler.generic_instantiation import GenericInstantiation
from sdl_transpiler.type_expressions import normalize_generic, split_generic, strip_decoration
from sdl_transpiler.type_reference import TypeReference

DEFAULT_MAX_GENERIC_DEPTH = 64


@dataclass
class ResolutionContext:
    """Caches and cycle guards for one `get_schema_ast`/`transpile_schema` call.

    A fresh context is built for every call and threaded through each stage,
    so nothing resolved in one call is visible to another.
    """

    alias_function: AliasFunction | None = None
    named_aliases: dict[str, AliasFunction] = field(default_factory=dict)
    template_aliases: dict[str, str] = field(default_factory=dict)
    """Template base name -> key into named_aliases (from `@alias(key)`)."""

    max_generic_depth: int = DEFAULT_MAX_GENERIC_DEPTH

    alias_names: dict[str, str] = field(default_factory=dict)
    pending_generics: dict[str, TypeReference] = field(default_factory=dict)
    """Alias -> first concrete generic reference seen while parsing."""

    resolved: dict[tuple[str, str, tuple[str, ...]], Declaration] = field(
        default_factory=dict
    )
    resolving: list[tuple[str, str, tuple[str, ...]]] = field(default_factory=list)

    interface_closures: dict[str, list[str]] = field(default_factory=dict)
    resolving_interfaces: list[str] = field(default_factory=list)

    instantiations: dict[str, GenericInstantiation] = field(default_factory=dict)
    instantiating: list[str] = field(default_factory=list)

    def alias_name(self, core: str) -> str:
        """Return the concrete name of a generic use such as `Paged<Product>`."""
        core = normalize_generic(core)
        cached = self.alias_names.get(core)
        if cached is not None:
            return cached

        base, args = split_generic(core)
        if any(not a for a in args):
            msg = f"Empty type argument in '{core}'"
            raise GenericArityError(msg, name=base, reference=core)
        arg_names = [self._argument_name(a) for a in args]
        fn = self._alias_function_for(base)
        alias = default_alias(base, arg_names) if fn is None else fn(arg_names)
        alias = check_alias(alias, core)
        self.alias_names[core] = alias
        return alias

    def _argument_name(self, argument: str) -> str:
        core = strip_decoration(argument)
        return self.alias_name(core) if "<" in core else core

    def _alias_function_for(self, base: str) -> AliasFunction | None:
        key = self.template_aliases.get(base)
        if key is None:
            return self.alias_function
        fn = self.named_aliases.get(key)
        if fn is None:
            msg = f"No alias registered under '{key}' for generic template '{base}'"
            raise InvalidAliasError(msg, name=base, reference=key)
        return fn

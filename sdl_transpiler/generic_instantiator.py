"""Logic for synthesizing concrete declarations from generic templates."""

import logging
from collections.abc import Sequence
from dataclasses import replace

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.errors import (
    CyclicGenericError,
    GenericArityError,
    MissingGenericTemplateError,
    NotGenericError,
)
from sdl_transpiler.generic_instantiation import GenericInstantiation
from sdl_transpiler.resolution_context import ResolutionContext
from sdl_transpiler.schema_property import Parameter, Property
from sdl_transpiler.serializer import RenderOptions, render_declaration
from sdl_transpiler.type_expressions import (
    is_generic_match,
    normalize_generic,
    split_generic,
    strip_decoration,
    substitute_generics,
)
from sdl_transpiler.type_reference import TypeReference
from sdl_transpiler.type_references import make_type_reference

logger = logging.getLogger(__name__)


class GenericInstantiator:
    """Builds one concrete declaration per generic alias.

    Instantiations are memoized by alias in the resolution context. An alias
    that is already being built is referenced by name only, so templates may
    refer to themselves. Nesting deeper than `context.max_generic_depth`
    raises CyclicGenericError.
    """

    def __init__(
        self,
        declarations: Sequence[Declaration],
        context: ResolutionContext,
        render_options: RenderOptions | None = None,
    ) -> None:
        """Index the resolved declarations by base name."""
        self.context = context
        self.render_options = render_options or RenderOptions()
        self.by_base: dict[str, list[Declaration]] = {}
        for decl in declarations:
            if not decl.is_extend:
                self.by_base.setdefault(decl.base_name, []).append(decl)

    def instantiate(self, ref: TypeReference) -> str | None:
        """Instantiate the generic type a reference points at.

        Returns the alias, or None when the reference is not a concrete
        generic use.
        """
        if not ref.is_generic or ref.depends_on_parent_generics:
            return None
        return self.instantiate_core(strip_decoration(ref.origin_name))

    def instantiate_pending(self) -> list[GenericInstantiation]:
        """Instantiate every generic use registered while parsing."""
        done: set[str] = set()
        while True:
            todo = [
                (alias, ref)
                for alias, ref in self.context.pending_generics.items()
                if alias not in done
            ]
            if not todo:
                break
            for alias, ref in todo:
                done.add(alias)
                self.instantiate(ref)
        logger.debug("Materialized %s generic instantiations", len(self.context.instantiations))
        return list(self.context.instantiations.values())

    def instantiate_core(self, core: str) -> str:
        """Instantiate a core generic expression such as `Paged<Product>`."""
        core = normalize_generic(core)
        alias = self.context.alias_name(core)
        if alias in self.context.instantiations or alias in self.context.instantiating:
            return alias

        stack = self.context.instantiating
        if len(stack) >= self.context.max_generic_depth:
            chain = " -> ".join([*stack, alias])
            msg = f"Generic nesting exceeds depth {self.context.max_generic_depth}: {chain}"
            raise CyclicGenericError(msg, name=stack[0], reference=core)

        base, arguments = split_generic(core)
        template = self._template(base, core)
        letters = template.generic_parameters or []
        if len(arguments) != len(letters):
            msg = (
                f"{template.name} takes {len(letters)} type argument(s), "
                f"got {len(arguments)} in '{core}'"
            )
            raise GenericArityError(msg, kind=template.kind, name=template.name, reference=core)

        stack.append(alias)
        try:
            properties = [self._property(p, letters, arguments) for p in template.properties]
            members = None
            if template.members is not None:
                members = [self._reference(m, letters, arguments) for m in template.members]
            decl = replace(
                template,
                name=alias,
                generic_parameters=None,
                inherits=None,
                properties=properties,
                original_properties=list(properties),
                members=members,
            )
        finally:
            stack.pop()

        text = render_declaration(decl, self.render_options)
        self.context.instantiations[alias] = GenericInstantiation(alias, decl, text)
        logger.debug("Instantiated %s as %s", core, alias)
        return alias

    def _template(self, base: str, core: str) -> Declaration:
        """Find the generic template a generic use refers to."""
        candidates = self.by_base.get(base, [])
        template = next((d for d in candidates if d.is_generic), None)
        if template is not None:
            return template
        if candidates:
            msg = f"'{base}' is not generic but is used as '{core}'"
            raise NotGenericError(msg, kind=candidates[0].kind, name=base, reference=core)
        msg = f"No generic template '{base}' for '{core}'"
        raise MissingGenericTemplateError(msg, name=base, reference=core)

    def _property(self, prop: Property, letters: list[str], arguments: list[str]) -> Property:
        params = None
        if prop.parameters is not None:
            params = [
                Parameter(p.name, self._reference(p.type, letters, arguments), p.default_value)
                for p in prop.parameters
            ]
        result = None
        if prop.result is not None:
            result = self._reference(prop.result, letters, arguments)
        return replace(prop, parameters=params, result=result)

    def _reference(
        self, ref: TypeReference, letters: list[str], arguments: list[str]
    ) -> TypeReference:
        """Substitute the template's parameters in one reference."""
        if not is_generic_match(ref.origin_name, letters):
            self.instantiate(ref)
            return ref
        expression = substitute_generics(ref.origin_name, letters, arguments)
        concrete = make_type_reference(expression, self.context, directive=ref.directive)
        self.instantiate(concrete)
        return concrete

"""Logic for flattening `inherits` chains into merged declarations."""

import logging
from collections.abc import Sequence
from dataclasses import replace

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.declaration_kinds import can_inherit, keyword_of
from sdl_transpiler.errors import (
    CyclicInheritanceError,
    InvalidInheritanceError,
    MissingAncestorError,
)
from sdl_transpiler.interface_resolver import InterfaceClosureResolver
from sdl_transpiler.resolution_context import ResolutionContext

logger = logging.getLogger(__name__)


class InheritanceResolver:
    """Resolves each declaration against its ancestors.

    Ancestors are looked up among non-extend declarations only. Every
    resolved declaration is memoized by identity key in the context, and the
    keys on the active path are kept in `context.resolving` so a cycle raises
    instead of recursing forever.
    """

    def __init__(
        self,
        declarations: Sequence[Declaration],
        context: ResolutionContext,
        interfaces: InterfaceClosureResolver | None = None,
    ) -> None:
        """Index the declarations that may be inherited from."""
        self.context = context
        self.interfaces = interfaces or InterfaceClosureResolver(declarations, context)
        self.by_name: dict[str, list[Declaration]] = {}
        for decl in declarations:
            if not decl.is_extend:
                self.by_name.setdefault(decl.base_name, []).append(decl)

    def resolve_all(self, declarations: Sequence[Declaration]) -> list[Declaration]:
        """Resolve every declaration, keeping their order."""
        resolved = [self.resolve(decl) for decl in declarations]
        logger.debug("Resolved %s declarations", len(resolved))
        return resolved

    def resolve(self, decl: Declaration) -> Declaration:
        """Return decl merged with its ancestors and with closed interfaces."""
        key = decl.key
        if not decl.is_extend:
            cached = self.context.resolved.get(key)
            if cached is not None:
                return cached
            if key in self.context.resolving:
                path = [k[1] for k in self.context.resolving[self.context.resolving.index(key) :]]
                chain = " -> ".join([*path, decl.name])
                msg = f"Cyclic inheritance: {chain}"
                raise CyclicInheritanceError(msg, kind=decl.kind, name=decl.name, reference=chain)
            self.context.resolving.append(key)

        try:
            ancestors = [self.resolve(self._ancestor(decl, name)) for name in decl.inherits or []]
        finally:
            if not decl.is_extend:
                self.context.resolving.pop()

        properties = [p for a in ancestors for p in a.properties] + list(decl.properties)
        implements = list(decl.implements or [])
        for a in ancestors:
            implements.extend(a.implements or [])

        metadata = decl.metadata
        if metadata is None:
            metadata = next((a.metadata for a in reversed(ancestors) if a.metadata), None)

        result = replace(
            decl,
            properties=properties,
            original_properties=list(decl.properties),
            implements=self.interfaces.close(decl, implements),
            metadata=metadata,
        )
        if not decl.is_extend:
            self.context.resolved[key] = result
        return result

    def _ancestor(self, decl: Declaration, name: str) -> Declaration:
        """Find the declaration named `name` that decl may inherit from."""
        candidates = self.by_name.get(name, [])
        if not candidates:
            msg = f"{keyword_of(decl.kind)} {decl.name} inherits from unknown '{name}'"
            raise MissingAncestorError(msg, kind=decl.kind, name=decl.name, reference=name)
        chosen = next((c for c in candidates if c.kind == decl.kind), None) or next(
            (c for c in candidates if can_inherit(decl.kind, c.kind)), None
        )
        if chosen is None:
            msg = (
                f"{keyword_of(decl.kind)} {decl.name} cannot inherit from "
                f"{keyword_of(candidates[0].kind)} {name}"
            )
            raise InvalidInheritanceError(msg, kind=decl.kind, name=decl.name, reference=name)
        if chosen.is_generic:
            msg = (
                f"{keyword_of(decl.kind)} {decl.name} cannot inherit from "
                f"generic template {chosen.name}"
            )
            raise InvalidInheritanceError(msg, kind=decl.kind, name=decl.name, reference=name)
        return chosen

"""Logic for computing the transitive set of implemented interfaces."""

import logging
from collections.abc import Sequence

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.declaration_kinds import INTERFACE
from sdl_transpiler.errors import (
    CyclicInterfaceError,
    MissingInterfaceError,
    NotAnInterfaceError,
)
from sdl_transpiler.resolution_context import ResolutionContext

logger = logging.getLogger(__name__)


def _unique(names: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            out.append(name)
    return out


class InterfaceClosureResolver:
    """Closes `implements` lists over the interfaces they name.

    The closure of an interface is the interface itself followed by the
    closures of the interfaces it implements, de-duplicated in first-seen
    order. Closures are memoized in the resolution context.
    """

    def __init__(
        self,
        declarations: Sequence[Declaration],
        context: ResolutionContext,
    ) -> None:
        """Index the non-extend declarations by name."""
        self.context = context
        self.by_name: dict[str, list[Declaration]] = {}
        for decl in declarations:
            if not decl.is_extend:
                self.by_name.setdefault(decl.base_name, []).append(decl)

    def closure(self, name: str, *, owner: Declaration | None = None) -> list[str]:
        """Return the interface closure of `name`."""
        cached = self.context.interface_closures.get(name)
        if cached is not None:
            return cached

        candidates = self.by_name.get(name, [])
        interface = next((d for d in candidates if d.kind == INTERFACE), None)
        if interface is None:
            kind = owner.kind if owner else None
            owner_name = owner.name if owner else None
            if candidates:
                msg = f"'{name}' is a {candidates[0].kind.lower()}, not an interface"
                raise NotAnInterfaceError(msg, kind=kind, name=owner_name, reference=name)
            msg = f"Interface '{name}' does not exist"
            raise MissingInterfaceError(msg, kind=kind, name=owner_name, reference=name)

        stack = self.context.resolving_interfaces
        if name in stack:
            path = " -> ".join([*stack[stack.index(name) :], name])
            msg = f"Cyclic implements: {path}"
            raise CyclicInterfaceError(msg, kind=INTERFACE, name=name, reference=path)

        stack.append(name)
        try:
            names = [name]
            for parent in interface.implements or []:
                names.extend(self.closure(parent, owner=interface))
        finally:
            stack.pop()

        result = _unique(names)
        self.context.interface_closures[name] = result
        return result

    def close(self, decl: Declaration, implements: Sequence[str] | None = None) -> list[str] | None:
        """Return the closed implements list of a declaration, or None if empty."""
        names = decl.implements if implements is None else implements
        if not names:
            return None
        # an interface is on the path while its own list is closed
        own = decl.base_name if decl.kind == INTERFACE and not decl.is_extend else None
        stack = self.context.resolving_interfaces
        if own is not None:
            stack.append(own)
        closed: list[str] = []
        try:
            for name in names:
                closed.extend(self.closure(name, owner=decl))
        finally:
            if own is not None:
                stack.pop()
        logger.debug("Closed interfaces of %s: %s", decl.name, closed)
        return _unique(closed)

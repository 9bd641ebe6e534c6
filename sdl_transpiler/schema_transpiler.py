"""Entry points for transpiling extended SDL into standard SDL.

    from sdl_transpiler.schema_transpiler import transpile_schema

    transpile_schema('''
        type Paged<T> { items: [T] }
        type Product { id: ID }
        type Query { products: Paged<Product> }
    ''')

Each call builds its own ResolutionContext, so nothing resolved in one call
leaks into the next.
"""

import logging

from sdl_transpiler.comment_locator import attach_comments, locate_comments
from sdl_transpiler.declaration import Declaration
from sdl_transpiler.declaration_kinds import DIRECTIVE
from sdl_transpiler.declaration_parser import DeclarationParser
from sdl_transpiler.generic_alias import AliasFunction
from sdl_transpiler.generic_instantiation import GenericInstantiation
from sdl_transpiler.generic_instantiator import GenericInstantiator
from sdl_transpiler.header_names import read_name
from sdl_transpiler.inheritance_resolver import InheritanceResolver
from sdl_transpiler.interface_resolver import InterfaceClosureResolver
from sdl_transpiler.metadata_annotation import MetadataAnnotation
from sdl_transpiler.metadata_extractor import (
    DIRECTIVE_ANNOTATION,
    remove_metadata_annotations,
)
from sdl_transpiler.resolution_context import DEFAULT_MAX_GENERIC_DEPTH, ResolutionContext
from sdl_transpiler.schema_tokenizer import SchemaTokenizer
from sdl_transpiler.serializer import RenderOptions, build_ast, build_text
from sdl_transpiler.type_expressions import is_generic_match

logger = logging.getLogger(__name__)

ALIAS_ANNOTATION = "alias"

__all__ = [
    "SchemaTranspiler",
    "get_schema_ast",
    "is_generic_match",
    "register_alias",
    "set_alias_function",
    "transpile_schema",
]


def _directive_declarations(annotations: list[MetadataAnnotation]) -> list[Declaration]:
    """Turn extracted directive definitions into DIRECTIVE declarations."""
    return [
        Declaration(kind=DIRECTIVE, name=a.declaration_name, raw=a.body)
        for a in annotations
        if a.name == DIRECTIVE_ANNOTATION
    ]


def _template_aliases(annotations: list[MetadataAnnotation]) -> dict[str, str]:
    """Map template base names to the alias key given by `@alias(key)`."""
    aliases: dict[str, str] = {}
    for a in annotations:
        if a.name != ALIAS_ANNOTATION or not a.body:
            continue
        parsed = read_name(a.declaration_name)
        if parsed is not None and parsed[1]:
            aliases[parsed[0].split("<", 1)[0]] = a.body.strip().strip("\"'")
    return aliases


class SchemaTranspiler:
    """Runs the full pipeline with a fixed alias and layout setup."""

    def __init__(
        self,
        alias_function: AliasFunction | None = None,
        named_aliases: dict[str, AliasFunction] | None = None,
        render_options: RenderOptions | None = None,
        max_generic_depth: int = DEFAULT_MAX_GENERIC_DEPTH,
    ) -> None:
        """Initialize the transpiler."""
        self.alias_function = alias_function
        self.named_aliases = dict(named_aliases or {})
        self.render_options = render_options or RenderOptions()
        self.max_generic_depth = max_generic_depth
        self.tokenizer = SchemaTokenizer()

    def set_alias_function(self, fn: AliasFunction | None) -> None:
        """Override how generic instantiations are named; None restores the default."""
        self.alias_function = fn

    def register_alias(self, key: str, fn: AliasFunction) -> None:
        """Register an alias function that templates select with `@alias(key)`."""
        self.named_aliases[key] = fn

    def get_schema_ast(self, schema_text: str) -> list[Declaration]:
        """Return every resolved declaration, instantiations included."""
        declarations, instantiations = self._run(schema_text)
        return build_ast(declarations, instantiations)

    def transpile_schema(self, schema_text: str) -> str:
        """Return standard SDL with generic templates replaced by instantiations."""
        declarations, instantiations = self._run(schema_text)
        return build_text(declarations, instantiations, self.render_options)

    def _run(
        self, schema_text: str
    ) -> tuple[list[Declaration], list[GenericInstantiation]]:
        extraction = remove_metadata_annotations(schema_text)
        annotations = extraction.annotations
        context = ResolutionContext(
            alias_function=self.alias_function,
            named_aliases=dict(self.named_aliases),
            template_aliases=_template_aliases(annotations),
            max_generic_depth=self.max_generic_depth,
        )

        bits = self.tokenizer.tokenize(extraction.plain_schema)
        declarations = DeclarationParser(context, annotations).parse_all(bits)
        attach_comments(declarations, locate_comments(extraction.plain_schema))

        interfaces = InterfaceClosureResolver(declarations, context)
        resolved = InheritanceResolver(declarations, context, interfaces).resolve_all(
            declarations
        )
        resolved.extend(_directive_declarations(annotations))

        instantiator = GenericInstantiator(resolved, context, self.render_options)
        instantiations = instantiator.instantiate_pending()
        logger.info(
            "Transpiled %s declarations with %s generic instantiations",
            len(resolved),
            len(instantiations),
        )
        return resolved, instantiations


_default = SchemaTranspiler()


def get_schema_ast(schema_text: str) -> list[Declaration]:
    """Return the resolved declarations of a schema."""
    return _default.get_schema_ast(schema_text)


def transpile_schema(schema_text: str) -> str:
    """Transpile extended SDL into standard SDL."""
    return _default.transpile_schema(schema_text)


def set_alias_function(fn: AliasFunction | None) -> None:
    """Set the alias function used by the module-level entry points."""
    _default.set_alias_function(fn)


def register_alias(key: str, fn: AliasFunction) -> None:
    """Register a named alias function for the module-level entry points."""
    _default.register_alias(key, fn)

"""Tests for generic template instantiation."""

import pytest

from sdl_transpiler.declaration_parser import DeclarationParser
from sdl_transpiler.errors import (
    CyclicGenericError,
    GenericArityError,
    MissingGenericTemplateError,
    NotGenericError,
)
from sdl_transpiler.generic_instantiation import GenericInstantiation
from sdl_transpiler.generic_instantiator import GenericInstantiator
from sdl_transpiler.inheritance_resolver import InheritanceResolver
from sdl_transpiler.resolution_context import ResolutionContext
from sdl_transpiler.schema_tokenizer import SchemaTokenizer

PAGED = "type Paged<T> {\n  items: [T]\n  total: Int\n}\n"


def instantiate(
    text: str, context: ResolutionContext | None = None
) -> dict[str, GenericInstantiation]:
    """Run the pipeline up to instantiation and return instantiations by alias."""
    context = context or ResolutionContext()
    declarations = DeclarationParser(context).parse_all(SchemaTokenizer().tokenize(text))
    resolved = InheritanceResolver(declarations, context).resolve_all(declarations)
    GenericInstantiator(resolved, context).instantiate_pending()
    return context.instantiations


def result_names(inst: GenericInstantiation) -> list[str]:
    """Return the resolved result type of every property."""
    return [p.result.resolved_name for p in inst.declaration.properties if p.result]


def test_instantiate_default_alias() -> None:
    """Verify `Paged<Product>` becomes `PagedProduct` with T substituted."""
    instantiations = instantiate(PAGED + "type Query {\n  products: Paged<Product>\n}")
    assert list(instantiations) == ["PagedProduct"]
    inst = instantiations["PagedProduct"]
    assert inst.declaration.name == "PagedProduct"
    assert inst.declaration.generic_parameters is None
    assert result_names(inst) == ["[Product]", "Int"]
    assert inst.text == "type PagedProduct {\n    items: [Product]\n    total: Int\n}"


def test_instantiation_is_reused() -> None:
    """Verify two uses of the same generic share one instantiation."""
    context = ResolutionContext()
    declarations = DeclarationParser(context).parse_all(
        SchemaTokenizer().tokenize(
            PAGED + "type Query {\n  a: Paged<Product>\n  b: [Paged<Product>!]\n}"
        )
    )
    instantiator = GenericInstantiator(declarations, context)
    assert instantiator.instantiate_core("Paged<Product>") == "PagedProduct"
    first = context.instantiations["PagedProduct"]
    assert instantiator.instantiate_core("Paged< Product >") == "PagedProduct"
    instantiator.instantiate_pending()
    assert context.instantiations["PagedProduct"] is first
    assert len(context.instantiations) == 1


def test_nested_template_use() -> None:
    """Verify a template using another template with its own parameter."""
    instantiations = instantiate(
        PAGED + "type Box<T> {\n  page: Paged<T>\n}\ntype Query {\n  box: Box<Product>\n}"
    )
    assert result_names(instantiations["BoxProduct"]) == ["PagedProduct"]
    assert result_names(instantiations["PagedProduct"]) == ["[Product]", "Int"]


def test_generic_argument_is_instantiated() -> None:
    """Verify a generic argument is instantiated when substituted."""
    instantiations = instantiate(PAGED + "type Query {\n  pages: Paged<Paged<Product>>\n}")
    assert result_names(instantiations["PagedPagedProduct"]) == ["[PagedProduct]", "Int"]
    assert "PagedProduct" in instantiations


def test_parameter_types_are_substituted() -> None:
    """Verify template parameters used in arguments are substituted."""
    instantiations = instantiate(
        "type Finder<T> {\n  find(where: T, first: Int = 10): [T]\n}\n"
        "type Query {\n  users: Finder<User>\n}"
    )
    prop = instantiations["FinderUser"].declaration.properties[0]
    assert prop.parameters is not None
    assert [p.type.resolved_name for p in prop.parameters] == ["User", "Int"]
    assert prop.parameters[1].default_value == "10"


def test_self_referencing_template() -> None:
    """Verify a template may refer to its own instantiation."""
    instantiations = instantiate(
        "type Node<T> {\n  value: T\n  children: [Node<T>]\n}\ntype Query {\n  tree: Node<Int>\n}"
    )
    assert result_names(instantiations["NodeInt"]) == ["Int", "[NodeInt]"]


def test_template_attributes_are_carried() -> None:
    """Verify comments, directive and interfaces carry over to the instantiation."""
    context = ResolutionContext()
    text = (
        "interface Node {\n  id: ID\n}\n"
        "type Paged<T> implements Node @cache {\n  items: [T]\n}\n"
        "type Query {\n  products: Paged<Product>\n}"
    )
    declarations = DeclarationParser(context).parse_all(SchemaTokenizer().tokenize(text))
    declarations[1].comments = "# paged list"
    resolved = InheritanceResolver(declarations, context).resolve_all(declarations)
    GenericInstantiator(resolved, context).instantiate_pending()
    decl = context.instantiations["PagedProduct"].declaration
    assert decl.comments == "# paged list"
    assert decl.directive == "@cache"
    assert decl.implements == ["Node"]


def test_arity_mismatch() -> None:
    """Verify a two-parameter template used with one argument fails."""
    with pytest.raises(GenericArityError):
        instantiate(
            "type Pair<A, B> {\n  first: A\n  second: B\n}\ntype Query {\n  p: Pair<Product>\n}"
        )


def test_missing_template() -> None:
    """Verify a generic use without a template fails."""
    with pytest.raises(MissingGenericTemplateError):
        instantiate("type Query {\n  p: Nope<Product>\n}")


def test_not_generic() -> None:
    """Verify a generic use of a plain declaration fails."""
    with pytest.raises(NotGenericError):
        instantiate("type Product { id: ID }\ntype Query {\n  p: Product<Int>\n}")


def test_runaway_nesting_is_cyclic() -> None:
    """Verify a template that keeps growing its own arguments stops with an error."""
    text = (
        "type Wrap<T> {\n  value: T\n}\n"
        "type Box<T> {\n  inner: Box<Wrap<T>>\n}\n"
        "type Query {\n  b: Box<Int>\n}"
    )
    with pytest.raises(CyclicGenericError):
        instantiate(text, ResolutionContext(max_generic_depth=5))

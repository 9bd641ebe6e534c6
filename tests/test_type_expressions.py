"""Tests for type expression helpers and generic aliasing."""

import pytest

from sdl_transpiler.errors import GenericArityError, InvalidAliasError, SchemaSyntaxError
from sdl_transpiler.generic_alias import default_alias, format_alias
from sdl_transpiler.lexing import find_top_level, split_top_level
from sdl_transpiler.resolution_context import ResolutionContext
from sdl_transpiler.type_expressions import (
    is_generic_match,
    normalize_generic,
    split_decoration,
    split_generic,
    substitute_generics,
)


def test_split_decoration() -> None:
    """Verify list and non-null markers are split off the core type."""
    assert split_decoration("[Paged<Product>!]!") == ("[", "Paged<Product>", "!]!")
    assert split_decoration("ID") == ("", "ID", "")
    assert split_decoration("[ [Tag] ]") == ("[[", "Tag", "]]")


def test_split_decoration_unbalanced() -> None:
    """Verify an unclosed generic argument list is a syntax error."""
    with pytest.raises(SchemaSyntaxError):
        split_decoration("Paged<Product")


def test_split_decoration_trailing_text() -> None:
    """Verify only list and non-null markers may follow the core type."""
    with pytest.raises(SchemaSyntaxError):
        split_decoration("Pair<Int, String> y: Pair<ID, ID>")
    with pytest.raises(SchemaSyntaxError):
        split_decoration("[Int]! extra")


def test_split_and_normalize_generic() -> None:
    """Verify generic uses are split and spaced canonically."""
    assert split_generic("Pair<User, Tag>") == ("Pair", ["User", "Tag"])
    assert split_generic("Product") == ("Product", [])
    assert normalize_generic("Pair<A,B>") == "Pair<A, B>"
    assert normalize_generic("Paged< [ Product ] >") == "Paged<[Product]>"


def test_is_generic_match() -> None:
    """Verify type parameters are found as whole identifiers."""
    assert is_generic_match("Paged<T>", ["T"])
    assert is_generic_match("[T!]", "T")
    assert is_generic_match("Pair<K, V>", "K, V")
    assert not is_generic_match("Tag", ["T"])
    assert not is_generic_match(None, ["T"])
    assert not is_generic_match("T", None)


def test_substitute_generics() -> None:
    """Verify parameters are replaced positionally."""
    assert substitute_generics("[Paged<T>]!", ["T"], ["Product"]) == "[Paged<Product>]!"
    assert substitute_generics("Pair<B, A>", ["A", "B"], ["X", "Y"]) == "Pair<Y, X>"


def test_substitute_generics_arity() -> None:
    """Verify a parameter/argument count mismatch is an arity error."""
    with pytest.raises(GenericArityError):
        substitute_generics("T", ["A", "B"], ["X"])


def test_top_level_helpers_ignore_nesting() -> None:
    """Verify separators inside brackets and strings are ignored."""
    assert split_top_level('a, b(c, d), "e, f"') == ["a", "b(c, d)", '"e, f"']
    assert find_top_level("x(@a) @b", "@") == len("x(@a) ")


def test_default_alias() -> None:
    """Verify the default alias concatenates base and argument names."""
    assert default_alias("Paged", ["Product"]) == "PagedProduct"
    assert default_alias("Pair", ["User", "Tag"]) == "PairUserTag"


def test_format_alias() -> None:
    """Verify format-string aliases."""
    assert format_alias("{0}Page")(["Product"]) == "ProductPage"
    assert format_alias("{args}Connection")(["A", "B"]) == "ABConnection"
    with pytest.raises(InvalidAliasError):
        format_alias("{1}")(["A"])


def test_alias_name_nested_and_decorated() -> None:
    """Verify nested generic arguments use their own alias."""
    context = ResolutionContext()
    assert context.alias_name("Paged<Paged<Product>>") == "PagedPagedProduct"
    assert context.alias_name("Paged<[Product!]>") == "PagedProduct"
    assert context.alias_names["Paged<Product>"] == "PagedProduct"


def test_alias_name_empty_argument() -> None:
    """Verify an empty argument list is an arity error."""
    with pytest.raises(GenericArityError):
        ResolutionContext().alias_name("Paged<>")


def test_alias_name_custom_function() -> None:
    """Verify a custom alias function is used and checked."""
    context = ResolutionContext(alias_function=lambda args: f"{args[0]}Page")
    assert context.alias_name("Paged<Product>") == "ProductPage"

    bad = ResolutionContext(alias_function=lambda args: "not a name")
    with pytest.raises(InvalidAliasError):
        bad.alias_name("Paged<Product>")

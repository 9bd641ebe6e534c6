"""Tests for rendering declarations."""

import json

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.declaration_kinds import ABSTRACT, DIRECTIVE, INTERFACE, SCALAR, TYPE, UNION
from sdl_transpiler.generic_instantiation import GenericInstantiation
from sdl_transpiler.schema_property import Parameter, Property
from sdl_transpiler.serializer import (
    RenderOptions,
    build_ast,
    build_text,
    declaration_to_dict,
    render_declaration,
    render_property,
)
from sdl_transpiler.type_reference import TypeReference


def ref(name: str, directive: str | None = None) -> TypeReference:
    """Build a plain resolved type reference."""
    return TypeReference(name, False, name, directive=directive)


def user() -> Declaration:
    """Build a small resolved type."""
    return Declaration(
        kind=TYPE,
        name="User",
        implements=["Node", "Named"],
        directive="@key",
        comments="# a user",
        properties=[Property("id", result=ref("ID!"))],
    )


def test_render_property() -> None:
    """Verify parameters, defaults, directives and comments of a property."""
    prop = Property(
        name="products",
        comments="# list",
        parameters=[Parameter("first", ref("Int"), "10")],
        result=ref("[Product]", "@auth"),
    )
    assert render_property(prop) == "    # list\n    products(first: Int = 10): [Product] @auth"


def test_render_inline_comment() -> None:
    """Verify an inline comment is rendered after its property on the same line."""
    prop = Property("id", comments="# key", result=ref("ID!"), inline_comment="# the id")
    assert render_property(prop) == "    # key\n    id: ID! # the id"


def test_render_enum_value() -> None:
    """Verify a result-less property keeps its own directive."""
    assert render_property(Property("RED", directive="@deprecated")) == "    RED @deprecated"


def test_render_declaration() -> None:
    """Verify the header, interfaces and body of a type."""
    assert render_declaration(user()) == (
        "# a user\ntype User implements Node, Named @key {\n    id: ID!\n}"
    )


def test_render_declaration_with_options() -> None:
    """Verify indentation and the implements separator are configurable."""
    options = RenderOptions(indent=2, implements_separator=" & ")
    assert render_declaration(user(), options) == (
        "# a user\ntype User implements Node & Named @key {\n  id: ID!\n}"
    )


def test_render_description_before_comments() -> None:
    """Verify a description is written above the comment block."""
    decl = Declaration(kind=TYPE, name="A", description='"An A"', comments="# note")
    assert render_declaration(decl) == '"An A"\n# note\ntype A {}'


def test_render_statement_kinds() -> None:
    """Verify scalars, unions and body-less extensions."""
    scalar = Declaration(kind=SCALAR, name="Date", directive='@specifiedBy(url: "x")')
    union = Declaration(kind=UNION, name="SearchResult", members=[ref("A"), ref("B")])
    extension = Declaration(kind=TYPE, name="A", is_extend=True, directive="@key")
    assert render_declaration(scalar) == 'scalar Date @specifiedBy(url: "x")'
    assert render_declaration(union) == "union SearchResult = A | B"
    assert render_declaration(extension) == "extend type A @key"


def test_render_closing_comments() -> None:
    """Verify comments after the last property stay inside the block."""
    decl = Declaration(
        kind=TYPE, name="A", properties=[Property("id", result=ref("ID"))], closing_comments="# end"
    )
    assert render_declaration(decl) == "type A {\n    id: ID\n    # end\n}"


def test_build_text_filters_and_orders() -> None:
    """Verify templates and abstract declarations are dropped and kinds grouped."""
    declarations = [
        Declaration(kind=TYPE, name="Query", properties=[Property("a", result=ref("Int"))]),
        Declaration(kind=INTERFACE, name="Node", properties=[Property("id", result=ref("ID"))]),
        Declaration(kind=TYPE, name="Paged<T>", generic_parameters=["T"]),
        Declaration(kind=ABSTRACT, name="Base"),
        Declaration(kind=DIRECTIVE, name="auth", raw="directive @auth on FIELD_DEFINITION"),
    ]
    paged = Declaration(kind=TYPE, name="PagedInt")
    text = build_text(declarations, [GenericInstantiation("PagedInt", paged, "type PagedInt {}")])
    blocks = text.strip().split("\n\n")
    assert blocks == [
        "directive @auth on FIELD_DEFINITION",
        "interface Node {\n    id: ID\n}",
        "type Query {\n    a: Int\n}",
        "type PagedInt {}",
    ]
    assert build_text([]) == ""


def test_build_ast_appends_instantiations() -> None:
    """Verify the AST keeps templates and appends instantiations."""
    template = Declaration(kind=TYPE, name="Paged<T>", generic_parameters=["T"])
    paged = Declaration(kind=TYPE, name="PagedInt")
    ast = build_ast([template], [GenericInstantiation("PagedInt", paged, "")])
    assert ast == [template, paged]


def test_declaration_to_dict_is_json_ready() -> None:
    """Verify declarations convert to plain JSON-serializable data."""
    data = declaration_to_dict(user())
    assert data["name"] == "User"
    assert data["properties"][0]["result"]["resolved_name"] == "ID!"
    assert json.loads(json.dumps(data)) == data

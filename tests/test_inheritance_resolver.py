"""Tests for inheritance and interface closure resolution."""

import pytest

from sdl_transpiler.declaration import Declaration
from sdl_transpiler.declaration_parser import DeclarationParser
from sdl_transpiler.errors import (
    CyclicInheritanceError,
    CyclicInterfaceError,
    InvalidInheritanceError,
    MissingAncestorError,
    MissingInterfaceError,
    NotAnInterfaceError,
)
from sdl_transpiler.inheritance_resolver import InheritanceResolver
from sdl_transpiler.metadata_extractor import remove_metadata_annotations
from sdl_transpiler.resolution_context import ResolutionContext
from sdl_transpiler.schema_tokenizer import SchemaTokenizer


def resolve(text: str, context: ResolutionContext | None = None) -> dict[str, Declaration]:
    """Parse and resolve a schema, returning non-extend declarations by name."""
    context = context or ResolutionContext()
    extraction = remove_metadata_annotations(text)
    declarations = DeclarationParser(context, extraction.annotations).parse_all(
        SchemaTokenizer().tokenize(extraction.plain_schema)
    )
    resolved = InheritanceResolver(declarations, context).resolve_all(declarations)
    return {d.name: d for d in resolved if not d.is_extend}


def names(decl: Declaration) -> list[str]:
    """Return the property names of a declaration."""
    return [p.name for p in decl.properties]


def test_inherited_properties_come_first() -> None:
    """Verify ancestors' properties precede the declaration's own."""
    resolved = resolve("type A {\n  p1: Int\n  p2: Int\n}\ntype B inherits A {\n  p3: Int\n}")
    assert names(resolved["B"]) == ["p1", "p2", "p3"]
    original = resolved["B"].original_properties
    assert original is not None
    assert [p.name for p in original] == ["p3"]
    assert names(resolved["A"]) == ["p1", "p2"]


def test_multiple_ancestors_in_list_order() -> None:
    """Verify several ancestors are merged in the order they are listed."""
    resolved = resolve(
        "type A { a: Int }\ntype C { c: Int }\ntype Base inherits C { b: Int }\n"
        "type D inherits A, Base { d: Int }"
    )
    assert names(resolved["D"]) == ["a", "c", "b", "d"]


def test_redeclared_property_is_kept_twice() -> None:
    """Verify inheritance does not de-duplicate property names."""
    resolved = resolve("type A { id: ID }\ntype B inherits A { id: ID! }")
    assert names(resolved["B"]) == ["id", "id"]


def test_type_may_inherit_interface() -> None:
    """Verify a type can take its fields from an interface."""
    resolved = resolve("interface Node { id: ID! }\ntype User inherits Node { name: String }")
    assert names(resolved["User"]) == ["id", "name"]


def test_missing_ancestor() -> None:
    """Verify inheriting from an unknown name fails."""
    with pytest.raises(MissingAncestorError) as exc:
        resolve("type B inherits Nope { x: Int }")
    assert exc.value.name == "B"
    assert exc.value.reference == "Nope"
    assert str(exc.value).startswith("Schema error:")


def test_invalid_inheritance_kind() -> None:
    """Verify a type cannot inherit from an input."""
    with pytest.raises(InvalidInheritanceError):
        resolve("input I { x: Int }\ntype T inherits I { y: Int }")


def test_extend_fragment_is_not_an_ancestor() -> None:
    """Verify only base declarations can be inherited from."""
    with pytest.raises(MissingAncestorError):
        resolve("extend type A { x: Int }\ntype B inherits A { y: Int }")


def test_inheritance_cycle() -> None:
    """Verify mutual inheritance raises instead of recursing forever."""
    with pytest.raises(CyclicInheritanceError, match="A -> B -> A"):
        resolve("type A inherits B { a: Int }\ntype B inherits A { b: Int }")


def test_self_inheritance() -> None:
    """Verify a declaration inheriting from itself is a cycle."""
    with pytest.raises(CyclicInheritanceError):
        resolve("type A inherits A { a: Int }")


def test_metadata_falls_back_to_ancestor() -> None:
    """Verify a declaration without metadata takes its nearest ancestor's."""
    resolved = resolve(
        "@node\ntype A { a: Int }\n@edge\ntype C { c: Int }\ntype B inherits A, C { b: Int }"
    )
    metadata = resolved["B"].metadata
    assert metadata is not None
    assert metadata.name == "edge"


def test_resolution_is_memoized_in_context() -> None:
    """Verify every resolved declaration is cached for the call."""
    context = ResolutionContext()
    resolved = resolve("type A { a: Int }\ntype B inherits A { b: Int }", context)
    assert context.resolved[resolved["A"].key] is resolved["A"]
    assert context.resolving == []


def test_interface_closure_is_transitive() -> None:
    """Verify implementing I2 also implements what I2 implements."""
    resolved = resolve(
        "interface I1 { a: Int }\ninterface I2 implements I1 { b: Int }\n"
        "type T implements I2 { c: Int }"
    )
    assert resolved["T"].implements == ["I2", "I1"]
    assert resolved["I2"].implements == ["I1"]


def test_interface_closure_deduplicates() -> None:
    """Verify interfaces reached twice are listed once."""
    resolved = resolve(
        "interface I1 { a: Int }\ninterface I2 implements I1 { b: Int }\n"
        "type T implements I2, I1 { c: Int }"
    )
    assert resolved["T"].implements == ["I2", "I1"]


def test_interfaces_inherited_from_ancestor() -> None:
    """Verify an ancestor's interfaces are carried to the child."""
    resolved = resolve(
        "interface Node { id: ID }\ntype Base implements Node { id: ID }\n"
        "type User inherits Base { name: String }"
    )
    assert resolved["User"].implements == ["Node"]


def test_missing_interface() -> None:
    """Verify implementing an unknown interface fails."""
    with pytest.raises(MissingInterfaceError):
        resolve("type T implements Nope { a: Int }")


def test_not_an_interface() -> None:
    """Verify implementing a non-interface fails."""
    with pytest.raises(NotAnInterfaceError):
        resolve("type Other { a: Int }\ntype T implements Other { a: Int }")


def test_interface_cycle() -> None:
    """Verify mutually implementing interfaces raise."""
    with pytest.raises(CyclicInterfaceError):
        resolve("interface A implements B { a: Int }\ninterface B implements A { b: Int }")


def test_interface_self_cycle() -> None:
    """Verify an interface implementing itself raises."""
    with pytest.raises(CyclicInterfaceError):
        resolve("interface A implements A { a: Int }")


def test_generic_template_is_not_an_ancestor() -> None:
    """Verify a generic template cannot be inherited from without arguments."""
    with pytest.raises(InvalidInheritanceError, match="generic template"):
        resolve("type Base<T> {\n  item: T\n}\ntype C inherits Base {\n  x: Int\n}")

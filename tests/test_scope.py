"""Tests for global-binding resolution of identifiers."""
import pytest

from conftest import find_nodes
from ssrlint.analyzer.scope import ScopeResolver


def global_flags(root, name):
    """is_global_identifier() for every `name` identifier, in source order."""
    resolver = ScopeResolver()
    return [resolver.is_global_identifier(node) for node in find_nodes(root, 'identifier', name)]


def test_undeclared_name_is_global(parse):
    assert global_flags(parse("window.alert('x');"), 'window') == [True]


def test_parameter_shadows_global(parse):
    root = parse("function f(window) { return window; }")
    assert global_flags(root, 'window') == [False, False]


def test_default_parameter_value_still_sees_global(parse):
    root = parse("function f(w = window) { return w; }")
    assert global_flags(root, 'window') == [True]


def test_arrow_single_parameter_shadows_global(parse):
    root = parse("const f = document => document.title;")
    assert global_flags(root, 'document') == [False, False]


def test_destructured_declaration_shadows_global(parse):
    root = parse("const { document, nested: { location } } = env;\ndocument;\nlocation;")

    assert global_flags(root, 'document') == [False]
    assert global_flags(root, 'location') == [False]


def test_module_level_declarations_are_not_global(parse):
    root = parse("import history from 'h';\nvar navigator = {};\nhistory; navigator;")

    assert global_flags(root, 'history') == [False, False]
    assert global_flags(root, 'navigator') == [False, False]


def test_block_scoped_declaration_does_not_leak(parse):
    root = parse("if (a) { let window = 1; window; }\nwindow;")
    assert global_flags(root, 'window') == [False, False, True]


def test_var_is_hoisted_to_function_scope(parse):
    root = parse("function g() { if (a) { var screen = 1; } return screen; }\nscreen;")
    assert global_flags(root, 'screen') == [False, False, True]


def test_catch_parameter_shadows_global(parse):
    root = parse("try { run(); } catch (location) { location; }\nlocation;")
    assert global_flags(root, 'location') == [False, False, True]


@pytest.mark.parametrize("code", [
    "for (const location of items) { location; }",
    "for (let location = 0; location < 3; location++) { location; }",
])
def test_loop_head_declarations_shadow_global(parse, code):
    assert not any(global_flags(parse(code), 'location'))


def test_named_function_expression_binds_its_own_name(parse):
    root = parse("const f = function window() { return window; };")
    assert global_flags(root, 'window') == [False, False]


def test_method_parameters_shadow_global(parse):
    root = parse("class A { connectedCallback(window) { return window; } }")
    assert global_flags(root, 'window') == [False, False]


def test_declared_names_are_cached_per_scope(parse):
    root = parse("function f(a) { const b = 1; }")
    resolver = ScopeResolver()
    function = find_nodes(root, 'function_declaration')[0]

    first = resolver.declared_names(function)
    assert first == {'a', 'b'}
    assert resolver.declared_names(function) is first

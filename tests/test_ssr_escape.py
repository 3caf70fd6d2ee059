"""Tests for SSR escape-guard recognition."""
import pytest

from conftest import find_nodes
from ssrlint.analyzer.ssr import is_ssr_escape


def first_if(parse, code):
    return find_nodes(parse(code), 'if_statement')[0]


@pytest.mark.parametrize("condition", [
    "!import.meta.env.SSR",
    "typeof window !== 'undefined'",
    "typeof document != 'undefined'",
    "'undefined' !== typeof window",
    '(typeof window !== "undefined")',
    "typeof window !== 'undefined' && this.ready",
    "this.ready && !import.meta.env.SSR",
])
def test_recognized_guards(parse, condition):
    assert is_ssr_escape(first_if(parse, f"if ({condition}) {{ run(); }}"))


@pytest.mark.parametrize("condition", [
    "import.meta.env.SSR",
    "typeof window === 'undefined'",
    "typeof navigator !== 'undefined'",
    "typeof window !== 'object'",
    "typeof window !== 'undefined' || fallback",
    "!import.meta.env.DEV",
    "isBrowser",
])
def test_other_conditions_are_not_guards(parse, condition):
    assert not is_ssr_escape(first_if(parse, f"if ({condition}) {{ run(); }}"))


def test_non_if_nodes_are_never_guards(parse):
    root = parse("typeof window !== 'undefined' ? a() : b();")
    assert not is_ssr_escape(root)

"""Shared fixtures for ssrlint tests."""
from pathlib import Path

import pytest

from ssrlint.analyzer.linter import Linter
from ssrlint.analyzer.parser import LanguageParser
from ssrlint.config import reset_config


FIXTURES_DIR = Path(__file__).parent / 'fixtures' / 'components'


@pytest.fixture
def parse():
    """Parse JavaScript source and return the program node."""
    parser = LanguageParser('javascript')

    def _parse(code: str):
        return parser.parse_source(code).root_node

    return _parse


@pytest.fixture
def lint():
    """Lint JavaScript source with the given rules and return its violations."""
    def _lint(code: str, *rule_ids: str, options=None):
        return Linter(rule_ids, options=options).lint_source(code).violations

    return _lint


@pytest.fixture(autouse=True)
def fresh_config():
    """Each test starts from a config singleton that re-reads the environment."""
    reset_config()
    yield
    reset_config()


def find_nodes(root, node_type: str, text: str = None):
    """All descendants of root with the given type (and source text)."""
    found = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == node_type and (text is None or node.text.decode('utf-8') == text):
            found.append(node)
        stack.extend(reversed(node.children))
    return sorted(found, key=lambda n: n.start_byte)

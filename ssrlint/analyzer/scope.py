"""Scope-aware resolution of identifier references.

Answers one question for the SSR rules: does this identifier refer to the
global namespace, or to a local declaration that happens to share the name
of a browser global (a parameter called `window`, a `const document = ...`)?

Module-level declarations count as local: component files are ES modules,
so top-level bindings never land on the global object.
"""
from typing import Dict, FrozenSet, Iterator, Optional, Set
from tree_sitter import Node

from .nodes import FUNCTION_TYPES, FUNCTION_EXPRESSION_TYPES, node_text

FUNCTION_SCOPE_TYPES = FUNCTION_TYPES | {'method_definition'}

BLOCK_SCOPE_TYPES = {
    'statement_block',
    'for_statement',
    'for_in_statement',
    'catch_clause',
    'switch_body',
    'class',
}

SCOPE_TYPES = FUNCTION_SCOPE_TYPES | BLOCK_SCOPE_TYPES | {'program'}


def pattern_names(pattern: Optional[Node]) -> Iterator[str]:
    """Yield every name bound by a declaration target or destructuring pattern."""
    if pattern is None:
        return
    kind = pattern.type

    if kind in ('identifier', 'shorthand_property_identifier_pattern'):
        yield node_text(pattern)
    elif kind == 'pair_pattern':
        yield from pattern_names(pattern.child_by_field_name('value'))
    elif kind in ('assignment_pattern', 'object_assignment_pattern'):
        yield from pattern_names(pattern.child_by_field_name('left'))
    elif kind in ('required_parameter', 'optional_parameter'):
        # TypeScript parameters wrap the binding pattern
        yield from pattern_names(pattern.child_by_field_name('pattern'))
    elif kind in ('object_pattern', 'array_pattern', 'rest_pattern', 'formal_parameters'):
        for child in pattern.named_children:
            yield from pattern_names(child)


def _declarator_names(declaration: Node) -> Iterator[str]:
    for declarator in declaration.named_children:
        if declarator.type == 'variable_declarator':
            yield from pattern_names(declarator.child_by_field_name('name'))


def _import_names(statement: Node) -> Iterator[str]:
    for clause in statement.named_children:
        if clause.type != 'import_clause':
            continue
        for child in clause.named_children:
            if child.type == 'identifier':
                yield node_text(child)
            elif child.type == 'namespace_import':
                for ns_child in child.named_children:
                    if ns_child.type == 'identifier':
                        yield node_text(ns_child)
            elif child.type == 'named_imports':
                for specifier in child.named_children:
                    if specifier.type != 'import_specifier':
                        continue
                    alias = specifier.child_by_field_name('alias')
                    name = alias if alias is not None else specifier.child_by_field_name('name')
                    if name is not None and name.type == 'identifier':
                        yield node_text(name)


def lexical_names(statements: Node) -> Iterator[str]:
    """Names declared by block-scoped statements directly inside a statement list."""
    for statement in statements.named_children:
        kind = statement.type

        if kind == 'export_statement':
            declaration = statement.child_by_field_name('declaration')
            if declaration is None:
                continue
            statement, kind = declaration, declaration.type

        if kind == 'lexical_declaration':
            yield from _declarator_names(statement)
        elif kind in ('class_declaration', 'function_declaration', 'generator_function_declaration'):
            name = statement.child_by_field_name('name')
            if name is not None:
                yield node_text(name)
        elif kind == 'import_statement':
            yield from _import_names(statement)
        elif kind == 'switch_case' or kind == 'switch_default':
            yield from lexical_names(statement)


def hoisted_var_names(root: Node) -> Iterator[str]:
    """Names declared with `var` anywhere below root, without entering nested functions."""
    stack = list(root.named_children)
    while stack:
        node = stack.pop()
        if node.type in FUNCTION_SCOPE_TYPES or node.type == 'class_body':
            continue
        if node.type == 'variable_declaration':
            yield from _declarator_names(node)
        elif node.type == 'for_in_statement' and _for_in_kind(node) == 'var':
            yield from pattern_names(node.child_by_field_name('left'))
        stack.extend(node.named_children)


def _for_in_kind(node: Node) -> Optional[str]:
    """Declaration keyword of a for-in/for-of head, None for plain assignment targets."""
    for child in node.children:
        if child.type in ('var', 'let', 'const'):
            return child.type
        if child.type in ('in', 'of'):
            break
    return None


class ScopeResolver:
    """Resolves identifiers against the scopes enclosing them in one syntax tree.

    Declared names are computed lazily per scope node and cached, so a full
    traversal costs one pass over each scope's own statements.
    """

    def __init__(self):
        # scope node id -> names declared by that scope
        self._declared: Dict[int, FrozenSet[str]] = {}

    def is_global_identifier(self, identifier: Node) -> bool:
        """True when no enclosing scope declares the identifier's name."""
        name = node_text(identifier)
        if not name:
            return False

        scope = identifier.parent
        while scope is not None:
            if scope.type in SCOPE_TYPES and name in self.declared_names(scope):
                return False
            scope = scope.parent
        return True

    def declared_names(self, scope: Node) -> FrozenSet[str]:
        cached = self._declared.get(scope.id)
        if cached is None:
            cached = frozenset(self._collect(scope))
            self._declared[scope.id] = cached
        return cached

    def _collect(self, scope: Node) -> Set[str]:
        kind = scope.type
        names: Set[str] = set()

        if kind == 'program':
            names.update(lexical_names(scope))
            names.update(hoisted_var_names(scope))

        elif kind in FUNCTION_SCOPE_TYPES:
            names.update(pattern_names(scope.child_by_field_name('parameters')))
            # Arrow functions with a single bare parameter: x => ...
            names.update(pattern_names(scope.child_by_field_name('parameter')))
            if kind in FUNCTION_EXPRESSION_TYPES:
                own_name = scope.child_by_field_name('name')
                if own_name is not None:
                    names.add(node_text(own_name))
            body = scope.child_by_field_name('body')
            if body is not None and body.type == 'statement_block':
                names.update(lexical_names(body))
                names.update(hoisted_var_names(body))

        elif kind == 'statement_block':
            # Function bodies are covered by the function scope itself
            if scope.parent is None or scope.parent.type not in FUNCTION_SCOPE_TYPES:
                names.update(lexical_names(scope))

        elif kind == 'for_statement':
            initializer = scope.child_by_field_name('initializer')
            if initializer is not None and initializer.type == 'lexical_declaration':
                names.update(_declarator_names(initializer))

        elif kind == 'for_in_statement':
            if _for_in_kind(scope) in ('let', 'const'):
                names.update(pattern_names(scope.child_by_field_name('left')))

        elif kind == 'catch_clause':
            names.update(pattern_names(scope.child_by_field_name('parameter')))

        elif kind == 'switch_body':
            names.update(lexical_names(scope))

        elif kind == 'class':
            # Named class expressions bind their own name inside the body
            own_name = scope.child_by_field_name('name')
            if own_name is not None:
                names.add(node_text(own_name))

        return names

"""Recognition of conditionals that keep their body from running during SSR."""
from typing import Optional
from tree_sitter import Node

from .nodes import (
    is_identifier_named,
    node_text,
    property_name,
    unwrap_parentheses,
)

# Globals whose `typeof` check is an accepted browser-only guard
GUARDED_GLOBALS = {'window', 'document'}

INEQUALITY_OPERATORS = {'!==', '!='}


def _operator(node: Node) -> Optional[str]:
    operator = node.child_by_field_name('operator')
    return operator.type if operator is not None else None


def _is_import_meta_env_ssr(node: Optional[Node]) -> bool:
    """Matches `import.meta.env.SSR`."""
    node = unwrap_parentheses(node)
    if node is None or node.type != 'member_expression' or property_name(node) != 'SSR':
        return False
    env = node.child_by_field_name('object')
    if env is None or env.type != 'member_expression' or property_name(env) != 'env':
        return False
    # meta_property in current grammars; older ones parse it as a member access
    meta = env.child_by_field_name('object')
    return meta is not None and ''.join(node_text(meta).split()) == 'import.meta'


def _is_not_ssr(node: Node) -> bool:
    """Matches `!import.meta.env.SSR`."""
    return (
        node.type == 'unary_expression'
        and _operator(node) == '!'
        and _is_import_meta_env_ssr(node.child_by_field_name('argument'))
    )


def _is_typeof_guarded_global(node: Optional[Node]) -> bool:
    node = unwrap_parentheses(node)
    if node is None or node.type != 'unary_expression' or _operator(node) != 'typeof':
        return False
    argument = unwrap_parentheses(node.child_by_field_name('argument'))
    return any(is_identifier_named(argument, name) for name in GUARDED_GLOBALS)


def _is_undefined_literal(node: Optional[Node]) -> bool:
    node = unwrap_parentheses(node)
    return node is not None and node.type == 'string' and node_text(node)[1:-1] == 'undefined'


def _is_typeof_defined_check(node: Node) -> bool:
    """Matches `typeof window !== 'undefined'` in either operand order."""
    if node.type != 'binary_expression' or _operator(node) not in INEQUALITY_OPERATORS:
        return False
    left = node.child_by_field_name('left')
    right = node.child_by_field_name('right')
    return (
        (_is_typeof_guarded_global(left) and _is_undefined_literal(right))
        or (_is_typeof_guarded_global(right) and _is_undefined_literal(left))
    )


def is_ssr_escape_condition(condition: Optional[Node]) -> bool:
    condition = unwrap_parentheses(condition)
    if condition is None:
        return False
    if _is_not_ssr(condition) or _is_typeof_defined_check(condition):
        return True
    # `guard && more` only runs its right side in the browser as well
    if condition.type == 'binary_expression' and _operator(condition) == '&&':
        return (
            is_ssr_escape_condition(condition.child_by_field_name('left'))
            or is_ssr_escape_condition(condition.child_by_field_name('right'))
        )
    return False


def is_ssr_escape(if_statement: Node) -> bool:
    """True when the if statement is a recognized SSR escape guard.

    Examples:
        if (!import.meta.env.SSR) { ... }
        if (typeof window !== 'undefined') { ... }
        if (typeof document !== 'undefined' && ready) { ... }
    """
    if if_statement.type != 'if_statement':
        return False
    return is_ssr_escape_condition(if_statement.child_by_field_name('condition'))

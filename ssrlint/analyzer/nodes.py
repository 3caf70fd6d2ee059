"""Small helpers for inspecting tree-sitter JavaScript/TypeScript nodes."""
from typing import Optional
from tree_sitter import Node

# Computed access (a[b]) is a subscript_expression in tree-sitter, a MemberExpression in ESTree
MEMBER_ACCESS_TYPES = {'member_expression', 'subscript_expression'}

FUNCTION_DECLARATION_TYPES = {'function_declaration', 'generator_function_declaration'}

# 'function' is the pre-0.21 grammar name of function_expression
FUNCTION_EXPRESSION_TYPES = {'function_expression', 'function', 'generator_function'}

FUNCTION_TYPES = FUNCTION_DECLARATION_TYPES | FUNCTION_EXPRESSION_TYPES | {'arrow_function'}

CLASS_TYPES = {'class_declaration', 'class'}


def node_text(node: Optional[Node]) -> Optional[str]:
    """Decoded source text of a node, or None when the node is missing."""
    if node is None:
        return None
    return node.text.decode('utf-8')


def same_node(first: Optional[Node], second: Optional[Node]) -> bool:
    """Identity comparison for tree-sitter nodes.

    Node wrappers are recreated on every access, so Python identity (`is`)
    never holds; the tree-sitter node id does.
    """
    if first is None or second is None:
        return False
    return first.id == second.id


def is_member_access(node: Optional[Node]) -> bool:
    return node is not None and node.type in MEMBER_ACCESS_TYPES


def is_optional_access(node: Optional[Node]) -> bool:
    """True for null-safe accesses such as `a?.b` or `a?.[b]`."""
    if node is None:
        return False
    return any(child.type in ('optional_chain', '?.') for child in node.children)


def is_object_of(node: Node, parent: Optional[Node]) -> bool:
    """True when node sits in the `object` field of a member access parent."""
    if not is_member_access(parent):
        return False
    return same_node(parent.child_by_field_name('object'), node)


def property_name(access: Optional[Node]) -> Optional[str]:
    """Name of the property read by a member access.

    For computed access only string literal keys have a name.
    """
    if access is None:
        return None
    if access.type == 'member_expression':
        return node_text(access.child_by_field_name('property'))
    if access.type == 'subscript_expression':
        index = access.child_by_field_name('index')
        if index is not None and index.type == 'string':
            return node_text(index).strip('"\'')
    return None


def is_identifier_named(node: Optional[Node], name: str) -> bool:
    return node is not None and node.type == 'identifier' and node_text(node) == name


def unwrap_parentheses(node: Optional[Node]) -> Optional[Node]:
    """Strip any number of enclosing parenthesized_expression wrappers."""
    while node is not None and node.type == 'parenthesized_expression':
        inner = [child for child in node.named_children if child.type != 'comment']
        if not inner:
            return None
        node = inner[0]
    return node


def line_and_column(node: Node):
    """1-based line and 0-based column of the node start."""
    row, column = node.start_point
    return row + 1, column

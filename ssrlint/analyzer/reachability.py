"""Tracks, during one traversal, whether the current node can run during SSR.

The tracker keeps four pieces of context, each a flag or a single node slot:

- inside the component class
- inside a module-scoped function the SSR path calls
- inside a component method the SSR path calls
- inside an if statement that keeps its body off the server

Slots are set on enter and cleared on the exit of the very same node, so an
unrelated sibling or nested node of the same kind never clears them. Source
shapes never nest two live contexts of one kind, which is why a slot is
enough and no stack is kept.
"""
from typing import Callable, Dict, Optional
from tree_sitter import Node

from .component import ModuleInfo, analyze_component
from .nodes import (
    CLASS_TYPES,
    FUNCTION_DECLARATION_TYPES,
    FUNCTION_EXPRESSION_TYPES,
    FUNCTION_TYPES,
    node_text,
    same_node,
)
from .ssr import is_ssr_escape
from .traversal import exit_key

# Ancestors that take a node out of true module scope
MODULE_SCOPE_DISQUALIFIERS = FUNCTION_TYPES | {'method_definition'}


def in_module_scope(node: Node) -> bool:
    """True when no function, arrow or method encloses the node."""
    ancestor = node.parent
    while ancestor is not None:
        if ancestor.type in MODULE_SCOPE_DISQUALIFIERS:
            return False
        ancestor = ancestor.parent
    return True


class ReachabilityTracker:
    """Traversal context answering "is this position reachable during SSR?".

    One instance per rule per traversal. Merge `listeners()` into the
    traversal driver's table, then query from the rule's own callbacks.
    """

    def __init__(self,
                 analyze: Callable[[Node], ModuleInfo] = analyze_component,
                 is_escape_guard: Callable[[Node], bool] = is_ssr_escape):
        """
        Args:
            analyze: Component-shape analyzer, called once on the program root
            is_escape_guard: Predicate recognizing SSR escape if statements
        """
        self._analyze = analyze
        self._is_escape_guard = is_escape_guard

        self.module_info: Optional[ModuleInfo] = None
        self.inside_component_class = False
        self.reachable_function: Optional[Node] = None
        self.reachable_method: Optional[Node] = None
        self.skipped_block: Optional[Node] = None

    # ------------------------------------------------------------------ queries

    def is_inside_reachable_method(self) -> bool:
        return self.inside_component_class and self.reachable_method is not None

    def is_inside_reachable_function(self) -> bool:
        return self.reachable_function is not None

    def is_inside_skipped_block(self) -> bool:
        return self.skipped_block is not None

    def is_reachable(self, node: Node) -> bool:
        """Shared gate of the global-reference and NODE_ENV rules."""
        if self.is_inside_skipped_block():
            return False
        return (self.is_inside_reachable_method()
                or self.is_inside_reachable_function()
                or in_module_scope(node))

    # ---------------------------------------------------------------- listeners

    def listeners(self) -> Dict[str, Callable[[Node], None]]:
        table = {
            'program': self.enter_program,
            'method_definition': self.enter_method,
            exit_key('method_definition'): self.exit_method,
            'if_statement': self.enter_if,
            exit_key('if_statement'): self.exit_if,
        }
        for kind in CLASS_TYPES:
            table[kind] = self.enter_class
            table[exit_key(kind)] = self.exit_class
        for kind in FUNCTION_DECLARATION_TYPES:
            table[kind] = self.enter_function_declaration
            table[exit_key(kind)] = self.exit_function
        for kind in FUNCTION_EXPRESSION_TYPES | {'arrow_function'}:
            table[kind] = self.enter_bound_function
            table[exit_key(kind)] = self.exit_function
        return table

    def enter_program(self, node: Node) -> None:
        self.module_info = self._analyze(node)

    def enter_class(self, node: Node) -> None:
        if self.module_info is not None and same_node(node, self.module_info.component_class_node):
            self.inside_component_class = True

    def exit_class(self, node: Node) -> None:
        if self.module_info is not None and same_node(node, self.module_info.component_class_node):
            self.inside_component_class = False

    def _is_reachable_function_name(self, name: Optional[Node]) -> bool:
        return (
            self.module_info is not None
            and name is not None
            and name.type == 'identifier'
            and node_text(name) in self.module_info.module_scoped_functions_reachable_during_ssr
        )

    def enter_function_declaration(self, node: Node) -> None:
        if self.reachable_function is None and self._is_reachable_function_name(node.child_by_field_name('name')):
            self.reachable_function = node

    def enter_bound_function(self, node: Node) -> None:
        """Function or arrow expressions count only when bound by `const name = ...`."""
        if self.reachable_function is not None:
            return
        parent = node.parent
        if parent is None or parent.type != 'variable_declarator':
            return
        if self._is_reachable_function_name(parent.child_by_field_name('name')):
            self.reachable_function = node

    def exit_function(self, node: Node) -> None:
        if same_node(node, self.reachable_function):
            self.reachable_function = None

    def _is_component_member(self, method: Node) -> bool:
        """Object-literal methods share the method_definition node type; only class members count."""
        body = method.parent
        return (
            self.module_info is not None
            and body is not None
            and body.type == 'class_body'
            and same_node(body.parent, self.module_info.component_class_node)
        )

    def enter_method(self, node: Node) -> None:
        if not self.inside_component_class or not self._is_component_member(node):
            return
        name = node.child_by_field_name('name')
        if (name is not None and name.type == 'property_identifier'
                and node_text(name) in self.module_info.methods_reachable_during_ssr):
            self.reachable_method = node

    def exit_method(self, node: Node) -> None:
        # Members of one class body never nest, so any member exit ends the reachable one
        if self._is_component_member(node):
            self.reachable_method = None

    def enter_if(self, node: Node) -> None:
        # The predicate sees every conditional; the outermost guard keeps the slot
        is_guard = self._is_escape_guard(node)
        if is_guard and self.skipped_block is None:
            self.skipped_block = node

    def exit_if(self, node: Node) -> None:
        if same_node(node, self.skipped_block):
            self.skipped_block = None

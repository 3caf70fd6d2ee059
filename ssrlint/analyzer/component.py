"""Component shape analysis: which code of a module runs during SSR.

A component module default-exports one class. On the server only part of it
executes: the lifecycle hooks the SSR engine invokes, the accessors the
template and parent components touch, and whatever those call. This module
works that out once per file so the traversal can ask cheap membership
questions while it walks.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set
from tree_sitter import Node

from .nodes import (
    CLASS_TYPES,
    FUNCTION_DECLARATION_TYPES,
    FUNCTION_EXPRESSION_TYPES,
    FUNCTION_TYPES,
    node_text,
)

# Lifecycle hooks the SSR engine invokes on the component
SSR_LIFECYCLE_HOOKS = frozenset({'constructor', 'connectedCallback', 'render'})

# Nodes below which code does not run when the module is evaluated
DEFERRED_TYPES = FUNCTION_TYPES | {'method_definition', 'class_body'}

# Class fields; public_field_definition is the TypeScript spelling
FIELD_TYPES = frozenset({'field_definition', 'public_field_definition'})


@dataclass(frozen=True)
class ModuleInfo:
    """What the component-shape analysis learned about one module."""
    component_class_node: Optional[Node] = None
    module_scoped_functions_reachable_during_ssr: FrozenSet[str] = field(default_factory=frozenset)
    methods_reachable_during_ssr: FrozenSet[str] = field(default_factory=frozenset)


def _is_default_export(statement: Node) -> bool:
    return any(child.type == 'default' for child in statement.children)


def find_component_class(program: Node) -> Optional[Node]:
    """Locate the default-exported class of the module.

    Handles `export default class X {}`, `export default class {}` and
    `export default X;` where X is a class declared at module level.
    """
    top_level_classes: Dict[str, Node] = {}
    exported_name = None

    for statement in program.named_children:
        if statement.type == 'class_declaration':
            name = statement.child_by_field_name('name')
            if name is not None:
                top_level_classes[node_text(name)] = statement

        if statement.type != 'export_statement':
            continue

        declaration = statement.child_by_field_name('declaration')
        if declaration is not None and declaration.type == 'class_declaration':
            name = declaration.child_by_field_name('name')
            if name is not None:
                top_level_classes[node_text(name)] = declaration
            if _is_default_export(statement):
                return declaration
            continue

        if not _is_default_export(statement):
            continue

        value = statement.child_by_field_name('value')
        if value is None:
            continue
        if value.type in CLASS_TYPES:
            return value
        if value.type == 'identifier':
            exported_name = node_text(value)

    if exported_name is not None:
        return top_level_classes.get(exported_name)
    return None


def _class_methods(class_node: Node) -> Dict[str, List[Node]]:
    """Method definitions of a class body keyed by name (getter and setter share one)."""
    methods: Dict[str, List[Node]] = {}
    body = class_node.child_by_field_name('body')
    if body is None:
        return methods
    for member in body.named_children:
        if member.type != 'method_definition':
            continue
        name = member.child_by_field_name('name')
        if name is not None and name.type == 'property_identifier':
            methods.setdefault(node_text(name), []).append(member)
    return methods


def _is_accessor(method: Node) -> bool:
    return any(child.type in ('get', 'set') for child in method.children)


def module_scoped_functions(program: Node) -> Dict[str, Node]:
    """Top-level functions by name: declarations and function values bound to variables."""
    functions: Dict[str, Node] = {}

    for statement in program.named_children:
        if statement.type == 'export_statement':
            statement = statement.child_by_field_name('declaration')
            if statement is None:
                continue

        if statement.type in FUNCTION_DECLARATION_TYPES:
            name = statement.child_by_field_name('name')
            if name is not None and name.type == 'identifier':
                functions[node_text(name)] = statement

        elif statement.type in ('lexical_declaration', 'variable_declaration'):
            for declarator in statement.named_children:
                if declarator.type != 'variable_declarator':
                    continue
                name = declarator.child_by_field_name('name')
                value = declarator.child_by_field_name('value')
                if (name is not None and name.type == 'identifier' and value is not None
                        and value.type in FUNCTION_EXPRESSION_TYPES | {'arrow_function'}):
                    functions[node_text(name)] = value

    return functions


def _called_names(root: Node, skip_deferred: bool = False) -> Set[str]:
    """Names of plain identifiers invoked as `name(...)` below root."""
    called: Set[str] = set()
    stack = list(root.named_children)
    while stack:
        node = stack.pop()
        if skip_deferred and node.type in DEFERRED_TYPES:
            continue
        if node.type == 'call_expression':
            callee = node.child_by_field_name('function')
            if callee is not None and callee.type == 'identifier':
                called.add(node_text(callee))
        stack.extend(node.named_children)
    return called


def _this_member_names(root: Node) -> Set[str]:
    """Property names read through `this.<name>` below root."""
    names: Set[str] = set()
    stack = list(root.named_children)
    while stack:
        node = stack.pop()
        if node.type == 'member_expression':
            receiver = node.child_by_field_name('object')
            if receiver is not None and receiver.type == 'this':
                prop = node.child_by_field_name('property')
                if prop is not None and prop.type == 'property_identifier':
                    names.add(node_text(prop))
        stack.extend(node.named_children)
    return names


def _field_initializers(class_node: Node) -> List[Node]:
    """Class field definitions; their initializers run inside the constructor."""
    body = class_node.child_by_field_name('body')
    if body is None:
        return []
    return [member for member in body.named_children if member.type in FIELD_TYPES]


def _reachable_methods(methods: Dict[str, List[Node]], fields: List[Node]) -> Set[str]:
    pending = [name for name, nodes in methods.items()
               if name in SSR_LIFECYCLE_HOOKS or any(_is_accessor(m) for m in nodes)]
    for field_node in fields:
        pending.extend(name for name in _this_member_names(field_node) if name in methods)
    reachable: Set[str] = set()

    while pending:
        name = pending.pop()
        if name in reachable:
            continue
        reachable.add(name)
        for method in methods[name]:
            for referenced in _this_member_names(method):
                if referenced in methods and referenced not in reachable:
                    pending.append(referenced)

    return reachable


def analyze_component(program: Node) -> ModuleInfo:
    """Build the ModuleInfo for one parsed module.

    Args:
        program: Root `program` node of the module

    Returns:
        ModuleInfo naming the component class and what of it runs during SSR
    """
    component = find_component_class(program)
    functions = module_scoped_functions(program)

    methods = _class_methods(component) if component is not None else {}
    fields = _field_initializers(component) if component is not None else []
    reachable_methods = _reachable_methods(methods, fields)

    # Seeds: calls made while the module itself is evaluated, then from the component
    pending = list(_called_names(program, skip_deferred=True))
    for field_node in fields:
        pending.extend(_called_names(field_node))
    for name in reachable_methods:
        for method in methods[name]:
            pending.extend(_called_names(method))

    reachable_functions: Set[str] = set()
    while pending:
        name = pending.pop()
        if name not in functions or name in reachable_functions:
            continue
        reachable_functions.add(name)
        pending.extend(_called_names(functions[name]))

    return ModuleInfo(
        component_class_node=component,
        module_scoped_functions_reachable_during_ssr=frozenset(reachable_functions),
        methods_reachable_during_ssr=frozenset(reachable_methods),
    )

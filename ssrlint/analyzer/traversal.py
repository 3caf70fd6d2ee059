"""Enter/exit traversal driver for tree-sitter syntax trees.

Listener tables map a node type to a callback fired when the node is entered,
and `"<type>:exit"` to a callback fired once its whole subtree has been
visited. Only named nodes are visited; punctuation tokens never fire.
"""
from typing import Callable, Dict, List, Mapping
from tree_sitter import Node

Listener = Callable[[Node], None]
ListenerTable = Mapping[str, Listener]

EXIT_SUFFIX = ':exit'


def exit_key(node_type: str) -> str:
    return f"{node_type}{EXIT_SUFFIX}"


def merge_listeners(*tables: ListenerTable) -> Dict[str, List[Listener]]:
    """Combine listener tables, keeping the order the tables were given in.

    Two tables listening to the same key both fire, first table first.
    """
    merged: Dict[str, List[Listener]] = {}
    for table in tables:
        for key, listener in table.items():
            merged.setdefault(key, []).append(listener)
    return merged


def walk(root: Node, listeners: Mapping[str, List[Listener]]) -> None:
    """Visit root and its named descendants in document order.

    Stack-based so deeply nested sources never hit the recursion limit.
    """
    # (node, exiting) pairs
    stack = [(root, False)]

    while stack:
        node, exiting = stack.pop()

        if exiting:
            for listener in listeners.get(exit_key(node.type), ()):
                listener(node)
            continue

        for listener in listeners.get(node.type, ()):
            listener(node)

        stack.append((node, True))
        # Reverse so the first child is popped first
        stack.extend((child, False) for child in reversed(node.named_children))

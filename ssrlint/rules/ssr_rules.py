"""Rule bodies flagging browser-only code on the SSR path.

Each builder owns a fresh ReachabilityTracker and returns the tracker's
listeners merged with its own pattern checks. Reporting goes through the
RuleContext handed in by the linter, or a plain callback for
NoPropertyAccessDuringSSR.
"""
from typing import Callable, Collection, Dict, Sequence
from tree_sitter import Node

from ..analyzer.nodes import (
    is_identifier_named,
    is_member_access,
    is_object_of,
    is_optional_access,
    node_text,
    property_name,
)
from ..analyzer.reachability import ReachabilityTracker


class NoReferenceDuringSSR:
    """Flags references to forbidden globals on code reachable during SSR.

    Message ids are a pair: the first for direct references
    (`document.title`, `doSomething(window)`, `globalThis.addEventListener`),
    the second for `globalThis.<forbidden>.<property>` chains.

    Optional chaining on the access that would fail is accepted as a
    deliberate guard: `globalThis.document?.title`, `globalThis?.foo`.
    """

    def __init__(self, forbidden_global_names: Collection[str], message_ids: Sequence[str], context):
        self.forbidden = frozenset(forbidden_global_names)
        self.reference_message, self.global_this_message = message_ids[0], message_ids[1]
        self.context = context
        self.tracker = ReachabilityTracker()

    def listeners(self) -> Dict[str, Callable[[Node], None]]:
        table = dict(self.tracker.listeners())
        table['member_expression'] = self.check_member_access
        table['subscript_expression'] = self.check_member_access
        table['identifier'] = self.check_identifier
        table['shorthand_property_identifier'] = self.check_identifier
        return table

    def _is_global(self, identifier: Node) -> bool:
        return self.context.scope.is_global_identifier(identifier)

    def check_member_access(self, node: Node) -> None:
        if not self.tracker.is_reachable(node):
            return

        receiver = node.child_by_field_name('object')
        parent = node.parent

        if (node.type == 'member_expression'
                and is_object_of(node, parent)
                and is_identifier_named(receiver, 'globalThis')
                and property_name(node) in self.forbidden
                and not is_optional_access(parent)
                and self._is_global(receiver)):
            accessed = property_name(parent)
            if accessed is None:
                # globalThis.document[key]: no property name to suggest a fix with
                self.context.report(
                    node=node,
                    message_id=self.reference_message,
                    data={'identifier': property_name(node)},
                )
                return
            # globalThis.document.addEventListener(...)
            self.context.report(
                node=node,
                message_id=self.global_this_message,
                data={
                    'identifier': property_name(node),
                    'property': accessed,
                },
            )
        elif (not is_member_access(parent)
                and receiver is not None
                and receiver.type == 'identifier'
                and (node_text(receiver) in self.forbidden
                     or (node_text(receiver) == 'globalThis' and not is_optional_access(node)))
                and self._is_global(receiver)):
            # document.addEventListener(...), document?.title, globalThis.addEventListener(...)
            if node_text(receiver) == 'globalThis':
                identifier = property_name(node)
                if identifier is None:
                    # globalThis[key]: nothing nameable to report
                    return
            else:
                identifier = node_text(receiver)
            self.context.report(
                node=node,
                message_id=self.reference_message,
                data={'identifier': identifier},
            )

    def check_identifier(self, node: Node) -> None:
        if not self.tracker.is_reachable(node):
            return
        # Receivers of member accesses are handled by check_member_access
        if is_object_of(node, node.parent):
            return
        name = node_text(node)
        if name in self.forbidden and self._is_global(node):
            # doSomethingWith(window)
            self.context.report(
                node=node,
                message_id=self.reference_message,
                data={'identifier': name},
            )


class NoPropertyAccessDuringSSR:
    """Flags `this.<name>` reads of forbidden instance properties in SSR-reachable methods.

    The receiver is always `this`, so no scope resolution is involved.
    """

    def __init__(self, forbidden_property_names: Collection[str], reporter: Callable[[Node], None]):
        self.forbidden = frozenset(forbidden_property_names)
        self.reporter = reporter
        self.tracker = ReachabilityTracker()

    def listeners(self) -> Dict[str, Callable[[Node], None]]:
        table = dict(self.tracker.listeners())
        table['member_expression'] = self.check_member_access
        return table

    def check_member_access(self, node: Node) -> None:
        if not self.tracker.is_inside_reachable_method() or self.tracker.is_inside_skipped_block():
            return
        receiver = node.child_by_field_name('object')
        prop = node.child_by_field_name('property')
        if (receiver is not None and receiver.type == 'this'
                and prop is not None and prop.type == 'property_identifier'
                and node_text(prop) in self.forbidden):
            self.reporter(node)


class NoNodeEnvInSSR:
    """Flags `process.env.NODE_ENV` on code reachable during SSR."""

    MESSAGE_ID = 'nodeEnvFound'

    def __init__(self, context):
        self.context = context
        self.tracker = ReachabilityTracker()

    def listeners(self) -> Dict[str, Callable[[Node], None]]:
        table = dict(self.tracker.listeners())
        table['member_expression'] = self.check_member_access
        return table

    def check_member_access(self, node: Node) -> None:
        if not self.tracker.is_reachable(node):
            return
        if property_name(node) != 'NODE_ENV':
            return
        env = node.child_by_field_name('object')
        if env is None or env.type != 'member_expression' or property_name(env) != 'env':
            return
        if is_identifier_named(env.child_by_field_name('object'), 'process'):
            self.context.report(
                node=node,
                message_id=self.MESSAGE_ID,
                data={'identifier': 'NODE_ENV'},
            )

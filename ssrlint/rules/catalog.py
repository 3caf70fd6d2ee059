"""Catalog of the lint rules shipped with ssrlint.

Every rule pairs metadata (id, description, message templates) with a
`create(context, options)` factory returning the listener table the linter
merges into its traversal.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping

from .ssr_rules import NoNodeEnvInSSR, NoPropertyAccessDuringSSR, NoReferenceDuringSSR

# Globals that exist in browsers but not in the Node.js SSR runtime
BROWSER_GLOBALS = frozenset({
    'alert',
    'blur',
    'cancelAnimationFrame',
    'cancelIdleCallback',
    'close',
    'confirm',
    'customElements',
    'devicePixelRatio',
    'document',
    'DOMParser',
    'Element',
    'focus',
    'frames',
    'getComputedStyle',
    'getSelection',
    'history',
    'HTMLElement',
    'Image',
    'indexedDB',
    'innerHeight',
    'innerWidth',
    'IntersectionObserver',
    'localStorage',
    'location',
    'matchMedia',
    'MutationObserver',
    'navigator',
    'open',
    'opener',
    'outerHeight',
    'outerWidth',
    'pageXOffset',
    'pageYOffset',
    'parent',
    'print',
    'prompt',
    'requestAnimationFrame',
    'requestIdleCallback',
    'ResizeObserver',
    'screen',
    'screenX',
    'screenY',
    'scroll',
    'scrollBy',
    'scrollTo',
    'scrollX',
    'scrollY',
    'self',
    'sessionStorage',
    'ShadowRoot',
    'top',
    'visualViewport',
    'window',
    'XMLHttpRequest',
})

# Instance members of a component that only exist once it is attached to a DOM
DOM_ONLY_PROPERTIES = (
    'childNodes',
    'children',
    'firstChild',
    'firstElementChild',
    'getBoundingClientRect',
    'getElementsByClassName',
    'getElementsByTagName',
    'lastChild',
    'lastElementChild',
    'ownerDocument',
    'querySelector',
    'querySelectorAll',
)


@dataclass
class Rule:
    """A named lint rule."""
    rule_id: str
    description: str
    messages: Dict[str, str]
    create: Callable[[Any, Mapping[str, Any]], Mapping[str, Callable]]
    default_options: Dict[str, Any] = field(default_factory=dict)

    def format_message(self, message_id: str, data: Mapping[str, Any]) -> str:
        return self.messages[message_id].format(**data)


def _create_browser_globals(context, options):
    forbidden = (set(options.get('globals', BROWSER_GLOBALS))
                 | set(options.get('extra_globals', ())))
    forbidden -= set(options.get('allowed_globals', ()))
    rule = NoReferenceDuringSSR(
        forbidden,
        ('prohibitReference', 'prohibitReferenceOnGlobalThis'),
        context,
    )
    return rule.listeners()


def _create_ssr_properties(context, options):
    def report(node):
        context.report(
            node=node,
            message_id='propertyAccessFound',
            data={'identifier': node.child_by_field_name('property').text.decode('utf-8')},
        )

    rule = NoPropertyAccessDuringSSR(options.get('properties', DOM_ONLY_PROPERTIES), report)
    return rule.listeners()


def _create_node_env(context, options):
    return NoNodeEnvInSSR(context).listeners()


RULES: Dict[str, Rule] = {
    rule.rule_id: rule for rule in (
        Rule(
            rule_id='no-restricted-browser-globals-during-ssr',
            description='Disallow browser-only globals in code that runs during SSR',
            messages={
                'prohibitReference': (
                    'Invalid usage of a browser global `{identifier}` during SSR. '
                    'Consider moving access logic to renderedCallback.'
                ),
                'prohibitReferenceOnGlobalThis': (
                    'Invalid usage of `globalThis.{identifier}.{property}` during SSR. '
                    'Use optional chaining (`globalThis.{identifier}?.{property}`) '
                    'or move access logic to renderedCallback.'
                ),
            },
            create=_create_browser_globals,
            default_options={'globals': BROWSER_GLOBALS},
        ),
        Rule(
            rule_id='no-unsupported-ssr-properties',
            description='Disallow DOM-only component properties in methods that run during SSR',
            messages={
                'propertyAccessFound': (
                    '`this.{identifier}` is unsupported during SSR. '
                    'Consider moving access logic to renderedCallback.'
                ),
            },
            create=_create_ssr_properties,
            default_options={'properties': DOM_ONLY_PROPERTIES},
        ),
        Rule(
            rule_id='no-node-env-in-ssr',
            description='Disallow process.env.NODE_ENV in code that runs during SSR',
            messages={
                NoNodeEnvInSSR.MESSAGE_ID: (
                    '`process.env.{identifier}` is unsupported during SSR. '
                    'Use `import.meta.env.SSR` to branch on the rendering environment.'
                ),
            },
            create=_create_node_env,
        ),
    )
}


def get_rules(rule_ids: Iterable[str] = None) -> List[Rule]:
    """Resolve rule ids to Rule objects, all rules when rule_ids is empty.

    Raises:
        ValueError: If a rule id is unknown
    """
    if not rule_ids:
        return list(RULES.values())

    rules = []
    for rule_id in rule_ids:
        if rule_id not in RULES:
            raise ValueError(
                f"Unknown rule: {rule_id}. "
                f"Available rules: {', '.join(sorted(RULES))}"
            )
        rules.append(RULES[rule_id])
    return rules

"""Runs SSR rules over component sources and collects violations."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from tree_sitter import Node

from .nodes import line_and_column
from .parser import LanguageParser
from .scope import ScopeResolver
from .traversal import merge_listeners, walk
from ..rules.catalog import Rule, get_rules

# Directories never worth linting
DEFAULT_EXCLUDED_DIRS = {
    'node_modules', 'dist', 'build', 'coverage', '.git',
    '.next', '.sfdx', '.sf', '__pycache__', 'vendor',
}


@dataclass
class Violation:
    """One rule violation, tied to the node that triggered it."""
    rule_id: str
    message_id: str
    message: str
    line: int
    column: int
    data: Dict[str, Any] = field(default_factory=dict)
    file_path: str = "<source>"
    node: Optional[Node] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file': self.file_path,
            'line': self.line,
            'column': self.column,
            'rule': self.rule_id,
            'message_id': self.message_id,
            'message': self.message,
            'data': self.data,
        }


@dataclass
class FileReport:
    """Lint result for one file."""
    file_path: str
    violations: List[Violation] = field(default_factory=list)
    has_syntax_errors: bool = False
    skipped: bool = False


class RuleContext:
    """What a rule sees of the traversal: scope resolution and the reporting sink."""

    def __init__(self, rule: Rule, file_path: str, scope: ScopeResolver, sink: List[Violation]):
        self.rule = rule
        self.file_path = file_path
        self.scope = scope
        self._sink = sink

    def report(self, node: Node, message_id: str, data: Mapping[str, Any] = None) -> None:
        data = dict(data or {})
        line, column = line_and_column(node)
        self._sink.append(Violation(
            rule_id=self.rule.rule_id,
            message_id=message_id,
            message=self.rule.format_message(message_id, data),
            line=line,
            column=column,
            data=data,
            file_path=self.file_path,
            node=node,
        ))


class Linter:
    """Lints component sources with a fixed set of rules.

    All enabled rules share a single traversal per file; each gets its own
    rule instance, and so its own reachability tracker, every time.
    """

    def __init__(self, rule_ids: Iterable[str] = None, options: Mapping[str, Mapping[str, Any]] = None):
        """
        Args:
            rule_ids: Rules to run (all rules when empty)
            options: Per-rule option overrides keyed by rule id

        Raises:
            ValueError: If a rule id is unknown
        """
        self.rules = get_rules(rule_ids)
        self.options = {rule.rule_id: dict(rule.default_options) for rule in self.rules}
        for rule_id, overrides in (options or {}).items():
            if rule_id in self.options:
                self.options[rule_id].update(overrides)

    def lint_tree(self, root: Node, file_path: str = "<source>") -> List[Violation]:
        violations: List[Violation] = []
        scope = ScopeResolver()

        tables = []
        for rule in self.rules:
            context = RuleContext(rule, file_path, scope, violations)
            tables.append(rule.create(context, self.options[rule.rule_id]))

        walk(root, merge_listeners(*tables))

        # Stable sort keeps emission order for violations on the same position
        violations.sort(key=lambda v: (v.line, v.column))
        return violations

    def lint_source(self, source_code: Union[str, bytes], file_path: str = "<source>",
                    language: str = 'javascript') -> FileReport:
        tree = LanguageParser(language).parse_source(source_code)
        return FileReport(
            file_path=file_path,
            violations=self.lint_tree(tree.root_node, file_path),
            has_syntax_errors=tree.root_node.has_error,
        )

    def lint_file(self, file_path: Union[str, Path]) -> FileReport:
        """Lint one file; unsupported or unreadable files come back skipped."""
        file_path = Path(file_path)
        parser = LanguageParser.from_file_extension(file_path)
        tree = parser.parse_file(file_path) if parser else None
        if tree is None:
            return FileReport(file_path=str(file_path), skipped=True)

        return FileReport(
            file_path=str(file_path),
            violations=self.lint_tree(tree.root_node, str(file_path)),
            has_syntax_errors=tree.root_node.has_error,
        )

    def lint_paths(self, paths: Iterable[Union[str, Path]],
                   excluded_dirs: Iterable[str] = ()) -> List[FileReport]:
        return [self.lint_file(path) for path in collect_source_files(paths, excluded_dirs)]


def collect_source_files(paths: Iterable[Union[str, Path]], excluded_dirs: Iterable[str] = ()) -> List[Path]:
    """Expand files and directories into a sorted list of lintable sources."""
    excluded = DEFAULT_EXCLUDED_DIRS | set(excluded_dirs)
    extensions = set(LanguageParser.SUPPORTED_LANGUAGES)
    files = set()

    for path in paths:
        path = Path(path)
        if path.is_file():
            files.add(path)
            continue
        for candidate in path.rglob('*'):
            if candidate.suffix.lower() not in extensions or not candidate.is_file():
                continue
            relative_parts = candidate.relative_to(path).parts
            if any(part in excluded for part in relative_parts):
                continue
            files.add(candidate)

    return sorted(files)

"""ssrlint CLI - find browser-only code on the server-side rendering path."""
import json
from pathlib import Path
from typing import List

import typer
from rich.table import Table
from rich.markup import escape

from ssrlint.analyzer.linter import Linter, FileReport
from ssrlint.config import __version__, get_config
from ssrlint.rules.catalog import RULES
from ssrlint.utils.safe_console import SafeConsole

app = typer.Typer(
    name="ssrlint",
    help="Find browser-only code that runs during server-side rendering",
    add_completion=False
)
# Use SafeConsole for Windows Unicode compatibility
console = SafeConsole()


def _print_file_report(report: FileReport, root: Path):
    """Render one file's violations as a table."""
    try:
        display_path = Path(report.file_path).resolve().relative_to(root)
    except ValueError:
        display_path = report.file_path

    table = Table(title=escape(str(display_path)), title_justify="left")
    table.add_column("Line", style="green", justify="right")
    table.add_column("Rule", style="cyan")
    table.add_column("Message", style="white", no_wrap=False)

    for violation in report.violations:
        table.add_row(
            f"{violation.line}:{violation.column + 1}",
            violation.rule_id,
            escape(violation.message),
        )

    console.print(table)


def _print_json(reports: List[FileReport]):
    payload = {
        'version': __version__,
        'files': [
            {
                'file': report.file_path,
                'skipped': report.skipped,
                'has_syntax_errors': report.has_syntax_errors,
                'violations': [violation.to_dict() for violation in report.violations],
            }
            for report in reports
        ],
        'total_violations': sum(len(report.violations) for report in reports),
    }
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def check(
    paths: List[str] = typer.Argument(None, help="Files or directories to lint (default: current directory)"),
    rule: List[str] = typer.Option(None, "--rule", "-r", help="Rule id to run (repeatable, default: all rules)"),
    allow_global: List[str] = typer.Option(None, "--allow-global", help="Browser global to stop forbidding (repeatable)"),
    forbid_global: List[str] = typer.Option(None, "--forbid-global", help="Extra global to forbid (repeatable)"),
    json_output: bool = typer.Option(False, "--json", help="Print machine-readable JSON instead of tables"),
):
    """Lint component sources for code that breaks server-side rendering."""
    paths = paths or ["."]
    for path in paths:
        if not Path(path).exists():
            console.print(f"[bold red]Error:[/bold red] Path does not exist: {escape(path)}")
            raise typer.Exit(2)

    try:
        config = get_config()
        linter = Linter(
            rule or config.enabled_rules,
            options=config.rule_options(
                extra_globals=forbid_global or (),
                allowed_globals=allow_global or (),
            ),
        )
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(2)

    reports = linter.lint_paths(paths, excluded_dirs=config.excluded_dirs)
    total = sum(len(report.violations) for report in reports)

    if json_output:
        _print_json(reports)
        raise typer.Exit(1 if total else 0)

    root = Path.cwd().resolve()
    for report in reports:
        if report.skipped:
            console.print(f"[yellow]⚠ Skipped unsupported or unreadable file:[/yellow] {escape(report.file_path)}")
            continue
        if report.has_syntax_errors:
            console.print(f"[yellow]⚠ Syntax errors in {escape(report.file_path)}, results may be incomplete[/yellow]")
        if report.violations:
            _print_file_report(report, root)

    linted = sum(1 for report in reports if not report.skipped)
    if total:
        files_with_violations = sum(1 for report in reports if report.violations)
        console.print(
            f"\n[bold red]✗ {total} SSR violation{'s' if total != 1 else ''}[/bold red] "
            f"in {files_with_violations} of {linted} file{'s' if linted != 1 else ''}"
        )
        raise typer.Exit(1)

    console.print(f"[bold green]✓ No SSR violations found[/bold green] ({linted} file{'s' if linted != 1 else ''} checked)")


@app.command()
def rules():
    """List the available rules."""
    table = Table(title="ssrlint rules")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")

    for rule_id, rule in RULES.items():
        table.add_row(rule_id, rule.description)

    console.print(table)


@app.callback()
def main():
    """ssrlint - keep browser-only code off the server-side rendering path."""
    pass


if __name__ == "__main__":
    app()

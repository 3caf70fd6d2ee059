"""Tests for the ssrlint command line."""
import json

import pytest
from typer.testing import CliRunner

from conftest import FIXTURES_DIR
from ssrlint.main import app


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def component_file(tmp_path):
    path = tmp_path / 'widget.js'
    path.write_text("doSomething(window);\nexport const tracker = Analytics.init();\n")
    return path


def test_clean_component_exits_zero(runner):
    result = runner.invoke(app, ['check', str(FIXTURES_DIR / 'clean')])

    assert result.exit_code == 0, result.output
    assert "No SSR violations found" in result.output
    assert "1 file checked" in result.output


def test_violations_exit_one(runner):
    result = runner.invoke(app, ['check', str(FIXTURES_DIR / 'broken')])

    assert result.exit_code == 1
    assert "4 SSR violations" in result.output


def test_json_output(runner):
    result = runner.invoke(app, ['check', '--json', str(FIXTURES_DIR / 'broken' / 'broken.js')])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload['total_violations'] == 4
    assert len(payload['files']) == 1
    first = payload['files'][0]['violations'][0]
    assert first['rule'] == 'no-node-env-in-ssr'
    assert first['line'] == 3
    assert first['data'] == {'identifier': 'NODE_ENV'}


def test_rule_selection(runner):
    result = runner.invoke(app, [
        'check', '--json', '-r', 'no-node-env-in-ssr', str(FIXTURES_DIR / 'broken'),
    ])

    payload = json.loads(result.stdout)
    assert payload['total_violations'] == 1


def test_global_overrides(runner, component_file):
    allowed = runner.invoke(app, ['check', '--json', '--allow-global', 'window', str(component_file)])
    forbidden = runner.invoke(app, ['check', '--json', '--forbid-global', 'Analytics', str(component_file)])

    assert allowed.exit_code == 0
    assert json.loads(allowed.stdout)['total_violations'] == 0
    identifiers = [v['data']['identifier'] for v in json.loads(forbidden.stdout)['files'][0]['violations']]
    assert identifiers == ['window', 'Analytics']


def test_environment_overrides(runner, component_file, monkeypatch):
    monkeypatch.setenv('SSRLINT_ALLOWED_GLOBALS', 'window')

    result = runner.invoke(app, ['check', '--json', str(component_file)])

    assert result.exit_code == 0


def test_unknown_rule_exits_two(runner):
    result = runner.invoke(app, ['check', '--rule', 'bogus', str(FIXTURES_DIR)])

    assert result.exit_code == 2
    assert "Unknown rule: bogus" in result.output


def test_unknown_rule_in_environment_exits_two(runner, monkeypatch):
    monkeypatch.setenv('SSRLINT_RULES', 'bogus')

    result = runner.invoke(app, ['check', str(FIXTURES_DIR)])

    assert result.exit_code == 2


def test_missing_path_exits_two(runner, tmp_path):
    result = runner.invoke(app, ['check', str(tmp_path / 'missing')])

    assert result.exit_code == 2
    assert "Path does not exist" in result.output


def test_rules_command_lists_every_rule(runner):
    result = runner.invoke(app, ['rules'])

    assert result.exit_code == 0
    for rule_id in ('no-restricted-browser-globals-during-ssr',
                    'no-unsupported-ssr-properties',
                    'no-node-env-in-ssr'):
        assert rule_id in result.output


def test_unsupported_file_is_reported_as_skipped(runner):
    result = runner.invoke(app, ['check', str(FIXTURES_DIR / 'typed' / 'notes.md')])

    assert result.exit_code == 0
    assert "Skipped unsupported or unreadable file" in result.output

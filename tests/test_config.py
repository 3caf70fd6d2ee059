"""Tests for environment-driven configuration."""
import pytest

from ssrlint.config import Config, get_config, reset_config


@pytest.fixture
def clean_env(monkeypatch):
    """Start with none of the SSRLINT_* variables set."""
    for name in ('SSRLINT_RULES', 'SSRLINT_EXTRA_GLOBALS',
                 'SSRLINT_ALLOWED_GLOBALS', 'SSRLINT_EXCLUDED_DIRS'):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env, tmp_path):
    config = Config(tmp_path)

    assert config.enabled_rules == []
    assert config.extra_globals == []
    assert config.allowed_globals == []
    assert config.excluded_dirs == []


def test_comma_separated_values(clean_env, tmp_path):
    clean_env.setenv('SSRLINT_EXTRA_GLOBALS', ' Analytics, ,Intercom ')
    clean_env.setenv('SSRLINT_EXCLUDED_DIRS', 'generated')

    config = Config(tmp_path)

    assert config.extra_globals == ['Analytics', 'Intercom']
    assert config.excluded_dirs == ['generated']


def test_rule_options_merge_environment_and_overrides(clean_env, tmp_path):
    clean_env.setenv('SSRLINT_ALLOWED_GLOBALS', 'window')

    options = Config(tmp_path).rule_options(extra_globals=['Analytics'], allowed_globals=['document'])

    assert options == {
        'no-restricted-browser-globals-during-ssr': {
            'extra_globals': ['Analytics'],
            'allowed_globals': ['window', 'document'],
        },
    }


def test_unknown_rule_is_rejected(clean_env, tmp_path):
    clean_env.setenv('SSRLINT_RULES', 'no-node-env-in-ssr,not-a-rule')

    with pytest.raises(ValueError, match="not-a-rule"):
        Config(tmp_path)


def test_dotenv_file_is_loaded(clean_env, tmp_path):
    (tmp_path / '.env').write_text("SSRLINT_RULES=no-node-env-in-ssr\n")

    config = Config(tmp_path)

    assert config.enabled_rules == ['no-node-env-in-ssr']


def test_get_config_is_a_singleton(clean_env):
    first = get_config()

    assert get_config() is first
    reset_config()
    assert get_config() is not first


def test_explicit_names_override_the_environment(clean_env, tmp_path):
    clean_env.setenv('SSRLINT_ALLOWED_GLOBALS', 'window,navigator')
    clean_env.setenv('SSRLINT_EXTRA_GLOBALS', 'Analytics')

    options = Config(tmp_path).rule_options(extra_globals=['window'], allowed_globals=['Analytics'])

    assert options['no-restricted-browser-globals-during-ssr'] == {
        'extra_globals': ['window'],
        'allowed_globals': ['navigator', 'Analytics'],
    }


def test_forbidden_override_is_reported(clean_env, tmp_path, lint):
    clean_env.setenv('SSRLINT_ALLOWED_GLOBALS', 'window')
    options = Config(tmp_path).rule_options(extra_globals=['window'])

    violations = lint("doSomething(window);", options=options)

    assert [v.data['identifier'] for v in violations] == ['window']

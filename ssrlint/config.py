"""Configuration management for ssrlint.

Loads environment variables (optionally from a .env file) and provides
centralized config access.
"""
import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

from .rules.catalog import RULES

__version__ = "1.0.0"


def _split_list(value: Optional[str]) -> List[str]:
    """Parse a comma-separated environment value into a list of names."""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, project_root: Optional[Path] = None):
        """Initialize config by loading the project's .env file.

        Args:
            project_root: Directory holding the .env file (defaults to cwd)

        Raises:
            ValueError: If SSRLINT_RULES names an unknown rule
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        load_dotenv(self.project_root / ".env")

        self._validate_rules()

    def _validate_rules(self):
        """Validate that every rule enabled through the environment exists.

        Raises:
            ValueError: If SSRLINT_RULES names an unknown rule
        """
        unknown = [rule_id for rule_id in self.enabled_rules if rule_id not in RULES]
        if unknown:
            raise ValueError(
                f"SSRLINT_RULES names unknown rules: {', '.join(unknown)}. "
                f"Available rules: {', '.join(sorted(RULES))}"
            )

    @property
    def enabled_rules(self) -> List[str]:
        """Rule ids from SSRLINT_RULES; empty means every rule."""
        return _split_list(os.getenv("SSRLINT_RULES"))

    @property
    def extra_globals(self) -> List[str]:
        """Additional browser globals to forbid (SSRLINT_EXTRA_GLOBALS)."""
        return _split_list(os.getenv("SSRLINT_EXTRA_GLOBALS"))

    @property
    def allowed_globals(self) -> List[str]:
        """Browser globals to stop forbidding (SSRLINT_ALLOWED_GLOBALS)."""
        return _split_list(os.getenv("SSRLINT_ALLOWED_GLOBALS"))

    @property
    def excluded_dirs(self) -> List[str]:
        """Extra directory names to skip while collecting files (SSRLINT_EXCLUDED_DIRS)."""
        return _split_list(os.getenv("SSRLINT_EXCLUDED_DIRS"))

    def rule_options(self, extra_globals=(), allowed_globals=()) -> dict:
        """Per-rule options merged from the environment and explicit overrides.

        Explicit names win over the environment: a global forbidden here is
        dropped from the environment's allowed list, and the reverse.
        """
        return {
            'no-restricted-browser-globals-during-ssr': {
                'extra_globals': [
                    *(name for name in self.extra_globals if name not in allowed_globals),
                    *extra_globals,
                ],
                'allowed_globals': [
                    *(name for name in self.allowed_globals if name not in extra_globals),
                    *allowed_globals,
                ],
            },
        }


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the singleton so the next get_config() re-reads the environment."""
    global _config
    _config = None

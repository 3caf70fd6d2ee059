"""Rich Console that degrades Unicode icons on terminals without UTF-8."""
from typing import Any
from rich.console import Console

from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console whose print() sanitizes string arguments when UTF-8 is unavailable.

    Renderables (tables, panels) pass through untouched; Rich already falls
    back to ASCII box characters on legacy terminals.
    """

    def __init__(self, *args, **kwargs):
        self._needs_sanitization = not is_utf8_capable()

        if self._needs_sanitization:
            kwargs.setdefault('legacy_windows', True)

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj, utf8=False) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)

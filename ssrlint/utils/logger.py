"""Terminal-safe output helpers.

Lint output uses a handful of Unicode status icons. Terminals without UTF-8
support (legacy Windows code pages, some CI runners) crash or print garbage
on them, so they are swapped for ASCII there.
"""
import sys
import locale


# Unicode icons used in ssrlint output and their ASCII stand-ins
ICON_MAP = {
    '✓': '[OK]',
    '✔': '[OK]',
    '✗': '[FAIL]',
    '✘': '[FAIL]',
    '⚠': '[WARN]',
    '→': '->',
    '•': '*',
    '…': '...',
    '─': '-',
    '│': '|',
}

UTF8_ENCODINGS = {'utf-8', 'utf8', 'utf_8'}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding.

    Returns:
        str: Lower-cased encoding name ('utf-8', 'cp1252', 'ascii', ...)
    """
    encoding = getattr(sys.stdout, 'encoding', None)
    if encoding:
        return encoding.lower()

    try:
        encoding = locale.getpreferredencoding()
    except (ValueError, LookupError):
        encoding = None

    return encoding.lower() if encoding else 'ascii'


def is_utf8_capable() -> bool:
    return detect_terminal_encoding() in UTF8_ENCODINGS


def sanitize_for_terminal(text: str, utf8: bool = None) -> str:
    """Replace Unicode icons with ASCII equivalents on non-UTF-8 terminals.

    Args:
        text: Text potentially containing Unicode icons
        utf8: Force the capability check result (detected when None)

    Returns:
        str: Text safe for the current terminal
    """
    if utf8 is None:
        utf8 = is_utf8_capable()
    if utf8:
        return text

    for unicode_char, ascii_replacement in ICON_MAP.items():
        text = text.replace(unicode_char, ascii_replacement)
    return text

"""Terminal capability detection and text stylers."""

import os
import sys


class Colors:
    """ANSI SGR sequences."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'


def _enable_windows_ansi() -> bool:
    try:
        import ctypes
        kernel32 = ctypes.windll.kernel32
        # ENABLE_VIRTUAL_TERMINAL_PROCESSING on the stdout handle
        return bool(kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7))
    except (AttributeError, OSError):
        return False


def supports_color(stream=None) -> bool:
    """NO_COLOR wins over FORCE_COLOR, which wins over tty detection."""
    stream = stream or sys.stdout
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    isatty = getattr(stream, 'isatty', None)
    if isatty is None or not isatty():
        return False
    if sys.platform == 'win32':
        return _enable_windows_ansi()
    return True


def supports_unicode(stream=None) -> bool:
    """Box drawing, spinner frames and check marks all need to encode."""
    encoding = getattr(stream or sys.stdout, 'encoding', None) or 'utf-8'
    try:
        '✓✗⚠ℹ┌─┐│└┘⠋'.encode(encoding)
    except (UnicodeEncodeError, LookupError):
        return False
    return True


COLORS_ENABLED = supports_color()
UNICODE_ENABLED = supports_unicode()


def _symbol(fancy: str, plain: str) -> str:
    return fancy if UNICODE_ENABLED else plain


CHECK = _symbol('✓', '[OK]')
CROSS = _symbol('✗', '[X]')
WARN = _symbol('⚠', '[!]')
INFO = _symbol('ℹ', '[i]')


def colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED or not codes:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return colorize(text, Colors.RED)


def warning(text: str) -> str:
    return colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return colorize(text, Colors.BOLD)

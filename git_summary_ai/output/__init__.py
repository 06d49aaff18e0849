"""Terminal Output Formatting Package

Plain ANSI codes. Respects NO_COLOR and FORCE_COLOR and falls back to ASCII
symbols where the console cannot encode Unicode.
"""

from git_summary_ai.output.style import (
    Colors,
    COLORS_ENABLED,
    UNICODE_ENABLED,
    CHECK,
    CROSS,
    WARN,
    INFO,
    supports_color,
    supports_unicode,
    colorize,
    success,
    error,
    warning,
    info,
    dim,
    bold,
)
from git_summary_ai.output.console import (
    COMMIT_TYPE_COLORS,
    Spinner,
    colorize_commit_type,
    detail,
    print_box,
    print_error,
    print_info,
    print_success,
    print_warning,
    step,
)

__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "WARN", "INFO",
    "supports_color", "supports_unicode",
    "colorize", "success", "error", "warning", "info", "dim", "bold",
    "print_success", "print_error", "print_warning", "print_info", "detail", "step",
    "print_box", "colorize_commit_type", "COMMIT_TYPE_COLORS", "Spinner",
]

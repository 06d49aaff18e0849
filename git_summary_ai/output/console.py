"""Console printers: status lines, report rows, boxed previews and the spinner."""

import re
import shutil
import sys
import textwrap
import threading

from git_summary_ai.output import style as _style
from git_summary_ai.output.style import (
    CHECK, CROSS, INFO, WARN, Colors, bold, dim, error, info, success, warning,
)

REPORT_INDENT = 6

# type(scope)!: at the start of a conventional commit subject
_COMMIT_TYPE = re.compile(r'^(\w+)(\([^)]*\))?(!?:)')

COMMIT_TYPE_COLORS = {
    'feat': Colors.GREEN,
    'fix': Colors.RED,
    'perf': Colors.GREEN,
    'refactor': Colors.YELLOW,
    'docs': Colors.CYAN,
    'ci': Colors.CYAN,
    'build': Colors.CYAN,
    'test': Colors.MAGENTA,
    'chore': Colors.DIM,
    'style': Colors.DIM,
}


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning(WARN)} {warning(message)}")


def print_info(message: str) -> None:
    print(f"{info(INFO)} {message}")


def detail(label: str, value: str) -> None:
    """One `label: value` row of an indented report."""
    print(f"{dim(' ' * REPORT_INDENT + label + ':')} {value}")


def step(index: int, total: int, text: str) -> None:
    """Progress header of a multi-stage command, e.g. `[2/4] Generating AI summary...`."""
    print(f"{info(f'[{index}/{total}]')} {text}")


def _box_width() -> int:
    columns = shutil.get_terminal_size((80, 24)).columns
    # 4 columns of chrome: "│ " + " │"
    return max(int(columns * 0.8), 60) - 4


def _wrap(text: str, width: int) -> list[str]:
    lines = []
    for line in text.split('\n'):
        if len(line) <= width:
            lines.append(line)
            continue
        # continuation of a bullet lines up under its text
        indent = ' ' * (len(line) - len(line.lstrip()) + 2) if line.lstrip().startswith(('- ', '* ')) else ''
        lines.extend(textwrap.wrap(line, width=width, subsequent_indent=indent) or [''])
    return lines


def _emphasize(line: str) -> str:
    """Bold markdown headings so topic groups stand out inside the box."""
    if line.startswith('#'):
        return bold(line)
    return line


def print_box(text: str, title: str | None = None) -> None:
    """Frame a multi-line block, wrapping long lines to the terminal width."""
    lines = _wrap(text.rstrip('\n'), _box_width()) or ['']
    label = f" {title} " if title else ''
    width = max(max(len(line) for line in lines), len(label))

    if _style.UNICODE_ENABLED:
        horizontal, vertical = '─', '│'
        corners = ('┌', '┐', '└', '┘')
    else:
        horizontal, vertical = '-', '|'
        corners = ('+', '+', '+', '+')

    top = corners[0] + horizontal + label + horizontal * (width - len(label)) + horizontal + corners[1]
    print(dim(top))
    for line in lines:
        print(f"{dim(vertical)} {_emphasize(line)}{' ' * (width - len(line))} {dim(vertical)}")
    print(dim(corners[2] + horizontal * (width + 2) + corners[3]))


def colorize_commit_type(message: str) -> str:
    """Color the conventional-commit prefix of the subject line."""
    if not _style.COLORS_ENABLED or not message:
        return message
    subject, newline, body = message.partition('\n')
    match = _COMMIT_TYPE.match(subject)
    color = COMMIT_TYPE_COLORS.get(match.group(1)) if match else None
    if color is None:
        return message
    prefix = match.group(0)
    return _style.colorize(prefix, Colors.BOLD, color) + subject[len(prefix):] + newline + body


class Spinner:
    """Context manager that animates `message` while a slow call runs.

    On a non-interactive stdout the message is printed once instead, so logs
    and captured output still say what was happening.
    """

    FRAMES_UNICODE = '⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏'
    FRAMES_ASCII = '-\\|/'
    INTERVAL = 0.08

    def __init__(self, message: str = ''):
        self.message = message
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._frames = self.FRAMES_UNICODE if _style.UNICODE_ENABLED else self.FRAMES_ASCII

    @staticmethod
    def _interactive() -> bool:
        return sys.stdout.isatty()

    def _run(self) -> None:
        tick = 0
        while not self._stop.is_set():
            frame = self._frames[tick % len(self._frames)]
            print(f"\r\033[K{info(frame)} {self.message}", end='', flush=True)
            tick += 1
            self._stop.wait(self.INTERVAL)

    def __enter__(self) -> 'Spinner':
        if self._interactive():
            self._stop.clear()
            self._thread = threading.Thread(target=self._run, daemon=True)
            self._thread.start()
        elif self.message:
            print(f"{self.message}...")
        return self

    def __exit__(self, *exc_info) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
            print('\r\033[K', end='', flush=True)

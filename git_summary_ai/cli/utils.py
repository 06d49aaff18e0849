"""CLI Utility Functions"""

import getpass
import logging
import os
import subprocess
import sys
import tempfile

from git_summary_ai.output import dim, info


def setup_logging(verbose: bool = False) -> None:
    """Warnings by default; --verbose or DEBUG in the environment turns on debug output."""
    level = logging.DEBUG if verbose or os.environ.get('DEBUG') else logging.WARNING
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)


def is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def ask(prompt: str, default: str = '') -> str:
    """input() that treats Ctrl-C / EOF as the default answer."""
    try:
        return input(prompt).strip() or default
    except (KeyboardInterrupt, EOFError):
        print()
        return default


def confirm(prompt: str, default: bool = True) -> bool:
    hint = 'Y/n' if default else 'y/N'
    answer = ask(f"{prompt} [{hint}]: ").lower()
    if not answer:
        return default
    return answer in ('y', 'yes')


def choose(prompt: str, options: list[tuple[str, str]], default: int = 0) -> str | None:
    """Numbered menu of (value, label) pairs. Returns the chosen value, or None on quit."""
    for i, (_, label) in enumerate(options, 1):
        marker = dim(' (default)') if i - 1 == default else ''
        print(f"  {info(str(i))}. {label}{marker}")
    print()
    while True:
        choice = ask(f"{prompt} [1-{len(options)}] or (q)uit: ", str(default + 1)).lower()
        if choice == 'q':
            return None
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return options[int(choice) - 1][0]
        print(f"Enter 1-{len(options)} or q")


def ask_secret(prompt: str) -> str:
    try:
        return getpass.getpass(prompt).strip()
    except (KeyboardInterrupt, EOFError):
        print()
        return ''


def edit_message(message: str) -> str | None:
    """Open message in user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(message)
        tmp.close()
        subprocess.run([editor, tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = f.read().strip()
        return edited if edited else None
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)

"""Terminal Output Formatting Package

Colours turn off when NO_COLOR is set, TERM is "dumb" or stdout isn't a
terminal. FORCE_COLOR wins over all of those.
"""

import os
import re
import shutil
import sys
import textwrap
import threading

from devflow import BRANCH_TYPE_NAMES, COMMIT_TYPE_NAMES


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'


def _enable_windows_ansi() -> bool:
    try:
        import ctypes
        kernel32 = ctypes.windll.kernel32
        # ENABLE_PROCESSED_OUTPUT | ENABLE_WRAP_AT_EOL_OUTPUT | ENABLE_VIRTUAL_TERMINAL_PROCESSING
        return bool(kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7))
    except (ImportError, AttributeError, OSError):
        return False


def _color_wanted(stream=None) -> bool:
    stream = stream or sys.stdout
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if os.environ.get('TERM') == 'dumb' or not getattr(stream, 'isatty', lambda: False)():
        return False
    return _enable_windows_ansi() if sys.platform == 'win32' else True


def _can_encode(sample: str, stream=None) -> bool:
    encoding = getattr(stream or sys.stdout, 'encoding', None) or 'utf-8'
    try:
        sample.encode(encoding)
    except (UnicodeEncodeError, LookupError):
        return False
    return True


COLORS_ENABLED = _color_wanted()
UNICODE_ENABLED = _can_encode('✓⚠─│┌⠋')

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
WARN = '⚠' if UNICODE_ENABLED else '[!]'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning(WARN)} {warning(message)}")


def print_box(text: str, title: str | None = None) -> None:
    """Frame text in a box, wrapping long lines. Title sits in the top border."""
    term_width = shutil.get_terminal_size((80, 24)).columns
    # Box chrome takes 4 chars: "│ " + " │"
    max_width = max(int(term_width * 0.8), 60) - 4

    wrapped_lines = []
    for line in text.split('\n'):
        if len(line) > max_width:
            indent = '  ' if line.startswith(('- ', '* ')) else ''
            wrapped_lines.extend(textwrap.wrap(line, width=max_width, subsequent_indent=indent))
        else:
            wrapped_lines.append(line)

    label = f" {title} " if title else ""
    content_width = max([len(line) for line in wrapped_lines] + [len(label)])
    h, side, corners = ('─', '│', '┌┐└┘') if UNICODE_ENABLED else ('-', '|', '++++')

    print(dim(f'{corners[0]}{h}{label}{h * (content_width - len(label))}{h}{corners[1]}'))
    for line in wrapped_lines:
        padding = ' ' * (content_width - len(line))
        print(f"{dim(side)} {line}{padding} {dim(side)}")
    print(dim(f'{corners[2]}{h}{h * content_width}{h}{corners[3]}'))


# Keyed by commit type and branch type; uncoloured types print plain
TYPE_COLORS = {
    'feat': Colors.GREEN,
    'feature': Colors.GREEN,
    'fix': Colors.RED,
    'refactor': Colors.YELLOW,
    'docs': Colors.CYAN,
    'test': Colors.MAGENTA,
    'perf': Colors.GREEN,
    'chore': Colors.DIM,
    'style': Colors.DIM,
    'ci': Colors.CYAN,
    'build': Colors.CYAN,
}

_COMMIT_PREFIX_RE = re.compile(rf"^({'|'.join(COMMIT_TYPE_NAMES)})(\([^)]*\))?!?:")
_BRANCH_PREFIX_RE = re.compile(rf"^({'|'.join(BRANCH_TYPE_NAMES)})/")


def _colorize_type_prefix(text: str, pattern: re.Pattern) -> str:
    match = pattern.match(text)
    if not match or not COLORS_ENABLED:
        return text
    color = TYPE_COLORS.get(match.group(1))
    if not color:
        return text
    prefix = match.group(0)
    return _colorize(prefix, Colors.BOLD, color) + text[len(prefix):]


def colorize_commit_type(message: str) -> str:
    """Color the `type(scope):` prefix on the first line of a commit message."""
    first, sep, rest = message.partition('\n')
    return _colorize_type_prefix(first, _COMMIT_PREFIX_RE) + sep + rest


def colorize_branch_name(name: str) -> str:
    """Color the `type/` prefix of a branch name, e.g. feature/42-add-login."""
    return _colorize_type_prefix(name, _BRANCH_PREFIX_RE)


class Spinner:
    """Animated spinner with a status message. Use as context manager."""
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']

    def __init__(self, message: str = ""):
        self.message = message
        self._thread = None
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            with self._lock:
                print(f'\r\033[K{frame} {self.message}', end='', flush=True)
            idx += 1
            self._stop_event.wait(0.08)

    def write(self, line: str) -> None:
        """Print a dimmed line above the spinner without garbling it."""
        with self._lock:
            if self._thread:
                print('\r\033[K', end='', flush=True)
            print(dim(line), file=sys.stderr, flush=True)

    def __enter__(self):
        if sys.stdout.isatty():
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        if sys.stdout.isatty():
            print('\r\033[K', end='', flush=True)


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "WARN",
    "success", "error", "warning", "info", "dim", "bold",
    "print_success", "print_error", "print_warning", "print_box",
    "colorize_commit_type", "colorize_branch_name", "Spinner", "TYPE_COLORS",
]

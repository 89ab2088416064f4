"""CLI Interaction Helpers"""

import os
import shlex
import subprocess
import sys
import tempfile

from devflow.output import bold, dim, info, colorize_commit_type

CUSTOM_CHOICE = "__custom__"


def select_option(options: list[str], allow_custom: bool = False, colorize: bool = False) -> str | None:
    """Numbered menu. Returns the chosen option, CUSTOM_CHOICE, or None if cancelled."""
    print()
    for i, opt in enumerate(options, 1):
        label = colorize_commit_type(opt) if colorize else opt
        print(f"  {info(f'[{i}]')} {label}")
    if allow_custom:
        print(f"  {info('[c]')} {dim('Write custom message')}")
    print()

    custom_hint = ", (c)ustom" if allow_custom else ""
    while True:
        try:
            choice = input(f"Select [1-{len(options)}]{custom_hint} or (q)uit: ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            return None
        if choice == 'q':
            return None
        if allow_custom and choice == 'c':
            return CUSTOM_CHOICE
        if choice == '' and options:
            return options[0]
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return options[int(choice) - 1]
        print(f"Enter 1-{len(options)}{custom_hint} or q")


def confirm(question: str, default: bool = True) -> bool:
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        answer = input(f"{question} {dim(suffix)} ").strip().lower()
    except (KeyboardInterrupt, EOFError):
        return False
    if not answer:
        return default
    return answer in ('y', 'yes')


def prompt_text(question: str, default: str | None = None) -> str | None:
    """Ask until a non-empty answer (or the default) is given. None if cancelled."""
    shown_default = f" {dim(f'({default})')}" if default else ""
    while True:
        try:
            answer = input(f"{bold(question)}{shown_default} ").strip()
        except (KeyboardInterrupt, EOFError):
            return None
        if answer:
            return answer
        if default:
            return default
        print(dim("  Value cannot be empty"))


def edit_text(text: str, suffix: str = '.md') -> str | None:
    """Open text in the user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix=suffix, delete=False, encoding='utf-8')
    try:
        tmp.write(text)
        tmp.close()
        subprocess.run([*shlex.split(editor), tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = f.read().strip()
        return edited if edited else None
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        tmp.close()
        try:
            os.unlink(tmp.name)
        except OSError as e:
            # Log to stderr so temp files don't silently accumulate
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)

"""CLI Config and Setup Commands"""

import getpass
import os
import sys

from devflow.config import ConfigError, ConfigManager, MODEL_ENV_VAR
from devflow.copilot import MODEL_CATALOG, describe, discover, format_cost
from devflow.output import bold, dim, info, success, warning, print_success, print_error, print_warning
from devflow.cli.utils import confirm, prompt_text, select_option

SETUP_MODELS = ["claude-sonnet-4.5", "claude-haiku-4.5", "gpt-4.1"]


def _mask(token: str | None) -> str:
    if not token:
        return warning("Not set (using environment or gh CLI)")
    return success(f"Configured ({token[:4]}…{token[-4:]})" if len(token) > 12 else "Configured")


def display_config(manager: ConfigManager) -> int:
    """Display current configuration."""
    config = manager.load()

    print(f"\n{bold('Current Configuration')}\n")
    if manager.config_path.exists():
        print(f"  {dim('Loaded from:')} {manager.config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no {manager.config_path} yet)")

    env_model = os.environ.get(MODEL_ENV_VAR)
    if env_model:
        print(f"  {dim('Environment override:')} {MODEL_ENV_VAR}={env_model}")

    descriptor = describe(config.copilot_model)
    print()
    print(f"  {bold('Settings:')}")
    print(f"    copilot_model:       {info(config.copilot_model)} {dim(f'({format_cost(descriptor)})')}")
    print(f"    github_token:        {_mask(config.github_token)}")
    print(f"    default_base_branch: {info(config.default_base_branch)}")
    print(f"\n  {dim('Run')} devflow config setup {dim('to configure')}\n")
    return 0


def display_models(binary: str = "copilot") -> int:
    """List the models the Copilot CLI reports, with tier and cost."""
    print(f"\n{bold('Available Copilot models')}\n")
    descriptors = discover(binary)
    width = max(len(d.id) for d in descriptors)
    for d in descriptors:
        print(f"  {info(d.id.ljust(width))}  {format_cost(d):<36} {dim(d.description)}")
    unknown = [d.id for d in descriptors if d.id not in MODEL_CATALOG]
    if unknown:
        print(f"\n  {dim('New models have unknown cost; check your Copilot plan before relying on them.')}")
    print()
    return 0


def run_setup(manager: ConfigManager) -> int:
    """Interactive setup wizard."""
    print(f"\n{bold('DevFlow Setup Wizard')}\n")
    print(dim(f"Your token will be stored in {manager.config_path}"))
    print(dim("with restricted permissions (600 - owner access only)\n"))

    config = manager.load()

    if confirm("Configure a GitHub token?", default=not config.github_token):
        try:
            token = getpass.getpass("GitHub Personal Access Token: ").strip()
        except (KeyboardInterrupt, EOFError):
            print()
            print_warning("Setup cancelled")
            return 0
        if token and not token.startswith(('ghp_', 'github_pat_')):
            print_warning("Token doesn't start with ghp_ or github_pat_; saving it anyway.")
        if token:
            config.github_token = token

    print(f"\n{bold('Preferred Copilot model:')}")
    labels = [f"{m} ({format_cost(describe(m))})" for m in SETUP_MODELS]
    choice = select_option(labels)
    if choice is None:
        print_warning("Setup cancelled")
        return 0
    config.copilot_model = SETUP_MODELS[labels.index(choice)]

    base = prompt_text("Default base branch:", default=config.default_base_branch)
    if base is None:
        print_warning("Setup cancelled")
        return 0
    config.default_base_branch = base

    try:
        path = manager.save(config)
    except ConfigError as e:
        print_error(str(e))
        return 1

    print_success(f"Saved to {path}")
    return display_config(manager)


def run_config_set(manager: ConfigManager, key: str, value: str) -> int:
    try:
        manager.set(key, value)
    except ConfigError as e:
        print_error(str(e))
        return 1
    shown = "********" if key == "github_token" else value
    print_success(f"Set {key} = {shown}")
    return 0


def run_config_get(manager: ConfigManager, key: str) -> int:
    try:
        value = manager.get(key)
    except ConfigError as e:
        print_error(str(e))
        return 1
    if value:
        print(value)
    else:
        print_warning(f"{key} is not set")
    return 0


def run_install_completion() -> int:
    """Show how to enable shell tab completion."""
    shell = os.environ.get('SHELL', '')
    line = 'eval "$(register-python-argcomplete devflow)"'

    print(f"\n{bold('Tab Completion Setup')}\n")

    if 'zsh' in shell or 'bash' in shell:
        rc_file = os.path.expanduser('~/.zshrc' if 'zsh' in shell else '~/.bashrc')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim(f'source {rc_file}')}")
    elif sys.platform == 'win32':
        print("For PowerShell, add to your $PROFILE:\n")
        print("  register-python-argcomplete --shell powershell devflow | Out-String | Invoke-Expression")
    else:
        print(f"  {dim('# Bash/Zsh')}")
        print(f"  {line}\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish devflow | source")

    print(f"\n{dim('After setup, press TAB to autocomplete commands and flags.')}")
    return 0

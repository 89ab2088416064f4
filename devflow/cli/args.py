"""CLI Argument Parsing"""

import argparse
import argcomplete

from devflow import BRANCH_TYPE_NAMES, __version__
from devflow.config import Config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='devflow',
        description='AI-powered Git workflow automation using GitHub Copilot CLI',
        epilog='Example: devflow commit --all'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-m', '--model', type=str, metavar='MODEL', help='Copilot model for this run (overrides config)')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')

    commands = parser.add_subparsers(dest='command', metavar='COMMAND')

    # commit
    commit = commands.add_parser('commit', help='Generate a commit message for staged changes')
    commit.add_argument('-a', '--all', action='store_true', help='Stage all changes before committing')

    # pr create
    pr = commands.add_parser('pr', help='Manage pull requests')
    pr_commands = pr.add_subparsers(dest='pr_command', metavar='ACTION', required=True)
    pr_create = pr_commands.add_parser('create', help='Generate a PR description and open the pull request')
    pr_create.add_argument('-b', '--base', type=str, metavar='BRANCH', help='Base branch (default: from config or origin)')
    pr_create.add_argument('-i', '--issue', type=int, metavar='NUMBER', help='Related issue number')

    # branch create
    branch = commands.add_parser('branch', help='Branch management')
    branch_commands = branch.add_subparsers(dest='branch_command', metavar='ACTION', required=True)
    branch_create = branch_commands.add_parser('create', help='Create a branch with a generated name')
    branch_create.add_argument('description', nargs='?', help='What the branch is for')
    branch_create.add_argument('-i', '--issue', type=int, metavar='NUMBER', help='Name the branch after a GitHub issue')
    branch_create.add_argument('-t', '--type', type=str, choices=BRANCH_TYPE_NAMES, default=None, help='Branch type (default: feature)')

    # config
    config = commands.add_parser('config', help='Configure devflow settings')
    config_commands = config.add_subparsers(dest='config_command', metavar='ACTION', required=True)
    config_commands.add_parser('setup', help='Interactive setup wizard')
    config_commands.add_parser('show', help='Show current configuration')
    config_commands.add_parser('models', help='List models the Copilot CLI supports, with cost')
    config_set = config_commands.add_parser('set', help='Set a configuration value')
    config_set.add_argument('key', choices=Config.keys())
    config_set.add_argument('value')
    config_get = config_commands.add_parser('get', help='Get a configuration value')
    config_get.add_argument('key', choices=Config.keys())

    commands.add_parser('completion', help='Show how to enable shell tab completion')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
    return args

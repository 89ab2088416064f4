"""CLI Main Entry Point"""

import logging
import sys

from devflow import BRANCH_TYPES
from devflow.config import ConfigManager, get_config_manager
from devflow.generation import CopilotService, PullRequestDraft
from devflow.git import CommitInfo, DiffProcessor, GitAnalyzer, GitError, ProcessedDiff
from devflow.github import GitHubClient, GitHubError, Issue
from devflow.output import (
    bold,
    colorize_branch_name,
    dim,
    info,
    success,
    print_box,
    print_error,
    print_success,
    print_warning,
    Spinner,
)

from devflow.cli.args import parse_args
from devflow.cli.commands import (
    display_config,
    display_models,
    run_config_get,
    run_config_set,
    run_install_completion,
    run_setup,
)
from devflow.cli.utils import CUSTOM_CHOICE, confirm, edit_text, prompt_text, select_option

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _display_commits(commits: list[CommitInfo], max_shown: int = 10) -> None:
    """List branch commits, collapsing long lists."""
    print(bold(f"Commits in this branch ({len(commits)}):"))
    for idx, commit in enumerate(commits[:max_shown], 1):
        print(dim(f"  {idx}. {commit.hash} - {commit.message}"))
    remaining = len(commits) - max_shown
    if remaining > 0:
        print(dim(f"  ... and {remaining} more commits"))


def _display_staged_files(processed: ProcessedDiff, max_shown: int = 10) -> None:
    """Show which staged files go into the prompt, collapsing long lists."""
    if not processed.file_details:
        return
    print(bold("Staged changes:"))
    for path, additions, deletions in processed.file_details[:max_shown]:
        print(dim(f"  {path} (+{additions} -{deletions})"))
    remaining = len(processed.file_details) - max_shown
    if remaining > 0:
        print(dim(f"  ... and {remaining} more files"))
    if processed.filtered_files > 0:
        print(dim(f"  {processed.filtered_files} noise files filtered"))


def _display_pr(draft: PullRequestDraft) -> None:
    print(f"\n{bold('Title:')} {draft.title}\n")
    print_box(draft.body, title="Description")


def _fetch_issue(manager: ConfigManager, number: int) -> Issue:
    client = GitHubClient.from_repository(manager.resolve_token())
    with Spinner(f"Fetching issue #{number}..."):
        return client.get_issue(number)


# ---------------------------------------------------------------------------
# devflow commit
# ---------------------------------------------------------------------------

def _commit_flow(args, model: str) -> int:
    git = GitAnalyzer()

    if args.all:
        git.stage_all()
        print_success("Staged all changes")

    if not git.has_staged_changes():
        print_warning("No staged changes to commit")
        print(dim("Tip: Use `git add <files>` or `devflow commit --all`"))
        return 0

    diff = git.get_staged_diff()
    _display_staged_files(DiffProcessor().process(diff))

    with Spinner("Asking GitHub Copilot for commit messages...") as spinner:
        messages = CopilotService(model=model, notify=spinner.write).generate_commit_messages(diff)

    choice = select_option(messages, allow_custom=True, colorize=True)
    if choice is None:
        print(dim("Cancelled."))
        return 0
    if choice == CUSTOM_CHOICE:
        choice = prompt_text("Commit message:")
        if choice is None:
            print(dim("Cancelled."))
            return 0

    if not confirm(f'Commit with message: "{choice}"?'):
        print_warning("Commit cancelled")
        return 0

    git.commit(choice)
    print_success(success(f'Committed: "{choice}"'))
    return 0


# ---------------------------------------------------------------------------
# devflow pr create
# ---------------------------------------------------------------------------

def _pr_create_flow(args, model: str) -> int:
    manager = get_config_manager()
    git = GitAnalyzer()

    current = git.get_current_branch()
    base = git.get_base_branch(args.base or manager.load().default_base_branch)
    if current == base:
        print_error(f"You're on {base}. Create a feature branch first!")
        print(dim("Tip: devflow branch create \"what you're working on\""))
        return 1

    commits = git.get_commits(base, current)
    if not commits:
        print_error(f"No commits found on {current} that aren't on {base}")
        return 1

    print(f"\nAnalyzing branch {bold(current)} {dim(f'(base: {base})')}\n")
    _display_commits(commits)

    issue_context = ""
    if args.issue:
        try:
            issue_context = _fetch_issue(manager, args.issue).as_context()
            print_success(f"Fetched issue #{args.issue}")
        except GitHubError as e:
            print_warning(f"Could not fetch issue #{args.issue}: {e}")

    with Spinner("Generating PR description with Copilot...") as spinner:
        draft = CopilotService(model=model, notify=spinner.write).generate_pr_description(commits, issue_context)

    _display_pr(draft)
    title, body = draft.title, draft.body
    if confirm("Edit title or description?", default=False):
        title = prompt_text("PR title:", default=title) or title
        body = edit_text(body) or body

    if not confirm(f'Create PR: "{title}"?'):
        print_warning("PR creation cancelled")
        return 0

    client = GitHubClient.from_repository(manager.resolve_token())
    if not git.is_branch_pushed(current):
        with Spinner(f"Pushing {current} to origin..."):
            git.push_branch(current)
        print_success(f"Pushed {current}")

    with Spinner("Creating pull request on GitHub..."):
        pr = client.create_pull_request(title=title, body=body, head=current, base=base)
    print_success("Pull request created")
    print(info(f"\n  {pr.html_url}\n"))
    return 0


# ---------------------------------------------------------------------------
# devflow branch create
# ---------------------------------------------------------------------------

def _branch_create_flow(args, model: str) -> int:
    manager = get_config_manager()
    git = GitAnalyzer()

    description = args.description
    branch_type = args.type or 'feature'

    if args.issue:
        issue = _fetch_issue(manager, args.issue)
        print(f"\n{dim('Issue:')} {issue.title}\n")
        if confirm("Use this issue title for the branch name?"):
            description = issue.title
        else:
            description = prompt_text("Branch description:")

    if not description and not args.issue:
        if not args.type:
            print(bold("\nBranch type:"))
            labels = [f"{name} - {desc}" for name, desc in BRANCH_TYPES.items()]
            picked = select_option(labels)
            if picked is None:
                print(dim("Cancelled."))
                return 0
            branch_type = picked.split(' - ', 1)[0]
        description = prompt_text("Branch description:")

    if not description:
        print(dim("Cancelled."))
        return 0

    with Spinner("Asking Copilot for a branch name...") as spinner:
        name = CopilotService(model=model, notify=spinner.write).generate_branch_name(
            description, branch_type, args.issue
        )

    print(f"\n{bold('Branch name:')} {colorize_branch_name(name)}\n")
    if not confirm(f'Create and checkout "{name}"?'):
        print_warning("Branch creation cancelled")
        return 0

    git.create_and_checkout_branch(name)
    print_success(f"Switched to new branch: {bold(name)}")
    return 0


# ---------------------------------------------------------------------------
# devflow config
# ---------------------------------------------------------------------------

def _config_flow(args) -> int:
    manager = get_config_manager()
    if args.config_command == 'setup':
        return run_setup(manager)
    if args.config_command == 'show':
        return display_config(manager)
    if args.config_command == 'models':
        return display_models()
    if args.config_command == 'set':
        return run_config_set(manager, args.key, args.value)
    return run_config_get(manager, args.key)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        return 0
    if args.command == 'completion':
        return run_install_completion()
    if args.command == 'config':
        return _config_flow(args)

    model = get_config_manager().resolve_model(args.model)
    logger.debug("Using model %s", model)

    try:
        if args.command == 'commit':
            return _commit_flow(args, model)
        if args.command == 'pr':
            return _pr_create_flow(args, model)
        if args.command == 'branch':
            return _branch_create_flow(args, model)
    except (GitError, GitHubError) as e:
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print(dim("\nCancelled."))
        return 130

    return 0

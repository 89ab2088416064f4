"""
Tests for CLI output and interaction.

Shows sample output for each scenario. Run with:
    pytest tests/test_display.py -v
    pytest tests/test_display.py -v -s   # see actual terminal output
"""

import re

import pytest

from devflow.cli.args import parse_args
from devflow.cli.main import _display_commits, _display_pr, _display_staged_files, main
from devflow.cli.utils import CUSTOM_CHOICE, confirm, prompt_text, select_option
from devflow.config import ConfigManager
from devflow.generation import PullRequestDraft, fallback_branch_name
from devflow.git import CommitInfo, GitError, ProcessedDiff
from devflow.output import Colors, _color_wanted, colorize_branch_name, colorize_commit_type, print_box

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def strip_ansi():
    """Return a function that removes ANSI escape codes."""
    def _strip(text: str) -> str:
        return ANSI_RE.sub('', text)
    return _strip


@pytest.fixture
def print_sample(capsys):
    """Return a function that replays captured output for -s viewing."""
    def _print(out: str):
        with capsys.disabled():
            try:
                print(out)
            except UnicodeEncodeError:
                # Windows cp1252 can't encode box drawing characters
                cleaned = ANSI_RE.sub('', out)
                print(cleaned.encode('ascii', errors='replace').decode('ascii'))
    return _print


@pytest.fixture
def answers(monkeypatch):
    """Feed scripted answers to input(); EOFError once they run out."""
    def _install(*values):
        remaining = list(values)

        def fake_input(prompt=""):
            if not remaining:
                raise EOFError
            return remaining.pop(0)
        monkeypatch.setattr("builtins.input", fake_input)
    return _install


# ---------------------------------------------------------------------------
# Commit list and PR display
# ---------------------------------------------------------------------------

class TestDisplayCommits:
    """Output from _display_commits()."""

    def test_small_list_shows_all(self, capsys, strip_ansi):
        commits = [CommitInfo("abc1234", "feat: add login"), CommitInfo("def5678", "fix: typo")]
        _display_commits(commits)
        out = strip_ansi(capsys.readouterr().out)

        assert "Commits in this branch (2):" in out
        assert "1. abc1234 - feat: add login" in out
        assert "2. def5678 - fix: typo" in out
        assert "more commits" not in out

    def test_large_list_collapses(self, capsys, strip_ansi):
        commits = [CommitInfo(f"c{i:06d}", f"feat: change {i}") for i in range(12)]
        _display_commits(commits)
        out = strip_ansi(capsys.readouterr().out)

        assert "feat: change 9" in out
        assert "feat: change 10" not in out
        assert "... and 2 more commits" in out


class TestDisplayStagedFiles:
    """Output from _display_staged_files()."""

    def test_lists_files_with_counts(self, capsys, strip_ansi):
        processed = ProcessedDiff(
            summary="", detailed_diff="", filtered_files=2,
            file_details=[("src/app.py", 3, 2), ("README.md", 1, 0)],
        )
        _display_staged_files(processed)
        out = strip_ansi(capsys.readouterr().out)

        assert "Staged changes:" in out
        assert "src/app.py (+3 -2)" in out
        assert "README.md (+1 -0)" in out
        assert "2 noise files filtered" in out

    def test_large_list_collapses(self, capsys, strip_ansi):
        details = [(f"src/mod{i}.py", 1, 0) for i in range(13)]
        _display_staged_files(ProcessedDiff(summary="", detailed_diff="", file_details=details))
        out = strip_ansi(capsys.readouterr().out)

        assert "src/mod9.py" in out
        assert "src/mod10.py" not in out
        assert "... and 3 more files" in out

    def test_nothing_printed_without_files(self, capsys):
        _display_staged_files(ProcessedDiff(summary="", detailed_diff=""))
        assert capsys.readouterr().out == ""


class TestPrintBox:

    def test_title_in_top_border(self, capsys, strip_ansi):
        print_box("## Summary\n\nAdds login.", title="Description")
        lines = strip_ansi(capsys.readouterr().out).splitlines()

        assert " Description " in lines[0]
        assert any("## Summary" in line for line in lines)
        assert len({len(line) for line in lines}) == 1

    def test_display_pr(self, capsys, strip_ansi, print_sample):
        _display_pr(PullRequestDraft(title="Add OAuth login", body="## Summary\n\nAdds OAuth login."))
        out = capsys.readouterr().out
        print_sample(out)
        out = strip_ansi(out)

        assert "Title: Add OAuth login" in out
        assert "Adds OAuth login." in out


class TestTypeColors:

    @pytest.fixture
    def colors_on(self, monkeypatch):
        monkeypatch.setattr("devflow.output.COLORS_ENABLED", True)

    def test_commit_prefix_colored(self, colors_on, strip_ansi):
        colored = colorize_commit_type("feat(auth): add login\n\nBody text")
        assert colored.startswith(f"{Colors.BOLD}{Colors.GREEN}feat(auth):{Colors.RESET}")
        assert strip_ansi(colored) == "feat(auth): add login\n\nBody text"

    def test_unknown_commit_type_untouched(self, colors_on):
        assert colorize_commit_type("wip: stuff") == "wip: stuff"

    def test_branch_prefix_colored(self, colors_on, strip_ansi):
        colored = colorize_branch_name("fix/42-null-check")
        assert colored.startswith(f"{Colors.BOLD}{Colors.RED}fix/{Colors.RESET}")
        assert strip_ansi(colored) == "fix/42-null-check"

    def test_plain_when_colors_off(self, monkeypatch):
        monkeypatch.setattr("devflow.output.COLORS_ENABLED", False)
        assert colorize_branch_name("feature/add-login") == "feature/add-login"
        assert colorize_commit_type("feat: add login") == "feat: add login"


class TestColorDetection:

    class Tty:
        def isatty(self):
            return True

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("NO_COLOR", "FORCE_COLOR", "TERM"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setattr("devflow.output.sys.platform", "linux")

    def test_tty_gets_color(self):
        assert _color_wanted(self.Tty()) is True

    def test_pipe_gets_none(self, tmp_path):
        with open(tmp_path / "out.txt", "w") as stream:
            assert _color_wanted(stream) is False

    def test_no_color_wins(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert _color_wanted(self.Tty()) is False

    def test_dumb_terminal(self, monkeypatch):
        monkeypatch.setenv("TERM", "dumb")
        assert _color_wanted(self.Tty()) is False

    def test_force_color_without_tty(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FORCE_COLOR", "1")
        with open(tmp_path / "out.txt", "w") as stream:
            assert _color_wanted(stream) is True


# ---------------------------------------------------------------------------
# Interactive prompts
# ---------------------------------------------------------------------------

class TestSelectOption:

    OPTIONS = ["feat: add login", "fix: handle timeout"]

    def test_enter_picks_first(self, answers):
        answers("")
        assert select_option(self.OPTIONS) == "feat: add login"

    def test_number(self, answers):
        answers("2")
        assert select_option(self.OPTIONS) == "fix: handle timeout"

    def test_invalid_then_valid(self, answers, capsys):
        answers("9", "abc", "1")
        assert select_option(self.OPTIONS) == "feat: add login"
        assert "Enter 1-2 or q" in capsys.readouterr().out

    def test_custom(self, answers):
        answers("c")
        assert select_option(self.OPTIONS, allow_custom=True) == CUSTOM_CHOICE

    def test_custom_not_offered(self, answers):
        answers("c", "q")
        assert select_option(self.OPTIONS) is None

    def test_eof_cancels(self, answers):
        answers()
        assert select_option(self.OPTIONS) is None


class TestConfirmAndPrompt:

    @pytest.mark.parametrize("reply, default, expected", [
        ("", True, True),
        ("", False, False),
        ("y", False, True),
        ("YES", False, True),
        ("n", True, False),
        ("maybe", True, False),
    ])
    def test_confirm(self, answers, reply, default, expected):
        answers(reply)
        assert confirm("Proceed?", default=default) is expected

    def test_prompt_text_repeats_until_answer(self, answers):
        answers("", "  add login  ")
        assert prompt_text("Description:") == "add login"

    def test_prompt_text_default(self, answers):
        answers("")
        assert prompt_text("Base branch:", default="main") == "main"


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

class TestParseArgs:

    def test_branch_create(self):
        args = parse_args(["branch", "create", "add login", "-i", "12", "-t", "fix"])
        assert (args.command, args.branch_command) == ("branch", "create")
        assert args.description == "add login"
        assert args.issue == 12
        assert args.type == "fix"

    def test_global_model_and_commit_all(self):
        args = parse_args(["-m", "gpt-4.1", "commit", "-a"])
        assert args.model == "gpt-4.1"
        assert args.all is True

    def test_pr_create(self):
        args = parse_args(["pr", "create", "--base", "develop"])
        assert args.base == "develop"
        assert args.issue is None

    def test_rejects_unknown_branch_type(self, capsys):
        with pytest.raises(SystemExit):
            parse_args(["branch", "create", "x", "-t", "hotfix"])

    def test_rejects_unknown_config_key(self, capsys):
        with pytest.raises(SystemExit):
            parse_args(["config", "set", "provider", "claude"])

    def test_no_command_prints_help(self, capsys):
        args = parse_args([])
        assert args.command is None
        assert "usage: devflow" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Command flows with git and Copilot stubbed out
# ---------------------------------------------------------------------------

class FakeGit:
    instances = []

    def __init__(self):
        self.committed = None
        self.created = None
        FakeGit.instances.append(self)

    def has_staged_changes(self):
        return True

    def get_staged_diff(self):
        return "diff --git a/app.py b/app.py\n+print('hi')\n"

    def stage_all(self):
        pass

    def commit(self, message):
        self.committed = message

    def get_current_branch(self):
        return "main"

    def get_base_branch(self, default=None):
        return default or "main"

    def create_and_checkout_branch(self, name):
        self.created = name


class FakeService:
    models = []

    def __init__(self, model=None, notify=None):
        FakeService.models.append(model)

    def generate_commit_messages(self, diff):
        return ["feat: add greeting", "chore: tidy"]

    def generate_branch_name(self, description, branch_type="feature", issue_number=None):
        return fallback_branch_name(description, branch_type, issue_number)


class TestCommandFlows:

    @pytest.fixture(autouse=True)
    def stubs(self, monkeypatch, tmp_path):
        FakeGit.instances = []
        FakeService.models = []
        monkeypatch.delenv("DEVFLOW_MODEL", raising=False)
        manager = ConfigManager(config_dir=tmp_path / ".devflow")
        monkeypatch.setattr("devflow.cli.main.get_config_manager", lambda: manager)
        monkeypatch.setattr("devflow.cli.main.GitAnalyzer", FakeGit)
        monkeypatch.setattr("devflow.cli.main.CopilotService", FakeService)
        monkeypatch.setattr("devflow.cli.main.confirm", lambda *a, **kw: True)
        return manager

    def test_commit(self, monkeypatch, capsys):
        monkeypatch.setattr("devflow.cli.main.select_option", lambda options, **kw: options[0])
        assert main(["commit"]) == 0

        assert FakeGit.instances[0].committed == "feat: add greeting"
        assert FakeService.models == ["claude-sonnet-4.5"]
        out = capsys.readouterr().out
        assert "app.py (+1 -0)" in out
        assert 'Committed: "feat: add greeting"' in out

    def test_commit_cancelled(self, monkeypatch):
        monkeypatch.setattr("devflow.cli.main.select_option", lambda options, **kw: None)
        assert main(["commit"]) == 0
        assert FakeGit.instances[0].committed is None

    def test_commit_without_staged_changes(self, monkeypatch, capsys):
        monkeypatch.setattr(FakeGit, "has_staged_changes", lambda self: False)
        assert main(["commit"]) == 0
        assert "No staged changes to commit" in capsys.readouterr().out
        assert FakeService.models == []

    def test_model_flag_reaches_service(self, monkeypatch):
        monkeypatch.setattr("devflow.cli.main.select_option", lambda options, **kw: options[0])
        main(["--model", "gpt-4.1", "commit"])
        assert FakeService.models == ["gpt-4.1"]

    def test_configured_model_reaches_service(self, monkeypatch, stubs):
        stubs.set("copilot_model", "claude-haiku-4.5")
        monkeypatch.setattr("devflow.cli.main.select_option", lambda options, **kw: options[0])
        main(["commit"])
        assert FakeService.models == ["claude-haiku-4.5"]

    def test_branch_create(self, capsys, strip_ansi):
        assert main(["branch", "create", "Add User Auth!!"]) == 0
        assert FakeGit.instances[0].created == "feature/add-user-auth"
        assert "Switched to new branch: feature/add-user-auth" in strip_ansi(capsys.readouterr().out)

    def test_pr_on_base_branch(self, capsys):
        assert main(["pr", "create"]) == 1
        assert "You're on main" in capsys.readouterr().err

    def test_git_error_is_reported(self, monkeypatch, capsys):
        def broken():
            raise GitError("Not inside a git repository")
        monkeypatch.setattr("devflow.cli.main.GitAnalyzer", broken)
        assert main(["commit"]) == 1
        assert "Not inside a git repository" in capsys.readouterr().err

    def test_config_get(self, capsys):
        assert main(["config", "get", "default_base_branch"]) == 0
        assert capsys.readouterr().out.strip() == "main"

    def test_config_set_then_show(self, capsys, strip_ansi):
        assert main(["config", "set", "copilot_model", "gpt-4.1"]) == 0
        assert main(["config", "show"]) == 0
        out = strip_ansi(capsys.readouterr().out)
        assert "Set copilot_model = gpt-4.1" in out
        assert "copilot_model:       gpt-4.1 (Free, no premium requests)" in out

"""Git Analyzer - Read and update the local repository."""

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Unit separator keeps commit subjects with tabs or pipes intact
_FIELD_SEP = '\x1f'
_LOG_FORMAT = _FIELD_SEP.join(['%h', '%s', '%an', '%aI'])


@dataclass
class CommitInfo:
    """One commit on the branch being described."""
    hash: str
    message: str
    author: str = ""
    date: str = ""


class GitError(Exception):
    """Raised when git operations fail."""
    pass


class GitAnalyzer:
    """Thin wrapper over the git CLI for the operations devflow needs."""

    def __init__(self):
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def get_staged_diff(self) -> str:
        return self._run_git('diff', '--cached')

    def has_staged_changes(self) -> bool:
        return bool(self._run_git('diff', '--cached', '--name-only').strip())

    def stage_all(self) -> None:
        self._run_git('add', '--all')

    def commit(self, message: str) -> None:
        self._run_git('commit', '-m', message)

    def get_current_branch(self) -> str:
        return self._run_git('rev-parse', '--abbrev-ref', 'HEAD').strip()

    def get_base_branch(self, default: str | None = None) -> str:
        """Configured default, else origin's HEAD, else main/master."""
        if default:
            return default
        try:
            ref = self._run_git('symbolic-ref', '--short', 'refs/remotes/origin/HEAD').strip()
            if ref:
                return ref.split('/', 1)[-1]
        except GitError:
            logger.debug("origin/HEAD not set, probing main/master")

        for candidate in ('main', 'master'):
            if self._branch_exists(candidate):
                return candidate
        return 'main'

    def _branch_exists(self, name: str) -> bool:
        try:
            self._run_git('rev-parse', '--verify', '--quiet', f'refs/heads/{name}')
            return True
        except GitError:
            return False

    def get_commits(self, base: str, head: str = 'HEAD') -> list[CommitInfo]:
        """Commits on head that aren't on base, newest first."""
        output = self._run_git('log', f'{base}..{head}', f'--format={_LOG_FORMAT}')
        return parse_log_output(output)

    def is_branch_pushed(self, branch: str) -> bool:
        try:
            return bool(self._run_git('ls-remote', '--heads', 'origin', branch).strip())
        except GitError:
            return False

    def push_branch(self, branch: str) -> None:
        self._run_git('push', '-u', 'origin', branch)

    def create_and_checkout_branch(self, name: str) -> None:
        self._run_git('checkout', '-b', name)


def parse_log_output(output: str) -> list[CommitInfo]:
    commits = []
    for line in output.strip().split('\n'):
        if not line.strip():
            continue
        parts = line.split(_FIELD_SEP)
        if len(parts) < 2:
            continue
        commits.append(CommitInfo(
            hash=parts[0],
            message=parts[1],
            author=parts[2] if len(parts) > 2 else "",
            date=parts[3] if len(parts) > 3 else "",
        ))
    return commits

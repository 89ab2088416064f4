"""GitHub API Package"""

from devflow.github.client import GitHubClient, GitHubError, Issue, PullRequest, parse_remote_url

__all__ = [
    "GitHubClient",
    "GitHubError",
    "Issue",
    "PullRequest",
    "parse_remote_url",
]

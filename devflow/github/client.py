"""GitHub REST Client - Issues and pull requests."""

import json
import re
import subprocess
import urllib.error
import urllib.request
from dataclasses import dataclass, field


class GitHubError(Exception):
    """Raised when GitHub operations fail."""
    pass


@dataclass
class Issue:
    number: int
    title: str
    body: str = ""
    state: str = "open"
    labels: list[str] = field(default_factory=list)
    html_url: str = ""

    def as_context(self) -> str:
        """Issue text as extra prompt context for PR generation."""
        context = f"Related Issue: #{self.number} - {self.title}"
        if self.body:
            context += f"\n{self.body.strip()}"
        return context


@dataclass
class PullRequest:
    number: int
    html_url: str


# Tried in order: custom SSH host alias, github.com SSH, HTTPS
REMOTE_URL_PATTERNS = [
    re.compile(r'^git@github\.com:(?P<owner>[^/]+)/(?P<repo>.+?)(?:\.git)?/?$'),
    re.compile(r'^git@[^:]+:(?P<owner>[^/]+)/(?P<repo>.+?)(?:\.git)?/?$'),
    re.compile(r'^(?:https?|ssh)://(?:[^@/]+@)?github\.com[:/](?P<owner>[^/]+)/(?P<repo>.+?)(?:\.git)?/?$'),
]


def parse_remote_url(url: str) -> tuple[str, str]:
    """Extract (owner, repo) from an SSH or HTTPS remote URL."""
    url = url.strip()
    for pattern in REMOTE_URL_PATTERNS:
        match = pattern.match(url)
        if match:
            return match.group('owner'), match.group('repo')
    raise GitHubError(
        "Could not parse GitHub remote URL. Supported formats: "
        "SSH (git@github.com:owner/repo) or HTTPS (https://github.com/owner/repo)"
    )


class GitHubClient:
    """Minimal GitHub REST client. Requires a token with repo scope."""

    API_URL = "https://api.github.com"
    TIMEOUT = 15
    AUTH_ERROR = "GitHub authentication failed. Check your token with: devflow config setup"

    def __init__(self, token: str, owner: str, repo: str, api_url: str | None = None):
        if not token:
            raise GitHubError(
                "GitHub token not found. Either:\n"
                "  1. Run: devflow config set github_token <token>\n"
                "  2. Set GITHUB_TOKEN in your environment\n"
                "  3. Run: gh auth login"
            )
        self.token = token
        self.owner = owner
        self.repo = repo
        self.api_url = (api_url or self.API_URL).rstrip('/')

    @classmethod
    def from_repository(cls, token: str) -> 'GitHubClient':
        """Build a client for the repo behind the `origin` remote."""
        try:
            result = subprocess.run(
                ['git', 'remote', 'get-url', 'origin'],
                capture_output=True,
                text=True,
                check=True,
            )
        except (subprocess.CalledProcessError, FileNotFoundError):
            raise GitHubError('Could not find GitHub remote. Make sure you have a remote named "origin"')
        owner, repo = parse_remote_url(result.stdout)
        return cls(token=token, owner=owner, repo=repo)

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict:
        url = f"{self.api_url}/repos/{self.owner}/{self.repo}{path}"
        data = json.dumps(payload).encode('utf-8') if payload is not None else None
        req = urllib.request.Request(url, data=data, method=method, headers={
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "X-GitHub-Api-Version": "2022-11-28",
        })
        with urllib.request.urlopen(req, timeout=self.TIMEOUT) as response:
            return json.loads(response.read().decode('utf-8'))

    def get_issue(self, number: int) -> Issue:
        try:
            data = self._request('GET', f"/issues/{number}")
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise GitHubError(f"Issue #{number} not found")
            if e.code in (401, 403):
                raise GitHubError(self.AUTH_ERROR)
            raise GitHubError(f"Failed to fetch issue #{number} (HTTP {e.code})")
        except (urllib.error.URLError, OSError) as e:
            raise GitHubError(f"Could not reach GitHub: {e}")
        except json.JSONDecodeError:
            raise GitHubError("Invalid response from GitHub")

        return Issue(
            number=data.get('number', number),
            title=data.get('title') or "",
            body=data.get('body') or "",
            state=data.get('state', 'open'),
            labels=[label if isinstance(label, str) else label.get('name', '') for label in data.get('labels', [])],
            html_url=data.get('html_url', ''),
        )

    def create_pull_request(self, title: str, body: str, head: str, base: str) -> PullRequest:
        payload = {"title": title, "body": body, "head": head, "base": base}
        try:
            data = self._request('POST', "/pulls", payload)
        except urllib.error.HTTPError as e:
            if e.code in (401, 403):
                raise GitHubError(self.AUTH_ERROR)
            if e.code == 422:
                raise GitHubError(
                    "Failed to create pull request. A PR may already exist for this branch, "
                    "or the branch has no changes."
                )
            raise GitHubError(f"Failed to create pull request (HTTP {e.code})")
        except (urllib.error.URLError, OSError) as e:
            raise GitHubError(f"Could not reach GitHub: {e}")
        except json.JSONDecodeError:
            raise GitHubError("Invalid response from GitHub")

        return PullRequest(number=data.get('number', 0), html_url=data.get('html_url', ''))

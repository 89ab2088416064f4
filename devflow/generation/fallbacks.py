"""Fallback Generators - Deterministic output when Copilot can't help.

No external calls here; every function always returns something usable.
"""

import re
from typing import Iterable, Protocol

from devflow.generation.branch import sanitize_branch_name
from devflow.generation.parsers import PullRequestDraft


class HasMessage(Protocol):
    message: str


# Group key -> (section heading, singular noun, plural noun)
COMMIT_GROUPS: dict[str, tuple[str, str, str]] = {
    'feat': ("Features", "feature", "features"),
    'fix': ("Bug Fixes", "fix", "fixes"),
    'chore': ("Maintenance", "chore", "chores"),
    'other': ("Other Changes", "other change", "other changes"),
}

_TYPE_PREFIX_RE = re.compile(r'^(\w+)(?:\([^)]*\))?!?:')

TESTING_SECTION = """## Testing

- [ ] Tested locally
- [ ] Existing tests pass"""


def fallback_commit_messages(diff: str) -> list[str]:
    """Three template messages built from added/removed line counts.

    The counts include the `+++`/`---` file headers, so they run slightly
    high for every file in the diff.
    """
    lines = (diff or "").split('\n')
    added = sum(1 for line in lines if line.startswith('+'))
    removed = sum(1 for line in lines if line.startswith('-'))
    return [
        f"feat: update files (+{added} -{removed})",
        "fix: improve code quality",
        "chore: update documentation",
    ]


def _subject(message: str) -> str:
    return message.strip().split('\n')[0].strip()


def _group_key(subject: str) -> str:
    match = _TYPE_PREFIX_RE.match(subject)
    if match and match.group(1).lower() in COMMIT_GROUPS:
        return match.group(1).lower()
    return 'other'


def group_commits(commits: Iterable[HasMessage]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {key: [] for key in COMMIT_GROUPS}
    for commit in commits:
        subject = _subject(commit.message)
        if subject:
            groups[_group_key(subject)].append(subject)
    return groups


def _summary(subjects: list[str], groups: dict[str, list[str]]) -> str:
    if len(subjects) == 1:
        return subjects[0]
    breakdown = []
    for key, (_, singular, plural) in COMMIT_GROUPS.items():
        count = len(groups[key])
        if count:
            breakdown.append(f"{count} {singular if count == 1 else plural}")
    return f"This PR includes {len(subjects)} commits: {', '.join(breakdown)}."


def fallback_pr_description(commits: Iterable[HasMessage], issue_context: str = "") -> PullRequestDraft:
    commits = list(commits)
    subjects = [s for s in (_subject(c.message) for c in commits) if s]
    title = subjects[0] if subjects else "Update"

    sections = []
    if subjects:
        groups = group_commits(commits)
        sections.append(f"## Summary\n\n{_summary(subjects, groups)}")

        changes = ["## Changes"]
        for key, (heading, _, _) in COMMIT_GROUPS.items():
            if groups[key]:
                bullets = '\n'.join(f"- {s}" for s in groups[key])
                changes.append(f"### {heading}\n\n{bullets}")
        sections.append('\n\n'.join(changes))
    else:
        sections.append("## Summary\n\nUpdates from this branch.")

    if issue_context and issue_context.strip():
        sections.append(f"## Related Issue\n\n{issue_context.strip()}")

    sections.append(TESTING_SECTION)
    return PullRequestDraft(title=title, body='\n\n'.join(sections))


def fallback_branch_name(description: str, branch_type: str, issue_number: str | int | None = None) -> str:
    """Slug straight from the description; punctuation is dropped, not hyphenated."""
    text = re.sub(r'[^A-Za-z0-9\s-]', '', description or "")
    text = re.sub(r'\s+', '-', text.strip())
    return sanitize_branch_name(text, branch_type, issue_number)

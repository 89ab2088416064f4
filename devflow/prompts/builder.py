"""Prompt Builder - Construct Copilot prompts for each kind of suggestion."""

from dataclasses import dataclass
from typing import Iterable

from devflow import COMMIT_TYPES, MAX_BRANCH_LENGTH
from devflow.git import CommitInfo, DiffProcessor, ProcessedDiff

MAX_ISSUE_CONTEXT_CHARS = 1500
MAX_PROMPT_COMMITS = 50


@dataclass
class PromptConfig:
    """Shape of the commit suggestions we ask for."""
    num_options: int = 3
    max_subject_length: int = 72


class PromptBuilder:
    """Builds the text passed to `copilot --prompt`.

    Every prompt asks for a fixed output shape so the parsers have something
    to latch onto, but the parsers never rely on Copilot following it.
    """

    def __init__(self, processor: DiffProcessor | None = None):
        self.processor = processor or DiffProcessor()

    def build_commit_prompt(self, diff: str, config: PromptConfig | None = None) -> str:
        config = config or PromptConfig()
        processed = self.processor.process(diff)
        sections = [
            f"Generate {config.num_options} commit messages for these changes. Use conventional commits format.",
            self._build_types_section(),
            self._build_diff_section(processed),
            f"""<instructions>
Format each as a numbered line: "1. type(scope): description"
- Keep each under {config.max_subject_length} characters
- Lowercase, imperative mood
- Each option should take a different angle on the change
- No preamble, no explanation, no markdown
</instructions>""",
        ]
        return "\n\n".join(filter(None, sections))

    def build_pr_prompt(self, commits: Iterable[CommitInfo], issue_context: str = "") -> str:
        commits = list(commits)[:MAX_PROMPT_COMMITS]
        commit_lines = "\n".join(f"- {c.message}" for c in commits) or "- (no commits)"
        sections = [
            "Write a pull request title and description for a branch with these commits.",
            f"<commits>\n{commit_lines}\n</commits>",
            self._build_issue_section(issue_context),
            """<instructions>
Respond in exactly this format:

TITLE: <concise title, under 72 characters>
BODY:
## Summary
<what this PR does and why>

## Changes
- <one bullet per notable change>

## Testing
- <how to verify>

No preamble before TITLE:. No closing remarks.
</instructions>""",
        ]
        return "\n\n".join(filter(None, sections))

    def build_branch_prompt(self, description: str, branch_type: str, issue_number: str | int | None = None) -> str:
        issue_prefix = f"{issue_number}-" if issue_number else ""
        max_slug = MAX_BRANCH_LENGTH - len(branch_type) - len(issue_prefix) - 1
        return f"""Generate a git branch name slug for this work: "{description.strip()}"

<instructions>
- Output ONLY the slug, on a single line, e.g. add-user-login
- Lowercase letters, digits and hyphens only
- Do NOT include the "{branch_type}/" prefix or an issue number
- At most {max_slug} characters, 2-5 words
</instructions>"""

    def _build_types_section(self) -> str:
        types_list = "\n".join(f"  - {t}: {desc}" for t, desc in COMMIT_TYPES.items())
        return f"Choose the most appropriate type:\n{types_list}"

    def _build_diff_section(self, diff: ProcessedDiff) -> str:
        parts = ["<changes>"]
        if diff.summary:
            parts.extend([diff.summary, ""])

        if diff.detailed_diff:
            parts.extend(["DIFF DETAILS:", diff.detailed_diff])

        if diff.truncated:
            parts.append("\n[Note: Diff was truncated due to size. Focus on the file summary above for scope.]")

        parts.append("</changes>")
        return "\n".join(parts)

    def _build_issue_section(self, issue_context: str) -> str:
        if not issue_context or not issue_context.strip():
            return ""
        context = issue_context.strip()[:MAX_ISSUE_CONTEXT_CHARS]
        return f"<issue>\n{context}\n</issue>"

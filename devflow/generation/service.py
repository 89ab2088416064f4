"""Generation Service - The three suggestion entry points.

Copilot output is a best-effort upgrade over the deterministic fallbacks.
None of these methods raise: every failure, weak parse or unexpected
exception ends in the matching fallback.
"""

import logging
from typing import Iterable

from devflow.copilot import DEFAULT_MODEL, CopilotRunner, Failure, QuotaRetryOrchestrator
from devflow.copilot.orchestrator import Notifier, Runner, print_notice
from devflow.generation.fallbacks import fallback_branch_name, fallback_commit_messages, fallback_pr_description
from devflow.generation.parsers import (
    PullRequestDraft,
    parse_branch_name,
    parse_commit_messages,
    parse_pr_description,
)
from devflow.git import CommitInfo
from devflow.prompts import PromptBuilder

logger = logging.getLogger(__name__)


class CopilotService:
    """Ask Copilot for suggestions, fall back to rule-based ones."""

    def __init__(
        self,
        model: str | None = None,
        runner: Runner | None = None,
        notify: Notifier | None = None,
        prompt_builder: PromptBuilder | None = None,
    ):
        self.model = model or DEFAULT_MODEL
        self.notify = notify or print_notice
        self.orchestrator = QuotaRetryOrchestrator(runner or CopilotRunner(), notify=self.notify)
        self.prompts = prompt_builder or PromptBuilder()

    def _ask(self, prompt: str) -> str | None:
        """Raw Copilot response, or None after reporting why there isn't one."""
        outcome = self.orchestrator.invoke(prompt, self.model)
        if isinstance(outcome, Failure):
            logger.info("Copilot unavailable (%s), using fallback", outcome.kind.value)
            self.notify(f"{outcome.message} - using fallback")
            return None
        return outcome.stdout

    def generate_commit_messages(self, diff: str) -> list[str]:
        try:
            response = self._ask(self.prompts.build_commit_prompt(diff))
            if response is not None:
                result = parse_commit_messages(response)
                if result.ok:
                    return result.value
                logger.info("No commit messages found in Copilot response, using fallback")
        except Exception:
            logger.warning("Commit message generation failed", exc_info=True)
        return fallback_commit_messages(diff)

    def generate_pr_description(self, commits: Iterable[CommitInfo], issue_context: str = "") -> PullRequestDraft:
        commits = list(commits)
        try:
            response = self._ask(self.prompts.build_pr_prompt(commits, issue_context))
            if response is not None:
                result = parse_pr_description(response)
                if result.ok:
                    return result.value
                logger.info("PR description from Copilot was %s, using fallback", result.status.value)
        except Exception:
            logger.warning("PR description generation failed", exc_info=True)
        return fallback_pr_description(commits, issue_context)

    def generate_branch_name(
        self,
        description: str,
        branch_type: str = "feature",
        issue_number: str | int | None = None,
    ) -> str:
        try:
            response = self._ask(self.prompts.build_branch_prompt(description, branch_type, issue_number))
            if response is not None:
                result = parse_branch_name(response, branch_type, issue_number)
                if result.ok:
                    return result.value
                logger.info("No branch name found in Copilot response, using fallback")
        except Exception:
            logger.warning("Branch name generation failed", exc_info=True)
        return fallback_branch_name(description, branch_type, issue_number)

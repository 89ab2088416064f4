"""Suggestion Generation Package"""

from devflow.generation.branch import sanitize_branch_name, slugify
from devflow.generation.fallbacks import fallback_branch_name, fallback_commit_messages, fallback_pr_description
from devflow.generation.parsers import (
    ParseResult,
    ParseStatus,
    PullRequestDraft,
    parse_branch_name,
    parse_commit_messages,
    parse_pr_description,
)
from devflow.generation.service import CopilotService

__all__ = [
    "sanitize_branch_name",
    "slugify",
    "fallback_branch_name",
    "fallback_commit_messages",
    "fallback_pr_description",
    "ParseResult",
    "ParseStatus",
    "PullRequestDraft",
    "parse_branch_name",
    "parse_commit_messages",
    "parse_pr_description",
    "CopilotService",
]

"""Response Parsers - Turn free-form Copilot output into strict shapes.

Copilot tends to wrap answers in chatter ("Sure! Here are three options:"),
markdown emphasis and code fences. Each parser digs the useful part out and
reports how confident it is:

- PARSED: usable as-is
- WEAK: something was extracted but it isn't good enough to show
- UNPARSEABLE: nothing recognizable
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from devflow import COMMIT_TYPE_NAMES
from devflow.generation.branch import sanitize_branch_name, slugify

TYPES_PATTERN = '|'.join(COMMIT_TYPE_NAMES)
MAX_COMMIT_SUGGESTIONS = 3
MIN_PR_BODY_LENGTH = 50


class ParseStatus(Enum):
    PARSED = "parsed"
    WEAK = "weak"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True)
class ParseResult:
    status: ParseStatus
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.PARSED


@dataclass(frozen=True)
class PullRequestDraft:
    title: str
    body: str

    @property
    def is_usable(self) -> bool:
        return bool(self.title) and bool(self.body) and len(self.body) > MIN_PR_BODY_LENGTH


# (pattern, extractor) pairs tried in order; add new formats here
COMMIT_LINE_PATTERNS: list[tuple[re.Pattern, Callable[[re.Match], str]]] = [
    # "1. feat: add x" / "2) fix: y"
    (re.compile(r'^\d+[.)]\s*(.+)$'), lambda m: m.group(1)),
    # "feat(scope): add x"
    (re.compile(rf'^(?:{TYPES_PATTERN})(?:\([^)]*\))?!?:\s.+', re.IGNORECASE), lambda m: m.group(0)),
    # "**feat: add x**" / "`fix: y`"
    (re.compile(rf'^[*_`]+((?:{TYPES_PATTERN})(?:\([^)]*\))?!?:\s.+)$', re.IGNORECASE), lambda m: m.group(1)),
    # "- feat: add x" / "* fix: y"
    (re.compile(rf'^[-*]\s+((?:{TYPES_PATTERN})(?=[(!:]).+)$', re.IGNORECASE), lambda m: m.group(1)),
]

_FENCE_RE = re.compile(r'^\s*```')
_TITLE_RE = re.compile(r'^[\s*_#>]*TITLE\s*:[*_]*\s*(.*)$', re.IGNORECASE)
_BODY_RE = re.compile(r'^[\s*_#>]*BODY\s*:[*_]*\s*(.*)$', re.IGNORECASE)


def strip_markdown(text: str) -> str:
    """Remove emphasis, inline code, headings, list markers and wrapping quotes."""
    text = re.sub(r'\*\*|\*|`', '', text).strip()
    text = re.sub(r'^#+\s*', '', text)
    text = re.sub(r'^[-•]\s+', '', text)
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in '"\'':
        text = text[1:-1].strip()
    return text


def _lines_without_fences(text: str) -> list[str]:
    return [line for line in (text or "").splitlines() if not _FENCE_RE.match(line)]


def parse_commit_messages(text: str) -> ParseResult:
    messages: list[str] = []
    for raw_line in _lines_without_fences(text):
        line = raw_line.strip()
        if not line:
            continue
        for pattern, extract in COMMIT_LINE_PATTERNS:
            match = pattern.match(line)
            if match:
                message = strip_markdown(extract(match))
                if message:
                    messages.append(message)
                break
        if len(messages) == MAX_COMMIT_SUGGESTIONS:
            break

    if not messages:
        return ParseResult(ParseStatus.UNPARSEABLE, [])
    return ParseResult(ParseStatus.PARSED, messages)


def parse_pr_description(text: str) -> ParseResult:
    lines = _lines_without_fences(text)
    if not any(line.strip() for line in lines):
        return ParseResult(ParseStatus.UNPARSEABLE)

    draft = _parse_marked_pr(lines) or _parse_unmarked_pr(lines)
    status = ParseStatus.PARSED if draft.is_usable else ParseStatus.WEAK
    return ParseResult(status, draft)


def _parse_marked_pr(lines: list[str]) -> PullRequestDraft | None:
    title_idx = next((i for i, line in enumerate(lines) if _TITLE_RE.match(line)), None)
    if title_idx is None:
        return None
    body_idx = next((i for i in range(title_idx + 1, len(lines)) if _BODY_RE.match(lines[i])), None)
    if body_idx is None:
        return None

    title = strip_markdown(_TITLE_RE.match(lines[title_idx]).group(1))
    first_body_line = _BODY_RE.match(lines[body_idx]).group(1)
    body = '\n'.join([first_body_line, *lines[body_idx + 1:]]).strip()
    return PullRequestDraft(title=title, body=body)


def _parse_unmarked_pr(lines: list[str]) -> PullRequestDraft:
    non_blank = [line.rstrip() for line in lines if line.strip()]
    # A TITLE: line without a BODY: marker still names the title
    marker = _TITLE_RE.match(non_blank[0])
    title = strip_markdown(marker.group(1) if marker else non_blank[0])
    body = '\n'.join(non_blank[1:]).strip()
    return PullRequestDraft(title=title, body=body)


def parse_branch_name(text: str, branch_type: str, issue_number: str | int | None = None) -> ParseResult:
    lines = (line.strip().strip('`').strip().strip('"\'').strip() for line in _lines_without_fences(text))
    candidate = next((line for line in lines if line), None)
    if candidate is None or not slugify(candidate.split('/', 1)[-1]):
        return ParseResult(ParseStatus.UNPARSEABLE)

    return ParseResult(ParseStatus.PARSED, sanitize_branch_name(candidate, branch_type, issue_number))

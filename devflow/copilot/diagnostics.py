"""Failure Classification and Copilot Log Diagnostics"""

import logging
import re
from pathlib import Path

from devflow.copilot.base import FailureKind

logger = logging.getLogger(__name__)

# Ordered pattern -> kind table; first match wins
QUOTA_ERROR_PATTERNS: list[tuple[re.Pattern, FailureKind]] = [
    (re.compile(r'premium request', re.IGNORECASE), FailureKind.QUOTA_EXCEEDED),
    (re.compile(r'rate[\s_-]?limit', re.IGNORECASE), FailureKind.QUOTA_EXCEEDED),
    (re.compile(r'quota', re.IGNORECASE), FailureKind.QUOTA_EXCEEDED),
    (re.compile(r'exceeded.*allowance', re.IGNORECASE), FailureKind.QUOTA_EXCEEDED),
    (re.compile(r'budget.*reached', re.IGNORECASE), FailureKind.QUOTA_EXCEEDED),
    (re.compile(r'limit.*reached', re.IGNORECASE), FailureKind.QUOTA_EXCEEDED),
    (re.compile(r'too many requests', re.IGNORECASE), FailureKind.QUOTA_EXCEEDED),
    (re.compile(r'\b429\b'), FailureKind.QUOTA_EXCEEDED),
]

SECRET_PATTERNS: list[re.Pattern] = [
    re.compile(r'\b(?:gh[pousr]_|github_pat_)[A-Za-z0-9_]{8,}'),
    re.compile(r'\bsk-[A-Za-z0-9_-]{16,}'),
    re.compile(r'\bBearer\s+[A-Za-z0-9._~+/=-]{8,}', re.IGNORECASE),
    re.compile(r'\b[0-9a-fA-F]{32,}\b'),
]

REDACTED = "[REDACTED]"
SENSITIVE_KEYWORDS = ("token", "auth", "key", "secret", "password")
MAX_DIAGNOSTIC_LENGTH = 200

AUTH_HINT = "Copilot CLI request failed. Check authentication: run `copilot` and use /login"
AUTH_LOG_MESSAGE = "Copilot authentication failed (HTTP 401). Run `copilot` and use /login to sign in again."
ACCESS_LOG_MESSAGE = "Copilot access denied (HTTP 403). Check that your account has an active Copilot subscription."

_ERROR_TAG = "[ERROR]"
_LIST_MODELS_RE = re.compile(r'failed to list models', re.IGNORECASE)


def classify(raw_error: str | None) -> FailureKind:
    """Map a raw CLI error message to a FailureKind."""
    if not raw_error:
        return FailureKind.GENERIC
    for pattern, kind in QUOTA_ERROR_PATTERNS:
        if pattern.search(raw_error):
            return kind
    return FailureKind.GENERIC


def redact_secrets(text: str) -> str:
    for pattern in SECRET_PATTERNS:
        text = pattern.sub(REDACTED, text)
    return text


def sanitize_error_message(raw_error: str) -> str:
    """Make a CLI error safe to print: redact tokens, hide long or auth-ish text."""
    message = redact_secrets(raw_error.strip())
    lowered = message.lower()
    if len(message) > MAX_DIAGNOSTIC_LENGTH or any(word in lowered for word in SENSITIVE_KEYWORDS):
        return AUTH_HINT
    return message


def is_auth_diagnostic(message: str | None) -> bool:
    return message in (AUTH_LOG_MESSAGE, ACCESS_LOG_MESSAGE)


def default_log_dir() -> Path:
    return Path.home() / ".copilot" / "logs"


def read_latest_log(log_dir: Path | None = None) -> str | None:
    """Find the most useful error in the newest Copilot CLI log file.

    Log filenames carry a fixed-width timestamp, so a plain name sort puts
    the newest file last.
    """
    log_dir = log_dir or default_log_dir()
    try:
        log_files = sorted(p for p in log_dir.glob("*.log") if p.is_file())
        if not log_files:
            return None
        content = log_files[-1].read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        logger.debug("Could not read Copilot logs in %s: %s", log_dir, e)
        return None

    error_lines = [line.strip() for line in content.splitlines() if _ERROR_TAG in line]
    if not error_lines:
        return None

    for line in reversed(error_lines):
        if _LIST_MODELS_RE.search(line):
            if re.search(r'\b401\b', line):
                return AUTH_LOG_MESSAGE
            if re.search(r'\b403\b', line):
                return ACCESS_LOG_MESSAGE

    last = error_lines[-1]
    last = last[last.index(_ERROR_TAG) + len(_ERROR_TAG):].strip()
    last = redact_secrets(last)
    if not last or len(last) > MAX_DIAGNOSTIC_LENGTH:
        return None
    return last

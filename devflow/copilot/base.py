"""Copilot Invocation Results"""

from dataclasses import dataclass
from enum import Enum


class FailureKind(Enum):
    """Why a Copilot CLI invocation produced no usable output."""
    TIMEOUT = "timeout"
    BUFFER_EXCEEDED = "buffer_exceeded"
    QUOTA_EXCEEDED = "quota_exceeded"
    AUTH_FAILURE = "auth_failure"
    TOOL_UNAVAILABLE = "tool_unavailable"
    GENERIC = "generic"


@dataclass(frozen=True)
class Success:
    """The tool exited cleanly; stdout is the raw response text."""
    stdout: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """The tool failed; message is safe to show to the user."""
    kind: FailureKind
    message: str

    @property
    def ok(self) -> bool:
        return False


InvocationOutcome = Success | Failure

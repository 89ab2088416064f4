"""Copilot CLI Invocation Package"""

from devflow.copilot.base import Failure, FailureKind, InvocationOutcome, Success
from devflow.copilot.catalog import (
    DEFAULT_MODEL,
    FREE_TIER_MODELS,
    MODEL_CATALOG,
    ModelDescriptor,
    ModelTier,
    describe,
    discover,
    format_cost,
    free_tier_fallback_id,
    is_free_tier,
)
from devflow.copilot.diagnostics import classify, read_latest_log, redact_secrets, sanitize_error_message
from devflow.copilot.invoker import CopilotRunner
from devflow.copilot.orchestrator import QuotaRetryOrchestrator

__all__ = [
    "Failure",
    "FailureKind",
    "InvocationOutcome",
    "Success",
    "DEFAULT_MODEL",
    "FREE_TIER_MODELS",
    "MODEL_CATALOG",
    "ModelDescriptor",
    "ModelTier",
    "describe",
    "discover",
    "format_cost",
    "free_tier_fallback_id",
    "is_free_tier",
    "classify",
    "read_latest_log",
    "redact_secrets",
    "sanitize_error_message",
    "CopilotRunner",
    "QuotaRetryOrchestrator",
]

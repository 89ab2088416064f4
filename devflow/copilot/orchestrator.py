"""Quota-Retry Orchestrator"""

import logging
import sys
from typing import Callable, Protocol

from devflow.copilot.base import FailureKind, InvocationOutcome, Success
from devflow.copilot.catalog import describe, format_cost, free_tier_fallback_id, is_free_tier
from devflow.output import dim

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class Runner(Protocol):
    def run(self, prompt: str, model: str | None = None) -> InvocationOutcome: ...


def print_notice(message: str) -> None:
    print(dim(message), file=sys.stderr)


class QuotaRetryOrchestrator:
    """Calls the runner with the configured model, retrying once on a free model.

    The retry happens only when the failure is a quota/rate-limit error and
    the configured model isn't free-tier already. The retry's own outcome is
    final, whatever it is.
    """

    def __init__(self, runner: Runner, notify: Notifier | None = None):
        self.runner = runner
        self.notify = notify or print_notice

    def invoke(self, prompt: str, model: str) -> InvocationOutcome:
        self._announce(model)
        outcome = self.runner.run(prompt, model)
        if isinstance(outcome, Success):
            return outcome

        if outcome.kind is not FailureKind.QUOTA_EXCEEDED:
            logger.info("Copilot failed (%s) with %s, not retrying", outcome.kind.value, model)
            return outcome
        if is_free_tier(model):
            logger.info("Quota error on free-tier model %s, nothing cheaper to try", model)
            return outcome

        fallback = free_tier_fallback_id()
        logger.info("Quota exceeded for %s, retrying once with %s", model, fallback)
        self.notify(f"Premium request quota reached for {model}. Retrying with free model {fallback}...")
        self._announce(fallback)

        retry = self.runner.run(prompt, fallback)
        if isinstance(retry, Success):
            self.notify(
                f"Tip: make {fallback} your default to avoid quota errors: "
                f"devflow config set copilot_model {fallback}"
            )
        else:
            logger.info("Free-tier retry with %s failed (%s)", fallback, retry.kind.value)
        return retry

    def _announce(self, model: str) -> None:
        descriptor = describe(model)
        self.notify(f"Using {descriptor.id} ({format_cost(descriptor)})")

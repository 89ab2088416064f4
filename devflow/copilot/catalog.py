"""Model Catalog - Cost metadata for Copilot CLI models."""

import logging
import re
import subprocess
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ModelTier(Enum):
    FREE = "Free"
    CHEAP = "Cheap"
    BALANCED = "Balanced"
    EXPENSIVE = "Expensive"
    NEW = "New"


@dataclass(frozen=True)
class ModelDescriptor:
    """Static cost information for one model id."""
    id: str
    tier: ModelTier
    description: str
    cost_multiplier: float | None = None


DEFAULT_MODEL = "claude-sonnet-4.5"

# id -> (tier, description, premium request multiplier)
MODEL_CATALOG: dict[str, tuple[ModelTier, str, float]] = {
    "claude-sonnet-4.5": (ModelTier.BALANCED, "Good balance of speed and quality", 1.0),
    "claude-sonnet-4": (ModelTier.BALANCED, "Previous generation Sonnet", 1.0),
    "claude-haiku-4.5": (ModelTier.CHEAP, "Faster responses, lower cost", 0.33),
    "claude-opus-4.1": (ModelTier.EXPENSIVE, "Highest quality, slowest", 10.0),
    "gpt-5": (ModelTier.BALANCED, "OpenAI flagship model", 1.0),
    "gpt-5-mini": (ModelTier.FREE, "Small OpenAI model, included in plan", 0.0),
    "gpt-4.1": (ModelTier.FREE, "OpenAI model, included in plan", 0.0),
}

# Order matters: the first entry is the quota retry target
FREE_TIER_MODELS: tuple[str, ...] = ("gpt-4.1", "gpt-5-mini")

# Returned by discover() when the CLI cannot tell us what it supports
FALLBACK_DISCOVERY_MODELS: tuple[str, ...] = ("claude-sonnet-4.5", "claude-haiku-4.5", "gpt-4.1")

DISCOVERY_TIMEOUT = 10

# Stops at the next option line so a later option's choices never match
_CHOICES_RE = re.compile(r'--model\s+<model>(?:(?!\n\s*-).)*?\(choices:\s*([^)]*)\)', re.DOTALL)
_QUOTED_RE = re.compile(r'"([^"]+)"')


def describe(model_id: str) -> ModelDescriptor:
    """Look up a model. Unknown ids get a 'New' descriptor with unknown cost."""
    entry = MODEL_CATALOG.get(model_id)
    if entry is None:
        return ModelDescriptor(id=model_id, tier=ModelTier.NEW, description="New or unrecognized model")
    tier, description, multiplier = entry
    return ModelDescriptor(id=model_id, tier=tier, description=description, cost_multiplier=multiplier)


def is_free_tier(model_id: str) -> bool:
    return model_id in FREE_TIER_MODELS


def free_tier_fallback_id() -> str:
    return FREE_TIER_MODELS[0]


def format_cost(descriptor: ModelDescriptor) -> str:
    """Human-readable cost, e.g. 'Balanced, 1x premium requests'."""
    if descriptor.cost_multiplier is None:
        return f"{descriptor.tier.value}, cost unknown"
    if descriptor.cost_multiplier == 0:
        return f"{descriptor.tier.value}, no premium requests"
    return f"{descriptor.tier.value}, {descriptor.cost_multiplier:g}x premium requests"


def parse_model_choices(help_text: str) -> list[str]:
    """Extract model ids from the `--model <model> ... (choices: ...)` help entry."""
    match = _CHOICES_RE.search(help_text or "")
    if not match:
        return []
    return _QUOTED_RE.findall(match.group(1))


def discover(binary: str = "copilot", timeout: float = DISCOVERY_TIMEOUT) -> list[ModelDescriptor]:
    """Ask the Copilot CLI which models it supports.

    Never raises. Falls back to a short well-known list when the CLI is
    missing, slow, or its help text doesn't contain a choices list.
    """
    model_ids: list[str] = []
    try:
        result = subprocess.run(
            [binary, '--help'],
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding='utf-8',
            errors='replace',
        )
        if result.returncode == 0:
            model_ids = parse_model_choices(result.stdout)
        else:
            logger.debug("%s --help exited with %s", binary, result.returncode)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Model discovery failed: %s", e)

    if not model_ids:
        model_ids = list(FALLBACK_DISCOVERY_MODELS)
    return [describe(model_id) for model_id in model_ids]

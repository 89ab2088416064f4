"""Prompt Construction Package"""

from devflow.prompts.builder import PromptBuilder, PromptConfig

__all__ = [
    "PromptBuilder",
    "PromptConfig",
]

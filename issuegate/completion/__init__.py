"""Chat completion client used for AI answers and remediation tips."""

from __future__ import annotations

from .client import AzureOpenAICompletionClient, TextGenerator
from .config import CompletionConfig
from .errors import (
    CompletionAPIError,
    CompletionConfigError,
    CompletionError,
    CompletionResponseShapeError,
)
from .prompts import EMPTY_COMPLETION_TEXT, SYSTEM_PROMPT, build_remediation_prompt

__all__ = [
    "EMPTY_COMPLETION_TEXT",
    "SYSTEM_PROMPT",
    "AzureOpenAICompletionClient",
    "CompletionAPIError",
    "CompletionConfig",
    "CompletionConfigError",
    "CompletionError",
    "CompletionResponseShapeError",
    "TextGenerator",
    "build_remediation_prompt",
]

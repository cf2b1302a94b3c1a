"""
Prompt management: loading from disk and Opik integration.

Handles:
- Loading prompt templates from filesystem (per-provider folder, then default/)
- Optional registration in Opik prompt library
- Mustache-style template rendering

The PromptManager handles both local (disk-only) and Opik-integrated prompts.
"""

from infrastructure.prompting.manager import (
    LocalPrompt,
    PromptManager,
    PromptObj,
    PromptRole,
)

__all__ = [
    "PromptManager",
    "PromptRole",
    "PromptObj",
    "LocalPrompt",
]

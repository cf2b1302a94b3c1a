"""
Prompt loading and management.
Handles loading prompts from disk and optionally registering them in the Opik prompt library.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypeAlias

from opik import Prompt, PromptType

from infrastructure.config.models import DetectionConfig, Provider
from infrastructure.io import ensure_exists, read_text

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_DIR = "default"


class PromptRole(Enum):
    """Role of the prompt in the classifier interaction."""

    SYSTEM = "system"
    USER = "user"

    def default_relative_path(self) -> Path:
        """Provider-relative prompt path: <role>/classify-equipment.txt."""
        return Path(self.value) / "classify-equipment.txt"


@dataclass(frozen=True)
class LocalPrompt:
    """Lightweight prompt wrapper for disk-only prompting (no Opik prompt library writes)."""

    name: str
    prompt: str
    metadata: dict[str, Any]

    def format(self, **kwargs: Any) -> str:
        """Format the prompt template with variables using Mustache syntax."""
        rendered = self.prompt
        for k in sorted(kwargs, key=lambda x: len(str(x)), reverse=True):
            v = str(kwargs[k])
            placeholder = f"{{{{{k}}}}}"
            if placeholder in rendered:
                rendered = rendered.replace(placeholder, v)
            else:
                # Whitespace-tolerant fallback: {{ key }}
                pattern = re.compile(r"\{\{\s*" + re.escape(str(k)) + r"\s*\}\}")
                rendered = pattern.sub(lambda _m, v=v: v, rendered)
        return rendered


PromptObj: TypeAlias = Prompt | LocalPrompt


class PromptManager:
    """
    Manages prompt loading from disk and (optionally) registers them in the Opik prompt library

    Prompts are organized as:
        prompts/
        ├─ default/
        │  ├─ system/classify-equipment.txt
        │  └─ user/classify-equipment.txt
        └─ <provider>/            (optional per-provider override, same layout)
    """

    def __init__(self, prompts_root: Path):
        self.prompts_root = prompts_root
        self._cache: dict[tuple[str, str, str, int, bool], PromptObj] = {}

    def _get_prompt_path(self, provider: Provider, role: PromptRole, override_path: Path | None = None) -> Path:
        if override_path is not None:
            return override_path
        provider_path = self.prompts_root / provider.value / role.default_relative_path()
        if provider_path.exists():
            return provider_path
        return self.prompts_root / DEFAULT_PROMPT_DIR / role.default_relative_path()

    def _make_opik_prompt_name(self, provider: Provider, role: PromptRole, path: Path) -> str:
        """Build a stable Opik prompt name: equipment.{provider}.{role}.{file stem}."""
        stem = path.name.removesuffix(".txt")
        return f"equipment.{provider.value}.{role.value}.{stem}"

    def get_prompt(
        self,
        provider: Provider,
        role: PromptRole,
        cfg: DetectionConfig,
        override_path: Path | None = None,
    ) -> PromptObj:
        """
        Load a prompt from disk and (optionally) register it in the Opik prompt library.

        Args:
            provider: Provider whose prompt folder is searched first
            role: Prompt role (SYSTEM or USER) to resolve the relative path
            cfg: Detection configuration
            override_path: If provided, use this file instead of the provider/default path

        Returns:
            PromptObj implementing the minimal prompt interface (`name`, `prompt`, `metadata`, `format`)

        Raises:
            FileNotFoundError: if the resolved prompt file does not exist.
            ValueError: for failures during optional Opik registration
        """
        prompt_path = self._get_prompt_path(provider, role, override_path)
        ensure_exists(prompt_path, f"{provider.value}:{role.value}-prompt")
        mtime_ns = prompt_path.stat().st_mtime_ns

        cache_key = (provider.value, role.value, str(prompt_path), mtime_ns, cfg.prompts_register_in_opik)
        if cache_key in self._cache:
            return self._cache[cache_key]

        prompt_text = read_text(prompt_path)
        prompt_name = self._make_opik_prompt_name(provider, role, prompt_path)
        metadata = {
            "provider": provider.value,
            "role": role.value,
            "source_path": str(prompt_path),
            "model": cfg.model,
        }

        if cfg.prompts_register_in_opik:
            # Creates/versions the prompt in the Opik prompt library.
            try:
                prompt_obj: PromptObj = Prompt(
                    name=prompt_name,
                    prompt=prompt_text,
                    type=PromptType.MUSTACHE,
                    metadata=metadata,
                )
            except Exception as e:
                raise ValueError(f"Failed to create/register prompt '{prompt_name}' in Opik prompt library.") from e
        else:
            prompt_obj = LocalPrompt(name=prompt_name, prompt=prompt_text, metadata=metadata)

        self._cache[cache_key] = prompt_obj
        logger.info("Loaded %s prompt from %s as %s", role.value, prompt_path, prompt_name)
        return prompt_obj

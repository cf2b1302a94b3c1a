"""Base adapter interface for external classifier backends."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from infrastructure.config.models import DetectionConfig, Provider

logger = logging.getLogger(__name__)


class ProviderAdapter(ABC):
    """
    Abstract base class for classifier adapters.
    Common interface for provider backends (OpenAI, Anthropic, Ollama, Mock).

    Adapters return the model's raw text. The text is untrusted: parsing and
    validation against the taxonomy happen in the domain layer.

    All concrete adapters must implement:
    - classify(): Make one classification call and return (raw_text, meta)
    """

    provider: Provider
    cfg: DetectionConfig
    client: Any
    pricing: Any | None

    supports_json_mode: bool = True

    def __init__(
        self,
        *,
        cfg: DetectionConfig,
        client: Any,
        pricing: Any | None,
    ) -> None:
        self.cfg = cfg
        self.provider = cfg.provider
        self.client = client
        self.pricing = pricing

    @property
    def model(self) -> str:
        # Single source of truth (no duplicated "model: str" fields)
        return self.cfg.model

    @staticmethod
    def _empty_result() -> dict[str, Any]:
        return {
            "input_tokens": 0,
            "output_tokens": 0,
            "total_tokens": 0,
            "cache_meta": {},
            "input_cost": 0.0,
            "output_cost": 0.0,
            "total_cost": 0.0,
        }

    def _opik_usage(self, *, input_tokens: int, output_tokens: int, total_tokens: int) -> dict[str, int]:
        # Opik dashboard expects OpenAI-style keys
        return {
            "prompt_tokens": int(input_tokens),
            "completion_tokens": int(output_tokens),
            "total_tokens": int(total_tokens),
        }

    @abstractmethod
    def classify(
        self,
        *,
        system_text: str,
        user_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[str, dict[str, Any]]:
        """
        Call the classifier once.

        Args:
            system_text: System prompt text
            user_text: User prompt text (equipment details + taxonomy context)
            request_id: Identifier used in logs and trace metadata
            extra_trace_meta: Optional extra metadata for tracing/logging

        Returns:
            Tuple of (raw response text, normalized usage/cost metadata dict)
        """

        raise NotImplementedError

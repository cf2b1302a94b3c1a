"""OpenAI classifier adapter (chat completions, JSON mode)."""

import logging
from typing import Any

from openai import OpenAI
from opik import opik_context
from opik.integrations.openai import track_openai

from infrastructure.config.models import DetectionConfig, ModelPricingOpenAI, Provider

from .base import ProviderAdapter
from .registry import register_adapter

logger = logging.getLogger(__name__)


class OpenAIAdapter(ProviderAdapter):
    """Adapter for the OpenAI chat completions API."""

    @classmethod
    def from_cfg(cls, cfg: DetectionConfig) -> "OpenAIAdapter":
        if cfg.openai is None:
            raise ValueError("Provider=openai but cfg.openai is missing")
        client: Any = track_openai(OpenAI())
        pricing = ModelPricingOpenAI(**cfg.provider_model.pricing) if cfg.provider_model.pricing else None
        if pricing is None:
            logger.warning("No OpenAI pricing configured for model %s; costs will be reported as 0.", cfg.model)
        return cls(cfg=cfg, client=client, pricing=pricing)

    def classify(
        self,
        *,
        system_text: str,
        user_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[str, dict[str, Any]]:
        provider_cfg = self.cfg.openai
        if provider_cfg is None:
            raise ValueError("OpenAIAdapter requires cfg.openai")

        result = self._empty_result()

        # Build kwargs defensively: some SDK versions reject explicit None values.
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_text},
                {"role": "user", "content": user_text},
            ],
        }
        if provider_cfg.temperature is not None:
            kwargs["temperature"] = provider_cfg.temperature
        if provider_cfg.max_tokens is not None:
            kwargs["max_tokens"] = provider_cfg.max_tokens
        if provider_cfg.service_tier is not None:
            kwargs["service_tier"] = provider_cfg.service_tier
        if provider_cfg.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(**kwargs)
        raw_text = response.choices[0].message.content or ""
        logger.debug("Raw OpenAI response: %s", raw_text)

        usage = response.usage
        input_tokens = int(getattr(usage, "prompt_tokens", 0) or 0)
        output_tokens = int(getattr(usage, "completion_tokens", 0) or 0)
        total_tokens = int(getattr(usage, "total_tokens", input_tokens + output_tokens) or 0)

        cached_input_tokens = 0
        details = getattr(usage, "prompt_tokens_details", None)
        if details is not None:
            cached_input_tokens = int(getattr(details, "cached_tokens", 0) or 0)
        uncached = max(input_tokens - cached_input_tokens, 0)

        result["input_tokens"] = input_tokens
        result["output_tokens"] = output_tokens
        result["total_tokens"] = total_tokens
        result["cache_meta"] = {
            "cached_input_tokens": cached_input_tokens,
            "uncached_input_tokens": uncached,
        }

        if self.pricing is not None:
            result["input_cost"] = (
                uncached * self.pricing.input_cost_per_token
                + cached_input_tokens * self.pricing.cached_input_cost_per_token
            )
            result["output_cost"] = output_tokens * self.pricing.output_cost_per_token
            result["total_cost"] = result["input_cost"] + result["output_cost"]

        meta = {
            "request_id": request_id,
            "temperature": provider_cfg.temperature,
            "max_tokens": provider_cfg.max_tokens,
            "json_mode": provider_cfg.json_mode,
            "openai_uncached_tokens": uncached,
            "openai_cached_tokens": cached_input_tokens,
            "total_cost_usd": round(result["total_cost"], 6),
        }
        if extra_trace_meta:
            meta.update(extra_trace_meta)

        opik_context.update_current_span(
            provider=self.provider.value,
            model=self.model,
            usage=self._opik_usage(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total_tokens),
            total_cost=float(result["total_cost"]),
            metadata=meta,
        )

        logger.info(
            "Request %s: OpenAI - total_tokens=%d (uncached=%d, cached=%d), cost=$%.6f",
            request_id,
            total_tokens,
            uncached,
            cached_input_tokens,
            result["total_cost"],
        )

        return raw_text, result


register_adapter(Provider.OPENAI, OpenAIAdapter)

"""Anthropic classifier adapter with optional prompt caching of the system prompt."""

import logging
from typing import Any

from anthropic import Anthropic
from opik import opik_context
from opik.integrations.anthropic import track_anthropic

from infrastructure.config.models import DetectionConfig, ModelPricingAnthropic, Provider

from .base import ProviderAdapter
from .registry import register_adapter

logger = logging.getLogger(__name__)


class AnthropicAdapter(ProviderAdapter):
    """Adapter for the Anthropic messages API."""

    supports_json_mode: bool = False

    @classmethod
    def from_cfg(cls, cfg: DetectionConfig) -> "AnthropicAdapter":
        if cfg.anthropic is None:
            raise ValueError("Provider=anthropic but cfg.anthropic is missing")
        client: Any = track_anthropic(Anthropic())
        pricing = ModelPricingAnthropic(**cfg.provider_model.pricing) if cfg.provider_model.pricing else None
        if pricing is None:
            logger.warning("No Anthropic pricing configured for model %s; costs will be reported as 0.", cfg.model)
        return cls(cfg=cfg, client=client, pricing=pricing)

    def classify(
        self,
        *,
        system_text: str,
        user_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[str, dict[str, Any]]:
        provider_cfg = self.cfg.anthropic
        if provider_cfg is None:
            raise ValueError("AnthropicAdapter requires cfg.anthropic")

        result = self._empty_result()

        # Only include cache_control when ttl is set; some SDK/API versions reject ttl=None.
        system_block: dict[str, Any] = {"type": "text", "text": system_text}
        if provider_cfg.cache_ttl:
            system_block["cache_control"] = {"type": "ephemeral", "ttl": provider_cfg.cache_ttl}

        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": provider_cfg.max_tokens,
            "system": [system_block],
            "messages": [{"role": "user", "content": [{"type": "text", "text": user_text}]}],
        }
        if provider_cfg.temperature is not None:
            kwargs["temperature"] = provider_cfg.temperature

        message = self.client.messages.create(**kwargs)
        raw_text = "".join(getattr(block, "text", "") for block in message.content)
        logger.debug("Raw Anthropic response: %s", raw_text)

        usage = message.usage
        uncached = int(getattr(usage, "input_tokens", 0) or 0)
        cache_write = int(getattr(usage, "cache_creation_input_tokens", 0) or 0)
        cache_read = int(getattr(usage, "cache_read_input_tokens", 0) or 0)
        output_tokens = int(getattr(usage, "output_tokens", 0) or 0)

        input_tokens = uncached + cache_write + cache_read
        total_tokens = input_tokens + output_tokens

        result["input_tokens"] = input_tokens
        result["output_tokens"] = output_tokens
        result["total_tokens"] = total_tokens
        result["cache_meta"] = {
            "uncached_input_tokens": uncached,
            "cache_read_input_tokens": cache_read,
            "cache_creation_input_tokens": cache_write,
        }

        if self.pricing is not None:
            result["input_cost"] = (
                uncached * self.pricing.input_cost_per_token
                + cache_read * self.pricing.cache_read_cost_per_token
                + cache_write * self.pricing.cache_write_5m_cost_per_token
            )
            result["output_cost"] = output_tokens * self.pricing.output_cost_per_token
            result["total_cost"] = result["input_cost"] + result["output_cost"]

        meta = {
            "request_id": request_id,
            "cache_ttl": provider_cfg.cache_ttl,
            "max_tokens": provider_cfg.max_tokens,
            "temperature": provider_cfg.temperature,
            "anthropic_uncached_tokens": uncached,
            "anthropic_cache_read_tokens": cache_read,
            "anthropic_cache_creation_tokens": cache_write,
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
            "Request %s: Anthropic - total_tokens=%d (uncached=%d, cache_read=%d, cache_write=%d), cost=$%.6f",
            request_id,
            total_tokens,
            uncached,
            cache_read,
            cache_write,
            result["total_cost"],
        )

        return raw_text, result


register_adapter(Provider.ANTHROPIC, AnthropicAdapter)

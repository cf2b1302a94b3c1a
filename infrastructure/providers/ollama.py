import logging
from typing import Any

import httpx
from opik import opik_context

from infrastructure.config.models import DetectionConfig, Provider
from infrastructure.providers.base import ProviderAdapter
from infrastructure.providers.registry import register_adapter

logger = logging.getLogger(__name__)


class OllamaAdapter(ProviderAdapter):
    """
    Ollama backend using Ollama's native Chat API: POST /api/chat

    - Requests JSON output via `format: "json"`
    - Token usage comes from `prompt_eval_count` and `eval_count`
    - Cost is treated as $0.00 (local inference)
    """

    supports_json_mode: bool = True

    @classmethod
    def from_cfg(cls, cfg: DetectionConfig) -> "OllamaAdapter":
        if cfg.ollama is None:
            raise ValueError("Provider=ollama but cfg.ollama is missing")
        client = httpx.Client(
            base_url=cfg.ollama.base_url.rstrip("/"),
            timeout=cfg.ollama.timeout_s,
            headers={"Content-Type": "application/json"},
        )
        return cls(cfg=cfg, client=client, pricing=None)

    def classify(
        self,
        *,
        system_text: str,
        user_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[str, dict[str, Any]]:
        ollama_cfg = self.cfg.ollama
        if ollama_cfg is None:
            raise ValueError("OllamaAdapter requires cfg.ollama")

        # Ollama "options" are optional; only send non-None values
        options: dict[str, Any] = {}
        for k in ("temperature", "seed", "num_ctx", "top_p", "top_k", "num_predict"):
            v = getattr(ollama_cfg, k, None)
            if v is not None:
                options[k] = v

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_text},
                {"role": "user", "content": user_text},
            ],
            "stream": False,
            "format": "json",
        }
        if options:
            payload["options"] = options
        if ollama_cfg.keep_alive is not None:
            payload["keep_alive"] = ollama_cfg.keep_alive
        if ollama_cfg.think is not None:
            payload["think"] = ollama_cfg.think

        resp = self.client.post("/api/chat", json=payload)
        resp.raise_for_status()
        data = resp.json()

        raw_text = ((data.get("message") or {}).get("content")) or ""
        logger.debug("Raw Ollama response: %s", raw_text)

        input_tokens = int(data.get("prompt_eval_count", 0) or 0)
        output_tokens = int(data.get("eval_count", 0) or 0)
        total_tokens = input_tokens + output_tokens

        result = self._empty_result()
        result["input_tokens"] = input_tokens
        result["output_tokens"] = output_tokens
        result["total_tokens"] = total_tokens

        meta = {
            "request_id": request_id,
            "base_url": ollama_cfg.base_url,
            "keep_alive": ollama_cfg.keep_alive,
            "think": ollama_cfg.think,
            "ollama_options": options,
            "total_cost_usd": 0.0,
        }
        if extra_trace_meta:
            meta.update(extra_trace_meta)

        opik_context.update_current_span(
            provider=self.provider.value,
            model=self.model,
            usage=self._opik_usage(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total_tokens),
            total_cost=0.0,
            metadata=meta,
        )

        logger.info(
            "Request %s: Ollama - total_tokens=%d (in=%d, out=%d)",
            request_id,
            total_tokens,
            input_tokens,
            output_tokens,
        )

        return raw_text, result


register_adapter(Provider.OLLAMA, OllamaAdapter)

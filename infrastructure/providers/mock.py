"""Mock classifier adapter for tests and offline runs."""

import json
import logging
from collections import deque
from collections.abc import Iterable
from typing import Any

from opik import opik_context

from infrastructure.config.models import DetectionConfig
from infrastructure.providers.base import ProviderAdapter

logger = logging.getLogger(__name__)

DEFAULT_MOCK_RESPONSE: dict[str, Any] = {
    "domain": None,
    "type": None,
    "category": None,
    "subcategory": None,
    "confidence": 0.0,
    "reasoning": "Mock classifier response",
}


class MockAdapter(ProviderAdapter):
    """
    Returns canned responses without calling a real API.

    Responses are served in order, then ``default_response`` forever. A dict is
    sent as JSON text; a string is returned verbatim (useful for malformed
    output); an exception instance is raised.
    """

    supports_json_mode: bool = True

    def __init__(
        self,
        *,
        cfg: DetectionConfig,
        responses: Iterable[dict[str, Any] | str | Exception] | None = None,
        default_response: dict[str, Any] | str | None = None,
    ) -> None:
        super().__init__(cfg=cfg, client=None, pricing=None)
        self._responses: deque[dict[str, Any] | str | Exception] = deque(responses or [])
        self.default_response = DEFAULT_MOCK_RESPONSE if default_response is None else default_response
        self.calls: list[dict[str, str]] = []
        logger.info("Initialized Mock adapter (no real API calls will be made)")

    def classify(
        self,
        *,
        system_text: str,
        user_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[str, dict[str, Any]]:
        self.calls.append({"system_text": system_text, "user_text": user_text, "request_id": request_id})

        response = self._responses.popleft() if self._responses else self.default_response
        if isinstance(response, Exception):
            raise response
        raw_text = response if isinstance(response, str) else json.dumps(response, ensure_ascii=False)

        # Rough approximation
        input_tokens = len(system_text) // 4 + len(user_text) // 4
        output_tokens = len(raw_text) // 4
        result = self._empty_result()
        result["input_tokens"] = input_tokens
        result["output_tokens"] = output_tokens
        result["total_tokens"] = input_tokens + output_tokens

        meta = {"request_id": request_id, "mock": True}
        if extra_trace_meta:
            meta.update(extra_trace_meta)

        opik_context.update_current_span(
            provider="mock",
            model=self.model,
            usage=self._opik_usage(input_tokens=0, output_tokens=0, total_tokens=0),
            total_cost=0.0,
            metadata=meta,
        )
        logger.debug("Mock adapter returned %d chars for request %s", len(raw_text), request_id)
        return raw_text, result

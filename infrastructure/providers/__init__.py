"""
Classifier provider adapters.

Implements the adapter pattern for different LLM backends:
- OpenAI (chat completions, JSON mode)
- Anthropic (messages API)
- Ollama (local, loaded lazily by the factory)
- Mock (for testing)

All adapters implement the ProviderAdapter interface and return raw,
untrusted response text.
"""

from infrastructure.providers.base import ProviderAdapter
from infrastructure.providers.factory import make_adapter
from infrastructure.providers.mock import MockAdapter

__all__ = [
    # Abstract base
    "ProviderAdapter",
    # Test double
    "MockAdapter",
    # Factory (most commonly used)
    "make_adapter",
]

"""
Configuration management: models, loading, and validation.

Handles:
- DetectionConfig: Main detection configuration
- Provider configs: OpenAI, Anthropic, Ollama settings
- Taxonomy and keyword table loading
- Environment variable overrides (via .env, see main.py)

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import (
    load_detection_config,
    load_keyword_config,
    load_provider_config,
    load_taxonomy,
)
from infrastructure.config.models import (
    AnthropicConfig,
    # Main config
    DetectionConfig,
    # Pricing models
    ModelPricingAnthropic,
    ModelPricingOpenAI,
    OllamaConfig,
    # Provider configs
    OpenAIConfig,
    # Enums
    Provider,
    ProviderConfig,
    ProviderModelConfig,
    # Taxonomy source
    TaxonomyColumnsConfig,
)

__all__ = [
    # Main config (most commonly used)
    "DetectionConfig",
    "load_detection_config",
    # Enums
    "Provider",
    # Taxonomy source
    "TaxonomyColumnsConfig",
    "load_taxonomy",
    "load_keyword_config",
    # Provider configs
    "OpenAIConfig",
    "AnthropicConfig",
    "OllamaConfig",
    "ProviderModelConfig",
    "ProviderConfig",
    # Pricing
    "ModelPricingOpenAI",
    "ModelPricingAnthropic",
    # Loaders
    "load_provider_config",
]

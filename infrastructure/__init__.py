"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Classifier providers (OpenAI, Anthropic, Ollama, Mock)
- Configuration loading (YAML, environment)
- Taxonomy loading (CSV/Excel exports, YAML/JSON records)
- Prompt management (disk, Opik)
- Observability (logging, tracing)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    DetectionConfig,
    Provider,
    load_detection_config,
    load_taxonomy,
)
from infrastructure.providers import ProviderAdapter, make_adapter

__all__ = [
    # Provider adapters (most commonly used)
    "make_adapter",
    "ProviderAdapter",
    # Configuration (most commonly used)
    "load_detection_config",
    "load_taxonomy",
    "DetectionConfig",
    "Provider",
]

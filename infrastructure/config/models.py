"""Configuration models (Pydantic classes)."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.taxonomy.summary import DEFAULT_SUMMARY_TTL_S
from infrastructure.constants import PROMPTS_DIR, PROVIDERS_DIR, TAXONOMY_FILE


class Provider(str, Enum):
    """Supported classifier backends."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"


class TaxonomyColumnsConfig(BaseModel):
    """Column names of the tabular taxonomy export (one row per leaf path)."""

    domain_col: str = "main"
    type_col: str = "typ"
    category_col: str = "cat"
    subcategory_col: str = "subcat"

    @property
    def ordered(self) -> list[str]:
        return [self.domain_col, self.type_col, self.category_col, self.subcategory_col]


class OpenAIConfig(BaseModel):
    """OpenAI-specific configuration."""

    service_tier: str | None = None
    temperature: int | float | None = 0.3
    max_tokens: int | None = 500
    json_mode: bool = True


class AnthropicConfig(BaseModel):
    """Anthropic-specific configuration."""

    temperature: int | float | None = 0.3
    max_tokens: int = 500
    cache_ttl: str | None = None


class OllamaConfig(BaseModel):
    """Ollama-specific configuration (local inference)."""

    base_url: str = "http://localhost:11434"
    timeout_s: float = 60.0
    temperature: float | None = 0.3
    seed: int | None = None
    num_ctx: int | None = None
    top_p: float | None = None
    top_k: int | None = None
    num_predict: int | None = None
    keep_alive: str | None = None
    think: bool | None = None


class ProviderModelConfig(BaseModel):
    """Per-model configuration and pricing."""

    params: dict[str, Any] = Field(default_factory=dict)
    pricing: dict[str, Any] = Field(default_factory=dict)


class ProviderConfig(BaseModel):
    """Provider-level configuration."""

    provider: Provider
    models: dict[str, ProviderModelConfig]


class ModelPricingOpenAI(BaseModel):
    """OpenAI pricing structure."""

    input_per_1m: float
    cached_input_per_1m: float
    output_per_1m: float

    @property
    def input_cost_per_token(self) -> float:
        return self.input_per_1m / 1_000_000

    @property
    def cached_input_cost_per_token(self) -> float:
        return self.cached_input_per_1m / 1_000_000

    @property
    def output_cost_per_token(self) -> float:
        return self.output_per_1m / 1_000_000


class ModelPricingAnthropic(BaseModel):
    """Anthropic pricing structure."""

    input_per_1m: float
    output_per_1m: float
    cache_write_5m_per_1m: float = 0.0
    cache_read_per_1m: float = 0.0

    @property
    def input_cost_per_token(self) -> float:
        return self.input_per_1m / 1_000_000

    @property
    def output_cost_per_token(self) -> float:
        return self.output_per_1m / 1_000_000

    @property
    def cache_write_5m_cost_per_token(self) -> float:
        return self.cache_write_5m_per_1m / 1_000_000

    @property
    def cache_read_cost_per_token(self) -> float:
        return self.cache_read_per_1m / 1_000_000


class DetectionConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from detection.yaml
    - Validated and enriched by configuration loader
    - Consumed by provider adapters and the detection workflow
    - Contains both user-specified and resolved fields
    """

    provider: Provider = Field(default=Provider.OPENAI, description="Classifier backend to use.")
    model: str = Field(default="gpt-4o-mini", description="Model identifier for the selected provider.")

    # Taxonomy source
    taxonomy_file: Path = Field(default_factory=lambda: TAXONOMY_FILE)
    taxonomy_columns: TaxonomyColumnsConfig = Field(default_factory=TaxonomyColumnsConfig)

    # Keyword table (resolved by loader; None means the built-in table)
    keywords_file: Path | None = None
    keyword_categories: dict[str, list[str]] | None = None

    summary_ttl_s: float = Field(
        default=DEFAULT_SUMMARY_TTL_S,
        description="Lifetime of the cached hierarchy summary in seconds. 0 rebuilds it on every request.",
    )

    # Prompt handling
    prompts_root: Path = Field(
        default_factory=lambda: PROMPTS_DIR,
        description="Root directory containing provider-organized prompt templates.",
    )
    prompts_register_in_opik: bool = Field(
        default=False,
        description="Register prompts in Opik library. If False, load from disk only.",
    )
    system_prompt_path: Path | None = None
    user_prompt_path: Path | None = None

    # Provider config (resolved by loader)
    openai: OpenAIConfig | None = None
    anthropic: AnthropicConfig | None = None
    ollama: OllamaConfig | None = None

    providers_dir: Path = Field(default_factory=lambda: PROVIDERS_DIR)
    provider_model: ProviderModelConfig = Field(default_factory=ProviderModelConfig)

    @field_validator("system_prompt_path", "user_prompt_path", "keywords_file", mode="before")
    @classmethod
    def _blank_path_is_none(cls, v: Any) -> Any:
        if v is not None and not str(v).strip():
            return None
        return v

    @model_validator(mode="after")
    def _validate(self) -> "DetectionConfig":
        if self.summary_ttl_s < 0:
            raise ValueError("summary_ttl_s must be >= 0")
        if not self.model.strip():
            raise ValueError("model must not be empty")
        if self.keyword_categories is not None:
            for tag, terms in self.keyword_categories.items():
                if not str(tag).strip():
                    raise ValueError("keyword category names must not be empty")
                if not terms:
                    raise ValueError(f"keyword category {tag!r} has no terms")
        return self

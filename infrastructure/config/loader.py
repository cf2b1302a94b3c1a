"""Configuration loading from YAML files."""

from pathlib import Path
from typing import Any

import yaml

from domain.taxonomy.loader import build_records_from_rows, parse_taxonomy_records
from domain.taxonomy.tree import TypeTree
from infrastructure.config.models import (
    DetectionConfig,
    Provider,
    ProviderConfig,
    ProviderModelConfig,
    TaxonomyColumnsConfig,
)
from infrastructure.constants import PROMPTS_DIR, PROVIDERS_DIR, TAXONOMY_FILE
from infrastructure.io import read_json, read_table

from .registry import PARAM_MODEL_BY_PROVIDER

TABLE_SUFFIXES = {".csv", ".xlsx", ".xls"}
RECORD_SUFFIXES = {".yaml", ".yml", ".json"}


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def load_taxonomy(path: Path, columns: TaxonomyColumnsConfig | None = None) -> TypeTree:
    """
    Load the equipment-type tree from disk.

    - .csv/.xlsx/.xls: one row per path, columns given by ``columns``
    - .yaml/.yml/.json: flat records under the ``equipment_types`` key

    This function handles file I/O, then delegates parsing to domain layer.
    """
    columns = columns or TaxonomyColumnsConfig()
    suffix = path.suffix.lower()

    if suffix in TABLE_SUFFIXES:
        df = read_table(path)
        missing = [c for c in columns.ordered if c not in df.columns]
        if missing:
            raise KeyError(f"Taxonomy table {path} is missing columns {missing}. Available: {list(df.columns)}")
        rows = df[columns.ordered].fillna("").astype(str).itertuples(index=False, name=None)
        return parse_taxonomy_records(build_records_from_rows(rows))

    if suffix in RECORD_SUFFIXES:
        if suffix == ".json":
            data = read_json(path)
        else:
            data = _load_yaml(path)
        records = data.get("equipment_types") if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise ValueError(f"Expected a list of equipment types in {path}")
        return parse_taxonomy_records(records)

    raise ValueError(
        f"Unsupported taxonomy format: {suffix}. Supported formats: {sorted(TABLE_SUFFIXES | RECORD_SUFFIXES)}"
    )


def load_keyword_config(path: Path) -> dict[str, list[str]]:
    """
    Load a keyword table (``categories: {tag: [terms...]}``) from YAML.

    Raises:
        ValueError: If the mapping or any term list is malformed
    """
    data = _load_yaml(path)
    categories = data.get("categories")
    if not isinstance(categories, dict) or not categories:
        raise ValueError(f"Keyword YAML missing/invalid 'categories' mapping: {path}")

    table: dict[str, list[str]] = {}
    for tag, terms in categories.items():
        if not isinstance(terms, list) or not all(isinstance(t, str) for t in terms):
            raise ValueError(f"Keyword category {tag!r} must be a list of strings in {path}")
        table[str(tag)] = list(terms)
    return table


def load_provider_config(providers_dir: Path, provider: Provider) -> ProviderConfig:
    """
    Load a provider YAML (e.g., configs/providers/openai.yaml) into a ProviderConfig.

    Args:
        providers_dir: Directory containing provider YAML files
        provider: Provider enum value

    Returns:
        ProviderConfig with models and pricing

    Raises:
        ValueError: If YAML is missing required keys or has invalid types
    """
    path = providers_dir / f"{provider.value}.yaml"
    data = _load_yaml(path)

    if "provider" not in data:
        raise ValueError(f"Provider YAML missing required key 'provider': {path}")
    try:
        file_provider = Provider(data["provider"])
    except ValueError as e:
        raise ValueError(f"Invalid provider value {data.get('provider')!r} in {path}") from e

    if file_provider is not provider:
        raise ValueError(f"Provider YAML mismatch: expected {provider.value}, got {file_provider.value} in {path}")

    models_raw = data.get("models") or {}
    if not isinstance(models_raw, dict) or not models_raw:
        raise ValueError(f"Provider YAML missing/invalid 'models' mapping: {path}")

    models: dict[str, ProviderModelConfig] = {
        str(model_name): ProviderModelConfig(
            params=dict((block or {}).get("params") or {}),
            pricing=dict((block or {}).get("pricing") or {}),
        )
        for model_name, block in models_raw.items()
    }

    return ProviderConfig(provider=file_provider, models=models)


def load_detection_config(config_path: Path) -> DetectionConfig:
    """
    Load detection.yaml and construct a fully-resolved DetectionConfig.

    Conventions (required for adding providers):
    - The Provider enum value must match the DetectionConfig field name used for provider-specific params.
      Example: if Provider.OLLAMA.value == "ollama", DetectionConfig must define an `ollama` field.
    - This naming convention allows provider parameter models to be bound dynamically from the registry.
    """
    raw = _load_yaml(config_path)

    if "provider" not in raw:
        raise ValueError("detection.yaml missing required key: provider")
    if "model" not in raw:
        raise ValueError("detection.yaml missing required key: model")

    provider = Provider(str(raw["provider"]).strip().lower())
    model = str(raw["model"]).strip()

    providers_dir = Path(raw.get("providers_dir", str(PROVIDERS_DIR)))
    keywords_file = raw.get("keywords_file")
    keyword_categories = load_keyword_config(Path(keywords_file)) if keywords_file else None

    prov_cfg = load_provider_config(providers_dir, provider)
    if model not in prov_cfg.models:
        raise KeyError(
            f"Model '{model}' not found in {providers_dir / (provider.value + '.yaml')}. "
            f"Available: {list(prov_cfg.models.keys())}"
        )

    provider_model: ProviderModelConfig = prov_cfg.models[model]
    params = provider_model.params or {}

    param_model_cls = PARAM_MODEL_BY_PROVIDER.get(provider)
    if param_model_cls is None:
        raise ValueError(f"No param model registered for provider: {provider.value}")

    # Convention: field name == provider.value
    if provider.value not in DetectionConfig.model_fields:
        raise ValueError(
            f"DetectionConfig has no field '{provider.value}'. "
            f"Add `'{provider.value}': Optional[<YourProviderConfig>] = None` to DetectionConfig "
            f"(field name must match Provider.value)."
        )

    run_kwargs = {provider.value: param_model_cls(**params)}

    system_prompt_path = raw.get("system_prompt_path")
    user_prompt_path = raw.get("user_prompt_path")

    cfg = DetectionConfig(
        provider=provider,
        model=model,
        taxonomy_file=Path(raw.get("taxonomy_file", str(TAXONOMY_FILE))),
        taxonomy_columns=TaxonomyColumnsConfig(**(raw.get("taxonomy_columns") or {})),
        keywords_file=Path(keywords_file) if keywords_file else None,
        keyword_categories=keyword_categories,
        summary_ttl_s=raw.get("summary_ttl_s", DetectionConfig.model_fields["summary_ttl_s"].default),
        prompts_root=Path(raw.get("prompts_root", str(PROMPTS_DIR))),
        prompts_register_in_opik=bool(raw.get("prompts_register_in_opik", False)),
        system_prompt_path=Path(system_prompt_path) if system_prompt_path else None,
        user_prompt_path=Path(user_prompt_path) if user_prompt_path else None,
        providers_dir=providers_dir,
        provider_model=provider_model,
        **run_kwargs,
    )

    return cfg

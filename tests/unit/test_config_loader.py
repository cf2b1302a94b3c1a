import json
from pathlib import Path

import pytest
import yaml

from infrastructure.config.loader import (
    load_detection_config,
    load_keyword_config,
    load_provider_config,
    load_taxonomy,
)
from infrastructure.config.models import OllamaConfig, OpenAIConfig, Provider, TaxonomyColumnsConfig


def _dump(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def providers_dir(tmp_path: Path) -> Path:
    d = tmp_path / "providers"
    _dump(
        d / "openai.yaml",
        {
            "provider": "openai",
            "models": {
                "gpt-4o-mini": {
                    "params": {"temperature": 0.3, "max_tokens": 500},
                    "pricing": {"input_per_1m": 0.15, "cached_input_per_1m": 0.075, "output_per_1m": 0.6},
                }
            },
        },
    )
    _dump(
        d / "ollama.yaml",
        {"provider": "ollama", "models": {"llama3.1:8b": {"params": {"base_url": "http://gpu:11434", "seed": 7}}}},
    )
    return d


def test_detection_config_binds_provider_params(tmp_path: Path, providers_dir: Path) -> None:
    keywords = _dump(tmp_path / "keywords.yaml", {"categories": {"heating": ["boiler", "chaudiere"]}})
    config = _dump(
        tmp_path / "detection.yaml",
        {
            "provider": "OpenAI",
            "model": "gpt-4o-mini",
            "providers_dir": str(providers_dir),
            "keywords_file": str(keywords),
            "summary_ttl_s": 0,
            "system_prompt_path": "",
        },
    )

    cfg = load_detection_config(config)

    assert cfg.provider is Provider.OPENAI
    assert isinstance(cfg.openai, OpenAIConfig)
    assert cfg.openai.max_tokens == 500
    assert cfg.openai.json_mode is True
    assert cfg.provider_model.pricing["input_per_1m"] == 0.15
    assert cfg.keyword_categories == {"heating": ["boiler", "chaudiere"]}
    assert cfg.summary_ttl_s == 0
    assert cfg.system_prompt_path is None
    assert cfg.anthropic is None


def test_ollama_params(tmp_path: Path, providers_dir: Path) -> None:
    config = _dump(
        tmp_path / "detection.yaml",
        {"provider": "ollama", "model": "llama3.1:8b", "providers_dir": str(providers_dir)},
    )
    cfg = load_detection_config(config)

    assert isinstance(cfg.ollama, OllamaConfig)
    assert cfg.ollama.base_url == "http://gpu:11434"
    assert cfg.ollama.seed == 7
    assert cfg.keyword_categories is None


def test_unknown_model_and_missing_keys(tmp_path: Path, providers_dir: Path) -> None:
    unknown = _dump(
        tmp_path / "a.yaml",
        {"provider": "openai", "model": "gpt-9", "providers_dir": str(providers_dir)},
    )
    with pytest.raises(KeyError):
        load_detection_config(unknown)

    with pytest.raises(ValueError):
        load_detection_config(_dump(tmp_path / "b.yaml", {"model": "gpt-4o-mini"}))

    with pytest.raises(FileNotFoundError):
        load_detection_config(tmp_path / "missing.yaml")


def test_provider_yaml_mismatch_rejected(tmp_path: Path) -> None:
    _dump(tmp_path / "anthropic.yaml", {"provider": "openai", "models": {"m": {}}})
    with pytest.raises(ValueError, match="mismatch"):
        load_provider_config(tmp_path, Provider.ANTHROPIC)


def test_keyword_config_requires_string_lists(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_keyword_config(_dump(tmp_path / "k.yaml", {"categories": {"heating": "boiler"}}))
    with pytest.raises(ValueError):
        load_keyword_config(_dump(tmp_path / "k2.yaml", {"terms": ["boiler"]}))


def test_taxonomy_from_csv_with_custom_columns(tmp_path: Path) -> None:
    path = tmp_path / "types.csv"
    path.write_text(
        "Domaine,Type,Categorie,Sous-categorie\n"
        "HEATING,Boiler,Gas Boiler,Wall-mounted Gas Boiler\n"
        "HEATING,Boiler,Gas Boiler,\n"
        "TRANSPORT,Elevator,,\n",
        encoding="utf-8",
    )
    columns = TaxonomyColumnsConfig(
        domain_col="Domaine",
        type_col="Type",
        category_col="Categorie",
        subcategory_col="Sous-categorie",
    )
    tree = load_taxonomy(path, columns)

    assert len(tree) == 6
    leaf = tree.resolve_id_from_path({"subcategory": "Wall-mounted Gas Boiler"})
    assert tree.get_path(leaf) == ["HEATING", "Boiler", "Gas Boiler", "Wall-mounted Gas Boiler"]


def test_taxonomy_csv_missing_columns(tmp_path: Path) -> None:
    path = tmp_path / "types.csv"
    path.write_text("main,typ\nHEATING,Boiler\n", encoding="utf-8")
    with pytest.raises(KeyError):
        load_taxonomy(path)


def test_taxonomy_from_yaml_and_json_records(tmp_path: Path) -> None:
    records = [
        {"id": "a", "name": "HEATING", "level": 1, "parentId": None},
        {"id": "b", "name": "Boiler", "level": 2, "parentId": "a"},
    ]
    yaml_tree = load_taxonomy(_dump(tmp_path / "types.yaml", {"equipment_types": records}))
    json_path = tmp_path / "types.json"
    json_path.write_text(json.dumps({"equipment_types": records}), encoding="utf-8")
    json_tree = load_taxonomy(json_path)

    assert yaml_tree.get_path("b") == json_tree.get_path("b") == ["HEATING", "Boiler"]


def test_taxonomy_unsupported_suffix(tmp_path: Path) -> None:
    path = tmp_path / "types.txt"
    path.write_text("HEATING", encoding="utf-8")
    with pytest.raises(ValueError):
        load_taxonomy(path)


def test_shipped_configs_load() -> None:
    root = Path(__file__).resolve().parents[2]
    raw = yaml.safe_load((root / "configs" / "detection.yaml").read_text(encoding="utf-8"))
    assert raw["provider"] == "openai"
    for provider in Provider:
        cfg = load_provider_config(root / "configs" / "providers", provider)
        assert cfg.models
    assert "plomberie" in load_keyword_config(root / "configs" / "keywords.yaml")
    tree = load_taxonomy(root / "data" / "generic_equipments.csv")
    assert tree.resolve_id_from_path(
        {"domain": "HEATING", "type": "Boiler", "category": "Gas Boiler", "subcategory": "Wall-mounted Gas Boiler"}
    )

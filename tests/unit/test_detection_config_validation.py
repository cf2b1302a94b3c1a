from pathlib import Path

import pytest

from domain.schemas import HierarchyLevel
from infrastructure.config.models import DetectionConfig


def test_blank_prompt_override_is_treated_as_unset() -> None:
    cfg = DetectionConfig(system_prompt_path="  ", user_prompt_path=Path("prompts/custom.txt"))

    assert cfg.system_prompt_path is None
    assert cfg.user_prompt_path == Path("prompts/custom.txt")


def test_defaults_match_original_classifier_settings() -> None:
    cfg = DetectionConfig()

    assert cfg.model == "gpt-4o-mini"
    assert cfg.summary_ttl_s == 300
    assert cfg.prompts_register_in_opik is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"summary_ttl_s": -1},
        {"model": "   "},
        {"keyword_categories": {"heating": []}},
        {"keyword_categories": {" ": ["boiler"]}},
    ],
    ids=["negative-ttl", "blank-model", "empty-terms", "blank-tag"],
)
def test_invalid_values_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        DetectionConfig(**kwargs)


def test_hierarchy_level_parsing() -> None:
    assert HierarchyLevel.parse("category") is HierarchyLevel.CATEGORY
    assert HierarchyLevel.parse("2") is HierarchyLevel.TYPE
    assert HierarchyLevel.parse(4) is HierarchyLevel.SUBCATEGORY
    with pytest.raises(ValueError):
        HierarchyLevel.parse("brand")
    with pytest.raises(ValueError):
        HierarchyLevel.parse(5)

from pathlib import Path

import pytest

from application.prompting import build_user_prompt, format_equipment_details, format_relevant_types
from domain.schemas import EquipmentDetails
from domain.taxonomy.tree import TypeTree
from infrastructure.config.models import DetectionConfig, Provider
from infrastructure.prompting.manager import LocalPrompt, PromptManager, PromptRole


def test_equipment_details_skip_empty_description() -> None:
    text = format_equipment_details(EquipmentDetails(name="Vanne", brand="Belimo", model="R2"))
    assert text.splitlines() == ["- Name: Vanne", "- Brand: Belimo", "- Model: R2"]

    text = format_equipment_details(EquipmentDetails(name="Vanne", description="DN50"))
    assert text.splitlines()[-1] == "- Description: DN50"


def test_relevant_types_grouped_under_full_path(tree: TypeTree) -> None:
    relevant = [tree.get("c-gas"), tree.get("s-wall"), tree.get("c-cvc-gas")]
    assert format_relevant_types(tree, relevant).splitlines() == [
        "HEATING → Boiler → Gas Boiler: Gas Boiler",
        "HEATING → Boiler → Gas Boiler → Wall-mounted Gas Boiler: Wall-mounted Gas Boiler",
        "CVC → Boiler → Gas Boiler: Gas Boiler",
    ]


def test_user_prompt_renders_every_placeholder(tree: TypeTree) -> None:
    template = LocalPrompt(
        name="user",
        prompt="{{ equipment_details }}|{{keywords}}|{{hierarchy_summary}}|{{relevant_types}}",
        metadata={},
    )
    rendered = build_user_prompt(
        template,
        equipment=EquipmentDetails(name="Vanne papillon", brand="Belimo", model="R2"),
        keywords=["plomberie", "vanne"],
        hierarchy_summary="SUMMARY",
        tree=tree,
        relevant=[tree.get("t-vanne")],
    )

    details, keywords, summary, relevant = rendered.split("|")
    assert details.startswith("- Name: Vanne papillon")
    assert keywords == "plomberie, vanne"
    assert summary == "SUMMARY"
    assert relevant == "Most relevant types based on keywords:\nPLOMBERIE → VANNE: VANNE"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_prompt_manager_prefers_provider_folder_then_default(tmp_path: Path) -> None:
    _write(tmp_path / "default" / "system" / "classify-equipment.txt", "default system")
    _write(tmp_path / "default" / "user" / "classify-equipment.txt", "default user")
    _write(tmp_path / "anthropic" / "system" / "classify-equipment.txt", "anthropic system\n")

    cfg = DetectionConfig(provider=Provider.ANTHROPIC, model="claude-haiku-4-5")
    pm = PromptManager(prompts_root=tmp_path)

    system = pm.get_prompt(Provider.ANTHROPIC, PromptRole.SYSTEM, cfg)
    user = pm.get_prompt(Provider.ANTHROPIC, PromptRole.USER, cfg)

    assert system.prompt == "anthropic system"
    assert user.prompt == "default user"
    assert system.name == "equipment.anthropic.system.classify-equipment"
    assert pm.get_prompt(Provider.ANTHROPIC, PromptRole.SYSTEM, cfg) is system


def test_prompt_manager_override_and_missing_file(tmp_path: Path) -> None:
    override = _write(tmp_path / "custom.txt", "custom user")
    cfg = DetectionConfig()
    pm = PromptManager(prompts_root=tmp_path)

    assert pm.get_prompt(Provider.OPENAI, PromptRole.USER, cfg, override_path=override).prompt == "custom user"
    with pytest.raises(FileNotFoundError):
        pm.get_prompt(Provider.OPENAI, PromptRole.SYSTEM, cfg)

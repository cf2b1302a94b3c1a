from pathlib import Path

import pytest

from tools.scaffold_prompts import scaffold_empty, scaffold_from_template


def test_stub_user_prompt_keeps_placeholders(tmp_path: Path) -> None:
    scaffold_empty(tmp_path / "mistral", "mistral", force=False)

    user = (tmp_path / "mistral" / "user" / "classify-equipment.txt").read_text(encoding="utf-8")
    system = (tmp_path / "mistral" / "system" / "classify-equipment.txt").read_text(encoding="utf-8")
    for key in ("equipment_details", "keywords", "hierarchy_summary", "relevant_types"):
        assert "{{" + key + "}}" in user
    assert "(mistral)" in system
    assert '{"domain": ...' in system


def test_copy_from_template_refuses_to_overwrite(tmp_path: Path) -> None:
    (tmp_path / "default" / "system").mkdir(parents=True)
    (tmp_path / "default" / "system" / "classify-equipment.txt").write_text("sys", encoding="utf-8")

    scaffold_from_template(tmp_path, "ollama", "default", force=False)
    assert (tmp_path / "ollama" / "system" / "classify-equipment.txt").read_text(encoding="utf-8") == "sys"

    with pytest.raises(SystemExit):
        scaffold_from_template(tmp_path, "ollama", "default", force=False)

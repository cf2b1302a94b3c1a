import json
import logging
from pathlib import Path

import pytest
import yaml

import main

TAXONOMY = (
    "main,typ,cat,subcat\n"
    "HEATING,Boiler,Gas Boiler,Wall-mounted Gas Boiler\n"
    "TRANSPORT,Elevator,Passenger Elevator,\n"
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    providers = tmp_path / "providers"
    providers.mkdir()
    (providers / "openai.yaml").write_text(
        yaml.safe_dump({"provider": "openai", "models": {"gpt-4o-mini": {"params": {}}}}),
        encoding="utf-8",
    )
    (tmp_path / "types.csv").write_text(TAXONOMY, encoding="utf-8")

    prompts = tmp_path / "prompts" / "default"
    (prompts / "system").mkdir(parents=True)
    (prompts / "user").mkdir(parents=True)
    (prompts / "system" / "classify-equipment.txt").write_text("Answer with JSON.", encoding="utf-8")
    (prompts / "user" / "classify-equipment.txt").write_text("{{equipment_details}}", encoding="utf-8")

    (tmp_path / "detection.yaml").write_text(
        yaml.safe_dump(
            {
                "provider": "openai",
                "model": "gpt-4o-mini",
                "providers_dir": str(providers),
                "taxonomy_file": str(tmp_path / "types.csv"),
                "prompts_root": str(tmp_path / "prompts"),
            }
        ),
        encoding="utf-8",
    )
    return tmp_path


def _run(workspace: Path, *args: str) -> int:
    return main.main(["--config", str(workspace / "detection.yaml"), "--env", str(workspace / ".env"), *args])


def test_path_and_resolve_round_trip(workspace: Path, capsys: pytest.CaptureFixture) -> None:
    assert _run(workspace, "resolve", "--domain", "HEATING", "--subcategory", "Wall-mounted Gas Boiler") == 0
    node_id = capsys.readouterr().out.strip()

    assert _run(workspace, "path", node_id) == 0
    assert json.loads(capsys.readouterr().out) == {
        "domain": "HEATING",
        "type": "Boiler",
        "category": "Gas Boiler",
        "subcategory": "Wall-mounted Gas Boiler",
    }


def test_unknown_id_and_unresolvable_path_exit_1(workspace: Path) -> None:
    assert _run(workspace, "path", "missing") == 1
    assert _run(workspace, "resolve", "--domain", "HEATING", "--type", "Elevator") == 1


def test_missing_config_exits_1(tmp_path: Path) -> None:
    assert main.main(["--config", str(tmp_path / "nope.yaml"), "summary"]) == 1


def test_summary_and_keywords(workspace: Path, capsys: pytest.CaptureFixture) -> None:
    assert _run(workspace, "summary") == 0
    assert "HEATING (1 types):" in capsys.readouterr().out

    assert _run(workspace, "keywords", "Chaudière chauffage") == 0
    out = json.loads(capsys.readouterr().out)
    assert out["keywords"] == ["plomberie", "chauffage"]
    assert out["relevant_types"] == []


def test_detect_with_mock_adapter_prints_unverified_result(workspace: Path, capsys: pytest.CaptureFixture) -> None:
    assert _run(workspace, "--mock", "detect", "--name", "Chaudière", "--brand", "Viessmann") == 0
    out = json.loads(capsys.readouterr().out)

    assert out["available"] is True
    assert out["status"] == "unverifiable"
    assert out["node_id"] is None

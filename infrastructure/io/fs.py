"""Filesystem helpers shared by the config, taxonomy and prompt loaders."""

import json
from pathlib import Path
from typing import Any


def ensure_exists(path: Path, what: str) -> None:
    """Raise FileNotFoundError naming ``what`` when ``path`` is missing."""
    if not path.exists():
        raise FileNotFoundError(f"Missing {what} at: {path}")


def read_text(path: Path) -> str:
    """Read a UTF-8 text file (e.g. a prompt template) without surrounding whitespace."""
    return path.read_text(encoding="utf-8").strip()


def read_json(path: Path) -> Any:
    """
    Read a UTF-8 JSON document.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON
    """
    ensure_exists(path, "JSON file")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e.msg} (line {e.lineno})") from e

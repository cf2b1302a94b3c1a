"""I/O utilities: filesystem helpers and tabular loading."""

from infrastructure.io.datasets import read_table
from infrastructure.io.fs import ensure_exists, read_json, read_text

__all__ = [
    "ensure_exists",
    "read_text",
    "read_json",
    "read_table",
]

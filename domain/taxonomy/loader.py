"""Build a TypeTree from pre-loaded taxonomy data."""

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from domain.schemas import EquipmentTypeNode
from domain.taxonomy.tree import TypeTree

logger = logging.getLogger(__name__)


ID_NAMESPACE = uuid.UUID("5b0f3c2e-8f6a-4d1e-9c3b-2a7e6d4f1b90")


def prefix_id(prefix: tuple[str, ...]) -> str:
    """Stable node id for a name path: the same rows always yield the same ids."""
    return str(uuid.uuid5(ID_NAMESPACE, "\x1f".join(prefix)))


def build_records_from_rows(
    rows: Iterable[Sequence[Any]],
    *,
    id_factory: Callable[[tuple[str, ...]], str] = prefix_id,
) -> list[dict[str, Any]]:
    """
    Turn (domain, type, category, subcategory) rows into flat node records.

    One node is created per distinct path prefix, so the same name under two
    different parents yields two nodes. An empty value at level k stops the row:
    nothing is created at level k or deeper.

    Args:
        rows: Iterable of 4-tuples of names (missing trailing values allowed)
        id_factory: Callable mapping a name prefix (domain, ..., name) to a node id

    Returns:
        List of {id, name, level, parent_id} records, parents before children
    """
    ids_by_prefix: dict[tuple[str, ...], str] = {}
    records: list[dict[str, Any]] = []

    for row in rows:
        prefix: tuple[str, ...] = ()
        parent_id: str | None = None
        for raw in list(row)[:4]:
            name = "" if raw is None else str(raw).strip()
            if not name or name.lower() == "nan":
                break
            prefix = (*prefix, name)
            node_id = ids_by_prefix.get(prefix)
            if node_id is None:
                node_id = id_factory(prefix)
                ids_by_prefix[prefix] = node_id
                records.append({"id": node_id, "name": name, "level": len(prefix), "parent_id": parent_id})
            parent_id = node_id

    logger.debug("Built %d equipment type records from rows", len(records))
    return records


def _record_parent(record: Mapping[str, Any]) -> str | None:
    parent = record.get("parent_id", record.get("parentId"))
    return None if parent in (None, "") else str(parent)


def parse_taxonomy_records(records: Iterable[Mapping[str, Any]]) -> TypeTree:
    """
    Build a TypeTree from flat {id, name, level, parentId} records.

    This is a pure function - it does NOT perform file I/O.
    Records may be in any order; each parent is inserted before its children.

    Raises:
        ValueError: On missing keys, duplicate ids, dangling parents or level mismatches
    """
    nodes: dict[str, EquipmentTypeNode] = {}
    for i, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise ValueError(f"Equipment type record #{i} must be a mapping, got {type(record).__name__}")
        missing = [k for k in ("id", "name", "level") if k not in record]
        if missing:
            raise ValueError(f"Equipment type record #{i} is missing keys: {missing}")
        try:
            node = EquipmentTypeNode(
                id=str(record["id"]),
                name=str(record["name"]).strip(),
                level=int(record["level"]),
                parent_id=_record_parent(record),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid equipment type record #{i}: {e}") from e
        if node.id in nodes:
            raise ValueError(f"Duplicate equipment type id: {node.id!r}")
        nodes[node.id] = node

    for node in nodes.values():
        if node.parent_id is not None and node.parent_id not in nodes:
            raise ValueError(f"Equipment type {node.id!r} references unknown parent {node.parent_id!r}")

    # Insert level by level so parents always precede children.
    ordered = sorted(nodes.values(), key=lambda n: n.level)
    tree = TypeTree(ordered)
    logger.info("Loaded equipment type tree with %d nodes", len(tree))
    return tree

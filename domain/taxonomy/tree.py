"""In-memory equipment-type tree: indexing, ancestor paths and path resolution."""

import logging
import uuid
from collections.abc import Iterable, Iterator, Mapping

from domain.errors import NotFoundError
from domain.schemas import LEVEL_FIELDS, EquipmentTypeNode, HierarchyLevel, HierarchyPath

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100


class TypeTree:
    """
    Flat arena of taxonomy nodes referenced by plain ids.

    Two indexes are kept: id -> node, and id -> ordered child ids (None for the
    roots). Ancestor walks only follow ``parent_id``; the child index serves
    option listings and summaries.
    """

    def __init__(self, nodes: Iterable[EquipmentTypeNode] = ()) -> None:
        self._nodes: dict[str, EquipmentTypeNode] = {}
        self._children: dict[str | None, list[str]] = {None: []}
        for node in nodes:
            self.add(node)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[EquipmentTypeNode]:
        return iter(self._nodes.values())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def add(self, node: EquipmentTypeNode) -> EquipmentTypeNode:
        """Insert a node whose parent (if any) is already present."""
        if node.id in self._nodes:
            raise ValueError(f"Duplicate equipment type id: {node.id!r}")
        if node.parent_id is not None:
            parent = self._nodes.get(node.parent_id)
            if parent is None:
                raise NotFoundError(node.parent_id)
            if node.level != parent.level + 1:
                raise ValueError(
                    f"Node {node.id!r} has level {node.level} but its parent {parent.id!r} has level {parent.level}"
                )
        self._nodes[node.id] = node
        self._children.setdefault(node.parent_id, []).append(node.id)
        self._children.setdefault(node.id, [])
        return node

    def create(self, name: str, parent_id: str | None = None) -> EquipmentTypeNode:
        """Create a node under ``parent_id`` with a generated id; level is derived from the parent."""
        name = str(name).strip()
        if not (MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH):
            raise ValueError("Invalid equipment type name")

        level = 1
        if parent_id is not None:
            parent = self.get(parent_id)
            if parent.level >= HierarchyLevel.SUBCATEGORY:
                raise ValueError(f"Cannot create a child under subcategory {parent.name!r}")
            level = parent.level + 1

        node = self.add(EquipmentTypeNode(id=str(uuid.uuid4()), name=name, level=level, parent_id=parent_id))
        logger.info("Created equipment type %r (level=%d, id=%s)", node.name, node.level, node.id)
        return node

    def get(self, node_id: str) -> EquipmentTypeNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NotFoundError(node_id) from None

    def children(self, node_id: str | None = None) -> list[EquipmentTypeNode]:
        """Children of ``node_id`` in insertion order; the domains when ``node_id`` is None."""
        if node_id is not None and node_id not in self._nodes:
            raise NotFoundError(node_id)
        return [self._nodes[cid] for cid in self._children.get(node_id, [])]

    def nodes_at_level(self, level: HierarchyLevel | int) -> list[EquipmentTypeNode]:
        return [n for n in self._nodes.values() if n.level == int(level)]

    def get_path(self, node_id: str) -> list[str]:
        """Names from the domain down to ``node_id`` inclusive."""
        names: list[str] = []
        current: EquipmentTypeNode | None = self.get(node_id)
        while current is not None:
            names.append(current.name)
            current = self._nodes[current.parent_id] if current.parent_id is not None else None
        names.reverse()
        return names

    def get_hierarchy_path(self, node_id: str) -> HierarchyPath:
        return HierarchyPath.from_names(self.get_path(node_id))

    def resolve_id_from_path(self, partial: HierarchyPath | Mapping[str, str | None]) -> str | None:
        """
        Resolve a possibly partial path to the id of its deepest supplied level.

        The deepest non-empty field selects the candidates by name and level; a
        candidate matches when each shallower supplied field equals the name of its
        ancestor at that level. Unsupplied shallower levels are unconstrained.
        Returns the first match in load order, or None. There is no fallback to a
        shallower level.
        """
        if not isinstance(partial, HierarchyPath):
            partial = HierarchyPath(**{k: partial.get(k) for k in LEVEL_FIELDS})

        target = partial.deepest_level()
        if target is None:
            return None
        target_name = partial.get(target)

        for node in self._nodes.values():
            if node.level != target or node.name != target_name:
                continue
            if self._ancestors_match(node, partial):
                return node.id
        return None

    def _ancestors_match(self, node: EquipmentTypeNode, partial: HierarchyPath) -> bool:
        current = node
        while current.parent_id is not None:
            current = self._nodes[current.parent_id]
            expected = partial.get(HierarchyLevel(current.level))
            if expected and expected != current.name:
                return False
        return True

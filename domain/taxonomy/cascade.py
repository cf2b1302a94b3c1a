"""Cascading four-level selection state kept consistent with the tree."""

import logging
from collections.abc import Callable

from domain.errors import InvalidSelectionError
from domain.schemas import EquipmentTypeNode, HierarchyLevel, HierarchyPath
from domain.taxonomy.tree import TypeTree

logger = logging.getLogger(__name__)


class CascadeSelection(HierarchyPath):
    """Snapshot of the four slots plus the leaf-most resolvable node id."""

    node_id: str | None = None


SelectionListener = Callable[[CascadeSelection], None]


class CascadeSelectionController:
    """
    Holds the domain / type / category / subcategory slots.

    Selecting a level clears every deeper level. ``hydrate`` sets all slots from
    a node id in one step, so listeners never see a half-filled path. Listeners
    are notified exactly once per state change.
    """

    def __init__(self, tree: TypeTree) -> None:
        self.tree = tree
        self._slots: dict[HierarchyLevel, EquipmentTypeNode | None] = {level: None for level in HierarchyLevel}
        self._listeners: list[SelectionListener] = []
        self._selection = CascadeSelection()

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def options(self, level: HierarchyLevel | int | str) -> list[EquipmentTypeNode]:
        """Children of the selected parent slot; all domains for level 1."""
        level = HierarchyLevel.parse(level)
        if level is HierarchyLevel.DOMAIN:
            return self.tree.children(None)
        parent = self._slots[HierarchyLevel(level - 1)]
        if parent is None:
            return []
        return self.tree.children(parent.id)

    def select(self, level: HierarchyLevel | int | str, value: str | None) -> CascadeSelection:
        """
        Select ``value`` at ``level`` and clear every deeper slot.

        An empty value clears the slot (and the deeper ones).

        Raises:
            InvalidSelectionError: If the parent slot is empty or ``value`` is not one of its children
        """
        level = HierarchyLevel.parse(level)
        node: EquipmentTypeNode | None = None
        if value:
            if level > HierarchyLevel.DOMAIN and self._slots[HierarchyLevel(level - 1)] is None:
                raise InvalidSelectionError(
                    f"Cannot select {level.field_name}={value!r} before a {HierarchyLevel(level - 1).field_name}"
                )
            node = next((n for n in self.options(level) if n.name == value), None)
            if node is None:
                raise InvalidSelectionError(f"{value!r} is not an available {level.field_name}")

        self._slots[level] = node
        for deeper in HierarchyLevel:
            if deeper > level:
                self._slots[deeper] = None
        return self._commit()

    def hydrate(self, node_id: str) -> CascadeSelection:
        """
        Fill all four slots from ``node_id`` and its ancestors at once.

        Raises:
            NotFoundError: If ``node_id`` is unknown
        """
        chain: list[EquipmentTypeNode] = []
        node: EquipmentTypeNode | None = self.tree.get(node_id)
        while node is not None:
            chain.append(node)
            node = self.tree.get(node.parent_id) if node.parent_id is not None else None

        by_level = {HierarchyLevel(n.level): n for n in chain}
        self._slots = {level: by_level.get(level) for level in HierarchyLevel}
        logger.debug("Hydrated cascade selection from %s", node_id)
        return self._commit()

    def clear(self) -> CascadeSelection:
        self._slots = {level: None for level in HierarchyLevel}
        return self._commit()

    def current_selection(self) -> CascadeSelection:
        return self._selection

    def _commit(self) -> CascadeSelection:
        path = HierarchyPath(**{level.field_name: (n.name if n else None) for level, n in self._slots.items()})
        self._selection = CascadeSelection(**path.model_dump(), node_id=self.tree.resolve_id_from_path(path))
        for listener in list(self._listeners):
            listener(self._selection)
        return self._selection

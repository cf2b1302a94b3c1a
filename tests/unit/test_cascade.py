import pytest

from domain.errors import InvalidSelectionError, NotFoundError
from domain.schemas import HierarchyLevel
from domain.taxonomy.cascade import CascadeSelection, CascadeSelectionController
from domain.taxonomy.tree import TypeTree


@pytest.fixture
def controller(tree: TypeTree) -> CascadeSelectionController:
    return CascadeSelectionController(tree)


def _select_wall_mounted(controller: CascadeSelectionController) -> None:
    controller.select("domain", "HEATING")
    controller.select("type", "Boiler")
    controller.select("category", "Gas Boiler")
    controller.select("subcategory", "Wall-mounted Gas Boiler")


def test_manual_selection_resolves_leaf_id(controller: CascadeSelectionController) -> None:
    _select_wall_mounted(controller)
    selection = controller.current_selection()

    assert selection.as_list() == ["HEATING", "Boiler", "Gas Boiler", "Wall-mounted Gas Boiler"]
    assert selection.node_id == "s-wall"


def test_partial_selection_resolves_deepest_level(controller: CascadeSelectionController) -> None:
    controller.select(HierarchyLevel.DOMAIN, "CVC")
    selection = controller.select(HierarchyLevel.TYPE, "Boiler")
    assert selection.node_id == "t-cvc-boiler"


def test_new_domain_clears_deeper_slots(controller: CascadeSelectionController) -> None:
    _select_wall_mounted(controller)
    selection = controller.select("domain", "TRANSPORT")

    assert selection.domain == "TRANSPORT"
    assert selection.type is None
    assert selection.category is None
    assert selection.subcategory is None
    assert selection.node_id == "d-trans"


def test_selecting_type_clears_category_and_subcategory(controller: CascadeSelectionController) -> None:
    _select_wall_mounted(controller)
    selection = controller.select("type", "Heat Pump")

    assert selection.as_list() == ["HEATING", "Heat Pump"]


def test_options_follow_selected_parent(controller: CascadeSelectionController) -> None:
    assert [n.name for n in controller.options("domain")] == ["HEATING", "TRANSPORT", "PLOMBERIE", "CVC"]
    assert controller.options("type") == []

    controller.select("domain", "HEATING")
    assert [n.name for n in controller.options("type")] == ["Boiler", "Heat Pump"]

    controller.select("type", "Boiler")
    assert [n.name for n in controller.options(3)] == ["Gas Boiler", "Oil Boiler"]


def test_invalid_selections_raise(controller: CascadeSelectionController) -> None:
    with pytest.raises(InvalidSelectionError):
        controller.select("type", "Boiler")

    controller.select("domain", "HEATING")
    with pytest.raises(InvalidSelectionError):
        controller.select("type", "Elevator")
    with pytest.raises(InvalidSelectionError):
        controller.select("domain", "NOPE")


def test_empty_value_clears_slot_and_deeper(controller: CascadeSelectionController) -> None:
    _select_wall_mounted(controller)
    selection = controller.select("category", "")

    assert selection.as_list() == ["HEATING", "Boiler"]
    assert selection.node_id == "t-boiler"


def test_hydrate_matches_hierarchy_path_in_one_notification(tree: TypeTree) -> None:
    controller = CascadeSelectionController(tree)
    seen: list[CascadeSelection] = []
    controller.subscribe(seen.append)

    selection = controller.hydrate("s-wall")

    assert len(seen) == 1
    assert seen[0] == selection
    assert selection.model_dump(exclude={"node_id"}) == tree.get_hierarchy_path("s-wall").model_dump()
    assert selection.node_id == "s-wall"


def test_hydrate_shallow_node_clears_deeper_slots(controller: CascadeSelectionController) -> None:
    _select_wall_mounted(controller)
    selection = controller.hydrate("c-pass")

    assert selection.as_list() == ["TRANSPORT", "Elevator", "Passenger Elevator"]
    assert selection.subcategory is None


def test_hydrate_unknown_id_raises_and_keeps_state(controller: CascadeSelectionController) -> None:
    controller.select("domain", "HEATING")
    with pytest.raises(NotFoundError):
        controller.hydrate("missing")
    assert controller.current_selection().domain == "HEATING"


def test_each_change_notifies_once_and_unsubscribe_stops_updates(controller: CascadeSelectionController) -> None:
    seen: list[CascadeSelection] = []
    unsubscribe = controller.subscribe(seen.append)

    _select_wall_mounted(controller)
    assert len(seen) == 4

    unsubscribe()
    controller.clear()
    assert len(seen) == 4
    assert controller.current_selection().node_id is None

import os

# Tracing off before any module applies @track
os.environ.setdefault("OPIK_TRACK_DISABLE", "true")

import pytest  # noqa: E402
from opik import opik_context  # noqa: E402

from domain.schemas import EquipmentTypeNode  # noqa: E402
from domain.taxonomy.tree import TypeTree  # noqa: E402


def _node(node_id: str, name: str, level: int, parent_id: str | None = None) -> EquipmentTypeNode:
    return EquipmentTypeNode(id=node_id, name=name, level=level, parent_id=parent_id)


SAMPLE_NODES = [
    _node("d-heat", "HEATING", 1),
    _node("t-boiler", "Boiler", 2, "d-heat"),
    _node("c-gas", "Gas Boiler", 3, "t-boiler"),
    _node("s-wall", "Wall-mounted Gas Boiler", 4, "c-gas"),
    _node("s-floor", "Floor-standing Gas Boiler", 4, "c-gas"),
    _node("c-oil", "Oil Boiler", 3, "t-boiler"),
    _node("t-hp", "Heat Pump", 2, "d-heat"),
    _node("d-trans", "TRANSPORT", 1),
    _node("t-elev", "Elevator", 2, "d-trans"),
    _node("c-pass", "Passenger Elevator", 3, "t-elev"),
    _node("d-plomb", "PLOMBERIE", 1),
    _node("t-vanne", "VANNE", 2, "d-plomb"),
    _node("c-papillon", "VANNE PAPILLON", 3, "t-vanne"),
    _node("c-v3v", "VANNE 3 VOIES (V3V)", 3, "t-vanne"),
    # Same names as the HEATING branch, under another domain
    _node("d-cvc", "CVC", 1),
    _node("t-cvc-boiler", "Boiler", 2, "d-cvc"),
    _node("c-cvc-gas", "Gas Boiler", 3, "t-cvc-boiler"),
]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _no_opik_spans(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(opik_context, "update_current_span", lambda *args, **kwargs: None)


@pytest.fixture
def tree() -> TypeTree:
    return TypeTree(SAMPLE_NODES)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

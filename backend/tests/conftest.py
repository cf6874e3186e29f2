"""Shared test fixtures for FlowSim backend tests."""
import sys
from pathlib import Path

import pytest

# Ensure flowsim package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from flowsim.config import settings
from flowsim.engine.graph import Graph, NodeInstance, Port
from flowsim.nodes.base import NodeKind, PortType
from helpers import make_edge, make_node


@pytest.fixture(autouse=True)
def register_kinds():
    """Fresh, unfrozen kind registry with the built-ins for every test."""
    from flowsim.nodes.builtin import register_builtin_kinds
    from flowsim.nodes.registry import KindRegistry
    KindRegistry.clear()
    register_builtin_kinds()
    yield
    KindRegistry.clear()
    register_builtin_kinds()


@pytest.fixture
def instant_runs():
    """Make simulated node durations take no wall-clock time."""
    original = settings.time_scale
    settings.time_scale = 0
    yield
    settings.time_scale = original


@pytest.fixture
def diamond_graph():
    """A(Input) -> B, A -> C, B -> D(Output), C -> D."""
    nodes = {
        "a": make_node("a", NodeKind.INPUT, inputs=()),
        "b": make_node("b"),
        "c": make_node("c"),
        "d": make_node("d", NodeKind.OUTPUT, outputs=()),
    }
    edges = [
        make_edge("a", "b"),
        make_edge("a", "c"),
        make_edge("b", "d"),
        make_edge("c", "d"),
    ]
    return Graph(nodes=nodes, edges=edges)


@pytest.fixture
def typed_graph():
    """Two nodes with typed and untyped ports in both directions."""
    src = NodeInstance(
        id="src", kind=NodeKind.CUSTOM.value,
        inputs=[Port(id="in_a", type=PortType.A)],
        outputs=[
            Port(id="out_a", type=PortType.A),
            Port(id="out_b", type=PortType.B),
            Port(id="out_any"),
        ],
    )
    dst = NodeInstance(
        id="dst", kind=NodeKind.CUSTOM.value,
        inputs=[
            Port(id="in_a", type=PortType.A),
            Port(id="in_b", type=PortType.B),
            Port(id="in_any"),
        ],
        outputs=[Port(id="out_a", type=PortType.A)],
    )
    return Graph(nodes={"src": src, "dst": dst}, edges=[])

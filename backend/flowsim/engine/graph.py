"""Graph data structures for the execution engine."""
from dataclasses import dataclass, field
from typing import Any, Literal

from ..nodes.base import NodeStatus, PortType

PortDirection = Literal["input", "output"]


@dataclass
class Port:
    id: str
    label: str = ""
    type: PortType | None = None  # None = untyped


@dataclass
class NodeInstance:
    id: str
    kind: str
    label: str = ""
    status: NodeStatus = NodeStatus.IDLE
    duration_ms: int | None = None  # None = kind default
    inputs: list[Port] = field(default_factory=list)
    outputs: list[Port] = field(default_factory=list)
    position: dict[str, float] = field(default_factory=dict)
    attributes: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.duration_ms is not None and self.duration_ms < 0:
            raise ValueError(
                f"Node '{self.id}': duration_ms must be non-negative, got {self.duration_ms}"
            )

    def find_port(self, port_id: str, direction: PortDirection) -> Port | None:
        ports = self.inputs if direction == "input" else self.outputs
        return next((p for p in ports if p.id == port_id), None)


@dataclass
class Edge:
    id: str
    source_node: str
    target_node: str
    source_port: str | None = None  # None = the node's default port
    target_port: str | None = None
    label: str = ""
    animated: bool = False


@dataclass
class Graph:
    nodes: dict[str, NodeInstance] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)

    def get_incoming_edges(self, node_id: str) -> list[Edge]:
        return [e for e in self.edges if e.target_node == node_id]

    def get_outgoing_edges(self, node_id: str) -> list[Edge]:
        return [e for e in self.edges if e.source_node == node_id]

    def get_predecessors(self, node_id: str) -> list[str]:
        # dict.fromkeys keeps edge-insertion order while collapsing parallel edges
        return list(dict.fromkeys(e.source_node for e in self.get_incoming_edges(node_id)))

    def get_successors(self, node_id: str) -> list[str]:
        return list(dict.fromkeys(e.target_node for e in self.get_outgoing_edges(node_id)))

    def get_port(self, node_id: str, port_id: str, direction: PortDirection) -> Port | None:
        node = self.nodes.get(node_id)
        if node is None:
            return None
        return node.find_port(port_id, direction)

    def add_node(self, node: NodeInstance) -> None:
        if node.id in self.nodes:
            raise ValueError(f"Duplicate node id: {node.id}")
        self.nodes[node.id] = node

    def add_edge(self, edge: Edge) -> None:
        self.edges.append(edge)

    def remove_node(self, node_id: str) -> NodeInstance:
        """Remove a node and every edge touching it."""
        node = self.nodes.pop(node_id)
        self.edges = [
            e for e in self.edges
            if e.source_node != node_id and e.target_node != node_id
        ]
        return node

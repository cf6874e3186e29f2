"""Starter graph shown when the editor opens."""
from ..engine.graph import Graph
from .base import NodeKind, PortType
from .factory import (
    create_data_flow_edge,
    create_multi_port_node,
    create_node,
    create_typed_port_node,
)


def demo_graph() -> Graph:
    nodes = [
        create_node(NodeKind.INPUT.value, "Input 1", {"x": 0, "y": 0}, node_id="input-1"),
        create_node(NodeKind.PROCESS.value, "Process 1", {"x": 250, "y": 0}, node_id="process-1"),
        create_node(NodeKind.TRANSFORM.value, "Transform 1", {"x": 500, "y": 0}, node_id="transform-1"),
        create_node(NodeKind.OUTPUT.value, "Output 1", {"x": 750, "y": 0}, node_id="output-1"),
        create_multi_port_node(
            NodeKind.PROCESS.value, "Multi-port", {"x": 250, "y": 200},
            inputs=3, outputs=2, duration_ms=4000, node_id="multi-port-1",
        ),
        create_typed_port_node(
            NodeKind.CUSTOM.value, "Typed ports", {"x": 500, "y": 200},
            input_types=[PortType.A, PortType.B, PortType.C],
            output_types=[PortType.A, PortType.B, PortType.C],
            duration_ms=2500, node_id="typed-port-1",
        ),
    ]
    edges = [
        create_data_flow_edge("input-1", "process-1", "edge-1"),
        create_data_flow_edge("process-1", "transform-1", "edge-2"),
        create_data_flow_edge("transform-1", "output-1", "edge-3"),
        create_data_flow_edge("input-1", "multi-port-1", "edge-4", target_port="input_1"),
        create_data_flow_edge("process-1", "multi-port-1", "edge-5", target_port="input_2"),
        create_data_flow_edge("multi-port-1", "output-1", "edge-6", source_port="output_1"),
        create_data_flow_edge("transform-1", "typed-port-1", "edge-7", target_port="input_A_1"),
        create_data_flow_edge("typed-port-1", "output-1", "edge-8", source_port="output_B_2"),
    ]
    return Graph(nodes={n.id: n for n in nodes}, edges=edges)

"""Snapshot export/import of the full graph state."""
from ..models.schemas import EdgeSchema, GraphSnapshot, NodeSchema, PortSchema
from .graph import Edge, Graph, NodeInstance, Port


def _port_to_schema(port: Port) -> PortSchema:
    return PortSchema(id=port.id, label=port.label, type=port.type)


def _schema_to_port(schema: PortSchema) -> Port:
    return Port(id=schema.id, label=schema.label, type=schema.type)


def export_graph(graph: Graph) -> GraphSnapshot:
    """Return a frozen copy of every node and edge, detached from ``graph``."""
    nodes = tuple(
        NodeSchema(
            id=n.id, kind=n.kind, label=n.label, status=n.status,
            duration_ms=n.duration_ms,
            inputs=tuple(_port_to_schema(p) for p in n.inputs),
            outputs=tuple(_port_to_schema(p) for p in n.outputs),
            position=dict(n.position),
            attributes=dict(n.attributes),
        )
        for n in graph.nodes.values()
    )
    edges = tuple(
        EdgeSchema(
            id=e.id, source_node=e.source_node, target_node=e.target_node,
            source_port=e.source_port, target_port=e.target_port,
            label=e.label, animated=e.animated,
        )
        for e in graph.edges
    )
    # deep=True detaches nested attribute values too
    return GraphSnapshot(nodes=nodes, edges=edges).model_copy(deep=True)


def import_graph(snapshot: GraphSnapshot | dict) -> Graph:
    """Build a fresh Graph from a snapshot. Edges are trusted, not validated."""
    if isinstance(snapshot, dict):
        snapshot = GraphSnapshot.model_validate(snapshot)
    snapshot = snapshot.model_copy(deep=True)
    nodes = {
        n.id: NodeInstance(
            id=n.id, kind=n.kind, label=n.label, status=n.status,
            duration_ms=n.duration_ms,
            inputs=[_schema_to_port(p) for p in n.inputs],
            outputs=[_schema_to_port(p) for p in n.outputs],
            position=dict(n.position),
            attributes=dict(n.attributes),
        )
        for n in snapshot.nodes
    }
    edges = [
        Edge(
            id=e.id, source_node=e.source_node, target_node=e.target_node,
            source_port=e.source_port, target_port=e.target_port,
            label=e.label, animated=e.animated,
        )
        for e in snapshot.edges
    ]
    return Graph(nodes=nodes, edges=edges)

"""Graph builders shared by the test modules."""
from flowsim.engine.graph import Edge, NodeInstance, Port
from flowsim.nodes.base import NodeKind


def make_node(node_id, kind=NodeKind.PROCESS, inputs=("in",), outputs=("out",), duration_ms=0):
    kind = kind.value if isinstance(kind, NodeKind) else kind
    return NodeInstance(
        id=node_id, kind=kind, label=node_id, duration_ms=duration_ms,
        inputs=[Port(id=p) for p in inputs],
        outputs=[Port(id=p) for p in outputs],
    )


def make_edge(source, target, edge_id=None):
    return Edge(id=edge_id or f"{source}->{target}", source_node=source, target_node=target)

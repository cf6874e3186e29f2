"""Node and edge factories producing values that conform to the graph model."""
import logging
import uuid
from typing import Any, Sequence

from ..engine.graph import Edge, NodeInstance, Port
from .base import NodeKind, PortType
from .registry import KindRegistry

logger = logging.getLogger(__name__)


def numbered_ports(direction: str, count: int) -> list[Port]:
    return [
        Port(id=f"{direction}_{i}", label=f"{direction.capitalize()} {i}")
        for i in range(1, count + 1)
    ]


def typed_ports(direction: str, types: Sequence[PortType]) -> list[Port]:
    return [
        Port(
            id=f"{direction}_{t.value}_{i}",
            label=f"{t.value} {direction}",
            type=t,
        )
        for i, t in enumerate(types, start=1)
    ]


def create_node(
    kind: str,
    label: str = "",
    position: dict[str, float] | None = None,
    node_id: str | None = None,
    inputs: list[Port] | None = None,
    outputs: list[Port] | None = None,
    duration_ms: int | None = None,
    attributes: dict[str, Any] | None = None,
) -> NodeInstance:
    """Plain node. Without explicit ports, uses the kind's conventional counts."""
    if inputs is None:
        inputs = numbered_ports("input", 0 if kind == NodeKind.INPUT.value else 1)
    if outputs is None:
        outputs = numbered_ports("output", 0 if kind == NodeKind.OUTPUT.value else 1)
    return NodeInstance(
        id=node_id or str(uuid.uuid4()),
        kind=kind,
        label=label,
        duration_ms=duration_ms,
        inputs=inputs,
        outputs=outputs,
        position=dict(position or {}),
        attributes=dict(attributes or {}),
    )


def create_multi_port_node(
    kind: str,
    label: str = "",
    position: dict[str, float] | None = None,
    inputs: int | list[Port] = 1,
    outputs: int | list[Port] = 1,
    **kwargs: Any,
) -> NodeInstance:
    if isinstance(inputs, int):
        inputs = numbered_ports("input", inputs)
    if isinstance(outputs, int):
        outputs = numbered_ports("output", outputs)
    return create_node(kind, label, position, inputs=inputs, outputs=outputs, **kwargs)


def create_typed_port_node(
    kind: str,
    label: str = "",
    position: dict[str, float] | None = None,
    input_types: Sequence[PortType] = (),
    output_types: Sequence[PortType] = (),
    **kwargs: Any,
) -> NodeInstance:
    return create_node(
        kind, label, position,
        inputs=typed_ports("input", input_types),
        outputs=typed_ports("output", output_types),
        **kwargs,
    )


def create_node_by_kind(
    kind: str,
    label: str = "",
    position: dict[str, float] | None = None,
    node_id: str | None = None,
    attributes: dict[str, Any] | None = None,
    **kwargs: Any,
) -> NodeInstance:
    """Build a node from its registered descriptor."""
    descriptor = KindRegistry.find(kind)
    if descriptor is None:
        logger.warning("No descriptor registered for kind '%s'; creating a plain node", kind)
        return create_node(kind, label, position, node_id=node_id, attributes=attributes, **kwargs)

    merged = {**descriptor.default_attributes, **(attributes or {})}
    label = label or descriptor.display_name
    explicit_ports = "inputs" in kwargs or "outputs" in kwargs
    if descriptor.typed_ports and not explicit_ports:
        return create_typed_port_node(
            kind, label, position,
            input_types=descriptor.input_types,
            output_types=descriptor.output_types,
            node_id=node_id, attributes=merged, **kwargs,
        )
    kwargs.setdefault("inputs", descriptor.default_inputs)
    kwargs.setdefault("outputs", descriptor.default_outputs)
    return create_multi_port_node(
        kind, label, position, node_id=node_id, attributes=merged, **kwargs,
    )


def create_edge(
    source: str,
    target: str,
    edge_id: str | None = None,
    source_port: str | None = None,
    target_port: str | None = None,
    **options: Any,
) -> Edge:
    return Edge(
        id=edge_id or f"e{source}-{target}",
        source_node=source,
        target_node=target,
        source_port=source_port,
        target_port=target_port,
        **options,
    )


def create_edge_with_uuid(source: str, target: str, **options: Any) -> Edge:
    return create_edge(source, target, str(uuid.uuid4()), **options)


def create_data_flow_edge(
    source: str, target: str, edge_id: str | None = None, **options: Any,
) -> Edge:
    return create_edge(source, target, edge_id, label="data flow", animated=True, **options)

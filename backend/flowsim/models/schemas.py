"""Pydantic schemas for snapshots and API request/response models."""
from typing import Any

from pydantic import BaseModel, Field

from ..nodes.base import NodeStatus, PortType


class PortSchema(BaseModel):
    id: str
    label: str = ""
    type: PortType | None = None

    model_config = {"frozen": True}


class NodeSchema(BaseModel):
    id: str
    kind: str
    label: str = ""
    status: NodeStatus = NodeStatus.IDLE
    duration_ms: int | None = Field(default=None, ge=0)
    inputs: tuple[PortSchema, ...] = ()
    outputs: tuple[PortSchema, ...] = ()
    position: dict[str, float] = {}
    attributes: dict[str, Any] = {}

    model_config = {"frozen": True}


class EdgeSchema(BaseModel):
    id: str
    source_node: str
    target_node: str
    source_port: str | None = None
    target_port: str | None = None
    label: str = ""
    animated: bool = False

    model_config = {"frozen": True}


class GraphSnapshot(BaseModel):
    """The full node and edge collections, serialized verbatim."""
    nodes: tuple[NodeSchema, ...] = ()
    edges: tuple[EdgeSchema, ...] = ()

    model_config = {"frozen": True}


class SavedGraph(BaseModel):
    id: str = ""
    name: str
    description: str = ""
    graph: GraphSnapshot


class ConnectionRequest(BaseModel):
    source: str
    target: str
    source_port: str | None = None
    target_port: str | None = None
    label: str = ""
    animated: bool = True


class ValidationResponse(BaseModel):
    accepted: bool
    reason: str | None = None
    message: str | None = None
    source_type: PortType | None = None
    target_type: PortType | None = None


class ConnectionResponse(ValidationResponse):
    edge: EdgeSchema | None = None


class NodeCreateRequest(BaseModel):
    kind: str
    label: str = ""
    id: str | None = None
    position: dict[str, float] = {}
    duration_ms: int | None = Field(default=None, ge=0)
    inputs: list[PortSchema] | None = None
    outputs: list[PortSchema] | None = None
    attributes: dict[str, Any] = {}


class RunResponse(BaseModel):
    status: str

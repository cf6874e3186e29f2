"""REST API routes."""
import asyncio
import json
import logging
import uuid
from pathlib import Path

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..engine.executor import WorkflowBusyError
from ..engine.graph import Port
from ..engine.session import get_workspace
from ..engine.snapshot import export_graph
from ..engine.validator import ConnectionCandidate
from ..models.schemas import (
    ConnectionRequest, ConnectionResponse, EdgeSchema, GraphSnapshot,
    NodeCreateRequest, NodeSchema, RunResponse, SavedGraph, ValidationResponse,
)
from ..nodes.factory import create_node_by_kind
from ..nodes.registry import KindRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Keeps the background run task referenced until it finishes
_run_tasks: set[asyncio.Task] = set()


def _candidate(request: ConnectionRequest) -> ConnectionCandidate:
    return ConnectionCandidate(
        source=request.source, target=request.target,
        source_port=request.source_port, target_port=request.target_port,
    )


@router.get("/kinds")
async def list_kinds():
    """Return all registered node kinds for the editor palette."""
    return [d.to_dict() for d in KindRegistry.all_descriptors().values()]


@router.get("/workflow", response_model=GraphSnapshot)
async def export_workflow():
    return get_workspace().engine.export_workflow()


@router.put("/workflow", response_model=GraphSnapshot)
async def import_workflow(snapshot: GraphSnapshot):
    workspace = get_workspace()
    try:
        workspace.engine.import_workflow(snapshot)
    except WorkflowBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return workspace.engine.export_workflow()


@router.post("/workflow/nodes", response_model=NodeSchema)
async def add_node(request: NodeCreateRequest):
    workspace = get_workspace()
    if request.id and request.id in workspace.graph.nodes:
        raise HTTPException(status_code=409, detail=f"Node '{request.id}' already exists")

    kwargs = {}
    if request.inputs is not None:
        kwargs["inputs"] = [Port(id=p.id, label=p.label, type=p.type) for p in request.inputs]
    if request.outputs is not None:
        kwargs["outputs"] = [Port(id=p.id, label=p.label, type=p.type) for p in request.outputs]
    node = create_node_by_kind(
        request.kind, request.label, request.position,
        node_id=request.id, attributes=request.attributes,
        duration_ms=request.duration_ms, **kwargs,
    )
    try:
        workspace.add_node(node)
    except WorkflowBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))

    snapshot = export_graph(workspace.graph)
    return next(n for n in snapshot.nodes if n.id == node.id)


@router.delete("/workflow/nodes/{node_id}")
async def remove_node(node_id: str):
    workspace = get_workspace()
    if node_id not in workspace.graph.nodes:
        raise HTTPException(status_code=404, detail="Node not found")
    try:
        workspace.remove_node(node_id)
    except WorkflowBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"status": "deleted"}


@router.post("/validate", response_model=ValidationResponse)
async def validate_connection(request: ConnectionRequest):
    result = get_workspace().validate(_candidate(request))
    return ValidationResponse(**result.to_dict())


@router.post("/connections", response_model=ConnectionResponse)
async def connect(request: ConnectionRequest):
    """Validate a candidate edge and insert it when accepted."""
    result, edge = get_workspace().connect(
        _candidate(request), label=request.label, animated=request.animated,
    )
    edge_schema = None
    if edge is not None:
        edge_schema = EdgeSchema(
            id=edge.id, source_node=edge.source_node, target_node=edge.target_node,
            source_port=edge.source_port, target_port=edge.target_port,
            label=edge.label, animated=edge.animated,
        )
    return ConnectionResponse(**result.to_dict(), edge=edge_schema)


@router.post("/run", response_model=RunResponse)
async def run_workflow():
    """Start a run in the background. Progress is delivered via WebSocket."""
    engine = get_workspace().engine
    if engine.is_running:
        return RunResponse(status="busy")

    async def _run():
        try:
            await engine.run_workflow()
        except Exception as e:
            logger.exception("Workflow run failed")
            if engine.listener:
                engine.listener({"type": "workflow_error", "error": str(e)})

    task = asyncio.create_task(_run())
    _run_tasks.add(task)
    task.add_done_callback(_run_tasks.discard)
    return RunResponse(status="started")


@router.post("/reset")
async def reset_nodes():
    try:
        get_workspace().reset()
    except WorkflowBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"status": "reset"}


@router.get("/report")
async def get_report():
    report = get_workspace().engine.last_report
    if report is None:
        raise HTTPException(status_code=404, detail="No run has finished yet")
    return report.to_dict()


def _graph_path(graph_id: str) -> Path:
    """Map a saved-graph id to its file, refusing anything but a plain name."""
    if Path(graph_id).name != graph_id or graph_id.startswith("."):
        raise HTTPException(status_code=400, detail="Invalid graph id")
    return settings.graphs_dir / f"{graph_id}.json"


@router.post("/graphs")
async def save_graph(graph: SavedGraph):
    """Save a named workflow snapshot to disk."""
    if not graph.id:
        graph.id = str(uuid.uuid4())
    path = _graph_path(graph.id)
    path.write_text(graph.model_dump_json(indent=2))
    return {"id": graph.id}


@router.get("/graphs")
async def list_graphs():
    result = {}
    for path in settings.graphs_dir.glob("*.json"):
        try:
            data = json.loads(path.read_text())
            gid = data["id"]
        except (OSError, ValueError, KeyError):
            logger.warning("Skipping unreadable saved graph %s", path.name)
            continue
        result[gid] = {"id": gid, "name": data.get("name", ""), "description": data.get("description", "")}
    return result


@router.get("/graphs/{graph_id}")
async def get_graph(graph_id: str):
    path = _graph_path(graph_id)
    if not path.exists():
        raise HTTPException(status_code=404, detail="Graph not found")
    return json.loads(path.read_text())


@router.delete("/graphs/{graph_id}")
async def delete_graph(graph_id: str):
    path = _graph_path(graph_id)
    if not path.exists():
        raise HTTPException(status_code=404, detail="Graph not found")
    path.unlink()
    return {"status": "deleted"}

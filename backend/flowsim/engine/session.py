"""Workspace: the editor's graph together with its engine and validator."""
import logging
import uuid

from .executor import EventCallback, WorkflowBusyError, WorkflowEngine
from .graph import Edge, Graph, NodeInstance
from .validator import ConnectionCandidate, ConnectionValidator, ValidationResult

logger = logging.getLogger(__name__)


class Workspace:
    """One editing surface. Edges enter the graph only through ``connect``."""

    def __init__(
        self,
        graph: Graph | None = None,
        listener: EventCallback | None = None,
        time_scale: float | None = None,
        dismiss_after_ms: int | None = None,
    ):
        self.listener = listener
        self.engine = WorkflowEngine(graph, listener=listener, time_scale=time_scale)
        self.validator = ConnectionValidator(
            show_message=self._show_message,
            hide_message=self._hide_message,
            dismiss_after_ms=dismiss_after_ms,
        )

    @property
    def graph(self) -> Graph:
        return self.engine.graph

    def _show_message(self, message: str) -> None:
        if self.listener:
            self.listener({"type": "validation_message", "message": message})

    def _hide_message(self) -> None:
        if self.listener:
            self.listener({"type": "validation_cleared"})

    def _ensure_idle(self) -> None:
        if self.engine.is_running:
            raise WorkflowBusyError("A run is in progress")

    def validate(self, candidate: ConnectionCandidate) -> ValidationResult:
        return self.validator.validate(candidate, self.graph.nodes)

    def connect(
        self,
        candidate: ConnectionCandidate,
        label: str = "",
        animated: bool = True,
    ) -> tuple[ValidationResult, Edge | None]:
        result = self.validate(candidate)
        if not result.accepted:
            return result, None
        edge = Edge(
            id=str(uuid.uuid4()),
            source_node=candidate.source,
            target_node=candidate.target,
            source_port=candidate.source_port,
            target_port=candidate.target_port,
            label=label,
            animated=animated,
        )
        self.graph.add_edge(edge)
        logger.debug("Edge %s added: %s -> %s", edge.id, edge.source_node, edge.target_node)
        return result, edge

    def add_node(self, node: NodeInstance) -> None:
        self._ensure_idle()
        self.graph.add_node(node)

    def remove_node(self, node_id: str) -> NodeInstance:
        self._ensure_idle()
        return self.graph.remove_node(node_id)

    def reset(self) -> None:
        self._ensure_idle()
        self.engine.reset_all_nodes()

    def close(self) -> None:
        """Tear down: cancel the pending validation-message dismissal."""
        self.validator.clear_validation()


_workspace: Workspace | None = None


def create_workspace(**kwargs) -> Workspace:
    global _workspace
    if _workspace is not None:
        _workspace.close()
    _workspace = Workspace(**kwargs)
    return _workspace


def get_workspace() -> Workspace:
    if _workspace is None:
        return create_workspace()
    return _workspace


def remove_workspace() -> None:
    global _workspace
    if _workspace is not None:
        _workspace.close()
    _workspace = None

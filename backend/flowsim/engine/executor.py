"""Execution engine: dependency-ordered simulated run of a workflow graph."""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable

from ..config import settings
from ..models.schemas import GraphSnapshot
from ..nodes.base import NodeStatus
from ..nodes.registry import KindRegistry
from .graph import Graph
from .snapshot import export_graph, import_graph

logger = logging.getLogger(__name__)

EventCallback = Callable[[dict[str, Any]], None]


class WorkflowBusyError(RuntimeError):
    """Raised when an operation needs the engine idle but a run is in flight."""


@dataclass
class RunReport:
    run_id: str
    completed: list[str] = field(default_factory=list)  # completion order
    pending: list[str] = field(default_factory=list)    # never reached Completed
    elapsed_ms: int = 0

    @property
    def is_complete(self) -> bool:
        return not self.pending

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "completed": list(self.completed),
            "pending": list(self.pending),
            "elapsed_ms": self.elapsed_ms,
            "is_complete": self.is_complete,
        }


class WorkflowEngine:
    """Drives every node reachable from an entry node from Idle to Completed.

    At most one run is in flight. The guard is a plain flag, which is
    sufficient on a single event loop: it is set before the first await.
    """

    def __init__(
        self,
        graph: Graph | None = None,
        listener: EventCallback | None = None,
        time_scale: float | None = None,
    ):
        self.graph = graph if graph is not None else Graph()
        self.listener = listener
        self.time_scale = settings.time_scale if time_scale is None else time_scale
        self._completed: set[str] = set()
        self._running = False
        self.last_report: RunReport | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def completed(self) -> frozenset[str]:
        return frozenset(self._completed)

    def _emit(self, event: dict[str, Any]) -> None:
        if self.listener:
            self.listener(event)

    # -- status ----------------------------------------------------------

    def update_node_status(self, node_id: str, status: NodeStatus) -> None:
        node = self.graph.nodes.get(node_id)
        if node is None:
            return
        node.status = status
        self._emit({"type": "node_status", "node_id": node_id, "status": status.value})

    def reset_all_nodes(self) -> None:
        self._completed.clear()
        for node_id, node in self.graph.nodes.items():
            if node.status != NodeStatus.IDLE:
                self.update_node_status(node_id, NodeStatus.IDLE)

    # -- scheduling ------------------------------------------------------

    def duration_of(self, node_id: str) -> int:
        node = self.graph.nodes[node_id]
        if node.duration_ms is not None:
            return node.duration_ms
        return KindRegistry.default_duration(node.kind)

    def is_ready(self, node_id: str) -> bool:
        """AND-join: every direct predecessor has completed."""
        for pred_id in self.graph.get_predecessors(node_id):
            pred = self.graph.nodes.get(pred_id)
            if pred is None or pred.status != NodeStatus.COMPLETED:
                return False
        return True

    def find_start_nodes(self) -> list[str]:
        return [
            nid for nid, node in self.graph.nodes.items()
            if KindRegistry.is_entry_kind(node.kind)
        ]

    def _reachable_from(self, seeds: list[str]) -> set[str]:
        seen = set(seeds)
        stack = list(seeds)
        while stack:
            for succ in self.graph.get_successors(stack.pop()):
                if succ not in seen and succ in self.graph.nodes:
                    seen.add(succ)
                    stack.append(succ)
        return seen

    async def execute_node(self, node_id: str) -> None:
        self.update_node_status(node_id, NodeStatus.RUNNING)
        await asyncio.sleep(self.duration_of(node_id) / 1000 * self.time_scale)
        self.update_node_status(node_id, NodeStatus.COMPLETED)
        self._completed.add(node_id)

    async def _traverse(self, seed: str, order: list[str]) -> None:
        """Depth-first from one seed; successors in edge-insertion order."""
        stack = [seed]
        while stack:
            node_id = stack.pop()
            if node_id in self._completed or node_id not in self.graph.nodes:
                continue
            if not self.is_ready(node_id):
                continue  # another branch will bring it in
            await self.execute_node(node_id)
            order.append(node_id)
            stack.extend(reversed(self.graph.get_successors(node_id)))

    async def _converge(self, candidates: set[str], order: list[str]) -> None:
        """Sweep until a full pass makes no progress (terminates on cycles)."""
        progressed = True
        while progressed:
            progressed = False
            for node_id in list(self.graph.nodes):
                if node_id not in candidates or node_id in self._completed:
                    continue
                if self.is_ready(node_id):
                    await self.execute_node(node_id)
                    order.append(node_id)
                    progressed = True

    async def run_workflow(self) -> RunReport | None:
        """Run the whole graph. Returns None if a run is already in flight."""
        if self._running:
            logger.debug("Run requested while another is in flight; ignored")
            return None
        self._running = True
        report = RunReport(run_id=str(uuid.uuid4()))
        started = time.monotonic()
        try:
            self._emit({"type": "workflow_start", "run_id": report.run_id})
            self.reset_all_nodes()

            seeds = self.find_start_nodes()
            logger.info("Run %s started with %d entry node(s)", report.run_id, len(seeds))
            for seed in seeds:
                await self._traverse(seed, report.completed)
            await self._converge(self._reachable_from(seeds), report.completed)

            report.pending = [
                nid for nid in self.graph.nodes if nid not in self._completed
            ]
            report.elapsed_ms = int((time.monotonic() - started) * 1000)
        finally:
            self._running = False

        if report.pending:
            logger.warning(
                "Run %s left %d node(s) idle (unreachable or cyclic): %s",
                report.run_id, len(report.pending), ", ".join(report.pending),
            )
        else:
            logger.info("Run %s completed %d node(s)", report.run_id, len(report.completed))
        self.last_report = report
        self._emit({
            "type": "workflow_complete",
            "run_id": report.run_id,
            "report": report.to_dict(),
        })
        return report

    # -- snapshot --------------------------------------------------------

    def export_workflow(self) -> GraphSnapshot:
        return export_graph(self.graph)

    def import_workflow(self, snapshot: GraphSnapshot | dict) -> None:
        if self._running:
            raise WorkflowBusyError("Cannot import a workflow while a run is in progress")
        self.graph = import_graph(snapshot)
        self._completed.clear()

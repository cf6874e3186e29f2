"""Tests for the execution engine: ordering, readiness, reset, re-entrancy, cycles."""
import asyncio

import pytest

from helpers import make_edge, make_node
from flowsim.engine.executor import RunReport, WorkflowBusyError, WorkflowEngine
from flowsim.engine.graph import Graph
from flowsim.nodes.base import KindDescriptor, NodeKind, NodeStatus
from flowsim.nodes.demo import demo_graph
from flowsim.nodes.registry import KindRegistry


class EventLog:
    def __init__(self):
        self.events: list[dict] = []

    def __call__(self, event):
        self.events.append(event)

    def transitions(self):
        return [
            (e["node_id"], e["status"]) for e in self.events if e["type"] == "node_status"
        ]

    def index(self, node_id, status):
        return self.transitions().index((node_id, status))


def run(engine):
    return asyncio.run(engine.run_workflow())


class TestDiamond:
    def test_all_nodes_completed(self, diamond_graph):
        report = run(WorkflowEngine(diamond_graph, time_scale=0))
        assert report.is_complete
        assert set(report.completed) == {"a", "b", "c", "d"}
        assert all(n.status == NodeStatus.COMPLETED for n in diamond_graph.nodes.values())

    def test_join_waits_for_both_branches(self, diamond_graph):
        log = EventLog()
        run(WorkflowEngine(diamond_graph, listener=log, time_scale=0))
        assert log.transitions()[1] == ("a", "completed")
        d_running = log.index("d", "running")
        assert log.index("b", "completed") < d_running
        assert log.index("c", "completed") < d_running
        assert log.transitions()[-1] == ("d", "completed")

    def test_every_edge_ordered(self, diamond_graph):
        log = EventLog()
        run(WorkflowEngine(diamond_graph, listener=log, time_scale=0))
        for edge in diamond_graph.edges:
            assert log.index(edge.source_node, "completed") < log.index(edge.target_node, "running")

    def test_each_node_runs_once(self, diamond_graph):
        log = EventLog()
        run(WorkflowEngine(diamond_graph, listener=log, time_scale=0))
        running = [nid for nid, status in log.transitions() if status == "running"]
        assert sorted(running) == ["a", "b", "c", "d"]


class TestOrdering:
    def test_successors_in_edge_insertion_order(self):
        nodes = {
            "src": make_node("src", NodeKind.INPUT, inputs=()),
            "x": make_node("x"),
            "y": make_node("y"),
        }
        graph = Graph(nodes=nodes, edges=[make_edge("src", "y"), make_edge("src", "x")])
        report = run(WorkflowEngine(graph, time_scale=0))
        assert report.completed == ["src", "y", "x"]

    def test_join_across_independent_seeds(self):
        """j needs both seeds; the second seed's traversal brings it in."""
        nodes = {
            "s1": make_node("s1", NodeKind.INPUT, inputs=()),
            "s2": make_node("s2", NodeKind.INPUT, inputs=()),
            "j": make_node("j"),
            "out": make_node("out", NodeKind.OUTPUT, outputs=()),
        }
        edges = [make_edge("s1", "j"), make_edge("s2", "j"), make_edge("j", "out")]
        graph = Graph(nodes=nodes, edges=edges)
        report = run(WorkflowEngine(graph, time_scale=0))
        assert report.is_complete
        assert report.completed.index("j") > report.completed.index("s2")

    def test_join_retried_after_deep_predecessor(self):
        """``late`` is skipped on its first visit and picked up once p2 completes."""
        nodes = {
            "s": make_node("s", NodeKind.INPUT, inputs=()),
            "p1": make_node("p1"),
            "p2": make_node("p2"),
            "late": make_node("late"),
        }
        # s -> late is attempted first, before p2 exists in the completed set
        edges = [
            make_edge("s", "late"),
            make_edge("s", "p1"),
            make_edge("p1", "p2"),
            make_edge("p2", "late"),
        ]
        report = run(WorkflowEngine(Graph(nodes=nodes, edges=edges), time_scale=0))
        assert report.is_complete
        assert report.completed[-1] == "late"

    def test_input_with_predecessor_waits(self):
        nodes = {
            "s": make_node("s", NodeKind.INPUT, inputs=()),
            "p": make_node("p"),
            "s2": make_node("s2", NodeKind.INPUT),
        }
        edges = [make_edge("s", "p"), make_edge("p", "s2")]
        log = EventLog()
        run(WorkflowEngine(Graph(nodes=nodes, edges=edges), listener=log, time_scale=0))
        assert log.index("p", "completed") < log.index("s2", "running")


class TestUnreachableAndCycles:
    def test_cycle_stays_idle_and_terminates(self):
        nodes = {
            "s": make_node("s", NodeKind.INPUT, inputs=()),
            "x": make_node("x"),
            "y": make_node("y"),
        }
        edges = [make_edge("x", "y"), make_edge("y", "x")]
        report = run(WorkflowEngine(Graph(nodes=nodes, edges=edges), time_scale=0))
        assert report.completed == ["s"]
        assert sorted(report.pending) == ["x", "y"]
        assert not report.is_complete
        assert nodes["x"].status == NodeStatus.IDLE
        assert nodes["y"].status == NodeStatus.IDLE

    def test_cycle_fed_by_source_terminates(self):
        nodes = {
            "s": make_node("s", NodeKind.INPUT, inputs=()),
            "x": make_node("x"),
            "y": make_node("y"),
        }
        edges = [make_edge("s", "x"), make_edge("x", "y"), make_edge("y", "x")]
        report = run(WorkflowEngine(Graph(nodes=nodes, edges=edges), time_scale=0))
        assert sorted(report.pending) == ["x", "y"]

    def test_isolated_node_stays_idle(self):
        nodes = {
            "s": make_node("s", NodeKind.INPUT, inputs=()),
            "lonely": make_node("lonely"),
        }
        report = run(WorkflowEngine(Graph(nodes=nodes, edges=[]), time_scale=0))
        assert report.pending == ["lonely"]
        assert nodes["lonely"].status == NodeStatus.IDLE

    def test_no_entry_nodes(self):
        graph = Graph(nodes={"p": make_node("p")}, edges=[])
        report = run(WorkflowEngine(graph, time_scale=0))
        assert report.completed == []
        assert report.pending == ["p"]

    def test_empty_graph(self):
        report = run(WorkflowEngine(Graph(), time_scale=0))
        assert report.is_complete
        assert report.completed == []

    def test_dangling_predecessor_never_ready(self):
        nodes = {
            "s": make_node("s", NodeKind.INPUT, inputs=()),
            "p": make_node("p"),
        }
        edges = [make_edge("s", "p"), make_edge("ghost", "p")]
        report = run(WorkflowEngine(Graph(nodes=nodes, edges=edges), time_scale=0))
        assert report.pending == ["p"]


class TestReset:
    def test_reset_all_idle(self, diamond_graph):
        engine = WorkflowEngine(diamond_graph, time_scale=0)
        run(engine)
        engine.reset_all_nodes()
        assert all(n.status == NodeStatus.IDLE for n in diamond_graph.nodes.values())
        assert engine.completed == frozenset()

    def test_reset_is_idempotent(self, diamond_graph):
        log = EventLog()
        engine = WorkflowEngine(diamond_graph, listener=log, time_scale=0)
        run(engine)
        engine.reset_all_nodes()
        after_first = [(nid, n.status) for nid, n in diamond_graph.nodes.items()]
        events_after_first = len(log.events)
        engine.reset_all_nodes()
        assert [(nid, n.status) for nid, n in diamond_graph.nodes.items()] == after_first
        assert engine.completed == frozenset()
        assert len(log.events) == events_after_first  # nothing left to transition

    def test_run_starts_from_reset(self, diamond_graph):
        engine = WorkflowEngine(diamond_graph, time_scale=0)
        run(engine)
        second = run(engine)
        assert second.is_complete
        assert len(second.completed) == 4


class TestReentrancy:
    def test_second_run_ignored_while_active(self, diamond_graph):
        async def scenario():
            engine = WorkflowEngine(diamond_graph, time_scale=0.001)
            first = asyncio.create_task(engine.run_workflow())
            await asyncio.sleep(0)  # let the first run start
            assert engine.is_running
            statuses = {nid: n.status for nid, n in diamond_graph.nodes.items()}
            second = await engine.run_workflow()
            assert {nid: n.status for nid, n in diamond_graph.nodes.items()} == statuses
            return second, await first

        second, first = asyncio.run(scenario())
        assert second is None
        assert isinstance(first, RunReport)
        assert first.is_complete

    def test_import_rejected_while_running(self, diamond_graph):
        async def scenario():
            engine = WorkflowEngine(diamond_graph, time_scale=0.001)
            task = asyncio.create_task(engine.run_workflow())
            await asyncio.sleep(0)
            with pytest.raises(WorkflowBusyError):
                engine.import_workflow({"nodes": [], "edges": []})
            await task

        asyncio.run(scenario())

    def test_flag_cleared_after_run(self, diamond_graph):
        engine = WorkflowEngine(diamond_graph, time_scale=0)
        run(engine)
        assert not engine.is_running


class TestDurations:
    def test_explicit_duration(self, diamond_graph):
        engine = WorkflowEngine(diamond_graph)
        diamond_graph.nodes["b"].duration_ms = 42
        assert engine.duration_of("b") == 42

    @pytest.mark.parametrize("kind, expected", [
        ("input", 1500), ("process", 2500), ("transform", 3000),
        ("filter", 2000), ("custom", 2800), ("output", 1000),
        ("timer", 1500), ("never-registered", 2000),
    ])
    def test_kind_defaults(self, kind, expected):
        graph = Graph(nodes={"n": make_node("n", kind, duration_ms=None)})
        assert WorkflowEngine(graph).duration_of("n") == expected

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            make_node("n", duration_ms=-1)


class TestEvents:
    def test_run_lifecycle_events(self, diamond_graph):
        log = EventLog()
        report = run(WorkflowEngine(diamond_graph, listener=log, time_scale=0))
        assert log.events[0] == {"type": "workflow_start", "run_id": report.run_id}
        assert log.events[-1]["type"] == "workflow_complete"
        assert log.events[-1]["report"]["completed"] == report.completed

    def test_update_unknown_node_ignored(self, diamond_graph):
        log = EventLog()
        engine = WorkflowEngine(diamond_graph, listener=log)
        engine.update_node_status("ghost", NodeStatus.RUNNING)
        assert log.events == []

    def test_last_report_kept(self, diamond_graph):
        engine = WorkflowEngine(diamond_graph, time_scale=0)
        report = run(engine)
        assert engine.last_report is report


class TestEntryKinds:
    def test_extra_kind_based_on_input_seeds_run(self):
        KindRegistry.register(KindDescriptor(
            key="sensor", display_name="Sensor", base_kind=NodeKind.INPUT,
            default_inputs=0,
        ))
        nodes = {
            "sensor": make_node("sensor", "sensor", inputs=()),
            "p": make_node("p"),
        }
        graph = Graph(nodes=nodes, edges=[make_edge("sensor", "p")])
        report = run(WorkflowEngine(graph, time_scale=0))
        assert report.completed == ["sensor", "p"]

    def test_demo_graph_runs_to_completion(self):
        graph = demo_graph()
        report = run(WorkflowEngine(graph, time_scale=0))
        assert report.is_complete
        assert report.completed[0] == "input-1"
        assert report.completed[-1] == "output-1"

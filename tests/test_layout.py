"""Tests for the layout engine."""

import math

import pytest
from graph_builders import chain_nodes, family_graph, graph_from, node, star_nodes

from lifemap_graph.layout.options import LayoutOptions
from lifemap_graph.layout.simulation import (
    LayoutEngine,
    calculate_layout,
    calculate_layout_streaming,
)
from lifemap_graph.parser.model import Edge, Point
from lifemap_graph.validate import check_overlaps


def _family():
    graph = family_graph()
    return list(graph.nodes.values()), graph.edges


def test_empty_input_returns_empty_result():
    result = calculate_layout([], [])
    assert result.nodes == []
    assert result.edges == []
    assert result.ticks == 0


def test_every_node_gets_a_finite_position():
    nodes, edges = _family()
    result = calculate_layout(nodes, edges, LayoutOptions(seed=1))
    assert [n.id for n in result.nodes] == [n.id for n in nodes]
    for n in result.nodes:
        assert n.position is not None
        assert math.isfinite(n.position.x) and math.isfinite(n.position.y)


def test_no_overlap_after_convergence():
    """Padded boxes of all nodes are separated once the run ends."""
    nodes, edges = _family()
    opts = LayoutOptions(seed=3, collision_padding=15)
    result = calculate_layout(nodes, edges, opts)
    assert check_overlaps(result.nodes, padding=15) == []


def test_no_overlap_when_seeded_on_one_spot():
    nodes = [node("document", f"d{i}", 3, ("root",), position=(0.0, 0.0)) for i in range(8)]
    nodes.append(node("root", "root", 0, position=(0.0, 0.0)))
    result = calculate_layout(nodes, [], LayoutOptions(seed=5))
    assert check_overlaps(result.nodes) == []


def test_no_overlap_on_large_star_graph():
    """Crowded level bands on a 150-leaf star still end without overlaps."""
    graph = graph_from(star_nodes(150))
    nodes = list(graph.nodes.values())
    result = calculate_layout(nodes, graph.edges, LayoutOptions(seed=1))
    assert len(result.nodes) == 151
    assert check_overlaps(result.nodes, padding=20) == []
    assert not any("overlap" in w for w in result.warnings)


def test_no_overlap_on_large_star_graph_seeded_on_one_spot():
    graph = graph_from(star_nodes(160, position=(0.0, 0.0)))
    nodes = list(graph.nodes.values())
    opts = LayoutOptions(seed=1, max_iterations=80)
    result = calculate_layout(nodes, graph.edges, opts)
    assert check_overlaps(result.nodes, padding=20) == []
    for n in result.nodes:
        assert math.isfinite(n.position.x) and math.isfinite(n.position.y)


def test_levels_are_layered_top_to_bottom():
    """Parents end up above children along a chain."""
    result = calculate_layout(chain_nodes(), [], LayoutOptions(seed=2))
    ys = {n.id: n.position.y for n in result.nodes}
    assert ys["root"] < ys["A"] < ys["B"] < ys["C"]


def test_inputs_are_not_mutated():
    nodes, edges = _family()
    calculate_layout(nodes, edges, LayoutOptions(seed=1))
    assert all(n.position is None for n in nodes)


def test_pinned_node_keeps_exact_position():
    nodes, edges = _family()
    nodes = [
        node("person", "alice", 1, ("family-root",), fixed=(123.5, -40.25))
        if n.id == "alice" else n
        for n in nodes
    ]
    for seed in (1, 2):
        result = calculate_layout(
            nodes, edges,
            LayoutOptions(seed=seed, node_repulsion_strength=-50000,
                          preserve_manual_positions=True),
        )
        alice = next(n for n in result.nodes if n.id == "alice")
        assert alice.position == Point(123.5, -40.25)


def test_pinned_node_is_an_obstacle():
    """Free nodes are pushed off a pinned node rather than moving it."""
    nodes = [
        node("person", "pin", 1, ("root",), fixed=(600.0, 200.0)),
        node("person", "free", 1, ("root",), position=(600.0, 200.0)),
    ]
    result = calculate_layout(nodes, [], LayoutOptions(seed=1))
    by_id = {n.id: n for n in result.nodes}
    assert by_id["pin"].position == Point(600.0, 200.0)
    assert check_overlaps(result.nodes) == []


def test_manual_positions_ignored_without_preserve():
    nodes = [
        node("person", "alice", 1, ("root",), fixed=(5000.0, 5000.0)),
        node("root", "root", 0),
    ]
    result = calculate_layout(
        nodes, [], LayoutOptions(seed=1, preserve_manual_positions=False)
    )
    alice = next(n for n in result.nodes if n.id == "alice")
    assert alice.position != Point(5000.0, 5000.0)


def test_edges_to_missing_nodes_are_dropped_with_warning():
    nodes = chain_nodes()
    edges = [Edge("ok", "root", "A"), Edge("bad", "A", "ghost")]
    result = calculate_layout(nodes, edges, LayoutOptions(seed=1, max_iterations=5))
    assert [e.id for e in result.edges] == ["ok"]
    assert any("ghost" in w for w in result.warnings)


def test_iteration_limit_respected():
    result = calculate_layout(chain_nodes(), [], LayoutOptions(seed=1, max_iterations=10))
    assert result.ticks == 10
    assert not result.converged


def test_stops_when_alpha_below_threshold():
    # alpha halves every tick: 0.5 ** 10 < 0.001
    result = calculate_layout(chain_nodes(), [], LayoutOptions(seed=1, alpha_decay=0.5))
    assert result.ticks == 10
    assert result.converged


def test_zero_iterations_still_returns_positions():
    result = calculate_layout(chain_nodes(), [], LayoutOptions(seed=1, max_iterations=-3))
    assert result.ticks == 0
    assert all(n.position is not None for n in result.nodes)


def test_streaming_callbacks():
    frames = []
    ended = []
    result = calculate_layout_streaming(
        chain_nodes(), [],
        LayoutOptions(seed=1, max_iterations=20),
        on_tick=frames.append,
        on_end=ended.append,
    )
    assert [f.tick for f in frames] == list(range(1, 21))
    assert all(set(f.positions) == {"root", "A", "B", "C"} for f in frames)
    assert ended == [result]


def test_run_yields_final_done_frame():
    engine = LayoutEngine(LayoutOptions(seed=1, max_iterations=3)).prepare(chain_nodes(), [])
    frames = list(engine.run())
    assert [f.done for f in frames] == [False, False, False, True]
    assert engine.finished


def test_run_is_not_restartable():
    engine = LayoutEngine(LayoutOptions(seed=1, max_iterations=3)).prepare(chain_nodes(), [])
    list(engine.run())
    with pytest.raises(RuntimeError):
        engine.run()


def test_stop_before_first_tick():
    engine = LayoutEngine(LayoutOptions(seed=1)).prepare(chain_nodes(), [])
    engine.stop()
    assert list(engine.run()) == []
    result = engine.result()
    assert result.cancelled
    assert result.ticks == 0


def test_stop_mid_run():
    engine = LayoutEngine(LayoutOptions(seed=1)).prepare(chain_nodes(), [])
    frames = engine.run()
    next(frames)
    next(frames)
    engine.stop()
    assert list(frames) == []
    result = engine.result()
    assert result.cancelled
    assert result.ticks == 2


def test_coincident_nodes_separate_after_one_tick():
    """Two equal squares on the same spot split vertically in one tick."""
    nodes = [
        node("document", "a", 3, ("p",), position=(100.0, 100.0)),
        node("document", "b", 3, ("p",), position=(100.0, 100.0)),
    ]
    engine = LayoutEngine(LayoutOptions(seed=1)).prepare(nodes, [])
    engine.tick()
    a, b = engine.nodes
    assert a.x == b.x
    assert a.y < b.y


def test_non_finite_state_is_reseeded():
    engine = LayoutEngine(LayoutOptions(seed=1)).prepare(chain_nodes(), [])
    engine.nodes[0].vx = math.inf
    engine.tick()
    for sim in engine.nodes:
        assert math.isfinite(sim.x) and math.isfinite(sim.y)
    assert any("re-seeded" in w for w in engine.warnings)


def test_non_finite_input_position_is_seeded():
    nodes = [node("person", "a", 1, ("root",), position=(math.nan, 0.0))]
    result = calculate_layout(nodes, [], LayoutOptions(seed=1, max_iterations=1))
    assert math.isfinite(result.nodes[0].position.x)


def test_seed_makes_layout_reproducible():
    nodes, edges = _family()
    first = calculate_layout(nodes, edges, LayoutOptions(seed=11)).positions()
    second = calculate_layout(nodes, edges, LayoutOptions(seed=11)).positions()
    assert first == second

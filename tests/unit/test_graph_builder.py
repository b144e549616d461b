"""
Tests for GraphBuilder.

Level assignment, root detection and the non-raising handling of
dangling referrers, duplicates and referral cycles.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from referral_core.domain.models import MAX_PATH_HOPS
from referral_core.services.graph_builder import GraphBuilder, build_graph


class TestLevels:
    """Generation levels and indication counts."""

    def test_chain_levels(self, chain_records):
        """A -> B -> C gives levels 0, 1, 2."""
        graph = build_graph(chain_records)
        assert {n.id: n.level for n in graph} == {"A": 0, "B": 1, "C": 2}

    def test_chain_indication_counts(self, chain_records):
        graph = build_graph(chain_records)
        assert graph.nodes["A"].indication_count == 1
        assert graph.nodes["B"].indication_count == 1
        assert graph.nodes["C"].indication_count == 0

    def test_only_first_is_root(self, chain_records):
        graph = build_graph(chain_records)
        assert [n.id for n in graph if n.is_root] == ["A"]

    def test_roots_level_zero_children_deeper(self, sample_records):
        """Every root is level 0; every child is one deeper than its referrer."""
        graph = build_graph(sample_records)
        for node in graph:
            if node.is_root:
                assert node.level == 0
            else:
                assert node.level == graph.parent_of(node.id).level + 1

    def test_child_listed_before_parent(self, make_record):
        """Input order does not affect levels."""
        graph = build_graph([
            make_record("C", "B"),
            make_record("B", "A"),
            make_record("A"),
        ])
        assert {n.id: n.level for n in graph} == {"A": 0, "B": 1, "C": 2}

    def test_long_chain_no_recursion_limit(self, make_record):
        """A deep chain is walked without recursion."""
        records = [make_record("n0")]
        records += [make_record(f"n{i}", f"n{i - 1}") for i in range(1, 5000)]
        graph = build_graph(records)
        assert graph.nodes["n4999"].level == 4999


class TestDegradedInput:
    """Inputs that are tolerated instead of rejected."""

    def test_empty_input(self):
        graph = GraphBuilder().build([])
        assert graph.is_empty
        assert graph.max_level == 0
        assert graph.directed_edges() == []

    def test_dangling_referrer_becomes_root(self, make_record):
        graph = build_graph([make_record("X", "missing")])
        node = graph.nodes["X"]
        assert node.is_root
        assert node.level == 0
        assert node.neighbors == []

    def test_self_referral_becomes_root(self, make_record):
        graph = build_graph([make_record("X", "X")])
        assert graph.nodes["X"].is_root
        assert graph.nodes["X"].indication_count == 0

    def test_duplicate_ids_last_wins(self, make_record):
        graph = build_graph([
            make_record("A", ltv=1.0, name="First"),
            make_record("B", "A"),
            make_record("A", ltv=2.0, name="Second"),
        ])
        assert len(graph) == 2
        assert graph.nodes["A"].ltv == 2.0
        assert graph.nodes["A"].name == "Second"
        assert list(graph.nodes) == ["A", "B"]

    def test_cycle_does_not_raise(self, make_record):
        """A <-> B cycle: anchored at level 0, hanging child still one deeper."""
        graph = build_graph([
            make_record("A", "B"),
            make_record("B", "A"),
            make_record("C", "B"),
        ])
        assert {n.id: n.level for n in graph} == {"A": 0, "B": 1, "C": 2}
        assert not any(n.is_root for n in graph)
        assert graph.directed_edges() == [("A", "B"), ("B", "C")]

    def test_cycle_next_to_tree(self, make_record):
        """A cycle does not disturb a separate well-formed tree."""
        graph = build_graph([
            make_record("R"),
            make_record("S", "R"),
            make_record("X", "Y"),
            make_record("Y", "X"),
        ])
        assert graph.nodes["R"].level == 0
        assert graph.nodes["S"].level == 1
        assert sorted(graph.nodes[i].level for i in ("X", "Y")) == [0, 1]


class TestQueries:
    """Adjacency and navigation queries."""

    def test_neighbors_are_parent_and_children(self, sample_records):
        graph = build_graph(sample_records)
        assert graph.nodes["c1"].neighbors == ["r1", "g1"]
        assert graph.nodes["r1"].neighbors == ["c1", "c2", "c3"]

    def test_directed_edges_point_down(self, sample_records):
        graph = build_graph(sample_records)
        edges = graph.directed_edges()
        assert len(edges) == 5
        for parent_id, child_id in edges:
            assert graph.nodes[parent_id].level < graph.nodes[child_id].level

    def test_children_in_input_order(self, sample_records):
        graph = build_graph(sample_records)
        assert [n.id for n in graph.children_of("r1")] == ["c1", "c2", "c3"]
        assert graph.children_of("g1") == []

    def test_path_to_root(self, sample_records):
        graph = build_graph(sample_records)
        assert [n.id for n in graph.path_to_root("g1")] == ["g1", "c1", "r1"]

    def test_path_to_root_bounded_on_cycle(self, make_record):
        graph = build_graph([make_record("A", "B"), make_record("B", "A")])
        assert len(graph.path_to_root("A")) == MAX_PATH_HOPS + 1

    def test_levels_grouping(self, sample_records):
        graph = build_graph(sample_records)
        levels = graph.levels()
        assert list(levels) == [0, 1, 2]
        assert [n.id for n in levels[1]] == ["c1", "c2", "c3", "c4"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

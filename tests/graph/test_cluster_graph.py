"""Tests for NonNestedClusterGraph."""

import pytest

from clusterbench.exceptions import InvalidGraphError
from clusterbench.graph.models import NonNestedClusterGraph
from clusterbench.solution.nodes import Node


@pytest.fixture
def units():
    return [Node.class_(name) for name in "abcd"]


class TestConstruction:
    """Test building graphs and the endpoint invariant."""

    def test_from_pairs_groups_by_source(self, units):
        a, b, c, d = units
        graph = NonNestedClusterGraph.from_pairs(units, [(a, b), (c, d), (a, c)])
        assert graph.targets(a) == (b, c)
        assert graph.targets(c) == (d,)
        assert graph.targets(d) == ()

    def test_repeated_targets_collapse(self, units):
        a, b, c, _ = units
        graph = NonNestedClusterGraph.from_pairs(units, [(a, b), (a, c), (a, b)])
        assert graph.targets(a) == (b, c)
        assert graph.edge_count == 2

    def test_dangling_target_rejected(self, units):
        a, *_ = units
        outsider = Node.class_("x")
        with pytest.raises(InvalidGraphError) as exc_info:
            NonNestedClusterGraph.from_pairs(units, [(a, outsider)])
        assert exc_info.value.dangling == 1

    def test_dangling_source_rejected(self, units):
        outsider = Node.class_("x")
        with pytest.raises(InvalidGraphError):
            NonNestedClusterGraph(frozenset(units), {outsider: (units[0],)})

    def test_labels_must_refer_to_clusters(self, units):
        with pytest.raises(InvalidGraphError):
            NonNestedClusterGraph(frozenset(units), {}, {Node.class_("x"): "Core"})

    def test_clusters_without_edges_are_kept(self, units):
        a, b, *_ = units
        graph = NonNestedClusterGraph.from_pairs(units, [(a, b)])
        assert graph.clusters == frozenset(units)
        assert len(graph) == 4

    def test_edges_are_read_only(self, units):
        a, b, *_ = units
        graph = NonNestedClusterGraph.from_pairs(units, [(a, b)])
        with pytest.raises(TypeError):
            graph.edges[b] = (a,)

    def test_pairs_round_trip_order(self, units):
        a, b, c, d = units
        pairs = [(a, b), (a, d), (c, a)]
        graph = NonNestedClusterGraph.from_pairs(units, pairs)
        assert list(graph.pairs()) == pairs


class TestFromGraph:
    """Test re-wrapping graph subclasses."""

    def test_normalises_subclass(self, units):
        class AnnotatedGraph(NonNestedClusterGraph):
            pass

        a, b, *_ = units
        special = AnnotatedGraph(frozenset(units), {a: (b,)}, {a: "X", b: "Y"})
        plain = NonNestedClusterGraph.from_graph(special)
        assert type(plain) is NonNestedClusterGraph
        assert plain.clusters == special.clusters
        assert dict(plain.edges) == dict(special.edges)
        assert dict(plain.ground_truth) == {a: "X", b: "Y"}

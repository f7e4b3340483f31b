"""
Tests for the pairwise graph and the scene working graph.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

project_root = Path(__file__).parent.parent  # Go up from tests/ to project root
sys.path.insert(0, str(project_root))

from ProjectiveReconstruction.core.exceptions import GraphInvariantError
from ProjectiveReconstruction.core.structures import PairwiseImageGraph, SceneWorkingGraph

from helpers import build_graph, camera_for


def test_create_and_connect_views():
    graph = build_graph(["a", "b", "c"], [("a", "b", 10), ("b", "c", 5, False)])
    a, b, c = (graph.lookup_node(v) for v in "abc")

    assert [v.index for v in graph.nodes] == [0, 1, 2]
    assert len(graph.edges) == 2
    assert len(b.connections) == 2

    m = a.find_motion(b)
    assert m is b.find_motion(a)
    assert m.is_3d
    assert m.other(a.index) == b.index
    assert m.other(b.index) == a.index
    assert graph.other(a, m) is b
    assert m.is_connected(a.index) and not m.is_connected(c.index)
    assert a.find_motion(c) is None
    assert not c.connections[0].is_3d

    with pytest.raises(ValueError):
        m.other(c.index)


def test_neighbors_follow_connection_order():
    graph = build_graph(["a", "b", "c", "d"], [("a", "c", 1), ("a", "b", 1), ("d", "a", 1)])
    a = graph.lookup_node("a")
    assert [v.id for v in graph.neighbors(a)] == ["c", "b", "d"]
    assert a.neighbor_indices() == [2, 1, 3]


def test_invalid_graph_construction():
    graph = build_graph(["a", "b"], [("a", "b", 1)])

    with pytest.raises(ValueError):
        graph.create_node("a")
    with pytest.raises(ValueError):
        graph.connect("a", "b")
    with pytest.raises(ValueError):
        graph.connect("a", "a")
    with pytest.raises(KeyError):
        graph.connect("a", "missing")


def test_motion_inliers_are_reshaped():
    graph = PairwiseImageGraph()
    graph.create_node("a")
    graph.create_node("b")
    m = graph.connect("a", "b", inliers=[0, 3, 1, 4, 2, 5])

    assert m.inliers.shape == (3, 2)
    assert m.inliers[2].tolist() == [2, 5]
    assert "2 views" in graph.summary()
    assert graph.lookup_node("missing") is None


def test_working_graph_is_append_only():
    graph = build_graph(["a", "b"], [("a", "b", 1)])
    a = graph.lookup_node("a")
    working = SceneWorkingGraph()

    wview = working.add_view(a)
    assert working.lookup_view("a") is wview
    assert working.is_known(a)
    assert "a" in working and len(working) == 1

    with pytest.raises(GraphInvariantError):
        working.add_view(a)


def test_camera_matrix_is_set_once():
    graph = build_graph(["a"], [])
    a = graph.lookup_node("a")
    wview = SceneWorkingGraph().add_view(a)

    assert not wview.has_projective()
    wview.projective = camera_for(a)
    assert wview.projective.shape == (3, 4)

    with pytest.raises(GraphInvariantError):
        wview.projective = np.ones((3, 4))
    with pytest.raises(ValueError):
        wview.projective[0, 0] = 5.0

    np.testing.assert_array_equal(wview.projective, camera_for(a))


def test_camera_matrix_shape_is_checked():
    graph = build_graph(["a"], [])
    wview = SceneWorkingGraph().add_view(graph.lookup_node("a"))
    with pytest.raises(ValueError):
        wview.projective = np.eye(3)
    assert not wview.has_projective()


def test_view_reference_is_shared():
    graph = build_graph(["a", "b"], [("a", "b", 1)])
    working = SceneWorkingGraph()
    wa = working.add_view(graph.lookup_node("a"))
    wb = working.add_view(graph.lookup_node("b"))

    local = SceneWorkingGraph()
    local.add_view_reference(wb)
    local.add_view_reference(wa)

    assert local.lookup_view("a") is wa
    assert local.view_ids() == ["b", "a"]
    assert working.view_ids() == ["a", "b"]
    with pytest.raises(GraphInvariantError):
        local.add_view_reference(wa)

    assert len(working) == 2 and len(local) == 2

"""
End to end tests using the synthetic scene.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ProjectiveReconstruction.data.providers import MockProjectiveSolver, MockSceneProvider
from ProjectiveReconstruction.pipeline.projective import (
    ProjectiveReconstructionFromPairwiseGraph,
    ReconstructionStatus,
)
from run_projective_reconstruction import run_projective_reconstruction


@pytest.fixture(scope="module")
def provider():
    return MockSceneProvider(num_views=12, seed=3)


def test_scene_generation(provider):
    graph = provider.graph

    assert len(graph) == 12
    assert provider.get_view_ids() == [f"view_{i:04d}" for i in range(12)]
    for view_id in provider.get_view_ids():
        assert provider.camera_matrix(view_id).shape == (3, 4)

    # consecutive views are always connected
    for i in range(11):
        a = graph.lookup_node(f"view_{i:04d}")
        b = graph.lookup_node(f"view_{i + 1:04d}")
        assert a.find_motion(b) is not None


def test_motion_inliers_observe_the_same_tracks(provider):
    graph = provider.graph
    for m in graph.edges:
        src = graph.nodes[m.src].id
        dst = graph.nodes[m.dst].id
        assert m.count_f == len(m.inliers)
        assert 0 <= m.count_h < m.count_f
        np.testing.assert_array_equal(provider.tracks[src][m.inliers[:, 0]],
                                      provider.tracks[dst][m.inliers[:, 1]])


def test_common_features_are_seen_by_every_seed_motion(provider):
    solver = MockProjectiveSolver(provider)
    seed = provider.graph.lookup_node("view_0005")
    motion_indices = [0, 1, 2]

    common = solver.find_common_features(seed, motion_indices)
    assert len(common) >= 6

    tracks = provider.tracks[seed.id][common]
    for idx in motion_indices:
        other = provider.graph.other(seed, seed.connections[idx])
        assert np.isin(tracks, provider.tracks[other.id]).all()


def test_every_view_is_reconstructed(provider):
    solver = MockProjectiveSolver(provider)
    pipeline = ProjectiveReconstructionFromPairwiseGraph(solver)

    assert pipeline.process(None, provider.graph)
    assert pipeline.status == ReconstructionStatus.SUCCESS
    assert sorted(pipeline.work_graph.view_ids()) == provider.get_view_ids()
    assert pipeline.rejected_views == []

    for view_id, camera_matrix in pipeline.work_graph.camera_matrices().items():
        np.testing.assert_allclose(camera_matrix, provider.camera_matrix(view_id))

    # inliers are saved for the seed and every view added after it
    num_initial = len(pipeline.seeds[0].motions) + 1
    for view_id in pipeline.history[:1] + pipeline.history[num_initial:]:
        inliers = pipeline.work_graph.lookup_view(view_id).inliers
        assert inliers is not None and len(inliers) >= 6


def test_failed_views_are_rejected():
    provider = MockSceneProvider(num_views=12, seed=3)
    fail = {"view_0002", "view_0007"}
    pipeline = ProjectiveReconstructionFromPairwiseGraph(MockProjectiveSolver(provider, fail_views=fail))

    assert pipeline.process(None, provider.graph)

    initial = set(pipeline.history[:len(pipeline.seeds[0].motions) + 1])
    assert set(pipeline.rejected_views) <= fail
    for view_id in fail:
        assert view_id in pipeline.rejected_views or view_id in initial
    for view_id in pipeline.rejected_views:
        assert view_id not in pipeline.work_graph

    # the skip connections keep every other view reachable
    assert len(pipeline.work_graph) == 12 - len(pipeline.rejected_views)


def test_no_3d_motions_means_no_seeds():
    provider = MockSceneProvider(num_views=6, non_3d_ratio=1.0, seed=1)
    pipeline = ProjectiveReconstructionFromPairwiseGraph(MockProjectiveSolver(provider))

    assert not pipeline.process(None, provider.graph)
    assert pipeline.status == ReconstructionStatus.NO_SEEDS


def test_failed_initialization(provider):
    solver = MockProjectiveSolver(provider, fail_initialization=True)
    pipeline = ProjectiveReconstructionFromPairwiseGraph(solver)

    assert not pipeline.process(None, provider.graph)
    assert pipeline.status == ReconstructionStatus.SEED_INITIALIZATION_FAILED
    assert solver.expand_calls == []


def test_consecutive_views_are_always_connected():
    provider = MockSceneProvider(num_views=6, min_shared=10_000, seed=0)
    graph = provider.graph

    # only the chain survives when no pair shares enough tracks
    assert [(m.src, m.dst) for m in graph.edges] == [(i, i + 1) for i in range(5)]
    assert all(m.count_f == len(m.inliers) for m in graph.edges)

    pipeline = ProjectiveReconstructionFromPairwiseGraph(MockProjectiveSolver(provider))
    assert pipeline.process(None, graph)
    assert len(pipeline.work_graph) == 6


def test_invalid_view_count():
    with pytest.raises(ValueError):
        MockSceneProvider(num_views=0)


def test_run_script():
    assert run_projective_reconstruction(num_views=15, preset='compact', target='view_0004')
    assert run_projective_reconstruction(num_views=10, preset='default')
    assert not run_projective_reconstruction(num_views=10, target='view_9999')


def test_run_script_score_functions():
    assert run_projective_reconstruction(num_views=10, score='inliers')
    with pytest.raises(ValueError):
        run_projective_reconstruction(num_views=10, score='fastest')

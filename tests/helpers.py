"""
Graph builders and a scripted solver shared by the tests.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ProjectiveReconstruction.core.interfaces.base_solver import IProjectiveSolver, SolverResult, SolverStatus
from ProjectiveReconstruction.core.structures.pairwise_graph import PairwiseImageGraph, View
from ProjectiveReconstruction.core.structures.working_graph import SceneWorkingGraph, WorkingView


def score_by_count_f(motion) -> float:
    """Score a motion by its fundamental inlier count. Keeps expected scores obvious."""
    return float(motion.count_f)


def build_graph(view_ids: Sequence[str],
                edges: Iterable[Tuple]) -> PairwiseImageGraph:
    """
    Create a graph from a list of views and (src, dst, count_f[, is_3d]) tuples.
    """
    graph = PairwiseImageGraph()
    for view_id in view_ids:
        graph.create_node(view_id)
    for edge in edges:
        src, dst, count_f = edge[:3]
        is_3d = edge[3] if len(edge) > 3 else True
        graph.connect(src, dst, is_3d=is_3d, count_f=count_f)
    return graph


def camera_for(view: View) -> np.ndarray:
    """Distinct 3x4 camera matrix for every view"""
    P = np.hstack([np.eye(3), np.zeros((3, 1))])
    P[0, 3] = float(view.index)
    return P


def build_working(graph: PairwiseImageGraph, view_ids: Optional[Sequence[str]] = None) -> SceneWorkingGraph:
    """Working graph with every (or the listed) view known"""
    working = SceneWorkingGraph()
    ids = view_ids if view_ids is not None else [v.id for v in graph.nodes]
    for view_id in ids:
        view = graph.lookup_node(view_id)
        working.add_view(view).projective = camera_for(view)
    return working


class ScriptedSolver(IProjectiveSolver):
    """
    Resolves every view it is asked about unless told otherwise and records the calls.
    """

    def __init__(self,
                 graph: PairwiseImageGraph,
                 num_common: int = 20,
                 fail_views: Iterable[str] = (),
                 fail_initialization: bool = False,
                 raise_on: Iterable[str] = ()):
        self.graph = graph
        self.num_common = num_common
        self.fail_views = set(fail_views)
        self.fail_initialization = fail_initialization
        self.raise_on = set(raise_on)

        self.initialize_calls: List[Tuple[str, List[int]]] = []
        self.expand_calls: List[str] = []
        self.saved: List[str] = []
        self.known_at_expand: Dict[str, List[str]] = {}

    def find_common_features(self, seed, motion_indices):
        return np.arange(self.num_common, dtype=np.int32)

    def initialize_projective_scene(self, db, seed, common, motion_indices):
        self.initialize_calls.append((seed.id, list(motion_indices)))
        if self.fail_initialization:
            return SolverResult.failure()
        views = [seed] + [self.graph.other(seed, seed.connections[i]) for i in motion_indices]
        cameras = {view.id: camera_for(view) for view in views}
        return SolverResult(success=True, status=SolverStatus.SUCCESS, cameras=cameras,
                            inliers=np.asarray(common))

    def expand_by_one_view(self, db, working: SceneWorkingGraph, view):
        if view.id in self.raise_on:
            raise RuntimeError(f"solver crashed on {view.id}")
        self.expand_calls.append(view.id)
        self.known_at_expand[view.id] = working.view_ids()
        if view.id in self.fail_views:
            return SolverResult.failure()
        return SolverResult(success=True, status=SolverStatus.SUCCESS,
                            camera_matrix=camera_for(view),
                            inliers=np.arange(10, dtype=np.int32))

    def save_inliers(self, wview: WorkingView) -> None:
        self.saved.append(wview.id)
        wview.inliers = np.arange(10, dtype=np.int32)

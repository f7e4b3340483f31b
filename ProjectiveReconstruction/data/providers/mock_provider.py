"""
Mock scene and solver for testing and prototyping.

Generates a synthetic but consistent scene: ground truth projective cameras,
feature tracks observed by each view and the pairwise graph built from them.
MockProjectiveSolver answers the pipeline's solver requests from that ground
truth so the graph algorithms can be exercised without any images.
"""

from typing import Dict, Iterable, List, Optional, Tuple

import cv2
import numpy as np

from ProjectiveReconstruction.core.interfaces.base_solver import IProjectiveSolver, SolverResult, SolverStatus
from ProjectiveReconstruction.core.structures.pairwise_graph import PairwiseImageGraph, View
from ProjectiveReconstruction.core.structures.working_graph import SceneWorkingGraph, WorkingView
from ProjectiveReconstruction.logger import get_logger

logger = get_logger("data.mock_provider")


class MockSceneProvider:
    """
    Synthetic scene with a ring of cameras looking at a cloud of points.

    Useful for:
    - Unit testing
    - Algorithm development
    - Edge case testing (non-3D motions, failing views)
    """

    def __init__(self,
                 num_views: int = 10,
                 connections_per_view: int = 3,
                 num_points: int = 600,
                 track_span: int = 3,
                 non_3d_ratio: float = 0.0,
                 min_shared: int = 8,
                 image_size: Tuple[int, int] = (640, 480),
                 seed: Optional[int] = None):
        """
        Initialize mock scene.

        Args:
            num_views: Number of views to simulate
            connections_per_view: Views on each side a view may be connected to
            num_points: Number of 3D points (feature tracks)
            track_span: A point is seen by views within this distance of its closest view
            non_3d_ratio: Fraction of motions flagged as not having a 3D relationship
            min_shared: Minimum shared tracks for non-consecutive views to be connected
            image_size: Simulated image dimensions
            seed: Random seed for reproducibility
        """
        if num_views < 1:
            raise ValueError(f"num_views must be >= 1, got {num_views}")

        self.num_views = num_views
        self.connections_per_view = connections_per_view
        self.num_points = num_points
        self.track_span = track_span
        self.non_3d_ratio = non_3d_ratio
        self.min_shared = min_shared
        self.image_size = image_size
        self._rng = np.random.default_rng(seed)

        self.graph = PairwiseImageGraph()
        self.cameras: Dict[str, np.ndarray] = {}
        # track id observed by each feature in a view. feature index == position
        self.tracks: Dict[str, np.ndarray] = {}

        self._generate_data()

        logger.info(f"MockSceneProvider initialized: {self.graph.summary()}")

    # ------------------------------------------------------------------ generation

    def _generate_data(self):
        """Generate cameras, tracks and the pairwise graph"""
        width, height = self.image_size
        focal = 1.2 * width
        K = np.array([[focal, 0.0, width / 2.0],
                      [0.0, focal, height / 2.0],
                      [0.0, 0.0, 1.0]])

        # Every camera gets the same unknown projective distortion
        H = np.eye(4) + 0.05 * self._rng.standard_normal((4, 4))

        view_ids = [f"view_{i:04d}" for i in range(self.num_views)]
        for i, view_id in enumerate(view_ids):
            angle = 2.0 * np.pi * i / max(1, self.num_views)
            R, _ = cv2.Rodrigues(np.array([0.0, angle, 0.0]))
            center = 10.0 * np.array([np.sin(angle), 0.0, -np.cos(angle)])
            t = -R @ center.reshape(3, 1)
            self.cameras[view_id] = K @ np.hstack([R, t]) @ H
            self.graph.create_node(view_id)

        # Each track is closest to one view and visible from its ring neighbors
        closest = self._rng.integers(0, self.num_views, size=self.num_points)
        observers: Dict[int, List[int]] = {i: [] for i in range(self.num_views)}
        for track_id, center_view in enumerate(closest):
            for offset in range(-self.track_span, self.track_span + 1):
                observers[(center_view + offset) % self.num_views].append(track_id)
        for i, view_id in enumerate(view_ids):
            self.tracks[view_id] = np.array(sorted(set(observers[i])), dtype=np.int32)

        for i in range(self.num_views):
            for offset in range(1, self.connections_per_view + 1):
                j = i + offset
                if j >= self.num_views:
                    break
                # consecutive views are always connected
                self._connect(view_ids[i], view_ids[j], required=(offset == 1))

    def _connect(self, src_id: str, dst_id: str, required: bool = False) -> None:
        inliers = self.shared_features(src_id, dst_id)
        if len(inliers) < self.min_shared and not required:
            return
        count_f = len(inliers)
        count_h = int(count_f * self._rng.uniform(0.1, 0.3))
        is_3d = bool(self._rng.uniform() >= self.non_3d_ratio)
        self.graph.connect(src_id, dst_id, is_3d=is_3d,
                           count_f=count_f, count_h=count_h, inliers=inliers)

    # ------------------------------------------------------------------ queries

    def shared_features(self, src_id: str, dst_id: str) -> np.ndarray:
        """(N, 2) array of feature indices in src and dst which observe the same track"""
        src_tracks = self.tracks[src_id]
        dst_tracks = self.tracks[dst_id]
        _, src_idx, dst_idx = np.intersect1d(src_tracks, dst_tracks, return_indices=True)
        return np.stack([src_idx, dst_idx], axis=1).astype(np.int32)

    def camera_matrix(self, view_id: str) -> np.ndarray:
        return self.cameras[view_id].copy()

    def features_of_tracks(self, view_id: str, track_ids: np.ndarray) -> np.ndarray:
        """Feature indices in the view that observe the given tracks"""
        _, _, feature_idx = np.intersect1d(track_ids, self.tracks[view_id], return_indices=True)
        return feature_idx.astype(np.int32)

    def get_view_ids(self) -> List[str]:
        return [view.id for view in self.graph.nodes]

    def summary(self) -> str:
        return (f"MockSceneProvider: {self.num_views} views, {self.num_points} tracks\n"
                f"  {self.graph.summary()}")


class MockProjectiveSolver(IProjectiveSolver):
    """
    Solver which answers with the ground truth of a MockSceneProvider.

    Failures can be injected to exercise the pipeline's error handling.
    """

    def __init__(self,
                 provider: MockSceneProvider,
                 fail_views: Iterable[str] = (),
                 fail_initialization: bool = False,
                 min_features: int = 6):
        """
        Args:
            provider: Source of the ground truth
            fail_views: Views whose expansion always fails
            fail_initialization: If True the initial scene can't be estimated
            min_features: Minimum features needed by any estimate
        """
        self.provider = provider
        self.fail_views = set(fail_views)
        self.fail_initialization = fail_initialization
        self.min_features = min_features

        self._last_inliers: Dict[str, np.ndarray] = {}
        self.expand_calls: List[str] = []

    def find_common_features(self, seed: View, motion_indices: List[int]) -> np.ndarray:
        common = np.arange(len(self.provider.tracks[seed.id]), dtype=np.int32)
        for idx in motion_indices:
            m = seed.connections[idx]
            column = 0 if m.src == seed.index else 1
            common = np.intersect1d(common, m.inliers[:, column])
        return common.astype(np.int32)

    def initialize_projective_scene(self, db, seed: View, common: np.ndarray,
                                    motion_indices: List[int]) -> SolverResult:
        if self.fail_initialization:
            return SolverResult.failure(SolverStatus.FAILED, reason="injected failure")
        if len(common) < self.min_features:
            return SolverResult.failure(SolverStatus.INSUFFICIENT_FEATURES, common=len(common))

        graph = self.provider.graph
        views = [seed] + [graph.other(seed, seed.connections[idx]) for idx in motion_indices]
        common_tracks = self.provider.tracks[seed.id][common]

        cameras = {}
        for view in views:
            cameras[view.id] = self.provider.camera_matrix(view.id)
            self._last_inliers[view.id] = self.provider.features_of_tracks(view.id, common_tracks)

        return SolverResult(success=True, status=SolverStatus.SUCCESS,
                            cameras=cameras, inliers=common,
                            metadata={'views': len(views)})

    def expand_by_one_view(self, db, working: SceneWorkingGraph, view: View) -> SolverResult:
        self.expand_calls.append(view.id)
        if view.id in self.fail_views:
            return SolverResult.failure(SolverStatus.FAILED, reason="injected failure")

        graph = self.provider.graph
        inliers = []
        known = 0
        for m in view.connections:
            other = graph.other(view, m)
            if not m.is_3d or not working.is_known(other):
                continue
            known += 1
            column = 0 if m.src == view.index else 1
            inliers.append(m.inliers[:, column])

        if known == 0:
            return SolverResult.failure(SolverStatus.NO_KNOWN_NEIGHBORS)

        inliers = np.unique(np.concatenate(inliers)).astype(np.int32)
        if len(inliers) < self.min_features:
            return SolverResult.failure(SolverStatus.INSUFFICIENT_FEATURES, inliers=len(inliers))

        self._last_inliers[view.id] = inliers
        return SolverResult(success=True, status=SolverStatus.SUCCESS,
                            camera_matrix=self.provider.camera_matrix(view.id),
                            inliers=inliers, metadata={'known_neighbors': known})

    def save_inliers(self, wview: WorkingView) -> None:
        wview.inliers = self._last_inliers.get(wview.id)

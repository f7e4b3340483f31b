"""
Scene working graph.

Accumulates the views whose projective camera matrix has been estimated. Views
are only ever appended, and a camera matrix, once assigned, is never replaced.
"""

from typing import Dict, List, Optional

import numpy as np

from ProjectiveReconstruction.core.exceptions import GraphInvariantError
from ProjectiveReconstruction.core.structures.pairwise_graph import View


class WorkingView:
    """
    A view with a known camera matrix.

    Attributes:
        pview: The view in the pairwise graph this entry refers to
        projective: 3x4 projective camera matrix (None until assigned)
        inliers: Feature indices used when estimating the camera matrix
    """

    def __init__(self, pview: View):
        self.pview = pview
        self._projective: Optional[np.ndarray] = None
        self.inliers: Optional[np.ndarray] = None

    @property
    def id(self) -> str:
        return self.pview.id

    @property
    def projective(self) -> Optional[np.ndarray]:
        return self._projective

    @projective.setter
    def projective(self, camera_matrix: np.ndarray) -> None:
        if self._projective is not None:
            raise GraphInvariantError(f"Camera matrix of view '{self.id}' has already been set")
        camera_matrix = np.array(camera_matrix, dtype=np.float64)
        if camera_matrix.shape != (3, 4):
            raise ValueError(f"Camera matrix must be 3x4, got {camera_matrix.shape}")
        camera_matrix.setflags(write=False)
        self._projective = camera_matrix

    def has_projective(self) -> bool:
        return self._projective is not None

    def __repr__(self) -> str:
        num_inliers = 0 if self.inliers is None else len(self.inliers)
        return f"WorkingView(id='{self.id}', known={self.has_projective()}, inliers={num_inliers})"


class SceneWorkingGraph:
    """
    Views which have been added to the projective scene.

    Maintains insertion order so results are reproducible, and a lookup table
    from view id to its entry.
    """

    def __init__(self):
        self.views: Dict[str, WorkingView] = {}
        self._ordered: List[WorkingView] = []

    def add_view(self, pview: View) -> WorkingView:
        """
        Adds a new entry for 'pview'.

        Raises:
            GraphInvariantError: If the view is already in the graph
        """
        if pview.id in self.views:
            raise GraphInvariantError(f"View '{pview.id}' is already in the working graph")
        wview = WorkingView(pview)
        self.views[pview.id] = wview
        self._ordered.append(wview)
        return wview

    def add_view_reference(self, wview: WorkingView) -> WorkingView:
        """Shares an entry owned by another working graph. Nothing is copied."""
        if wview.id in self.views:
            raise GraphInvariantError(f"View '{wview.id}' is already in the working graph")
        self.views[wview.id] = wview
        self._ordered.append(wview)
        return wview

    def lookup_view(self, view_id: str) -> Optional[WorkingView]:
        return self.views.get(view_id)

    def is_known(self, pview: View) -> bool:
        return pview.id in self.views

    def get_all_views(self) -> List[WorkingView]:
        return list(self._ordered)

    def view_ids(self) -> List[str]:
        return [wview.id for wview in self._ordered]

    def camera_matrices(self) -> Dict[str, np.ndarray]:
        """Camera matrix of every view, keyed by view id"""
        return {wview.id: wview.projective for wview in self._ordered}

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, view_id: str) -> bool:
        return view_id in self.views

    def __iter__(self):
        return iter(list(self._ordered))

    def summary(self) -> str:
        """Generate a one line summary of the graph"""
        with_inliers = sum(1 for v in self._ordered if v.inliers is not None)
        return f"SceneWorkingGraph: {len(self._ordered)} views ({with_inliers} with saved inliers)"

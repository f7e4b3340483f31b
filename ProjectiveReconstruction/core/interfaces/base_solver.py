"""
Base interface for the projective solvers used during reconstruction.

The reconstruction pipeline decides which views to solve and in which order.
Everything that actually touches image features and geometry is delegated to an
implementation of IProjectiveSolver.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from ProjectiveReconstruction.core.structures.pairwise_graph import View
from ProjectiveReconstruction.core.structures.working_graph import SceneWorkingGraph, WorkingView
from ProjectiveReconstruction.logger import get_logger

logger = get_logger("core.interfaces")


class SolverStatus(Enum):
    """Status codes for solver results"""
    SUCCESS = "success"
    INSUFFICIENT_FEATURES = "insufficient_features"
    NO_KNOWN_NEIGHBORS = "no_known_neighbors"
    DEGENERATE_CONFIG = "degenerate_configuration"
    FAILED = "failed"


@dataclass
class SolverResult:
    """
    Result of a projective solve.

    Attributes:
        success: Whether the solve succeeded
        status: Status code from SolverStatus
        camera_matrix: 3x4 camera matrix of the solved view (single view expansion)
        cameras: Camera matrix of every view resolved by the solve, keyed by view id
        inliers: Feature indices consistent with the solution
        metadata: Additional solver specific information
    """
    success: bool
    status: SolverStatus
    camera_matrix: Optional[np.ndarray] = None
    cameras: Dict[str, np.ndarray] = field(default_factory=dict)
    inliers: Optional[np.ndarray] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        """Allow truthiness check"""
        return self.success

    @staticmethod
    def failure(status: SolverStatus = SolverStatus.FAILED, **metadata) -> 'SolverResult':
        return SolverResult(success=False, status=status, metadata=dict(metadata))

    def log_summary(self):
        """Log solver result summary"""
        logger.info(f"Status: {self.status.value}")
        if self.cameras:
            logger.info(f"Cameras: {len(self.cameras)}")
        if self.inliers is not None:
            logger.info(f"Inliers: {len(self.inliers)}")
        for key, value in self.metadata.items():
            logger.info(f"  {key}: {value}")


class IProjectiveSolver(ABC):
    """
    Abstract interface for projective estimation collaborators.

    Implementations must be synchronous. Exceptions raised here are not caught by
    the pipeline and abort the current reconstruction.
    """

    @abstractmethod
    def find_common_features(self, seed: View, motion_indices: List[int]) -> np.ndarray:
        """
        Finds features in the seed view which are visible in all the selected motions.

        Args:
            seed: The seed view
            motion_indices: Indices into seed.connections of the motions to use

        Returns:
            Array of feature indices in the seed view
        """
        pass

    @abstractmethod
    def initialize_projective_scene(self,
                                    db: Any,
                                    seed: View,
                                    common: np.ndarray,
                                    motion_indices: List[int]) -> SolverResult:
        """
        Estimates the initial projective scene from the seed and its selected neighbors.

        Args:
            db: Similar image lookup, passed through untouched
            seed: The seed view
            common: Feature indices returned by find_common_features()
            motion_indices: Indices into seed.connections of the motions to use

        Returns:
            SolverResult whose 'cameras' contains every view that was resolved
        """
        pass

    @abstractmethod
    def expand_by_one_view(self,
                           db: Any,
                           working: SceneWorkingGraph,
                           view: View) -> SolverResult:
        """
        Estimates the camera matrix of a single view using already known views.

        Args:
            db: Similar image lookup, passed through untouched
            working: Views with known camera matrices. Must not be modified.
            view: The view being added

        Returns:
            SolverResult with 'camera_matrix' set on success
        """
        pass

    @abstractmethod
    def save_inliers(self, wview: WorkingView) -> None:
        """
        Saves which features were used to estimate the view's camera matrix.

        Called right after the view has been added to the working graph.
        """
        pass

    def get_algorithm_name(self) -> str:
        return self.__class__.__name__

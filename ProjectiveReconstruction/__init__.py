"""
ProjectiveReconstruction - Projective scene reconstruction from a pairwise image graph

Selects seed views, grows a projective scene one view at a time and extracts
bounded local graphs around a view for local refinement.
"""

from .logger import (
    get_logger,
    configure_root_logger,
    set_verbose,
)
from .config import (
    ProjectiveReconstructionConfig,
    NeighborSelectionConfig,
    PRESET_CONFIGS,
    get_preset,
)
from .core import (
    ReconstructionError,
    ConfigurationError,
    NeighborSelectionConfigError,
    GraphInvariantError,
    Motion,
    View,
    PairwiseImageGraph,
    WorkingView,
    SceneWorkingGraph,
    IProjectiveSolver,
    SolverResult,
    SolverStatus,
)
from .algorithms import (
    default_score_motion,
    SeedInfo,
    SeedSelector,
    SelectNeighborsAroundView,
)
from .pipeline import (
    ProjectiveReconstructionFromPairwiseGraph,
    ReconstructionStatus,
)

__version__ = "1.0.0"
__all__ = [
    "get_logger",
    "configure_root_logger",
    "set_verbose",
    "ProjectiveReconstructionConfig",
    "NeighborSelectionConfig",
    "PRESET_CONFIGS",
    "get_preset",
    "ReconstructionError",
    "ConfigurationError",
    "NeighborSelectionConfigError",
    "GraphInvariantError",
    "Motion",
    "View",
    "PairwiseImageGraph",
    "WorkingView",
    "SceneWorkingGraph",
    "IProjectiveSolver",
    "SolverResult",
    "SolverStatus",
    "default_score_motion",
    "SeedInfo",
    "SeedSelector",
    "SelectNeighborsAroundView",
    "ProjectiveReconstructionFromPairwiseGraph",
    "ReconstructionStatus",
]

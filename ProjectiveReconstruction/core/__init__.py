"""
Core data structures, interfaces and errors.
"""

from .exceptions import (
    ReconstructionError,
    ConfigurationError,
    NeighborSelectionConfigError,
    GraphInvariantError,
)
from .structures import (
    Motion,
    View,
    PairwiseImageGraph,
    WorkingView,
    SceneWorkingGraph,
)
from .interfaces import (
    IProjectiveSolver,
    SolverResult,
    SolverStatus,
)

__all__ = [
    'ReconstructionError',
    'ConfigurationError',
    'NeighborSelectionConfigError',
    'GraphInvariantError',
    'Motion',
    'View',
    'PairwiseImageGraph',
    'WorkingView',
    'SceneWorkingGraph',
    'IProjectiveSolver',
    'SolverResult',
    'SolverStatus',
]

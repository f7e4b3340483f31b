"""
Core interfaces for projective reconstruction.

Defines the contracts of the external collaborators the pipeline relies on.
"""

from .base_solver import (
    IProjectiveSolver,
    SolverResult,
    SolverStatus,
)

__all__ = [
    'IProjectiveSolver',
    'SolverResult',
    'SolverStatus',
]

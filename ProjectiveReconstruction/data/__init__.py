"""
Data access layer for projective reconstruction.

Providers build pairwise graphs and answer solver requests. Only a synthetic
provider ships with the package; real ones wrap a feature matching pipeline.
"""

from .providers import (
    MockSceneProvider,
    MockProjectiveSolver,
)

__all__ = [
    'MockSceneProvider',
    'MockProjectiveSolver',
]

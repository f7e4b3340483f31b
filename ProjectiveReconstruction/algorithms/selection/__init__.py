"""
Selection Module

Strategies for selecting views during projective reconstruction.

Components:
- SeedSelector: Select the views a reconstruction is started from
- SelectNeighborsAroundView: Select a bounded local graph around a view
- Scoring utilities: Quality metrics for motions
"""

from .scoring import (
    ScoreMotion,
    default_score_motion,
    inlier_count_score,
    MotionScoreCache,
)

from .seed_selection import (
    SeedInfo,
    SeedSelector,
)

from .neighbor_selection import (
    EdgeScore,
    SelectNeighborsAroundView,
)


__all__ = [
    'ScoreMotion',
    'default_score_motion',
    'inlier_count_score',
    'MotionScoreCache',
    'SeedInfo',
    'SeedSelector',
    'EdgeScore',
    'SelectNeighborsAroundView',
]

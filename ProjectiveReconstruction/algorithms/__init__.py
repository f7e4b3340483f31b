"""
Algorithms for projective reconstruction.
"""

from .selection import (
    ScoreMotion,
    default_score_motion,
    inlier_count_score,
    MotionScoreCache,
    SeedInfo,
    SeedSelector,
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

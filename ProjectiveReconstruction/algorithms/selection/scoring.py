"""
Motion Scoring Utilities

Functions for scoring the motions (edges) of a pairwise graph. Used by the seed
selector, the scene expander and the local neighbor selector to rank candidates.

A score function takes a Motion and returns a float, higher is better. It must be
a pure function of the Motion for the duration of a run.
"""

from typing import Callable, Dict

from ProjectiveReconstruction.core.structures.pairwise_graph import Motion

ScoreMotion = Callable[[Motion], float]


def default_score_motion(motion: Motion) -> float:
    """
    Score a motion by how well it constrains 3D structure.

    Pairs whose inliers are mostly explained by a homography (pure rotation or a
    planar scene) carry little 3D information, so the fundamental inlier count is
    weighted by its ratio to the homography count. The ratio saturates at 5.

    Args:
        motion: Motion being scored

    Returns:
        Score (higher is better)
    """
    ratio = min(5.0, motion.count_f / (motion.count_h + 1.0))
    return ratio * motion.count_f


def inlier_count_score(motion: Motion) -> float:
    """Number of associated inlier features"""
    return float(len(motion.inliers))


class MotionScoreCache:
    """
    Memoizes a score function by motion index.

    Only valid for motions of a single graph.
    """

    def __init__(self, score_motion: ScoreMotion):
        self.score_motion = score_motion
        self._scores: Dict[int, float] = {}

    def __call__(self, motion: Motion) -> float:
        score = self._scores.get(motion.index)
        if score is None:
            score = float(self.score_motion(motion))
            self._scores[motion.index] = score
        return score

    def clear(self) -> None:
        self._scores.clear()

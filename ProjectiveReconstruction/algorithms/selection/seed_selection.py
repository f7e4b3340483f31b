"""
Seed Selection

Scores every view in a pairwise graph on how good of a starting point it would
make for a projective reconstruction, then picks the seeds using non-maximum
suppression so that no two seeds are direct neighbors.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ProjectiveReconstruction.algorithms.selection.scoring import ScoreMotion, default_score_motion
from ProjectiveReconstruction.config import ProjectiveReconstructionConfig
from ProjectiveReconstruction.core.structures.pairwise_graph import PairwiseImageGraph, View
from ProjectiveReconstruction.logger import get_logger

logger = get_logger("selection.seeds")


@dataclass(eq=False)
class SeedInfo:
    """
    Information related to a view acting as a seed.

    Attributes:
        seed: The potential initial seed
        score: How good of a seed this view would make, higher is better
        motions: Indices into seed.connections of the motions used to compute the score
        neighbor: True if it's a neighbor of an already selected seed
    """
    seed: View
    score: float = 0.0
    motions: List[int] = field(default_factory=list)
    neighbor: bool = False

    def __repr__(self) -> str:
        return f"SeedInfo(seed='{self.seed.id}', score={self.score:.3f}, motions={self.motions})"


class SeedSelector:
    """
    Selects the views from which a projective scene is started.

    A view is scored by the sum of its best 3D motions. Seeds are then picked from
    the highest score down; once a seed is picked all of its neighbors are
    suppressed.
    """

    def __init__(self,
                 score_motion: ScoreMotion = default_score_motion,
                 config: Optional[ProjectiveReconstructionConfig] = None):
        self.score_motion = score_motion
        self.config = config or ProjectiveReconstructionConfig()
        self.config.validate()

    def select_seeds(self, graph: PairwiseImageGraph) -> List[SeedInfo]:
        """
        Picks all acceptable seeds in the graph.

        Args:
            graph: Pairwise graph of all the views

        Returns:
            Seeds, best first. Empty if no view has a 3D motion.
        """
        candidates = self.score_nodes_as_seeds(graph)
        seeds = self._select_from_candidates(candidates)
        logger.debug(f"Selected {len(seeds)} seeds out of {len(graph.nodes)} views")
        return seeds

    def score_nodes_as_seeds(self, graph: PairwiseImageGraph) -> List[SeedInfo]:
        """Scores every view in the graph as a potential seed, in graph order"""
        return [self.score(view) for view in graph.nodes]

    def score(self, target: View) -> SeedInfo:
        """
        Scores a view on its best 3D motions.

        Views with fewer 3D motions than 'seed_motions' are scored on the ones they have.
        """
        scored = []
        for idx, motion in enumerate(target.connections):
            if not motion.is_3d:
                continue
            scored.append((self.score_motion(motion), idx))

        # best first, ties keep connection order
        scored.sort(key=lambda item: item[0], reverse=True)

        info = SeedInfo(seed=target)
        for score, idx in scored[:self.config.seed_motions]:
            info.motions.append(idx)
            info.score += score
        return info

    def _select_from_candidates(self, candidates: List[SeedInfo]) -> List[SeedInfo]:
        seeds: List[SeedInfo] = []
        if not candidates:
            return seeds

        # look up by arena index, which is what motions reference
        lookup: Dict[int, SeedInfo] = {info.seed.index: info for info in candidates}

        # best scores are last
        ordered = sorted(candidates, key=lambda info: info.score)
        min_score = ordered[-1].score * self.config.seed_min_score_fraction

        for info in reversed(ordered):
            if info.neighbor:
                continue

            # everything after this is below the minimum
            if info.score <= min_score:
                break

            connected = [lookup[m.other(info.seed.index)] for m in info.seed.connections]

            # too close to an existing seed if any connected view was suppressed by it
            if any(c.neighbor for c in connected):
                continue

            seeds.append(info)
            logger.debug(f"  seed view.id='{info.seed.id}' score={info.score:.3f}")

            for c in connected:
                c.neighbor = True

        return seeds

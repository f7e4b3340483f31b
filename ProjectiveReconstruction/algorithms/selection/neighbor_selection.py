"""
Local Neighbor Selection

Selects a subset of views from a SceneWorkingGraph around a target view as the
first step before a local refinement, such as local bundle adjustment. The
subset should contain the views which contribute the most to the target's
estimate while the number of views stays under a user specified maximum.

Every connection between views is assigned a score. The goal is the subset
which maximizes the minimum score across its connections, approximated greedily:

1. Candidate views are the target's neighbors and their neighbors
2. Every motion connecting two of those views (or the target) is scored
3. Until only N views remain:
    a. Select the edge with the lowest score
    b. Pick which of its views to remove based on their other connections
    c. Remove the view, its edges and any view left without connections

A minimum number of the target's direct neighbors is kept. Without them the
remaining views might not observe the same features as the target.

WARNING: In a poorly connected graph the pruned set can be split into multiple
disconnected components. This is not detected.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from ProjectiveReconstruction.algorithms.selection.scoring import ScoreMotion, default_score_motion
from ProjectiveReconstruction.config import NeighborSelectionConfig
from ProjectiveReconstruction.core.exceptions import GraphInvariantError, NeighborSelectionConfigError
from ProjectiveReconstruction.core.structures.pairwise_graph import Motion
from ProjectiveReconstruction.core.structures.working_graph import SceneWorkingGraph, WorkingView
from ProjectiveReconstruction.logger import get_logger

logger = get_logger("selection.neighbors")


@dataclass(eq=False)
class EdgeScore:
    """
    A motion and its score.

    Attributes:
        motion: The motion this edge references
        score: Quality of geometric information in this edge. Higher is better.
    """
    motion: Motion
    score: float


class SelectNeighborsAroundView:
    """
    Builds a size limited local working graph around a target view.

    Attributes:
        config: Limits on the local graph (max_views, worst_of_top, min_neighbors)
        score_motion: Score function used to evaluate the motions
        local_working: Local graph found by the last call to process()
    """

    def __init__(self,
                 score_motion: ScoreMotion = default_score_motion,
                 config: Optional[NeighborSelectionConfig] = None):
        self.score_motion = score_motion
        self.config = config or NeighborSelectionConfig()
        self.config.validate()

        self.local_working = SceneWorkingGraph()

        # Internal workspace, reset by every call to process()
        self._target_index = -1
        self._known: Dict[int, WorkingView] = {}
        self._direct: Set[int] = set()
        self.candidates: List[WorkingView] = []
        self.lookup: Dict[int, WorkingView] = {}
        self.edges: List[EdgeScore] = []
        self._edge_scores: Dict[int, float] = {}

    def process(self, target: WorkingView, working: SceneWorkingGraph) -> SceneWorkingGraph:
        """
        Computes a local graph around the target view.

        Args:
            target: The view that the local graph is built around
            working: Graph of the entire scene that the local graph is selected from

        Returns:
            Local working graph. Its entries are shared with 'working'.

        Raises:
            NeighborSelectionConfigError: If no view can be removed while the graph is
                still too large. Typically 'min_neighbors' >= 'max_views' - 1.
            GraphInvariantError: If the target is not part of 'working'
        """
        if working.lookup_view(target.id) is not target:
            raise GraphInvariantError(f"Target view '{target.id}' is not in the working graph")

        self._reset(target, working)

        self._add_neighbors2(target)
        logger.debug(f"target='{target.id}' candidates={len(self.candidates)} edges={len(self.edges)}")

        self._prune_views()

        local = SceneWorkingGraph()
        local.add_view_reference(target)
        for wview in self.candidates:
            local.add_view_reference(wview)
        self.local_working = local

        logger.debug(f"local graph around '{target.id}': {local.view_ids()}")
        return local

    def _reset(self, target: WorkingView, working: SceneWorkingGraph) -> None:
        self._target_index = target.pview.index
        self._known = {wview.pview.index: wview for wview in working.get_all_views()}
        self._direct = set()
        self.candidates = []
        self.lookup = {}
        self.edges = []
        self._edge_scores = {}
        self.local_working = SceneWorkingGraph()

    def _add_neighbors2(self, target: WorkingView) -> None:
        """Adds the target's neighbors and their neighbors, then every edge between them"""
        for m in target.pview.connections:
            o = self._known.get(m.other(self._target_index))
            # neighbors without a camera matrix can't take part in a local optimization
            if o is None or o.pview.index in self.lookup:
                continue
            self._add_candidate(o)
            self._direct.add(o.pview.index)

        for c in list(self.candidates):
            for m in c.pview.connections:
                o_index = m.other(c.pview.index)
                o = self._known.get(o_index)
                if o is None or o_index == self._target_index or o_index in self.lookup:
                    continue
                self._add_candidate(o)

        members = [target] + self.candidates
        for member in members:
            member_index = member.pview.index
            for m in member.pview.connections:
                if m.index in self._edge_scores:
                    continue
                o_index = m.other(member_index)
                if o_index != self._target_index and o_index not in self.lookup:
                    continue
                self._add_edge(m)

    def _add_candidate(self, wview: WorkingView) -> None:
        self.candidates.append(wview)
        self.lookup[wview.pview.index] = wview

    def _add_edge(self, m: Motion) -> None:
        score = float(self.score_motion(m))
        self.edges.append(EdgeScore(motion=m, score=score))
        self._edge_scores[m.index] = score

    @property
    def remaining_neighbors(self) -> int:
        """Number of the target's direct neighbors which are still candidates"""
        return sum(1 for idx in self._direct if idx in self.lookup)

    def _prune_views(self) -> None:
        """Removes candidates until the requested maximum number of views has been met"""
        # max_views-1 because the target is not in the candidates list
        while len(self.candidates) > self.config.max_views - 1:
            at_floor = self.remaining_neighbors <= self.config.min_neighbors

            # The list is searched every iteration since removing views changes it
            lowest: Optional[EdgeScore] = None
            for edge in self.edges:
                if lowest is not None and edge.score >= lowest.score:
                    continue
                if at_floor and not self._can_remove_at_floor(edge.motion):
                    continue
                lowest = edge

            if lowest is None:
                raise NeighborSelectionConfigError(
                    "Highly likely that this is miss configured. No valid candidate has been "
                    f"found for removal. Is 'min_neighbors' ({self.config.min_neighbors}) "
                    f">= 'max_views'-1 ({self.config.max_views - 1})?")

            m = lowest.motion
            if m.is_connected(self._target_index):
                # a neighbor of the target, no need to select which one to remove
                self._remove_candidate(m.other(self._target_index))
            elif at_floor and (m.src in self._direct) != (m.dst in self._direct):
                self._remove_candidate(m.dst if m.src in self._direct else m.src)
            else:
                score_src = self._score_for_removal(m.src, m)
                score_dst = self._score_for_removal(m.dst, m)
                self._remove_candidate(m.src if score_src < score_dst else m.dst)

    def _can_remove_at_floor(self, m: Motion) -> bool:
        """
        Once only 'min_neighbors' direct neighbors remain an edge can only be used if
        removing one of its views leaves the direct neighbors alone
        """
        if m.is_connected(self._target_index):
            return False
        return not (m.src in self._direct and m.dst in self._direct)

    def _score_for_removal(self, view_index: int, ignore: Motion) -> float:
        """
        Score the quality of a view based on the worst score of its top N connections.

        Args:
            view_index: Arena index of the view being considered for removal
            ignore: This motion is skipped

        Returns:
            The N-th best score of connections to other candidates, 0 if there are none
        """
        wview = self.lookup[view_index]
        conn_scores = []
        for m in wview.pview.connections:
            if m is ignore or m.other(view_index) not in self.lookup:
                continue
            conn_scores.append(self._edge_scores[m.index])

        if not conn_scores:
            return 0.0

        conn_scores.sort()
        idx = max(0, len(conn_scores) - self.config.worst_of_top)
        return conn_scores[idx]

    def _remove_candidate(self, view_index: int) -> None:
        """
        Removes the view from the candidate list along with all of its edges. Candidates
        which are left without any edges are removed too.
        """
        wview = self.lookup.pop(view_index, None)
        if wview is None:
            raise GraphInvariantError(f"View index {view_index} is not a candidate")
        self.candidates.remove(wview)
        logger.debug(f"  removed view.id='{wview.id}' remaining={len(self.candidates)}")

        touched = []
        for m in wview.pview.connections:
            o_index = m.other(view_index)
            if o_index != self._target_index and o_index not in self.lookup:
                continue
            self._remove_edge(m)
            if o_index in self.lookup:
                touched.append(o_index)

        for o_index in touched:
            if o_index in self.lookup and self._is_orphan(o_index):
                orphan = self.lookup.pop(o_index)
                self.candidates.remove(orphan)
                logger.debug(f"  removed orphan view.id='{orphan.id}'")

    def _remove_edge(self, m: Motion) -> None:
        for i, edge in enumerate(self.edges):
            if edge.motion is m:
                del self.edges[i]
                return
        raise GraphInvariantError(f"No matching edge found for motion {m.index}. BUG")

    def _is_orphan(self, view_index: int) -> bool:
        """True if the view has no remaining edge to the target or another candidate"""
        return not any(edge.motion.is_connected(view_index) for edge in self.edges)

"""
Projective Reconstruction Pipeline

Given a PairwiseImageGraph that describes how a set of images are related to each
other, compute a projective reconstruction of the camera matrix of each view.
The location of scene points is not saved.

Summary of approach:
1. Select views to act as seeds
2. Pick the first seed and estimate the initial scene from its neighbors and common features
3. For each remaining unknown view with a 3D relationship to a known view, find its camera matrix
4. Stop when no more valid views can be found

Only a single seed is used for now. Additional seeds could reduce the error which
accumulates as the scene spreads out from its initial location.
"""

from enum import Enum
from typing import Any, List, Optional, Set, Tuple

from ProjectiveReconstruction.algorithms.selection.scoring import MotionScoreCache, ScoreMotion, default_score_motion
from ProjectiveReconstruction.algorithms.selection.seed_selection import SeedInfo, SeedSelector
from ProjectiveReconstruction.config import ProjectiveReconstructionConfig
from ProjectiveReconstruction.core.exceptions import GraphInvariantError
from ProjectiveReconstruction.core.interfaces.base_solver import IProjectiveSolver
from ProjectiveReconstruction.core.structures.pairwise_graph import PairwiseImageGraph, View
from ProjectiveReconstruction.core.structures.working_graph import SceneWorkingGraph, WorkingView
from ProjectiveReconstruction.logger import get_logger

logger = get_logger("pipeline")


class ReconstructionStatus(Enum):
    """Outcome of the last call to process()"""
    NOT_RUN = "not_run"
    SUCCESS = "success"
    NO_SEEDS = "no_seeds"
    INSUFFICIENT_COMMON_FEATURES = "insufficient_common_features"
    SEED_INITIALIZATION_FAILED = "seed_initialization_failed"


class ProjectiveReconstructionFromPairwiseGraph:
    """
    Incrementally reconstructs a projective scene from a pairwise graph.

    Views move through Unseen -> Open -> Resolved or Rejected. A view is attempted
    at most once per call to process().

    Attributes:
        work_graph: The projective scene found by the last call to process()
        status: Outcome of the last call to process()
        seeds: Seeds found by the last call to process(), best first
        explored_views: Ids of every view which has been opened or resolved
        rejected_views: Ids of views the solver failed to add, in order
        history: Ids of views in the order they were resolved
    """

    def __init__(self,
                 solver: IProjectiveSolver,
                 score_motion: ScoreMotion = default_score_motion,
                 config: Optional[ProjectiveReconstructionConfig] = None):
        """
        Initialize the pipeline.

        Args:
            solver: Performs the actual projective estimation
            score_motion: Scores the quality of a motion, higher is better
            config: Pipeline configuration
        """
        self.solver = solver
        self.score_motion = score_motion
        self.config = config or ProjectiveReconstructionConfig()
        self.config.validate()
        # every motion is scored at most once per call to process()
        self._scores = MotionScoreCache(score_motion)
        self.seed_selector = SeedSelector(self._scores, self.config)

        self.work_graph = SceneWorkingGraph()
        self.status = ReconstructionStatus.NOT_RUN
        self.seeds: List[SeedInfo] = []
        self.explored_views: Set[str] = set()
        self.rejected_views: List[str] = []
        self.history: List[str] = []

    def process(self, db: Any, graph: PairwiseImageGraph) -> bool:
        """
        Performs a projective reconstruction of the scene from the views contained in the graph.

        Args:
            db: Contains information on each image. Only passed on to the solver.
            graph: Relationship between the images

        Returns:
            True if successful or False if it failed and results can't be used
        """
        self._reset()
        logger.debug(f"Solver: {self.solver.get_algorithm_name()}")

        self.seeds = self.seed_selector.select_seeds(graph)
        if not self.seeds:
            return self._fail(ReconstructionStatus.NO_SEEDS, "No seeds found")

        logger.info(f"Selected {len(self.seeds)} seeds out of {len(graph.nodes)} views")

        # Only a single seed is considered
        info = self.seeds[0]

        common = self.solver.find_common_features(info.seed, info.motions)
        if len(common) < self.config.min_common_features:
            return self._fail(ReconstructionStatus.INSUFFICIENT_COMMON_FEATURES,
                              f"Seed '{info.seed.id}' has only {len(common)} common features")

        logger.info(f"Selected seed.id='{info.seed.id}' common={len(common)}")

        if not self._estimate_initial_scene_from_seed(db, info, common, graph):
            return self._fail(ReconstructionStatus.SEED_INITIALIZATION_FAILED,
                              f"Failed to initialize from seed '{info.seed.id}'")

        self._expand_scene(db, graph)

        self.status = ReconstructionStatus.SUCCESS
        logger.info(f"Done. {len(self.work_graph)} of {len(graph.nodes)} views resolved, "
                    f"{len(self.rejected_views)} rejected")
        return True

    def _reset(self) -> None:
        self.work_graph = SceneWorkingGraph()
        self._scores.clear()
        self.status = ReconstructionStatus.NOT_RUN
        self.seeds = []
        self.explored_views = set()
        self.rejected_views = []
        self.history = []

    def _fail(self, status: ReconstructionStatus, message: str) -> bool:
        self.status = status
        logger.warning(message)
        return False

    def _estimate_initial_scene_from_seed(self,
                                          db: Any,
                                          info: SeedInfo,
                                          common,
                                          graph: PairwiseImageGraph) -> bool:
        """Initializes the scene at the seed view"""
        result = self.solver.initialize_projective_scene(db, info.seed, common, info.motions)
        if not result:
            logger.debug(f"Failed initialize seed: {result.status.value}")
            return False
        result.log_summary()

        # Save found camera matrices for each view it was estimated in
        logger.debug("Saving initial seed camera matrices")
        for view_id, camera_matrix in result.cameras.items():
            view = graph.lookup_node(view_id)
            if view is None:
                raise GraphInvariantError(f"Solver returned unknown view '{view_id}'")
            logger.debug(f"  view.id='{view.id}'")
            self._add_resolved(view, camera_matrix)
            self.explored_views.add(view.id)
            self.history.append(view.id)

        seed_wview = self.work_graph.lookup_view(info.seed.id)
        if seed_wview is None:
            raise GraphInvariantError(f"Seed '{info.seed.id}' is missing from the initial scene")

        # save which features were used for later use in metric reconstruction
        self.solver.save_inliers(seed_wview)
        return True

    def _expand_scene(self, db: Any, graph: PairwiseImageGraph) -> None:
        """Adds all the remaining views to the scene"""
        logger.debug("ENTER Expanding Scene:")
        open_views = self.find_all_open_views(graph)

        # Grow the projective scene until there are no more views to process
        while open_views:
            selected = self.select_next_to_process(open_views, graph)
            if selected is None:
                logger.debug(f"  No valid views left. open.size={len(open_views)}")
                break

            result = self.solver.expand_by_one_view(db, self.work_graph, selected)
            if not result:
                logger.debug(f"  Failed to expand/add view='{selected.id}'. Discarding.")
                self.rejected_views.append(selected.id)
                continue

            num_inliers = 0 if result.inliers is None else len(result.inliers)
            logger.debug(f"  Success Expanding: view='{selected.id}' inliers={num_inliers}")

            wview = self._add_resolved(selected, result.camera_matrix)
            self.history.append(selected.id)

            # save which features were used for later use in metric reconstruction
            self.solver.save_inliers(wview)

            self.add_open_for_view(selected, open_views, graph)
        logger.debug("EXIT Expanding Scene")

    def _add_resolved(self, view: View, camera_matrix) -> WorkingView:
        """
        Adds a view to the scene. The camera matrix is assigned before the view
        is registered.

        Raises:
            ValueError: If the camera matrix is missing or not 3x4
            GraphInvariantError: If the view is already in the scene
        """
        if self.work_graph.is_known(view):
            raise GraphInvariantError(f"View '{view.id}' is already in the working graph")
        wview = WorkingView(view)
        wview.projective = camera_matrix
        return self.work_graph.add_view_reference(wview)

    def find_all_open_views(self, graph: PairwiseImageGraph) -> List[View]:
        """
        Searches all connections to known views and creates a list of connected views
        which have a 3D relationship
        """
        found: List[View] = []
        for wview in self.work_graph.get_all_views():
            self.add_open_for_view(wview.pview, found, graph)
        return found

    def add_open_for_view(self, view: View, found: List[View], graph: PairwiseImageGraph) -> None:
        """
        Adds connections to the passed in view to the list of views to explore. A view
        is marked as explored when it's added so it can't be added twice.

        Args:
            view: Inspects connected views to add to found
            found: Storage for selected views
            graph: Graph the view belongs to
        """
        for m in view.connections:
            if not m.is_3d:
                continue

            o = graph.other(view, m)
            if o.id in self.explored_views:
                continue
            if o in found:
                continue

            logger.debug(f"  adding to open list view.id='{o.id}'")
            found.append(o)
            self.explored_views.add(o.id)

    def select_next_to_process(self, open_views: List[View], graph: PairwiseImageGraph) -> Optional[View]:
        """
        Selects the next view to process and removes it from the open list.

        Views are ranked by how many known 3D neighbors they have (capped), then by the
        best triangle they form with two known neighbors which are connected to each
        other. A triangle is scored by its weakest motion. Views without any known
        3D neighbor can't be selected.

        Returns:
            The selected view or None if no view can be selected
        """
        best_idx = -1
        best_key: Tuple[int, float] = (0, 0.0)

        for open_idx, pview in enumerate(open_views):
            valid_count, score = self._score_open_view(pview, graph)
            if valid_count == 0:
                continue
            key = (valid_count, score)
            if best_idx < 0 or key > best_key:
                best_key = key
                best_idx = open_idx

        if best_idx < 0:
            return None

        selected = open_views.pop(best_idx)
        logger.debug(f"  open.size={len(open_views)} selected.id='{selected.id}' "
                     f"score={best_key[1]:.3f} conn={best_key[0]}")
        return selected

    def _score_open_view(self, pview: View, graph: PairwiseImageGraph) -> Tuple[int, float]:
        """Returns (number of valid neighbors capped, best triangle score)"""
        # known views pview has a 3D connection to
        valid: List[Tuple[View, float]] = []
        for m in pview.connections:
            dst = graph.other(pview, m)
            if not m.is_3d or not self.work_graph.is_known(dst):
                continue
            valid.append((dst, self._scores(m)))

        best_local_score = 0.0
        for idx0 in range(len(valid)):
            dst0, score0 = valid[idx0]
            for idx1 in range(idx0 + 1, len(valid)):
                dst1, score1 = valid[idx1]
                m2 = dst0.find_motion(dst1)
                if m2 is None or not m2.is_3d:
                    continue
                s = min(score0, score1, self._scores(m2))
                best_local_score = max(s, best_local_score)

        return min(self.config.max_valid_neighbors, len(valid)), best_local_score

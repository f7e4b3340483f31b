from .pairwise_graph import Motion, View, PairwiseImageGraph
from .working_graph import WorkingView, SceneWorkingGraph

__all__ = [
    'Motion',
    'View',
    'PairwiseImageGraph',
    'WorkingView',
    'SceneWorkingGraph',
]

from .projective import (
    ProjectiveReconstructionFromPairwiseGraph,
    ReconstructionStatus,
)

__all__ = [
    'ProjectiveReconstructionFromPairwiseGraph',
    'ReconstructionStatus',
]

"""
Configuration management for projective reconstruction.

This module provides the configuration dataclasses, predefined presets and
validation utilities.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

from ProjectiveReconstruction.core.exceptions import ConfigurationError


@dataclass
class ProjectiveReconstructionConfig:
    """Configuration for seed selection and scene expansion"""

    # Seed selection
    seed_motions: int = 3                      # Best 3D motions summed into a seed's score
    seed_min_score_fraction: float = 0.2       # Seeds must score above this fraction of the best

    # Initialization
    min_common_features: int = 6               # Fewer common features can't give a projective scene

    # Expansion
    max_valid_neighbors: int = 3               # Known neighbors beyond this count don't rank higher

    def validate(self) -> None:
        """
        Check that every value is in its valid range.

        Raises:
            ConfigurationError: On the first invalid value
        """
        if self.seed_motions < 1:
            raise ConfigurationError(f"seed_motions must be >= 1, got {self.seed_motions}")
        if not 0.0 <= self.seed_min_score_fraction < 1.0:
            raise ConfigurationError(
                f"seed_min_score_fraction must be in [0, 1), got {self.seed_min_score_fraction}")
        if self.min_common_features < 1:
            raise ConfigurationError(
                f"min_common_features must be >= 1, got {self.min_common_features}")
        if self.max_valid_neighbors < 1:
            raise ConfigurationError(
                f"max_valid_neighbors must be >= 1, got {self.max_valid_neighbors}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectiveReconstructionConfig':
        return _from_dict(cls, data)


@dataclass
class NeighborSelectionConfig:
    """Configuration for selecting the local neighborhood around a view"""

    max_views: int = 10                        # Views in the local graph, target included
    worst_of_top: int = 3                      # N-th best connection is used to score a view for removal
    min_neighbors: int = 2                     # Direct neighbors of the target that must remain

    def validate(self) -> None:
        """
        Check that every value is in its valid range.

        'min_neighbors' >= 'max_views' - 1 is accepted here. Whether it can be
        satisfied depends on the graph, so it's only detected while pruning.

        Raises:
            ConfigurationError: On the first invalid value
        """
        if self.max_views < 1:
            raise ConfigurationError(f"max_views must be >= 1, got {self.max_views}")
        if self.worst_of_top < 1:
            raise ConfigurationError(f"worst_of_top must be >= 1, got {self.worst_of_top}")
        if self.min_neighbors < 0:
            raise ConfigurationError(f"min_neighbors must be >= 0, got {self.min_neighbors}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NeighborSelectionConfig':
        return _from_dict(cls, data)


def _from_dict(cls, data: Dict[str, Any]):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown {cls.__name__} parameters: {sorted(unknown)}")
    config = cls(**data)
    config.validate()
    return config


# =============================================================================
# Preset Configurations
# =============================================================================


PRESET_CONFIGS = {
    'default': {
        'reconstruction': {},
        'neighbors': {},
    },

    # Small local problems, fast local refinement
    'compact': {
        'reconstruction': {},
        'neighbors': {
            'max_views': 6,
            'worst_of_top': 2,
            'min_neighbors': 2,
        },
    },

    # Larger local problems and stricter seeds
    'wide': {
        'reconstruction': {
            'seed_min_score_fraction': 0.3,
            'min_common_features': 12,
        },
        'neighbors': {
            'max_views': 20,
            'worst_of_top': 4,
            'min_neighbors': 4,
        },
    },
}


def get_preset(name: str):
    """
    Get the configurations of a named preset.

    Args:
        name: One of PRESET_CONFIGS

    Returns:
        (ProjectiveReconstructionConfig, NeighborSelectionConfig)
    """
    if name not in PRESET_CONFIGS:
        raise ConfigurationError(
            f"Unknown preset '{name}'. Available: {list(PRESET_CONFIGS.keys())}")
    preset = PRESET_CONFIGS[name]
    return (ProjectiveReconstructionConfig.from_dict(preset['reconstruction']),
            NeighborSelectionConfig.from_dict(preset['neighbors']))

"""
Tests for configuration dataclasses and presets.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ProjectiveReconstruction.config import (
    PRESET_CONFIGS,
    NeighborSelectionConfig,
    ProjectiveReconstructionConfig,
    get_preset,
)
from ProjectiveReconstruction.core.exceptions import ConfigurationError
from ProjectiveReconstruction.algorithms.selection.neighbor_selection import SelectNeighborsAroundView
from ProjectiveReconstruction.algorithms.selection.seed_selection import SeedSelector


def test_defaults():
    recon = ProjectiveReconstructionConfig()
    neighbors = NeighborSelectionConfig()

    assert recon.seed_motions == 3
    assert recon.seed_min_score_fraction == pytest.approx(0.2)
    assert recon.min_common_features == 6
    assert (neighbors.max_views, neighbors.worst_of_top, neighbors.min_neighbors) == (10, 3, 2)

    recon.validate()
    neighbors.validate()


@pytest.mark.parametrize("kwargs", [
    {'seed_motions': 0},
    {'seed_min_score_fraction': -0.1},
    {'seed_min_score_fraction': 1.0},
    {'min_common_features': 0},
    {'max_valid_neighbors': 0},
])
def test_invalid_reconstruction_config(kwargs):
    with pytest.raises(ConfigurationError):
        ProjectiveReconstructionConfig(**kwargs).validate()


@pytest.mark.parametrize("kwargs", [
    {'max_views': 0},
    {'worst_of_top': 0},
    {'min_neighbors': -1},
])
def test_invalid_neighbor_config(kwargs):
    with pytest.raises(ConfigurationError):
        NeighborSelectionConfig(**kwargs).validate()
    with pytest.raises(ConfigurationError):
        SelectNeighborsAroundView(config=NeighborSelectionConfig(**kwargs))


def test_invalid_config_is_rejected_by_seed_selector():
    with pytest.raises(ConfigurationError):
        SeedSelector(config=ProjectiveReconstructionConfig(seed_motions=0))


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        NeighborSelectionConfig(max_views=0).validate()


def test_from_dict_round_trip():
    config = NeighborSelectionConfig(max_views=7, worst_of_top=2, min_neighbors=1)
    assert NeighborSelectionConfig.from_dict(config.to_dict()) == config


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ConfigurationError) as exc_info:
        ProjectiveReconstructionConfig.from_dict({'seed_motion': 2})
    assert 'seed_motion' in str(exc_info.value)


def test_from_dict_validates():
    with pytest.raises(ConfigurationError):
        NeighborSelectionConfig.from_dict({'max_views': -3})


@pytest.mark.parametrize("name", sorted(PRESET_CONFIGS))
def test_presets_are_valid(name):
    recon, neighbors = get_preset(name)
    assert isinstance(recon, ProjectiveReconstructionConfig)
    assert isinstance(neighbors, NeighborSelectionConfig)


def test_preset_values():
    _, compact = get_preset('compact')
    assert compact.max_views == 6

    recon, wide = get_preset('wide')
    assert recon.min_common_features == 12
    assert wide.min_neighbors == 4


def test_unknown_preset():
    with pytest.raises(ConfigurationError):
        get_preset('enormous')

"""
Scene providers.

Usage:
    from ProjectiveReconstruction.data.providers import MockSceneProvider, MockProjectiveSolver

    provider = MockSceneProvider(num_views=12, seed=42)
    solver = MockProjectiveSolver(provider)
"""

from .mock_provider import MockSceneProvider, MockProjectiveSolver

__all__ = [
    'MockSceneProvider',
    'MockProjectiveSolver',
]

"""
Pytest configuration and fixtures for Frog Geometry tests.
"""

import pytest
import torch

from frog_geometry.core import DEFAULT_DTYPE
from frog_geometry.engine import create_initial_state
from frog_geometry.spaces import EuclideanModel, HyperbolicModel, SphericalModel
from frog_geometry.utils import EngineConfig


@pytest.fixture
def config():
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def euclidean():
    return EuclideanModel()


@pytest.fixture
def hyperbolic():
    return HyperbolicModel()


@pytest.fixture
def spherical():
    return SphericalModel()


@pytest.fixture
def origin():
    """View origin (0, 0)."""
    return torch.zeros(2, dtype=DEFAULT_DTYPE)


@pytest.fixture
def point():
    """Build a float64 view point."""
    def _point(x, y):
        return torch.tensor([x, y], dtype=DEFAULT_DTYPE)
    return _point


@pytest.fixture
def euclidean_state(config):
    return create_initial_state("E", config)


@pytest.fixture
def hyperbolic_state(config):
    return create_initial_state("H", config)


@pytest.fixture
def spherical_state(config):
    return create_initial_state("S", config)


@pytest.fixture
def min_distance():
    """Smallest Euclidean distance from a point to the samples of a path."""
    def _min_distance(path, p):
        return float(torch.linalg.vector_norm(path - p, dim=-1).min())
    return _min_distance


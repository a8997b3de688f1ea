"""
Tests for model lookup and the model-independent metric functions.
"""

import math

import numpy as np
import pytest
import torch

from frog_geometry.core import DEFAULT_DTYPE, SpaceKind
from frog_geometry.spaces import (
    EuclideanModel,
    HyperbolicModel,
    SphericalModel,
    angle,
    available_spaces,
    distance,
    get_model,
    parse_space,
    path_length,
)
from frog_geometry.utils import EngineConfig


class TestRegistry:
    """Tests for resolving model identifiers."""

    @pytest.mark.parametrize("name,kind", [
        ("E", SpaceKind.EUCLIDEAN),
        ("euclidean", SpaceKind.EUCLIDEAN),
        ("h", SpaceKind.HYPERBOLIC),
        ("Poincare", SpaceKind.HYPERBOLIC),
        ("S", SpaceKind.SPHERICAL),
        (" sphere ", SpaceKind.SPHERICAL),
        (SpaceKind.SPHERICAL, SpaceKind.SPHERICAL),
    ])
    def test_parse(self, name, kind):
        assert parse_space(name) is kind

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown space"):
            parse_space("elliptic")

    def test_available_in_order(self):
        assert available_spaces() == [SpaceKind.EUCLIDEAN, SpaceKind.HYPERBOLIC, SpaceKind.SPHERICAL]

    def test_model_classes(self):
        assert isinstance(get_model("E"), EuclideanModel)
        assert isinstance(get_model("H"), HyperbolicModel)
        assert isinstance(get_model("S"), SphericalModel)

    def test_default_models_cached(self):
        assert get_model("H") is get_model(SpaceKind.HYPERBOLIC)

    def test_config_sample_counts(self):
        config = EngineConfig(hyperbolic_segment_samples=10, spherical_line_samples=40)
        hyperbolic = get_model("H", config)
        assert hyperbolic is not get_model("H")
        path = hyperbolic.segment(torch.tensor([0.5, 0.0]), torch.tensor([0.0, 0.5]))
        assert path.shape == (11, 2)
        sphere = get_model("S", config)
        line = sphere.line_through(torch.tensor([0.0, 0.0]), torch.tensor([0.5, 0.0]))
        assert line.shape == (41, 2)


class TestMetricFunctions:
    """Tests for distance, angle and path_length by identifier."""

    def test_distance_per_space(self):
        assert distance("E", [0, 0], [0.5, 0]) == pytest.approx(0.5)
        assert distance("H", [0, 0], [0.5, 0]) == pytest.approx(math.log(3))
        assert distance("S", [0, 0], [1, 0]) == pytest.approx(math.pi / 2)

    def test_accepts_numpy(self):
        a = np.array([0.1, 0.2])
        b = np.array([0.4, -0.2])
        assert distance("E", a, b) == pytest.approx(0.5)

    def test_hyperbolic_exceeds_euclidean(self):
        """Hyperbolic distance dominates twice the Euclidean one."""
        a, b = [0.2, 0.1], [-0.3, 0.4]
        assert distance("H", a, b) > 2 * distance("E", a, b)

    def test_angle(self):
        assert angle("E", [1, 0], [0, 0], [0, 1]) == pytest.approx(math.pi / 2)
        assert angle("S", [1, 0], [0, 0], [0, 1]) == pytest.approx(math.pi / 2)

    def test_path_length(self):
        path = torch.tensor([[0.0, 0.0], [3.0, 0.0], [3.0, 4.0]], dtype=DEFAULT_DTYPE)
        assert path_length("E", path) == pytest.approx(7.0)

    def test_path_length_single_point(self):
        assert path_length("H", torch.zeros(1, 2, dtype=DEFAULT_DTYPE)) == 0.0

    def test_path_length_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            path_length("E", torch.zeros(4, 3, dtype=DEFAULT_DTYPE))

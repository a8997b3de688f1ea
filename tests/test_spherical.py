"""
Tests for the hemisphere view of the unit sphere.
"""

import math

import pytest
import torch

from frog_geometry.core import DEFAULT_DTYPE, SpaceKind, UnsupportedConstructionError
from frog_geometry.spaces.conversion import lift_to_hemisphere
from frog_geometry.spaces.spherical import small_circle_3d, spherical_distance
from frog_geometry.utils.vector import dot, norm


def vec3(x, y, z):
    return torch.tensor([x, y, z], dtype=DEFAULT_DTYPE)


# =============================================================================
# Constructions
# =============================================================================

class TestSphericalSegment:
    """Tests for great-circle arcs."""

    def test_descriptor(self, spherical):
        assert spherical.kind is SpaceKind.SPHERICAL
        assert spherical.descriptor().title == "Space C"

    def test_endpoints_exact(self, spherical, point):
        p, q = point(0.0, 0.0), point(1.0, 0.0)
        path = spherical.segment(p, q)
        assert path.shape == (261, 2)
        assert torch.equal(path[0], p)
        assert torch.equal(path[-1], q)

    def test_samples_follow_great_circle(self, spherical, point):
        """Halfway from the pole to the equator the view point is (sin 45, 0)."""
        path = spherical.segment(point(0.0, 0.0), point(1.0, 0.0))
        assert torch.allclose(path[130], point(math.sqrt(0.5), 0.0), atol=1e-12)

    def test_stays_in_view_disk(self, spherical, point):
        path = spherical.segment(point(-0.7, 0.2), point(0.5, 0.6))
        assert bool((norm(path) <= 1 + 1e-12).all())

    def test_coincident_points(self, spherical, point):
        path = spherical.segment(point(0.2, 0.1), point(0.2, 0.1))
        assert path.shape == (2, 2)

    def test_antipodal_rim_points(self, spherical, point):
        """Opposite rim points span no unique great circle; only the endpoints come back."""
        p, q = point(1.0, 0.0), point(-1.0, 0.0)
        path = spherical.segment(p, q)
        assert torch.equal(path, torch.stack([p, q]))


class TestSphericalLine:
    """Tests for full great circles."""

    def test_meridian(self, spherical, origin, point):
        path = spherical.line_through(origin, point(1.0, 0.0))
        assert path.shape == (521, 2)
        assert torch.allclose(path[:, 1], torch.zeros(521, dtype=DEFAULT_DTYPE), atol=1e-12)

    def test_closed_and_starts_at_first_point(self, spherical, point):
        p = point(0.3, -0.2)
        path = spherical.line_through(p, point(-0.1, 0.5))
        assert torch.allclose(path[0], p, atol=1e-12)
        assert torch.equal(path[0], path[-1])

    def test_contains_second_point(self, spherical, point, min_distance):
        q = point(-0.1, 0.5)
        path = spherical.line_through(point(0.3, -0.2), q)
        assert min_distance(path, q) < 0.01

    def test_coincident_points_is_empty(self, spherical, point):
        assert spherical.line_through(point(0.4, 0.4), point(0.4, 0.4)).shape == (0, 2)


class TestSphericalCircle:
    """Tests for small circles."""

    def test_points_equidistant(self, spherical, point):
        center = point(0.3, 0.2)
        path = spherical.circle(center, 0.4)
        assert path.shape == (321, 2)
        for p in path[::32]:
            assert spherical_distance(center, p) == pytest.approx(0.4, abs=1e-9)

    def test_closed(self, spherical, origin):
        path = spherical.circle(origin, 0.5)
        assert torch.equal(path[0], path[-1])

    def test_small_circle_3d_on_sphere(self):
        points = small_circle_3d(vec3(0, 0, 1), 0.5, 16)
        assert torch.allclose(norm(points), torch.ones(17, dtype=DEFAULT_DTYPE))
        assert torch.allclose(points[:, 2], torch.full((17,), math.cos(0.5), dtype=DEFAULT_DTYPE))


class TestSphericalParallelAndPerpendicular:
    """Tests for parallels and perpendiculars on the sphere."""

    def test_parallel_unsupported(self, spherical, origin, point):
        with pytest.raises(UnsupportedConstructionError):
            spherical.parallel(origin, point(1.0, 0.0), point(0.0, 0.5))

    def test_perpendicular_through_pole(self, spherical, origin, point):
        path = spherical.perpendicular(origin, point(1.0, 0.0), origin)
        assert torch.allclose(path[:, 0], torch.zeros(path.shape[0], dtype=DEFAULT_DTYPE), atol=1e-12)

    def test_perpendicular_at_pole_of_base(self, spherical, origin, point):
        """From the pole of the equator every meridian is perpendicular."""
        path = spherical.perpendicular(point(1.0, 0.0), point(0.0, 1.0), origin)
        assert path.shape[0] > 2
        assert torch.allclose(path[0], origin, atol=1e-12)
        assert torch.allclose(path[:, 1], torch.zeros(path.shape[0], dtype=DEFAULT_DTYPE), atol=1e-12)

    def test_perpendicular_planes_orthogonal(self, spherical, point):
        base_p, base_q, through = point(0.5, 0.1), point(-0.2, 0.4), point(0.1, -0.6)
        path = spherical.perpendicular(base_p, base_q, through)
        n_base = torch.linalg.cross(lift_to_hemisphere(base_p), lift_to_hemisphere(base_q))
        # The plane through P and a nearby sample contains the base normal
        pole = lift_to_hemisphere(through)
        n_perp = torch.linalg.cross(pole, lift_to_hemisphere(path[10]))
        assert abs(float(dot(n_perp, n_base))) < 1e-6

    def test_perpendicular_undefined_base(self, spherical, point):
        path = spherical.perpendicular(point(0.2, 0.2), point(0.2, 0.2), point(0.0, 0.5))
        assert path.shape == (0, 2)


# =============================================================================
# Metrics
# =============================================================================

class TestSphericalMetrics:
    """Tests for distance and angle."""

    def test_pole_to_equator(self, spherical, origin, point):
        assert spherical.distance(origin, point(1.0, 0.0)) == pytest.approx(math.pi / 2)

    def test_zero_distance(self, spherical, point):
        assert spherical.distance(point(0.3, 0.3), point(0.3, 0.3)) == pytest.approx(0.0, abs=1e-7)

    def test_right_angle_at_pole(self, spherical, origin, point):
        assert spherical.angle(point(1.0, 0.0), origin, point(0.0, 1.0)) == pytest.approx(math.pi / 2)

    def test_octant_triangle(self, spherical, origin, point):
        """The octant triangle has three right angles."""
        triangle = spherical.triangle(origin, point(1.0, 0.0), point(0.0, 1.0))
        for angle in triangle.angles:
            assert angle == pytest.approx(math.pi / 2)
        assert triangle.angle_sum == pytest.approx(1.5 * math.pi)
        assert triangle.excess == pytest.approx(math.pi / 2)

    def test_excess_is_positive(self, spherical, point):
        triangle = spherical.triangle(point(0.1, 0.1), point(0.4, -0.2), point(-0.3, 0.5))
        assert triangle.excess > 0

    def test_validity(self, spherical, point):
        assert spherical.is_valid(point(1.0, 0.0))
        assert not spherical.is_valid(point(1.1, 0.0))
        assert torch.allclose(spherical.clamp(point(2.0, 0.0)), point(1.0, 0.0))


# =============================================================================
# Frog Motion
# =============================================================================

class TestSphericalMotion:
    """Tests for frog motion on the sphere."""

    def test_initial_pose(self, spherical, origin, point):
        pose = spherical.initial_pose()
        assert torch.allclose(spherical.position(pose), origin)
        assert torch.allclose(spherical.heading(pose), point(1.0, 0.0))

    def test_quarter_advance(self, spherical, point):
        path, pose = spherical.advance(spherical.initial_pose(), math.pi / 2)
        assert path.shape == (261, 2)
        assert torch.allclose(pose.position, vec3(1, 0, 0), atol=1e-12)
        assert torch.allclose(pose.tangent, vec3(0, 0, -1), atol=1e-12)
        assert torch.allclose(path[-1], point(1.0, 0.0), atol=1e-12)

    def test_advance_keeps_unit_vectors(self, spherical):
        _, pose = spherical.advance(spherical.initial_pose(), 2.3)
        assert float(norm(pose.position)) == pytest.approx(1.0)
        assert float(dot(pose.position, pose.tangent)) == pytest.approx(0.0, abs=1e-12)

    def test_turn_in_two_steps(self, spherical):
        """Two half turns compose to one quarter turn."""
        pose = spherical.initial_pose()
        half = spherical.turn(pose, 0.0, math.pi / 2, 0.0, 0.5)
        full = spherical.turn(half, 0.0, math.pi / 2, 0.5, 1.0)
        assert torch.allclose(full.tangent, vec3(0, 1, 0), atol=1e-12)
        assert torch.allclose(full.position, pose.position)

    def test_circle_trace(self, spherical):
        path, pose = spherical.circle_trace(spherical.initial_pose(), 0.5)
        assert torch.allclose(norm(path), torch.full((321,), math.sin(0.5), dtype=DEFAULT_DTYPE))
        assert float(dot(pose.position, pose.tangent)) == pytest.approx(0.0, abs=1e-12)
        assert torch.allclose(spherical.position(pose), path[-1])

    def test_follow_lifts_point(self, spherical, point):
        pose = spherical.follow(spherical.initial_pose(), point(0.6, 0.0))
        assert torch.allclose(pose.position, vec3(0.6, 0, 0.8))
        assert float(dot(pose.position, pose.tangent)) == pytest.approx(0.0, abs=1e-12)

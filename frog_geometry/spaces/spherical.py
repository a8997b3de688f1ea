"""
Unit sphere viewed through the upper hemisphere.

A view point p with |p| <= 1 is the orthographic shadow of the sphere
point (p, sqrt(1 - |p|^2)). Geodesics are great circles, computed in 3-D
and projected back by dropping z. Segments keep to the visible (upper)
hemisphere, full lines are drawn as closed great circles whose back half
overlaps the front half in the view.

Metric: x^2 + y^2 + z^2 = 1 ; ds^2 = dtheta^2 + sin^2(theta) dphi^2
"""

import logging
import math
from typing import Optional, Tuple

import torch

from ..core.base import SpaceModel
from ..core.constants import (
    DEFAULT_DTYPE,
    DEFAULT_EPS,
    DIRECTION_EPS,
    HEMISPHERE_Z_EPS,
    SPHERICAL_ADVANCE_SAMPLES,
    SPHERICAL_CIRCLE_SAMPLES,
    SPHERICAL_LINE_SAMPLES,
    SPHERICAL_SEGMENT_SAMPLES,
)
from ..core.exceptions import UnsupportedConstructionError
from ..core.types import Path, Point, SpaceKind, SphericalPose, Vector3, empty_path
from ..utils.rotation import great_circle_basis, sample_great_circle, slerp, tangent_basis
from ..utils.vector import as_point, clamp_unit, cross3, dot, norm, normalize
from .conversion import lift_to_hemisphere, project_to_view, retangent, sphere_advance, sphere_turn

logger = logging.getLogger(__name__)


# =============================================================================
# Great and Small Circles
# =============================================================================

def spherical_segment(p: Point, q: Point, steps: int = SPHERICAL_SEGMENT_SAMPLES) -> Path:
    """
    Great-circle arc from p to q, restricted to the upper hemisphere.

    Both points are lifted, the shorter arc is sampled by slerp and
    samples with z < -1e-10 are dropped. The first and last points are
    forced to p and q.

    Returns:
        Path of shape (N, 2); [p, q] when the lifted points coincide
        or are antipodal
    """
    p, q = as_point(p), as_point(q)
    a = lift_to_hemisphere(p)
    b = lift_to_hemisphere(q)

    omega = math.acos(float(clamp_unit(dot(a, b))))
    if omega < DIRECTION_EPS:
        return torch.stack([p, q])
    # Antipodal points on the rim: no unique great circle
    if math.sin(omega) < DEFAULT_EPS:
        return torch.stack([p, q])

    t = torch.linspace(0.0, 1.0, steps + 1, dtype=DEFAULT_DTYPE)
    samples = slerp(a, b, t)
    samples = samples[samples[:, 2] >= -HEMISPHERE_Z_EPS]
    if samples.shape[0] < 2:
        return torch.stack([p, q])

    path = project_to_view(samples)
    path[0] = p
    path[-1] = q
    return path


def sample_closed_great_circle(normal: Vector3, anchor: Vector3, steps: int) -> Path:
    """
    Project the whole great circle orthogonal to ``normal``, starting at ``anchor``.

    Both hemispheres are kept, so the view curve is a closed ellipse
    inscribed in the unit circle.

    Returns:
        Path of shape (steps + 1, 2) with first == last
    """
    u, v = great_circle_basis(normalize(normal), anchor)
    angles = torch.linspace(0.0, 2.0 * math.pi, steps + 1, dtype=DEFAULT_DTYPE)
    path = project_to_view(sample_great_circle(u, v, angles))
    path[-1] = path[0]
    return path


def spherical_line(p: Point, q: Point, steps: int = SPHERICAL_LINE_SAMPLES) -> Path:
    """
    Full great circle through p and q.

    Returns:
        Closed path starting at p; empty when p and q coincide; the
        hemisphere segment when the lifted points are antipodal
    """
    p, q = as_point(p), as_point(q)
    a = lift_to_hemisphere(p)
    b = lift_to_hemisphere(q)

    if float(norm(a - b)) < DIRECTION_EPS:
        logger.debug("Great circle through coincident points %s is undefined", p.tolist())
        return empty_path()

    n = cross3(a, b)
    if float(norm(n)) < DEFAULT_EPS:
        return spherical_segment(p, q, steps)
    return sample_closed_great_circle(n, a, steps)


def small_circle_3d(center: Vector3, radius: float, steps: int) -> torch.Tensor:
    """
    Points at angular distance ``radius`` from a unit vector.

    x(a) = c cos(r) + (u cos(a) + v sin(a)) sin(r), with (u, v) the
    tangent basis at c.

    Returns:
        Unit vectors of shape (steps + 1, 3) with first == last
    """
    u, v = tangent_basis(center)
    angles = torch.linspace(0.0, 2.0 * math.pi, steps + 1, dtype=DEFAULT_DTYPE).unsqueeze(-1)
    ring = u * torch.cos(angles) + v * torch.sin(angles)
    points = normalize(center * math.cos(radius) + ring * math.sin(radius))
    points[-1] = points[0]
    return points


def spherical_circle(center: Point, radius: float, steps: int = SPHERICAL_CIRCLE_SAMPLES) -> Path:
    """Small circle of angular radius ``radius`` around the lifted center, projected."""
    return project_to_view(small_circle_3d(lift_to_hemisphere(as_point(center)), radius, steps))


def spherical_perpendicular(
    base_p: Point,
    base_q: Point,
    through: Point,
    steps: int = SPHERICAL_LINE_SAMPLES,
) -> Path:
    """
    Great circle through a point perpendicular to the great circle (base_p, base_q).

    The plane normal is P x n_base, so the plane contains P and is
    orthogonal to the base plane. When P is the pole of the base circle
    every great circle through P is perpendicular; the plane normal then
    falls back to P x x_hat, then P x y_hat.

    Returns:
        Closed path starting at P, or an empty path when the base circle
        is undefined
    """
    a = lift_to_hemisphere(as_point(base_p))
    b = lift_to_hemisphere(as_point(base_q))
    n_base = cross3(a, b)
    if float(norm(n_base)) < DEFAULT_EPS:
        logger.debug("Perpendicular to an undefined great circle requested")
        return empty_path()

    pole = lift_to_hemisphere(as_point(through))
    n_perp = cross3(pole, normalize(n_base))
    for axis in ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0)):
        if float(norm(n_perp)) >= DEFAULT_EPS:
            break
        n_perp = cross3(pole, torch.tensor(axis, dtype=DEFAULT_DTYPE))

    return sample_closed_great_circle(n_perp, pole, steps)


def spherical_distance(a: Point, b: Point) -> float:
    """Great-circle distance arccos(<A, B>) between the lifted points."""
    la = lift_to_hemisphere(as_point(a))
    lb = lift_to_hemisphere(as_point(b))
    return math.acos(float(clamp_unit(dot(la, lb))))


def spherical_angle(a: Point, b: Point, c: Point) -> float:
    """
    Angle at b between the great circles toward a and c.

    The lifted neighbours are projected onto the tangent plane at the
    lifted b; the angle is taken between the two projections.
    """
    la = lift_to_hemisphere(as_point(a))
    lb = lift_to_hemisphere(as_point(b))
    lc = lift_to_hemisphere(as_point(c))

    ta = la - lb * dot(la, lb)
    tc = lc - lb * dot(lc, lb)
    if float(norm(ta)) < DIRECTION_EPS or float(norm(tc)) < DIRECTION_EPS:
        return 0.0
    return math.acos(float(clamp_unit(dot(normalize(ta), normalize(tc)))))


# =============================================================================
# Model
# =============================================================================

class SphericalModel(SpaceModel):
    """The unit sphere seen from above: x^2 + y^2 + z^2 = 1."""

    kind = SpaceKind.SPHERICAL
    title = "Space C"
    formula = "x²+y²+z²=1  ;  ds² = dθ² + sin²(θ)dφ²"

    def __init__(
        self,
        segment_samples: int = SPHERICAL_SEGMENT_SAMPLES,
        advance_samples: int = SPHERICAL_ADVANCE_SAMPLES,
        line_samples: int = SPHERICAL_LINE_SAMPLES,
        circle_samples: int = SPHERICAL_CIRCLE_SAMPLES,
    ):
        self.segment_samples = segment_samples
        self.advance_samples = advance_samples
        self.line_samples = line_samples
        self.circle_samples = circle_samples

    def is_valid(self, p: Point) -> bool:
        return float(norm(as_point(p))) <= 1.0 + DEFAULT_EPS

    def clamp(self, p: Point) -> Point:
        p = as_point(p)
        if float(norm(p)) > 1.0:
            return normalize(p)
        return p

    def segment(self, p: Point, q: Point, steps: Optional[int] = None) -> Path:
        return spherical_segment(p, q, steps or self.segment_samples)

    def line_through(self, p: Point, q: Point, steps: Optional[int] = None) -> Path:
        return spherical_line(p, q, steps or self.line_samples)

    def circle(self, center: Point, radius: float, steps: Optional[int] = None) -> Path:
        return spherical_circle(center, radius, steps or self.circle_samples)

    def parallel(
        self,
        base_p: Point,
        base_q: Point,
        through: Point,
        which_end: int = 0,
        steps: Optional[int] = None,
    ) -> Path:
        raise UnsupportedConstructionError("Any two great circles meet: no parallels exist on the sphere")

    def perpendicular(
        self,
        base_p: Point,
        base_q: Point,
        through: Point,
        steps: Optional[int] = None,
    ) -> Path:
        return spherical_perpendicular(base_p, base_q, through, steps or self.line_samples)

    def distance(self, a: Point, b: Point) -> float:
        return spherical_distance(a, b)

    def angle(self, a: Point, b: Point, c: Point) -> float:
        return spherical_angle(a, b, c)

    # -------------------------------------------------------------------------
    # Frog motion
    # -------------------------------------------------------------------------

    def initial_pose(self) -> SphericalPose:
        return SphericalPose(
            torch.tensor([0.0, 0.0, 1.0], dtype=DEFAULT_DTYPE),
            torch.tensor([1.0, 0.0, 0.0], dtype=DEFAULT_DTYPE),
        )

    def advance(self, pose: SphericalPose, distance: float, steps: Optional[int] = None) -> Tuple[Path, SphericalPose]:
        n = steps or self.advance_samples
        arcs = torch.linspace(0.0, distance, n + 1, dtype=DEFAULT_DTYPE).unsqueeze(-1)
        samples = normalize(pose.position * torch.cos(arcs) + pose.tangent * torch.sin(arcs))
        end, tangent = sphere_advance(pose.position, pose.tangent, distance)
        return project_to_view(samples), SphericalPose(end, tangent)

    def circle_trace(self, pose: SphericalPose, radius: float, steps: Optional[int] = None) -> Tuple[Path, SphericalPose]:
        # Centered on the 3-D position so a frog on the far side is not mirrored
        points = small_circle_3d(pose.position, radius, steps or self.circle_samples)
        end = points[-1].clone()
        return project_to_view(points), SphericalPose(end, retangent(end, pose.tangent))

    def position(self, pose: SphericalPose) -> Point:
        return project_to_view(pose.position)

    def heading(self, pose: SphericalPose) -> Point:
        return normalize(project_to_view(pose.tangent))

    def follow(self, pose: SphericalPose, view_point: Point) -> SphericalPose:
        lifted = lift_to_hemisphere(view_point)
        return SphericalPose(lifted, retangent(lifted, pose.tangent))

    def turn(self, pose: SphericalPose, start: float, delta: float, u_prev: float, u: float) -> SphericalPose:
        tangent = sphere_turn(pose.position, pose.tangent, delta * (u - u_prev))
        return SphericalPose(pose.position, tangent)

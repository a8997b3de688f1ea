"""
Euclidean plane model.

View coordinates are the intrinsic coordinates, geodesics are straight
lines and every construction is plain vector algebra.
"""

import logging
import math
from typing import Optional, Tuple

import torch

from ..core.base import SpaceModel
from ..core.constants import (
    DEFAULT_DTYPE,
    DIRECTION_EPS,
    EUCLIDEAN_CIRCLE_SAMPLES,
    EUCLIDEAN_LINE_EXTENT,
)
from ..core.types import Path, PlanarPose, Point, SpaceKind, empty_path
from ..utils.vector import as_point, clamp_unit, dot, norm, normalize, perp, unit_from_angle

logger = logging.getLogger(__name__)


def sample_circle(center: Point, radius: float, steps: int) -> Path:
    """
    Uniformly sample a closed Euclidean circle, starting at angle 0.

    Args:
        center: Circle center of shape (2,)
        radius: Euclidean radius
        steps: Number of arc subdivisions (steps + 1 points, first == last)

    Returns:
        Path of shape (steps + 1, 2)
    """
    angles = torch.linspace(0.0, 2.0 * math.pi, steps + 1, dtype=DEFAULT_DTYPE)
    offsets = torch.stack([torch.cos(angles), torch.sin(angles)], dim=-1) * radius
    path = center + offsets
    # Close exactly despite rounding in cos/sin(2 pi)
    path[-1] = path[0]
    return path


def euclidean_angle(a: Point, b: Point, c: Point) -> float:
    """
    Angle at b between the directions to a and c, in [0, pi].

    Returns 0.0 when a or c coincides with b.
    """
    u = a - b
    v = c - b
    if float(norm(u)) < DIRECTION_EPS or float(norm(v)) < DIRECTION_EPS:
        return 0.0
    return float(torch.acos(clamp_unit(dot(normalize(u), normalize(v)))))


class EuclideanModel(SpaceModel):
    """The flat plane: ds^2 = dx^2 + dy^2."""

    kind = SpaceKind.EUCLIDEAN
    title = "Space A"
    formula = "ds² = dx² + dy²"

    def __init__(
        self,
        line_extent: float = EUCLIDEAN_LINE_EXTENT,
        circle_samples: int = EUCLIDEAN_CIRCLE_SAMPLES,
    ):
        self.line_extent = line_extent
        self.circle_samples = circle_samples

    def is_valid(self, p: Point) -> bool:
        return bool(torch.isfinite(as_point(p)).all())

    # -------------------------------------------------------------------------
    # Constructions
    # -------------------------------------------------------------------------

    def segment(self, p: Point, q: Point, steps: Optional[int] = None) -> Path:
        return torch.stack([as_point(p), as_point(q)])

    def _line(self, anchor: Point, direction: Point) -> Path:
        if float(norm(direction)) < DIRECTION_EPS:
            logger.debug("Line with zero-length direction is undefined")
            return empty_path()
        u = normalize(direction)
        return torch.stack([anchor - u * self.line_extent, anchor + u * self.line_extent])

    def line_through(self, p: Point, q: Point, steps: Optional[int] = None) -> Path:
        p, q = as_point(p), as_point(q)
        return self._line(p, q - p)

    def circle(self, center: Point, radius: float, steps: Optional[int] = None) -> Path:
        return sample_circle(as_point(center), radius, steps or self.circle_samples)

    def parallel(
        self,
        base_p: Point,
        base_q: Point,
        through: Point,
        which_end: int = 0,
        steps: Optional[int] = None,
    ) -> Path:
        # There is a single parallel, ``which_end`` has no effect
        base_p, base_q = as_point(base_p), as_point(base_q)
        return self._line(as_point(through), base_q - base_p)

    def perpendicular(
        self,
        base_p: Point,
        base_q: Point,
        through: Point,
        steps: Optional[int] = None,
    ) -> Path:
        base_p, base_q = as_point(base_p), as_point(base_q)
        return self._line(as_point(through), perp(base_q - base_p))

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def distance(self, a: Point, b: Point) -> float:
        return float(norm(as_point(a) - as_point(b)))

    def angle(self, a: Point, b: Point, c: Point) -> float:
        return euclidean_angle(as_point(a), as_point(b), as_point(c))

    # -------------------------------------------------------------------------
    # Frog motion
    # -------------------------------------------------------------------------

    def initial_pose(self) -> PlanarPose:
        return PlanarPose(torch.zeros(2, dtype=DEFAULT_DTYPE), 0.0)

    def advance(self, pose: PlanarPose, distance: float, steps: Optional[int] = None) -> Tuple[Path, PlanarPose]:
        start = pose.position
        end = start + unit_from_angle(pose.heading) * distance
        return torch.stack([start, end]), PlanarPose(end, pose.heading)

    def circle_trace(self, pose: PlanarPose, radius: float, steps: Optional[int] = None) -> Tuple[Path, PlanarPose]:
        path = self.circle(pose.position, radius, steps)
        return path, PlanarPose(path[-1].clone(), pose.heading)

    def position(self, pose: PlanarPose) -> Point:
        return pose.position.clone()

    def heading(self, pose: PlanarPose) -> Point:
        return unit_from_angle(pose.heading)

    def follow(self, pose: PlanarPose, view_point: Point) -> PlanarPose:
        return PlanarPose(view_point.clone(), pose.heading)

    def turn(self, pose: PlanarPose, start: float, delta: float, u_prev: float, u: float) -> PlanarPose:
        return PlanarPose(pose.position, start + delta * u)

"""
Hyperbolic plane in the Poincare disk model.

Geodesics are diameters of the unit disk or arcs of circles orthogonal to
the unit circle. A circle with center c and radius r is orthogonal to the
unit circle iff |c|^2 = 1 + r^2, so a circle through an interior point p
satisfies the power-of-a-point identity

    c . p = (|p|^2 + 1) / 2

Two such identities (two points, or a point and an ideal point E with
c . E = 1) give a 2x2 linear system for the center.

Metric: ds^2 = 4 (dx^2 + dy^2) / (1 - x^2 - y^2)^2
"""

import logging
import math
from typing import List, NamedTuple, Optional, Tuple

import torch

from ..core.base import SpaceModel
from ..core.constants import (
    COLLINEAR_EPS,
    DEFAULT_DTYPE,
    DEFAULT_EPS,
    DIRECTION_EPS,
    DISK_TRIM_TOLERANCE,
    HYPERBOLIC_ADVANCE_SAMPLES,
    HYPERBOLIC_CIRCLE_SAMPLES,
    HYPERBOLIC_LINE_SAMPLES,
    HYPERBOLIC_SEGMENT_SAMPLES,
    PERPENDICULAR_REFINE_ITERATIONS,
    PERPENDICULAR_REFINE_STEP_DEG,
    PERPENDICULAR_SEARCH_SAMPLES,
)
from ..core.types import Path, PlanarPose, Point, SpaceKind, empty_path
from ..utils.vector import as_point, cross2, dot, norm, normalize, perp, unit_from_angle, wrap_angle
from .conversion import clamp_to_disk, hyperbolic_step
from .euclidean import euclidean_angle, sample_circle

logger = logging.getLogger(__name__)


class OrthoCircle(NamedTuple):
    """A circle in the view plane (usually orthogonal to the unit circle)."""
    cx: float
    cy: float
    r: float

    def angle_of(self, p: Point) -> float:
        """Polar angle of p seen from the circle center."""
        return math.atan2(float(p[1]) - self.cy, float(p[0]) - self.cx)

    def center(self) -> torch.Tensor:
        return torch.tensor([self.cx, self.cy], dtype=DEFAULT_DTYPE)


# =============================================================================
# Circle Helpers
# =============================================================================

def is_collinear_with_origin(p: Point, q: Point, eps: float = COLLINEAR_EPS) -> bool:
    """Whether p, q and the origin lie on one line (|p x q| < eps)."""
    return abs(float(cross2(p, q))) < eps


def orthogonal_circle_through(p: Point, q: Point) -> Optional[OrthoCircle]:
    """
    Circle orthogonal to the unit circle passing through p and q.

    Solves c . p = (|p|^2 + 1) / 2 and c . q = (|q|^2 + 1) / 2.

    Returns:
        The circle, or None when p, q and the origin are collinear (the
        geodesic is a diameter) or the solution is degenerate (r^2 <= 0)
    """
    px, py = float(p[0]), float(p[1])
    qx, qy = float(q[0]), float(q[1])

    det = px * qy - py * qx
    if abs(det) < COLLINEAR_EPS:
        return None

    b1 = (px * px + py * py + 1) / 2
    b2 = (qx * qx + qy * qy + 1) / 2
    cx = (b1 * qy - py * b2) / det
    cy = (px * b2 - b1 * qx) / det

    r2 = cx * cx + cy * cy - 1
    if r2 <= DEFAULT_EPS:
        return None
    return OrthoCircle(cx, cy, math.sqrt(r2))


def orthogonal_circle_through_ideal(ideal: Point, p: Point) -> Optional[OrthoCircle]:
    """
    Circle orthogonal to the unit circle through an ideal point and p.

    Solves c . E = 1 and c . p = (|p|^2 + 1) / 2.

    Returns:
        The circle, or None when E, p and the origin are collinear or the
        solution is degenerate
    """
    ex, ey = float(ideal[0]), float(ideal[1])
    px, py = float(p[0]), float(p[1])

    det = ex * py - ey * px
    if abs(det) < DEFAULT_EPS:
        return None

    rhs = (px * px + py * py + 1) / 2
    cx = (py - ey * rhs) / det
    cy = (ex * rhs - px) / det

    r2 = cx * cx + cy * cy - 1
    if r2 <= DEFAULT_EPS:
        return None
    return OrthoCircle(cx, cy, math.sqrt(r2))


def orthogonal_circle_from_direction(p: Point, u: Point) -> Optional[OrthoCircle]:
    """
    Circle orthogonal to the unit circle through p with tangent u at p.

    The center is p + t n with n the unit normal of u; orthogonality
    |c|^2 = 1 + t^2 gives t = (1 - |p|^2) / (2 p . n).

    Returns:
        The circle, or None when the geodesic is a diameter (p . n ~ 0)
        or the center falls inside the disk
    """
    n = perp(u)
    pn = float(dot(p, n))
    if abs(pn) < DEFAULT_EPS:
        return None

    t = (1 - float(dot(p, p))) / (2 * pn)
    c = p + t * n
    cx, cy = float(c[0]), float(c[1])
    if cx * cx + cy * cy <= 1 + 1e-9:
        return None
    return OrthoCircle(cx, cy, abs(t))


def circle_circle_intersections(a: OrthoCircle, b: OrthoCircle) -> List[torch.Tensor]:
    """
    Intersection points of two circles.

    Returns:
        Zero, one (tangent circles) or two points of shape (2,)
    """
    dx = b.cx - a.cx
    dy = b.cy - a.cy
    d = math.hypot(dx, dy)
    if d < DEFAULT_EPS:
        return []

    # Too far apart or one inside the other
    if d > a.r + b.r + 1e-9:
        return []
    if d < abs(a.r - b.r) - 1e-9:
        return []

    along = (a.r * a.r - b.r * b.r + d * d) / (2 * d)
    h2 = a.r * a.r - along * along
    if h2 < -1e-9:
        return []
    h = math.sqrt(max(0.0, h2))

    xm = a.cx + along * dx / d
    ym = a.cy + along * dy / d
    rx = -dy * (h / d)
    ry = dx * (h / d)

    p1 = torch.tensor([xm + rx, ym + ry], dtype=DEFAULT_DTYPE)
    p2 = torch.tensor([xm - rx, ym - ry], dtype=DEFAULT_DTYPE)
    if math.hypot(2 * rx, 2 * ry) < 1e-9:
        return [p1]
    return [p1, p2]


UNIT_CIRCLE = OrthoCircle(0.0, 0.0, 1.0)


def ideal_endpoints(circle: OrthoCircle) -> List[torch.Tensor]:
    """Intersections of a circle with the unit circle (the ideal points)."""
    return circle_circle_intersections(circle, UNIT_CIRCLE)


def arc_contains(angle: float, start: float, delta: float) -> bool:
    """
    Whether ``angle`` lies on the arc from ``start`` sweeping ``delta``.

    Angles are compared relative to ``start`` after wrapping into
    (-pi, pi], so the test is independent of where the +-pi branch cut
    falls.
    """
    x = wrap_angle(angle - start)
    span = wrap_angle(delta)
    if span >= 0:
        return -1e-9 <= x <= span + 1e-9
    return span - 1e-9 <= x <= 1e-9


def sample_arc(
    circle: OrthoCircle,
    a_start: float,
    a_end: float,
    must_contain: float,
    steps: int,
) -> Path:
    """
    Sample the arc from a_start to a_end that contains ``must_contain``.

    Of the two arcs joining the end angles, the short one is used when it
    contains ``must_contain`` and the complementary one otherwise.

    Args:
        circle: Carrier circle
        a_start: Start angle around the circle center
        a_end: End angle around the circle center
        must_contain: Angle that must lie on the sampled arc
        steps: Number of subdivisions (steps + 1 points)

    Returns:
        Path of shape (steps + 1, 2)
    """
    d = wrap_angle(a_end - a_start)
    d_alt = d - math.copysign(2 * math.pi, d if d != 0 else 1.0)
    sweep = d if arc_contains(must_contain, a_start, d) else d_alt

    t = torch.linspace(0.0, 1.0, steps + 1, dtype=DEFAULT_DTYPE)
    angles = a_start + sweep * t
    return torch.stack([
        circle.cx + circle.r * torch.cos(angles),
        circle.cy + circle.r * torch.sin(angles),
    ], dim=-1)


def _arc_between_ideal_points(circle: OrthoCircle, through: Point, steps: int) -> Path:
    """Arc of ``circle`` between its two ideal points, passing through ``through``."""
    ends = ideal_endpoints(circle)
    if len(ends) < 2:
        logger.debug("Circle %s does not cross the unit circle twice", circle)
        return empty_path()
    return sample_arc(
        circle,
        circle.angle_of(ends[0]),
        circle.angle_of(ends[1]),
        circle.angle_of(through),
        steps,
    )


def _trim_to_disk(path: Path) -> Path:
    """Keep the samples inside the closed unit disk (with tolerance)."""
    inside = dot(path, path) <= 1 + DISK_TRIM_TOLERANCE
    trimmed = path[inside]
    return trimmed if trimmed.shape[0] >= 2 else path


def _diameter(direction: Point, forward: Optional[Point] = None) -> Path:
    """Diameter along ``direction``, oriented along ``forward`` when given."""
    u = normalize(direction)
    if forward is not None and float(dot(u, forward)) < 0:
        u = -u
    return torch.stack([-u, u])


# =============================================================================
# Constructions
# =============================================================================

def hyperbolic_segment(p: Point, q: Point, steps: int = HYPERBOLIC_SEGMENT_SAMPLES) -> Path:
    """
    Geodesic segment from p to q in the Poincare disk.

    Returns exactly [p, q] when p, q and the origin are collinear (the
    geodesic is a piece of a diameter) or when no orthogonal circle
    exists. Otherwise the arc of the orthogonal circle with the exact
    endpoints p and q.
    """
    p, q = as_point(p), as_point(q)
    if is_collinear_with_origin(p, q):
        return torch.stack([p, q])

    circle = orthogonal_circle_through(p, q)
    if circle is None:
        logger.debug("No orthogonal circle through %s, %s; using the chord", p.tolist(), q.tolist())
        return torch.stack([p, q])

    a_p = circle.angle_of(p)
    path = clamp_to_disk(sample_arc(circle, a_p, circle.angle_of(q), a_p, steps))
    path[0] = p
    path[-1] = q
    return path


def hyperbolic_line(p: Point, q: Point, steps: int = HYPERBOLIC_LINE_SAMPLES) -> Path:
    """
    Full geodesic through p and q, between its two ideal endpoints.

    Returns:
        Path from one ideal point to the other (oriented from p toward q
        for diameters), or an empty path when p and q coincide
    """
    p, q = as_point(p), as_point(q)
    if float(norm(q - p)) < DIRECTION_EPS:
        logger.debug("Line through coincident points %s is undefined", p.tolist())
        return empty_path()

    if is_collinear_with_origin(p, q):
        anchor = p if float(norm(p)) > DIRECTION_EPS else q
        return _diameter(anchor, forward=q - p)

    circle = orthogonal_circle_through(p, q)
    if circle is None:
        return torch.stack([p, q])

    path = _arc_between_ideal_points(circle, p, steps)
    if path.shape[0] < 2:
        return torch.stack([p, q])
    return _trim_to_disk(path)


def euclidean_radius(center: Point, radius: float) -> float:
    """
    Euclidean radius of the disk drawing of a hyperbolic circle.

    rho = tanh(r/2) (1 - |p|^2) / (1 - |p|^2 tanh(r/2)^2)
    """
    p2 = float(dot(center, center))
    t = math.tanh(abs(radius) / 2)
    return t * (1 - p2) / (1 - p2 * t * t)


def hyperbolic_circle(center: Point, radius: float, steps: int = HYPERBOLIC_CIRCLE_SAMPLES) -> Path:
    """
    Circle of hyperbolic radius ``radius`` drawn around ``center``.

    The drawing is a Euclidean circle of radius rho centered at the view
    point itself (not at the circle's Euclidean center), clamped into
    the disk.
    """
    center = clamp_to_disk(as_point(center))
    rho = euclidean_radius(center, radius)
    return clamp_to_disk(sample_circle(center, rho, steps))


def hyperbolic_parallel(
    base_p: Point,
    base_q: Point,
    through: Point,
    which_end: int = 0,
    steps: int = HYPERBOLIC_LINE_SAMPLES,
) -> Path:
    """
    Limiting parallel through a point, sharing one ideal endpoint with a line.

    Every line has two ideal endpoints, hence two limiting parallels
    through an external point; ``which_end`` picks the first (0) or last
    (1) endpoint of hyperbolic_line(base_p, base_q).

    Returns:
        Arc from the shared ideal point E to the parallel's other ideal
        point through ``through``; the diameter through E when E and the
        point are collinear with the origin; empty when the base line is
        undefined or no orthogonal circle exists

    Raises:
        ValueError: If which_end is not 0 or 1
    """
    if which_end not in (0, 1):
        raise ValueError(f"which_end should be 0 or 1, got {which_end}")

    through = as_point(through)
    base = hyperbolic_line(base_p, base_q, steps)
    if base.shape[0] < 2:
        return empty_path()

    ideal = base[0] if which_end == 0 else base[-1]

    circle = orthogonal_circle_through_ideal(ideal, through)
    if circle is None:
        if abs(float(cross2(ideal, through))) < DEFAULT_EPS:
            return _diameter(-ideal, forward=-ideal)
        logger.debug("No parallel through %s toward %s", through.tolist(), ideal.tolist())
        return empty_path()

    ends = ideal_endpoints(circle)
    if len(ends) < 2:
        return empty_path()

    # The other ideal point is the intersection farther from E
    other = max(ends, key=lambda e: float(norm(e - ideal)))
    return sample_arc(
        circle,
        circle.angle_of(ideal),
        circle.angle_of(other),
        circle.angle_of(through),
        steps,
    )


def _orthogonality_residual(candidate: OrthoCircle, base: Optional[OrthoCircle], base_normal: Optional[Point]) -> float:
    """
    |cos| of the angle at which a candidate geodesic circle crosses the base.

    Against a base circle: | |c1 - c2|^2 - r1^2 - r2^2 | / (2 r1 r2).
    Against a base diameter: distance of the candidate center from the
    diameter's line over the candidate radius, | c . n | / r1.

    Zero means a right angle; values above 1 mean the circles miss.
    """
    if base is not None:
        dcx = candidate.cx - base.cx
        dcy = candidate.cy - base.cy
        power = dcx * dcx + dcy * dcy - (candidate.r * candidate.r + base.r * base.r)
        return abs(power) / (2 * candidate.r * base.r)
    return abs(candidate.cx * float(base_normal[0]) + candidate.cy * float(base_normal[1])) / candidate.r


def hyperbolic_perpendicular(
    base_p: Point,
    base_q: Point,
    through: Point,
    steps: int = HYPERBOLIC_LINE_SAMPLES,
    search_samples: int = PERPENDICULAR_SEARCH_SAMPLES,
    refine_iterations: int = PERPENDICULAR_REFINE_ITERATIONS,
) -> Path:
    """
    Geodesic through a point perpendicular to the line (base_p, base_q).

    Diameter answers (the point at the origin, or the diameter through
    the point already orthogonal to the base) are returned directly.
    Otherwise the tangent direction at the point is found by a bounded
    search: a coarse sweep of ``search_samples`` directions followed by
    ``refine_iterations`` rounds of local refinement with shrinking step
    (10 deg, 5 deg, ...), minimizing the orthogonality residual. The
    winning circle is sampled between its ideal endpoints.

    Returns:
        Path between the perpendicular's ideal endpoints, or an empty
        path when the base line is undefined or no candidate exists
    """
    base_p, base_q, through = as_point(base_p), as_point(base_q), as_point(through)
    if float(norm(base_q - base_p)) < DIRECTION_EPS:
        logger.debug("Perpendicular to an undefined line requested")
        return empty_path()

    base_circle: Optional[OrthoCircle] = None
    base_normal: Optional[Point] = None
    if is_collinear_with_origin(base_p, base_q):
        base_dir = normalize(base_q - base_p)
        base_normal = perp(base_dir)
    else:
        base_circle = orthogonal_circle_through(base_p, base_q)
        if base_circle is None:
            logger.debug("Base line has no orthogonal circle; perpendicular impossible")
            return empty_path()

    # Geodesics through the origin are all diameters
    if float(norm(through)) < DIRECTION_EPS:
        if base_circle is not None:
            return _diameter(base_circle.center())
        return _diameter(base_normal)

    # The diameter through the point may itself be the answer
    radial = normalize(through)
    if base_circle is not None:
        c = base_circle.center()
        radial_residual = abs(float(cross2(radial, c))) / float(norm(c))
    else:
        radial_residual = abs(float(dot(radial, base_dir)))
    if radial_residual < COLLINEAR_EPS:
        return _diameter(radial)

    def residual_at(theta: float) -> Optional[float]:
        candidate = orthogonal_circle_from_direction(through, unit_from_angle(theta))
        if candidate is None:
            return None
        return _orthogonality_residual(candidate, base_circle, base_normal)

    best_theta = 0.0
    best_err = math.inf

    # Coarse sweep
    for i in range(search_samples):
        theta = 2 * math.pi * i / search_samples
        err = residual_at(theta)
        if err is not None and err < best_err:
            best_err = err
            best_theta = theta

    # Local refinement
    for k in range(refine_iterations):
        step = math.radians(PERPENDICULAR_REFINE_STEP_DEG / (k + 1))
        for s in (-2, -1, 1, 2):
            theta = best_theta + s * step
            err = residual_at(theta)
            if err is not None and err < best_err:
                best_err = err
                best_theta = theta

    best = orthogonal_circle_from_direction(through, unit_from_angle(best_theta))
    if best is None:
        logger.debug("Perpendicular search found no candidate through %s", through.tolist())
        return empty_path()

    logger.debug("Perpendicular search residual %.3e at %.4f rad", best_err, best_theta)
    return _arc_between_ideal_points(best, through, steps)


# =============================================================================
# Metrics
# =============================================================================

def hyperbolic_distance(a: Point, b: Point) -> float:
    """
    Exact Poincare distance.

    d(a, b) = arcosh(1 + 2 |a - b|^2 / ((1 - |a|^2)(1 - |b|^2)))

    Interior points are used as given; only points on or outside the
    boundary are pulled back inside. The arcosh argument is clamped to
    >= 1 against rounding.
    """
    a = clamp_to_disk(as_point(a), trigger_sq=1.0)
    b = clamp_to_disk(as_point(b), trigger_sq=1.0)
    diff = a - b
    den = (1 - float(dot(a, a))) * (1 - float(dot(b, b)))
    arg = 1 + 2 * float(dot(diff, diff)) / max(den, DEFAULT_EPS)
    return math.acosh(max(1.0, arg))


def geodesic_tangent(at: Point, toward: Point) -> Point:
    """
    Unit tangent at ``at`` of the geodesic heading to ``toward``.

    For a diameter the tangent is the chord direction. On an orthogonal
    circle it is perpendicular to the radius, oriented so it makes an
    acute angle with the chord (the arc spans less than pi).
    """
    chord = toward - at
    if is_collinear_with_origin(at, toward):
        return normalize(chord)
    circle = orthogonal_circle_through(at, toward)
    if circle is None:
        return normalize(chord)
    t = perp(normalize(at - circle.center()))
    if float(dot(t, chord)) < 0:
        t = -t
    return t


def hyperbolic_angle(a: Point, b: Point, c: Point) -> float:
    """
    Angle at b of the geodesics b -> a and b -> c.

    The Poincare model is conformal, so the Euclidean angle between the
    two geodesic tangents at b is the hyperbolic angle.
    """
    a, b, c = as_point(a), as_point(b), as_point(c)
    if float(norm(a - b)) < DIRECTION_EPS or float(norm(c - b)) < DIRECTION_EPS:
        return 0.0
    return euclidean_angle(b + geodesic_tangent(b, a), b, b + geodesic_tangent(b, c))


# =============================================================================
# Model
# =============================================================================

class HyperbolicModel(SpaceModel):
    """The Poincare disk: ds^2 = 4 (dx^2 + dy^2) / (1 - x^2 - y^2)^2."""

    kind = SpaceKind.HYPERBOLIC
    title = "Space B"
    formula = "ds² = 4(dx²+dy²)/(1−x²−y²)²   (x²+y²<1)"

    def __init__(
        self,
        segment_samples: int = HYPERBOLIC_SEGMENT_SAMPLES,
        advance_samples: int = HYPERBOLIC_ADVANCE_SAMPLES,
        line_samples: int = HYPERBOLIC_LINE_SAMPLES,
        circle_samples: int = HYPERBOLIC_CIRCLE_SAMPLES,
        search_samples: int = PERPENDICULAR_SEARCH_SAMPLES,
        refine_iterations: int = PERPENDICULAR_REFINE_ITERATIONS,
    ):
        self.segment_samples = segment_samples
        self.advance_samples = advance_samples
        self.line_samples = line_samples
        self.circle_samples = circle_samples
        self.search_samples = search_samples
        self.refine_iterations = refine_iterations

    def is_valid(self, p: Point) -> bool:
        return float(norm(as_point(p))) < 1.0

    def clamp(self, p: Point) -> Point:
        return clamp_to_disk(as_point(p))

    # -------------------------------------------------------------------------
    # Constructions
    # -------------------------------------------------------------------------

    def segment(self, p: Point, q: Point, steps: Optional[int] = None) -> Path:
        return hyperbolic_segment(p, q, steps or self.segment_samples)

    def line_through(self, p: Point, q: Point, steps: Optional[int] = None) -> Path:
        return hyperbolic_line(p, q, steps or self.line_samples)

    def circle(self, center: Point, radius: float, steps: Optional[int] = None) -> Path:
        return hyperbolic_circle(center, radius, steps or self.circle_samples)

    def parallel(
        self,
        base_p: Point,
        base_q: Point,
        through: Point,
        which_end: int = 0,
        steps: Optional[int] = None,
    ) -> Path:
        return hyperbolic_parallel(base_p, base_q, through, which_end, steps or self.line_samples)

    def perpendicular(
        self,
        base_p: Point,
        base_q: Point,
        through: Point,
        steps: Optional[int] = None,
    ) -> Path:
        return hyperbolic_perpendicular(
            base_p, base_q, through,
            steps=steps or self.line_samples,
            search_samples=self.search_samples,
            refine_iterations=self.refine_iterations,
        )

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def distance(self, a: Point, b: Point) -> float:
        return hyperbolic_distance(a, b)

    def angle(self, a: Point, b: Point, c: Point) -> float:
        return hyperbolic_angle(a, b, c)

    # -------------------------------------------------------------------------
    # Frog motion
    # -------------------------------------------------------------------------

    def initial_pose(self) -> PlanarPose:
        return PlanarPose(torch.zeros(2, dtype=DEFAULT_DTYPE), 0.0)

    def advance(self, pose: PlanarPose, distance: float, steps: Optional[int] = None) -> Tuple[Path, PlanarPose]:
        start = pose.position
        end = hyperbolic_step(start, unit_from_angle(pose.heading), distance)
        path = self.segment(start, end, steps or self.advance_samples)
        return path, PlanarPose(end, pose.heading)

    def circle_trace(self, pose: PlanarPose, radius: float, steps: Optional[int] = None) -> Tuple[Path, PlanarPose]:
        path = self.circle(pose.position, radius, steps)
        return path, PlanarPose(path[-1].clone(), pose.heading)

    def position(self, pose: PlanarPose) -> Point:
        return pose.position.clone()

    def heading(self, pose: PlanarPose) -> Point:
        return unit_from_angle(pose.heading)

    def follow(self, pose: PlanarPose, view_point: Point) -> PlanarPose:
        return PlanarPose(clamp_to_disk(view_point.clone()), pose.heading)

    def turn(self, pose: PlanarPose, start: float, delta: float, u_prev: float, u: float) -> PlanarPose:
        return PlanarPose(pose.position, start + delta * u)

"""
Builders for frog actions and constructions.

A builder computes a path in the active model and the state that holds
once the action is complete, without animating anything. The caller
either animates the result (animate_result) or commits it as a shape
(commit_result).

Builders are all-or-nothing: when the construction is impossible the
returned path is empty (or too short to draw) and the returned state is
the input state unchanged.
"""

import math
from typing import Any, Dict, NamedTuple, Optional, Sequence, Tuple

from ..core.constants import (
    COLOR_CIRCLE,
    COLOR_GEODESIC,
    COLOR_LINE,
    COLOR_PARALLEL,
    COLOR_PERPENDICULAR,
    COLOR_TRIANGLE,
)
from ..core.types import Path, PointLike
from ..utils.vector import as_point
from .animation import animate_path
from .state import EngineState, LogKind, with_pose
from .store import add_polyline, push_log, start_tracing


class BuildResult(NamedTuple):
    """Path of an action with the state reached once it completes."""
    path: Path                  # (N, 2), possibly empty
    next_state: EngineState
    color: str
    extra: Dict[str, Any]

    @property
    def ok(self) -> bool:
        """Whether the path can be drawn (at least 2 points)."""
        return self.path.shape[0] >= 2


def _result(
    state: EngineState,
    path: Path,
    color: str,
    kind: Optional[LogKind] = None,
    extra: Optional[Dict[str, Any]] = None,
    **data,
) -> BuildResult:
    extra = extra if extra is not None else {}
    if path.shape[0] < 2:
        return BuildResult(path, state, color, extra)
    if kind is not None:
        state = push_log(state, kind, **data)
    return BuildResult(path, state, color, extra)


def _points(state: EngineState, *points: PointLike) -> Tuple:
    model = state.model
    return tuple(model.clamp(as_point(p)) for p in points)


# =============================================================================
# Frog Actions
# =============================================================================

def build_advance(state: EngineState, distance: float) -> BuildResult:
    """
    Walk ``distance`` straight ahead along the geodesic the frog faces.

    The distance is intrinsic: view units (E), hyperbolic length (H) or
    radians of arc (S).
    """
    path, pose = state.model.advance(state.pose, distance)
    next_state = push_log(with_pose(state, pose), LogKind.ADVANCE, dist=distance)
    return BuildResult(path, next_state, state.config.trace_color, {})


def build_geodesic_trace(state: EngineState, length: float) -> BuildResult:
    """Like build_advance, drawn as a traced geodesic."""
    path, pose = state.model.advance(state.pose, length)
    next_state = push_log(with_pose(state, pose), LogKind.TRACE_LINE, length=length)
    return BuildResult(path, next_state, COLOR_GEODESIC, {})


def build_circle_trace(state: EngineState, radius: float) -> BuildResult:
    """
    Circle of intrinsic ``radius`` around the frog.

    The frog walks the circle and ends on its closing point.

    Raises:
        ValueError: If radius is not positive
    """
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")
    path, pose = state.model.circle_trace(state.pose, radius)
    next_state = push_log(with_pose(state, pose), LogKind.TRACE_CIRCLE, radius=radius)
    return BuildResult(path, next_state, COLOR_CIRCLE, {})


# =============================================================================
# Constructions
# =============================================================================

def build_segment(state: EngineState, a: PointLike, b: PointLike) -> BuildResult:
    a, b = _points(state, a, b)
    return _result(state, state.model.segment(a, b), COLOR_LINE)


def build_line(state: EngineState, a: PointLike, b: PointLike) -> BuildResult:
    """Full geodesic through a and b."""
    a, b = _points(state, a, b)
    path = state.model.line_through(a, b)
    return _result(state, path, COLOR_LINE, LogKind.BUILD_LINE, A=a.tolist(), B=b.tolist())


def build_parallel(
    state: EngineState,
    base_p: PointLike,
    base_q: PointLike,
    through: PointLike,
    which_end: int = 0,
) -> BuildResult:
    """
    Parallel to the line (base_p, base_q) through a point.

    In the hyperbolic plane this is the limiting parallel sharing the
    ideal endpoint selected by ``which_end``.

    Raises:
        UnsupportedConstructionError: On the sphere
    """
    base_p, base_q, through = _points(state, base_p, base_q, through)
    path = state.model.parallel(base_p, base_q, through, which_end)
    return _result(
        state, path, COLOR_PARALLEL, LogKind.BUILD_PARALLEL,
        base=[base_p.tolist(), base_q.tolist()], through=through.tolist(), which_end=which_end,
    )


def build_perpendicular(state: EngineState, base_p: PointLike, base_q: PointLike, through: PointLike) -> BuildResult:
    """Perpendicular to the line (base_p, base_q) through a point."""
    base_p, base_q, through = _points(state, base_p, base_q, through)
    path = state.model.perpendicular(base_p, base_q, through)
    return _result(
        state, path, COLOR_PERPENDICULAR, LogKind.BUILD_PERPENDICULAR,
        base=[base_p.tolist(), base_q.tolist()], through=through.tolist(),
    )


def build_triangle(
    state: EngineState,
    a: PointLike,
    b: PointLike,
    c: PointLike,
    labels: Sequence[str] = ("A", "B", "C"),
) -> BuildResult:
    """
    Geodesic triangle with its interior angles.

    ``extra`` holds ``angles`` (radians, at a, b, c), ``angle_sum`` and
    ``excess`` (angle sum minus pi).
    """
    a, b, c = _points(state, a, b, c)
    triangle = state.model.triangle(a, b, c)
    extra = {
        "angles": triangle.angles,
        "angle_sum": triangle.angle_sum,
        "excess": triangle.excess,
    }
    return _result(
        state, triangle.path, COLOR_TRIANGLE, LogKind.TRIANGLE_CREATED, extra,
        labels=list(labels), points=[a.tolist(), b.tolist(), c.tolist()], angle_sum=triangle.angle_sum,
    )


# =============================================================================
# Using Results
# =============================================================================

def animate_result(result: BuildResult, accumulate: bool = False, speed: Optional[float] = None) -> EngineState:
    """
    Animate the frog along a build result.

    The frog starts at the first path point and settles on the pose of
    ``result.next_state`` when the path is finished.

    Raises:
        AnimationBusyError: If the result's state has an active job
    """
    state = result.next_state
    settle = state.pose
    if result.path.shape[0] > 0:
        state = with_pose(state, state.model.follow(state.pose, result.path[0]))
    if accumulate and state.in_progress is None and result.path.shape[0] > 0:
        state = start_tracing(state, color=result.color, at=result.path[0])
    return animate_path(state, result.path, speed=speed, accumulate=accumulate, settle=settle)


def commit_result(result: BuildResult, width: Optional[float] = None) -> EngineState:
    """Store a build result's path as a polyline in its next state."""
    return add_polyline(result.next_state, result.path, result.color, width)


# =============================================================================
# Measurements
# =============================================================================

def measure_distance(state: EngineState, a: PointLike, b: PointLike) -> Tuple[float, EngineState]:
    """Exact intrinsic distance between two points, logged as MEASURE_DISTANCE."""
    a, b = _points(state, a, b)
    value = state.model.distance(a, b)
    state = push_log(state, LogKind.MEASURE_DISTANCE, value=value, A=a.tolist(), B=b.tolist())
    return value, state


def measure_angle(state: EngineState, a: PointLike, b: PointLike, c: PointLike) -> Tuple[float, EngineState]:
    """Intrinsic angle at b in radians, logged as MEASURE_ANGLE in degrees."""
    a, b, c = _points(state, a, b, c)
    value = state.model.angle(a, b, c)
    state = push_log(
        state, LogKind.MEASURE_ANGLE,
        value_deg=math.degrees(value), A=a.tolist(), B=b.tolist(), C=c.tolist(),
    )
    return value, state

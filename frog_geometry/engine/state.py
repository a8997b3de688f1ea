"""
Type definitions and state transitions for the frog engine.

The engine state is an immutable value: every operation returns a new
EngineState built with dataclasses.replace and never mutates tensors held
by the previous one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

from ..core.base import SpaceModel
from ..core.types import Path, PlanarPose, Point, Pose, SpaceKind, SphericalPose
from ..spaces.registry import SpaceLike, get_model, parse_space
from ..utils.config import EngineConfig


# =============================================================================
# Shapes
# =============================================================================

class Polyline(NamedTuple):
    """A committed drawn curve."""
    points: Path                # (N, 2)
    color: str
    width: float


class Marker(NamedTuple):
    """A committed point marker."""
    point: Point                # (2,)
    color: str


Shape = Union[Polyline, Marker]


class InProgressTrace(NamedTuple):
    """Polyline being accumulated while the frog walks."""
    points: Path                # (N, 2), N >= 1
    color: str
    width: float


# =============================================================================
# Log
# =============================================================================

class LogKind(str, Enum):
    """Kinds of observation log entries."""
    ADVANCE = "ADVANCE"
    TURN = "TURN"
    TRACE_LINE = "TRACE_LINE"
    TRACE_CIRCLE = "TRACE_CIRCLE"
    BUILD_LINE = "BUILD_LINE"
    BUILD_PARALLEL = "BUILD_PARALLEL"
    BUILD_PERPENDICULAR = "BUILD_PERPENDICULAR"
    TRIANGLE_CREATED = "TRIANGLE_CREATED"
    MEASURE_ANGLE = "MEASURE_ANGLE"
    MEASURE_DISTANCE = "MEASURE_DISTANCE"
    OBS = "OBS"


@dataclass(frozen=True)
class LogEntry:
    """A timestamped record of a user-level action."""
    t: float
    kind: LogKind
    data: Dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Animation Jobs
# =============================================================================

class PathJob(NamedTuple):
    """
    Following a polyline at constant view speed.

    ``index`` is the current segment and ``fraction`` the progress along
    it in [0, 1]. ``settle`` is the pose adopted when the path ends.
    """
    path: Path
    index: int
    fraction: float
    speed: float
    accumulate: bool
    settle: Optional[Pose] = None


class RotationJob(NamedTuple):
    """Turning the heading by ``delta`` radians over ``duration`` seconds."""
    start: float                # heading angle at scheduling (E/H)
    delta: float
    elapsed: float
    duration: float


Job = Union[PathJob, RotationJob]


# =============================================================================
# Engine State
# =============================================================================

_POSE_FIELDS = {
    SpaceKind.EUCLIDEAN: "euclidean",
    SpaceKind.HYPERBOLIC: "hyperbolic",
    SpaceKind.SPHERICAL: "spherical",
}


@dataclass(frozen=True)
class EngineState:
    """
    Complete engine state.

    Each model keeps its own frog pose; only the pose of the active
    ``space`` moves. At most one animation ``job`` runs at a time.
    """
    space: SpaceKind
    euclidean: PlanarPose
    hyperbolic: PlanarPose
    spherical: SphericalPose
    config: EngineConfig = field(default_factory=EngineConfig)

    # Drawings
    shapes: Tuple[Shape, ...] = ()
    in_progress: Optional[InProgressTrace] = None
    log: Tuple[LogEntry, ...] = ()

    # Animation
    job: Optional[Job] = None
    clock: float = 0.0

    @property
    def active(self) -> bool:
        """Whether an animation job is running."""
        return self.job is not None

    @property
    def model(self) -> SpaceModel:
        """Model of the active space."""
        return get_model(self.space, self.config)

    @property
    def pose(self) -> Pose:
        """Frog pose in the active space."""
        return getattr(self, _POSE_FIELDS[self.space])


def is_active(state: EngineState) -> bool:
    return state.job is not None


def with_pose(state: EngineState, pose: Pose) -> EngineState:
    """Replace the frog pose of the active space."""
    return replace(state, **{_POSE_FIELDS[state.space]: pose})


def create_initial_state(space: SpaceLike = SpaceKind.EUCLIDEAN, config: Optional[EngineConfig] = None) -> EngineState:
    """
    Fresh state: no shapes, no log, no job.

    The Euclidean and hyperbolic frogs sit at the origin facing +x; the
    spherical frog sits at the north pole (0, 0, 1) facing (1, 0, 0).

    Args:
        space: Active model identifier
        config: Engine configuration (defaults if None)

    Returns:
        New EngineState
    """
    kind = parse_space(space)
    config = config if config is not None else EngineConfig()
    return EngineState(
        space=kind,
        euclidean=get_model(SpaceKind.EUCLIDEAN).initial_pose(),
        hyperbolic=get_model(SpaceKind.HYPERBOLIC).initial_pose(),
        spherical=get_model(SpaceKind.SPHERICAL).initial_pose(),
        config=config,
    )


def reset(state: EngineState, space: Optional[SpaceLike] = None) -> EngineState:
    """
    Back to the initial state, keeping the configuration.

    Discards any running job and un-committed trace along with shapes
    and log.
    """
    return create_initial_state(state.space if space is None else space, state.config)


def switch_space(state: EngineState, space: SpaceLike) -> EngineState:
    """Make another model active; the frog starts over in it."""
    return reset(state, space)


def current_position(state: EngineState) -> Point:
    """Frog position in view coordinates, shape (2,)."""
    return state.model.position(state.pose)


def current_heading(state: EngineState) -> Point:
    """Unit view direction the frog faces, shape (2,)."""
    return state.model.heading(state.pose)


def heading_angle(state: EngineState) -> float:
    """Heading of the active planar pose in radians (0.0 on the sphere)."""
    pose = state.pose
    if isinstance(pose, PlanarPose):
        return pose.heading
    return 0.0

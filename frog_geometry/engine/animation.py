"""
Frame-driven animation of the frog.

Two kinds of jobs, at most one at a time:

- PathJob: follow a polyline at constant speed measured in view units,
  optionally appending visited points to the in-progress trace.
- RotationJob: change the heading by a fixed angle over a fixed duration.

Each call to step() advances the active job by one (clamped) frame
interval and returns a new state. Scheduling while a job runs raises
AnimationBusyError; callers check is_active() first.
"""

import logging
import math
from dataclasses import replace
from typing import Optional

import torch

from ..core.constants import SEGMENT_END_EPS
from ..core.exceptions import AnimationBusyError
from ..core.types import Path, Pose, as_path
from ..utils.vector import norm
from .state import (
    EngineState,
    LogKind,
    PathJob,
    RotationJob,
    heading_angle,
    with_pose,
)
from .store import append_trace_point, push_log, start_tracing

logger = logging.getLogger(__name__)


def _ensure_idle(state: EngineState) -> None:
    if state.job is not None:
        raise AnimationBusyError(
            f"An animation is already running ({type(state.job).__name__}); "
            f"wait until the state is idle"
        )


# =============================================================================
# Scheduling
# =============================================================================

def animate_path(
    state: EngineState,
    path: Path,
    speed: Optional[float] = None,
    accumulate: bool = False,
    settle: Optional[Pose] = None,
) -> EngineState:
    """
    Start following a polyline.

    Args:
        state: Idle state
        path: View points of shape (N, 2); paths with fewer than 2 points
            finish on the first step
        speed: View units per second (config.speed if None)
        accumulate: Append visited points to the in-progress trace; a
            trace is started at path[0] when none exists
        settle: Pose adopted when the path is finished

    Returns:
        State with an active PathJob

    Raises:
        AnimationBusyError: If a job is already active
        ValueError: If the path is malformed or speed is not positive
    """
    _ensure_idle(state)
    path = as_path(path)

    speed = state.config.speed if speed is None else speed
    if speed <= 0:
        raise ValueError(f"speed must be positive, got {speed}")

    if accumulate and state.in_progress is None and path.shape[0] > 0:
        state = start_tracing(state, at=path[0])

    job = PathJob(path=path.clone(), index=0, fraction=0.0, speed=speed, accumulate=accumulate, settle=settle)
    return replace(state, job=job)


def schedule_turn(state: EngineState, degrees: float, duration: Optional[float] = None) -> EngineState:
    """
    Start turning the frog by ``degrees`` (counter-clockwise positive).

    Raises:
        AnimationBusyError: If a job is already active
        ValueError: If duration is not positive
    """
    _ensure_idle(state)
    duration = state.config.turn_duration if duration is None else duration
    if duration <= 0:
        raise ValueError(f"duration must be positive, got {duration}")

    job = RotationJob(start=heading_angle(state), delta=math.radians(degrees), elapsed=0.0, duration=duration)
    state = push_log(state, LogKind.TURN, deg=degrees)
    return replace(state, job=job)


# =============================================================================
# Stepping
# =============================================================================

def _step_rotation(state: EngineState, job: RotationJob, dt: float) -> EngineState:
    elapsed = job.elapsed + dt
    u_prev = min(max(job.elapsed / job.duration, 0.0), 1.0)
    u = min(max(elapsed / job.duration, 0.0), 1.0)

    pose = state.model.turn(state.pose, job.start, job.delta, u_prev, u)
    state = with_pose(state, pose)

    if u >= 1.0:
        return replace(state, job=None)
    return replace(state, job=job._replace(elapsed=elapsed))


def _step_path(state: EngineState, job: PathJob, dt: float) -> EngineState:
    path = job.path
    last_index = path.shape[0] - 1

    if last_index < 1:
        if job.settle is not None:
            state = with_pose(state, job.settle)
        return replace(state, job=None)

    i = job.index
    t = job.fraction
    remaining = job.speed * dt
    current: Optional[torch.Tensor] = None

    # Consume the travel budget across as many segments as it covers
    while remaining > 0 and i < last_index:
        a = path[i]
        b = path[i + 1]
        seg = b - a
        seg_len = float(norm(seg))

        left = seg_len * (1.0 - t)
        if left >= remaining:
            t += remaining / seg_len
            remaining = 0.0
            current = a + seg * t
            # A budget that ends exactly on a vertex moves on to the next segment
            if t >= 1.0 - SEGMENT_END_EPS:
                i += 1
                t = 0.0
                current = b
        else:
            remaining -= left
            i += 1
            t = 0.0
            current = b

    if current is not None:
        state = with_pose(state, state.model.follow(state.pose, current))
        if job.accumulate:
            state = append_trace_point(state, current)

    if i >= last_index:
        if job.settle is not None:
            state = with_pose(state, job.settle)
        return replace(state, job=None)
    return replace(state, job=job._replace(index=i, fraction=t))


def step(state: EngineState, dt: float) -> EngineState:
    """
    Advance the animation by one frame.

    ``dt`` is clamped to [0, config.max_dt]. The engine clock always
    advances; without an active job nothing else changes.

    Args:
        state: Current state
        dt: Elapsed time in seconds

    Returns:
        New state
    """
    dt = min(max(float(dt), 0.0), state.config.max_dt)
    state = replace(state, clock=state.clock + dt)

    job = state.job
    if job is None:
        return state
    if isinstance(job, RotationJob):
        return _step_rotation(state, job, dt)
    return _step_path(state, job, dt)


def run_until_idle(state: EngineState, dt: Optional[float] = None, max_steps: int = 100000) -> EngineState:
    """
    Step until no job is active or ``max_steps`` frames have run.

    Args:
        state: Current state
        dt: Frame interval (config.max_dt if None)
        max_steps: Upper bound on the number of frames

    Returns:
        Final state
    """
    dt = state.config.max_dt if dt is None else dt
    steps = 0
    while state.job is not None and steps < max_steps:
        state = step(state, dt)
        steps += 1
    if state.job is not None:
        logger.warning("Animation still active after %d steps", steps)
    return state

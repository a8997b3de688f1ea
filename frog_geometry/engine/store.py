"""
Shape and log store.

Committed shapes and log entries only ever grow until cleared; an
in-progress trace exists while a drawing is being accumulated and is
committed by finish_tracing.
"""

import logging
from dataclasses import replace
from typing import List, Optional

import torch

from ..core.types import Path, PointLike, validate_path_shape
from ..utils.vector import as_point, norm
from .state import (
    EngineState,
    InProgressTrace,
    LogEntry,
    LogKind,
    Marker,
    Polyline,
    current_position,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Tracing
# =============================================================================

def start_tracing(
    state: EngineState,
    color: Optional[str] = None,
    width: Optional[float] = None,
    at: Optional[PointLike] = None,
) -> EngineState:
    """
    Begin a new in-progress trace.

    The trace starts at ``at``, or at the frog's position when None. An
    existing un-committed trace is replaced.
    """
    config = state.config
    origin = as_point(at) if at is not None else current_position(state)
    trace = InProgressTrace(
        points=origin.clone().unsqueeze(0),
        color=color if color is not None else config.trace_color,
        width=width if width is not None else config.trace_width,
    )
    return replace(state, in_progress=trace)


def append_trace_point(state: EngineState, point: torch.Tensor) -> EngineState:
    """
    Append a visited point to the in-progress trace.

    Points closer than ``config.trace_min_spacing`` to the last trace
    point are skipped. Without an in-progress trace this is a no-op.
    """
    trace = state.in_progress
    if trace is None:
        return state
    last = trace.points[-1]
    if float(norm(point - last)) <= state.config.trace_min_spacing:
        return state
    points = torch.cat([trace.points, point.unsqueeze(0)], dim=0)
    return replace(state, in_progress=trace._replace(points=points))


def finish_tracing(state: EngineState) -> EngineState:
    """
    Commit the in-progress trace as a polyline.

    Traces with fewer than 2 points are dropped.
    """
    trace = state.in_progress
    if trace is None:
        return state
    if trace.points.shape[0] < 2:
        logger.debug("Dropping trace with %d point(s)", trace.points.shape[0])
        return replace(state, in_progress=None)
    shape = Polyline(trace.points, trace.color, trace.width)
    return replace(state, shapes=state.shapes + (shape,), in_progress=None)


def discard_trace(state: EngineState) -> EngineState:
    return replace(state, in_progress=None)


# =============================================================================
# Shapes
# =============================================================================

def add_polyline(state: EngineState, path: Path, color: str, width: Optional[float] = None) -> EngineState:
    """Commit a path directly as a polyline (paths with < 2 points are ignored)."""
    validate_path_shape(path)
    if path.shape[0] < 2:
        return state
    shape = Polyline(path.clone(), color, width if width is not None else state.config.trace_width)
    return replace(state, shapes=state.shapes + (shape,))


def add_marker(state: EngineState, point: PointLike, color: Optional[str] = None) -> EngineState:
    marker = Marker(as_point(point).clone(), color if color is not None else state.config.marker_color)
    return replace(state, shapes=state.shapes + (marker,))


def clear_shapes(state: EngineState) -> EngineState:
    """Remove committed shapes and any in-progress trace; the log is kept."""
    return replace(state, shapes=(), in_progress=None)


# =============================================================================
# Log
# =============================================================================

def push_log(state: EngineState, kind: LogKind, t: Optional[float] = None, **data) -> EngineState:
    """
    Append a log entry.

    Args:
        state: Current state
        kind: Entry kind
        t: Timestamp (the engine clock if None)
        **data: Entry payload

    Returns:
        New state with the entry appended
    """
    entry = LogEntry(t=state.clock if t is None else t, kind=LogKind(kind), data=dict(data))
    logger.debug("%s %s", entry.kind.value, entry.data)
    return replace(state, log=state.log + (entry,))


def log_entries(state: EngineState, kind: Optional[LogKind] = None) -> List[LogEntry]:
    """Log entries in insertion order, optionally filtered by kind."""
    if kind is None:
        return list(state.log)
    kind = LogKind(kind)
    return [entry for entry in state.log if entry.kind is kind]

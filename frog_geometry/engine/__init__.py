"""
Frog engine: immutable state, animation and builders.

Contains:
- State: engine state, poses per model, shapes, log and jobs
- Store: tracing, shapes and the observation log
- Animation: frame-driven path following and turning
- Builders: frog actions, constructions and measurements
"""

from .state import (
    EngineState,
    Polyline,
    Marker,
    Shape,
    InProgressTrace,
    LogKind,
    LogEntry,
    PathJob,
    RotationJob,
    Job,
    is_active,
    with_pose,
    create_initial_state,
    reset,
    switch_space,
    current_position,
    current_heading,
    heading_angle,
)

from .store import (
    start_tracing,
    append_trace_point,
    finish_tracing,
    discard_trace,
    add_polyline,
    add_marker,
    clear_shapes,
    push_log,
    log_entries,
)

from .animation import (
    animate_path,
    schedule_turn,
    step,
    run_until_idle,
)

from .builders import (
    BuildResult,
    build_advance,
    build_geodesic_trace,
    build_circle_trace,
    build_segment,
    build_line,
    build_parallel,
    build_perpendicular,
    build_triangle,
    animate_result,
    commit_result,
    measure_distance,
    measure_angle,
)

__all__ = [
    # State
    "EngineState",
    "Polyline",
    "Marker",
    "Shape",
    "InProgressTrace",
    "LogKind",
    "LogEntry",
    "PathJob",
    "RotationJob",
    "Job",
    "is_active",
    "with_pose",
    "create_initial_state",
    "reset",
    "switch_space",
    "current_position",
    "current_heading",
    "heading_angle",
    # Store
    "start_tracing",
    "append_trace_point",
    "finish_tracing",
    "discard_trace",
    "add_polyline",
    "add_marker",
    "clear_shapes",
    "push_log",
    "log_entries",
    # Animation
    "animate_path",
    "schedule_turn",
    "step",
    "run_until_idle",
    # Builders
    "BuildResult",
    "build_advance",
    "build_geodesic_trace",
    "build_circle_trace",
    "build_segment",
    "build_line",
    "build_parallel",
    "build_perpendicular",
    "build_triangle",
    "animate_result",
    "commit_result",
    "measure_distance",
    "measure_angle",
]

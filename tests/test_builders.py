"""
Tests for builders, the shape/log store and engine state transitions.
"""

import math
from dataclasses import FrozenInstanceError

import pytest
import torch

from frog_geometry.core import (
    DEFAULT_DTYPE,
    PlanarPose,
    SpaceKind,
    UnsupportedConstructionError,
)
from frog_geometry.core.constants import COLOR_CIRCLE, COLOR_LINE, COLOR_TRIANGLE
from frog_geometry.engine import (
    LogKind,
    Marker,
    Polyline,
    add_marker,
    add_polyline,
    animate_result,
    append_trace_point,
    build_advance,
    build_circle_trace,
    build_geodesic_trace,
    build_line,
    build_parallel,
    build_perpendicular,
    build_segment,
    build_triangle,
    clear_shapes,
    commit_result,
    create_initial_state,
    current_heading,
    current_position,
    discard_trace,
    finish_tracing,
    heading_angle,
    log_entries,
    measure_angle,
    measure_distance,
    push_log,
    run_until_idle,
    start_tracing,
    step,
    switch_space,
    with_pose,
)
from frog_geometry.utils import EngineConfig


# =============================================================================
# Engine State
# =============================================================================

class TestEngineState:
    """Tests for state creation and switching."""

    def test_initial_state(self, euclidean_state, origin, point):
        assert euclidean_state.space is SpaceKind.EUCLIDEAN
        assert not euclidean_state.active
        assert euclidean_state.shapes == ()
        assert torch.allclose(current_position(euclidean_state), origin)
        assert torch.allclose(current_heading(euclidean_state), point(1.0, 0.0))

    def test_spherical_frog_at_pole(self, spherical_state, origin):
        assert torch.allclose(current_position(spherical_state), origin)
        assert heading_angle(spherical_state) == 0.0

    def test_space_by_name(self):
        assert create_initial_state("hyperbolic").space is SpaceKind.HYPERBOLIC

    def test_switch_space_keeps_config(self):
        config = EngineConfig(speed=1.3)
        state = create_initial_state("E", config)
        state = commit_result(build_segment(state, [0, 0], [1, 1]))
        switched = switch_space(state, "S")
        assert switched.space is SpaceKind.SPHERICAL
        assert switched.shapes == ()
        assert switched.config is config

    def test_with_pose_only_touches_active_space(self, euclidean_state, point):
        state = with_pose(euclidean_state, PlanarPose(point(0.4, 0.0), 1.0))
        assert torch.allclose(state.euclidean.position, point(0.4, 0.0))
        assert torch.equal(state.hyperbolic.position, euclidean_state.hyperbolic.position)
        assert torch.equal(euclidean_state.euclidean.position, torch.zeros(2, dtype=DEFAULT_DTYPE))

    def test_state_is_frozen(self, euclidean_state):
        with pytest.raises(FrozenInstanceError):
            euclidean_state.clock = 1.0


# =============================================================================
# Frog Actions
# =============================================================================

class TestFrogActions:
    """Tests for advance and trace builders."""

    def test_advance_logs_distance(self, euclidean_state, point):
        result = build_advance(euclidean_state, 0.8)
        assert result.ok
        assert torch.allclose(current_position(result.next_state), point(0.8, 0.0))
        entries = log_entries(result.next_state, LogKind.ADVANCE)
        assert len(entries) == 1
        assert entries[0].data == {"dist": 0.8}
        # The input state is untouched
        assert euclidean_state.log == ()

    def test_geodesic_trace(self, hyperbolic_state):
        result = build_geodesic_trace(hyperbolic_state, 0.5)
        assert result.next_state.log[-1].kind is LogKind.TRACE_LINE
        assert result.next_state.log[-1].data["length"] == 0.5

    def test_circle_trace(self, euclidean_state, point):
        result = build_circle_trace(euclidean_state, 0.3)
        assert result.color == COLOR_CIRCLE
        assert torch.allclose(current_position(result.next_state), point(0.3, 0.0))
        assert result.next_state.log[-1].data == {"radius": 0.3}

    def test_circle_radius_must_be_positive(self, euclidean_state):
        with pytest.raises(ValueError):
            build_circle_trace(euclidean_state, 0.0)

    def test_log_timestamp_is_clock(self, euclidean_state):
        state = step(euclidean_state, 0.02)
        result = build_advance(state, 0.1)
        assert result.next_state.log[-1].t == pytest.approx(0.02)


# =============================================================================
# Constructions
# =============================================================================

class TestConstructions:
    """Tests for construction builders."""

    def test_line_logged(self, euclidean_state):
        result = build_line(euclidean_state, [0, 0], [1, 0])
        assert result.color == COLOR_LINE
        entry = result.next_state.log[-1]
        assert entry.kind is LogKind.BUILD_LINE
        assert entry.data == {"A": [0.0, 0.0], "B": [1.0, 0.0]}

    def test_segment_not_logged(self, euclidean_state):
        result = build_segment(euclidean_state, [0, 0], [1, 0])
        assert result.ok
        assert result.next_state.log == ()

    def test_impossible_construction_leaves_state(self, hyperbolic_state):
        result = build_line(hyperbolic_state, [0.2, 0.2], [0.2, 0.2])
        assert not result.ok
        assert result.path.shape == (0, 2)
        assert result.next_state is hyperbolic_state

    def test_impossible_perpendicular_leaves_state(self, euclidean_state):
        result = build_perpendicular(euclidean_state, [1, 1], [1, 1], [0, 0])
        assert not result.ok
        assert result.next_state is euclidean_state

    def test_parallel_on_sphere_raises(self, spherical_state):
        with pytest.raises(UnsupportedConstructionError):
            build_parallel(spherical_state, [0, 0], [0.5, 0], [0, 0.5])

    def test_hyperbolic_parallel_logged(self, hyperbolic_state):
        result = build_parallel(hyperbolic_state, [-0.5, 0], [0.5, 0], [0, 0.5], which_end=1)
        assert result.ok
        entry = result.next_state.log[-1]
        assert entry.kind is LogKind.BUILD_PARALLEL
        assert entry.data["which_end"] == 1

    def test_perpendicular_logged(self, hyperbolic_state):
        result = build_perpendicular(hyperbolic_state, [-0.5, 0], [0.5, 0], [0.3, 0])
        assert result.ok
        assert result.next_state.log[-1].kind is LogKind.BUILD_PERPENDICULAR

    def test_hyperbolic_points_clamped(self, hyperbolic_state):
        result = build_segment(hyperbolic_state, [2.0, 0.0], [0.0, 0.5])
        assert float(torch.linalg.vector_norm(result.path[0])) == pytest.approx(0.999)

    @pytest.mark.parametrize("space,sign", [("E", 0), ("H", -1), ("S", 1)])
    def test_triangle_excess_sign(self, space, sign):
        state = create_initial_state(space)
        result = build_triangle(state, [0.0, 0.0], [0.6, 0.0], [0.0, 0.6], labels=("P", "Q", "R"))
        assert result.color == COLOR_TRIANGLE
        assert set(result.extra) == {"angles", "angle_sum", "excess"}
        excess = result.extra["excess"]
        if sign == 0:
            assert excess == pytest.approx(0.0, abs=1e-9)
        else:
            assert math.copysign(1.0, excess) == sign
        entry = result.next_state.log[-1]
        assert entry.kind is LogKind.TRIANGLE_CREATED
        assert entry.data["labels"] == ["P", "Q", "R"]


# =============================================================================
# Using Results
# =============================================================================

class TestUsingResults:
    """Tests for animating and committing build results."""

    def test_commit_result(self, euclidean_state):
        state = commit_result(build_line(euclidean_state, [0, 0], [1, 0]), width=3.0)
        assert len(state.shapes) == 1
        shape = state.shapes[0]
        assert isinstance(shape, Polyline)
        assert shape.color == COLOR_LINE
        assert shape.width == 3.0

    def test_commit_impossible_result_adds_nothing(self, euclidean_state):
        state = commit_result(build_line(euclidean_state, [0, 0], [0, 0]))
        assert state.shapes == ()

    def test_animated_construction_returns_frog(self, euclidean_state, origin):
        """The frog walks the line and settles back where it was."""
        state = animate_result(build_line(euclidean_state, [0, 1], [1, 1]), accumulate=True, speed=50.0)
        state = finish_tracing(run_until_idle(state))
        assert torch.allclose(current_position(state), origin)
        assert state.shapes[0].color == COLOR_LINE
        assert state.shapes[0].points.shape[0] >= 2

    def test_animated_advance_ends_at_target(self, euclidean_state, point):
        state = run_until_idle(animate_result(build_advance(euclidean_state, 0.4)))
        assert torch.allclose(current_position(state), point(0.4, 0.0))


# =============================================================================
# Measurements
# =============================================================================

class TestMeasurements:
    """Tests for logged measurements."""

    def test_hyperbolic_distance(self, hyperbolic_state):
        value, state = measure_distance(hyperbolic_state, [0, 0], [0.5, 0])
        assert value == pytest.approx(math.log(3))
        entry = state.log[-1]
        assert entry.kind is LogKind.MEASURE_DISTANCE
        assert entry.data["value"] == value

    def test_angle_in_degrees(self, spherical_state):
        value, state = measure_angle(spherical_state, [1, 0], [0, 0], [0, 1])
        assert value == pytest.approx(math.pi / 2)
        assert state.log[-1].data["value_deg"] == pytest.approx(90.0)


# =============================================================================
# Store
# =============================================================================

class TestStore:
    """Tests for traces, shapes and the log."""

    def test_tracing_starts_at_frog(self, euclidean_state, origin):
        state = start_tracing(euclidean_state)
        assert state.in_progress.points.shape == (1, 2)
        assert torch.allclose(state.in_progress.points[0], origin)
        assert state.in_progress.color == euclidean_state.config.trace_color

    def test_append_respects_spacing(self, euclidean_state, point):
        state = start_tracing(euclidean_state, color="#123456")
        state = append_trace_point(state, point(0.001, 0.0))
        assert state.in_progress.points.shape[0] == 1
        state = append_trace_point(state, point(0.01, 0.0))
        assert state.in_progress.points.shape[0] == 2

    def test_append_without_trace_is_noop(self, euclidean_state, point):
        assert append_trace_point(euclidean_state, point(1.0, 0.0)) is euclidean_state

    def test_short_trace_dropped(self, euclidean_state):
        state = finish_tracing(start_tracing(euclidean_state))
        assert state.in_progress is None
        assert state.shapes == ()

    def test_discard_trace(self, euclidean_state):
        assert discard_trace(start_tracing(euclidean_state)).in_progress is None

    def test_add_polyline_ignores_short_paths(self, euclidean_state):
        state = add_polyline(euclidean_state, torch.zeros(1, 2, dtype=DEFAULT_DTYPE), "#000000")
        assert state.shapes == ()

    def test_marker_and_clear(self, euclidean_state):
        state = add_marker(euclidean_state, [0.2, 0.3])
        state = push_log(state, LogKind.OBS, note="marked")
        assert isinstance(state.shapes[0], Marker)
        assert state.shapes[0].color == state.config.marker_color
        cleared = clear_shapes(state)
        assert cleared.shapes == ()
        assert len(cleared.log) == 1

    def test_log_filter_and_order(self, euclidean_state):
        state = push_log(euclidean_state, LogKind.OBS, t=1.0, note="a")
        state = push_log(state, LogKind.ADVANCE, t=2.0, dist=1.0)
        state = push_log(state, "OBS", t=3.0, note="b")
        assert [e.t for e in log_entries(state)] == [1.0, 2.0, 3.0]
        assert [e.data["note"] for e in log_entries(state, LogKind.OBS)] == ["a", "b"]

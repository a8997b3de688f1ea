"""
Example 01: A Frog Walks a Square in Three Geometries

Demonstrates:
1. Driving the engine frame by frame: advance, turn, accumulate a trace.
2. Building constructions (lines, parallels, perpendiculars, triangles).
3. Comparing triangle angle sums in flat, hyperbolic and spherical space.

The same "walk forward, turn 90 degrees" program closes up into a square in
the Euclidean plane, fails to close in the Poincare disk, and overshoots on
the sphere.
"""

import logging
import math
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from frog_geometry.core import SpaceKind, path_to_numpy
from frog_geometry.engine import (
    Marker,
    Polyline,
    animate_result,
    build_advance,
    build_line,
    build_parallel,
    build_perpendicular,
    build_triangle,
    commit_result,
    create_initial_state,
    current_position,
    finish_tracing,
    run_until_idle,
    schedule_turn,
)
from frog_geometry.utils import EngineConfig, setup_logging

OUTPUT_DIR = Path(__file__).parent / "output"

SIDES = {
    SpaceKind.EUCLIDEAN: 0.8,
    SpaceKind.HYPERBOLIC: 1.2,
    SpaceKind.SPHERICAL: 1.2,
}


# =============================================================================
# 1. Walking
# =============================================================================

def walk_square(space, config):
    """Four times: advance one side, turn left 90 degrees."""
    state = create_initial_state(space, config)
    for _ in range(4):
        state = run_until_idle(animate_result(build_advance(state, SIDES[space]), accumulate=True))
        state = run_until_idle(schedule_turn(state, 90.0))
    state = finish_tracing(state)

    gap = float(np.linalg.norm(current_position(state).numpy()))
    print(f"  {space.name:<10} frog ends {gap:.4f} view units from where it started")
    return state


# =============================================================================
# 2. Constructions
# =============================================================================

def add_constructions(state):
    space = state.space
    a, b, c = [-0.4, -0.3], [0.5, -0.2], [0.0, 0.55]

    state = commit_result(build_line(state, a, b))
    if space is not SpaceKind.SPHERICAL:
        state = commit_result(build_parallel(state, a, b, c))
    state = commit_result(build_perpendicular(state, a, b, c))

    result = build_triangle(state, a, b, c)
    angles = ", ".join(f"{math.degrees(x):6.2f}" for x in result.extra["angles"])
    print(
        f"  {space.name:<10} triangle angles [{angles}]  "
        f"sum {math.degrees(result.extra['angle_sum']):7.2f} deg"
    )
    return commit_result(result)


# =============================================================================
# 3. Plotting
# =============================================================================

def draw_state(ax, state):
    """Draw committed shapes of a state on matplotlib axes."""
    if state.space is not SpaceKind.EUCLIDEAN:
        theta = np.linspace(0, 2 * np.pi, 200)
        ax.plot(np.cos(theta), np.sin(theta), color="#94a3b8", linewidth=1)

    for shape in state.shapes:
        if isinstance(shape, Polyline):
            pts = path_to_numpy(shape.points)
            ax.plot(pts[:, 0], pts[:, 1], color=shape.color, linewidth=shape.width * 0.6)
        elif isinstance(shape, Marker):
            ax.plot(*shape.point.numpy(), "o", color=shape.color)

    title, formula = state.model.descriptor()
    ax.set_title(f"{title}\n{formula}", fontsize=8)
    ax.set_aspect("equal")
    ax.set_xlim(-1.1, 1.1)
    ax.set_ylim(-1.1, 1.1)


def main():
    setup_logging(logging.INFO)
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    config = EngineConfig(speed=2.0)

    print("\n" + "=" * 60)
    print("Walking a square")
    print("=" * 60)
    states = [walk_square(space, config) for space in SpaceKind]

    print("\n" + "=" * 60)
    print("Constructions and triangles")
    print("=" * 60)
    states = [add_constructions(state) for state in states]

    fig, axes = plt.subplots(1, 3, figsize=(12, 4.5))
    for ax, state in zip(axes, states):
        draw_state(ax, state)
    fig.tight_layout()

    out_path = OUTPUT_DIR / "01_frog_walk.png"
    fig.savefig(out_path, dpi=150)
    plt.close(fig)
    print(f"\nSaved figure to: {out_path}")


if __name__ == "__main__":
    main()

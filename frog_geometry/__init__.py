"""
Frog Geometry: a frog walking in flat, hyperbolic and spherical planes.

A small geometry kernel for exploring non-Euclidean geometry. A frog
walks, turns and traces geodesics and circles in one of three models
that share a common 2-D view domain:

- Euclidean plane (view coordinates are intrinsic)
- Hyperbolic plane in the Poincare disk
- Unit sphere seen through its upper hemisphere

Key Features:
- Exact geodesic segments, full lines and circles in all three models
- Parallels (hyperbolic limiting parallels) and perpendiculars
- Exact distances and angles
- Immutable engine state with frame-driven animation
- Shape and observation log store

API Design:
- Points are (2,) tensors and paths (N, 2) tensors in view coordinates
- An empty (0, 2) path means "impossible construction"
- Every engine operation takes a state and returns a new state

Example:
    >>> import frog_geometry as fg
    >>> state = fg.engine.create_initial_state("H")
    >>> result = fg.engine.build_advance(state, 1.0)
    >>> state = fg.engine.run_until_idle(fg.engine.animate_result(result))
    >>> fg.spaces.distance("H", [0.0, 0.0], fg.engine.current_position(state))
"""

__version__ = "0.1.0"
__author__ = "Frog Geometry Contributors"

from . import core
from . import utils
from . import spaces
from . import engine

__all__ = [
    "core",
    "utils",
    "spaces",
    "engine",
]

"""
Centralized constants for Frog Geometry.

This module defines all default values and numeric constants used throughout
the library. Using these constants ensures consistency and makes it easy to
adjust defaults globally.

Usage:
    from frog_geometry.core.constants import DEFAULT_EPS, DISK_CLAMP_RADIUS

    # Use in function definitions
    def my_function(eps: float = DEFAULT_EPS):
        ...
"""

import torch

# =============================================================================
# Numeric Constants
# =============================================================================

# All points and paths are float64 tensors
DEFAULT_DTYPE: torch.dtype = torch.float64

# Small epsilon for division stability (general use)
DEFAULT_EPS: float = 1e-10

# Epsilon for normalization operations
DEFAULT_EPS_NORM: float = 1e-12

# |p x q| below this means p, q and the origin are collinear
COLLINEAR_EPS: float = 1e-7

# Directions shorter than this are treated as zero
DIRECTION_EPS: float = 1e-8

# Hyperbolic points with |p|^2 at or above this are pulled back inside
DISK_CLAMP_TRIGGER_SQ: float = 0.9999

# Radius hyperbolic points are clamped to
DISK_CLAMP_RADIUS: float = 0.999

# Spherical samples with z below this are on the hidden hemisphere
HEMISPHERE_Z_EPS: float = 1e-10

# Tolerance when trimming sampled lines to the closed unit disk
DISK_TRIM_TOLERANCE: float = 1e-6


# =============================================================================
# Sampling Defaults
# =============================================================================

# Euclidean
EUCLIDEAN_LINE_EXTENT: float = 5.0
EUCLIDEAN_CIRCLE_SAMPLES: int = 260

# Hyperbolic
HYPERBOLIC_SEGMENT_SAMPLES: int = 260
HYPERBOLIC_ADVANCE_SAMPLES: int = 180
HYPERBOLIC_LINE_SAMPLES: int = 520
HYPERBOLIC_CIRCLE_SAMPLES: int = 280

# Spherical
SPHERICAL_SEGMENT_SAMPLES: int = 260
SPHERICAL_ADVANCE_SAMPLES: int = 260
SPHERICAL_LINE_SAMPLES: int = 520
SPHERICAL_CIRCLE_SAMPLES: int = 320

# Hyperbolic perpendicular search
PERPENDICULAR_SEARCH_SAMPLES: int = 240
PERPENDICULAR_REFINE_ITERATIONS: int = 6
PERPENDICULAR_REFINE_STEP_DEG: float = 10.0


# =============================================================================
# Animation Defaults
# =============================================================================

# View units per second along a path
DEFAULT_SPEED: float = 0.7

# Seconds for a heading change
DEFAULT_TURN_DURATION: float = 0.35

# Largest dt a single step will consume (avoids jumps after a stall)
DEFAULT_MAX_DT: float = 1.0 / 30.0

# Minimum view distance between consecutive trace points
DEFAULT_TRACE_MIN_SPACING: float = 0.002

# Segment fraction treated as having reached the next vertex
SEGMENT_END_EPS: float = 1e-9


# =============================================================================
# Shape Defaults
# =============================================================================

COLOR_TRACE: str = "#0f172a"
COLOR_GEODESIC: str = "#16a34a"
COLOR_CIRCLE: str = "#2563eb"
COLOR_LINE: str = "#9333ea"
COLOR_PARALLEL: str = "#ea580c"
COLOR_PERPENDICULAR: str = "#dc2626"
COLOR_TRIANGLE: str = "#0891b2"
COLOR_MARKER: str = "#f59e0b"

DEFAULT_TRACE_WIDTH: float = 2.0

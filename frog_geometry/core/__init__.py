"""
Core module for Frog Geometry.

Contains:
- Constants: Centralized default values and numeric constants
- Types: Type aliases, shape conventions, model identifiers and poses
- Exceptions: Errors raised by the kernel
- Base: Abstract model interface
"""

from .constants import (
    # Numeric constants
    DEFAULT_DTYPE,
    DEFAULT_EPS,
    DEFAULT_EPS_NORM,
    COLLINEAR_EPS,
    DISK_CLAMP_RADIUS,
    # Animation defaults
    DEFAULT_SPEED,
    DEFAULT_TURN_DURATION,
    DEFAULT_MAX_DT,
    DEFAULT_TRACE_MIN_SPACING,
)

from .types import (
    # Type aliases
    Point,
    Path,
    Vector3,
    PointLike,
    Pose,
    # Identifiers and poses
    SpaceKind,
    PlanarPose,
    SphericalPose,
    # Helpers
    as_path,
    empty_path,
    path_to_numpy,
    validate_path_shape,
    # Shape documentation
    PATH_SHAPE_CONVENTION,
)

from .exceptions import (
    GeometryError,
    UnsupportedConstructionError,
    AnimationBusyError,
)

from .base import (
    SpaceModel,
    MetricDescriptor,
    TriangleResult,
)

__all__ = [
    # Constants
    "DEFAULT_DTYPE",
    "DEFAULT_EPS",
    "DEFAULT_EPS_NORM",
    "COLLINEAR_EPS",
    "DISK_CLAMP_RADIUS",
    "DEFAULT_SPEED",
    "DEFAULT_TURN_DURATION",
    "DEFAULT_MAX_DT",
    "DEFAULT_TRACE_MIN_SPACING",
    # Types
    "Point",
    "Path",
    "Vector3",
    "PointLike",
    "Pose",
    "SpaceKind",
    "PlanarPose",
    "SphericalPose",
    "as_path",
    "empty_path",
    "path_to_numpy",
    "validate_path_shape",
    "PATH_SHAPE_CONVENTION",
    # Exceptions
    "GeometryError",
    "UnsupportedConstructionError",
    "AnimationBusyError",
    # Base classes
    "SpaceModel",
    "MetricDescriptor",
    "TriangleResult",
]

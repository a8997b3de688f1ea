"""
Geometric models for Frog Geometry.

Contains:
- Conversion: hemisphere lift and projection, Mobius addition, disk clamp
- Models: Euclidean plane, Poincare disk, projected sphere
- Registry: model lookup by identifier
- Metrics: exact distances, angles and path lengths
"""

from .conversion import (
    lift_to_hemisphere,
    project_to_view,
    sphere_advance,
    sphere_turn,
    mobius_add,
    clamp_to_disk,
    hyperbolic_step,
)

from .euclidean import EuclideanModel
from .hyperbolic import (
    HyperbolicModel,
    OrthoCircle,
    orthogonal_circle_through,
    circle_circle_intersections,
    arc_contains,
    sample_arc,
)
from .spherical import SphericalModel

from .registry import (
    SpaceLike,
    get_model,
    build_model,
    available_spaces,
    parse_space,
)

from .metrics import distance, angle, path_length

__all__ = [
    # Conversion
    "lift_to_hemisphere",
    "project_to_view",
    "sphere_advance",
    "sphere_turn",
    "mobius_add",
    "clamp_to_disk",
    "hyperbolic_step",
    # Models
    "EuclideanModel",
    "HyperbolicModel",
    "SphericalModel",
    "OrthoCircle",
    "orthogonal_circle_through",
    "circle_circle_intersections",
    "arc_contains",
    "sample_arc",
    # Registry
    "SpaceLike",
    "get_model",
    "build_model",
    "available_spaces",
    "parse_space",
    # Metrics
    "distance",
    "angle",
    "path_length",
]

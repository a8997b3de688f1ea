"""
Utility functions for Frog Geometry.

Includes vector primitives, 3-D rotations, configuration management and
logging setup.
"""

from .vector import (
    as_point,
    as_vector3,
    dot,
    norm,
    cross2,
    cross3,
    normalize,
    perp,
    unit_from_angle,
    wrap_angle,
)
from .rotation import (
    rotate_about_axis,
    slerp,
    great_circle_basis,
    tangent_basis,
)
from .config import EngineConfig, load_config, save_config
from .logging_config import setup_logging

__all__ = [
    # Vectors
    "as_point",
    "as_vector3",
    "dot",
    "norm",
    "cross2",
    "cross3",
    "normalize",
    "perp",
    "unit_from_angle",
    "wrap_angle",
    # Rotations
    "rotate_about_axis",
    "slerp",
    "great_circle_basis",
    "tangent_basis",
    # Config
    "EngineConfig",
    "load_config",
    "save_config",
    # Logging
    "setup_logging",
]

"""
Type aliases and shape conventions for Frog Geometry.

This module defines type aliases for the tensor shapes used throughout
the library and documents the view-domain conventions.

Shape Conventions:
==================

Point: (2,)
    A coordinate pair in the 2-D view domain shared by every model.
    - Euclidean: unconstrained
    - Hyperbolic: inside the open unit disk (Poincare model)
    - Spherical: inside or on the unit disk (orthographic projection
      of the upper hemisphere)

Path: (N, 2)
    An ordered sequence of view points. N == 0 signals that a
    construction is impossible for the given input.

Vector3: (3,)
    A point or tangent vector on the unit sphere (spherical model only).

All tensors are float64 (see DEFAULT_DTYPE).
"""

from enum import Enum
from typing import NamedTuple, Sequence, Union

import numpy as np
import torch

from .constants import DEFAULT_DTYPE


# =============================================================================
# Basic Type Aliases
# =============================================================================

# 2-D view point, shape (2,)
Point = torch.Tensor

# Ordered view points, shape (N, 2)
Path = torch.Tensor

# Unit-sphere point or tangent, shape (3,)
Vector3 = torch.Tensor

# Anything that can be turned into a point
PointLike = Union[torch.Tensor, Sequence[float], np.ndarray]


# =============================================================================
# Shape Convention Documentation
# =============================================================================

PATH_SHAPE_CONVENTION: str = """
Path Tensor Shape Convention: (N, 2)
====================================

    Axis 0 (N): Sample index along the curve, in traversal order
    Axis 1 (2): View coordinates (x, y)

Standard shapes:
    - Single point:         (2,)
    - Geodesic segment:     (N, 2), first row == start, last row == end
    - Closed curve:         (N, 2), first row == last row
    - Impossible result:    (0, 2)

Spherical intermediates use (N, 3) unit vectors before projection.
"""


def validate_path_shape(path: torch.Tensor, name: str = "path") -> None:
    """
    Validate that a tensor follows the path shape convention (N, 2).

    Args:
        path: Tensor to validate
        name: Name for error messages

    Raises:
        ValueError: If tensor doesn't match the expected shape
    """
    if path.ndim != 2:
        raise ValueError(
            f"{name} should have 2 dimensions (N, 2), got {path.ndim}"
        )

    if path.shape[1] != 2:
        raise ValueError(
            f"{name} should have 2 coordinates per point (axis 1), "
            f"got {path.shape[1]}"
        )


def as_path(points: Union[torch.Tensor, Sequence[Sequence[float]]]) -> Path:
    """
    Convert a sequence of points to a float64 path tensor.

    Args:
        points: Tensor or nested sequence of (x, y) pairs

    Returns:
        Path tensor of shape (N, 2)
    """
    if isinstance(points, torch.Tensor):
        path = points.to(DEFAULT_DTYPE)
    elif len(points) == 0:
        path = empty_path()
    else:
        path = torch.as_tensor(np.asarray(points, dtype=np.float64), dtype=DEFAULT_DTYPE)
    validate_path_shape(path)
    return path


def empty_path() -> Path:
    """Return the (0, 2) path used to signal an impossible construction."""
    return torch.zeros(0, 2, dtype=DEFAULT_DTYPE)


def path_to_numpy(path: Path) -> np.ndarray:
    """
    Convert a path to a numpy array for renderers.

    Args:
        path: Path tensor of shape (N, 2)

    Returns:
        float64 array of shape (N, 2)
    """
    validate_path_shape(path)
    return path.detach().cpu().numpy().astype(np.float64, copy=True)


# =============================================================================
# Model Identifiers and Poses
# =============================================================================

class SpaceKind(str, Enum):
    """The three geometric models the frog can live in."""
    EUCLIDEAN = "E"
    HYPERBOLIC = "H"
    SPHERICAL = "S"


class PlanarPose(NamedTuple):
    """Position and heading angle (radians) in the Euclidean plane or Poincare disk."""
    position: torch.Tensor      # (2,)
    heading: float              # radians, measured from +x


class SphericalPose(NamedTuple):
    """Position and tangent heading on the unit sphere."""
    position: torch.Tensor      # (3,) unit vector
    tangent: torch.Tensor       # (3,) unit vector orthogonal to position


Pose = Union[PlanarPose, SphericalPose]

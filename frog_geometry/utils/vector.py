"""
2-D and 3-D vector primitives for Frog Geometry.

Points are float64 tensors of shape (..., 2) and sphere vectors are
float64 tensors of shape (..., 3). Every function is batched over the
leading dimensions and never modifies its inputs.
"""

import math
from typing import Union

import numpy as np
import torch
import torch.nn.functional as F

from ..core.constants import DEFAULT_DTYPE, DEFAULT_EPS_NORM
from ..core.types import PointLike


def as_point(p: PointLike) -> torch.Tensor:
    """
    Convert a point-like value to a float64 tensor of shape (2,).

    Args:
        p: Tensor, numpy array or (x, y) sequence

    Returns:
        Point tensor of shape (2,)

    Raises:
        ValueError: If the value does not hold exactly two coordinates
    """
    if isinstance(p, torch.Tensor):
        t = p.detach().to(DEFAULT_DTYPE)
    else:
        t = torch.as_tensor(np.asarray(p, dtype=np.float64), dtype=DEFAULT_DTYPE)
    if t.shape != (2,):
        raise ValueError(f"point should have shape (2,), got {tuple(t.shape)}")
    return t


def as_vector3(v: Union[torch.Tensor, PointLike]) -> torch.Tensor:
    """Convert a value to a float64 tensor of shape (3,)."""
    if isinstance(v, torch.Tensor):
        t = v.detach().to(DEFAULT_DTYPE)
    else:
        t = torch.as_tensor(np.asarray(v, dtype=np.float64), dtype=DEFAULT_DTYPE)
    if t.shape != (3,):
        raise ValueError(f"vector should have shape (3,), got {tuple(t.shape)}")
    return t


def dot(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """Inner product over the last dimension."""
    return (a * b).sum(dim=-1)


def norm(a: torch.Tensor) -> torch.Tensor:
    """Euclidean norm over the last dimension."""
    return torch.linalg.vector_norm(a, dim=-1)


def cross2(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """
    Scalar 2-D cross product a.x * b.y - a.y * b.x.

    Args:
        a: Vectors of shape (..., 2)
        b: Vectors of shape (..., 2)

    Returns:
        Tensor of shape (...)
    """
    return a[..., 0] * b[..., 1] - a[..., 1] * b[..., 0]


def cross3(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """3-D cross product over the last dimension."""
    return torch.linalg.cross(a, b, dim=-1)


def normalize(v: torch.Tensor, eps: float = DEFAULT_EPS_NORM) -> torch.Tensor:
    """
    Normalize vectors to unit length.

    Zero vectors map to the first basis vector (1, 0) or (1, 0, 0) so that
    the result is always a unit vector.

    Args:
        v: Vectors of shape (..., D)
        eps: Norm below which a vector counts as zero

    Returns:
        Unit vectors of shape (..., D)
    """
    n = norm(v).unsqueeze(-1)
    fallback = torch.zeros_like(v)
    fallback[..., 0] = 1.0
    return torch.where(n > eps, v / n.clamp(min=eps), fallback)


def safe_normalize(v: torch.Tensor, eps: float = DEFAULT_EPS_NORM) -> torch.Tensor:
    """Normalize vectors, leaving zero vectors at zero."""
    return F.normalize(v, p=2, dim=-1, eps=eps)


def perp(v: torch.Tensor) -> torch.Tensor:
    """Rotate 2-D vectors by +90 degrees: (x, y) -> (-y, x)."""
    return torch.stack([-v[..., 1], v[..., 0]], dim=-1)


def unit_from_angle(theta: float) -> torch.Tensor:
    """Unit 2-D vector (cos theta, sin theta)."""
    return torch.tensor([math.cos(theta), math.sin(theta)], dtype=DEFAULT_DTYPE)


def wrap_angle(a: float) -> float:
    """
    Wrap an angle into (-pi, pi].

    Args:
        a: Angle in radians

    Returns:
        Equivalent angle in (-pi, pi]
    """
    two_pi = 2.0 * math.pi
    a = math.fmod(a, two_pi)
    if a <= -math.pi:
        a += two_pi
    elif a > math.pi:
        a -= two_pi
    return a


def clamp_unit(x: torch.Tensor) -> torch.Tensor:
    """Clamp values into [-1, 1] before acos/asin."""
    return torch.clamp(x, -1.0, 1.0)

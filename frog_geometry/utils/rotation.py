"""
Rotations and spherical interpolation of 3-D unit vectors.

Used by the spherical model to move along great circles, to turn the
tangent heading about the position axis, and to sample arcs.

All functions accept vectors of shape (..., 3).
"""

from typing import Tuple, Union

import torch

from ..core.constants import DEFAULT_DTYPE, DEFAULT_EPS
from .vector import clamp_unit, cross3, dot, norm, normalize, safe_normalize


def rotate_about_axis(
    v: torch.Tensor,
    axis: torch.Tensor,
    angle: Union[float, torch.Tensor]
) -> torch.Tensor:
    """
    Rotate vectors about a unit axis (Rodrigues' formula).

    v' = v cos(a) + (k x v) sin(a) + k (k . v)(1 - cos(a))

    Args:
        v: Vectors of shape (..., 3)
        axis: Unit rotation axis of shape (..., 3)
        angle: Rotation angle in radians, scalar or shape (...)

    Returns:
        Rotated vectors of shape (..., 3)
    """
    angle = torch.as_tensor(angle, dtype=v.dtype)
    if angle.dim() > 0:
        angle = angle.unsqueeze(-1)

    c = torch.cos(angle)
    s = torch.sin(angle)
    k_dot_v = dot(axis, v).unsqueeze(-1)

    return v * c + cross3(axis, v) * s + axis * k_dot_v * (1 - c)


def slerp(
    a: torch.Tensor,
    b: torch.Tensor,
    t: torch.Tensor
) -> torch.Tensor:
    """
    Spherical linear interpolation between two unit vectors.

    x(t) = sin((1-t)w)/sin(w) * a + sin(tw)/sin(w) * b,  w = acos(a . b)

    Unlike quaternion slerp there is no sign flip: a and -a are
    different points on the sphere.

    Args:
        a: Start unit vector of shape (3,)
        b: End unit vector of shape (3,)
        t: Interpolation parameters of shape (N,) in [0, 1]

    Returns:
        Interpolated unit vectors of shape (N, 3)
    """
    omega = torch.acos(clamp_unit(dot(a, b)))
    sin_omega = torch.sin(omega)

    t = t.to(a.dtype).unsqueeze(-1)

    # Nearly coincident endpoints: fall back to linear interpolation
    if float(sin_omega) < DEFAULT_EPS:
        return normalize((1 - t) * a + t * b)

    s0 = torch.sin((1 - t) * omega) / sin_omega
    s1 = torch.sin(t * omega) / sin_omega

    return safe_normalize(s0 * a + s1 * b)


def great_circle_basis(
    normal: torch.Tensor,
    anchor: torch.Tensor
) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Orthonormal basis (u, v) of the plane orthogonal to ``normal``.

    ``u`` is ``anchor`` projected into the plane, so sampling
    u cos(t) + v sin(t) starts at the anchor's direction.

    Args:
        normal: Unit plane normal of shape (3,)
        anchor: Vector of shape (3,) fixing the start direction

    Returns:
        (u, v) unit vectors of shape (3,)
    """
    u = normalize(anchor - normal * dot(anchor, normal))
    v = normalize(cross3(normal, u))
    return u, v


def sample_great_circle(
    u: torch.Tensor,
    v: torch.Tensor,
    angles: torch.Tensor
) -> torch.Tensor:
    """
    Sample u cos(t) + v sin(t) for each angle.

    Args:
        u, v: Orthonormal basis vectors of shape (3,)
        angles: Angles of shape (N,)

    Returns:
        Unit vectors of shape (N, 3)
    """
    angles = angles.to(DEFAULT_DTYPE).unsqueeze(-1)
    return safe_normalize(u * torch.cos(angles) + v * torch.sin(angles))


def tangent_basis(center: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Orthonormal basis of the tangent plane at a unit vector.

    Built from center x z, or center x y when center is on the z axis.

    Args:
        center: Unit vector of shape (3,)

    Returns:
        (u, v) unit tangent vectors of shape (3,)
    """
    z_axis = torch.tensor([0.0, 0.0, 1.0], dtype=center.dtype)
    u = cross3(center, z_axis)
    if float(norm(u)) < 1e-6:
        y_axis = torch.tensor([0.0, 1.0, 0.0], dtype=center.dtype)
        u = cross3(center, y_axis)
    u = normalize(u)
    v = normalize(cross3(center, u))
    return u, v

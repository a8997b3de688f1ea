"""
Coordinate conversion between intrinsic model coordinates and the view domain.

- Spherical: a view point p with |p| <= 1 is the orthographic projection
  of a point on the upper unit hemisphere; lifting recovers z >= 0.
- Hyperbolic: points live in the Poincare disk; Mobius addition
  translates them while staying inside the disk.

All functions are batched over leading dimensions.
"""

import math

import torch

from ..core.constants import DISK_CLAMP_RADIUS, DISK_CLAMP_TRIGGER_SQ, DIRECTION_EPS
from ..core.types import Point, Vector3
from ..utils.vector import dot, normalize
from ..utils.rotation import rotate_about_axis, tangent_basis


# =============================================================================
# Spherical
# =============================================================================

def lift_to_hemisphere(p: torch.Tensor) -> torch.Tensor:
    """
    Lift view points onto the upper unit hemisphere.

    z = sqrt(max(0, 1 - |p|^2)), then renormalized so the result has
    exactly unit length (points outside the disk land on the equator).

    Args:
        p: View points of shape (..., 2)

    Returns:
        Unit vectors of shape (..., 3) with z >= 0
    """
    r2 = dot(p, p)
    z = torch.sqrt(torch.clamp(1.0 - r2, min=0.0))
    return normalize(torch.cat([p, z.unsqueeze(-1)], dim=-1))


def project_to_view(x: torch.Tensor) -> torch.Tensor:
    """Orthographic projection of sphere points (..., 3) onto the view plane (..., 2)."""
    return x[..., :2].clone()


def sphere_advance(p: Vector3, t: Vector3, arc: float):
    """
    Move along the great circle leaving p in direction t.

    Args:
        p: Unit position of shape (3,)
        t: Unit tangent at p of shape (3,)
        arc: Arc length in radians (may be negative)

    Returns:
        (position, tangent) after the move, both unit vectors
    """
    c = math.cos(arc)
    s = math.sin(arc)
    p2 = p * c + t * s
    t2 = t * c - p * s
    return normalize(p2), normalize(t2)


def sphere_turn(p: Vector3, t: Vector3, angle: float) -> Vector3:
    """
    Rotate the tangent heading t about the position axis p.

    The result stays in the tangent plane at p.

    Args:
        p: Unit position of shape (3,)
        t: Unit tangent of shape (3,)
        angle: Turn angle in radians (counter-clockwise seen from outside)

    Returns:
        Rotated unit tangent of shape (3,)
    """
    return normalize(rotate_about_axis(t, p, angle))


def retangent(p: Vector3, t: Vector3) -> Vector3:
    """
    Project a heading onto the tangent plane at p.

    When t is (nearly) parallel to p, any tangent direction is returned.
    """
    projected = t - p * dot(t, p)
    if float(torch.linalg.vector_norm(projected)) < DIRECTION_EPS:
        return tangent_basis(p)[0]
    return normalize(projected)


# =============================================================================
# Hyperbolic (Poincare disk)
# =============================================================================

def mobius_add(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """
    Mobius addition in the Poincare disk.

    a (+) b = ((1 + 2<a,b> + |b|^2) a + (1 - |a|^2) b) / (1 + 2<a,b> + |a|^2 |b|^2)

    Args:
        a: Disk points of shape (..., 2)
        b: Disk points of shape (..., 2)

    Returns:
        Disk points of shape (..., 2)
    """
    ab = dot(a, b).unsqueeze(-1)
    a2 = dot(a, a).unsqueeze(-1)
    b2 = dot(b, b).unsqueeze(-1)

    num = (1 + 2 * ab + b2) * a + (1 - a2) * b
    den = 1 + 2 * ab + a2 * b2
    return num / den


def clamp_to_disk(
    p: torch.Tensor,
    radius: float = DISK_CLAMP_RADIUS,
    trigger_sq: float = DISK_CLAMP_TRIGGER_SQ,
) -> torch.Tensor:
    """
    Pull points at or beyond the disk boundary back inside.

    Any point with |p|^2 >= trigger_sq is rescaled to norm ``radius`` so
    later divisions by (1 - |p|^2) stay stable.

    Args:
        p: Points of shape (..., 2)
        radius: Norm of clamped points
        trigger_sq: Squared norm at which clamping starts

    Returns:
        Points of shape (..., 2) with |p|^2 < trigger_sq
    """
    r2 = dot(p, p).unsqueeze(-1)
    clamped = normalize(p) * radius
    return torch.where(r2 >= trigger_sq, clamped, p)


def hyperbolic_step(p: Point, direction: Point, distance: float) -> Point:
    """
    Move a disk point a hyperbolic distance along a view direction.

    Translating p to the origin is a Mobius map with a positive real
    derivative at p, so the heading at the origin equals ``direction``.
    From the origin, distance d reaches |x| = tanh(d / 2); translating
    back with p (+) x gives the end point.

    Args:
        p: Start point of shape (2,) inside the disk
        direction: View direction of shape (2,)
        distance: Hyperbolic distance (negative walks backwards)

    Returns:
        End point of shape (2,), clamped inside the disk
    """
    step0 = normalize(direction) * math.tanh(distance / 2.0)
    return clamp_to_disk(mobius_add(p, step0))

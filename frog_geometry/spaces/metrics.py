"""
Exact intrinsic measurements in view coordinates.

- Euclidean: |a - b|
- Hyperbolic: arcosh(1 + 2 |a - b|^2 / ((1 - |a|^2)(1 - |b|^2)))
- Spherical: arccos(<A, B>) on the lifted points

Angles are taken at the middle vertex and lie in [0, pi]; a vertex that
coincides with a neighbour gives 0.
"""

from ..core.types import Path, PointLike, validate_path_shape
from ..utils.vector import as_point
from .registry import SpaceLike, get_model


def distance(space: SpaceLike, a: PointLike, b: PointLike) -> float:
    """
    Exact distance between two view points.

    Args:
        space: Model identifier
        a: First point, shape (2,)
        b: Second point, shape (2,)

    Returns:
        Intrinsic distance (radians of arc on the sphere)
    """
    return get_model(space).distance(as_point(a), as_point(b))


def angle(space: SpaceLike, a: PointLike, b: PointLike, c: PointLike) -> float:
    """
    Intrinsic angle at b between the geodesics to a and c.

    Args:
        space: Model identifier
        a, b, c: View points, shape (2,) each; b is the vertex

    Returns:
        Angle in radians, in [0, pi]
    """
    return get_model(space).angle(as_point(a), as_point(b), as_point(c))


def path_length(space: SpaceLike, path: Path) -> float:
    """
    Intrinsic length of a sampled curve.

    Sums exact distances between consecutive samples; refining the
    sampling of a geodesic converges to the distance of its endpoints.
    """
    validate_path_shape(path)
    return get_model(space).path_length(path)

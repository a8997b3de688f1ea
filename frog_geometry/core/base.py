"""
Abstract base class for the geometric models.

This module defines the interface every model implements. The engine and
the metric functions only talk to models through this interface, so the
active model can be swapped without touching callers.

Class Hierarchy:
    SpaceModel (abstract)
    ├── EuclideanModel
    ├── HyperbolicModel     (Poincare disk)
    └── SphericalModel      (upper hemisphere projected to the disk)
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, Tuple

import math
import torch

from .types import Path, Point, Pose, SpaceKind


class MetricDescriptor(NamedTuple):
    """Human-readable description of a model's metric."""
    title: str
    formula: str


class TriangleResult(NamedTuple):
    """Closed geodesic triangle with its interior angles (radians)."""
    path: Path
    angles: Tuple[float, float, float]

    @property
    def angle_sum(self) -> float:
        return sum(self.angles)

    @property
    def excess(self) -> float:
        """Angle sum minus pi: 0 (flat), negative (hyperbolic), positive (spherical)."""
        return self.angle_sum - math.pi


class SpaceModel(ABC):
    """
    Abstract base class for a 2-D geometric model.

    Every construction takes and returns points in the shared view domain
    (see frog_geometry.core.types). Constructions are pure: they never keep
    state between calls.

    Fail-soft contract:
        Degenerate input returns a reduced-fidelity path (a chord instead
        of an arc) or an empty (0, 2) path meaning "impossible". Only
        constructions that do not exist in the model raise
        UnsupportedConstructionError.

    Subclasses must implement:
        - is_valid(), segment(), line_through(), circle()
        - parallel(), perpendicular()
        - distance(), angle()
        - initial_pose(), advance(), circle_trace()
        - position(), heading(), follow(), turn()
    """

    kind: SpaceKind
    title: str = ""
    formula: str = ""

    def descriptor(self) -> MetricDescriptor:
        """Title and metric formula of the model."""
        return MetricDescriptor(self.title, self.formula)

    # -------------------------------------------------------------------------
    # Validity
    # -------------------------------------------------------------------------

    @abstractmethod
    def is_valid(self, p: Point) -> bool:
        """Whether a view point belongs to the model's domain."""
        pass

    def clamp(self, p: Point) -> Point:
        """Bring a view point into the model's domain (identity by default)."""
        return p

    # -------------------------------------------------------------------------
    # Constructions
    # -------------------------------------------------------------------------

    @abstractmethod
    def segment(self, p: Point, q: Point, steps: Optional[int] = None) -> Path:
        """Geodesic segment from p to q."""
        pass

    @abstractmethod
    def line_through(self, p: Point, q: Point, steps: Optional[int] = None) -> Path:
        """Full geodesic line through p and q."""
        pass

    @abstractmethod
    def circle(self, center: Point, radius: float, steps: Optional[int] = None) -> Path:
        """Circle of intrinsic radius around a view point."""
        pass

    @abstractmethod
    def parallel(
        self,
        base_p: Point,
        base_q: Point,
        through: Point,
        which_end: int = 0,
        steps: Optional[int] = None,
    ) -> Path:
        """Line through ``through`` parallel to the line (base_p, base_q)."""
        pass

    @abstractmethod
    def perpendicular(
        self,
        base_p: Point,
        base_q: Point,
        through: Point,
        steps: Optional[int] = None,
    ) -> Path:
        """Line through ``through`` perpendicular to the line (base_p, base_q)."""
        pass

    def triangle(self, a: Point, b: Point, c: Point, steps: Optional[int] = None) -> TriangleResult:
        """
        Closed geodesic triangle a -> b -> c -> a with its interior angles.

        Args:
            a, b, c: Vertices in view coordinates
            steps: Samples per side (model default if None)

        Returns:
            TriangleResult with the closed path and the angles at a, b, c
        """
        sides = [self.segment(a, b, steps), self.segment(b, c, steps), self.segment(c, a, steps)]
        # Drop the duplicated vertex at each junction
        path = torch.cat([sides[0], sides[1][1:], sides[2][1:]], dim=0)
        angles = (
            self.angle(c, a, b),
            self.angle(a, b, c),
            self.angle(b, c, a),
        )
        return TriangleResult(path, angles)

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    @abstractmethod
    def distance(self, a: Point, b: Point) -> float:
        """Exact intrinsic distance between two view points."""
        pass

    @abstractmethod
    def angle(self, a: Point, b: Point, c: Point) -> float:
        """Intrinsic angle at vertex b, in [0, pi]."""
        pass

    def path_length(self, path: Path) -> float:
        """
        Sum of exact distances between consecutive path points.

        Converges to the intrinsic length of the sampled curve as the
        sample count grows.
        """
        total = 0.0
        for i in range(path.shape[0] - 1):
            total += self.distance(path[i], path[i + 1])
        return total

    # -------------------------------------------------------------------------
    # Frog motion
    # -------------------------------------------------------------------------

    @abstractmethod
    def initial_pose(self) -> Pose:
        """Pose the frog starts in after a reset."""
        pass

    @abstractmethod
    def advance(self, pose: Pose, distance: float, steps: Optional[int] = None) -> Tuple[Path, Pose]:
        """Walk ``distance`` straight ahead; returns the walked path and the end pose."""
        pass

    @abstractmethod
    def circle_trace(self, pose: Pose, radius: float, steps: Optional[int] = None) -> Tuple[Path, Pose]:
        """Circle around the frog; returns the path and the pose on its closing point."""
        pass

    @abstractmethod
    def position(self, pose: Pose) -> Point:
        """View position of a pose."""
        pass

    @abstractmethod
    def heading(self, pose: Pose) -> Point:
        """Unit view direction of a pose."""
        pass

    @abstractmethod
    def follow(self, pose: Pose, view_point: Point) -> Pose:
        """Move a pose onto a view point visited during path following."""
        pass

    @abstractmethod
    def turn(self, pose: Pose, start: float, delta: float, u_prev: float, u: float) -> Pose:
        """
        Heading after a turn has progressed from fraction u_prev to u.

        Args:
            pose: Current pose
            start: Heading angle when the turn was scheduled
            delta: Total turn angle in radians
            u_prev: Completed fraction before this step, in [0, 1]
            u: Completed fraction after this step, in [0, 1]
        """
        pass

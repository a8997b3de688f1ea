"""
Lookup of the geometric models by identifier.

Models are stateless, so one instance per (kind, config) is enough;
instances built from the default configuration are cached.
"""

from typing import Dict, List, Optional, Type, Union

from ..core.base import SpaceModel
from ..core.types import SpaceKind
from ..utils.config import EngineConfig
from .euclidean import EuclideanModel
from .hyperbolic import HyperbolicModel
from .spherical import SphericalModel

SpaceLike = Union[SpaceKind, str]

MODEL_CLASSES: Dict[SpaceKind, Type[SpaceModel]] = {
    SpaceKind.EUCLIDEAN: EuclideanModel,
    SpaceKind.HYPERBOLIC: HyperbolicModel,
    SpaceKind.SPHERICAL: SphericalModel,
}

_NAMES = {
    "e": SpaceKind.EUCLIDEAN,
    "euclidean": SpaceKind.EUCLIDEAN,
    "flat": SpaceKind.EUCLIDEAN,
    "h": SpaceKind.HYPERBOLIC,
    "hyperbolic": SpaceKind.HYPERBOLIC,
    "poincare": SpaceKind.HYPERBOLIC,
    "s": SpaceKind.SPHERICAL,
    "spherical": SpaceKind.SPHERICAL,
    "sphere": SpaceKind.SPHERICAL,
}

_default_models: Dict[SpaceKind, SpaceModel] = {}


def parse_space(value: SpaceLike) -> SpaceKind:
    """
    Resolve a model identifier.

    Accepts a SpaceKind, its letter ("E", "H", "S") or a name such as
    "hyperbolic" (case-insensitive).

    Raises:
        ValueError: If the identifier is unknown
    """
    if isinstance(value, SpaceKind):
        return value
    key = str(value).strip().lower()
    if key not in _NAMES:
        raise ValueError(
            f"Unknown space '{value}'. Available: {[k.value for k in SpaceKind]}"
        )
    return _NAMES[key]


def available_spaces() -> List[SpaceKind]:
    """All model identifiers, in display order."""
    return list(MODEL_CLASSES.keys())


def build_model(kind: SpaceLike, config: EngineConfig) -> SpaceModel:
    """Instantiate a model with the sample counts of ``config``."""
    kind = parse_space(kind)
    if kind is SpaceKind.EUCLIDEAN:
        return EuclideanModel(
            line_extent=config.euclidean_line_extent,
            circle_samples=config.euclidean_circle_samples,
        )
    if kind is SpaceKind.HYPERBOLIC:
        return HyperbolicModel(
            segment_samples=config.hyperbolic_segment_samples,
            advance_samples=config.hyperbolic_advance_samples,
            line_samples=config.hyperbolic_line_samples,
            circle_samples=config.hyperbolic_circle_samples,
            search_samples=config.perpendicular_search_samples,
            refine_iterations=config.perpendicular_refine_iterations,
        )
    return SphericalModel(
        segment_samples=config.spherical_segment_samples,
        advance_samples=config.spherical_advance_samples,
        line_samples=config.spherical_line_samples,
        circle_samples=config.spherical_circle_samples,
    )


def get_model(kind: SpaceLike, config: Optional[EngineConfig] = None) -> SpaceModel:
    """
    Model for an identifier.

    Args:
        kind: Model identifier (see parse_space)
        config: Engine configuration; the cached default model is
            returned when None

    Returns:
        SpaceModel instance
    """
    kind = parse_space(kind)
    if config is not None:
        return build_model(kind, config)
    if kind not in _default_models:
        _default_models[kind] = MODEL_CLASSES[kind]()
    return _default_models[kind]

"""
Configuration management for Frog Geometry.

Provides the engine configuration class and JSON load/save helpers.
"""

import json
from dataclasses import dataclass, field, asdict
from typing import Dict, Any
from pathlib import Path

from ..core.constants import (
    EUCLIDEAN_LINE_EXTENT,
    EUCLIDEAN_CIRCLE_SAMPLES,
    HYPERBOLIC_SEGMENT_SAMPLES,
    HYPERBOLIC_ADVANCE_SAMPLES,
    HYPERBOLIC_LINE_SAMPLES,
    HYPERBOLIC_CIRCLE_SAMPLES,
    SPHERICAL_SEGMENT_SAMPLES,
    SPHERICAL_ADVANCE_SAMPLES,
    SPHERICAL_LINE_SAMPLES,
    SPHERICAL_CIRCLE_SAMPLES,
    PERPENDICULAR_SEARCH_SAMPLES,
    PERPENDICULAR_REFINE_ITERATIONS,
    DEFAULT_SPEED,
    DEFAULT_TURN_DURATION,
    DEFAULT_MAX_DT,
    DEFAULT_TRACE_MIN_SPACING,
    DEFAULT_TRACE_WIDTH,
    COLOR_TRACE,
    COLOR_MARKER,
)


@dataclass
class EngineConfig:
    """
    Configuration for the geometry engine.

    Attributes:
        # Sampling
        euclidean_line_extent: Half length of a drawn Euclidean line
        euclidean_circle_samples: Samples on a Euclidean circle
        hyperbolic_segment_samples: Samples on a hyperbolic segment
        hyperbolic_advance_samples: Samples on a hyperbolic advance path
        hyperbolic_line_samples: Samples on a full hyperbolic line
        hyperbolic_circle_samples: Samples on a hyperbolic circle
        spherical_segment_samples: Samples on a spherical segment
        spherical_advance_samples: Samples on a spherical advance path
        spherical_line_samples: Samples on a full great circle
        spherical_circle_samples: Samples on a spherical small circle

        # Perpendicular search (hyperbolic)
        perpendicular_search_samples: Coarse sweep sample count
        perpendicular_refine_iterations: Local refinement rounds

        # Animation
        speed: Default path speed in view units per second
        turn_duration: Default heading change duration in seconds
        max_dt: Largest dt consumed by a single step
        trace_min_spacing: Minimum distance between trace points

        # Shapes
        trace_color: Default in-progress trace colour
        trace_width: Default stroke width
        marker_color: Default marker colour
    """

    # Sampling
    euclidean_line_extent: float = EUCLIDEAN_LINE_EXTENT
    euclidean_circle_samples: int = EUCLIDEAN_CIRCLE_SAMPLES
    hyperbolic_segment_samples: int = HYPERBOLIC_SEGMENT_SAMPLES
    hyperbolic_advance_samples: int = HYPERBOLIC_ADVANCE_SAMPLES
    hyperbolic_line_samples: int = HYPERBOLIC_LINE_SAMPLES
    hyperbolic_circle_samples: int = HYPERBOLIC_CIRCLE_SAMPLES
    spherical_segment_samples: int = SPHERICAL_SEGMENT_SAMPLES
    spherical_advance_samples: int = SPHERICAL_ADVANCE_SAMPLES
    spherical_line_samples: int = SPHERICAL_LINE_SAMPLES
    spherical_circle_samples: int = SPHERICAL_CIRCLE_SAMPLES

    # Perpendicular search (hyperbolic)
    perpendicular_search_samples: int = PERPENDICULAR_SEARCH_SAMPLES
    perpendicular_refine_iterations: int = PERPENDICULAR_REFINE_ITERATIONS

    # Animation
    speed: float = DEFAULT_SPEED
    turn_duration: float = DEFAULT_TURN_DURATION
    max_dt: float = DEFAULT_MAX_DT
    trace_min_spacing: float = DEFAULT_TRACE_MIN_SPACING

    # Shapes
    trace_color: str = COLOR_TRACE
    trace_width: float = DEFAULT_TRACE_WIDTH
    marker_color: str = COLOR_MARKER

    # Additional fields
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.turn_duration <= 0:
            raise ValueError(f"turn_duration must be positive, got {self.turn_duration}")
        if self.max_dt <= 0:
            raise ValueError(f"max_dt must be positive, got {self.max_dt}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'EngineConfig':
        """Create config from dictionary."""
        # Extract known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        known_kwargs = {k: v for k, v in config_dict.items() if k in known_fields and k != 'extra'}
        extra_kwargs = {k: v for k, v in config_dict.items() if k not in known_fields}
        extra_kwargs.update(config_dict.get('extra', {}))

        config = cls(**known_kwargs)
        config.extra = extra_kwargs
        return config

    def update(self, **kwargs) -> 'EngineConfig':
        """Return a new config with updated values."""
        config_dict = self.to_dict()
        config_dict.update(kwargs)
        return EngineConfig.from_dict(config_dict)


def load_config(filepath: str) -> EngineConfig:
    """
    Load configuration from JSON file.

    Args:
        filepath: Path to JSON config file

    Returns:
        EngineConfig object
    """
    filepath = Path(filepath)
    with open(filepath, 'r') as f:
        config_dict = json.load(f)
    return EngineConfig.from_dict(config_dict)


def save_config(config: EngineConfig, filepath: str) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: EngineConfig object to save
        filepath: Output file path
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

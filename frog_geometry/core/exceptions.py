"""
Exceptions raised by Frog Geometry.

Degenerate geometry never raises: constructions return a fallback or an
empty path instead. These exceptions cover operations that do not exist
in a model and violations of the animation scheduling contract.
"""


class GeometryError(Exception):
    """Base exception for Frog Geometry errors."""
    pass


class UnsupportedConstructionError(GeometryError):
    """Construction that has no meaning in the active model."""
    pass


class AnimationBusyError(GeometryError):
    """A job was scheduled while another job is still active."""
    pass

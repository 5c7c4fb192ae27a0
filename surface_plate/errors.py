"""Exceptions raised by the surface plate reduction package."""


class SurfacePlateError(Exception):
    """Base exception for all surface plate reduction errors."""
    pass


class ValidationError(SurfacePlateError):
    """Raised when caller-supplied input is rejected."""
    pass


class ConfigurationError(ValidationError):
    """Raised when plate dimensions or reflector spacing are unusable."""
    pass


class CardinalityError(ValidationError):
    """Raised when a line's readings do not match its expected station count."""
    pass


class ReductionError(SurfacePlateError):
    """Raised when the reduction itself cannot proceed."""
    pass


class DegenerateMidpointError(ReductionError):
    """Raised when the mid-station value of an empty sequence is requested."""
    pass


class ReportStateError(ReductionError):
    """
    Raised when the build-then-finalize lifecycle is violated.

    This signals a programming error in the caller, not bad readings:
    baseline columns only exist once the plate-wide lowest value is known.
    """
    pass

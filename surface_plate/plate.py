"""Surface plate geometry: diagonal inset and suggested station counts.

The diagonal lines cannot start at the plate corners, so they are inset
along the diagonal by an amount chosen to make the remaining length an exact
multiple of the reflector foot spacing. For a diagonal of length ``a`` and a
spacing ``b`` the minimal inset is ``(a mod b) / 2``; that can be zero, which
would put the reflector feet on the damaged corner region, so half a spacing
is always added:

    inset = ((a mod b) / 2) + b / 2

Since ``a mod b < b`` the inset always stays below one spacing.
"""

import logging
import math

from .errors import ConfigurationError
from .models import (
    BOTTOM_STARTING_DIAGONAL,
    EAST_PERIMETER,
    HORIZONTAL_CENTER,
    LineSegment,
    NORTH_PERIMETER,
    SOUTH_PERIMETER,
    SuggestedStationCounts,
    SurfacePlateConfig,
    TOP_STARTING_DIAGONAL,
    VERTICAL_CENTER,
    WEST_PERIMETER,
)

logger = logging.getLogger(__name__)

# Station counts computed in floating point land a hair under the integer
# they represent (e.g. 19.999999999999996); round before flooring.
_COUNT_DECIMALS = 9

_DIAGONAL_LINES = (TOP_STARTING_DIAGONAL, BOTTOM_STARTING_DIAGONAL)
_HORIZONTAL_LINES = (NORTH_PERIMETER, SOUTH_PERIMETER, HORIZONTAL_CENTER)
_VERTICAL_LINES = (EAST_PERIMETER, WEST_PERIMETER, VERTICAL_CENTER)


def configure_plate(
    height_inches: float,
    width_inches: float,
    reflector_foot_spacing_inches: float,
) -> SurfacePlateConfig:
    """Validate the plate dimensions and derive the survey geometry.

    Args:
        height_inches: Plate extent along the north-south axis.
        width_inches: Plate extent along the east-west axis.
        reflector_foot_spacing_inches: Distance between the reflector feet,
            i.e. the step between stations.

    Returns:
        Frozen SurfacePlateConfig.

    Raises:
        ConfigurationError: If any dimension is not a positive finite number.
    """
    height = _require_positive("height_inches", height_inches)
    width = _require_positive("width_inches", width_inches)
    spacing = _require_positive("reflector_foot_spacing_inches", reflector_foot_spacing_inches)

    diagonal = math.hypot(height, width)
    inset = ((diagonal % spacing) / 2) + (spacing / 2)

    counts = SuggestedStationCounts(
        diagonal=_station_count(diagonal - 2 * inset, spacing),
        horizontal=_station_count(width - 2 * spacing, spacing),
        vertical=_station_count(height - 2 * spacing, spacing),
    )
    logger.debug(
        "Plate %sx%s in., spacing %s in.: diagonal %.4f, inset %.4f, stations %s",
        height, width, spacing, diagonal, inset, counts.model_dump(),
    )
    return SurfacePlateConfig(
        height_inches=height,
        width_inches=width,
        reflector_foot_spacing_inches=spacing,
        diagonal_inches=diagonal,
        diagonal_inset=inset,
        suggested_station_counts=counts,
    )


def expected_reading_count(config: SurfacePlateConfig, line: LineSegment) -> int:
    """Number of operator readings the given line must carry."""
    counts = config.suggested_station_counts
    if line in _DIAGONAL_LINES:
        return counts.diagonal
    if line in _HORIZONTAL_LINES:
        return counts.horizontal
    if line in _VERTICAL_LINES:
        return counts.vertical
    raise ConfigurationError(f"Not a Union Jack line: {line.name}")


def plate_diagonal_angle(config: SurfacePlateConfig) -> float:
    """Angle (radians) between the diagonals and the north-south axis."""
    return math.atan(config.width_inches / config.height_inches)


def _station_count(usable_length: float, spacing: float) -> int:
    if usable_length <= 0:
        return 0
    return math.floor(round(usable_length / spacing, _COUNT_DECIMALS))


def _require_positive(name: str, value: float) -> float:
    if value is None or isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(number) or number <= 0:
        raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
    return number

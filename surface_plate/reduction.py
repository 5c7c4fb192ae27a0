"""Per-line reduction of autocollimator readings (Moody worksheet columns 1-8).

Each Union Jack line is reduced in two phases:

- ``DraftTable`` holds the readings and any boundary values inherited from
  neighboring lines and exposes columns 1-6 (plus 6a on center lines).
- ``FinalizedTable`` wraps a draft together with the plate-wide lowest datum
  value and adds the baseline columns 7-8 and the station vertices.

Only ``report.build_report`` knows the plate-wide lowest value, so it is the
only place finalized tables are created. Every column is rounded as soon as
it is computed because later columns consume the rounded values.
"""

from __future__ import annotations

import math
from functools import cached_property
from itertools import accumulate
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import CardinalityError, DegenerateMidpointError, ReductionError, ReportStateError
from .models import (
    BOTTOM_STARTING_DIAGONAL,
    Direction,
    EAST_PERIMETER,
    HORIZONTAL_CENTER,
    LineSegment,
    NORTH_PERIMETER,
    SOUTH_PERIMETER,
    SurfacePlateConfig,
    TOP_STARTING_DIAGONAL,
    TableKind,
    VERTICAL_CENTER,
    WEST_PERIMETER,
)
from .plate import plate_diagonal_angle
from .rounding import round_to

SINE_OF_ONE_ARC_SECOND = math.sin(math.radians(1 / 3600))

ANGULAR_DECIMALS = 2
LINEAR_DECIMALS = 8


# ---------------------------------------------------------------------------
# Mid-station values
# ---------------------------------------------------------------------------


def mid_station_value(values: Sequence[float]) -> float:
    """Middle value of a column (diagonal convention).

    Odd length: the middle element. Even length: the average of the two
    middle elements.
    """
    n = len(values)
    if n == 0:
        raise DegenerateMidpointError("Mid-station value of an empty column is undefined")
    if n % 2 == 1:
        return values[n // 2]
    return 0.5 * (values[n // 2 - 1] + values[n // 2])


def perimeter_mid_station_value(values: Sequence[float]) -> float:
    """Middle value of a column (perimeter and center line convention).

    Odd length: the element at ``floor(n / 2)``. Even length: the average of
    the elements at ``((n / 2) - 1) / 2`` and ``n / 2``, exactly as Moody's
    perimeter worksheets are reduced. The first index is truncated toward
    zero when it is fractional.
    """
    n = len(values)
    if n == 0:
        raise DegenerateMidpointError("Mid-station value of an empty column is undefined")
    if n % 2 == 1:
        return values[n // 2]
    # TODO: confirm the lower index against Moody's perimeter worksheets; it
    # differs from the diagonal convention for every even length above 2.
    lower = int(((n / 2) - 1) / 2)
    return 0.5 * (values[lower] + values[n // 2])


_MIDPOINT_METHODS: dict[TableKind, Callable[[Sequence[float]], float]] = {
    TableKind.DIAGONAL: mid_station_value,
    TableKind.PERIMETER: perimeter_mid_station_value,
    TableKind.CENTER: perimeter_mid_station_value,
}


# ---------------------------------------------------------------------------
# Draft tables (columns 1-6)
# ---------------------------------------------------------------------------


class Boundary(BaseModel):
    """Values a perimeter or center line inherits from the lines it meets."""

    model_config = ConfigDict(frozen=True)

    first_value_of_column5: float
    last_value_of_column6: float


class DraftTable(BaseModel):
    """One line's worksheet before the plate-wide baseline is known.

    ``readings`` already starts with the zero reference station.
    """

    model_config = ConfigDict(frozen=True)

    line: LineSegment
    kind: TableKind
    readings: tuple[float, ...]
    reflector_foot_spacing_inches: float
    boundary: Optional[Boundary] = None

    @model_validator(mode="after")
    def _boundary_matches_kind(self) -> "DraftTable":
        if (self.kind == TableKind.DIAGONAL) != (self.boundary is None):
            raise ReportStateError(
                f"{self.line.name}: diagonal lines take no boundary values, "
                f"perimeter and center lines require them"
            )
        return self

    @property
    def num_stations(self) -> int:
        return len(self.readings)

    def mid_station_value(self, values: Sequence[float]) -> float:
        return _MIDPOINT_METHODS[self.kind](values)

    # Column #1
    @property
    def station_numbers(self) -> list[int]:
        return [i + 1 for i in range(self.num_stations)]

    # Column #3 (column #2 is the readings themselves)
    @cached_property
    def angular_displacements(self) -> tuple[float, ...]:
        local_zero = self.readings[1]
        return tuple(
            0.0 if i == 0 else round_to(x - local_zero, ANGULAR_DECIMALS)
            for i, x in enumerate(self.readings)
        )

    # Column #4
    @cached_property
    def cumulative_displacements(self) -> tuple[float, ...]:
        return tuple(
            round_to(total, ANGULAR_DECIMALS)
            for total in accumulate(self.angular_displacements)
        )

    # Column #5
    @cached_property
    def correction_factors(self) -> tuple[float, ...]:
        if self.kind == TableKind.DIAGONAL:
            return _diagonal_corrections(self.cumulative_displacements)
        return _boundary_corrections(self.cumulative_displacements, self.boundary)

    # Column #6
    @cached_property
    def datum_displacements(self) -> tuple[float, ...]:
        return tuple(
            round_to(x + c, ANGULAR_DECIMALS)
            for x, c in zip(self.cumulative_displacements, self.correction_factors)
        )

    # Column #6a
    @cached_property
    def error_shifted_displacements(self) -> tuple[float, ...]:
        """Column 6 with the midpoint error shifted out (center lines only).

        The horizontal center line has the negated mid-station value of
        column 6 added to every station; the vertical center line copies
        column 6 unchanged.
        """
        if self.kind != TableKind.CENTER:
            raise ReductionError(f"{self.line.name}: column 6a only exists for center lines")
        if self.line.start == Direction.EAST:
            shift = -self.mid_station_value(self.datum_displacements)
            return tuple(round_to(x + shift, ANGULAR_DECIMALS) for x in self.datum_displacements)
        if self.line.start == Direction.NORTH:
            return self.datum_displacements
        raise ReductionError(
            f"Center line must start East or North, not {self.line.start.value}"
        )

    @property
    def baseline_source(self) -> tuple[float, ...]:
        """The column that is shifted onto the baseline (6a on center lines, 6 otherwise)."""
        if self.kind == TableKind.CENTER:
            return self.error_shifted_displacements
        return self.datum_displacements

    @property
    def lowest_datum_value(self) -> float:
        return min(self.baseline_source)


def _diagonal_corrections(cumulative: tuple[float, ...]) -> tuple[float, ...]:
    """Column 5 for a diagonal: zero the line's net drift and center it.

    The arithmetic progression passes through the negated midpoint of
    column 4 at the mid station, so column 6 reads zero there.
    """
    last = cumulative[-1]
    factor = -last / (len(cumulative) - 1)
    offset = 0.5 * last - mid_station_value(cumulative)
    return tuple(
        round_to(factor * i + offset, ANGULAR_DECIMALS)
        for i in range(len(cumulative))
    )


def _boundary_corrections(
    cumulative: tuple[float, ...],
    boundary: Boundary,
) -> tuple[float, ...]:
    """Column 5 for a perimeter or center line.

    The first station takes ``first_value_of_column5`` and the last station
    lands on ``last_value_of_column6``; the discrepancy is spread linearly.
    """
    n = len(cumulative)
    difference = boundary.last_value_of_column6 - cumulative[-1]
    factor = (boundary.first_value_of_column5 - difference) / (n - 1)
    return tuple(
        round_to(difference + (n - i - 1) * factor, ANGULAR_DECIMALS)
        for i in range(n)
    )


def diagonal_table(
    line: LineSegment,
    readings: Sequence[float],
    reflector_foot_spacing_inches: float,
) -> DraftTable:
    return DraftTable(
        line=line,
        kind=TableKind.DIAGONAL,
        readings=_with_reference_station(line, readings),
        reflector_foot_spacing_inches=reflector_foot_spacing_inches,
    )


def perimeter_table(
    line: LineSegment,
    readings: Sequence[float],
    reflector_foot_spacing_inches: float,
    first_value_of_column5: float,
    last_value_of_column6: float,
) -> DraftTable:
    return DraftTable(
        line=line,
        kind=TableKind.PERIMETER,
        readings=_with_reference_station(line, readings),
        reflector_foot_spacing_inches=reflector_foot_spacing_inches,
        boundary=Boundary(
            first_value_of_column5=first_value_of_column5,
            last_value_of_column6=last_value_of_column6,
        ),
    )


def center_table(
    line: LineSegment,
    readings: Sequence[float],
    reflector_foot_spacing_inches: float,
    first_value_of_column5: float,
    last_value_of_column6: float,
) -> DraftTable:
    return DraftTable(
        line=line,
        kind=TableKind.CENTER,
        readings=_with_reference_station(line, readings),
        reflector_foot_spacing_inches=reflector_foot_spacing_inches,
        boundary=Boundary(
            first_value_of_column5=first_value_of_column5,
            last_value_of_column6=last_value_of_column6,
        ),
    )


def _with_reference_station(line: LineSegment, readings: Sequence[float]) -> tuple[float, ...]:
    """Prepend the zero reference station after checking the readings."""
    if len(readings) == 0:
        raise CardinalityError(f"{line.name}: at least one reading is required")
    values: list[float] = [0.0]
    for i, reading in enumerate(readings):
        try:
            value = float(reading)
        except (TypeError, ValueError) as e:
            raise CardinalityError(
                f"{line.name}: reading {i + 1} is not a number: {reading!r}"
            ) from e
        if not math.isfinite(value):
            raise CardinalityError(f"{line.name}: reading {i + 1} is not finite: {reading!r}")
        values.append(value)
    return tuple(values)


# ---------------------------------------------------------------------------
# Finalized tables (columns 7-8, vertices)
# ---------------------------------------------------------------------------


class Splice(BaseModel):
    """Intersection points shown as phantom stations on a worksheet.

    ``leading`` is prepended to columns 5 and 6, ``trailing`` is appended to
    column 6 only.
    """

    model_config = ConfigDict(frozen=True)

    leading: float
    trailing: float


class FinalizedTable(BaseModel):
    """A draft table shifted onto the plate-wide baseline."""

    model_config = ConfigDict(frozen=True)

    draft: DraftTable
    lowest_value_across_all_tables: Optional[float]
    splice: Optional[Splice] = None

    @model_validator(mode="after")
    def _lowest_value_is_known(self) -> "FinalizedTable":
        lowest = self.lowest_value_across_all_tables
        if lowest is None or not math.isfinite(lowest):
            raise ReportStateError(
                f"{self.draft.line.name}: baseline columns need the plate-wide "
                f"lowest datum value, got {lowest!r}"
            )
        return self

    @property
    def line(self) -> LineSegment:
        return self.draft.line

    @property
    def kind(self) -> TableKind:
        return self.draft.kind

    @property
    def num_stations(self) -> int:
        return self.draft.num_stations

    @property
    def station_numbers(self) -> list[int]:
        return self.draft.station_numbers

    @property
    def readings(self) -> tuple[float, ...]:
        return self.draft.readings

    @property
    def angular_displacements(self) -> tuple[float, ...]:
        return self.draft.angular_displacements

    @property
    def cumulative_displacements(self) -> tuple[float, ...]:
        return self.draft.cumulative_displacements

    @property
    def correction_factors(self) -> tuple[float, ...]:
        return self.draft.correction_factors

    @property
    def datum_displacements(self) -> tuple[float, ...]:
        return self.draft.datum_displacements

    @property
    def error_shifted_displacements(self) -> tuple[float, ...]:
        return self.draft.error_shifted_displacements

    # Column #7
    @cached_property
    def baseline_displacements(self) -> tuple[float, ...]:
        shift = abs(self.lowest_value_across_all_tables)
        return tuple(
            round_to(x + shift, ANGULAR_DECIMALS) for x in self.draft.baseline_source
        )

    # Column #8
    @cached_property
    def baseline_displacements_inches(self) -> tuple[float, ...]:
        """Column 7 converted to a height in the unit of the foot spacing."""
        scale = SINE_OF_ONE_ARC_SECOND * self.draft.reflector_foot_spacing_inches
        return tuple(
            round_to(x * scale, LINEAR_DECIMALS) for x in self.baseline_displacements
        )

    @property
    def worksheet_column5(self) -> list[float]:
        column = list(self.correction_factors)
        if self.splice is None:
            return column
        return [self.splice.leading] + column

    @property
    def worksheet_column6(self) -> list[float]:
        column = list(self.datum_displacements)
        if self.splice is None:
            return column
        return [self.splice.leading] + column + [self.splice.trailing]

    def vertices(
        self,
        config: SurfacePlateConfig,
        z_scale: float = 1.0,
    ) -> list[tuple[float, float, float]]:
        """Station positions, origin at the bottom-left plate corner."""
        return [
            (*station_xy(self.line, i, config), z * z_scale)
            for i, z in enumerate(self.baseline_displacements_inches)
        ]


def station_xy(line: LineSegment, index: int, config: SurfacePlateConfig) -> tuple[float, float]:
    """Plan position of station ``index`` along ``line``."""
    angle = plate_diagonal_angle(config)
    sin_a, cos_a = math.sin(angle), math.cos(angle)
    x_inset = config.diagonal_inset * sin_a
    y_inset = config.diagonal_inset * cos_a
    width = config.width_inches
    height = config.height_inches
    step = index * config.reflector_foot_spacing_inches

    if line == TOP_STARTING_DIAGONAL:
        return x_inset + step * sin_a, height - y_inset - step * cos_a
    if line == BOTTOM_STARTING_DIAGONAL:
        return width - x_inset - step * sin_a, height - y_inset - step * cos_a
    if line == NORTH_PERIMETER:
        return width - x_inset - step, height - y_inset
    if line == EAST_PERIMETER:
        return width - x_inset, height - y_inset - step
    if line == SOUTH_PERIMETER:
        return width - x_inset - step, y_inset
    if line == WEST_PERIMETER:
        return x_inset, height - y_inset - step
    if line == HORIZONTAL_CENTER:
        return width - x_inset - step, height / 2
    if line == VERTICAL_CENTER:
        return width / 2, height - y_inset - step
    raise ReductionError(f"No station geometry for line {line.name}")

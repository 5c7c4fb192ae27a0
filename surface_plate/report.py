"""Cross-line wiring of the eight Union Jack tables into one Moody report.

The lines are reduced in the order the survey implies, because every later
line inherits boundary values from lines already reduced:

1. The two diagonals, from their readings alone.
2. The four perimeter lines, seeded from diagonal column 6 end values.
3. The two center lines, seeded from perimeter column 6 mid-station values.
4. The intersection points are spliced onto the perimeter and center
   worksheets as phantom stations.
5. The lowest datum value over all tables is found and every table is
   finalized against it.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from .errors import CardinalityError, ConfigurationError
from .models import (
    BOTTOM_STARTING_DIAGONAL,
    EAST_PERIMETER,
    HORIZONTAL_CENTER,
    LineSegment,
    NORTH_PERIMETER,
    PlateReadings,
    READING_FIELDS,
    SOUTH_PERIMETER,
    SurfacePlateConfig,
    TOP_STARTING_DIAGONAL,
    UNION_JACK_LINES,
    VERTICAL_CENTER,
    WEST_PERIMETER,
)
from .plate import expected_reading_count
from .reduction import (
    DraftTable,
    FinalizedTable,
    Splice,
    center_table,
    diagonal_table,
    perimeter_table,
)
from .rounding import round_to

logger = logging.getLogger(__name__)

MICROINCHES_PER_INCH = 1_000_000


class MoodyReport(BaseModel):
    """The eight finalized tables of one plate survey."""

    model_config = ConfigDict(frozen=True)

    config: SurfacePlateConfig
    top_starting_diagonal: FinalizedTable
    bottom_starting_diagonal: FinalizedTable
    north_perimeter: FinalizedTable
    east_perimeter: FinalizedTable
    south_perimeter: FinalizedTable
    west_perimeter: FinalizedTable
    horizontal_center: FinalizedTable
    vertical_center: FinalizedTable
    lowest_value_across_all_tables: float

    @property
    def tables(self) -> tuple[FinalizedTable, ...]:
        return (
            self.top_starting_diagonal,
            self.bottom_starting_diagonal,
            self.north_perimeter,
            self.east_perimeter,
            self.south_perimeter,
            self.west_perimeter,
            self.horizontal_center,
            self.vertical_center,
        )

    def table(self, line: LineSegment) -> FinalizedTable:
        for table in self.tables:
            if table.line == line:
                return table
        raise KeyError(line.name)

    def vertices(self, z_scale: float = 1.0) -> list[tuple[float, float, float]]:
        """All station vertices of all lines, flattened in table order."""
        return [
            vertex
            for table in self.tables
            for vertex in table.vertices(self.config, z_scale)
        ]

    def overall_flatness(self) -> float:
        """Peak-to-valley height over every station, in inches."""
        heights = [z for _, _, z in self.vertices()]
        return max(heights) - min(heights)

    def overall_flatness_microinches(self) -> float:
        return round_to(self.overall_flatness() * MICROINCHES_PER_INCH, 2)


def build_report(config: SurfacePlateConfig, readings: PlateReadings) -> MoodyReport:
    """Reduce all eight lines of a survey into a finalized report.

    Args:
        config: Plate geometry from plate.configure_plate.
        readings: Operator readings for every line (without the zero
            reference reading).

    Returns:
        MoodyReport with every table shifted onto the common baseline.

    Raises:
        ConfigurationError: If the plate cannot hold a station on some line.
        CardinalityError: If a line's readings do not match its station count.
    """
    _validate_cardinality(config, readings)
    spacing = config.reflector_foot_spacing_inches

    # Step 1: Diagonals
    top = diagonal_table(
        TOP_STARTING_DIAGONAL, readings.top_starting_diagonal, spacing
    )
    bottom = diagonal_table(
        BOTTOM_STARTING_DIAGONAL, readings.bottom_starting_diagonal, spacing
    )
    top_corner = top.datum_displacements[0]
    bottom_corner = bottom.datum_displacements[0]

    # Step 2: Perimeters, seeded from the diagonal corners
    north = perimeter_table(
        NORTH_PERIMETER, readings.north_perimeter, spacing,
        first_value_of_column5=bottom_corner, last_value_of_column6=top_corner,
    )
    east = perimeter_table(
        EAST_PERIMETER, readings.east_perimeter, spacing,
        first_value_of_column5=bottom_corner, last_value_of_column6=top_corner,
    )
    south = perimeter_table(
        SOUTH_PERIMETER, readings.south_perimeter, spacing,
        first_value_of_column5=top_corner, last_value_of_column6=bottom_corner,
    )
    west = perimeter_table(
        WEST_PERIMETER, readings.west_perimeter, spacing,
        first_value_of_column5=top_corner, last_value_of_column6=bottom_corner,
    )

    # Step 3: Centers, seeded from the perimeter mid stations
    east_mid = east.mid_station_value(east.datum_displacements)
    west_mid = west.mid_station_value(west.datum_displacements)
    north_mid = north.mid_station_value(north.datum_displacements)
    south_mid = south.mid_station_value(south.datum_displacements)
    horizontal = center_table(
        HORIZONTAL_CENTER, readings.horizontal_center, spacing,
        first_value_of_column5=east_mid, last_value_of_column6=west_mid,
    )
    vertical = center_table(
        VERTICAL_CENTER, readings.vertical_center, spacing,
        first_value_of_column5=north_mid, last_value_of_column6=south_mid,
    )

    # Step 4: Intersection points as phantom worksheet stations
    splices = {
        line: Splice(
            leading=draft.boundary.first_value_of_column5,
            trailing=draft.boundary.last_value_of_column6,
        )
        for line, draft in (
            (NORTH_PERIMETER, north),
            (EAST_PERIMETER, east),
            (SOUTH_PERIMETER, south),
            (WEST_PERIMETER, west),
            (HORIZONTAL_CENTER, horizontal),
            (VERTICAL_CENTER, vertical),
        )
    }

    # Step 5: Common baseline
    drafts = (top, bottom, north, east, south, west, horizontal, vertical)
    lowest = min(draft.lowest_datum_value for draft in drafts)
    for draft in drafts:
        logger.debug(
            "%s: col6 %s -> %s, lowest %s",
            draft.line.name,
            draft.datum_displacements[0],
            draft.datum_displacements[-1],
            draft.lowest_datum_value,
        )
    logger.info(
        "Reduced %d lines on a %sx%s in. plate; lowest datum value %s arc-sec",
        len(drafts), config.height_inches, config.width_inches, lowest,
    )

    finalized = {
        READING_FIELDS[draft.line]: _finalize(draft, lowest, splices.get(draft.line))
        for draft in drafts
    }
    return MoodyReport(config=config, lowest_value_across_all_tables=lowest, **finalized)


def _finalize(draft: DraftTable, lowest: float, splice: Splice | None) -> FinalizedTable:
    return FinalizedTable(draft=draft, lowest_value_across_all_tables=lowest, splice=splice)


def _validate_cardinality(config: SurfacePlateConfig, readings: PlateReadings) -> None:
    """Reject readings whose lengths disagree with the plate geometry."""
    problems: list[str] = []
    for line in UNION_JACK_LINES:
        expected = expected_reading_count(config, line)
        if expected < 1:
            raise ConfigurationError(
                f"A {config.height_inches}x{config.width_inches} in. plate has no "
                f"{line.name} stations at {config.reflector_foot_spacing_inches} in. spacing"
            )
        actual = len(readings.for_line(line))
        if actual != expected:
            problems.append(f"{line.name}: expected {expected} readings, got {actual}")
    if problems:
        raise CardinalityError("; ".join(problems))

"""All Pydantic data models for the surface plate reduction pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# --- Geometry identity ---


class Direction(str, Enum):
    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"
    NORTHEAST = "Northeast"
    SOUTHEAST = "Southeast"
    SOUTHWEST = "Southwest"
    NORTHWEST = "Northwest"

    def __str__(self) -> str:
        return self.value


class TableKind(str, Enum):
    DIAGONAL = "diagonal"
    PERIMETER = "perimeter"
    CENTER = "center"


class LineSegment(BaseModel):
    """One of the eight Union Jack measurement lines."""

    model_config = ConfigDict(frozen=True)

    start: Direction
    end: Direction
    name: str

    @property
    def display_name(self) -> str:
        return f"{self.start.value} -> {self.end.value}"


# The two diagonals (named relative to the left-to-right direction).
TOP_STARTING_DIAGONAL = LineSegment(
    start=Direction.NORTHWEST, end=Direction.SOUTHEAST, name="Top-Starting Diagonal"
)
BOTTOM_STARTING_DIAGONAL = LineSegment(
    start=Direction.NORTHEAST, end=Direction.SOUTHWEST, name="Bottom-Starting Diagonal"
)
# The four perimeter lines.
NORTH_PERIMETER = LineSegment(
    start=Direction.NORTHEAST, end=Direction.NORTHWEST, name="North Perimeter"
)
EAST_PERIMETER = LineSegment(
    start=Direction.NORTHEAST, end=Direction.SOUTHEAST, name="East Perimeter"
)
SOUTH_PERIMETER = LineSegment(
    start=Direction.SOUTHEAST, end=Direction.SOUTHWEST, name="South Perimeter"
)
WEST_PERIMETER = LineSegment(
    start=Direction.NORTHWEST, end=Direction.SOUTHWEST, name="West Perimeter"
)
# The two center lines.
HORIZONTAL_CENTER = LineSegment(
    start=Direction.EAST, end=Direction.WEST, name="Horizontal Center"
)
VERTICAL_CENTER = LineSegment(
    start=Direction.NORTH, end=Direction.SOUTH, name="Vertical Center"
)

# Report order; also the order readings are listed on the worksheets.
UNION_JACK_LINES: tuple[LineSegment, ...] = (
    TOP_STARTING_DIAGONAL,
    BOTTOM_STARTING_DIAGONAL,
    NORTH_PERIMETER,
    EAST_PERIMETER,
    SOUTH_PERIMETER,
    WEST_PERIMETER,
    HORIZONTAL_CENTER,
    VERTICAL_CENTER,
)


# --- Plate configuration ---


class PlateDimensions(BaseModel):
    """Raw plate dimensions as entered by the operator."""

    height_inches: float
    width_inches: float
    reflector_foot_spacing_inches: float


class SuggestedStationCounts(BaseModel):
    """Number of operator readings per line (excludes the zero reference station)."""

    model_config = ConfigDict(frozen=True)

    diagonal: int
    horizontal: int
    vertical: int


class SurfacePlateConfig(BaseModel):
    """Plate dimensions plus the geometry derived from them. Build via plate.configure_plate."""

    model_config = ConfigDict(frozen=True)

    height_inches: float
    width_inches: float
    reflector_foot_spacing_inches: float
    diagonal_inches: float
    diagonal_inset: float
    suggested_station_counts: SuggestedStationCounts


# --- Readings ---


class PlateReadings(BaseModel):
    """Autocollimator readings in arc-seconds for all eight lines.

    The leading zero reference reading is not part of these lists; it is
    injected by the reduction.
    """

    top_starting_diagonal: list[float]
    bottom_starting_diagonal: list[float]
    north_perimeter: list[float]
    east_perimeter: list[float]
    south_perimeter: list[float]
    west_perimeter: list[float]
    horizontal_center: list[float]
    vertical_center: list[float]

    def for_line(self, line: LineSegment) -> list[float]:
        return getattr(self, READING_FIELDS[line])


READING_FIELDS: dict[LineSegment, str] = {
    TOP_STARTING_DIAGONAL: "top_starting_diagonal",
    BOTTOM_STARTING_DIAGONAL: "bottom_starting_diagonal",
    NORTH_PERIMETER: "north_perimeter",
    EAST_PERIMETER: "east_perimeter",
    SOUTH_PERIMETER: "south_perimeter",
    WEST_PERIMETER: "west_perimeter",
    HORIZONTAL_CENTER: "horizontal_center",
    VERTICAL_CENTER: "vertical_center",
}


# --- Tolerances ---


class GateStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class ToleranceStandard(str, Enum):
    FEDERAL = "GGG-P-463c"
    ISO = "ISO 8512-2"


class FlatnessTolerance(BaseModel):
    """Permissible overall flatness for one grade."""

    standard: ToleranceStandard
    grade: str
    microinches: float
    micrometers: float


class GradeCheck(BaseModel):
    tolerance: FlatnessTolerance
    status: GateStatus
    message: str


class GradeReport(BaseModel):
    flatness_microinches: float
    checks: list[GradeCheck]
    best_federal_grade: str | None = None
    best_iso_grade: str | None = None


# --- Final Output ---


class Point3D(BaseModel):
    """A station position; (0, 0) is the bottom-left plate corner, z is height in inches."""

    x: float
    y: float
    z: float


class StationRow(BaseModel):
    """One worksheet row (columns 1-8, plus 6a on center lines)."""

    station: int
    reading: float
    angular_displacement: float
    cumulative_displacement: float
    correction_factor: float
    datum_displacement: float
    error_shifted_displacement: float | None = None  # Column 6a, center lines only
    baseline_displacement: float
    baseline_displacement_inches: float


class LineResult(BaseModel):
    name: str
    display_name: str
    kind: TableKind
    num_stations: int
    rows: list[StationRow]
    # Columns 5 and 6 with the intersection points spliced in (perimeter/center lines).
    worksheet_column5: list[float] = Field(default_factory=list)
    worksheet_column6: list[float] = Field(default_factory=list)
    vertices: list[Point3D]


class PlateSummary(BaseModel):
    config: SurfacePlateConfig
    tolerances: list[FlatnessTolerance]


class FlatnessReport(BaseModel):
    plate: PlateSummary
    lines: list[LineResult]
    lowest_datum_value: float
    z_scale: float = 1.0
    flatness_microinches: float
    flatness_micrometers: float
    grades: GradeReport
    diagnostics: dict = Field(default_factory=dict)

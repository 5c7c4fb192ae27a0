"""Main analysis pipeline orchestrator: readings in, serializable report out."""

import logging

from .models import (
    FlatnessReport,
    LineResult,
    PlateDimensions,
    PlateReadings,
    PlateSummary,
    Point3D,
    StationRow,
    SurfacePlateConfig,
    TableKind,
)
from .plate import configure_plate
from .reduction import FinalizedTable
from .report import build_report
from .rounding import round_to
from .tolerances import MICROINCHES_TO_MICROMETERS, flatness_tolerances, grade_plate

logger = logging.getLogger(__name__)


def summarize_plate(dimensions: PlateDimensions) -> PlateSummary:
    """Plate geometry and grade tolerances, before any readings are taken."""
    config = configure_plate(
        dimensions.height_inches,
        dimensions.width_inches,
        dimensions.reflector_foot_spacing_inches,
    )
    return PlateSummary(config=config, tolerances=flatness_tolerances(config))


def analyze_plate(
    dimensions: PlateDimensions,
    readings: PlateReadings,
    z_scale: float = 1.0,
) -> FlatnessReport:
    """
    Full analysis pipeline.

    Args:
        dimensions: Plate height, width and reflector foot spacing.
        readings: Autocollimator readings for all eight lines.
        z_scale: Vertical exaggeration applied to the returned vertices.

    Returns:
        FlatnessReport with every line's worksheet, vertices and the grade report.
    """
    diagnostics: dict = {}

    # Step A: Plate geometry
    summary = summarize_plate(dimensions)
    config = summary.config
    diagnostics["suggested_station_counts"] = config.suggested_station_counts.model_dump()

    # Step B: Reduce all lines onto the common baseline
    report = build_report(config, readings)
    diagnostics["lowest_datum_value"] = report.lowest_value_across_all_tables
    diagnostics["corner_values"] = {
        table.line.name: [table.datum_displacements[0], table.datum_displacements[-1]]
        for table in report.tables
    }

    # Step C: Overall flatness and grading
    flatness = report.overall_flatness_microinches()
    grades = grade_plate(config, flatness)
    diagnostics["vertex_count"] = sum(t.num_stations for t in report.tables)
    logger.info(
        "Overall flatness %s microinches (federal grade %s, ISO grade %s)",
        flatness, grades.best_federal_grade, grades.best_iso_grade,
    )

    # Step D: Assemble result
    return FlatnessReport(
        plate=summary,
        lines=[_line_result(table, config, z_scale) for table in report.tables],
        lowest_datum_value=report.lowest_value_across_all_tables,
        z_scale=z_scale,
        flatness_microinches=flatness,
        flatness_micrometers=round_to(flatness * MICROINCHES_TO_MICROMETERS, 2),
        grades=grades,
        diagnostics=diagnostics,
    )


def _line_result(table: FinalizedTable, config: SurfacePlateConfig, z_scale: float) -> LineResult:
    shifted = (
        table.error_shifted_displacements if table.kind == TableKind.CENTER else None
    )
    rows = [
        StationRow(
            station=table.station_numbers[i],
            reading=table.readings[i],
            angular_displacement=table.angular_displacements[i],
            cumulative_displacement=table.cumulative_displacements[i],
            correction_factor=table.correction_factors[i],
            datum_displacement=table.datum_displacements[i],
            error_shifted_displacement=shifted[i] if shifted is not None else None,
            baseline_displacement=table.baseline_displacements[i],
            baseline_displacement_inches=table.baseline_displacements_inches[i],
        )
        for i in range(table.num_stations)
    ]
    return LineResult(
        name=table.line.name,
        display_name=table.line.display_name,
        kind=table.kind,
        num_stations=table.num_stations,
        rows=rows,
        worksheet_column5=table.worksheet_column5,
        worksheet_column6=table.worksheet_column6,
        vertices=[Point3D(x=x, y=y, z=z) for x, y, z in table.vertices(config, z_scale)],
    )

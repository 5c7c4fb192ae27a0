"""Flatness tolerances by grade and grading of a measured plate.

Two standards are reported, both driven by the full plate diagonal:

- Federal Specification GGG-P-463c: grade AA allows ``0.04 * D^2 + 40``
  microinches (D in inches); grade A doubles it and grade B doubles it again.
- ISO 8512-2: with the diagonal rounded up to the next 100 mm (L), grade 0
  allows ``0.003 * L + 2.5`` micrometers and every coarser grade doubles both
  terms.
"""

from __future__ import annotations

import math

from .models import (
    FlatnessTolerance,
    GateStatus,
    GradeCheck,
    GradeReport,
    SurfacePlateConfig,
    ToleranceStandard,
)
from .rounding import round_to

MICROINCHES_TO_MICROMETERS = 0.0254
MICROMETERS_TO_MICROINCHES = 39.37
MILLIMETERS_PER_INCH = 25.4

# grade -> multiple of grade AA
_FEDERAL_GRADES = (("AA", 1), ("A", 2), ("B", 4))
# grade -> (coefficient per mm of diagonal, constant micrometers)
_ISO_GRADES = (
    ("0", 0.003, 2.5),
    ("1", 0.006, 5.0),
    ("2", 0.012, 10.0),
    ("3", 0.024, 20.0),
)


def flatness_tolerances(config: SurfacePlateConfig) -> list[FlatnessTolerance]:
    """Permissible overall flatness for every grade, finest first within each standard."""
    diagonal = config.diagonal_inches
    tolerances: list[FlatnessTolerance] = []

    grade_aa = 0.04 * diagonal * diagonal + 40
    for grade, multiple in _FEDERAL_GRADES:
        microinches = grade_aa * multiple
        tolerances.append(FlatnessTolerance(
            standard=ToleranceStandard.FEDERAL,
            grade=grade,
            microinches=round_to(microinches, 2),
            micrometers=round_to(microinches * MICROINCHES_TO_MICROMETERS, 2),
        ))

    diagonal_mm = math.ceil(diagonal * MILLIMETERS_PER_INCH / 100) * 100
    for grade, coefficient, constant in _ISO_GRADES:
        micrometers = coefficient * diagonal_mm + constant
        tolerances.append(FlatnessTolerance(
            standard=ToleranceStandard.ISO,
            grade=grade,
            microinches=round_to(micrometers * MICROMETERS_TO_MICROINCHES, 2),
            micrometers=round_to(micrometers, 2),
        ))

    return tolerances


def grade_plate(config: SurfacePlateConfig, flatness_microinches: float) -> GradeReport:
    """Check a measured overall flatness against every grade."""
    checks = [_check_grade(t, flatness_microinches) for t in flatness_tolerances(config)]
    return GradeReport(
        flatness_microinches=flatness_microinches,
        checks=checks,
        best_federal_grade=_best_grade(checks, ToleranceStandard.FEDERAL),
        best_iso_grade=_best_grade(checks, ToleranceStandard.ISO),
    )


def _check_grade(tolerance: FlatnessTolerance, flatness_microinches: float) -> GradeCheck:
    label = f"{tolerance.standard.value} grade {tolerance.grade}"
    if flatness_microinches <= tolerance.microinches:
        return GradeCheck(
            tolerance=tolerance,
            status=GateStatus.PASS,
            message=f"{flatness_microinches} <= {tolerance.microinches} microinches ({label})",
        )
    return GradeCheck(
        tolerance=tolerance,
        status=GateStatus.FAIL,
        message=f"{flatness_microinches} > {tolerance.microinches} microinches ({label})",
    )


def _best_grade(checks: list[GradeCheck], standard: ToleranceStandard) -> str | None:
    # Tolerances are listed finest first.
    for check in checks:
        if check.tolerance.standard == standard and check.status == GateStatus.PASS:
            return check.tolerance.grade
    return None

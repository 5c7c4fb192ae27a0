"""End-to-end reduction of Moody's published survey.

Moody tabulates tenths of an arc-second; lines whose correction factors are
not whole tenths are compared at that precision. Where the two-place value
rounds the other way from his printed tenth (horizontal center column 5 at
station 7 reads -3.2 here, -3.1 in print) the gap is a full tenth.
"""

import math

import pytest

from surface_plate.errors import CardinalityError, ConfigurationError
from surface_plate.models import (
    BOTTOM_STARTING_DIAGONAL,
    EAST_PERIMETER,
    HORIZONTAL_CENTER,
    NORTH_PERIMETER,
    PlateReadings,
    SOUTH_PERIMETER,
    TOP_STARTING_DIAGONAL,
    VERTICAL_CENTER,
    WEST_PERIMETER,
)
from surface_plate.plate import configure_plate
from surface_plate.reduction import SINE_OF_ONE_ARC_SECOND, station_xy
from surface_plate.report import build_report
from surface_plate.rounding import round_to

TENTH = 0.1 + 1e-9

# line -> (column 3, column 4)
MOODY_EXACT_COLUMNS = {
    TOP_STARTING_DIAGONAL: (
        [0, 0, -0.5, -1.5, -1.3, -1, -0.9, -1, -1.5, -1, -1.7, -1.5, -1.3, -1.2, -1.6, -1.9, -2.3, -1.2, -1.6, -2.0, -3.0],
        [0, 0, -0.5, -2.0, -3.3, -4.3, -5.2, -6.2, -7.7, -8.7, -10.4, -11.9, -13.2, -14.4, -16.0, -17.9, -20.2, -21.4, -23.0, -25.0, -28.0],
    ),
    BOTTOM_STARTING_DIAGONAL: (
        [0, 0, -1.2, -1.2, -1.4, -1.1, -0.9, -1.6, -1.6, -1.2, -2.1, -2.2, -2.1, -2.1, -1.8, -2.4, -2.4, -2.4, -1.8, -2.3, -3.4],
        [0, 0, -1.2, -2.4, -3.8, -4.9, -5.8, -7.4, -9.0, -10.2, -12.3, -14.5, -16.6, -18.7, -20.5, -22.9, -25.3, -27.7, -29.5, -31.8, -35.2],
    ),
    NORTH_PERIMETER: (
        [0, 0, -0.8, 0, -0.2, -0.3, -0.6, -1.5, -1.0, -1.7, -1.9, -1.8, -1.9, -2.1, -2.0, -1.5, -2.6],
        [0, 0, -0.8, -0.8, -1.0, -1.3, -1.9, -3.4, -4.4, -6.1, -8.0, -9.8, -11.7, -13.8, -15.8, -17.3, -19.9],
    ),
    EAST_PERIMETER: (
        [0, 0, -1.4, -1.0, -0.7, -0.1, -0.3, 0, 0.5, 0.7, 0],
        [0, 0, -1.4, -2.4, -3.1, -3.2, -3.5, -3.5, -3.0, -2.3, -2.3],
    ),
    SOUTH_PERIMETER: (
        [0, 0, -1.4, -0.8, -0.9, -1.3, -1.1, -1.3, -1.8, -2.4, -2.9, -2.9, -3.1, -3.1, -3.0, -2.4, -2.5],
        [0, 0, -1.4, -2.2, -3.1, -4.4, -5.5, -6.8, -8.6, -11.0, -13.9, -16.8, -19.9, -23.0, -26.0, -28.4, -30.9],
    ),
    WEST_PERIMETER: (
        [0, 0, -1.4, -1.5, -1.3, -1.0, -1.5, -0.1, 0, 0, -1.1],
        [0, 0, -1.4, -2.9, -4.2, -5.2, -6.7, -6.8, -6.8, -6.8, -7.9],
    ),
    HORIZONTAL_CENTER: (
        [0, 0, 0.7, 0.4, 0.8, 0.3, -0.2, -0.2, -0.4, -0.4, -1.4, -0.9, -1.4, -1.7, -1.0, -1.3, -1.3],
        [0, 0, 0.7, 1.1, 1.9, 2.2, 2.0, 1.8, 1.4, 1.0, -0.4, -1.3, -2.7, -4.4, -5.4, -6.7, -8.0],
    ),
    VERTICAL_CENTER: (
        [0, 0, -0.2, -0.3, -0.1, 0, 0.3, 0.9, 0.8, 0.5, 0.4],
        [0, 0, -0.2, -0.5, -0.6, -0.6, -0.3, 0.6, 1.4, 1.9, 2.3],
    ),
}

# line -> (column 5, column 6, column 7), to the nearest tenth
MOODY_TENTHS_COLUMNS = {
    BOTTOM_STARTING_DIAGONAL: (
        [-5.3, -3.5, -1.8, 0, 1.7, 3.5, 5.3, 7.0, 8.8, 10.5, 12.3, 14.1, 15.8, 17.6, 19.3, 21.1, 22.9, 24.6, 26.4, 28.1, 29.9],
        [-5.3, -3.5, -3.0, -2.4, -2.1, -1.4, -0.5, -0.4, -0.2, 0.3, 0, -0.4, -0.8, -1.1, -1.2, -1.8, -2.4, -3.1, -3.1, -3.7, -5.3],
        [1.5, 3.3, 3.8, 4.4, 4.7, 5.4, 6.3, 6.4, 6.6, 7.1, 6.8, 6.4, 6.0, 5.7, 5.6, 5.0, 4.4, 3.7, 3.7, 3.1, 1.5],
    ),
    NORTH_PERIMETER: (
        [-5.3, -4.0, -2.6, -1.3, 0.1, 1.4, 2.8, 4.1, 5.5, 6.9, 8.2, 9.6, 10.9, 12.3, 13.6, 15.0, 16.3],
        [-5.3, -4.0, -3.4, -2.1, -0.9, 0.1, 0.9, 0.7, 1.1, 0.8, 0.2, -0.2, -0.8, -1.5, -2.2, -2.3, -3.6],
        [1.5, 2.8, 3.4, 4.7, 5.9, 6.9, 7.7, 7.5, 7.9, 7.6, 7.0, 6.6, 6.0, 5.3, 4.6, 4.5, 3.2],
    ),
    EAST_PERIMETER: (
        [-5.3, -4.9, -4.5, -4.1, -3.7, -3.3, -2.9, -2.5, -2.1, -1.7, -1.3],
        [-5.3, -4.9, -6.0, -6.5, -6.8, -6.5, -6.4, -6.0, -5.1, -4.0, -3.6],
        [1.5, 1.9, 0.8, 0.3, 0, 0.3, 0.4, 0.8, 1.7, 2.8, 3.2],
    ),
    SOUTH_PERIMETER: (
        [-3.6, -1.8, 0, 1.9, 3.7, 5.5, 7.3, 9.2, 11.0, 12.8, 14.7, 16.5, 18.3, 20.1, 22.0, 23.8, 25.6],
        [-3.6, -1.8, -1.4, -0.3, 0.6, 1.1, 1.8, 2.4, 2.4, 1.8, 0.8, -0.3, -1.6, -2.9, -4.0, -4.6, -5.3],
        [3.2, 5.0, 5.4, 6.5, 7.4, 7.9, 8.6, 9.2, 9.2, 8.6, 7.6, 6.5, 5.2, 3.9, 2.8, 2.2, 1.5],
    ),
    WEST_PERIMETER: (
        [-3.6, -3.0, -2.4, -1.7, -1.1, -0.5, 0.1, 0.7, 1.4, 2.0, 2.6],
        [-3.6, -3.0, -3.8, -4.6, -5.3, -5.7, -6.6, -6.1, -5.4, -4.8, -5.3],
        [3.2, 3.8, 3.0, 2.2, 1.5, 1.1, 0.2, 0.7, 1.4, 2.0, 1.5],
    ),
    HORIZONTAL_CENTER: (
        [-6.5, -5.9, -5.4, -4.8, -4.2, -3.7, -3.1, -2.6, -2.1, -1.5, -1.0, -0.4, 0.1, 0.7, 1.2, 1.8, 2.3],
        [-6.5, -5.9, -4.7, -3.7, -2.3, -1.5, -1.1, -0.8, -0.7, -0.5, -1.4, -1.7, -2.6, -3.7, -4.2, -4.9, -5.7],
        [1.0, 1.6, 2.9, 3.7, 5.1, 5.9, 6.3, 6.7, 6.8, 7.0, 6.1, 5.8, 4.9, 3.8, 3.3, 2.6, 1.8],
    ),
    VERTICAL_CENTER: (
        [1.1, 1.0, 0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2, 0.1],
        [1.1, 1.0, 0.7, 0.3, 0.1, 0, 0.2, 1.0, 1.7, 2.1, 2.4],
        [7.9, 7.8, 7.5, 7.1, 6.9, 6.8, 7.0, 7.8, 8.5, 8.9, 9.2],
    ),
}


class TestMoodyWorksheets:

    @pytest.mark.parametrize("line", list(MOODY_EXACT_COLUMNS), ids=lambda line: line.name)
    def test_angular_and_cumulative_columns(self, moody_report, line):
        table = moody_report.table(line)
        column3, column4 = MOODY_EXACT_COLUMNS[line]
        assert list(table.angular_displacements) == pytest.approx(column3, abs=1e-9)
        assert list(table.cumulative_displacements) == pytest.approx(column4, abs=1e-9)

    def test_top_starting_diagonal(self, moody_report):
        table = moody_report.table(TOP_STARTING_DIAGONAL)
        assert list(table.correction_factors) == pytest.approx([
            -3.6, -2.2, -0.8, 0.6, 2.0, 3.4, 4.8, 6.2, 7.6, 9.0, 10.4,
            11.8, 13.2, 14.6, 16.0, 17.4, 18.8, 20.2, 21.6, 23.0, 24.4,
        ], abs=1e-9)
        assert list(table.datum_displacements) == pytest.approx([
            -3.6, -2.2, -1.3, -1.4, -1.3, -0.9, -0.4, 0, -0.1, 0.3, 0,
            -0.1, 0, 0.2, 0, -0.5, -1.4, -1.2, -1.4, -2.0, -3.6,
        ], abs=1e-9)
        assert list(table.baseline_displacements) == pytest.approx([
            3.2, 4.6, 5.5, 5.4, 5.5, 5.9, 6.4, 6.8, 6.7, 7.1, 6.8,
            6.7, 6.8, 7.0, 6.8, 6.3, 5.4, 5.6, 5.4, 4.8, 3.2,
        ], abs=1e-9)
        assert table.baseline_displacements_inches[0] == pytest.approx(0.00006206, abs=1e-12)
        assert table.baseline_displacements_inches[-1] == pytest.approx(0.00006206, abs=1e-12)

    @pytest.mark.parametrize("line", list(MOODY_TENTHS_COLUMNS), ids=lambda line: line.name)
    def test_correction_datum_and_baseline_columns(self, moody_report, line):
        table = moody_report.table(line)
        column5, column6, column7 = MOODY_TENTHS_COLUMNS[line]
        assert list(table.correction_factors) == pytest.approx(column5, abs=TENTH)
        assert list(table.datum_displacements) == pytest.approx(column6, abs=TENTH)
        assert list(table.baseline_displacements) == pytest.approx(column7, abs=TENTH)

    def test_horizontal_center_error_shifted_out(self, moody_report):
        table = moody_report.table(HORIZONTAL_CENTER)
        assert list(table.error_shifted_displacements) == pytest.approx([
            -5.8, -5.2, -3.9, -3.0, -1.6, -0.8, -0.4, -0.1, 0, 0.2,
            -0.7, -1.0, -1.9, -3.0, -3.5, -4.2, -5.0,
        ], abs=TENTH)

    def test_horizontal_center_rounds_past_printed_tenths(self, moody_report):
        table = moody_report.table(HORIZONTAL_CENTER)
        assert table.correction_factors[6] == pytest.approx(-3.2, abs=1e-9)
        assert table.error_shifted_displacements[2] == pytest.approx(-4.0, abs=1e-9)

    def test_column_8_is_column_7_in_inches(self, moody_report):
        scale = SINE_OF_ONE_ARC_SECOND * 4
        for table in moody_report.tables:
            for col7, col8 in zip(table.baseline_displacements, table.baseline_displacements_inches):
                assert col8 == round_to(col7 * scale, 8)


class TestCrossLineWiring:

    def test_perimeters_meet_diagonal_corners(self, moody_report):
        top = moody_report.table(TOP_STARTING_DIAGONAL).datum_displacements
        bottom = moody_report.table(BOTTOM_STARTING_DIAGONAL).datum_displacements
        for line in (NORTH_PERIMETER, EAST_PERIMETER):
            table = moody_report.table(line)
            assert table.correction_factors[0] == pytest.approx(bottom[0])
            assert table.datum_displacements[-1] == pytest.approx(top[0])
        for line in (SOUTH_PERIMETER, WEST_PERIMETER):
            table = moody_report.table(line)
            assert table.correction_factors[0] == pytest.approx(top[0])
            assert table.datum_displacements[-1] == pytest.approx(bottom[0])

    def test_centers_meet_perimeter_midpoints(self, moody_report):
        east = moody_report.table(EAST_PERIMETER).datum_displacements
        north = moody_report.table(NORTH_PERIMETER).datum_displacements
        south = moody_report.table(SOUTH_PERIMETER).datum_displacements
        horizontal = moody_report.table(HORIZONTAL_CENTER)
        vertical = moody_report.table(VERTICAL_CENTER)
        assert horizontal.correction_factors[0] == pytest.approx(east[len(east) // 2])
        assert vertical.correction_factors[0] == pytest.approx(north[len(north) // 2])
        assert vertical.datum_displacements[-1] == pytest.approx(south[len(south) // 2])

    def test_lowest_value_is_on_east_perimeter(self, moody_report):
        assert moody_report.lowest_value_across_all_tables == pytest.approx(-6.8)
        assert min(moody_report.table(EAST_PERIMETER).datum_displacements) == pytest.approx(-6.8)

    def test_baseline_touches_zero(self, moody_report):
        lows = [min(table.baseline_displacements) for table in moody_report.tables]
        assert all(low >= 0 for low in lows)
        assert min(lows) == 0

    def test_splice_is_worksheet_only(self, moody_report):
        north = moody_report.table(NORTH_PERIMETER)
        assert north.worksheet_column5 == pytest.approx(
            [north.correction_factors[0]] + list(north.correction_factors)
        )
        assert north.worksheet_column6[0] == pytest.approx(north.correction_factors[0])
        assert north.worksheet_column6[-1] == pytest.approx(north.datum_displacements[-1])
        assert len(north.worksheet_column6) == north.num_stations + 2
        assert len(north.baseline_displacements) == north.num_stations

    def test_diagonals_are_not_spliced(self, moody_report):
        top = moody_report.table(TOP_STARTING_DIAGONAL)
        assert top.worksheet_column6 == list(top.datum_displacements)

    def test_table_lookup(self, moody_report):
        assert moody_report.table(WEST_PERIMETER) is moody_report.west_perimeter
        assert [t.line for t in moody_report.tables][0] == TOP_STARTING_DIAGONAL


class TestVertices:

    def test_vertex_count(self, moody_report):
        assert len(moody_report.vertices()) == 21 * 2 + 17 * 3 + 11 * 3

    def test_top_diagonal_runs_corner_to_corner(self, moody_report, moody_config):
        vertices = moody_report.table(TOP_STARTING_DIAGONAL).vertices(moody_config)
        first_x, first_y, _ = vertices[0]
        last_x, last_y, _ = vertices[-1]
        assert first_x == pytest.approx(moody_config.width_inches - last_x)
        assert first_y == pytest.approx(moody_config.height_inches - last_y)
        assert first_x > 0 and first_y < moody_config.height_inches

    def test_z_scale(self, moody_report, moody_config):
        table = moody_report.table(SOUTH_PERIMETER)
        plain = table.vertices(moody_config)
        scaled = table.vertices(moody_config, z_scale=1000.0)
        for (_, _, z), (_, _, z_scaled) in zip(plain, scaled):
            assert z_scaled == pytest.approx(z * 1000.0)

    def test_center_lines_cross_plate_middle(self, moody_config):
        _, y = station_xy(HORIZONTAL_CENTER, 3, moody_config)
        x, _ = station_xy(VERTICAL_CENTER, 3, moody_config)
        assert y == pytest.approx(24.0)
        assert x == pytest.approx(36.0)

    def test_overall_flatness(self, moody_report):
        assert moody_report.overall_flatness() == pytest.approx(0.00017841, abs=1e-12)
        assert moody_report.overall_flatness_microinches() == pytest.approx(178.41)


class TestValidation:

    def test_wrong_reading_count(self, moody_config, moody_readings):
        moody_readings.east_perimeter.pop()
        moody_readings.vertical_center.append(7.0)
        with pytest.raises(CardinalityError) as excinfo:
            build_report(moody_config, moody_readings)
        message = str(excinfo.value)
        assert "East Perimeter" in message
        assert "Vertical Center" in message

    def test_plate_without_stations(self, moody_readings):
        with pytest.raises(ConfigurationError):
            build_report(configure_plate(4, 4, 10), moody_readings)

    def test_small_plate(self):
        config = configure_plate(12, 12, 3)
        counts = config.suggested_station_counts
        readings = PlateReadings(
            top_starting_diagonal=[1.0] * counts.diagonal,
            bottom_starting_diagonal=[1.0] * counts.diagonal,
            north_perimeter=[2.0] * counts.horizontal,
            east_perimeter=[2.0] * counts.vertical,
            south_perimeter=[2.0] * counts.horizontal,
            west_perimeter=[2.0] * counts.vertical,
            horizontal_center=[3.0] * counts.horizontal,
            vertical_center=[3.0] * counts.vertical,
        )
        report = build_report(config, readings)
        # Identical readings everywhere describe a perfectly flat plate.
        assert report.overall_flatness() == 0


class TestEvenStationCountLines:
    """48 x 68 in. at 4 in.: 15 readings, i.e. 16 stations, on horizontal lines."""

    @pytest.fixture
    def report(self):
        config = configure_plate(48, 68, 4)
        counts = config.suggested_station_counts
        assert counts.horizontal == 15

        def drift(n, start):
            return [start - 0.1 * (i % 4) - 0.05 * i for i in range(n)]

        readings = PlateReadings(
            top_starting_diagonal=drift(counts.diagonal, 6.5),
            bottom_starting_diagonal=drift(counts.diagonal, 6.6),
            north_perimeter=drift(counts.horizontal, 20.5),
            east_perimeter=drift(counts.vertical, 3.5),
            south_perimeter=drift(counts.horizontal, 16.4),
            west_perimeter=drift(counts.vertical, 6.0),
            horizontal_center=drift(counts.horizontal, 11.7),
            vertical_center=drift(counts.vertical, 6.6),
        )
        return build_report(config, readings)

    def test_all_columns_finite(self, report):
        for table in report.tables:
            assert all(math.isfinite(z) for z in table.baseline_displacements_inches)
        assert math.isfinite(report.overall_flatness())

    def test_vertical_center_seeded_from_quarter_and_half_stations(self, report):
        north = report.table(NORTH_PERIMETER).datum_displacements
        south = report.table(SOUTH_PERIMETER).datum_displacements
        assert len(north) == 16
        vertical = report.table(VERTICAL_CENTER)
        assert vertical.correction_factors[0] == pytest.approx(0.5 * (north[3] + north[8]), abs=0.006)
        assert vertical.datum_displacements[-1] == pytest.approx(0.5 * (south[3] + south[8]), abs=0.006)

    def test_horizontal_center_shift_uses_same_midpoint(self, report):
        table = report.table(HORIZONTAL_CENTER)
        column6 = table.datum_displacements
        shift = 0.5 * (column6[3] + column6[8])
        for shifted, value in zip(table.error_shifted_displacements, column6):
            assert shifted == pytest.approx(value - shift, abs=0.006)

"""Shared fixtures: Moody's published 48 x 72 in. survey."""

import pytest

from surface_plate.plate import configure_plate
from surface_plate.reference import MOODY_PLATE, MOODY_READINGS
from surface_plate.report import build_report


@pytest.fixture
def moody_config():
    return configure_plate(
        MOODY_PLATE.height_inches,
        MOODY_PLATE.width_inches,
        MOODY_PLATE.reflector_foot_spacing_inches,
    )


@pytest.fixture
def moody_readings():
    return MOODY_READINGS.model_copy(deep=True)


@pytest.fixture
def moody_report(moody_config, moody_readings):
    return build_report(moody_config, moody_readings)

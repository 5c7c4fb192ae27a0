"""Moody surface plate flatness reduction from Union Jack autocollimator readings."""

from .analyzer import analyze_plate, summarize_plate
from .models import FlatnessReport, PlateDimensions, PlateReadings
from .plate import configure_plate
from .report import MoodyReport, build_report

__all__ = [
    "analyze_plate",
    "summarize_plate",
    "build_report",
    "configure_plate",
    "FlatnessReport",
    "MoodyReport",
    "PlateDimensions",
    "PlateReadings",
]

import traceback

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from surface_plate import analyze_plate, summarize_plate
from surface_plate.errors import SurfacePlateError, ValidationError
from surface_plate.models import PlateDimensions, PlateReadings
from surface_plate.reference import MOODY_PLATE, MOODY_READINGS
from surface_plate.settings import Settings, setup_logger

settings = Settings.from_env()
setup_logger("surface_plate", settings)

app = FastAPI()


class ReportRequest(BaseModel):
    plate: PlateDimensions
    readings: PlateReadings
    z_scale: float | None = None  # falls back to SURFACE_PLATE_Z_SCALE


@app.get("/api/plate")
def plate(height: float, width: float, spacing: float):
    """Return the suggested survey geometry and grade tolerances for a plate."""
    try:
        summary = summarize_plate(PlateDimensions(
            height_inches=height,
            width_inches=width,
            reflector_foot_spacing_inches=spacing,
        ))
        return summary.model_dump()
    except ValidationError as e:
        return _error(400, "Invalid plate configuration", e)


@app.get("/api/reference-readings")
def reference_readings():
    """Return Moody's published 48 x 72 in. plate and its readings."""
    return {
        "plate": MOODY_PLATE.model_dump(),
        "readings": MOODY_READINGS.model_dump(),
    }


@app.post("/api/report")
def report(req: ReportRequest):
    """Reduce the readings of all eight lines and grade the plate."""
    z_scale = req.z_scale if req.z_scale is not None else settings.z_scale
    try:
        result = analyze_plate(req.plate, req.readings, z_scale=z_scale)
        return result.model_dump()
    except ValidationError as e:
        return _error(400, "Invalid survey", e)
    except SurfacePlateError as e:
        return _error(500, "Reduction failed", e, include_traceback=True)


def _error(status: int, error: str, exc: Exception, include_traceback: bool = False):
    content = {"error": error, "detail": str(exc)}
    if include_traceback:
        content["traceback"] = traceback.format_exc()
    return JSONResponse(status_code=status, content=content)

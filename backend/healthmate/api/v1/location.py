from fastapi import APIRouter, Query

from healthmate.schemas.location import CoordinateOut, PositionReportIn
from healthmate.services.geolocation import (
    POSITION_OPTIONS,
    PositionReport,
    resolve_by_name,
    resolve_current_position,
)

router = APIRouter(prefix="/location", tags=["Location"])


@router.get("/options")
def position_options():
    return POSITION_OPTIONS


@router.post("/current", response_model=CoordinateOut)
def current_position(report: PositionReportIn):
    coord = resolve_current_position(PositionReport(**report.model_dump()))
    return CoordinateOut(latitude=coord.latitude, longitude=coord.longitude)


@router.get("/geocode", response_model=CoordinateOut)
async def geocode(q: str = Query(..., max_length=200)):
    coord = await resolve_by_name(q)
    return CoordinateOut(latitude=coord.latitude, longitude=coord.longitude)

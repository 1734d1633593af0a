from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PositionReportIn(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy_m: Optional[float] = None
    captured_at: Optional[datetime] = None
    error_code: Optional[int] = None


class CoordinateOut(BaseModel):
    latitude: float
    longitude: float

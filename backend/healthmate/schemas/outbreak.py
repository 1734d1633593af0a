from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class OutbreakOut(BaseModel):
    id: int
    disease_name: str
    location: str
    severity: str
    description: Optional[str] = None
    precautions: Optional[List[str]] = None
    source: Optional[str] = None
    reported_at: datetime
    is_active: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class OutbreakRefreshOut(BaseModel):
    success: bool
    message: str
    deactivated: int
    inserted: int

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ContactType = Literal["personal_doctor", "family_member", "emergency_service"]


class EmergencyContactIn(BaseModel):
    contact_type: ContactType = "family_member"
    name: str = Field(max_length=200)
    phone_number: str = Field(max_length=32)
    relationship: Optional[str] = Field(default=None, max_length=100)


class EmergencyContactOut(BaseModel):
    id: int
    contact_type: ContactType
    name: str
    phone_number: str
    relationship: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

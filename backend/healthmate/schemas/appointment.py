from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AppointmentStatus = Literal["scheduled", "confirmed", "cancelled", "completed"]


class AppointmentCreate(BaseModel):
    doctor_id: int
    appointment_date: date
    appointment_time: time
    notes: Optional[str] = Field(default=None, max_length=2000)


class ContactAppointmentCreate(BaseModel):
    appointment_date: date
    appointment_time: time
    notes: Optional[str] = Field(default=None, max_length=2000)


class AppointmentUpdate(BaseModel):
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentDoctorOut(BaseModel):
    id: int
    name: str
    specialty: str

    model_config = ConfigDict(from_attributes=True)


class AppointmentOut(BaseModel):
    id: int
    doctor_id: Optional[int] = None
    appointment_date: date
    appointment_time: time
    status: AppointmentStatus
    notes: Optional[str] = None
    created_at: datetime
    doctor: Optional[AppointmentDoctorOut] = None

    model_config = ConfigDict(from_attributes=True)

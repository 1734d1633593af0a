from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from healthmate.core.dependencies import get_current_user
from healthmate.db.session import get_db
from healthmate.models.user import User
from healthmate.schemas.appointment import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from healthmate.services import appointment_service

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("", response_model=list[AppointmentOut])
def list_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return appointment_service.list_appointments(db, user_id=current_user.id)


@router.get("/time-slots")
def time_slots():
    return {"time_slots": list(appointment_service.TIME_SLOTS)}


@router.post("", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return appointment_service.create_appointment(
        db,
        user_id=current_user.id,
        doctor_id=payload.doctor_id,
        appointment_date=payload.appointment_date,
        appointment_time=payload.appointment_time,
        notes=payload.notes,
    )


@router.get("/{appointment_id}", response_model=AppointmentOut)
def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return appointment_service.get_appointment(db, user_id=current_user.id, appointment_id=appointment_id)


@router.put("/{appointment_id}", response_model=AppointmentOut)
def update_appointment(
    appointment_id: int,
    payload: AppointmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return appointment_service.update_appointment(
        db,
        user_id=current_user.id,
        appointment_id=appointment_id,
        appointment_date=payload.appointment_date,
        appointment_time=payload.appointment_time,
        notes=payload.notes,
    )


@router.patch("/{appointment_id}/status", response_model=AppointmentOut)
def change_appointment_status(
    appointment_id: int,
    payload: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return appointment_service.change_status(
        db,
        user_id=current_user.id,
        appointment_id=appointment_id,
        new_status=payload.status,
    )


@router.post("/{appointment_id}/cancel", response_model=AppointmentOut)
def cancel_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return appointment_service.cancel_appointment(db, user_id=current_user.id, appointment_id=appointment_id)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    appointment_service.delete_appointment(db, user_id=current_user.id, appointment_id=appointment_id)

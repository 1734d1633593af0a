import logging
from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session

from healthmate.core.errors import Conflict, NotFound, ValidationError
from healthmate.models.appointment import Appointment
from healthmate.models.doctor import Doctor
from healthmate.models.emergency_contact import EmergencyContact

logger = logging.getLogger("healthmate.appointments")


STATUSES = ("scheduled", "confirmed", "cancelled", "completed")

ALLOWED_TRANSITIONS = {
    "scheduled": {"confirmed", "cancelled"},
    "confirmed": {"cancelled", "completed"},
    "cancelled": set(),
    "completed": set(),
}

TIME_SLOTS = (
    "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "14:00", "14:30", "15:00", "15:30", "16:00", "16:30", "17:00",
)


def _not_found() -> NotFound:
    return NotFound("Appointment not found", user_message="Appointment not found.")


def get_appointment(db: Session, *, user_id: int, appointment_id: int) -> Appointment:
    appointment = (
        db.query(Appointment)
        .filter(
            Appointment.id == appointment_id,
            Appointment.user_id == user_id,
        )
        .first()
    )
    if appointment is None:
        raise _not_found()
    return appointment


def list_appointments(db: Session, *, user_id: int) -> list[Appointment]:
    return (
        db.query(Appointment)
        .filter(Appointment.user_id == user_id)
        .order_by(
            Appointment.appointment_date.asc(),
            Appointment.appointment_time.asc(),
            Appointment.id.asc(),
        )
        .all()
    )


def create_appointment(
    db: Session,
    *,
    user_id: int,
    doctor_id: int,
    appointment_date: date,
    appointment_time: time,
    notes: Optional[str] = None,
) -> Appointment:
    doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    if doctor is None:
        raise NotFound(f"Doctor {doctor_id} does not exist", user_message="Doctor not found.")

    appointment = Appointment(
        user_id=user_id,
        doctor_id=doctor_id,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        notes=notes,
        status="scheduled",
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)

    logger.info("Appointment %s scheduled (user=%s doctor=%s)", appointment.id, user_id, doctor_id)
    return appointment


def book_with_emergency_contact(
    db: Session,
    *,
    user_id: int,
    contact_id: int,
    appointment_date: date,
    appointment_time: time,
    notes: Optional[str] = None,
) -> Appointment:
    contact = (
        db.query(EmergencyContact)
        .filter(
            EmergencyContact.id == contact_id,
            EmergencyContact.user_id == user_id,
        )
        .first()
    )
    if contact is None:
        raise NotFound("Emergency contact not found", user_message="Emergency contact not found.")

    if appointment_time.strftime("%H:%M") not in TIME_SLOTS:
        raise ValidationError(
            f"Time {appointment_time} is not a bookable slot",
            user_message="Please pick one of the available time slots.",
        )

    summary = f"Appointment with emergency contact: {contact.name} ({contact.phone_number})"
    if notes:
        summary += f"\n\nAdditional notes: {notes}"

    appointment = Appointment(
        user_id=user_id,
        doctor_id=None,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        notes=summary,
        status="scheduled",
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def update_appointment(
    db: Session,
    *,
    user_id: int,
    appointment_id: int,
    appointment_date: Optional[date] = None,
    appointment_time: Optional[time] = None,
    notes: Optional[str] = None,
) -> Appointment:
    appointment = get_appointment(db, user_id=user_id, appointment_id=appointment_id)

    if appointment.status in ("cancelled", "completed"):
        raise Conflict(
            f"Appointment {appointment_id} is {appointment.status}",
            user_message=f"This appointment is {appointment.status} and can no longer be changed.",
        )

    if appointment_date is not None:
        appointment.appointment_date = appointment_date
    if appointment_time is not None:
        appointment.appointment_time = appointment_time
    if notes is not None:
        appointment.notes = notes

    db.commit()
    db.refresh(appointment)
    return appointment


def change_status(
    db: Session,
    *,
    user_id: int,
    appointment_id: int,
    new_status: str,
) -> Appointment:
    if new_status not in STATUSES:
        raise ValidationError(f"Unknown status {new_status!r}", user_message="Unknown appointment status.")

    appointment = get_appointment(db, user_id=user_id, appointment_id=appointment_id)

    if new_status not in ALLOWED_TRANSITIONS[appointment.status]:
        raise Conflict(
            f"Illegal transition {appointment.status} -> {new_status}",
            user_message=f"A {appointment.status} appointment cannot be marked {new_status}.",
        )

    appointment.status = new_status
    db.commit()
    db.refresh(appointment)

    logger.info("Appointment %s -> %s", appointment.id, new_status)
    return appointment


def cancel_appointment(db: Session, *, user_id: int, appointment_id: int) -> Appointment:
    return change_status(db, user_id=user_id, appointment_id=appointment_id, new_status="cancelled")


def delete_appointment(db: Session, *, user_id: int, appointment_id: int) -> None:
    appointment = get_appointment(db, user_id=user_id, appointment_id=appointment_id)
    db.delete(appointment)
    db.commit()

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from healthmate.core.dependencies import get_current_user
from healthmate.db.session import get_db
from healthmate.models.user import User
from healthmate.schemas.appointment import AppointmentOut, ContactAppointmentCreate
from healthmate.schemas.emergency_contact import EmergencyContactIn, EmergencyContactOut
from healthmate.services import emergency_contact_service
from healthmate.services.appointment_service import book_with_emergency_contact
from healthmate.services.conversation_router import EMERGENCY_NUMBERS

router = APIRouter(prefix="/emergency-contacts", tags=["Emergency"])


@router.get("/services")
def emergency_services():
    """
    Public emergency numbers shown above the user's own contacts.
    """
    return EMERGENCY_NUMBERS


@router.get("", response_model=list[EmergencyContactOut])
def list_contacts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return emergency_contact_service.list_contacts(db, user_id=current_user.id)


@router.post("", response_model=EmergencyContactOut, status_code=status.HTTP_201_CREATED)
def create_contact(
    payload: EmergencyContactIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return emergency_contact_service.create_contact(db, user_id=current_user.id, **payload.model_dump())


@router.put("/{contact_id}", response_model=EmergencyContactOut)
def update_contact(
    contact_id: int,
    payload: EmergencyContactIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return emergency_contact_service.update_contact(
        db,
        user_id=current_user.id,
        contact_id=contact_id,
        **payload.model_dump(),
    )


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    emergency_contact_service.delete_contact(db, user_id=current_user.id, contact_id=contact_id)


@router.post(
    "/{contact_id}/appointments",
    response_model=AppointmentOut,
    status_code=status.HTTP_201_CREATED,
)
def book_with_contact(
    contact_id: int,
    payload: ContactAppointmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return book_with_emergency_contact(
        db,
        user_id=current_user.id,
        contact_id=contact_id,
        appointment_date=payload.appointment_date,
        appointment_time=payload.appointment_time,
        notes=payload.notes,
    )

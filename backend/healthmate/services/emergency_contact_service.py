from typing import Optional

from sqlalchemy.orm import Session

from healthmate.core.errors import NotFound, ValidationError
from healthmate.models.emergency_contact import EmergencyContact


CONTACT_TYPES = ("personal_doctor", "family_member", "emergency_service")


def _validate(contact_type: str, name: str, phone_number: str) -> None:
    if contact_type not in CONTACT_TYPES:
        raise ValidationError(f"Unknown contact type {contact_type!r}", user_message="Unknown contact type.")
    if not (name or "").strip() or not (phone_number or "").strip():
        raise ValidationError("Missing name or phone", user_message="Please fill in all required fields.")


def get_contact(db: Session, *, user_id: int, contact_id: int) -> EmergencyContact:
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
    return contact


def list_contacts(db: Session, *, user_id: int) -> list[EmergencyContact]:
    return (
        db.query(EmergencyContact)
        .filter(EmergencyContact.user_id == user_id)
        .order_by(EmergencyContact.contact_type.asc(), EmergencyContact.name.asc())
        .all()
    )


def create_contact(
    db: Session,
    *,
    user_id: int,
    contact_type: str,
    name: str,
    phone_number: str,
    relationship: Optional[str] = None,
) -> EmergencyContact:
    _validate(contact_type, name, phone_number)

    contact = EmergencyContact(
        user_id=user_id,
        contact_type=contact_type,
        name=name.strip(),
        phone_number=phone_number.strip(),
        relationship=relationship,
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def update_contact(
    db: Session,
    *,
    user_id: int,
    contact_id: int,
    contact_type: str,
    name: str,
    phone_number: str,
    relationship: Optional[str] = None,
) -> EmergencyContact:
    _validate(contact_type, name, phone_number)
    contact = get_contact(db, user_id=user_id, contact_id=contact_id)

    contact.contact_type = contact_type
    contact.name = name.strip()
    contact.phone_number = phone_number.strip()
    contact.relationship = relationship

    db.commit()
    db.refresh(contact)
    return contact


def delete_contact(db: Session, *, user_id: int, contact_id: int) -> None:
    contact = get_contact(db, user_id=user_id, contact_id=contact_id)
    db.delete(contact)
    db.commit()

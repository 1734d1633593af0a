import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from healthmate.core.dependencies import get_current_user
from healthmate.core.errors import Conflict, NotFound, ValidationError
from healthmate.db.session import get_db
from healthmate.models.user import User
from healthmate.schemas.doctor import DoctorListOut, DoctorOut, ReferenceOut
from healthmate.services.distance import Coordinate, distance_km
from healthmate.services.doctor_directory import (
    DatabaseDoctorAccessor,
    DirectoryFilter,
    get_doctor_info,
    list_doctors,
    log_doctor_contact_access,
    search_gate,
)
from healthmate.services.geolocation import resolve_by_name, validate_coordinate

logger = logging.getLogger("healthmate.directory")

router = APIRouter(prefix="/doctors", tags=["Doctors"])


async def _resolve_reference(
    lat: Optional[float],
    lng: Optional[float],
    place: Optional[str],
) -> Optional[Coordinate]:
    if lat is not None or lng is not None:
        if lat is None or lng is None:
            raise ValidationError(
                "Both lat and lng are required",
                user_message="Please provide both latitude and longitude.",
            )
        return validate_coordinate(lat, lng)

    if place and place.strip():
        return await resolve_by_name(place)

    return None


@router.get("", response_model=DoctorListOut)
async def search_doctors(
    q: str = Query("", max_length=200),
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    place: Optional[str] = Query(None, max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    token = search_gate.begin(current_user.id)

    reference = await _resolve_reference(lat, lng, place)
    ranked = await list_doctors(
        DatabaseDoctorAccessor(current_user.id),
        DirectoryFilter(search_term=q, reference=reference),
        user_id=current_user.id,
    )

    if not search_gate.is_current(current_user.id, token):
        logger.info("Discarding superseded doctor search for user %s", current_user.id)
        raise Conflict(
            "Doctor search superseded by a newer request",
            user_message="A newer search replaced this one.",
        )

    revealed = [r.doctor.id for r in ranked if r.doctor.can_view_contact]
    for doctor_id in revealed:
        log_doctor_contact_access(db, user_id=current_user.id, doctor_id=doctor_id)
    if revealed:
        db.commit()

    return DoctorListOut(
        reference=ReferenceOut(latitude=reference.latitude, longitude=reference.longitude) if reference else None,
        doctors=[DoctorOut.from_ranked(r) for r in ranked],
    )


@router.get("/{doctor_id}", response_model=DoctorOut)
def get_doctor(
    doctor_id: int,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    info = get_doctor_info(db, doctor_id=doctor_id, user_id=current_user.id)
    if info is None:
        raise NotFound(f"Doctor {doctor_id} not found", user_message="Doctor not found.")

    if info.can_view_contact:
        log_doctor_contact_access(db, user_id=current_user.id, doctor_id=doctor_id)
        db.commit()

    distance = None
    if lat is not None and lng is not None and info.coordinate is not None:
        distance = distance_km(validate_coordinate(lat, lng), info.coordinate)

    return DoctorOut.from_info(info, distance)

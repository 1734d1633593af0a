import asyncio
import itertools
import logging
import threading
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, Optional, Protocol, Sequence

from sqlalchemy.orm import Session

from healthmate.core.config import settings
from healthmate.core.errors import AuthRequired, BackendError
from healthmate.db.session import SessionLocal
from healthmate.models.appointment import Appointment
from healthmate.models.doctor import Doctor, DoctorContactAccessLog
from healthmate.services.distance import Coordinate, distance_km

logger = logging.getLogger("healthmate.directory")


# Appointment statuses that unlock a doctor's phone/email for the patient.
CONTACT_UNLOCKING_STATUSES = ("confirmed",)


@dataclass(frozen=True)
class DoctorInfo:
    """
    Contact-masked projection of a doctor row, as seen by one user.

    phone/email are forced to None unless can_view_contact is set, so a
    masked record can never carry contact details, whatever built it.
    """

    id: int
    name: str
    specialty: str
    address: str
    latitude: Optional[float]
    longitude: Optional[float]
    rating: Optional[float]
    experience_years: Optional[int]
    consultation_fee: Optional[Decimal]
    availability_hours: Optional[str]
    can_view_contact: bool = False
    phone: Optional[str] = None
    email: Optional[str] = None

    def __post_init__(self):
        if not self.can_view_contact:
            object.__setattr__(self, "phone", None)
            object.__setattr__(self, "email", None)

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True)
class RankedDoctor:
    doctor: DoctorInfo
    distance_km: Optional[float] = None


@dataclass(frozen=True)
class DirectoryFilter:
    search_term: str = ""
    reference: Optional[Coordinate] = None


class DoctorInfoAccessor(Protocol):
    async def list_doctor_ids(self) -> list[int]: ...

    async def get_doctor_info(self, doctor_id: int) -> Optional[DoctorInfo]: ...


# ------------------------------------------------------------------
# Server-side access control
# ------------------------------------------------------------------

def user_has_appointment_with_doctor(db: Session, *, user_id: int, doctor_id: int) -> bool:
    return (
        db.query(Appointment.id)
        .filter(
            Appointment.user_id == user_id,
            Appointment.doctor_id == doctor_id,
            Appointment.status.in_(CONTACT_UNLOCKING_STATUSES),
        )
        .first()
        is not None
    )


def get_doctor_info(db: Session, *, doctor_id: int, user_id: int) -> Optional[DoctorInfo]:
    doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    if doctor is None:
        return None

    can_view = user_has_appointment_with_doctor(db, user_id=user_id, doctor_id=doctor_id)

    return DoctorInfo(
        id=doctor.id,
        name=doctor.name,
        specialty=doctor.specialty,
        address=doctor.address,
        latitude=doctor.latitude,
        longitude=doctor.longitude,
        rating=doctor.rating,
        experience_years=doctor.experience_years,
        consultation_fee=doctor.consultation_fee,
        availability_hours=doctor.availability_hours,
        can_view_contact=can_view,
        phone=doctor.phone if can_view else None,
        email=doctor.email if can_view else None,
    )


def log_doctor_contact_access(
    db: Session,
    *,
    user_id: int,
    doctor_id: int,
    access_type: str = "view_contact",
) -> DoctorContactAccessLog:
    entry = DoctorContactAccessLog(user_id=user_id, doctor_id=doctor_id, access_type=access_type)
    db.add(entry)
    return entry


class DatabaseDoctorAccessor:
    """
    Accessor over the local database. Each call runs in a worker thread
    with its own session, so the fan-out below really runs concurrently.
    """

    def __init__(self, user_id: int, session_factory: Callable[[], Session] = SessionLocal):
        self.user_id = user_id
        self.session_factory = session_factory

    async def list_doctor_ids(self) -> list[int]:
        return await asyncio.to_thread(self._list_ids)

    async def get_doctor_info(self, doctor_id: int) -> Optional[DoctorInfo]:
        return await asyncio.to_thread(self._get_info, doctor_id)

    def _list_ids(self) -> list[int]:
        with self.session_factory() as db:
            rows = db.query(Doctor.id).order_by(Doctor.name.asc(), Doctor.id.asc()).all()
            return [r.id for r in rows]

    def _get_info(self, doctor_id: int) -> Optional[DoctorInfo]:
        with self.session_factory() as db:
            return get_doctor_info(db, doctor_id=doctor_id, user_id=self.user_id)


# ------------------------------------------------------------------
# Filtering and ranking
# ------------------------------------------------------------------

def matches_search(doctor: DoctorInfo, search_term: str) -> bool:
    term = (search_term or "").strip().lower()
    if not term:
        return True
    return any(
        term in (field or "").lower()
        for field in (doctor.name, doctor.specialty, doctor.address)
    )


def rank_doctors(
    doctors: Sequence[DoctorInfo],
    reference: Optional[Coordinate],
) -> list[RankedDoctor]:
    if reference is None:
        return [RankedDoctor(doctor=d) for d in doctors]

    ranked = []
    for d in doctors:
        coord = d.coordinate
        ranked.append(
            RankedDoctor(
                doctor=d,
                distance_km=distance_km(reference, coord) if coord is not None else None,
            )
        )

    # stable: equal distances keep directory order; unlocated doctors go last
    ranked.sort(key=lambda r: (r.distance_km is None, r.distance_km or 0.0))
    return ranked


async def _gather_doctor_infos(
    accessor: DoctorInfoAccessor,
    doctor_ids: Sequence[int],
    max_concurrency: int,
) -> list[DoctorInfo]:
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def fetch(doctor_id: int) -> Optional[DoctorInfo]:
        async with semaphore:
            return await accessor.get_doctor_info(doctor_id)

    results = await asyncio.gather(
        *(fetch(doctor_id) for doctor_id in doctor_ids),
        return_exceptions=True,
    )

    infos: list[DoctorInfo] = []
    for doctor_id, result in zip(doctor_ids, results):
        if isinstance(result, BaseException):
            logger.warning("Doctor %s excluded: info fetch failed (%s)", doctor_id, type(result).__name__)
            continue
        if result is None:
            continue
        infos.append(result)
    return infos


async def list_doctors(
    accessor: DoctorInfoAccessor,
    directory_filter: DirectoryFilter,
    *,
    user_id: Optional[int],
    max_concurrency: Optional[int] = None,
) -> list[RankedDoctor]:
    if user_id is None:
        raise AuthRequired("Doctor directory requires an authenticated user")

    try:
        doctor_ids = await accessor.list_doctor_ids()
    except Exception as e:
        logger.error("Doctor id listing failed: %s", e)
        raise BackendError(f"Doctor id listing failed: {type(e).__name__}") from e

    infos = await _gather_doctor_infos(
        accessor,
        doctor_ids,
        max_concurrency or settings.DIRECTORY_MAX_CONCURRENCY,
    )

    matching = [d for d in infos if matches_search(d, directory_filter.search_term)]
    return rank_doctors(matching, directory_filter.reference)


def mask_contact(doctor: DoctorInfo) -> DoctorInfo:
    """
    Re-apply masking to a possibly cached projection before rendering.
    """
    if doctor.can_view_contact:
        return doctor
    return replace(doctor, phone=None, email=None)


# ------------------------------------------------------------------
# Last-request-wins
# ------------------------------------------------------------------

class SearchGate:
    """
    Hands out increasing tokens per caller; only the newest token's result
    may be delivered, anything older is stale.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest: dict[object, int] = {}
        self._lock = threading.Lock()

    def begin(self, key: object) -> int:
        with self._lock:
            token = next(self._counter)
            self._latest[key] = token
            return token

    def is_current(self, key: object, token: int) -> bool:
        with self._lock:
            return self._latest.get(key) == token


search_gate = SearchGate()

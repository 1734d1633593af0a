from typing import List, Optional

from pydantic import BaseModel

from healthmate.services.doctor_directory import DoctorInfo, RankedDoctor, mask_contact


class DoctorOut(BaseModel):
    id: int
    name: str
    specialty: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    experience_years: Optional[int] = None
    consultation_fee: Optional[float] = None
    availability_hours: Optional[str] = None

    can_view_contact: bool = False
    phone: Optional[str] = None
    email: Optional[str] = None

    # unrounded, plus the one-decimal value the UI shows
    distance_km: Optional[float] = None
    distance_display: Optional[float] = None

    @classmethod
    def from_info(cls, info: DoctorInfo, distance_km: Optional[float] = None) -> "DoctorOut":
        info = mask_contact(info)
        return cls(
            id=info.id,
            name=info.name,
            specialty=info.specialty,
            address=info.address,
            latitude=info.latitude,
            longitude=info.longitude,
            rating=info.rating,
            experience_years=info.experience_years,
            consultation_fee=float(info.consultation_fee) if info.consultation_fee is not None else None,
            availability_hours=info.availability_hours,
            can_view_contact=info.can_view_contact,
            phone=info.phone,
            email=info.email,
            distance_km=distance_km,
            distance_display=round(distance_km, 1) if distance_km is not None else None,
        )

    @classmethod
    def from_ranked(cls, ranked: RankedDoctor) -> "DoctorOut":
        return cls.from_info(ranked.doctor, ranked.distance_km)


class ReferenceOut(BaseModel):
    latitude: float
    longitude: float


class DoctorListOut(BaseModel):
    reference: Optional[ReferenceOut] = None
    doctors: List[DoctorOut]

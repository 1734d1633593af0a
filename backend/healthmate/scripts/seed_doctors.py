from decimal import Decimal

from sqlalchemy.orm import Session

from healthmate.db.session import SessionLocal
from healthmate.models import registry  # noqa: F401
from healthmate.models.doctor import Doctor


DOCTORS = [
    {
        "name": "Dr. Priya Sharma",
        "specialty": "Cardiologist",
        "address": "Connaught Place, New Delhi",
        "latitude": 28.6315,
        "longitude": 77.2167,
        "rating": 4.8,
        "experience_years": 15,
        "consultation_fee": Decimal("800.00"),
        "availability_hours": "Mon-Fri 10:00-17:00",
        "phone": "+91-11-4000-1001",
        "email": "priya.sharma@example.com",
    },
    {
        "name": "Dr. Arjun Mehta",
        "specialty": "Pediatrician",
        "address": "Bandra West, Mumbai",
        "latitude": 19.0596,
        "longitude": 72.8295,
        "rating": 4.6,
        "experience_years": 11,
        "consultation_fee": Decimal("600.00"),
        "availability_hours": "Mon-Sat 09:00-14:00",
        "phone": "+91-22-4000-2002",
        "email": "arjun.mehta@example.com",
    },
    {
        "name": "Dr. Kavya Reddy",
        "specialty": "General Physician",
        "address": "Banjara Hills, Hyderabad",
        "latitude": 17.4126,
        "longitude": 78.4482,
        "rating": 4.5,
        "experience_years": 8,
        "consultation_fee": Decimal("400.00"),
        "availability_hours": "Daily 08:00-20:00",
        "phone": "+91-40-4000-3003",
        "email": "kavya.reddy@example.com",
    },
    {
        "name": "Dr. Rahul Iyer",
        "specialty": "Dermatologist",
        "address": "T. Nagar, Chennai",
        "latitude": 13.0418,
        "longitude": 80.2341,
        "rating": 4.4,
        "experience_years": 9,
        "consultation_fee": Decimal("700.00"),
        "availability_hours": "Tue-Sun 11:00-18:00",
        "phone": "+91-44-4000-4004",
        "email": "rahul.iyer@example.com",
    },
]


def seed_doctors() -> int:
    db: Session = SessionLocal()
    added = 0

    try:
        for doc in DOCTORS:
            exists = db.query(Doctor.id).filter(Doctor.name == doc["name"]).first()
            if exists:
                continue
            db.add(Doctor(**doc))
            added += 1

        db.commit()
    finally:
        db.close()

    return added


if __name__ == "__main__":
    print(f"Seeded {seed_doctors()} doctors")

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func

from healthmate.db.base import Base


DEFAULT_NOTIFICATION_PREFERENCES = {
    "health_tips": True,
    "disease_alerts": True,
    "appointment_reminders": True,
}


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    # profile
    full_name = Column(String, nullable=True)
    phone_number = Column(String(32), nullable=True)
    location = Column(String, nullable=True)
    preferred_language = Column(String(8), nullable=False, default="en")
    notification_preferences = Column(
        JSON,
        nullable=True,
        default=lambda: dict(DEFAULT_NOTIFICATION_PREFERENCES),
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

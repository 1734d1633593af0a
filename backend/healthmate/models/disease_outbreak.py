from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, JSON
from sqlalchemy.sql import func

from healthmate.db.base import Base


class DiseaseOutbreak(Base):
    __tablename__ = "disease_outbreaks"

    id = Column(Integer, primary_key=True, index=True)
    disease_name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    severity = Column(String(16), nullable=False)  # low | moderate | medium | high | critical
    description = Column(Text, nullable=True)
    precautions = Column(JSON, nullable=True)
    source = Column(String, nullable=True)

    reported_at = Column(DateTime(timezone=True), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

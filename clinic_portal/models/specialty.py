"""Specialty and doctor lookup model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String
from clinic_portal.database import Base


class Specialty(Base):
    """Represents a medical specialty offered by the clinic."""
    __tablename__ = "specialty"

    specialty_id = Column(Integer, primary_key=True)
    specialty_name = Column(String, nullable=False)


class Doctor(Base):
    """Represents a doctor who publishes working schedules."""
    __tablename__ = "doctor"

    doctor_id = Column(Integer, primary_key=True)
    full_name = Column(String, nullable=False)
    specialty_id = Column(Integer, ForeignKey("specialty.specialty_id"))

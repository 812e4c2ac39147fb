"""Patient model definitions."""

from sqlalchemy import Column, Date, Integer, String
from clinic_portal.database import Base


class Patient(Base):
    """Represents a patient profile linked to an authenticated account."""
    __tablename__ = "patients"

    patient_id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String)
    gender = Column(String)
    dob = Column(Date)
    phone = Column(String)
    citizen_id = Column(String)

"""Doctor working schedule model definitions."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Time
from clinic_portal.database import Base


class DoctorSchedule(Base):
    """Represents a doctor's published working hours for one date."""
    __tablename__ = "doctor_schedule"

    schedule_id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctor.doctor_id"), nullable=False, index=True)
    work_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

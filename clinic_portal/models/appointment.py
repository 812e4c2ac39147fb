"""Appointment model definitions."""

from sqlalchemy import Column, Date, ForeignKey, Index, Integer, String, Time, text
from clinic_portal.database import ACTIVE_SLOT_INDEX_NAME, Base

APPOINTMENT_STATUSES = ("upcoming", "ongoing", "completed", "cancelled")
CANCELLED_STATUS = "cancelled"
UPCOMING_STATUS = "upcoming"


class Appointment(Base):
    """Represents one booked slot of a doctor's schedule."""
    __tablename__ = "appointment"
    __table_args__ = (
        # At most one non-cancelled appointment per doctor slot.
        Index(
            ACTIVE_SLOT_INDEX_NAME,
            "doctor_id",
            "appointment_date",
            "start_time",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
    )

    appointment_id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctor.doctor_id"), nullable=False)
    patient_id = Column(Integer, ForeignKey("patients.patient_id"), nullable=False, index=True)
    schedule_id = Column(Integer, ForeignKey("doctor_schedule.schedule_id"), nullable=False)
    appointment_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time)
    status = Column(String, nullable=False, default=UPCOMING_STATUS)
    symptom = Column(String)
    note = Column(String)

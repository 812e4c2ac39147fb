"""Read-side assembly of a patient's appointment list."""

import logging
from datetime import date, time

from pydantic import BaseModel
from sqlalchemy.orm import Session

from clinic_portal.models.appointment import Appointment
from clinic_portal.models.specialty import Doctor, Specialty

logger = logging.getLogger(__name__)

SORT_ASCENDING = 'asc'
SORT_DESCENDING = 'desc'


class AppointmentDoctorView(BaseModel):
    doctor_id: int
    full_name: str
    specialty_id: int | None = None
    specialty_name: str | None = None


class AppointmentView(BaseModel):
    appointment_id: int
    schedule_id: int
    appointment_date: date
    start_time: time
    end_time: time | None = None
    status: str
    symptom: str | None = None
    note: str | None = None
    doctor: AppointmentDoctorView | None = None


def normalize_sort_order(sort: str | None) -> str:
    return SORT_ASCENDING if (sort or '').strip().lower() == SORT_ASCENDING else SORT_DESCENDING


def load_doctor_views(doctor_ids: set[int], db: Session) -> dict[int, AppointmentDoctorView]:
    if not doctor_ids:
        return {}

    doctors = db.query(Doctor).filter(Doctor.doctor_id.in_(doctor_ids)).all()
    specialty_ids = {doctor.specialty_id for doctor in doctors if doctor.specialty_id is not None}
    specialty_names: dict[int, str] = {}
    if specialty_ids:
        specialty_names = {
            specialty.specialty_id: specialty.specialty_name
            for specialty in db.query(Specialty).filter(Specialty.specialty_id.in_(specialty_ids)).all()
        }

    return {
        doctor.doctor_id: AppointmentDoctorView(
            doctor_id=doctor.doctor_id,
            full_name=doctor.full_name,
            specialty_id=doctor.specialty_id,
            specialty_name=specialty_names.get(doctor.specialty_id),
        )
        for doctor in doctors
    }


def list_patient_appointments(
    patient_id: int,
    db: Session,
    status_filter: str | None = None,
    sort_order: str = SORT_DESCENDING,
) -> list[AppointmentView]:
    query = db.query(Appointment).filter(Appointment.patient_id == patient_id)

    if status_filter:
        query = query.filter(Appointment.status == status_filter)

    if normalize_sort_order(sort_order) == SORT_ASCENDING:
        query = query.order_by(Appointment.appointment_date.asc(), Appointment.start_time.asc())
    else:
        query = query.order_by(Appointment.appointment_date.desc(), Appointment.start_time.desc())

    appointments = query.all()
    if not appointments:
        return []

    doctor_views = load_doctor_views({appointment.doctor_id for appointment in appointments}, db)
    missing_doctors = {a.doctor_id for a in appointments} - doctor_views.keys()
    if missing_doctors:
        logger.warning('Appointments reference unknown doctors: %s', sorted(missing_doctors))

    return [
        AppointmentView(
            appointment_id=appointment.appointment_id,
            schedule_id=appointment.schedule_id,
            appointment_date=appointment.appointment_date,
            start_time=appointment.start_time,
            end_time=appointment.end_time,
            status=appointment.status,
            symptom=appointment.symptom,
            note=appointment.note,
            doctor=doctor_views.get(appointment.doctor_id),
        )
        for appointment in appointments
    ]

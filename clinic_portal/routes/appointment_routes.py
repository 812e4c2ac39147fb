import logging
from datetime import date, time

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_portal.auth.dependencies import find_patient, get_current_identity, get_current_patient
from clinic_portal.core import config
from clinic_portal.database import get_db
from clinic_portal.models.appointment import APPOINTMENT_STATUSES
from clinic_portal.models.patient import Patient
from clinic_portal.routes.common import DATABASE_UNAVAILABLE_DETAIL, ensure_database_ready
from clinic_portal.services.appointments import AppointmentView, list_patient_appointments, normalize_sort_order
from clinic_portal.services.booking import book_slot, cancel_appointment

router = APIRouter(tags=['appointments'])

logger = logging.getLogger(__name__)


def _clean_text(value: str | None, field_name: str) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > config.MAX_APPOINTMENT_NOTE_LENGTH:
        raise ValueError(f'{field_name} must be {config.MAX_APPOINTMENT_NOTE_LENGTH} characters or fewer.')

    return normalized


class CreateAppointmentRequest(BaseModel):
    doctor_id: int
    appointment_date: date = Field(alias='date')
    start_time: time
    schedule_id: int | None = None
    symptom: str | None = None
    note: str | None = None

    class Config:
        populate_by_name = True

    @field_validator('symptom')
    @classmethod
    def validate_symptom(cls, value: str | None) -> str | None:
        return _clean_text(value, 'Symptom')

    @field_validator('note')
    @classmethod
    def validate_note(cls, value: str | None) -> str | None:
        return _clean_text(value, 'Note')


class AppointmentResponse(BaseModel):
    appointment_id: int
    doctor_id: int
    patient_id: int
    schedule_id: int
    appointment_date: date
    start_time: time
    end_time: time | None = None
    status: str
    symptom: str | None = None
    note: str | None = None

    class Config:
        from_attributes = True


class PatientResponse(BaseModel):
    patient_id: int
    full_name: str | None = None
    gender: str | None = None
    dob: date | None = None
    phone: str | None = None
    citizen_id: str | None = None

    class Config:
        from_attributes = True


class AppointmentListResponse(BaseModel):
    patient: PatientResponse | None = None
    appointments: list[AppointmentView]


@router.get('', response_model=AppointmentListResponse)
def list_my_appointments(
    status_filter: str | None = Query(default=None, alias='status'),
    sort: str | None = Query(default=None),
    email: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    normalized_status = (status_filter or '').strip().lower() or None
    if normalized_status == 'all':
        normalized_status = None
    if normalized_status is not None and normalized_status not in APPOINTMENT_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Invalid appointment status.',
        )

    ensure_database_ready()

    try:
        patient = find_patient(email, db)
        if patient is None:
            return AppointmentListResponse(patient=None, appointments=[])

        appointments = list_patient_appointments(
            patient.patient_id,
            db,
            status_filter=normalized_status,
            sort_order=normalize_sort_order(sort),
        )
    except SQLAlchemyError as exc:
        logger.exception('Failed to load appointments for %s', email)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    return AppointmentListResponse(
        patient=PatientResponse.model_validate(patient),
        appointments=appointments,
    )


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest,
    patient: Patient = Depends(get_current_patient),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    return book_slot(
        db,
        doctor_id=data.doctor_id,
        patient_id=patient.patient_id,
        appointment_date=data.appointment_date,
        start_time=data.start_time,
        schedule_id=data.schedule_id,
        symptom=data.symptom,
        note=data.note,
    )


@router.post('/{appointment_id}/cancel', response_model=AppointmentResponse)
def cancel_my_appointment(
    appointment_id: int,
    patient: Patient = Depends(get_current_patient),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    return cancel_appointment(appointment_id, patient.patient_id, db)

import logging
from datetime import date, time

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_portal.database import ACTIVE_SLOT_INDEX_NAME
from clinic_portal.models.appointment import Appointment, CANCELLED_STATUS, UPCOMING_STATUS
from clinic_portal.models.schedule import DoctorSchedule
from clinic_portal.services.slots import find_slot

logger = logging.getLogger(__name__)

SYMPTOM_NOTE_PREFIX = 'Symptoms: '
SLOT_TAKEN_DETAIL = 'This time slot is no longer available. Please choose another slot.'
UNKNOWN_OUTCOME_DETAIL = 'Booking outcome unknown. Refresh your appointments before retrying.'
DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Please try again later.'


def list_available_windows(doctor_id: int, db: Session) -> list[DoctorSchedule]:
    return db.query(DoctorSchedule).filter(
        DoctorSchedule.doctor_id == doctor_id,
        DoctorSchedule.is_available.is_(True),
    ).order_by(DoctorSchedule.work_date.asc(), DoctorSchedule.start_time.asc()).all()


def find_available_window(doctor_id: int, work_date: date, db: Session) -> DoctorSchedule | None:
    return db.query(DoctorSchedule).filter(
        DoctorSchedule.doctor_id == doctor_id,
        DoctorSchedule.work_date == work_date,
        DoctorSchedule.is_available.is_(True),
    ).order_by(DoctorSchedule.start_time.asc()).first()


def get_booked_slot_starts(doctor_id: int, work_date: date, db: Session) -> set[time]:
    """Start times already held by non-cancelled appointments for the doctor and date."""
    rows = db.query(Appointment.start_time).filter(
        Appointment.doctor_id == doctor_id,
        Appointment.appointment_date == work_date,
        Appointment.status != CANCELLED_STATUS,
    ).all()
    return {start_time for (start_time,) in rows}


def compose_note(symptom: str | None, note: str | None) -> str | None:
    parts: list[str] = []
    if symptom and symptom.strip():
        parts.append(f'{SYMPTOM_NOTE_PREFIX}{symptom.strip()}')
    if note and note.strip():
        parts.append(note.strip())
    return '\n'.join(parts) if parts else None


def is_active_slot_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return ACTIVE_SLOT_INDEX_NAME in message or 'UNIQUE constraint failed: appointment.' in message


def book_slot(
    db: Session,
    *,
    doctor_id: int,
    patient_id: int,
    appointment_date: date,
    start_time: time,
    schedule_id: int | None = None,
    symptom: str | None = None,
    note: str | None = None,
) -> Appointment:
    """Create one upcoming appointment for a generated slot.

    The partial unique index on (doctor_id, appointment_date, start_time) over
    non-cancelled rows is the only guard against double booking; there is no
    read-before-write occupancy check. A losing concurrent request, or a
    resubmission of an already booked slot, surfaces as HTTP 409.
    """
    try:
        window = find_available_window(doctor_id, appointment_date, db)
    except SQLAlchemyError as exc:
        logger.exception('Failed to load schedule for doctor %s on %s', doctor_id, appointment_date)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if window is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='No available schedule for the selected date.',
        )

    if schedule_id is not None and schedule_id != window.schedule_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Schedule does not match the selected doctor and date.',
        )

    slot = find_slot(window, start_time)
    if slot is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Selected time is not one of the available slots.',
        )

    cleaned_symptom = symptom.strip() if symptom and symptom.strip() else None
    appointment = Appointment(
        doctor_id=doctor_id,
        patient_id=patient_id,
        schedule_id=window.schedule_id,
        appointment_date=appointment_date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        status=UPCOMING_STATUS,
        symptom=cleaned_symptom,
        note=compose_note(cleaned_symptom, note),
    )

    try:
        db.add(appointment)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_active_slot_violation(exc):
            logger.warning(
                'Slot conflict for doctor %s on %s at %s',
                doctor_id,
                appointment_date,
                slot.start_time,
            )
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLOT_TAKEN_DETAIL) from exc
        logger.exception('Appointment insert rejected by the database')
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Appointment references an unknown doctor, patient or schedule.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Appointment insert failed for doctor %s on %s', doctor_id, appointment_date)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=UNKNOWN_OUTCOME_DETAIL,
        ) from exc

    db.refresh(appointment)
    logger.info(
        'Booked appointment %s for patient %s with doctor %s on %s at %s',
        appointment.appointment_id,
        patient_id,
        doctor_id,
        appointment_date,
        slot.start_time,
    )
    return appointment


def cancel_appointment(appointment_id: int, patient_id: int, db: Session) -> Appointment:
    try:
        appointment = db.query(Appointment).filter(Appointment.appointment_id == appointment_id).first()

        if appointment is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Appointment not found.')

        if appointment.patient_id != patient_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Only the patient who booked this appointment can cancel it.',
            )

        if appointment.status != UPCOMING_STATUS:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail='Only upcoming appointments can be cancelled.',
            )

        appointment.status = CANCELLED_STATUS
        db.commit()
        db.refresh(appointment)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to cancel appointment %s', appointment_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    logger.info('Cancelled appointment %s for patient %s', appointment_id, patient_id)
    return appointment

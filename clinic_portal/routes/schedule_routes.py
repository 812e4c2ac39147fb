import logging
from datetime import date, time

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_portal.auth.dependencies import get_current_identity
from clinic_portal.database import get_db
from clinic_portal.routes.common import DATABASE_UNAVAILABLE_DETAIL, ensure_database_ready
from clinic_portal.services.booking import find_available_window, get_booked_slot_starts, list_available_windows
from clinic_portal.services.slots import generate_window_slots

router = APIRouter(tags=['schedules'])

logger = logging.getLogger(__name__)


class ScheduleWindowResponse(BaseModel):
    schedule_id: int
    doctor_id: int
    work_date: date
    start_time: time
    end_time: time
    is_available: bool

    class Config:
        from_attributes = True


class SlotResponse(BaseModel):
    schedule_id: int
    date: date
    start_time: time
    end_time: time
    is_booked: bool
    is_available: bool


@router.get('/doctors/{doctor_id}/windows', response_model=list[ScheduleWindowResponse])
def list_doctor_windows(
    doctor_id: int,
    _identity: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return list_available_windows(doctor_id, db)
    except SQLAlchemyError as exc:
        logger.exception('Failed to load schedules for doctor %s', doctor_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('/doctors/{doctor_id}/slots', response_model=list[SlotResponse])
def list_doctor_slots(
    doctor_id: int,
    slot_date: date = Query(..., alias='date'),
    _identity: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        window = find_available_window(doctor_id, slot_date, db)
        if window is None:
            return []

        booked_start_times = get_booked_slot_starts(doctor_id, slot_date, db)
    except SQLAlchemyError as exc:
        logger.exception('Failed to load slots for doctor %s on %s', doctor_id, slot_date)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    return [
        SlotResponse(
            schedule_id=window.schedule_id,
            date=slot_date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            is_booked=slot.start_time in booked_start_times,
            is_available=slot.start_time not in booked_start_times,
        )
        for slot in generate_window_slots(window)
    ]

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from clinic_portal.database import ensure_appointment_schema, ensure_schedule_schema
from clinic_portal.services.booking import DATABASE_UNAVAILABLE_DETAIL


def ensure_database_ready() -> None:
    try:
        ensure_schedule_schema()
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

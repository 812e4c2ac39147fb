import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from clinic_portal.auth import jwt_handler
from clinic_portal.database import get_db
from clinic_portal.models.patient import Patient

security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Return the normalized account email carried by the bearer token."""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    try:
        return jwt_handler.read_subject(credentials.credentials)
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


def find_patient(email: str, db: Session) -> Patient | None:
    return db.query(Patient).filter(Patient.email == email).first()


def get_current_patient(
    email: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> Patient:
    patient = find_patient(email, db)
    if patient is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Complete your patient profile before booking appointments.",
        )
    return patient

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_portal.database import get_db
from clinic_portal.models.specialty import Doctor, Specialty
from clinic_portal.routes.common import DATABASE_UNAVAILABLE_DETAIL
from clinic_portal.services.specialty_suggestion import SpecialtySuggestionError, suggest_specialties

router = APIRouter(tags=['specialties'])


class SpecialtyResponse(BaseModel):
    specialty_id: int
    specialty_name: str

    class Config:
        from_attributes = True


class DoctorResponse(BaseModel):
    doctor_id: int
    full_name: str
    specialty_id: int | None = None

    class Config:
        from_attributes = True


class SpecialtySuggestionRequest(BaseModel):
    symptoms: str | None = None

    @field_validator('symptoms')
    @classmethod
    def normalize_symptoms(cls, value: str | None) -> str:
        return (value or '').strip()


class SpecialtySuggestionResponse(BaseModel):
    specialty_ids: list[int]


def load_specialties(db: Session) -> list[Specialty]:
    try:
        return db.query(Specialty).order_by(Specialty.specialty_name.asc()).all()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('', response_model=list[SpecialtyResponse])
def list_specialties(db: Session = Depends(get_db)):
    return load_specialties(db)


@router.get('/{specialty_id}/doctors', response_model=list[DoctorResponse])
def list_specialty_doctors(specialty_id: int, db: Session = Depends(get_db)):
    try:
        return db.query(Doctor).filter(
            Doctor.specialty_id == specialty_id,
        ).order_by(Doctor.full_name.asc()).all()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.post('/suggest', response_model=SpecialtySuggestionResponse)
def suggest_specialty(data: SpecialtySuggestionRequest, db: Session = Depends(get_db)):
    if not data.symptoms:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Missing symptom information.',
        )

    specialties = [(specialty.specialty_id, specialty.specialty_name) for specialty in load_specialties(db)]

    try:
        specialty_ids = suggest_specialties(data.symptoms, specialties)
    except SpecialtySuggestionError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Specialty suggestion is unavailable. Please choose a specialty manually.',
        ) from exc

    return SpecialtySuggestionResponse(specialty_ids=specialty_ids)

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from clinic_portal.auth import jwt_handler
from clinic_portal.auth.dependencies import get_current_identity, get_current_patient
from clinic_portal.core import config


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_access_token_subject_is_normalized_and_readable() -> None:
    token = jwt_handler.create_access_token(subject=' Patient@Example.COM ', expires_minutes=5)

    assert jwt_handler.read_subject(token) == 'patient@example.com'


@pytest.mark.parametrize(
    'claims',
    [
        {'sub': '   ', 'exp': 4102444800},
        {'exp': 4102444800},
        {'sub': 'patient@example.com'},
        {'sub': 'patient@example.com', 'exp': 946684800},
    ],
)
def test_read_subject_rejects_unusable_tokens(claims: dict) -> None:
    token = jwt.encode(claims, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)

    with pytest.raises(jwt.PyJWTError):
        jwt_handler.read_subject(token)


def test_get_current_identity_normalizes_subject() -> None:
    token = jwt_handler.create_access_token(subject=' Patient@Example.COM ')

    assert get_current_identity(_credentials(token)) == 'patient@example.com'


def test_get_current_identity_refuses_missing_credentials() -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_identity(None)

    assert exception_info.value.status_code == 401


def test_get_current_identity_refuses_foreign_signature() -> None:
    token = jwt.encode({'sub': 'patient@example.com'}, 'another-secret', algorithm=config.JWT_ALGORITHM)

    with pytest.raises(HTTPException) as exception_info:
        get_current_identity(_credentials(token))

    assert exception_info.value.detail == 'Invalid token'


def test_get_current_patient_resolves_profile(clinic_db) -> None:
    patient = get_current_patient(email='patient@example.com', db=clinic_db)

    assert patient.patient_id == 100


def test_get_current_patient_refuses_account_without_profile(clinic_db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_patient(email='newcomer@example.com', db=clinic_db)

    assert exception_info.value.status_code == 403

"""Bearer tokens identifying a patient account by its email."""

from datetime import datetime, timedelta, timezone

import jwt

from clinic_portal.core import config

REQUIRED_CLAIMS = ["sub", "exp"]


def normalize_subject(subject: str | None) -> str:
    return (subject or "").strip().lower()


def create_access_token(subject: str, expires_minutes: int | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    claims = {"sub": normalize_subject(subject), "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def read_subject(token: str) -> str:
    """Verify ``token`` and return its account email; raises ``jwt.PyJWTError``."""
    claims = jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
    subject = normalize_subject(claims.get("sub"))
    if not subject:
        raise jwt.InvalidTokenError("Token subject is empty.")
    return subject

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from tutor_api.core.config import Settings
from tutor_api.core.errors import AuthenticationError
from tutor_api.models.account import Role

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired token"
REQUIRED_CLAIMS = ["sub", "exp", "email", "role"]


@dataclass(frozen=True)
class Claims:
    subject: uuid.UUID
    email: str
    role: Role
    expires_at: datetime


def create_access_token(
    settings: Settings,
    account_id: uuid.UUID,
    email: str,
    role: Role,
    issued_at: datetime | None = None,
) -> str:
    issued_at = issued_at or datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=settings.jwt_expires_minutes)
    payload = {
        "sub": str(account_id),
        "email": email,
        "role": Role(role).value,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> Claims:
    # Bad signature, bad structure and expiry all look the same to the caller
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
        return Claims(
            subject=uuid.UUID(payload["sub"]),
            email=payload["email"],
            role=Role(payload["role"]),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (jwt.InvalidTokenError, ValueError, TypeError) as exc:
        logger.info("Rejected bearer token: %s", type(exc).__name__)
        raise AuthenticationError(INVALID_TOKEN_MESSAGE) from exc

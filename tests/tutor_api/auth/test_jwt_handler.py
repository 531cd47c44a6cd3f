import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from tutor_api.auth import jwt_handler
from tutor_api.core.errors import AuthenticationError
from tutor_api.models.account import Role


def test_token_round_trip_carries_identity_claims(settings) -> None:
    account_id = uuid.uuid4()

    token = jwt_handler.create_access_token(settings, account_id, 'tutor@example.com', Role.TUTOR)
    claims = jwt_handler.decode_access_token(settings, token)

    assert claims.subject == account_id
    assert claims.email == 'tutor@example.com'
    assert claims.role is Role.TUTOR


def test_token_expires_twenty_four_hours_after_issue(settings) -> None:
    issued_at = datetime.now(timezone.utc).replace(microsecond=0)

    token = jwt_handler.create_access_token(settings, uuid.uuid4(), 'a@example.com', Role.STUDENT, issued_at=issued_at)
    claims = jwt_handler.decode_access_token(settings, token)

    assert claims.expires_at == issued_at + timedelta(hours=24)


def test_expired_token_is_rejected(settings) -> None:
    issued_at = datetime.now(timezone.utc) - timedelta(hours=25)
    token = jwt_handler.create_access_token(settings, uuid.uuid4(), 'a@example.com', Role.STUDENT, issued_at=issued_at)

    with pytest.raises(AuthenticationError) as exception_info:
        jwt_handler.decode_access_token(settings, token)

    assert exception_info.value.message == jwt_handler.INVALID_TOKEN_MESSAGE


def _forged_token(settings, **payload_overrides) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(uuid.uuid4()),
        'email': 'a@example.com',
        'role': 'student',
        'iat': now,
        'exp': now + timedelta(hours=1),
    }
    payload.update(payload_overrides)
    payload = {key: value for key, value in payload.items() if value is not None}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@pytest.mark.parametrize(
    'token_factory',
    [
        lambda settings: 'not-a-token',
        lambda settings: jwt_handler.create_access_token(
            replace(settings, jwt_secret_key='another-secret'), uuid.uuid4(), 'a@example.com', Role.ADMIN
        ),
        lambda settings: _forged_token(settings, role='superuser'),
        lambda settings: _forged_token(settings, sub='not-a-uuid'),
        lambda settings: _forged_token(settings, exp=None),
        lambda settings: _forged_token(settings, email=None),
    ],
    ids=['malformed', 'wrong-signature', 'unknown-role', 'bad-subject', 'no-expiry', 'no-email'],
)
def test_invalid_tokens_are_rejected_uniformly(settings, token_factory) -> None:
    with pytest.raises(AuthenticationError) as exception_info:
        jwt_handler.decode_access_token(settings, token_factory(settings))

    assert exception_info.value.message == jwt_handler.INVALID_TOKEN_MESSAGE


def test_rotating_the_secret_invalidates_outstanding_tokens(settings) -> None:
    token = jwt_handler.create_access_token(settings, uuid.uuid4(), 'a@example.com', Role.STUDENT)

    with pytest.raises(AuthenticationError):
        jwt_handler.decode_access_token(replace(settings, jwt_secret_key='rotated'), token)

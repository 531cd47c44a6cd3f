"""Account registration, login and lookup."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tutor_api.auth import jwt_handler
from tutor_api.auth.passwords import PasswordHasher
from tutor_api.core.config import Settings
from tutor_api.core.errors import AuthenticationError, BadRequestError, NotFoundError
from tutor_api.models.account import Account, Role

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_account_by_email(db: Session, email: str) -> Account | None:
    return db.scalars(select(Account).where(Account.email == normalize_email(email))).first()


def register_account(
    db: Session,
    hasher: PasswordHasher,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Role,
) -> Account:
    email = normalize_email(email)
    if find_account_by_email(db, email) is not None:
        raise BadRequestError(DUPLICATE_EMAIL_MESSAGE)

    account = Account(
        email=email,
        password_hash=hasher.hash(password),
        first_name=first_name,
        last_name=last_name,
        role=Role(role),
        is_active=True,
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError as exc:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise BadRequestError(DUPLICATE_EMAIL_MESSAGE) from exc
    db.refresh(account)

    logger.info("Registered account %s with role %s", account.id, account.role.value)
    return account


def login(
    db: Session,
    hasher: PasswordHasher,
    settings: Settings,
    email: str,
    password: str,
) -> tuple[str, Account]:
    account = find_account_by_email(db, email)
    if account is None:
        matched = hasher.verify_against_dummy(password)
    else:
        matched = hasher.verify(password, account.password_hash)
    if not matched:
        logger.info("Failed login attempt")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    if not account.is_active:
        raise AuthenticationError("Account is deactivated")

    token = jwt_handler.create_access_token(settings, account.id, account.email, account.role)
    logger.info("Account %s logged in", account.id)
    return token, account


def get_account(db: Session, account_id: uuid.UUID) -> Account:
    account = db.get(Account, account_id)
    if account is None:
        raise NotFoundError("User not found")
    return account

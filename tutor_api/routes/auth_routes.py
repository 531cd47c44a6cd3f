import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import EmailStr, Field, field_validator
from sqlalchemy.orm import Session

from tutor_api.auth.dependencies import get_current_claims, get_password_hasher, get_settings
from tutor_api.auth.jwt_handler import Claims
from tutor_api.auth.passwords import PasswordHasher
from tutor_api.core.config import Settings
from tutor_api.core.schemas import ApiModel
from tutor_api.database import get_db
from tutor_api.models.account import Role
from tutor_api.services import auth_service

router = APIRouter(tags=['auth'])

MIN_PASSWORD_LENGTH = 8


def _normalize_email(value):
    if isinstance(value, str):
        return auth_service.normalize_email(value)
    return value


class RegisterRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: Role

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name cannot be blank.')
        return normalized


class LoginRequest(ApiModel):
    email: EmailStr
    password: str

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class AccountResponse(ApiModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    is_active: bool
    created_at: datetime


class LoginResponse(ApiModel):
    token: str
    user: AccountResponse


class CurrentAccountResponse(ApiModel):
    id: uuid.UUID
    email: str
    role: Role
    expires_at: datetime


@router.post('/register', response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    return auth_service.register_account(
        db,
        hasher,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
    )


@router.post('/login', response_model=LoginResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
):
    token, account = auth_service.login(db, hasher, settings, email=data.email, password=data.password)
    return LoginResponse(token=token, user=AccountResponse.model_validate(account))


@router.get('/me', response_model=CurrentAccountResponse)
def me(claims: Claims = Depends(get_current_claims)):
    return CurrentAccountResponse(
        id=claims.subject,
        email=claims.email,
        role=claims.role,
        expires_at=claims.expires_at,
    )

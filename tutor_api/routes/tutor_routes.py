import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from tutor_api.auth.dependencies import get_current_claims, require_reviewer, require_role
from tutor_api.auth.jwt_handler import Claims
from tutor_api.core.schemas import ApiModel
from tutor_api.database import get_db
from tutor_api.models.account import Role
from tutor_api.models.review import Review
from tutor_api.models.tutor_profile import TutorProfile
from tutor_api.services import tutor_service

router = APIRouter(tags=['tutors'])

MIN_BIO_LENGTH = 50
MAX_BIO_LENGTH = 1000
MIN_HOURLY_RATE = 1000
MAX_HOURLY_RATE = 50000
MAX_YEARS_EXPERIENCE = 50
MAX_REVIEW_COMMENT_LENGTH = 500


def _normalize_specializations(values: list[str] | None) -> list[str] | None:
    if values is None:
        return None
    return sorted({value.strip() for value in values if value.strip()})


class CreateTutorProfileRequest(ApiModel):
    bio: str = Field(min_length=MIN_BIO_LENGTH, max_length=MAX_BIO_LENGTH)
    specializations: list[str] = Field(default_factory=list)
    hourly_rate: int = Field(ge=MIN_HOURLY_RATE, le=MAX_HOURLY_RATE)
    years_experience: int = Field(ge=0, le=MAX_YEARS_EXPERIENCE)

    @field_validator('specializations')
    @classmethod
    def validate_specializations(cls, value: list[str]) -> list[str]:
        return _normalize_specializations(value)


class UpdateTutorProfileRequest(ApiModel):
    bio: str | None = Field(default=None, min_length=MIN_BIO_LENGTH, max_length=MAX_BIO_LENGTH)
    specializations: list[str] | None = None
    hourly_rate: int | None = Field(default=None, ge=MIN_HOURLY_RATE, le=MAX_HOURLY_RATE)
    years_experience: int | None = Field(default=None, ge=0, le=MAX_YEARS_EXPERIENCE)
    is_available: bool | None = None

    @field_validator('specializations')
    @classmethod
    def validate_specializations(cls, value: list[str] | None) -> list[str] | None:
        return _normalize_specializations(value)


class TutorResponse(ApiModel):
    id: uuid.UUID
    account_id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    bio: str
    specializations: list[str]
    hourly_rate: int
    years_experience: int
    rating: float | None = None
    total_reviews: int
    is_verified: bool
    is_available: bool
    created_at: datetime
    updated_at: datetime


class CreateReviewRequest(ApiModel):
    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=MAX_REVIEW_COMMENT_LENGTH)


class ReviewResponse(ApiModel):
    id: uuid.UUID
    tutor_id: uuid.UUID
    student_name: str
    rating: int
    comment: str | None = None
    created_at: datetime


def to_tutor_response(profile: TutorProfile) -> TutorResponse:
    return TutorResponse(
        id=profile.id,
        account_id=profile.account_id,
        first_name=profile.account.first_name,
        last_name=profile.account.last_name,
        email=profile.account.email,
        bio=profile.bio,
        specializations=profile.specializations or [],
        hourly_rate=profile.hourly_rate,
        years_experience=profile.years_experience,
        rating=profile.rating,
        total_reviews=profile.total_reviews,
        is_verified=profile.is_verified,
        is_available=profile.is_available,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


def to_review_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        tutor_id=review.tutor_id,
        student_name=review.student.full_name,
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
    )


@router.post('/profile', response_model=TutorResponse, status_code=status.HTTP_201_CREATED)
def create_tutor_profile(
    data: CreateTutorProfileRequest,
    claims: Claims = Depends(require_role(Role.TUTOR)),
    db: Session = Depends(get_db),
):
    profile = tutor_service.create_tutor_profile(
        db,
        claims.subject,
        bio=data.bio,
        specializations=data.specializations,
        hourly_rate=data.hourly_rate,
        years_experience=data.years_experience,
    )
    return to_tutor_response(profile)


@router.put('/profile', response_model=TutorResponse)
def update_tutor_profile(
    data: UpdateTutorProfileRequest,
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    profile = tutor_service.update_tutor_profile(db, claims.subject, data.model_dump(exclude_unset=True))
    return to_tutor_response(profile)


@router.get('', response_model=list[TutorResponse])
def list_tutors(
    specialization: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return [to_tutor_response(profile) for profile in tutor_service.list_tutors(db, specialization)]


@router.get('/{tutor_id}', response_model=TutorResponse)
def get_tutor(tutor_id: uuid.UUID, db: Session = Depends(get_db)):
    return to_tutor_response(tutor_service.get_tutor(db, tutor_id))


@router.get('/{tutor_id}/reviews', response_model=list[ReviewResponse])
def list_tutor_reviews(tutor_id: uuid.UUID, db: Session = Depends(get_db)):
    return [to_review_response(review) for review in tutor_service.list_reviews(db, tutor_id)]


@router.post('/{tutor_id}/reviews', response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    tutor_id: uuid.UUID,
    data: CreateReviewRequest,
    claims: Claims = Depends(require_reviewer),
    db: Session = Depends(get_db),
):
    review = tutor_service.create_review(
        db,
        tutor_id,
        claims.subject,
        rating=data.rating,
        comment=data.comment,
    )
    return to_review_response(review)

"""Tutor profiles and reviews."""

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tutor_api.core.errors import BadRequestError, NotFoundError, ValidationError
from tutor_api.models.account import Account
from tutor_api.models.review import Review
from tutor_api.models.tutor_profile import TutorProfile
from tutor_api.services import ratings
from tutor_api.services.partial_update import apply_partial_update, build_partial_update

logger = logging.getLogger(__name__)

TUTOR_EDITABLE_FIELDS = ("bio", "specializations", "hourly_rate", "years_experience", "is_available")
DUPLICATE_REVIEW_MESSAGE = "Review already exists for this tutor"
MIN_REVIEW_RATING = 1
MAX_REVIEW_RATING = 5


def find_profile_for_account(db: Session, account_id: uuid.UUID) -> TutorProfile | None:
    return db.scalars(select(TutorProfile).where(TutorProfile.account_id == account_id)).first()


def create_tutor_profile(
    db: Session,
    account_id: uuid.UUID,
    bio: str,
    specializations: list[str],
    hourly_rate: int,
    years_experience: int,
) -> TutorProfile:
    if db.get(Account, account_id) is None:
        raise NotFoundError("User not found")

    if find_profile_for_account(db, account_id) is not None:
        raise BadRequestError("Tutor profile already exists")

    profile = TutorProfile(
        account_id=account_id,
        bio=bio,
        specializations=list(specializations),
        hourly_rate=hourly_rate,
        years_experience=years_experience,
        total_reviews=0,
    )
    db.add(profile)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError("Tutor profile already exists") from exc
    db.refresh(profile)

    logger.info("Created tutor profile %s for account %s", profile.id, account_id)
    return profile


def get_tutor(db: Session, tutor_id: uuid.UUID) -> TutorProfile:
    profile = db.get(TutorProfile, tutor_id)
    if profile is None:
        raise NotFoundError("Tutor not found")
    return profile


def list_tutors(db: Session, specialization: str | None = None) -> list[TutorProfile]:
    tutors = db.scalars(
        select(TutorProfile)
        .where(TutorProfile.is_available.is_(True))
        .order_by(TutorProfile.rating.desc().nulls_last(), TutorProfile.created_at.desc())
    ).all()

    if not specialization:
        return list(tutors)

    # specializations is a JSON list, matched here so the query stays portable across backends
    wanted = specialization.strip().lower()
    return [
        tutor for tutor in tutors
        if any(tag.lower() == wanted for tag in tutor.specializations or [])
    ]


def update_tutor_profile(db: Session, account_id: uuid.UUID, changes: dict[str, Any]) -> TutorProfile:
    profile = find_profile_for_account(db, account_id)
    if profile is None:
        raise NotFoundError("Tutor profile not found")

    partial = build_partial_update(TutorProfile, changes, TUTOR_EDITABLE_FIELDS)
    return apply_partial_update(
        db,
        partial,
        TutorProfile.id == profile.id,
        not_found_message="Tutor profile not found",
    )


def create_review(
    db: Session,
    tutor_id: uuid.UUID,
    student_id: uuid.UUID,
    rating: int,
    comment: str | None = None,
) -> Review:
    """Insert a review and refresh the tutor's aggregate in one transaction.

    The tutor row is locked for the duration so concurrent reviews of the
    same tutor recompute the aggregate one after another. The unique
    constraint on (tutor_id, student_id) is what actually prevents
    duplicates; the lookup below only gives a cleaner early error.
    """
    if not MIN_REVIEW_RATING <= rating <= MAX_REVIEW_RATING:
        raise ValidationError(f"Rating must be between {MIN_REVIEW_RATING} and {MAX_REVIEW_RATING}")

    tutor = db.scalars(
        select(TutorProfile).where(TutorProfile.id == tutor_id).with_for_update(of=TutorProfile)
    ).first()
    if tutor is None:
        db.rollback()
        raise NotFoundError("Tutor not found")

    existing = db.scalars(
        select(Review.id).where(Review.tutor_id == tutor_id, Review.student_id == student_id)
    ).first()
    if existing is not None:
        db.rollback()
        raise BadRequestError(DUPLICATE_REVIEW_MESSAGE)

    review = Review(tutor_id=tutor_id, student_id=student_id, rating=rating, comment=comment)
    try:
        db.add(review)
        db.flush()
        ratings.recompute_tutor_rating(db, tutor_id)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError(DUPLICATE_REVIEW_MESSAGE) from exc
    db.refresh(review)

    logger.info("Student %s reviewed tutor %s", student_id, tutor_id)
    return review


def list_reviews(db: Session, tutor_id: uuid.UUID) -> list[Review]:
    get_tutor(db, tutor_id)
    return list(
        db.scalars(
            select(Review).where(Review.tutor_id == tutor_id).order_by(Review.created_at.desc())
        ).all()
    )

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from tutor_api.auth.policy import ensure_owner
from tutor_api.core.errors import NotFoundError
from tutor_api.models.course import Course, DifficultyLevel
from tutor_api.models.tutor_profile import TutorProfile
from tutor_api.services.partial_update import apply_partial_update, build_partial_update
from tutor_api.services.tutor_service import find_profile_for_account

logger = logging.getLogger(__name__)

COURSE_EDITABLE_FIELDS = (
    "title",
    "description",
    "price",
    "duration_minutes",
    "category",
    "difficulty_level",
    "is_active",
)
COURSE_NOT_FOUND_MESSAGE = "Course not found or access denied"


def create_course(
    db: Session,
    account_id: uuid.UUID,
    title: str,
    description: str,
    price: int,
    duration_minutes: int,
    category: str,
    difficulty_level: DifficultyLevel,
) -> Course:
    profile = find_profile_for_account(db, account_id)
    if profile is None:
        raise NotFoundError("Tutor profile not found")

    course = Course(
        tutor_id=profile.id,
        title=title,
        description=description,
        price=price,
        duration_minutes=duration_minutes,
        category=category,
        difficulty_level=DifficultyLevel(difficulty_level),
        is_active=True,
    )
    db.add(course)
    db.commit()
    db.refresh(course)

    logger.info("Tutor %s created course %s", profile.id, course.id)
    return course


def list_courses(db: Session) -> list[Course]:
    return list(
        db.scalars(
            select(Course).where(Course.is_active.is_(True)).order_by(Course.created_at.desc())
        ).all()
    )


def list_courses_for_account(db: Session, account_id: uuid.UUID) -> list[Course]:
    return list(
        db.scalars(
            select(Course)
            .join(TutorProfile, Course.tutor_id == TutorProfile.id)
            .where(TutorProfile.account_id == account_id)
            .order_by(Course.created_at.desc())
        ).all()
    )


def get_course(db: Session, course_id: uuid.UUID) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return course


def _owned_course(db: Session, course_id: uuid.UUID, account_id: uuid.UUID) -> Course:
    course = db.get(Course, course_id)
    owner_account_id = course.tutor.account_id if course is not None else None
    return ensure_owner(course, owner_account_id, account_id, COURSE_NOT_FOUND_MESSAGE)


def update_course(
    db: Session,
    course_id: uuid.UUID,
    account_id: uuid.UUID,
    changes: dict[str, Any],
) -> Course:
    _owned_course(db, course_id, account_id)
    partial = build_partial_update(Course, changes, COURSE_EDITABLE_FIELDS)
    return apply_partial_update(
        db,
        partial,
        Course.id == course_id,
        not_found_message=COURSE_NOT_FOUND_MESSAGE,
    )


def delete_course(db: Session, course_id: uuid.UUID, account_id: uuid.UUID) -> None:
    course = _owned_course(db, course_id, account_id)
    db.delete(course)
    db.commit()
    logger.info("Account %s deleted course %s", account_id, course_id)

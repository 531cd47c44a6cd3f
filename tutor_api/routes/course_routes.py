import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Response, status
from pydantic import Field
from sqlalchemy.orm import Session

from tutor_api.auth.dependencies import get_current_claims, require_role
from tutor_api.auth.jwt_handler import Claims
from tutor_api.core.schemas import ApiModel
from tutor_api.database import get_db
from tutor_api.models.account import Role
from tutor_api.models.course import Course, DifficultyLevel
from tutor_api.services import course_service

router = APIRouter(tags=['courses'])

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 480


class CreateCourseRequest(ApiModel):
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field(min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    price: int = Field(ge=0)
    duration_minutes: int = Field(ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    category: str = Field(min_length=1, max_length=100)
    difficulty_level: DifficultyLevel


class UpdateCourseRequest(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = Field(default=None, min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    price: int | None = Field(default=None, ge=0)
    duration_minutes: int | None = Field(default=None, ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    difficulty_level: DifficultyLevel | None = None
    is_active: bool | None = None


class CourseResponse(ApiModel):
    id: uuid.UUID
    title: str
    description: str
    tutor_id: uuid.UUID
    tutor_name: str | None = None
    price: int
    duration_minutes: int
    category: str
    difficulty_level: DifficultyLevel
    is_active: bool
    created_at: datetime
    updated_at: datetime


def to_course_response(course: Course) -> CourseResponse:
    response = CourseResponse.model_validate(course)
    if course.tutor is not None:
        response.tutor_name = course.tutor.account.full_name
    return response


@router.post('', response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    data: CreateCourseRequest,
    claims: Claims = Depends(require_role(Role.TUTOR)),
    db: Session = Depends(get_db),
):
    course = course_service.create_course(db, claims.subject, **data.model_dump())
    return to_course_response(course)


@router.get('', response_model=list[CourseResponse])
def list_courses(db: Session = Depends(get_db)):
    return [to_course_response(course) for course in course_service.list_courses(db)]


@router.get('/mine', response_model=list[CourseResponse])
def list_my_courses(
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return [to_course_response(course) for course in course_service.list_courses_for_account(db, claims.subject)]


@router.get('/{course_id}', response_model=CourseResponse)
def get_course(course_id: uuid.UUID, db: Session = Depends(get_db)):
    return to_course_response(course_service.get_course(db, course_id))


@router.put('/{course_id}', response_model=CourseResponse)
def update_course(
    course_id: uuid.UUID,
    data: UpdateCourseRequest,
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    course = course_service.update_course(db, course_id, claims.subject, data.model_dump(exclude_unset=True))
    return to_course_response(course)


@router.delete('/{course_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_course(
    course_id: uuid.UUID,
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    course_service.delete_course(db, course_id, claims.subject)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

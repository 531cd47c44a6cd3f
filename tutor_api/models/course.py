"""Course model definitions."""

import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from tutor_api.database import Base, utcnow
from tutor_api.models.tutor_profile import TutorProfile


class DifficultyLevel(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Course(Base):
    """A course offered by a tutor profile."""
    __tablename__ = "courses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tutor_id = Column(Uuid, ForeignKey("tutor_profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=False)
    price = Column(Integer, nullable=False)  # minor currency units
    duration_minutes = Column(Integer, nullable=False)
    category = Column(String(100), nullable=False)
    difficulty_level = Column(
        Enum(DifficultyLevel, name="difficulty_level", values_callable=lambda levels: [level.value for level in levels]),
        nullable=False,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    tutor = relationship(TutorProfile)

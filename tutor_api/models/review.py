"""Review model definitions."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from tutor_api.database import Base, utcnow
from tutor_api.models.account import Account
from tutor_api.models.tutor_profile import TutorProfile


class Review(Base):
    """A student's rating of a tutor. One per (tutor, student) pair."""
    __tablename__ = "tutor_reviews"
    __table_args__ = (
        UniqueConstraint("tutor_id", "student_id", name="uq_tutor_reviews_tutor_student"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_tutor_reviews_rating_range"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tutor_id = Column(Uuid, ForeignKey("tutor_profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    student_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    tutor = relationship(TutorProfile)
    student = relationship(Account)

"""Tutor profile model definitions."""

import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from tutor_api.database import Base, utcnow
from tutor_api.models.account import Account


class TutorProfile(Base):
    """Public tutoring profile owned by exactly one account."""
    __tablename__ = "tutor_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), unique=True, nullable=False)
    bio = Column(String(1000), nullable=False)
    specializations = Column(JSON, nullable=False, default=list)
    hourly_rate = Column(Integer, nullable=False)  # minor currency units
    years_experience = Column(Integer, nullable=False)
    # rating and total_reviews are maintained by services.ratings only
    rating = Column(Float, nullable=True)
    total_reviews = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    account = relationship(Account, lazy="joined", innerjoin=True)

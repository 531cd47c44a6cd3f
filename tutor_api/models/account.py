"""Account model definitions."""

import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, String, Uuid

from tutor_api.database import Base, utcnow


class Role(str, enum.Enum):
    """Closed set of account roles carried in tokens and stored on accounts."""

    STUDENT = "student"
    TUTOR = "tutor"
    ADMIN = "admin"


class Account(Base):
    """Represents a registered user of the marketplace."""
    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # stored lower-cased, so the unique index is case-insensitive in effect
    email = Column(String(320), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(
        Enum(Role, name="user_role", values_callable=lambda roles: [role.value for role in roles]),
        nullable=False,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

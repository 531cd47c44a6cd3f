"""Role and ownership rules applied before any mutation.

Role checks use the role carried in the token, not a fresh store lookup, so
a role change takes effect once the caller's current token expires.
"""

import uuid
from typing import TypeVar

from tutor_api.auth.jwt_handler import Claims
from tutor_api.core.errors import AuthorizationError, NotFoundError
from tutor_api.models.account import Role

T = TypeVar("T")


def has_role(actual: Role, required: Role) -> bool:
    """Admin satisfies any requirement, everyone else needs an exact match."""
    return actual == Role.ADMIN or actual == required


def require_role(claims: Claims, *allowed: Role) -> Claims:
    if not any(has_role(claims.role, role) for role in allowed):
        names = " or ".join(role.value for role in allowed)
        raise AuthorizationError(f"This action requires the {names} role")
    return claims


def require_reviewer(claims: Claims) -> Claims:
    # Admin does not bypass this one: a review must come from a student account
    if claims.role != Role.STUDENT:
        raise AuthorizationError("Only students can review tutors")
    return claims


def ensure_owner(
    resource: T | None,
    owner_account_id: uuid.UUID | None,
    account_id: uuid.UUID,
    message: str,
) -> T:
    """Return ``resource`` if ``account_id`` owns it.

    Missing and foreign resources raise the same ``NotFoundError`` so a
    non-owner learns nothing about whether the resource exists.
    """
    if resource is None or owner_account_id != account_id:
        raise NotFoundError(message)
    return resource

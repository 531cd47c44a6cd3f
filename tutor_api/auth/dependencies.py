from collections.abc import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tutor_api.auth import jwt_handler, policy
from tutor_api.auth.jwt_handler import Claims
from tutor_api.auth.passwords import PasswordHasher
from tutor_api.core.config import Settings
from tutor_api.core.errors import AuthenticationError
from tutor_api.models.account import Role

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Claims:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")
    return jwt_handler.decode_access_token(settings, credentials.credentials)


def require_role(*allowed: Role) -> Callable[..., Claims]:
    def dependency(claims: Claims = Depends(get_current_claims)) -> Claims:
        return policy.require_role(claims, *allowed)

    return dependency


def require_reviewer(claims: Claims = Depends(get_current_claims)) -> Claims:
    return policy.require_reviewer(claims)

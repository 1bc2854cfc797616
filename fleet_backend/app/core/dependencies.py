"""
Authentication dependencies for FastAPI.

Resolves the bearer token into a ``CurrentSession``: the user, their
profile and their role assignment.
"""

from typing import Iterable, Optional, Union
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fleet_backend.app.core.jwt import decode_access_token
from fleet_backend.app.core.token_revocation import is_token_revoked
from fleet_backend.app.core.redis_client import get_redis
from fleet_backend.app.core.exceptions import AuthenticationError, TokenRevokedError
from fleet_backend.app.db.session import get_db
from fleet_backend.app.models.enums import AppRole
from fleet_backend.app.models.user import User
from fleet_backend.app.models.profile import Profile
from fleet_backend.app.models.user_role import UserRoleAssignment

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


class CurrentSession:
    """
    The signed-in user as seen by the dashboard.

    ``role`` is ``None`` for users without a role row; every predicate is
    false for them.
    """

    def __init__(self, user: User, profile: Optional[Profile], role: Optional[AppRole], token: str):
        self.user = user
        self.profile = profile
        self.role = role
        self.token = token

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def full_name(self) -> Optional[str]:
        return self.profile.full_name if self.profile else None

    def has_role(self, role: Union[AppRole, Iterable[AppRole]]) -> bool:
        if isinstance(role, AppRole):
            return self.role == role
        return self.has_any_role(role)

    def has_any_role(self, roles: Iterable[AppRole]) -> bool:
        return self.role is not None and self.role in set(roles)

    @property
    def is_fleet_manager(self) -> bool:
        return self.role == AppRole.FLEET_MANAGER

    @property
    def is_operations(self) -> bool:
        return self.role == AppRole.OPERATIONS

    @property
    def is_driver(self) -> bool:
        return self.role == AppRole.DRIVER

    @property
    def is_finance(self) -> bool:
        return self.role == AppRole.FINANCE


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
) -> CurrentSession:
    """
    FastAPI dependency for JWT authentication.

    Checks:
    1. Validates JWT token signature and expiry
    2. Checks if the token has been revoked by sign-out
    3. Verifies the user still exists and is active
    4. Loads profile and role from the database on every request

    Raises:
        AuthenticationError / TokenRevokedError: 401 on any failure
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    token = credentials.credentials

    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")

    user_id = payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    if await is_token_revoked(redis, token):
        raise TokenRevokedError()

    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    profile = (await db.execute(select(Profile).where(Profile.id == user_id))).scalar_one_or_none()
    role = (await db.execute(
        select(UserRoleAssignment.role).where(UserRoleAssignment.user_id == user_id)
    )).scalar_one_or_none()

    return CurrentSession(user=user, profile=profile, role=role, token=token)

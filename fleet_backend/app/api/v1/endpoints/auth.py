"""
Authentication API endpoints.

Email/password sign-up, sign-in, sign-out, session and password update for
the dashboard.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.redis_client import get_redis
from fleet_backend.app.schemas.auth import (
    SignUpRequest,
    SignInRequest,
    PasswordUpdateRequest,
    TokenResponse,
    SessionResponse,
)
from fleet_backend.app.core.security import get_password_hash, verify_password
from fleet_backend.app.core.jwt import create_access_token
from fleet_backend.app.core.token_revocation import revoke_token
from fleet_backend.app.core.dependencies import CurrentSession, get_current_session
from fleet_backend.app.core.exceptions import AuthenticationError
from fleet_backend.app.models.user_role import UserRoleAssignment
from fleet_backend.app.services.accounts import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(user_id: int, email: str, role) -> TokenResponse:
    access_token = create_access_token(data={"sub": email, "user_id": user_id})
    return TokenResponse(access_token=access_token, user_id=user_id, email=email, role=role)


@router.post("/sign-up", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    user_data: SignUpRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user with a profile.

    No role row is created; until a role is assigned the user can sign in
    but every gated route answers 403.
    """
    user = await AccountService.add_user(
        db,
        email=user_data.email,
        password=user_data.password,
        full_name=user_data.full_name,
        mobile_phone=user_data.mobile_phone,
    )
    await db.commit()

    logger.info("User signed up: %s", user.email)
    return _issue_token(user.id, user.email, None)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(
    credentials: SignInRequest,
    db: AsyncSession = Depends(get_db)
):
    """Authenticate with email and password and receive a JWT."""
    user = await AccountService.find_user(db, credentials.email)

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise AuthenticationError("Invalid login credentials")

    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    role = (await db.execute(
        select(UserRoleAssignment.role).where(UserRoleAssignment.user_id == user.id)
    )).scalar_one_or_none()

    return _issue_token(user.id, user.email, role)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    session: CurrentSession = Depends(get_current_session),
    redis=Depends(get_redis),
):
    """Revoke the bearer token used for this request."""
    await revoke_token(redis, session.token, session.user_id)
    logger.info("User signed out: %s", session.email)


@router.get("/session", response_model=SessionResponse)
async def get_session(session: CurrentSession = Depends(get_current_session)):
    """Current user, profile and role."""
    profile = session.profile
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        full_name=profile.full_name if profile else None,
        mobile_phone=profile.mobile_phone if profile else None,
        base_station=profile.base_station if profile else None,
        role=session.role,
    )


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
async def update_password(
    payload: PasswordUpdateRequest,
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    """Change the signed-in user's password."""
    user = session.user
    user.hashed_password = get_password_hash(payload.new_password)
    db.add(user)
    await db.commit()
    logger.info("Password updated for %s", session.email)

"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from fleet_backend.app.models.enums import AppRole


class SignUpRequest(BaseModel):
    """
    Schema for email/password sign-up.

    No role row is created here; roles are assigned by a fleet manager or
    by the provisioning functions.
    """
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    full_name: str = Field(..., min_length=1, max_length=255, description="Display name")
    mobile_phone: Optional[str] = Field(None, max_length=50)


class SignInRequest(BaseModel):
    """Schema for email/password sign-in."""
    email: EmailStr = Field(..., description="Email")
    password: str = Field(..., description="Password")


class PasswordUpdateRequest(BaseModel):
    """Schema for updating the signed-in user's password."""
    new_password: str = Field(..., min_length=6, description="New password (min 6 characters)")


class TokenResponse(BaseModel):
    """
    Schema for JWT token response.

    Returned by successful sign-in/sign-up operations.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: int = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    role: Optional[AppRole] = Field(default=None, description="Role, if one has been assigned")


class SessionResponse(BaseModel):
    """Current session: user, profile and role."""
    user_id: int
    email: str
    full_name: Optional[str] = None
    mobile_phone: Optional[str] = None
    base_station: Optional[str] = None
    role: Optional[AppRole] = None

"""
Schemas for the callable functions.

Function endpoints answer with ``{success, ...}`` bodies rather than the
standard error envelope.
"""

from pydantic import BaseModel, EmailStr, Field
from enum import Enum
from typing import Optional, List


class CreateDriverRequest(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    mobile_phone: Optional[str] = Field(None, max_length=50)
    license_number: str = Field(..., min_length=1, max_length=100)
    vehicle_id: Optional[int] = None


class DriverCredentials(BaseModel):
    email: str
    password: str


class CreateDriverResponse(BaseModel):
    success: bool = True
    driver_id: int
    credentials: DriverCredentials
    message: str = "Driver account created successfully"


class SeedStatus(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    ERROR = "error"


class SeedResult(BaseModel):
    email: str
    status: SeedStatus
    user_id: Optional[int] = None
    error: Optional[str] = None


class SeedResponse(BaseModel):
    success: bool = True
    message: str = "Test accounts seeded successfully"
    results: List[SeedResult]


class LiveLocationsResponse(BaseModel):
    success: bool = True
    updated: int
    message: str


class FunctionError(BaseModel):
    success: bool = False
    error: str

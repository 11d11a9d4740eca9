"""
Pydantic schemas for registration, login, session tokens and profiles.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""
    username: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=256)


class UserLoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class AccessTokenResponse(BaseModel):
    """Returned by register and login; the refresh token goes in the cookie."""
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., serialization_alias="accessToken")


class TokenPairResponse(BaseModel):
    """Returned by refresh."""
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., serialization_alias="accessToken")
    refresh_token: str = Field(..., serialization_alias="refreshToken")


class UserUpdateRequest(BaseModel):
    """Profile update; only the fields present are changed."""
    model_config = ConfigDict(extra="forbid")

    firstname: Optional[str] = Field(None, max_length=128)
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(None, min_length=1, max_length=64)


class UserResponse(BaseModel):
    """User profile response (no sensitive data)."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    email: str
    username: str
    firstname: Optional[str] = None
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")

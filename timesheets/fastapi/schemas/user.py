"""
Pydantic schemas for User model validation and serialization.

This module defines the data validation schemas for user-related
API operations including creation, login and responses.
"""

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from timesheets.fastapi.models.user import UserRole


class UserBase(BaseModel):
    """Base User schema with common fields."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern="^[a-zA-Z0-9_ -]+$",
        description="Unique username (3-50 chars, alphanumeric + underscore/hyphen)",
        examples=["john_doe", "jane"]
    )

    name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        description="Display name",
        examples=["John Doe"]
    )

    role: UserRole = Field(
        default=UserRole.USER,
        description="Account role",
        examples=["user", "admin"]
    )


class UserCreate(UserBase):
    """Schema for creating a new user account."""

    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="User password (minimum 6 characters)",
        examples=["user123"]
    )


class UserRead(UserBase):
    """Schema for reading user information (never includes the password)."""

    id: int = Field(..., description="User unique identifier")
    created_at: datetime = Field(..., description="Account creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class UserCreateResponse(BaseModel):
    """Response schema for user creation."""

    message: str = Field(..., description="Operation result message")
    user: UserRead = Field(..., description="Created user")


class UserLogin(BaseModel):
    """Schema for login requests."""

    username: str = Field(..., min_length=1, max_length=50, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """Response schema for successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserRead = Field(..., description="Authenticated user")

"""
Pydantic schemas for user requests and responses.
UserResponse is the only shape a user is serialized in; it has no password field.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional


class UserCreate(BaseModel):
    """Schema for registering a new user."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's display name",
        examples=["Maria Silva"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["maria@example.com"]
    )

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        description="Unique login name (3-30 characters)",
        examples=["maria"]
    )

    password: str = Field(
        ...,
        min_length=6,
        description="Password (minimum 6 characters)",
        examples=["s3cret!"]
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class UserResponse(BaseModel):
    """User response schema (excluding the password digest)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="User's unique identifier", examples=[1])
    name: str = Field(..., description="User's display name")
    email: str = Field(..., description="User's email address")
    username: str = Field(..., description="User's login name")
    picture: Optional[str] = Field(None, description="Profile picture URL")


class UserEnvelope(BaseModel):
    """Single user wrapped under a `user` key."""

    user: UserResponse

"""
Pydantic schemas for session requests and responses.
Covers username/password login and Google ID token login.
"""

from pydantic import BaseModel, Field, field_validator
from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request schema."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        description="User's login name",
        examples=["maria"]
    )
    password: str = Field(
        ...,
        min_length=6,
        description="User's password",
        examples=["s3cret!"]
    )


class GoogleLoginRequest(BaseModel):
    """Google Sign-In request carrying the ID token issued to the client."""

    id_token: str = Field(
        ...,
        min_length=1,
        description="Google ID token",
    )

    @field_validator('id_token')
    @classmethod
    def validate_id_token(cls, v):
        if not v.strip():
            raise ValueError("id_token cannot be empty")
        return v.strip()


class SessionResponse(BaseModel):
    """Successful login response."""

    message: str = Field("Login successful", examples=["Login successful"])
    user: UserResponse

"""
Pydantic schemas for request/response validation.
"""

# Session schemas
from .auth import (
    LoginRequest,
    GoogleLoginRequest,
    SessionResponse
)

# User schemas
from .user import (
    UserCreate,
    UserResponse,
    UserEnvelope
)

# Property schemas
from .property import (
    PropertyBase,
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyEnvelope
)

# Image schemas
from .image import (
    ImageResponse,
    validate_image_urls
)

# Error schemas
from .error import (
    ErrorResponse,
    MessageResponse,
    error_responses
)

__all__ = [
    # Session
    "LoginRequest",
    "GoogleLoginRequest",
    "SessionResponse",

    # User
    "UserCreate",
    "UserResponse",
    "UserEnvelope",

    # Property
    "PropertyBase",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyEnvelope",

    # Image
    "ImageResponse",
    "validate_image_urls",

    # Errors
    "ErrorResponse",
    "MessageResponse",
    "error_responses"
]

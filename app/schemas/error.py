"""
Error and message response schemas for API documentation.
Mirrors the structure produced by ErrorHandlerService.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error", examples=["email"])
    message: str = Field(..., description="Human-readable error message")
    type: Optional[str] = Field(None, description="Error type identifier", examples=["value_error"])


class ErrorBody(BaseModel):
    """Schema for the error object."""

    code: str = Field(..., description="Error code identifier", examples=["NOT_FOUND"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="When the error occurred (ISO 8601)")
    request_id: Optional[str] = Field(None, description="Request identifier for log correlation")
    details: Optional[List[ErrorDetail]] = None


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: ErrorBody


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., examples=["Property deleted"])


def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """OpenAPI `responses` entries for the given error status codes."""
    descriptions = {
        400: "Invalid input",
        401: "Invalid credentials",
        404: "Resource not found",
        409: "Resource already exists",
        500: "Internal server error",
    }
    return {
        code: {"model": ErrorResponse, "description": descriptions.get(code, "Error")}
        for code in status_codes
    }

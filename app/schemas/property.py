"""
Pydantic schemas for property requests and responses.
Handles property creation, full updates, and response shaping.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from app.schemas.image import ImageResponse, validate_image_urls
from app.utils.validators import MAX_ID


class PropertyBase(BaseModel):
    """Base property schema with the scalar listing fields."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Property listing title",
        examples=["Casa com quintal"]
    )

    description: str = Field(
        ...,
        min_length=1,
        description="Detailed property description",
        examples=["Three bedrooms, close to the park."]
    )

    price: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Property price",
        examples=[350000.0]
    )

    latitude: float = Field(
        ...,
        allow_inf_nan=False,
        description="Property latitude coordinate",
        examples=[-23.5505]
    )

    longitude: float = Field(
        ...,
        allow_inf_nan=False,
        description="Property longitude coordinate",
        examples=[-46.6333]
    )

    user_id: int = Field(
        ...,
        alias="userId",
        ge=1,
        le=MAX_ID,
        description="ID of the owning user",
        examples=[1]
    )

    @field_validator('title', 'description')
    @classmethod
    def validate_not_blank(cls, v):
        """Reject whitespace-only text."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    def scalar_fields(self) -> dict:
        """Column values for the property row."""
        return self.model_dump(exclude={"images"})


class PropertyCreate(PropertyBase):
    """Schema for creating a new property with an inline image set."""

    images: Optional[List[str]] = Field(
        None,
        min_length=1,
        description="Image URLs; when present at least one is required",
        examples=[["https://cdn.example.com/p/1.jpg"]]
    )

    @field_validator('images')
    @classmethod
    def validate_images(cls, v):
        if v is None:
            return v
        return validate_image_urls(v)


class PropertyUpdate(PropertyBase):
    """Schema for a full property update; images replace the whole set."""

    images: Optional[List[str]] = Field(
        None,
        description="New image set; omit to keep the current images, [] to remove all",
        examples=[["https://cdn.example.com/p/2.jpg"]]
    )

    @field_validator('images')
    @classmethod
    def validate_images(cls, v):
        if v is None:
            return v
        return validate_image_urls(v)


class PropertyResponse(BaseModel):
    """Property response schema with its images."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Property identifier")
    title: str
    description: str
    price: float
    latitude: float
    longitude: float
    user_id: int = Field(..., serialization_alias="userId")
    images: List[ImageResponse] = Field(default_factory=list)


class PropertyEnvelope(BaseModel):
    """Single property wrapped under a `property` key."""

    property: PropertyResponse

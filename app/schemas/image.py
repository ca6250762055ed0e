"""
Pydantic schemas for property images.
Images are URL references; the URL string is stored exactly as submitted.
"""

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from typing import List

_url_adapter = TypeAdapter(AnyUrl)


def validate_image_urls(urls: List[str]) -> List[str]:
    """
    Check that every entry is a syntactically valid absolute URI.

    Returns the original strings unchanged (no normalization).

    Raises:
        ValueError: Naming the first offending entry
    """
    for index, url in enumerate(urls):
        try:
            _url_adapter.validate_python(url)
        except ValidationError:
            raise ValueError(f"images[{index}] must be a valid URI")
    return urls


class ImageResponse(BaseModel):
    """Image as returned inside a property."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Image identifier")
    url: str = Field(..., description="Photo URL")
    property_id: int = Field(..., serialization_alias="propertyId", description="Owning property")

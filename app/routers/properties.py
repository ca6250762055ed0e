"""
Property management API endpoints for listing CRUD.
Each property carries its image set inline; updates replace the set as a whole.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import List

from app.services.property import PropertyService
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyEnvelope
)
from app.schemas.error import MessageResponse, error_responses
from app.utils.dependencies import get_property_service
from app.utils.validators import MAX_ID


router = APIRouter(prefix="/property", tags=["Properties"])


@router.post(
    "",
    response_model=PropertyEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a property listing owned by an existing user, with its images",
    responses=error_responses(400, 404, 500)
)
async def create_property(
    property_data: PropertyCreate,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    """
    Create a new property listing.

    Raises:
        UserNotFoundError: If userId doesn't reference an existing user
    """
    property_obj = await property_service.create_property(property_data)
    return PropertyEnvelope(property=PropertyResponse.model_validate(property_obj))


@router.get(
    "",
    response_model=List[PropertyResponse],
    summary="List properties",
    description="Retrieve every property with its images",
    responses=error_responses(500)
)
async def list_properties(
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.list_properties()
    return [PropertyResponse.model_validate(p) for p in properties]


# Declared before /{property_id} so "user" is never parsed as an id
@router.get(
    "/user",
    response_model=List[PropertyResponse],
    summary="List properties by owner",
    description="Retrieve the properties owned by a user; 404 when the user owns none",
    responses=error_responses(400, 404, 500)
)
async def list_properties_by_owner(
    user_id: int = Query(..., alias="userId", ge=1, le=MAX_ID, description="Owning user ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.list_properties_by_owner(user_id)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyEnvelope,
    summary="Get property details",
    description="Retrieve a property with its images",
    responses=error_responses(400, 404, 500)
)
async def get_property(
    property_id: int = Path(..., ge=1, le=MAX_ID, description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    property_obj = await property_service.get_property(property_id)
    return PropertyEnvelope(property=PropertyResponse.model_validate(property_obj))


@router.put(
    "/{property_id}",
    response_model=PropertyEnvelope,
    summary="Update property",
    description=(
        "Overwrite a property's fields. A provided images list replaces the whole "
        "image set atomically; omitting it keeps the current images."
    ),
    responses=error_responses(400, 404, 500)
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: int = Path(..., ge=1, le=MAX_ID, description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    """
    Update a property.

    Raises:
        PropertyNotFoundError: If property doesn't exist
    """
    property_obj = await property_service.update_property(property_id, property_data)
    return PropertyEnvelope(property=PropertyResponse.model_validate(property_obj))


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Delete property",
    description="Delete a property together with its images",
    responses=error_responses(400, 404, 500)
)
async def delete_property(
    property_id: int = Path(..., ge=1, le=MAX_ID, description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    await property_service.delete_property(property_id)
    return MessageResponse(message="Property deleted")

"""
Property service for managing property listings.
Handles CRUD operations, owner existence checks and image set replacement.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from app.repositories.property import PropertyRepository
from app.repositories.user import UserRepository
from app.models.property import Property
from app.schemas.property import PropertyCreate, PropertyUpdate
from app.utils.exceptions import (
    NotFoundError,
    PropertyNotFoundError,
    UserNotFoundError
)
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Property service for managing property listings.
    Any caller may act on any property; there is no ownership check.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def create_property(self, property_data: PropertyCreate) -> Property:
        """
        Create a new property listing with its images.

        Args:
            property_data: Property creation data

        Returns:
            Created property with images

        Raises:
            UserNotFoundError: If the owning user doesn't exist
            IntegrityError: If the store rejects the row for any other reason
        """
        if not await self.user_repo.exists(property_data.user_id):
            raise UserNotFoundError(property_data.user_id)

        try:
            property_obj = await self.property_repo.create_with_images(
                property_data.scalar_fields(),
                property_data.images or []
            )
        except IntegrityError:
            if await self.user_repo.exists(property_data.user_id):
                raise
            # Owner removed between the check and the insert
            logger.warning(f"Owner {property_data.user_id} vanished while creating a property")
            raise UserNotFoundError(property_data.user_id)

        logger.info(f"Property created for user {property_data.user_id}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def list_properties(self) -> List[Property]:
        """Get every property with its images."""
        return await self.property_repo.list_all()

    async def list_properties_by_owner(self, user_id: int) -> List[Property]:
        """
        Get the properties owned by a user.

        Raises:
            NotFoundError: If the user owns no properties (or doesn't exist)
        """
        properties = await self.property_repo.list_by_owner(user_id)

        if not properties:
            raise NotFoundError("Property", detail=f"No properties found for user with ID: {user_id}")

        return properties

    async def get_property(self, property_id: int) -> Property:
        """
        Get property by ID with its images.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.property_repo.get_with_images(property_id)

        if not property_obj:
            raise PropertyNotFoundError(property_id)

        logger.debug(f"Retrieved property: {property_id}")
        return property_obj

    async def update_property(self, property_id: int, property_data: PropertyUpdate) -> Property:
        """
        Overwrite a property's fields and optionally replace its images.

        The owner never changes through an update; userId in the payload is
        validated but ignored. Omitted images keep the current set, an empty
        list removes them all.

        Args:
            property_id: ID of the property to update
            property_data: Property update data

        Returns:
            Updated property with images

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        update_data = property_data.scalar_fields()
        update_data.pop("user_id", None)

        property_obj = await self.property_repo.update_with_images(
            property_id,
            update_data,
            property_data.images
        )

        if not property_obj:
            raise PropertyNotFoundError(property_id)

        return property_obj

    async def delete_property(self, property_id: int) -> None:
        """
        Delete a property and all its images.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        deleted = await self.property_repo.delete_with_images(property_id)

        if not deleted:
            raise PropertyNotFoundError(property_id)

        logger.info(f"Property deleted: {property_id}")

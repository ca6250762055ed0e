"""
Property repository for listings and their image sets.
Every multi-row write commits once and rolls back as a whole on failure.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.orm import selectinload
from app.repositories.base import BaseRepository
from app.repositories.image import ImageRepository
from app.models.property import Property
from app.models.image import Image
from typing import Optional, List, Dict, Any, Sequence
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Reads always return properties with their images loaded.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)
        self.image_repo = ImageRepository(db)

    def _with_images(self):
        # populate_existing refreshes objects already in the identity map,
        # so image sets replaced earlier in this session are re-read
        return (
            select(Property)
            .options(selectinload(Property.images))
            .execution_options(populate_existing=True)
        )

    async def create_with_images(self, property_data: Dict[str, Any], image_urls: Sequence[str] = ()) -> Property:
        """
        Create a property and its image rows in one transaction.

        Args:
            property_data: title, description, price, latitude, longitude, user_id
            image_urls: URLs of the initial image set

        Returns:
            Created property with images

        Raises:
            ValueError: If the price is negative
            Exception: If database operation fails (nothing is persisted)
        """
        try:
            property_obj = Property(**property_data)
            property_obj.validate_price()
            property_obj.images = [Image(url=url) for url in image_urls]

            self.db.add(property_obj)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property: {e}")
            raise

        logger.info(f"Created property: {property_obj.title} (ID: {property_obj.id}) with {len(image_urls)} images")
        return await self.get_with_images(property_obj.id)

    async def get_with_images(self, property_id: int) -> Optional[Property]:
        """
        Get property with its images.

        Args:
            property_id: ID of the property

        Returns:
            Property or None if not found
        """
        try:
            result = await self.db.execute(self._with_images().where(Property.id == property_id))
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with images: {property_id}")
            else:
                logger.debug(f"Property with id {property_id} not found")

            return property_obj
        except Exception as e:
            logger.error(f"Failed to get property {property_id}: {e}")
            raise

    async def list_all(self) -> List[Property]:
        """
        Get every property with its images, oldest first.

        Returns:
            List of properties
        """
        try:
            result = await self.db.execute(self._with_images().order_by(Property.id))
            properties = list(result.scalars().all())

            logger.debug(f"Retrieved {len(properties)} properties")
            return properties
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    async def list_by_owner(self, user_id: int) -> List[Property]:
        """
        Get the properties owned by a user, with images.

        Args:
            user_id: ID of the owning user

        Returns:
            List of properties, possibly empty
        """
        try:
            query = self._with_images().where(Property.user_id == user_id).order_by(Property.id)
            result = await self.db.execute(query)
            properties = list(result.scalars().all())

            logger.debug(f"Retrieved {len(properties)} properties for user {user_id}")
            return properties
        except Exception as e:
            logger.error(f"Failed to list properties for user {user_id}: {e}")
            raise

    async def update_with_images(
        self,
        property_id: int,
        update_data: Dict[str, Any],
        image_urls: Optional[Sequence[str]] = None
    ) -> Optional[Property]:
        """
        Update scalar fields and, when image_urls is given, replace the whole image set.
        Old images are deleted and new ones inserted in the same transaction.

        Args:
            property_id: ID of the property to update
            update_data: Scalar fields to overwrite
            image_urls: New image set, or None to leave images untouched

        Returns:
            Updated property with images, or None if not found

        Raises:
            Exception: If database operation fails (the previous state is kept)
        """
        property_obj = await self.get_by_id(property_id)
        if not property_obj:
            logger.debug(f"Property with id {property_id} not found for update")
            return None

        try:
            for field, value in update_data.items():
                setattr(property_obj, field, value)
            property_obj.validate_price()

            if image_urls is not None:
                removed = await self.image_repo.delete_by_property(property_id)
                self.db.expire(property_obj, ["images"])
                await self.image_repo.add_for_property(property_id, image_urls)
                logger.debug(f"Replacing {removed} images of property {property_id} with {len(image_urls)}")

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_id}: {e}")
            raise

        logger.info(f"Updated property: {property_id}")
        return await self.get_with_images(property_id)

    async def delete_with_images(self, property_id: int) -> bool:
        """
        Delete a property after deleting its images, as one transaction.

        Args:
            property_id: ID of the property to delete

        Returns:
            True if property was deleted, False if not found

        Raises:
            Exception: If database operation fails (nothing is deleted)
        """
        if not await self.exists(property_id):
            logger.debug(f"Property with id {property_id} not found for deletion")
            return False

        try:
            removed = await self.image_repo.delete_by_property(property_id)
            await self.db.execute(
                delete(Property)
                .where(Property.id == property_id)
                .execution_options(synchronize_session="fetch")
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise

        logger.info(f"Deleted property {property_id} and {removed} images")
        return True

"""
User repository for registration and login lookups.
Translates unique-constraint violations into conflict errors.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from app.repositories.base import BaseRepository
from app.models.user import User
from app.utils.exceptions import DuplicateResourceError
from typing import Optional, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)

# Retries when a concurrent insert takes the chosen username
USERNAME_ATTEMPTS = 3


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Email and username are each unique; duplicates surface as DuplicateResourceError.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.

        Args:
            username: Login name to search for

        Returns:
            User instance if found, None otherwise
        """
        return await self.get_by_field("username", username)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for (case-insensitive)

        Returns:
            User instance if found, None otherwise
        """
        return await self.get_by_field("email", normalize_email(email))

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user.

        Args:
            user_data: name, email, username, password_hash and optional picture

        Returns:
            Created user instance

        Raises:
            DuplicateResourceError: If the store rejects a duplicate username or email
        """
        create_data = {**user_data, "email": normalize_email(user_data["email"])}

        try:
            user = await self.create(create_data)
        except IntegrityError:
            # The store is the authority on uniqueness; find out which key collided
            field = await self._conflicting_field(create_data)
            logger.info(f"Rejected duplicate user {field}: {create_data.get(field)}")
            raise DuplicateResourceError("User", field)

        logger.info(f"Created user: {user.username} (ID: {user.id})")
        return user

    async def available_username(self, preferred: str) -> str:
        """
        Return `preferred` when nobody uses it, otherwise the first free `preferred-N`.
        """
        candidate = preferred
        suffix = 1
        while await self.get_by_username(candidate):
            candidate = f"{preferred}-{suffix}"
            suffix += 1
        return candidate

    async def upsert_by_email(self, email: str, create_data: Dict[str, Any]) -> Tuple[User, bool]:
        """
        Return the user with this email, creating it when absent.
        Existing rows are returned untouched. The username in `create_data`
        is only preferred; a taken one gets a numeric suffix.

        Args:
            email: Email address keying the upsert
            create_data: Fields used only when the user has to be created

        Returns:
            Tuple of (user, created)
        """
        existing = await self.get_by_email(email)
        if existing:
            return existing, False

        data = {**create_data, "email": email}
        for _ in range(USERNAME_ATTEMPTS):
            data["username"] = await self.available_username(create_data["username"])
            try:
                user = await self.create_user(data)
                return user, True
            except DuplicateResourceError as e:
                # A concurrent request may have created the same email first
                winner = await self.get_by_email(email)
                if winner:
                    return winner, False
                if e.field != "username":
                    raise
                last_error = e

        raise last_error

    async def _conflicting_field(self, data: Dict[str, Any]) -> str:
        if await self.get_by_username(data["username"]):
            return "username"
        if await self.get_by_email(data["email"]):
            return "email"
        return "username"

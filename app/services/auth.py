"""
Authentication service for registration, password login and Google login.
Handles credential checks and user provisioning; no session token is issued.
"""

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.user import UserRepository
from app.models.user import User
from app.schemas.user import UserCreate
from app.schemas.auth import LoginRequest
from app.services.identity import GoogleIdentityVerifier
from app.utils.auth import hash_password, verify_password, generate_random_password
from app.utils.exceptions import (
    DuplicateResourceError,
    InvalidCredentialsError,
    UserNotFoundError
)
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing user accounts and login flows.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register_user(self, user_data: UserCreate) -> User:
        """
        Register a new user.

        Args:
            user_data: Validated registration data

        Returns:
            Created User object

        Raises:
            DuplicateResourceError: If the username or email is already taken
        """
        if await self.user_repo.get_by_username(user_data.username):
            raise DuplicateResourceError("User", "username")

        if await self.user_repo.get_by_email(user_data.email):
            raise DuplicateResourceError("User", "email")

        # bcrypt is CPU bound; keep it off the event loop
        password_hash = await run_in_threadpool(hash_password, user_data.password)

        user = await self.user_repo.create_user({
            "name": user_data.name,
            "email": user_data.email,
            "username": user_data.username,
            "password_hash": password_hash,
        })

        logger.info(f"User registered: {user.username} (ID: {user.id})")
        return user

    async def authenticate(self, credentials: LoginRequest) -> User:
        """
        Authenticate user with username and password.

        Args:
            credentials: Validated login data

        Returns:
            Authenticated User object

        Raises:
            InvalidCredentialsError: If the username is unknown or the password is wrong
        """
        user = await self.user_repo.get_by_username(credentials.username)

        if not user:
            logger.warning(f"Failed login attempt for unknown username: {credentials.username}")
            raise InvalidCredentialsError()

        password_ok = await run_in_threadpool(verify_password, credentials.password, user.password_hash)
        if not password_ok:
            logger.warning(f"Failed login attempt for username: {credentials.username}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.username}")
        return user

    async def google_login(self, token: str, verifier: GoogleIdentityVerifier) -> User:
        """
        Log in with a Google ID token, creating the account on first use.

        The email doubles as username (with a numeric suffix when another
        account already uses it as its username). The stored password is a
        random secret nobody knows, so the account can only log in through Google.

        Args:
            token: Google ID token sent by the client
            verifier: Identity verifier configured with our client id

        Returns:
            Existing or newly created User object

        Raises:
            InvalidTokenError: If the token is rejected
        """
        identity = await verifier.verify(token)

        existing = await self.user_repo.get_by_email(identity.email)
        if existing:
            logger.info(f"Google login for existing user: {existing.username}")
            return existing

        password_hash = await run_in_threadpool(hash_password, generate_random_password())

        user, created = await self.user_repo.upsert_by_email(identity.email, {
            "name": identity.name,
            "username": identity.email,
            "password_hash": password_hash,
            "picture": identity.picture,
        })

        if created:
            logger.info(f"Created user from Google identity: {user.email} (ID: {user.id})")
        return user

    async def get_user(self, user_id: int) -> User:
        """
        Get user by ID.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        user = await self.user_repo.get_by_id(user_id)

        if not user:
            raise UserNotFoundError(user_id)

        return user

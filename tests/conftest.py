"""
Test configuration and fixtures for the property catalog API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# The module-level app in app.main reads settings at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
import uuid
from typing import AsyncGenerator, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.config import Settings
from app.database import Database, get_db
from app.main import create_app
from app.models.user import User
from app.models.property import Property
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository
from app.repositories.image import ImageRepository
from app.services.auth import AuthService
from app.services.property import PropertyService
from app.services.identity import ExternalIdentity
from app.utils.auth import hash_password
from app.utils.exceptions import InvalidTokenError


TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeIdentityVerifier:
    """Identity verifier that accepts a fixed set of tokens."""

    def __init__(self, identities: Optional[Dict[str, ExternalIdentity]] = None):
        self.identities = dict(identities or {})
        self.calls: List[str] = []

    async def verify(self, token: str) -> ExternalIdentity:
        self.calls.append(token)
        if token not in self.identities:
            raise InvalidTokenError()
        return self.identities[token]


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an isolated, in-memory application."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        environment="testing",
        create_tables_on_startup=False,
        google_client_id="test-client-id",
    )


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Fresh in-memory database with the schema created."""
    db = Database(TEST_DATABASE_URL, poolclass=StaticPool)
    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with database.session() as session:
        yield session


@pytest.fixture
def identity_verifier() -> FakeIdentityVerifier:
    """Verifier that knows a single Google account."""
    return FakeIdentityVerifier({
        "valid-google-token": ExternalIdentity(
            email="ana.google@example.com",
            name="Ana Google",
            picture="https://lh3.googleusercontent.com/a/ana",
        )
    })


@pytest.fixture
def app(test_settings: Settings, database: Database, identity_verifier: FakeIdentityVerifier):
    """Application wired to the in-memory database and fake verifier."""
    application = create_app(
        test_settings,
        database=database,
        identity_verifier=identity_verifier,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with database.session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client; server errors come back as 500 responses."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    """Create a user repository instance."""
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    """Create a property repository instance."""
    return PropertyRepository(db_session)


@pytest.fixture
def image_repository(db_session: AsyncSession) -> ImageRepository:
    """Create an image repository instance."""
    return ImageRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    """Create an auth service instance."""
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    """Create a property service instance."""
    return PropertyService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_payload(
        username: str = None,
        email: str = None,
        name: str = "Test User",
        password: str = "secret123"
    ) -> dict:
        """Registration payload as sent to POST /users."""
        suffix = uuid.uuid4().hex[:8]
        return {
            "name": name,
            "email": email or f"user{suffix}@example.com",
            "username": username or f"user{suffix}",
            "password": password
        }

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        username: str = None,
        email: str = None,
        name: str = "Test User",
        password: str = "secret123"
    ) -> User:
        """Create a test user in the database."""
        payload = UserFactory.create_user_payload(username, email, name, password)
        return await user_repo.create_user({
            "name": payload["name"],
            "email": payload["email"],
            "username": payload["username"],
            "password_hash": hash_password(password)
        })


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_payload(
        user_id: int,
        title: str = "Casa com quintal",
        description: str = "Three bedrooms, close to the park",
        price: float = 350000.0,
        latitude: float = -23.5505,
        longitude: float = -46.6333,
        images: Optional[List[str]] = None
    ) -> dict:
        """Property payload as sent to POST /property."""
        payload = {
            "title": title,
            "description": description,
            "price": price,
            "latitude": latitude,
            "longitude": longitude,
            "userId": user_id
        }
        if images is not None:
            payload["images"] = images
        return payload

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        user_id: int,
        title: str = "Casa com quintal",
        price: float = 350000.0,
        images: Optional[List[str]] = None
    ) -> Property:
        """Create a test property in the database."""
        return await property_repo.create_with_images(
            {
                "title": title,
                "description": "Three bedrooms, close to the park",
                "price": price,
                "latitude": -23.5505,
                "longitude": -46.6333,
                "user_id": user_id
            },
            images or []
        )


# Common test fixtures
@pytest.fixture
async def test_user(user_repository: UserRepository) -> User:
    """Create a test user with password 'secret123'."""
    return await UserFactory.create_user(
        user_repository,
        username="maria",
        email="maria@example.com",
        name="Maria Silva"
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_user: User) -> Property:
    """Create a test property with two images."""
    return await PropertyFactory.create_property(
        property_repository,
        user_id=test_user.id,
        images=["https://cdn.example.com/p/1.jpg", "https://cdn.example.com/p/2.jpg"]
    )


# Helpers for API tests
async def register_user(client: AsyncClient, **overrides) -> dict:
    """Register a user through the API and return the user body."""
    response = await client.post("/users", json=UserFactory.create_user_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["user"]


async def create_property(client: AsyncClient, user_id: int, **overrides) -> dict:
    """Create a property through the API and return the property body."""
    response = await client.post(
        "/property",
        json=PropertyFactory.create_property_payload(user_id, **overrides)
    )
    assert response.status_code == 201, response.text
    return response.json()["property"]


def assert_error_response(response, status_code: int, code: str = None):
    """Assert the standard error envelope."""
    assert response.status_code == status_code, response.text
    body = response.json()
    assert "error" in body
    assert body["error"]["message"]
    assert "timestamp" in body["error"]
    if code is not None:
        assert body["error"]["code"] == code
    return body["error"]

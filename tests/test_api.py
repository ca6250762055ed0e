"""
Integration tests for the HTTP API.
Exercises every endpoint end to end against an in-memory database.
"""

import json
import pytest
from unittest.mock import patch
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError

from app.database import Database
from app.repositories.image import ImageRepository
from app.repositories.property import PropertyRepository
from app.repositories.user import UserRepository
from app.utils.auth import verify_password
from tests.conftest import (
    UserFactory,
    PropertyFactory,
    FakeIdentityVerifier,
    register_user,
    create_property,
    assert_error_response
)


class TestUserEndpoints:
    """Test registration and user lookup."""

    @pytest.mark.asyncio
    async def test_register_user(self, async_client: AsyncClient):
        payload = UserFactory.create_user_payload(username="maria", email="Maria@Example.com")

        response = await async_client.post("/users", json=payload)

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["id"] > 0
        assert user["username"] == "maria"
        assert user["email"] == "maria@example.com"
        assert user["picture"] is None
        assert "password" not in user
        assert "password_hash" not in user

    @pytest.mark.asyncio
    async def test_password_stored_as_digest(self, async_client: AsyncClient, database: Database):
        user = await register_user(async_client, username="maria", password="secret123")

        async with database.session() as session:
            stored = await UserRepository(session).get_by_id(user["id"])

        assert stored.password_hash != "secret123"
        assert verify_password("secret123", stored.password_hash) is True
        assert verify_password("secret1234", stored.password_hash) is False

    @pytest.mark.asyncio
    async def test_duplicate_username(self, async_client: AsyncClient):
        await register_user(async_client, username="maria")

        response = await async_client.post("/users", json=UserFactory.create_user_payload(username="maria"))

        error = assert_error_response(response, 409, "CONFLICT")
        assert "username" in error["message"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, async_client: AsyncClient):
        await register_user(async_client, email="maria@example.com")

        response = await async_client.post(
            "/users",
            json=UserFactory.create_user_payload(email="MARIA@example.com")
        )

        error = assert_error_response(response, 409, "CONFLICT")
        assert "email" in error["message"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,value", [
        ("username", "ab"),
        ("password", "123"),
        ("email", "maria-at-example"),
        ("name", ""),
    ])
    async def test_register_invalid_payload(self, async_client: AsyncClient, field, value):
        payload = UserFactory.create_user_payload()
        payload[field] = value

        response = await async_client.post("/users", json=payload)

        error = assert_error_response(response, 400, "VALIDATION_ERROR")
        assert error["message"].startswith(f"{field}:")
        # Submitted values are never echoed back
        assert all("input" not in detail for detail in error["details"])

    @pytest.mark.asyncio
    async def test_get_user(self, async_client: AsyncClient):
        user = await register_user(async_client, username="maria")

        response = await async_client.get(f"/users/{user['id']}")

        assert response.status_code == 200
        assert response.json() == {"user": user}

    @pytest.mark.asyncio
    async def test_get_user_not_found(self, async_client: AsyncClient):
        response = await async_client.get("/users/999")

        assert_error_response(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_get_user_non_numeric_id(self, async_client: AsyncClient):
        response = await async_client.get("/users/abc")

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", ["0", "-3", "99999999999999999999"])
    async def test_get_user_out_of_range_id(self, async_client: AsyncClient, user_id):
        response = await async_client.get(f"/users/{user_id}")

        assert_error_response(response, 400, "VALIDATION_ERROR")


class TestSessionEndpoints:
    """Test password and Google login."""

    @pytest.mark.asyncio
    async def test_login_success(self, async_client: AsyncClient):
        user = await register_user(async_client, username="maria", password="secret123")

        response = await async_client.post("/session", json={"username": "maria", "password": "secret123"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"] == user
        assert "$2b$" not in response.text

    @pytest.mark.asyncio
    async def test_login_failures_are_indistinguishable(self, async_client: AsyncClient):
        await register_user(async_client, username="maria", password="secret123")

        wrong_password = await async_client.post("/session", json={"username": "maria", "password": "wrong-pass"})
        unknown_user = await async_client.post("/session", json={"username": "nobody", "password": "secret123"})

        first = assert_error_response(wrong_password, 401, "UNAUTHORIZED")
        second = assert_error_response(unknown_user, 401, "UNAUTHORIZED")
        assert first["message"] == second["message"]

    @pytest.mark.asyncio
    async def test_login_invalid_payload(self, async_client: AsyncClient):
        response = await async_client.post("/session", json={"username": "maria"})

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_google_login_creates_then_reuses_user(
        self,
        async_client: AsyncClient,
        identity_verifier: FakeIdentityVerifier
    ):
        first = await async_client.post("/google-login", json={"id_token": "valid-google-token"})
        second = await async_client.post("/google-login", json={"id_token": "valid-google-token"})

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["message"] == "Login successful"
        assert first.json()["user"] == second.json()["user"]
        assert first.json()["user"]["email"] == "ana.google@example.com"
        assert first.json()["user"]["picture"] == "https://lh3.googleusercontent.com/a/ana"
        assert identity_verifier.calls == ["valid-google-token", "valid-google-token"]

    @pytest.mark.asyncio
    async def test_google_login_email_taken_as_username(self, async_client: AsyncClient):
        other = await register_user(async_client, username="ana.google@example.com", email="other@example.com")

        response = await async_client.post("/google-login", json={"id_token": "valid-google-token"})

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] != other["id"]
        assert user["email"] == "ana.google@example.com"
        assert user["username"] == "ana.google@example.com-1"

    @pytest.mark.asyncio
    async def test_google_login_rejected_token(self, async_client: AsyncClient):
        response = await async_client.post("/google-login", json={"id_token": "forged"})

        assert_error_response(response, 400, "INVALID_TOKEN")

    @pytest.mark.asyncio
    async def test_google_login_missing_token(self, async_client: AsyncClient):
        response = await async_client.post("/google-login", json={})

        assert_error_response(response, 400, "VALIDATION_ERROR")


class TestPropertyEndpoints:
    """Test property CRUD."""

    @pytest.mark.asyncio
    async def test_create_property(self, async_client: AsyncClient):
        user = await register_user(async_client)
        urls = ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]

        response = await async_client.post(
            "/property",
            json=PropertyFactory.create_property_payload(user["id"], images=urls)
        )

        assert response.status_code == 201
        prop = response.json()["property"]
        assert prop["userId"] == user["id"]
        assert prop["price"] == 350000.0
        assert sorted(image["url"] for image in prop["images"]) == sorted(urls)
        assert all(image["propertyId"] == prop["id"] for image in prop["images"])

    @pytest.mark.asyncio
    async def test_create_property_without_images(self, async_client: AsyncClient):
        user = await register_user(async_client)

        prop = await create_property(async_client, user["id"])

        assert prop["images"] == []

    @pytest.mark.asyncio
    async def test_create_property_unknown_user(self, async_client: AsyncClient, database: Database):
        response = await async_client.post(
            "/property",
            json=PropertyFactory.create_property_payload(999, images=["https://cdn.example.com/a.jpg"])
        )

        assert_error_response(response, 404, "NOT_FOUND")
        async with database.session() as session:
            assert await PropertyRepository(session).count() == 0
            assert await ImageRepository(session).count() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"price": -5},
        {"title": "   "},
        {"latitude": "north"},
        {"images": []},
        {"images": ["not a url"]},
    ])
    async def test_create_property_invalid(self, async_client: AsyncClient, overrides):
        user = await register_user(async_client)
        payload = PropertyFactory.create_property_payload(user["id"])
        payload.update(overrides)

        response = await async_client.post("/property", json=payload)

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["price", "latitude", "longitude"])
    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    async def test_create_property_non_finite_number(
        self,
        async_client: AsyncClient,
        database: Database,
        field,
        value
    ):
        user = await register_user(async_client)
        payload = PropertyFactory.create_property_payload(user["id"])
        payload[field] = value

        # NaN and Infinity literals are accepted by the JSON parser, so send them raw
        response = await async_client.post(
            "/property",
            content=json.dumps(payload),
            headers={"Content-Type": "application/json"}
        )

        error = assert_error_response(response, 400, "VALIDATION_ERROR")
        assert error["message"].startswith(f"{field}:")
        async with database.session() as session:
            assert await PropertyRepository(session).count() == 0

    @pytest.mark.asyncio
    async def test_create_property_store_rejection_is_server_error(self, async_client: AsyncClient):
        user = await register_user(async_client)
        failure = IntegrityError("INSERT INTO properties", {}, Exception("NOT NULL constraint failed: properties.latitude"))

        with patch.object(PropertyRepository, "create_with_images", side_effect=failure):
            response = await async_client.post("/property", json=PropertyFactory.create_property_payload(user["id"]))

        assert_error_response(response, 500, "DATABASE_ERROR")
        assert "NOT NULL" not in response.text

    @pytest.mark.asyncio
    async def test_create_property_missing_user_id(self, async_client: AsyncClient):
        payload = PropertyFactory.create_property_payload(1)
        del payload["userId"]

        response = await async_client.post("/property", json=payload)

        error = assert_error_response(response, 400, "VALIDATION_ERROR")
        assert error["message"].startswith("userId:")

    @pytest.mark.asyncio
    async def test_list_properties(self, async_client: AsyncClient):
        empty = await async_client.get("/property")
        assert empty.status_code == 200
        assert empty.json() == []

        user = await register_user(async_client)
        first = await create_property(async_client, user["id"], title="First")
        second = await create_property(async_client, user["id"], title="Second")

        response = await async_client.get("/property")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [first["id"], second["id"]]

    @pytest.mark.asyncio
    async def test_list_properties_by_owner(self, async_client: AsyncClient):
        owner = await register_user(async_client)
        other = await register_user(async_client)
        mine = await create_property(async_client, owner["id"])
        await create_property(async_client, other["id"])

        response = await async_client.get("/property/user", params={"userId": owner["id"]})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [mine["id"]]

    @pytest.mark.asyncio
    async def test_list_properties_by_owner_without_properties(self, async_client: AsyncClient):
        owner = await register_user(async_client)

        response = await async_client.get("/property/user", params={"userId": owner["id"]})

        assert_error_response(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_list_properties_by_owner_bad_query(self, async_client: AsyncClient):
        missing = await async_client.get("/property/user")
        non_numeric = await async_client.get("/property/user", params={"userId": "abc"})

        assert_error_response(missing, 400, "VALIDATION_ERROR")
        assert_error_response(non_numeric, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_get_property(self, async_client: AsyncClient):
        user = await register_user(async_client)
        prop = await create_property(async_client, user["id"], images=["https://cdn.example.com/a.jpg"])

        response = await async_client.get(f"/property/{prop['id']}")

        assert response.status_code == 200
        assert response.json() == {"property": prop}

    @pytest.mark.asyncio
    async def test_get_property_not_found(self, async_client: AsyncClient):
        assert_error_response(await async_client.get("/property/999"), 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_get_property_non_numeric_id(self, async_client: AsyncClient):
        assert_error_response(await async_client.get("/property/abc"), 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_out_of_range_ids(self, async_client: AsyncClient):
        huge = "99999999999999999999"
        user = await register_user(async_client)
        payload = PropertyFactory.create_property_payload(user["id"])

        responses = [
            await async_client.get(f"/property/{huge}"),
            await async_client.put(f"/property/{huge}", json=payload),
            await async_client.delete(f"/property/{huge}"),
            await async_client.get("/property/0"),
            await async_client.get("/property/user", params={"userId": huge}),
            await async_client.post("/property", json={**payload, "userId": int(huge)}),
        ]

        for response in responses:
            assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_image_set_round_trip(self, async_client: AsyncClient):
        """Test create with [a, b], then replace with [c]."""
        user = await register_user(async_client)
        a, b, c = (
            "https://cdn.example.com/a.jpg",
            "https://cdn.example.com/b.jpg",
            "https://cdn.example.com/c.jpg",
        )
        prop = await create_property(async_client, user["id"], images=[a, b])

        fetched = (await async_client.get(f"/property/{prop['id']}")).json()["property"]
        assert {image["url"] for image in fetched["images"]} == {a, b}

        response = await async_client.put(
            f"/property/{prop['id']}",
            json=PropertyFactory.create_property_payload(user["id"], title="Renamed", images=[c])
        )
        assert response.status_code == 200
        assert response.json()["property"]["title"] == "Renamed"

        fetched = (await async_client.get(f"/property/{prop['id']}")).json()["property"]
        assert [image["url"] for image in fetched["images"]] == [c]

    @pytest.mark.asyncio
    async def test_update_without_images_keeps_set(self, async_client: AsyncClient):
        user = await register_user(async_client)
        prop = await create_property(async_client, user["id"], images=["https://cdn.example.com/a.jpg"])

        response = await async_client.put(
            f"/property/{prop['id']}",
            json=PropertyFactory.create_property_payload(user["id"], price=1.5)
        )

        assert response.status_code == 200
        updated = response.json()["property"]
        assert updated["price"] == 1.5
        assert updated["images"] == prop["images"]

    @pytest.mark.asyncio
    async def test_update_with_empty_images_clears_set(self, async_client: AsyncClient):
        user = await register_user(async_client)
        prop = await create_property(async_client, user["id"], images=["https://cdn.example.com/a.jpg"])

        response = await async_client.put(
            f"/property/{prop['id']}",
            json=PropertyFactory.create_property_payload(user["id"], images=[])
        )

        assert response.status_code == 200
        assert response.json()["property"]["images"] == []

    @pytest.mark.asyncio
    async def test_update_does_not_change_owner(self, async_client: AsyncClient):
        owner = await register_user(async_client)
        other = await register_user(async_client)
        prop = await create_property(async_client, owner["id"])

        response = await async_client.put(
            f"/property/{prop['id']}",
            json=PropertyFactory.create_property_payload(other["id"])
        )

        assert response.status_code == 200
        assert response.json()["property"]["userId"] == owner["id"]

    @pytest.mark.asyncio
    async def test_interrupted_update_keeps_old_image_set(self, async_client: AsyncClient):
        user = await register_user(async_client)
        old_urls = ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]
        prop = await create_property(async_client, user["id"], images=old_urls)

        with patch.object(ImageRepository, "add_for_property", side_effect=RuntimeError("connection lost")):
            response = await async_client.put(
                f"/property/{prop['id']}",
                json=PropertyFactory.create_property_payload(
                    user["id"],
                    title="Should not stick",
                    images=["https://cdn.example.com/c.jpg"]
                )
            )

        error = assert_error_response(response, 500, "INTERNAL_SERVER_ERROR")
        assert "connection lost" not in error["message"]

        fetched = (await async_client.get(f"/property/{prop['id']}")).json()["property"]
        assert fetched["title"] == prop["title"]
        assert sorted(image["url"] for image in fetched["images"]) == sorted(old_urls)

    @pytest.mark.asyncio
    async def test_update_not_found(self, async_client: AsyncClient):
        user = await register_user(async_client)

        response = await async_client.put("/property/999", json=PropertyFactory.create_property_payload(user["id"]))

        assert_error_response(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_update_invalid_payload(self, async_client: AsyncClient):
        user = await register_user(async_client)
        prop = await create_property(async_client, user["id"])

        response = await async_client.put(
            f"/property/{prop['id']}",
            json=PropertyFactory.create_property_payload(user["id"], price=-1)
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_delete_property_removes_images(self, async_client: AsyncClient, database: Database):
        user = await register_user(async_client)
        prop = await create_property(
            async_client,
            user["id"],
            images=["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]
        )
        image_ids = [image["id"] for image in prop["images"]]

        response = await async_client.delete(f"/property/{prop['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Property deleted"}
        assert_error_response(await async_client.get(f"/property/{prop['id']}"), 404, "NOT_FOUND")

        async with database.session() as session:
            image_repo = ImageRepository(session)
            for image_id in image_ids:
                assert await image_repo.get_by_id(image_id) is None

    @pytest.mark.asyncio
    async def test_delete_not_found(self, async_client: AsyncClient):
        assert_error_response(await async_client.delete("/property/999"), 404, "NOT_FOUND")


class TestHealthEndpoints:
    """Test service info and health checks."""

    @pytest.mark.asyncio
    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert response.status_code == 200
        assert response.json()["message"].startswith("Welcome to")

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_health_database_down(self, async_client: AsyncClient):
        with patch.object(Database, "ping", return_value=False):
            response = await async_client.get("/health")

        assert_error_response(response, 503, "SERVICE_UNAVAILABLE")

    @pytest.mark.asyncio
    async def test_request_id_header(self, async_client: AsyncClient):
        response = await async_client.get("/users/999")

        assert response.headers["X-Request-ID"] == response.json()["error"]["request_id"]
        assert "X-Processing-Time" in response.headers

    @pytest.mark.asyncio
    async def test_cors_allows_any_origin_without_credentials(self, async_client: AsyncClient):
        response = await async_client.get("/", headers={"Origin": "https://app.example.com"})

        assert response.headers["access-control-allow-origin"] == "*"
        assert "access-control-allow-credentials" not in response.headers

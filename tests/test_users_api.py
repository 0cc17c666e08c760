"""Tests for user record and picture endpoints"""

import uuid
from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError
from fastapi import FastAPI, status
from httpx import AsyncClient

from tradehub.api.dependencies import get_storage
from tradehub.config import Settings
from tradehub.models import User
from tradehub.services.s3_service import S3Service

from helpers import PNG_BYTES, FakeStorage

USERS = "/api/v1/users"


@pytest.fixture
def mock_s3_client():
    """Mock S3 client"""
    with patch("boto3.client") as mock_client:
        mock_instance = Mock()
        mock_client.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def real_storage(app: FastAPI, test_settings: Settings, mock_s3_client) -> S3Service:
    """Route uploads through S3Service with a mocked boto3 client"""
    storage = S3Service(test_settings)
    app.dependency_overrides[get_storage] = lambda: storage
    return storage


@pytest.mark.asyncio
class TestSearchUsers:
    """Test name search endpoint"""

    async def test_search_users(self, async_client: AsyncClient, homeowner_user: User, professional_user: User):
        response = await async_client.get(f"{USERS}/search", params={"query": "holly"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [u["id"] for u in data] == [str(homeowner_user.id)]
        assert data[0]["name"] == "Holly Owner"
        assert "password" not in data[0]
        assert "passwordHash" not in data[0]

    async def test_search_no_match(self, async_client: AsyncClient, homeowner_user: User):
        response = await async_client.get(f"{USERS}/search", params={"query": "zzz"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    async def test_search_without_query(self, async_client: AsyncClient):
        response = await async_client.get(f"{USERS}/search")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Search query is required"


@pytest.mark.asyncio
class TestGetUser:
    """Test user lookup endpoint"""

    async def test_get_user(self, async_client: AsyncClient, homeowner_user: User, auth_headers):
        response = await async_client.get(f"{USERS}/user/{homeowner_user.id}", headers=auth_headers(homeowner_user))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["email"] == homeowner_user.email
        assert data["coverPictureUrl"] == "https://example.com/cover.png"
        assert "passwordHash" not in data

    async def test_get_user_requires_token(self, async_client: AsyncClient, homeowner_user: User):
        response = await async_client.get(f"{USERS}/user/{homeowner_user.id}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_get_unknown_user(self, async_client: AsyncClient, homeowner_user: User, auth_headers):
        response = await async_client.get(f"{USERS}/user/{uuid.uuid4()}", headers=auth_headers(homeowner_user))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_get_user_invalid_id(self, async_client: AsyncClient, homeowner_user: User, auth_headers):
        response = await async_client.get(f"{USERS}/user/not-a-uuid", headers=auth_headers(homeowner_user))

        assert response.status_code == 422


@pytest.mark.asyncio
class TestPictures:
    """Test picture read and upload endpoints"""

    async def test_get_profile_picture(self, async_client: AsyncClient, homeowner_user: User):
        response = await async_client.get(f"{USERS}/{homeowner_user.id}/profile-picture")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["url"] == "https://example.com/avatar.jpg"

    async def test_get_cover_picture_unknown_user(self, async_client: AsyncClient):
        response = await async_client.get(f"{USERS}/{uuid.uuid4()}/cover-picture")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_upload_profile_picture(
        self, async_client: AsyncClient, homeowner_user: User, fake_storage: FakeStorage
    ):
        response = await async_client.post(
            f"{USERS}/{homeowner_user.id}/profile-picture",
            files={"profilePicture": ("me.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Profile picture uploaded successfully"
        assert data["url"].endswith("profile-pictures/1-me.png")

        picture = await async_client.get(f"{USERS}/{homeowner_user.id}/profile-picture")
        assert picture.json()["url"] == data["url"]

    async def test_upload_cover_picture(self, async_client: AsyncClient, homeowner_user: User):
        response = await async_client.post(
            f"{USERS}/{homeowner_user.id}/cover-picture",
            files={"coverPicture": ("wide.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == status.HTTP_200_OK
        assert "cover-pictures/" in response.json()["url"]

    async def test_upload_without_file(self, async_client: AsyncClient, homeowner_user: User):
        response = await async_client.post(
            f"{USERS}/{homeowner_user.id}/cover-picture",
            data={"unrelated": "field"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "No cover picture uploaded"

    async def test_upload_unknown_user(self, async_client: AsyncClient):
        response = await async_client.post(
            f"{USERS}/{uuid.uuid4()}/profile-picture",
            files={"profilePicture": ("me.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_upload_without_storage_configured(
        self, app: FastAPI, async_client: AsyncClient, homeowner_user: User
    ):
        app.dependency_overrides[get_storage] = lambda: None

        response = await async_client.post(
            f"{USERS}/{homeowner_user.id}/profile-picture",
            files={"profilePicture": ("me.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data["detail"] == "File storage is unavailable"
        assert data["type"].endswith("/internal_server_error")


@pytest.mark.asyncio
class TestUploadsThroughS3:
    """Test upload validation and storage failures surfaced by S3Service"""

    async def test_upload_stored_in_s3(
        self, async_client: AsyncClient, homeowner_user: User, real_storage: S3Service, mock_s3_client
    ):
        response = await async_client.post(
            f"{USERS}/{homeowner_user.id}/profile-picture",
            files={"profilePicture": ("me.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["url"].startswith("https://test-bucket.s3.us-east-1.amazonaws.com/profile-pictures/")
        mock_s3_client.put_object.assert_called_once()

    async def test_invalid_file_type(
        self, async_client: AsyncClient, homeowner_user: User, real_storage: S3Service, mock_s3_client
    ):
        response = await async_client.post(
            f"{USERS}/{homeowner_user.id}/profile-picture",
            files={"profilePicture": ("anim.gif", b"GIF89a....", "image/gif")},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["type"].endswith("/invalid_file_type")
        mock_s3_client.put_object.assert_not_called()

    async def test_file_too_large(self, async_client: AsyncClient, homeowner_user: User, real_storage: S3Service):
        response = await async_client.post(
            f"{USERS}/{homeowner_user.id}/profile-picture",
            files={"profilePicture": ("big.png", b"x" * (1024 * 1024 + 1), "image/png")},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["type"].endswith("/file_too_large")

    async def test_storage_failure_is_generic_500(
        self, async_client: AsyncClient, homeowner_user: User, real_storage: S3Service, mock_s3_client
    ):
        mock_s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access denied"}},
            "put_object",
        )

        response = await async_client.post(
            f"{USERS}/{homeowner_user.id}/profile-picture",
            files={"profilePicture": ("me.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data["detail"] == "File storage is unavailable"
        assert "AccessDenied" not in data["detail"]

        picture = await async_client.get(f"{USERS}/{homeowner_user.id}/profile-picture")
        assert picture.json()["url"] == "https://example.com/avatar.jpg"

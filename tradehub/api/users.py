"""User record and picture endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile

from tradehub.api.auth import UNAUTHORIZED_RESPONSES
from tradehub.api.dependencies import (
    get_account_service,
    get_bearer_identity,
    get_upload_account_service,
)
from tradehub.api.errors import ProblemDetail
from tradehub.schemas.auth import UserResponse
from tradehub.schemas.profile import PictureResponse
from tradehub.services.account_service import AccountService
from tradehub.services.auth_service import Identity
from tradehub.services.s3_service import FileUpload

router = APIRouter(prefix="/api/v1/users", tags=["Users"])

NOT_FOUND_RESPONSES = {404: {"model": ProblemDetail}}


async def read_upload(upload: Optional[UploadFile]) -> Optional[FileUpload]:
    """Read a multipart file into memory; an absent or nameless part counts as no file"""
    if upload is None or not upload.filename:
        return None
    body = await upload.read()
    return FileUpload(filename=upload.filename, content_type=upload.content_type, body=body)


@router.get("/search", response_model=List[UserResponse], responses={400: {"model": ProblemDetail}})
async def search_users(
    query: str = Query("", description="Text matched against display names"),
    accounts: AccountService = Depends(get_account_service),
):
    """Users whose name contains the query, ignoring case"""
    users = await accounts.search_users(query)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/user/{user_id}", response_model=UserResponse, responses=UNAUTHORIZED_RESPONSES)
async def get_user(
    user_id: UUID,
    identity: Identity = Depends(get_bearer_identity),
    accounts: AccountService = Depends(get_account_service),
):
    """Get a user record by id"""
    user = await accounts.get_user(user_id)
    return UserResponse.model_validate(user)


@router.get("/{user_id}/profile-picture", response_model=PictureResponse, responses=NOT_FOUND_RESPONSES)
async def get_profile_picture(
    user_id: UUID,
    accounts: AccountService = Depends(get_account_service),
):
    user = await accounts.get_user(user_id)
    return PictureResponse(url=user.profile_picture_url)


@router.post("/{user_id}/profile-picture", response_model=PictureResponse, responses=NOT_FOUND_RESPONSES)
async def upload_profile_picture(
    user_id: UUID,
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    accounts: AccountService = Depends(get_upload_account_service),
):
    """Upload a new profile picture (multipart field ``profilePicture``)"""
    user = await accounts.upload_profile_picture(user_id, await read_upload(profile_picture))
    return PictureResponse(
        message="Profile picture uploaded successfully",
        url=user.profile_picture_url,
    )


@router.get("/{user_id}/cover-picture", response_model=PictureResponse, responses=NOT_FOUND_RESPONSES)
async def get_cover_picture(
    user_id: UUID,
    accounts: AccountService = Depends(get_account_service),
):
    user = await accounts.get_user(user_id)
    return PictureResponse(url=user.cover_picture_url)


@router.post("/{user_id}/cover-picture", response_model=PictureResponse, responses=NOT_FOUND_RESPONSES)
async def upload_cover_picture(
    user_id: UUID,
    cover_picture: Optional[UploadFile] = File(None, alias="coverPicture"),
    accounts: AccountService = Depends(get_upload_account_service),
):
    """Upload a new cover picture (multipart field ``coverPicture``)"""
    user = await accounts.upload_cover_picture(user_id, await read_upload(cover_picture))
    return PictureResponse(
        message="Cover picture uploaded successfully",
        url=user.cover_picture_url,
    )

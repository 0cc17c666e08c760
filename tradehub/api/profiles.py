"""Professional and supplier profile endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Path, Response, UploadFile, status

from tradehub.api.auth import UNAUTHORIZED_RESPONSES, set_auth_cookie
from tradehub.api.dependencies import (
    get_account_service,
    get_bearer_identity,
    get_settings,
    get_upload_account_service,
)
from tradehub.api.errors import ProblemDetail
from tradehub.api.users import read_upload
from tradehub.config import Settings
from tradehub.schemas.auth import AuthResponse, TokenUser
from tradehub.schemas.common import MessageResponse
from tradehub.schemas.profile import (
    PortfolioResponse,
    ProfessionalProfileCreate,
    ProfessionalResponse,
    ProfileFieldUpdate,
    SupplierProfileCreate,
    SupplierProfileResponse,
    SupplierResponse,
)
from tradehub.services.account_service import AccountService
from tradehub.services.auth_service import Identity

router = APIRouter(prefix="/api/v1/users", tags=["Profiles"])

SUBMISSION_RESPONSES = {404: {"model": ProblemDetail}, 409: {"model": ProblemDetail}}


@router.post(
    "/professional/profile",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses=SUBMISSION_RESPONSES,
)
async def submit_professional_profile(
    body: ProfessionalProfileCreate,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
):
    """
    Create the professional profile of the account owning ``email``.

    A fresh token is returned (and set as the auth cookie).
    """
    data = body.model_dump(exclude={"email"})
    session = await accounts.submit_professional_profile(body.email, data)
    set_auth_cookie(response, session.token, settings)
    return AuthResponse(user=TokenUser.model_validate(session.user), token=session.token)


@router.post(
    "/supplier/profile",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses=SUBMISSION_RESPONSES,
)
async def submit_supplier_profile(
    body: SupplierProfileCreate,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
):
    """Create the supplier profile of the account owning ``email``"""
    data = body.model_dump(exclude={"email"})
    session = await accounts.submit_supplier_profile(body.email, data)
    set_auth_cookie(response, session.token, settings)
    return AuthResponse(user=TokenUser.model_validate(session.user), token=session.token)


@router.get("/professional/{user_id}", response_model=ProfessionalResponse, responses=UNAUTHORIZED_RESPONSES)
async def get_professional(
    user_id: UUID,
    identity: Identity = Depends(get_bearer_identity),
    accounts: AccountService = Depends(get_account_service),
):
    professional = await accounts.get_professional(user_id)
    return ProfessionalResponse.model_validate(professional)


@router.get("/supplier/{user_id}", response_model=SupplierResponse, responses=UNAUTHORIZED_RESPONSES)
async def get_supplier(
    user_id: UUID,
    identity: Identity = Depends(get_bearer_identity),
    accounts: AccountService = Depends(get_account_service),
):
    supplier = await accounts.get_supplier(user_id)
    return SupplierResponse.model_validate(supplier)


@router.get(
    "/supplier-profile/{user_id}",
    response_model=SupplierProfileResponse,
    responses={404: {"model": ProblemDetail}},
)
async def get_supplier_profile(
    user_id: UUID,
    accounts: AccountService = Depends(get_account_service),
):
    """Public supplier profile with the owner's name, email and pictures"""
    supplier = await accounts.get_supplier_profile(user_id)
    return SupplierProfileResponse.model_validate(supplier)


@router.post(
    "/professional-profile/update-portfolio/{user_id}",
    response_model=PortfolioResponse,
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)
async def update_portfolio(
    user_id: UUID,
    portfolio: Optional[List[UploadFile]] = File(None),
    accounts: AccountService = Depends(get_upload_account_service),
):
    """
    Append uploaded media to a professional's portfolio.

    Files are appended in the order they were sent (multipart field ``portfolio``).
    """
    parts = [part for part in portfolio or [] if part.filename]
    accounts.check_portfolio_batch(len(parts))

    uploads = [await read_upload(part) for part in parts]

    entries = await accounts.update_portfolio(user_id, uploads)
    return PortfolioResponse(message="Portfolio uploaded successfully", portfolio=entries)


@router.delete(
    "/professional-profile/delete-portfolio/{user_id}/{index}",
    response_model=PortfolioResponse,
    responses={404: {"model": ProblemDetail}},
)
async def delete_portfolio_entry(
    user_id: UUID,
    index: int = Path(..., ge=0, description="Zero-based position of the entry"),
    accounts: AccountService = Depends(get_account_service),
):
    """Remove one portfolio entry; later entries shift down"""
    entries = await accounts.delete_portfolio_entry(user_id, index)
    return PortfolioResponse(message="Portfolio entry deleted successfully", portfolio=entries)


@router.put(
    "/professional-profile/update/{field}/{user_id}",
    response_model=MessageResponse,
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)
async def update_profile_field(
    field: str,
    user_id: UUID,
    body: ProfileFieldUpdate,
    accounts: AccountService = Depends(get_account_service),
):
    """Update one of name, serviceType, bio or certifications"""
    await accounts.update_profile_field(user_id, field, body.data_to_send)
    return MessageResponse(message="Profile updated successfully")

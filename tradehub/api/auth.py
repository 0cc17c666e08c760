"""Authentication API endpoints"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import EmailStr

from tradehub.api.dependencies import (
    get_account_service,
    get_bearer_identity,
    get_cookie_claims,
    get_profile_service,
    get_settings,
)
from tradehub.api.errors import ProblemDetail
from tradehub.config import Settings
from tradehub.schemas.auth import (
    AuthResponse,
    AvailabilityResponse,
    IdentityView,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    TokenUser,
    UpdateUserTypeRequest,
    UserResponse,
)
from tradehub.schemas.common import MessageResponse
from tradehub.schemas.profile import ProfessionalResponse, SupplierResponse
from tradehub.services.account_service import AccountService
from tradehub.services.auth_service import Identity
from tradehub.services.errors import BadRequestError
from tradehub.services.profile_service import ProfileService, ResolvedIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["Authentication"])

UNAUTHORIZED_RESPONSES: Dict[int, Dict[str, Any]] = {401: {"model": ProblemDetail}}


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Mirror a freshly issued token into the HTTP-only auth cookie"""
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.jwt_expiration_hours * 3600,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
    )


def identity_view(resolved: ResolvedIdentity) -> IdentityView:
    """Public view of a resolved identity (no password field exists on it)"""
    base = UserResponse.model_validate(resolved.user)
    return IdentityView(
        **base.model_dump(),
        profile_complete=resolved.profile_complete,
        professional=(
            ProfessionalResponse.model_validate(resolved.professional)
            if resolved.professional else None
        ),
        supplier=(
            SupplierResponse.model_validate(resolved.supplier)
            if resolved.supplier else None
        ),
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={409: {"model": ProblemDetail}},
)
async def register(
    body: RegisterRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
):
    """
    Register a new account.

    Homeowners are signed in immediately and receive a token (also set as the
    auth cookie). Professionals and suppliers continue with profile submission.
    """
    user, token = await accounts.register(body.user_type, body.name, body.email, body.password)

    if token is None:
        return RegisterResponse(message="User registered successfully")

    set_auth_cookie(response, token, settings)
    return RegisterResponse(
        message="User registered successfully",
        user=TokenUser.model_validate(user),
        token=token,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ProblemDetail}, 401: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)
async def login(
    credentials: LoginRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
):
    """
    Login with email and password.

    Accounts created through Google cannot use password login.
    """
    session = await accounts.login(credentials.email, credentials.password)
    set_auth_cookie(response, session.token, settings)
    return AuthResponse(user=TokenUser.model_validate(session.user), token=session.token)


@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    """
    Logout by clearing the auth cookie.

    Tokens are not revoked server-side; a bearer token stays valid until it expires.
    """
    response.delete_cookie(key=settings.auth_cookie_name, httponly=True)
    return MessageResponse(message="Logged out successfully")


@router.post("/update-user-type", response_model=UserResponse, responses=UNAUTHORIZED_RESPONSES)
async def update_user_type(
    body: UpdateUserTypeRequest,
    identity: Identity = Depends(get_bearer_identity),
    accounts: AccountService = Depends(get_account_service),
):
    """Assign a role to the authenticated user"""
    user = await accounts.update_user_type(identity, body.user_type)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=MeResponse, responses=UNAUTHORIZED_RESPONSES)
async def get_current_user_info(
    identity: Identity = Depends(get_bearer_identity),
    profiles: ProfileService = Depends(get_profile_service),
):
    """
    Get the authenticated user with its role extension.

    ``profileComplete`` is true only when the professional or supplier
    profile required by the user's type exists.
    """
    resolved = await profiles.resolve_identity(identity)
    return MeResponse(user=identity_view(resolved))


@router.get("/session", response_model=SessionResponse, responses=UNAUTHORIZED_RESPONSES)
async def get_session(claims: Dict[str, Any] = Depends(get_cookie_claims)):
    """Claims of the auth cookie token"""
    return SessionResponse(user=claims)


@router.get("/check-username", response_model=AvailabilityResponse)
async def check_username(
    username: Optional[str] = Query(None),
    accounts: AccountService = Depends(get_account_service),
):
    if not username:
        raise BadRequestError("Username is required")
    available, message = await accounts.check_username_available(username)
    return AvailabilityResponse(available=available, message=message)


@router.get("/check-email", response_model=AvailabilityResponse)
async def check_email(
    email: Optional[EmailStr] = Query(None),
    accounts: AccountService = Depends(get_account_service),
):
    """Availability of an address, normalized the same way registration stores it"""
    if not email:
        raise BadRequestError("Email is required")
    available, message = await accounts.check_email_available(email)
    return AvailabilityResponse(available=available, message=message)

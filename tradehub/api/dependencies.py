"""API dependencies for settings, services and token authentication"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradehub.config import Settings
from tradehub.database import get_db
from tradehub.services.account_service import AccountService
from tradehub.services.auth_service import (
    Identity,
    PasswordHasher,
    TokenService,
    identity_from_claims,
)
from tradehub.services.errors import TokenExpiredError, TokenInvalidError, UnauthorizedError
from tradehub.services.profile_service import ProfileService
from tradehub.services.s3_service import S3Service
from tradehub.services.verification_service import VerificationLedger

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_storage(request: Request) -> S3Service:
    """S3 storage, created on first use and shared by later requests"""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = S3Service(request.app.state.settings)
        request.app.state.storage = storage
    return storage


def get_account_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AccountService:
    return AccountService(db, settings, tokens, hasher)


def get_upload_account_service(
    accounts: AccountService = Depends(get_account_service),
    storage: S3Service = Depends(get_storage),
) -> AccountService:
    """Account service with object storage attached, for upload routes"""
    accounts.storage = storage
    return accounts


def get_profile_service(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


def get_verification_ledger(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> VerificationLedger:
    return VerificationLedger(
        db,
        ttl=timedelta(minutes=settings.verification_code_ttl_minutes),
        single_use=settings.verification_single_use,
    )


def _verify(tokens: TokenService, token: str, transport: str) -> Dict[str, Any]:
    try:
        return tokens.verify(token)
    except TokenExpiredError:
        logger.info(f"Rejected expired token from {transport}")
        raise
    except TokenInvalidError:
        logger.warning(f"Rejected invalid token from {transport}")
        raise


async def get_bearer_claims(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """
    Verified claims of the ``Authorization: Bearer`` token.

    Raises:
        UnauthorizedError: If the header is missing or malformed
        TokenExpiredError: If the token has expired
        TokenInvalidError: If the token cannot be verified
    """
    if not authorization:
        raise UnauthorizedError("Authorization header missing")

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Invalid authorization header format")

    return _verify(tokens, parts[1], "bearer header")


async def get_bearer_identity(
    claims: Dict[str, Any] = Depends(get_bearer_claims),
) -> Identity:
    return identity_from_claims(claims)


async def get_cookie_claims(
    request: Request,
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Verified claims of the token stored in the auth cookie"""
    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise UnauthorizedError("Authentication cookie missing")

    return _verify(tokens, token, "cookie")

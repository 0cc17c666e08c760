"""Email verification endpoints"""

import logging

from fastapi import APIRouter, Depends, status

from tradehub.api.dependencies import get_settings, get_verification_ledger
from tradehub.api.errors import ProblemDetail
from tradehub.config import Settings
from tradehub.schemas.verification import (
    SendVerificationRequest,
    SendVerificationResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from tradehub.services.verification_service import VerificationLedger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["Verification"])


@router.post(
    "/send-verification",
    response_model=SendVerificationResponse,
    status_code=status.HTTP_200_OK,
)
async def send_verification(
    body: SendVerificationRequest,
    ledger: VerificationLedger = Depends(get_verification_ledger),
    settings: Settings = Depends(get_settings),
):
    """
    Issue a 6-digit verification code for an email.

    Requesting again replaces the previous code and restarts its lifetime.
    """
    issued = await ledger.issue(body.email)

    # No mail transport is wired up; the code only reaches local logs
    if settings.environment == "development":
        logger.info(f"Verification code for {issued.email}: {issued.code}")

    return SendVerificationResponse(
        message="Verification code sent",
        expires_at=issued.expires_at,
    )


@router.post(
    "/verify-code",
    response_model=VerifyCodeResponse,
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)
async def verify_code(
    body: VerifyCodeRequest,
    ledger: VerificationLedger = Depends(get_verification_ledger),
):
    """Check a submitted verification code; expiry is checked only after the code matches"""
    await ledger.verify(body.email, body.verification_code)
    return VerifyCodeResponse(success=True, message="Email verified successfully")

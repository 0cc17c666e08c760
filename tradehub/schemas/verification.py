"""Email verification schemas"""

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field

from tradehub.schemas.common import CamelModel


class SendVerificationRequest(CamelModel):
    """Request a verification code for an email"""
    email: EmailStr = Field(..., description="Address the code is sent to")


class SendVerificationResponse(CamelModel):
    """The code itself is never returned"""
    message: str
    expires_at: datetime = Field(..., description="When the issued code stops being accepted")


class VerifyCodeRequest(CamelModel):
    """Submit a verification code"""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    email: EmailStr = Field(..., description="Address the code was issued for")
    verification_code: str = Field(..., min_length=1, max_length=64, description="6-digit code")


class VerifyCodeResponse(CamelModel):
    success: bool
    message: str

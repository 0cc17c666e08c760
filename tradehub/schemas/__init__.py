"""API schemas package"""

from .common import CamelModel, MessageResponse
from .profile import (
    ProfessionalProfileCreate,
    SupplierProfileCreate,
    ProfessionalResponse,
    SupplierResponse,
    SupplierProfileResponse,
    PortfolioResponse,
    ProfileFieldUpdate,
    PictureResponse,
)
from .auth import (
    RegisterRequest,
    LoginRequest,
    TokenUser,
    AuthResponse,
    RegisterResponse,
    UpdateUserTypeRequest,
    AvailabilityResponse,
    UserResponse,
    IdentityView,
    MeResponse,
    SessionResponse,
)
from .verification import (
    SendVerificationRequest,
    SendVerificationResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "ProfessionalProfileCreate",
    "SupplierProfileCreate",
    "ProfessionalResponse",
    "SupplierResponse",
    "SupplierProfileResponse",
    "PortfolioResponse",
    "ProfileFieldUpdate",
    "PictureResponse",
    "RegisterRequest",
    "LoginRequest",
    "TokenUser",
    "AuthResponse",
    "RegisterResponse",
    "UpdateUserTypeRequest",
    "AvailabilityResponse",
    "UserResponse",
    "IdentityView",
    "MeResponse",
    "SessionResponse",
    "SendVerificationRequest",
    "SendVerificationResponse",
    "VerifyCodeRequest",
    "VerifyCodeResponse",
]

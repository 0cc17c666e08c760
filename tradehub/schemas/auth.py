"""Account, login and identity schemas"""

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from tradehub.models import UserType
from tradehub.schemas.common import CamelModel
from tradehub.schemas.profile import ProfessionalResponse, SupplierResponse


class RegisterRequest(CamelModel):
    """Registration request schema"""
    user_type: UserType = Field(..., description="homeowner, professional or supplier")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class LoginRequest(CamelModel):
    """Login request schema"""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class TokenUser(CamelModel):
    """User fields returned alongside a token"""
    id: UUID = Field(..., description="User UUID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User email")
    profile_picture_url: Optional[str] = Field(None, description="Profile picture URL")


class AuthResponse(CamelModel):
    """Token response schema"""
    user: TokenUser = Field(..., description="User information")
    token: str = Field(..., description="Signed bearer token")


class RegisterResponse(CamelModel):
    """Registration result; only homeowners receive a token immediately"""
    message: str = Field(..., description="Human-readable result")
    user: Optional[TokenUser] = Field(None, description="User information (homeowners)")
    token: Optional[str] = Field(None, description="Signed bearer token (homeowners)")


class UpdateUserTypeRequest(CamelModel):
    """Role assignment request"""
    user_type: UserType = Field(..., description="New role")


class AvailabilityResponse(CamelModel):
    """Result of a username or email availability check"""
    available: bool
    message: str


class UserResponse(CamelModel):
    """Public user record; the password hash is never part of it"""
    id: UUID
    user_type: str
    name: str
    username: str
    email: str
    profile_picture_url: Optional[str] = None
    cover_picture_url: Optional[str] = None
    is_verified: bool


class IdentityView(UserResponse):
    """User joined with its role extension"""
    profile_complete: bool = Field(..., description="True when the role extension exists")
    professional: Optional[ProfessionalResponse] = None
    supplier: Optional[SupplierResponse] = None


class MeResponse(CamelModel):
    """Response of GET /me"""
    user: IdentityView


class SessionResponse(CamelModel):
    """Claims of the cookie token"""
    user: Dict[str, Any]

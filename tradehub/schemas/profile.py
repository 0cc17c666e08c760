"""Professional and supplier profile schemas"""

from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from tradehub.schemas.common import CamelModel


class ProfessionalProfileCreate(CamelModel):
    """Professional profile submission"""
    email: EmailStr = Field(..., description="Email of the owning account")
    service_type: str = Field(..., min_length=1, max_length=255, description="Trade or service offered")
    years_experience: Optional[int] = Field(None, ge=0, description="Years in the trade")
    bio: Optional[str] = Field(None, description="Short biography")
    certifications: Optional[str] = Field(None, description="Licences and certifications")
    portfolio_link: Optional[str] = Field(None, description="External portfolio URL")


class SupplierProfileCreate(CamelModel):
    """Supplier profile submission"""
    email: EmailStr = Field(..., description="Email of the owning account")
    business_name: str = Field(..., min_length=1, max_length=255, description="Business name")
    contact_info: Optional[str] = Field(None, description="Contact details")
    additional_details: Optional[str] = Field(None, description="Anything else customers should know")


class ProfessionalResponse(CamelModel):
    """Professional profile response schema"""
    id: UUID
    user_id: UUID
    service_type: Optional[str] = None
    years_experience: Optional[int] = None
    bio: Optional[str] = None
    certifications: Optional[str] = None
    portfolio_link: Optional[str] = None
    portfolio: List[str] = Field(default_factory=list, description="Media URLs in display order")


class SupplierResponse(CamelModel):
    """Supplier profile response schema"""
    id: UUID
    user_id: UUID
    business_name: Optional[str] = None
    contact_info: Optional[str] = None
    additional_details: Optional[str] = None


class SupplierOwner(CamelModel):
    """Owning user fields shown on a public supplier profile"""
    name: str
    email: str
    profile_picture_url: Optional[str] = None
    cover_picture_url: Optional[str] = None


class SupplierProfileResponse(SupplierResponse):
    """Public supplier profile"""
    user: SupplierOwner


class PortfolioResponse(CamelModel):
    """Portfolio after a mutation"""
    message: str
    portfolio: List[str]


class ProfileFieldUpdate(CamelModel):
    """Single-field profile update"""
    data_to_send: str = Field(..., description="New value of the field")


class PictureResponse(CamelModel):
    """Stored picture URL"""
    message: Optional[str] = None
    url: Optional[str] = Field(None, description="Public URL of the picture")

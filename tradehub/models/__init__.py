"""Database models package"""

from tradehub.models.base import BaseModel
from tradehub.models.user import User, UserType
from tradehub.models.professional import Professional
from tradehub.models.supplier import Supplier
from tradehub.models.email_verification import EmailVerification

# Export all models
__all__ = [
    "BaseModel",
    "User",
    "UserType",
    "Professional",
    "Supplier",
    "EmailVerification",
]

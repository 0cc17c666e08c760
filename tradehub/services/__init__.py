"""Services package"""

from .account_service import AccountService
from .auth_service import PasswordHasher, TokenService
from .profile_service import ProfileService
from .s3_service import S3Service
from .user_store import CredentialStore
from .verification_service import VerificationLedger

__all__ = [
    "AccountService",
    "PasswordHasher",
    "TokenService",
    "ProfileService",
    "S3Service",
    "CredentialStore",
    "VerificationLedger",
]

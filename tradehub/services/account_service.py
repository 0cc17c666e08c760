"""Account orchestration: registration, login, role assignment and profile submission"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from tradehub.config import Settings
from tradehub.models import Professional, Supplier, User, UserType
from tradehub.services.auth_service import Identity, PasswordHasher, TokenService
from tradehub.services.errors import (
    BadRequestError,
    ConflictError,
    FederatedAccountError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
)
from tradehub.services.profile_service import ProfileService
from tradehub.services.s3_service import FileUpload, S3Service
from tradehub.services.user_store import CredentialStore, derive_username

logger = logging.getLogger(__name__)

PORTFOLIO_FOLDER = "portfolio"
PROFILE_PICTURE_FOLDER = "profile-pictures"
COVER_PICTURE_FOLDER = "cover-pictures"


@dataclass
class IssuedSession:
    """A user together with a freshly signed token"""
    user: User
    token: str


def token_claims(user: User) -> Dict[str, Any]:
    """Identity claim plus the display fields clients read from the token"""
    claims = {
        "sub": str(user.id),
        "name": user.name,
        "email": user.email,
        "profilePictureUrl": user.profile_picture_url,
    }
    if user.google_id:
        claims["google_id"] = user.google_id
    return claims


class AccountService:
    """
    Route-facing orchestration over the credential store, token service,
    profile resolver and object storage.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        tokens: TokenService,
        hasher: Optional[PasswordHasher] = None,
        storage: Optional[S3Service] = None,
    ):
        self.db = db
        self.settings = settings
        self.tokens = tokens
        self.hasher = hasher or PasswordHasher(rounds=settings.bcrypt_rounds)
        self.storage = storage
        self.users = CredentialStore(db)
        self.profiles = ProfileService(db, self.users)

    def _issue_session(self, user: User) -> IssuedSession:
        return IssuedSession(user=user, token=self.tokens.issue(token_claims(user)))

    def _require_storage(self) -> S3Service:
        if self.storage is None:
            logger.error("Upload attempted without object storage configured")
            raise InternalError("File storage is unavailable")
        return self.storage

    async def register(
        self, user_type: UserType, name: str, email: str, password: str
    ) -> Tuple[User, Optional[str]]:
        """
        Register a new account.

        Args:
            user_type: Role chosen at sign-up
            name: Display name (username is derived from it)
            email: Login email
            password: Plain text password

        Returns:
            (user, token) where token is set only for homeowners

        Raises:
            ConflictError: If the email is already registered
        """
        if await self.users.find_by_email(email):
            logger.warning(f"Registration rejected, email already registered: {email}")
            raise ConflictError("User already exists")

        user = await self.users.create({
            "user_type": user_type.value,
            "name": name,
            "username": derive_username(name),
            "email": email,
            "password_hash": self.hasher.hash_password(password),
            "profile_picture_url": self.settings.default_avatar_url,
            "cover_picture_url": self.settings.default_cover_url,
            # Verification is not enforced at registration
            "is_verified": True,
        })

        if user_type == UserType.HOMEOWNER:
            return user, self.tokens.issue(token_claims(user))
        return user, None

    async def login(self, email: str, password: str) -> IssuedSession:
        """
        Authenticate with email and password.

        Raises:
            NotFoundError: If no account uses the email
            FederatedAccountError: If the account signs in through Google
            InvalidCredentialsError: If the password does not match
        """
        user = await self.users.find_by_email(email)
        if not user:
            logger.warning(f"Login failed, unknown email: {email}")
            raise NotFoundError("Incorrect email")

        if user.is_federated:
            logger.warning(f"Password login attempted on Google account: {email}")
            raise FederatedAccountError()

        if not self.hasher.verify_password(password, user.password_hash):
            logger.warning(f"Login failed, wrong password for user {user.id}")
            raise InvalidCredentialsError()

        logger.info(f"User {user.id} logged in")
        return self._issue_session(user)

    async def update_user_type(self, identity: Identity, user_type: UserType) -> User:
        """Assign a role to the user the token speaks for"""
        user = await self.users.find_by_identity(identity)
        if not user:
            raise NotFoundError("User not found")

        user = await self.users.apply(user, {"user_type": user_type.value})
        logger.info(f"User {user.id} changed type to {user_type.value}")
        return user

    async def check_username_available(self, username: str) -> Tuple[bool, str]:
        if await self.users.find_by_username(username):
            return False, "Username is already taken"
        return True, "Username is available"

    async def check_email_available(self, email: str) -> Tuple[bool, str]:
        if await self.users.find_by_email(email):
            return False, "Email is already registered"
        return True, "Email is available"

    async def search_users(self, query: str) -> List[User]:
        """
        Case-insensitive substring match on display names.

        Raises:
            BadRequestError: If the query is blank
        """
        query = query.strip()
        if not query:
            raise BadRequestError("Search query is required")
        return await self.users.search_by_name(query)

    async def get_user(self, user_id: UUID) -> User:
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def submit_professional_profile(
        self, email: str, data: Dict[str, Any]
    ) -> IssuedSession:
        """
        Create the Professional extension for the account owning ``email``.

        Raises:
            NotFoundError: If no account uses the email
            ConflictError: If the account already has a role extension
        """
        user = await self.users.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        await self.profiles.create_professional(user, data)
        return self._issue_session(user)

    async def submit_supplier_profile(self, email: str, data: Dict[str, Any]) -> IssuedSession:
        """Create the Supplier extension for the account owning ``email``"""
        user = await self.users.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        await self.profiles.create_supplier(user, data)
        return self._issue_session(user)

    def check_portfolio_batch(self, count: int) -> None:
        """Reject an empty upload or one with more files than allowed at once"""
        if count == 0:
            raise BadRequestError("No files uploaded")

        max_files = self.settings.max_portfolio_files
        if count > max_files:
            raise BadRequestError(f"At most {max_files} files can be uploaded at once")

    async def update_portfolio(self, user_id: UUID, uploads: List[FileUpload]) -> List[str]:
        """
        Store uploaded media and append their URLs to the portfolio.

        Args:
            user_id: Owning user UUID
            uploads: Files in the order they should be displayed

        Returns:
            The full portfolio after the append

        Raises:
            BadRequestError: If no files are supplied or too many are
            NotFoundError: If the user has no Professional row
        """
        self.check_portfolio_batch(len(uploads))

        professional: Professional = await self.profiles.require_professional(user_id)

        storage = self._require_storage()
        urls = [storage.store(upload, folder=PORTFOLIO_FOLDER) for upload in uploads]

        portfolio = await self.profiles.append_portfolio(professional, urls)
        logger.info(f"Added {len(urls)} portfolio entries for user {user_id}")
        return portfolio

    async def delete_portfolio_entry(self, user_id: UUID, index: int) -> List[str]:
        return await self.profiles.delete_portfolio_entry(user_id, index)

    async def update_profile_field(self, user_id: UUID, field: str, value: str) -> None:
        await self.profiles.update_field(user_id, field, value)

    async def get_professional(self, user_id: UUID) -> Professional:
        return await self.profiles.require_professional(user_id)

    async def get_supplier(self, user_id: UUID) -> Supplier:
        return await self.profiles.require_supplier(user_id)

    async def get_supplier_profile(self, user_id: UUID) -> Supplier:
        """Supplier row with its owning user loaded, for the public profile page"""
        supplier = await self.profiles.get_supplier_with_user(user_id)
        if not supplier:
            raise NotFoundError("Supplier not found")
        return supplier

    async def _upload_picture(
        self, user_id: UUID, upload: Optional[FileUpload], folder: str, column: str, label: str
    ) -> User:
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if upload is None:
            raise BadRequestError(f"No {label} uploaded")

        url = self._require_storage().store(upload, folder=folder)
        return await self.users.apply(user, {column: url})

    async def upload_profile_picture(self, user_id: UUID, upload: Optional[FileUpload]) -> User:
        """Store a new profile picture and point the user at it"""
        return await self._upload_picture(
            user_id, upload, PROFILE_PICTURE_FOLDER, "profile_picture_url", "profile picture"
        )

    async def upload_cover_picture(self, user_id: UUID, upload: Optional[FileUpload]) -> User:
        """Store a new cover picture and point the user at it"""
        return await self._upload_picture(
            user_id, upload, COVER_PICTURE_FOLDER, "cover_picture_url", "cover picture"
        )

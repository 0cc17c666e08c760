"""Credential store: persisted User records"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tradehub.models import User
from tradehub.services.auth_service import Identity, LocalIdentity, FederatedIdentity
from tradehub.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

# Columns a patch may touch
UPDATABLE_FIELDS = {
    "user_type",
    "name",
    "profile_picture_url",
    "cover_picture_url",
    "is_verified",
}


def derive_username(name: str) -> str:
    """Lowercased name with all whitespace removed"""
    return "".join(name.split()).lower()


class CredentialStore:
    """Lookups and writes for User records"""

    def __init__(self, db: AsyncSession):
        """Initialize with database session"""
        self.db = db

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> Optional[User]:
        # Usernames are not unique, any match means taken
        result = await self.db.execute(
            select(User).where(User.username == username).limit(1)
        )
        return result.scalars().first()

    async def find_by_google_id(self, google_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.google_id == google_id))
        return result.scalar_one_or_none()

    async def search_by_name(self, query: str) -> List[User]:
        """Users whose name contains ``query``, case-insensitively, ordered by name"""
        escaped = (
            query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        )
        result = await self.db.execute(
            select(User)
            .where(User.name.ilike(f"%{escaped}%", escape="\\"))
            .order_by(User.name)
        )
        return list(result.scalars().all())

    async def find_by_identity(self, identity: Identity) -> Optional[User]:
        """
        Look up the user a token speaks for.

        Exactly one lookup runs: by primary id for local identities,
        by Google id for federated ones.
        """
        if isinstance(identity, LocalIdentity):
            return await self.find_by_id(identity.user_id)
        if isinstance(identity, FederatedIdentity):
            return await self.find_by_google_id(identity.provider_id)
        raise TypeError(f"Unsupported identity: {identity!r}")

    async def create(self, draft: Dict[str, Any]) -> User:
        """
        Insert a new user.

        Args:
            draft: Column values for the new row

        Returns:
            The persisted User

        Raises:
            ConflictError: If the email is already registered
        """
        user = User(**draft)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Duplicate email rejected by unique constraint: {draft.get('email')}")
            raise ConflictError("User already exists")

        await self.db.refresh(user)
        logger.info(f"User created with ID: {user.id}")
        return user

    async def update(self, user_id: UUID, patch: Dict[str, Any]) -> User:
        """
        Apply a partial update to a user.

        Args:
            user_id: User UUID
            patch: Column values to change (unknown keys are rejected)

        Returns:
            The updated User

        Raises:
            NotFoundError: If no user has this id
        """
        user = await self.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        return await self.apply(user, patch)

    async def apply(self, user: User, patch: Dict[str, Any]) -> User:
        """Write a patch onto an already loaded user"""
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {', '.join(sorted(unknown))}")

        for field, value in patch.items():
            setattr(user, field, value)

        await self.db.commit()
        await self.db.refresh(user)
        return user

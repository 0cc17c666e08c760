"""Profile resolution and role-extension (Professional / Supplier) management"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tradehub.models import Professional, Supplier, User, UserType
from tradehub.services.auth_service import Identity
from tradehub.services.errors import BadRequestError, ConflictError, NotFoundError
from tradehub.services.user_store import CredentialStore

logger = logging.getLogger(__name__)


class ProfileField(str, enum.Enum):
    """Fields editable through the single-field profile update"""

    NAME = "name"
    SERVICE_TYPE = "serviceType"
    BIO = "bio"
    CERTIFICATIONS = "certifications"

    @classmethod
    def parse(cls, value: str) -> "ProfileField":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(field.value for field in cls)
            raise BadRequestError(f"Unknown profile field '{value}'. Allowed: {allowed}")


@dataclass
class ResolvedIdentity:
    """A user joined with the role extension its user_type calls for"""
    user: User
    professional: Optional[Professional] = None
    supplier: Optional[Supplier] = None

    @property
    def profile_complete(self) -> bool:
        return self.professional is not None or self.supplier is not None


class ProfileService:
    """
    Service for composing identity views and managing role extensions.
    Exactly one of Professional/Supplier may exist per user.
    """

    def __init__(self, db: AsyncSession, users: Optional[CredentialStore] = None):
        """Initialize with database session"""
        self.db = db
        self.users = users or CredentialStore(db)
        self._field_updaters = {
            ProfileField.NAME: self._update_name,
            ProfileField.SERVICE_TYPE: self._update_service_type,
            ProfileField.BIO: self._update_bio,
            ProfileField.CERTIFICATIONS: self._update_certifications,
        }

    async def get_professional(self, user_id: UUID) -> Optional[Professional]:
        result = await self.db.execute(
            select(Professional).where(Professional.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_supplier(self, user_id: UUID) -> Optional[Supplier]:
        result = await self.db.execute(select(Supplier).where(Supplier.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_supplier_with_user(self, user_id: UUID) -> Optional[Supplier]:
        """Supplier row with its owning user loaded"""
        result = await self.db.execute(
            select(Supplier)
            .options(selectinload(Supplier.user))
            .where(Supplier.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def require_professional(self, user_id: UUID) -> Professional:
        professional = await self.get_professional(user_id)
        if not professional:
            raise NotFoundError("Professional not found")
        return professional

    async def require_supplier(self, user_id: UUID) -> Supplier:
        supplier = await self.get_supplier(user_id)
        if not supplier:
            raise NotFoundError("Supplier not found")
        return supplier

    async def resolve_identity(self, identity: Identity) -> ResolvedIdentity:
        """
        Resolve token claims into a composite identity view.

        Args:
            identity: LocalIdentity or FederatedIdentity taken from a verified token

        Returns:
            ResolvedIdentity; profile_complete is true only when the role
            extension for the user's type exists

        Raises:
            NotFoundError: If no user matches the identity
        """
        user = await self.users.find_by_identity(identity)
        if not user:
            raise NotFoundError("User not found")

        resolved = ResolvedIdentity(user=user)

        # Dispatch on role; homeowners and unset accounts have no extension
        if user.user_type == UserType.PROFESSIONAL.value:
            resolved.professional = await self.get_professional(user.id)
        elif user.user_type == UserType.SUPPLIER.value:
            resolved.supplier = await self.get_supplier(user.id)

        return resolved

    async def _ensure_no_extension(self, user: User) -> None:
        if await self.get_professional(user.id):
            raise ConflictError("Professional profile already exists for this user")
        if await self.get_supplier(user.id):
            raise ConflictError("Supplier profile already exists for this user")

    async def _save_extension(self, row: Any) -> None:
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Profile already exists for this user")
        await self.db.refresh(row)

    async def create_professional(self, user: User, data: Dict[str, Any]) -> Professional:
        """
        Create the Professional extension of a user.

        Args:
            user: Owning user
            data: service_type, years_experience, bio, certifications, portfolio_link

        Raises:
            ConflictError: If the user already has a role extension
        """
        await self._ensure_no_extension(user)

        professional = Professional(user_id=user.id, portfolio=[], **data)
        await self._save_extension(professional)

        logger.info(f"Professional profile created for user {user.id}")
        return professional

    async def create_supplier(self, user: User, data: Dict[str, Any]) -> Supplier:
        """
        Create the Supplier extension of a user.

        Args:
            user: Owning user
            data: business_name, contact_info, additional_details

        Raises:
            ConflictError: If the user already has a role extension
        """
        await self._ensure_no_extension(user)

        supplier = Supplier(user_id=user.id, **data)
        await self._save_extension(supplier)

        logger.info(f"Supplier profile created for user {user.id}")
        return supplier

    async def append_portfolio(self, professional: Professional, urls: List[str]) -> List[str]:
        """Append media URLs after the existing entries, keeping display order"""
        # Reassign so the JSON column is flagged dirty; concurrent appends are last-write-wins
        professional.portfolio = [*(professional.portfolio or []), *urls]
        await self.db.commit()
        await self.db.refresh(professional)
        return list(professional.portfolio)

    async def delete_portfolio_entry(self, user_id: UUID, index: int) -> List[str]:
        """
        Remove one portfolio entry, shifting later entries down.

        Args:
            user_id: Owning user UUID
            index: Zero-based position of the entry

        Returns:
            The remaining portfolio

        Raises:
            NotFoundError: If there is no Professional row or the index is out of range
        """
        professional = await self.require_professional(user_id)
        portfolio = list(professional.portfolio or [])

        if index < 0 or index >= len(portfolio):
            raise NotFoundError("Portfolio entry not found")

        del portfolio[index]
        professional.portfolio = portfolio
        await self.db.commit()
        await self.db.refresh(professional)
        return list(professional.portfolio)

    async def update_field(self, user_id: UUID, field: str, value: str) -> None:
        """
        Update a single profile field.

        Args:
            user_id: Owning user UUID
            field: One of name, serviceType, bio, certifications
            value: New value

        Raises:
            BadRequestError: If the field name is not recognized
            NotFoundError: If the user (for name) or Professional row (other fields) is absent
        """
        profile_field = ProfileField.parse(field)
        await self._field_updaters[profile_field](user_id, value)
        logger.info(f"Profile field {profile_field.value} updated for user {user_id}")

    async def _update_name(self, user_id: UUID, value: str) -> None:
        await self.users.update(user_id, {"name": value})

    async def _update_professional(self, user_id: UUID, column: str, value: str) -> None:
        professional = await self.require_professional(user_id)
        setattr(professional, column, value)
        await self.db.commit()

    async def _update_service_type(self, user_id: UUID, value: str) -> None:
        await self._update_professional(user_id, "service_type", value)

    async def _update_bio(self, user_id: UUID, value: str) -> None:
        await self._update_professional(user_id, "bio", value)

    async def _update_certifications(self, user_id: UUID, value: str) -> None:
        await self._update_professional(user_id, "certifications", value)

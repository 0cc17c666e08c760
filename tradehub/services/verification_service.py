"""Email verification codes: issuance and validation with expiry"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradehub.models import EmailVerification
from tradehub.services.errors import CodeExpiredError, InvalidCodeError, NotFoundError

logger = logging.getLogger(__name__)


def generate_code() -> str:
    """Random 6-digit numeric code (no leading zero)"""
    return str(100000 + secrets.randbelow(900000))


@dataclass
class IssuedCode:
    """Result of issuing a verification code"""
    email: str
    code: str
    expires_at: datetime


class VerificationLedger:
    """
    Service for email verification codes.

    One record per email. Issuing again overwrites the code and expiry in place;
    records are not purged after expiry.
    """

    def __init__(
        self,
        db: AsyncSession,
        ttl: timedelta = timedelta(minutes=10),
        single_use: bool = False,
        clock: Callable[[], datetime] = datetime.utcnow,
        code_factory: Callable[[], str] = generate_code,
    ):
        self.db = db
        self.ttl = ttl
        self.single_use = single_use
        self.clock = clock
        self.code_factory = code_factory

    async def _find(self, email: str) -> Optional[EmailVerification]:
        result = await self.db.execute(
            select(EmailVerification).where(EmailVerification.email == email)
        )
        return result.scalar_one_or_none()

    async def issue(self, email: str) -> IssuedCode:
        """
        Create or overwrite the verification code for an email.

        Args:
            email: Address the code is sent to

        Returns:
            IssuedCode with the code and its expiry
        """
        code = self.code_factory()
        expires_at = self.clock() + self.ttl

        # Check-then-write is not atomic; concurrent issues for one email race (last write wins)
        record = await self._find(email)
        if record is None:
            record = EmailVerification(email=email, code=code, expires_at=expires_at)
            self.db.add(record)
        else:
            record.code = code
            record.expires_at = expires_at

        await self.db.commit()
        logger.info(f"Verification code issued for {email}, expires at {expires_at.isoformat()}")

        return IssuedCode(email=email, code=code, expires_at=expires_at)

    async def verify(self, email: str, submitted_code: str) -> bool:
        """
        Check a submitted code.

        The code is compared before the expiry is looked at, so a wrong code
        is always reported as invalid, never as expired.

        Args:
            email: Address the code was issued for
            submitted_code: Code entered by the user

        Returns:
            True on success

        Raises:
            NotFoundError: If no code was issued for the email
            InvalidCodeError: If the code does not match
            CodeExpiredError: If the code matches but now >= expires_at
        """
        record = await self._find(email)
        if record is None:
            raise NotFoundError("User not found")

        if not secrets.compare_digest(record.code.encode(), str(submitted_code).encode()):
            logger.warning(f"Invalid verification code submitted for {email}")
            raise InvalidCodeError()

        if self.clock() >= record.expires_at:
            logger.warning(f"Expired verification code submitted for {email}")
            raise CodeExpiredError()

        if self.single_use:
            await self.db.delete(record)
            await self.db.commit()

        return True

"""Authentication service for JWT token management and password hashing"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, Union
from uuid import UUID

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from tradehub.config import Settings
from tradehub.services.errors import BadRequestError, TokenExpiredError, TokenInvalidError

TOKEN_ISSUER = "tradehub-api"

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class LocalIdentity:
    """Identity claim naming a primary user id"""
    user_id: UUID


@dataclass(frozen=True)
class FederatedIdentity:
    """Identity claim naming an external (Google) account id"""
    provider_id: str


Identity = Union[LocalIdentity, FederatedIdentity]


def identity_from_claims(claims: Dict[str, Any]) -> Identity:
    """
    Build the identity a token speaks for.

    Args:
        claims: Verified token claims

    Returns:
        LocalIdentity when the token carries ``sub``, FederatedIdentity when it carries ``google_id``

    Raises:
        TokenInvalidError: If neither claim is present or ``sub`` is not a UUID
    """
    subject = claims.get("sub")
    if subject is not None:
        try:
            return LocalIdentity(user_id=UUID(str(subject)))
        except ValueError:
            raise TokenInvalidError("Invalid user ID in token")

    google_id = claims.get("google_id")
    if google_id:
        return FederatedIdentity(provider_id=str(google_id))

    raise TokenInvalidError("Invalid token payload")


class PasswordHasher:
    """bcrypt password hashing"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt

        Args:
            password: Plain text password

        Returns:
            Hashed password string

        Raises:
            BadRequestError: If the password is longer than bcrypt accepts
        """
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise BadRequestError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(encoded, salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Verify a password against its hash

        Args:
            plain_password: Plain text password to verify
            hashed_password: Hashed password to compare against

        Returns:
            True if password matches, False otherwise
        """
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8"), hashed_password.encode("utf-8")
            )
        except ValueError:
            # Stored value is not a bcrypt hash
            return False


class TokenService:
    """Signs and verifies bearer tokens with the configured secret"""

    def __init__(self, settings: Settings):
        self._secret = settings.signing_key
        self._algorithm = settings.jwt_algorithm
        self.default_ttl = timedelta(hours=settings.jwt_expiration_hours)

    def issue(self, claims: Dict[str, Any], ttl: Optional[timedelta] = None) -> str:
        """
        Sign a token carrying the given claims

        Args:
            claims: Identity claim (``sub`` or ``google_id``) plus display fields
            ttl: Lifetime of the token (defaults to the configured 1 day)

        Returns:
            Encoded JWT token string
        """
        to_encode = claims.copy()
        now = datetime.utcnow()
        to_encode.update({
            "exp": now + (ttl if ttl is not None else self.default_ttl),
            "iat": now,
            "iss": TOKEN_ISSUER,
        })
        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a token

        Args:
            token: JWT token string

        Returns:
            Dictionary of token claims

        Raises:
            TokenExpiredError: If the token's exp has passed
            TokenInvalidError: For any other decode failure
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=TOKEN_ISSUER,
            )
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            raise TokenInvalidError() from e


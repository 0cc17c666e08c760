"""Email verification model"""

from sqlalchemy import Column, String, DateTime
from tradehub.models.base import BaseModel


class EmailVerification(BaseModel):
    """
    Pending email verification code.
    At most one live record per email; re-issuing overwrites it in place.
    """

    __tablename__ = "email_verifications"

    email = Column(String(255), unique=True, nullable=False, index=True)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<EmailVerification(email={self.email}, expires_at={self.expires_at})>"

"""User model"""

import enum
from sqlalchemy import Column, String, Boolean, Text, CheckConstraint
from sqlalchemy.orm import relationship
from tradehub.models.base import BaseModel


class UserType(str, enum.Enum):
    """Marketplace role of an account"""

    HOMEOWNER = "homeowner"
    PROFESSIONAL = "professional"
    SUPPLIER = "supplier"
    UNSET = "unset"


class User(BaseModel):
    """
    User model representing marketplace accounts.
    A professional or supplier account is extended by exactly one role row.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "user_type IN ('homeowner', 'professional', 'supplier', 'unset')",
            name="check_user_type",
        ),
    )

    user_type = Column(String(20), default=UserType.UNSET.value, nullable=False)
    name = Column(String(255), nullable=False)
    # Derived from name, not unique
    username = Column(String(255), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Absent for federated accounts
    password_hash = Column(String(255), nullable=True)
    google_id = Column(String(255), unique=True, nullable=True, index=True)
    profile_picture_url = Column(Text, nullable=True)
    cover_picture_url = Column(Text, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)

    # Relationships
    professional = relationship(
        "Professional", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    supplier = relationship(
        "Supplier", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def is_federated(self) -> bool:
        return bool(self.google_id)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, user_type={self.user_type})>"

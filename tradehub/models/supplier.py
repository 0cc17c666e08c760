"""Supplier model"""

from sqlalchemy import Column, String, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from tradehub.models.base import BaseModel


class Supplier(BaseModel):
    """Role extension for material suppliers. One-to-one with User."""

    __tablename__ = "suppliers"

    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True
    )
    business_name = Column(String(255), nullable=True)
    contact_info = Column(Text, nullable=True)
    additional_details = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="supplier")

    def __repr__(self):
        return f"<Supplier(id={self.id}, user_id={self.user_id}, business_name={self.business_name})>"

"""Professional model"""

from sqlalchemy import Column, String, Integer, Text, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from tradehub.models.base import BaseModel


class Professional(BaseModel):
    """
    Role extension for service professionals.
    One-to-one with User; portfolio is an ordered list of media URLs (display order).
    """

    __tablename__ = "professionals"

    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True
    )
    service_type = Column(String(255), nullable=True)
    years_experience = Column(Integer, nullable=True)
    bio = Column(Text, nullable=True)
    certifications = Column(Text, nullable=True)
    portfolio_link = Column(Text, nullable=True)
    portfolio = Column(JSON, default=list, nullable=False)

    # Relationships
    user = relationship("User", back_populates="professional")

    def __repr__(self):
        return f"<Professional(id={self.id}, user_id={self.user_id}, service_type={self.service_type})>"

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class School(Base):
    """
    A tenant. Owns users and opportunities; deleting a school removes both.
    """
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    logo_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    users = relationship(
        "User",
        back_populates="school",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy='select'
    )

    opportunities = relationship(
        "Opportunity",
        back_populates="school",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy='select'
    )

    def __repr__(self):
        return f"<School(id={self.id}, name={self.name})>"

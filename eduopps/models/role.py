from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eduopps.core.permissions import RoleCapabilities
from .base import Base


class UserRole(Base):
    """Seeded role row: one boolean column per capability"""
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    can_create_opportunities = Column(Boolean, default=False, nullable=False)
    can_edit_own_opportunities = Column(Boolean, default=False, nullable=False)
    can_edit_school_opportunities = Column(Boolean, default=False, nullable=False)
    can_edit_all_opportunities = Column(Boolean, default=False, nullable=False)
    can_view_opportunities = Column(Boolean, default=True, nullable=False)
    can_view_attendees = Column(Boolean, default=False, nullable=False)
    can_view_reports = Column(Boolean, default=False, nullable=False)
    can_manage_users = Column(Boolean, default=False, nullable=False)
    can_manage_schools = Column(Boolean, default=False, nullable=False)
    can_manage_settings = Column(Boolean, default=False, nullable=False)
    can_manage_preferences = Column(Boolean, default=False, nullable=False)
    can_upload_documents = Column(Boolean, default=False, nullable=False)
    can_manage_news = Column(Boolean, default=False, nullable=False)

    requires_school = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    users = relationship("User", back_populates="role", lazy='select')

    def to_capabilities(self) -> RoleCapabilities:
        return RoleCapabilities.from_role(self)

    def __repr__(self):
        return f"<UserRole(id={self.id}, name={self.name})>"

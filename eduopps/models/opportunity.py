from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import TenantModel


class Opportunity(TenantModel):
    """
    An opportunity posted by a school (or platform-wide when is_global).

    school_id is NULL only for global opportunities. created_by_id is a weak
    reference: the creator may be deleted, leaving the opportunity unattributed.
    """
    __tablename__ = "opportunities"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    organization = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    details = Column(Text, nullable=True)
    requirements = Column(Text, nullable=True)
    application_process = Column(Text, nullable=True)
    image_url = Column(String(512), nullable=True)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    application_deadline = Column(DateTime(timezone=True), nullable=False)

    location = Column(String(255), nullable=False)
    is_virtual = Column(Boolean, default=False, nullable=False)
    opportunity_type = Column(String(100), nullable=False)  # internship, workshop, scholarship...
    compensation = Column(String(255), nullable=True)
    industry = Column(String(100), nullable=False)
    age_groups = Column(JSON, default=list, nullable=False)
    ethnicity_focus = Column(String(100), nullable=True)
    gender_focus = Column(String(100), nullable=True)
    contact_person = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    external_url = Column(String(512), nullable=True)

    # NULL means unlimited
    number_of_spaces = Column(Integer, nullable=True)

    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    is_global = Column(Boolean, default=False, nullable=False)
    visible_to_schools = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    school = relationship("School", back_populates="opportunities")
    created_by = relationship("User", foreign_keys=[created_by_id])
    interests = relationship(
        "StudentInterest",
        back_populates="opportunity",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self):
        return f"<Opportunity(id={self.id}, title={self.title}, school_id={self.school_id})>"

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class StudentPreferences(Base):
    __tablename__ = "student_preferences"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    industries = Column(JSON, default=list, nullable=False)
    age_groups = Column(JSON, default=list, nullable=False)
    opportunity_types = Column(JSON, default=list, nullable=False)
    locations = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="preferences")

    def __repr__(self):
        return f"<StudentPreferences(user_id={self.user_id})>"

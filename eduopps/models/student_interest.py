from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base


class StudentInterest(Base):
    """A student's claim on one space of an opportunity. Created and deleted, never updated."""
    __tablename__ = "student_interests"
    __table_args__ = (
        UniqueConstraint("student_id", "opportunity_id", name="uq_student_interest_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    opportunity_id = Column(
        Integer,
        ForeignKey("opportunities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    registration_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(50), default="registered", nullable=False)
    notes = Column(Text, nullable=True)

    student = relationship("User", back_populates="interests")
    opportunity = relationship("Opportunity", back_populates="interests")

    def __repr__(self):
        return (
            f"<StudentInterest(student_id={self.student_id}, "
            f"opportunity_id={self.opportunity_id})>"
        )

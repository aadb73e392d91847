# base.py
from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


class TenantModel(Base):
    """
    A base mixin for multi-tenant architecture.
    Rows carry an optional school_id; NULL means the row is not owned by a school.
    """
    __abstract__ = True

    @declared_attr
    def school_id(cls):
        return Column(Integer, ForeignKey("schools.id", ondelete="CASCADE"), nullable=True, index=True)

"""
Base model class and common mixins for all database models.
"""

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base

from ..core.clock import system_clock

Base = declarative_base()


def get_local_now():
    """Current time in the business timezone (as naive datetime)."""
    return system_clock.now()


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at = Column(DateTime, default=get_local_now, nullable=False)
    updated_at = Column(DateTime, default=get_local_now, onupdate=get_local_now, nullable=False)


class BaseModel(Base, TimestampMixin):
    """Abstract base model with integer primary key and timestamps."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    def to_dict(self):
        """Convert model to dictionary."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id})>"

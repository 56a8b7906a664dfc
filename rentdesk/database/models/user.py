"""
Administrator accounts for the back office.
"""

from sqlalchemy import Column, String, Boolean

from ..base import BaseModel


class AdminUser(BaseModel):

    __tablename__ = 'admin_users'

    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="admin", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<AdminUser(id={self.id}, email='{self.email}')>"

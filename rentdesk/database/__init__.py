"""
Database package for RentDesk.

Usage:
    from rentdesk.database import db, get_db, init_db
    from rentdesk.database.models import Room, Lease, Invoice
"""

from .base import Base, BaseModel, TimestampMixin, get_local_now
from .connection import (
    DatabaseConnection,
    db,
    get_db,
    init_db,
    reset_db,
)

# Import all models to ensure they are registered with SQLAlchemy
from .models import *


__all__ = [
    # Base
    'Base',
    'BaseModel',
    'TimestampMixin',
    'get_local_now',

    # Connection
    'DatabaseConnection',
    'db',
    'get_db',
    'init_db',
    'reset_db',
]

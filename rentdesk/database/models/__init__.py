"""
Database models package.
Export all models for easy importing.
"""

from .room import Room, RoomStatus
from .tenant import Tenant, TenantStatus
from .lease import Lease, LeaseStatus, BLOCKING_LEASE_STATUSES
from .billing import (
    BillStatus,
    PaymentMode,
    PayableMixin,
    Invoice,
    LightBill,
    Payment,
)
from .settings import Settings, LateFeeType, SETTINGS_ID
from .notification import Notification, NotificationKind, NotificationPriority
from .user import AdminUser


__all__ = [
    # Rooms & tenants
    'Room',
    'RoomStatus',
    'Tenant',
    'TenantStatus',

    # Leases
    'Lease',
    'LeaseStatus',
    'BLOCKING_LEASE_STATUSES',

    # Billing
    'BillStatus',
    'PaymentMode',
    'PayableMixin',
    'Invoice',
    'LightBill',
    'Payment',

    # Settings
    'Settings',
    'LateFeeType',
    'SETTINGS_ID',

    # Notifications
    'Notification',
    'NotificationKind',
    'NotificationPriority',

    # Users
    'AdminUser',
]

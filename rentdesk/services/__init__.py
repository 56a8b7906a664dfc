"""
Business services. Each takes a SQLAlchemy session and commits its own work.
"""

from .billing_rules import BatchResult, LateFeeConfig, derive_status
from .notification import NotificationService
from .settings import SettingsService
from .room import RoomService
from .tenant import TenantService
from .lease import LeaseService
from .invoice import InvoiceService
from .light_bill import LightBillInput, LightBillService
from .payment import PaymentLedger
from .late_fee import LateFeeService
from .dashboard import DashboardService
from .auth import AuthService


__all__ = [
    'BatchResult',
    'LateFeeConfig',
    'derive_status',
    'NotificationService',
    'SettingsService',
    'RoomService',
    'TenantService',
    'LeaseService',
    'InvoiceService',
    'LightBillInput',
    'LightBillService',
    'PaymentLedger',
    'LateFeeService',
    'DashboardService',
    'AuthService',
]

"""
RentDesk - room rental management API.

Rooms, tenants, leases, monthly rent invoices, electricity (light) bills
and payments, with a monthly invoice generation job.
"""

__version__ = "1.0.0"

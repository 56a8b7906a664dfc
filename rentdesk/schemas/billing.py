"""
Invoice, light bill and payment schemas.
"""

from datetime import date, datetime
from datetime import date as date_type
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


# ==================== INVOICES ====================

class InvoiceResponse(BaseModel):
    id: int
    lease_id: int
    tenant_id: int
    room_id: int
    period_from: date
    period_to: date
    issue_date: date
    due_date: date
    base_amount: float
    late_fee: float
    total_amount: float
    paid_amount: float
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class InvoiceSummary(BaseModel):
    total_expected: float
    total_collected: float
    total_pending: float


class InvoiceListResponse(BaseModel):
    data: List[InvoiceResponse]
    total: int
    summary: InvoiceSummary


class GenerateInvoicesRequest(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)


class GenerateInvoicesResponse(BaseModel):
    success: bool = True
    message: str
    created: int
    skipped: int
    failed: int
    errors: list = []
    data: List[InvoiceResponse]


# ==================== PAYMENTS ====================

class PaymentRequest(BaseModel):
    amount: Decimal
    date: Optional[date_type] = None
    mode: str = "cash"
    note: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    invoice_id: int
    lease_id: int
    tenant_id: int
    amount: float
    date: date_type
    mode: str
    note: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class InvoicePaymentResponse(BaseModel):
    success: bool = True
    message: str = "Payment recorded successfully"
    invoice: InvoiceResponse
    payment: PaymentResponse


class PaymentListResponse(BaseModel):
    data: List[PaymentResponse]
    total: int


# ==================== LIGHT BILLS ====================

class LightBillCreate(BaseModel):
    """Tenant, lease, period and dates may be omitted and filled in from the room."""

    room_id: int
    tenant_id: Optional[int] = None
    lease_id: Optional[int] = None
    period_from: Optional[date] = None
    period_to: Optional[date] = None
    units_consumed: Decimal
    rate_per_unit: Decimal
    fixed_charge: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


class LightBillUpdate(BaseModel):
    """
    Partial update. A field left out is unchanged; ``notes: null``
    clears the notes. Room, tenant and lease cannot be changed.
    """

    period_from: Optional[date] = None
    period_to: Optional[date] = None
    units_consumed: Optional[Decimal] = None
    rate_per_unit: Optional[Decimal] = None
    fixed_charge: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


class LightBillResponse(BaseModel):
    id: int
    room_id: int
    tenant_id: int
    lease_id: int
    period_from: date
    period_to: date
    units_consumed: float
    rate_per_unit: float
    fixed_charge: float
    tax: float
    total_amount: float
    paid_amount: float
    issue_date: date
    due_date: date
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LightBillListResponse(BaseModel):
    data: List[LightBillResponse]
    total: int


class TenantPaymentHistoryResponse(BaseModel):
    tenant_id: int
    tenant_name: str
    payments: List[PaymentResponse]
    light_bills: List[LightBillResponse]
    total_rent_paid: float
    total_light_paid: float
    total_paid: float


class PaymentEntryResponse(BaseModel):
    """Invoice payment or paid light bill in the unified payment list."""
    id: int
    type: str
    tenant_id: int
    tenant_name: str
    lease_id: int
    related_id: int
    amount: float
    date: date_type
    mode: str
    note: Optional[str] = None
    period_from: date_type
    period_to: date_type
    status: str


class TenantPaymentGroup(BaseModel):
    tenant_id: int
    tenant_name: str
    total_amount: float
    payment_count: int
    payments: List[PaymentEntryResponse]


class PaymentOverviewResponse(BaseModel):
    count: int
    total_amount: float
    data: List[TenantPaymentGroup]


class PaymentDetailResponse(PaymentEntryResponse):
    invoice: Optional[InvoiceResponse] = None
    light_bill: Optional[LightBillResponse] = None

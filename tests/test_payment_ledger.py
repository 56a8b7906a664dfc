"""
Tests for PaymentLedger: partial and full payments, over-payment
rejection and payment history.
"""

from datetime import date
from decimal import Decimal

import pytest

from rentdesk.core.exceptions import (
    ConflictError, InvalidAmountError, InvalidInputError, NotFoundError
)
from rentdesk.database.models import Invoice, LightBill, Notification, Payment
from rentdesk.services.invoice import InvoiceService
from rentdesk.services.light_bill import LightBillInput, LightBillService
from rentdesk.services.notification import NotificationService
from rentdesk.services.payment import PaymentLedger


@pytest.fixture
def ledger(session, clock, notifier):
    return PaymentLedger(session, clock=clock, notifier=notifier)


def test_partial_then_full_payment(session, ledger, make_invoice):
    invoice = make_invoice(rent_per_month=Decimal("1000"))

    invoice, first = ledger.pay_invoice(invoice.id, Decimal("400"))
    assert invoice.paid_amount == Decimal("400.00")
    assert invoice.status == "partially_paid"
    assert first.amount == Decimal("400.00")
    assert first.date == date(2024, 3, 1)
    assert first.mode == "cash"

    invoice, _ = ledger.pay_invoice(invoice.id, Decimal("600"), mode="upi", note="Balance")
    assert invoice.paid_amount == Decimal("1000.00")
    assert invoice.status == "paid"

    with pytest.raises(ConflictError, match="Maximum allowable payment: 0.00"):
        ledger.pay_invoice(invoice.id, Decimal("1"))

    assert session.query(Payment).filter(Payment.invoice_id == invoice.id).count() == 2


def test_overpayment_reports_remaining_amount(ledger, make_invoice):
    invoice = make_invoice(rent_per_month=Decimal("1000"))
    ledger.pay_invoice(invoice.id, Decimal("250"))

    with pytest.raises(ConflictError, match="Maximum allowable payment: 750.00"):
        ledger.pay_invoice(invoice.id, Decimal("800"))


def test_payment_copies_lease_and_tenant(ledger, make_invoice):
    invoice = make_invoice()
    _, payment = ledger.pay_invoice(invoice.id, 100, date=date(2024, 3, 3), mode="bank_transfer")

    assert payment.invoice_id == invoice.id
    assert payment.lease_id == invoice.lease_id
    assert payment.tenant_id == invoice.tenant_id
    assert payment.date == date(2024, 3, 3)


@pytest.mark.parametrize("amount", [0, -5, "abc", None])
def test_non_positive_amount_rejected(ledger, make_invoice, amount):
    invoice = make_invoice()
    with pytest.raises(InvalidAmountError) as exc:
        ledger.pay_invoice(invoice.id, amount)
    assert isinstance(exc.value, InvalidInputError)


@pytest.mark.parametrize("amount", ["0.005", "10.999", Decimal("1.001")])
def test_sub_cent_amount_rejected(session, ledger, make_invoice, amount):
    invoice = make_invoice()

    with pytest.raises(InvalidAmountError, match="2 decimal places"):
        ledger.pay_invoice(invoice.id, amount)

    session.refresh(invoice)
    assert invoice.paid_amount == Decimal("0.00")
    assert session.query(Payment).count() == 0


def test_cent_amount_kept_exactly(ledger, make_invoice):
    invoice = make_invoice()

    _, payment = ledger.pay_invoice(invoice.id, "10.50")

    assert payment.amount == Decimal("10.50")


def test_unknown_mode_rejected(ledger, make_invoice):
    invoice = make_invoice()
    with pytest.raises(InvalidInputError, match="Payment mode"):
        ledger.pay_invoice(invoice.id, 100, mode="cheque")


def test_missing_invoice(ledger):
    with pytest.raises(NotFoundError, match="Invoice not found"):
        ledger.pay_invoice(42, 100)


def test_overdue_invoice_paid_partially_becomes_partially_paid(session, clock, ledger, make_invoice):
    invoice = make_invoice()
    clock.set_time(clock.now().replace(day=20))

    invoice, _ = ledger.pay_invoice(invoice.id, 100)

    assert invoice.status == "partially_paid"


def test_payment_received_notification(session, ledger, make_invoice):
    invoice = make_invoice()
    session.query(Notification).delete()
    session.commit()

    ledger.pay_invoice(invoice.id, 100)

    notification = session.query(Notification).one()
    assert notification.kind == "payment_received"
    assert notification.related_entity_id == invoice.id


def _light_bill(session, clock, invoice):
    return LightBillService(session, clock=clock).create_light_bill(LightBillInput(
        room_id=invoice.room_id,
        units_consumed=Decimal("100"),
        rate_per_unit=Decimal("8"),
        fixed_charge=Decimal("50"),
        tax=Decimal("20"),
    ))


def test_light_bill_payment_updates_bill_only(session, clock, ledger, make_invoice):
    invoice = make_invoice()
    bill = _light_bill(session, clock, invoice)

    bill = ledger.pay_light_bill(bill.id, Decimal("70"))
    assert bill.paid_amount == Decimal("70.00")
    assert bill.status == "partially_paid"

    bill = ledger.pay_light_bill(bill.id, Decimal("1000"))
    assert bill.status == "paid"
    assert session.query(Payment).count() == 0

    with pytest.raises(ConflictError):
        ledger.pay_light_bill(bill.id, Decimal("0.01"))


def test_missing_light_bill(ledger):
    with pytest.raises(NotFoundError, match="Light bill not found"):
        ledger.pay_light_bill(3, 10)


def test_list_payments_and_tenant_history(session, clock, ledger, make_invoice):
    invoice = make_invoice()
    other = make_invoice()
    ledger.pay_invoice(invoice.id, 1000, date=date(2024, 3, 2))
    ledger.pay_invoice(invoice.id, 500, date=date(2024, 3, 9), mode="upi")
    ledger.pay_invoice(other.id, 300)
    bill = _light_bill(session, clock, invoice)
    ledger.pay_light_bill(bill.id, 200)

    assert len(ledger.list_payments(tenant_id=invoice.tenant_id)) == 2
    assert len(ledger.list_payments(mode="upi")) == 1
    assert len(ledger.list_payments(date_from=date(2024, 3, 5))) == 1

    history = ledger.tenant_payment_history(invoice.tenant_id)
    assert history["total_rent_paid"] == 1500.0
    assert history["total_light_paid"] == 200.0
    assert history["total_paid"] == 1700.0
    assert [b.id for b in history["light_bills"]] == [bill.id]


def test_history_for_unknown_tenant(ledger):
    with pytest.raises(NotFoundError):
        ledger.tenant_payment_history(99)


def test_payment_entries_include_paid_light_bills(session, clock, ledger, make_invoice):
    invoice = make_invoice()
    ledger.pay_invoice(invoice.id, 1000, date=date(2024, 3, 2), mode="upi")
    bill = _light_bill(session, clock, invoice)
    clock.advance(days=3)
    ledger.pay_light_bill(bill.id, 200)

    entries = ledger.list_payment_entries(tenant_id=invoice.tenant_id)

    assert [e["type"] for e in entries] == ["light_bill", "invoice"]
    light = entries[0]
    assert light["related_id"] == bill.id
    assert light["amount"] == Decimal("200.00")
    assert light["date"] == date(2024, 3, 4)
    assert light["mode"] == "cash"

    assert [e["type"] for e in ledger.list_payment_entries(mode="upi")] == ["invoice"]
    assert [e["type"] for e in ledger.list_payment_entries(invoice_id=invoice.id)] == ["invoice"]
    assert [e["type"] for e in ledger.list_payment_entries(date_from=date(2024, 3, 3))] == ["light_bill"]


def test_unpaid_light_bills_are_not_payments(session, clock, ledger, make_invoice):
    invoice = make_invoice()
    _light_bill(session, clock, invoice)

    assert ledger.list_payment_entries() == []


def test_payment_overview_groups_by_tenant(session, clock, ledger, make_invoice):
    first = make_invoice()
    second = make_invoice()
    ledger.pay_invoice(first.id, 1000)
    ledger.pay_invoice(first.id, 500)
    ledger.pay_invoice(second.id, 300)
    ledger.pay_light_bill(_light_bill(session, clock, first).id, 200)

    overview = ledger.payment_overview()

    assert overview["count"] == 4
    assert overview["total_amount"] == 2000.0
    groups = {g["tenant_id"]: g for g in overview["data"]}
    assert groups[first.tenant_id]["payment_count"] == 3
    assert groups[first.tenant_id]["total_amount"] == 1700.0
    assert groups[second.tenant_id]["total_amount"] == 300.0


def test_get_payment_prefers_invoice_payments(session, clock, ledger, make_invoice):
    invoice = make_invoice()
    _, payment = ledger.pay_invoice(invoice.id, 400)
    bill = _light_bill(session, clock, invoice)
    ledger.pay_light_bill(bill.id, 70)
    assert payment.id == bill.id

    found = ledger.get_payment(payment.id)
    assert found["type"] == "invoice"
    assert found["invoice"].id == invoice.id

    found = ledger.get_payment(bill.id, kind="light_bill")
    assert found["type"] == "light_bill"
    assert found["amount"] == Decimal("70.00")
    assert found["light_bill"].id == bill.id


def test_get_payment_falls_back_to_light_bill(session, clock, ledger, make_invoice):
    invoice = make_invoice()
    bill = _light_bill(session, clock, invoice)
    ledger.pay_light_bill(bill.id, 70)

    assert ledger.get_payment(bill.id)["type"] == "light_bill"


def test_get_payment_missing(session, clock, ledger, make_invoice):
    invoice = make_invoice()
    bill = _light_bill(session, clock, invoice)

    with pytest.raises(NotFoundError, match="Payment not found"):
        ledger.get_payment(bill.id)
    with pytest.raises(InvalidInputError, match="Payment type"):
        ledger.get_payment(bill.id, kind="deposit")


class TestConcurrentPayments:
    """Two sessions on one SQLite file, each with its own connection."""

    @pytest.fixture
    def invoice_id(self, file_database, clock, seed_lease):
        session = file_database.get_session_direct()
        seed_lease(session, rent_per_month=Decimal("1000"))
        result = InvoiceService(
            session, clock=clock, notifier=NotificationService(session, webhook_url="")
        ).generate_monthly_invoices(3, 2024)
        invoice_id = result.items[0].id
        session.close()
        return invoice_id

    @pytest.fixture
    def sessions(self, file_database):
        first = file_database.get_session_direct()
        second = file_database.get_session_direct()
        yield first, second
        first.close()
        second.close()

    @staticmethod
    def _ledger(session, clock):
        return PaymentLedger(session, clock=clock, notifier=NotificationService(session, webhook_url=""))

    def test_jointly_exceeding_payments_one_rejected(self, file_database, clock, invoice_id, sessions):
        session_a, session_b = sessions
        # session A has already read the invoice with nothing paid
        assert session_a.get(Invoice, invoice_id).paid_amount == Decimal("0.00")

        self._ledger(session_b, clock).pay_invoice(invoice_id, Decimal("600"))

        with pytest.raises(ConflictError, match="Maximum allowable payment: 400.00"):
            self._ledger(session_a, clock).pay_invoice(invoice_id, Decimal("600"))

        check = file_database.get_session_direct()
        invoice = check.get(Invoice, invoice_id)
        assert invoice.paid_amount == Decimal("600.00")
        assert invoice.status == "partially_paid"
        assert check.query(Payment).count() == 1
        check.close()

    def test_payments_that_fit_are_both_kept(self, file_database, clock, invoice_id, sessions):
        session_a, session_b = sessions
        assert session_a.get(Invoice, invoice_id).paid_amount == Decimal("0.00")

        self._ledger(session_b, clock).pay_invoice(invoice_id, Decimal("600"))
        invoice, _ = self._ledger(session_a, clock).pay_invoice(invoice_id, Decimal("400"))

        assert invoice.paid_amount == Decimal("1000.00")
        assert invoice.status == "paid"

        check = file_database.get_session_direct()
        payments = check.query(Payment).all()
        assert sorted(p.amount for p in payments) == [Decimal("400.00"), Decimal("600.00")]
        check.close()

    def test_light_bill_payments_do_not_overpay(self, file_database, clock, invoice_id, sessions):
        session_a, session_b = sessions
        setup = file_database.get_session_direct()
        invoice = setup.get(Invoice, invoice_id)
        bill_id = LightBillService(setup, clock=clock).create_light_bill(LightBillInput(
            room_id=invoice.room_id,
            units_consumed=Decimal("100"),
            rate_per_unit=Decimal("8"),
            fixed_charge=Decimal("50"),
            tax=Decimal("20"),
        )).id
        setup.close()
        assert session_a.get(LightBill, bill_id).paid_amount == Decimal("0.00")

        self._ledger(session_b, clock).pay_light_bill(bill_id, Decimal("700"))

        with pytest.raises(ConflictError, match="Maximum allowable payment: 370.00"):
            self._ledger(session_a, clock).pay_light_bill(bill_id, Decimal("700"))

        check = file_database.get_session_direct()
        assert check.get(LightBill, bill_id).paid_amount == Decimal("700.00")
        check.close()

"""
Tests for NotificationService: storage, webhook delivery and read state.
"""

import httpx

from rentdesk.database.models import Notification
from rentdesk.services.notification import NotificationService


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_notify_stores_notification(session, notifier):
    notifier.notify("overdue", {"message": "Invoice #1 is overdue", "entity_type": "Invoice", "entity_id": 1})

    stored = session.query(Notification).one()
    assert stored.title == "Overdue Invoice"
    assert stored.priority == "high"
    assert stored.related_entity_type == "Invoice"
    assert stored.is_read is False


def test_payload_values_are_made_json_safe(session, notifier):
    from decimal import Decimal
    from datetime import date

    notifier.notify("payment_received", {"amount": Decimal("400.00"), "date": date(2024, 3, 1)})

    payload = session.query(Notification).one().payload
    assert payload == {"amount": "400.00", "date": "2024-03-01"}


def test_webhook_receives_notification(session):
    received = []

    def handler(request):
        received.append(request)
        return httpx.Response(200)

    service = NotificationService(session, webhook_url="http://hooks.local/rent", http_client=_client(handler))
    service.notify("invoice_generated", {"message": "Invoice #3 generated"})

    assert len(received) == 1
    assert b"Invoice #3 generated" in received[0].content


def test_webhook_failure_is_swallowed(session):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    service = NotificationService(session, webhook_url="http://hooks.local/rent", http_client=_client(handler))
    notification = service.notify("maintenance", {"message": "Leaking tap"})

    assert notification is not None
    assert session.query(Notification).count() == 1


def test_mark_read(session, notifier):
    first = notifier.notify("overdue", {"message": "a"})
    notifier.notify("overdue", {"message": "b"})

    assert notifier.mark_read(first.id) == 1
    assert notifier.get_unread_count() == 1
    assert notifier.mark_read() == 1
    assert notifier.list_notifications(unread_only=True) == []
    assert len(notifier.list_notifications()) == 2

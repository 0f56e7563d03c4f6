import json

import httpx
import pytest

from app.config.settings import settings
from app.core.errors import ExternalServiceFailure
from app.models.order import Order
from app.models.profile import UserProfile
from app.services.notifications.email_service import EmailService, render_confirmation_email, status_message
from app.services.notifications.notification_service import NotificationService
from app.tasks import notification_tasks
from app.tasks.utils.idempotency import DuplicateTaskInvocation, Idempotency

ORDER = Order(
    id="o1",
    order_number="1001",
    user_id="user-customer",
    status="ready",
    items=[{"title": "Jollof Rice", "quantity": 2, "totalPrice": 37.98}],
    subtotal=37.98,
    delivery_fee=2.99,
    tax=3.04,
    total=44.01,
    delivery_address={"street": "1 Main St", "city": "Philadelphia", "state": "PA", "zipCode": "19139"},
)
CUSTOMER = UserProfile(id="user-customer", email="ada@example.com", full_name="Ada Obi")


class FakeTask:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def delay(self, **kwargs):
        if self.fail:
            raise ConnectionError("broker down")
        self.calls.append(kwargs)


class FakeRedis:
    def __init__(self):
        self.keys = {}

    def set(self, name, value, nx=False, ex=None):
        if nx and name in self.keys:
            return None
        self.keys[name] = value
        return True

    def delete(self, name):
        self.keys.pop(name, None)


def test_status_change_enqueues_email():
    status_task = FakeTask()
    service = NotificationService(status_task=status_task, confirmation_task=FakeTask())
    assert service.order_status_changed(ORDER, CUSTOMER) is True
    assert status_task.calls == [{
        "order_id": "o1",
        "new_status": "ready",
        "customer_email": "ada@example.com",
        "customer_name": "Ada Obi",
        "order_number": "1001",
    }]


def test_confirmation_carries_order_snapshot():
    confirmation_task = FakeTask()
    service = NotificationService(status_task=FakeTask(), confirmation_task=confirmation_task)
    assert service.order_confirmed(ORDER, CUSTOMER) is True
    [call] = confirmation_task.calls
    assert call["order"]["order_number"] == "1001"
    assert call["order"]["status"] == "ready"


def test_customer_without_email_is_skipped():
    status_task = FakeTask()
    service = NotificationService(status_task=status_task, confirmation_task=FakeTask())
    assert service.order_status_changed(ORDER, UserProfile(id="u", email=None)) is False
    assert service.order_status_changed(ORDER, None) is False
    assert status_task.calls == []


def test_broker_failure_does_not_raise():
    service = NotificationService(status_task=FakeTask(fail=True), confirmation_task=FakeTask())
    assert service.order_status_changed(ORDER, CUSTOMER) is False


def recording_client(status_code=200):
    sent = []

    def handler(request):
        sent.append(request)
        return httpx.Response(status_code, json={"id": "email_1"})

    return httpx.Client(transport=httpx.MockTransport(handler)), sent


def test_status_email_through_resend(monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(settings, "SENDGRID_API_KEY", None)
    http_client, sent = recording_client()

    assert EmailService(http_client=http_client).send_order_status_email(
        "o1", "ready", "ada@example.com", "Ada Obi", "1001"
    ) is True

    [request] = sent
    assert str(request.url) == "https://api.resend.com/emails"
    assert request.headers["Authorization"] == "Bearer re_test"
    body = json.loads(request.content)
    assert body["to"] == "ada@example.com"
    assert body["subject"] == "Order Ready - Order #1001"
    assert "Your order is ready" in body["html"]


def test_confirmation_email_through_sendgrid(monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", None)
    monkeypatch.setattr(settings, "SENDGRID_API_KEY", "sg_test")
    http_client, sent = recording_client(status_code=202)

    assert EmailService(http_client=http_client).send_order_confirmation_email(
        ORDER.to_supabase_dict(), "ada@example.com", "Ada Obi"
    ) is True

    body = json.loads(sent[0].content)
    assert str(sent[0].url) == "https://api.sendgrid.com/v3/mail/send"
    assert body["subject"] == "Order Confirmation - #1001"
    assert body["personalizations"][0]["to"][0]["email"] == "ada@example.com"


def test_no_provider_configured_skips_send(monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", None)
    monkeypatch.setattr(settings, "SENDGRID_API_KEY", None)
    http_client, sent = recording_client()
    assert EmailService(http_client=http_client).send_order_status_email(
        "o1", "ready", "ada@example.com", "Ada Obi", "1001"
    ) is False
    assert sent == []


def test_provider_error_raises(monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    http_client, _ = recording_client(status_code=500)
    with pytest.raises(ExternalServiceFailure):
        EmailService(http_client=http_client).send_order_status_email(
            "o1", "ready", "ada@example.com", "Ada Obi", "1001"
        )


def test_confirmation_body_lists_items_and_totals():
    html = render_confirmation_email(ORDER.to_supabase_dict(), "Ada <script>")
    assert "Jollof Rice" in html
    assert "$44.01" in html
    assert "19139" in html
    assert "<script>" not in html


def test_unknown_status_reads_as_confirmed():
    assert status_message("weird") == status_message("confirmed")


def test_order_back_in_pending_is_not_called_confirmed(monkeypatch):
    assert status_message("pending")["title"] == "Order Received"

    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
    http_client, sent = recording_client()
    EmailService(http_client=http_client).send_order_status_email("o1", "pending", "ada@example.com", "Ada Obi", "1001")
    body = json.loads(sent[0].content)
    assert body["subject"] == "Order Received - Order #1001"
    assert "Order Confirmed" not in body["html"]


def test_idempotency_guard():
    redis_client = FakeRedis()
    guard = Idempotency(redis_client)

    with guard.guard("k", ttl_seconds=60):
        pass
    with pytest.raises(DuplicateTaskInvocation):
        with guard.guard("k", ttl_seconds=60):
            pass

    with pytest.raises(ValueError):
        with guard.guard("other", ttl_seconds=60):
            raise ValueError("send failed")
    assert "other" not in redis_client.keys


def test_confirmation_task_sends_once(monkeypatch):
    redis_client = FakeRedis()
    sends = []

    class RecordingEmailService:
        def send_order_confirmation_email(self, order, customer_email, customer_name):
            sends.append(order["id"])
            return True

    monkeypatch.setattr(notification_tasks, "_redis_client", lambda: redis_client)
    monkeypatch.setattr(notification_tasks, "EmailService", RecordingEmailService)

    order = ORDER.to_supabase_dict()
    assert notification_tasks.send_order_confirmation_email(order, "ada@example.com", "Ada Obi") is True
    assert notification_tasks.send_order_confirmation_email(order, "ada@example.com", "Ada Obi") is False
    assert sends == ["o1"]

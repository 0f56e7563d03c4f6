import time

import pytest

from app.config.settings import settings
from app.core.dependencies import get_notifier
from app.core.errors import SignatureInvalid
from app.main import app
from app.services.external.stripe_service import StripeService
from app.services.notifications.notification_service import NotificationService

from conftest import WEBHOOK_SECRET, BrokenNotifier, checkout_event, sign_payload

COMPLETED = "checkout.session.completed"
EXPIRED = "checkout.session.expired"


def deliver(client, payload, signature=None, path="/api/v1/webhooks/payment"):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["Stripe-Signature"] = signature
    return client.post(path, content=payload.encode(), headers=headers)


def test_completed_session_marks_order_paid(client, db, notifier, order_factory):
    order = order_factory(status="pending_payment")
    payload = checkout_event(COMPLETED, order["id"], payment_intent="pi_abc")

    response = deliver(client, payload, sign_payload(payload))
    assert response.status_code == 200
    assert response.json() == {"received": True}

    row = db.row("orders", order["id"])
    assert row["status"] == "pending"
    assert row["payment_intent_id"] == "pi_abc"
    assert len(notifier.confirmations) == 1


def test_redelivered_event_is_a_no_op(client, db, notifier, order_factory):
    order = order_factory(status="pending_payment")
    payload = checkout_event(COMPLETED, order["id"])

    assert deliver(client, payload, sign_payload(payload)).status_code == 200
    db.row("orders", order["id"])["status"] = "preparing"
    assert deliver(client, payload, sign_payload(payload)).status_code == 200

    assert db.row("orders", order["id"])["status"] == "preparing"
    assert len(notifier.confirmations) == 1


def test_bad_signature_changes_nothing(client, db, order_factory):
    order = order_factory(status="pending_payment")
    payload = checkout_event(COMPLETED, order["id"])

    response = deliver(client, payload, sign_payload(payload, secret="whsec_wrong"))
    assert response.status_code == 400
    assert response.json() == {"error": "Webhook signature verification failed"}
    assert db.row("orders", order["id"])["status"] == "pending_payment"
    assert ("orders", "update") not in db.calls


def test_missing_signature_header(client, order_factory):
    order = order_factory(status="pending_payment")
    response = deliver(client, checkout_event(COMPLETED, order["id"]))
    assert response.status_code == 400
    assert response.json() == {"error": "No signature provided"}


def test_stale_timestamp_is_rejected(client, order_factory):
    order = order_factory(status="pending_payment")
    payload = checkout_event(COMPLETED, order["id"])
    response = deliver(client, payload, sign_payload(payload, timestamp=int(time.time()) - 3600))
    assert response.status_code == 400


def test_expired_session_cancels_unpaid_order(client, db, order_factory):
    unpaid = order_factory(status="pending_payment")
    payload = checkout_event(EXPIRED, unpaid["id"])
    assert deliver(client, payload, sign_payload(payload)).status_code == 200
    assert db.row("orders", unpaid["id"])["status"] == "cancelled"


def test_expired_session_leaves_paid_order_alone(client, db, order_factory):
    paid = order_factory(status="pending")
    payload = checkout_event(EXPIRED, paid["id"])
    assert deliver(client, payload, sign_payload(payload)).status_code == 200
    assert db.row("orders", paid["id"])["status"] == "pending"


def test_events_without_order_or_of_other_types_are_acknowledged(client, db):
    for payload in (checkout_event(COMPLETED), checkout_event("invoice.paid", "whatever")):
        response = deliver(client, payload, sign_payload(payload))
        assert response.status_code == 200
    assert ("orders", "update") not in db.calls


def test_storage_failure_asks_provider_to_retry(client, db, order_factory):
    order = order_factory(status="pending_payment")
    db.fail("orders", "update")
    payload = checkout_event(COMPLETED, order["id"])

    response = deliver(client, payload, sign_payload(payload))
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process payment confirmation"}


def test_legacy_path_is_served(client, db, order_factory):
    order = order_factory(status="pending_payment")
    payload = checkout_event(COMPLETED, order["id"])
    response = deliver(client, payload, sign_payload(payload), path="/api/v1/webhooks/stripe")
    assert response.status_code == 200
    assert db.row("orders", order["id"])["status"] == "pending"


def test_missing_secret_fails_closed(monkeypatch):
    monkeypatch.setattr(settings, "STRIPE_WEBHOOK_SECRET", None)
    payload = checkout_event(COMPLETED, "o1")
    with pytest.raises(SignatureInvalid) as exc:
        StripeService().verify_webhook(payload.encode(), sign_payload(payload))
    assert exc.value.message == "Webhook secret not configured"


def test_verified_payload_must_be_an_event():
    service = StripeService(webhook_secret=WEBHOOK_SECRET)
    payload = '{"not": "an event"}'
    with pytest.raises(SignatureInvalid):
        service.verify_webhook(payload.encode(), sign_payload(payload))


def test_undecodable_body_is_rejected():
    service = StripeService(webhook_secret=WEBHOOK_SECRET)
    payload = "{not json"
    with pytest.raises(SignatureInvalid) as exc:
        service.verify_webhook(payload.encode(), sign_payload(payload))
    assert exc.value.message == "Invalid webhook payload"


def test_verified_event_exposes_session():
    service = StripeService(webhook_secret=WEBHOOK_SECRET)
    payload = checkout_event(COMPLETED, "o1", payment_intent="pi_abc")
    event = service.verify_webhook(payload.encode(), sign_payload(payload))
    assert event["type"] == COMPLETED
    assert event["data"]["object"]["metadata"]["orderId"] == "o1"
    assert event["data"]["object"]["payment_intent"] == "pi_abc"


class QueuedTask:
    def __init__(self):
        self.calls = []

    def delay(self, **kwargs):
        self.calls.append(kwargs)


def test_paid_order_enqueues_confirmation_email(client, db, order_factory):
    confirmation = QueuedTask()
    app.dependency_overrides[get_notifier] = lambda: NotificationService(
        status_task=QueuedTask(), confirmation_task=confirmation
    )
    order = order_factory(status="pending_payment")
    payload = checkout_event(COMPLETED, order["id"])

    response = deliver(client, payload, sign_payload(payload))
    assert response.status_code == 200
    assert db.row("orders", order["id"])["status"] == "pending"
    [call] = confirmation.calls
    assert call["order"]["id"] == order["id"]
    assert call["customer_email"] == "ada@example.com"
    assert call["customer_name"] == "Ada Obi"


def test_notification_failure_does_not_fail_the_webhook(client, db, order_factory):
    app.dependency_overrides[get_notifier] = lambda: BrokenNotifier()
    order = order_factory(status="pending_payment")
    payload = checkout_event(COMPLETED, order["id"])

    response = deliver(client, payload, sign_payload(payload))
    assert response.status_code == 200
    assert response.json() == {"received": True}
    assert db.row("orders", order["id"])["status"] == "pending"

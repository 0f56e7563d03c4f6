from datetime import datetime, timedelta, timezone

import pytest

from app.core.dependencies import get_notifier
from app.core.errors import ConcurrentModification, InvalidInput, InvalidTransition, NotFound
from app.main import app
from app.models.order import OrderStatus
from app.services.business.order_service import OrderService
from app.services.stores import OrderStore, ProfileStore

from conftest import BrokenNotifier, bearer, iso


@pytest.fixture
def service(db, notifier):
    return OrderService(OrderStore(db), ProfileStore(db), notifier, strict_transitions=False)


@pytest.fixture
def strict_service(db, notifier):
    return OrderService(OrderStore(db), ProfileStore(db), notifier, strict_transitions=True)


def test_admin_may_move_order_forward_and_customer_is_notified(service, db, notifier, order_factory):
    order = order_factory(status="pending")
    updated = service.update_status(order["id"], "preparing", actor="user-orders")

    assert updated.status == OrderStatus.PREPARING
    assert db.row("orders", order["id"])["status"] == "preparing"
    [(notified_order, customer)] = notifier.status_changes
    assert notified_order.status == OrderStatus.PREPARING
    assert customer.email == "ada@example.com"


@pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
def test_terminal_orders_never_move(service, notifier, order_factory, terminal):
    order = order_factory(status=terminal)
    with pytest.raises(InvalidTransition) as exc:
        service.update_status(order["id"], "pending")
    assert exc.value.message == f"Order is already {terminal}"
    assert exc.value.status_code == 409
    assert notifier.status_changes == []


def test_same_status_is_a_no_op(service, db, notifier, order_factory):
    order = order_factory(status="ready")
    calls_before = len(db.calls)
    result = service.update_status(order["id"], "ready")
    assert result.status == OrderStatus.READY
    assert notifier.status_changes == []
    assert ("orders", "update") not in db.calls[calls_before:]


def test_order_awaiting_payment_can_only_be_cancelled(service, order_factory):
    order = order_factory(status="pending_payment")
    with pytest.raises(InvalidTransition):
        service.update_status(order["id"], "confirmed")
    assert service.update_status(order["id"], "cancelled").status == OrderStatus.CANCELLED


def test_pending_payment_cannot_be_set_by_hand(service, order_factory):
    order = order_factory(status="pending")
    with pytest.raises(InvalidInput) as exc:
        service.update_status(order["id"], "pending_payment")
    assert not isinstance(exc.value, InvalidTransition)


def test_unknown_status_is_invalid_input(service, order_factory):
    order = order_factory()
    with pytest.raises(InvalidInput) as exc:
        service.update_status(order["id"], "shipped")
    assert exc.value.message == "Invalid order status: shipped"


def test_missing_order(service):
    with pytest.raises(NotFound):
        service.update_status("nope", "confirmed")


def test_strict_mode_allows_only_next_step_or_cancel(strict_service, order_factory):
    order = order_factory(status="pending")
    with pytest.raises(InvalidTransition):
        strict_service.update_status(order["id"], "preparing")
    assert strict_service.update_status(order["id"], "confirmed").status == OrderStatus.CONFIRMED

    ready = order_factory(status="ready")
    assert strict_service.update_status(ready["id"], "cancelled").status == OrderStatus.CANCELLED


def test_concurrent_change_is_not_overwritten(db, notifier, order_factory):
    order = order_factory(status="pending")
    store = OrderStore(db)
    original_get = store.get

    def get_then_someone_else_writes(order_id):
        snapshot = original_get(order_id)
        db.row("orders", order_id)["status"] = "ready"
        return snapshot

    store.get = get_then_someone_else_writes
    service = OrderService(store, ProfileStore(db), notifier, strict_transitions=False)

    with pytest.raises(ConcurrentModification):
        service.update_status(order["id"], "confirmed")
    assert db.row("orders", order["id"])["status"] == "ready"
    assert notifier.status_changes == []


def test_mark_paid_is_idempotent(service, db, notifier, order_factory):
    order = order_factory(status="pending_payment")

    paid = service.mark_paid(order["id"], "pi_123")
    assert paid.status == OrderStatus.PENDING
    assert db.row("orders", order["id"])["payment_intent_id"] == "pi_123"

    assert service.mark_paid(order["id"], "pi_123") is None
    assert len(notifier.confirmations) == 1


def test_notification_failure_keeps_the_status_change(db, order_factory):
    service = OrderService(OrderStore(db), ProfileStore(db), BrokenNotifier(), strict_transitions=False)
    order = order_factory(status="pending")
    assert service.update_status(order["id"], "preparing").status == OrderStatus.PREPARING
    assert db.row("orders", order["id"])["status"] == "preparing"

    unpaid = order_factory(status="pending_payment")
    assert service.mark_paid(unpaid["id"], "pi_9").status == OrderStatus.PENDING
    assert db.row("orders", unpaid["id"])["status"] == "pending"


def test_expiry_only_cancels_unpaid_orders(service, db, order_factory):
    unpaid = order_factory(status="pending_payment")
    paid = order_factory(status="pending")

    assert service.mark_expired(unpaid["id"]).status == OrderStatus.CANCELLED
    assert service.mark_expired(paid["id"]) is None
    assert db.row("orders", paid["id"])["status"] == "pending"


def test_cancel_abandoned_orders(service, db, order_factory):
    now = datetime.now(timezone.utc)
    stale = order_factory(status="pending_payment", created_at=iso(now - timedelta(hours=30)))
    fresh = order_factory(status="pending_payment", created_at=iso(now - timedelta(hours=1)))
    old_paid = order_factory(status="pending", created_at=iso(now - timedelta(hours=30)))

    assert service.cancel_abandoned_orders(iso(now - timedelta(hours=24))) == 1
    assert db.row("orders", stale["id"])["status"] == "cancelled"
    assert db.row("orders", fresh["id"])["status"] == "pending_payment"
    assert db.row("orders", old_paid["id"])["status"] == "pending"


# HTTP

def test_status_endpoint(client, db, notifier, order_factory):
    order = order_factory(status="pending")
    response = client.patch(
        f"/api/v1/admin/orders/{order['id']}/status", json={"status": "confirmed"}, headers=bearer("orders-token")
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    assert len(notifier.status_changes) == 1


def test_status_endpoint_errors(client, order_factory):
    delivered = order_factory(status="delivered")
    response = client.patch(
        f"/api/v1/admin/orders/{delivered['id']}/status", json={"status": "cancelled"}, headers=bearer("orders-token")
    )
    assert response.status_code == 409
    assert response.json() == {"error": "Order is already delivered"}

    response = client.patch(
        f"/api/v1/admin/orders/{delivered['id']}/status", json={"status": "cancelled"}, headers=bearer("customer-token")
    )
    assert response.status_code == 403


def test_status_endpoint_succeeds_when_notification_fails(client, db, order_factory):
    app.dependency_overrides[get_notifier] = lambda: BrokenNotifier()
    order = order_factory(status="confirmed")
    response = client.patch(
        f"/api/v1/admin/orders/{order['id']}/status", json={"status": "ready"}, headers=bearer("orders-token")
    )
    assert response.status_code == 200
    assert db.row("orders", order["id"])["status"] == "ready"


def test_admin_order_list_attaches_customer(client, order_factory):
    order_factory(status="pending")
    order_factory(status="ready", user_id="user-other")

    response = client.get("/api/v1/admin/orders?status=ready", headers=bearer("orders-token"))
    assert response.status_code == 200
    [order] = response.json()
    assert order["profile"] == {"id": "user-other", "full_name": "Ben Eze", "email": "ben@example.com", "phone": None}

    assert client.get("/api/v1/admin/orders?status=lost", headers=bearer("orders-token")).status_code == 400


def test_customers_only_see_their_own_orders(client, order_factory):
    mine = order_factory()
    theirs = order_factory(user_id="user-other")

    response = client.get("/api/v1/user/orders", headers=bearer("customer-token"))
    assert [o["id"] for o in response.json()] == [mine["id"]]

    assert client.get(f"/api/v1/user/orders/{mine['id']}", headers=bearer("customer-token")).status_code == 200
    response = client.get(f"/api/v1/user/orders/{theirs['id']}", headers=bearer("customer-token"))
    assert response.status_code == 404


def test_abandoned_order_sweep_task(monkeypatch, db, order_factory):
    from app.tasks import order_tasks

    monkeypatch.setattr(order_tasks, "get_supabase_service_client", lambda: db)
    stale = order_factory(status="pending_payment", created_at=iso(datetime.now(timezone.utc) - timedelta(hours=48)))

    assert order_tasks.cancel_abandoned_orders() == 1
    assert db.row("orders", stale["id"])["status"] == "cancelled"


def test_sweep_is_scheduled_on_the_default_queue():
    from app.tasks import order_tasks
    from app.tasks.app import celery_app

    entry = celery_app.conf.beat_schedule["cancel-abandoned-orders"]
    assert entry["task"] == order_tasks.cancel_abandoned_orders.name
    assert not celery_app.conf.task_routes

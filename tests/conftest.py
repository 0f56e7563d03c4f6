"""
Shared fixtures.

The app runs against an in-memory stand-in for the Supabase client that
understands the PostgREST builder calls the stores make. Auth, payments and
notifications are replaced through ``app.dependency_overrides``.
"""
import copy
import hashlib
import hmac
import itertools
import json
import time
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import (
    get_identity_resolver,
    get_notifier,
    get_payment_provider,
    get_supabase,
)
from app.core.errors import ExternalServiceFailure
from app.core.supabase_auth import Identity
from app.main import app
from app.models.profile import UserProfile
from app.services.external.stripe_service import StripeService

WEBHOOK_SECRET = "whsec_test_secret"

CUSTOMER_ID = "user-customer"
OTHER_CUSTOMER_ID = "user-other"
SUPER_ADMIN_ID = "user-super"
ORDERS_ADMIN_ID = "user-orders"
NO_PROFILE_ID = "user-no-profile"

TOKENS = {
    "customer-token": (CUSTOMER_ID, "ada@example.com"),
    "other-token": (OTHER_CUSTOMER_ID, "ben@example.com"),
    "super-token": (SUPER_ADMIN_ID, "owner@example.com"),
    "orders-token": (ORDERS_ADMIN_ID, "kitchen@example.com"),
    "noprofile-token": (NO_PROFILE_ID, "new@example.com"),
}


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def iso(dt):
    return dt.astimezone(timezone.utc).isoformat()


# In-memory Supabase

class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db, table_name):
        self.db = db
        self.table_name = table_name
        self.action = "select"
        self.payload = None
        self.filters = []
        self.ordering = None
        self.row_limit = None
        self.count_mode = None
        self.head = False

    def select(self, fields="*", count=None, head=False):
        self.action = "select"
        self.count_mode = count
        self.head = head
        return self

    def insert(self, data):
        self.action = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.action = "update"
        self.payload = data
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, field, value):
        self.filters.append(lambda row: row.get(field) == value)
        return self

    def in_(self, field, values):
        values = list(values)
        self.filters.append(lambda row: row.get(field) in values)
        return self

    def gte(self, field, value):
        self.filters.append(lambda row: row.get(field) is not None and row.get(field) >= value)
        return self

    def lt(self, field, value):
        self.filters.append(lambda row: row.get(field) is not None and row.get(field) < value)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, size):
        self.row_limit = size
        return self

    def _matching(self):
        return [row for row in self.db.tables[self.table_name] if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table_name, self.action))
        if (self.table_name, self.action) in self.db.failures:
            raise RuntimeError(f"simulated {self.action} failure on {self.table_name}")

        if self.action == "insert":
            row = copy.deepcopy(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            self.db.tables[self.table_name].append(row)
            return FakeResponse([copy.deepcopy(row)])

        matching = self._matching()
        if self.action == "update":
            for row in matching:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse(copy.deepcopy(matching))

        if self.action == "delete":
            self.db.tables[self.table_name] = [
                row for row in self.db.tables[self.table_name] if row not in matching
            ]
            return FakeResponse(copy.deepcopy(matching))

        rows = matching
        if self.ordering:
            column, desc = self.ordering
            rows = sorted(rows, key=lambda row: str(row.get(column) or ""), reverse=desc)
        count = len(rows) if self.count_mode else None
        if self.row_limit:
            rows = rows[: self.row_limit]
        if self.head:
            return FakeResponse([], count)
        return FakeResponse(copy.deepcopy(rows), count)


class FakeRpc:
    def __init__(self, db, name):
        self.db = db
        self.name = name

    def execute(self):
        self.db.calls.append(("rpc", self.name))
        if ("rpc", self.name) in self.db.failures:
            raise RuntimeError(f"simulated rpc failure: {self.name}")
        if self.name == "generate_order_number":
            return FakeResponse(str(next(self.db.order_numbers)))
        return FakeResponse(None)


class FakeAuthAdmin:
    def __init__(self):
        self.email_updates = []
        self.fail = False

    def update_user_by_id(self, user_id, attributes):
        if self.fail:
            raise RuntimeError("auth admin unavailable")
        self.email_updates.append((user_id, attributes))
        return SimpleNamespace(user=SimpleNamespace(id=user_id, **attributes))


class FakeSupabase:
    def __init__(self):
        self.tables = defaultdict(list)
        self.failures = set()
        self.calls = []
        self.order_numbers = itertools.count(1001)
        self.auth = SimpleNamespace(admin=FakeAuthAdmin())

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params=None):
        return FakeRpc(self, name)

    def fail(self, table_name, action):
        self.failures.add((table_name, action))

    def seed(self, table_name, *rows):
        stored = []
        for row in rows:
            row = copy.deepcopy(row)
            row.setdefault("id", str(uuid.uuid4()))
            self.tables[table_name].append(row)
            stored.append(row)
        return stored[0] if len(stored) == 1 else stored

    def row(self, table_name, row_id):
        for row in self.tables[table_name]:
            if row.get("id") == row_id:
                return row
        return None


# Auth, payments, notifications

class FakeResolver:
    """Maps bearer tokens to identities, reading the profile row on every call."""

    def __init__(self, db, tokens):
        self.db = db
        self.tokens = tokens

    def resolve(self, token):
        if not token or token not in self.tokens:
            return None
        user_id, email = self.tokens[token]
        row = self.db.row("profiles", user_id)
        profile = UserProfile.from_dict(copy.deepcopy(row)) if row else None
        return Identity(user_id=user_id, email=email, profile=profile)


class FakePayments(StripeService):
    """Real webhook verification, recorded checkout sessions."""

    def __init__(self):
        super().__init__(webhook_secret=WEBHOOK_SECRET, tolerance=300)
        self.sessions = []
        self.fail = False

    def create_checkout_session(self, line_items, success_url, cancel_url, metadata, customer_email=None):
        if self.fail:
            raise ExternalServiceFailure("Failed to create payment session")
        self.sessions.append({
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
            "customer_email": customer_email,
        })
        return f"cs_test_{len(self.sessions)}"


class RecordingNotifier:
    def __init__(self):
        self.status_changes = []
        self.confirmations = []

    def order_status_changed(self, order, customer):
        self.status_changes.append((order, customer))
        return True

    def order_confirmed(self, order, customer):
        self.confirmations.append((order, customer))
        return True


class BrokenNotifier:
    """A notifier whose transport is down."""

    def order_status_changed(self, order, customer):
        raise ConnectionError("broker down")

    def order_confirmed(self, order, customer):
        raise ConnectionError("broker down")


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp=None) -> str:
    timestamp = int(time.time()) if timestamp is None else timestamp
    signature = hmac.new(secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def checkout_event(event_type, order_id=None, payment_intent="pi_test_1", session_id="cs_test_1") -> str:
    metadata = {"orderId": order_id} if order_id else {}
    return json.dumps({
        "id": f"evt_{uuid.uuid4().hex[:12]}",
        "type": event_type,
        "data": {"object": {"id": session_id, "payment_intent": payment_intent, "metadata": metadata}},
    })


# Fixtures

@pytest.fixture
def db():
    supabase = FakeSupabase()
    supabase.seed(
        "profiles",
        {"id": CUSTOMER_ID, "role": "customer", "permissions": None, "full_name": "Ada Obi",
         "email": "ada@example.com", "phone": "+12155550100", "created_at": "2026-01-01T00:00:00+00:00"},
        {"id": OTHER_CUSTOMER_ID, "role": "customer", "permissions": None, "full_name": "Ben Eze",
         "email": "ben@example.com", "created_at": "2026-01-02T00:00:00+00:00"},
        {"id": SUPER_ADMIN_ID, "role": "admin", "permissions": None, "full_name": "Owner",
         "email": "owner@example.com", "created_at": "2026-01-03T00:00:00+00:00"},
        {"id": ORDERS_ADMIN_ID, "role": "admin", "permissions": ["orders"], "full_name": "Kitchen",
         "email": "kitchen@example.com", "created_at": "2026-01-04T00:00:00+00:00"},
    )
    return supabase


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def payments():
    return FakePayments()


@pytest.fixture
def client(db, notifier, payments):
    resolver = FakeResolver(db, TOKENS)
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_identity_resolver] = lambda: resolver
    app.dependency_overrides[get_payment_provider] = lambda: payments
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def order_factory(db):
    def make_order(**overrides):
        row = {
            "order_number": "1001",
            "user_id": CUSTOMER_ID,
            "items": [{"title": "Jollof Rice", "quantity": 1, "unitPrice": 18.99, "totalPrice": 18.99}],
            "subtotal": 18.99,
            "delivery_fee": 2.99,
            "tax": 1.52,
            "total": 23.5,
            "delivery_address": {"street": "1 Main St", "city": "Philadelphia", "state": "PA", "zipCode": "19139"},
            "status": "pending",
            "created_at": iso(datetime.now(timezone.utc)),
        }
        row.update(overrides)
        return db.seed("orders", row)

    return make_order

import os

# Environnement de test fixé avant l'import de marketplace.config
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789abcdef0123456789abcdef")
os.environ["DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS"] = "1"
os.environ["STRIPE_SECRET_KEY"] = ""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from marketplace.app import app as fastapi_app
from marketplace.auth.service import issue_token
from marketplace.payments.repository import DuplicatePaymentError
from marketplace.payments.stripe_client import CheckoutSessionNotFound

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class UniqueViolation(Exception):
    """Imite l'erreur PostgREST 23505 (contrainte d'unicité)."""
    code = "23505"


class InMemoryStore:
    """
    Remplace les repositories Supabase par des listes en mémoire.
    created_at est strictement croissant pour rendre les tris déterministes.
    """

    def __init__(self):
        self.users: List[dict] = []
        self.posts: List[dict] = []
        self.payments: List[dict] = []
        self.notifications: List[dict] = []
        self._seq = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _new_row(self, data: Dict[str, Any]) -> dict:
        n = next(self._seq)
        row = dict(data)
        row.setdefault("id", f"id-{n}")
        row["created_at"] = (self._clock + timedelta(seconds=n)).isoformat()
        return row

    @staticmethod
    def _newest_first(rows: List[dict]) -> List[dict]:
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    # --- users ---
    def get_user_by_email(self, email: str) -> Optional[dict]:
        return next((u for u in self.users if u["email"] == email), None)

    def insert_user(self, data: Dict[str, Any]) -> dict:
        if self.get_user_by_email(data["email"]):
            raise UniqueViolation('duplicate key value violates unique constraint "users_email_key"')
        row = self._new_row(data)
        self.users.append(row)
        return row

    # --- posts ---
    def list_posts(self) -> List[dict]:
        return self._newest_first(self.posts)

    def get_post(self, post_id: str) -> Optional[dict]:
        return next((dict(p) for p in self.posts if p["id"] == post_id), None)

    def create_post(self, data: Dict[str, Any]) -> dict:
        row = self._new_row(data)
        self.posts.append(row)
        return dict(row)

    def update_post(self, post_id: str, data: Dict[str, Any]) -> Optional[dict]:
        for p in self.posts:
            if p["id"] == post_id:
                p.update(data)
                return dict(p)
        return None

    def delete_post(self, post_id: str) -> bool:
        before = len(self.posts)
        self.posts = [p for p in self.posts if p["id"] != post_id]
        return len(self.posts) < before

    def add_post(self, **fields) -> dict:
        data = {"title": "Vélo", "content": "Bon état", "price": 10, "created_by": "admin-1"}
        data.update(fields)
        return self.create_post(data)

    # --- payments ---
    def insert_payment(self, *, session_id: Optional[str] = None, **fields) -> dict:
        if session_id and any(p.get("session_id") == session_id for p in self.payments):
            raise DuplicatePaymentError(session_id)
        data = dict(fields)
        if session_id:
            data["session_id"] = session_id
        row = self._new_row(data)
        self.payments.append(row)
        return dict(row)

    def find_matching_payment(self, *, post_id, buyer_email, amount, quantity) -> Optional[dict]:
        for p in sorted(self.payments, key=lambda r: r["created_at"]):
            if (
                p["post_id"] == str(post_id)
                and p.get("buyer_email") == buyer_email
                and p["amount"] == amount
                and p["quantity"] == quantity
            ):
                return dict(p)
        return None

    def find_payment_by_session(self, session_id: str) -> Optional[dict]:
        return next((dict(p) for p in self.payments if p.get("session_id") == session_id), None)

    # --- notifications ---
    def insert_notification(self, *, recipient: str, message: str, meta: Optional[dict] = None) -> dict:
        row = self._new_row({"recipient": recipient, "message": message, "meta": meta or {}, "read": False})
        self.notifications.append(row)
        return dict(row)

    def list_for_recipient(self, recipient: str) -> List[dict]:
        return self._newest_first([n for n in self.notifications if n["recipient"] == recipient])

    def mark_read(self, notification_id: str) -> Optional[dict]:
        for n in self.notifications:
            if n["id"] == notification_id:
                n["read"] = True
                return dict(n)
        return None


class FakeCheckoutProvider:
    """Fournisseur Checkout factice: les sessions restent 'unpaid' jusqu'à mark_paid()."""

    def __init__(self, publishable_key: str = "pk_test_123", currency: str = "usd"):
        self.publishable_key = publishable_key
        self.currency = currency
        self.sessions: Dict[str, dict] = {}
        self.fail_create = False

    def create_session(self, *, line_items, success_url, cancel_url, metadata) -> dict:
        if self.fail_create:
            raise RuntimeError("stripe down")
        sid = f"cs_test_{len(self.sessions) + 1}"
        total = sum(li["price_data"]["unit_amount"] * li["quantity"] for li in line_items)
        self.sessions[sid] = {
            "id": sid,
            "url": f"https://checkout.stripe.test/{sid}",
            "payment_status": "unpaid",
            "amount_total": total,
            "metadata": dict(metadata),
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        return dict(self.sessions[sid])

    def get_session(self, session_id: str) -> dict:
        if session_id not in self.sessions:
            raise CheckoutSessionNotFound(session_id)
        return dict(self.sessions[session_id])

    def mark_paid(self, session_id: str) -> None:
        self.sessions[session_id]["payment_status"] = "paid"


@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def store(monkeypatch) -> InMemoryStore:
    """Neutralise Supabase: chaque repository est redirigé vers le store en mémoire."""
    s = InMemoryStore()
    monkeypatch.setattr("marketplace.auth.service.get_user_by_email", s.get_user_by_email)
    monkeypatch.setattr("marketplace.auth.service.insert_user", s.insert_user)
    for name in ("list_posts", "get_post", "create_post", "update_post", "delete_post"):
        monkeypatch.setattr(f"marketplace.posts.repository.{name}", getattr(s, name))
    for name in ("insert_payment", "find_matching_payment", "find_payment_by_session"):
        monkeypatch.setattr(f"marketplace.payments.repository.{name}", getattr(s, name))
    for name in ("insert_notification", "list_for_recipient", "mark_read"):
        monkeypatch.setattr(f"marketplace.notifications.repository.{name}", getattr(s, name))
    return s

@pytest.fixture()
def checkout_provider() -> FakeCheckoutProvider:
    return FakeCheckoutProvider()

@pytest.fixture()
def client(app, store, checkout_provider) -> Generator[TestClient, None, None]:
    # Le lifespan conserve un fournisseur pré-positionné
    app.state.checkout_provider = checkout_provider
    with TestClient(app) as c:
        yield c
    app.state.checkout_provider = None

@pytest.fixture()
def admin_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {issue_token('admin-1', 'admin')}"}

@pytest.fixture()
def user_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {issue_token('user-1', 'user')}"}

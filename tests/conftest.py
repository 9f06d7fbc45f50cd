from datetime import date

import pytest
import requests

import api_client
from domain.models import Client
from services.item_service import update_item
from services.receipt_service import new_draft


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.content = b"" if payload is None else b"{}"

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """
    Stands in for api_client.session; answers are queued per (method, path).
    """

    def __init__(self):
        self.calls = []
        self.routes = {}

    def add(self, method, path, payload=None, status_code=200, exc=None):
        self.routes[(method, path)] = (payload, status_code, exc)

    def request(self, method, url, timeout=None, **kwargs):
        path = url[len(api_client.base_url):]
        self.calls.append({"method": method, "path": path, **kwargs})
        payload, status_code, exc = self.routes[(method, path)]
        if exc is not None:
            raise exc
        return FakeResponse(payload, status_code)


@pytest.fixture
def fake_session(monkeypatch):
    session = FakeSession()
    monkeypatch.setattr(api_client, "session", session)
    return session


@pytest.fixture
def client():
    return Client(id="c1", name="Golden Creations", shop_name="Golden Store",
                  phone_number="9845939045", address="123 Gold St", balance=12.5)


@pytest.fixture
def draft(client):
    d = new_draft(voucher_id="GA-2410-1234", today=date(2024, 10, 1))
    d.client = client
    return d


def fill_given(draft, product="Ring", pure_weight="10", pure_percent="92", melting="2"):
    item_id = next(iter(draft.given.items))
    for field_name, value in (
            ("product_name", product),
            ("pure_weight", pure_weight),
            ("pure_percent", pure_percent),
            ("melting", melting),
    ):
        update_item(draft.given, item_id, field_name, value)
    return item_id


def fill_received(draft, product="Chain", weight="50", stone="5", charge="10"):
    item_id = next(iter(draft.received.items))
    for field_name, value in (
            ("product_name", product),
            ("final_ornaments_wt", weight),
            ("stone_weight", stone),
            ("making_charge_percent", charge),
    ):
        update_item(draft.received, item_id, field_name, value)
    return item_id

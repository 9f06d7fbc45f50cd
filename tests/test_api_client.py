import requests

import api_client


def test_fetch_clients_wrapped(fake_session):
    fake_session.add("GET", "/clients", {"clients": [{"_id": "c1", "clientName": "Golden Creations"}]})

    ok, msg, clients = api_client.fetch_clients()

    assert ok
    assert clients[0].name == "Golden Creations"


def test_fetch_clients_bare_list(fake_session):
    fake_session.add("GET", "/clients", [{"_id": "c1", "clientName": "Golden Creations"}])
    ok, _, clients = api_client.fetch_clients()
    assert ok and len(clients) == 1


def test_fetch_clients_unexpected_shape(fake_session):
    fake_session.add("GET", "/clients", {"rows": []})

    ok, msg, clients = api_client.fetch_clients()

    assert not ok
    assert clients == []
    assert "Unexpected" in msg


def test_fetch_clients_network_error(fake_session):
    fake_session.add("GET", "/clients", exc=requests.ConnectionError("refused"))

    ok, msg, clients = api_client.fetch_clients()

    assert not ok
    assert msg == "Failed to load clients"


def test_server_message_is_used(fake_session):
    fake_session.add("POST", "/admin-receipts", {"message": "clientId is required"}, status_code=400)

    ok, msg, created = api_client.create_admin_receipt({"given": {}})

    assert not ok
    assert msg == "clientId is required"
    assert created is None


def test_create_posts_body(fake_session):
    fake_session.add("POST", "/admin-receipts", {"_id": "r1"})
    body = {"clientId": "c1", "status": "incomplete"}

    ok, _, created = api_client.create_admin_receipt(body)

    assert ok
    assert created == {"_id": "r1"}
    assert fake_session.calls[0]["json"] == body


def test_update_puts_partial_body(fake_session):
    fake_session.add("PUT", "/admin-receipts/r1", {"_id": "r1"})

    ok, _, _ = api_client.update_admin_receipt("r1", {"given": {"total": 1}})

    assert ok
    assert fake_session.calls[0]["method"] == "PUT"
    assert fake_session.calls[0]["json"] == {"given": {"total": 1}}


def test_fetch_receipts_filters_by_client(fake_session):
    fake_session.add("GET", "/admin-receipts", [])

    ok, _, receipts = api_client.fetch_admin_receipts("c1")

    assert ok and receipts == []
    assert fake_session.calls[0]["params"] == {"clientId": "c1"}


def test_fetch_receipt(fake_session):
    fake_session.add("GET", "/admin-receipts/r1", {"_id": "r1", "clientId": "c1", "clientName": "X"})
    ok, _, receipt = api_client.fetch_admin_receipt("r1")
    assert ok and receipt.id == "r1"


def test_fetch_client_detail(fake_session):
    fake_session.add("GET", "/clients/c1", {"_id": "c1", "clientName": "X", "balance": 12})
    ok, _, client = api_client.fetch_client("c1")
    assert ok and client.balance == 12.0


def test_delete_receipt(fake_session):
    fake_session.add("DELETE", "/admin-receipts/r1", None)
    assert api_client.delete_admin_receipt("r1") == (True, "Deleted")


def test_generate_voucher_id(fake_session):
    fake_session.add("GET", "/admin-receipts/generate-voucher-id", {"voucherId": "GA-2410-4321"})
    assert api_client.generate_voucher_id() == (True, "Generated", "GA-2410-4321")


def test_generate_voucher_id_failure(fake_session):
    fake_session.add("GET", "/admin-receipts/generate-voucher-id", {"message": "boom"}, status_code=500)
    ok, msg, voucher_id = api_client.generate_voucher_id()
    assert not ok and voucher_id is None
    assert msg == "boom"

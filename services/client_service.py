# goldsmith/services/client_service.py

import logging
from typing import List, Optional, Tuple

import api_client
from domain.models import AdminReceipt, Client

logger = logging.getLogger(__name__)

# Used when the client list can't be loaded, so the editor stays usable
SAMPLE_CLIENTS = [
    Client(id="1001", name="Golden Creations", shop_name="Golden Store",
           phone_number="9845939045", address="123 Gold St"),
    Client(id="1002", name="Silver Linings", shop_name="Silver Shop",
           phone_number="9080705040", address="456 Silver Ave"),
    Client(id="1003", name="Gem Masters", shop_name="Gem World",
           phone_number="9845939045", address="789 Gem Blvd"),
    Client(id="1004", name="Platinum Plus", shop_name="Platinum Gallery",
           phone_number="8090847974", address="101 Platinum Rd"),
    Client(id="1005", name="Diamond Designs", shop_name="Diamond Hub",
           phone_number="7070707070", address="202 Diamond Lane"),
]


def load_clients() -> Tuple[List[Client], Optional[str]]:
    """
    Returns (clients, warning). On any failure the sample clients are
    returned together with a warning for the user.
    """
    ok, msg, clients = api_client.fetch_clients()
    if ok:
        return clients, None

    logger.warning("Falling back to sample clients: %s", msg)
    return list(SAMPLE_CLIENTS), f"Using sample client data ({msg})."


def filter_clients(
        clients: List[Client],
        shop_name: str = "",
        client_name: str = "",
        phone: str = "",
) -> List[Client]:
    shop_name = shop_name.lower()
    client_name = client_name.lower()

    return [
        c for c in clients
        if shop_name in c.shop_name.lower()
        and client_name in c.name.lower()
        and phone in c.phone_number
    ]


def load_receipt_client(receipt: AdminReceipt) -> Tuple[Optional[Client], Optional[str]]:
    """
    Fetch the client a stored receipt belongs to.

    If the lookup fails but the receipt remembers the client's name, a
    partial client is built so the receipt can still be edited.
    Returns (client, warning).
    """
    if receipt.client_id:
        ok, msg, client = api_client.fetch_client(receipt.client_id)
        if ok and client is not None:
            return client, None
    else:
        msg = "Receipt has no client id"

    if receipt.client_name:
        partial = Client(
            id=receipt.client_id or "unknown",
            name=receipt.client_name,
            shop_name="Unknown Shop",
        )
        return partial, f"Could not load client details: {msg}"

    return None, f"Could not load client: {msg}"

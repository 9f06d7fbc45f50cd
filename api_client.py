import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import requests
from dotenv import load_dotenv

from domain.decoders import (
    ResponseShapeError,
    decode_admin_receipt,
    decode_admin_receipt_list,
    decode_client,
    decode_client_list,
)
from domain.models import AdminReceipt, Client

load_dotenv()
base_url: str = os.getenv("API_BASE_URL", "https://backend-goldsmith.onrender.com/api").rstrip("/")
timeout_seconds: float = float(os.getenv("API_TIMEOUT_SECONDS", "30"))

logger = logging.getLogger(__name__)

session = requests.Session()
session.headers.update({"Content-Type": "application/json"})


def _request(method: str, path: str, **kwargs) -> Any:
    resp = session.request(method, f"{base_url}{path}", timeout=timeout_seconds, **kwargs)
    resp.raise_for_status()
    if not resp.content:
        return None
    return resp.json()


def error_message(exc: Exception, default: str) -> str:
    """
    Prefer the backend's own `message` field when the error carries a response.
    """
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return default


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

def fetch_clients() -> Tuple[bool, str, List[Client]]:
    """
    Returns (ok, message, clients)
    """
    try:
        payload = _request("GET", "/clients")
        clients = decode_client_list(payload)
        return True, "Fetched", clients

    except ResponseShapeError as e:
        logger.warning("Unexpected /clients response: %s", e)
        return False, f"Unexpected response format: {e}", []

    except requests.RequestException as e:
        logger.error("Error fetching clients: %s", e)
        return False, error_message(e, "Failed to load clients"), []


def fetch_client(client_id: str) -> Tuple[bool, str, Optional[Client]]:
    try:
        payload = _request("GET", f"/clients/{client_id}")
        if not isinstance(payload, dict):
            return False, "Client not found", None
        return True, "Fetched", decode_client(payload)

    except requests.RequestException as e:
        logger.error("Error fetching client %s: %s", client_id, e)
        return False, error_message(e, "Failed to load client"), None


# ---------------------------------------------------------------------------
# Admin receipts
# ---------------------------------------------------------------------------

def fetch_admin_receipts(client_id: Optional[str] = None) -> Tuple[bool, str, List[AdminReceipt]]:
    params = {"clientId": client_id} if client_id else {}
    try:
        payload = _request("GET", "/admin-receipts", params=params)
        return True, "Fetched", decode_admin_receipt_list(payload)

    except ResponseShapeError as e:
        logger.warning("Unexpected /admin-receipts response: %s", e)
        return False, f"Unexpected response format: {e}", []

    except requests.RequestException as e:
        logger.error("Error fetching admin receipts: %s", e)
        return False, error_message(e, "Failed to load receipts"), []


def fetch_admin_receipt(receipt_id: str) -> Tuple[bool, str, Optional[AdminReceipt]]:
    try:
        payload = _request("GET", f"/admin-receipts/{receipt_id}")
        return True, "Fetched", decode_admin_receipt(payload)

    except ResponseShapeError as e:
        logger.warning("Unexpected receipt %s response: %s", receipt_id, e)
        return False, f"Unexpected response format: {e}", None

    except requests.RequestException as e:
        logger.error("Error fetching admin receipt %s: %s", receipt_id, e)
        return False, error_message(e, "Failed to load receipt"), None


def create_admin_receipt(body: Dict[str, Any]) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    POST a new receipt. Returns (ok, message, created_row)
    """
    try:
        created = _request("POST", "/admin-receipts", json=body)
        return True, "Created", created if isinstance(created, dict) else None

    except requests.RequestException as e:
        logger.error("Error creating admin receipt: %s", e)
        return False, error_message(e, "Failed to create receipt"), None


def update_admin_receipt(receipt_id: str, body: Dict[str, Any]) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    PUT a partial update; `body` holds only the parts being changed.
    """
    try:
        updated = _request("PUT", f"/admin-receipts/{receipt_id}", json=body)
        return True, "Updated", updated if isinstance(updated, dict) else None

    except requests.RequestException as e:
        logger.error("Error updating admin receipt %s: %s", receipt_id, e)
        return False, error_message(e, "Failed to update receipt"), None


def delete_admin_receipt(receipt_id: str) -> Tuple[bool, str]:
    try:
        _request("DELETE", f"/admin-receipts/{receipt_id}")
        return True, "Deleted"

    except requests.RequestException as e:
        logger.error("Error deleting admin receipt %s: %s", receipt_id, e)
        return False, error_message(e, "Failed to delete receipt")


def generate_voucher_id() -> Tuple[bool, str, Optional[str]]:
    try:
        payload = _request("GET", "/admin-receipts/generate-voucher-id")
        voucher_id = payload.get("voucherId") if isinstance(payload, dict) else None
        if not voucher_id:
            return False, "No voucherId in response", None
        return True, "Generated", str(voucher_id)

    except requests.RequestException as e:
        logger.warning("Error generating voucher ID: %s", e)
        return False, error_message(e, "Failed to generate voucher ID"), None

# goldsmith/domain/decoders.py
"""
Translate admin-receipts API payloads into domain objects and back.

The backend speaks camelCase with Mongo-style `_id`s. Optional fields that
are missing or malformed are treated as absent instead of failing the whole
payload; only the client list has a shape strict enough to reject.
"""

import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from domain.models import (
    AdminReceipt,
    Client,
    GivenItem,
    GivenSection,
    GivenTotals,
    ManualCalculation,
    ReceivedItem,
    ReceivedSection,
    ReceivedTotals,
)


# A section carries a stored snapshot only when the server sent one of these
GIVEN_TOTAL_KEYS = ("totalPureWeight", "total")
RECEIVED_TOTAL_KEYS = ("totalOrnamentsWt", "totalStoneWeight", "totalSubTotal", "total")


class ResponseShapeError(ValueError):
    """The API answered with a structure we don't understand."""


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def parse_api_date(value: Any) -> Optional[date]:
    """
    Accepts "2024-05-01", "2024-05-01T10:00:00.000Z" or a date/datetime.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

def decode_client(raw: Dict[str, Any]) -> Client:
    return Client(
        id=_text(raw.get("_id") or raw.get("id")),
        name=_text(raw.get("clientName") or raw.get("name")),
        shop_name=_text(raw.get("shopName")),
        phone_number=_text(raw.get("phoneNumber")),
        address=_text(raw.get("address")),
        balance=_number(raw.get("balance")),
        email=raw.get("email"),
        active=bool(raw.get("active", True)),
    )


def decode_client_list(payload: Any) -> List[Client]:
    """
    GET /clients answers either a bare list or {"clients": [...]}.
    Anything else raises ResponseShapeError.
    """
    if isinstance(payload, list):
        raw_list = payload
    elif isinstance(payload, dict) and isinstance(payload.get("clients"), list):
        raw_list = payload["clients"]
    else:
        raise ResponseShapeError(
            f"Expected a client list, got {type(payload).__name__}"
        )

    return [decode_client(row) for row in raw_list if isinstance(row, dict)]


# ---------------------------------------------------------------------------
# Items and sections
# ---------------------------------------------------------------------------

def decode_given_item(raw: Dict[str, Any]) -> GivenItem:
    return GivenItem(
        id=_text(raw.get("id")) or str(uuid.uuid4()),
        product_name=_text(raw.get("productName")),
        pure_weight=_text(raw.get("pureWeight")),
        pure_percent=_text(raw.get("purePercent")),
        melting=_text(raw.get("melting")),
        total=_number(raw.get("total")) or 0.0,
        date=raw.get("date"),
    )


def decode_received_item(raw: Dict[str, Any]) -> ReceivedItem:
    return ReceivedItem(
        id=_text(raw.get("id")) or str(uuid.uuid4()),
        product_name=_text(raw.get("productName")),
        final_ornaments_wt=_text(raw.get("finalOrnamentsWt")),
        stone_weight=_text(raw.get("stoneWeight"), "0"),
        making_charge_percent=_text(raw.get("makingChargePercent")),
        sub_total=_number(raw.get("subTotal")) or 0.0,
        total=_number(raw.get("total")) or 0.0,
        date=raw.get("date"),
    )


def decode_given_section(raw: Any) -> Optional[GivenSection]:
    if not isinstance(raw, dict):
        return None

    items = [decode_given_item(row) for row in raw.get("items") or [] if isinstance(row, dict)]

    snapshot = None
    if any(key in raw for key in GIVEN_TOTAL_KEYS):
        snapshot = GivenTotals(
            total_pure_weight=_number(raw.get("totalPureWeight")) or 0.0,
            total=_number(raw.get("total")) or 0.0,
        )

    return GivenSection(
        date=parse_api_date(raw.get("date")) or date.today(),
        items={item.id: item for item in items},
        snapshot=snapshot,
    )


def decode_received_section(raw: Any) -> Optional[ReceivedSection]:
    if not isinstance(raw, dict):
        return None

    items = [decode_received_item(row) for row in raw.get("items") or [] if isinstance(row, dict)]

    snapshot = None
    if any(key in raw for key in RECEIVED_TOTAL_KEYS):
        snapshot = ReceivedTotals(
            total_ornaments_wt=_number(raw.get("totalOrnamentsWt")) or 0.0,
            total_stone_weight=_number(raw.get("totalStoneWeight")) or 0.0,
            total_sub_total=_number(raw.get("totalSubTotal")) or 0.0,
            total=_number(raw.get("total")) or 0.0,
        )

    return ReceivedSection(
        date=parse_api_date(raw.get("date")) or date.today(),
        items={item.id: item for item in items},
        snapshot=snapshot,
    )


def decode_manual_calculation(raw: Any) -> Optional[ManualCalculation]:
    if not isinstance(raw, dict):
        return None

    return ManualCalculation(
        given_total=_number(raw.get("givenTotal")) or 0.0,
        received_total=_number(raw.get("receivedTotal")) or 0.0,
        operation=_text(raw.get("operation"), "subtract-given-received"),
        result=_number(raw.get("result")) or 0.0,
    )


def decode_admin_receipt(raw: Any) -> AdminReceipt:
    if not isinstance(raw, dict):
        raise ResponseShapeError(f"Expected a receipt object, got {type(raw).__name__}")

    return AdminReceipt(
        id=_text(raw.get("_id") or raw.get("id")),
        client_id=_text(raw.get("clientId")),
        client_name=_text(raw.get("clientName")),
        voucher_id=_text(raw.get("voucherId")),
        status=_text(raw.get("status"), "incomplete"),
        given=decode_given_section(raw.get("given")),
        received=decode_received_section(raw.get("received")),
        manual_calculations=decode_manual_calculation(raw.get("manualCalculations")),
        created_at=raw.get("createdAt"),
        updated_at=raw.get("updatedAt"),
    )


def decode_admin_receipt_list(payload: Any) -> List[AdminReceipt]:
    if isinstance(payload, list):
        raw_list = payload
    elif isinstance(payload, dict):
        raw_list = next(
            (payload[key] for key in ("adminReceipts", "receipts", "data") if isinstance(payload.get(key), list)),
            None,
        )
        if raw_list is None:
            raise ResponseShapeError("Expected a receipt list")
    else:
        raise ResponseShapeError(f"Expected a receipt list, got {type(payload).__name__}")

    return [decode_admin_receipt(row) for row in raw_list if isinstance(row, dict)]


# ---------------------------------------------------------------------------
# Outgoing
# ---------------------------------------------------------------------------

def encode_given_item(item: GivenItem) -> Dict[str, Any]:
    row = {
        "id": item.id,
        "productName": item.product_name,
        "pureWeight": item.pure_weight,
        "purePercent": item.pure_percent,
        "melting": item.melting,
        "total": item.total,
    }
    if item.date:
        row["date"] = item.date
    return row


def encode_received_item(item: ReceivedItem) -> Dict[str, Any]:
    row = {
        "id": item.id,
        "productName": item.product_name,
        "finalOrnamentsWt": item.final_ornaments_wt,
        "stoneWeight": item.stone_weight,
        "makingChargePercent": item.making_charge_percent,
        "subTotal": item.sub_total,
        "total": item.total,
    }
    if item.date:
        row["date"] = item.date
    return row


def encode_manual_calculation(calc: ManualCalculation) -> Dict[str, Any]:
    return {
        "givenTotal": calc.given_total,
        "receivedTotal": calc.received_total,
        "operation": calc.operation,
        "result": calc.result,
    }

# goldsmith/services/receipt_service.py

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import api_client
from domain.decoders import (
    encode_given_item,
    encode_manual_calculation,
    encode_received_item,
)
from domain.models import (
    GivenSection,
    ManualCalculation,
    ReceiptDraft,
    ReceivedSection,
)
from services.calculation_service import (
    calculate_manual_result,
    given_totals,
    received_totals,
    section_given_totals,
    section_received_totals,
)
from services.client_service import load_receipt_client
from services.item_service import new_given_item, new_received_item

logger = logging.getLogger(__name__)

GIVEN = "given"
RECEIVED = "received"

REQUIRED_FIELDS = {
    GIVEN: ("product_name", "pure_weight", "pure_percent", "melting"),
    # stone_weight is exempt, it defaults to "0"
    RECEIVED: ("product_name", "final_ornaments_wt", "making_charge_percent"),
}


# ---------------------------------------------------------------------------
# Save state machine
# ---------------------------------------------------------------------------

class SaveStatus(Enum):
    IDLE = "idle"
    SAVING = "saving"
    ERROR = "error"


class SectionSaveMachine:
    """
    Tracks the one save a section may have in flight.

    `begin()` hands out a ticket; completions carrying a stale ticket, or
    arriving after `dispose()`, are ignored and report False.
    """

    def __init__(self):
        self.status = SaveStatus.IDLE
        self.error: Optional[str] = None
        self._ticket = 0
        self._disposed = False

    @property
    def is_busy(self) -> bool:
        return self.status is SaveStatus.SAVING

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def begin(self) -> Optional[int]:
        if self._disposed or self.status is SaveStatus.SAVING:
            return None
        self._ticket += 1
        self.status = SaveStatus.SAVING
        self.error = None
        return self._ticket

    def _is_current(self, ticket: int) -> bool:
        return not self._disposed and ticket == self._ticket and self.status is SaveStatus.SAVING

    def succeed(self, ticket: int) -> bool:
        if not self._is_current(ticket):
            return False
        self.status = SaveStatus.IDLE
        return True

    def fail(self, ticket: int, message: str) -> bool:
        if not self._is_current(ticket):
            return False
        self.status = SaveStatus.ERROR
        self.error = message
        return True

    def cancel(self, ticket: int) -> bool:
        # aborted before any request went out (validation)
        if not self._is_current(ticket):
            return False
        self.status = SaveStatus.IDLE
        return True

    def dispose(self) -> None:
        self._disposed = True


@dataclass
class SaveOutcome:
    ok: bool
    message: str
    created_id: Optional[str] = None
    skipped: bool = False  # a save was already running, nothing was sent
    stale: bool = False  # the view went away before the request finished


# ---------------------------------------------------------------------------
# Draft construction
# ---------------------------------------------------------------------------

def generate_local_voucher_id(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    """GA-YYMM-NNNN with NNNN in [1000, 9999]."""
    now = now or datetime.now()
    rng = rng or random.Random()
    return f"GA-{now:%y%m}-{rng.randint(1000, 9999)}"


def resolve_voucher_id() -> Tuple[str, Optional[str]]:
    """
    Returns (voucher_id, warning). The server-issued id is preferred; a
    local one is generated when the endpoint fails.
    """
    ok, msg, voucher_id = api_client.generate_voucher_id()
    if ok and voucher_id:
        return voucher_id, None

    local_id = generate_local_voucher_id()
    logger.warning("Voucher ID generation failed (%s), using local id %s", msg, local_id)
    return local_id, f"Using locally generated voucher ID ({msg})."


def new_draft(voucher_id: str = "", today: Optional[date] = None) -> ReceiptDraft:
    today = today or date.today()
    given_item = new_given_item()
    received_item = new_received_item()
    return ReceiptDraft(
        given=GivenSection(date=today, items={given_item.id: given_item}),
        received=ReceivedSection(date=today, items={received_item.id: received_item}),
        voucher_id=voucher_id,
    )


def load_draft(receipt_id: str) -> Tuple[Optional[ReceiptDraft], Optional[str]]:
    """
    Build editor state for an existing receipt.
    Returns (draft, message); draft is None when the receipt can't be loaded.
    """
    ok, msg, receipt = api_client.fetch_admin_receipt(receipt_id)
    if not ok or receipt is None:
        return None, msg

    draft = new_draft(voucher_id=receipt.voucher_id)
    draft.receipt_id = receipt.id or receipt_id
    draft.client, warning = load_receipt_client(receipt)

    if receipt.given is not None:
        draft.given.date = receipt.given.date
        if receipt.given.items:
            draft.given.items = dict(receipt.given.items)

    if receipt.received is not None:
        draft.received.date = receipt.received.date
        if receipt.received.items:
            draft.received.items = dict(receipt.received.items)

    manual = receipt.manual_calculations
    if manual is not None:
        draft.manual_given_total = manual.given_total
        draft.manual_received_total = manual.received_total
        draft.operation = manual.operation
    else:
        draft.manual_given_total = section_given_totals(receipt.given).total
        draft.manual_received_total = section_received_totals(receipt.received).total

    return draft, warning


# ---------------------------------------------------------------------------
# Validation and payloads
# ---------------------------------------------------------------------------

def _section(draft: ReceiptDraft, kind: str):
    if kind == GIVEN:
        return draft.given
    if kind == RECEIVED:
        return draft.received
    raise ValueError(f"Unknown section: {kind}")


def validate_section(kind: str, section) -> Tuple[bool, str]:
    """
    Stop at the first item with an empty required field.
    """
    required = REQUIRED_FIELDS[kind]
    for item in section.items.values():
        if any(not getattr(item, name) for name in required):
            return False, f"Please fill all required fields for each {kind} item"
    return True, ""


def build_given_payload(section: GivenSection) -> Dict[str, Any]:
    totals = given_totals(section.items.values())
    return {
        "date": section.date.isoformat(),
        "items": [encode_given_item(item) for item in section.items.values()],
        "totalPureWeight": totals.total_pure_weight,
        "total": totals.total,
    }


def build_received_payload(section: ReceivedSection) -> Dict[str, Any]:
    totals = received_totals(section.items.values())
    return {
        "date": section.date.isoformat(),
        "items": [encode_received_item(item) for item in section.items.values()],
        "totalOrnamentsWt": totals.total_ornaments_wt,
        "totalStoneWeight": totals.total_stone_weight,
        "totalSubTotal": totals.total_sub_total,
        "total": totals.total,
    }


def _section_payload(draft: ReceiptDraft, kind: str) -> Dict[str, Any]:
    if kind == GIVEN:
        return build_given_payload(draft.given)
    return build_received_payload(draft.received)


def _has_named_item(section) -> bool:
    return any(item.product_name for item in section.items.values())


def build_save_request(draft: ReceiptDraft, kind: str) -> Tuple[str, Dict[str, Any]]:
    """
    Returns ("update", body) for an existing receipt, otherwise
    ("create", body). A create also carries the other section when it
    already has at least one named item.
    """
    section_payload = _section_payload(draft, kind)

    if draft.receipt_id:
        return "update", {kind: section_payload}

    body: Dict[str, Any] = {
        "clientId": draft.client.id,
        "clientName": draft.client.name,
        "voucherId": draft.voucher_id,
        kind: section_payload,
        "status": "incomplete",
    }

    other = RECEIVED if kind == GIVEN else GIVEN
    if _has_named_item(_section(draft, other)):
        body[other] = _section_payload(draft, other)

    return "create", body


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------

def save_section(draft: ReceiptDraft, kind: str, machine: SectionSaveMachine) -> SaveOutcome:
    """
    Validate and persist one section of the draft.

    A successful create adopts the server `_id` into the draft, switching the
    editor to update mode. Failures leave the draft as it was.
    """
    ticket = machine.begin()
    if ticket is None:
        return SaveOutcome(False, "A save is already in progress", skipped=True)

    if draft.client is None:
        machine.cancel(ticket)
        return SaveOutcome(False, "Please select a client first")

    ok, msg = validate_section(kind, _section(draft, kind))
    if not ok:
        machine.cancel(ticket)
        return SaveOutcome(False, msg)

    mode, body = build_save_request(draft, kind)

    if mode == "update":
        ok, msg, _ = api_client.update_admin_receipt(draft.receipt_id, body)
        created = None
    else:
        ok, msg, created = api_client.create_admin_receipt(body)

    if not ok:
        if not machine.fail(ticket, msg):
            return SaveOutcome(False, msg, stale=True)
        return SaveOutcome(False, msg)

    if not machine.succeed(ticket):
        logger.info("Ignoring %s save result for a closed editor", kind)
        return SaveOutcome(True, "Saved", stale=True)

    created_id = None
    if created and created.get("_id"):
        created_id = str(created["_id"])
        draft.receipt_id = created_id
        logger.info("Created admin receipt %s", created_id)
    else:
        logger.info("Saved %s items for receipt %s", kind, draft.receipt_id)

    return SaveOutcome(True, f"{kind.capitalize()} items saved successfully", created_id=created_id)


# ---------------------------------------------------------------------------
# Manual calculation
# ---------------------------------------------------------------------------

def current_manual_calculation(draft: ReceiptDraft) -> ManualCalculation:
    return ManualCalculation(
        given_total=draft.manual_given_total,
        received_total=draft.manual_received_total,
        operation=draft.operation,
        result=calculate_manual_result(
            draft.manual_given_total,
            draft.manual_received_total,
            draft.operation,
        ),
    )


def apply_computed_total(draft: ReceiptDraft, kind: str) -> float:
    """
    Copy a section's computed total into the matching manual input.
    This is the only path that links the two.
    """
    if kind == GIVEN:
        draft.manual_given_total = given_totals(draft.given.items.values()).total
        return draft.manual_given_total

    if kind == RECEIVED:
        draft.manual_received_total = received_totals(draft.received.items.values()).total
        return draft.manual_received_total

    raise ValueError(f"Unknown section: {kind}")


def save_manual_calculation(draft: ReceiptDraft) -> Tuple[bool, str]:
    if not draft.receipt_id:
        return False, "Save the given or received items first"

    body = {"manualCalculations": encode_manual_calculation(current_manual_calculation(draft))}
    ok, msg, _ = api_client.update_admin_receipt(draft.receipt_id, body)
    if not ok:
        return False, msg
    return True, "Manual calculation saved"

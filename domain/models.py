# goldsmith/domain/models.py

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional


@dataclass
class GivenItem:
    """
    One unit of raw material issued to the client.

    Numeric inputs are kept as the text the user typed; `total` is derived.
    """
    id: str
    product_name: str = ""
    pure_weight: str = ""
    pure_percent: str = ""
    melting: str = ""
    total: float = 0.0
    date: Optional[str] = None  # only set on items that come back from the server


@dataclass
class ReceivedItem:
    """
    One unit of finished goods returned by the client.
    """
    id: str
    product_name: str = ""
    final_ornaments_wt: str = ""
    stone_weight: str = "0"
    making_charge_percent: str = ""
    sub_total: float = 0.0
    total: float = 0.0
    date: Optional[str] = None


@dataclass
class GivenTotals:
    total_pure_weight: float = 0.0
    total: float = 0.0


@dataclass
class ReceivedTotals:
    total_ornaments_wt: float = 0.0
    total_stone_weight: float = 0.0
    total_sub_total: float = 0.0
    total: float = 0.0


@dataclass
class GivenSection:
    """
    Date plus items keyed by id, in insertion order.
    `snapshot` holds the totals the server stored, when loaded from it.
    """
    date: date
    items: Dict[str, GivenItem] = field(default_factory=dict)
    snapshot: Optional[GivenTotals] = None


@dataclass
class ReceivedSection:
    date: date
    items: Dict[str, ReceivedItem] = field(default_factory=dict)
    snapshot: Optional[ReceivedTotals] = None


@dataclass
class ManualCalculation:
    given_total: float = 0.0
    received_total: float = 0.0
    operation: str = "subtract-given-received"
    result: float = 0.0


@dataclass
class Client:
    id: str
    name: str
    shop_name: str = ""
    phone_number: str = ""
    address: str = ""
    balance: Optional[float] = None
    email: Optional[str] = None
    active: bool = True


@dataclass
class AdminReceipt:
    """
    A persisted voucher as returned by the admin-receipts API.
    """
    id: str  # server `_id`
    client_id: str
    client_name: str
    voucher_id: str = ""
    status: str = "incomplete"
    given: Optional[GivenSection] = None
    received: Optional[ReceivedSection] = None
    manual_calculations: Optional[ManualCalculation] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class ReceiptDraft:
    """
    Editor state for one voucher screen.

    `receipt_id` is None until the first successful save creates the voucher.
    """
    given: GivenSection
    received: ReceivedSection
    voucher_id: str = ""
    receipt_id: Optional[str] = None
    client: Optional[Client] = None
    manual_given_total: float = 0.0
    manual_received_total: float = 0.0
    operation: str = "subtract-given-received"


@dataclass
class BalanceSummary:
    """
    Balance figures shown on a stored receipt and its PDF.
    """
    opening_balance: float  # client's running balance ("OD balance")
    current_balance: float  # manual calculation result
    new_balance: float
    given_total: float
    received_total: float
    difference: float  # given - received

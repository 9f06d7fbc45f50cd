# goldsmith/services/calculation_service.py

import math
import re
from typing import Any, Iterable, Optional, Tuple

from domain.models import (
    AdminReceipt,
    BalanceSummary,
    Client,
    GivenItem,
    GivenSection,
    GivenTotals,
    ReceivedItem,
    ReceivedSection,
    ReceivedTotals,
)

SUBTRACT_GIVEN_RECEIVED = "subtract-given-received"
SUBTRACT_RECEIVED_GIVEN = "subtract-received-given"
ADD = "add"

# value -> label shown in the operation selector
OPERATIONS = {
    SUBTRACT_GIVEN_RECEIVED: "Given - Received",
    SUBTRACT_RECEIVED_GIVEN: "Received - Given",
    ADD: "Given + Received",
}

# Longest leading decimal literal, the same prefix a browser's parseFloat reads
_DECIMAL_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_decimal(value: Any, default: float = 0.0) -> float:
    """
    Read a user-typed number.

    Leading whitespace is skipped and trailing junk ignored ("12.5g" -> 12.5).
    Empty, unparsable, NaN and zero values all give `default`, so a field
    read with default 1 never yields 0.
    """
    if value is None:
        return default

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    else:
        match = _DECIMAL_PREFIX.match(str(value).strip())
        if not match:
            return default
        number = float(match.group(0))

    if math.isnan(number) or number == 0:
        return default

    return number


def parse_melting(value: Any) -> float:
    # melting is a divisor: blank/zero/garbage reads as 1, never 0
    return parse_decimal(value, default=1.0)


def parse_manual_input(value: Any) -> float:
    return parse_decimal(value, default=0.0)


# ---------------------------------------------------------------------------
# Per-item derivations
# ---------------------------------------------------------------------------

def given_item_total(pure_weight: Any, pure_percent: Any, melting: Any) -> float:
    """(pure weight * pure percent) / melting"""
    return (parse_decimal(pure_weight) * parse_decimal(pure_percent)) / parse_melting(melting)


def received_item_amounts(
        final_ornaments_wt: Any,
        stone_weight: Any,
        making_charge_percent: Any,
) -> Tuple[float, float]:
    """
    Returns (sub_total, total) for a received item.
    """
    sub_total = parse_decimal(final_ornaments_wt) - parse_decimal(stone_weight)
    total = sub_total * (parse_decimal(making_charge_percent) / 100)
    return sub_total, total


# ---------------------------------------------------------------------------
# Section aggregates
# ---------------------------------------------------------------------------

def given_totals(items: Iterable[GivenItem]) -> GivenTotals:
    """
    Aggregate a given section.

    `total_pure_weight` uses a fixed divisor of 100, not the item's melting.
    """
    totals = GivenTotals()
    for item in items:
        totals.total_pure_weight += (
            parse_decimal(item.pure_weight) * parse_decimal(item.pure_percent)
        ) / 100
        totals.total += item.total
    return totals


def received_totals(items: Iterable[ReceivedItem]) -> ReceivedTotals:
    totals = ReceivedTotals()
    for item in items:
        totals.total_ornaments_wt += parse_decimal(item.final_ornaments_wt)
        totals.total_stone_weight += parse_decimal(item.stone_weight)
        totals.total_sub_total += item.sub_total
        totals.total += item.total
    return totals


# ---------------------------------------------------------------------------
# Manual balance
# ---------------------------------------------------------------------------

def calculate_manual_result(given_total: float, received_total: float, operation: str) -> float:
    if operation == SUBTRACT_GIVEN_RECEIVED:
        return given_total - received_total
    if operation == SUBTRACT_RECEIVED_GIVEN:
        return received_total - given_total
    if operation == ADD:
        return given_total + received_total
    return 0.0


# ---------------------------------------------------------------------------
# Stored receipts
# ---------------------------------------------------------------------------

def section_given_totals(section: Optional[GivenSection]) -> GivenTotals:
    """
    Totals to display for a stored given section: the server's snapshot
    when it has one, otherwise recomputed from the items.
    """
    if section is None:
        return GivenTotals()
    if section.snapshot is not None:
        return section.snapshot
    return given_totals(section.items.values())


def section_received_totals(section: Optional[ReceivedSection]) -> ReceivedTotals:
    if section is None:
        return ReceivedTotals()
    if section.snapshot is not None:
        return section.snapshot
    return received_totals(section.items.values())


def summarize_balance(receipt: AdminReceipt, client: Optional[Client]) -> BalanceSummary:
    opening = client.balance if client is not None and client.balance is not None else 0.0
    current = receipt.manual_calculations.result if receipt.manual_calculations is not None else 0.0
    given_total = section_given_totals(receipt.given).total
    received_total = section_received_totals(receipt.received).total

    return BalanceSummary(
        opening_balance=opening,
        current_balance=current,
        new_balance=opening + current,
        given_total=given_total,
        received_total=received_total,
        difference=given_total - received_total,
    )

# goldsmith/utils/formatting.py

from datetime import date
from typing import Any, Optional

from domain.decoders import parse_api_date
from services.calculation_service import parse_decimal


def format_number(value: Any, decimals: int = 3) -> str:
    """
    Fixed-decimals display for weights and totals.
    Missing or unparsable values show as zero. Example: "12.5" -> "12.500"
    """
    return f"{parse_decimal(value):.{decimals}f}"


def format_date(value: Any, empty: str = "N/A") -> str:
    """2024-05-01 -> "May 01, 2024" """
    parsed: Optional[date] = parse_api_date(value)
    if parsed is None:
        return empty
    return parsed.strftime("%b %d, %Y")


def format_long_date(value: Any) -> str:
    """2024-05-01 -> "MAY 01, 2024", used in printed headers."""
    parsed = parse_api_date(value)
    if parsed is None:
        return "-"
    return parsed.strftime("%B %d, %Y").upper()


def format_short_date(value: Any, empty: str = "—") -> str:
    parsed = parse_api_date(value)
    if parsed is None:
        return empty
    return parsed.strftime("%d/%m/%Y")

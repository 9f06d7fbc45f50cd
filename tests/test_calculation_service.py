from datetime import date

import pytest

from domain.models import (
    AdminReceipt,
    Client,
    GivenItem,
    GivenSection,
    GivenTotals,
    ManualCalculation,
    ReceivedItem,
)
from services.calculation_service import (
    ADD,
    SUBTRACT_GIVEN_RECEIVED,
    SUBTRACT_RECEIVED_GIVEN,
    calculate_manual_result,
    given_item_total,
    given_totals,
    parse_decimal,
    parse_manual_input,
    parse_melting,
    received_item_amounts,
    received_totals,
    section_given_totals,
    summarize_balance,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10", 10.0),
        (" 12.5g", 12.5),
        (".5", 0.5),
        ("1e2", 100.0),
        ("-3", -3.0),
        ("", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        (7, 7.0),
        (2.25, 2.25),
        ("\u0661\u0662", 0.0),  # Arabic-Indic digits
        ("\uff15", 0.0),  # fullwidth 5
        ("3\u0665", 3.0),
    ],
)
def test_parse_decimal(raw, expected):
    assert parse_decimal(raw) == expected


@pytest.mark.parametrize("raw", ["", "0", "0.0", "abc", None])
def test_melting_defaults_to_one(raw):
    assert parse_melting(raw) == 1.0


def test_melting_keeps_real_value():
    assert parse_melting("2") == 2.0


def test_manual_input_defaults_to_zero():
    assert parse_manual_input("oops") == 0.0
    assert parse_manual_input("15.5") == 15.5


def test_given_item_total():
    assert given_item_total("10", "92", "2") == 460.0


def test_given_item_total_blank_melting():
    assert given_item_total("10", "92", "") == 920.0


def test_given_item_total_unparsable_weight():
    assert given_item_total("x", "92", "2") == 0.0


def test_received_item_amounts():
    sub_total, total = received_item_amounts("50", "5", "10")
    assert sub_total == 45.0
    assert total == pytest.approx(4.5)


def test_received_item_amounts_default_stone():
    sub_total, total = received_item_amounts("50", "", "10")
    assert sub_total == 50.0
    assert total == pytest.approx(5.0)


def test_given_totals():
    items = [
        GivenItem(id="a", pure_weight="10", pure_percent="92", melting="2", total=460.0),
        GivenItem(id="b", pure_weight="5", pure_percent="20", melting="1", total=100.0),
    ]
    totals = given_totals(items)
    assert totals.total == 560.0
    assert totals.total_pure_weight == pytest.approx(9.2 + 1.0)


def test_total_pure_weight_uses_fixed_divisor():
    items = [GivenItem(id="a", pure_weight="10", pure_percent="92", melting="2", total=460.0)]
    assert given_totals(items).total_pure_weight == pytest.approx(9.2)


def test_given_totals_is_idempotent():
    items = [GivenItem(id="a", pure_weight="10", pure_percent="92", melting="2", total=460.0)]
    assert given_totals(items) == given_totals(items)


def test_received_totals_skip_unparsable():
    items = [
        ReceivedItem(id="a", final_ornaments_wt="50", stone_weight="5", sub_total=45.0, total=4.5),
        ReceivedItem(id="b", final_ornaments_wt="junk", stone_weight="", sub_total=0.0, total=0.0),
        ReceivedItem(id="c", final_ornaments_wt="20", stone_weight="0", sub_total=20.0, total=2.0),
    ]
    totals = received_totals(items)
    assert totals.total_ornaments_wt == 70.0
    assert totals.total_stone_weight == 5.0
    assert totals.total_sub_total == 65.0
    assert totals.total == pytest.approx(6.5)


def test_empty_sections_total_zero():
    assert given_totals([]).total == 0.0
    assert received_totals([]).total == 0.0


def test_manual_operations():
    assert calculate_manual_result(100, 30, SUBTRACT_GIVEN_RECEIVED) == 70
    assert calculate_manual_result(100, 30, SUBTRACT_RECEIVED_GIVEN) == -70
    assert calculate_manual_result(100, 30, ADD) == 130


def test_manual_unknown_operation_is_zero():
    assert calculate_manual_result(100, 30, "multiply") == 0.0


def test_stored_snapshot_wins_over_items():
    section = GivenSection(
        date=date(2024, 1, 1),
        items={"a": GivenItem(id="a", total=10.0)},
        snapshot=GivenTotals(total_pure_weight=1.0, total=99.0),
    )
    assert section_given_totals(section).total == 99.0


def test_summarize_balance():
    receipt = AdminReceipt(
        id="r1",
        client_id="c1",
        client_name="Golden Creations",
        given=GivenSection(date=date(2024, 1, 1), items={"a": GivenItem(id="a", total=460.0)}),
        manual_calculations=ManualCalculation(given_total=460, received_total=60, result=400.0),
    )
    client = Client(id="c1", name="Golden Creations", balance=100.0)

    summary = summarize_balance(receipt, client)

    assert summary.opening_balance == 100.0
    assert summary.current_balance == 400.0
    assert summary.new_balance == 500.0
    assert summary.given_total == 460.0
    assert summary.received_total == 0.0
    assert summary.difference == 460.0


def test_summarize_balance_without_client_or_manual():
    receipt = AdminReceipt(id="r1", client_id="", client_name="")
    summary = summarize_balance(receipt, None)
    assert summary.opening_balance == 0.0
    assert summary.new_balance == 0.0

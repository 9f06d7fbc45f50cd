from datetime import date

import pytest

from domain.models import GivenItem, GivenSection, ReceivedItem, ReceivedSection
from services.calculation_service import given_totals
from services.item_service import (
    add_item,
    new_given_item,
    new_received_item,
    remove_item,
    update_given_item,
    update_item,
    update_received_item,
)


def test_new_items_start_blank():
    given = new_given_item()
    received = new_received_item()

    assert given.total == 0.0
    assert received.stone_weight == "0"
    assert received.sub_total == 0.0 and received.total == 0.0
    assert given.id != new_given_item().id


def test_given_total_follows_melting():
    item = GivenItem(id="a")
    item = update_given_item(item, "pure_weight", "10")
    item = update_given_item(item, "pure_percent", "92")
    item = update_given_item(item, "melting", "2")
    assert item.total == 460.0

    item = update_given_item(item, "melting", "")
    assert item.total == 920.0


def test_update_returns_new_item():
    item = GivenItem(id="a", pure_weight="10")
    updated = update_given_item(item, "pure_percent", "50")
    assert updated is not item
    assert item.pure_percent == ""
    assert item.total == 0.0


def test_non_trigger_edit_keeps_derived_fields():
    # a stale total must survive a product name edit untouched
    item = GivenItem(id="a", pure_weight="10", pure_percent="92", melting="2", total=123.456)
    updated = update_given_item(item, "product_name", "Bangle")
    assert updated.total == 123.456
    assert updated.product_name == "Bangle"


def test_received_item_recomputes_both():
    item = ReceivedItem(id="r")
    item = update_received_item(item, "final_ornaments_wt", "50")
    item = update_received_item(item, "stone_weight", "5")
    item = update_received_item(item, "making_charge_percent", "10")
    assert item.sub_total == 45.0
    assert item.total == pytest.approx(4.5)


def test_received_product_name_edit_keeps_totals():
    item = ReceivedItem(id="r", sub_total=45.0, total=4.5)
    updated = update_received_item(item, "product_name", "Chain")
    assert (updated.sub_total, updated.total) == (45.0, 4.5)


def test_unknown_field_rejected():
    with pytest.raises(ValueError):
        update_given_item(GivenItem(id="a"), "total", "5")
    with pytest.raises(ValueError):
        update_received_item(ReceivedItem(id="r"), "sub_total", "5")


def _given_section(*items):
    return GivenSection(date=date(2024, 1, 1), items={i.id: i for i in items})


def test_update_item_touches_only_target():
    first = GivenItem(id="a")
    second = GivenItem(id="b")
    section = _given_section(first, second)

    update_item(section, "a", "pure_weight", "10")

    assert section.items["b"] is second
    assert section.items["a"] is not first
    assert list(section.items) == ["a", "b"]


def test_add_item_keeps_order():
    section = _given_section(GivenItem(id="a"))
    new_id = add_item(section)
    assert list(section.items) == ["a", new_id]
    assert isinstance(section.items[new_id], GivenItem)


def test_add_item_to_received_section():
    section = ReceivedSection(date=date(2024, 1, 1), items={})
    new_id = add_item(section)
    assert section.items[new_id].stone_weight == "0"


def test_remove_last_item_rejected():
    section = _given_section(GivenItem(id="a"))
    assert remove_item(section, "a") is False
    assert list(section.items) == ["a"]


def test_remove_item():
    section = _given_section(GivenItem(id="a"), GivenItem(id="b"))
    assert remove_item(section, "a") is True
    assert list(section.items) == ["b"]


def test_remove_unknown_item():
    section = _given_section(GivenItem(id="a"), GivenItem(id="b"))
    assert remove_item(section, "zzz") is False
    assert len(section.items) == 2


def test_section_total_tracks_edits():
    section = _given_section(GivenItem(id="a"))
    update_item(section, "a", "pure_weight", "10")
    update_item(section, "a", "pure_percent", "92")
    update_item(section, "a", "melting", "2")
    assert given_totals(section.items.values()).total == 460.0

    new_id = add_item(section)
    update_item(section, new_id, "pure_weight", "5")
    update_item(section, new_id, "pure_percent", "20")
    assert given_totals(section.items.values()).total == 560.0

    remove_item(section, "a")
    assert given_totals(section.items.values()).total == 100.0

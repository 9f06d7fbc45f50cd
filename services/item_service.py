# goldsmith/services/item_service.py

import logging
import uuid
from dataclasses import replace
from typing import Union

from domain.models import GivenItem, GivenSection, ReceivedItem, ReceivedSection
from services.calculation_service import given_item_total, received_item_amounts

logger = logging.getLogger(__name__)

GIVEN_FIELDS = ("product_name", "pure_weight", "pure_percent", "melting")
RECEIVED_FIELDS = ("product_name", "final_ornaments_wt", "stone_weight", "making_charge_percent")

# Fields whose edit recomputes the item's derived values
GIVEN_TRIGGER_FIELDS = frozenset({"pure_weight", "pure_percent", "melting"})
RECEIVED_TRIGGER_FIELDS = frozenset({"final_ornaments_wt", "stone_weight", "making_charge_percent"})

Section = Union[GivenSection, ReceivedSection]


def new_item_id() -> str:
    return str(uuid.uuid4())


def new_given_item() -> GivenItem:
    return GivenItem(id=new_item_id())


def new_received_item() -> ReceivedItem:
    return ReceivedItem(id=new_item_id())


def update_given_item(item: GivenItem, field_name: str, value: str) -> GivenItem:
    """
    Return a copy of `item` with `field_name` set to `value`.

    `total` is recomputed only when a trigger field changed; any other edit
    keeps the previous derived value untouched.
    """
    if field_name not in GIVEN_FIELDS:
        raise ValueError(f"Unknown given item field: {field_name}")

    updated = replace(item, **{field_name: value})

    if field_name in GIVEN_TRIGGER_FIELDS:
        updated.total = given_item_total(
            updated.pure_weight,
            updated.pure_percent,
            updated.melting,
        )

    return updated


def update_received_item(item: ReceivedItem, field_name: str, value: str) -> ReceivedItem:
    if field_name not in RECEIVED_FIELDS:
        raise ValueError(f"Unknown received item field: {field_name}")

    updated = replace(item, **{field_name: value})

    if field_name in RECEIVED_TRIGGER_FIELDS:
        updated.sub_total, updated.total = received_item_amounts(
            updated.final_ornaments_wt,
            updated.stone_weight,
            updated.making_charge_percent,
        )

    return updated


# ---------------------------------------------------------------------------
# Section operations
# ---------------------------------------------------------------------------

def add_item(section: Section) -> str:
    """
    Append a blank item to the section and return its id.
    """
    item = new_given_item() if isinstance(section, GivenSection) else new_received_item()
    section.items[item.id] = item
    return item.id


def remove_item(section: Section, item_id: str) -> bool:
    """
    Remove an item. A section never becomes empty: removing the last
    remaining item (or an unknown id) is refused and returns False.
    """
    if item_id not in section.items:
        logger.warning("Tried to remove unknown item %s", item_id)
        return False

    if len(section.items) <= 1:
        return False

    del section.items[item_id]
    return True


def update_item(section: Section, item_id: str, field_name: str, value: str) -> None:
    """
    Replace one item in the section with its updated copy; the other entries
    are left as the same objects.
    """
    item = section.items[item_id]

    if isinstance(section, GivenSection):
        section.items[item_id] = update_given_item(item, field_name, value)
    else:
        section.items[item_id] = update_received_item(item, field_name, value)

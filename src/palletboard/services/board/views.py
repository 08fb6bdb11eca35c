"""Read-side helpers: list filtering, status counters, grid layout and date badges."""

from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ...models.domain import IN_PROGRESS_STATUSES, NEW_DATE_SENTINEL, PalletSlot, SlotStatus
from ..layout.addressing import (
    FLOOR_SLOT_COUNT,
    column_location_ids,
    floor_location_id,
    location_sort_key,
    section_columns,
)

IN_PROGRESS_FILTER = "ENCOURS"


def _matches_filter(slot: PalletSlot, status_filter: Optional[str]) -> bool:
    if not status_filter:
        return True
    if status_filter == IN_PROGRESS_FILTER:
        return slot.status in IN_PROGRESS_STATUSES
    return slot.status.value == status_filter


def _matches_search(slot: PalletSlot, query: str) -> bool:
    needle = query.lower()
    if needle in slot.location_id.lower():
        return True
    order = slot.order
    if order is None:
        return False
    haystack = (order.order_number, order.client_name, order.date, order.tournee or "", order.comment)
    return any(needle in value.lower() for value in haystack if value)


def filter_slots(
    slots: Iterable[PalletSlot],
    status_filter: Optional[str] = None,
    search: Optional[str] = None,
) -> list[PalletSlot]:
    """Slots matching a status (or ``ENCOURS``) and a free-text query, in rack order."""
    selected = [
        slot
        for slot in slots
        if _matches_filter(slot, status_filter) and (not search or _matches_search(slot, search))
    ]
    return sorted(selected, key=lambda slot: location_sort_key(slot.location_id))


def compute_stats(slots: Sequence[PalletSlot], sas_count: int = 0) -> dict[str, int]:
    counts: Counter[str] = Counter({status.value: 0 for status in SlotStatus})
    for slot in slots:
        counts[slot.status.value] += 1
    counts[IN_PROGRESS_FILTER] = sum(1 for slot in slots if slot.status in IN_PROGRESS_STATUSES)
    counts["SAS"] = sas_count
    counts["GRAND_TOTAL"] = len(slots)
    return dict(counts)


def grid_layout(slots_by_id: dict[str, PalletSlot], section: str = "FULL") -> dict:
    """Column groups of a grid section plus the floor zone, as drawn on the board."""
    groups = []
    for group in section_columns(section):
        groups.append(
            [
                {
                    "column": col,
                    "slots": [slots_by_id[sid] for sid in column_location_ids(col) if sid in slots_by_id],
                }
                for col in group
            ]
        )
    floor = [
        slots_by_id[floor_location_id(index)]
        for index in range(1, FLOOR_SLOT_COUNT + 1)
        if floor_location_id(index) in slots_by_id
    ]
    return {"section": section, "groups": groups, "floor": floor}


def classify_date(value: str, today: date | None = None) -> str:
    """Badge for an order date: ``new``, ``past``, ``today``, ``tomorrow``, ``later`` or ``unknown``.

    Dates are ``DD/MM`` strings read in the current year.
    """
    if value == NEW_DATE_SENTINEL:
        return "new"
    if not value or "/" not in value:
        return "unknown"
    today = today or date.today()
    try:
        day_text, month_text = value.split("/")[:2]
        item_date = date(today.year, int(month_text), int(day_text))
    except ValueError:
        return "unknown"
    if item_date < today:
        return "past"
    if item_date == today:
        return "today"
    if item_date == today + timedelta(days=1):
        return "tomorrow"
    return "later"


def family_name(full_name: str) -> str:
    """Everything after the first word of a client name (grid tiles show this)."""
    parts = (full_name or "").split()
    if len(parts) <= 1:
        return parts[0] if parts else ""
    return " ".join(parts[1:])

"""In-memory mapping of location id to slot record."""

from __future__ import annotations

from typing import Iterator, Mapping

from ...models.domain import Order, PalletSlot, SlotStatus
from ..layout.addressing import generate_all_location_ids


class SlotStore:
    """Canonical slot state.

    The only invariant enforced here couples ``status`` and ``order``: an empty
    slot never carries an order and an occupied slot always does.
    """

    def __init__(self, slots: Mapping[str, PalletSlot] | None = None) -> None:
        self._slots: dict[str, PalletSlot] = dict(slots or {})

    @classmethod
    def initial(cls) -> "SlotStore":
        return cls({location_id: PalletSlot(location_id=location_id) for location_id in generate_all_location_ids()})

    def get(self, location_id: str) -> PalletSlot | None:
        return self._slots.get(location_id)

    def set(self, location_id: str, status: SlotStatus, order: Order | None = None) -> PalletSlot:
        if status is SlotStatus.EMPTY:
            order = None
        elif order is None:
            raise ValueError(f"Slot {location_id} cannot be {status.value} without an order.")
        slot = PalletSlot(location_id=location_id, status=status, order=order)
        self._slots[location_id] = slot
        return slot

    def replace_all(self, slots: Mapping[str, PalletSlot]) -> None:
        self._slots = dict(slots)

    def values(self) -> list[PalletSlot]:
        return list(self._slots.values())

    def as_mapping(self) -> dict[str, PalletSlot]:
        return dict(self._slots)

    def ids(self) -> list[str]:
        return list(self._slots.keys())

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, location_id: object) -> bool:
        return location_id in self._slots

    def __iter__(self) -> Iterator[PalletSlot]:
        return iter(list(self._slots.values()))

    def to_payload(self) -> dict[str, dict]:
        return {location_id: slot.to_dict() for location_id, slot in self._slots.items()}

    @staticmethod
    def slots_from_payload(payload: Mapping[str, dict]) -> dict[str, PalletSlot]:
        slots: dict[str, PalletSlot] = {}
        for location_id, record in payload.items():
            slot = PalletSlot.from_dict({"locationId": location_id, **record})
            slots[location_id] = slot
        return slots

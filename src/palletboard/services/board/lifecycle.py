"""Slot state transitions: assigning, clearing, returning and moving orders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from ...config import settings
from ...models.domain import NEW_DATE_SENTINEL, Order, OrderArchive, PalletSlot, ReturnItem, SlotStatus
from .archive import ArchiveLog
from .helpers import Clock, day_month_label, new_item_id, now_ms
from .staging import ReturnsBuffer, SasBuffer
from .store import SlotStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ArchiveGuard:
    """Remembers the last archived order number to drop duplicate triggers."""

    window_ms: int
    last_order_number: str | None = None
    last_time: int | None = None

    def allow(self, order_number: str, now: int) -> bool:
        if (
            self.last_order_number == order_number
            and self.last_time is not None
            and now - self.last_time < self.window_ms
        ):
            return False
        self.last_order_number = order_number
        self.last_time = now
        return True


@dataclass(slots=True)
class Clipboard:
    order: Order
    status: SlotStatus
    source_id: str
    is_cutting: bool


class OrderLifecycle:
    def __init__(
        self,
        store: SlotStore,
        archive: ArchiveLog,
        sas: SasBuffer,
        returns: ReturnsBuffer,
        clock: Clock = now_ms,
        dedup_seconds: float | None = None,
    ) -> None:
        self.store = store
        self.archive = archive
        self.sas = sas
        self.returns = returns
        self.clock = clock
        window = settings.archive_dedup_seconds if dedup_seconds is None else dedup_seconds
        self.guard = ArchiveGuard(window_ms=int(window * 1000))
        self.clipboard: Clipboard | None = None

    def _require_slot(self, slot_id: str) -> PalletSlot:
        slot = self.store.get(slot_id)
        if slot is None:
            raise KeyError(slot_id)
        return slot

    def _archive(self, order: Order, location_id: str) -> OrderArchive | None:
        now = self.clock()
        if not self.guard.allow(order.order_number, now):
            logger.info(f"Skipping duplicate archive of order {order.order_number} from {location_id}")
            return None
        return self.archive.record(order, location_id, now)

    def assign(self, slot_id: str, status: SlotStatus, draft: Order | None = None) -> PalletSlot:
        """Write ``status``/``draft`` into a slot, archiving an evicted order first."""
        current = self.store.get(slot_id)
        if status is SlotStatus.EMPTY:
            if current is not None and current.order is not None:
                self._archive(current.order, slot_id)
            return self.store.set(slot_id, SlotStatus.EMPTY)

        if draft is not None and draft.created_at is None:
            draft = replace(draft, created_at=self.clock())
        return self.store.set(slot_id, status, draft)

    def clear(self, slot_id: str) -> PalletSlot:
        return self.assign(slot_id, SlotStatus.EMPTY)

    def save_slot(self, slot_id: str, status: SlotStatus, draft: Order | None = None) -> PalletSlot:
        """Editor save: keeps the order identity and entry time of the slot."""
        current = self._require_slot(slot_id)
        if status is SlotStatus.EMPTY:
            return self.clear(slot_id)
        if draft is None:
            raise ValueError(f"An order is required to mark slot {slot_id} as {status.value}.")
        previous = current.order
        draft = replace(
            draft,
            id=previous.id if previous is not None else (draft.id or new_item_id()),
            created_at=previous.created_at if previous is not None else draft.created_at,
            tournee=(draft.tournee or "") if status is SlotStatus.BLANC else "",
        )
        return self.assign(slot_id, status, draft)

    def move_to_returns(self, slot_id: str) -> ReturnItem | None:
        slot = self.store.get(slot_id)
        if slot is None or slot.order is None:
            return None
        order = slot.order
        item = ReturnItem(
            id=new_item_id(),
            return_number=order.order_number,
            client_name=order.client_name,
            date=day_month_label(self.clock()),
            created_at=order.created_at,
        )
        self.returns.append(item)
        self.clear(slot_id)
        return item

    def pick_from_sas(self, slot_id: str, sas_item_id: str, status: SlotStatus = SlotStatus.JAUNE) -> PalletSlot:
        """Move one SAS row into a slot as a freshly arrived order."""
        self._require_slot(slot_id)
        if not status.is_occupied:
            raise ValueError("A picked order needs an occupied status.")
        item = self.sas.find(sas_item_id)
        if item is None:
            raise KeyError(sas_item_id)
        draft = Order(
            id=new_item_id(),
            order_number=item.order_number,
            flux=item.flux,
            client_name=item.client_name,
            date=NEW_DATE_SENTINEL,
            info=item.info,
            comment=item.comment,
            tournee="",
        )
        slot = self.assign(slot_id, status, draft)
        self.sas.remove_by_id(sas_item_id)
        return slot

    def copy(self, slot_id: str) -> Clipboard | None:
        return self._hold(slot_id, is_cutting=False)

    def cut(self, slot_id: str) -> Clipboard | None:
        return self._hold(slot_id, is_cutting=True)

    def _hold(self, slot_id: str, *, is_cutting: bool) -> Clipboard | None:
        slot = self._require_slot(slot_id)
        if slot.order is None:
            return None
        self.clipboard = Clipboard(
            order=replace(slot.order),
            status=slot.status,
            source_id=slot_id,
            is_cutting=is_cutting,
        )
        return self.clipboard

    def cancel_clipboard(self) -> None:
        self.clipboard = None

    def paste(self, target_id: str) -> PalletSlot | None:
        self._require_slot(target_id)
        clipboard = self.clipboard
        if clipboard is None:
            return None
        if clipboard.is_cutting and clipboard.source_id == target_id:
            self.clipboard = None
            return self.store.get(target_id)
        slot = self.assign(target_id, clipboard.status, replace(clipboard.order, id=new_item_id()))
        if clipboard.is_cutting:
            self.clear(clipboard.source_id)
            self.clipboard = None
        return slot

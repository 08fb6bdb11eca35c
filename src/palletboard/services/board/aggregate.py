"""Board aggregate root and command dispatch."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping

from ...models.domain import OrderArchive, PalletSlot, ReturnItem, SasItem
from .archive import ArchiveLog
from .commands import (
    AddClassifiedSasItem,
    AssignSlot,
    CancelClipboard,
    ClearArchive,
    ClearReturns,
    ClearSlot,
    Command,
    CopySlot,
    CutSlot,
    EditStagingCell,
    MoveToReturns,
    PasteSlot,
    PickFromSas,
    RemoveStagingRow,
    SaveSlot,
    TransferSasToReturns,
)
from .helpers import Clock, day_month_label, new_item_id, now_ms
from .lifecycle import OrderLifecycle
from .staging import ReturnsBuffer, SasBuffer, StagingBuffer
from .store import SlotStore

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]

SNAPSHOT_SLOTS = "data"
SNAPSHOT_SAS = "sas"
SNAPSHOT_RETURNS = "returns"
SNAPSHOT_ARCHIVES = "archives"

# Commands that never touch persisted state.
_CLIPBOARD_ONLY = (CopySlot, CutSlot, CancelClipboard)
_NO_OP_WHEN_NONE = (MoveToReturns, PasteSlot, RemoveStagingRow)


class Board:
    """Slots, both staging buffers and the archive, persisted as one unit."""

    def __init__(
        self,
        slots: SlotStore | None = None,
        sas: Iterable[SasItem] | None = None,
        returns: Iterable[ReturnItem] | None = None,
        archives: Iterable[OrderArchive] | None = None,
        clock: Clock = now_ms,
        archive_limit: int | None = None,
        dedup_seconds: float | None = None,
    ) -> None:
        self.clock = clock
        self.slots = slots if slots is not None else SlotStore.initial()
        self.sas = SasBuffer(sas, clock=clock)
        self.returns = ReturnsBuffer(returns, clock=clock)
        self.archive = ArchiveLog(archives, limit=archive_limit)
        self.lifecycle = OrderLifecycle(
            self.slots,
            self.archive,
            self.sas,
            self.returns,
            clock=clock,
            dedup_seconds=dedup_seconds,
        )
        self._listeners: list[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in self._listeners:
            listener()

    def buffer(self, name: str) -> StagingBuffer:
        match name:
            case "sas":
                return self.sas
            case "returns":
                return self.returns
            case _:
                raise ValueError(f"Unknown staging buffer '{name}'.")

    def dispatch(self, command: Command) -> Any:
        """Apply one command and notify listeners; returns the command's result."""
        result = self._apply(command)
        if isinstance(command, _CLIPBOARD_ONLY):
            return result
        if result is None and isinstance(command, _NO_OP_WHEN_NONE):
            return result
        self._changed()
        return result

    def _apply(self, command: Command) -> Any:
        lifecycle = self.lifecycle
        match command:
            case AssignSlot(slot_id=slot_id, status=status, order=order):
                return lifecycle.assign(slot_id, status, order)
            case SaveSlot(slot_id=slot_id, status=status, order=order):
                return lifecycle.save_slot(slot_id, status, order)
            case ClearSlot(slot_id=slot_id):
                return lifecycle.clear(slot_id)
            case MoveToReturns(slot_id=slot_id):
                return lifecycle.move_to_returns(slot_id)
            case PickFromSas(slot_id=slot_id, sas_item_id=sas_item_id, status=status):
                return lifecycle.pick_from_sas(slot_id, sas_item_id, status)
            case CopySlot(slot_id=slot_id):
                return lifecycle.copy(slot_id)
            case CutSlot(slot_id=slot_id):
                return lifecycle.cut(slot_id)
            case PasteSlot(slot_id=slot_id):
                return lifecycle.paste(slot_id)
            case CancelClipboard():
                return lifecycle.cancel_clipboard()
            case EditStagingCell(buffer=name, index=index, field=field, value=value):
                return self.buffer(name).edit_cell(index, field, value)
            case RemoveStagingRow(buffer=name, index=index):
                return self.buffer(name).remove_row(index)
            case ClearReturns():
                return self.returns.clear()
            case TransferSasToReturns(sas_item_id=sas_item_id):
                return self._transfer_sas_to_returns(sas_item_id)
            case AddClassifiedSasItem(order_number=number, client_name=client, flux=flux):
                return self.sas.add_classified(number, client, flux)
            case ClearArchive():
                return self.archive.clear()
            case _:
                raise TypeError(f"Unsupported command {type(command).__name__}.")

    def _transfer_sas_to_returns(self, sas_item_id: str) -> ReturnItem:
        item = self.sas.find(sas_item_id)
        if item is None:
            raise KeyError(sas_item_id)
        created = ReturnItem(
            id=new_item_id(),
            return_number=item.order_number,
            client_name=item.client_name,
            date=item.date or day_month_label(self.clock()),
        )
        self.returns.append(created)
        self.sas.remove_by_id(sas_item_id)
        logger.info(f"Moved SAS row {sas_item_id} ({created.return_number}) to returns")
        return created

    def to_snapshot(self) -> dict[str, Any]:
        return {
            SNAPSHOT_SLOTS: self.slots.to_payload(),
            SNAPSHOT_RETURNS: self.returns.to_payload(),
            SNAPSHOT_SAS: self.sas.to_payload(),
            SNAPSHOT_ARCHIVES: self.archive.to_payload(),
        }

    def replace_from(
        self,
        *,
        slots: Mapping[str, PalletSlot] | None = None,
        sas: Iterable[SasItem] | None = None,
        returns: Iterable[ReturnItem] | None = None,
        archives: Iterable[OrderArchive] | None = None,
    ) -> list[str]:
        """Wholesale-replace the given parts; ``None`` leaves a part untouched."""
        replaced: list[str] = []
        if slots is not None:
            self.slots.replace_all(slots)
            replaced.append(SNAPSHOT_SLOTS)
        if sas is not None:
            self.sas.replace_all(sas)
            replaced.append(SNAPSHOT_SAS)
        if returns is not None:
            self.returns.replace_all(returns)
            replaced.append(SNAPSHOT_RETURNS)
        if archives is not None:
            self.archive.replace_all(archives)
            replaced.append(SNAPSHOT_ARCHIVES)
        if replaced:
            self._changed()
        return replaced

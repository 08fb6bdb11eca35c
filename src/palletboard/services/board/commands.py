"""Operator intents applied to the board aggregate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from ...models.domain import Flux, Order, SlotStatus

BufferName = Literal["sas", "returns"]


class Command:
    """Base class for board commands."""


@dataclass(frozen=True)
class AssignSlot(Command):
    slot_id: str
    status: SlotStatus
    order: Optional[Order] = None


@dataclass(frozen=True)
class SaveSlot(Command):
    slot_id: str
    status: SlotStatus
    order: Optional[Order] = None


@dataclass(frozen=True)
class ClearSlot(Command):
    slot_id: str


@dataclass(frozen=True)
class MoveToReturns(Command):
    slot_id: str


@dataclass(frozen=True)
class PickFromSas(Command):
    slot_id: str
    sas_item_id: str
    status: SlotStatus = SlotStatus.JAUNE


@dataclass(frozen=True)
class CopySlot(Command):
    slot_id: str


@dataclass(frozen=True)
class CutSlot(Command):
    slot_id: str


@dataclass(frozen=True)
class PasteSlot(Command):
    slot_id: str


@dataclass(frozen=True)
class CancelClipboard(Command):
    pass


@dataclass(frozen=True)
class EditStagingCell(Command):
    buffer: BufferName
    index: int
    field: str
    value: str


@dataclass(frozen=True)
class RemoveStagingRow(Command):
    buffer: BufferName
    index: int


@dataclass(frozen=True)
class ClearReturns(Command):
    pass


@dataclass(frozen=True)
class TransferSasToReturns(Command):
    sas_item_id: str


@dataclass(frozen=True)
class AddClassifiedSasItem(Command):
    order_number: str
    client_name: str
    flux: Flux = Flux.NONE


@dataclass(frozen=True)
class ClearArchive(Command):
    pass

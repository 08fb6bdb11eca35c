"""Slot endpoints: listing, editing and moving orders between slots."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from ...schemas.board import ClipboardModel, PickFromSasRequest, ReturnItemModel, SaveSlotRequest, SlotModel
from ...services.board.commands import (
    CancelClipboard,
    ClearSlot,
    CopySlot,
    CutSlot,
    MoveToReturns,
    PasteSlot,
    PickFromSas,
    SaveSlot,
)
from ...services.board.service import BoardService
from ...services.board.views import classify_date, compute_stats, family_name, filter_slots, grid_layout
from ...services.export import slot_line
from ...services.layout.addressing import SECTION_CYCLE, next_section, position_label, previous_section
from ..dependencies import board_service, run_command

router = APIRouter(tags=["slots"])


def _tile(slot) -> dict:
    """Grid tile: the slot plus the date badge and short client name drawn on it."""
    payload = SlotModel.from_domain(slot).model_dump(by_alias=True, mode="json")
    order = slot.order
    payload["dateBadge"] = classify_date(order.date) if order else None
    payload["familyName"] = family_name(order.client_name) if order else None
    payload["positionLabel"] = position_label(slot.location_id)
    return payload


def _slot_or_404(service: BoardService, slot_id: str) -> SlotModel:
    slot = service.read(lambda board: board.slots.get(slot_id))
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown slot '{slot_id}'.")
    return SlotModel.from_domain(slot)


@router.get("/slots", response_model=List[SlotModel], status_code=status.HTTP_200_OK)
def list_slots(
    status_filter: str | None = Query(default=None, alias="status", description="Slot status or ENCOURS"),
    search: str | None = Query(default=None, description="Case-insensitive search across slot and order fields"),
    service: BoardService = Depends(board_service),
) -> List[SlotModel]:
    slots = service.read(lambda board: filter_slots(board.slots.values(), status_filter, search))
    return [SlotModel.from_domain(slot) for slot in slots]


@router.get("/slots/stats", status_code=status.HTTP_200_OK)
def get_slot_stats(service: BoardService = Depends(board_service)) -> dict[str, int]:
    return service.read(lambda board: compute_stats(board.slots.values(), sas_count=len(board.sas)))


@router.get("/slots/grid", status_code=status.HTTP_200_OK)
def get_slot_grid(
    section: str = Query(default="FULL", description="FULL, SECTION_1, SECTION_2 or SECTION_3"),
    service: BoardService = Depends(board_service),
) -> dict:
    if section not in SECTION_CYCLE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown grid section '{section}'.")
    layout = service.read(lambda board: grid_layout(board.slots.as_mapping(), section))
    return {
        "section": layout["section"],
        "nextSection": next_section(section),
        "previousSection": previous_section(section),
        "groups": [
            [
                {"column": column["column"], "slots": [_tile(slot) for slot in column["slots"]]}
                for column in group
            ]
            for group in layout["groups"]
        ],
        "floor": [_tile(slot) for slot in layout["floor"]],
    }


@router.get("/slots/{slot_id}", response_model=SlotModel, status_code=status.HTTP_200_OK)
def get_slot(slot_id: str, service: BoardService = Depends(board_service)) -> SlotModel:
    return _slot_or_404(service, slot_id)


@router.put("/slots/{slot_id}", response_model=SlotModel, status_code=status.HTTP_200_OK)
def save_slot(slot_id: str, payload: SaveSlotRequest, service: BoardService = Depends(board_service)) -> SlotModel:
    order = payload.order.to_domain() if payload.order else None
    slot = run_command(service, SaveSlot(slot_id, payload.status, order))
    return SlotModel.from_domain(slot)


@router.delete("/slots/{slot_id}", response_model=SlotModel, status_code=status.HTTP_200_OK)
def clear_slot(slot_id: str, service: BoardService = Depends(board_service)) -> SlotModel:
    _slot_or_404(service, slot_id)
    return SlotModel.from_domain(run_command(service, ClearSlot(slot_id)))


@router.post("/slots/{slot_id}/return", response_model=ReturnItemModel | None, status_code=status.HTTP_200_OK)
def move_slot_to_returns(slot_id: str, service: BoardService = Depends(board_service)) -> ReturnItemModel | None:
    _slot_or_404(service, slot_id)
    item = run_command(service, MoveToReturns(slot_id))
    return ReturnItemModel.model_validate(item.to_dict()) if item else None


@router.post("/slots/{slot_id}/pick-from-sas", response_model=SlotModel, status_code=status.HTTP_200_OK)
def pick_from_sas(slot_id: str, payload: PickFromSasRequest, service: BoardService = Depends(board_service)) -> SlotModel:
    slot = run_command(service, PickFromSas(slot_id, payload.sas_item_id, payload.status))
    return SlotModel.from_domain(slot)


@router.get("/slots/{slot_id}/copy-line", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
def copy_slot_line(slot_id: str, service: BoardService = Depends(board_service)) -> PlainTextResponse:
    _slot_or_404(service, slot_id)
    line = service.read(lambda board: slot_line(board.slots.get(slot_id)))
    return PlainTextResponse(line, media_type="text/tab-separated-values")


def _clipboard_model(clipboard) -> ClipboardModel | None:
    if clipboard is None:
        return None
    return ClipboardModel(
        sourceId=clipboard.source_id,
        status=clipboard.status,
        isCutting=clipboard.is_cutting,
        order=clipboard.order.to_dict(),
    )


@router.post("/slots/{slot_id}/copy", response_model=ClipboardModel | None, status_code=status.HTTP_200_OK)
def copy_slot(slot_id: str, service: BoardService = Depends(board_service)) -> ClipboardModel | None:
    return _clipboard_model(run_command(service, CopySlot(slot_id)))


@router.post("/slots/{slot_id}/cut", response_model=ClipboardModel | None, status_code=status.HTTP_200_OK)
def cut_slot(slot_id: str, service: BoardService = Depends(board_service)) -> ClipboardModel | None:
    return _clipboard_model(run_command(service, CutSlot(slot_id)))


@router.post("/slots/{slot_id}/paste", response_model=SlotModel, status_code=status.HTTP_200_OK)
def paste_slot(slot_id: str, service: BoardService = Depends(board_service)) -> SlotModel:
    slot = run_command(service, PasteSlot(slot_id))
    if slot is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Clipboard is empty.")
    return SlotModel.from_domain(slot)


@router.get("/clipboard", response_model=ClipboardModel | None, status_code=status.HTTP_200_OK)
def get_clipboard(service: BoardService = Depends(board_service)) -> ClipboardModel | None:
    return _clipboard_model(service.read(lambda board: board.lifecycle.clipboard))


@router.delete("/clipboard", status_code=status.HTTP_204_NO_CONTENT)
def cancel_clipboard(service: BoardService = Depends(board_service)) -> None:
    service.execute(CancelClipboard())

"""Spreadsheet export endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse

from ...services.board.service import BoardService
from ...services.board.views import filter_slots
from ...services.export import slots_to_tsv
from ..dependencies import board_service

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/slots", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
def export_slots(
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None),
    header: bool = Query(default=True, description="Include the column header row"),
    service: BoardService = Depends(board_service),
) -> PlainTextResponse:
    """Filtered slot list as tab-separated text, in rack order."""
    text = service.read(
        lambda board: slots_to_tsv(filter_slots(board.slots.values(), status_filter, search), include_header=header)
    )
    return PlainTextResponse(text, media_type="text/tab-separated-values")

"""Returns staging buffer endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from ...schemas.board import CellEditRequest, ReturnItemModel
from ...services.board.commands import ClearReturns, EditStagingCell, RemoveStagingRow
from ...services.board.service import BoardService
from ...services.export import returns_to_tsv
from ..dependencies import board_service, run_command

router = APIRouter(prefix="/returns", tags=["returns"])


def _models(rows) -> List[ReturnItemModel]:
    return [ReturnItemModel.model_validate(row.to_dict()) for row in rows]


@router.get("", response_model=List[ReturnItemModel], status_code=status.HTTP_200_OK)
def list_returns(service: BoardService = Depends(board_service)) -> List[ReturnItemModel]:
    return _models(service.read(lambda board: board.returns.rows))


@router.put("/cells", response_model=List[ReturnItemModel], status_code=status.HTTP_200_OK)
def edit_return_cell(payload: CellEditRequest, service: BoardService = Depends(board_service)) -> List[ReturnItemModel]:
    rows = run_command(service, EditStagingCell("returns", payload.index, payload.field, payload.value))
    return _models(rows)


@router.delete("/{index}", response_model=List[ReturnItemModel], status_code=status.HTTP_200_OK)
def remove_return_row(index: int, service: BoardService = Depends(board_service)) -> List[ReturnItemModel]:
    removed = run_command(service, RemoveStagingRow("returns", index))
    if removed is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No return row at index {index}.")
    return _models(service.read(lambda board: board.returns.rows))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_returns(service: BoardService = Depends(board_service)) -> None:
    run_command(service, ClearReturns())


@router.get("/export", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
def export_returns(
    ids: List[str] | None = Query(default=None, description="Return row ids to export; all rows when omitted"),
    service: BoardService = Depends(board_service),
) -> PlainTextResponse:
    text = service.read(lambda board: returns_to_tsv(board.returns.select(ids)))
    return PlainTextResponse(text, media_type="text/tab-separated-values")

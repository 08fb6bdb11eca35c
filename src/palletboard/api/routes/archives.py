"""Archive history endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status

from ...schemas.board import ArchiveModel
from ...services.board.commands import ClearArchive
from ...services.board.service import BoardService
from ..dependencies import board_service, run_command

router = APIRouter(prefix="/archives", tags=["archives"])


@router.get("", response_model=List[ArchiveModel], status_code=status.HTTP_200_OK)
def list_archives(
    search: str | None = Query(default=None, description="Filter by order number, client, flux or location"),
    service: BoardService = Depends(board_service),
) -> List[ArchiveModel]:
    entries = service.read(lambda board: board.archive.search(search))
    return [ArchiveModel.model_validate(entry.to_dict()) for entry in entries]


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_archives(service: BoardService = Depends(board_service)) -> None:
    run_command(service, ClearArchive())

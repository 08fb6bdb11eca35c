"""Save and synchronization endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from ...schemas.board import SaveResultModel, SyncStatusModel
from ...services.board.service import BoardService
from ..dependencies import board_service

router = APIRouter(prefix="/sync", tags=["sync"])


@router.get("", response_model=SyncStatusModel, status_code=status.HTTP_200_OK)
def get_sync_status(service: BoardService = Depends(board_service)) -> SyncStatusModel:
    sync = service.sync
    return SyncStatusModel(
        dirty=sync.dirty,
        remoteEnabled=sync.remote_enabled,
        subscribed=sync.subscribed,
        lastSavedAt=sync.last_saved_at,
        lastRemoteAppliedAt=sync.last_remote_applied_at,
    )


@router.post("/save", response_model=SaveResultModel, status_code=status.HTTP_200_OK)
def save_board(service: BoardService = Depends(board_service)) -> SaveResultModel:
    """Persist the board locally and mirror it to the shared row when configured."""
    result = service.save()
    return SaveResultModel(
        localSaved=result.local_saved,
        remoteSynced=result.remote_synced,
        savedAt=result.saved_at,
    )


@router.get("/snapshot", status_code=status.HTTP_200_OK)
def get_snapshot(service: BoardService = Depends(board_service)) -> Dict[str, Any]:
    return service.read(lambda board: board.to_snapshot())


@router.post("/snapshot", status_code=status.HTTP_200_OK)
def apply_snapshot(
    snapshot: Dict[str, Any] = Body(..., description="Partial or full board snapshot"),
    service: BoardService = Depends(board_service),
) -> Dict[str, Any]:
    try:
        replaced = service.apply_remote_snapshot(snapshot)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    return {"replaced": replaced}

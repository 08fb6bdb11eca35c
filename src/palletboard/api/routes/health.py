"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...services.board.service import BoardService
from ..dependencies import board_service

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database(service: BoardService = Depends(board_service)) -> dict:
    """Check the shared board row used for remote sync."""
    remote = service.sync.remote
    if remote is None or not remote.enabled:
        return {
            "configured": False,
            "message": "Supabase not configured. Set PALLET_SUPABASE_URL and PALLET_SUPABASE_KEY environment variables.",
        }

    row = remote.fetch()
    return {
        "configured": True,
        "table": settings.remote_table,
        "row_id": settings.remote_row_id,
        "row_exists": row is not None,
        "updated_at": row.updated_at if row else None,
        "subscribed": service.sync.subscribed,
        "message": "Shared board row found." if row else "Database configured but the shared board row is missing or unreadable.",
    }

"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from ..services.board.commands import Command
from ..services.board.service import BoardService, get_board_service


def board_service() -> BoardService:
    return get_board_service()


def run_command(service: BoardService, command: Command) -> Any:
    """Execute ``command``, mapping unknown ids to 404 and rejected input to 400."""
    try:
        return service.execute(command)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown id {exc}.") from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

"""Operator preference endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...schemas.board import ThemeModel
from ...services.board.service import BoardService
from ..dependencies import board_service

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/theme", response_model=ThemeModel, status_code=status.HTTP_200_OK)
def get_theme(service: BoardService = Depends(board_service)) -> ThemeModel:
    return ThemeModel(theme=service.get_theme())


@router.put("/theme", response_model=ThemeModel, status_code=status.HTTP_200_OK)
def set_theme(payload: ThemeModel, service: BoardService = Depends(board_service)) -> ThemeModel:
    return ThemeModel(theme=service.set_theme(payload.theme))

"""SAS staging buffer endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from ...schemas.board import CellEditRequest, ReturnItemModel, SasItemModel, ScanResponse
from ...services.board.commands import EditStagingCell, RemoveStagingRow, TransferSasToReturns
from ...services.board.service import BoardService
from ...services.classification import ClassificationError, NothingExtractedError
from ...services.export import sas_to_tsv
from ..dependencies import board_service, run_command

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sas", tags=["sas"])


def _models(rows) -> List[SasItemModel]:
    return [SasItemModel.model_validate(row.to_dict()) for row in rows]


@router.get("", response_model=List[SasItemModel], status_code=status.HTTP_200_OK)
def list_sas(service: BoardService = Depends(board_service)) -> List[SasItemModel]:
    return _models(service.read(lambda board: board.sas.rows))


@router.get("/slot-candidates", response_model=List[SasItemModel], status_code=status.HTTP_200_OK)
def list_slot_candidates(service: BoardService = Depends(board_service)) -> List[SasItemModel]:
    """SAS rows that can be picked into a slot (return numbers excluded)."""
    return _models(service.read(lambda board: board.sas.slot_candidates()))


@router.get("/return-candidates", response_model=List[SasItemModel], status_code=status.HTTP_200_OK)
def list_return_candidates(service: BoardService = Depends(board_service)) -> List[SasItemModel]:
    return _models(service.read(lambda board: board.sas.return_candidates()))


@router.put("/cells", response_model=List[SasItemModel], status_code=status.HTTP_200_OK)
def edit_sas_cell(payload: CellEditRequest, service: BoardService = Depends(board_service)) -> List[SasItemModel]:
    rows = run_command(service, EditStagingCell("sas", payload.index, payload.field, payload.value))
    return _models(rows)


@router.delete("/{index}", response_model=List[SasItemModel], status_code=status.HTTP_200_OK)
def remove_sas_row(index: int, service: BoardService = Depends(board_service)) -> List[SasItemModel]:
    removed = run_command(service, RemoveStagingRow("sas", index))
    if removed is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No SAS row at index {index}.")
    return _models(service.read(lambda board: board.sas.rows))


@router.post("/{item_id}/to-returns", response_model=ReturnItemModel, status_code=status.HTTP_200_OK)
def transfer_to_returns(item_id: str, service: BoardService = Depends(board_service)) -> ReturnItemModel:
    created = run_command(service, TransferSasToReturns(item_id))
    return ReturnItemModel.model_validate(created.to_dict())


@router.get("/export", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
def export_sas(service: BoardService = Depends(board_service)) -> PlainTextResponse:
    text = service.read(lambda board: sas_to_tsv(board.sas.rows))
    return PlainTextResponse(text, media_type="text/tab-separated-values")


@router.post("/scan", response_model=ScanResponse, status_code=status.HTTP_201_CREATED)
async def scan_document(
    file: UploadFile = File(..., description="Photo of a delivery or return note"),
    service: BoardService = Depends(board_service),
) -> ScanResponse:
    image = await file.read()
    if not image:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty.")
    try:
        result, item = await run_in_threadpool(service.scan_document, image, file.content_type or "image/jpeg")
    except NothingExtractedError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Aucune information détectée") from exc
    except ClassificationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ValueError as exc:
        logger.warning(f"Document scan unavailable: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return ScanResponse(item=SasItemModel.model_validate(item.to_dict()), complete=result.is_complete)

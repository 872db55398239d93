import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile

from app.sockstock.core.deps import get_batch_service, get_inventory_service
from app.sockstock.core.error_catalog import ErrorCatalog, InternalError
from app.sockstock.schemas.errors import ApiErrorResponse, ApiValidationErrorResponse
from app.sockstock.schemas.stock import (
    BatchUploadResponse,
    StockLotResponse,
    StockLotUpdateRequest,
    StockMovementRequest,
    StockOperationResponse,
)
from app.sockstock.services.batch import BatchIngestionService
from app.sockstock.services.inventory import InventoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/socks")

_CLIENT_ERRORS = {400: {"model": ApiValidationErrorResponse}}
_CONFLICT = {409: {"model": ApiErrorResponse}}


@router.post(
    "/income",
    response_model=StockOperationResponse,
    responses={**_CLIENT_ERRORS, **_CONFLICT},
)
def income_socks(
    payload: StockMovementRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    service.income(payload)
    return StockOperationResponse(message="Socks income successfully")


@router.post(
    "/outcome",
    response_model=StockOperationResponse,
    responses={**_CLIENT_ERRORS, **_CONFLICT},
)
def outcome_socks(
    payload: StockMovementRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    service.outcome(payload)
    return StockOperationResponse(message="Socks outcome successfully")


@router.get("", response_model=int, responses=_CLIENT_ERRORS)
def count_socks(
    color: str = Query(..., min_length=1),
    comparison: str = Query(...),
    cotton_percentage: int = Query(..., alias="cottonPercentage"),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.count(color, comparison, cotton_percentage)


@router.get("/{lot_id}", response_model=StockLotResponse, responses=_CLIENT_ERRORS)
def get_socks(
    lot_id: UUID,
    service: InventoryService = Depends(get_inventory_service),
):
    return StockLotResponse.model_validate(service.get(lot_id))


@router.put(
    "/{lot_id}",
    response_model=StockOperationResponse,
    responses={**_CLIENT_ERRORS, **_CONFLICT},
)
def update_socks(
    lot_id: UUID,
    payload: StockLotUpdateRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    service.update(lot_id, payload)
    return StockOperationResponse(message="Socks updated successfully")


@router.post(
    "/batch",
    response_model=BatchUploadResponse,
    responses={**_CLIENT_ERRORS, **_CONFLICT, 500: {"model": ApiErrorResponse}},
)
def upload_batch(
    file: UploadFile = File(...),
    service: BatchIngestionService = Depends(get_batch_service),
):
    try:
        content = file.file.read()
    except OSError as exc:
        logger.exception("Failed to read uploaded batch %s", file.filename)
        raise InternalError(
            ErrorCatalog.BATCH_READ_FAILED,
            details={"filename": file.filename, "type": exc.__class__.__name__},
        ) from exc
    result = service.ingest(content, filename=file.filename)
    return BatchUploadResponse(filename=result.filename, processed=result.processed)

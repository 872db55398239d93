from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from app.sockstock.core.error_catalog import ConflictError, ErrorCatalog, InvalidInputError
from app.sockstock.core.logging import log_json
from app.sockstock.core.metrics import metrics
from app.sockstock.db.models import StockLot
from app.sockstock.repos.stock import StockLotRepository
from app.sockstock.schemas.stock import (
    INT_COLUMN_MAX,
    INT_COLUMN_MIN,
    Comparison,
    StockLotUpdateRequest,
    StockMovementRequest,
)

logger = logging.getLogger(__name__)


def _movement_snapshot(request: StockMovementRequest | StockLotUpdateRequest) -> dict:
    return {
        "color": request.color,
        "cotton_percentage": request.cotton_percentage,
        "quantity": request.quantity,
    }


def _validate_fields(color: str, cotton_percentage: int, quantity: int, *, min_quantity: int) -> None:
    if not color or not color.strip():
        raise InvalidInputError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"field": "color", "message": "color is required"},
        )
    if not 0 <= cotton_percentage <= 100:
        raise InvalidInputError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"field": "cottonPercentage", "message": "cottonPercentage must be between 0 and 100"},
        )
    if quantity < min_quantity:
        raise InvalidInputError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"field": "quantity", "message": f"quantity must be greater than or equal to {min_quantity}"},
        )
    if quantity > INT_COLUMN_MAX:
        raise InvalidInputError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"field": "quantity", "message": f"quantity must be less than or equal to {INT_COLUMN_MAX}"},
        )


def parse_comparison(value: str | Comparison) -> Comparison:
    if isinstance(value, Comparison):
        return value
    try:
        return Comparison(value)
    except ValueError as exc:
        raise InvalidInputError(
            ErrorCatalog.INVALID_COMPARISON,
            details={"comparison": value, "allowed": [item.value for item in Comparison]},
        ) from exc


class InventoryService:
    """Stock movements over a single ``socks`` table.

    Every call re-reads the lot it touches and commits once. Writes are
    version-checked by the store; a lost race surfaces as ``ConflictError``
    and is never retried here.
    """

    def __init__(self, repo: StockLotRepository):
        self.repo = repo

    def income(self, request: StockMovementRequest) -> StockLot:
        _validate_fields(request.color, request.cotton_percentage, request.quantity, min_quantity=1)
        lot = self.repo.get_by_key(request.color, request.cotton_percentage)
        if lot is None:
            lot = StockLot(
                color=request.color,
                cotton_percentage=request.cotton_percentage,
                quantity=request.quantity,
            )
            created = True
        else:
            if lot.quantity + request.quantity > INT_COLUMN_MAX:
                raise InvalidInputError(
                    ErrorCatalog.QUANTITY_LIMIT_EXCEEDED,
                    details={
                        "lot_quantity": lot.quantity,
                        "max_quantity": INT_COLUMN_MAX,
                        **_movement_snapshot(request),
                    },
                )
            lot.quantity += request.quantity
            created = False
        lot = self._persist(lot, operation="income", request=request)
        log_json(
            logger,
            {
                "event": "stock_income",
                "lot_id": str(lot.id),
                "created": created,
                "lot_quantity": lot.quantity,
                "version": lot.version,
                **_movement_snapshot(request),
            },
        )
        return lot

    def outcome(self, request: StockMovementRequest) -> StockLot:
        _validate_fields(request.color, request.cotton_percentage, request.quantity, min_quantity=1)
        lot = self.repo.get_by_key(request.color, request.cotton_percentage)
        if lot is None:
            log_json(
                logger,
                {"event": "stock_outcome_rejected", "reason": "not_found", **_movement_snapshot(request)},
                level=logging.WARNING,
            )
            raise InvalidInputError(ErrorCatalog.STOCK_NOT_FOUND, details=_movement_snapshot(request))
        if request.quantity > lot.quantity:
            log_json(
                logger,
                {
                    "event": "stock_outcome_rejected",
                    "reason": "insufficient",
                    "available": lot.quantity,
                    **_movement_snapshot(request),
                },
                level=logging.WARNING,
            )
            raise InvalidInputError(
                ErrorCatalog.INSUFFICIENT_STOCK,
                details={"requested": request.quantity, "available": lot.quantity},
            )
        lot.quantity -= request.quantity
        lot = self._persist(lot, operation="outcome", request=request)
        log_json(
            logger,
            {
                "event": "stock_outcome",
                "lot_id": str(lot.id),
                "lot_quantity": lot.quantity,
                "version": lot.version,
                **_movement_snapshot(request),
            },
        )
        return lot

    def count(self, color: str, comparison: str | Comparison, cotton_percentage: int) -> int:
        resolved = parse_comparison(comparison)
        color = color.strip() if color else ""
        if not color:
            raise InvalidInputError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"field": "color", "message": "color is required"},
            )
        if not INT_COLUMN_MIN <= cotton_percentage <= INT_COLUMN_MAX:
            raise InvalidInputError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"field": "cottonPercentage", "message": "cottonPercentage is out of range"},
            )
        total = self.repo.count(color, resolved, cotton_percentage)
        log_json(
            logger,
            {
                "event": "stock_count",
                "color": color,
                "comparison": resolved.value,
                "cotton_percentage": cotton_percentage,
                "result": total,
            },
        )
        return total

    def get(self, lot_id: uuid.UUID) -> StockLot:
        lot = self.repo.get_by_id(lot_id)
        if lot is None:
            raise InvalidInputError(
                ErrorCatalog.STOCK_NOT_FOUND,
                details={"message": f"Socks with id: {lot_id} not found", "id": str(lot_id)},
            )
        return lot

    def update(self, lot_id: uuid.UUID, request: StockLotUpdateRequest) -> StockLot:
        _validate_fields(request.color, request.cotton_percentage, request.quantity, min_quantity=0)
        lot = self.get(lot_id)
        owner = self.repo.get_by_key(request.color, request.cotton_percentage)
        if owner is not None and owner.id != lot.id:
            raise InvalidInputError(
                ErrorCatalog.DUPLICATE_STOCK_LOT,
                details={"id": str(lot_id), "existing_id": str(owner.id), **_movement_snapshot(request)},
            )
        lot.color = request.color
        lot.cotton_percentage = request.cotton_percentage
        lot.quantity = request.quantity
        lot = self._persist(lot, operation="update", request=request)
        log_json(
            logger,
            {"event": "stock_update", "lot_id": str(lot.id), "version": lot.version, **_movement_snapshot(request)},
        )
        return lot

    def _persist(self, lot: StockLot, *, operation: str, request) -> StockLot:
        try:
            lot = self.repo.save(lot)
        except (StaleDataError, IntegrityError) as exc:
            self.repo.rollback()
            metrics.increment_stock_conflict(operation)
            log_json(
                logger,
                {
                    "event": "stock_conflict",
                    "operation": operation,
                    "error_class": exc.__class__.__name__,
                    **_movement_snapshot(request),
                },
                level=logging.WARNING,
            )
            raise ConflictError(
                ErrorCatalog.STOCK_CONFLICT,
                details={"operation": operation, **_movement_snapshot(request)},
            ) from exc
        metrics.increment_stock_movement(operation)
        return lot

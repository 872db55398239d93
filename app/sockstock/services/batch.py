from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from typing import Iterator

from pydantic import ValidationError

from app.sockstock.core.config import settings
from app.sockstock.core.error_catalog import AppError, ErrorCatalog, InvalidInputError
from app.sockstock.core.logging import log_json
from app.sockstock.core.metrics import metrics
from app.sockstock.schemas.stock import StockMovementRequest
from app.sockstock.services.inventory import InventoryService

logger = logging.getLogger(__name__)

BATCH_COLUMNS = ("color", "cottonPercentage", "quantity")
_INTEGER_CELL = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class BatchResult:
    filename: str | None
    processed: int


@dataclass(frozen=True)
class _CsvRow:
    number: int
    line: int
    values: list[str]


def _row_error(row: _CsvRow, message: str, errors: list[dict] | None = None) -> InvalidInputError:
    details = {"row": row.number, "line": row.line, "values": row.values, "message": message}
    if errors:
        details["errors"] = errors
    return InvalidInputError(ErrorCatalog.INVALID_BATCH_ROW, details=details)


def _iter_rows(reader) -> Iterator[_CsvRow]:
    number = 0
    while True:
        try:
            values = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            raise InvalidInputError(
                ErrorCatalog.INVALID_BATCH_ROW,
                details={"line": reader.line_num, "message": str(exc)},
            ) from exc
        if not values or all(not value.strip() for value in values):
            continue
        number += 1
        yield _CsvRow(number=number, line=reader.line_num, values=values)


def parse_row(row: _CsvRow) -> StockMovementRequest:
    if len(row.values) != len(BATCH_COLUMNS):
        raise _row_error(row, f"expected {len(BATCH_COLUMNS)} columns, got {len(row.values)}")
    color, cotton_percentage, quantity = (value.strip() for value in row.values)
    errors = [
        {"field": field, "message": "Input should be a valid integer"}
        for field, value in (("cottonPercentage", cotton_percentage), ("quantity", quantity))
        if not _INTEGER_CELL.fullmatch(value)
    ]
    if errors:
        raise _row_error(row, "Invalid data in CSV file", errors)
    try:
        return StockMovementRequest.model_validate(
            {"color": color, "cottonPercentage": cotton_percentage, "quantity": quantity}
        )
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(item) for item in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        raise _row_error(row, "Invalid data in CSV file", errors) from exc


class BatchIngestionService:
    """Apply a CSV of stock deltas as a sequence of income operations.

    Rows are committed one by one. A rejected row stops the ingestion but
    leaves the rows before it in place, so a failed upload may be partially
    applied.
    """

    def __init__(
        self,
        inventory: InventoryService,
        *,
        max_bytes: int | None = None,
        encoding: str | None = None,
    ):
        self.inventory = inventory
        self.max_bytes = max_bytes if max_bytes is not None else settings.BATCH_MAX_BYTES
        self.encoding = encoding or settings.BATCH_ENCODING

    @staticmethod
    def _empty(filename: str | None) -> InvalidInputError:
        log_json(
            logger,
            {"event": "batch_rejected", "reason": "empty", "filename": filename},
            level=logging.WARNING,
        )
        return InvalidInputError(ErrorCatalog.EMPTY_BATCH, details={"filename": filename})

    def ingest(self, content: bytes, *, filename: str | None = None) -> BatchResult:
        if not content:
            raise self._empty(filename)
        if len(content) > self.max_bytes:
            raise InvalidInputError(
                ErrorCatalog.BATCH_TOO_LARGE,
                details={"filename": filename, "size": len(content), "max_bytes": self.max_bytes},
            )
        try:
            text = content.decode(self.encoding)
        except UnicodeDecodeError as exc:
            raise InvalidInputError(
                ErrorCatalog.INVALID_BATCH_ROW,
                details={"filename": filename, "message": f"file is not valid {self.encoding} text"},
            ) from exc
        if not text.lstrip("\ufeff").strip():
            raise self._empty(filename)

        reader = csv.reader(io.StringIO(text, newline=""))
        rows = _iter_rows(reader)
        header = next(rows, None)
        received = [value.strip() for value in header.values] if header else []
        if tuple(received) != BATCH_COLUMNS:
            raise InvalidInputError(
                ErrorCatalog.INVALID_BATCH_HEADER,
                details={"expected": list(BATCH_COLUMNS), "received": received},
            )

        processed = 0
        for raw in rows:
            # Data rows are numbered from 1, the header is not counted.
            row = _CsvRow(number=raw.number - 1, line=raw.line, values=raw.values)
            try:
                movement = parse_row(row)
                self.inventory.income(movement)
            except AppError as exc:
                metrics.increment_batch_rows("accepted", processed)
                metrics.increment_batch_rows("rejected")
                log_json(
                    logger,
                    {
                        "event": "batch_row_rejected",
                        "filename": filename,
                        "row": row.number,
                        "line": row.line,
                        "code": exc.error.code,
                        "committed_rows": processed,
                    },
                    level=logging.WARNING,
                )
                raise
            processed += 1

        metrics.increment_batch_rows("accepted", processed)
        log_json(logger, {"event": "batch_completed", "filename": filename, "processed": processed})
        return BatchResult(filename=filename, processed=processed)

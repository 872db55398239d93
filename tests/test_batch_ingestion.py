import pytest

from app.sockstock.core.error_catalog import (
    ConflictError,
    ErrorCatalog,
    InvalidInputError,
)
from app.sockstock.services.batch import BatchIngestionService


class RecordingInventory:
    def __init__(self, fail_on: int | None = None):
        self.movements = []
        self.fail_on = fail_on

    def income(self, movement):
        if self.fail_on is not None and len(self.movements) + 1 == self.fail_on:
            raise ConflictError(ErrorCatalog.STOCK_CONFLICT)
        self.movements.append((movement.color, movement.cotton_percentage, movement.quantity))
        return None


def _service(inventory, **kwargs) -> BatchIngestionService:
    return BatchIngestionService(inventory, **kwargs)


def test_rows_are_applied_in_order():
    inventory = RecordingInventory()
    content = b"color,cottonPercentage,quantity\nred,50,100\nblue,70,150\nred,50,1\n"

    result = _service(inventory).ingest(content, filename="in.csv")

    assert result.processed == 3
    assert result.filename == "in.csv"
    assert inventory.movements == [("red", 50, 100), ("blue", 70, 150), ("red", 50, 1)]


def test_bom_whitespace_and_blank_lines_are_tolerated():
    inventory = RecordingInventory()
    content = "\ufeff color , cottonPercentage , quantity \r\n\r\n red , 50 , 7 \r\n\r\n".encode("utf-8")

    result = _service(inventory).ingest(content)

    assert result.processed == 1
    assert inventory.movements == [("red", 50, 7)]


def test_header_only_batch_processes_nothing():
    inventory = RecordingInventory()

    result = _service(inventory).ingest(b"color,cottonPercentage,quantity\n")

    assert result.processed == 0
    assert inventory.movements == []


@pytest.mark.parametrize("content", [b"", b"   \n\n", b"\xef\xbb\xbf", b"\xef\xbb\xbf  \r\n"])
def test_empty_payload(content):
    inventory = RecordingInventory()

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory).ingest(content)

    assert excinfo.value.error is ErrorCatalog.EMPTY_BATCH
    assert inventory.movements == []


def test_column_count_mismatch_names_row():
    inventory = RecordingInventory()
    content = b"color,cottonPercentage,quantity\nred,50,1\nblue,70\n"

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory).ingest(content)

    assert excinfo.value.error is ErrorCatalog.INVALID_BATCH_ROW
    assert excinfo.value.details["row"] == 2
    assert excinfo.value.details["values"] == ["blue", "70"]
    assert inventory.movements == [("red", 50, 1)]


def test_non_numeric_quantity_is_rejected():
    inventory = RecordingInventory()

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory).ingest(b"color,cottonPercentage,quantity\nred,50,many\n")

    assert excinfo.value.details["errors"][0]["field"] == "quantity"


def test_blank_color_is_rejected():
    inventory = RecordingInventory()

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory).ingest(b"color,cottonPercentage,quantity\n  ,50,3\n")

    assert excinfo.value.error is ErrorCatalog.INVALID_BATCH_ROW


def test_oversized_payload_is_rejected():
    inventory = RecordingInventory()
    content = b"color,cottonPercentage,quantity\n" + b"red,50,1\n" * 10

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory, max_bytes=32).ingest(content)

    assert excinfo.value.error is ErrorCatalog.BATCH_TOO_LARGE
    assert inventory.movements == []


def test_undecodable_payload_is_rejected():
    inventory = RecordingInventory()

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory).ingest(b"color,cottonPercentage,quantity\n\xff\xfe,50,1\n")

    assert excinfo.value.error is ErrorCatalog.INVALID_BATCH_ROW


def test_conflict_stops_ingestion_after_committed_rows():
    inventory = RecordingInventory(fail_on=2)
    content = b"color,cottonPercentage,quantity\nred,50,1\nblue,70,2\ngreen,10,3\n"

    with pytest.raises(ConflictError):
        _service(inventory).ingest(content)

    assert inventory.movements == [("red", 50, 1)]


@pytest.mark.parametrize("cell", ["50.0", "5_0", "1e2", "0x10", "½"])
def test_non_integer_cotton_cell_is_rejected(cell):
    inventory = RecordingInventory()
    content = f"color,cottonPercentage,quantity\nred,{cell},1\n".encode("utf-8")

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory).ingest(content)

    assert excinfo.value.error is ErrorCatalog.INVALID_BATCH_ROW
    assert excinfo.value.details["errors"] == [
        {"field": "cottonPercentage", "message": "Input should be a valid integer"}
    ]
    assert inventory.movements == []


@pytest.mark.parametrize("cell", ["3.0", "1_0"])
def test_non_integer_quantity_cell_is_rejected(cell):
    inventory = RecordingInventory()
    content = f"color,cottonPercentage,quantity\nred,50,{cell}\n".encode("utf-8")

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory).ingest(content)

    assert excinfo.value.details["errors"][0]["field"] == "quantity"
    assert inventory.movements == []


def test_signed_integer_cells_are_accepted():
    inventory = RecordingInventory()

    _service(inventory).ingest(b"color,cottonPercentage,quantity\nred,+50,+2\n")

    assert inventory.movements == [("red", 50, 2)]


def test_quantity_beyond_column_range_is_rejected():
    inventory = RecordingInventory()
    content = b"color,cottonPercentage,quantity\nred,50,1\nblue,50,99999999999999999999\n"

    with pytest.raises(InvalidInputError) as excinfo:
        _service(inventory).ingest(content)

    assert excinfo.value.error is ErrorCatalog.INVALID_BATCH_ROW
    assert excinfo.value.details["row"] == 2
    assert excinfo.value.details["errors"][0]["field"] == "quantity"
    assert inventory.movements == [("red", 50, 1)]

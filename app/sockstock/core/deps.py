from fastapi import Depends

from app.sockstock.db.session import get_db
from app.sockstock.repos.stock import StockLotRepository
from app.sockstock.services.batch import BatchIngestionService
from app.sockstock.services.inventory import InventoryService


def get_inventory_service(db=Depends(get_db)) -> InventoryService:
    return InventoryService(StockLotRepository(db))


def get_batch_service(
    inventory: InventoryService = Depends(get_inventory_service),
) -> BatchIngestionService:
    return BatchIngestionService(inventory)


__all__ = [
    "get_inventory_service",
    "get_batch_service",
]

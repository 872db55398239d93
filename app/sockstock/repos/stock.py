from __future__ import annotations

import uuid

from sqlalchemy import func, select

from app.sockstock.db.models import StockLot
from app.sockstock.schemas.stock import Comparison


class StockLotRepository:
    def __init__(self, db):
        self.db = db

    def get_by_key(self, color: str, cotton_percentage: int) -> StockLot | None:
        stmt = select(StockLot).where(
            StockLot.color == color,
            StockLot.cotton_percentage == cotton_percentage,
        )
        return self.db.execute(stmt).scalars().first()

    def get_by_id(self, lot_id: uuid.UUID) -> StockLot | None:
        return self.db.get(StockLot, lot_id)

    def save(self, lot: StockLot) -> StockLot:
        """Persist ``lot`` in its own commit.

        Updates are guarded by the mapper's version column, so a stale read
        raises ``StaleDataError`` here and nothing is written.
        """
        self.db.add(lot)
        self.db.commit()
        self.db.refresh(lot)
        return lot

    def rollback(self) -> None:
        self.db.rollback()

    def count(self, color: str, comparison: Comparison, cotton_percentage: int) -> int:
        if comparison is Comparison.MORE_THAN:
            return self.count_more_than(color, cotton_percentage)
        if comparison is Comparison.LESS_THAN:
            return self.count_less_than(color, cotton_percentage)
        return self.count_equal(color, cotton_percentage)

    def count_more_than(self, color: str, cotton_percentage: int) -> int:
        return self._count(StockLot.color == color, StockLot.cotton_percentage > cotton_percentage)

    def count_less_than(self, color: str, cotton_percentage: int) -> int:
        return self._count(StockLot.color == color, StockLot.cotton_percentage < cotton_percentage)

    def count_equal(self, color: str, cotton_percentage: int) -> int:
        return self._count(StockLot.color == color, StockLot.cotton_percentage == cotton_percentage)

    def _count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(StockLot).where(*criteria)
        return int(self.db.execute(stmt).scalar_one())

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator, CHAR


class GUID(TypeDecorator):
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(value))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


def _next_version(current: int | None) -> int:
    # New lots start at version 0; every flushed UPDATE bumps it by one.
    return 0 if current is None else current + 1


class Base(DeclarativeBase):
    pass


class StockLot(Base):
    __tablename__ = "socks"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    color: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    cotton_percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, onupdate=datetime.utcnow, nullable=True)

    __table_args__ = (
        UniqueConstraint("color", "cotton_percentage", name="uq_socks_color_cotton"),
        CheckConstraint("quantity >= 0", name="ck_socks_quantity_non_negative"),
        CheckConstraint(
            "cotton_percentage >= 0 AND cotton_percentage <= 100",
            name="ck_socks_cotton_percentage_range",
        ),
    )
    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": _next_version,
    }

    def __repr__(self) -> str:
        return (
            f"StockLot(id={self.id}, color={self.color!r}, cotton_percentage={self.cotton_percentage}, "
            f"quantity={self.quantity}, version={self.version})"
        )

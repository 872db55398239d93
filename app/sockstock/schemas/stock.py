from datetime import datetime
from enum import Enum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints


# Range of the 32-bit INTEGER columns.
INT_COLUMN_MIN = -(2**31)
INT_COLUMN_MAX = 2**31 - 1

Color = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
CottonPercentage = Annotated[int, Field(ge=0, le=100, alias="cottonPercentage")]


class Comparison(str, Enum):
    MORE_THAN = "moreThan"
    LESS_THAN = "lessThan"
    EQUAL = "equal"


class StockMovementRequest(BaseModel):
    """Income / outcome payload and the row shape of a CSV batch."""

    model_config = ConfigDict(populate_by_name=True)

    color: Color
    cotton_percentage: CottonPercentage
    quantity: int = Field(ge=1, le=INT_COLUMN_MAX)


class StockLotUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    color: Color
    cotton_percentage: CottonPercentage
    quantity: int = Field(ge=0, le=INT_COLUMN_MAX)


class StockLotResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    color: str
    cotton_percentage: int = Field(alias="cottonPercentage")
    quantity: int
    version: int
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class StockOperationResponse(BaseModel):
    status: str = "ok"
    message: str


class BatchUploadResponse(BaseModel):
    status: str = "ok"
    filename: str | None
    processed: int

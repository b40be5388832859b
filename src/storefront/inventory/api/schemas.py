"""Pydantic request/response schemas for the Inventory API."""

from pydantic import BaseModel, Field


class AdjustStockRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"product_id": 12, "delta": -3, "size": "M"}],
        }
    }

    product_id: int
    delta: int
    size: str | None = Field(None, max_length=50)


class StockAdjustedResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"product_id": 12, "size": "M", "size_stock": 4, "new_stock": 7}],
        }
    }

    product_id: int
    size: str | None = None
    size_stock: int | None = None
    new_stock: int

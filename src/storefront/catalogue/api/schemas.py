"""Pydantic request/response schemas for the Catalogue API."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class CreateProductRequest(BaseModel):
    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Classic Tee",
                    "brand": "Acme",
                    "category": "Shirts",
                    "price": 20.0,
                    "discount": 10.0,
                    "description": "Cotton crew-neck tee.",
                    "image_url": "https://cdn.example.com/tee.jpg",
                    "size_stocks": {"M": 5, "L": 3},
                }
            ]
        },
    }

    name: str = Field(..., min_length=1, max_length=255)
    brand: str = Field("", max_length=100)
    category: str = Field("", max_length=100)
    price: float = Field(..., ge=0)
    discount: float = Field(0.0, ge=0, le=100)
    description: str = ""
    image_url: str = Field("", max_length=500)
    size_stocks: dict[str, int] | None = None
    stock: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def stock_is_sized_or_flat(self):
        if self.size_stocks and self.stock is not None:
            raise ValueError("Provide either size_stocks or stock, not both")
        return self


class UpdateProductRequest(BaseModel):
    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {"examples": [{"price": 22.0, "sizes": ["S", "M", "L"]}]},
    }

    name: str | None = Field(None, min_length=1, max_length=255)
    brand: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    price: float | None = Field(None, ge=0)
    discount: float | None = Field(None, ge=0, le=100)
    description: str | None = None
    image_url: str | None = Field(None, max_length=500)
    sizes: list[str] | None = None


class ProductResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": 12,
                    "name": "Classic Tee",
                    "brand": "Acme",
                    "category": "Shirts",
                    "price": 20.0,
                    "discount": 10.0,
                    "final_price": 18.0,
                    "description": "Cotton crew-neck tee.",
                    "image_url": "https://cdn.example.com/tee.jpg",
                    "stock": 8,
                    "size_stocks": {"L": 3, "M": 5},
                    "sizes": ["L", "M"],
                    "created_at": "2024-05-01T10:00:00Z",
                    "updated_at": "2024-05-01T10:00:00Z",
                }
            ]
        }
    }

    id: int
    name: str
    brand: str
    category: str
    price: float
    discount: float
    final_price: float
    description: str
    image_url: str
    stock: int
    size_stocks: dict[str, int]
    sizes: list[str]
    created_at: datetime
    updated_at: datetime


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"

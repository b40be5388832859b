"""Pydantic request/response schemas for the Ordering API."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class OrderLineRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int
    product_name: str = Field(validation_alias=AliasChoices("product_name", "name"))
    quantity: int
    price: float
    size: str | None = None
    image_url: str = Field(default="", validation_alias=AliasChoices("image_url", "image"))


class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": 7,
                    "customer_name": "Ana Ruiz",
                    "address": "12 Harbour Street",
                    "phone": "555-0101",
                    "lines": [{"product_id": 3, "name": "Trail Runner", "quantity": 2, "price": 45.0, "size": "42"}],
                    "total": 90.0,
                }
            ]
        },
    }

    user_id: int
    customer_name: str
    address: str
    phone: str
    payment_method: str = "COD"
    notes: str = ""
    lines: list[OrderLineRequest]
    total: float


class StatusChangeRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "Delivered"}]}}

    status: str = Field(..., max_length=20)


class OrderCreatedResponse(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"order_id": 42, "code": "#S20240042", "status": "Pending"}]},
    }

    order_id: int
    code: str
    status: str


class OrderLineResponse(BaseModel):
    product_id: int
    product_name: str
    size: str | None = None
    price: float
    quantity: int
    image_url: str


class OrderResponse(BaseModel):
    id: int
    code: str
    user_id: int
    customer_name: str
    customer_email: str
    address: str
    phone: str
    payment_method: str
    notes: str
    total: float
    status: str
    lines: list[OrderLineResponse]
    created_at: datetime
    updated_at: datetime

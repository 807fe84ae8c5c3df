"""Pydantic request/response schemas for the Inventory API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class InitializeInventoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"product_id": "5f0c7d9e-2b1a-4d3e-9c8f-1a2b3c4d5e6f", "quantity": 50, "low_stock_alert": 5}]
        }
    }

    product_id: str
    quantity: int = Field(0, ge=0)
    low_stock_alert: int | None = Field(None, ge=0)


class UpdateInventoryRequest(BaseModel):
    quantity: int | None = Field(None, ge=0)
    low_stock_alert: int | None = Field(None, ge=0)


class RestockRequest(BaseModel):
    quantity: int = Field(..., ge=1)
    reason: str | None = Field(None, max_length=100)


class InventoryResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    reserved_quantity: int
    low_stock_alert: int
    is_low_stock: bool
    updated_at: datetime | None = None

    @classmethod
    def from_inventory(cls, inventory) -> InventoryResponse:
        return cls(
            id=str(inventory.id),
            product_id=str(inventory.product_id),
            quantity=inventory.quantity,
            reserved_quantity=inventory.reserved_quantity,
            low_stock_alert=inventory.low_stock_alert,
            is_low_stock=inventory.is_low_stock,
            updated_at=inventory.updated_at,
        )

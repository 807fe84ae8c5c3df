"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from storefront.shared.api import Money
from storefront.shared.money import to_decimal


# --- Category ---


class CreateCategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Spices", "description": "Whole and ground spices", "parent_id": None}]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    parent_id: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    parent_id: str | None = None
    make_root: bool = False
    is_active: bool | None = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    parent_id: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_category(cls, category) -> CategoryResponse:
        return cls(
            id=str(category.id),
            name=category.name,
            description=category.description,
            parent_id=str(category.parent_id) if category.parent_id else None,
            is_active=category.is_active,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


# --- Product ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Basmati Rice 5kg",
                    "description": "Aged long-grain basmati",
                    "price": "24.99",
                    "category_id": None,
                    "image_url": "https://cdn.example.com/rice.jpg",
                    "initial_stock": 100,
                    "low_stock_alert": 10,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: Money
    category_id: str | None = None
    image_url: str | None = Field(None, max_length=500)
    is_active: bool = True
    initial_stock: int | None = Field(None, ge=0)
    low_stock_alert: int | None = Field(None, ge=0)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Money | None = None
    category_id: str | None = None
    image_url: str | None = Field(None, max_length=500)


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: Decimal
    category_id: str | None = None
    image_url: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=to_decimal(product.price),
            category_id=str(product.category_id) if product.category_id else None,
            image_url=product.image_url,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


# --- Grain ---


class CreateGrainRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    price: Money
    unit: str | None = Field(None, max_length=20)
    is_active: bool = True


class UpdateGrainRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    price: Money | None = None
    unit: str | None = Field(None, max_length=20)
    is_active: bool | None = None


class GrainResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: Decimal
    unit: str | None = None
    is_active: bool

    @classmethod
    def from_grain(cls, grain) -> GrainResponse:
        return cls(
            id=str(grain.id),
            name=grain.name,
            description=grain.description,
            price=to_decimal(grain.price),
            unit=grain.unit,
            is_active=grain.is_active,
        )

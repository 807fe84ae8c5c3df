"""Pydantic request/response schemas for the Promos API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CreatePromoRequest(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=500)
    title: str | None = Field(None, max_length=200)
    description: str | None = None
    link_url: str | None = Field(None, max_length=500)
    is_active: bool = True
    display_order: int = Field(0, ge=0)


class UpdatePromoRequest(BaseModel):
    image_url: str | None = Field(None, min_length=1, max_length=500)
    title: str | None = Field(None, max_length=200)
    description: str | None = None
    link_url: str | None = Field(None, max_length=500)
    is_active: bool | None = None
    display_order: int | None = Field(None, ge=0)


class PromoResponse(BaseModel):
    id: str
    image_url: str
    title: str | None = None
    description: str | None = None
    link_url: str | None = None
    is_active: bool
    display_order: int
    created_at: datetime | None = None

    @classmethod
    def from_promo(cls, promo) -> PromoResponse:
        return cls(
            id=str(promo.id),
            image_url=promo.image_url,
            title=promo.title,
            description=promo.description,
            link_url=promo.link_url,
            is_active=promo.is_active,
            display_order=promo.display_order,
            created_at=promo.created_at,
        )

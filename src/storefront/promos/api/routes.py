"""FastAPI endpoints for promotional banners."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.auth import require_admin
from storefront.promos.api.schemas import CreatePromoRequest, PromoResponse, UpdatePromoRequest
from storefront.promos.promo.management import CreatePromo, DeletePromo, UpdatePromo
from storefront.promos.promo.promo import Promo
from storefront.shared.api import ApiResponse, MessageResponse

router = APIRouter(prefix="/promos", tags=["promos"])

_admin = [Depends(require_admin)]


def _promo(promo_id: str) -> ApiResponse[PromoResponse]:
    return ApiResponse(data=PromoResponse.from_promo(current_domain.repository_for(Promo).get(promo_id)))


@router.post("", status_code=201, dependencies=_admin, response_model=ApiResponse[PromoResponse])
async def create_promo(body: CreatePromoRequest) -> ApiResponse[PromoResponse]:
    command = CreatePromo(
        image_url=body.image_url,
        title=body.title,
        description=body.description,
        link_url=body.link_url,
        is_active=body.is_active,
        display_order=body.display_order,
    )
    return _promo(current_domain.process(command, asynchronous=False))


@router.get("/{promo_id}", response_model=ApiResponse[PromoResponse])
async def get_promo(promo_id: str) -> ApiResponse[PromoResponse]:
    return _promo(promo_id)


@router.put("/{promo_id}", dependencies=_admin, response_model=ApiResponse[PromoResponse])
async def update_promo(promo_id: str, body: UpdatePromoRequest) -> ApiResponse[PromoResponse]:
    command = UpdatePromo(
        promo_id=promo_id,
        image_url=body.image_url,
        title=body.title,
        description=body.description,
        link_url=body.link_url,
        is_active=body.is_active,
        display_order=body.display_order,
    )
    return _promo(current_domain.process(command, asynchronous=False))


@router.delete("/{promo_id}", dependencies=_admin, response_model=ApiResponse[MessageResponse])
async def delete_promo(promo_id: str) -> ApiResponse[MessageResponse]:
    current_domain.process(DeletePromo(promo_id=promo_id), asynchronous=False)
    return ApiResponse(data=MessageResponse(message="Promo deleted"))

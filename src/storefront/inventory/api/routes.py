"""FastAPI endpoints for the Inventory ledger. All routes are admin-only."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.auth import require_admin
from storefront.inventory.api.schemas import (
    InitializeInventoryRequest,
    InventoryResponse,
    RestockRequest,
    UpdateInventoryRequest,
)
from storefront.inventory.stock.inventory import Inventory
from storefront.inventory.stock.management import InitializeInventory, RestockInventory, UpdateInventory
from storefront.shared.api import ApiResponse
from storefront.shared.commands import process_exclusively

router = APIRouter(prefix="/inventory", tags=["inventory"], dependencies=[Depends(require_admin)])


def _inventory_for(product_id: str) -> ApiResponse[InventoryResponse]:
    inventory = current_domain.repository_for(Inventory).get_for_product(product_id)
    return ApiResponse(data=InventoryResponse.from_inventory(inventory))


@router.get("/low-stock", response_model=ApiResponse[list[InventoryResponse]])
async def get_low_stock_items() -> ApiResponse[list[InventoryResponse]]:
    items = current_domain.repository_for(Inventory).low_stock_items()
    return ApiResponse(data=[InventoryResponse.from_inventory(item) for item in items])


@router.post("", status_code=201, response_model=ApiResponse[InventoryResponse])
async def initialize_inventory(body: InitializeInventoryRequest) -> ApiResponse[InventoryResponse]:
    command = InitializeInventory(
        product_id=body.product_id,
        quantity=body.quantity,
        low_stock_alert=body.low_stock_alert,
    )
    process_exclusively(command)
    return _inventory_for(body.product_id)


@router.get("/{product_id}", response_model=ApiResponse[InventoryResponse])
async def get_inventory(product_id: str) -> ApiResponse[InventoryResponse]:
    return _inventory_for(product_id)


@router.put("/{product_id}", response_model=ApiResponse[InventoryResponse])
async def update_inventory(product_id: str, body: UpdateInventoryRequest) -> ApiResponse[InventoryResponse]:
    command = UpdateInventory(
        product_id=product_id,
        quantity=body.quantity,
        low_stock_alert=body.low_stock_alert,
    )
    process_exclusively(command)
    return _inventory_for(product_id)


@router.post("/{product_id}/restock", response_model=ApiResponse[InventoryResponse])
async def restock_inventory(product_id: str, body: RestockRequest) -> ApiResponse[InventoryResponse]:
    command = RestockInventory(product_id=product_id, quantity=body.quantity, reason=body.reason)
    process_exclusively(command)
    return _inventory_for(product_id)

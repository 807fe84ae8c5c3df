"""FastAPI endpoints for the Catalogue: categories, products and grains."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import (
    CategoryResponse,
    CreateCategoryRequest,
    CreateGrainRequest,
    CreateProductRequest,
    GrainResponse,
    ProductResponse,
    UpdateCategoryRequest,
    UpdateGrainRequest,
    UpdateProductRequest,
)
from storefront.catalogue.category.category import Category
from storefront.catalogue.category.management import CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.grain.grain import Grain
from storefront.catalogue.grain.management import CreateGrain, DeleteGrain, UpdateGrain
from storefront.catalogue.product.management import (
    ActivateProduct,
    CreateProduct,
    DeactivateProduct,
    DeleteProduct,
    UpdateProduct,
)
from storefront.catalogue.product.product import Product
from storefront.identity.auth import require_admin
from storefront.shared.api import ApiResponse, MessageResponse
from storefront.shared.commands import process_exclusively
from storefront.shared.money import to_minor_units
from storefront.shared.query import fetch_all

category_router = APIRouter(prefix="/categories", tags=["categories"])
product_router = APIRouter(prefix="/products", tags=["products"])
grain_router = APIRouter(prefix="/grains", tags=["grains"])

_admin = [Depends(require_admin)]


# --- Category endpoints ---


def _category(category_id: str) -> ApiResponse[CategoryResponse]:
    category = current_domain.repository_for(Category).get(category_id)
    return ApiResponse(data=CategoryResponse.from_category(category))


@category_router.post("", status_code=201, dependencies=_admin, response_model=ApiResponse[CategoryResponse])
async def create_category(body: CreateCategoryRequest) -> ApiResponse[CategoryResponse]:
    command = CreateCategory(name=body.name, description=body.description, parent_id=body.parent_id)
    return _category(current_domain.process(command, asynchronous=False))


@category_router.get("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def get_category(category_id: str) -> ApiResponse[CategoryResponse]:
    return _category(category_id)


@category_router.get("/{category_id}/subcategories", response_model=ApiResponse[list[CategoryResponse]])
async def get_subcategories(category_id: str) -> ApiResponse[list[CategoryResponse]]:
    repo = current_domain.repository_for(Category)
    repo.get(category_id)
    children = fetch_all(repo, parent_id=category_id)
    return ApiResponse(data=[CategoryResponse.from_category(child) for child in children])


@category_router.put("/{category_id}", dependencies=_admin, response_model=ApiResponse[CategoryResponse])
async def update_category(category_id: str, body: UpdateCategoryRequest) -> ApiResponse[CategoryResponse]:
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        parent_id=body.parent_id,
        make_root=body.make_root,
        is_active=body.is_active,
    )
    return _category(current_domain.process(command, asynchronous=False))


@category_router.delete("/{category_id}", dependencies=_admin, response_model=ApiResponse[MessageResponse])
async def delete_category(category_id: str) -> ApiResponse[MessageResponse]:
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return ApiResponse(data=MessageResponse(message="Category deleted"))


# --- Product endpoints ---


def _product(product_id: str) -> ApiResponse[ProductResponse]:
    product = current_domain.repository_for(Product).get(product_id)
    return ApiResponse(data=ProductResponse.from_product(product))


@product_router.post("", status_code=201, dependencies=_admin, response_model=ApiResponse[ProductResponse])
async def create_product(body: CreateProductRequest) -> ApiResponse[ProductResponse]:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price=to_minor_units(body.price, "price"),
        category_id=body.category_id,
        image_url=body.image_url,
        is_active=body.is_active,
        initial_stock=body.initial_stock,
        low_stock_alert=body.low_stock_alert,
    )
    return _product(process_exclusively(command))


@product_router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(product_id: str) -> ApiResponse[ProductResponse]:
    return _product(product_id)


@product_router.put("/{product_id}", dependencies=_admin, response_model=ApiResponse[ProductResponse])
async def update_product(product_id: str, body: UpdateProductRequest) -> ApiResponse[ProductResponse]:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=to_minor_units(body.price, "price") if body.price is not None else None,
        category_id=body.category_id,
        image_url=body.image_url,
    )
    return _product(current_domain.process(command, asynchronous=False))


@product_router.put("/{product_id}/activate", dependencies=_admin, response_model=ApiResponse[ProductResponse])
async def activate_product(product_id: str) -> ApiResponse[ProductResponse]:
    current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
    return _product(product_id)


@product_router.put("/{product_id}/deactivate", dependencies=_admin, response_model=ApiResponse[ProductResponse])
async def deactivate_product(product_id: str) -> ApiResponse[ProductResponse]:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return _product(product_id)


@product_router.delete("/{product_id}", dependencies=_admin, response_model=ApiResponse[MessageResponse])
async def delete_product(product_id: str) -> ApiResponse[MessageResponse]:
    process_exclusively(DeleteProduct(product_id=product_id))
    return ApiResponse(data=MessageResponse(message="Product deleted"))


# --- Grain endpoints ---


def _grain(grain_id: str) -> ApiResponse[GrainResponse]:
    grain = current_domain.repository_for(Grain).get(grain_id)
    return ApiResponse(data=GrainResponse.from_grain(grain))


@grain_router.post("", status_code=201, dependencies=_admin, response_model=ApiResponse[GrainResponse])
async def create_grain(body: CreateGrainRequest) -> ApiResponse[GrainResponse]:
    command = CreateGrain(
        name=body.name,
        description=body.description,
        price=to_minor_units(body.price, "price"),
        unit=body.unit,
        is_active=body.is_active,
    )
    return _grain(current_domain.process(command, asynchronous=False))


@grain_router.get("/{grain_id}", response_model=ApiResponse[GrainResponse])
async def get_grain(grain_id: str) -> ApiResponse[GrainResponse]:
    return _grain(grain_id)


@grain_router.put("/{grain_id}", dependencies=_admin, response_model=ApiResponse[GrainResponse])
async def update_grain(grain_id: str, body: UpdateGrainRequest) -> ApiResponse[GrainResponse]:
    command = UpdateGrain(
        grain_id=grain_id,
        name=body.name,
        description=body.description,
        price=to_minor_units(body.price, "price") if body.price is not None else None,
        unit=body.unit,
        is_active=body.is_active,
    )
    return _grain(current_domain.process(command, asynchronous=False))


@grain_router.delete("/{grain_id}", dependencies=_admin, response_model=ApiResponse[MessageResponse])
async def delete_grain(grain_id: str) -> ApiResponse[MessageResponse]:
    current_domain.process(DeleteGrain(grain_id=grain_id), asynchronous=False)
    return ApiResponse(data=MessageResponse(message="Grain deleted"))

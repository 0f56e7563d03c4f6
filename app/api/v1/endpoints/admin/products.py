"""Product management endpoints."""
from typing import Any
from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_catalog_service, require_permission
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.schemas.catalog import ProductCreate, ProductUpdate, StockUpdate
from app.services.business.catalog_service import CatalogService

router = APIRouter()
require_products = require_permission(Permission.PRODUCTS)


@router.get("")
def list_products(
    identity: Identity = Depends(require_products),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    """Every product, in stock or not."""
    return catalog.list_products()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    identity: Identity = Depends(require_products),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return catalog.create_product(product.model_dump())


@router.get("/{product_id}")
def get_product(
    product_id: str,
    identity: Identity = Depends(require_products),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return catalog.get_product(product_id)


@router.put("/{product_id}")
def update_product(
    product_id: str,
    product: ProductUpdate,
    identity: Identity = Depends(require_products),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return catalog.update_product(product_id, product.model_dump(exclude_unset=True))


@router.patch("/{product_id}/stock")
def set_product_stock(
    product_id: str,
    stock: StockUpdate,
    identity: Identity = Depends(require_products),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return catalog.set_stock(product_id, stock.in_stock)


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    identity: Identity = Depends(require_products),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    catalog.delete_product(product_id)
    return {"success": True}

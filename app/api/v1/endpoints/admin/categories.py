"""Category management endpoints."""
from typing import Any
from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_catalog_service, require_permission
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.schemas.catalog import CategoryCreate, CategoryUpdate
from app.services.business.catalog_service import CatalogService

router = APIRouter()
require_categories = require_permission(Permission.CATEGORIES)


@router.get("")
def list_categories(
    identity: Identity = Depends(require_categories),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return [category.to_supabase_dict() for category in catalog.list_categories()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    identity: Identity = Depends(require_categories),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return catalog.create_category(category.title).to_supabase_dict()


@router.put("/{category_id}")
def update_category(
    category_id: str,
    category: CategoryUpdate,
    identity: Identity = Depends(require_categories),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return catalog.update_category(category_id, category.title).to_supabase_dict()


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    identity: Identity = Depends(require_categories),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    """Delete a category that no product uses."""
    catalog.delete_category(category_id)
    return {"success": True}

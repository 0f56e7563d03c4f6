"""Product and category management."""
from typing import Any, Dict, List, Optional
import logging

from app.core.errors import InvalidInput, NotFound
from app.models.base import SupabaseModel
from app.models.catalog import Category, Product
from app.utils.supabase_helpers import (
    safe_execute,
    safe_supabase_delete,
    safe_supabase_insert,
    safe_supabase_select,
    safe_supabase_update,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """CRUD over ``products`` and ``categories``; products carry their category summary."""

    def __init__(self, supabase):
        self.supabase = supabase

    # Products

    def list_products(self, in_stock_only: bool = False) -> List[Dict[str, Any]]:
        filters = {"in_stock": True} if in_stock_only else None
        rows = safe_supabase_select(
            self.supabase, Product.table_name, filters=filters, order_by="created_at", desc=True
        )
        categories = self._category_index()
        return [self._with_category(Product.from_dict(row), categories) for row in rows]

    def get_product(self, product_id: str) -> Dict[str, Any]:
        return self._with_category(self._get_product(product_id), self._category_index())

    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._require_category(data["category_id"])
        row = safe_supabase_insert(
            self.supabase, Product.table_name, {**data, "created_at": SupabaseModel.timestamp()}
        )
        product = Product.from_dict(row)
        logger.info(f"Created product {product.id} ({product.title})")
        return self._with_category(product, self._category_index())

    def update_product(self, product_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        if not changes:
            return self.get_product(product_id)
        if changes.get("category_id"):
            self._require_category(changes["category_id"])
        try:
            row = safe_supabase_update(self.supabase, Product.table_name, changes, "id", product_id)
        except NotFound:
            raise NotFound("Product not found")
        return self._with_category(Product.from_dict(row), self._category_index())

    def set_stock(self, product_id: str, in_stock: bool) -> Dict[str, Any]:
        logger.info(f"Product {product_id} marked {'in' if in_stock else 'out of'} stock")
        return self.update_product(product_id, {"in_stock": in_stock})

    def delete_product(self, product_id: str) -> None:
        try:
            safe_supabase_delete(self.supabase, Product.table_name, "id", product_id)
        except NotFound:
            raise NotFound("Product not found")
        logger.info(f"Deleted product {product_id}")

    # Categories

    def list_categories(self, order_by: str = "created_at") -> List[Category]:
        rows = safe_supabase_select(self.supabase, Category.table_name, order_by=order_by)
        return [Category.from_dict(row) for row in rows]

    def create_category(self, title: str) -> Category:
        row = safe_supabase_insert(
            self.supabase, Category.table_name, {"title": title, "created_at": SupabaseModel.timestamp()}
        )
        return Category.from_dict(row)

    def update_category(self, category_id: str, title: str) -> Category:
        try:
            row = safe_supabase_update(self.supabase, Category.table_name, {"title": title}, "id", category_id)
        except NotFound:
            raise NotFound("Category not found")
        return Category.from_dict(row)

    def delete_category(self, category_id: str) -> None:
        """Delete an empty category; products must be moved or deleted first."""
        query = (
            self.supabase.table(Product.table_name)
            .select("id", count="exact", head=True)
            .eq("category_id", category_id)
        )
        if safe_execute(query, Product.table_name, "Count").count:
            raise InvalidInput("Category still has products")
        try:
            safe_supabase_delete(self.supabase, Category.table_name, "id", category_id)
        except NotFound:
            raise NotFound("Category not found")

    # Helpers

    def _get_product(self, product_id: str) -> Product:
        rows = safe_supabase_select(self.supabase, Product.table_name, filters={"id": product_id}, limit=1)
        if not rows:
            raise NotFound("Product not found")
        return Product.from_dict(rows[0])

    def _require_category(self, category_id: str) -> None:
        if not safe_supabase_select(self.supabase, Category.table_name, filters={"id": category_id}, limit=1):
            raise InvalidInput("Category does not exist")

    def _category_index(self) -> Dict[Any, Dict[str, Any]]:
        rows = safe_supabase_select(self.supabase, Category.table_name, select_fields="id, title")
        return {row["id"]: {"id": row["id"], "title": row.get("title")} for row in rows}

    @staticmethod
    def _with_category(product: Product, categories: Dict[Any, Dict[str, Any]]) -> Dict[str, Any]:
        data = product.to_supabase_dict()
        data["category"] = categories.get(product.category_id)
        return data

"""Product catalog models using Supabase."""
from typing import Optional, Dict, Any
from app.models.base import SupabaseModel


class Category(SupabaseModel):
    """Menu category (tab on the storefront)."""
    table_name = "categories"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.title: str = kwargs.get('title')
        self.created_at = kwargs.get('created_at')


class Product(SupabaseModel):
    """
    Orderable product.

    ``image`` is a media CDN public id, not a URL. ``options`` holds the
    selectable option groups with their price deltas.
    """
    table_name = "products"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.title: str = kwargs.get('title')
        self.description: Optional[str] = kwargs.get('description')
        self.image: Optional[str] = kwargs.get('image')
        self.amount = float(kwargs.get('amount') or 0)
        self.in_stock: bool = kwargs.get('in_stock', True)
        self.category_id = kwargs.get('category_id')
        self.options: Optional[Dict[str, Any]] = kwargs.get('options')
        self.created_at = kwargs.get('created_at')

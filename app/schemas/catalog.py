"""Product and category schemas."""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    amount: float = Field(..., ge=0)
    in_stock: bool = True
    category_id: str
    options: Optional[Dict[str, Any]] = None


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    in_stock: Optional[bool] = None
    category_id: Optional[str] = None
    options: Optional[Dict[str, Any]] = None


class StockUpdate(BaseModel):
    in_stock: bool


class CategoryCreate(BaseModel):
    title: str = Field(..., min_length=1)


class CategoryUpdate(BaseModel):
    title: str = Field(..., min_length=1)

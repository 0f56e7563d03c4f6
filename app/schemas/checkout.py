"""Checkout request schemas (cart snapshot and delivery address)."""
from typing import Any, Dict, List, Optional
from pydantic import AliasChoices, Field

from app.schemas.base import CamelSchema


class CartItem(CamelSchema):
    """One cart line as the storefront sends it; priced client-side."""
    id: Optional[str] = None
    product_id: Optional[str] = None
    title: str = Field(..., min_length=1)
    image: Optional[str] = None
    quantity: int = Field(..., gt=0)
    base_price: Optional[float] = None
    options: Optional[Dict[str, Any]] = None
    unit_price: Optional[float] = None
    total_price: float = Field(..., ge=0)


class DeliveryAddress(CamelSchema):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("zipCode", "zip_code", "zip"),
        serialization_alias="zipCode",
    )
    phone: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [
            name
            for name, value in (
                ("street", self.street),
                ("city", self.city),
                ("state", self.state),
                ("zipCode", self.zip_code),
            )
            if not (value or "").strip()
        ]


class CheckoutRequest(CamelSchema):
    items: List[CartItem] = []
    delivery_address: Optional[DeliveryAddress] = None
    notes: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "items": [
                    {
                        "productId": "3f1c...",
                        "title": "Jollof Rice",
                        "image": "products/jollof",
                        "quantity": 1,
                        "unitPrice": 18.99,
                        "totalPrice": 18.99,
                    }
                ],
                "deliveryAddress": {
                    "street": "1 Main St",
                    "city": "Philadelphia",
                    "state": "PA",
                    "zipCode": "19139",
                },
                "notes": "Ring the bell",
            }
        }
    }

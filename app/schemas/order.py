"""Order schemas."""
from pydantic import BaseModel


class OrderStatusUpdate(BaseModel):
    """Admin status change; validated against the lifecycle by the service."""
    status: str

    model_config = {"json_schema_extra": {"example": {"status": "preparing"}}}

"""Base schemas shared by request and response models."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CamelSchema(BaseSchema):
    """Schema whose wire format is camelCase (storefront payloads and JSON settings)."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

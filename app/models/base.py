"""Base model for Supabase rows."""
from typing import Dict, Any
from datetime import datetime, timezone
from enum import Enum


class SupabaseModel:
    """
    Base model for Supabase operations.

    Rows come back from PostgREST as plain dicts; models wrap them so callers
    get attribute access and a single place to serialise back.
    """

    table_name: str = ""

    def __init__(self, **kwargs):
        """Initialize model with data."""
        for key, value in kwargs.items():
            setattr(self, key, value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SupabaseModel':
        """Create model instance from dictionary."""
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {key: value for key, value in self.__dict__.items() if not key.startswith('_')}

    def to_supabase_dict(self) -> Dict[str, Any]:
        """Convert model to Supabase-compatible dictionary."""
        data = self.to_dict()
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, Enum):
                data[key] = value.value
        return data

    @staticmethod
    def timestamp() -> str:
        """Current UTC time as an ISO string, the format Supabase timestamps use."""
        return datetime.now(timezone.utc).isoformat()

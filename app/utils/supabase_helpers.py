"""Safe Supabase query helpers.

Every PostgREST call made by a store goes through one of these so that
client errors surface as ``ExternalServiceFailure`` and empty results as
``NotFound`` instead of leaking driver exceptions to the HTTP layer.
"""
from typing import Any, Dict, List, Optional
import logging

from app.core.errors import AppError, ExternalServiceFailure, NotFound

logger = logging.getLogger(__name__)


def _storage_failure(table_name: str, action: str, error: Exception) -> ExternalServiceFailure:
    logger.error(f"{action} error in {table_name}: {error}")
    return ExternalServiceFailure(f"Failed to {action.lower()} {table_name}", status_code=500)


def safe_execute(query, table_name: str, action: str = "Query"):
    """Execute a prepared query builder, translating client errors."""
    try:
        return query.execute()
    except AppError:
        raise
    except Exception as e:
        raise _storage_failure(table_name, action, e)


def safe_supabase_select(
    supabase,
    table_name: str,
    select_fields: str = "*",
    filters: Optional[Dict[str, Any]] = None,
    order_by: Optional[str] = None,
    desc: bool = False,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Select rows with equality filters; an empty result is an empty list."""
    query = supabase.table(table_name).select(select_fields)
    for field, value in (filters or {}).items():
        if value is not None:
            query = query.eq(field, value)
    if order_by:
        query = query.order(order_by, desc=desc)
    if limit:
        query = query.limit(limit)
    response = safe_execute(query, table_name, "Select")
    return response.data or []


def safe_supabase_insert(supabase, table_name: str, data: dict) -> Dict[str, Any]:
    """Insert one row and return it as stored."""
    response = safe_execute(supabase.table(table_name).insert(data), table_name, "Create")
    if not response.data:
        raise ExternalServiceFailure(f"Failed to create {table_name}", status_code=500)
    return response.data[0]


def safe_supabase_update(supabase, table_name: str, data: dict, filter_field: str, filter_value) -> Dict[str, Any]:
    """Update rows matching one field; no matching row is ``NotFound``."""
    query = supabase.table(table_name).update(data).eq(filter_field, filter_value)
    response = safe_execute(query, table_name, "Update")
    if not response.data:
        raise NotFound(f"No {table_name} found to update")
    return response.data[0]


def safe_supabase_delete(supabase, table_name: str, filter_field: str, filter_value) -> None:
    """Delete rows matching one field; deleting nothing is ``NotFound``."""
    query = supabase.table(table_name).delete().eq(filter_field, filter_value)
    response = safe_execute(query, table_name, "Delete")
    if not response.data:
        raise NotFound(f"No {table_name} found to delete")

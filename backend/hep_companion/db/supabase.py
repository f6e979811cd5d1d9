"""
supabase.py
- Purpose: Shared Supabase client + a single place that turns PostgREST
  failures into AppError.
- Design: Service-role client; ownership checks live in the services.
"""

from functools import lru_cache
from typing import Any

from hep_companion.core import AppError, ErrorCode, ErrorReason
from hep_companion.core.config import settings
from hep_companion.core.errors import db_error


@lru_cache(maxsize=1)
def get_supabase_client():
    # Import lazily so missing dependency errors are localized.
    try:
        from supabase import create_client  # type: ignore
    except ImportError as e:
        raise AppError(
            code=ErrorCode.INTERNAL_ERROR,
            reason=ErrorReason.INTERNAL_ERROR,
            message="Supabase client library is not installed or failed to import",
            status_code=500,
        ) from e

    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def execute(query, *, action: str) -> list[dict[str, Any]]:
    """Run a PostgREST query builder and return its rows."""
    try:
        res = query.execute()
    except AppError:
        raise
    except Exception as e:
        raise db_error(f"Failed to {action}: {e}") from e

    data = getattr(res, "data", None)
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return list(data)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ilike() behaves as a case-insensitive equals."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

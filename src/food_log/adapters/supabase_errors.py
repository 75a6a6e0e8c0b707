"""Translation of Supabase client failures into storage errors."""

import httpx
from postgrest.exceptions import APIError

from food_log.domain.errors import CatalogConflictError, StorageError

UNIQUE_VIOLATION = "23505"


def execute(query, action: str):  # type: ignore[no-untyped-def]
    """Execute a PostgREST request, raising StorageError on failure."""
    try:
        return query.execute()
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise CatalogConflictError(f"Failed to {action}: {exc.message}") from exc
        raise StorageError(f"Failed to {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise StorageError(f"Failed to {action}: {exc}") from exc

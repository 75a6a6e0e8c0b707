"""Supabase implementation for the food catalog."""

import sys
from dataclasses import dataclass

from supabase import Client

from food_log.adapters.supabase_errors import execute
from food_log.domain.catalog import CatalogEntry
from food_log.domain.errors import StorageError
from food_log.services.catalog import CatalogRepository

TABLE = "food_items"
INCREMENT_FUNCTION = "increment_food_item_frequency"


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed repository for the food catalog."""

    client: Client

    def get_by_name(self, name: str) -> CatalogEntry | None:
        """Return the entry with exactly this name."""
        response = execute(
            self.client.table(TABLE).select("*").eq("name", name).limit(1),
            "read food item",
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def get_by_id(self, catalog_id: int) -> CatalogEntry | None:
        """Return the entry with this id."""
        response = execute(
            self.client.table(TABLE).select("*").eq("id", catalog_id).limit(1),
            "read food item",
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def insert(
        self,
        name: str,
        calories_per_unit: float,
        protein_per_unit: float,
        default_unit: str | None,
        frequency: int,
    ) -> int:
        """Insert a food item; a duplicate name raises CatalogConflictError."""
        response = execute(
            self.client.table(TABLE).insert(
                {
                    "name": name,
                    "calories": calories_per_unit,
                    "protein": protein_per_unit,
                    "default_unit": default_unit,
                    "frequency": frequency,
                }
            ),
            "create food item",
        )
        if not response.data:
            raise StorageError("Failed to create food item")
        return int(response.data[0]["id"])

    def increment_frequency(self, catalog_id: int) -> None:
        """Increment frequency in a single server-side statement."""
        execute(
            self.client.rpc(INCREMENT_FUNCTION, {"item_id": catalog_id}),
            "increment food item frequency",
        )

    def search_prefix(self, prefix: str, limit: int) -> list[CatalogEntry]:
        """Case-sensitive prefix search ranked by frequency then name.

        The prefix becomes a half-open range on the "C"-collated name column
        so no character in it acts as a pattern wildcard.
        """
        query = self.client.table(TABLE).select("*")
        if prefix:
            query = query.gte("name", prefix)
            upper = _prefix_upper_bound(prefix)
            if upper is not None:
                query = query.lt("name", upper)
        response = execute(
            query.order("frequency", desc=True).order("name").limit(limit),
            "search food items",
        )
        return [_parse_item(row) for row in response.data or []]

    def list_all(self) -> list[CatalogEntry]:
        """Return the whole catalog ranked by frequency then name."""
        response = execute(
            self.client.table(TABLE)
            .select("*")
            .order("frequency", desc=True)
            .order("name"),
            "list food items",
        )
        return [_parse_item(row) for row in response.data or []]

    def delete(self, catalog_id: int) -> None:
        """Delete a food item; the schema nulls ledger back-references."""
        execute(
            self.client.table(TABLE).delete().eq("id", catalog_id),
            "delete food item",
        )


def _prefix_upper_bound(prefix: str) -> str | None:
    """Smallest string greater than every string starting with ``prefix``."""
    stripped = prefix.rstrip(chr(sys.maxunicode))
    if not stripped:
        return None
    code_point = ord(stripped[-1]) + 1
    if 0xD800 <= code_point <= 0xDFFF:
        code_point = 0xE000
    return stripped[:-1] + chr(code_point)


def _parse_item(row: dict[str, object]) -> CatalogEntry:
    """Parse a food_items row into a domain model."""
    default_unit = row.get("default_unit")
    return CatalogEntry(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        calories_per_unit=float(row.get("calories") or 0.0),
        protein_per_unit=float(row.get("protein") or 0.0),
        default_unit=str(default_unit) if default_unit is not None else None,
        frequency=int(row.get("frequency") or 0),
    )

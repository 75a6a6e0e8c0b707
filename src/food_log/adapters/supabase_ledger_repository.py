"""Supabase implementation for the entry ledger."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from food_log.adapters.supabase_errors import execute
from food_log.domain.errors import StorageError
from food_log.domain.ledger import LedgerEntry, Meal, day_order_key
from food_log.services.ledger import LedgerRepository

TABLE = "logged_entries"


@dataclass
class SupabaseLedgerRepository(LedgerRepository):
    """Supabase-backed repository for logged entries."""

    client: Client

    def insert(self, entry: LedgerEntry) -> int:
        """Insert a logged entry and return its id."""
        response = execute(
            self.client.table(TABLE).insert(_to_row(entry)), "create logged entry"
        )
        if not response.data:
            raise StorageError("Failed to create logged entry")
        return int(response.data[0]["id"])

    def update(self, entry: LedgerEntry) -> None:
        """Replace a logged entry; a missing row is an error."""
        response = execute(
            self.client.table(TABLE).update(_to_row(entry)).eq("id", entry.id),
            "update logged entry",
        )
        if not response.data:
            raise StorageError(f"Logged entry {entry.id} does not exist")

    def delete(self, entry_id: int) -> None:
        """Delete a logged entry; a missing row is an error."""
        response = execute(
            self.client.table(TABLE).delete().eq("id", entry_id),
            "delete logged entry",
        )
        if not response.data:
            raise StorageError(f"Logged entry {entry_id} does not exist")

    def get_by_id(self, entry_id: int) -> LedgerEntry | None:
        """Return a logged entry by id."""
        response = execute(
            self.client.table(TABLE).select("*").eq("id", entry_id).limit(1),
            "read logged entry",
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def list_for_date(self, entry_date: date) -> list[LedgerEntry]:
        """Return one day's entries ordered by meal then id."""
        response = execute(
            self.client.table(TABLE)
            .select("*")
            .eq("date", entry_date.isoformat())
            .order("id"),
            "list logged entries",
        )
        entries = [_parse_entry(row) for row in response.data or []]
        # Meals are stored as names, so their order is applied here.
        return sorted(entries, key=day_order_key)

    def list_all(self) -> list[LedgerEntry]:
        """Return all entries, newest date and id first."""
        response = execute(
            self.client.table(TABLE)
            .select("*")
            .order("date", desc=True)
            .order("id", desc=True),
            "list logged entries",
        )
        return [_parse_entry(row) for row in response.data or []]


def _to_row(entry: LedgerEntry) -> dict[str, object]:
    return {
        "food_name": entry.food_name.strip(),
        "quantity": entry.quantity,
        "unit": entry.unit,
        "calories": entry.calories,
        "protein": entry.protein,
        "date": entry.date.isoformat(),
        "meal": entry.meal.value,
        "notes": entry.notes,
        "food_item_id": entry.catalog_ref,
    }


def _parse_entry(row: dict[str, object]) -> LedgerEntry:
    """Parse a logged_entries row into a domain model."""
    food_item_id = row.get("food_item_id")
    notes = row.get("notes")
    return LedgerEntry(
        id=int(row["id"]),
        food_name=str(row.get("food_name", "")),
        quantity=float(row.get("quantity") or 0.0),
        unit=str(row.get("unit", "")),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        date=date.fromisoformat(str(row["date"])),
        meal=Meal(str(row["meal"]).upper()),
        notes=str(notes) if notes is not None else None,
        catalog_ref=int(food_item_id) if food_item_id is not None else None,
    )

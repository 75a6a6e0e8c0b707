"""Domain models for logged consumption events."""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum


class Meal(Enum):
    """Meal slot of a logged entry, in display order."""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACKS = "SNACKS"

    @property
    def position(self) -> int:
        return list(Meal).index(self)


@dataclass(frozen=True)
class LedgerEntry:
    """One consumption event.

    ``calories`` and ``protein`` are totals for ``quantity``; they are never
    recomputed from the catalog once stored. ``catalog_ref`` is a lookup-only
    reference and may dangle after the catalog row is removed.
    """

    food_name: str
    quantity: float
    unit: str
    calories: float
    protein: float
    date: date
    meal: Meal
    notes: str | None = None
    catalog_ref: int | None = None
    id: int = 0

    def with_catalog_ref(self, catalog_ref: int | None) -> "LedgerEntry":
        return replace(self, catalog_ref=catalog_ref)


def day_order_key(entry: LedgerEntry) -> tuple[int, int]:
    """Order entries of one day by meal, then insertion order."""
    return (entry.meal.position, entry.id)


def history_order_key(entry: LedgerEntry) -> tuple[int, int]:
    """Sort key for newest-first history, used with ``reverse=True``."""
    return (entry.date.toordinal(), entry.id)

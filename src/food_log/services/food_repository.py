"""Single entry point composing catalog, ledger, aggregation and targets."""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date

from food_log.domain.catalog import CatalogEntry
from food_log.domain.errors import ValidationError
from food_log.domain.ledger import LedgerEntry
from food_log.domain.stats import DailyProgress, DailySummary, Targets
from food_log.services.catalog import CatalogService
from food_log.services.ledger import LedgerService
from food_log.services.live import LOGGED_ENTRIES, SETTINGS, LiveQuery
from food_log.services.stats import progress_for, summaries_by_date, totals_for_date
from food_log.services.suggestions import (
    DEBOUNCE_SECONDS,
    MIN_QUERY_LENGTH,
    SuggestionPipeline,
)
from food_log.services.targets import TargetsService

_logger = logging.getLogger(__name__)


@dataclass
class FoodRepository:
    """Façade used by callers to log food and read derived views."""

    catalog: CatalogService
    ledger: LedgerService
    targets: TargetsService
    debounce_seconds: float = DEBOUNCE_SECONDS
    min_query_length: int = MIN_QUERY_LENGTH

    async def log_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """Record a consumption event and reconcile it into the catalog.

        The catalog upsert runs first. If the ledger insert then fails the
        upsert is kept, and the error is raised to the caller.
        """
        entry = validate_entry(entry)
        catalog_id = await self.catalog.upsert_from_logged_entry(
            entry.food_name,
            entry.quantity,
            entry.calories,
            entry.protein,
            entry.unit,
        )
        linked = entry.with_catalog_ref(catalog_id)
        try:
            entry_id = await self.ledger.insert(linked)
        except Exception:
            _logger.warning(
                "Ledger insert failed after catalog upsert: food=%s catalog_id=%s",
                entry.food_name,
                catalog_id,
            )
            raise
        return replace(linked, id=entry_id)

    async def update_entry(self, entry: LedgerEntry) -> None:
        """Edit an entry in place; catalog frequencies are left untouched."""
        await self.ledger.update(validate_entry(entry))

    async def delete_entry(self, entry: LedgerEntry) -> None:
        """Delete an entry; catalog frequencies are left untouched."""
        await self.ledger.delete(entry)

    async def get_entry(self, entry_id: int) -> LedgerEntry | None:
        return await self.ledger.get_by_id(entry_id)

    async def catalog_entry_for(self, entry: LedgerEntry) -> CatalogEntry | None:
        """Follow an entry's back-reference into the catalog, if it resolves."""
        return await self.catalog.get(entry.catalog_ref)

    def suggestions_for(self, prefix: str) -> LiveQuery[list[CatalogEntry]]:
        return self.catalog.watch_suggestions(prefix)

    def suggestion_pipeline(self) -> SuggestionPipeline:
        """Create a per-consumer autocomplete pipeline over the catalog."""
        return SuggestionPipeline(
            watch=self.catalog.watch_suggestions,
            debounce_seconds=self.debounce_seconds,
            min_length=self.min_query_length,
        )

    def entries_for_date(self, entry_date: date) -> LiveQuery[list[LedgerEntry]]:
        return self.ledger.entries_for_date(entry_date)

    def all_entries(self) -> LiveQuery[list[LedgerEntry]]:
        return self.ledger.all_entries()

    def summaries(self) -> LiveQuery[list[DailySummary]]:
        """Live per-date totals, newest date first."""

        async def load() -> list[DailySummary]:
            return summaries_by_date(await self.ledger.list_all())

        return LiveQuery(load, self.ledger.notifier, [LOGGED_ENTRIES])

    def totals_for_date(self, entry_date: date) -> LiveQuery[tuple[float, float]]:
        async def load() -> tuple[float, float]:
            entries = await self.ledger.list_for_date(entry_date)
            return totals_for_date(entries, entry_date)

        return LiveQuery(load, self.ledger.notifier, [LOGGED_ENTRIES])

    def progress_for_date(self, entry_date: date) -> LiveQuery[DailyProgress]:
        """Live totals for a date against the current targets."""

        async def load() -> DailyProgress:
            entries = await self.ledger.list_for_date(entry_date)
            targets = await self.targets.get_targets()
            return progress_for(entries, entry_date, targets)

        return LiveQuery(load, self.ledger.notifier, [LOGGED_ENTRIES, SETTINGS])

    async def get_targets(self) -> Targets:
        return await self.targets.get_targets()

    async def save_targets(self, calories: float, protein: float) -> Targets:
        return await self.targets.save_targets(calories, protein)


def validate_entry(entry: LedgerEntry) -> LedgerEntry:
    """Reject entries that must never reach the store; trim the food name."""
    name = entry.food_name.strip()
    if not name:
        raise ValidationError("Food name is required.")
    if not entry.quantity > 0:
        raise ValidationError("Quantity must be a number greater than zero.")
    for label, value in (("Calories", entry.calories), ("Protein", entry.protein)):
        if not isinstance(value, int | float) or not math.isfinite(value):
            raise ValidationError(f"{label} must be a number.")
    if name == entry.food_name:
        return entry
    return replace(entry, food_name=name)

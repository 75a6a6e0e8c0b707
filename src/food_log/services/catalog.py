"""Catalog of known foods, deduplicated by name and ranked by usage."""

import asyncio
import logging
import weakref
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from food_log.domain.catalog import CatalogEntry
from food_log.domain.errors import CatalogConflictError, StorageError
from food_log.services.live import FOOD_ITEMS, ChangeNotifier, LiveQuery

SUGGESTION_LIMIT = 10

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Persistence interface for the food catalog."""

    def get_by_name(self, name: str) -> CatalogEntry | None:
        """Return the entry with exactly this name, if present."""

    def get_by_id(self, catalog_id: int) -> CatalogEntry | None:
        """Return the entry with this id, if present."""

    def insert(
        self,
        name: str,
        calories_per_unit: float,
        protein_per_unit: float,
        default_unit: str | None,
        frequency: int,
    ) -> int:
        """Insert a new entry and return its id.

        Raises CatalogConflictError when the name already exists.
        """

    def increment_frequency(self, catalog_id: int) -> None:
        """Atomically add one to the entry's frequency."""

    def search_prefix(self, prefix: str, limit: int) -> list[CatalogEntry]:
        """Return entries whose name starts with prefix, best ranked first."""

    def list_all(self) -> list[CatalogEntry]:
        """Return every entry, best ranked first."""

    def delete(self, catalog_id: int) -> None:
        """Remove an entry; referencing ledger rows lose their back-reference."""


@dataclass
class CatalogService:
    """Application service owning the deduplicated food catalog."""

    repository: CatalogRepository
    notifier: ChangeNotifier
    suggestion_limit: int = SUGGESTION_LIMIT
    _name_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = field(
        default_factory=weakref.WeakValueDictionary, repr=False
    )

    async def upsert_from_logged_entry(
        self,
        name: str,
        quantity: float,
        total_calories: float,
        total_protein: float,
        unit: str | None,
    ) -> int:
        """Return the catalog id for ``name``, creating or bumping its row.

        An existing row only has its frequency incremented; the nutrition
        captured on first insert is never overwritten.
        """
        trimmed = name.strip()
        async with self._lock_for(trimmed):
            existing = await self._run(self.repository.get_by_name, trimmed)
            if existing is not None:
                catalog_id = await self._bump(existing.id)
            else:
                catalog_id = await self._insert_or_bump(
                    trimmed, quantity, total_calories, total_protein, unit
                )
        self.notifier.notify(FOOD_ITEMS)
        return catalog_id

    async def query_suggestions(self, prefix: str) -> list[CatalogEntry]:
        """Return up to ``suggestion_limit`` entries starting with ``prefix``."""
        return await self._run(
            self.repository.search_prefix, prefix, self.suggestion_limit
        )

    def watch_suggestions(self, prefix: str) -> LiveQuery[list[CatalogEntry]]:
        """Live form of ``query_suggestions``, refreshed on catalog changes."""
        return LiveQuery(
            lambda: self.query_suggestions(prefix), self.notifier, [FOOD_ITEMS]
        )

    async def all_items(self) -> list[CatalogEntry]:
        return await self._run(self.repository.list_all)

    async def get(self, catalog_id: int | None) -> CatalogEntry | None:
        """Resolve an optional back-reference; dangling ids yield None."""
        if catalog_id is None:
            return None
        return await self._run(self.repository.get_by_id, catalog_id)

    async def remove(self, catalog_id: int) -> None:
        """Administrative delete of a catalog row."""
        await self._run(self.repository.delete, catalog_id)
        _logger.info("Catalog entry removed: id=%s", catalog_id)
        self.notifier.notify(FOOD_ITEMS)

    async def _insert_or_bump(
        self,
        name: str,
        quantity: float,
        total_calories: float,
        total_protein: float,
        unit: str | None,
    ) -> int:
        calories_per_unit, protein_per_unit = per_unit_baseline(
            quantity, total_calories, total_protein
        )
        try:
            catalog_id = await self._run(
                self.repository.insert,
                name,
                calories_per_unit,
                protein_per_unit,
                unit,
                1,
            )
        except CatalogConflictError:
            # Another writer created the row between lookup and insert.
            existing = await self._run(self.repository.get_by_name, name)
            if existing is None:
                raise StorageError(
                    f"Catalog entry {name!r} conflicted but cannot be read"
                ) from None
            return await self._bump(existing.id)
        _logger.info("Catalog entry created: name=%s id=%s", name, catalog_id)
        return catalog_id

    async def _bump(self, catalog_id: int) -> int:
        await self._run(self.repository.increment_frequency, catalog_id)
        _logger.debug("Catalog frequency incremented: id=%s", catalog_id)
        return catalog_id

    def _lock_for(self, name: str) -> asyncio.Lock:
        """Lock serialising upserts of one name; dropped once nobody holds it."""
        lock = self._name_locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            self._name_locks[name] = lock
        return lock

    @staticmethod
    async def _run(func: Callable[..., T], *args: object) -> T:
        return await asyncio.to_thread(func, *args)


def per_unit_baseline(
    quantity: float, total_calories: float, total_protein: float
) -> tuple[float, float]:
    """Per-unit calories and protein, or zeros for a non-positive quantity."""
    if quantity <= 0:
        return 0.0, 0.0
    return total_calories / quantity, total_protein / quantity

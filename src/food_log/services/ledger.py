"""Ledger of logged consumption events."""

import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from food_log.domain.ledger import LedgerEntry
from food_log.services.live import LOGGED_ENTRIES, ChangeNotifier, LiveQuery


class LedgerRepository(Protocol):
    """Persistence interface for logged entries."""

    def insert(self, entry: LedgerEntry) -> int:
        """Insert an entry and return its id."""

    def update(self, entry: LedgerEntry) -> None:
        """Replace the stored entry with the same id."""

    def delete(self, entry_id: int) -> None:
        """Delete the entry with this id."""

    def get_by_id(self, entry_id: int) -> LedgerEntry | None:
        """Return an entry by id, if present."""

    def list_for_date(self, entry_date: date) -> list[LedgerEntry]:
        """Return entries for a date ordered by meal then id."""

    def list_all(self) -> list[LedgerEntry]:
        """Return all entries ordered by date desc then id desc."""


@dataclass
class LedgerService:
    """Application service for the entry ledger.

    Errors from the repository propagate unchanged; nothing is retried.
    Updates and deletes never touch catalog frequencies.
    """

    repository: LedgerRepository
    notifier: ChangeNotifier

    async def insert(self, entry: LedgerEntry) -> int:
        entry_id = await asyncio.to_thread(self.repository.insert, entry)
        self.notifier.notify(LOGGED_ENTRIES)
        return entry_id

    async def update(self, entry: LedgerEntry) -> None:
        await asyncio.to_thread(self.repository.update, entry)
        self.notifier.notify(LOGGED_ENTRIES)

    async def delete(self, entry: LedgerEntry) -> None:
        await asyncio.to_thread(self.repository.delete, entry.id)
        self.notifier.notify(LOGGED_ENTRIES)

    async def get_by_id(self, entry_id: int) -> LedgerEntry | None:
        return await asyncio.to_thread(self.repository.get_by_id, entry_id)

    async def list_for_date(self, entry_date: date) -> list[LedgerEntry]:
        return await asyncio.to_thread(self.repository.list_for_date, entry_date)

    async def list_all(self) -> list[LedgerEntry]:
        return await asyncio.to_thread(self.repository.list_all)

    def entries_for_date(self, entry_date: date) -> LiveQuery[list[LedgerEntry]]:
        """Live list of one day's entries."""
        return LiveQuery(
            lambda: self.list_for_date(entry_date), self.notifier, [LOGGED_ENTRIES]
        )

    def all_entries(self) -> LiveQuery[list[LedgerEntry]]:
        """Live list of every entry, newest first."""
        return LiveQuery(self.list_all, self.notifier, [LOGGED_ENTRIES])

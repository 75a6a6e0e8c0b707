"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field, replace
from datetime import date

import pytest

from food_log.config import Settings
from food_log.containers import AppContainer, wire_container
from food_log.domain.catalog import CatalogEntry, sort_key
from food_log.domain.errors import CatalogConflictError, StorageError
from food_log.domain.ledger import LedgerEntry, day_order_key, history_order_key
from food_log.services.catalog import CatalogRepository
from food_log.services.ledger import LedgerRepository
from food_log.services.targets import SettingsRepository


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests.

    Names listed in ``conflict_names`` simulate a concurrent writer: the row
    appears and the insert fails with a unique-name conflict.
    """

    items: dict[int, CatalogEntry] = field(default_factory=dict)
    searches: list[str] = field(default_factory=list)
    conflict_names: set[str] = field(default_factory=set)
    fail_searches: bool = False
    _next_id: int = 1
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get_by_name(self, name: str) -> CatalogEntry | None:
        with self._lock:
            for item in self.items.values():
                if item.name == name:
                    return item
        return None

    def get_by_id(self, catalog_id: int) -> CatalogEntry | None:
        return self.items.get(catalog_id)

    def insert(
        self,
        name: str,
        calories_per_unit: float,
        protein_per_unit: float,
        default_unit: str | None,
        frequency: int,
    ) -> int:
        with self._lock:
            if name in self.conflict_names:
                self.conflict_names.discard(name)
                self._store(name, 50.0, 5.0, "pc", 1)
                raise CatalogConflictError(f"duplicate food item {name!r}")
            if any(item.name == name for item in self.items.values()):
                raise CatalogConflictError(f"duplicate food item {name!r}")
            return self._store(
                name, calories_per_unit, protein_per_unit, default_unit, frequency
            )

    def increment_frequency(self, catalog_id: int) -> None:
        with self._lock:
            item = self.items[catalog_id]
            self.items[catalog_id] = replace(item, frequency=item.frequency + 1)

    def search_prefix(self, prefix: str, limit: int) -> list[CatalogEntry]:
        self.searches.append(prefix)
        if self.fail_searches:
            raise StorageError("catalog unavailable")
        matches = [item for item in self.items.values() if item.name.startswith(prefix)]
        return sorted(matches, key=sort_key)[:limit]

    def list_all(self) -> list[CatalogEntry]:
        return sorted(self.items.values(), key=sort_key)

    def delete(self, catalog_id: int) -> None:
        self.items.pop(catalog_id, None)

    def _store(
        self,
        name: str,
        calories_per_unit: float,
        protein_per_unit: float,
        default_unit: str | None,
        frequency: int,
    ) -> int:
        catalog_id = self._next_id
        self._next_id += 1
        self.items[catalog_id] = CatalogEntry(
            id=catalog_id,
            name=name,
            calories_per_unit=calories_per_unit,
            protein_per_unit=protein_per_unit,
            default_unit=default_unit,
            frequency=frequency,
        )
        return catalog_id


@dataclass
class InMemoryLedgerRepository(LedgerRepository):
    """In-memory ledger repository for tests."""

    entries: dict[int, LedgerEntry] = field(default_factory=dict)
    fail_inserts: bool = False
    _next_id: int = 1

    def insert(self, entry: LedgerEntry) -> int:
        if self.fail_inserts:
            raise StorageError("ledger unavailable")
        entry_id = self._next_id
        self._next_id += 1
        self.entries[entry_id] = replace(entry, id=entry_id)
        return entry_id

    def update(self, entry: LedgerEntry) -> None:
        if entry.id not in self.entries:
            raise StorageError(f"Logged entry {entry.id} does not exist")
        self.entries[entry.id] = entry

    def delete(self, entry_id: int) -> None:
        if entry_id not in self.entries:
            raise StorageError(f"Logged entry {entry_id} does not exist")
        del self.entries[entry_id]

    def get_by_id(self, entry_id: int) -> LedgerEntry | None:
        return self.entries.get(entry_id)

    def list_for_date(self, entry_date: date) -> list[LedgerEntry]:
        matches = [entry for entry in self.entries.values() if entry.date == entry_date]
        return sorted(matches, key=day_order_key)

    def list_all(self) -> list[LedgerEntry]:
        return sorted(self.entries.values(), key=history_order_key, reverse=True)


@dataclass
class InMemorySettingsRepository(SettingsRepository):
    """In-memory settings repository for tests."""

    values: dict[str, float] = field(default_factory=dict)

    def get_value(self, key: str) -> float | None:
        return self.values.get(key)

    def set_value(self, key: str, value: float) -> None:
        self.values[key] = value


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def ledger_repository() -> InMemoryLedgerRepository:
    return InMemoryLedgerRepository()


@pytest.fixture
def settings_repository() -> InMemorySettingsRepository:
    return InMemorySettingsRepository()


@pytest.fixture
def container(
    settings: Settings,
    catalog_repository: InMemoryCatalogRepository,
    ledger_repository: InMemoryLedgerRepository,
    settings_repository: InMemorySettingsRepository,
) -> AppContainer:
    return wire_container(
        settings,
        catalog_repository=catalog_repository,
        ledger_repository=ledger_repository,
        settings_repository=settings_repository,
    )

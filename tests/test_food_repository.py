"""Tests for the food repository façade."""

import asyncio
from dataclasses import replace
from datetime import date

import pytest

from food_log.containers import AppContainer
from food_log.domain.errors import StorageError, ValidationError
from food_log.domain.ledger import LedgerEntry, Meal
from food_log.domain.stats import DailySummary, Targets
from tests.conftest import (
    InMemoryCatalogRepository,
    InMemoryLedgerRepository,
    InMemorySettingsRepository,
)

DAY = date(2024, 1, 1)


def _entry(
    name: str = "Banana",
    quantity: float = 2,
    calories: float = 210,
    protein: float = 2.6,
    entry_date: date = DAY,
) -> LedgerEntry:
    return LedgerEntry(
        food_name=name,
        quantity=quantity,
        unit="pc",
        calories=calories,
        protein=protein,
        date=entry_date,
        meal=Meal.BREAKFAST,
    )


def test_log_entry_links_catalog_and_ledger(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
) -> None:
    repository = container.food_repository

    saved = asyncio.run(repository.log_entry(_entry(name=" Banana ")))

    assert saved.id > 0
    assert saved.food_name == "Banana"
    assert saved.catalog_ref is not None
    item = catalog_repository.items[saved.catalog_ref]
    assert item.name == "Banana"
    assert item.calories_per_unit == 105
    assert item.frequency == 1
    assert asyncio.run(repository.catalog_entry_for(saved)) == item


def test_logging_twice_keeps_one_catalog_row(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
    ledger_repository: InMemoryLedgerRepository,
) -> None:
    repository = container.food_repository

    first = asyncio.run(repository.log_entry(_entry()))
    second = asyncio.run(repository.log_entry(_entry(quantity=1, calories=300)))

    assert first.catalog_ref == second.catalog_ref
    assert len(catalog_repository.items) == 1
    item = catalog_repository.items[first.catalog_ref]
    assert item.frequency == 2
    assert item.calories_per_unit == 105
    assert ledger_repository.entries[second.id].calories == 300


@pytest.mark.parametrize(
    "entry",
    [
        _entry(name="   "),
        _entry(quantity=0),
        _entry(quantity=-1),
        _entry(calories=float("nan")),
    ],
)
def test_invalid_entry_is_rejected_before_any_mutation(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
    ledger_repository: InMemoryLedgerRepository,
    entry: LedgerEntry,
) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(container.food_repository.log_entry(entry))

    assert catalog_repository.items == {}
    assert ledger_repository.entries == {}


def test_ledger_failure_keeps_catalog_upsert(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
    ledger_repository: InMemoryLedgerRepository,
) -> None:
    ledger_repository.fail_inserts = True

    with pytest.raises(StorageError):
        asyncio.run(container.food_repository.log_entry(_entry()))

    assert [item.frequency for item in catalog_repository.items.values()] == [1]
    assert ledger_repository.entries == {}


def test_edit_and_delete_leave_frequency_untouched(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
    ledger_repository: InMemoryLedgerRepository,
) -> None:
    repository = container.food_repository

    async def scenario() -> None:
        first = await repository.log_entry(_entry())
        second = await repository.log_entry(_entry())
        await repository.update_entry(replace(first, quantity=4, calories=420))
        await repository.delete_entry(second)

    asyncio.run(scenario())

    assert [item.frequency for item in catalog_repository.items.values()] == [2]
    assert [entry.quantity for entry in ledger_repository.entries.values()] == [4]


def test_removed_catalog_row_leaves_dangling_reference(
    container: AppContainer,
) -> None:
    repository = container.food_repository

    async def scenario() -> tuple[LedgerEntry | None, object]:
        saved = await repository.log_entry(_entry())
        await container.catalog_service.remove(saved.catalog_ref)
        stored = await repository.get_entry(saved.id)
        return stored, await repository.catalog_entry_for(stored)

    stored, catalog_entry = asyncio.run(scenario())

    assert stored is not None
    assert stored.calories == 210
    assert catalog_entry is None


def test_summaries_refresh_after_logging(container: AppContainer) -> None:
    repository = container.food_repository

    async def scenario() -> list[list[DailySummary]]:
        snapshots = []
        async with repository.summaries() as summaries:
            snapshots.append(await anext(summaries))
            await repository.log_entry(_entry(calories=500))
            await repository.log_entry(_entry(calories=300))
            snapshots.append(await anext(summaries))
            await repository.log_entry(_entry(calories=200, entry_date=date(2024, 1, 2)))
            snapshots.append(await anext(summaries))
        return snapshots

    snapshots = asyncio.run(scenario())

    assert snapshots[0] == []
    assert snapshots[1] == [DailySummary(DAY, 800, pytest.approx(5.2))]
    assert [(s.date, s.total_calories) for s in snapshots[2]] == [
        (date(2024, 1, 2), 200),
        (DAY, 800),
    ]


def test_entries_and_totals_for_date(container: AppContainer) -> None:
    repository = container.food_repository

    async def scenario() -> tuple[list[str], tuple[float, float]]:
        await repository.log_entry(_entry(name="Oats", calories=150, protein=5))
        await repository.log_entry(_entry(name="Milk", calories=120, protein=8))
        await repository.log_entry(
            _entry(name="Pizza", calories=800, entry_date=date(2024, 1, 2))
        )
        entries = await repository.entries_for_date(DAY).first()
        totals = await repository.totals_for_date(DAY).first()
        return [entry.food_name for entry in entries], totals

    names, totals = asyncio.run(scenario())

    assert names == ["Oats", "Milk"]
    assert totals == (270, 13)


def test_suggestions_for_prefix(container: AppContainer) -> None:
    repository = container.food_repository

    async def scenario() -> list[str]:
        await repository.log_entry(_entry(name="Paneer"))
        await repository.log_entry(_entry(name="Pasta"))
        await repository.log_entry(_entry(name="Pasta"))
        suggestions = await repository.suggestions_for("Pa").first()
        return [item.name for item in suggestions]

    assert asyncio.run(scenario()) == ["Pasta", "Paneer"]


def test_suggestion_pipeline_uses_configured_debounce(
    container: AppContainer,
) -> None:
    pipeline = container.food_repository.suggestion_pipeline()

    assert pipeline.debounce_seconds == 0.3
    assert pipeline.min_length == 2


def test_targets_default_and_validation(
    container: AppContainer,
    settings_repository: InMemorySettingsRepository,
) -> None:
    repository = container.food_repository

    assert asyncio.run(repository.get_targets()) == Targets(2000.0, 100.0)

    with pytest.raises(ValidationError):
        asyncio.run(repository.save_targets(0, 120))
    with pytest.raises(ValidationError):
        asyncio.run(repository.save_targets(float("nan"), 120))
    with pytest.raises(ValidationError):
        asyncio.run(repository.save_targets(1800, float("inf")))
    assert settings_repository.values == {}

    asyncio.run(repository.save_targets(1800, 120))
    assert settings_repository.values == {
        "calorie_target": 1800,
        "protein_target": 120,
    }
    assert asyncio.run(repository.get_targets()) == Targets(1800, 120)


def test_progress_refreshes_when_targets_change(container: AppContainer) -> None:
    repository = container.food_repository

    async def scenario() -> list[float]:
        remaining = []
        await repository.log_entry(_entry(calories=500))
        async with repository.progress_for_date(DAY) as progress:
            remaining.append((await anext(progress)).remaining_calories)
            await repository.save_targets(1500, 90)
            remaining.append((await anext(progress)).remaining_calories)
        return remaining

    assert asyncio.run(scenario()) == [1500, 1000]

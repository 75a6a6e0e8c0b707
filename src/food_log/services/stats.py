"""Aggregation of ledger entries into daily totals."""

from collections.abc import Iterable
from datetime import date

from food_log.domain.ledger import LedgerEntry
from food_log.domain.stats import DailyProgress, DailySummary, Targets


def summaries_by_date(entries: Iterable[LedgerEntry]) -> list[DailySummary]:
    """Sum calories and protein per date, newest date first."""
    totals: dict[date, tuple[float, float]] = {}
    for entry in entries:
        calories, protein = totals.get(entry.date, (0.0, 0.0))
        totals[entry.date] = (calories + entry.calories, protein + entry.protein)
    return [
        DailySummary(date=day, total_calories=calories, total_protein=protein)
        for day, (calories, protein) in sorted(totals.items(), reverse=True)
    ]


def totals_for_date(
    entries: Iterable[LedgerEntry], entry_date: date
) -> tuple[float, float]:
    """Return (total calories, total protein) for a single date."""
    calories = 0.0
    protein = 0.0
    for entry in entries:
        if entry.date != entry_date:
            continue
        calories += entry.calories
        protein += entry.protein
    return calories, protein


def progress_for(
    entries: Iterable[LedgerEntry], entry_date: date, targets: Targets
) -> DailyProgress:
    """Measure a date's totals against the daily targets."""
    calories, protein = totals_for_date(entries, entry_date)
    return DailyProgress(
        summary=DailySummary(
            date=entry_date, total_calories=calories, total_protein=protein
        ),
        targets=targets,
    )

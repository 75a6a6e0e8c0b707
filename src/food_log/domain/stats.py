"""Domain models for aggregated totals."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailySummary:
    """Totals of all ledger entries sharing a date."""

    date: date
    total_calories: float
    total_protein: float


@dataclass(frozen=True)
class Targets:
    """Daily calorie and protein goals."""

    calories: float
    protein: float


@dataclass(frozen=True)
class DailyProgress:
    """Totals for one date measured against the daily targets."""

    summary: DailySummary
    targets: Targets

    @property
    def remaining_calories(self) -> float:
        return self.targets.calories - self.summary.total_calories

    @property
    def remaining_protein(self) -> float:
        return self.targets.protein - self.summary.total_protein

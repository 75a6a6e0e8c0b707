"""Daily calorie and protein targets."""

import asyncio
import math
from dataclasses import dataclass
from typing import Protocol

from food_log.domain.errors import ValidationError
from food_log.domain.stats import Targets
from food_log.services.live import SETTINGS, ChangeNotifier

CALORIE_TARGET_KEY = "calorie_target"
PROTEIN_TARGET_KEY = "protein_target"
DEFAULT_CALORIE_TARGET = 2000.0
DEFAULT_PROTEIN_TARGET = 100.0


class SettingsRepository(Protocol):
    """Key-value persistence for scalar settings."""

    def get_value(self, key: str) -> float | None:
        """Return the stored value for key, if set."""

    def set_value(self, key: str, value: float) -> None:
        """Store a value for key."""


@dataclass
class TargetsService:
    """Service for reading and saving daily targets."""

    repository: SettingsRepository
    notifier: ChangeNotifier
    default_calories: float = DEFAULT_CALORIE_TARGET
    default_protein: float = DEFAULT_PROTEIN_TARGET

    async def get_targets(self) -> Targets:
        """Return stored targets, falling back to defaults when unset."""
        calories = await asyncio.to_thread(
            self.repository.get_value, CALORIE_TARGET_KEY
        )
        protein = await asyncio.to_thread(self.repository.get_value, PROTEIN_TARGET_KEY)
        return Targets(
            calories=self.default_calories if calories is None else calories,
            protein=self.default_protein if protein is None else protein,
        )

    async def save_targets(self, calories: float, protein: float) -> Targets:
        """Persist both targets after checking they are finite and positive."""
        if not all(math.isfinite(value) and value > 0 for value in (calories, protein)):
            raise ValidationError("Targets must be positive numbers.")
        await asyncio.to_thread(self.repository.set_value, CALORIE_TARGET_KEY, calories)
        await asyncio.to_thread(self.repository.set_value, PROTEIN_TARGET_KEY, protein)
        self.notifier.notify(SETTINGS)
        return Targets(calories=calories, protein=protein)

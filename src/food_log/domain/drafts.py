"""Edit-session state for composing a ledger entry."""

import math
from dataclasses import dataclass, field
from datetime import date

from food_log.domain.catalog import CatalogEntry
from food_log.domain.errors import ValidationError
from food_log.domain.ledger import LedgerEntry, Meal

AVAILABLE_UNITS = ("g", "ml", "pc", "cup", "slice", "katori")
DEFAULT_UNIT = "g"


@dataclass(frozen=True)
class Baseline:
    """Per-unit nutrition captured from a selected suggestion."""

    calories_per_unit: float
    protein_per_unit: float
    unit: str


@dataclass
class EntryDraft:
    """Form state of one entry being composed.

    Selecting a suggestion stores a baseline; while the unit still matches the
    baseline unit, quantity edits recompute the totals from it. Changing the
    unit, the name or either total drops the baseline.
    """

    food_name: str = ""
    quantity: str = ""
    unit: str = DEFAULT_UNIT
    calories: str = ""
    protein: str = ""
    meal: Meal = Meal.BREAKFAST
    notes: str = ""
    baseline: Baseline | None = None
    available_units: tuple[str, ...] = field(default=AVAILABLE_UNITS)

    def select_suggestion(self, entry: CatalogEntry) -> None:
        """Fill the form from a catalog entry and remember its baseline."""
        unit = entry.default_unit or self.unit
        self.food_name = entry.name
        self.quantity = "1"
        self.unit = unit
        self.calories = str(round_half_up(entry.calories_per_unit))
        self.protein = str(round_half_up(entry.protein_per_unit))
        self.baseline = Baseline(
            calories_per_unit=entry.calories_per_unit,
            protein_per_unit=entry.protein_per_unit,
            unit=unit,
        )

    def update_name(self, name: str) -> None:
        self.food_name = name
        self.baseline = None

    def update_quantity(self, text: str) -> None:
        """Set the quantity, recomputing totals while a baseline applies.

        An empty or non-positive quantity leaves totals and baseline as they
        are, so the next valid quantity still scales from the suggestion.
        """
        self.quantity = text
        if self.baseline is None or self.unit != self.baseline.unit:
            return
        quantity = parse_number(text)
        if quantity is None or quantity <= 0:
            return
        self.calories = str(round_half_up(self.baseline.calories_per_unit * quantity))
        self.protein = str(round_half_up(self.baseline.protein_per_unit * quantity))

    def update_unit(self, unit: str) -> None:
        self.unit = unit
        if self.baseline is not None and unit != self.baseline.unit:
            self.baseline = None

    def update_calories(self, text: str) -> None:
        self.calories = text
        self.baseline = None

    def update_protein(self, text: str) -> None:
        self.protein = text
        self.baseline = None

    def update_meal(self, meal: Meal) -> None:
        self.meal = meal

    def update_notes(self, notes: str) -> None:
        self.notes = notes

    def to_ledger_entry(self, entry_date: date) -> LedgerEntry:
        """Validate the form and build an unsaved ledger entry."""
        quantity = parse_number(self.quantity)
        calories = parse_number(self.calories)
        protein = parse_number(self.protein)
        if not self.food_name.strip():
            raise ValidationError("Food name is required.")
        if quantity is None or quantity <= 0:
            raise ValidationError("Quantity must be a number greater than zero.")
        if calories is None:
            raise ValidationError("Calories must be a number.")
        if protein is None:
            raise ValidationError("Protein must be a number.")
        return LedgerEntry(
            food_name=self.food_name.strip(),
            quantity=quantity,
            unit=self.unit,
            calories=calories,
            protein=protein,
            date=entry_date,
            meal=self.meal,
            notes=self.notes if self.notes.strip() else None,
        )

    def reset(self) -> None:
        """End the session, returning every field to its default."""
        fresh = EntryDraft()
        self.food_name = fresh.food_name
        self.quantity = fresh.quantity
        self.unit = fresh.unit
        self.calories = fresh.calories
        self.protein = fresh.protein
        self.meal = fresh.meal
        self.notes = fresh.notes
        self.baseline = None


def parse_number(text: str) -> float | None:
    """Parse a finite float from user input, or return None."""
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)

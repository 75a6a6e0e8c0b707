"""Domain models for the food catalog."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogEntry:
    """A known food template with per-unit nutrition and usage frequency."""

    id: int
    name: str
    calories_per_unit: float
    protein_per_unit: float
    default_unit: str | None
    frequency: int


def sort_key(entry: CatalogEntry) -> tuple[int, str]:
    """Rank by frequency descending, then name ascending."""
    return (-entry.frequency, entry.name)

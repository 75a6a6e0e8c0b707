"""Supabase key-value store for scalar settings."""

from dataclasses import dataclass

from supabase import Client

from food_log.adapters.supabase_errors import execute
from food_log.services.targets import SettingsRepository

TABLE = "app_settings"


@dataclass
class SupabaseSettingsRepository(SettingsRepository):
    """Supabase implementation for settings values."""

    client: Client

    def get_value(self, key: str) -> float | None:
        """Return the stored value for a key."""
        response = execute(
            self.client.table(TABLE).select("value").eq("key", key).limit(1),
            "read setting",
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return float(value) if value is not None else None

    def set_value(self, key: str, value: float) -> None:
        """Create or overwrite the value for a key."""
        execute(
            self.client.table(TABLE).upsert({"key": key, "value": value}),
            "save setting",
        )

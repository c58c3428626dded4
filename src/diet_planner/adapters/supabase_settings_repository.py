"""Supabase repository for persisted settings documents."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from diet_planner.services.settings_store import SettingsRepository


@dataclass
class SupabaseSettingsRepository(SettingsRepository):
    """Supabase implementation storing one JSON document per key."""

    client: Client
    table: str = "app_settings"

    def load(self, key: str) -> dict[str, object] | None:
        """Return the stored document for a key."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return value if isinstance(value, dict) else None

    def save(self, key: str, value: dict[str, object]) -> None:
        """Insert or replace the document for a key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()

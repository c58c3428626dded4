"""Load-or-default persistence for the profile and provider settings."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from diet_planner.domain.profile import UserProfile
from diet_planner.domain.providers import (
    BUILTIN_PROVIDER_IDS,
    GEMINI_PROVIDER_ID,
    PROVIDER_SETTINGS_VERSION,
    ProviderSettings,
)

PROFILE_STORAGE_KEY = "diet_planner.profile"
PROVIDER_SETTINGS_STORAGE_KEY = "diet_planner.provider_settings"

_logger = logging.getLogger(__name__)


class SettingsRepository(Protocol):
    """Key-value persistence for JSON settings documents."""

    def load(self, key: str) -> dict[str, object] | None:
        """Return the stored document for ``key``, if any."""

    def save(self, key: str, value: dict[str, object]) -> None:
        """Store the document for ``key``, replacing any previous value."""


@dataclass
class SettingsService:
    """Owns the persisted profile and provider settings records."""

    repository: SettingsRepository

    def has_profile(self) -> bool:
        """Return True once a profile has been saved (onboarding finished)."""
        return self.repository.load(PROFILE_STORAGE_KEY) is not None

    def load_profile(self) -> UserProfile:
        """Return the stored profile or the default one."""
        stored = self.repository.load(PROFILE_STORAGE_KEY)
        if stored is None:
            return UserProfile.default()
        try:
            return UserProfile.model_validate(stored)
        except ValidationError:
            _logger.warning("Stored profile is invalid, falling back to defaults")
            return UserProfile.default()

    def save_profile(self, profile: UserProfile) -> None:
        """Persist the profile."""
        self.repository.save(PROFILE_STORAGE_KEY, profile.model_dump(mode="json"))

    def load_provider_settings(self) -> ProviderSettings:
        """Return provider settings, upgrading the legacy shape if needed."""
        stored = self.repository.load(PROVIDER_SETTINGS_STORAGE_KEY)
        if stored is None:
            return ProviderSettings()
        if is_legacy_provider_settings(stored):
            upgraded = upgrade_provider_settings(stored)
            _logger.info(
                "Upgraded legacy provider settings to version %s", upgraded.version
            )
            self.save_provider_settings(upgraded)
            return upgraded
        try:
            return ProviderSettings.model_validate(stored)
        except ValidationError:
            _logger.warning(
                "Stored provider settings are invalid, falling back to defaults"
            )
            return ProviderSettings()

    def save_provider_settings(self, settings: ProviderSettings) -> None:
        """Persist provider settings in the current shape."""
        self.repository.save(
            PROVIDER_SETTINGS_STORAGE_KEY,
            settings.model_dump(mode="json", by_alias=True),
        )


def is_legacy_provider_settings(stored: dict[str, object]) -> bool:
    """Return True for the single-provider-plus-key-map shape."""
    return "selectedProviderId" not in stored and (
        "apiKeys" in stored or "provider" in stored or "providerId" in stored
    )


def upgrade_provider_settings(stored: dict[str, object]) -> ProviderSettings:
    """Convert ``{"provider": id, "apiKeys": {...}}`` to the current shape."""
    provider_id = str(stored.get("providerId") or stored.get("provider") or "")
    raw_keys = stored.get("apiKeys")
    keys = raw_keys if isinstance(raw_keys, dict) else {}
    builtin_keys = {
        key_id: str(value).strip()
        for key_id, value in keys.items()
        if key_id in BUILTIN_PROVIDER_IDS and value
    }
    return ProviderSettings(
        version=PROVIDER_SETTINGS_VERSION,
        selected_provider_id=(
            provider_id if provider_id in BUILTIN_PROVIDER_IDS else GEMINI_PROVIDER_ID
        ),
        builtin_api_keys=builtin_keys,
        custom_providers=[],
    )

"""Display settings (theme, units) persisted under their own key."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace

from rt_cli.core.constants import DEFAULT_SETTINGS, SETTINGS_KEY, THEMES, UNITS
from rt_cli.core.models import InvalidInputError, PersistenceError
from rt_cli.core.persistence import MISSING, Err, KeyValueStore, decode_settings, encode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    theme: str = DEFAULT_SETTINGS["theme"]
    units: str = DEFAULT_SETTINGS["units"]

    @property
    def imperial(self) -> bool:
        return self.units == "imperial"


def load_settings(kv: KeyValueStore) -> Settings:
    """Load settings, falling back to defaults for missing or bad values."""
    try:
        raw = kv.get(SETTINGS_KEY)
    except PersistenceError as exc:
        logger.warning("Could not read settings: %s", exc)
        raw = None

    result = decode_settings(raw)
    if isinstance(result, Err):
        if result.kind != MISSING:
            logger.warning("Could not parse settings (%s): %s", result.kind, result.message)
        return Settings()

    stored = result.value
    theme = stored.get("theme")
    units = stored.get("units")
    return Settings(
        theme=theme if theme in THEMES else DEFAULT_SETTINGS["theme"],
        units=units if units in UNITS else DEFAULT_SETTINGS["units"],
    )


def save_settings(kv: KeyValueStore, settings: Settings) -> bool:
    try:
        kv.set(SETTINGS_KEY, encode(asdict(settings)))
    except PersistenceError as exc:
        logger.warning("Could not save settings: %s", exc)
        return False
    return True


def toggle_theme(settings: Settings) -> Settings:
    return replace(settings, theme="dark" if settings.theme == "light" else "light")


def set_units(settings: Settings, units: str) -> Settings:
    if units not in UNITS:
        raise InvalidInputError(f"units must be one of {'|'.join(UNITS)}")
    return replace(settings, units=units)

"""Runtime state container for CLI context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from rich.console import Console

from rt_cli.core.persistence import KeyValueStore
from rt_cli.core.settings import Settings, save_settings
from rt_cli.core.store import WorkoutStore


@dataclass
class AppState:
    """CLI runtime options, loaded configuration and the workout store."""

    json_output: bool
    plain_output: bool
    verbose: bool
    quiet: bool
    config_path: Path
    config: Dict[str, Any]
    console: Console
    kv: KeyValueStore
    store: WorkoutStore
    settings: Settings

    def update_settings(self, settings: Settings) -> bool:
        """Replace the current settings and persist them."""
        self.settings = settings
        return save_settings(self.kv, settings)

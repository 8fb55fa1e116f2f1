"""JSON export helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from rt_cli.core.models import Workout


def build_export_payload(
    workouts: Sequence[Workout],
    exported_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Wrap workouts with an export timestamp and total count."""
    stamp = exported_at or datetime.now(timezone.utc)
    return {
        "workouts": [w.to_dict() for w in workouts],
        "exportDate": stamp.isoformat(),
        "totalWorkouts": len(workouts),
    }


def write_json(path: Path, payload: Any) -> Path:
    """Write payload as pretty JSON and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n")
    return path

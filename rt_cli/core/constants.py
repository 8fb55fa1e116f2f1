"""Static constants and mappings for the run tracker."""

from __future__ import annotations

STORAGE_KEY = "runTracker.workouts"
SETTINGS_KEY = "runTracker.settings"

# Order matters: the first matching rule wins.
TYPE_RULES = [
    ("easy", ["easy"]),
    ("tempo", ["tempo"]),
    ("speed", ["speed", "interval"]),
]

TYPE_LABELS = {
    "easy": "Easy",
    "tempo": "Tempo",
    "speed": "Speed/Interval",
    "other": "Other",
}

# Precedence on ties follows this order.
SUGGESTION_LABELS = {
    "easy": "Easy Run",
    "tempo": "Tempo Run",
    "speed": "Speed Work",
}

RECORD_LABELS = {
    "fastest_pace": "Fastest Pace",
    "longest_distance": "Longest Run",
    "longest_duration": "Longest Duration",
}

LIVE_TRACKED_TYPE = "Live Tracked Run"
ASSUMED_SECONDS_PER_KM = 360
TICK_SECONDS = 1.0
RESUME_MODES = ("restart", "continue")

KM_TO_MILES = 0.621371

THEMES = ("light", "dark")
UNITS = ("metric", "imperial")
DEFAULT_SETTINGS = {"theme": "light", "units": "metric"}

CSV_HEADERS = ["Date", "Distance (km)", "Duration (min)", "Type", "Pace (min/km)", "Kudos"]
EXPORT_FILE_PREFIX = "running-tracker"

"""
schedule_config.py — Shift Catalog & Roster Classification Tables

SHIFT CATALOG
─────────────
  24h      08:00 → 08:00 (+1d)   24 h
  16h      08:00 → 00:00 (+1d)   16 h
  8h       08:00 → 16:00          8 h
  morning  08:00 → 20:00         12 h   (split slot, first name of "a/b")
  evening  20:00 → 08:00 (+1d)   12 h   (split slot, second name of "a/b")

COLUMN HEADERS (row 0)
──────────────────────
  Lower-cased header text is matched by substring, first matching rule wins:
    "24" / yirmi dört          → 24h
    "16" / on altı             → 16h
    gündüz / 08-16 / 8-16      → 8h
    "/" / sarı / müs           → split
    anything else              → unknown (cells default to 24h)
  The header text itself is kept as the column's region label.

CELLS
─────
  First match wins:
    "a/b"                    → a morning, b evening
    "name 08-16" or 8h col   → 8h (a trailing 16/24 is dropped from the name)
    "name16"                 → 16h (beats a 16h / 24h / unknown column)
    "name24"                 → 24h (beats a 16h / 24h / unknown column)
  Then the column classification decides (16h / 24h), else 24h.

TUNING
──────
  MIN_REST_HOURS, MAX_SWAP_CONFLICTS, SWAP_RESULT_LIMIT and
  ERROR_SWAP_RESULT_LIMIT are defaults; config.load_settings() can override
  them from JSON.
"""

import re
from datetime import datetime
from typing import Dict, List, Tuple

from shiftcheck.models import ColumnKind, ShiftType

# ---------------------------------------------------------------------------
# Shift catalog
# ---------------------------------------------------------------------------
SHIFT_DEFINITIONS: Dict[ShiftType, Dict] = {
    ShiftType.H24:     {"hours": 24, "start_hour": 8,  "label": "24-hour shift"},
    ShiftType.H16:     {"hours": 16, "start_hour": 8,  "label": "16-hour shift (08:00-00:00)"},
    ShiftType.H8:      {"hours": 8,  "start_hour": 8,  "label": "8-hour shift (08:00-16:00)"},
    ShiftType.MORNING: {"hours": 12, "start_hour": 8,  "label": "Morning (12h)"},
    ShiftType.EVENING: {"hours": 12, "start_hour": 20, "label": "Evening (12h)"},
}

# Placeholder instant for day 1 00:00; only deltas and hour-of-day matter.
ROSTER_EPOCH = datetime(2000, 1, 1)

UNKNOWN_MONTH = "Unknown"

# ---------------------------------------------------------------------------
# Column header classification: first matching rule wins
# ---------------------------------------------------------------------------
COLUMN_CLASSIFICATION_RULES: List[Tuple[ColumnKind, Tuple[str, ...]]] = [
    (ColumnKind.H24,   ("24", "yirmi dört", "yirmidört", "yirmi dort")),
    (ColumnKind.H16,   ("16", "on altı", "onaltı", "on alti")),
    (ColumnKind.H8,    ("gündüz", "gunduz", "08-16", "8-16")),
    (ColumnKind.SPLIT, ("/", "sarı", "sari", "müs")),
]

# ---------------------------------------------------------------------------
# Cell patterns
# ---------------------------------------------------------------------------
SPLIT_SEPARATOR = "/"
DAYTIME_PATTERN = re.compile(r"0?8\s*-\s*16", re.IGNORECASE)
HOUR_SUFFIX_PATTERN = re.compile(r"^(?P<name>.*?)(?P<hours>16|24)$")

# Separator characters left behind once a marker is removed from a name
NAME_DECORATION_CHARS = " \t-_:.,;()[]"

# ---------------------------------------------------------------------------
# Validation / swap tuning
# ---------------------------------------------------------------------------
MIN_REST_HOURS = 8
MAX_SWAP_CONFLICTS = 2
SWAP_RESULT_LIMIT = 15
ERROR_SWAP_RESULT_LIMIT = 10

# ---------------------------------------------------------------------------
# Daily overview labels (first present type wins)
# ---------------------------------------------------------------------------
DAY_LABEL_FULL = "Full"
DAY_LABEL_PRECEDENCE: List[Tuple[Tuple[ShiftType, ...], str]] = [
    ((ShiftType.H24,), "24h"),
    ((ShiftType.H16,), "16h"),
    ((ShiftType.MORNING, ShiftType.EVENING), DAY_LABEL_FULL),
    ((ShiftType.MORNING,), "AM"),
    ((ShiftType.EVENING,), "PM"),
    ((ShiftType.H8,), "8h"),
]

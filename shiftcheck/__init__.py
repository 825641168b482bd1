"""
Doctor Shift Roster Checker

Modules:
- schedule_config: Shift catalog, header/cell classification tables, tuning constants
- config: Roster file loading (CSV / Excel / ODS) and settings overrides
- parser: Grid → shift intervals
- constraints: Duplicate, same-day overlap and rest validation
- swaps: Equal-hour day swap recommendations
- metrics: Per-doctor statistics, roster summary, daily overview
- exporter: Excel / CSV / text report outputs
"""

from .config import (
    RosterFormatError,
    load_grid,
    load_settings,
    get_config,
)

from .models import (
    ShiftType,
    ShiftInterval,
    ShiftData,
    ValidationError,
    DoctorStatistics,
    SwapSuggestion,
)

from .parser import parse_roster, load_shift_data
from .constraints import ShiftValidator, validate
from .swaps import suggest_swaps, suggest_swaps_for_errors
from .metrics import aggregate, summarize, daily_overview

__all__ = [
    "RosterFormatError",
    "load_grid",
    "load_settings",
    "get_config",
    "ShiftType",
    "ShiftInterval",
    "ShiftData",
    "ValidationError",
    "DoctorStatistics",
    "SwapSuggestion",
    "parse_roster",
    "load_shift_data",
    "ShiftValidator",
    "validate",
    "suggest_swaps",
    "suggest_swaps_for_errors",
    "aggregate",
    "summarize",
    "daily_overview",
]

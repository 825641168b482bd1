"""
models.py — Shift Interval Model for Monthly Duty Roster Checks

Shared vocabulary for the parser, validator, swap recommender and
statistics aggregator:

  - ShiftType / ColumnKind enums
  - ShiftInterval: one doctor's contiguous duty assignment (immutable)
  - ShiftData: parser output (month, per-day raw entries, all intervals)
  - ValidationError: one detected conflict (duplicate / overlap / format)
  - DoctorStatistics, RosterSummary: derived reductions
  - SwapSuggestion: one feasible exchange between two doctor/day pairs

Times are stored as hour offsets from the start of day 1 (offset 0 =
day 1 00:00). Concrete datetimes are only materialized from ROSTER_EPOCH
for serialization and export.

Every result type exposes to_dict() with the stable camelCase field names
that exporters consume.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ShiftType(str, Enum):
    H24 = "24h"           # 08:00 → 08:00 (+1d)
    MORNING = "morning"   # 08:00 → 20:00, first half of a split slot
    EVENING = "evening"   # 20:00 → 08:00 (+1d), second half of a split slot
    H16 = "16h"           # 08:00 → 00:00 (+1d)
    H8 = "8h"             # 08:00 → 16:00


SPLIT_HALVES = (ShiftType.MORNING, ShiftType.EVENING)


class ColumnKind(str, Enum):
    """Shift-position classification derived from a column header."""
    H24 = "24h"
    H16 = "16h"
    H8 = "8h"
    SPLIT = "split"
    UNKNOWN = "unknown"


class ErrorType(str, Enum):
    DUPLICATE = "duplicate"
    OVERLAP = "overlap"
    FORMAT = "format"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


# ---------------------------------------------------------------------------
# Shift intervals
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ShiftInterval:
    doctor_name: str
    day: int
    shift_type: ShiftType
    column: int
    hours: int
    start_offset: float
    end_offset: float
    region: str = ""

    def __post_init__(self) -> None:
        if self.end_offset <= self.start_offset:
            raise ValueError(
                f"Shift for {self.doctor_name!r} on day {self.day} ends before it starts "
                f"({self.start_offset} → {self.end_offset})"
            )

    @classmethod
    def create(
        cls,
        doctor_name: str,
        day: int,
        shift_type: ShiftType,
        column: int,
        region: str = "",
    ) -> "ShiftInterval":
        """Build an interval with hours and bounds taken from the shift catalog."""
        from shiftcheck.schedule_config import SHIFT_DEFINITIONS

        definition = SHIFT_DEFINITIONS[ShiftType(shift_type)]
        start = (day - 1) * 24 + definition["start_hour"]
        return cls(
            doctor_name=doctor_name.strip().lower(),
            day=day,
            shift_type=ShiftType(shift_type),
            column=column,
            hours=definition["hours"],
            start_offset=start,
            end_offset=start + definition["hours"],
            region=region,
        )

    @property
    def record_key(self) -> Tuple[str, int, int]:
        """Doctor, day and source column: identifies one recorded cell."""
        return (self.doctor_name, self.day, self.column)

    @property
    def start_datetime(self) -> datetime:
        from shiftcheck.schedule_config import ROSTER_EPOCH
        return ROSTER_EPOCH + timedelta(hours=self.start_offset)

    @property
    def end_datetime(self) -> datetime:
        from shiftcheck.schedule_config import ROSTER_EPOCH
        return ROSTER_EPOCH + timedelta(hours=self.end_offset)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "doctorName": self.doctor_name,
            "day": self.day,
            "shiftType": self.shift_type.value,
            "column": self.column,
            "hours": self.hours,
            "startDateTime": self.start_datetime.isoformat(),
            "endDateTime": self.end_datetime.isoformat(),
            "region": self.region,
        }


@dataclass
class DayEntry:
    day: int
    shifts: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"day": self.day, "shifts": list(self.shifts)}


@dataclass
class ShiftData:
    month: str
    entries: List[DayEntry] = field(default_factory=list)
    all_shifts: List[ShiftInterval] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "entries": [e.to_dict() for e in self.entries],
            "allShifts": [s.to_dict() for s in self.all_shifts],
        }


# ---------------------------------------------------------------------------
# Validation results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationError:
    type: ErrorType
    message: str
    day: Optional[int] = None
    doctor: Optional[str] = None
    severity: Severity = Severity.ERROR

    @property
    def key(self) -> Tuple[str, Optional[int], Optional[str], str]:
        return (self.type.value, self.day, self.doctor, self.message)

    def __str__(self) -> str:
        parts = [f"[{self.severity.value.upper()}] {self.type.value}"]
        if self.day is not None:
            parts.append(f"day={self.day}")
        if self.doctor:
            parts.append(f"doctor={self.doctor}")
        parts.append(f"→ {self.message}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "message": self.message,
            "day": self.day,
            "doctor": self.doctor,
            "severity": self.severity.value,
        }


# ---------------------------------------------------------------------------
# Derived reductions
# ---------------------------------------------------------------------------

@dataclass
class DoctorStatistics:
    name: str
    total_days: int = 0
    total_hours: int = 0
    shifts_24h: int = 0
    shifts_16h: int = 0
    shifts_12h: int = 0
    shifts_8h: int = 0
    days_list: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "totalDays": self.total_days,
            "totalHours": self.total_hours,
            "shifts24h": self.shifts_24h,
            "shifts16h": self.shifts_16h,
            "shifts12h": self.shifts_12h,
            "shifts8h": self.shifts_8h,
            "daysList": sorted(self.days_list),
        }


@dataclass
class RosterSummary:
    month: str
    total_doctors: int
    total_shifts: int
    total_hours: int
    average_hours: float
    shift_type_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "totalDoctors": self.total_doctors,
            "totalShifts": self.total_shifts,
            "totalHours": self.total_hours,
            "averageHours": self.average_hours,
            "shiftTypeCounts": dict(self.shift_type_counts),
        }


@dataclass
class SwapSuggestion:
    problem_doctor: str
    problem_day: int
    candidate_doctor: str
    candidate_day: int
    problem_shifts: List[ShiftInterval]
    candidate_shifts: List[ShiftInterval]
    total_hours: int
    reasoning: str
    conflicts: List[str] = field(default_factory=list)

    @property
    def recommended(self) -> bool:
        return not self.conflicts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "problemDoctor": self.problem_doctor,
            "problemDay": self.problem_day,
            "candidateDoctor": self.candidate_doctor,
            "candidateDay": self.candidate_day,
            "problemShifts": [s.to_dict() for s in self.problem_shifts],
            "candidateShifts": [s.to_dict() for s in self.candidate_shifts],
            "totalHours": self.total_hours,
            "reasoning": self.reasoning,
            "conflicts": list(self.conflicts),
            "recommended": self.recommended,
        }

"""
metrics.py — Statistics Aggregator for parsed rosters

Pure reductions over the interval list:
  - reduce_statistics: per-doctor totals in first-appearance order
  - aggregate:         same, sorted for presentation (total hours desc)
  - summarize:         roster-wide totals and shift-type distribution
  - daily_overview:    compact per-day label per doctor (24h/16h/Full/AM/PM/8h)
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from shiftcheck.models import DoctorStatistics, RosterSummary, ShiftInterval, ShiftType
from shiftcheck.schedule_config import DAY_LABEL_PRECEDENCE, UNKNOWN_MONTH

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = (
    "name", "total_days", "total_hours",
    "shifts_24h", "shifts_16h", "shifts_12h", "shifts_8h",
)

_TYPE_COUNTER = {
    ShiftType.H24:     "shifts_24h",
    ShiftType.H16:     "shifts_16h",
    ShiftType.MORNING: "shifts_12h",
    ShiftType.EVENING: "shifts_12h",
    ShiftType.H8:      "shifts_8h",
}


def reduce_statistics(all_shifts: Sequence[ShiftInterval]) -> Dict[str, DoctorStatistics]:
    """Raw per-doctor reduction, keyed by doctor name in first-appearance order."""
    stats: Dict[str, DoctorStatistics] = {}
    for shift in all_shifts or []:
        entry = stats.get(shift.doctor_name)
        if entry is None:
            entry = stats[shift.doctor_name] = DoctorStatistics(name=shift.doctor_name)

        if shift.day not in entry.days_list:
            entry.days_list.append(shift.day)
            entry.total_days += 1
        entry.total_hours += shift.hours

        counter = _TYPE_COUNTER[shift.shift_type]
        setattr(entry, counter, getattr(entry, counter) + 1)
    logger.debug(f"Reduced statistics for {len(stats)} doctors")
    return stats


def sort_statistics(
    statistics: Sequence[DoctorStatistics],
    key: str = "total_hours",
    descending: bool = True,
) -> List[DoctorStatistics]:
    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort statistics by {key!r}; choose from {SORTABLE_FIELDS}")
    return sorted(statistics, key=lambda s: getattr(s, key), reverse=descending)


def aggregate(
    all_shifts: Sequence[ShiftInterval],
    sort_by: Optional[str] = "total_hours",
    descending: bool = True,
) -> List[DoctorStatistics]:
    """
    One DoctorStatistics per distinct doctor.

    sort_by=None keeps the raw first-appearance order so callers can resort
    by any field with sort_statistics() without recomputing.
    """
    stats = list(reduce_statistics(all_shifts).values())
    if sort_by is None:
        return stats
    return sort_statistics(stats, key=sort_by, descending=descending)


def summarize(
    all_shifts: Sequence[ShiftInterval],
    month: str = UNKNOWN_MONTH,
    statistics: Optional[Sequence[DoctorStatistics]] = None,
) -> RosterSummary:
    all_shifts = list(all_shifts or [])
    if statistics is None:
        statistics = aggregate(all_shifts, sort_by=None)

    total_doctors = len(statistics)
    total_hours = sum(s.total_hours for s in statistics)
    average = round(total_hours / total_doctors, 1) if total_doctors else 0.0

    return RosterSummary(
        month=month,
        total_doctors=total_doctors,
        total_shifts=len(all_shifts),
        total_hours=total_hours,
        average_hours=average,
        shift_type_counts={
            "24h": sum(s.shifts_24h for s in statistics),
            "16h": sum(s.shifts_16h for s in statistics),
            "12h": sum(s.shifts_12h for s in statistics),
            "8h":  sum(s.shifts_8h for s in statistics),
        },
    )


def day_label(shift_types: Sequence[ShiftType]) -> str:
    present = set(shift_types)
    for required, label in DAY_LABEL_PRECEDENCE:
        if present.issuperset(required):
            return label
    return ""


def daily_overview(all_shifts: Sequence[ShiftInterval]) -> Dict[int, Dict[str, str]]:
    """
    {day: {doctor: label}} for every day 1..max day (empty dict for idle days).
    """
    by_day: Dict[int, Dict[str, List[ShiftType]]] = defaultdict(lambda: defaultdict(list))
    for shift in all_shifts or []:
        by_day[shift.day][shift.doctor_name].append(shift.shift_type)

    if not by_day:
        return {}

    overview = {}
    for day in range(1, max(by_day) + 1):
        doctors = by_day.get(day, {})
        overview[day] = {doctor: day_label(types) for doctor, types in doctors.items()}
    return overview

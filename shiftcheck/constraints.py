"""
constraints.py — Validation Engine for Doctor Shift Rosters

Rule families (all error severity):
  - DUPLICATE: doctor listed more than once on a day with a repeated shift
               type, or with a 24h shift next to anything else
               (morning + evening is the legitimate split case)
  - OVERLAP:   same-day pair where either side is 24h, or both are the same
               half of a split slot (morning+morning / evening+evening)
  - REST:      consecutive intervals of one doctor, in start-time order, with
               less than MIN_REST_HOURS between end and next start
               (reported with type `overlap`)

Every family is computed independently, then merged and deduplicated by
(type, day, doctor, message). Checks are pure: same input, same output.

Usage:
  errors = validate(shift_data.all_shifts)
  checker = ShiftValidator(min_rest_hours=10)
  errors = checker.check_all(all_shifts)
"""

import logging
from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple

from shiftcheck.models import (
    SPLIT_HALVES,
    ErrorType,
    Severity,
    ShiftInterval,
    ShiftType,
    ValidationError,
)
from shiftcheck.schedule_config import MIN_REST_HOURS

logger = logging.getLogger(__name__)

RestViolation = Tuple[ShiftInterval, ShiftInterval, float]


# ---------------------------------------------------------------------------
# Interval predicates
# ---------------------------------------------------------------------------

def shifts_overlap(a: ShiftInterval, b: ShiftInterval) -> bool:
    """Same-day incompatibility: either is 24h, or both are the same split half."""
    if a.shift_type is ShiftType.H24 or b.shift_type is ShiftType.H24:
        return True
    return a.shift_type is b.shift_type and a.shift_type in SPLIT_HALVES


def rest_gap_hours(current: ShiftInterval, following: ShiftInterval) -> float:
    return following.start_offset - current.end_offset


def sort_by_start(shifts: Iterable[ShiftInterval]) -> List[ShiftInterval]:
    return sorted(shifts, key=lambda s: (s.start_offset, s.end_offset, s.day, s.column))


def rest_violations(
    shifts: Iterable[ShiftInterval],
    min_rest_hours: float = MIN_REST_HOURS,
) -> List[RestViolation]:
    """
    Rest check over one doctor's timeline.

    Pairs are adjacent in start-time order, so empty days in between are
    skipped naturally. Returns [(current, following, rest_hours), ...].
    """
    ordered = sort_by_start(shifts)
    violations = []
    for current, following in zip(ordered, ordered[1:]):
        rest = rest_gap_hours(current, following)
        if rest < min_rest_hours:
            violations.append((current, following, rest))
    return violations


def group_by_day_doctor(all_shifts: Iterable[ShiftInterval]) -> Dict[Tuple[int, str], List[ShiftInterval]]:
    groups: Dict[Tuple[int, str], List[ShiftInterval]] = defaultdict(list)
    for shift in all_shifts:
        groups[(shift.day, shift.doctor_name)].append(shift)
    return dict(groups)


def group_by_doctor(all_shifts: Iterable[ShiftInterval]) -> Dict[str, List[ShiftInterval]]:
    groups: Dict[str, List[ShiftInterval]] = defaultdict(list)
    for shift in all_shifts:
        groups[shift.doctor_name].append(shift)
    return dict(groups)


def deduplicate(errors: Iterable[ValidationError]) -> List[ValidationError]:
    """Drop repeats of (type, day, doctor, message), keeping first occurrence order."""
    seen = set()
    unique = []
    for error in errors:
        if error.key in seen:
            continue
        seen.add(error.key)
        unique.append(error)
    return unique


class ShiftValidator:
    """
    Validates a full interval list against the fixed rule catalog.

    Accepts the parser output format: [ShiftInterval, ...]
    """

    def __init__(self, min_rest_hours: float = MIN_REST_HOURS):
        self.min_rest_hours = min_rest_hours

    # -----------------------------------------------------------------------
    # Duplicate assignment
    # -----------------------------------------------------------------------

    def check_duplicates(self, all_shifts: Sequence[ShiftInterval]) -> List[ValidationError]:
        """A doctor on a day more than once with a repeated type or a 24h shift."""
        errors = []
        for (day, doctor), shifts in sorted(group_by_day_doctor(all_shifts).items()):
            if len(shifts) < 2:
                continue
            type_counts = Counter(s.shift_type for s in shifts)
            repeated = any(n > 1 for n in type_counts.values())
            if repeated or ShiftType.H24 in type_counts:
                errors.append(ValidationError(
                    type=ErrorType.DUPLICATE,
                    message=f'Doctor "{doctor}" appears {len(shifts)} times on day {day}',
                    day=day,
                    doctor=doctor,
                    severity=Severity.ERROR,
                ))
        return errors

    # -----------------------------------------------------------------------
    # Same-day overlap
    # -----------------------------------------------------------------------

    def check_same_day_overlap(self, all_shifts: Sequence[ShiftInterval]) -> List[ValidationError]:
        """One error per doctor/day naming the first incompatible pair found."""
        errors = []
        for (day, doctor), shifts in sorted(group_by_day_doctor(all_shifts).items()):
            pair = next(
                (
                    (a, b)
                    for i, a in enumerate(shifts)
                    for b in shifts[i + 1:]
                    if shifts_overlap(a, b)
                ),
                None,
            )
            if pair is None:
                continue
            a, b = pair
            errors.append(ValidationError(
                type=ErrorType.OVERLAP,
                message=(
                    f'Doctor "{doctor}" has overlapping shifts on day {day} '
                    f"({a.shift_type.value} and {b.shift_type.value})"
                ),
                day=day,
                doctor=doctor,
                severity=Severity.ERROR,
            ))
        return errors

    # -----------------------------------------------------------------------
    # Insufficient rest
    # -----------------------------------------------------------------------

    def check_rest(self, all_shifts: Sequence[ShiftInterval]) -> List[ValidationError]:
        """Consecutive intervals per doctor closer than min_rest_hours."""
        errors = []
        for doctor, shifts in sorted(group_by_doctor(all_shifts).items()):
            for current, following, rest in rest_violations(shifts, self.min_rest_hours):
                errors.append(ValidationError(
                    type=ErrorType.OVERLAP,
                    message=(
                        f'Doctor "{doctor}" has only {rest:.1f}h rest between the '
                        f"{current.shift_type.value} shift on day {current.day} and the "
                        f"{following.shift_type.value} shift on day {following.day} "
                        f"(minimum {self.min_rest_hours:g}h)"
                    ),
                    day=current.day,
                    doctor=doctor,
                    severity=Severity.ERROR,
                ))
        return errors

    # -----------------------------------------------------------------------
    # Run all checks
    # -----------------------------------------------------------------------

    def check_all(self, all_shifts: Sequence[ShiftInterval]) -> List[ValidationError]:
        """
        Run every rule family and merge the results.

        Returns:
            Deduplicated errors: duplicates, then overlaps, then rest.
        """
        all_shifts = list(all_shifts or [])
        errors: List[ValidationError] = []
        errors.extend(self.check_duplicates(all_shifts))
        errors.extend(self.check_same_day_overlap(all_shifts))
        errors.extend(self.check_rest(all_shifts))
        unique = deduplicate(errors)
        logger.info(f"Validated {len(all_shifts)} shift intervals: {len(unique)} errors")
        return unique


def validate(
    all_shifts: Sequence[ShiftInterval],
    min_rest_hours: float = MIN_REST_HOURS,
) -> List[ValidationError]:
    return ShiftValidator(min_rest_hours=min_rest_hours).check_all(all_shifts)

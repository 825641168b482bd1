"""
swaps.py — Swap Recommender for conflicting roster days

Given a problem doctor/day, search every other (doctor, day) pair for an
exchange of whole days:

  1. Problem shifts = the doctor's intervals on the problem day
  2. Candidates = (days ≠ problem day) × (doctors ≠ problem doctor),
     optionally narrowed by day_filter / doctor_filter
  3. Reject unless the candidate's hours equal the problem hours exactly
  4. Conflicts (strings) from three checks:
       a. problem doctor gains the candidate shifts next to own same-day shifts
       b. candidate doctor gains the problem shifts next to own same-day shifts
       c. both doctors' timelines after the exchange, rest < MIN_REST_HOURS
  5. Keep candidates with ≤ max_conflicts, stable-sort by conflict count,
     cap at limit

No feasible candidate is a normal result (empty list): the day needs manual
coordination.

Usage:
  suggestions = suggest_swaps(all_shifts, "ayşe", 6)
  by_error = suggest_swaps_for_errors(all_shifts, errors)
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from shiftcheck.constraints import rest_violations, shifts_overlap
from shiftcheck.models import ShiftInterval, SwapSuggestion, ValidationError
from shiftcheck.parser import clean_name
from shiftcheck.schedule_config import (
    ERROR_SWAP_RESULT_LIMIT,
    MAX_SWAP_CONFLICTS,
    MIN_REST_HOURS,
    SWAP_RESULT_LIMIT,
)

logger = logging.getLogger(__name__)

DoctorDay = Tuple[str, int]


def _normalize_name(name: str) -> str:
    return clean_name(name or "")


def _index_by_doctor_day(all_shifts: Iterable[ShiftInterval]) -> Dict[DoctorDay, List[ShiftInterval]]:
    index: Dict[DoctorDay, List[ShiftInterval]] = defaultdict(list)
    for shift in all_shifts:
        index[(shift.doctor_name, shift.day)].append(shift)
    return dict(index)


def shift_labels(shifts: Sequence[ShiftInterval]) -> str:
    return "+".join(s.shift_type.value for s in shifts)


def _same_day_conflicts(
    doctor: str,
    day: int,
    incoming: Sequence[ShiftInterval],
    existing: Sequence[ShiftInterval],
) -> List[str]:
    conflicts = []
    for new in incoming:
        for old in existing:
            if shifts_overlap(new, old):
                conflicts.append(
                    f"{doctor} already has a {old.shift_type.value} shift on day {day} "
                    f"that clashes with the incoming {new.shift_type.value} shift"
                )
    return conflicts


def _rest_conflicts(
    doctor: str,
    kept: Sequence[ShiftInterval],
    incoming: Sequence[ShiftInterval],
    min_rest_hours: float,
) -> List[str]:
    timeline = list(kept) + list(incoming)
    return [
        f"{doctor} would rest only {rest:.1f}h between day {current.day} "
        f"({current.shift_type.value}) and day {following.day} ({following.shift_type.value})"
        for current, following, rest in rest_violations(timeline, min_rest_hours)
    ]


def _reasoning(
    problem_doctor: str,
    problem_day: int,
    problem_shifts: Sequence[ShiftInterval],
    candidate_doctor: str,
    candidate_day: int,
    candidate_shifts: Sequence[ShiftInterval],
    total_hours: int,
) -> str:
    return (
        f"{candidate_doctor} takes {problem_doctor}'s {shift_labels(problem_shifts)} on day {problem_day} "
        f"and {problem_doctor} takes {candidate_doctor}'s {shift_labels(candidate_shifts)} "
        f"on day {candidate_day}; both keep {total_hours}h of duty."
    )


# ---------------------------------------------------------------------------
# Candidate search
# ---------------------------------------------------------------------------

def evaluate_swap(
    index: Dict[DoctorDay, List[ShiftInterval]],
    doctor_shifts: Dict[str, List[ShiftInterval]],
    problem_doctor: str,
    problem_day: int,
    candidate_doctor: str,
    candidate_day: int,
    min_rest_hours: float = MIN_REST_HOURS,
) -> List[str]:
    """Conflict descriptions for exchanging the two doctor/day sets."""
    problem_shifts = index.get((problem_doctor, problem_day), [])
    candidate_shifts = index.get((candidate_doctor, candidate_day), [])

    conflicts: List[str] = []
    conflicts.extend(_same_day_conflicts(
        problem_doctor, candidate_day, candidate_shifts,
        index.get((problem_doctor, candidate_day), []),
    ))
    conflicts.extend(_same_day_conflicts(
        candidate_doctor, problem_day, problem_shifts,
        index.get((candidate_doctor, problem_day), []),
    ))

    problem_kept = [s for s in doctor_shifts.get(problem_doctor, []) if s.day != problem_day]
    candidate_kept = [s for s in doctor_shifts.get(candidate_doctor, []) if s.day != candidate_day]
    conflicts.extend(_rest_conflicts(problem_doctor, problem_kept, candidate_shifts, min_rest_hours))
    conflicts.extend(_rest_conflicts(candidate_doctor, candidate_kept, problem_shifts, min_rest_hours))
    return conflicts


def suggest_swaps(
    all_shifts: Sequence[ShiftInterval],
    problem_doctor: str,
    problem_day: int,
    day_filter: Optional[Set[int]] = None,
    doctor_filter: Optional[Set[str]] = None,
    max_conflicts: int = MAX_SWAP_CONFLICTS,
    limit: int = SWAP_RESULT_LIMIT,
    min_rest_hours: float = MIN_REST_HOURS,
) -> List[SwapSuggestion]:
    """
    Rank feasible day exchanges for one problem doctor/day.

    Args:
        all_shifts:     Full interval list (not modified)
        problem_doctor: Doctor name (case-insensitive)
        problem_day:    Day whose intervals should move
        day_filter:     Restrict candidate days (None = all)
        doctor_filter:  Restrict candidate doctors (None = all)
        max_conflicts:  Candidates with more conflicts are discarded
        limit:          Maximum suggestions returned

    Returns:
        Suggestions ordered by conflict count, discovery order within ties.
    """
    all_shifts = list(all_shifts or [])
    problem_doctor = _normalize_name(problem_doctor)
    index = _index_by_doctor_day(all_shifts)

    problem_shifts = index.get((problem_doctor, problem_day), [])
    if not problem_shifts:
        logger.info(f"No shifts for {problem_doctor!r} on day {problem_day}; nothing to swap")
        return []
    problem_hours = sum(s.hours for s in problem_shifts)

    doctor_shifts: Dict[str, List[ShiftInterval]] = defaultdict(list)
    for shift in all_shifts:
        doctor_shifts[shift.doctor_name].append(shift)

    allowed_doctors = {_normalize_name(d) for d in doctor_filter} if doctor_filter is not None else None
    days = sorted(
        d for d in {s.day for s in all_shifts}
        if d != problem_day and (day_filter is None or d in day_filter)
    )
    doctors = sorted(
        d for d in doctor_shifts
        if d != problem_doctor and (allowed_doctors is None or d in allowed_doctors)
    )

    suggestions: List[SwapSuggestion] = []
    evaluated = 0
    for day in days:
        for doctor in doctors:
            candidate_shifts = index.get((doctor, day), [])
            if not candidate_shifts:
                continue
            total = sum(s.hours for s in candidate_shifts)
            if total != problem_hours:
                continue
            evaluated += 1

            conflicts = evaluate_swap(
                index, doctor_shifts, problem_doctor, problem_day, doctor, day,
                min_rest_hours=min_rest_hours,
            )
            if len(conflicts) > max_conflicts:
                continue

            suggestions.append(SwapSuggestion(
                problem_doctor=problem_doctor,
                problem_day=problem_day,
                candidate_doctor=doctor,
                candidate_day=day,
                problem_shifts=list(problem_shifts),
                candidate_shifts=list(candidate_shifts),
                total_hours=problem_hours,
                reasoning=_reasoning(
                    problem_doctor, problem_day, problem_shifts,
                    doctor, day, candidate_shifts, problem_hours,
                ),
                conflicts=conflicts,
            ))

    suggestions.sort(key=lambda s: len(s.conflicts))
    logger.info(
        f"Swap search for {problem_doctor} day {problem_day} ({problem_hours}h): "
        f"{evaluated} equal-hour candidates, {len(suggestions)} within {max_conflicts} conflicts"
    )
    return suggestions[:limit]


def suggest_swaps_for_errors(
    all_shifts: Sequence[ShiftInterval],
    errors: Iterable[ValidationError],
    limit: int = ERROR_SWAP_RESULT_LIMIT,
    max_conflicts: int = MAX_SWAP_CONFLICTS,
    min_rest_hours: float = MIN_REST_HOURS,
) -> Dict[DoctorDay, List[SwapSuggestion]]:
    """
    Run suggest_swaps once per distinct (doctor, day) named by an error.

    Errors without a doctor or day (format errors) are skipped.
    """
    results: Dict[DoctorDay, List[SwapSuggestion]] = {}
    for error in errors:
        if not error.doctor or error.day is None:
            continue
        key = (error.doctor, error.day)
        if key in results:
            continue
        results[key] = suggest_swaps(
            all_shifts, error.doctor, error.day,
            max_conflicts=max_conflicts, limit=limit, min_rest_hours=min_rest_hours,
        )
    return results

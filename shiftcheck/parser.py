"""
parser.py — Roster Parser: string grid → typed shift intervals

Input grid layout:
  row 0:     [month, header_1, header_2, ...]     (headers name the positions)
  rows 1..:  [day, cell_1, cell_2, ...]           (cells hold doctor names)
  trailer:   first row whose day cell is empty / non-numeric ends the data

Column headers and cell text are classified by two ordered decision tables
(COLUMN_CLASSIFICATION_RULES in schedule_config, CELL_RULES below). The first
rule that matches wins. A daytime marker or an 8h column comes right after the
"/" split; below that an explicit 16/24 suffix beats a 16h or 24h column, so
"ahmet16" in a 24h column yields a 16h interval while an 8h column keeps 8h.

Bad rows and cells are skipped, never raised. Only an unreadable file is an
error, surfaced by load_shift_data() as a `format` ValidationError.

Usage:
  data = parse_roster(rows)
  data, errors = load_shift_data("roster.xlsx")
"""

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from shiftcheck.config import RosterFormatError, load_grid
from shiftcheck.models import (
    ColumnKind,
    DayEntry,
    ErrorType,
    Severity,
    ShiftData,
    ShiftInterval,
    ShiftType,
    ValidationError,
)
from shiftcheck.schedule_config import (
    COLUMN_CLASSIFICATION_RULES,
    DAYTIME_PATTERN,
    HOUR_SUFFIX_PATTERN,
    NAME_DECORATION_CHARS,
    SPLIT_SEPARATOR,
    UNKNOWN_MONTH,
)

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# (raw name, shift type) pairs produced by one cell
CellShifts = List[Tuple[str, ShiftType]]


@dataclass(frozen=True)
class ColumnSpec:
    index: int
    kind: ColumnKind
    region: str


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def _fold(text: str) -> str:
    """Lower-case; drops the combining dot Python leaves after lowering 'İ'."""
    return text.lower().replace("i\u0307", "i")


def _cell(row: Sequence, index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index]).strip()


def _is_numeric(text: str) -> bool:
    try:
        return math.isfinite(float(text))
    except ValueError:
        return False


def parse_integer(text: str) -> Optional[int]:
    """Leading integer of text ("12", "12.0", " 7 ") or None."""
    m = _LEADING_INT.match(text or "")
    return int(m.group(1)) if m else None


def clean_name(raw: str) -> str:
    return _fold(raw.strip(NAME_DECORATION_CHARS).strip())


# ---------------------------------------------------------------------------
# Column classification
# ---------------------------------------------------------------------------

def classify_column(header: str) -> ColumnKind:
    """Classify a header by substring; first matching rule wins."""
    folded = _fold(header or "")
    for kind, tokens in COLUMN_CLASSIFICATION_RULES:
        if any(token in folded for token in tokens):
            return kind
    return ColumnKind.UNKNOWN


def classify_columns(header_row: Sequence) -> List[ColumnSpec]:
    """One ColumnSpec per position column (index ≥ 1) of the header row."""
    specs = []
    for idx in range(1, len(header_row)):
        header = _cell(header_row, idx)
        specs.append(ColumnSpec(index=idx, kind=classify_column(header), region=header))
    return specs


# ---------------------------------------------------------------------------
# Cell classification: ordered decision table
# ---------------------------------------------------------------------------

def _split_rule(text: str, kind: ColumnKind) -> Optional[CellShifts]:
    if SPLIT_SEPARATOR not in text:
        return None
    parts = text.split(SPLIT_SEPARATOR)
    first = parts[0]
    second = parts[1] if len(parts) > 1 else ""
    return [(first, ShiftType.MORNING), (second, ShiftType.EVENING)]


def _daytime_marker_rule(text: str, kind: ColumnKind) -> Optional[CellShifts]:
    if not DAYTIME_PATTERN.search(text):
        return None
    return [(DAYTIME_PATTERN.sub("", text, count=1), ShiftType.H8)]


def _suffix_rule(hours: str, shift_type: ShiftType) -> Callable[[str, ColumnKind], Optional[CellShifts]]:
    def rule(text: str, kind: ColumnKind) -> Optional[CellShifts]:
        m = HOUR_SUFFIX_PATTERN.match(text)
        if not m or m.group("hours") != hours:
            return None
        return [(m.group("name"), shift_type)]
    return rule


def _column_rule(column_kind: ColumnKind, shift_type: ShiftType) -> Callable[[str, ColumnKind], Optional[CellShifts]]:
    def rule(text: str, kind: ColumnKind) -> Optional[CellShifts]:
        if kind is not column_kind:
            return None
        # an 8h column outranks hour suffixes, which still come off the name
        m = HOUR_SUFFIX_PATTERN.match(text)
        return [(m.group("name") if m else text, shift_type)]
    return rule


def _default_rule(text: str, kind: ColumnKind) -> Optional[CellShifts]:
    return [(text, ShiftType.H24)]


CELL_RULES: List[Tuple[str, Callable[[str, ColumnKind], Optional[CellShifts]]]] = [
    ("explicit_split",    _split_rule),
    ("explicit_daytime",  _daytime_marker_rule),
    ("column_8h",         _column_rule(ColumnKind.H8, ShiftType.H8)),
    ("suffix_16",         _suffix_rule("16", ShiftType.H16)),
    ("suffix_24",         _suffix_rule("24", ShiftType.H24)),
    ("column_16h",        _column_rule(ColumnKind.H16, ShiftType.H16)),
    ("column_24h",        _column_rule(ColumnKind.H24, ShiftType.H24)),
    ("default_24h",       _default_rule),
]


def classify_cell(text: str, kind: ColumnKind = ColumnKind.UNKNOWN) -> Tuple[str, List[Tuple[str, ShiftType]]]:
    """
    Run the cell decision table.

    Returns:
        (rule_name, [(clean_name, shift_type), ...]) with empty names dropped.
    """
    text = (text or "").strip()
    if not text:
        return "empty", []
    for rule_name, rule in CELL_RULES:
        matched = rule(text, kind)
        if matched is None:
            continue
        shifts = [(clean_name(name), shift_type) for name, shift_type in matched]
        return rule_name, [(name, st) for name, st in shifts if name]
    return "default_24h", []  # unreachable: default rule always matches


# ---------------------------------------------------------------------------
# Grid parsing
# ---------------------------------------------------------------------------

def find_data_end(rows: Sequence[Sequence]) -> int:
    """Index of the first row after the header whose day cell is empty or non-numeric."""
    for i in range(1, len(rows)):
        first = _cell(rows[i], 0)
        if not first or not _is_numeric(first):
            return i
    return len(rows)


def parse_roster(rows: Sequence[Sequence[str]]) -> ShiftData:
    """
    Convert a raw roster grid into ShiftData.

    Never raises for bad rows or cells: non-numeric days, days < 1 and empty
    cells are skipped.
    """
    rows = list(rows or [])
    month = _cell(rows[0], 0) if rows else ""
    month = month or UNKNOWN_MONTH

    columns = {spec.index: spec for spec in classify_columns(rows[0])} if rows else {}
    data_end = find_data_end(rows)
    if data_end < len(rows):
        logger.debug(f"Ignoring {len(rows) - data_end} trailer rows from row {data_end}")

    entries: List[DayEntry] = []
    all_shifts: List[ShiftInterval] = []

    for i in range(1, data_end):
        row = rows[i]
        day = parse_integer(_cell(row, 0))
        if day is None or day < 1:
            logger.debug(f"Skipping row {i}: invalid day {_cell(row, 0)!r}")
            continue

        raw_cells: List[str] = []
        for col in range(1, len(row)):
            text = _cell(row, col)
            if not text:
                continue
            raw_cells.append(text)

            spec = columns.get(col) or ColumnSpec(index=col, kind=ColumnKind.UNKNOWN, region="")
            rule_name, shifts = classify_cell(text, spec.kind)
            logger.debug(f"day {day} col {col} {text!r} → {rule_name} {shifts}")
            for name, shift_type in shifts:
                all_shifts.append(ShiftInterval.create(
                    doctor_name=name,
                    day=day,
                    shift_type=shift_type,
                    column=col,
                    region=spec.region,
                ))

        entries.append(DayEntry(day=day, shifts=raw_cells))

    logger.info(
        f"Parsed roster {month!r}: {len(entries)} days, {len(all_shifts)} shift intervals"
    )
    return ShiftData(month=month, entries=entries, all_shifts=all_shifts)


# ---------------------------------------------------------------------------
# File boundary
# ---------------------------------------------------------------------------

def load_shift_data(path: Union[str, Path]) -> Tuple[Optional[ShiftData], List[ValidationError]]:
    """
    Load and parse a roster file.

    Returns:
        (shift_data, [])                   on success
        (None, [format ValidationError])   when the file cannot be read
    """
    try:
        rows = load_grid(path)
    except RosterFormatError as e:
        logger.error(f"Could not load roster {path}: {e}")
        return None, [ValidationError(
            type=ErrorType.FORMAT,
            message=str(e),
            severity=Severity.ERROR,
        )]
    return parse_roster(rows), []

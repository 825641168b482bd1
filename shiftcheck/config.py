"""
config.py — Grid Source & Settings for Roster Checks

Turns an uploaded roster file into the plain string grid the parser
consumes, and loads optional tuning overrides.

  - CSV:            stdlib csv (delimiter sniffed: comma, semicolon, tab)
  - XLSX/XLS/ODS:   pandas.read_excel, first sheet only
  - Settings JSON:  overrides for rest threshold and swap search limits

Unreadable input raises RosterFormatError; parser.load_shift_data() turns
that into a single `format` ValidationError for the caller.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from shiftcheck.schedule_config import (
    COLUMN_CLASSIFICATION_RULES,
    ERROR_SWAP_RESULT_LIMIT,
    MAX_SWAP_CONFLICTS,
    MIN_REST_HOURS,
    SHIFT_DEFINITIONS,
    SWAP_RESULT_LIMIT,
)

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = {".csv"}
SHEET_EXTENSIONS = {".xlsx", ".xls", ".ods"}
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS | SHEET_EXTENSIONS

# Windows Turkish is the usual fallback for spreadsheet-exported CSVs
CSV_ENCODINGS = ("utf-8-sig", "cp1254")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "min_rest_hours":          MIN_REST_HOURS,
    "max_swap_conflicts":      MAX_SWAP_CONFLICTS,
    "swap_result_limit":       SWAP_RESULT_LIMIT,
    "error_swap_result_limit": ERROR_SWAP_RESULT_LIMIT,
}


class RosterFormatError(ValueError):
    """Raised when a roster file cannot be turned into a grid of strings."""


Grid = List[List[str]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def _read_csv_rows(path: Path) -> Grid:
    raw = path.read_bytes()
    text = None
    for encoding in CSV_ENCODINGS:
        try:
            text = raw.decode(encoding)
            break
        except UnicodeDecodeError:
            continue
    if text is None:
        raise RosterFormatError(f"CSV parsing error: cannot decode {path.name}")

    if not text.strip():
        return []

    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel

    try:
        return [list(row) for row in csv.reader(text.splitlines(), dialect)]
    except csv.Error as e:
        raise RosterFormatError(f"CSV parsing error: {e}")


def _read_sheet_rows(path: Path) -> Grid:
    import pandas as pd

    try:
        df = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
    except Exception as e:
        raise RosterFormatError(f"Error parsing file: {e}")

    return [[_cell_text(v) for v in row] for row in df.itertuples(index=False, name=None)]


# ---------------------------------------------------------------------------
# Grid loader
# ---------------------------------------------------------------------------

def load_grid(path: Union[str, Path]) -> Grid:
    """
    Read a roster file into rows of cell strings.

    Returns:
        [[cell, ...], ...]  (ragged rows allowed, missing cells as "")

    Raises:
        RosterFormatError: missing file, unsupported extension, or the
                           bytes could not be decoded into a grid.
    """
    path = Path(path)
    ext = path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise RosterFormatError(
            "Unsupported file format. Please upload CSV, XLSX, XLS, or ODS files."
        )
    if not path.exists():
        raise RosterFormatError(f"Roster file not found: {path}")

    if ext in CSV_EXTENSIONS:
        rows = _read_csv_rows(path)
    else:
        rows = _read_sheet_rows(path)

    logger.info(f"Loaded {len(rows)} rows from {path}")
    return rows


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

def load_settings(settings_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load tuning overrides from JSON, falling back to DEFAULT_SETTINGS.

    Unknown keys are ignored with a warning. Returns a new dict.
    """
    settings = dict(DEFAULT_SETTINGS)
    if settings_path is None:
        return settings

    path = Path(settings_path)
    if not path.exists():
        logger.warning(f"Settings file not found: {path}. Using defaults.")
        return settings

    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Settings file {path} is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must hold a JSON object, got {type(data).__name__}")

    for key, value in data.items():
        if key not in DEFAULT_SETTINGS:
            logger.warning(f"Ignoring unknown setting {key!r} in {path}")
            continue
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ValueError(f"Setting {key!r} must be a number, got {value!r}")
        settings[key] = value

    logger.info(f"Settings loaded from {path}: {settings}")
    return settings


def get_config() -> Dict[str, Any]:
    return {
        "shift_definitions":      {k.value: dict(v) for k, v in SHIFT_DEFINITIONS.items()},
        "column_rules":           [(kind.value, list(tokens)) for kind, tokens in COLUMN_CLASSIFICATION_RULES],
        "settings":               dict(DEFAULT_SETTINGS),
        "supported_extensions":   sorted(SUPPORTED_EXTENSIONS),
    }

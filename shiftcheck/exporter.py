"""
exporter.py — Export Layer for Roster Check Results

Outputs:
  - Excel (.xlsx): Statistics, Schedule and Summary sheets
  - CSV: flat interval list (doctor, day, type, region, hours, start, end)
  - Validation report (.txt): errors plus any swap suggestions

Clock times are materialized from each interval's start/end datetime; only
the hour-of-day is shown since the roster month carries no calendar year.

Usage:
  from shiftcheck.exporter import export_to_excel, export_to_csv, export_validation_report
"""

import csv
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from shiftcheck.metrics import summarize
from shiftcheck.models import (
    DoctorStatistics,
    RosterSummary,
    ShiftData,
    ShiftInterval,
    SwapSuggestion,
    ValidationError,
)

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = ["Day", "Doctor", "Shift Type", "Region", "Hours", "Start Time", "End Time"]
STATISTICS_COLUMNS = [
    "Doctor", "Total Days", "Total Hours",
    "24h Shifts", "16h Shifts", "12h Shifts", "8h Shifts", "Days Worked",
]


def _clock(shift: ShiftInterval) -> Tuple[str, str]:
    return shift.start_datetime.strftime("%H:%M"), shift.end_datetime.strftime("%H:%M")


# ---------------------------------------------------------------------------
# CSV Export
# ---------------------------------------------------------------------------

def export_to_csv(all_shifts: Sequence[ShiftInterval], output_path: Path) -> None:
    """Export every interval as one flat CSV row, ordered by day then column."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["day", "doctor", "shift_type", "column", "region", "hours", "start", "end"]
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for shift in sorted(all_shifts, key=lambda s: (s.day, s.column, s.start_offset)):
            start, end = _clock(shift)
            writer.writerow({
                "day": shift.day,
                "doctor": shift.doctor_name,
                "shift_type": shift.shift_type.value,
                "column": shift.column,
                "region": shift.region,
                "hours": shift.hours,
                "start": start,
                "end": end,
            })

    logger.info(f"CSV exported → {output_path}")


# ---------------------------------------------------------------------------
# Excel Export
# ---------------------------------------------------------------------------

def _statistics_rows(statistics: Sequence[DoctorStatistics]) -> List[Dict[str, Any]]:
    return [
        {
            "Doctor": s.name,
            "Total Days": s.total_days,
            "Total Hours": s.total_hours,
            "24h Shifts": s.shifts_24h,
            "16h Shifts": s.shifts_16h,
            "12h Shifts": s.shifts_12h,
            "8h Shifts": s.shifts_8h,
            "Days Worked": ", ".join(str(d) for d in sorted(s.days_list)),
        }
        for s in statistics
    ]


def _schedule_rows(all_shifts: Sequence[ShiftInterval]) -> List[Dict[str, Any]]:
    if not all_shifts:
        return []
    rows = []
    max_day = max(s.day for s in all_shifts)
    for day in range(1, max_day + 1):
        day_shifts = [s for s in all_shifts if s.day == day]
        if not day_shifts:
            rows.append({"Day": day, "Doctor": "No shifts", "Shift Type": "", "Region": "",
                         "Hours": "", "Start Time": "", "End Time": ""})
            continue
        for idx, shift in enumerate(day_shifts):
            start, end = _clock(shift)
            rows.append({
                "Day": day if idx == 0 else "",
                "Doctor": shift.doctor_name,
                "Shift Type": shift.shift_type.value,
                "Region": shift.region or "-",
                "Hours": shift.hours,
                "Start Time": start,
                "End Time": end,
            })
    return rows


def _summary_rows(summary: RosterSummary) -> List[Dict[str, Any]]:
    counts = summary.shift_type_counts
    return [
        {"Metric": "Total Doctors", "Value": summary.total_doctors},
        {"Metric": "Total Shifts", "Value": summary.total_shifts},
        {"Metric": "Total Hours", "Value": summary.total_hours},
        {"Metric": "Average Hours per Doctor", "Value": summary.average_hours},
        {"Metric": "24-hour Shifts", "Value": counts.get("24h", 0)},
        {"Metric": "16-hour Shifts", "Value": counts.get("16h", 0)},
        {"Metric": "12-hour Shifts", "Value": counts.get("12h", 0)},
        {"Metric": "8-hour Shifts", "Value": counts.get("8h", 0)},
    ]


def export_to_excel(
    shift_data: ShiftData,
    statistics: Sequence[DoctorStatistics],
    output_path: Path,
    summary: Optional[RosterSummary] = None,
) -> None:
    """
    Export a three-sheet workbook.

    Args:
        shift_data:  Parser output (month + intervals)
        statistics:  Per-doctor statistics, in the order to display
        output_path: .xlsx file path
        summary:     Precomputed summary (computed from statistics if None)
    """
    import pandas as pd

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if summary is None:
        summary = summarize(shift_data.all_shifts, month=shift_data.month, statistics=statistics)

    sheets = {
        "Statistics": pd.DataFrame(_statistics_rows(statistics), columns=STATISTICS_COLUMNS),
        "Schedule": pd.DataFrame(_schedule_rows(shift_data.all_shifts), columns=SCHEDULE_COLUMNS),
        "Summary": pd.DataFrame(_summary_rows(summary), columns=["Metric", "Value"]),
    }

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        for sheet_name, df in sheets.items():
            df.to_excel(writer, sheet_name=sheet_name, index=False)
            _format_sheet(writer, sheet_name)

    logger.info(f"Excel exported → {output_path} ({shift_data.month})")


def _format_sheet(writer: Any, sheet_name: str) -> None:
    """Bold header row, column widths, alternate row shading."""
    from openpyxl.styles import Alignment, Font, PatternFill

    ws = writer.sheets[sheet_name]
    header_fill = PatternFill("solid", fgColor="1F4E79")
    header_font = Font(bold=True, color="FFFFFF")

    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center")

    for col in ws.columns:
        max_len = max((len(str(c.value)) for c in col if c.value is not None), default=8)
        ws.column_dimensions[col[0].column_letter].width = min(max_len + 2, 40)

    alt = PatternFill("solid", fgColor="EBF3FB")
    for i, row in enumerate(ws.iter_rows(min_row=2), start=2):
        if i % 2 == 0:
            for cell in row:
                cell.fill = alt


# ---------------------------------------------------------------------------
# Validation report
# ---------------------------------------------------------------------------

def export_validation_report(
    errors: Sequence[ValidationError],
    output_path: Path,
    month: str = "",
    swap_suggestions: Optional[Dict[Tuple[str, int], List[SwapSuggestion]]] = None,
) -> str:
    """Write errors (and swap suggestions per problem doctor/day) as text. Returns the text."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    error_count = sum(1 for e in errors if e.severity.value == "error")
    warning_count = len(errors) - error_count
    sep = "=" * 70

    lines = [
        sep,
        f"  ROSTER VALIDATION REPORT{(' — ' + month) if month else ''}",
        sep,
        "",
        f"  Errors:   {error_count}",
        f"  Warnings: {warning_count}",
        "",
    ]
    if not errors:
        lines.append("  ✓ No conflicts or errors found in the shift schedule")
    for error in errors:
        lines.append(f"  {error}")

    if swap_suggestions:
        lines += ["", "─" * 70, "  Swap Suggestions", "─" * 70]
        for (doctor, day), suggestions in swap_suggestions.items():
            lines.append(f"  {doctor} / day {day}:")
            if not suggestions:
                lines.append("    no feasible swap, requires manual coordination")
            for s in suggestions:
                status = "✓" if s.recommended else f"{len(s.conflicts)} conflict(s)"
                lines.append(f"    [{status}] {s.reasoning}")
                for conflict in s.conflicts:
                    lines.append(f"        - {conflict}")

    lines += ["", sep]
    report_text = "\n".join(lines)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(report_text)

    logger.info(f"Validation report exported → {output_path}")
    return report_text

"""
analyze.py — Roster Check Orchestration (CLI)

Full pipeline:
  1. Load the roster file into a grid and parse it into shift intervals
  2. Validate (duplicates, same-day overlap, rest)
  3. Aggregate per-doctor statistics and the roster summary
  4. Recommend swaps for every doctor/day named by an error, plus any
     explicitly requested --swap targets
  5. Export Excel, CSV, JSON and the validation report
  6. Print summary to console

Exit status: 0 ok, 1 input could not be loaded, 2 errors found with --strict.

Usage:
  python -m shiftcheck.analyze roster.xlsx
  python -m shiftcheck.analyze roster.csv --swap "ayşe:6" --strict
  shiftcheck roster.ods --settings settings.json --visual
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from shiftcheck.config import load_settings
from shiftcheck.constraints import validate
from shiftcheck.exporter import export_to_csv, export_to_excel, export_validation_report
from shiftcheck.metrics import aggregate, summarize
from shiftcheck.models import DoctorStatistics
from shiftcheck.parser import clean_name, load_shift_data
from shiftcheck.swaps import suggest_swaps, suggest_swaps_for_errors

logger = logging.getLogger(__name__)

OUTPUTS_DIR = Path("outputs")

EXIT_OK = 0
EXIT_LOAD_FAILED = 1
EXIT_STRICT_ERRORS = 2


def parse_swap_target(value: str) -> Tuple[str, int]:
    """'DOCTOR:DAY' → (doctor, day). Names may themselves contain ':'."""
    doctor, sep, day = value.rpartition(":")
    if not sep or not doctor.strip():
        raise argparse.ArgumentTypeError(f"Expected DOCTOR:DAY, got {value!r}")
    try:
        return clean_name(doctor), int(day)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Day must be an integer in {value!r}")


# ---------------------------------------------------------------------------
# Visual analysis (matplotlib, optional)
# ---------------------------------------------------------------------------

def _generate_hours_chart(
    statistics: Sequence[DoctorStatistics],
    average_hours: float,
    output_dir: Path,
    prefix: str,
) -> Optional[Path]:
    """Bar chart of total hours per doctor with the roster average."""
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        logger.warning("matplotlib not installed — skip visual analysis. Install with: pip install matplotlib")
        return None

    if not statistics:
        return None

    names = [s.name for s in statistics]
    hours = [s.total_hours for s in statistics]
    x = range(len(names))

    fig, ax = plt.subplots(figsize=(13, 5))
    colors = ["#b22222" if h > average_hours else "#4a90d9" for h in hours]
    ax.bar(x, hours, color=colors, alpha=0.85, width=0.65)
    ax.axhline(average_hours, color="crimson", linewidth=1.8, linestyle="--",
               label=f"Average: {average_hours:.1f} hrs")
    for bar, val in zip(ax.patches, hours):
        ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 1, str(val),
                ha="center", va="bottom", fontsize=8)
    ax.set_xticks(list(x))
    ax.set_xticklabels(names, rotation=40, ha="right", fontsize=9)
    ax.set_ylabel("Total Hours")
    ax.set_title("Duty Hours by Doctor", fontsize=13, fontweight="bold")
    ax.legend()
    ax.grid(axis="y", alpha=0.3)
    fig.tight_layout()

    chart_path = Path(output_dir) / f"{prefix}_hours_distribution.png"
    fig.savefig(chart_path, dpi=150)
    plt.close(fig)
    print(f"  ✓ Visual  → {chart_path.name}")
    return chart_path


# ---------------------------------------------------------------------------
# Main orchestrator
# ---------------------------------------------------------------------------

def run_analysis(
    input_path: Path,
    output_dir: Path = OUTPUTS_DIR,
    settings_path: Optional[Path] = None,
    swap_targets: Optional[List[Tuple[str, int]]] = None,
    visual: bool = False,
) -> Dict[str, Any]:
    """
    Check one roster file and write all outputs.

    Args:
        input_path:    Roster file (.csv, .xlsx, .xls, .ods)
        output_dir:    Directory for output files
        settings_path: Optional JSON overrides for rest / swap tuning
        swap_targets:  Extra (doctor, day) pairs to search swaps for
        visual:        If True, also write a matplotlib hours chart

    Returns:
        Dict with shift_data, errors, statistics, summary, swaps, outputs.
        shift_data is None (and outputs empty) when the file cannot be loaded.
    """
    input_path = Path(input_path)
    output_dir = Path(output_dir)
    settings = load_settings(settings_path)
    prefix = input_path.stem
    sep = "=" * 70

    print(f"\n{sep}")
    print(f"  ROSTER CHECK — {input_path.name}")
    print(f"{sep}\n")

    # ── 1. Load & parse ────────────────────────────────────────────────────
    print("Step 1/5: Loading roster...")
    shift_data, load_errors = load_shift_data(input_path)
    if shift_data is None:
        for err in load_errors:
            print(f"  ✗ {err}")
        return {
            "shift_data": None,
            "errors":     load_errors,
            "statistics": [],
            "summary":    None,
            "swaps":      {},
            "outputs":    {},
        }
    all_shifts = shift_data.all_shifts
    print(f"  ✓ {shift_data.month}: {len(shift_data.entries)} days | {len(all_shifts)} shift intervals")

    # ── 2. Validate ────────────────────────────────────────────────────────
    print("\nStep 2/5: Validating shifts...")
    min_rest = settings["min_rest_hours"]
    errors = validate(all_shifts, min_rest_hours=min_rest)
    status = "✓" if not errors else "✗"
    print(f"  {status} Errors: {len(errors)} (minimum rest {min_rest:g}h)")
    for err in errors:
        print(f"    {err}")

    # ── 3. Statistics ──────────────────────────────────────────────────────
    print("\nStep 3/5: Aggregating statistics...")
    statistics = aggregate(all_shifts)
    summary = summarize(all_shifts, month=shift_data.month, statistics=statistics)
    print(f"  ✓ {summary.total_doctors} doctors | {summary.total_hours}h total | "
          f"{summary.average_hours}h average")

    # ── 4. Swap suggestions ────────────────────────────────────────────────
    print("\nStep 4/5: Searching swaps...")
    swaps = suggest_swaps_for_errors(
        all_shifts, errors,
        limit=settings["error_swap_result_limit"],
        max_conflicts=settings["max_swap_conflicts"],
        min_rest_hours=min_rest,
    )
    for doctor, day in swap_targets or []:
        swaps[(doctor, day)] = suggest_swaps(
            all_shifts, doctor, day,
            max_conflicts=settings["max_swap_conflicts"],
            limit=settings["swap_result_limit"],
            min_rest_hours=min_rest,
        )
    for (doctor, day), suggestions in swaps.items():
        best = suggestions[0].reasoning if suggestions else "no feasible swap"
        print(f"  • {doctor} / day {day}: {len(suggestions)} option(s) — {best}")
    if not swaps:
        print("  ✓ Nothing to swap")

    # ── 5. Export ──────────────────────────────────────────────────────────
    print("\nStep 5/5: Exporting outputs...")
    output_dir.mkdir(parents=True, exist_ok=True)
    xlsx_path   = output_dir / f"{prefix}_statistics.xlsx"
    csv_path    = output_dir / f"{prefix}_shifts.csv"
    json_path   = output_dir / f"{prefix}_analysis.json"
    report_path = output_dir / f"{prefix}_validation.txt"

    export_to_excel(shift_data, statistics, xlsx_path, summary=summary)
    export_to_csv(all_shifts, csv_path)
    export_validation_report(errors, report_path, month=shift_data.month, swap_suggestions=swaps)

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump({
            "shiftData":  shift_data.to_dict(),
            "errors":     [e.to_dict() for e in errors],
            "statistics": [s.to_dict() for s in statistics],
            "summary":    summary.to_dict(),
            "swaps": [
                {"doctor": doctor, "day": day, "suggestions": [s.to_dict() for s in suggestions]}
                for (doctor, day), suggestions in swaps.items()
            ],
        }, f, indent=2, ensure_ascii=False)

    print(f"  ✓ Excel:     {xlsx_path.name}")
    print(f"  ✓ CSV:       {csv_path.name}")
    print(f"  ✓ JSON:      {json_path.name}")
    print(f"  ✓ Report:    {report_path.name}")

    outputs = {"excel": xlsx_path, "csv": csv_path, "json": json_path, "report": report_path}
    if visual:
        chart = _generate_hours_chart(statistics, summary.average_hours, output_dir, prefix)
        if chart is not None:
            outputs["chart"] = chart

    # ── Summary ────────────────────────────────────────────────────────────
    print(f"\n{sep}")
    print("  SUMMARY")
    print(f"{sep}")
    print(f"  Month:          {shift_data.month}")
    print(f"  Doctors:        {summary.total_doctors}")
    print(f"  Shifts:         {summary.total_shifts}")
    print(f"  Errors:         {len(errors)}  {status}")
    counts = summary.shift_type_counts
    print(f"  24h/16h/12h/8h: {counts['24h']}/{counts['16h']}/{counts['12h']}/{counts['8h']}")

    print("\n  Top 3 by hours:")
    for s in statistics[:3]:
        print(f"    {s.name:<24} {s.total_hours:>4}h  {s.total_days} days")
    print(f"\n{sep}\n")

    return {
        "shift_data": shift_data,
        "errors":     errors,
        "statistics": statistics,
        "summary":    summary,
        "swaps":      swaps,
        "outputs":    outputs,
    }


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Check a monthly doctor shift roster and suggest swaps"
    )
    parser.add_argument("input",        help="Roster file (.csv, .xlsx, .xls, .ods)")
    parser.add_argument("--output-dir", default=None, help="Output directory (default: outputs/)")
    parser.add_argument("--settings",   default=None, help="JSON file overriding rest / swap settings")
    parser.add_argument(
        "--swap",
        action="append",
        default=[],
        type=parse_swap_target,
        metavar="DOCTOR:DAY",
        help="Also search swaps for this doctor/day (repeatable)",
    )
    parser.add_argument("--strict",  action="store_true", help="Exit with status 2 if errors are found")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--visual",  action="store_true", help="Generate a matplotlib hours chart")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    out_dir = Path(args.output_dir) if args.output_dir else OUTPUTS_DIR
    try:
        result = run_analysis(
            Path(args.input),
            output_dir=out_dir,
            settings_path=Path(args.settings) if args.settings else None,
            swap_targets=args.swap,
            visual=args.visual,
        )
    except ValueError as e:
        print(f"Invalid settings: {e}")
        return EXIT_LOAD_FAILED

    if result["shift_data"] is None:
        print("\n  ✗ Cannot proceed — fix the input file above.")
        return EXIT_LOAD_FAILED
    if args.strict and result["errors"]:
        return EXIT_STRICT_ERRORS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

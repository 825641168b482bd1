"""
tests/test_parser.py — Roster parser and file loading.

Tests: column header table, cell decision table, grid parsing (month, trailer
rows, bad days, regions), CSV / Excel loading, format-error boundary.
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from shiftcheck.config import RosterFormatError, load_grid
from shiftcheck.constraints import validate
from shiftcheck.models import ColumnKind, ErrorType, Severity, ShiftType
from shiftcheck.parser import (
    classify_cell,
    classify_column,
    classify_columns,
    clean_name,
    find_data_end,
    load_shift_data,
    parse_integer,
    parse_roster,
)


def _summary(shift_data):
    return sorted((s.doctor_name, s.day, s.shift_type.value) for s in shift_data.all_shifts)


# ---------------------------------------------------------------------------
# Column headers
# ---------------------------------------------------------------------------

class TestClassifyColumn:

    @pytest.mark.parametrize("header, expected", [
        ("Acil 24",            ColumnKind.H24),
        ("yeşil24",            ColumnKind.H24),
        ("YİRMİ DÖRT saat",    ColumnKind.H24),
        ("Servis 16",          ColumnKind.H16),
        ("on altı",            ColumnKind.H16),
        ("Gündüz",             ColumnKind.H8),
        ("gunduz poliklinik",  ColumnKind.H8),
        ("Sarı alan",          ColumnKind.SPLIT),
        ("A/B",                ColumnKind.SPLIT),
        ("sarı+müs",           ColumnKind.SPLIT),
        ("Kırmızı",            ColumnKind.UNKNOWN),
        ("",                   ColumnKind.UNKNOWN),
    ])
    def test_header_table(self, header, expected):
        assert classify_column(header) is expected

    def test_first_matching_rule_wins(self):
        # "08-16" contains "16", and the 16h rule is checked before the 8h rule
        assert classify_column("08-16") is ColumnKind.H16
        assert classify_column("24 / 16") is ColumnKind.H24

    def test_classify_columns_keeps_header_as_region(self):
        specs = classify_columns(["Mart", "Kırmızı 24", "Yeşil"])
        assert [s.index for s in specs] == [1, 2]
        assert specs[0].kind is ColumnKind.H24
        assert specs[0].region == "Kırmızı 24"
        assert specs[1].kind is ColumnKind.UNKNOWN


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

class TestClassifyCell:

    def test_split_cell(self):
        rule, shifts = classify_cell("Ahmet/Mehmet")
        assert rule == "explicit_split"
        assert shifts == [("ahmet", ShiftType.MORNING), ("mehmet", ShiftType.EVENING)]

    def test_split_cell_with_empty_half(self):
        _, shifts = classify_cell("ahmet/ ")
        assert shifts == [("ahmet", ShiftType.MORNING)]

    def test_split_ignores_parts_after_second(self):
        _, shifts = classify_cell("a/b/c")
        assert [n for n, _ in shifts] == ["a", "b"]

    def test_daytime_marker(self):
        rule, shifts = classify_cell("Ayşe 08-16", ColumnKind.H24)
        assert rule == "explicit_daytime"
        assert shifts == [("ayşe", ShiftType.H8)]

    def test_suffix_16_beats_24h_column(self):
        rule, shifts = classify_cell("ahmet16", ColumnKind.H24)
        assert rule == "suffix_16"
        assert shifts == [("ahmet", ShiftType.H16)]

    def test_8h_column_beats_hour_suffix(self):
        rule, shifts = classify_cell("ahmet 24", ColumnKind.H8)
        assert rule == "column_8h"
        assert shifts == [("ahmet", ShiftType.H8)]
        _, shifts = classify_cell("ahmet16", ColumnKind.H8)
        assert shifts == [("ahmet", ShiftType.H8)]

    def test_suffix_24_beats_16h_column(self):
        rule, shifts = classify_cell("ahmet24", ColumnKind.H16)
        assert rule == "suffix_24"
        assert shifts == [("ahmet", ShiftType.H24)]

    @pytest.mark.parametrize("text, kind, expected", [
        ("ali2",   ColumnKind.H16,     ("ali2", ShiftType.H16)),
        ("ali 12", ColumnKind.H8,      ("ali 12", ShiftType.H8)),
        ("ali 12", ColumnKind.UNKNOWN, ("ali 12", ShiftType.H24)),
        ("16ali",  ColumnKind.H24,     ("16ali", ShiftType.H24)),
    ])
    def test_other_digits_stay_in_name(self, text, kind, expected):
        _, shifts = classify_cell(text, kind)
        assert shifts == [expected]

    @pytest.mark.parametrize("kind, expected", [
        (ColumnKind.H8,      ShiftType.H8),
        (ColumnKind.H16,     ShiftType.H16),
        (ColumnKind.H24,     ShiftType.H24),
        (ColumnKind.SPLIT,   ShiftType.H24),
        (ColumnKind.UNKNOWN, ShiftType.H24),
    ])
    def test_plain_name_follows_column(self, kind, expected):
        _, shifts = classify_cell("Zeynep", kind)
        assert shifts == [("zeynep", expected)]

    def test_empty_cell(self):
        assert classify_cell("   ") == ("empty", [])

    def test_bare_marker_produces_no_interval(self):
        _, shifts = classify_cell("16")
        assert shifts == []

    def test_clean_name_strips_decoration(self):
        assert clean_name(" Dr. Ali - ") == "dr. ali"

    def test_clean_name_folds_dotted_capital_i(self):
        assert clean_name("İSMAİL") == "ismail"
        _, shifts = classify_cell("İSMAİL/ismail")
        assert [n for n, _ in shifts] == ["ismail", "ismail"]


# ---------------------------------------------------------------------------
# Grid parsing
# ---------------------------------------------------------------------------

class TestParseRoster:

    def test_split_and_suffix_scenario(self):
        data = parse_roster([["March"], ["1", "ahmet/mehmet"], ["2", "ahmet24"]])
        assert data.month == "March"
        assert _summary(data) == [
            ("ahmet", 1, "morning"),
            ("ahmet", 2, "24h"),
            ("mehmet", 1, "evening"),
        ]
        assert validate(data.all_shifts) == []

    def test_daytime_column_keeps_8h_for_suffixed_name(self):
        data = parse_roster([["Mart", "Gündüz", "Servis 16"], ["1", "ahmet16", "ali24"]])
        assert _summary(data) == [("ahmet", 1, "8h"), ("ali", 1, "24h")]

    def test_dotted_capital_i_is_one_doctor(self):
        data = parse_roster([["Mart"], ["1", "İSMAİL"], ["3", "ismail"]])
        assert {s.doctor_name for s in data.all_shifts} == {"ismail"}

    def test_intervals_have_catalog_bounds(self):
        data = parse_roster([["March", "Servis 16"], ["3", "ali"]])
        (shift,) = data.all_shifts
        assert shift.hours == 16
        assert shift.start_offset == 2 * 24 + 8
        assert shift.end_offset - shift.start_offset == 16
        assert shift.start_datetime.hour == 8
        assert shift.end_datetime.hour == 0

    def test_evening_ends_next_morning(self):
        data = parse_roster([["M"], ["1", "a/b"]])
        evening = next(s for s in data.all_shifts if s.shift_type is ShiftType.EVENING)
        assert evening.start_offset == 20
        assert evening.end_offset == 32

    def test_region_and_column_recorded(self):
        data = parse_roster([["Mart", "Kırmızı 24", "Yeşil 16"], ["1", "ali", "veli"]])
        by_name = {s.doctor_name: s for s in data.all_shifts}
        assert by_name["ali"].region == "Kırmızı 24"
        assert by_name["ali"].column == 1
        assert by_name["veli"].shift_type is ShiftType.H16
        assert by_name["veli"].column == 2

    def test_cells_beyond_header_default_to_24h(self):
        data = parse_roster([["Mart", "Gündüz"], ["1", "ali", "veli"]])
        by_name = {s.doctor_name: s for s in data.all_shifts}
        assert by_name["ali"].shift_type is ShiftType.H8
        assert by_name["veli"].shift_type is ShiftType.H24
        assert by_name["veli"].region == ""

    def test_trailer_rows_ignored(self):
        rows = [
            ["Mart", "A 24"],
            ["1", "ali"],
            ["2", "veli"],
            ["Toplam", "x"],
            ["3", "ghost"],
        ]
        assert find_data_end(rows) == 3
        data = parse_roster(rows)
        assert [e.day for e in data.entries] == [1, 2]
        assert "ghost" not in {s.doctor_name for s in data.all_shifts}

    def test_empty_day_cell_ends_data(self):
        data = parse_roster([["Mart"], ["1", "ali"], ["", "veli"], ["2", "ayşe"]])
        assert _summary(data) == [("ali", 1, "24h")]

    def test_non_positive_days_skipped(self):
        data = parse_roster([["Mart"], ["0", "ali"], ["-2", "veli"], ["4", "ayşe"]])
        assert _summary(data) == [("ayşe", 4, "24h")]
        assert [e.day for e in data.entries] == [4]

    def test_decimal_day_cell(self):
        assert parse_integer("12.0") == 12
        data = parse_roster([["Mart"], ["7.0", "ali"]])
        assert data.all_shifts[0].day == 7

    def test_entries_keep_raw_cells(self):
        data = parse_roster([["Mart", "A", "B"], ["1", "Ali/Veli", ""]])
        assert data.entries[0].shifts == ["Ali/Veli"]

    def test_empty_grid(self):
        data = parse_roster([])
        assert data.month == "Unknown"
        assert data.entries == []
        assert data.all_shifts == []

    def test_missing_month_label(self):
        data = parse_roster([["", "A 24"], ["1", "ali"]])
        assert data.month == "Unknown"

    def test_to_dict_uses_wire_names(self):
        data = parse_roster([["March"], ["1", "ahmet"]])
        payload = data.to_dict()
        assert set(payload) == {"month", "entries", "allShifts"}
        shift = payload["allShifts"][0]
        assert shift["doctorName"] == "ahmet"
        assert shift["shiftType"] == "24h"
        assert shift["startDateTime"].endswith("08:00:00")


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------

class TestLoadFiles:

    def test_semicolon_csv(self, tmp_path):
        path = tmp_path / "mart.csv"
        path.write_text("Mart;Acil 24;Servis 16\n1;ali;veli\n2;ayşe;ahmet\n", encoding="utf-8")
        rows = load_grid(path)
        assert rows[0] == ["Mart", "Acil 24", "Servis 16"]
        data, errors = load_shift_data(path)
        assert errors == []
        assert len(data.all_shifts) == 4

    def test_cp1254_csv(self, tmp_path):
        path = tmp_path / "mart.csv"
        path.write_bytes("Mart,Acil 24\n1,ayşe\n".encode("cp1254"))
        data, errors = load_shift_data(path)
        assert errors == []
        assert data.all_shifts[0].doctor_name == "ayşe"

    def test_xlsx(self, tmp_path):
        import pandas as pd

        path = tmp_path / "mart.xlsx"
        pd.DataFrame([["Mart", "Acil 24"], [1, "ali"], [2, "veli16"]]).to_excel(
            path, header=False, index=False
        )
        data, errors = load_shift_data(path)
        assert errors == []
        assert _summary(data) == [("ali", 1, "24h"), ("veli", 2, "16h")]

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "roster.pdf"
        path.write_text("x")
        with pytest.raises(RosterFormatError, match="Unsupported file format"):
            load_grid(path)

    def test_format_error_boundary(self, tmp_path):
        data, errors = load_shift_data(tmp_path / "roster.txt")
        assert data is None
        assert len(errors) == 1
        assert errors[0].type is ErrorType.FORMAT
        assert errors[0].severity is Severity.ERROR
        assert errors[0].day is None and errors[0].doctor is None

    def test_missing_file(self, tmp_path):
        data, errors = load_shift_data(tmp_path / "absent.csv")
        assert data is None
        assert "not found" in errors[0].message

    def test_empty_csv(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        data, errors = load_shift_data(path)
        assert errors == []
        assert data.all_shifts == []

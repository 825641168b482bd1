"""
tests/test_metrics.py — Statistics aggregator, roster summary, daily overview.
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from shiftcheck.metrics import (
    aggregate,
    daily_overview,
    day_label,
    reduce_statistics,
    sort_statistics,
    summarize,
)
from shiftcheck.models import ShiftType
from shiftcheck.parser import parse_roster


@pytest.fixture
def shift_data():
    return parse_roster([["March"], ["1", "ahmet/mehmet"], ["2", "ahmet24"]])


class TestAggregate:

    def test_scenario_totals(self, shift_data):
        stats = {s.name: s for s in aggregate(shift_data.all_shifts)}
        assert stats["ahmet"].total_hours == 36
        assert stats["ahmet"].total_days == 2
        assert sorted(stats["ahmet"].days_list) == [1, 2]
        assert stats["ahmet"].shifts_24h == 1
        assert stats["ahmet"].shifts_12h == 1
        assert stats["mehmet"].total_hours == 12
        assert stats["mehmet"].total_days == 1

    def test_sorted_by_hours_descending(self, shift_data):
        assert [s.name for s in aggregate(shift_data.all_shifts)] == ["ahmet", "mehmet"]

    def test_raw_order_is_first_appearance(self):
        data = parse_roster([["M"], ["1", "zeynep", "ali"], ["2", "ali"]])
        assert [s.name for s in aggregate(data.all_shifts, sort_by=None)] == ["zeynep", "ali"]
        assert list(reduce_statistics(data.all_shifts)) == ["zeynep", "ali"]

    def test_days_counted_once(self):
        data = parse_roster([["M"], ["1", "ali/ali"]])
        (stats,) = aggregate(data.all_shifts)
        assert stats.total_days == 1
        assert stats.total_hours == 24
        assert stats.shifts_12h == 2

    def test_hours_match_interval_sum(self):
        data = parse_roster([
            ["M", "A 24", "B 16", "Gündüz"],
            ["1", "ali", "veli", "ayşe"],
            ["3", "veli", "ayşe/ali", "zeynep"],
        ])
        stats = aggregate(data.all_shifts)
        assert sum(s.total_hours for s in stats) == sum(x.hours for x in data.all_shifts)

    def test_resort(self, shift_data):
        stats = aggregate(shift_data.all_shifts)
        assert [s.name for s in sort_statistics(stats, "name", descending=False)] == ["ahmet", "mehmet"]
        with pytest.raises(ValueError):
            sort_statistics(stats, "salary")

    def test_empty(self):
        assert aggregate([]) == []

    def test_to_dict_sorts_days(self):
        data = parse_roster([["M"], ["5", "ali"], ["2", "ali"]])
        (stats,) = aggregate(data.all_shifts)
        assert stats.days_list == [5, 2]
        assert stats.to_dict()["daysList"] == [2, 5]


class TestSummarize:

    def test_scenario_summary(self, shift_data):
        summary = summarize(shift_data.all_shifts, month=shift_data.month)
        assert summary.month == "March"
        assert summary.total_doctors == 2
        assert summary.total_shifts == 3
        assert summary.total_hours == 48
        assert summary.average_hours == 24.0
        assert summary.shift_type_counts == {"24h": 1, "16h": 0, "12h": 2, "8h": 0}

    def test_empty_summary(self):
        summary = summarize([])
        assert summary.total_doctors == 0
        assert summary.average_hours == 0.0


class TestDailyOverview:

    @pytest.mark.parametrize("types, label", [
        ([ShiftType.H24, ShiftType.H8],           "24h"),
        ([ShiftType.H16],                         "16h"),
        ([ShiftType.EVENING, ShiftType.MORNING],  "Full"),
        ([ShiftType.MORNING],                     "AM"),
        ([ShiftType.EVENING],                     "PM"),
        ([ShiftType.H8],                          "8h"),
    ])
    def test_label_precedence(self, types, label):
        assert day_label(types) == label

    def test_overview_covers_idle_days(self):
        data = parse_roster([["M"], ["1", "ali/ali"], ["3", "veli"]])
        overview = daily_overview(data.all_shifts)
        assert overview == {1: {"ali": "Full"}, 2: {}, 3: {"veli": "24h"}}

    def test_empty(self):
        assert daily_overview([]) == {}

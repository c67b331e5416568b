"""Tests for numeric rule gap detection."""

from __future__ import annotations

import pytest

from dmncheck.verification import IssueSeverity, check_rule_gaps, parse_interval


class TestParseInterval:
    """Test interval parsing of first-column entries."""

    @pytest.mark.parametrize("entry,bounds", [
        ("1..5", (1.0, 5.0)),
        ("[1..5]", (1.0, 5.0)),
        ("(0..2.5)", (0.0, 2.5)),
        ("]10..20[", (10.0, 20.0)),
        ("[ -3 .. 3 ]", (-3.0, 3.0)),
    ])
    def test_intervals(self, entry, bounds):
        assert parse_interval(entry) == bounds

    @pytest.mark.parametrize("entry", ["-", "", "5", "> 5", "[a..b]", "1..2..3", '"1..5"'])
    def test_non_intervals(self, entry):
        assert parse_interval(entry) is None


class TestCheckRuleGaps:
    """Test gap detection over the first input column."""

    def test_gap_between_ranges(self, make_table):
        table = make_table([(["[1..5]"], ["a"]), (["[10..15]"], ["b"])])
        issues = check_rule_gaps(table, "ages.dmn")
        assert len(issues) == 1
        assert issues[0].severity == IssueSeverity.WARNING
        assert "between 5 and 10" in issues[0].message
        assert "ages.dmn" in issues[0].message

    def test_touching_ranges_no_gap(self, make_table):
        table = make_table([(["[1..5]"], ["a"]), (["[5..10]"], ["b"])])
        assert check_rule_gaps(table) == []

    def test_overlapping_ranges_no_gap(self, make_table):
        table = make_table([(["[1..7]"], ["a"]), (["[5..10]"], ["b"])])
        assert check_rule_gaps(table) == []

    def test_ranges_sorted_before_scan(self, make_table):
        table = make_table([
            (["[20..30]"], ["c"]),
            (["[1..5]"], ["a"]),
            (["[5..10]"], ["b"]),
        ])
        issues = check_rule_gaps(table)
        assert len(issues) == 1
        assert "between 10 and 20" in issues[0].message

    def test_fractional_bounds(self, make_table):
        table = make_table([(["[0..2.5]"], ["a"]), (["[3.75..4]"], ["b"])])
        issues = check_rule_gaps(table)
        assert "between 2.5 and 3.75" in issues[0].message

    def test_non_interval_entries_ignored(self, make_table):
        table = make_table([
            (["[1..5]"], ["a"]),
            (["-"], ["b"]),
            (['"gold"'], ["c"]),
            (["[10..15]"], ["d"]),
        ])
        issues = check_rule_gaps(table)
        assert len(issues) == 1

    def test_only_first_column_analyzed(self, make_table):
        table = make_table([
            (["x", "[1..5]"], ["a"]),
            (["y", "[10..15]"], ["b"]),
        ])
        assert check_rule_gaps(table) == []

    def test_rules_without_inputs_ignored(self, make_table):
        table = make_table([([], ["a"]), ([], ["b"])])
        assert check_rule_gaps(table) == []

"""Tests for literal classification and type compatibility."""

from __future__ import annotations

import pytest

from dmncheck.verification import (
    DeclaredType,
    LiteralKind,
    classify_literal,
    is_literal_type_consistent,
    normalize_type_ref,
    parse_number,
)


class TestClassifyLiteral:
    """Test the literal kind inferred from raw entry text."""

    @pytest.mark.parametrize("text,kind", [
        ('"123"', LiteralKind.STRING),
        ('"true"', LiteralKind.STRING),
        ("true", LiteralKind.BOOLEAN),
        ("FALSE", LiteralKind.BOOLEAN),
        ("123", LiteralKind.NUMBER),
        ("-4.5e3", LiteralKind.NUMBER),
        (".5", LiteralKind.NUMBER),
        ("2024-01-31", LiteralKind.DATE),
        ('date("2024-01-31")', LiteralKind.DATE),
        ("12:30:00", LiteralKind.TIME),
        ("12:30:00+02:00", LiteralKind.TIME),
        ('time("12:30:00")', LiteralKind.TIME),
        ("2024-01-31T12:30:00Z", LiteralKind.DATE_TIME),
        ('dateTime("2024-01-31T12:30:00")', LiteralKind.DATE_TIME),
        ('date and time("2024-01-31T12:30:00")', LiteralKind.DATE_TIME),
        ("customer.segment", LiteralKind.UNKNOWN),
        ("[1..5]", LiteralKind.UNKNOWN),
    ])
    def test_kinds(self, text, kind):
        assert classify_literal(text) == kind

    def test_single_quote_character_is_not_quoted(self):
        assert classify_literal('"') == LiteralKind.UNKNOWN

    def test_surrounding_whitespace_ignored(self):
        assert classify_literal("  42  ") == LiteralKind.NUMBER


class TestParseNumber:
    """Test the decimal literal grammar."""

    def test_plain_numbers(self):
        assert parse_number("10") == 10.0
        assert parse_number(" -2.5 ") == -2.5

    @pytest.mark.parametrize("text", ["inf", "nan", "Infinity", "1_000", "0x10", "", "abc"])
    def test_non_numbers(self, text):
        assert parse_number(text) is None


class TestNormalizeTypeRef:
    """Test typeRef normalization."""

    @pytest.mark.parametrize("type_ref,expected", [
        ("number", DeclaredType.NUMBER),
        ("Integer", DeclaredType.NUMBER),
        ("long", DeclaredType.NUMBER),
        ("double", DeclaredType.NUMBER),
        ("feel:string", DeclaredType.STRING),
        ("dateTime", DeclaredType.DATE_TIME),
        ("date  and  time", DeclaredType.DATE_TIME),
        (" boolean ", DeclaredType.BOOLEAN),
    ])
    def test_known_types(self, type_ref, expected):
        assert normalize_type_ref(type_ref) == expected

    @pytest.mark.parametrize("type_ref", [None, "", "tCustomerSegment", "duration"])
    def test_unmodeled_types(self, type_ref):
        assert normalize_type_ref(type_ref) is None


class TestTypeConsistency:
    """Test literal/type compatibility decisions."""

    def test_quoted_number_is_not_a_number(self):
        assert not is_literal_type_consistent('"123"', "number")

    def test_bare_number_is_a_number(self):
        assert is_literal_type_consistent("123", "number")

    def test_boolean_is_not_a_number(self):
        assert not is_literal_type_consistent("true", "number")

    def test_quoted_boolean_is_not_a_boolean(self):
        assert not is_literal_type_consistent('"true"', "boolean")

    def test_bare_boolean_is_a_boolean(self):
        assert is_literal_type_consistent("true", "boolean")

    def test_string_accepts_quoted_and_bare_identifiers(self):
        assert is_literal_type_consistent('"gold"', "string")
        assert is_literal_type_consistent("gold", "string")

    def test_string_rejects_bare_number_and_boolean(self):
        assert not is_literal_type_consistent("18", "string")
        assert not is_literal_type_consistent("false", "string")

    def test_dates_must_be_unquoted(self):
        assert is_literal_type_consistent("2024-01-01", "date")
        assert not is_literal_type_consistent('"2024-01-01"', "date")

    def test_time_and_date_time(self):
        assert is_literal_type_consistent("08:00:00Z", "time")
        assert not is_literal_type_consistent("2024-01-01", "time")
        assert is_literal_type_consistent("2024-01-01T08:00:00", "dateTime")
        assert not is_literal_type_consistent("2024-01-01", "date and time")

    def test_unmodeled_type_always_consistent(self):
        assert is_literal_type_consistent('"anything"', "tCustom")
        assert is_literal_type_consistent("123", None)

"""Tests for phone / email validation and normalization."""

from __future__ import annotations

import pytest

from contact_scraper.scraper.normalizer import (
    is_valid_email,
    is_valid_phone,
    normalize_email,
    normalize_phone,
)


class TestIsValidPhone:
    @pytest.mark.parametrize(
        "phone",
        [
            "040 123 4567",
            "0401234567",
            "040-123-4567",
            "040.123.4567",
            "09 123 4567",
            "+358 40 123 4567",
            "+358401234567",
        ],
    )
    def test_accepts_finnish_numbers(self, phone: str) -> None:
        assert is_valid_phone(phone) is True

    @pytest.mark.parametrize(
        "phone",
        [
            "123",
            "+46 70 123 4567",  # Swedish
            "1234567890",  # no national prefix
            "040 12",
            "",
        ],
    )
    def test_rejects_other_numbers(self, phone: str) -> None:
        assert is_valid_phone(phone) is False


class TestNormalizePhone:
    def test_national_number_gets_country_code(self) -> None:
        assert normalize_phone("040 123 4567") == "+358401234567"

    def test_separators_are_removed(self) -> None:
        assert normalize_phone("09-123-4567") == "+35891234567"

    def test_international_number_passes_through(self) -> None:
        assert normalize_phone("+358 40 123 4567") == "+358401234567"

    def test_is_idempotent(self) -> None:
        once = normalize_phone("040 123 4567")
        assert normalize_phone(once) == once

    def test_unresolvable_number_returned_as_given(self) -> None:
        assert normalize_phone("(555) 123") == "(555) 123"


class TestEmail:
    def test_valid_email(self) -> None:
        assert is_valid_email("matti.meikalainen@yritys.fi") is True

    @pytest.mark.parametrize("email", ["no-at-sign.fi", "a@b", "a@@b.fi", "a@b.c"])
    def test_invalid_email(self, email: str) -> None:
        assert is_valid_email(email) is False

    def test_normalize_lowercases(self) -> None:
        assert normalize_email("Info@Example.FI") == "info@example.fi"

    def test_normalize_strips_whitespace(self) -> None:
        assert normalize_email("  info@example.fi ") == "info@example.fi"

    def test_normalize_discards_invalid(self) -> None:
        assert normalize_email("not-an-email") is None

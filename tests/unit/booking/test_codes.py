"""
Unit tests for booking code generation.
"""

from __future__ import annotations

import re

import pytest

from homestay.booking.codes import generate_booking_code

CODE_PATTERN = re.compile(r"^HS\d{6}[0-9A-Z]{4}$")


@pytest.mark.unit
def test_code_format() -> None:
    code = generate_booking_code()

    assert len(code) == 12
    assert CODE_PATTERN.match(code)


@pytest.mark.unit
def test_code_uses_last_six_digits_of_millis() -> None:
    assert generate_booking_code(now_ms=1738411200123).startswith("HS200123")


@pytest.mark.unit
def test_short_millis_are_zero_padded() -> None:
    assert generate_booking_code(now_ms=42).startswith("HS000042")


@pytest.mark.unit
def test_codes_are_practically_unique() -> None:
    codes = {generate_booking_code(now_ms=1) for _ in range(200)}

    assert len(codes) > 190

"""Tests for duration parsing."""

from datetime import timedelta

import pytest

from tagscope import parse_duration


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_milliseconds(self) -> None:
        """Test parsing milliseconds."""
        assert parse_duration("100ms") == 100
        assert parse_duration("0ms") == 0

    def test_seconds(self) -> None:
        """Test parsing seconds."""
        assert parse_duration("1s") == 1000
        assert parse_duration("30s") == 30000

    def test_minutes_hours_days(self) -> None:
        """Test parsing minutes, hours and days."""
        assert parse_duration("5m") == 300_000
        assert parse_duration("2h") == 7_200_000
        assert parse_duration("1d") == 86_400_000

    def test_weeks(self) -> None:
        """Test parsing weeks."""
        assert parse_duration("2w") == 1_209_600_000

    def test_integer_passthrough(self) -> None:
        """Test that integers pass through unchanged."""
        assert parse_duration(1000) == 1000
        assert parse_duration(0) == 0

    def test_timedelta(self) -> None:
        """Test that timedeltas convert to milliseconds."""
        assert parse_duration(timedelta(minutes=1, milliseconds=5)) == 60_005

    @pytest.mark.parametrize("value", ["invalid", "10x", "s10", "", "10", -1, True])
    def test_invalid(self, value: object) -> None:
        """Test that invalid durations raise ValueError."""
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(value)  # type: ignore[arg-type]

"""Tests for nightknight_core.evaluator — minutes-to-bedtime."""

from datetime import datetime

import pytest

from nightknight_core.evaluator import evaluate, parse_bedtime, weekday_name
from nightknight_core.schedule import Schedule

from conftest import at


class TestWeekdayName:
    def test_monday(self):
        assert weekday_name(at(12, 0)) == "Monday"

    def test_sunday(self):
        assert weekday_name(datetime(2025, 1, 19, 12, 0)) == "Sunday"


class TestParseBedtime:
    def test_combines_with_today(self):
        assert parse_bedtime("22:15", at(9, 30, 12)) == at(22, 15)

    def test_strips_whitespace(self):
        assert parse_bedtime(" 07:05 ", at(1, 0)) == at(7, 5)

    @pytest.mark.parametrize("raw", ["25:00", "22-15", "late", "22:15:00", "12:60"])
    def test_malformed_raises(self, raw):
        with pytest.raises(ValueError):
            parse_bedtime(raw, at(12, 0))


class TestEvaluate:
    def test_five_minutes_before(self, schedule):
        result = evaluate(at(22, 10), schedule)
        assert result.ok is True
        assert result.minutes_to_bed == 5.0
        assert result.error is None

    def test_exact_to_the_second(self, schedule):
        result = evaluate(at(22, 10, 15), schedule)
        assert result.minutes_to_bed == pytest.approx(4.75)

    def test_negative_after_bedtime(self, schedule):
        result = evaluate(at(22, 15, 30), schedule)
        assert result.ok is True
        assert result.minutes_to_bed == pytest.approx(-0.5)

    def test_morning_is_hours_ahead(self, schedule):
        result = evaluate(at(0, 15), schedule)
        assert result.minutes_to_bed == 22 * 60

    def test_uses_todays_weekday(self):
        schedule = Schedule({"Monday": "21:00", "Tuesday": "23:00"})
        assert evaluate(at(20, 0), schedule).minutes_to_bed == 60
        tuesday = datetime(2025, 1, 14, 20, 0)
        assert evaluate(tuesday, schedule).minutes_to_bed == 180

    def test_missing_day_skips_silently(self):
        result = evaluate(at(22, 0), Schedule({"Tuesday": "22:00"}))
        assert result.ok is False
        assert result.error is None

    def test_blank_entry_skips_silently(self):
        result = evaluate(at(22, 0), Schedule({"Monday": "  "}))
        assert result.ok is False
        assert result.error is None

    def test_unparseable_entry_is_reportable(self):
        result = evaluate(at(22, 0), Schedule({"Monday": "ten pm"}))
        assert result.ok is False
        assert "Monday" in result.error


"""
Tests for the agenda time-window validator.
"""

import pytest

from app.modules.psychologists.schemas import AvailableTimeIn, DayAgendaIn
from app.modules.psychologists.validation import AgendaValidationError, validate_agendas, validate_day


def windows(*pairs):
    return [AvailableTimeIn(start_time=s, end_time=e) for s, e in pairs]


def day(*pairs, weekday: int = 0) -> DayAgendaIn:
    return DayAgendaIn(weekday=weekday, available_times=windows(*pairs))


class TestValidateDay:
    def test_accepts_increasing_windows(self):
        accepted = validate_day(windows(("09:00", "10:00"), ("10:30", "11:00")))

        assert [(w.start_time, w.end_time) for w in accepted] == [("09:00", "10:00"), ("10:30", "11:00")]

    def test_rejects_overlapping_windows(self):
        with pytest.raises(AgendaValidationError) as exc_info:
            validate_day(windows(("09:00", "10:00"), ("09:30", "11:00")))

        assert exc_info.value.window_index == 1
        assert "overlaps 09:00-10:00" in str(exc_info.value)

    def test_rejects_window_starting_when_previous_ends(self):
        with pytest.raises(AgendaValidationError):
            validate_day(windows(("09:00", "10:00"), ("10:00", "11:00")))

    def test_rejects_empty_start(self):
        with pytest.raises(AgendaValidationError) as exc_info:
            validate_day(windows(("", "10:00")))

        assert "must not be empty" in str(exc_info.value)

    def test_rejects_blank_end(self):
        with pytest.raises(AgendaValidationError):
            validate_day(windows(("09:00", "   ")))

    def test_rejects_end_before_start(self):
        with pytest.raises(AgendaValidationError) as exc_info:
            validate_day(windows(("10:00", "09:00")))

        assert "must be later than start_time" in str(exc_info.value)

    def test_rejects_zero_length_window(self):
        with pytest.raises(AgendaValidationError):
            validate_day(windows(("10:00", "10:00")))

    def test_checks_against_every_earlier_window(self):
        # the third window clashes with the first, not with its neighbour
        with pytest.raises(AgendaValidationError) as exc_info:
            validate_day(windows(("09:00", "12:00"), ("13:00", "14:00"), ("11:00", "11:30")))

        assert exc_info.value.window_index == 2

    def test_first_violation_wins(self):
        with pytest.raises(AgendaValidationError) as exc_info:
            validate_day(windows(("10:00", "09:00"), ("", "")))

        assert exc_info.value.window_index == 0

    def test_empty_day_is_accepted(self):
        assert validate_day([]) == ()


class TestValidateAgendas:
    def test_windows_on_different_days_do_not_clash(self):
        result = validate_agendas([day(("09:00", "10:00"), weekday=0), day(("09:00", "10:00"), weekday=1)])

        assert len(result) == 2

    def test_reports_offending_day(self):
        with pytest.raises(AgendaValidationError) as exc_info:
            validate_agendas([day(("09:00", "10:00")), day(("09:00", "10:00"), ("09:30", "11:00"), weekday=2)])

        assert exc_info.value.day_index == 1
        assert str(exc_info.value).startswith("agendas[1].available_times[1]")

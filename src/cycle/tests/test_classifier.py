"""Tests for day membership queries and display priority."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.cycle.classifier import (
    CalendarDay,
    DateRangeClassifier,
    DayStatus,
    resolve_status,
)
from src.cycle.config_loader import CycleConfig, WindowConfig
from src.cycle.records import PeriodRecord
from src.cycle.tests.conftest import make_period


class TestPredictedPeriodWindow:
    def test_window_is_inclusive(
        self, classifier: DateRangeClassifier, two_period_history: list[PeriodRecord]
    ) -> None:
        # Predicted start 2024-02-26, 5-day window through 2024-03-01
        start = date(2024, 2, 26)
        for offset in range(5):
            assert classifier.is_date_in_predicted_period(start + timedelta(days=offset), two_period_history)
        assert not classifier.is_date_in_predicted_period(date(2024, 2, 25), two_period_history)
        assert not classifier.is_date_in_predicted_period(date(2024, 3, 2), two_period_history)

    def test_custom_duration(
        self, classifier: DateRangeClassifier, two_period_history: list[PeriodRecord]
    ) -> None:
        assert classifier.is_date_in_predicted_period(date(2024, 3, 3), two_period_history, predicted_duration=7)
        assert not classifier.is_date_in_predicted_period(date(2024, 3, 4), two_period_history, predicted_duration=7)

    def test_time_of_day_is_stripped(
        self, classifier: DateRangeClassifier, two_period_history: list[PeriodRecord]
    ) -> None:
        assert classifier.is_date_in_predicted_period(datetime(2024, 3, 1, 23, 59), two_period_history)
        assert classifier.is_date_in_predicted_period(datetime(2024, 2, 26, 0, 0), two_period_history)

    def test_empty_history_is_never_predicted(self, classifier: DateRangeClassifier) -> None:
        for offset in range(60):
            day = date(2024, 1, 1) + timedelta(days=offset)
            assert not classifier.is_date_in_predicted_period(day, [])
            assert not classifier.is_date_in_predicted_pms(day, [])


class TestPredictedPMSWindow:
    def test_default_window(
        self, classifier: DateRangeClassifier, two_period_history: list[PeriodRecord]
    ) -> None:
        # PMS starts 7 days before 2024-02-26 and lasts 7 days
        assert not classifier.is_date_in_predicted_pms(date(2024, 2, 18), two_period_history)
        assert classifier.is_date_in_predicted_pms(date(2024, 2, 19), two_period_history)
        assert classifier.is_date_in_predicted_pms(date(2024, 2, 25), two_period_history)
        assert not classifier.is_date_in_predicted_pms(date(2024, 2, 26), two_period_history)

    def test_custom_window(
        self, classifier: DateRangeClassifier, two_period_history: list[PeriodRecord]
    ) -> None:
        assert classifier.is_date_in_predicted_pms(
            date(2024, 2, 12), two_period_history, pms_duration=3, days_before=14
        )
        assert not classifier.is_date_in_predicted_pms(
            date(2024, 2, 15), two_period_history, pms_duration=3, days_before=14
        )


class TestActualPeriod:
    def test_record_without_end_covers_only_start(self, classifier: DateRangeClassifier) -> None:
        history = [make_period(date(2024, 3, 1))]
        assert classifier.is_date_in_actual_period(date(2024, 3, 1), history)
        assert not classifier.is_date_in_actual_period(date(2024, 3, 2), history)

    def test_range_is_inclusive(self, classifier: DateRangeClassifier) -> None:
        record = make_period(datetime(2024, 3, 1, 18, 0), datetime(2024, 3, 4, 7, 0))
        history = [record]
        assert not classifier.is_date_in_actual_period(date(2024, 2, 29), history)
        assert classifier.is_date_in_actual_period(date(2024, 3, 1), history)
        assert classifier.is_date_in_actual_period(datetime(2024, 3, 4, 23, 0), history)
        assert not classifier.is_date_in_actual_period(date(2024, 3, 5), history)

    def test_all_overlapping_records_are_returned(self, classifier: DateRangeClassifier) -> None:
        first = make_period(date(2024, 3, 1), date(2024, 3, 5))
        second = make_period(date(2024, 3, 4), date(2024, 3, 8))
        other = make_period(date(2024, 1, 1), date(2024, 1, 5))
        match = classifier.is_date_in_actual_period(date(2024, 3, 4), [second, other, first])
        assert match
        assert match.day == date(2024, 3, 4)
        assert match.records == (second, first)

    def test_no_match_is_falsy(self, classifier: DateRangeClassifier) -> None:
        match = classifier.is_date_in_actual_period(date(2024, 3, 4), [])
        assert not match
        assert match.records == ()

    def test_inverted_range_never_matches(self, classifier: DateRangeClassifier) -> None:
        # end before start is undefined input; it is not repaired
        history = [make_period(date(2024, 3, 5), date(2024, 3, 1))]
        for day in (date(2024, 3, 1), date(2024, 3, 3), date(2024, 3, 5)):
            assert not classifier.is_date_in_actual_period(day, history)


class TestClassifyDay:
    def test_actual_beats_prediction(self, classifier: DateRangeClassifier) -> None:
        # Logged range runs into the predicted window starting 2024-02-26
        history = [
            make_period(date(2024, 1, 29), date(2024, 2, 27)),
            make_period(date(2024, 1, 1)),
        ]
        day = date(2024, 2, 26)
        assert classifier.is_date_in_predicted_period(day, history)
        assert classifier.is_date_in_actual_period(day, history)
        assert classifier.classify_day(day, history, today=day) == DayStatus.actual_period
        assert classifier.classify_day(date(2024, 2, 28), history, today=day) == DayStatus.predicted_period

    def test_predicted_period_beats_pms(self) -> None:
        config = CycleConfig(windows=WindowConfig(period_duration_days=5, pms_duration_days=10, pms_days_before=7))
        classifier = DateRangeClassifier(config)
        history = [make_period(date(2024, 1, 29)), make_period(date(2024, 1, 1))]
        day = date(2024, 2, 27)
        assert classifier.is_date_in_predicted_pms(day, history)
        assert classifier.is_date_in_predicted_period(day, history)
        assert classifier.classify_day(day, history, today=date(2024, 2, 1)) == DayStatus.predicted_period

    def test_pms_and_today_and_none(
        self, classifier: DateRangeClassifier, two_period_history: list[PeriodRecord]
    ) -> None:
        today = date(2024, 2, 20)
        assert classifier.classify_day(today, two_period_history, today=today) == DayStatus.predicted_pms
        assert classifier.classify_day(date(2024, 2, 10), two_period_history, today=date(2024, 2, 10)) == DayStatus.today
        assert classifier.classify_day(date(2024, 2, 11), two_period_history, today=date(2024, 2, 10)) == DayStatus.none

    @pytest.mark.parametrize(
        "flags, expected",
        [
            ((True, True, True, True), DayStatus.actual_period),
            ((False, True, True, True), DayStatus.predicted_period),
            ((False, False, True, True), DayStatus.predicted_pms),
            ((False, False, False, True), DayStatus.today),
            ((False, False, False, False), DayStatus.none),
        ],
    )
    def test_priority_order(self, flags: tuple[bool, bool, bool, bool], expected: DayStatus) -> None:
        assert resolve_status(*flags) == expected


class TestClassifyMonth:
    def test_february_2024(
        self, classifier: DateRangeClassifier, two_period_history: list[PeriodRecord]
    ) -> None:
        cells = classifier.classify_month(
            date(2024, 2, 14), two_period_history, today=date(2024, 2, 10), first_weekday=6
        )
        # 2024-02-01 is a Thursday → four blanks in a Sunday-first grid
        assert cells[:4] == [None] * 4
        days = [c for c in cells if c is not None]
        assert len(days) == 29
        by_day = {c.day: c for c in days}

        assert by_day[date(2024, 2, 1)].status == DayStatus.actual_period
        assert by_day[date(2024, 2, 2)].has_detail
        assert by_day[date(2024, 2, 3)].status == DayStatus.none
        assert by_day[date(2024, 2, 10)].status == DayStatus.today
        assert by_day[date(2024, 2, 19)].status == DayStatus.predicted_pms
        assert by_day[date(2024, 2, 26)].status == DayStatus.predicted_period
        assert by_day[date(2024, 2, 29)].status == DayStatus.predicted_period
        assert not by_day[date(2024, 2, 26)].has_detail

    def test_matches_classify_day(
        self, classifier: DateRangeClassifier, irregular_history: list[PeriodRecord]
    ) -> None:
        today = date(2024, 4, 10)
        for anchor in (date(2024, 3, 1), date(2024, 4, 1), date(2024, 5, 1)):
            for cell in classifier.classify_month(anchor, irregular_history, today=today):
                if cell is None:
                    continue
                assert isinstance(cell, CalendarDay)
                assert cell.status == classifier.classify_day(cell.day, irregular_history, today=today)

    def test_empty_history_only_marks_today(self, classifier: DateRangeClassifier) -> None:
        cells = classifier.classify_month(date(2024, 2, 1), [], today=date(2024, 2, 10))
        statuses = {c.day: c.status for c in cells if c is not None}
        assert statuses.pop(date(2024, 2, 10)) == DayStatus.today
        assert set(statuses.values()) == {DayStatus.none}

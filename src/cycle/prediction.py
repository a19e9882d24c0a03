"""Cycle prediction engine.

Turns a history of logged periods into:
- the average cycle length (start-to-start gap)
- the predicted start of the next period
- the predicted start of the pre-menstrual (PMS) window

Gaps shorter than two days or longer than the configured maximum are treated
as data-entry mistakes and ignored.  With too little usable data the engine
falls back to a 28-day cycle rather than showing nothing.

History may arrive in any order; every entry point sorts defensively.
Nothing here raises on thin or odd data; missing predictions are ``None``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.records import PeriodRecord, day_of

logger = logging.getLogger("heriod.cycle.prediction")


def add_days(day: date, days: int) -> date | None:
    """``day + days``, or None when the result leaves the supported date range."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        logger.debug("Date arithmetic overflow: %s %+d days", day, days)
        return None


def in_day_window(day: date | datetime, window_start: date, duration: int) -> bool:
    """True if ``day`` lies in [window_start, window_start + duration - 1]."""
    if duration < 1:
        return False
    window_end = add_days(window_start, duration - 1)
    if window_end is None:
        # Window runs past date.max; everything from the start onwards is inside
        return window_start <= day_of(day)
    return window_start <= day_of(day) <= window_end


@dataclass
class CyclePrediction:
    """Summary of the next predicted cycle.

    Attributes:
        avg_cycle_length:       Mean start-to-start gap in days (None if no history).
        used_default_length:    True when the default cycle length was substituted.
        records_used:           Number of records in the history.
        last_period_start:      Start day of the most recent period.
        predicted_period_start: First day of the predicted period window.
        predicted_period_end:   Last day of the predicted period window.
        predicted_pms_start:    First day of the predicted PMS window.
        predicted_pms_end:      Last day of the predicted PMS window.
        days_until_period:      Days from ``as_of`` to the predicted start.
        is_overdue:             True when the predicted start is today or earlier.
    """

    avg_cycle_length: int | None = None
    used_default_length: bool = False
    records_used: int = 0
    last_period_start: date | None = None
    predicted_period_start: date | None = None
    predicted_period_end: date | None = None
    predicted_pms_start: date | None = None
    predicted_pms_end: date | None = None
    days_until_period: int | None = None
    is_overdue: bool = False

    @property
    def has_prediction(self) -> bool:
        return self.predicted_period_start is not None


class PredictionEngine:
    """Predict the next period and PMS window from logged periods.

    Usage::

        engine = PredictionEngine()
        engine.average_cycle_length(history)      # 28
        engine.next_predicted_period(history)     # date(2024, 2, 26)
        engine.next_predicted_pms(history)        # date(2024, 2, 19)
    """

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    @property
    def config(self) -> CycleConfig:
        return self._config

    # ------------------------------------------------------------------
    # Cycle length
    # ------------------------------------------------------------------

    def cycle_gaps(self, history: Sequence[PeriodRecord]) -> list[int]:
        """Return the accepted start-to-start gaps, oldest first."""
        starts = sorted(record.start_day for record in history)
        pc = self._config.prediction
        gaps = []
        for previous, current in zip(starts, starts[1:]):
            gap = (current - previous).days
            if pc.accepts_gap(gap):
                gaps.append(gap)
            else:
                logger.debug(
                    "Ignoring %d-day gap between %s and %s (outside (%d, %d])",
                    gap, previous, current, pc.min_gap_days, pc.max_gap_days,
                )
        return gaps

    def average_cycle_length(self, history: Sequence[PeriodRecord]) -> int | None:
        """Average start-to-start gap in whole days.

        Returns:
            None for an empty history, the default length for a single record
            or when every gap was discarded, otherwise the floor of the mean
            of the accepted gaps.
        """
        if not history:
            return None
        default = self._config.prediction.default_cycle_length
        if len(history) == 1:
            return default

        gaps = self.cycle_gaps(history)
        if not gaps:
            logger.debug(
                "No usable gaps in %d records, using default cycle length %d",
                len(history), default,
            )
            return default
        return sum(gaps) // len(gaps)

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    @staticmethod
    def most_recent(history: Sequence[PeriodRecord]) -> PeriodRecord | None:
        """The record with the latest start day."""
        if not history:
            return None
        return max(history, key=lambda record: record.start_day)

    def next_predicted_period(self, history: Sequence[PeriodRecord]) -> date | None:
        """Start day of the next period: last start + average cycle length."""
        avg_length = self.average_cycle_length(history)
        last = self.most_recent(history)
        if avg_length is None or last is None:
            return None
        return add_days(last.start_day, avg_length)

    def next_predicted_pms(
        self,
        history: Sequence[PeriodRecord],
        days_before: int | None = None,
    ) -> date | None:
        """Start day of the PMS window, ``days_before`` days ahead of the period."""
        if days_before is None:
            days_before = self._config.windows.pms_days_before
        predicted = self.next_predicted_period(history)
        if predicted is None:
            return None
        return add_days(predicted, -days_before)

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    @staticmethod
    def days_until(predicted: date, today: date | datetime) -> int:
        return (predicted - day_of(today)).days

    def summarize(
        self,
        history: Sequence[PeriodRecord],
        as_of: date | datetime | None = None,
    ) -> CyclePrediction:
        """Bundle every prediction for ``history`` into a CyclePrediction."""
        today = day_of(as_of) if as_of is not None else date.today()
        windows = self._config.windows

        prediction = CyclePrediction(records_used=len(history))
        prediction.avg_cycle_length = self.average_cycle_length(history)
        if prediction.avg_cycle_length is None:
            return prediction

        prediction.used_default_length = not self.cycle_gaps(history)
        last = self.most_recent(history)
        prediction.last_period_start = last.start_day if last else None

        start = self.next_predicted_period(history)
        if start is None:
            return prediction
        prediction.predicted_period_start = start
        prediction.predicted_period_end = add_days(start, windows.period_duration_days - 1)
        prediction.days_until_period = self.days_until(start, today)
        prediction.is_overdue = prediction.days_until_period <= 0

        pms_start = add_days(start, -windows.pms_days_before)
        if pms_start is not None:
            prediction.predicted_pms_start = pms_start
            prediction.predicted_pms_end = add_days(pms_start, windows.pms_duration_days - 1)
        return prediction

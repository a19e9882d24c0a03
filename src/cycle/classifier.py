"""Per-day classification for the calendar and the day detail lookup.

A day gets exactly one status, first match wins:

1. actual_period     a logged period covers the day
2. predicted_period  inside the predicted period window
3. predicted_pms     inside the predicted PMS window
4. today             the current day
5. none

Recorded data always outranks a prediction, and the period prediction
outranks the PMS prediction when the two windows overlap.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from src.cycle.calendar_grid import build_month_grid
from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.prediction import PredictionEngine, in_day_window
from src.cycle.records import PeriodRecord, day_of

logger = logging.getLogger("heriod.cycle.classifier")


class DayStatus(str, Enum):
    actual_period = "actual_period"
    predicted_period = "predicted_period"
    predicted_pms = "predicted_pms"
    today = "today"
    none = "none"


@dataclass(frozen=True)
class ActualPeriodMatch:
    """Logged periods covering a day.  Truthy when at least one does."""

    day: date
    records: tuple[PeriodRecord, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.records)


@dataclass(frozen=True)
class CalendarDay:
    """One non-blank cell of a classified month."""

    day: date
    status: DayStatus
    records: tuple[PeriodRecord, ...] = field(default=())

    @property
    def has_detail(self) -> bool:
        """Tapping the cell opens a detail view only when periods cover it."""
        return bool(self.records)


def resolve_status(
    in_actual: bool,
    in_predicted_period: bool,
    in_predicted_pms: bool,
    is_today: bool,
) -> DayStatus:
    if in_actual:
        return DayStatus.actual_period
    if in_predicted_period:
        return DayStatus.predicted_period
    if in_predicted_pms:
        return DayStatus.predicted_pms
    if is_today:
        return DayStatus.today
    return DayStatus.none


class DateRangeClassifier:
    """Answer membership queries against actual and predicted windows.

    Window lengths default to the values in cycle_config.yaml and can be
    overridden per call.
    """

    def __init__(
        self,
        config: CycleConfig | None = None,
        engine: PredictionEngine | None = None,
    ) -> None:
        self._config = config or (engine.config if engine else get_cycle_config())
        self._engine = engine or PredictionEngine(self._config)

    @property
    def engine(self) -> PredictionEngine:
        return self._engine

    def is_date_in_predicted_period(
        self,
        day: date | datetime,
        history: Sequence[PeriodRecord],
        predicted_duration: int | None = None,
    ) -> bool:
        if predicted_duration is None:
            predicted_duration = self._config.windows.period_duration_days
        start = self._engine.next_predicted_period(history)
        if start is None:
            return False
        return in_day_window(day, start, predicted_duration)

    def is_date_in_predicted_pms(
        self,
        day: date | datetime,
        history: Sequence[PeriodRecord],
        pms_duration: int | None = None,
        days_before: int | None = None,
    ) -> bool:
        if pms_duration is None:
            pms_duration = self._config.windows.pms_duration_days
        start = self._engine.next_predicted_pms(history, days_before=days_before)
        if start is None:
            return False
        return in_day_window(day, start, pms_duration)

    @staticmethod
    def is_date_in_actual_period(
        day: date | datetime,
        history: Sequence[PeriodRecord],
    ) -> ActualPeriodMatch:
        """All records whose [start, end] range covers ``day``, in history order."""
        target = day_of(day)
        return ActualPeriodMatch(
            day=target,
            records=tuple(record for record in history if record.covers(target)),
        )

    def classify_day(
        self,
        day: date | datetime,
        history: Sequence[PeriodRecord],
        today: date | datetime | None = None,
    ) -> DayStatus:
        """Resolve the single display status of ``day``."""
        target = day_of(day)
        current = day_of(today) if today is not None else date.today()
        return resolve_status(
            in_actual=bool(self.is_date_in_actual_period(target, history)),
            in_predicted_period=self.is_date_in_predicted_period(target, history),
            in_predicted_pms=self.is_date_in_predicted_pms(target, history),
            is_today=target == current,
        )

    def classify_month(
        self,
        anchor: date | datetime,
        history: Sequence[PeriodRecord],
        today: date | datetime | None = None,
        first_weekday: int | None = None,
    ) -> list[CalendarDay | None]:
        """Classify every cell of the month containing ``anchor``.

        Blank leading cells stay None.  The prediction is computed once for
        the whole month.
        """
        if first_weekday is None:
            first_weekday = self._config.calendar.first_weekday
        current = day_of(today) if today is not None else date.today()
        windows = self._config.windows

        period_start = self._engine.next_predicted_period(history)
        pms_start = self._engine.next_predicted_pms(history)

        cells: list[CalendarDay | None] = []
        for cell in build_month_grid(anchor, first_weekday):
            if cell is None:
                cells.append(None)
                continue
            match = self.is_date_in_actual_period(cell, history)
            status = resolve_status(
                in_actual=bool(match),
                in_predicted_period=(
                    period_start is not None
                    and in_day_window(cell, period_start, windows.period_duration_days)
                ),
                in_predicted_pms=(
                    pms_start is not None
                    and in_day_window(cell, pms_start, windows.pms_duration_days)
                ),
                is_today=cell == current,
            )
            cells.append(CalendarDay(day=cell, status=status, records=match.records))

        logger.debug(
            "Classified %d cells for %s (predicted start %s)",
            len(cells), day_of(anchor).strftime("%Y-%m"), period_start,
        )
        return cells

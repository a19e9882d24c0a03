"""Reminder planning for the next predicted period.

Delivery is owned by the notification collaborator.  This module only
decides *what* should be scheduled: a reminder two days and one day before
the predicted start, plus the identifiers of previously scheduled
prediction reminders that must be cleared first.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo

from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.prediction import PredictionEngine
from src.cycle.records import PeriodRecord

logger = logging.getLogger("heriod.cycle.reminders")

REMINDER_CATEGORY = "PERIOD_PREDICTION"

_COPY = {
    1: ("Period Tomorrow", "Your period is predicted to start tomorrow. Time to prepare!"),
}


def reminder_id(offset_days: int) -> str:
    return f"period-prediction-{offset_days}day"


def _copy_for(offset_days: int) -> tuple[str, str]:
    if offset_days in _COPY:
        return _COPY[offset_days]
    return (
        "Period Coming Soon",
        f"Your period is predicted to start in {offset_days} days",
    )


@dataclass(frozen=True)
class Reminder:
    id: str
    title: str
    body: str
    trigger_at: datetime
    category: str = REMINDER_CATEGORY


@dataclass
class ReminderPlan:
    """What the notification collaborator should do.

    Attributes:
        predicted_date: Predicted period start the reminders refer to.
        clear_ids:      Pending reminder identifiers to remove first.
        reminders:      Reminders to schedule (only future triggers).
    """

    predicted_date: date | None = None
    clear_ids: list[str] = field(default_factory=list)
    reminders: list[Reminder] = field(default_factory=list)


def plan_prediction_reminders(
    history: Sequence[PeriodRecord],
    now: datetime | None = None,
    config: CycleConfig | None = None,
    engine: PredictionEngine | None = None,
    tz: tzinfo | None = None,
) -> ReminderPlan:
    """Plan the reminders for the next predicted period.

    Args:
        history: Logged periods, any order.
        now:     Reference time; reminders at or before it are skipped.
        config:  Cycle config (defaults to the global one).
        engine:  Prediction engine to reuse.
        tz:      Zone the trigger hour is read in.  Defaults to the zone of an
                 aware ``now``; with neither, triggers are naive local times.
                 A naive ``now`` is taken to be in ``tz``.

    Returns:
        A ReminderPlan.  Without a prediction it schedules nothing but still
        clears the previously scheduled prediction reminders.
    """
    config = config or (engine.config if engine else get_cycle_config())
    engine = engine or PredictionEngine(config)
    now = now or datetime.now(tz)
    zone = tz or now.tzinfo
    if zone is not None and now.tzinfo is None:
        now = now.replace(tzinfo=zone)
    rc = config.reminders

    plan = ReminderPlan(clear_ids=[reminder_id(offset) for offset in rc.offsets_days])
    predicted = engine.next_predicted_period(history)
    if predicted is None:
        logger.debug("No predicted period, clearing %d reminder(s)", len(plan.clear_ids))
        return plan
    plan.predicted_date = predicted

    for offset in rc.offsets_days:
        rid = reminder_id(offset)
        try:
            trigger_at = datetime.combine(predicted - timedelta(days=offset), time(hour=rc.trigger_hour))
        except OverflowError:
            logger.debug("Reminder %s falls outside the supported date range", rid)
            continue
        if zone is not None:
            trigger_at = trigger_at.replace(tzinfo=zone)
        if trigger_at <= now:
            logger.debug("Skipping reminder %s: trigger %s is not in the future", rid, trigger_at)
            continue
        title, body = _copy_for(offset)
        plan.reminders.append(Reminder(id=rid, title=title, body=body, trigger_at=trigger_at))

    return plan

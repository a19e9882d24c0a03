"""Stateless cycle endpoints: prediction, calendar month, day detail, reminders.

Each request carries the full period history.  Nothing is persisted.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from src.cycle.calendar_grid import shift_month, weekday_headers
from src.cycle.classifier import DateRangeClassifier
from src.cycle.config_loader import get_cycle_config
from src.cycle.records import day_of
from src.cycle.reminders import plan_prediction_reminders
from src.models.cycle import (
    CalendarCell,
    CalendarRead,
    CalendarRequest,
    DayRead,
    DayRequest,
    PeriodRead,
    PredictionRead,
    PredictionRequest,
    ReminderPlanRead,
    ReminderRead,
    ReminderRequest,
)

router = APIRouter(prefix="/cycle", tags=["cycle"])
logger = logging.getLogger("heriod.routers.cycle")


def get_classifier() -> DateRangeClassifier:
    return DateRangeClassifier(get_cycle_config())


Classifier = Annotated[DateRangeClassifier, Depends(get_classifier)]


@router.post("/prediction", response_model=PredictionRead)
async def predict(body: PredictionRequest, classifier: Classifier) -> Any:
    history = body.records()
    prediction = classifier.engine.summarize(history, as_of=body.today)
    logger.info(
        "Prediction for %d period(s): next start %s",
        len(history), prediction.predicted_period_start,
    )
    return PredictionRead.model_validate(prediction)


@router.post("/calendar", response_model=CalendarRead)
async def calendar_month(body: CalendarRequest, classifier: Classifier) -> Any:
    first_weekday = (
        body.first_weekday
        if body.first_weekday is not None
        else get_cycle_config().calendar.first_weekday
    )
    month = day_of(body.month)
    cells = classifier.classify_month(
        month, body.records(), today=body.today, first_weekday=first_weekday
    )
    return CalendarRead(
        month=month.strftime("%Y-%m"),
        previous_month=shift_month(month.replace(day=1), -1),
        next_month=shift_month(month.replace(day=1), 1),
        first_weekday=first_weekday,
        headers=weekday_headers(first_weekday),
        cells=[
            None
            if cell is None
            else CalendarCell(
                day=cell.day,
                status=cell.status,
                period_ids=[r.id for r in cell.records],
            )
            for cell in cells
        ],
    )


@router.post("/day", response_model=DayRead)
async def day_detail(body: DayRequest, classifier: Classifier) -> Any:
    history = body.records()
    match = classifier.is_date_in_actual_period(body.day, history)
    return DayRead(
        day=day_of(body.day),
        status=classifier.classify_day(body.day, history, today=body.today),
        periods=[PeriodRead.from_record(r) for r in match.records],
    )


@router.post("/reminders", response_model=ReminderPlanRead)
async def reminder_plan(body: ReminderRequest, classifier: Classifier) -> Any:
    plan = plan_prediction_reminders(body.records(), now=body.now, engine=classifier.engine)
    return ReminderPlanRead(
        predicted_date=plan.predicted_date,
        clear_ids=plan.clear_ids,
        reminders=[ReminderRead.model_validate(r) for r in plan.reminders],
    )

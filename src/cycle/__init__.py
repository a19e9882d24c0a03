"""Heriod cycle engine.

Predicts the next period and PMS window from logged periods and classifies
calendar days for rendering and reminders.  Pure and stateless: every call
takes the full history snapshot.

Modules:
    records        PeriodRecord, FlowLevel and Symptom with degrading parsers
    prediction     Average cycle length, next period / PMS start
    classifier     Day membership queries and display priority
    calendar_grid  Month grid of optional dates
    reminders      Reminder plan for the notification scheduler
    config_loader  Load/validate/hot-reload cycle_config.yaml
"""

from src.cycle.calendar_grid import build_month_grid, shift_month, weekday_headers
from src.cycle.classifier import (
    ActualPeriodMatch,
    CalendarDay,
    DateRangeClassifier,
    DayStatus,
)
from src.cycle.config_loader import CycleConfig, get_cycle_config
from src.cycle.prediction import CyclePrediction, PredictionEngine
from src.cycle.records import FlowLevel, PeriodRecord, Symptom
from src.cycle.reminders import Reminder, ReminderPlan, plan_prediction_reminders

__all__ = [
    "PeriodRecord",
    "FlowLevel",
    "Symptom",
    "PredictionEngine",
    "CyclePrediction",
    "DateRangeClassifier",
    "DayStatus",
    "ActualPeriodMatch",
    "CalendarDay",
    "build_month_grid",
    "weekday_headers",
    "shift_month",
    "plan_prediction_reminders",
    "ReminderPlan",
    "Reminder",
    "CycleConfig",
    "get_cycle_config",
]

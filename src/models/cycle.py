"""Pydantic request/response models for the cycle endpoints.

Requests carry the complete period history; nothing is stored server-side.
Flow and symptom values are accepted as raw strings and parsed leniently, so
values written by older clients never cause a 422.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Annotated

from pydantic import Field, StringConstraints

from src.cycle.classifier import DayStatus
from src.cycle.records import FlowLevel, PeriodRecord, Symptom
from src.models.base import HeriodBase

# Notes are stored verbatim
FreeText = Annotated[str, StringConstraints(strip_whitespace=False)]


# ---------- Periods ----------

class PeriodIn(HeriodBase):
    id: uuid.UUID | None = None
    start_date: date | datetime
    end_date: date | datetime | None = None
    flow: str = FlowLevel.medium.value
    symptoms: list[str] = Field(default_factory=list)
    notes: FreeText | None = None

    def to_record(self) -> PeriodRecord:
        return PeriodRecord.from_stored(
            start_date=self.start_date,
            end_date=self.end_date,
            flow=self.flow,
            symptoms=self.symptoms,
            notes=self.notes,
            id=self.id,
        )


class PeriodRead(HeriodBase):
    id: uuid.UUID
    start_date: date | datetime
    end_date: date | datetime | None = None
    flow: FlowLevel
    symptoms: list[Symptom]
    notes: FreeText = ""

    @classmethod
    def from_record(cls, record: PeriodRecord) -> PeriodRead:
        return cls(
            id=record.id,
            start_date=record.start_date,
            end_date=record.end_date,
            flow=record.flow,
            symptoms=sorted(record.symptoms, key=lambda s: s.value),
            notes=record.notes,
        )


class HistoryRequest(HeriodBase):
    periods: list[PeriodIn] = Field(default_factory=list)

    def records(self) -> list[PeriodRecord]:
        return [p.to_record() for p in self.periods]


# ---------- Prediction ----------

class PredictionRequest(HistoryRequest):
    today: date | datetime | None = None


class PredictionRead(HeriodBase):
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


# ---------- Calendar ----------

class CalendarRequest(HistoryRequest):
    month: date | datetime
    today: date | datetime | None = None
    first_weekday: int | None = Field(default=None, ge=0, le=6)


class CalendarCell(HeriodBase):
    day: date
    status: DayStatus
    period_ids: list[uuid.UUID] = Field(default_factory=list)


class CalendarRead(HeriodBase):
    month: str  # YYYY-MM
    previous_month: date | None = None
    next_month: date | None = None
    first_weekday: int
    headers: list[str]
    cells: list[CalendarCell | None]


class DayRequest(HistoryRequest):
    day: date | datetime
    today: date | datetime | None = None


class DayRead(HeriodBase):
    day: date
    status: DayStatus
    periods: list[PeriodRead] = Field(default_factory=list)


# ---------- Reminders ----------

class ReminderRequest(HistoryRequest):
    now: datetime | None = None


class ReminderRead(HeriodBase):
    id: str
    title: str
    body: str
    trigger_at: datetime
    category: str


class ReminderPlanRead(HeriodBase):
    predicted_date: date | None = None
    clear_ids: list[str]
    reminders: list[ReminderRead]

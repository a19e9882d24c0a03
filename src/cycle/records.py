"""Period records and the fixed flow / symptom enumerations.

Stored values come from an external persistence layer and may contain
labels written by older app versions.  Parsing never raises: an unknown
flow level becomes ``FlowLevel.medium`` and unknown symptom tags are dropped.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

logger = logging.getLogger("heriod.cycle.records")


def _normalize(raw: object) -> str:
    return str(raw).strip().lower().replace("-", "_").replace(" ", "_")


def day_of(value: date | datetime) -> date:
    """Strip time-of-day, returning the calendar day of ``value``."""
    if isinstance(value, datetime):
        return value.date()
    return value


# ---------- Enums ----------

class FlowLevel(str, Enum):
    light = "light"
    medium = "medium"
    heavy = "heavy"

    @property
    def label(self) -> str:
        return self.value.title()

    @classmethod
    def parse(cls, raw: object) -> FlowLevel:
        """Parse a stored flow value, falling back to ``medium``."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(_normalize(raw))
        except ValueError:
            logger.debug("Unrecognized flow level %r, using medium", raw)
            return cls.medium


class Symptom(str, Enum):
    cramps = "cramps"
    headache = "headache"
    back_pain = "back_pain"
    mood = "mood"
    fatigue = "fatigue"
    bloating = "bloating"

    @property
    def label(self) -> str:
        return _SYMPTOM_LABELS[self]

    @classmethod
    def parse(cls, raw: object) -> Symptom | None:
        """Parse a stored symptom tag.  Returns None for unknown tags."""
        if isinstance(raw, cls):
            return raw
        key = _normalize(raw)
        symptom = _SYMPTOM_ALIASES.get(key)
        if symptom is None:
            try:
                symptom = cls(key)
            except ValueError:
                logger.debug("Dropping unrecognized symptom tag %r", raw)
                return None
        return symptom

    @classmethod
    def parse_many(cls, raws: Iterable[object]) -> frozenset[Symptom]:
        parsed = (cls.parse(raw) for raw in raws)
        return frozenset(s for s in parsed if s is not None)


_SYMPTOM_LABELS = {
    Symptom.cramps: "Cramps",
    Symptom.headache: "Headache",
    Symptom.back_pain: "Back Pain",
    Symptom.mood: "Mood Changes",
    Symptom.fatigue: "Fatigue",
    Symptom.bloating: "Bloating",
}

# Display labels persisted by earlier releases
_SYMPTOM_ALIASES = {"mood_changes": Symptom.mood, "backpain": Symptom.back_pain}


# ---------- Records ----------

@dataclass(frozen=True)
class PeriodRecord:
    """A single logged period.

    Attributes:
        start_date: First day of the period (``date`` or ``datetime``).
        end_date:   Last day, or None while the period is ongoing / unknown.
        flow:       Flow intensity.
        symptoms:   Logged symptoms (set semantics).
        notes:      Free text, never interpreted.
        id:         Opaque unique identifier.
    """

    start_date: date | datetime
    end_date: date | datetime | None = None
    flow: FlowLevel = FlowLevel.medium
    symptoms: frozenset[Symptom] = field(default_factory=frozenset)
    notes: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @classmethod
    def from_stored(
        cls,
        start_date: date | datetime,
        end_date: date | datetime | None = None,
        flow: object = FlowLevel.medium,
        symptoms: Iterable[object] = (),
        notes: str | None = "",
        id: uuid.UUID | None = None,
    ) -> PeriodRecord:
        """Build a record from raw persisted values.

        Unknown flow values degrade to medium; unknown symptom tags are dropped.
        """
        return cls(
            start_date=start_date,
            end_date=end_date,
            flow=FlowLevel.parse(flow),
            symptoms=Symptom.parse_many(symptoms),
            notes=notes or "",
            id=id or uuid.uuid4(),
        )

    @property
    def start_day(self) -> date:
        return day_of(self.start_date)

    @property
    def last_day(self) -> date:
        """Last covered day; a record with no end date covers only its start day."""
        return day_of(self.end_date) if self.end_date is not None else self.start_day

    def covers(self, day: date | datetime) -> bool:
        """True if ``day`` falls inside [start_day, last_day], inclusive.

        An end before the start gives an empty range.
        """
        return self.start_day <= day_of(day) <= self.last_day

    def duration_days(self, as_of: date | datetime | None = None) -> int:
        """Whole days from start to end, or to ``as_of`` while ongoing."""
        if self.end_date is not None:
            end = day_of(self.end_date)
        else:
            end = day_of(as_of) if as_of is not None else date.today()
        return (end - self.start_day).days

"""Shared fixtures and record builders for cycle engine tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.cycle.classifier import DateRangeClassifier
from src.cycle.config_loader import CycleConfig, load_cycle_config
from src.cycle.prediction import PredictionEngine
from src.cycle.records import PeriodRecord

TEST_TODAY = date(2024, 2, 10)


def make_period(start: date, end: date | None = None, **kwargs) -> PeriodRecord:
    return PeriodRecord(start_date=start, end_date=end, **kwargs)


def build_history(first_start: date, gaps: list[int], length: int | None = 4) -> list[PeriodRecord]:
    """Build periods separated by ``gaps``, most recent first."""
    starts = [first_start]
    for gap in gaps:
        starts.append(starts[-1] + timedelta(days=gap))
    records = [
        make_period(s, s + timedelta(days=length) if length is not None else None)
        for s in starts
    ]
    return sorted(records, key=lambda r: r.start_day, reverse=True)


# ---------------------------------------------------------------------------
# Config / engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the real bundled cycle config."""
    return load_cycle_config()


@pytest.fixture
def engine(cycle_config: CycleConfig) -> PredictionEngine:
    return PredictionEngine(cycle_config)


@pytest.fixture
def classifier(cycle_config: CycleConfig) -> DateRangeClassifier:
    return DateRangeClassifier(cycle_config)


# ---------------------------------------------------------------------------
# History fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def two_period_history() -> list[PeriodRecord]:
    """Jan 1 and Jan 29 2024: one valid 28-day gap, most recent first."""
    return [
        make_period(date(2024, 1, 29), date(2024, 2, 2)),
        make_period(date(2024, 1, 1), date(2024, 1, 5)),
    ]


@pytest.fixture
def irregular_history() -> list[PeriodRecord]:
    """Gaps of 24, 31 and 26 days (mean 27)."""
    return build_history(date(2024, 1, 1), [24, 31, 26])

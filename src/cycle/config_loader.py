"""Load, validate, and hot-reload the Heriod cycle engine configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_cycle_config()`` to re-read from
disk after an edit, without a restart.

Usage::

    from src.cycle.config_loader import get_cycle_config

    config = get_cycle_config()
    config.prediction.default_cycle_length   # 28
    config.windows.period_duration_days      # 5
"""

from __future__ import annotations

import calendar
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger("heriod.cycle.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"

_WEEKDAYS = {name.lower(): index for index, name in enumerate(calendar.day_name)}


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PredictionConfig:
    """Cycle length averaging settings."""

    default_cycle_length: int = 28
    min_gap_days: int = 1   # exclusive
    max_gap_days: int = 59  # inclusive

    def accepts_gap(self, gap_days: int) -> bool:
        return self.min_gap_days < gap_days <= self.max_gap_days


@dataclass(frozen=True)
class WindowConfig:
    """Default lengths of the predicted period and PMS windows."""

    period_duration_days: int = 5
    pms_duration_days: int = 7
    pms_days_before: int = 7


@dataclass(frozen=True)
class CalendarConfig:
    """Month grid settings.

    ``first_weekday`` follows the :mod:`calendar` convention (Monday=0).
    """

    first_weekday: int = calendar.SUNDAY


@dataclass(frozen=True)
class ReminderConfig:
    """Prediction reminder settings."""

    offsets_days: tuple[int, ...] = (2, 1)
    trigger_hour: int = 9


@dataclass(frozen=True)
class CycleConfig:
    """Complete, validated cycle engine configuration.

    This is the single in-memory representation of cycle_config.yaml.
    The prediction engine, classifier, grid builder and reminder planner
    all read from this object.

    Attributes:
        version:     Config schema version string.
        prediction:  Cycle length averaging settings.
        windows:     Predicted period / PMS window lengths.
        calendar:    Month grid settings.
        reminders:   Prediction reminder settings.
    """

    version: str = "1.0"
    prediction: PredictionConfig = field(default_factory=PredictionConfig)
    windows: WindowConfig = field(default_factory=WindowConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    reminders: ReminderConfig = field(default_factory=ReminderConfig)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{path} must contain a mapping at the top level")
    return raw


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Every problem is collected first and reported in a single
    ConfigValidationError.  Missing sections fall back to defaults.

    Raises:
        ConfigValidationError: If any value is missing its expected type or range.
    """
    errors: list[str] = []

    def _section(name: str) -> dict:
        value = raw.get(name) or {}
        if not isinstance(value, dict):
            errors.append(f"'{name}' must be a mapping")
            return {}
        return value

    def _int(section: dict, key: str, section_name: str, default: int, minimum: int | None = None) -> int:
        value = section.get(key, default)
        if isinstance(value, bool):
            errors.append(f"{section_name}.{key} must be an integer, got {value!r}")
            return default
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{section_name}.{key} must be an integer, got {value!r}")
            return default
        if minimum is not None and number < minimum:
            errors.append(f"{section_name}.{key} = {number} is below the minimum of {minimum}")
        return number

    version = str(raw.get("version", "1.0"))

    # ── Prediction ──
    pr_raw = _section("prediction")
    prediction = PredictionConfig(
        default_cycle_length=_int(pr_raw, "default_cycle_length", "prediction", 28, minimum=1),
        min_gap_days=_int(pr_raw, "min_gap_days", "prediction", 1, minimum=0),
        max_gap_days=_int(pr_raw, "max_gap_days", "prediction", 59, minimum=1),
    )
    if prediction.min_gap_days >= prediction.max_gap_days:
        errors.append(
            f"prediction.min_gap_days ({prediction.min_gap_days}) must be below "
            f"prediction.max_gap_days ({prediction.max_gap_days})"
        )

    # ── Windows ──
    w_raw = _section("windows")
    windows = WindowConfig(
        period_duration_days=_int(w_raw, "period_duration_days", "windows", 5, minimum=1),
        pms_duration_days=_int(w_raw, "pms_duration_days", "windows", 7, minimum=1),
        pms_days_before=_int(w_raw, "pms_days_before", "windows", 7, minimum=0),
    )

    # ── Calendar ──
    cal_raw = _section("calendar")
    first_weekday_raw = cal_raw.get("first_weekday", "sunday")
    first_weekday = _WEEKDAYS.get(str(first_weekday_raw).strip().lower())
    if first_weekday is None:
        errors.append(
            f"calendar.first_weekday must be a weekday name, got {first_weekday_raw!r}"
        )
        first_weekday = calendar.SUNDAY

    # ── Reminders ──
    rem_raw = _section("reminders")
    offsets_raw = rem_raw.get("offsets_days", [2, 1])
    offsets: list[int] = []
    if not isinstance(offsets_raw, list):
        errors.append(f"reminders.offsets_days must be a list, got {offsets_raw!r}")
    else:
        for value in offsets_raw:
            if isinstance(value, bool):
                errors.append(f"reminders.offsets_days entries must be integers, got {value!r}")
                continue
            try:
                offset = int(value)
            except (TypeError, ValueError):
                errors.append(f"reminders.offsets_days entries must be integers, got {value!r}")
                continue
            if offset < 1:
                errors.append(f"reminders.offsets_days entry {offset} is below the minimum of 1")
            elif offset in offsets:
                # Reminder ids are derived from the offset
                errors.append(f"reminders.offsets_days entry {offset} is duplicated")
            else:
                offsets.append(offset)
    trigger_hour = _int(rem_raw, "trigger_hour", "reminders", 9, minimum=0)
    if trigger_hour > 23:
        errors.append(f"reminders.trigger_hour = {trigger_hour} is out of range [0, 23]")

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CycleConfig(
        version=version,
        prediction=prediction,
        windows=windows,
        calendar=CalendarConfig(first_weekday=first_weekday),
        reminders=ReminderConfig(offsets_days=tuple(offsets), trigger_hour=trigger_hour),
    )


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the cycle config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Return the global CycleConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_cycle_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Reload the cycle config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_cycle_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded cycle config: %s → %s", old_version, new_config.version)
    return new_config

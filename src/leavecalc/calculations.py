from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)


class LeaveCalculationError(ValueError):
    pass


class ParseError(LeaveCalculationError):
    pass


class InvalidRangeError(LeaveCalculationError):
    pass


class ConfigurationError(LeaveCalculationError):
    pass


class Weekday(str, Enum):
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @classmethod
    def of(cls, day: date) -> Weekday:
        # date.weekday(): Monday == 0
        return _WEEKDAYS_FROM_MONDAY[day.weekday()]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_WEEKDAYS_FROM_MONDAY = (
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
)


class DurationType(str, Enum):
    FULL_DAY = "full_day"
    FIRST_HALF = "first_half"
    SECOND_HALF = "second_half"
    SECOND_TO_FULL = "second_to_full"
    SECOND_TO_FIRST = "second_to_first"
    FULL_TO_FIRST = "full_to_first"

    @classmethod
    def _missing_(cls, value):
        # Unknown tags from older clients are read as a full day.
        logger.debug("Unknown duration type %r, using full_day", value)
        return cls.FULL_DAY


SINGLE_DAY_HALF_TYPES = frozenset({DurationType.FIRST_HALF, DurationType.SECOND_HALF})
STARTS_SECOND_HALF = frozenset({DurationType.SECOND_TO_FULL, DurationType.SECOND_TO_FIRST})
ENDS_FIRST_HALF = frozenset({DurationType.FULL_TO_FIRST, DurationType.SECOND_TO_FIRST})


@dataclass(frozen=True)
class DaySchedule:
    is_working_day: bool
    is_half_day: bool = False
    start_time: time | None = None  # informational
    end_time: time | None = None    # informational


@dataclass(frozen=True)
class WeeklySchedule:
    days: Mapping[Weekday, DaySchedule]

    def __post_init__(self) -> None:
        missing = self.missing_days()
        if missing:
            names = ", ".join(wd.value for wd in missing)
            raise ConfigurationError(f"Weekly schedule has no entry for {names}")

    def for_date(self, day: date) -> DaySchedule:
        return self.days[Weekday.of(day)]

    def missing_days(self) -> list[Weekday]:
        return [wd for wd in Weekday if wd not in self.days]


@dataclass(frozen=True)
class Holiday:
    date: date | datetime | str
    name: str
    type: str | None = None


@dataclass(frozen=True)
class LeaveRequest:
    from_date: date | str
    to_date: date | str
    duration_type: DurationType | str
    weekly_schedule: WeeklySchedule
    holidays: tuple[Holiday, ...] = ()
    exclude_holidays: bool = True
    exclude_non_working_days: bool = True


@dataclass(frozen=True)
class DayBreakdown:
    date: date
    weekday_name: str
    is_working_day: bool
    is_holiday: bool
    is_half_day: bool
    holiday_name: str | None
    leave_units: float


@dataclass(frozen=True)
class LeaveResult:
    total_calendar_days: int
    leave_units: float
    holiday_day_count: int = 0
    non_working_day_count: int = 0
    half_day_count: int = 0
    per_day_breakdown: tuple[DayBreakdown, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------

DEFAULT_START = time(9, 0)
DEFAULT_END = time(18, 0)


def working_day(*, half: bool = False) -> DaySchedule:
    end = time(13, 0) if half else DEFAULT_END
    return DaySchedule(is_working_day=True, is_half_day=half, start_time=DEFAULT_START, end_time=end)


def non_working_day() -> DaySchedule:
    return DaySchedule(is_working_day=False, start_time=DEFAULT_START, end_time=DEFAULT_END)


def default_weekly_schedule() -> WeeklySchedule:
    """Monday to Friday working, weekend off."""
    return WeeklySchedule(
        days={
            wd: non_working_day() if wd in (Weekday.SATURDAY, Weekday.SUNDAY) else working_day()
            for wd in Weekday
        }
    )


def merge_weekly_schedule(
    overrides: Mapping[Weekday | str, DaySchedule] | None,
    base: WeeklySchedule | None = None,
) -> WeeklySchedule:
    """
    Fill the weekdays an organization has not configured from `base`
    (the default schedule when omitted).
    """
    base = base or default_weekly_schedule()
    days = dict(base.days)
    for key, day_schedule in (overrides or {}).items():
        try:
            weekday = key if isinstance(key, Weekday) else Weekday(key.lower())
            days[weekday] = day_schedule
        except ValueError:
            raise ConfigurationError(f"Unknown weekday: {key!r}") from None
    return WeeklySchedule(days=days)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def parse_calendar_date(value: date | datetime | str) -> date:
    """
    Normalize a date-like to a calendar date.
    Time-of-day and zone are dropped, never converted.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if "T" in text or " " in text:
                return datetime.fromisoformat(text).date()
            return date.fromisoformat(text)
        except ValueError as exc:
            raise ParseError(f"Invalid date: {value!r}") from exc
    raise ParseError(f"Unsupported date value: {value!r}")


def iter_days(start: date, end: date) -> Iterable[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def _resolve_range(from_value: date | str, to_value: date | str) -> tuple[date, date]:
    start = parse_calendar_date(from_value)
    end = parse_calendar_date(to_value)
    if end < start:
        raise InvalidRangeError(f"to_date {end.isoformat()} is before from_date {start.isoformat()}")
    return start, end


# ---------------------------------------------------------------------------
# Holidays
# ---------------------------------------------------------------------------

def holidays_by_date(holidays: Iterable[Holiday]) -> dict[date, Holiday]:
    """
    Index holidays by calendar date. Entries with an unreadable date are
    skipped; the first entry wins when two share a date.
    """
    index: dict[date, Holiday] = {}
    for holiday in holidays:
        try:
            day = parse_calendar_date(holiday.date)
        except ParseError:
            logger.warning("Skipping holiday %r with invalid date %r", holiday.name, holiday.date)
            continue
        index.setdefault(day, holiday)
    return index


def filter_holidays(
    holidays: Iterable[Holiday],
    enabled_types: Iterable[str] | None,
) -> tuple[Holiday, ...]:
    """
    Keep holidays whose type is enabled. Untyped holidays are always kept;
    `enabled_types=None` keeps everything.
    """
    if enabled_types is None:
        return tuple(holidays)
    enabled = set(enabled_types)
    return tuple(h for h in holidays if h.type is None or h.type in enabled)


# ---------------------------------------------------------------------------
# Leave units
# ---------------------------------------------------------------------------
# Units are counted as integer halves (1 == half day, 2 == full day).

FULL = 2
HALF = 1


def _working_day_halves(
    duration: DurationType,
    *,
    inherent_half: bool,
    single_day: bool,
    first_day: bool,
    last_day: bool,
) -> int:
    scheduled = HALF if inherent_half else FULL

    if single_day:
        if duration in SINGLE_DAY_HALF_TYPES:
            return HALF
        return scheduled

    if first_day:
        if duration in STARTS_SECOND_HALF:
            return HALF
        return scheduled

    if last_day:
        if duration in ENDS_FIRST_HALF:
            return HALF
        return scheduled

    return scheduled


def calculate_leave(request: LeaveRequest) -> LeaveResult:
    """
    Count the leave units a request consumes, one breakdown entry per
    calendar day in [from_date, to_date].

    Per day, the first matching rule applies:
    - excluded holiday: 0
    - non-working weekday (excluded or not): 0
    - working day: 1, or 0.5 for a half-day weekday or a half-day
      boundary implied by the duration type.
    """
    start, end = _resolve_range(request.from_date, request.to_date)
    duration = DurationType(request.duration_type)
    schedule = request.weekly_schedule
    holidays = holidays_by_date(request.holidays)
    single_day = start == end

    breakdown: list[DayBreakdown] = []
    total_halves = 0
    holiday_days = 0
    non_working_days = 0
    half_days = 0

    for day in iter_days(start, end):
        day_schedule = schedule.for_date(day)
        holiday = holidays.get(day)
        halves = 0

        if request.exclude_holidays and holiday is not None:
            holiday_days += 1
        elif not day_schedule.is_working_day:
            if request.exclude_non_working_days:
                non_working_days += 1
        else:
            halves = _working_day_halves(
                duration,
                inherent_half=day_schedule.is_half_day,
                single_day=single_day,
                first_day=day == start,
                last_day=day == end,
            )
            if halves == HALF:
                half_days += 1

        total_halves += halves
        breakdown.append(
            DayBreakdown(
                date=day,
                weekday_name=Weekday.of(day).label,
                is_working_day=day_schedule.is_working_day,
                is_holiday=holiday is not None,
                is_half_day=day_schedule.is_half_day or halves == HALF,
                holiday_name=holiday.name if holiday else None,
                leave_units=halves / 2,
            )
        )

    return LeaveResult(
        total_calendar_days=len(breakdown),
        leave_units=total_halves / 2,
        holiday_day_count=holiday_days,
        non_working_day_count=non_working_days,
        half_day_count=half_days,
        per_day_breakdown=tuple(breakdown),
    )


def calculate_simple_leave(
    from_date: date | str,
    to_date: date | str,
    duration_type: DurationType | str,
) -> float:
    """
    Fallback without schedule or holidays:
    calendar days in the range, adjusted for half-day boundaries.
    """
    start, end = _resolve_range(from_date, to_date)
    duration = DurationType(duration_type)

    if start == end:
        return HALF / 2 if duration in SINGLE_DAY_HALF_TYPES else FULL / 2

    halves = ((end - start).days + 1) * FULL
    if duration in (DurationType.SECOND_TO_FULL, DurationType.FULL_TO_FIRST):
        halves -= HALF
    elif duration == DurationType.SECOND_TO_FIRST:
        halves -= FULL
    return halves / 2


def simple_leave_result(
    from_date: date | str,
    to_date: date | str,
    duration_type: DurationType | str,
) -> LeaveResult:
    """Wrap the fallback count in a result with no breakdown."""
    start, end = _resolve_range(from_date, to_date)
    return LeaveResult(
        total_calendar_days=(end - start).days + 1,
        leave_units=calculate_simple_leave(start, end, duration_type),
    )

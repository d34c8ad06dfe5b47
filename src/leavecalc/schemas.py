from __future__ import annotations

from datetime import date, time

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .calculations import (
    DaySchedule,
    DurationType,
    Holiday,
    LeaveResult,
    Weekday,
    WeeklySchedule,
    merge_weekly_schedule,
    parse_calendar_date,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DayScheduleIn(CamelModel):
    is_working_day: bool
    is_half_day: bool = False
    start_time: time | None = None
    end_time: time | None = None

    def to_facts(self) -> DaySchedule:
        return DaySchedule(
            is_working_day=self.is_working_day,
            is_half_day=self.is_half_day,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class HolidayIn(CamelModel):
    # Kept as text: a bad holiday date is skipped by the calculator, not rejected here.
    date: str | None = None
    name: str = ""
    type: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _stringify(cls, value):
        if value is None:
            return None
        if isinstance(value, date):
            return value.isoformat()
        return str(value)

    def to_facts(self) -> Holiday:
        return Holiday(date=self.date, name=self.name, type=self.type)


class LeaveCalculationIn(CamelModel):
    from_date: str
    to_date: str
    # Unknown tags are read as full_day by DurationType()
    duration_type: str = DurationType.FULL_DAY.value
    weekly_schedule: dict[Weekday, DayScheduleIn] | None = None
    holidays: list[HolidayIn] = Field(default_factory=list)
    exclude_holidays: bool | None = None
    exclude_non_working_days: bool | None = None
    enabled_holiday_types: list[str] | None = None
    use_fallback: bool = False

    @field_validator("weekly_schedule", mode="before")
    @classmethod
    def _lowercase_weekdays(cls, value):
        if isinstance(value, dict):
            return {key.lower() if isinstance(key, str) else key: day for key, day in value.items()}
        return value

    def schedule_facts(self) -> WeeklySchedule:
        overrides = {
            weekday: day.to_facts() for weekday, day in (self.weekly_schedule or {}).items()
        }
        return merge_weekly_schedule(overrides)


class SimpleLeaveIn(CamelModel):
    from_date: str
    to_date: str
    # Unknown tags are read as full_day by DurationType()
    duration_type: str = DurationType.FULL_DAY.value


class DayBreakdownOut(CamelModel):
    date: date
    weekday_name: str
    is_working_day: bool
    is_holiday: bool
    is_half_day: bool
    holiday_name: str | None = None
    leave_units_this_day: float


class LeaveCalculationOut(CamelModel):
    method: str
    from_date: date
    to_date: date
    duration_type: DurationType
    total_calendar_days: int
    leave_units: float
    holiday_day_count: int
    non_working_day_count: int
    half_day_count: int
    per_day_breakdown: list[DayBreakdownOut]

    @classmethod
    def from_result(
        cls,
        result: LeaveResult,
        *,
        method: str,
        from_date: str,
        to_date: str,
        duration_type: DurationType,
    ) -> LeaveCalculationOut:
        return cls(
            method=method,
            from_date=parse_calendar_date(from_date),
            to_date=parse_calendar_date(to_date),
            duration_type=duration_type,
            total_calendar_days=result.total_calendar_days,
            leave_units=result.leave_units,
            holiday_day_count=result.holiday_day_count,
            non_working_day_count=result.non_working_day_count,
            half_day_count=result.half_day_count,
            per_day_breakdown=[
                DayBreakdownOut(
                    date=entry.date,
                    weekday_name=entry.weekday_name,
                    is_working_day=entry.is_working_day,
                    is_holiday=entry.is_holiday,
                    is_half_day=entry.is_half_day,
                    holiday_name=entry.holiday_name,
                    leave_units_this_day=entry.leave_units,
                )
                for entry in result.per_day_breakdown
            ],
        )


class SimpleLeaveOut(CamelModel):
    leave_units: float

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from .calculations import (
    DurationType,
    LeaveCalculationError,
    LeaveRequest,
    calculate_leave,
    calculate_simple_leave,
    filter_holidays,
    simple_leave_result,
)
from .config import Settings, settings
from .schemas import LeaveCalculationIn, LeaveCalculationOut, SimpleLeaveIn, SimpleLeaveOut

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)


def build_leave_calculation(
    payload: LeaveCalculationIn,
    config: Settings = settings,
) -> LeaveCalculationOut:
    """
    Run the schedule-aware calculation, or the simple fallback when the
    caller has no organization schedule and asks for it.
    """
    duration = DurationType(payload.duration_type)

    if payload.weekly_schedule is None and payload.use_fallback:
        result = simple_leave_result(payload.from_date, payload.to_date, duration)
        method = "simple"
    else:
        exclude_holidays = payload.exclude_holidays
        if exclude_holidays is None:
            exclude_holidays = config.exclude_holidays_from_leave
        exclude_non_working = payload.exclude_non_working_days
        if exclude_non_working is None:
            exclude_non_working = config.exclude_weekends_from_leave

        holidays = filter_holidays(
            (h.to_facts() for h in payload.holidays),
            payload.enabled_holiday_types,
        )
        request = LeaveRequest(
            from_date=payload.from_date,
            to_date=payload.to_date,
            duration_type=duration,
            weekly_schedule=payload.schedule_facts(),
            holidays=holidays,
            exclude_holidays=exclude_holidays,
            exclude_non_working_days=exclude_non_working,
        )
        result = calculate_leave(request)
        method = "schedule"

    logger.debug(
        "Leave %s..%s (%s, %s): %s units",
        payload.from_date,
        payload.to_date,
        duration.value,
        method,
        result.leave_units,
    )
    return LeaveCalculationOut.from_result(
        result,
        method=method,
        from_date=payload.from_date,
        to_date=payload.to_date,
        duration_type=duration,
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/leave/calculate", response_model=LeaveCalculationOut)
def calculate_api(payload: LeaveCalculationIn):
    try:
        return build_leave_calculation(payload)
    except LeaveCalculationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/api/leave/calculate-simple", response_model=SimpleLeaveOut)
def calculate_simple_api(payload: SimpleLeaveIn):
    try:
        units = calculate_simple_leave(payload.from_date, payload.to_date, payload.duration_type)
    except LeaveCalculationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SimpleLeaveOut(leave_units=units)

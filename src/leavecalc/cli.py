from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path

from .calculations import (
    DurationType,
    Holiday,
    LeaveCalculationError,
    LeaveRequest,
    LeaveResult,
    calculate_leave,
    default_weekly_schedule,
)
from .config import settings

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")

logger = logging.getLogger(__name__)


def load_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def extract_holidays(payload) -> list[Holiday]:
    """
    Accept a list of {date, name, type} objects, a {"holidays": {...}}
    wrapper, or a bare {"YYYY-MM-DD": "name"} mapping.
    """
    if isinstance(payload, dict) and "holidays" in payload:
        payload = payload["holidays"]

    if isinstance(payload, list):
        return [
            Holiday(date=item["date"], name=str(item.get("name", "")), type=item.get("type"))
            for item in payload
            if isinstance(item, dict) and "date" in item
        ]
    if isinstance(payload, dict):
        return [
            Holiday(date=key, name=str(value))
            for key, value in payload.items()
            if isinstance(key, str) and DATE_PATTERN.match(key)
        ]
    return []


def load_holidays(paths: list[Path]) -> list[Holiday]:
    merged: list[Holiday] = []
    for path in paths:
        merged.extend(extract_holidays(load_json(path)))
    return merged


def format_result(result: LeaveResult) -> str:
    lines = []
    for entry in result.per_day_breakdown:
        notes = []
        if entry.is_holiday:
            notes.append(f"holiday: {entry.holiday_name}")
        if not entry.is_working_day:
            notes.append("non-working")
        if entry.is_half_day:
            notes.append("half day")
        suffix = f"  ({', '.join(notes)})" if notes else ""
        lines.append(f"{entry.date.isoformat()} {entry.weekday_name:<9} {entry.leave_units:>4}{suffix}")
    lines.append(
        f"Total: {result.leave_units} leave units over {result.total_calendar_days} calendar days "
        f"({result.holiday_day_count} holidays, {result.non_working_day_count} non-working, "
        f"{result.half_day_count} half days)"
    )
    return "\n".join(lines)


def result_to_dict(result: LeaveResult) -> dict:
    return {
        "totalCalendarDays": result.total_calendar_days,
        "leaveUnits": result.leave_units,
        "holidayDayCount": result.holiday_day_count,
        "nonWorkingDayCount": result.non_working_day_count,
        "halfDayCount": result.half_day_count,
        "perDayBreakdown": [
            {
                "date": entry.date.isoformat(),
                "weekdayName": entry.weekday_name,
                "isWorkingDay": entry.is_working_day,
                "isHoliday": entry.is_holiday,
                "isHalfDay": entry.is_half_day,
                "holidayName": entry.holiday_name,
                "leaveUnitsThisDay": entry.leave_units,
            }
            for entry in result.per_day_breakdown
        ],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the leave units consumed by a date range."
    )
    parser.add_argument("from_date", help="First day of leave (YYYY-MM-DD).")
    parser.add_argument("to_date", help="Last day of leave (YYYY-MM-DD).")
    parser.add_argument(
        "--duration",
        default=DurationType.FULL_DAY.value,
        help="Duration type: " + ", ".join(d.value for d in DurationType) + " (default: full_day).",
    )
    parser.add_argument(
        "--holidays",
        type=Path,
        action="append",
        default=[],
        help="Holiday JSON file (repeatable).",
    )
    parser.add_argument(
        "--include-holidays",
        action="store_true",
        help="Do not exclude holidays from the count.",
    )
    parser.add_argument(
        "--include-non-working",
        action="store_true",
        help="Do not count non-working days as excluded.",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level)

    try:
        holidays = load_holidays(args.holidays)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"error: cannot read holidays: {exc}", file=sys.stderr)
        return 2
    logger.info("Loaded %d holidays from %d file(s)", len(holidays), len(args.holidays))

    request = LeaveRequest(
        from_date=args.from_date,
        to_date=args.to_date,
        duration_type=DurationType(args.duration),
        weekly_schedule=default_weekly_schedule(),
        holidays=tuple(holidays),
        exclude_holidays=settings.exclude_holidays_from_leave and not args.include_holidays,
        exclude_non_working_days=settings.exclude_weekends_from_leave and not args.include_non_working,
    )
    try:
        result = calculate_leave(request)
    except LeaveCalculationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    else:
        print(format_result(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

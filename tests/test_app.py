from fastapi.testclient import TestClient

from leavecalc.app import app, build_leave_calculation
from leavecalc.config import Settings
from leavecalc.schemas import LeaveCalculationIn

client = TestClient(app)


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_calculate_returns_camel_case_breakdown():
    resp = client.post(
        "/api/leave/calculate",
        json={
            "fromDate": "2026-01-30",
            "toDate": "2026-02-02",
            "durationType": "full_to_first",
            "holidays": [{"date": "2026-02-02T00:00:00.000Z", "name": "Company Day"}],
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["method"] == "schedule"
    assert body["totalCalendarDays"] == 4
    assert body["leaveUnits"] == 1
    assert body["holidayDayCount"] == 1
    assert body["nonWorkingDayCount"] == 2
    assert len(body["perDayBreakdown"]) == 4
    last = body["perDayBreakdown"][-1]
    assert last["date"] == "2026-02-02"
    assert last["weekdayName"] == "Monday"
    assert last["isHoliday"] is True
    assert last["holidayName"] == "Company Day"
    assert last["leaveUnitsThisDay"] == 0


def test_partial_weekly_schedule_is_merged_with_defaults():
    resp = client.post(
        "/api/leave/calculate",
        json={
            "fromDate": "2026-01-30",
            "toDate": "2026-02-02",
            "weeklySchedule": {"saturday": {"isWorkingDay": True, "isHalfDay": True, "endTime": "13:00"}},
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["leaveUnits"] == 2.5
    assert body["halfDayCount"] == 1
    assert body["nonWorkingDayCount"] == 1


def test_fallback_without_schedule():
    resp = client.post(
        "/api/leave/calculate",
        json={
            "fromDate": "2026-01-30",
            "toDate": "2026-02-02",
            "durationType": "second_to_first",
            "useFallback": True,
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["method"] == "simple"
    assert body["leaveUnits"] == 3
    assert body["perDayBreakdown"] == []


def test_disabled_holiday_types_are_ignored():
    resp = client.post(
        "/api/leave/calculate",
        json={
            "fromDate": "2026-03-04",
            "toDate": "2026-03-04",
            "holidays": [{"date": "2026-03-04", "name": "Holi", "type": "optional"}],
            "enabledHolidayTypes": ["public"],
        },
    )
    assert resp.status_code == 200
    assert resp.json()["leaveUnits"] == 1


def test_unknown_duration_type_is_full_day():
    resp = client.post(
        "/api/leave/calculate",
        json={"fromDate": "2026-02-02", "toDate": "2026-02-02", "durationType": "whole_day"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["durationType"] == "full_day"
    assert body["leaveUnits"] == 1


def test_reversed_range_is_bad_request():
    resp = client.post(
        "/api/leave/calculate",
        json={"fromDate": "2026-02-04", "toDate": "2026-02-02"},
    )
    assert resp.status_code == 400
    assert "before" in resp.json()["detail"]


def test_unparsable_date_is_bad_request():
    resp = client.post(
        "/api/leave/calculate-simple",
        json={"fromDate": "yesterday", "toDate": "2026-02-02"},
    )
    assert resp.status_code == 400


def test_calculate_simple():
    resp = client.post(
        "/api/leave/calculate-simple",
        json={"fromDate": "2026-02-02", "toDate": "2026-02-06", "durationType": "second_to_full"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"leaveUnits": 4.5}


def test_policy_defaults_come_from_settings():
    payload = LeaveCalculationIn(from_date="2026-01-30", to_date="2026-02-02")

    counted = build_leave_calculation(payload, Settings(exclude_weekends_from_leave=False))
    assert counted.non_working_day_count == 0
    assert counted.leave_units == 2

    explicit = LeaveCalculationIn(
        from_date="2026-01-30", to_date="2026-02-02", exclude_non_working_days=True
    )
    excluded = build_leave_calculation(explicit, Settings(exclude_weekends_from_leave=False))
    assert excluded.non_working_day_count == 2


def test_unreadable_holiday_dates_are_skipped():
    resp = client.post(
        "/api/leave/calculate",
        json={
            "fromDate": "2026-02-02",
            "toDate": "2026-02-04",
            "holidays": [
                {"date": None},
                {"date": 12345, "name": "Numeric"},
                {"date": "2026-02-03", "name": "Company Day"},
            ],
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["holidayDayCount"] == 1
    assert body["leaveUnits"] == 2
    assert body["perDayBreakdown"][1]["holidayName"] == "Company Day"


def test_weekday_keys_are_case_insensitive():
    resp = client.post(
        "/api/leave/calculate",
        json={
            "fromDate": "2026-01-31",
            "toDate": "2026-01-31",
            "weeklySchedule": {"Saturday": {"isWorkingDay": True, "isHalfDay": True}},
        },
    )
    assert resp.status_code == 200
    assert resp.json()["leaveUnits"] == 0.5

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from conftest import InMemoryAttendance, make_record
from worktime.attendance.service import AttendanceService
from worktime.core.enums import AttendanceStatus
from worktime.core.exceptions import InvalidStateError, NotFoundError


def test_checkin_before_start_is_present(service, attendance_repo, fixed_now):
    rec = service.check_in("emp-1", now=fixed_now)

    assert rec.status == AttendanceStatus.PRESENT
    assert rec.check_in_time == fixed_now
    assert rec.check_out_time is None
    assert rec.work_hours is None
    assert attendance_repo.get_by_id(rec.attendance_id) == rec


def test_checkin_after_start_is_late(service):
    rec = service.check_in("emp-1", now=datetime(2026, 2, 2, 9, 15))

    assert rec.status == AttendanceStatus.LATE


def test_checkin_unknown_employee_raises(service):
    with pytest.raises(NotFoundError):
        service.check_in("ghost", now=datetime(2026, 2, 2, 8, 0))


def test_second_checkin_same_day_raises(service, fixed_now):
    service.check_in("emp-1", now=fixed_now)

    with pytest.raises(InvalidStateError):
        service.check_in("emp-1", now=fixed_now + timedelta(hours=3))


def test_checkin_next_day_and_other_employee_allowed(service, fixed_now):
    service.check_in("emp-1", now=fixed_now)
    service.check_in("emp-2", now=fixed_now)
    rec = service.check_in("emp-1", now=fixed_now + timedelta(days=1))

    assert rec.check_in_time.date() == date(2026, 2, 3)


def test_checkin_race_on_unique_key_is_invalid_state(employees, schedule, fixed_now):
    class RacingAttendance(InMemoryAttendance):
        def get_for_employee_in_window(self, employee_id, *, start, end):
            # The other request has not committed yet when we look.
            return None

    repo = RacingAttendance([make_record("emp-1", fixed_now - timedelta(minutes=1))])
    svc = AttendanceService(repo, employees, schedule)

    with pytest.raises(InvalidStateError):
        svc.check_in("emp-1", now=fixed_now)
    assert len(repo.all()) == 1


def test_early_checkout_demotes_present_to_half_day(service, attendance_repo):
    service.check_in("emp-1", now=datetime(2026, 2, 2, 8, 50))
    rec = service.check_out("emp-1", now=datetime(2026, 2, 2, 17, 30))

    assert rec.status == AttendanceStatus.HALF_DAY
    assert rec.work_hours == pytest.approx(8.67)
    assert rec.check_out_time == datetime(2026, 2, 2, 17, 30)
    assert attendance_repo.get_by_id(rec.attendance_id).status == AttendanceStatus.HALF_DAY


def test_late_checkin_stays_late_after_checkout(service):
    service.check_in("emp-1", now=datetime(2026, 2, 2, 9, 15))
    rec = service.check_out("emp-1", now=datetime(2026, 2, 2, 19, 0))

    assert rec.status == AttendanceStatus.LATE
    assert rec.work_hours == pytest.approx(9.75)


def test_late_checkin_early_checkout_stays_late(service):
    service.check_in("emp-1", now=datetime(2026, 2, 2, 9, 30))
    rec = service.check_out("emp-1", now=datetime(2026, 2, 2, 12, 0))

    assert rec.status == AttendanceStatus.LATE
    assert rec.work_hours == pytest.approx(2.5)


def test_full_day_checkout_keeps_present(service):
    service.check_in("emp-1", now=datetime(2026, 2, 2, 8, 0))
    rec = service.check_out("emp-1", now=datetime(2026, 2, 2, 18, 0))

    assert rec.status == AttendanceStatus.PRESENT
    assert rec.work_hours == pytest.approx(10.0)


def test_work_hours_round_to_two_decimals(service):
    service.check_in("emp-1", now=datetime(2026, 2, 2, 9, 0, 0))
    # 20 minutes = 0.3333... hours
    rec = service.check_out("emp-1", now=datetime(2026, 2, 2, 9, 20, 0))

    assert rec.work_hours == 0.33


def test_checkout_without_checkin_raises(service, fixed_now):
    with pytest.raises(InvalidStateError):
        service.check_out("emp-1", now=fixed_now)


def test_checkout_twice_raises(service):
    service.check_in("emp-1", now=datetime(2026, 2, 2, 8, 0))
    service.check_out("emp-1", now=datetime(2026, 2, 2, 18, 0))

    with pytest.raises(InvalidStateError):
        service.check_out("emp-1", now=datetime(2026, 2, 2, 18, 5))


def test_checkout_returns_stored_record(service, attendance_repo):
    service.check_in("emp-1", now=datetime(2026, 2, 2, 8, 0))
    rec = service.check_out("emp-1", now=datetime(2026, 2, 2, 18, 0))

    assert rec == attendance_repo.get_by_id(rec.attendance_id)
    assert rec.updated_at == datetime(2026, 2, 2, 18, 0)


@pytest.mark.parametrize("checkout_at", [datetime(2026, 2, 2, 9, 0), datetime(2026, 2, 2, 8, 59)])
def test_checkout_not_after_checkin_raises(service, attendance_repo, checkout_at):
    rec = service.check_in("emp-1", now=datetime(2026, 2, 2, 9, 0))

    with pytest.raises(InvalidStateError):
        service.check_out("emp-1", now=checkout_at)

    stored = attendance_repo.get_by_id(rec.attendance_id)
    assert stored.check_out_time is None
    assert stored.work_hours is None


def test_checkout_unknown_employee_raises(service):
    with pytest.raises(NotFoundError):
        service.check_out("ghost", now=datetime(2026, 2, 2, 18, 0))


def test_checkout_yesterdays_open_record_is_not_today(service):
    service.check_in("emp-1", now=datetime(2026, 2, 1, 9, 0))

    with pytest.raises(InvalidStateError):
        service.check_out("emp-1", now=datetime(2026, 2, 2, 9, 0))


def test_concurrent_checkout_loses_conditional_update(service, attendance_repo):
    service.check_in("emp-1", now=datetime(2026, 2, 2, 8, 0))
    attendance_repo.steal_checkout = True

    with pytest.raises(InvalidStateError):
        service.check_out("emp-1", now=datetime(2026, 2, 2, 18, 0))


def _seed_days(repo, employee_id: str, count: int, first: datetime):
    for i in range(count):
        repo.save(make_record(employee_id, first + timedelta(days=i)))


def test_list_second_page(service, attendance_repo):
    _seed_days(attendance_repo, "emp-1", 15, datetime(2026, 1, 1, 9, 0))

    page = service.list_attendance("emp-1", page=2, limit=10)

    assert len(page.data) == 5
    assert page.meta.total == 15
    assert page.meta.page == 2
    assert page.meta.limit == 10
    assert page.meta.total_pages == 2


def test_list_newest_first(service, attendance_repo):
    _seed_days(attendance_repo, "emp-1", 3, datetime(2026, 1, 1, 9, 0))

    page = service.list_attendance("emp-1")

    times = [r.check_in_time for r in page.data]
    assert times == sorted(times, reverse=True)


def test_list_date_filter_includes_whole_end_day(service, attendance_repo):
    _seed_days(attendance_repo, "emp-1", 10, datetime(2026, 1, 1, 23, 30))
    _seed_days(attendance_repo, "emp-2", 10, datetime(2026, 1, 1, 9, 0))

    page = service.list_attendance("emp-1", start_date=date(2026, 1, 3), end_date=date(2026, 1, 5))

    assert [r.check_in_time.day for r in page.data] == [5, 4, 3]
    assert page.meta.total == 3
    assert page.meta.total_pages == 1


def test_list_single_date_bound_is_ignored(service, attendance_repo):
    _seed_days(attendance_repo, "emp-1", 4, datetime(2026, 1, 1, 9, 0))

    page = service.list_attendance("emp-1", start_date=date(2026, 1, 3))

    assert page.meta.total == 4


def test_list_empty_range(service):
    page = service.list_attendance("emp-1", start_date=date(2030, 1, 1), end_date=date(2030, 1, 31))

    assert page.data == []
    assert page.meta.total == 0
    assert page.meta.total_pages == 0
    assert page.to_dict() == {"data": [], "meta": {"total": 0, "page": 1, "limit": 10, "totalPages": 0}}


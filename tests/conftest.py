from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from worktime.attendance.model import AttendanceRecord, WorkHoursDay
from worktime.attendance.service import AttendanceService
from worktime.common.datetime_utils import round_half_up
from worktime.core.enums import AttendanceStatus
from worktime.core.exceptions import DuplicateRecordError
from worktime.employees.model import Employee
from worktime.reports.service import AttendanceStatsService
from worktime.schedule.model import WorkSchedule


@dataclass
class InMemoryEmployees:
    employees: dict[str, Employee]

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def exists(self, employee_id: str) -> bool:
        return employee_id in self.employees


class InMemoryAttendance:
    """Attendance store with the same (employee, day) unique key as MySQL."""

    def __init__(self, records: Optional[list[AttendanceRecord]] = None):
        self._by_id: dict[str, AttendanceRecord] = {}
        self.steal_checkout = False
        for r in records or []:
            self._by_id[r.attendance_id] = r

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_id.values())

    def _check_unique(self, record: AttendanceRecord) -> None:
        for other in self._by_id.values():
            if (
                other.attendance_id != record.attendance_id
                and other.employee_id == record.employee_id
                and other.check_in_time.date() == record.check_in_time.date()
            ):
                raise DuplicateRecordError("Duplicate entry for uq_attendance_employee_day")

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def get_for_employee_in_window(self, employee_id: str, *, start: datetime, end: datetime):
        for r in self._by_id.values():
            if r.employee_id == employee_id and start <= r.check_in_time < end:
                return r
        return None

    def find_and_count(self, *, employee_id, start=None, end=None, offset=0, limit=10):
        items = [r for r in self._by_id.values() if r.employee_id == employee_id]
        if start is not None and end is not None:
            items = [r for r in items if start <= r.check_in_time <= end]
        items.sort(key=lambda r: r.check_in_time, reverse=True)
        return items[offset : offset + limit], len(items)

    def find_in_window(self, *, start, end, employee_id=None):
        items = [r for r in self._by_id.values() if start <= r.check_in_time <= end]
        if employee_id is not None:
            items = [r for r in items if r.employee_id == employee_id]
        return sorted(items, key=lambda r: r.check_in_time)

    def create_checkin(self, *, employee_id, check_in_time, status, note=None) -> AttendanceRecord:
        rec = AttendanceRecord(
            attendance_id=str(uuid.uuid4()),
            employee_id=employee_id,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
            note=note,
            created_at=check_in_time,
            updated_at=check_in_time,
        )
        self._check_unique(rec)
        self._by_id[rec.attendance_id] = rec
        return rec

    def update_checkout(self, *, attendance_id, check_out_time, status, work_hours) -> bool:
        rec = self._by_id.get(attendance_id)
        if self.steal_checkout and rec is not None:
            # Simulates another request checking out between our read and write.
            rec = replace(rec, check_out_time=check_out_time)
            self._by_id[attendance_id] = rec
        if rec is None or rec.check_out_time is not None:
            return False
        self._by_id[attendance_id] = replace(
            rec, check_out_time=check_out_time, status=status, work_hours=work_hours, updated_at=check_out_time
        )
        return True

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        self._check_unique(record)
        self._by_id[record.attendance_id] = record
        return record

    def work_hours_by_day(self, *, start, end, employee_id=None):
        grouped: dict[date, list[float]] = {}
        for r in self.find_in_window(start=start, end=end, employee_id=employee_id):
            if r.check_out_time is None:
                continue
            grouped.setdefault(r.check_in_time.date(), []).append(r.work_hours or 0.0)
        return [
            WorkHoursDay(
                work_date=d,
                avg_work_hours=round_half_up(sum(hours) / len(hours)),
                max_work_hours=max(hours),
                min_work_hours=min(hours),
            )
            for d, hours in sorted(grouped.items())
        ]


def make_record(
    employee_id: str,
    check_in: datetime,
    *,
    check_out: Optional[datetime] = None,
    status: AttendanceStatus = AttendanceStatus.PRESENT,
    work_hours: Optional[float] = None,
    note: Optional[str] = None,
) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(uuid.uuid4()),
        employee_id=employee_id,
        check_in_time=check_in,
        check_out_time=check_out,
        status=status,
        work_hours=work_hours,
        note=note,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 50, 0)


@pytest.fixture
def schedule() -> WorkSchedule:
    return WorkSchedule(start_time=time(9, 0), end_time=time(18, 0))


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        {
            "emp-1": Employee(employee_id="emp-1", full_name="Alice Kim"),
            "emp-2": Employee(employee_id="emp-2", full_name="Bora Lee"),
        }
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def service(attendance_repo, employees, schedule) -> AttendanceService:
    return AttendanceService(attendance_repo, employees, schedule)


@pytest.fixture
def stats_service(attendance_repo) -> AttendanceStatsService:
    return AttendanceStatsService(attendance_repo)

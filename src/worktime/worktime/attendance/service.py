from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import (
    day_window,
    end_of_day,
    hours_between,
    now_local,
    parse_iso_datetime,
    start_of_day,
)
from ..common.validators import parse_status
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ..core.exceptions import DuplicateRecordError, InvalidStateError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..schedule.model import WorkSchedule
from .factory import AttendanceStrategyFactory
from .model import AttendancePage, AttendanceRecord, AttendanceUpdate, PageMeta
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return parse_iso_datetime(str(value))


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        schedule: WorkSchedule,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._schedule = schedule
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def schedule(self) -> WorkSchedule:
        return self._schedule

    def _require_employee(self, employee_id: str) -> None:
        if not self._employees.exists(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")

    def _today_record(self, employee_id: str, now: datetime) -> Optional[AttendanceRecord]:
        start, end = day_window(now)
        return self._attendance.get_for_employee_in_window(employee_id, start=start, end=end)

    def check_in(self, employee_id: str, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        self._require_employee(employee_id)

        if self._today_record(employee_id, now):
            logger.warning("Duplicate check-in rejected for employee %s", employee_id)
            raise InvalidStateError("Already checked in today")

        status = self._factory.decide_checkin_status(now=now, schedule=self._schedule)
        try:
            record = self._attendance.create_checkin(employee_id=employee_id, check_in_time=now, status=status)
        except DuplicateRecordError:
            # A concurrent check-in won the unique key.
            logger.warning("Concurrent check-in rejected for employee %s", employee_id)
            raise InvalidStateError("Already checked in today") from None

        logger.info("Employee %s checked in at %s (%s)", employee_id, now.isoformat(), status.value)
        return record

    def check_out(self, employee_id: str, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        self._require_employee(employee_id)

        record = self._today_record(employee_id, now)
        if not record:
            raise InvalidStateError("No check-in today")
        if record.is_checked_out:
            raise InvalidStateError("Already checked out")
        if now <= record.check_in_time:
            raise InvalidStateError("Check-out must be after check-in")

        status = self._factory.decide_checkout_status(
            now=now, schedule=self._schedule, current_status=record.status
        )
        work_hours = hours_between(record.check_in_time, now)

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            status=status,
            work_hours=work_hours,
        )
        if not updated:
            logger.warning("Concurrent check-out rejected for employee %s", employee_id)
            raise InvalidStateError("Already checked out")

        logger.info("Employee %s checked out at %s (%.2fh, %s)", employee_id, now.isoformat(), work_hours, status.value)
        return self._attendance.get_by_id(record.attendance_id)

    def list_attendance(
        self,
        employee_id: str,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> AttendancePage:
        start = end = None
        if start_date and end_date:
            start, end = start_of_day(start_date), end_of_day(end_date)

        rows, total = self._attendance.find_and_count(
            employee_id=employee_id,
            start=start,
            end=end,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return AttendancePage(data=list(rows), meta=PageMeta.build(total=total, page=page, limit=limit))

    def update_attendance(self, attendance_id: str, patch: AttendanceUpdate) -> AttendanceRecord:
        """Administrative edit.

        A new check-in time without an explicit status re-derives the status
        from that check-in. Work hours follow the timestamps whenever either
        one is edited.
        """
        existing = self._attendance.get_by_id(attendance_id)
        if not existing:
            raise NotFoundError(f"Attendance record {attendance_id} not found")

        merged = existing
        if patch.note is not None:
            merged = replace(merged, note=patch.note)
        if patch.check_in_time is not None:
            merged = replace(merged, check_in_time=_as_datetime(patch.check_in_time))
        if patch.check_out_time is not None:
            merged = replace(merged, check_out_time=_as_datetime(patch.check_out_time))

        if patch.status is not None:
            merged = replace(merged, status=parse_status(patch.status))
        elif patch.check_in_time is not None:
            merged = replace(
                merged,
                status=self._factory.decide_checkin_status(now=merged.check_in_time, schedule=self._schedule),
            )

        if merged.check_out_time is not None and merged.check_out_time <= merged.check_in_time:
            raise ValidationError("Check-out time must be after check-in time")

        if patch.check_in_time is not None or patch.check_out_time is not None:
            work_hours = (
                hours_between(merged.check_in_time, merged.check_out_time) if merged.check_out_time else None
            )
            merged = replace(merged, work_hours=work_hours)

        try:
            saved = self._attendance.save(merged)
        except DuplicateRecordError:
            raise InvalidStateError("Employee already has an attendance record on that day") from None

        logger.info("Attendance %s updated by administrator (%s)", attendance_id, saved.status.value)
        return saved

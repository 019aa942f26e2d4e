from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, WorkHoursDay


class AttendanceRepository(Protocol):
    """Durable store for attendance records.

    Implementations must reject a second record for the same employee and
    calendar day with DuplicateRecordError (a unique key, not a prior read).
    """

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_in_window(
        self, employee_id: str, *, start: datetime, end: datetime
    ) -> Optional[AttendanceRecord]:
        """Record with check_in_time in the half-open window [start, end)."""

        raise NotImplementedError

    def find_and_count(
        self,
        *,
        employee_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """Page of records (newest check-in first) and the total match count.

        The optional window is inclusive on both ends.
        """

        raise NotImplementedError

    def find_in_window(
        self, *, start: datetime, end: datetime, employee_id: Optional[str] = None
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: str,
        check_in_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: str,
        check_out_time: datetime,
        status: AttendanceStatus,
        work_hours: float,
    ) -> bool:
        """Set the check-out only if the record has none yet.

        Returns False when nothing was updated (already checked out).
        """

        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        """Administrative overwrite of every mutable field."""

        raise NotImplementedError

    def work_hours_by_day(
        self, *, start: datetime, end: datetime, employee_id: Optional[str] = None
    ) -> Sequence[WorkHoursDay]:
        """avg/max/min work hours per check-in date, completed records only."""

        raise NotImplementedError

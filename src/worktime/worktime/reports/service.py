from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..attendance.model import WorkHoursDay
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import end_of_day, format_clock, mean_instant, now_local, round_half_up, start_of_day
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatsReport:
    total_days: int
    present_days: int
    late_days: int
    half_days: int
    absent_days: int
    total_work_hours: float
    avg_work_hours: float
    avg_check_in_time: Optional[str]
    avg_check_out_time: Optional[str]
    work_hours_stats: list[WorkHoursDay] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "lateDays": self.late_days,
            "halfDays": self.half_days,
            "absentDays": self.absent_days,
            "totalWorkHours": self.total_work_hours,
            "avgWorkHours": self.avg_work_hours,
            "avgCheckInTime": self.avg_check_in_time,
            "avgCheckOutTime": self.avg_check_out_time,
            "workHoursStats": [d.to_dict() for d in self.work_hours_stats],
        }


class AttendanceStatsService:
    """Summary statistics over a date range.

    Reads the window once and aggregates in memory; per-day work-hour spread
    comes from the store's grouped query. When ``employee_id`` is given both
    reads are narrowed to that employee.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def get_stats(
        self,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        employee_id: str | None = None,
        today: date | None = None,
    ) -> StatsReport:
        if not start_date or not end_date:
            start_date = end_date = today or now_local().date()

        start, end = start_of_day(start_date), end_of_day(end_date)
        records = list(self._attendance.find_in_window(start=start, end=end, employee_id=employee_id))

        total_days = len(records)
        by_status = Counter(r.status for r in records)
        total_work_hours = round_half_up(sum(r.work_hours for r in records if r.work_hours is not None))
        avg_work_hours = round_half_up(total_work_hours / total_days) if total_days else 0.0

        check_ins = [r.check_in_time for r in records]
        check_outs = [r.check_out_time for r in records if r.check_out_time is not None]

        work_hours_stats = list(self._attendance.work_hours_by_day(start=start, end=end, employee_id=employee_id))

        return StatsReport(
            total_days=total_days,
            present_days=by_status[AttendanceStatus.PRESENT],
            late_days=by_status[AttendanceStatus.LATE],
            half_days=by_status[AttendanceStatus.HALF_DAY],
            absent_days=by_status[AttendanceStatus.ABSENT],
            total_work_hours=total_work_hours,
            avg_work_hours=avg_work_hours,
            avg_check_in_time=format_clock(mean_instant(check_ins)),
            avg_check_out_time=format_clock(mean_instant(check_outs)),
            work_hours_stats=work_hours_stats,
        )

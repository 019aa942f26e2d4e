from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...schedule.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision


class EarlyLeaveStrategy(AttendanceStrategy):
    """Early check-out of a PRESENT day, which counts as a half day."""

    def decide_checkin(self, *, now: datetime, schedule: WorkSchedule) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, now: datetime, schedule: WorkSchedule, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY)

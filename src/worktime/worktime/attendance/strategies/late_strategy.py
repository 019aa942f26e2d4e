from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...schedule.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, now: datetime, schedule: WorkSchedule) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)

    def decide_checkout(self, *, now: datetime, schedule: WorkSchedule, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)

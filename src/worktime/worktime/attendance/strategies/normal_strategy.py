from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...schedule.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in; check-out keeps whatever status the day already has."""

    def decide_checkin(self, *, now: datetime, schedule: WorkSchedule) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, now: datetime, schedule: WorkSchedule, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)

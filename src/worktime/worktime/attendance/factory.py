from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceStatus
from ..schedule.model import WorkSchedule
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, schedule: WorkSchedule) -> AttendanceStrategy:
        if now > schedule.late_after(now):
            return LateStrategy()
        return NormalStrategy()

    def for_checkout(self, *, now: datetime, schedule: WorkSchedule, current_status: AttendanceStatus) -> AttendanceStrategy:
        # Only a PRESENT day can be demoted; LATE and admin-set statuses stay.
        if now < schedule.work_end_on(now) and current_status == AttendanceStatus.PRESENT:
            return EarlyLeaveStrategy()
        return NormalStrategy()

    def decide_checkin_status(self, *, now: datetime, schedule: WorkSchedule) -> AttendanceStatus:
        strategy = self.for_checkin(now=now, schedule=schedule)
        return strategy.decide_checkin(now=now, schedule=schedule).status

    def decide_checkout_status(
        self, *, now: datetime, schedule: WorkSchedule, current_status: AttendanceStatus
    ) -> AttendanceStatus:
        strategy = self.for_checkout(now=now, schedule=schedule, current_status=current_status)
        return strategy.decide_checkout(now=now, schedule=schedule, current=current_status).status

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..common.datetime_utils import at_clock_time, parse_clock_time
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_WORK_END, DEFAULT_WORK_START
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class WorkSchedule:
    """Deployment-wide working hours used to derive attendance status."""

    start_time: time
    end_time: time
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES

    def __post_init__(self) -> None:
        if self.end_time <= self.start_time:
            raise ValidationError("Work end must be after work start")
        if self.grace_minutes < 0:
            raise ValidationError("Late grace minutes must not be negative")

    @classmethod
    def from_settings(cls, settings) -> "WorkSchedule":
        return cls(
            start_time=parse_clock_time(str(getattr(settings, "WORK_START", DEFAULT_WORK_START))),
            end_time=parse_clock_time(str(getattr(settings, "WORK_END", DEFAULT_WORK_END))),
            grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        )

    def work_start_on(self, day: date | datetime) -> datetime:
        return at_clock_time(day, self.start_time)

    def late_after(self, day: date | datetime) -> datetime:
        """Check-ins strictly after this instant are LATE."""
        return self.work_start_on(day) + timedelta(minutes=self.grace_minutes)

    def work_end_on(self, day: date | datetime) -> datetime:
        return at_clock_time(day, self.end_time)

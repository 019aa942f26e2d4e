from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from ..core.enums import AttendanceStatus


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="milliseconds") if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: str
    employee_id: str
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    work_hours: Optional[float] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employeeId": self.employee_id,
            "checkInTime": _iso(self.check_in_time),
            "checkOutTime": _iso(self.check_out_time),
            "status": self.status.value,
            "workHours": self.work_hours,
            "note": self.note,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class AttendanceUpdate:
    """Partial administrative edit; None means "leave unchanged".

    Timestamps and status may arrive as text from the API and are parsed by
    the service.
    """

    check_in_time: Union[datetime, str, None] = None
    check_out_time: Union[datetime, str, None] = None
    status: Union[AttendanceStatus, str, None] = None
    note: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "AttendanceUpdate":
        return cls(
            check_in_time=payload.get("checkInTime"),
            check_out_time=payload.get("checkOutTime"),
            status=payload.get("status"),
            note=payload.get("note"),
        )


@dataclass(frozen=True)
class PageMeta:
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, *, total: int, page: int, limit: int) -> "PageMeta":
        return cls(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit) if limit else 0)


@dataclass(frozen=True)
class AttendancePage:
    data: list[AttendanceRecord] = field(default_factory=list)
    meta: PageMeta = field(default_factory=lambda: PageMeta(total=0, page=1, limit=10, total_pages=0))

    def to_dict(self) -> dict:
        return {
            "data": [r.to_dict() for r in self.data],
            "meta": {
                "total": self.meta.total,
                "page": self.meta.page,
                "limit": self.meta.limit,
                "totalPages": self.meta.total_pages,
            },
        }


@dataclass(frozen=True)
class WorkHoursDay:
    """Read-model: work-hour spread of completed records on one date."""

    work_date: date
    avg_work_hours: float
    max_work_hours: float
    min_work_hours: float

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "avgWorkHours": self.avg_work_hours,
            "maxWorkHours": self.max_work_hours,
            "minWorkHours": self.min_work_hours,
        }

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import round_half_up
from ..core.enums import AttendanceStatus
from ..core.exceptions import StoreFailureError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, WorkHoursDay
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, check_in_time, check_out_time, status,
    work_hours, note, created_at, updated_at
"""


def _hours(value: Any) -> Optional[float]:
    # DECIMAL columns come back as decimal.Decimal
    return float(value) if value is not None else None


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(r["attendance_id"]),
        employee_id=str(r["employee_id"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        work_hours=_hours(r.get("work_hours")),
        note=r.get("note"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (str(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_in_window(
        self, employee_id: str, *, start: datetime, end: datetime
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND check_in_time >= %s AND check_in_time < %s
                ORDER BY check_in_time ASC
                LIMIT 1
                """,
                (str(employee_id), start, end),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_and_count(
        self,
        *,
        employee_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        clauses = ["employee_id=%s"]
        params: list[object] = [str(employee_id)]
        if start is not None and end is not None:
            clauses.append("check_in_time BETWEEN %s AND %s")
            params.extend([start, end])
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records WHERE {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY check_in_time DESC
                LIMIT %s OFFSET %s
                """,
                (*params, int(limit), int(offset)),
            )
            return [_to_record(r) for r in fetchall(cur)], total

    def find_in_window(
        self, *, start: datetime, end: datetime, employee_id: Optional[str] = None
    ) -> Sequence[AttendanceRecord]:
        clauses = ["check_in_time BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(str(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY check_in_time ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: str,
        check_in_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        attendance_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(attendance_id, employee_id, check_in_time, status, note)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (attendance_id, str(employee_id), check_in_time, status.value, note),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            if not r:
                raise StoreFailureError(f"Inserted attendance {attendance_id} could not be read back")
            return _to_record(r)

    def update_checkout(
        self,
        *,
        attendance_id: str,
        check_out_time: datetime,
        status: AttendanceStatus,
        work_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s, work_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, status.value, work_hours, str(attendance_id)),
            )
            return cur.rowcount > 0

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, status=%s, work_hours=%s, note=%s
                WHERE attendance_id=%s
                """,
                (
                    record.check_in_time,
                    record.check_out_time,
                    record.status.value,
                    record.work_hours,
                    record.note,
                    record.attendance_id,
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (record.attendance_id,))
            r = fetchone(cur)
            if not r:
                raise StoreFailureError(f"Attendance {record.attendance_id} vanished during update")
            return _to_record(r)

    def work_hours_by_day(
        self, *, start: datetime, end: datetime, employee_id: Optional[str] = None
    ) -> Sequence[WorkHoursDay]:
        clauses = ["check_in_time BETWEEN %s AND %s", "check_out_time IS NOT NULL"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(str(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    DATE(check_in_time) AS work_date,
                    AVG(work_hours) AS avg_work_hours,
                    MAX(work_hours) AS max_work_hours,
                    MIN(work_hours) AS min_work_hours
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                GROUP BY DATE(check_in_time)
                ORDER BY work_date ASC
                """,
                tuple(params),
            )
            return [
                WorkHoursDay(
                    work_date=r["work_date"],
                    avg_work_hours=round_half_up(_hours(r.get("avg_work_hours")) or 0.0),
                    max_work_hours=_hours(r.get("max_work_hours")) or 0.0,
                    min_work_hours=_hours(r.get("min_work_hours")) or 0.0,
                )
                for r in fetchall(cur)
            ]

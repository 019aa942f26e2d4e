from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .reports.service import AttendanceStatsService
from .schedule.model import WorkSchedule


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService
    stats_service: AttendanceStatsService


def build_services(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    schedule: WorkSchedule,
) -> Container:
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        schedule,
        strategy_factory=AttendanceStrategyFactory(),
    )
    stats_service = AttendanceStatsService(attendance_repo)

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        stats_service=stats_service,
    )


def build_container(*, db_config: dict, schedule: WorkSchedule) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        schedule=schedule,
    )

from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, is_active
                FROM employees
                WHERE employee_id=%s
                """,
                (str(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                employee_id=str(row["employee_id"]),
                full_name=row["full_name"],
                is_active=bool(row.get("is_active", True)),
            )

    def exists(self, employee_id: str) -> bool:
        return self.get_by_id(employee_id) is not None

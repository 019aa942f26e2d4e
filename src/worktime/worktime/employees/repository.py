from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    """Employee lookup owned by the HR side of the system.

    Attendance only needs identity and existence; records are created and
    edited elsewhere.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def exists(self, employee_id: str) -> bool:
        raise NotImplementedError

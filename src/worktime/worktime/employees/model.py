from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """Employee as seen by attendance tracking (identity only)."""

    employee_id: str
    full_name: str
    is_active: bool = True

from __future__ import annotations

import itertools
from datetime import date

import pytest

from leave_calendar.models.leave import ANNUAL, Employee, LeaveRecord


@pytest.fixture
def leave():
    """LeaveRecord factory: leave(employee_id, "2025-07-10", "오전")."""
    counter = itertools.count(1)

    def _make(employee_id: int, day, typ: str = ANNUAL, rid=None, description=None) -> LeaveRecord:
        d = day if isinstance(day, date) else date.fromisoformat(day)
        return LeaveRecord(
            id=rid if rid is not None else f"r{next(counter)}",
            employee_id=employee_id,
            date=d,
            type=typ,
            description=description,
        )

    return _make


@pytest.fixture
def employees() -> list[Employee]:
    return [
        Employee(1, "김민수", "#3B82F6"),
        Employee(2, "이서연", "#10B981"),
        Employee(3, "박지훈", "#F59E0B"),
        Employee(4, "최유진", "#EF4444"),
        Employee(5, "정하늘", "#8B5CF6"),
        Employee(6, "한도윤", "#14B8A6"),
        Employee(7, "오세린"),
    ]

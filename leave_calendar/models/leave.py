# models/leave.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional, Union

LeaveType = Literal["연차", "오전", "오후", "특별", "병가", "업무"]

ANNUAL = "연차"
MORNING = "오전"
AFTERNOON = "오후"
SPECIAL = "특별"
SICK = "병가"
WORK = "업무"

HALF_DAY_TYPES = (MORNING, AFTERNOON)
FULL_DAY_TYPES = (ANNUAL, SPECIAL, SICK, WORK)
LEAVE_TYPES = FULL_DAY_TYPES + HALF_DAY_TYPES

DEFAULT_COLOR = "#6B7280"

RecordId = Union[int, str]


@dataclass(frozen=True)
class Employee:
    id: int
    name: str
    color: str = DEFAULT_COLOR
    team: Optional[str] = None


@dataclass(frozen=True)
class LeaveRecord:
    id: RecordId
    employee_id: int
    date: date
    type: LeaveType = ANNUAL
    description: Optional[str] = None     # 업무 내용 등

    @property
    def is_half_day(self) -> bool:
        return self.type in HALF_DAY_TYPES

    @property
    def is_work(self) -> bool:
        return self.type == WORK

    @property
    def identity(self):
        # 같은 레코드인지 (내용은 바뀌었을 수 있음)
        return (self.id, self.employee_id, self.date)


@dataclass(frozen=True)
class Holiday:
    date: date
    name: str

# models/layout.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Iterator, Literal, Optional, Tuple

from leave_calendar.models.leave import Holiday, LeaveRecord

BarKind = Literal["full", "half"]
BarSide = Literal["left", "right"]


@dataclass(frozen=True)
class Span:
    """한 직원의 날짜가 이어지는 휴가 묶음(연휴). records는 날짜 오름차순, 하루 1건, 빈 날 없음."""
    employee_id: int
    start_date: date
    end_date: date
    records: Tuple[LeaveRecord, ...] = ()

    @property
    def is_multi_day(self) -> bool:
        return len(self.records) > 1

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def first(self) -> Optional[LeaveRecord]:
        return self.records[0] if self.records else None

    @property
    def last(self) -> Optional[LeaveRecord]:
        return self.records[-1] if self.records else None

    @staticmethod
    def single(record: LeaveRecord) -> "Span":
        return Span(record.employee_id, record.date, record.date, (record,))


@dataclass(frozen=True)
class PlacedSpan:
    span: Span
    track_index: int


@dataclass(frozen=True)
class TrackPlan:
    placements: Tuple[PlacedSpan, ...] = ()
    track_count: int = 0
    rejected: int = 0          # 레코드 없는 span 수


@dataclass(frozen=True)
class PositionedBar:
    kind: BarKind
    employee_id: int
    record: LeaveRecord                    # 막대의 대표(시작) 레코드
    left: float
    top: float
    width: float
    span: Optional[Span] = None
    track_index: Optional[int] = None
    side: Optional[BarSide] = None         # 반차: 오전=left, 오후=right

    @property
    def is_consecutive(self) -> bool:
        return self.span is not None and self.span.is_multi_day

    def label(self, name: str) -> str:
        # 화면 표시 문구: "홍길동 10일 ~ 12일 연휴" / "홍길동 연차"
        if self.is_consecutive:
            return f"{name} {self.span.start_date.day}일 ~ {self.span.end_date.day}일 연휴"
        return f"{name} {self.record.type}"


@dataclass(frozen=True)
class DayLayout:
    date: date
    is_current_month: bool = True
    holiday: Optional[Holiday] = None
    full_day_bars: Tuple[PositionedBar, ...] = ()
    half_day_bars: Tuple[PositionedBar, ...] = ()
    overflow_count: int = 0
    hidden_bars: Tuple[PlacedSpan, ...] = ()
    records: Tuple[LeaveRecord, ...] = ()   # 그 날의 전체 휴가("모두 보기"용)

    @property
    def is_holiday(self) -> bool:
        return self.holiday is not None

    @property
    def overflow_label(self) -> str:
        return f"+{self.overflow_count}" if self.overflow_count else ""


@dataclass(frozen=True)
class MonthLayout:
    year: int
    month: int
    days: Tuple[DayLayout, ...] = ()
    spans: Tuple[Span, ...] = ()
    track_count: int = 0
    orphaned_count: int = 0                 # 직원 목록에 없는 직원의 레코드
    fallback_count: int = 0                 # 재검증 실패로 단일 막대로 풀린 연휴

    def __iter__(self) -> Iterator[DayLayout]:
        return iter(self.days)

    def __len__(self) -> int:
        return len(self.days)

    def __getitem__(self, idx):
        return self.days[idx]

    def day(self, d: date) -> Optional[DayLayout]:
        for dl in self.days:
            if dl.date == d:
                return dl
        return None

    def weeks(self):
        return [self.days[i:i + 7] for i in range(0, len(self.days), 7)]

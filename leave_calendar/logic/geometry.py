# logic/geometry.py
from __future__ import annotations
from datetime import date
from typing import List, Optional, Sequence

from leave_calendar.models.layout import PositionedBar, Span
from leave_calendar.models.leave import AFTERNOON, MORNING, LeaveRecord
from leave_calendar.utils.date_helper import date_range, sunday_index

# 셀당 표시 가능한 종일 트랙 수 (공휴일은 이름 표시 때문에 한 줄 적음)
MAX_TRACKS = 5
MAX_TRACKS_HOLIDAY = 4

# PC 달력: 140px 고정 폭, 막대 한 줄 22px, 상단 여백 6px
DESKTOP_CELL_WIDTH = 140.0
DESKTOP_ROW_HEIGHT = 22.0
DESKTOP_HEADER_HEIGHT = 6.0

# 모바일 달력: 0.8fr 1.2fr 1.2fr 1.2fr 1.2fr 1.2fr 0.8fr
MOBILE_GRID_WIDTH = 350.0
MOBILE_ROW_HEIGHT = 18.0
MOBILE_HEADER_HEIGHT = 6.0
MOBILE_WEIGHTS = (0.8, 1.2, 1.2, 1.2, 1.2, 1.2, 0.8)   # 일~토


def max_tracks(is_holiday: bool) -> int:
    return MAX_TRACKS_HOLIDAY if is_holiday else MAX_TRACKS


# ---------- half-day offset ----------
def start_offset(span: Span) -> float:
    """시작일이 오후반차면 셀 절반부터 시작."""
    first = span.first
    return 0.5 if first is not None and first.type == AFTERNOON else 0.0


def end_offset(span: Span) -> float:
    """마지막 날이 오전반차면 셀 절반까지만."""
    last = span.last
    return 0.5 if last is not None and last.type == MORNING else 1.0


def effective_width(span: Span) -> float:
    return (span.days - 1) + end_offset(span) - start_offset(span)


def effective_start(span: Span) -> float:
    return span.start_date.toordinal() + start_offset(span)


def effective_end(span: Span) -> float:
    return span.end_date.toordinal() + end_offset(span)


# ---------- 그리드 (셀 폭 제공자) ----------
class UniformGrid:
    """PC 달력: 모든 요일 같은 폭."""
    name = "desktop"

    def __init__(self, cell_width: float = DESKTOP_CELL_WIDTH,
                 row_height: float = DESKTOP_ROW_HEIGHT,
                 header_height: float = DESKTOP_HEADER_HEIGHT):
        self.cell_width = float(cell_width)
        self.row_height = float(row_height)
        self.header_height = float(header_height)

    def column_width(self, d: date) -> float:
        return self.cell_width

    def key(self):
        return (self.name, self.cell_width, self.row_height, self.header_height)


class WeekdayWeightedGrid:
    """모바일 달력: 주말 칸이 평일보다 좁다. 고정 1일 폭을 가정할 수 없음."""
    name = "mobile"

    def __init__(self, grid_width: float = MOBILE_GRID_WIDTH,
                 row_height: float = MOBILE_ROW_HEIGHT,
                 header_height: float = MOBILE_HEADER_HEIGHT,
                 weights: Sequence[float] = MOBILE_WEIGHTS):
        if len(weights) != 7:
            raise ValueError("weights must have 7 entries (Sun..Sat)")
        self.grid_width = float(grid_width)
        self.row_height = float(row_height)
        self.header_height = float(header_height)
        self.weights = tuple(float(w) for w in weights)
        self.base_width = self.grid_width / sum(self.weights)

    def column_width(self, d: date) -> float:
        return self.base_width * self.weights[sunday_index(d)]

    def key(self):
        return (self.name, self.grid_width, self.row_height, self.header_height, self.weights)


# ---------- 막대 위치 계산 ----------
def span_pixel_width(span: Span, grid) -> float:
    """
    덮는 날짜들의 실제 칸 폭 합 - 시작/끝 오프셋.
    균일 그리드에서는 effective_width * cell_width 와 같다.
    """
    total = sum(grid.column_width(d) for d in date_range(span.start_date, span.end_date))
    total -= start_offset(span) * grid.column_width(span.start_date)
    total -= (1.0 - end_offset(span)) * grid.column_width(span.end_date)
    return total


def bar_geometry(span: Span, track_index: int, grid) -> PositionedBar:
    """종일/연휴 막대. 시작일 셀 기준 좌표."""
    return PositionedBar(
        kind="full",
        employee_id=span.employee_id,
        record=span.records[0],
        left=start_offset(span) * grid.column_width(span.start_date),
        top=track_index * grid.row_height + grid.header_height,
        width=span_pixel_width(span, grid),
        span=span,
        track_index=track_index,
    )


def half_day_geometry(records: Sequence[LeaveRecord], cell_date: date,
                      track_rows: int, grid) -> List[PositionedBar]:
    """
    독립 반차 막대: 오전은 셀 왼쪽 절반, 오후는 오른쪽 절반.
    같은 쪽 여러 명이면 그 절반을 나눠 쓴다. 종일 트랙 줄들 바로 아래 한 줄.
    """
    cell = grid.column_width(cell_date)
    half = cell / 2.0
    top = grid.header_height + track_rows * grid.row_height

    bars: List[PositionedBar] = []
    for side, typ, origin in (("left", MORNING, 0.0), ("right", AFTERNOON, half)):
        group = [r for r in records if r.type == typ]
        if not group:
            continue
        w = half / len(group)
        for i, r in enumerate(group):
            bars.append(PositionedBar(
                kind="half",
                employee_id=r.employee_id,
                record=r,
                left=origin + i * w,
                top=top,
                width=w,
                side=side,
            ))
    return bars


def visible_rows(track_indexes: Sequence[int], limit: int) -> int:
    """셀에서 실제로 그려지는 종일 트랙 줄 수."""
    shown = [t for t in track_indexes if t < limit]
    return (max(shown) + 1) if shown else 0


def resolve_grid(grid: Optional[object]):
    if grid is None:
        return UniformGrid()
    if isinstance(grid, str):
        if grid == "desktop":
            return UniformGrid()
        if grid == "mobile":
            return WeekdayWeightedGrid()
        raise ValueError(f"unknown grid: {grid}")
    return grid

# logic/layout.py
from __future__ import annotations
import logging
from collections import defaultdict
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from leave_calendar.logic.geometry import (
    bar_geometry, half_day_geometry, max_tracks, resolve_grid, visible_rows,
)
from leave_calendar.logic.span_builder import build_spans_by_employee
from leave_calendar.logic.track_assigner import assign_tracks, takes_track
from leave_calendar.models.layout import DayLayout, MonthLayout, PlacedSpan, Span, TrackPlan
from leave_calendar.models.leave import Employee, Holiday, LeaveRecord
from leave_calendar.utils.date_helper import date_key, month_grid, normalize_month

logger = logging.getLogger(__name__)


class _Snapshot:
    """재검증용 레코드 스냅샷 색인."""

    def __init__(self, records: Iterable[LeaveRecord]):
        self.records: Set[LeaveRecord] = set()
        self.by_identity: Dict[tuple, LeaveRecord] = {}
        self.full_day: Dict[Tuple[int, date], Set[LeaveRecord]] = defaultdict(set)
        for r in records:
            self.records.add(r)
            self.by_identity[r.identity] = r
            if not r.is_half_day:
                self.full_day[(r.employee_id, r.date)].add(r)

    def current(self, r: LeaveRecord) -> Optional[LeaveRecord]:
        """같은 id/직원/날짜의 현재 레코드. 삭제됐으면 None."""
        return self.by_identity.get(r.identity)


def revalidate_span(span: Span, snapshot: _Snapshot) -> bool:
    """
    연휴 막대를 그리기 직전 재확인:
      (a) span의 모든 레코드가 현재 스냅샷에 그대로 있는가 (종류 등 내용까지 동일)
      (b) 레코드가 2건 이상인가
      (c) 시작일에 같은 직원의 별도 종일 휴가가 이미 있지 않은가
    """
    if not all(r in snapshot.records for r in span.records):
        return False
    if len(span.records) < 2:
        return False
    others = snapshot.full_day.get((span.employee_id, span.start_date), set()) - set(span.records)
    return not others


def layout_days(
    dates: Sequence[date],
    spans: Sequence[Span],
    snapshot: Iterable[LeaveRecord],
    year: int,
    month: int,
    holidays: Iterable[Holiday] = (),
    grid=None,
    plan: Optional[TrackPlan] = None,
    orphaned_count: int = 0,
) -> MonthLayout:
    """
    span + 트랙 배치 → 셀별 DayLayout.
    spans는 이미 계산된 것을 받을 수 있다(오래된 span이면 재검증에서 걸러짐).
    """
    grid = resolve_grid(grid)
    if plan is None:
        plan = assign_tracks(spans)
    snapshot = tuple(snapshot)
    snap = _Snapshot(snapshot)
    holiday_by_date = {h.date: h for h in holidays}

    placed: List[PlacedSpan] = []
    half_records: List[LeaveRecord] = []
    fallback_count = 0

    for p in plan.placements:
        span = p.span
        if not span.is_multi_day:
            placed.append(p)
            continue
        if revalidate_span(span, snap):
            placed.append(p)
            # 시작/끝 반차는 막대 오프셋으로 표현, 중간 반차만 따로 그린다
            half_records.extend(r for r in span.records[1:-1] if r.is_half_day)
            continue
        fallback_count += 1
        logger.warning(
            "stale span discarded: employee=%s %s~%s (%d records), falling back to single days",
            span.employee_id, date_key(span.start_date), date_key(span.end_date), len(span.records),
        )
        # 지워진 레코드는 버리고, 종류가 바뀐 레코드는 현재 내용으로 그린다
        for old in span.records:
            r = snap.current(old)
            if r is None:
                continue
            if r.is_half_day:
                half_records.append(r)
            else:
                placed.append(PlacedSpan(Span.single(r), p.track_index))

    # 트랙을 차지하지 않는 단독 반차
    for s in spans:
        if s.records and not takes_track(s):
            half_records.extend(s.records)

    starts: Dict[date, List[PlacedSpan]] = defaultdict(list)
    covering: Dict[date, List[PlacedSpan]] = defaultdict(list)
    first, last = (dates[0], dates[-1]) if dates else (None, None)
    for p in placed:
        starts[p.span.start_date].append(p)
        for r in p.span.records:
            covering[r.date].append(p)

    # 막대 하나는 한 줄로 이어지므로, 덮는 날 중 가장 작은 트랙 한도를 따른다
    span_limit: Dict[PlacedSpan, int] = {
        p: min(max_tracks(r.date in holiday_by_date) for r in p.span.records)
        for p in placed
    }

    half_by_date: Dict[date, List[LeaveRecord]] = defaultdict(list)
    for r in half_records:
        half_by_date[r.date].append(r)

    shown_emps = {s.employee_id for s in spans}
    records_by_date: Dict[date, List[LeaveRecord]] = defaultdict(list)
    for r in snapshot:
        if r.employee_id in shown_emps:
            records_by_date[r.date].append(r)

    days: List[DayLayout] = []
    for d in dates:
        holiday = holiday_by_date.get(d)
        limit = max_tracks(holiday is not None)
        cover = sorted(covering.get(d, []), key=lambda p: (p.track_index, p.span.employee_id))

        shown = sorted((p for p in starts.get(d, []) if p.track_index < span_limit[p]),
                       key=lambda p: p.track_index)
        hidden = tuple(p for p in cover if p.track_index >= span_limit[p])
        rows = visible_rows([p.track_index for p in cover if p.track_index < span_limit[p]], limit)

        halves = sorted(half_by_date.get(d, []), key=lambda r: (r.employee_id, str(r.id)))
        day_records = sorted(records_by_date.get(d, []),
                             key=lambda r: (r.employee_id, r.type, str(r.id)))

        days.append(DayLayout(
            date=d,
            is_current_month=(d.year, d.month) == (year, month),
            holiday=holiday,
            full_day_bars=tuple(bar_geometry(p.span, p.track_index, grid) for p in shown),
            half_day_bars=tuple(half_day_geometry(halves, d, rows, grid)),
            overflow_count=len(hidden),
            hidden_bars=hidden,
            records=tuple(day_records),
        ))

    logger.debug(
        "layout %04d-%02d: %d cells %s~%s, %d spans, %d tracks, %d fallback(s)",
        year, month, len(days),
        date_key(first) if first else "-", date_key(last) if last else "-",
        len(spans), plan.track_count, fallback_count,
    )
    return MonthLayout(
        year=year,
        month=month,
        days=tuple(days),
        spans=tuple(spans),
        track_count=plan.track_count,
        orphaned_count=orphaned_count,
        fallback_count=fallback_count,
    )


def build_month_layout(
    records: Iterable[LeaveRecord],
    employees: Iterable[Employee],
    year: int,
    month: int,
    holidays: Iterable[Holiday] = (),
    visible_employee_ids: Optional[Iterable[int]] = None,
    grid=None,
) -> MonthLayout:
    """
    한 달 달력 배치 (순수 함수). 입력이 바뀌면 매번 전체를 다시 계산한다.
    - visible_employee_ids=None 이면 전 직원 표시
    - 직원 목록에 없는 직원의 레코드는 버리고 orphaned_count 로 알린다
    """
    year, month = normalize_month(year, month)
    dates = month_grid(year, month)
    snapshot = tuple(records)
    roster: List[int] = []
    for e in employees:
        if e.id not in roster:
            roster.append(e.id)
    roster_ids = set(roster)

    first, last = dates[0], dates[-1]
    in_window = [r for r in snapshot if first <= r.date <= last]

    orphaned = [r for r in in_window if r.employee_id not in roster_ids]
    if orphaned:
        logger.warning(
            "%d orphaned leave record(s) dropped for %04d-%02d (employee ids: %s)",
            len(orphaned), year, month, sorted({r.employee_id for r in orphaned}),
        )

    if visible_employee_ids is None:
        visible = roster
    else:
        wanted = set(visible_employee_ids)
        visible = [eid for eid in roster if eid in wanted]

    visible_set = set(visible)
    kept = [r for r in in_window if r.employee_id in visible_set]
    by_emp = build_spans_by_employee(kept, visible)
    spans = [s for eid in visible for s in by_emp[eid]]

    return layout_days(
        dates, spans, snapshot, year, month,
        holidays=holidays, grid=grid, orphaned_count=len(orphaned),
    )


class LayoutCache:
    """
    선택적 캐시. 키는 (records_version, filter_version, year, month, grid)로 명시하고,
    부분 갱신 없이 통째로 무효화한다.
    버전이 바뀌면 이전 버전 항목은 다시 쓰일 일이 없으므로 그때 전부 버린다.
    """

    def __init__(self):
        self._entries: Dict[tuple, MonthLayout] = {}
        self._versions: Optional[Tuple[int, int]] = None

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_build(self, records_version: int, filter_version: int,
                     year: int, month: int, grid, build: Callable[[], MonthLayout]) -> MonthLayout:
        if self._versions != (records_version, filter_version):
            self.invalidate()
            self._versions = (records_version, filter_version)
        grid = resolve_grid(grid)
        year, month = normalize_month(year, month)
        key = (records_version, filter_version, year, month, grid.key())
        hit = self._entries.get(key)
        if hit is not None:
            return hit
        layout = build()
        self._entries[key] = layout
        return layout

    def invalidate(self) -> None:
        self._entries.clear()

# logic/track_assigner.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from leave_calendar.logic.geometry import effective_end, effective_start
from leave_calendar.models.layout import PlacedSpan, Span, TrackPlan

logger = logging.getLogger(__name__)


@dataclass
class _Track:
    spans: List[Span] = field(default_factory=list)
    cursor: float = float("-inf")   # 마지막 span의 effective end

    def fits(self, span: Span) -> bool:
        return self.cursor <= effective_start(span)

    def place(self, span: Span) -> None:
        self.spans.append(span)
        self.cursor = effective_end(span)


def takes_track(span: Span) -> bool:
    """종일 트랙을 차지하는 span인가. 단독 반차는 트랙 아래 반차 줄에 그린다."""
    if span.is_multi_day:
        return True
    return bool(span.records) and not span.records[0].is_half_day


def sort_key(span: Span):
    """
    정렬(재현 가능한 배치용):
      1) 연휴(2일 이상) 먼저
      2) 연휴끼리는 시작일 → 직원 ID
      3) 단일 휴가는 날짜 → 직원 ID
    단일 휴가를 직원 ID로만 정렬하지 않는다. 트랙 커서는 뒤로 가지 않으므로
    늦은 날짜가 먼저 놓이면 앞 날짜 휴가가 빈 트랙을 두고 새 트랙을 연다.
    """
    return (0 if span.is_multi_day else 1, span.start_date, span.employee_id)


def assign_tracks(spans: Iterable[Span]) -> TrackPlan:
    """
    그리디 구간 배치: 정렬 순서대로, 앞 트랙부터 보며
    '마지막 span이 이 span 시작 전에 끝난' 첫 트랙에 넣는다. 없으면 새 트랙.
    """
    candidates = []
    rejected = 0
    for s in spans:
        if not s.records:
            # 생성 결함 방어: 레코드 없는 span은 배치하지 않음
            rejected += 1
            continue
        if takes_track(s):
            candidates.append(s)
    if rejected:
        logger.debug("assign_tracks: %d empty span(s) excluded", rejected)

    tracks: List[_Track] = []
    placed: List[PlacedSpan] = []
    for span in sorted(candidates, key=sort_key):
        idx = next((i for i, t in enumerate(tracks) if t.fits(span)), None)
        if idx is None:
            tracks.append(_Track())
            idx = len(tracks) - 1
        tracks[idx].place(span)
        placed.append(PlacedSpan(span, idx))

    return TrackPlan(placements=tuple(placed), track_count=len(tracks), rejected=rejected)

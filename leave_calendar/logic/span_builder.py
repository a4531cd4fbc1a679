# logic/span_builder.py
from __future__ import annotations
from collections import defaultdict
from datetime import timedelta
from functools import reduce
from typing import Dict, Iterable, List, Optional, Tuple

from leave_calendar.models.layout import Span
from leave_calendar.models.leave import LeaveRecord

# fold 상태: (완성된 span들, 진행 중인 묶음)
_State = Tuple[Tuple[Span, ...], Tuple[LeaveRecord, ...]]


def _to_span(group: Tuple[LeaveRecord, ...]) -> Span:
    return Span(
        employee_id=group[0].employee_id,
        start_date=group[0].date,
        end_date=group[-1].date,
        records=group,
    )


def _flush(done: Tuple[Span, ...], current: Tuple[LeaveRecord, ...]) -> Tuple[Span, ...]:
    return done + (_to_span(current),) if current else done


def _step(state: _State, rec: LeaveRecord) -> _State:
    done, current = state
    # 업무는 앞뒤와 절대 합치지 않는다
    if rec.is_work:
        return _flush(done, current) + (Span.single(rec),), ()
    if not current:
        return done, (rec,)
    if rec.date == current[-1].date + timedelta(days=1):
        return done, current + (rec,)
    return _flush(done, current), (rec,)


def build_spans(records: Iterable[LeaveRecord]) -> List[Span]:
    """
    한 직원의 휴가 레코드를 날짜가 이어지는 span(연휴) 목록으로 나눈다.
    - 입력 순서와 무관 (내부에서 날짜, id 순 정렬)
    - 업무는 항상 1일짜리 span
    - 같은 날짜의 레코드 두 건은 한 span에 들어가지 않음
    """
    ordered = sorted(records, key=lambda r: (r.date, str(r.id)))
    done, current = reduce(_step, ordered, ((), ()))
    return list(_flush(done, current))


def build_spans_by_employee(
    records: Iterable[LeaveRecord],
    employee_ids: Optional[Iterable[int]] = None,
) -> Dict[int, List[Span]]:
    """직원별로 묶어서 build_spans. employee_ids가 주어지면 그 직원만(그 순서대로)."""
    by_emp: Dict[int, List[LeaveRecord]] = defaultdict(list)
    for r in records:
        by_emp[r.employee_id].append(r)

    ids = list(employee_ids) if employee_ids is not None else sorted(by_emp)
    return {eid: build_spans(by_emp.get(eid, [])) for eid in ids}

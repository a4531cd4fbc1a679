from __future__ import annotations

import logging
import unittest
from datetime import date

import pytest

from leave_calendar.logic.layout import LayoutCache, build_month_layout, layout_days, revalidate_span, _Snapshot
from leave_calendar.logic.span_builder import build_spans
from leave_calendar.models.leave import (
    AFTERNOON, ANNUAL, MORNING, WORK, Employee, Holiday, LeaveRecord,
)
from leave_calendar.utils.date_helper import month_grid

ROSTER = [Employee(1, "김민수"), Employee(2, "이서연"), Employee(3, "박지훈")]


def _rec(rid, emp: int, day: int, typ: str = ANNUAL, month: int = 7) -> LeaveRecord:
    return LeaveRecord(id=rid, employee_id=emp, date=date(2025, month, day), type=typ)


class LayoutScenarioTests(unittest.TestCase):
    def test_three_day_annual_leave_is_one_bar(self) -> None:
        records = [_rec(1, 1, 10), _rec(2, 1, 11), _rec(3, 1, 12)]

        layout = build_month_layout(records, ROSTER, 2025, 7)

        self.assertEqual(len(layout.spans), 1)
        span = layout.spans[0]
        self.assertEqual((span.start_date.day, span.end_date.day), (10, 12))
        self.assertTrue(span.is_multi_day)
        (bar,) = layout.day(date(2025, 7, 10)).full_day_bars
        self.assertAlmostEqual(bar.width, 3 * 140)
        self.assertEqual(bar.label("김민수"), "김민수 10일 ~ 12일 연휴")
        self.assertEqual(layout.day(date(2025, 7, 11)).full_day_bars, ())

    def test_half_day_edges_are_offsets_not_extra_bars(self) -> None:
        records = [_rec(1, 1, 10, AFTERNOON), _rec(2, 1, 11), _rec(3, 1, 12, MORNING)]

        layout = build_month_layout(records, ROSTER, 2025, 7)

        (bar,) = layout.day(date(2025, 7, 10)).full_day_bars
        self.assertAlmostEqual(bar.left, 70)
        self.assertAlmostEqual(bar.width, 280)
        for d in (10, 11, 12):
            self.assertEqual(layout.day(date(2025, 7, d)).half_day_bars, ())

    def test_work_day_breaks_the_run(self) -> None:
        records = [_rec(1, 1, 10), _rec(2, 1, 11, WORK), _rec(3, 1, 12)]

        layout = build_month_layout(records, ROSTER, 2025, 7)

        self.assertEqual(len(layout.spans), 3)
        self.assertFalse(any(s.is_multi_day for s in layout.spans))
        (work_bar,) = layout.day(date(2025, 7, 11)).full_day_bars
        self.assertEqual(work_bar.label("김민수"), "김민수 업무")

    def test_overlapping_runs_use_different_tracks(self) -> None:
        records = [_rec(f"a{d}", 1, d) for d in (10, 11, 12)] + [_rec(f"b{d}", 2, d) for d in (10, 11, 12)]

        layout = build_month_layout(records, ROSTER, 2025, 7)

        bars = layout.day(date(2025, 7, 10)).full_day_bars
        self.assertEqual(sorted(b.track_index for b in bars), [0, 1])
        self.assertEqual([b.employee_id for b in bars], [1, 2])
        self.assertEqual(layout.track_count, 2)

    def test_deleted_middle_day_splits_the_run(self) -> None:
        records = [_rec(1, 1, 10), _rec(2, 1, 11), _rec(3, 1, 12)]
        before = build_month_layout(records, ROSTER, 2025, 7)
        after = build_month_layout([records[0], records[2]], ROSTER, 2025, 7)

        self.assertEqual(len(before.spans), 1)
        self.assertEqual([(s.start_date.day, s.end_date.day) for s in after.spans], [(10, 10), (12, 12)])
        self.assertFalse(any(s.is_multi_day for s in after.spans))
        self.assertEqual(after.fallback_count, 0)


class RevalidationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.records = [_rec(1, 1, 10), _rec(2, 1, 11), _rec(3, 1, 12)]
        self.spans = build_spans(self.records)
        self.dates = month_grid(2025, 7)

    def test_valid_span_passes(self) -> None:
        self.assertTrue(revalidate_span(self.spans[0], _Snapshot(self.records)))

    def test_stale_span_falls_back_to_single_days(self) -> None:
        snapshot = [self.records[0], self.records[2]]     # 11일 삭제

        with self.assertLogs("leave_calendar.logic.layout", level="WARNING"):
            layout = layout_days(self.dates, self.spans, snapshot, 2025, 7)

        self.assertEqual(layout.fallback_count, 1)
        for d in (10, 12):
            (bar,) = layout.day(date(2025, 7, d)).full_day_bars
            self.assertFalse(bar.is_consecutive)
            self.assertEqual(bar.track_index, 0)
        self.assertEqual(layout.day(date(2025, 7, 11)).full_day_bars, ())
        self.assertEqual(layout.day(date(2025, 7, 11)).records, ())

    def test_changed_record_date_fails_identity_check(self) -> None:
        moved = LeaveRecord(id=2, employee_id=1, date=date(2025, 7, 20), type=ANNUAL)
        self.assertFalse(revalidate_span(self.spans[0], _Snapshot([self.records[0], moved, self.records[2]])))

    def test_changed_record_type_fails_identity_check(self) -> None:
        edited = LeaveRecord(id=2, employee_id=1, date=date(2025, 7, 11), type=WORK)
        self.assertFalse(revalidate_span(self.spans[0], _Snapshot([self.records[0], edited, self.records[2]])))

    def test_middle_day_turned_into_work_breaks_the_run(self) -> None:
        edited = LeaveRecord(id=2, employee_id=1, date=date(2025, 7, 11), type=WORK)

        with self.assertLogs("leave_calendar.logic.layout", level="WARNING"):
            layout = layout_days(self.dates, self.spans, [self.records[0], edited, self.records[2]], 2025, 7)

        self.assertEqual(layout.fallback_count, 1)
        self.assertFalse(any(b.is_consecutive for d in layout for b in d.full_day_bars))
        (work_bar,) = layout.day(date(2025, 7, 11)).full_day_bars
        self.assertEqual(work_bar.label("김민수"), "김민수 업무")

    def test_last_day_turned_into_morning_is_drawn_as_half_day(self) -> None:
        edited = LeaveRecord(id=3, employee_id=1, date=date(2025, 7, 12), type=MORNING)

        with self.assertLogs("leave_calendar.logic.layout", level="WARNING"):
            layout = layout_days(self.dates, self.spans, [self.records[0], self.records[1], edited], 2025, 7)

        self.assertEqual(layout.fallback_count, 1)
        self.assertNotIn(420.0, [b.width for d in layout for b in d.full_day_bars])
        self.assertEqual(layout.day(date(2025, 7, 12)).full_day_bars, ())
        (half,) = layout.day(date(2025, 7, 12)).half_day_bars
        self.assertEqual(half.side, "left")

    def test_independent_full_day_on_start_date_fails(self) -> None:
        duplicate = _rec(99, 1, 10)
        snapshot = self.records + [duplicate]

        with self.assertLogs("leave_calendar.logic.layout", level="WARNING"):
            layout = layout_days(self.dates, self.spans, snapshot, 2025, 7)

        self.assertEqual(layout.fallback_count, 1)
        self.assertFalse(any(b.is_consecutive for d in layout for b in d.full_day_bars))

    def test_half_day_start_record_does_not_block(self) -> None:
        morning = _rec(98, 1, 10, MORNING)
        self.assertTrue(revalidate_span(self.spans[0], _Snapshot(self.records + [morning])))

    def test_stale_half_day_falls_back_to_half_bar(self) -> None:
        records = [_rec(1, 1, 10, AFTERNOON), _rec(2, 1, 11), _rec(3, 1, 12)]
        spans = build_spans(records)

        with self.assertLogs("leave_calendar.logic.layout", level="WARNING"):
            layout = layout_days(self.dates, spans, [records[0], records[2]], 2025, 7)

        (half,) = layout.day(date(2025, 7, 10)).half_day_bars
        self.assertEqual(half.side, "right")
        self.assertEqual(layout.day(date(2025, 7, 10)).full_day_bars, ())


def test_six_people_on_one_day_overflow(leave, employees) -> None:
    records = [leave(e.id, "2025-07-10") for e in employees[:6]]

    day = build_month_layout(records, employees, 2025, 7).day(date(2025, 7, 10))

    assert len(day.full_day_bars) == 5
    assert day.overflow_count == 1
    assert day.overflow_label == "+1"
    assert len(day.hidden_bars) == 1 and day.hidden_bars[0].track_index == 5
    assert len(day.records) == 6


def test_holiday_shows_one_track_less(leave, employees) -> None:
    records = [leave(e.id, "2025-07-10") for e in employees[:6]]
    holidays = [Holiday(date(2025, 7, 10), "임시공휴일")]

    day = build_month_layout(records, employees, 2025, 7, holidays=holidays).day(date(2025, 7, 10))

    assert day.is_holiday and day.holiday.name == "임시공휴일"
    assert len(day.full_day_bars) == 4
    assert day.overflow_count == 2


def test_run_into_holiday_uses_the_holiday_limit(leave, employees) -> None:
    records = [leave(e.id, f"2025-07-{d}") for e in employees[:5] for d in (10, 11)]
    holidays = [Holiday(date(2025, 7, 11), "임시공휴일")]

    layout = build_month_layout(records, employees, 2025, 7, holidays=holidays)

    start = layout.day(date(2025, 7, 10))
    assert [b.track_index for b in start.full_day_bars] == [0, 1, 2, 3]
    assert start.overflow_count == 1
    holiday = layout.day(date(2025, 7, 11))
    assert holiday.overflow_count == 1
    assert [p.track_index for p in holiday.hidden_bars] == [4]


def test_holiday_before_a_run_does_not_limit_it(leave, employees) -> None:
    records = [leave(e.id, f"2025-07-{d}") for e in employees[:5] for d in (10, 11)]
    holidays = [Holiday(date(2025, 7, 9), "임시공휴일")]

    start = build_month_layout(records, employees, 2025, 7, holidays=holidays).day(date(2025, 7, 10))

    assert len(start.full_day_bars) == 5
    assert start.overflow_count == 0


def test_overflow_counts_continuing_runs(leave, employees) -> None:
    records = [leave(e.id, f"2025-07-{d}") for e in employees[:6] for d in (10, 11)]

    layout = build_month_layout(records, employees, 2025, 7)

    second = layout.day(date(2025, 7, 11))
    assert second.full_day_bars == ()
    assert second.overflow_count == 1
    assert len(second.records) == 6


def test_lone_half_days_stack_under_tracks(leave, employees) -> None:
    records = [
        leave(1, "2025-07-10", ANNUAL),
        leave(2, "2025-07-10", MORNING),
        leave(3, "2025-07-10", AFTERNOON),
        leave(4, "2025-07-10", MORNING),
    ]

    day = build_month_layout(records, employees, 2025, 7).day(date(2025, 7, 10))

    assert len(day.full_day_bars) == 1
    assert [(b.employee_id, b.side, b.left, b.width) for b in day.half_day_bars] == [
        (2, "left", 0.0, 35.0),
        (4, "left", 35.0, 35.0),
        (3, "right", 70.0, 70.0),
    ]
    assert all(b.top == 6 + 22 for b in day.half_day_bars)


def test_interior_half_day_is_drawn_separately(leave, employees) -> None:
    records = [leave(1, "2025-07-10"), leave(1, "2025-07-11", MORNING), leave(1, "2025-07-12")]

    layout = build_month_layout(records, employees, 2025, 7)

    assert len(layout.spans) == 1
    (half,) = layout.day(date(2025, 7, 11)).half_day_bars
    assert half.side == "left"
    assert half.top == 6 + 22


def test_orphaned_records_are_counted(leave, employees, caplog) -> None:
    records = [leave(1, "2025-07-10"), leave(99, "2025-07-10"), leave(99, "2025-09-10")]

    with caplog.at_level(logging.WARNING, logger="leave_calendar.logic.layout"):
        layout = build_month_layout(records, employees, 2025, 7)

    assert layout.orphaned_count == 1
    assert "orphaned" in caplog.text
    assert [r.employee_id for r in layout.day(date(2025, 7, 10)).records] == [1]


def test_visibility_filter(leave, employees) -> None:
    records = [leave(1, "2025-07-10"), leave(2, "2025-07-10"), leave(3, "2025-07-10", MORNING)]

    only_two = build_month_layout(records, employees, 2025, 7, visible_employee_ids=[2])
    nobody = build_month_layout(records, employees, 2025, 7, visible_employee_ids=[])

    day = only_two.day(date(2025, 7, 10))
    assert [b.employee_id for b in day.full_day_bars] == [2]
    assert day.half_day_bars == ()
    assert [r.employee_id for r in day.records] == [2]
    assert nobody.spans == ()
    assert nobody.day(date(2025, 7, 10)).records == ()


def test_grid_window_includes_adjacent_month_days(leave, employees) -> None:
    records = [leave(1, "2025-06-30"), leave(1, "2025-07-01"), leave(2, "2025-06-01")]

    layout = build_month_layout(records, employees, 2025, 7)

    assert len(layout) == 35
    first = layout[0]
    assert first.date == date(2025, 6, 29) and not first.is_current_month
    assert len(layout.spans) == 1
    assert layout.spans[0].start_date == date(2025, 6, 30)


def test_month_is_normalised(leave, employees) -> None:
    layout = build_month_layout([leave(1, "2026-01-05")], employees, 2025, 13)

    assert (layout.year, layout.month) == (2026, 1)
    assert len(layout.spans) == 1


def test_same_inputs_give_identical_layouts(leave, employees) -> None:
    records = [
        leave(e.id, f"2025-07-{d:02d}", t)
        for e in employees
        for d, t in ((e.id + 3, AFTERNOON), (e.id + 4, ANNUAL), (e.id + 5, MORNING), (e.id * 3, ANNUAL))
    ]

    first = build_month_layout(records, employees, 2025, 7, grid="mobile")
    second = build_month_layout(list(reversed(records)), employees, 2025, 7, grid="mobile")

    assert first == second


def test_weeks_and_lookup(employees) -> None:
    layout = build_month_layout([], employees, 2025, 7)

    weeks = layout.weeks()
    assert len(weeks) == 5 and all(len(w) == 7 for w in weeks)
    assert layout.day(date(2025, 1, 1)) is None
    assert layout.track_count == 0


class LayoutCacheTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cache = LayoutCache()
        self.calls = 0

    def _build(self):
        self.calls += 1
        return build_month_layout([], ROSTER, 2025, 7)

    def test_same_key_builds_once(self) -> None:
        a = self.cache.get_or_build(1, 1, 2025, 7, None, self._build)
        b = self.cache.get_or_build(1, 1, 2025, 7, "desktop", self._build)

        self.assertIs(a, b)
        self.assertEqual(self.calls, 1)

    def test_versions_month_and_grid_are_part_of_the_key(self) -> None:
        self.cache.get_or_build(1, 1, 2025, 7, None, self._build)
        self.cache.get_or_build(2, 1, 2025, 7, None, self._build)
        self.cache.get_or_build(2, 2, 2025, 7, None, self._build)
        self.cache.get_or_build(2, 2, 2025, 8, None, self._build)
        self.cache.get_or_build(2, 2, 2025, 8, "mobile", self._build)

        self.assertEqual(self.calls, 5)
        self.assertEqual(len(self.cache), 3)

    def test_new_filter_version_drops_old_entries(self) -> None:
        for month in (6, 7, 8):
            self.cache.get_or_build(1, 1, 2025, month, None, self._build)
        self.assertEqual(len(self.cache), 3)

        self.cache.get_or_build(1, 2, 2025, 7, None, self._build)

        self.assertEqual(len(self.cache), 1)
        self.cache.get_or_build(1, 1, 2025, 7, None, self._build)
        self.assertEqual(self.calls, 5)

    def test_normalised_month_hits_the_same_entry(self) -> None:
        self.cache.get_or_build(1, 1, 2026, 1, None, self._build)
        self.cache.get_or_build(1, 1, 2025, 13, None, self._build)
        self.assertEqual(self.calls, 1)

    def test_invalidate_drops_everything(self) -> None:
        self.cache.get_or_build(1, 1, 2025, 7, None, self._build)
        self.cache.invalidate()
        self.assertEqual(len(self.cache), 0)
        self.cache.get_or_build(1, 1, 2025, 7, None, self._build)
        self.assertEqual(self.calls, 2)


@pytest.mark.parametrize("grid", [None, "mobile"])
def test_bars_sit_on_their_track_rows(leave, employees, grid) -> None:
    records = [leave(e.id, f"2025-07-{d}") for e in employees[:3] for d in (14, 15)]

    layout = build_month_layout(records, employees, 2025, 7, grid=grid)

    bars = layout.day(date(2025, 7, 14)).full_day_bars
    row = 22 if grid is None else 18
    assert [b.top for b in bars] == [6 + i * row for i in range(3)]

# cli/menu.py
from datetime import date
from typing import Dict, Iterable, List, Optional

from leave_calendar.data.data_manager import (
    load_employees, load_leaves, load_month_holidays, load_visible_ids, save_visible_ids,
)
from leave_calendar.exceptions import CancelAction, GoBackAction
from leave_calendar.logic.layout import build_month_layout
from leave_calendar.models.layout import DayLayout, MonthLayout
from leave_calendar.models.leave import Employee
from leave_calendar.utils.date_helper import (
    WEEKDAYS_KR, date_key, month_week_index_map, normalize_month, parse_date_key, sunday_index,
)
from leave_calendar.utils.input_handler import get_input
from leave_calendar.utils.parse_utils import parse_visible_ids, parse_year_month

UNKNOWN = "알 수 없음"


def _names(employees: Iterable[Employee]) -> Dict[int, str]:
    return {e.id: e.name for e in employees}


def day_lines(day: DayLayout, names: Dict[int, str]) -> List[str]:
    """셀 하나의 표시 줄: 트랙 순 종일/연휴 막대, 반차, +N."""
    lines = []
    for bar in day.full_day_bars:
        lines.append(f"[{bar.track_index}] " + bar.label(names.get(bar.employee_id, UNKNOWN)))
    morning = [names.get(b.employee_id, UNKNOWN) for b in day.half_day_bars if b.side == "left"]
    afternoon = [names.get(b.employee_id, UNKNOWN) for b in day.half_day_bars if b.side == "right"]
    if morning or afternoon:
        lines.append(f"오전: {', '.join(morning) or '-'} | 오후: {', '.join(afternoon) or '-'}")
    if day.overflow_count:
        lines.append(f"{day.overflow_label} 더보기")
    return lines


def render_month_text(layout: MonthLayout, employees: Iterable[Employee]) -> str:
    names = _names(employees)
    week_map = month_week_index_map(layout.year, layout.month)
    out = [f"===== {layout.year}년 {layout.month}월 ====="]
    for week in layout.weeks():
        in_month = [d for d in week if d.is_current_month]
        idx = week_map.get(date_key(in_month[0].date)) if in_month else None
        out.append(f"--- {idx}주차 ---" if idx else "---")
        for day in week:
            lines = day_lines(day, names)
            if not lines and not day.is_holiday:
                continue
            mark = "" if day.is_current_month else " (다른 달)"
            head = f"{day.date.month}/{day.date.day}({WEEKDAYS_KR[sunday_index(day.date)]}){mark}"
            if day.holiday:
                head += f" [{day.holiday.name}]"
            out.append(head)
            out.extend("    " + ln for ln in lines)
    if layout.orphaned_count:
        out.append(f"※ 직원 정보가 없는 휴가 {layout.orphaned_count}건은 표시하지 않았습니다.")
    return "\n".join(out)


def render_day_detail(day: DayLayout, employees: Iterable[Employee]) -> str:
    names = _names(employees)
    out = [f"[{date_key(day.date)}] 휴가 {len(day.records)}건"
           + (f" - {day.holiday.name}" if day.holiday else "")]
    if not day.records:
        out.append("  (없음)")
    for r in day.records:
        desc = f" ({r.description})" if r.description else ""
        out.append(f"  {names.get(r.employee_id, UNKNOWN)} - {r.type}{desc}")
    return "\n".join(out)


def _build(year: int, month: int, visible: Optional[List[int]]) -> tuple[MonthLayout, List[Employee]]:
    employees = load_employees()
    layout = build_month_layout(
        load_leaves(), employees, year, month,
        holidays=load_month_holidays(year, month), visible_employee_ids=visible,
    )
    return layout, employees


def main_menu():
    today = date.today()
    year, month = today.year, today.month
    visible = load_visible_ids()

    while True:
        print(f"\n[휴가 달력 - {year}-{month:02d}]")
        print("1. 달력 보기")
        print("2. 날짜별 휴가 보기")
        print("3. 직원 필터 설정")
        print("4. 이전달")
        print("5. 다음달")
        print("6. 연-월 이동")
        print("0. 종료")

        try:
            choice = get_input("선택")
            if choice == "1":
                layout, employees = _build(year, month, visible)
                print(render_month_text(layout, employees))
            elif choice == "2":
                d = parse_date_key(get_input("날짜(YYYY-MM-DD)"))
                layout, employees = _build(d.year, d.month, visible)
                day = layout.day(d)
                print(render_day_detail(day, employees))
            elif choice == "3":
                employees = load_employees()
                for e in employees:
                    print(f"{e.id} | {e.name} | {e.team or '-'}")
                visible = parse_visible_ids(get_input("표시할 직원 ID(쉼표 구분, 전체=빈값)", allow_empty=True))
                save_visible_ids(visible)
                print("필터를 저장했습니다." if visible is not None else "전체 직원을 표시합니다.")
            elif choice == "4":
                year, month = normalize_month(year, month - 1)
            elif choice == "5":
                year, month = normalize_month(year, month + 1)
            elif choice == "6":
                year, month = parse_year_month(get_input("연-월(YYYY-MM)"))
            elif choice == "0":
                print("프로그램을 종료합니다.")
                break
            else:
                print("잘못된 선택.")
        except ValueError as e:
            print(f"입력 오류: {e}")
        except GoBackAction:
            print("이전 메뉴로 이동")
        except CancelAction:
            print("메인 메뉴로 이동")

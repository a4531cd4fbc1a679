# utils/date_helper.py
import calendar
from datetime import date, datetime, timedelta

WEEKDAYS_KR = ("일", "월", "화", "수", "목", "금", "토")


def normalize_month(year: int, month: int) -> tuple[int, int]:
    """
    범위를 벗어난 월을 정수 연산으로 보정한다.
    - (2025, 13) → (2026, 1)
    - (2025, 0)  → (2024, 12)
    """
    y, m0 = divmod(month - 1, 12)
    return year + y, m0 + 1


def month_grid(year: int, month: int) -> list[date]:
    """
    달력 화면에 그릴 셀 날짜 목록(일요일 시작).
    - 1일이 속한 주의 일요일 ~ 말일이 속한 주의 토요일
    - 항상 7의 배수, 앞뒤 달 날짜 포함
    """
    year, month = normalize_month(year, month)
    cal = calendar.Calendar(firstweekday=6)  # 6: Sunday
    weeks = cal.monthdatescalendar(year, month)  # list[list[date]] (7일)
    return [d for w in weeks for d in w]


def month_week_index_map(year: int, month: int) -> dict[str, int]:
    """
    해당 월의 모든 날짜(YYYY-MM-DD) → 주차 index(1..N) 매핑.
    - 일요일 시작(일~토), 다른 달 날짜는 무시
    """
    year, month = normalize_month(year, month)
    cal = calendar.Calendar(firstweekday=6)
    idx = 0
    result = {}
    for w in cal.monthdatescalendar(year, month):
        in_month = [d for d in w if d.month == month]
        if not in_month:
            continue
        idx += 1
        for d in in_month:
            result[date_key(d)] = idx
    return result


def sunday_index(d: date) -> int:
    # date.weekday(): 월=0 .. 일=6 → 일=0, 월=1 ... 토=6
    return (d.weekday() + 1) % 7


def date_key(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def parse_date_key(text: str) -> date:
    """'YYYY-MM-DD' → date. 형식이 틀리면 ValueError."""
    return datetime.strptime(text.strip(), "%Y-%m-%d").date()


def date_range(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]

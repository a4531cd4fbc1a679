# data/holidays.py
from datetime import date

from leave_calendar.models.leave import Holiday

# 공휴일 파일이 없을 때 쓰는 기본 데이터
_FALLBACK = {
    2025: {
        "2025-01-01": "신정",
        "2025-01-28": "설날 연휴",
        "2025-01-29": "설날",
        "2025-01-30": "설날 연휴",
        "2025-03-01": "삼일절",
        "2025-03-03": "삼일절 대체공휴일",
        "2025-05-05": "어린이날·부처님오신날",
        "2025-05-06": "어린이날·부처님오신날 대체공휴일",
        "2025-06-06": "현충일",
        "2025-08-15": "광복절",
        "2025-10-03": "개천절",
        "2025-10-05": "추석 연휴",
        "2025-10-06": "추석",
        "2025-10-07": "추석 연휴",
        "2025-10-08": "추석 대체공휴일",
        "2025-10-09": "한글날",
        "2025-12-25": "성탄절",
    },
}


def fallback_holidays(year: int) -> list[Holiday]:
    table = _FALLBACK.get(year, {})
    return [Holiday(date.fromisoformat(k), v) for k, v in sorted(table.items())]

# data/data_manager.py
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from leave_calendar.data.holidays import fallback_holidays
from leave_calendar.models.leave import DEFAULT_COLOR, LEAVE_TYPES, Employee, Holiday, LeaveRecord
from leave_calendar.utils.date_helper import month_grid, parse_date_key

logger = logging.getLogger(__name__)

# 프로젝트 루트 = .../leave_calendar
BASE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = Path(os.environ.get("LEAVE_CALENDAR_DATA", BASE_DIR / "data"))
EMP_FILE = DATA_DIR / "employees.json"
LEAVE_FILE = DATA_DIR / "leaves.json"
HOLIDAY_FILE = DATA_DIR / "holidays.json"
FILTER_FILE = DATA_DIR / "filter.json"


def _ensure_data_dir():
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def _safe_json_load(path: Path, default):
    if not path.exists():
        return default
    try:
        raw = path.read_text(encoding="utf-8").strip()
        if not raw:
            return default
        return json.loads(raw)
    except (OSError, ValueError) as e:
        logger.warning("could not read %s: %s", path, e)
        return default


def _safe_json_save(path: Path, data):
    _ensure_data_dir()
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(path)


# ---------- 직원 ----------
def _employee_from_dict(d: Dict[str, Any]) -> Employee:
    return Employee(
        id=int(d["id"]),
        name=str(d["name"]),
        color=d.get("color") or DEFAULT_COLOR,
        team=d.get("team"),
    )


def load_employees(path: Optional[Path] = None) -> List[Employee]:
    data = _safe_json_load(path or EMP_FILE, default=[])
    out = []
    for item in data if isinstance(data, list) else []:
        try:
            out.append(_employee_from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("skipping malformed employee %r: %s", item, e)
    return out


# ---------- 휴가 ----------
def _leave_from_dict(d: Dict[str, Any]) -> LeaveRecord:
    # employeeId(웹 저장 형식) / employee_id 모두 허용
    emp = d.get("employee_id", d.get("employeeId"))
    typ = d.get("type", "연차")
    if typ not in LEAVE_TYPES:
        raise ValueError(f"unknown leave type {typ!r}")
    return LeaveRecord(
        id=d["id"],
        employee_id=int(emp),
        date=parse_date_key(d["date"]),
        type=typ,
        description=d.get("description") or None,
    )


def load_leaves(path: Optional[Path] = None) -> List[LeaveRecord]:
    data = _safe_json_load(path or LEAVE_FILE, default=[])
    out = []
    for item in data if isinstance(data, list) else []:
        try:
            out.append(_leave_from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("skipping malformed leave record %r: %s", item, e)
    return out


# ---------- 공휴일 ----------
def load_holidays(year: int, path: Optional[Path] = None) -> List[Holiday]:
    """
    holidays.json: {"2025-01-01": "신정", ...} 또는 [{"date":..., "name":...}, ...]
    파일이 없거나 해당 연도가 없으면 내장 데이터 사용.
    """
    data = _safe_json_load(path or HOLIDAY_FILE, default=None)
    if isinstance(data, dict):
        items = [{"date": k, "name": v} for k, v in data.items()]
    elif isinstance(data, list):
        items = data
    else:
        items = []

    out = []
    for item in items:
        try:
            d = parse_date_key(item["date"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("skipping malformed holiday %r: %s", item, e)
            continue
        if d.year == year:
            out.append(Holiday(d, str(item.get("name", ""))))

    if not out:
        return fallback_holidays(year)
    return sorted(out, key=lambda h: h.date)


def load_month_holidays(year: int, month: int, path: Optional[Path] = None) -> List[Holiday]:
    """달력 격자(앞뒤 달 날짜 포함)에 걸친 공휴일. 12월/1월 화면은 두 해를 읽는다."""
    dates = month_grid(year, month)
    first, last = dates[0], dates[-1]
    out = []
    for y in range(first.year, last.year + 1):
        out.extend(h for h in load_holidays(y, path) if first <= h.date <= last)
    return out


# ---------- 직원 필터 ----------
def load_visible_ids() -> Optional[List[int]]:
    """저장된 표시 직원 ID 목록. 없으면 None(전체 표시)."""
    data = _safe_json_load(FILTER_FILE, default=None)
    if not isinstance(data, list):
        return None
    return [int(x) for x in data if str(x).isdigit()]


def save_visible_ids(ids: Optional[List[int]]) -> None:
    if ids is None:
        FILTER_FILE.unlink(missing_ok=True)
        return
    _safe_json_save(FILTER_FILE, list(ids))

# utils/parse_utils.py
from typing import Optional


def parse_id_list(text: str) -> list[int]:
    """
    '1, 2,3' -> [1,2,3]
    빈문자열 -> []
    숫자 이외 토큰은 무시, 중복 제거(처음 순서 유지)
    """
    if not text.strip():
        return []
    seen = set()
    out = []
    for tok in text.split(","):
        tok = tok.strip()
        if not tok.isdigit():
            continue
        n = int(tok)
        if n not in seen:
            seen.add(n)
            out.append(n)
    return out


def parse_visible_ids(text: str) -> Optional[list[int]]:
    """직원 필터 입력. '전체'/'all'/빈값 → None(전체 표시)."""
    if text.strip().lower() in ("", "전체", "all"):
        return None
    return parse_id_list(text)


def parse_year_month(text: str) -> tuple[int, int]:
    """'2025-07' / '2025.7' / '2025 7' → (2025, 7). 형식이 틀리면 ValueError."""
    for sep in ("-", ".", "/", " "):
        if sep in text.strip():
            y, m = text.strip().split(sep, 1)
            break
    else:
        raise ValueError(f"연-월 형식이 아닙니다: {text!r}")
    year, month = int(y), int(m)
    if not 1 <= month <= 12:
        raise ValueError(f"월은 1~12 사이여야 합니다: {month}")
    return year, month

# exceptions.py
class CancelAction(Exception):
    """'취소' 입력: 현재 작업을 버리고 메인 메뉴로."""


class GoBackAction(Exception):
    """'뒤로' 입력: 이전 메뉴로."""

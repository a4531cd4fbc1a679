# gui/day_dialog.py
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QListWidget, QListWidgetItem, QPushButton
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QBrush

from leave_calendar.models.leave import DEFAULT_COLOR
from leave_calendar.utils.date_helper import WEEKDAYS_KR, date_key, sunday_index


def open_day_dialog(parent, day, employees) -> None:
    DayDetailDialog(parent, day, employees).exec()


class DayDetailDialog(QDialog):
    """
    하루의 모든 휴가 목록 (+N 더보기).
      - 직원 색상으로 표시
      - 업무는 설명 함께
    """
    def __init__(self, parent, day, employees):
        super().__init__(parent)
        self.setWindowTitle(f"{date_key(day.date)} 휴가 목록")
        emp_by_id = {e.id: e for e in employees}

        v = QVBoxLayout(self)
        title = f"{day.date.month}월 {day.date.day}일 ({WEEKDAYS_KR[sunday_index(day.date)]})"
        if day.holiday:
            title += f"  ·  {day.holiday.name}"
        head = QLabel(title)
        head.setStyleSheet("font-weight:600; font-size:14px;")
        v.addWidget(head)

        info = QLabel(f"총 {len(day.records)}건" + (f" (달력에 숨김 {day.overflow_count}건)" if day.overflow_count else ""))
        info.setStyleSheet("color:#666; font-size:11px;")
        v.addWidget(info)

        self.listw = QListWidget()
        self.listw.setSelectionMode(QListWidget.NoSelection)
        for r in day.records:
            e = emp_by_id.get(r.employee_id)
            name = e.name if e else "알 수 없음"
            text = f"{name}  |  {r.type}"
            if r.description:
                text += f"  ({r.description})"
            it = QListWidgetItem(text)
            it.setData(Qt.UserRole, r.id)
            it.setForeground(QBrush(QColor(e.color if e else DEFAULT_COLOR)))
            self.listw.addItem(it)
        v.addWidget(self.listw, 1)

        btns = QHBoxLayout()
        btns.addStretch(1)
        btn_close = QPushButton("닫기")
        btn_close.clicked.connect(self.accept)
        btns.addWidget(btn_close)
        v.addLayout(btns)

        self.setMinimumWidth(360); self.setMinimumHeight(320)

# gui/calendar_widget.py
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QSizePolicy
from PySide6.QtCore import Qt, QRectF, QPointF
from PySide6.QtGui import QPainter, QColor, QPen, QFont

from leave_calendar.logic.geometry import UniformGrid
from leave_calendar.models.leave import DEFAULT_COLOR
from leave_calendar.utils.date_helper import WEEKDAYS_KR, sunday_index

CELL_W = 140
CELL_H = 150
DAY_HEADER = 22      # 날짜 숫자/공휴일 이름 영역
BAR_H = 18
HALF_BAR_H = 16

SUNDAY_COLOR = QColor("#dc2626")
SATURDAY_COLOR = QColor("#2563eb")
OTHER_MONTH_BG = QColor("#f3f4f6")
BORDER = QColor("#e5e7eb")


def desktop_grid() -> UniformGrid:
    # 막대 좌표는 셀 원점 기준, 여기에 DAY_HEADER만큼 내려 그린다
    return UniformGrid(cell_width=CELL_W, row_height=22, header_height=6)


class MonthCanvas(QWidget):
    """DayLayout 목록을 7열 격자에 그린다. 연휴 막대는 시작일 셀에서 오른쪽으로 이어진다."""

    def __init__(self, on_day_open=None):
        super().__init__()
        self.on_day_open = on_day_open
        self.layout_data = None
        self.colors = {}
        self.names = {}
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        self.setFixedSize(CELL_W * 7, CELL_H * 5)

    def set_month(self, layout, employees):
        self.layout_data = layout
        self.colors = {e.id: e.color or DEFAULT_COLOR for e in employees}
        self.names = {e.id: e.name for e in employees}
        rows = max(1, len(layout) // 7)
        self.setFixedSize(CELL_W * 7, CELL_H * rows)
        self.update()

    def _cell_origin(self, idx):
        return QPointF((idx % 7) * CELL_W, (idx // 7) * CELL_H)

    def paintEvent(self, _ev):
        if self.layout_data is None:
            return
        p = QPainter(self)
        p.setRenderHint(QPainter.Antialiasing)
        small = QFont(self.font()); small.setPointSizeF(8)

        # 1) 셀 배경/날짜
        for i, day in enumerate(self.layout_data):
            o = self._cell_origin(i)
            rect = QRectF(o.x(), o.y(), CELL_W, CELL_H)
            if not day.is_current_month:
                p.fillRect(rect, OTHER_MONTH_BG)
            p.setPen(QPen(BORDER))
            p.drawRect(rect)

            wd = sunday_index(day.date)
            color = SUNDAY_COLOR if (wd == 0 or day.is_holiday) else SATURDAY_COLOR if wd == 6 else QColor("#374151")
            p.setPen(color)
            p.setFont(self.font())
            p.drawText(QRectF(o.x() + 6, o.y() + 2, 30, DAY_HEADER - 4), Qt.AlignLeft | Qt.AlignVCenter, str(day.date.day))
            if day.holiday:
                p.setFont(small)
                p.drawText(QRectF(o.x() + 30, o.y() + 2, CELL_W - 36, DAY_HEADER - 4),
                           Qt.AlignRight | Qt.AlignVCenter, day.holiday.name)

        # 2) 종일/연휴 막대 (셀 경계를 넘어 그려지므로 배경 다음에)
        p.setFont(small)
        for i, day in enumerate(self.layout_data):
            o = self._cell_origin(i)
            for bar in day.full_day_bars:
                r = QRectF(o.x() + bar.left + 2, o.y() + DAY_HEADER + bar.top, max(bar.width - 4, 4), BAR_H)
                self._draw_bar(p, r, bar.employee_id, bar.label(self.names.get(bar.employee_id, "?")))

            # 3) 반차
            for bar in day.half_day_bars:
                r = QRectF(o.x() + bar.left + 2, o.y() + DAY_HEADER + bar.top, max(bar.width - 4, 4), HALF_BAR_H)
                self._draw_bar(p, r, bar.employee_id, self.names.get(bar.employee_id, "?"))

            # 4) +N
            if day.overflow_count:
                p.setPen(QColor("#111827"))
                p.drawText(QRectF(o.x(), o.y() + CELL_H - 18, CELL_W - 6, 16),
                           Qt.AlignRight | Qt.AlignVCenter, day.overflow_label)
        p.end()

    def _draw_bar(self, p, rect, emp_id, text):
        color = QColor(self.colors.get(emp_id, DEFAULT_COLOR))
        p.setPen(Qt.NoPen)
        p.setBrush(color)
        p.drawRoundedRect(rect, 8, 8)
        p.setPen(QColor("white"))
        p.drawText(rect.adjusted(6, 0, -4, 0), Qt.AlignLeft | Qt.AlignVCenter, text)

    def day_at(self, pos):
        if self.layout_data is None:
            return None
        col = int(pos.x() // CELL_W)
        row = int(pos.y() // CELL_H)
        idx = row * 7 + col
        if 0 <= col < 7 and 0 <= idx < len(self.layout_data):
            return self.layout_data[idx]
        return None

    def mouseDoubleClickEvent(self, ev):
        day = self.day_at(ev.position())
        if day is not None and self.on_day_open:
            self.on_day_open(day)


class CalendarWidget(QWidget):
    def __init__(self, on_day_open):
        super().__init__()
        self.vbox = QVBoxLayout(self)

        header = QGridLayout()
        header.setHorizontalSpacing(0)
        self.vbox.addLayout(header)
        for c, w in enumerate(WEEKDAYS_KR):
            lbl = QLabel(w); lbl.setAlignment(Qt.AlignCenter)
            lbl.setFixedWidth(CELL_W)
            if c == 0:
                lbl.setStyleSheet("color:#dc2626; font-weight:600;")
            elif c == 6:
                lbl.setStyleSheet("color:#2563eb; font-weight:600;")
            header.addWidget(lbl, 0, c)

        self.canvas = MonthCanvas(on_day_open=on_day_open)
        self.vbox.addWidget(self.canvas, 0, Qt.AlignTop | Qt.AlignLeft)
        self.vbox.addStretch(1)

    def render_month(self, layout, employees):
        self.canvas.set_month(layout, employees)

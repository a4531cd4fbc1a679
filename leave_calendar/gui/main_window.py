# gui/main_window.py
import logging
from datetime import date

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QToolBar, QPushButton,
    QLabel, QListWidget, QListWidgetItem, QGroupBox, QSplitter, QScrollArea
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QColor, QBrush

from leave_calendar.data.data_manager import (
    load_employees, load_leaves, load_month_holidays, load_visible_ids, save_visible_ids
)
from leave_calendar.logic.layout import LayoutCache, build_month_layout
from leave_calendar.gui.calendar_widget import CalendarWidget, desktop_grid
from leave_calendar.gui.day_dialog import open_day_dialog
from leave_calendar.utils.date_helper import normalize_month

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("휴가 달력")
        self.resize(1280, 950)

        today = date.today()
        self.year = today.year
        self.month = today.month

        self.grid = desktop_grid()
        self.cache = LayoutCache()
        self.records_version = 0
        self.filter_version = 0

        self.employees = []
        self.leaves = []
        self.visible_ids = load_visible_ids()
        self._syncing = False

        self._build_ui()
        self.reload()

    # ---------------- UI ----------------
    def _build_ui(self):
        tb = QToolBar()
        self.addToolBar(tb)

        btn_prev = QPushButton("◀ 이전달")
        btn_prev.clicked.connect(self.prev_month)
        tb.addWidget(btn_prev)

        self.month_label = QLabel("")
        self.month_label.setStyleSheet("font-weight:600; padding:0 8px;")
        tb.addWidget(self.month_label)

        btn_next = QPushButton("다음달 ▶")
        btn_next.clicked.connect(self.next_month)
        tb.addWidget(btn_next)

        btn_today = QPushButton("오늘")
        btn_today.clicked.connect(self.go_today)
        tb.addWidget(btn_today)

        tb.addSeparator()

        btn_refresh = QPushButton("새로고침")
        btn_refresh.setToolTip("직원/휴가 파일을 다시 읽습니다")
        btn_refresh.clicked.connect(self.reload)
        tb.addWidget(btn_refresh)

        self.act_toggle_left = QAction("직원 필터 보기", self)
        self.act_toggle_left.setCheckable(True)
        self.act_toggle_left.setChecked(True)
        self.act_toggle_left.toggled.connect(self.toggle_left_panel)
        tb.addAction(self.act_toggle_left)

        central = QWidget()
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)

        splitter = QSplitter(Qt.Horizontal)
        splitter.setHandleWidth(2)
        root.addWidget(splitter)

        # ----- 좌측: 직원 필터 -----
        left_container = QWidget()
        left = QVBoxLayout(left_container)

        box = QGroupBox("표시할 직원")
        bv = QVBoxLayout(box)
        self.emp_list = QListWidget()
        bv.addWidget(self.emp_list)

        row = QHBoxLayout()
        btn_all = QPushButton("전체 선택")
        btn_none = QPushButton("전체 해제")
        btn_all.clicked.connect(lambda: self._check_all(True))
        btn_none.clicked.connect(lambda: self._check_all(False))
        row.addWidget(btn_all); row.addWidget(btn_none)
        bv.addLayout(row)
        left.addWidget(box)

        left_container.setMinimumWidth(220)
        left_container.setMaximumWidth(260)

        # ----- 우측: 달력 -----
        self.calendar = CalendarWidget(on_day_open=self.open_day)
        scroll = QScrollArea()
        scroll.setWidget(self.calendar)
        scroll.setWidgetResizable(True)

        splitter.addWidget(left_container)
        splitter.addWidget(scroll)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setCollapsible(0, True)
        splitter.setCollapsible(1, False)
        splitter.setSizes([left_container.minimumWidth(), 10_000])
        self._splitter = splitter
        self._left_container = left_container

        self.emp_list.itemChanged.connect(self._on_filter_changed)
        self.status = self.statusBar()

    # ---------------- 데이터/바인딩 ----------------
    def _fill_emp_list(self):
        self._syncing = True
        self.emp_list.clear()
        shown = None if self.visible_ids is None else set(self.visible_ids)
        for e in self.employees:
            it = QListWidgetItem(e.name + (f"  ({e.team})" if e.team else ""))
            it.setData(Qt.UserRole, e.id)
            it.setFlags(it.flags() | Qt.ItemIsUserCheckable)
            it.setCheckState(Qt.Checked if shown is None or e.id in shown else Qt.Unchecked)
            it.setForeground(QBrush(QColor(e.color)))
            self.emp_list.addItem(it)
        self._syncing = False

    def _checked_ids(self):
        out = []
        for i in range(self.emp_list.count()):
            it = self.emp_list.item(i)
            if it.checkState() == Qt.Checked:
                out.append(it.data(Qt.UserRole))
        return out

    def _on_filter_changed(self, _item):
        if self._syncing:
            return
        ids = self._checked_ids()
        # 전부 체크 = 필터 없음
        self.visible_ids = None if len(ids) == self.emp_list.count() else ids
        save_visible_ids(self.visible_ids)
        self.filter_version += 1
        self.cache.invalidate()
        self.refresh()

    def _check_all(self, checked: bool):
        self._syncing = True
        for i in range(self.emp_list.count()):
            self.emp_list.item(i).setCheckState(Qt.Checked if checked else Qt.Unchecked)
        self._syncing = False
        self._on_filter_changed(None)

    # ---------------- 동작 ----------------
    def reload(self):
        """파일에서 다시 읽는다. 휴가 데이터가 바뀌었으니 캐시도 통째로 버린다."""
        self.employees = load_employees()
        self.leaves = load_leaves()
        self.records_version += 1
        self.cache.invalidate()
        logger.info("loaded %d employees, %d leave records", len(self.employees), len(self.leaves))
        self._fill_emp_list()
        self.refresh()

    def _current_layout(self):
        def build():
            return build_month_layout(
                self.leaves, self.employees, self.year, self.month,
                holidays=load_month_holidays(self.year, self.month),
                visible_employee_ids=self.visible_ids,
                grid=self.grid,
            )
        return self.cache.get_or_build(
            self.records_version, self.filter_version, self.year, self.month, self.grid, build
        )

    def refresh(self):
        layout = self._current_layout()
        self.calendar.render_month(layout, self.employees)

        self.month_label.setText(f"{self.year}년 {self.month:02d}월")
        msg = f"직원 {len(self.employees)}명, 휴가 {len(self.leaves)}건, 트랙 {layout.track_count}줄"
        if layout.orphaned_count:
            msg += f", 직원 정보 없는 휴가 {layout.orphaned_count}건 제외"
        if layout.fallback_count:
            msg += f", 연휴 재계산 {layout.fallback_count}건"
        self.status.showMessage(msg)

    def open_day(self, day):
        open_day_dialog(self, day, self.employees)

    def prev_month(self):
        self.year, self.month = normalize_month(self.year, self.month - 1)
        self.refresh()

    def next_month(self):
        self.year, self.month = normalize_month(self.year, self.month + 1)
        self.refresh()

    def go_today(self):
        today = date.today()
        self.year, self.month = today.year, today.month
        self.refresh()

    def toggle_left_panel(self, visible: bool):
        sizes = self._splitter.sizes()
        total = sum(sizes) if sizes else 1280
        self._left_container.setVisible(visible)
        if visible:
            left_min = self._left_container.minimumWidth()
            self._splitter.setSizes([left_min, max(total - left_min, 500)])
        else:
            self._splitter.setSizes([0, total])

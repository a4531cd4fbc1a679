# main.py
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging():
    level = os.environ.get("LEAVE_CALENDAR_LOG", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def main(argv=None) -> int:
    """
    leave-calendar          → 데스크톱 달력(PySide6)
    leave-calendar cli      → 텍스트 메뉴
    """
    args = sys.argv[1:] if argv is None else list(argv)
    setup_logging()

    if args and args[0] == "cli":
        from leave_calendar.cli.menu import main_menu
        main_menu()
        return 0

    from PySide6.QtWidgets import QApplication
    from leave_calendar.gui.main_window import MainWindow

    app = QApplication(sys.argv[:1] + args)
    w = MainWindow()
    w.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())

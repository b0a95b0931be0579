import sys
import logging
import traceback
from PyQt5.QtWidgets import QApplication
from main_window import MainWindow
from logging_.app_logger import setup_logging_system
from utils.style_loader import load_stylesheet
from utils.worker import global_worker_manager


def global_except_hook(exctype, value, tb):
    """Logs any unhandled exception before handing it to the default hook."""
    logging.critical("Global unhandled exception caught!", exc_info=(exctype, value, tb))
    print(f"Unhandled {exctype.__name__}: {value}", file=sys.__stderr__)
    traceback.print_tb(tb, file=sys.__stderr__)
    sys.__excepthook__(exctype, value, tb)


def main():
    sys.excepthook = global_except_hook
    app = QApplication(sys.argv)
    app.setStyleSheet(load_stylesheet())
    main_win = MainWindow()
    app_logger, qt_log_handler = setup_logging_system(main_win.get_log_text_edit_for_setup(), 500)
    app_logger.info("Application started and logging is configured.")

    main_win.show()
    try:
        return app.exec_()
    finally:
        global_worker_manager.cancel_all()
        if not global_worker_manager.wait_all(timeout=10):
            print("Warning: some workers still running after timeout!", file=sys.__stderr__)
        qt_log_handler.close()


if __name__ == '__main__':
    sys.exit(main())

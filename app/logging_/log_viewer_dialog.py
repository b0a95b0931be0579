import logging
from PyQt5.QtWidgets import QDialog, QVBoxLayout, QDialogButtonBox, QMessageBox
from PyQt5.QtCore import Qt
from .log_widget import LogWidget
from .app_logger import find_shared_buffer

logger = logging.getLogger(__name__)


class LogViewerDialog(QDialog):
    def __init__(self, log_widget_instance: LogWidget, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Application Log Viewer")
        self.setMinimumSize(700, 500)
        self.setWindowModality(Qt.NonModal)

        self.log_widget = log_widget_instance
        self.log_widget.clear_button.clicked.connect(self.confirm_clear_logs)
        self.log_widget.level_changed.connect(self.on_log_level_filter_changed)
        self.log_widget.search_changed.connect(self.on_log_search_changed)

        main_layout = QVBoxLayout(self)
        main_layout.addWidget(self.log_widget)
        self.button_box = QDialogButtonBox(QDialogButtonBox.Close)
        self.button_box.rejected.connect(self.reject)
        main_layout.addWidget(self.button_box)

        self.on_log_level_filter_changed(self.log_widget.level_filter_combo.currentText())

    def on_log_level_filter_changed(self, level_name: str):
        shared_buffer = find_shared_buffer()
        if shared_buffer is None:
            logger.warning("Could not find SharedLogBuffer to set filter level.")
            return
        shared_buffer.set_filter_level(level_name)
        logger.debug(f"Log level filter set to {level_name}")

    def on_log_search_changed(self, text: str):
        shared_buffer = find_shared_buffer()
        if shared_buffer is None:
            logger.warning("Could not find SharedLogBuffer to search.")
            return
        shared_buffer.set_search(text)

    def confirm_clear_logs(self):
        reply = QMessageBox.question(self, 'Confirm Clear',
                                     "Are you sure you want to clear all logs from the display and buffer?",
                                     QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if reply != QMessageBox.Yes:
            return
        shared_buffer = find_shared_buffer()
        if shared_buffer is not None:
            shared_buffer.clear()
            logger.info("Log display and buffer cleared by user.")
        else:
            self.log_widget.log_display.clear()
            logger.warning("Log display cleared directly; no log buffer is installed.")

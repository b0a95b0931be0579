# app_logger.py

import sys
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal, QTimer

from datatable.columns import TableColumn
from datatable.filter_engine import filter_rows

logger_instance = logging.getLogger(__name__)

# Log records are searched with the same query syntax as data tables,
# e.g. "level:error table" or "logger:datatable fetch".
LOG_COLUMNS = [
    TableColumn(prop="time", name="Time"),
    TableColumn(prop="level", name="Level"),
    TableColumn(prop="logger", name="Logger"),
    TableColumn(prop="message", name="Message"),
]


def safe_message(record: logging.LogRecord) -> str:
    try:
        return record.getMessage()
    except Exception:
        return f"{record.msg} (ERR_ARGS: {record.args})"


def record_to_row(record: logging.LogRecord) -> Dict[str, str]:
    return {
        "time": datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
        "level": record.levelname,
        "logger": record.name,
        "message": safe_message(record),
    }


class LogEmitter(QObject):
    log_signal = pyqtSignal(str)
    reset_signal = pyqtSignal(str)


class SharedLogBuffer:
    def __init__(self, text_edit_widget, formatter: logging.Formatter, max_lines: int):
        self.text_edit = text_edit_widget
        self.formatter = formatter
        self.max_lines = max_lines
        self._all_records: List[logging.LogRecord] = []
        self.current_filter_level_name = "INFO"
        self.search_text = ""
        self.log_lines_for_display: List[str] = []
        self.log_emitter = LogEmitter()
        self.log_emitter.log_signal.connect(self._append_to_text_edit_gui)
        self.log_emitter.reset_signal.connect(self._replace_text_edit_gui)

        self._gui_update_buffer: List[str] = []
        self._buffer_timer = QTimer()
        self._buffer_timer.setInterval(500)
        self._buffer_timer.timeout.connect(self._process_gui_update_buffer)
        self._buffer_timer.start()

    def _format(self, record: logging.LogRecord) -> str:
        try:
            return self.formatter.format(record) if self.formatter else safe_message(record)
        except Exception:
            return f"[FORMAT ERROR] {safe_message(record)}"

    def _is_visible(self, record: logging.LogRecord) -> bool:
        if record.levelno < logging.getLevelName(self.current_filter_level_name):
            return False
        if not self.search_text:
            return True
        return bool(filter_rows([record_to_row(record)], self.search_text, LOG_COLUMNS))

    def add_record(self, record: logging.LogRecord):
        self._all_records.append(record)
        if len(self._all_records) > self.max_lines * 2:
            self._all_records = self._all_records[-self.max_lines:]
        if self._is_visible(record):
            self._gui_update_buffer.append(self._format(record))

    def visible_lines(self) -> List[str]:
        level_num = logging.getLevelName(self.current_filter_level_name)
        candidates = [r for r in self._all_records if r.levelno >= level_num]
        if self.search_text:
            rows = [record_to_row(r) for r in candidates]
            keep = {id(row) for row in filter_rows(rows, self.search_text, LOG_COLUMNS)}
            candidates = [r for r, row in zip(candidates, rows) if id(row) in keep]
        return [self._format(r) for r in candidates][-self.max_lines:]

    def _process_gui_update_buffer(self):
        if not self._gui_update_buffer or self.text_edit is None:
            return
        full_message_block = "\n".join(self._gui_update_buffer)
        self._gui_update_buffer.clear()
        try:
            self.log_emitter.log_signal.emit(full_message_block)
        except Exception as e_emit:
            print(f"Error during log emit: {e_emit}", file=sys.__stderr__)

    def _append_to_text_edit_gui(self, message_block_to_append: str):
        if self.text_edit is None:
            return
        self.log_lines_for_display.extend(message_block_to_append.splitlines())
        if len(self.log_lines_for_display) > self.max_lines:
            self.log_lines_for_display = self.log_lines_for_display[-self.max_lines:]
        self._show_lines()

    def _replace_text_edit_gui(self, full_text: str):
        if self.text_edit is None:
            return
        self.log_lines_for_display = full_text.splitlines() if full_text else []
        self._show_lines()

    def _show_lines(self):
        self.text_edit.setPlainText("\n".join(self.log_lines_for_display))
        self.text_edit.verticalScrollBar().setValue(self.text_edit.verticalScrollBar().maximum())

    def set_filter_level(self, level_name: str):
        new_level_name = level_name.upper()
        if self.current_filter_level_name != new_level_name:
            self.current_filter_level_name = new_level_name
            self._repopulate_display()

    def set_search(self, text: str):
        if self.search_text != text:
            self.search_text = text
            self._repopulate_display()

    def _repopulate_display(self):
        self._gui_update_buffer.clear()
        self.log_emitter.reset_signal.emit("\n".join(self.visible_lines()))

    def clear(self):
        self._all_records.clear()
        self._gui_update_buffer.clear()
        self.log_emitter.reset_signal.emit("")

    def shutdown(self):
        try:
            self._buffer_timer.stop()
            self._buffer_timer.timeout.disconnect(self._process_gui_update_buffer)
            self.log_emitter.log_signal.disconnect(self._append_to_text_edit_gui)
            self.log_emitter.reset_signal.disconnect(self._replace_text_edit_gui)
        except TypeError as e:
            logger_instance.warning(f"SharedLogBuffer shutdown cleanup error: {e}")
        self.text_edit = None
        self._all_records.clear()
        self._gui_update_buffer.clear()
        self.log_lines_for_display.clear()


class QTextEditStream:
    def __init__(self, shared_buffer_instance: SharedLogBuffer, is_stderr=False):
        self.shared_buffer = shared_buffer_instance
        self.is_stderr = is_stderr
        self.line_buffer: List[str] = []

    def write(self, message: str):
        self.line_buffer.append(message)
        if '\n' in message:
            self.flush()

    def flush(self):
        if not self.line_buffer:
            return
        full_msg = "".join(self.line_buffer).rstrip('\n')
        self.line_buffer.clear()
        if full_msg:
            record = logging.LogRecord(
                name='stderr' if self.is_stderr else 'stdout',
                level=logging.ERROR if self.is_stderr else logging.INFO,
                pathname='', lineno=0, msg=full_msg, args=(), exc_info=None, func=''
            )
            self.shared_buffer.add_record(record)

    def isatty(self): return False


class QtHandler(logging.Handler):
    def __init__(self, shared_buffer_instance: SharedLogBuffer, formatter: logging.Formatter):
        super().__init__()
        self.shared_buffer = shared_buffer_instance
        self.setFormatter(formatter)

    def emit(self, record: logging.LogRecord):
        try:
            self.shared_buffer.add_record(record)
        except Exception:
            self.handleError(record)

    def clear_logs_in_buffer(self):
        self.shared_buffer.clear()

    def close(self):
        if self.shared_buffer:
            self.shared_buffer.shutdown()
        super().close()


def find_shared_buffer() -> Optional[SharedLogBuffer]:
    for handler in logging.getLogger().handlers:
        if isinstance(handler, QtHandler):
            return handler.shared_buffer
    return None


def setup_logging_system(qtext_edit_for_logs, max_log_lines: int,
                         redirect_std_streams: bool = True) -> Tuple[logging.Logger, QtHandler]:
    log_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    shared_buffer = SharedLogBuffer(qtext_edit_for_logs, log_formatter, max_log_lines)
    qt_log_handler = QtHandler(shared_buffer, log_formatter)
    qt_log_handler.setLevel(logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(qt_log_handler)

    if redirect_std_streams:
        sys.stdout = QTextEditStream(shared_buffer, is_stderr=False)
        sys.stderr = QTextEditStream(shared_buffer, is_stderr=True)

    root_logger.info("Logging system initialized.")
    return root_logger, qt_log_handler

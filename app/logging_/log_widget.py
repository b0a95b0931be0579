from PyQt5.QtWidgets import QWidget, QVBoxLayout, QTextEdit, QPushButton, QHBoxLayout, QComboBox, QLabel, QLineEdit
from PyQt5.QtGui import QFont
from PyQt5.QtCore import pyqtSignal, QTimer


class LogWidget(QWidget):
    level_changed = pyqtSignal(str)
    search_changed = pyqtSignal(str)

    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    def __init__(self, parent=None):
        super().__init__(parent)

        self.log_display = QTextEdit()
        self.log_display.setReadOnly(True)
        font = QFont("Consolas", 10)
        if font.family() != "Consolas":
            font = QFont("Monospace", 10)
        self.log_display.setFont(font)
        self.log_display.setObjectName("LogDisplay")

        self.level_filter_combo = QComboBox()
        self.level_filter_combo.addItems(self.LOG_LEVELS)
        self.level_filter_combo.setCurrentText("INFO")
        self.level_filter_combo.currentTextChanged.connect(self.level_changed.emit)

        # Same query syntax as the data tables: "level:error fetch"
        self.search_input = QLineEdit()
        self.search_input.setObjectName("LogSearch")
        self.search_input.setPlaceholderText("Search log, e.g. logger:datatable failed")
        self.search_input.setClearButtonEnabled(True)
        self._search_timer = QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(300)
        self.search_input.textChanged.connect(self._search_timer.start)
        self._search_timer.timeout.connect(lambda: self.search_changed.emit(self.search_input.text()))

        self.clear_button = QPushButton("Clear Log")

        controls_layout = QHBoxLayout()
        controls_layout.addWidget(QLabel("Level:"))
        controls_layout.addWidget(self.level_filter_combo)
        controls_layout.addWidget(self.search_input, 1)
        controls_layout.addWidget(self.clear_button)

        layout = QVBoxLayout(self)
        layout.addLayout(controls_layout)
        layout.addWidget(self.log_display, 1)

import logging
import os
from functools import partial
from typing import Any, Dict, List

import numpy as np
from PyQt5.QtWidgets import QMainWindow, QAction, QFileDialog, QTabWidget

from datatable.config_store import QSettingsConfigStore
from datatable.fetchers import ThreadedFetcher, load_records
from logging_.log_viewer_dialog import LogViewerDialog
from logging_.log_widget import LogWidget
from shared_widgets.filterable_table_view import FilterableTableView

logger = logging.getLogger(__name__)

SAMPLE_COLUMNS = [
    {"prop": "id", "name": "ID"},
    {"prop": "name", "name": "Name"},
    {"prop": "category", "name": "Category"},
    {"prop": "score", "name": "Score"},
    {"prop": "tags", "name": "Tags"},
    {"prop": "active", "name": "Active?"},
]


def generate_sample_rows(count: int = 500, seed: int = 7) -> List[Dict[str, Any]]:
    rng = np.random.default_rng(seed)
    categories = np.array(['Alpha', 'Beta', 'Gamma', 'Delta', 'Epsilon'])
    tag_pool = np.array(['new', 'sale', 'archived', 'priority', 'draft'])
    rows = []
    for i in range(count):
        rows.append({
            "id": i,
            "name": f"Item {i}",
            "category": str(rng.choice(categories)),
            "score": round(float(rng.random() * 100), 2),
            "tags": [str(t) for t in rng.choice(tag_pool, size=int(rng.integers(0, 3)), replace=False)],
            "active": bool(rng.integers(0, 2)),
        })
    return rows


class MainWindow(QMainWindow):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Data Table")
        self.setGeometry(100, 100, 1400, 850)

        self._log_dialog_instance = None
        self._log_widget_for_dialog = LogWidget(self)
        self._store = QSettingsConfigStore("DataTable", "DataTableDemo")
        self._tables: List[FilterableTableView] = []

        self.tabs = QTabWidget(self)
        self.tabs.setTabsClosable(True)
        self.tabs.tabCloseRequested.connect(self._close_tab)
        self.setCentralWidget(self.tabs)

        self._setup_menu()
        self._open_sample_table()
        logger.info("MainWindow initialized.")

    def _setup_menu(self):
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        open_action = QAction("&Open Data File...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.open_data_file)
        file_menu.addAction(open_action)
        sample_action = QAction("New &Sample Table", self)
        sample_action.triggered.connect(self._open_sample_table)
        file_menu.addAction(sample_action)
        reset_action = QAction("&Reset Saved Table Layouts", self)
        reset_action.triggered.connect(self._reset_saved_layouts)
        file_menu.addAction(reset_action)
        file_menu.addSeparator()
        exit_action = QAction("&Exit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menu_bar.addMenu("&View")
        log_action = QAction("&Application Log", self)
        log_action.setShortcut("Ctrl+L")
        log_action.triggered.connect(self.show_log_viewer)
        view_menu.addAction(log_action)
        refresh_action = QAction("&Refresh Current Table", self)
        refresh_action.setShortcut("F5")
        refresh_action.triggered.connect(self._refresh_current)
        view_menu.addAction(refresh_action)

    def _add_table(self, table: FilterableTableView):
        self._tables.append(table)
        self.tabs.addTab(table, table.tab_name)
        self.tabs.setCurrentWidget(table)

    def _open_sample_table(self):
        table = FilterableTableView(
            SAMPLE_COLUMNS, tab_name="Sample", limit=25, store=self._store,
            custom_css={"inactive": False, "low-score": lambda v: isinstance(v, float) and v < 10},
            class_colors={"inactive": "#888888", "low-score": "#e06c75"})
        ThreadedFetcher(table.controller, partial(generate_sample_rows, 500))
        table.initialize()
        self._add_table(table)

    def open_data_file(self):
        file_name, _ = QFileDialog.getOpenFileName(
            self, "Open Data File", "", "Data Files (*.json *.csv *.xlsx);;All Files (*)")
        if not file_name:
            return
        try:
            preview = load_records(file_name)
        except Exception as e:
            logger.error(f"Could not open '{file_name}': {e}", exc_info=True)
            return
        props = list(preview[0].keys()) if preview else []
        if not props:
            logger.warning(f"'{file_name}' contains no columns.")
            return
        columns = [{"prop": p, "name": str(p)} for p in props]
        # The preview is shown right away; Refresh re-reads the file in the background.
        table = FilterableTableView(columns, data=preview, tab_name=os.path.basename(file_name),
                                    store=self._store, table_name=f"file:{file_name}", auto_reload=-1)
        ThreadedFetcher(table.controller, partial(load_records, file_name))
        table.initialize()
        self._add_table(table)

    def _refresh_current(self):
        table = self.tabs.currentWidget()
        if isinstance(table, FilterableTableView):
            table.controller.refresh()

    def _reset_saved_layouts(self):
        self._store.clear()
        logger.info("Saved table layouts cleared. They apply to tables opened from now on.")

    def _close_tab(self, index: int):
        table = self.tabs.widget(index)
        self.tabs.removeTab(index)
        if isinstance(table, FilterableTableView):
            self._tables.remove(table)
            table.close()
            table.deleteLater()

    def get_log_text_edit_for_setup(self):
        return self._log_widget_for_dialog.log_display

    def show_log_viewer(self):
        if self._log_dialog_instance is None:
            self._log_dialog_instance = LogViewerDialog(self._log_widget_for_dialog, self)
        if self._log_dialog_instance.isHidden():
            self._log_dialog_instance.show()
        else:
            self._log_dialog_instance.activateWindow()
            self._log_dialog_instance.raise_()

    def closeEvent(self, event):
        logger.info("Application closing.")
        if self._log_dialog_instance and self._log_dialog_instance.isVisible():
            self._log_dialog_instance.close()
        for table in self._tables:
            table.close()
        super().closeEvent(event)

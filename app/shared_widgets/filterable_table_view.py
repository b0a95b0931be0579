import sys
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from PyQt5.QtWidgets import (
    QTableView, QAbstractItemView, QVBoxLayout, QLineEdit, QWidget,
    QHBoxLayout, QComboBox, QStatusBar, QHeaderView, QMenu, QApplication, QShortcut,
    QDialog, QTextEdit, QDialogButtonBox, QLabel, QFileDialog, QMessageBox,
    QToolButton, QAction
)
from PyQt5.QtCore import (
    QAbstractTableModel, Qt, QModelIndex, QItemSelection, QItemSelectionModel,
    QObject, pyqtSignal, pyqtSlot, QTimer, QPoint
)
from PyQt5.QtGui import QKeySequence, QColor

from datatable.cell_values import display_text, get_cell
from datatable.columns import TableColumn
from datatable.config_store import ConfigStore
from datatable.selection import UpdateSelectionPolicy
from datatable.sorting import SortDirection, SortEntry
from datatable.table_controller import TableController
from utils.create_button import createButton
from utils.worker import Worker

logger = logging.getLogger(__name__)

CSS_CLASS_ROLE = Qt.UserRole + 1
ROW_DATA_ROLE = Qt.UserRole + 2


def export_rows_to_excel(rows: Sequence[Dict[str, Any]], columns: Sequence[TableColumn], file_name: str) -> str:
    """Writes the given rows (display text, visible columns only) to an xlsx file."""
    records = [{c.name: display_text(get_cell(row, c.prop), c.pipe) for c in columns} for row in rows]
    df = pd.DataFrame(records, columns=[c.name for c in columns])
    df.to_excel(file_name, index=False, engine='openpyxl')
    return f"Exported {len(df)} rows to {file_name}"


# --- Table Model over a TableController ---
class DataTableModel(QAbstractTableModel):
    def __init__(self, controller: TableController, class_colors: Optional[Dict[str, str]] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._controller = controller
        self._class_colors = {k: QColor(v) for k, v in (class_colors or {}).items()}
        self._rows: List[Dict[str, Any]] = []
        self._columns: List[TableColumn] = []
        self._loaded_rows = 0

    @property
    def rows(self) -> List[Dict[str, Any]]:
        return self._rows

    @property
    def columns(self) -> List[TableColumn]:
        return self._columns

    @property
    def loaded_rows(self) -> int:
        return self._loaded_rows

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid(): return 0
        return self._loaded_rows

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid(): return 0
        return len(self._columns)

    def row_at(self, row: int) -> Optional[Dict[str, Any]]:
        if 0 <= row < len(self._rows):
            return self._rows[row]
        return None

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid() or index.row() >= self._loaded_rows or index.column() >= len(self._columns):
            return None
        row = self._rows[index.row()]
        column = self._columns[index.column()]
        value = get_cell(row, column.prop)
        try:
            if role == Qt.DisplayRole:
                return display_text(value, column.pipe)
            elif role == Qt.EditRole:
                return value
            elif role == ROW_DATA_ROLE:
                return row
            elif role == Qt.TextAlignmentRole:
                if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
                    return Qt.AlignRight | Qt.AlignVCenter
                return Qt.AlignLeft | Qt.AlignVCenter
            elif role == CSS_CLASS_ROLE:
                return self._css_classes(value)
            elif role == Qt.ForegroundRole and self._class_colors:
                classes = self._css_classes(value)
                if classes:
                    for name in classes.split(" "):
                        if name in self._class_colors:
                            return self._class_colors[name]
            elif role == Qt.ToolTipRole:
                raw_value_str = display_text(value, column.pipe)
                if len(raw_value_str) > 250: raw_value_str = raw_value_str[:250] + "..."
                return f"{column.name}\nType: {type(value).__name__}\nValue: {raw_value_str}"
        except Exception as e:
            logger.error(f"Model: Data access error at R{index.row()},C{index.column()}: {e}", exc_info=True)
        return None

    def _css_classes(self, value: Any) -> Optional[str]:
        if self._controller.custom_css is None:
            return None
        return self._controller.use_custom_class(value)

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole) -> Any:
        if role == Qt.DisplayRole:
            if orientation == Qt.Horizontal:
                if 0 <= section < len(self._columns): return self._columns[section].name
                return None
            return str(section + 1)
        if role == Qt.ToolTipRole and orientation == Qt.Horizontal and 0 <= section < len(self._columns):
            column = self._columns[section]
            return f"Column: {column.name}\nProperty: {column.prop}\nSearch with: {column.name.lower()}:<text>"
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        if not index.isValid(): return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    @pyqtSlot()
    def refresh_from_controller(self):
        self.beginResetModel()
        self._columns = list(self._controller.table_columns)
        self._rows = self._controller.sorted_rows()
        self._loaded_rows = min(self._controller.user_config.limit, len(self._rows))
        self.endResetModel()
        logger.debug(f"Model: Refreshed. {self._loaded_rows} of {len(self._rows)} rows loaded, "
                     f"{len(self._columns)} columns.")

    def load_more_rows(self):
        if self._loaded_rows >= len(self._rows): return
        rows_to_add = min(self._controller.user_config.limit, len(self._rows) - self._loaded_rows)
        if rows_to_add <= 0: return
        self.beginInsertRows(QModelIndex(), self._loaded_rows, self._loaded_rows + rows_to_add - 1)
        self._loaded_rows += rows_to_add
        self.endInsertRows()
        logger.debug(f"Model: Loaded more rows. Total loaded: {self._loaded_rows} of {len(self._rows)}")

    def sort(self, column_index: int, order: Qt.SortOrder = Qt.AscendingOrder):
        if column_index < 0 or column_index >= len(self._columns):
            return
        direction = SortDirection.ASC if order == Qt.AscendingOrder else SortDirection.DESC
        prop = self._columns[column_index].prop
        logger.debug(f"Model: Sort requested on '{prop}' ({direction.value}).")
        self._controller.change_sorting([SortEntry(prop=prop, dir=direction)])


# --- Selection Dialog ---
class SelectionDialog(QDialog):
    def __init__(self, cell_data_str: str, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle("Cell Content")
        self.setMinimumSize(500, 300)
        layout = QVBoxLayout(self)
        self.text_edit = QTextEdit(self)
        self.text_edit.setReadOnly(True)
        self.text_edit.setText(cell_data_str)
        layout.addWidget(self.text_edit)

        button_box = QDialogButtonBox(QDialogButtonBox.Close, self)
        copy_button = button_box.addButton("Copy to Clipboard", QDialogButtonBox.ActionRole)
        copy_button.clicked.connect(lambda: QApplication.clipboard().setText(self.text_edit.toPlainText()))
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)


# --- Main Table View Widget ---
class FilterableTableView(QWidget):
    DEFAULT_MAX_COLUMN_WIDTH: Optional[int] = 400
    MAX_ROW_HEIGHT: Optional[int] = 150
    ENABLE_TEXT_WRAPPING: bool = True
    FILTER_DEBOUNCE_MS: int = 350
    LIMIT_CHOICES = ("10", "25", "50", "100")

    loadingStarted = pyqtSignal()
    loadingFinished = pyqtSignal(bool)
    selectionUpdated = pyqtSignal(object)

    def __init__(self, columns: Sequence[Union[TableColumn, Dict[str, Any]]],
                 data: Optional[Union[pd.DataFrame, Sequence[Dict[str, Any]]]] = None,
                 tab_name: str = "Data",
                 identifier: str = TableController.DEFAULT_IDENTIFIER,
                 force_identifier: bool = False,
                 table_name: Optional[str] = None,
                 limit: int = TableController.DEFAULT_LIMIT,
                 auto_reload: int = 0,
                 update_selection_on_refresh: Union[str, UpdateSelectionPolicy] = UpdateSelectionPolicy.ON_CHANGE,
                 custom_css: Optional[Dict[str, Any]] = None,
                 class_colors: Optional[Dict[str, str]] = None,
                 store: Optional[ConfigStore] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.tab_name = tab_name
        self._syncing_selection = False
        self._selection_from_view = False
        self._column_actions: Dict[str, QAction] = {}

        self.controller = TableController(
            columns, data=data, identifier=identifier, force_identifier=force_identifier,
            table_name=table_name, limit=limit, auto_reload=auto_reload,
            update_selection_on_refresh=update_selection_on_refresh, custom_css=custom_css,
            store=store, parent=self)
        self.model = DataTableModel(self.controller, class_colors=class_colors, parent=self)

        self.table_view = QTableView()
        self.filter_input = QLineEdit()
        self.limit_selector = QComboBox()
        self.columns_button = QToolButton()
        self.columns_menu = QMenu(self)
        self.refresh_button = createButton("Refresh", self.controller.refresh, tooltip="Reload data",
                                           object_name="TableRefreshButton")
        self.export_button = createButton("Export", self._initiate_export_to_excel,
                                          tooltip="Export visible rows to Excel",
                                          object_name="TableExportButton")
        self.error_label = QLabel("Data could not be loaded.")
        self.status_bar = QStatusBar()
        self._filter_timer = QTimer(self)
        self._filter_timer.setSingleShot(True)
        self._filter_timer.setInterval(self.FILTER_DEBOUNCE_MS)

        self._setup_ui_elements()
        self._connect_all_signals()
        logger.info(f"View: FilterableTableView '{tab_name}' created.")

    def initialize(self):
        """Restores the stored configuration and performs the first load."""
        self.controller.initialize()
        self.filter_input.blockSignals(True)
        self.filter_input.setText(self.controller.search)
        self.filter_input.blockSignals(False)
        self.limit_selector.setCurrentText(str(self.controller.user_config.limit))
        self._rebuild_columns_menu()
        self._sync_sort_indicator()
        self.model.refresh_from_controller()

    def _setup_ui_elements(self):
        self.table_view.setModel(self.model)
        self.table_view.setSortingEnabled(True)
        self.table_view.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table_view.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table_view.setAlternatingRowColors(True)
        self.table_view.setContextMenuPolicy(Qt.CustomContextMenu)

        if self.ENABLE_TEXT_WRAPPING: self.table_view.setWordWrap(True)
        else: self.table_view.setWordWrap(False); self.table_view.setTextElideMode(Qt.ElideRight)

        h_header = self.table_view.horizontalHeader()
        h_header.setSectionResizeMode(QHeaderView.Interactive)
        h_header.setSectionsClickable(True)
        h_header.setContextMenuPolicy(Qt.CustomContextMenu)
        v_header = self.table_view.verticalHeader()
        v_header.setSectionResizeMode(QHeaderView.Fixed)
        font_metrics_height = v_header.fontMetrics().height()
        v_header.setDefaultSectionSize(font_metrics_height + 12 if self.ENABLE_TEXT_WRAPPING else font_metrics_height + 8)

        self.filter_input.setObjectName("TableSearch")
        self.filter_input.setPlaceholderText("Search, e.g. foo 'two words' column:value")
        self.filter_input.setClearButtonEnabled(True)

        self.limit_selector.setEditable(True)
        self.limit_selector.addItems(self.LIMIT_CHOICES)
        self.limit_selector.setToolTip("Rows loaded per page")

        self.columns_button.setText("Columns")
        self.columns_button.setPopupMode(QToolButton.InstantPopup)
        self.columns_button.setMenu(self.columns_menu)

        self.error_label.setObjectName("TableLoadingError")
        self.error_label.setVisible(False)

        filter_layout = QHBoxLayout()
        filter_layout.addWidget(QLabel("Search:"))
        filter_layout.addWidget(self.filter_input, 2)
        filter_layout.addWidget(self.limit_selector)
        filter_layout.addWidget(self.columns_button)
        filter_layout.addStretch(0)
        filter_layout.addWidget(self.refresh_button)
        filter_layout.addWidget(self.export_button)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(2, 2, 2, 2)
        main_layout.addLayout(filter_layout)
        main_layout.addWidget(self.error_label)
        main_layout.addWidget(self.table_view, 1)
        main_layout.addWidget(self.status_bar)

    def _connect_all_signals(self):
        self.filter_input.textChanged.connect(self._filter_timer.start)
        self._filter_timer.timeout.connect(self._apply_search_text)
        self.limit_selector.activated[str].connect(self._on_limit_entered)
        self.limit_selector.lineEdit().editingFinished.connect(
            lambda: self._on_limit_entered(self.limit_selector.currentText()))

        selection_model = self.table_view.selectionModel()
        if selection_model: selection_model.selectionChanged.connect(self._on_table_selection_changed)

        scrollbar = self.table_view.verticalScrollBar()
        if scrollbar: scrollbar.valueChanged.connect(self._check_scroll_to_load_more)

        self.table_view.customContextMenuRequested.connect(self._show_table_context_menu)
        self.table_view.horizontalHeader().customContextMenuRequested.connect(
            lambda pos: self.columns_menu.exec_(self.table_view.horizontalHeader().mapToGlobal(pos)))
        self.table_view.horizontalHeader().sectionResized.connect(self._handle_column_resize)

        self.controller.rowsChanged.connect(self._on_rows_changed)
        self.controller.columnsChanged.connect(self._on_columns_changed)
        self.controller.sortsChanged.connect(self._on_sorts_changed)
        self.controller.limitChanged.connect(self._on_limit_changed)
        self.controller.loadingChanged.connect(self._on_loading_changed)
        self.controller.loadingError.connect(self._on_loading_error)
        self.controller.updateSelection.connect(self._on_controller_selection)

        QShortcut(QKeySequence.Copy, self.table_view, self._copy_selected_cells_to_clipboard)

    # --- Controller -> view ---
    @pyqtSlot()
    def _on_rows_changed(self):
        self.model.refresh_from_controller()
        self._restore_view_selection()
        self.update_status_bar(self.get_current_status_message())
        QTimer.singleShot(0, self._perform_layout_adjustments_after_data)

    @pyqtSlot()
    def _on_columns_changed(self):
        self._sync_columns_menu()
        self.model.refresh_from_controller()
        self._restore_view_selection()
        self._sync_sort_indicator()
        QTimer.singleShot(0, self._perform_layout_adjustments_after_data)

    @pyqtSlot(object)
    def _on_sorts_changed(self, sorts: List[SortEntry]):
        self.model.refresh_from_controller()
        self._restore_view_selection()
        self._sync_sort_indicator()

    @pyqtSlot(int)
    def _on_limit_changed(self, limit: int):
        if self.limit_selector.currentText() != str(limit):
            self.limit_selector.setCurrentText(str(limit))
        self.model.refresh_from_controller()
        self._restore_view_selection()
        self.update_status_bar(self.get_current_status_message())

    @pyqtSlot(bool)
    def _on_loading_changed(self, loading: bool):
        self.refresh_button.setEnabled(not loading)
        if loading:
            self.error_label.setVisible(False)
            self.update_status_bar("Loading data...")
            self.loadingStarted.emit()
        else:
            self.loadingFinished.emit(not self.controller.loading_error)

    @pyqtSlot(bool)
    def _on_loading_error(self, display_error: bool):
        self.error_label.setVisible(display_error)
        if display_error:
            self.update_status_bar("Error: data could not be loaded.")

    @pyqtSlot(object)
    def _on_controller_selection(self, selection: Any):
        if not self._selection_from_view:
            self._restore_view_selection()
        self.selectionUpdated.emit(selection)

    def _sync_sort_indicator(self):
        sorts = self.controller.user_config.sorts
        if not sorts:
            return
        for idx, column in enumerate(self.model.columns):
            if column.prop == sorts[0].prop:
                order = Qt.AscendingOrder if sorts[0].dir == SortDirection.ASC else Qt.DescendingOrder
                header = self.table_view.horizontalHeader()
                header.blockSignals(True)
                header.setSortIndicator(idx, order)
                header.blockSignals(False)
                return

    def _rebuild_columns_menu(self):
        self.columns_menu.clear()
        self._column_actions.clear()
        for column in self.controller.columns:
            action = QAction(column.name, self.columns_menu)
            action.setCheckable(True)
            action.setChecked(not column.is_hidden)
            action.toggled.connect(lambda checked, prop=column.prop: self._on_column_toggled(prop, checked))
            self.columns_menu.addAction(action)
            self._column_actions[column.prop] = action

    def _sync_columns_menu(self):
        # Runs inside QAction.toggled, so the actions are updated rather than recreated.
        for column in self.controller.columns:
            action = self._column_actions.get(column.prop)
            if action is None:
                self._rebuild_columns_menu()
                return
            action.blockSignals(True)
            action.setChecked(not column.is_hidden)
            action.blockSignals(False)

    def _on_column_toggled(self, prop: str, checked: bool):
        if not self.controller.toggle_column(prop, checked):
            action = self._column_actions.get(prop)
            if action is not None:
                action.blockSignals(True)
                action.setChecked(True)
                action.blockSignals(False)
            self.update_status_bar("At least one column has to stay visible.")

    # --- View -> controller ---
    @pyqtSlot()
    def _apply_search_text(self):
        self.controller.set_search(self.filter_input.text())

    @pyqtSlot(str)
    def _on_limit_entered(self, text: str):
        limit = self.controller.set_limit(text)
        logger.debug(f"View: Limit for '{self.tab_name}' set to {limit}.")

    def set_data(self, data: Optional[Union[pd.DataFrame, Sequence[Dict[str, Any]]]]):
        logger.info(f"View: Setting new data for tab '{self.tab_name}'.")
        self.controller.set_data(data)

    def selected_rows(self) -> List[Dict[str, Any]]:
        selection_model = self.table_view.selectionModel()
        if not selection_model: return []
        rows = sorted({idx.row() for idx in selection_model.selectedRows()})
        return [r for r in (self.model.row_at(i) for i in rows) if r is not None]

    @pyqtSlot(QItemSelection, QItemSelection)
    def _on_table_selection_changed(self, selected: QItemSelection, deselected: QItemSelection):
        if self._syncing_selection: return
        rows = self.selected_rows()
        self._selection_from_view = True
        try:
            self.controller.on_select(rows)
        finally:
            self._selection_from_view = False
        if len(rows) == 1:
            key = rows[0].get(self.controller.identifier)
            self.update_status_bar(f"Selected row {self.controller.identifier}={key}")
        elif rows:
            self.update_status_bar(f"{len(rows)} rows selected.")
        else:
            self.update_status_bar(self.get_current_status_message())

    def _restore_view_selection(self):
        selection_model = self.table_view.selectionModel()
        if not selection_model: return
        identifier = self.controller.identifier
        wanted = {row.get(identifier) for row in self.controller.selection.selected}
        self._syncing_selection = True
        try:
            selection_model.clearSelection()
            for i in range(self.model.loaded_rows):
                row = self.model.row_at(i)
                if row is not None and row.get(identifier) in wanted:
                    selection_model.select(self.model.index(i, 0),
                                           QItemSelectionModel.Select | QItemSelectionModel.Rows)
        finally:
            self._syncing_selection = False

    # --- Layout ---
    def _perform_layout_adjustments_after_data(self):
        columns = self.model.columns
        if not columns: return
        try:
            h_header = self.table_view.horizontalHeader()
            available = max(self.table_view.viewport().width(), 200)
            total_flex = sum(c.flex_grow or 1 for c in columns)
            max_col_width = self.DEFAULT_MAX_COLUMN_WIDTH if self.DEFAULT_MAX_COLUMN_WIDTH is not None else sys.maxsize
            fm = h_header.fontMetrics()
            padding = 30
            for col_idx, column in enumerate(columns):
                share = int(available * (column.flex_grow or 1) / total_flex)
                required_header_width = max(50, fm.horizontalAdvance(column.name) + padding)
                final_width = min(max(share, required_header_width), max_col_width)
                h_header.resizeSection(col_idx, final_width)
                mode = QHeaderView.Interactive if column.resizeable else QHeaderView.Fixed
                h_header.setSectionResizeMode(col_idx, mode)
            if self.ENABLE_TEXT_WRAPPING:
                self._resize_row_range(0, self.model.loaded_rows - 1)
        except Exception as e:
            logger.error(f"View: Error during layout adjustments for '{self.tab_name}': {e}", exc_info=True)

    def _resize_row_range(self, start_row: int, end_row: int):
        for i in range(start_row, end_row + 1):
            if i >= self.model.rowCount(): break
            self.table_view.resizeRowToContents(i)
            if self.MAX_ROW_HEIGHT and self.table_view.rowHeight(i) > self.MAX_ROW_HEIGHT:
                self.table_view.setRowHeight(i, self.MAX_ROW_HEIGHT)

    @pyqtSlot(int, int, int)
    def _handle_column_resize(self, logicalIndex: int, oldSize: int, newSize: int):
        max_width = self.DEFAULT_MAX_COLUMN_WIDTH
        if max_width is not None and newSize > max_width:
            QTimer.singleShot(0, lambda lidx=logicalIndex, mwidth=max_width:
                              self.table_view.horizontalHeader().resizeSection(lidx, mwidth))

    def resizeEvent(self, event: Any):
        super().resizeEvent(event)
        self._perform_layout_adjustments_after_data()

    @pyqtSlot(int)
    def _check_scroll_to_load_more(self, value: int):
        scrollbar = self.table_view.verticalScrollBar()
        if not scrollbar: return
        trigger_threshold = max(0, scrollbar.maximum() - (scrollbar.pageStep() * 1.5))
        if value >= trigger_threshold and self.model.loaded_rows < len(self.model.rows):
            start = self.model.loaded_rows
            self.model.load_more_rows()
            self._restore_view_selection()
            if self.ENABLE_TEXT_WRAPPING:
                QTimer.singleShot(50, lambda s=start, e=self.model.loaded_rows - 1: self._resize_row_range(s, e))
            self.update_status_bar(self.get_current_status_message())

    # --- Status ---
    def get_current_status_message(self) -> str:
        total = len(self.model.rows)
        search = self.controller.search
        if total == 0:
            return f"No data matches search: '{search}'." if search else "No data to display."
        status = f"{self.model.loaded_rows} of {total} rows shown ({len(self.controller.data)} total)."
        if search: status += f" Search: '{search}'."
        return status

    def update_status_bar(self, message: str):
        try:
            if self.status_bar: self.status_bar.showMessage(str(message), 0)
        except RuntimeError: pass

    # --- Clipboard / context menu ---
    @pyqtSlot()
    def _copy_selected_cells_to_clipboard(self):
        selection_model = self.table_view.selectionModel()
        if not selection_model or not selection_model.hasSelection():
            self.update_status_bar("No cells selected to copy.")
            return
        try:
            selected_indexes = selection_model.selectedIndexes()
            min_row = min(idx.row() for idx in selected_indexes)
            max_row = max(idx.row() for idx in selected_indexes)
            min_col = min(idx.column() for idx in selected_indexes)
            max_col = max(idx.column() for idx in selected_indexes)
            data_grid = [["" for _ in range(max_col - min_col + 1)] for _ in range(max_row - min_row + 1)]
            for index in selected_indexes:
                value = self.model.data(index, Qt.DisplayRole)
                data_grid[index.row() - min_row][index.column() - min_col] = str(value if value is not None else "")
            clipboard_text = pd.DataFrame(data_grid).to_csv(sep='\t', index=False, header=False)
            QApplication.clipboard().setText(clipboard_text)
            self.update_status_bar(f"Copied {len(selected_indexes)} cells to clipboard.")
        except Exception as e:
            logger.error(f"View: Error during copy to clipboard for '{self.tab_name}': {e}", exc_info=True)
            self.update_status_bar(f"Error during copy: {e}")

    @pyqtSlot(QPoint)
    def _show_table_context_menu(self, pos: QPoint):
        index_at_pos = self.table_view.indexAt(pos)
        context_menu = QMenu(self)
        selection_model = self.table_view.selectionModel()
        copy_action = context_menu.addAction("Copy Selection (Ctrl+C)")
        copy_action.triggered.connect(self._copy_selected_cells_to_clipboard)
        copy_action.setEnabled(selection_model is not None and selection_model.hasSelection())
        view_cell_action = context_menu.addAction("View/Copy Cell Content...")
        view_cell_action.setEnabled(index_at_pos.isValid())
        if index_at_pos.isValid():
            view_cell_action.triggered.connect(
                lambda checked=False, idx=index_at_pos: self._show_cell_content_dialog(idx))
        context_menu.addSeparator()
        context_menu.addMenu(self.columns_menu).setText("Columns")
        context_menu.exec_(self.table_view.mapToGlobal(pos))

    def _show_cell_content_dialog(self, index: QModelIndex):
        try:
            dialog = SelectionDialog(str(self.model.data(index, Qt.DisplayRole) or ""), self)
            dialog.exec_()
        except Exception as e:
            logger.error(f"View: Error opening cell content dialog for '{self.tab_name}': {e}", exc_info=True)
            self.update_status_bar(f"Error opening cell content dialog: {e}")

    # --- Export ---
    @pyqtSlot()
    def _initiate_export_to_excel(self):
        if not self.model.rows:
            QMessageBox.information(self, "Nothing to export", "There are no rows to export.")
            return
        default_filename = f"{self.tab_name.replace(' ', '_')}_export.xlsx"
        file_name, _ = QFileDialog.getSaveFileName(
            self, "Save Visible Rows to Excel", default_filename, "Excel Files (*.xlsx);;All Files (*)")
        if file_name:
            self.export_to_excel(file_name)

    def export_to_excel(self, file_name: str, run_in_thread: bool = True):
        self.export_button.setEnabled(False)
        self.update_status_bar("Exporting data to Excel...")
        worker = Worker(export_rows_to_excel, list(self.model.rows), list(self.model.columns), file_name)
        worker.connect_finished(self._handle_export_finished)
        worker.connect_error(self._handle_export_failed)
        if run_in_thread:
            worker.start_worker()
        else:
            worker.run()

    @pyqtSlot(object)
    def _handle_export_finished(self, message: str):
        self.export_button.setEnabled(True)
        logger.info(f"View: {message}")
        self.update_status_bar(message)

    @pyqtSlot(str)
    def _handle_export_failed(self, message: str):
        self.export_button.setEnabled(True)
        logger.error(f"View: Export failed for '{self.tab_name}': {message}")
        self.update_status_bar("Export failed.")
        QMessageBox.critical(self, "Export Failed", message)

    def closeEvent(self, event: Any):
        logger.info(f"View: closeEvent for '{self.tab_name}'.")
        self.controller.stop_auto_reload()
        super().closeEvent(event)

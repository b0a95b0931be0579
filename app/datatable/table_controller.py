# datatable/table_controller.py
import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd
from PyQt5.QtCore import QObject, QTimer, pyqtSignal, pyqtSlot

from .columns import TableColumn, find_column, init_column_layout, visible_columns
from .config_store import ConfigStore, MemoryConfigStore
from .custom_css import CustomClassMap, use_custom_class
from .fetch import FetchDataContext, LoadState
from .filter_engine import filter_rows
from .selection import TableSelection, UpdateSelectionPolicy, reselect_rows
from .sorting import SortEntry, create_sorting_definition, sort_rows
from .tokenizer import prepare_search
from .user_config import UserConfig, UserConfigPersistence, apply_column_states, column_states

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
LIMIT_RE = re.compile(r"^\s*([+-]?\d+)")


class TableController(QObject):
    """
    State behind one data table: the full dataset, the rows currently shown,
    the visible columns and the persisted user configuration. All methods are
    meant to be called on the GUI thread.
    """

    DEFAULT_IDENTIFIER = "id"
    DEFAULT_LIMIT = 10

    rowsChanged = pyqtSignal()
    columnsChanged = pyqtSignal()
    sortsChanged = pyqtSignal(object)
    limitChanged = pyqtSignal(int)
    loadingChanged = pyqtSignal(bool)
    loadingError = pyqtSignal(bool)
    fetchData = pyqtSignal(object)
    updateSelection = pyqtSignal(object)

    def __init__(self,
                 columns: Sequence[Union[TableColumn, Dict[str, Any]]],
                 data: Optional[Sequence[Row]] = None,
                 identifier: str = DEFAULT_IDENTIFIER,
                 force_identifier: bool = False,
                 table_name: Optional[str] = None,
                 sorts: Optional[Sequence[SortEntry]] = None,
                 limit: int = DEFAULT_LIMIT,
                 auto_reload: int = 0,
                 update_selection_on_refresh: Union[str, UpdateSelectionPolicy] = UpdateSelectionPolicy.ON_CHANGE,
                 custom_css: Optional[Union[CustomClassMap, Dict[str, Any]]] = None,
                 store: Optional[ConfigStore] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.columns: List[TableColumn] = [c if isinstance(c, TableColumn) else TableColumn.from_dict(c)
                                           for c in columns]
        self.data: List[Row] = self._as_rows(data)
        self.rows: List[Row] = []
        self.table_columns: List[TableColumn] = []
        self.identifier = identifier
        self.force_identifier = force_identifier
        self.table_name = table_name
        self.sorts: Optional[List[SortEntry]] = list(sorts) if sorts else None
        self.limit = limit
        self.auto_reload = auto_reload
        self.update_selection_on_refresh = UpdateSelectionPolicy(update_selection_on_refresh)
        if custom_css is not None and not isinstance(custom_css, CustomClassMap):
            custom_css = CustomClassMap.from_mapping(custom_css)
        self.custom_css: Optional[CustomClassMap] = custom_css
        self.store: ConfigStore = store if store is not None else MemoryConfigStore()
        self.search = ""
        self.selection = TableSelection()
        self.user_config = UserConfig(limit=limit)
        self.loading_indicator = False
        self.loading_error = False

        self._explicit_table_name = table_name
        self._persistence: Optional[UserConfigPersistence] = None
        self._state = LoadState.IDLE
        self._current_context: Optional[FetchDataContext] = None
        self._auto_reload_timer: Optional[QTimer] = None

    @staticmethod
    def _as_rows(data: Any) -> List[Row]:
        if data is None:
            return []
        if isinstance(data, pd.DataFrame):
            return data.to_dict(orient="records")
        return list(data)

    # --- Initialisation ---
    def initialize(self):
        if not self.columns:
            raise ValueError("A data table needs at least one column.")

        identifier_exists = find_column(self.columns, self.identifier) is not None
        if not self.sorts:
            self.sorts = create_sorting_definition(
                self.identifier if identifier_exists else self.columns[0].prop)
        if not identifier_exists and not self.force_identifier:
            self.identifier = self.columns[0].prop

        self._init_user_config()
        init_column_layout(self.columns, self.identifier)
        self._filter_hidden_columns()
        if self._ensure_sort_on_visible_column():
            self._save_user_config()
        logger.info(f"Table '{self.table_name}' initialised with {len(self.columns)} columns, "
                    f"identifier '{self.identifier}'.")

        if self.auto_reload > 0 and self._has_fetcher():
            self.start_auto_reload(self.auto_reload)
            self.reload_data()
        elif self.auto_reload == 0:
            self.reload_data()
        else:
            self.use_data()

    def _init_user_config(self):
        self.table_name = self._explicit_table_name or self.identifier
        self._persistence = UserConfigPersistence(self.store, self.table_name)
        defaults = UserConfig(sorts=list(self.sorts or []), columns=column_states(self.columns),
                              search=self.search, limit=max(1, int(self.limit)))
        restored = self._persistence.load(defaults)
        if restored is not None:
            apply_column_states(self.columns, restored.columns)
            restored.columns = column_states(self.columns)
            self.user_config = restored
            self.search = restored.search
            self.limit = restored.limit
        else:
            self.user_config = defaults
        if not any(not c.is_hidden for c in self.columns):
            logger.debug(f"Table '{self.table_name}': all columns hidden, showing '{self.columns[0].prop}'.")
            self.columns[0].is_hidden = False
            self.user_config.columns = column_states(self.columns)
        self._save_user_config()

    def _save_user_config(self):
        if self._persistence is not None:
            self._persistence.save(self.user_config)

    def _filter_hidden_columns(self):
        self.table_columns = visible_columns(self.columns)

    def _ensure_sort_on_visible_column(self) -> bool:
        sort_prop = self.user_config.sorts[0].prop if self.user_config.sorts else None
        if sort_prop is not None and find_column(self.table_columns, sort_prop) is not None:
            return False
        self.user_config.sorts = create_sorting_definition(self.table_columns[0].prop)
        logger.debug(f"Sort re-derived on column '{self.table_columns[0].prop}'.")
        self.sortsChanged.emit(list(self.user_config.sorts))
        return True

    # --- Data ---
    @pyqtSlot(object)
    def set_data(self, data: Any):
        """Replaces the whole dataset, e.g. from a fetch collaborator or an import."""
        self.data = self._as_rows(data)
        if self._current_context is not None:
            self._current_context.mark_consumed()
            self._current_context = None
        logger.debug(f"Table '{self.table_name}': received {len(self.data)} rows.")
        self.use_data()

    def use_data(self):
        self.rows = list(self.data)
        if self.search:
            self.update_filter()
        else:
            self.rowsChanged.emit()
        self._reset_loading()
        self.update_selected()

    def _reset_loading(self):
        self.loading_indicator = False
        self._state = LoadState.IDLE
        self.loadingChanged.emit(False)

    @property
    def load_state(self) -> LoadState:
        return self._state

    @property
    def updating(self) -> bool:
        return self._state is LoadState.LOADING

    def sorted_rows(self) -> List[Row]:
        return sort_rows(self.rows, self.user_config.sorts)

    # --- Search ---
    def update_filter(self, restore: bool = False):
        if restore:
            self.search = ""
        columns = self.table_columns or visible_columns(self.columns)
        if not prepare_search(self.search):
            self.rows = list(self.data)
        else:
            self.rows = filter_rows(self.data, self.search, columns)
        if self.user_config.search != self.search:
            self.user_config.search = self.search
            self._save_user_config()
        self.rowsChanged.emit()

    @pyqtSlot(str)
    def set_search(self, text: str):
        self.search = text or ""
        self.update_filter()

    @pyqtSlot()
    def clear_search(self):
        self.update_filter(restore=True)

    # --- Columns, sorting, limit ---
    def toggle_column(self, prop: str, visible: bool) -> bool:
        column = find_column(self.columns, prop)
        if column is None:
            logger.warning(f"Table '{self.table_name}': cannot toggle unknown column '{prop}'.")
            return False
        hide = not visible
        if hide and not column.is_hidden and len(self.table_columns) <= 1:
            logger.debug(f"Table '{self.table_name}': refusing to hide the last visible column '{prop}'.")
            return False
        column.is_hidden = hide
        self._update_columns()
        return True

    def _update_columns(self):
        self.user_config.columns = column_states(self.columns)
        self._filter_hidden_columns()
        self._ensure_sort_on_visible_column()
        self._save_user_config()
        self.columnsChanged.emit()
        if self.search:
            self.update_filter()

    def change_sorting(self, sorts: Sequence[Union[SortEntry, Dict[str, Any]]]):
        self.user_config.sorts = [s if isinstance(s, SortEntry) else SortEntry.from_dict(s) for s in sorts]
        self._save_user_config()
        self.sortsChanged.emit(list(self.user_config.sorts))

    def set_limit(self, value: Union[str, int]) -> int:
        match = LIMIT_RE.match(str(value))
        limit = int(match.group(1)) if match else 0
        if limit < 1:
            logger.debug(f"Table '{self.table_name}': limit '{value}' clamped to 1.")
            limit = 1
        self.limit = limit
        self.user_config.limit = limit
        self._save_user_config()
        self.limitChanged.emit(limit)
        return limit

    # --- Fetching ---
    def _has_fetcher(self) -> bool:
        return self.receivers(self.fetchData) > 0

    @pyqtSlot()
    def reload_data(self) -> bool:
        if self._state is LoadState.LOADING:
            logger.debug(f"Table '{self.table_name}': reload ignored, a request is already in flight.")
            return False
        if not self._has_fetcher():
            self.use_data()
            return False
        self.loading_error = False
        self._state = LoadState.LOADING
        self.loadingChanged.emit(True)
        context = FetchDataContext(self._on_fetch_error)
        self._current_context = context
        logger.debug(f"Table '{self.table_name}': requesting data.")
        self.fetchData.emit(context)
        return True

    @pyqtSlot()
    def refresh(self) -> bool:
        self.loading_indicator = True
        return self.reload_data()

    def _on_fetch_error(self, context: FetchDataContext):
        if context is not self._current_context:
            logger.warning(f"Table '{self.table_name}': ignoring error from a stale fetch context.")
            return
        self._current_context = None
        self.loading_error = context.error_config.display_error
        if context.error_config.reset_data:
            self.data = []
        if self.loading_error:
            logger.error(f"Table '{self.table_name}': data could not be loaded.")
        self.loadingError.emit(self.loading_error)
        self.use_data()

    def start_auto_reload(self, interval_ms: int):
        self.stop_auto_reload()
        self._auto_reload_timer = QTimer(self)
        self._auto_reload_timer.setInterval(interval_ms)
        self._auto_reload_timer.timeout.connect(self.reload_data)
        self._auto_reload_timer.start()
        logger.info(f"Table '{self.table_name}': auto reload every {interval_ms} ms.")

    def stop_auto_reload(self):
        if self._auto_reload_timer is not None:
            self._auto_reload_timer.stop()
            self._auto_reload_timer.deleteLater()
            self._auto_reload_timer = None

    # --- Selection ---
    def update_selected(self):
        if self.update_selection_on_refresh is UpdateSelectionPolicy.NEVER:
            return
        new_selected = reselect_rows(self.selection.selected, self.data, self.identifier)
        if (self.update_selection_on_refresh is UpdateSelectionPolicy.ON_CHANGE
                and new_selected == self.selection.selected):
            return
        self.selection.selected = new_selected
        self.on_select()

    def on_select(self, selected: Optional[Sequence[Row]] = None):
        if selected is not None:
            self.selection.selected = list(selected)
        self.selection.update()
        self.updateSelection.emit(self.selection.clone())

    # --- Cell styling ---
    def use_custom_class(self, value: Any) -> Optional[str]:
        return use_custom_class(self.custom_css, value)

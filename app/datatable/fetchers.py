# datatable/fetchers.py
import logging
import os
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
from PyQt5.QtCore import QObject, pyqtSlot

from utils.worker import Worker
from .fetch import FetchDataContext, FetchErrorConfig
from .table_controller import TableController

logger = logging.getLogger(__name__)


def load_records(path: str) -> List[Dict[str, Any]]:
    """Reads a JSON (records) or CSV file into a list of row dicts."""
    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        df = pd.read_json(path, orient="records")
    elif ext in (".csv", ".txt"):
        df = pd.read_csv(path)
    elif ext in (".xlsx", ".xls"):
        df = pd.read_excel(path)
    else:
        raise ValueError(f"Unsupported data file type: '{ext}'")
    # NaN -> None so missing cells stay missing after conversion.
    df = df.astype(object).where(pd.notna(df), None)
    logger.info(f"Loaded {len(df)} rows from '{path}'.")
    return df.to_dict(orient="records")


class _FetchJob(QObject):
    """Lives on the GUI thread so worker results arrive as queued calls."""

    def __init__(self, fetcher: "ThreadedFetcher", context: FetchDataContext):
        super().__init__(fetcher)
        self._fetcher = fetcher
        self._context = context

    @pyqtSlot(object)
    def on_finished(self, rows: Any):
        self._fetcher._deliver(self._context, rows)
        self.deleteLater()

    @pyqtSlot(str)
    def on_error(self, message: str):
        self._fetcher._fail(self._context, message)
        self.deleteLater()

    @pyqtSlot()
    def on_cancelled(self):
        self._fetcher._cancelled(self._context)
        self.deleteLater()


class ThreadedFetcher(QObject):
    """
    Fetch collaborator that runs `loader()` on the Qt thread pool whenever the
    controller asks for data, then hands the rows back or reports the error
    through the fetch context.
    """

    def __init__(self, controller: TableController, loader: Callable[[], Any],
                 error_config: Optional[FetchErrorConfig] = None, run_in_thread: bool = True,
                 parent: Optional[QObject] = None):
        super().__init__(parent if parent is not None else controller)
        self.controller = controller
        self.loader = loader
        self.error_config = error_config
        self.run_in_thread = run_in_thread
        self.last_error: str = ""
        controller.fetchData.connect(self.fetch)

    @pyqtSlot(object)
    def fetch(self, context: FetchDataContext):
        job = _FetchJob(self, context)
        worker = Worker(self.loader)
        worker.connect_finished(job.on_finished)
        worker.connect_error(job.on_error)
        worker.connect_cancelled(job.on_cancelled)
        worker.connect_log(lambda msg: logger.debug(f"Fetch worker: {msg}"))
        if self.run_in_thread:
            worker.start_worker()
        else:
            worker.run()

    def _deliver(self, context: FetchDataContext, rows: Any):
        if context.consumed:
            logger.warning("Fetch result arrived for a consumed context. Dropped.")
            return
        self.last_error = ""
        self.controller.set_data(rows)

    def _fail(self, context: FetchDataContext, message: str):
        self.last_error = message
        logger.error(f"Data fetch failed: {message}")
        context.error(self.error_config)

    def _cancelled(self, context: FetchDataContext):
        logger.info("Data fetch cancelled; keeping current data.")
        context.error(FetchErrorConfig(reset_data=False, display_error=False))

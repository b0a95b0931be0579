# datatable/fetch.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Union

logger = logging.getLogger(__name__)


class LoadState(Enum):
    IDLE = "Idle"
    LOADING = "Loading"


@dataclass
class FetchErrorConfig:
    reset_data: bool = True
    display_error: bool = True

    def update(self, config: Union["FetchErrorConfig", Mapping[str, Any], None]) -> None:
        if config is None:
            return
        if isinstance(config, FetchErrorConfig):
            self.reset_data = config.reset_data
            self.display_error = config.display_error
            return
        # Accept both the JSON style keys and python names.
        if "resetData" in config or "reset_data" in config:
            self.reset_data = bool(config.get("resetData", config.get("reset_data")))
        if "displayError" in config or "display_error" in config:
            self.display_error = bool(config.get("displayError", config.get("display_error")))


class FetchDataContext:
    """
    Handed to the data fetch collaborator for every reload. The collaborator
    either delivers rows to the table or calls `error()` exactly once.
    """

    def __init__(self, on_error: Callable[["FetchDataContext"], None]):
        self.error_config = FetchErrorConfig()
        self._on_error = on_error
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def error(self, config: Union[FetchErrorConfig, Mapping[str, Any], None] = None) -> None:
        if self._consumed:
            logger.warning("FetchDataContext.error() called on an already consumed context. Ignored.")
            return
        self._consumed = True
        self.error_config.update(config)
        logger.info(f"Data fetch reported an error. reset_data={self.error_config.reset_data}, "
                    f"display_error={self.error_config.display_error}")
        self._on_error(self)

    def mark_consumed(self) -> None:
        self._consumed = True


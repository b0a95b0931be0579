# datatable/errors.py


class DataTableError(Exception):
    """Base class for errors raised by the data table core."""


class CustomClassesNotSetError(DataTableError):
    def __init__(self, message: str = "Custom classes are not set!"):
        super().__init__(message)


class InvalidSnapshotError(DataTableError, ValueError):
    """A persisted user configuration could not be decoded."""

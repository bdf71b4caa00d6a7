"""
Fatal import errors.

Only structural problems abort an import. Per-row problems (unknown genes,
ambiguous symbols, duplicated rows) are reported through the progress
monitor and never raised.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    'MatrixImportError',
    'HeaderError',
    'NoRecordsStoredError',
    'StreamInterruptedError',
]


class MatrixImportError(Exception):
    """Base class for errors that abort a whole import."""


class HeaderError(MatrixImportError):
    """The header line lacks a required identifier or sample column."""


class NoRecordsStoredError(MatrixImportError):
    """The data stream ended without a single stored row."""

    def __init__(self, path: Optional[str] = None):
        message = "Something has gone wrong! No records were saved"
        if path:
            message += f" while importing {path}"
        super().__init__(message)
        self.path = path


class StreamInterruptedError(MatrixImportError):
    """
    An unexpected failure stopped the row stream before end of file.

    Rows accepted before the failure have already been handed to the sink
    and are not rolled back.
    """

    def __init__(self, line_number: int, n_stored: int, cause: BaseException):
        super().__init__(
            f"Import stopped at line {line_number} after {n_stored} stored rows: "
            f"{type(cause).__name__}: {cause}"
        )
        self.line_number = line_number
        self.n_stored = n_stored

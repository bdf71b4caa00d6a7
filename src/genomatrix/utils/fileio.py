"""
Atomic file-write utilities.

Exports are written to a temporary file in the destination directory and
moved into place with ``os.replace()``, so an interrupted import never
leaves a half-written matrix or report behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Callable, IO

import pandas as pd

__all__ = ['atomic_write_json', 'atomic_write_table']


def _atomic_write(path: str | os.PathLike, write: Callable[[IO[str]], None]) -> None:
    path = str(path)
    dir_path = os.path.dirname(path) or "."
    os.makedirs(dir_path, exist_ok=True)
    tmp_path: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", dir=dir_path, suffix=".tmp", delete=False,
            encoding="utf-8", newline="",
        ) as tmp:
            tmp_path = tmp.name
            write(tmp)
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def atomic_write_json(path: str | os.PathLike, data: Any, *, indent: int = 2) -> None:
    """Write *data* as JSON; the destination is untouched if serialization fails."""
    _atomic_write(path, lambda f: json.dump(data, f, indent=indent))


def atomic_write_table(path: str | os.PathLike, frame: pd.DataFrame, *, index: bool = False) -> None:
    """
    Write a DataFrame as a tab-delimited table.

    Parameters
    ----------
    path:
        Destination file path.
    frame:
        Table to write; values are written as given (no float formatting).
    index:
        Whether to write the index as first column.
    """
    _atomic_write(path, lambda f: frame.to_csv(f, sep="\t", index=index, lineterminator="\n"))

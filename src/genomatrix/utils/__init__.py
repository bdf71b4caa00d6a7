"""Utility modules shared by the importer and its command-line front end."""

from genomatrix.utils.fileio import (
    atomic_write_json,
    atomic_write_table,
)

__all__ = [
    'atomic_write_json',
    'atomic_write_table',
]

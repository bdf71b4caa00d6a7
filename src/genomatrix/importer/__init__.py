"""
Import pipeline: session driver, per-row processing and CNA event deduplication.
"""

from genomatrix.importer.events import CnaEventDeduplicator
from genomatrix.importer.rows import RowOutcome, RowProcessor, RowStatus
from genomatrix.importer.session import (
    ImportOptions,
    ImportResult,
    TabDelimDataImporter,
    import_tab_delim_data,
)

__all__ = [
    'CnaEventDeduplicator',
    'RowOutcome',
    'RowProcessor',
    'RowStatus',
    'ImportOptions',
    'ImportResult',
    'TabDelimDataImporter',
    'import_tab_delim_data',
]

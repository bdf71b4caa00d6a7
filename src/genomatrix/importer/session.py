"""
Import session: one pass over one alteration matrix into one profile.

The session owns all run-scoped state (sample column map, imported-gene
set, CNA event cache), so importers of different profiles never share
anything but the collaborators they are given. At most one import per
profile may run at a time; that is up to the caller.

Examples:
    >>> from genomatrix.importer.session import TabDelimDataImporter
    >>> importer = TabDelimDataImporter(profile, catalog, registry, sink, event_store)
    >>> result = importer.import_data(Path("data_CNA.txt"))
    >>> print(f"Stored {result.n_stored} rows, {result.n_new_events} new CNA events")
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from genomatrix.core.profile import GeneticProfile
from genomatrix.errors import HeaderError, NoRecordsStoredError, StreamInterruptedError
from genomatrix.importer.events import CnaEventDeduplicator
from genomatrix.importer.rows import RowProcessor, RowStatus
from genomatrix.io.header import HeaderLayout, analyze_header
from genomatrix.io.samples import register_samples_on_the_fly, resolve_sample_columns
from genomatrix.io.writer import AlterationWriter
from genomatrix.progress import ProgressMonitor
from genomatrix.resolve.genes import GeneResolver
from genomatrix.store.base import AlterationSink, EventStore, GeneCatalog, SampleRegistry

logger = logging.getLogger(__name__)

__all__ = ['ImportOptions', 'ImportResult', 'TabDelimDataImporter', 'import_tab_delim_data']


@dataclass
class ImportOptions:
    """
    Attributes:
        target_line: Deprecated. Only the row whose first field equals this
            value is stored; every other row is still parsed and resolved.
        add_samples_on_the_fly: Register samples missing from the study
            before resolving sample columns.
        progress_interval: Log progress every N lines.
    """
    target_line: Optional[str] = None
    add_samples_on_the_fly: bool = True
    progress_interval: int = 1000


@dataclass
class ImportResult:
    """Summary of a completed import."""
    profile_stable_id: str
    source: str
    n_stored: int = 0
    n_lines: int = 0
    n_samples: int = 0
    n_filtered_samples: int = 0
    n_samples_added: int = 0
    n_new_events: int = 0
    n_reused_events: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)
    warnings: List[Tuple[str, int]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'profile': self.profile_stable_id,
            'source': self.source,
            'n_stored': self.n_stored,
            'n_lines': self.n_lines,
            'n_samples': self.n_samples,
            'n_filtered_samples': self.n_filtered_samples,
            'n_samples_added': self.n_samples_added,
            'n_new_events': self.n_new_events,
            'n_reused_events': self.n_reused_events,
            'status_counts': dict(self.status_counts),
            'warnings': [{'message': m, 'count': c} for m, c in self.warnings],
        }


def _read_header(lines: Iterator[str]) -> Tuple[Optional[List[str]], int]:
    """First non-comment, non-blank line split on tabs, and its 1-based line number."""
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip('\r\n')
        if line.startswith('#') or not line.strip():
            continue
        # trailing tabs do not open sample columns
        return line.rstrip('\t').split('\t'), line_number
    return None, 0


class TabDelimDataImporter:
    """
    Imports a tab-delimited genes x samples matrix into a genetic profile.

    Args:
        profile: Destination profile.
        catalog: Gene catalog for identifier resolution.
        registry: Sample registry of the profile's study.
        sink: Receives alteration rows.
        event_store: Persisted CNA events; required for discretized CNA profiles.
        monitor: Progress and warning reporter (a new one by default).
        options: Import options.
    """

    def __init__(
        self,
        profile: GeneticProfile,
        catalog: GeneCatalog,
        registry: SampleRegistry,
        sink: AlterationSink,
        event_store: Optional[EventStore] = None,
        monitor: Optional[ProgressMonitor] = None,
        options: Optional[ImportOptions] = None,
    ):
        if profile.is_discretized_cna and event_store is None:
            raise ValueError(
                f"Profile {profile.stable_id} holds discretized CNA data; an event store is required"
            )
        self.profile = profile
        self.catalog = catalog
        self.registry = registry
        self.sink = sink
        self.event_store = event_store
        self.options = options or ImportOptions()
        self.monitor = monitor or ProgressMonitor(progress_interval=self.options.progress_interval)

    def import_data(self, path: Path) -> ImportResult:
        """
        Import a matrix file.

        Raises:
            FileNotFoundError: If path does not exist.
            HeaderError: If the header lacks required columns.
            StreamInterruptedError: If an unexpected error stopped the import.
            NoRecordsStoredError: If no row was stored.
        """
        if not isinstance(path, Path):
            path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Data file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            n_lines = sum(1 for _ in f)
        self.monitor.set_max_value(n_lines)

        logger.info(f"Importing {path} into profile {self.profile.stable_id}")
        with open(path, 'r', encoding='utf-8') as f:
            return self.import_lines(f, source=str(path))

    def import_lines(self, lines: Iterable[str], source: str = "<stream>") -> ImportResult:
        """Import a matrix given as an iterable of lines (header first)."""
        lines = iter(lines)
        header, header_line_number = _read_header(lines)
        if header is None:
            raise HeaderError(f"No header line found in {source}")

        layout = analyze_header(header, self.profile)
        result = ImportResult(self.profile.stable_id, source)
        processor = self._prepare(layout, result)

        statuses: Counter = Counter()
        interrupted: Optional[Tuple[int, Exception]] = None
        line_number = header_line_number
        try:
            for line_number, line in enumerate(lines, start=header_line_number + 1):
                self.monitor.increment()
                try:
                    outcome = processor.process(line)
                except Exception as e:
                    logger.exception(f"Unexpected error at line {line_number} of {source}")
                    interrupted = (line_number, e)
                    break
                statuses[outcome.status] += 1
        finally:
            if self.sink.is_bulk_load:
                self.sink.flush()
                self.sink.bulk_load_off()

        result.n_lines = line_number - header_line_number
        result.n_stored = statuses[RowStatus.STORED]
        result.status_counts = {status.value: statuses[status] for status in RowStatus}
        if processor.deduplicator is not None:
            result.n_new_events = processor.deduplicator.n_new
            result.n_reused_events = processor.deduplicator.n_reused
        result.warnings = self.monitor.warnings()

        self.monitor.set_current_message(
            f" --> stored {result.n_stored:,} of {result.n_lines:,} data lines "
            f"into {self.profile.stable_id}"
        )
        self.monitor.log_summary()

        if interrupted is not None:
            failed_line, cause = interrupted
            raise StreamInterruptedError(failed_line, result.n_stored, cause) from cause
        if result.n_stored == 0:
            raise NoRecordsStoredError(source)
        return result

    def _prepare(self, layout: HeaderLayout, result: ImportResult) -> RowProcessor:
        """Resolve samples and set up the per-run state for the row stream."""
        sample_columns = layout.sample_columns
        if self.options.add_samples_on_the_fly:
            n_added = register_samples_on_the_fly(sample_columns, self.profile, self.registry)
            if n_added > 0:
                self.monitor.log_warning(
                    f"Number of samples added on the fly because they were missing "
                    f"in clinical data: {n_added}"
                )
            result.n_samples_added = n_added

        column_map = resolve_sample_columns(sample_columns, self.profile, self.registry)
        self.sink.set_profile_samples(self.profile.profile_id, column_map.live_sample_ids)
        result.n_samples = len(column_map.live_sample_ids)
        result.n_filtered_samples = len(column_map.filtered_indices)

        self.monitor.set_current_message(f" --> total number of samples: {layout.n_samples}")
        if column_map.filtered_indices:
            self.monitor.set_current_message(
                f" --> {len(column_map.filtered_indices)} sample columns without a "
                f"registered sample are skipped: {', '.join(column_map.filtered_headers)}"
            )

        deduplicator = None
        if self.profile.is_discretized_cna:
            deduplicator = CnaEventDeduplicator(self.event_store)
            self.sink.bulk_load_on()

        return RowProcessor(
            profile=self.profile,
            layout=layout,
            column_map=column_map,
            resolver=GeneResolver(self.catalog, self.monitor, protein_array=layout.protein_array),
            writer=AlterationWriter(self.profile.profile_id, self.sink, self.monitor),
            monitor=self.monitor,
            deduplicator=deduplicator,
            target_line=self.options.target_line,
        )


def import_tab_delim_data(
    path: Path,
    profile: GeneticProfile,
    catalog: GeneCatalog,
    registry: SampleRegistry,
    sink: AlterationSink,
    event_store: Optional[EventStore] = None,
    target_line: Optional[str] = None,
) -> int:
    """Import a matrix file and return the number of stored rows."""
    importer = TabDelimDataImporter(
        profile, catalog, registry, sink, event_store,
        options=ImportOptions(target_line=target_line),
    )
    return importer.import_data(path).n_stored

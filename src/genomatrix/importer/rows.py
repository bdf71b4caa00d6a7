"""
Per-row processing of alteration matrices.

Each data line goes through:

    raw line -> shape-checked -> values extracted -> gene resolved
             -> branch by profile -> stored | skipped

and comes out as a RowOutcome. Nothing a single row can do wrong raises:
problems are reported as warnings and carried in the outcome, and the
session aggregates outcomes into the import result.

Branch by profile:
    - one gene: stored; for discretized CNA profiles every amplification /
      homozygous deletion cell is first submitted as a CNA event, also for
      a repeated gene whose row is then dropped
    - several genes: stored for every gene if the data are antibody-array or
      micro-RNA data, otherwise the row is ambiguous and nothing is stored
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from genomatrix.core.alteration import CnaEvent
from genomatrix.core.gene import CanonicalGene
from genomatrix.core.profile import GeneticProfile, event_alteration, normalize_cna_value
from genomatrix.importer.events import CnaEventDeduplicator
from genomatrix.io.header import HeaderLayout
from genomatrix.io.samples import SampleColumnMap
from genomatrix.io.writer import AlterationWriter
from genomatrix.progress import ProgressMonitor
from genomatrix.resolve.genes import (
    GeneResolution,
    GeneResolver,
    ResolutionOutcome,
    RowIdentifiers,
)

logger = logging.getLogger(__name__)

__all__ = ['RowStatus', 'RowOutcome', 'RowProcessor']


class RowStatus(Enum):
    STORED = "stored"
    BLANK = "blank"            # comment or empty line
    REJECTED = "rejected"      # malformed or marked identifier
    UNRESOLVED = "unresolved"  # no catalog gene
    AMBIGUOUS = "ambiguous"    # several genes, none of them storable
    DUPLICATE = "duplicate"    # every resolved gene already written
    FILTERED = "filtered"      # not the requested target row


@dataclass(frozen=True)
class RowOutcome:
    """What became of one line."""
    status: RowStatus
    message: Optional[str] = None
    entrez_gene_ids: Tuple[int, ...] = ()
    n_events: int = 0

    @property
    def stored(self) -> bool:
        return self.status is RowStatus.STORED


_BLANK = RowOutcome(RowStatus.BLANK)


class RowProcessor:
    """
    Turns data lines into stored alteration rows.

    Args:
        profile: Profile being imported.
        layout: Column layout from the header.
        column_map: Sample columns and their internal ids.
        resolver: Gene resolver.
        writer: Alteration writer of this run.
        monitor: Receives per-row warnings.
        deduplicator: CNA event cache; required for discretized CNA profiles.
        target_line: Only the row whose first field equals this is stored.
    """

    def __init__(
        self,
        profile: GeneticProfile,
        layout: HeaderLayout,
        column_map: SampleColumnMap,
        resolver: GeneResolver,
        writer: AlterationWriter,
        monitor: ProgressMonitor,
        deduplicator: Optional[CnaEventDeduplicator] = None,
        target_line: Optional[str] = None,
    ):
        if profile.is_discretized_cna and deduplicator is None:
            raise ValueError("Discretized CNA profiles need a CNA event deduplicator")
        self.profile = profile
        self.layout = layout
        self.column_map = column_map
        self.resolver = resolver
        self.writer = writer
        self.monitor = monitor
        self.deduplicator = deduplicator
        self.target_line = target_line
        self._live_sample_ids = column_map.live_sample_ids

    def process(self, line: str) -> RowOutcome:
        line = line.rstrip('\r\n')
        if line.startswith('#') or not line.strip():
            return _BLANK

        parts = line.split('\t')
        n_columns = self.layout.n_columns
        if len(line.rstrip('\t').split('\t')) > n_columns:
            self.monitor.log_warning(
                f"The following line has more fields ({len(parts)}) than the "
                f"headers ({n_columns}): {parts[0]}"
            )
        values = self.column_map.filter_values(
            parts[self.layout.sample_start_index:n_columns]
        )

        ids = RowIdentifiers.from_fields(
            self._field(parts, self.layout.hugo_symbol_index),
            self._field(parts, self.layout.entrez_gene_id_index),
            self._field(parts, self.layout.composite_ref_index) if self.layout.protein_array else None,
        )
        resolution = self.resolver.resolve(ids)

        if resolution.outcome is ResolutionOutcome.REJECTED_MALFORMED:
            return self._skip(RowStatus.REJECTED, resolution.message)
        if self.target_line is not None and parts[0] != self.target_line:
            return RowOutcome(RowStatus.FILTERED)
        if resolution.outcome is ResolutionOutcome.UNRESOLVED:
            return self._skip(RowStatus.UNRESOLVED, resolution.message)

        source_identifier = ids.composite_ref or ids.symbol
        if resolution.outcome is ResolutionOutcome.RESOLVED_ONE:
            return self._store_single(resolution.genes[0], values, source_identifier)
        return self._store_many(resolution, values, source_identifier)

    @staticmethod
    def _field(parts: Sequence[str], index: Optional[int]) -> Optional[str]:
        if index is None or index >= len(parts):
            return None
        return parts[index]

    def _skip(self, status: RowStatus, message: Optional[str]) -> RowOutcome:
        if message:
            self.monitor.log_warning(message)
        return RowOutcome(status, message)

    def _store_single(self, gene: CanonicalGene, values: List[str],
                      source_identifier: Optional[str]) -> RowOutcome:
        n_events = 0
        if self.profile.is_discretized_cna:
            values = [normalize_cna_value(v) for v in values]
            n_events = self._submit_cna_events(gene, values)

        if self.writer.store(gene, values, source_identifier):
            return RowOutcome(RowStatus.STORED, entrez_gene_ids=(gene.entrez_gene_id,),
                              n_events=n_events)
        return RowOutcome(RowStatus.DUPLICATE, f"Duplicated gene {gene}", n_events=n_events)

    def _submit_cna_events(self, gene: CanonicalGene, values: Sequence[str]) -> int:
        n_events = 0
        for sample_id, value in zip(self._live_sample_ids, values):
            alteration = event_alteration(value)
            if alteration is None:
                continue
            self.deduplicator.resolve(
                CnaEvent(sample_id, self.profile.profile_id, gene.entrez_gene_id, alteration)
            )
            n_events += 1
        return n_events

    def _store_many(self, resolution: GeneResolution, values: List[str],
                    source_identifier: Optional[str]) -> RowOutcome:
        genes = resolution.genes
        duplicable = (
            self.layout.protein_array
            or self.profile.is_micro_rna
            or any(g.is_micro_rna for g in genes)
        )
        if not duplicable:
            return self._skip(
                RowStatus.AMBIGUOUS,
                f"Gene symbol {resolution.identifier} found to be ambiguous. "
                f"Record will be skipped for this gene.",
            )

        stored = tuple(
            gene.entrez_gene_id for gene in genes
            if self.writer.store(gene, values, source_identifier)
        )
        if stored:
            return RowOutcome(RowStatus.STORED, entrez_gene_ids=stored)
        return RowOutcome(RowStatus.DUPLICATE, f"Every gene of {resolution.identifier} was already stored")

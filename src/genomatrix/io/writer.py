"""
Alteration row writer with in-run duplicate protection.

A GISTIC or RAE file may contain several rows for the same gene; only the
first one is imported. Later rows for an already written gene are dropped
and reported, naming the gene and the identifier the file used for it.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Set

from genomatrix.core.alteration import GeneticAlterationRow
from genomatrix.core.gene import CanonicalGene
from genomatrix.progress import ProgressMonitor
from genomatrix.store.base import AlterationSink

logger = logging.getLogger(__name__)

__all__ = ['AlterationWriter']


class AlterationWriter:
    """
    Hands alteration rows of one profile to the sink, first row per gene wins.

    Args:
        profile_id: Profile every row is written to.
        sink: Destination of accepted rows.
        monitor: Receives duplicate-gene warnings.
    """

    def __init__(self, profile_id: int, sink: AlterationSink, monitor: ProgressMonitor):
        self.profile_id = profile_id
        self.sink = sink
        self.monitor = monitor
        self.imported_genes: Set[int] = set()

    def __contains__(self, entrez_gene_id: int) -> bool:
        return entrez_gene_id in self.imported_genes

    @property
    def n_stored(self) -> int:
        return len(self.imported_genes)

    def store(
        self,
        gene: CanonicalGene,
        values: Sequence[str],
        source_identifier: Optional[str] = None,
    ) -> bool:
        """
        Write the values of one gene unless the gene was already written.

        Args:
            gene: Resolved gene.
            values: Value vector aligned to the profile's live samples.
            source_identifier: Identifier as given in the file, for reporting.

        Returns:
            True if the row was handed to the sink.
        """
        if gene.entrez_gene_id in self.imported_genes:
            given_as = f"(given in your file as: {source_identifier}) " if source_identifier else ""
            self.monitor.log_warning(
                f"Gene {gene.symbol_all_caps} ({gene.entrez_gene_id}) {given_as}"
                f"found to be duplicated in your file. Duplicated row will be ignored!"
            )
            return False

        self.sink.add_genetic_alterations(
            GeneticAlterationRow(self.profile_id, gene.entrez_gene_id, tuple(values))
        )
        self.imported_genes.add(gene.entrez_gene_id)
        return True

"""
Tab-delimited export of import results.

After an import against the in-memory collaborators, the stored rows, the
canonical CNA events and the run summary are written next to each other:

    {output}/{profile}.alterations.tsv   Hugo_Symbol, Entrez_Gene_Id, one column per live sample
    {output}/{profile}.cna_events.tsv    canonical events (discretized CNA profiles)
    {output}/{profile}.case_events.tsv   sample-to-event associations
    {output}/{profile}.import_report.json

The alteration matrix has the same shape as an import file. Rows of catalog
genes can be imported again. Phospho-protein rows carry the negative
Entrez_Gene_Id minted by the catalog and no Composite.Element.Ref column, so
they only resolve against the catalog that created them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import pandas as pd

from genomatrix.core.profile import GeneticProfile
from genomatrix.importer.session import ImportResult
from genomatrix.io.header import ENTREZ_GENE_ID, HUGO_SYMBOL
from genomatrix.store.memory import (
    InMemoryAlterationSink,
    InMemoryEventStore,
    InMemoryGeneCatalog,
    InMemorySampleRegistry,
)
from genomatrix.utils.fileio import atomic_write_json, atomic_write_table

logger = logging.getLogger(__name__)

__all__ = ['alteration_frame', 'write_alteration_matrix', 'write_cna_events', 'write_import_report']


def alteration_frame(
    sink: InMemoryAlterationSink,
    profile: GeneticProfile,
    catalog: InMemoryGeneCatalog,
    registry: InMemorySampleRegistry,
) -> pd.DataFrame:
    """Stored rows of a profile labelled with gene symbols and stable sample ids."""
    frame = sink.to_frame(profile.profile_id)
    stable: Dict[int, str] = {s.internal_id: s.stable_id for s in registry.samples()}
    frame = frame.rename(columns=lambda sid: stable.get(sid, str(sid)))

    symbols = []
    for entrez_gene_id in frame.index:
        gene = catalog.get_gene(entrez_gene_id)
        symbols.append(gene.hugo_symbol if gene is not None else '')

    frame = frame.reset_index().rename(columns={'ENTREZ_GENE_ID': ENTREZ_GENE_ID})
    frame.insert(0, HUGO_SYMBOL, symbols)
    return frame


def write_alteration_matrix(
    sink: InMemoryAlterationSink,
    profile: GeneticProfile,
    catalog: InMemoryGeneCatalog,
    registry: InMemorySampleRegistry,
    path: Path,
) -> None:
    frame = alteration_frame(sink, profile, catalog, registry)
    atomic_write_table(path, frame)
    logger.info(f"Wrote {len(frame):,} alteration rows to {path}")


def write_cna_events(store: InMemoryEventStore, events_path: Path, case_events_path: Path) -> None:
    """Write canonical events and their sample associations."""
    events = store.events_frame()
    atomic_write_table(events_path, events)
    case_events = store.case_events_frame()
    atomic_write_table(case_events_path, case_events)
    logger.info(
        f"Wrote {len(events):,} CNA events to {events_path} and "
        f"{len(case_events):,} sample associations to {case_events_path}"
    )


def write_import_report(result: ImportResult, path: Path) -> None:
    atomic_write_json(path, result.to_dict())
    logger.info(f"Wrote import report to {path}")

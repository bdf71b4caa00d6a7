"""
In-memory collaborator implementations.

Used by the command-line importer (seeded from tab-delimited tables) and by
the test suite. Contents can be exported as pandas DataFrames for writing.
"""

from __future__ import annotations

import itertools
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd

from genomatrix.core.alteration import CnaEvent, GeneticAlterationRow
from genomatrix.core.gene import CanonicalGene
from genomatrix.store.base import (
    AlterationSink,
    EventStore,
    GeneCatalog,
    Sample,
    SampleRegistry,
)

logger = logging.getLogger(__name__)

__all__ = [
    'InMemoryGeneCatalog',
    'InMemorySampleRegistry',
    'InMemoryEventStore',
    'InMemoryAlterationSink',
]


class InMemoryGeneCatalog(GeneCatalog):
    """
    Dictionary-backed gene catalog.

    Symbols and aliases are matched case-insensitively. Genes added without
    a numeric id get negative ids (-1, -2, ...) so they never collide with
    real Entrez ids.
    """

    def __init__(self, genes: Optional[Iterable[CanonicalGene]] = None):
        self._by_id: Dict[int, CanonicalGene] = {}
        self._by_symbol: Dict[str, CanonicalGene] = {}
        self._by_alias: Dict[str, List[CanonicalGene]] = defaultdict(list)
        self._next_fake_id = -1
        for gene in genes or []:
            self.add_gene(gene)

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self):
        return iter(self._by_id.values())

    def get_gene(self, entrez_gene_id: int) -> Optional[CanonicalGene]:
        return self._by_id.get(int(entrez_gene_id))

    def get_genes(self, symbol: str, search_aliases: bool = True) -> List[CanonicalGene]:
        key = symbol.upper()
        gene = self._by_symbol.get(key)
        if gene is not None:
            return [gene]
        if search_aliases:
            return list(self._by_alias.get(key, []))
        return []

    def get_non_ambiguous_gene(self, symbol: str) -> Optional[CanonicalGene]:
        genes = self.get_genes(symbol, search_aliases=True)
        if len(genes) == 1:
            return genes[0]
        if len(genes) > 1:
            logger.debug(
                f"Symbol {symbol} is an alias of {len(genes)} genes "
                f"({', '.join(g.hugo_symbol for g in genes)}); not resolving it"
            )
        return None

    def get_gene_by_symbol(self, symbol: str) -> Optional[CanonicalGene]:
        return self._by_symbol.get(symbol.upper())

    def add_gene(self, gene: CanonicalGene) -> CanonicalGene:
        existing = self._by_symbol.get(gene.symbol_all_caps)
        if existing is not None:
            return existing
        if gene.entrez_gene_id is None:
            gene = gene.with_id(self._next_fake_id)
            self._next_fake_id -= 1
        elif gene.entrez_gene_id in self._by_id:
            raise ValueError(
                f"Entrez id {gene.entrez_gene_id} already used by "
                f"{self._by_id[gene.entrez_gene_id].hugo_symbol}, cannot add {gene.hugo_symbol}"
            )
        self._by_id[gene.entrez_gene_id] = gene
        self._by_symbol[gene.symbol_all_caps] = gene
        for alias in gene.aliases:
            alias_key = alias.upper()
            if alias_key != gene.symbol_all_caps:
                self._by_alias[alias_key].append(gene)
        return gene


class InMemorySampleRegistry(SampleRegistry):
    """Patients and samples per study, with internal ids minted in registration order."""

    def __init__(self):
        self._patients: Set[Tuple[str, str]] = set()
        self._samples: Dict[Tuple[str, str], Sample] = {}
        self._profile_members: Set[Tuple[int, int]] = set()
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._samples)

    def get_sample(self, cancer_study_id: str, stable_sample_id: str) -> Optional[Sample]:
        return self._samples.get((cancer_study_id, stable_sample_id))

    def add_patient(self, cancer_study_id: str, stable_patient_id: str) -> None:
        self._patients.add((cancer_study_id, stable_patient_id))

    def has_patient(self, cancer_study_id: str, stable_patient_id: str) -> bool:
        return (cancer_study_id, stable_patient_id) in self._patients

    def add_sample(self, cancer_study_id: str, stable_sample_id: str,
                   stable_patient_id: str) -> Sample:
        key = (cancer_study_id, stable_sample_id)
        if key in self._samples:
            return self._samples[key]
        if (cancer_study_id, stable_patient_id) not in self._patients:
            raise ValueError(
                f"Patient {stable_patient_id} is not registered in study {cancer_study_id}"
            )
        sample = Sample(
            internal_id=next(self._ids),
            stable_id=stable_sample_id,
            patient_id=stable_patient_id,
            cancer_study_id=cancer_study_id,
        )
        self._samples[key] = sample
        return sample

    def sample_in_profile(self, sample_id: int, profile_id: int) -> bool:
        return (sample_id, profile_id) in self._profile_members

    def add_sample_profile(self, sample_id: int, profile_id: int) -> None:
        self._profile_members.add((sample_id, profile_id))

    def samples(self) -> List[Sample]:
        return list(self._samples.values())


class InMemoryEventStore(EventStore):
    """
    Canonical CNA events plus per-sample associations.

    Event ids are minted by the store, continuing after the largest seeded id.
    """

    def __init__(self, events: Optional[Iterable[CnaEvent]] = None):
        self._events: Dict[int, CnaEvent] = {}
        self.case_events: List[CnaEvent] = []
        for event in events or []:
            if event.event_id is None:
                raise ValueError(f"Seeded event has no event id: {event}")
            self._events[event.event_id] = event
        self._next_id = max(self._events, default=0) + 1

    def get_all_cna_events(self) -> List[CnaEvent]:
        return list(self._events.values())

    def add_case_cna_event(self, event: CnaEvent, new_event: bool) -> int:
        if new_event:
            event = event.with_event_id(self._next_id)
            self._next_id += 1
            self._events[event.event_id] = event
        elif event.event_id is None:
            raise ValueError(f"Case event association needs an event id: {event}")
        self.case_events.append(event)
        return event.event_id

    def events_frame(self) -> pd.DataFrame:
        """Canonical events, one row per event id."""
        return pd.DataFrame(
            [
                {
                    'EVENT_ID': e.event_id,
                    'GENETIC_PROFILE_ID': e.profile_id,
                    'ENTREZ_GENE_ID': e.entrez_gene_id,
                    'ALTERATION': e.alteration,
                }
                for e in sorted(self._events.values(), key=lambda e: e.event_id)
            ],
            columns=['EVENT_ID', 'GENETIC_PROFILE_ID', 'ENTREZ_GENE_ID', 'ALTERATION'],
        )

    def case_events_frame(self) -> pd.DataFrame:
        """Sample-to-event associations in the order they were recorded."""
        return pd.DataFrame(
            [
                {
                    'EVENT_ID': e.event_id,
                    'SAMPLE_ID': e.sample_id,
                    'GENETIC_PROFILE_ID': e.profile_id,
                }
                for e in self.case_events
            ],
            columns=['EVENT_ID', 'SAMPLE_ID', 'GENETIC_PROFILE_ID'],
        )


class InMemoryAlterationSink(AlterationSink):
    """
    Collects alteration rows in memory.

    In bulk-load mode rows are buffered and only become visible in
    ``rows`` after flush().
    """

    def __init__(self):
        self.rows: List[GeneticAlterationRow] = []
        self.profile_samples: Dict[int, List[int]] = {}
        self._buffer: List[GeneticAlterationRow] = []
        self._bulk = False
        self.n_flushes = 0

    def set_profile_samples(self, profile_id: int, sample_ids: List[int]) -> None:
        self.profile_samples[profile_id] = list(sample_ids)

    def add_genetic_alterations(self, row: GeneticAlterationRow) -> None:
        if self._bulk:
            self._buffer.append(row)
        else:
            self.rows.append(row)

    def bulk_load_on(self) -> None:
        self._bulk = True

    def bulk_load_off(self) -> None:
        if self._buffer:
            raise RuntimeError(
                f"{len(self._buffer)} buffered rows would be lost; flush() before leaving bulk-load mode"
            )
        self._bulk = False

    @property
    def is_bulk_load(self) -> bool:
        return self._bulk

    def flush(self) -> None:
        if self._buffer:
            logger.debug(f"Flushing {len(self._buffer)} buffered alteration rows")
        self.rows.extend(self._buffer)
        self._buffer = []
        self.n_flushes += 1

    def rows_for(self, profile_id: int) -> List[GeneticAlterationRow]:
        return [row for row in self.rows if row.profile_id == profile_id]

    def to_frame(self, profile_id: int) -> pd.DataFrame:
        """
        Stored rows of one profile as a genes x samples DataFrame of strings.

        Columns are the profile's internal sample ids. Rows shorter than the
        sample list are padded with empty strings.
        """
        sample_ids = self.profile_samples.get(profile_id, [])
        rows = self.rows_for(profile_id)
        width = max([len(sample_ids)] + [len(r) for r in rows])
        columns = list(sample_ids) + [f"extra_{i}" for i in range(len(sample_ids), width)]
        records = [list(r.values) + [''] * (width - len(r)) for r in rows]
        frame = pd.DataFrame(
            records,
            index=pd.Index([r.entrez_gene_id for r in rows], name='ENTREZ_GENE_ID'),
            columns=columns,
            dtype=object,
        )
        return frame

"""
Abstract interfaces for the collaborators an import talks to.

The importer owns none of the storage it writes into. It needs:

- GeneCatalog: numeric-id / symbol lookups and pseudo-gene creation
- SampleRegistry: sample lookup, on-the-fly registration, profile membership
- EventStore: persisted CNA events and per-sample event associations
- AlterationSink: accepts finished matrix rows, optionally in batched mode

All calls are synchronous from the importer's point of view. Implementations
may buffer internally, as long as the order of calls is preserved.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional

from genomatrix.core.alteration import CnaEvent, GeneticAlterationRow
from genomatrix.core.gene import CanonicalGene


@dataclass(frozen=True)
class Sample:
    """A registered sample."""
    internal_id: int
    stable_id: str
    patient_id: str
    cancer_study_id: str


class GeneCatalog(ABC):
    """Catalog of canonical genes."""

    @abstractmethod
    def get_gene(self, entrez_gene_id: int) -> Optional[CanonicalGene]:
        """Gene with this numeric id, or None."""
        pass

    @abstractmethod
    def get_genes(self, symbol: str, search_aliases: bool = True) -> List[CanonicalGene]:
        """
        Genes matching a symbol.

        An exact (case-insensitive) symbol match wins and is returned alone.
        Otherwise, with search_aliases, every gene carrying the symbol as an
        alias is returned; more than one result means the symbol is ambiguous.
        """
        pass

    @abstractmethod
    def get_non_ambiguous_gene(self, symbol: str) -> Optional[CanonicalGene]:
        """Exact symbol match, else the single alias match, else None."""
        pass

    @abstractmethod
    def get_gene_by_symbol(self, symbol: str) -> Optional[CanonicalGene]:
        """Exact symbol match only (no alias search)."""
        pass

    @abstractmethod
    def add_gene(self, gene: CanonicalGene) -> CanonicalGene:
        """
        Create a gene and return it as stored.

        Genes without a numeric id receive one from the catalog. Adding a
        symbol that already exists returns the existing gene.
        """
        pass


class SampleRegistry(ABC):
    """Registry of patients, samples and profile membership."""

    @abstractmethod
    def get_sample(self, cancer_study_id: str, stable_sample_id: str) -> Optional[Sample]:
        pass

    @abstractmethod
    def add_patient(self, cancer_study_id: str, stable_patient_id: str) -> None:
        """Register a patient; a no-op if it already exists."""
        pass

    @abstractmethod
    def add_sample(self, cancer_study_id: str, stable_sample_id: str,
                   stable_patient_id: str) -> Sample:
        """Register a sample under an existing patient and return it."""
        pass

    @abstractmethod
    def sample_in_profile(self, sample_id: int, profile_id: int) -> bool:
        pass

    @abstractmethod
    def add_sample_profile(self, sample_id: int, profile_id: int) -> None:
        pass


class EventStore(ABC):
    """Persisted CNA events."""

    @abstractmethod
    def get_all_cna_events(self) -> Iterable[CnaEvent]:
        """Every canonical event known so far, each carrying its event_id."""
        pass

    @abstractmethod
    def add_case_cna_event(self, event: CnaEvent, new_event: bool) -> int:
        """
        Record that a sample exhibits an event.

        With new_event the event is persisted as a new canonical event and
        a fresh event id is minted and returned. Otherwise event.event_id
        must already be set and only the sample association is recorded.
        """
        pass


class AlterationSink(ABC):
    """Destination of finished alteration rows."""

    @abstractmethod
    def set_profile_samples(self, profile_id: int, sample_ids: List[int]) -> None:
        """Record the sample order every value vector of the profile is aligned to."""
        pass

    @abstractmethod
    def add_genetic_alterations(self, row: GeneticAlterationRow) -> None:
        pass

    @abstractmethod
    def bulk_load_on(self) -> None:
        """Buffer rows until flush()."""
        pass

    @abstractmethod
    def bulk_load_off(self) -> None:
        pass

    @property
    @abstractmethod
    def is_bulk_load(self) -> bool:
        pass

    @abstractmethod
    def flush(self) -> None:
        """Write out every buffered row."""
        pass

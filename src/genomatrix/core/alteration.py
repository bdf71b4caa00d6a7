"""
Records produced by an import run.

GeneticAlterationRow is one stored matrix row: a value vector aligned to the
profile's live samples. CnaEvent is one discrete copy-number call of one
sample; its identity (``event_id``) is shared by every sample exhibiting the
same (profile, gene, alteration) triple.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import NamedTuple, Optional, Tuple

from genomatrix.core.profile import CnaCode

__all__ = ['GeneticAlterationRow', 'CnaEventKey', 'CnaEvent']


@dataclass(frozen=True)
class GeneticAlterationRow:
    """Values of one gene in one profile, ordered like the profile's samples."""
    profile_id: int
    entrez_gene_id: int
    values: Tuple[str, ...]

    def __post_init__(self):
        if not isinstance(self.values, tuple):
            object.__setattr__(self, 'values', tuple(self.values))

    def __len__(self) -> int:
        return len(self.values)


class CnaEventKey(NamedTuple):
    """Identity key of a canonical CNA event. The sample is not part of it."""
    profile_id: int
    entrez_gene_id: int
    alteration: int


@dataclass(frozen=True)
class CnaEvent:
    """
    Discrete copy-number call of one sample.

    Attributes:
        sample_id: Internal id of the sample exhibiting the call.
        profile_id: Profile the call was imported into.
        entrez_gene_id: Gene the call refers to.
        alteration: -2 (homozygous deletion) or 2 (amplification).
        event_id: Canonical event identity; None until deduplication assigns one.
    """
    sample_id: int
    profile_id: int
    entrez_gene_id: int
    alteration: int
    event_id: Optional[int] = None

    def __post_init__(self):
        if str(self.alteration) not in CnaCode.EVENT_CODES:
            raise ValueError(
                f"CNA events are amplifications or homozygous deletions, "
                f"got alteration {self.alteration}"
            )

    @property
    def key(self) -> CnaEventKey:
        return CnaEventKey(self.profile_id, self.entrez_gene_id, self.alteration)

    def with_event_id(self, event_id: int) -> "CnaEvent":
        return replace(self, event_id=event_id)

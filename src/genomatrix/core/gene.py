"""
Canonical gene identity.

A CanonicalGene is what every row identifier (numeric Entrez id, HUGO symbol,
composite antibody reference) must resolve to before a value vector can be
stored. Genes come from a gene catalog; the importer only ever constructs
one itself when it synthesizes a phospho-protein pseudo-gene for an
antibody-array row.

Examples:
    >>> from genomatrix.core.gene import CanonicalGene, GeneType
    >>>
    >>> akt1 = CanonicalGene(207, "AKT1", cytoband="14q32.33")
    >>> akt1.is_micro_rna
    False
    >>> mir = CanonicalGene(406995, "MIR21", gene_type=GeneType.MICRO_RNA)
    >>> mir.is_micro_rna
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional

__all__ = ['GeneType', 'CanonicalGene']


class GeneType(Enum):
    """Molecular type of a catalog gene."""
    PROTEIN_CODING = "protein-coding"
    MICRO_RNA = "miRNA"
    PHOSPHOPROTEIN = "phosphoprotein"
    NON_CODING_RNA = "ncRNA"
    PSEUDO = "pseudo"
    OTHER = "other"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "GeneType":
        """Parse a catalog type label, case-insensitively; unrecognized labels map to OTHER."""
        if label is None or not str(label).strip():
            return cls.UNKNOWN
        needle = str(label).strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class CanonicalGene:
    """
    Gene identity as known to the catalog.

    Attributes:
        entrez_gene_id: Stable numeric id. None until the catalog assigns one
            (only for genes created during an import).
        hugo_symbol: Display symbol.
        gene_type: Molecular type (ordinary, micro-RNA, phospho-protein, ...).
        cytoband: Chromosomal band, if known.
        aliases: Alternative symbols the gene can be found under.
    """
    entrez_gene_id: Optional[int]
    hugo_symbol: str
    gene_type: GeneType = GeneType.PROTEIN_CODING
    cytoband: Optional[str] = None
    aliases: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not self.hugo_symbol or not self.hugo_symbol.strip():
            raise ValueError("hugo_symbol must be a non-empty string")
        if not isinstance(self.aliases, frozenset):
            object.__setattr__(self, 'aliases', frozenset(self.aliases))

    @property
    def standard_symbol(self) -> str:
        return self.hugo_symbol

    @property
    def symbol_all_caps(self) -> str:
        return self.hugo_symbol.upper()

    @property
    def is_micro_rna(self) -> bool:
        return self.gene_type is GeneType.MICRO_RNA

    @property
    def is_phosphoprotein(self) -> bool:
        return self.gene_type is GeneType.PHOSPHOPROTEIN

    def with_id(self, entrez_gene_id: int) -> "CanonicalGene":
        """Return a copy carrying a catalog-assigned id."""
        return replace(self, entrez_gene_id=entrez_gene_id)

    def __str__(self) -> str:
        return f"{self.hugo_symbol} ({self.entrez_gene_id})"

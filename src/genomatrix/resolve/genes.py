"""
Gene resolution for alteration matrix rows.

Every data row names its gene in one of three ways, tried in this order:

1. Entrez_Gene_Id: numeric id, authoritative. A malformed or unknown id
   drops the row; there is no fallback to the symbol.
2. Hugo_Symbol: the first of any '|'-separated alternatives, looked up with
   alias search. Several matches mean the symbol is ambiguous.
3. Composite.Element.Ref (antibody arrays): "<SYMBOL SYMBOL ...>|<array id>".
   Each symbol is resolved on its own; unknown symbols are dropped from the
   list. If the array id names a phosphorylated residue (pS473, pT308, pY1068)
   the row measures phospho-proteins, and one derived gene per parent is
   looked up or created in the catalog ("AKT1_pS473").

The outcome is returned as a GeneResolution whose ``outcome`` tells the
caller which branch to take; policy on what to do with several genes
belongs to the row processor.

Examples:
    >>> resolver = GeneResolver(catalog, monitor)
    >>> result = resolver.resolve(RowIdentifiers(symbol="TP53|TP53P1"))
    >>> result.outcome, [g.hugo_symbol for g in result.genes]
    (<ResolutionOutcome.RESOLVED_ONE: 'resolved-one'>, ['TP53'])
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from genomatrix.core.gene import CanonicalGene, GeneType
from genomatrix.progress import ProgressMonitor
from genomatrix.store.base import GeneCatalog

logger = logging.getLogger(__name__)

__all__ = [
    'ResolutionOutcome',
    'RowIdentifiers',
    'GeneResolution',
    'GeneResolver',
    'PHOSPHO_ALIASES',
    'phospho_residue',
]

_INTEGER = re.compile(r'^-?[0-9]+$')
_PHOSPHO_RESIDUE = re.compile(r'(p[STY][0-9]+)')

MULTI_GENE_SEPARATOR = "///"
UNKNOWN_GENE_MARKER = "---"
MICRO_RNA_MARKER = "-mir-"

PHOSPHO_ALIASES = ("rppa-phospho", "phosphoprotein")


class ResolutionOutcome(Enum):
    RESOLVED_ONE = "resolved-one"
    RESOLVED_MANY = "resolved-many"
    UNRESOLVED = "unresolved"
    REJECTED_MALFORMED = "rejected-malformed"


@dataclass(frozen=True)
class RowIdentifiers:
    """Gene identifiers of one row; empty fields are None."""
    symbol: Optional[str] = None
    entrez_gene_id: Optional[str] = None
    composite_ref: Optional[str] = None

    @classmethod
    def from_fields(cls, symbol: Optional[str], entrez_gene_id: Optional[str],
                    composite_ref: Optional[str]) -> "RowIdentifiers":
        def _clean(value: Optional[str]) -> Optional[str]:
            if value is None:
                return None
            value = value.strip()
            return value or None
        return cls(_clean(symbol), _clean(entrez_gene_id), _clean(composite_ref))

    @property
    def display(self) -> Optional[str]:
        """The identifier to quote in messages."""
        return self.composite_ref or self.symbol or self.entrez_gene_id


@dataclass(frozen=True)
class GeneResolution:
    """
    Result of resolving one row.

    Attributes:
        outcome: Which branch the row takes.
        genes: Resolved genes (empty unless resolved).
        identifier: Identifier the resolution was based on, as given in the file.
        message: Why the row could not be resolved (None when resolved).
    """
    outcome: ResolutionOutcome
    genes: Tuple[CanonicalGene, ...] = ()
    identifier: Optional[str] = None
    message: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.outcome in (ResolutionOutcome.RESOLVED_ONE, ResolutionOutcome.RESOLVED_MANY)

    @classmethod
    def from_genes(cls, genes: List[CanonicalGene], identifier: str,
                   unresolved_message: str) -> "GeneResolution":
        if not genes:
            return cls(ResolutionOutcome.UNRESOLVED, (), identifier, unresolved_message)
        outcome = ResolutionOutcome.RESOLVED_ONE if len(genes) == 1 else ResolutionOutcome.RESOLVED_MANY
        return cls(outcome, tuple(genes), identifier)

    @classmethod
    def rejected(cls, identifier: Optional[str], message: str) -> "GeneResolution":
        return cls(ResolutionOutcome.REJECTED_MALFORMED, (), identifier, message)


def phospho_residue(array_id: str) -> Optional[str]:
    """
    Phosphorylated residue named by an antibody array id, if any.

    Examples:
        >>> phospho_residue("Akt_pS473-R-V")
        'pS473'
        >>> phospho_residue("Akt-R-V") is None
        True
    """
    match = _PHOSPHO_RESIDUE.search(array_id)
    return match.group(1) if match else None


def _unknown_gene_message(identifier: str) -> str:
    if MICRO_RNA_MARKER in identifier.lower():
        return (
            f"microRNA is not known to me: [{identifier}]. Ignoring it "
            f"and all tab-delimited data associated with it!"
        )
    return (
        f"Gene not found: [{identifier}]. Ignoring it "
        f"and all tab-delimited data associated with it!"
    )


class GeneResolver:
    """
    Resolves row identifiers to catalog genes.

    Args:
        catalog: Gene catalog; also receives synthesized phospho-protein genes.
        monitor: Receives per-symbol warnings for antibody-array rows.
        protein_array: Resolve rows through their composite reference.
    """

    def __init__(self, catalog: GeneCatalog, monitor: ProgressMonitor, protein_array: bool = False):
        self.catalog = catalog
        self.monitor = monitor
        self.protein_array = protein_array

    def resolve(self, ids: RowIdentifiers) -> GeneResolution:
        if self.protein_array:
            if ids.composite_ref is None:
                return GeneResolution.rejected(
                    None, "Ignoring line with no Composite.Element.Ref value"
                )
            rejected = self._reject_marked(ids.composite_ref)
            return rejected or self._resolve_composite(ids.composite_ref)

        if ids.entrez_gene_id is not None and not _INTEGER.match(ids.entrez_gene_id):
            return GeneResolution.rejected(
                ids.entrez_gene_id, f"Ignoring line with invalid Entrez_Id {ids.entrez_gene_id}"
            )
        if ids.symbol is None and ids.entrez_gene_id is None:
            return GeneResolution.rejected(
                None, "Ignoring line with no Hugo_Symbol or Entrez_Id value"
            )
        if ids.symbol is not None:
            rejected = self._reject_marked(ids.symbol)
            if rejected:
                return rejected

        if ids.entrez_gene_id is not None:
            return self._resolve_entrez(ids.entrez_gene_id)
        return self._resolve_symbol(ids.symbol)

    def _reject_marked(self, identifier: str) -> Optional[GeneResolution]:
        # '///' joins several genes in one row, '---' marks an unknown gene
        if MULTI_GENE_SEPARATOR in identifier or UNKNOWN_GENE_MARKER in identifier:
            return GeneResolution.rejected(identifier, f"Ignoring gene ID: {identifier}")
        return None

    def _resolve_entrez(self, entrez_gene_id: str) -> GeneResolution:
        gene = self.catalog.get_gene(int(entrez_gene_id))
        return GeneResolution.from_genes(
            [gene] if gene is not None else [],
            entrez_gene_id,
            f"Entrez_Id {entrez_gene_id} not found. Record will be skipped for this gene.",
        )

    def _resolve_symbol(self, symbol: str) -> GeneResolution:
        separator = symbol.find("|")
        if separator > 0:
            symbol = symbol[:separator]
        genes = self.catalog.get_genes(symbol, search_aliases=True)
        return GeneResolution.from_genes(genes, symbol, _unknown_gene_message(symbol))

    def _resolve_composite(self, composite_ref: str) -> GeneResolution:
        if "|" not in composite_ref:
            return GeneResolution.rejected(
                composite_ref,
                f"Ignoring malformed {composite_ref!r}: expected '<gene symbols>|<antibody id>'",
            )
        symbol_part, array_id = composite_ref.split("|", 1)

        genes: List[CanonicalGene] = []
        for symbol in symbol_part.split():
            gene = self.catalog.get_non_ambiguous_gene(symbol)
            if gene is None:
                self.monitor.log_warning(
                    f"Gene {symbol} not found in DB. Record will be skipped for this gene."
                )
                continue
            genes.append(gene)

        residue = phospho_residue(array_id)
        if residue is not None:
            genes = [self.get_or_create_phospho_gene(gene, residue) for gene in genes]

        return GeneResolution.from_genes(
            genes, composite_ref, _unknown_gene_message(composite_ref)
        )

    def get_or_create_phospho_gene(self, parent: CanonicalGene, residue: str) -> CanonicalGene:
        """
        Phospho-protein pseudo-gene of a parent gene, created on first use.

        The derived symbol "<parent>_<residue>" is the lookup key, so
        repeated imports reuse the gene instead of creating another one.
        """
        symbol = f"{parent.standard_symbol}_{residue}"
        existing = self.catalog.get_gene_by_symbol(symbol)
        if existing is not None:
            return existing
        phospho = CanonicalGene(
            entrez_gene_id=None,
            hugo_symbol=symbol,
            gene_type=GeneType.PHOSPHOPROTEIN,
            cytoband=parent.cytoband,
            aliases=frozenset(
                PHOSPHO_ALIASES + (f"phospho{parent.standard_symbol}", parent.standard_symbol)
            ),
        )
        created = self.catalog.add_gene(phospho)
        logger.info(f"Created phospho-protein gene {created}")
        return created

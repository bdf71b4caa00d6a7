"""
Header analysis for tab-delimited alteration matrices.

The header decides the fixed column layout of the whole file: which columns
carry gene identifiers and where the sample columns begin.

Expected layouts:
```
Hugo_Symbol  Entrez_Gene_Id  TCGA-A1-A0SB-01  TCGA-A1-A0SD-01 ...
Composite.Element.Ref  TCGA-A1-A0SB-01 ...            (antibody arrays)
Gene Symbol  Locus ID  Cytoband  TCGA-A1-A0SB-01 ...  (legacy GISTIC output)
```

Column names are matched case-insensitively. Legacy identifier-only columns
(Gene Symbol, Locus ID, Cytoband) never start the sample region.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from genomatrix.core.profile import GeneticAlterationType, GeneticProfile
from genomatrix.errors import HeaderError

__all__ = [
    'HUGO_SYMBOL',
    'ENTREZ_GENE_ID',
    'COMPOSITE_ELEMENT_REF',
    'NON_SAMPLE_COLUMNS',
    'HeaderLayout',
    'analyze_header',
    'is_protein_array_layout',
]

HUGO_SYMBOL = "Hugo_Symbol"
ENTREZ_GENE_ID = "Entrez_Gene_Id"
COMPOSITE_ELEMENT_REF = "Composite.Element.Ref"

NON_SAMPLE_COLUMNS = frozenset(
    name.lower()
    for name in (HUGO_SYMBOL, ENTREZ_GENE_ID, COMPOSITE_ELEMENT_REF,
                 "Gene Symbol", "Locus ID", "Cytoband")
)


@dataclass(frozen=True)
class HeaderLayout:
    """
    Column layout of an alteration matrix.

    Attributes:
        fields: Header fields as read, in file order.
        hugo_symbol_index: Column of HUGO symbols, if present.
        entrez_gene_id_index: Column of numeric Entrez ids, if present.
        composite_ref_index: Column of composite antibody references, if present.
        sample_start_index: First sample column; every later column is a sample.
        protein_array: Rows are resolved through the composite reference.
    """
    fields: tuple
    hugo_symbol_index: Optional[int]
    entrez_gene_id_index: Optional[int]
    composite_ref_index: Optional[int]
    sample_start_index: int
    protein_array: bool = False

    @property
    def n_columns(self) -> int:
        return len(self.fields)

    @property
    def sample_columns(self) -> List[str]:
        return list(self.fields[self.sample_start_index:])

    @property
    def n_samples(self) -> int:
        return self.n_columns - self.sample_start_index


def _find_column(fields: Sequence[str], name: str) -> Optional[int]:
    target = name.lower()
    for i, header in enumerate(fields):
        if header.lower() == target:
            return i
    return None


def _find_sample_start(fields: Sequence[str], *id_indices: Optional[int]) -> Optional[int]:
    last_id_index = max((i for i in id_indices if i is not None), default=-1)
    for i, header in enumerate(fields):
        if header.lower() in NON_SAMPLE_COLUMNS:
            continue
        if i > last_id_index:
            return i
    return None


def is_protein_array_layout(fields: Sequence[str], profile: GeneticProfile) -> bool:
    """Whether rows of this file are antibody-array rows keyed by composite references."""
    if profile.is_protein_array:
        return True
    return (
        profile.alteration_type is GeneticAlterationType.PROTEIN_LEVEL
        and len(fields) > 0
        and fields[0].lower() == COMPOSITE_ELEMENT_REF.lower()
    )


def analyze_header(fields: Sequence[str], profile: GeneticProfile) -> HeaderLayout:
    """
    Classify header columns and locate the sample region.

    Args:
        fields: Tab-split header line (order preserved).
        profile: Profile being imported; its kind decides which identifier
            columns are required.

    Returns:
        HeaderLayout describing identifier columns and the first sample column.

    Raises:
        HeaderError: If an antibody-array file lacks Composite.Element.Ref,
            another file has neither Hugo_Symbol nor Entrez_Gene_Id, or no
            sample column follows the identifier columns.

    Examples:
        >>> layout = analyze_header(["Hugo_Symbol", "Entrez_Gene_Id", "S1", "S2"], profile)
        >>> layout.sample_start_index, layout.sample_columns
        (2, ['S1', 'S2'])
    """
    fields = tuple(f.strip() for f in fields)
    hugo_index = _find_column(fields, HUGO_SYMBOL)
    entrez_index = _find_column(fields, ENTREZ_GENE_ID)
    composite_index = _find_column(fields, COMPOSITE_ELEMENT_REF)
    protein_array = is_protein_array_layout(fields, profile)

    if protein_array:
        if composite_index is None:
            raise HeaderError(
                f"The following column should be present for antibody-array "
                f"data: {COMPOSITE_ELEMENT_REF}"
            )
    elif hugo_index is None and entrez_index is None:
        raise HeaderError(
            f"At least one of the following columns should be present: "
            f"{HUGO_SYMBOL} or {ENTREZ_GENE_ID}"
        )

    start_index = _find_sample_start(fields, hugo_index, entrez_index, composite_index)
    if start_index is None:
        raise HeaderError("Could not find a sample column in the file")

    return HeaderLayout(
        fields=fields,
        hugo_symbol_index=hugo_index,
        entrez_gene_id_index=entrez_index,
        composite_ref_index=composite_index,
        sample_start_index=start_index,
        protein_array=protein_array,
    )

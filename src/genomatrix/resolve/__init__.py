"""Gene identifier resolution against the gene catalog."""

from genomatrix.resolve.genes import (
    GeneResolution,
    GeneResolver,
    ResolutionOutcome,
    RowIdentifiers,
    phospho_residue,
)

__all__ = [
    'GeneResolution',
    'GeneResolver',
    'ResolutionOutcome',
    'RowIdentifiers',
    'phospho_residue',
]

"""
genomatrix - Genomic alteration matrix importer

Converts wide tab-delimited matrices (genes x samples) of expression levels,
discretized copy-number calls or protein/phospho-protein intensities into
per-gene, per-sample alteration records, plus a deduplicated stream of
discrete copy-number alteration events.
"""

__version__ = "0.1.0"

from genomatrix.core.gene import CanonicalGene, GeneType
from genomatrix.core.profile import GeneticAlterationType, GeneticProfile
from genomatrix.importer.session import ImportResult, TabDelimDataImporter

__all__ = [
    "CanonicalGene",
    "GeneType",
    "GeneticAlterationType",
    "GeneticProfile",
    "ImportResult",
    "TabDelimDataImporter",
]

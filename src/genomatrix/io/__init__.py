"""
I/O for alteration matrices.

Header and sample column handling used by every import, the duplicate-safe
row writer, plus table loaders and writers for the command-line importer.

Key Functions:
    - analyze_header: Locate identifier columns and the sample region
    - resolve_sample_columns: Map sample columns to registered samples
    - load_gene_catalog / load_sample_registry / load_cna_events: Seed tables
    - write_alteration_matrix / write_cna_events / write_import_report: Exports
"""

from genomatrix.io.header import HeaderLayout, analyze_header
from genomatrix.io.samples import (
    SampleColumnMap,
    register_samples_on_the_fly,
    resolve_sample_columns,
)
from genomatrix.io.writer import AlterationWriter
from genomatrix.io.loaders import load_cna_events, load_gene_catalog, load_sample_registry

__all__ = [
    'HeaderLayout',
    'analyze_header',
    'SampleColumnMap',
    'register_samples_on_the_fly',
    'resolve_sample_columns',
    'AlterationWriter',
    'load_gene_catalog',
    'load_sample_registry',
    'load_cna_events',
]

"""
Pytest configuration and shared fixtures.

Provides a small but realistic gene catalog, a registered TCGA study, profile
factories and a helper that writes tab-delimited matrices to a temporary
directory.
"""

import tempfile
from pathlib import Path
from typing import List, Sequence

import pytest

from genomatrix.core.gene import CanonicalGene, GeneType
from genomatrix.core.profile import GeneticAlterationType, GeneticProfile
from genomatrix.progress import ProgressMonitor
from genomatrix.store.memory import (
    InMemoryAlterationSink,
    InMemoryEventStore,
    InMemoryGeneCatalog,
    InMemorySampleRegistry,
)

STUDY = "brca_tcga"
SAMPLES = ["TCGA-A1-A0SB-01", "TCGA-A1-A0SD-01", "TCGA-A1-A0SE-01"]


def make_genes() -> List[CanonicalGene]:
    return [
        CanonicalGene(7157, "TP53", cytoband="17p13.1", aliases={"P53", "LFS1"}),
        CanonicalGene(100271900, "TP53P1", gene_type=GeneType.PSEUDO),
        CanonicalGene(207, "AKT1", cytoband="14q32.33", aliases={"PKB", "RAC"}),
        CanonicalGene(208, "AKT2", cytoband="19q13.2", aliases={"PKBB"}),
        CanonicalGene(1956, "EGFR", cytoband="7p11.2", aliases={"ERBB1"}),
        CanonicalGene(2064, "ERBB2", cytoband="17q12", aliases={"HER2", "NEU"}),
        CanonicalGene(4297, "KMT2A", cytoband="11q23.3", aliases={"MLL"}),
        CanonicalGene(8085, "KMT2D", cytoband="12q13.12", aliases={"MLL", "MLL2"}),
        CanonicalGene(406994, "MIR219A1", gene_type=GeneType.MICRO_RNA,
                      aliases={"hsa-mir-219"}),
        CanonicalGene(407002, "MIR219A2", gene_type=GeneType.MICRO_RNA,
                      aliases={"hsa-mir-219"}),
    ]


def make_profile(
    alteration_type: GeneticAlterationType = GeneticAlterationType.MRNA_EXPRESSION,
    profile_id: int = 7,
    show_in_analysis_tab: bool = True,
) -> GeneticProfile:
    return GeneticProfile(
        profile_id=profile_id,
        stable_id=f"{STUDY}_{alteration_type.value.lower()}",
        cancer_study_id=STUDY,
        alteration_type=alteration_type,
        show_profile_in_analysis_tab=show_in_analysis_tab,
    )


def tsv(*rows: Sequence[str]) -> str:
    """Join rows of fields into tab-delimited text."""
    return "".join("\t".join(row) + "\n" for row in rows)


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def catalog():
    return InMemoryGeneCatalog(make_genes())


@pytest.fixture
def registry():
    registry = InMemorySampleRegistry()
    for sample_id in SAMPLES:
        patient_id = sample_id.rsplit("-", 1)[0]
        registry.add_patient(STUDY, patient_id)
        registry.add_sample(STUDY, sample_id, patient_id)
    return registry


@pytest.fixture
def sink():
    return InMemoryAlterationSink()


@pytest.fixture
def event_store():
    return InMemoryEventStore()


@pytest.fixture
def monitor():
    return ProgressMonitor()


@pytest.fixture
def expression_profile():
    return make_profile(GeneticAlterationType.MRNA_EXPRESSION)


@pytest.fixture
def cna_profile():
    return make_profile(GeneticAlterationType.COPY_NUMBER_ALTERATION)


@pytest.fixture
def rppa_profile():
    return make_profile(GeneticAlterationType.PROTEIN_ARRAY_PROTEIN_LEVEL)


@pytest.fixture
def write_matrix(temp_dir):
    """Write tab-delimited text to a file in the temp dir and return its path."""
    def _write(text: str, name: str = "data.txt") -> Path:
        path = temp_dir / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write

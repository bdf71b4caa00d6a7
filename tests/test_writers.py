"""
Tests for the alteration matrix export and re-importing it.
"""

import pytest

from genomatrix.core.profile import GeneticAlterationType
from genomatrix.errors import NoRecordsStoredError
from genomatrix.importer.session import TabDelimDataImporter
from genomatrix.io.writers import alteration_frame, write_alteration_matrix
from genomatrix.store.memory import InMemoryAlterationSink, InMemoryGeneCatalog

from conftest import SAMPLES, make_genes, make_profile, tsv


@pytest.fixture
def phospho_export(write_matrix, rppa_profile, catalog, registry, sink, temp_dir):
    """Import an antibody-array matrix and export the stored rows."""
    path = write_matrix(tsv(
        ["Composite.Element.Ref"] + SAMPLES,
        ["AKT1|Akt_pS473-R-V", "0.1", "0.2", "0.3"],
        ["EGFR|EGFR-R-C", "1.1", "1.2", "1.3"],
    ))
    TabDelimDataImporter(rppa_profile, catalog, registry, sink).import_data(path)
    exported = temp_dir / "export.tsv"
    write_alteration_matrix(sink, rppa_profile, catalog, registry, exported)
    return exported


class TestAlterationFrame:

    def test_columns_and_symbols(self, phospho_export, rppa_profile, catalog, registry, sink):
        frame = alteration_frame(sink, rppa_profile, catalog, registry)
        assert list(frame.columns) == ["Hugo_Symbol", "Entrez_Gene_Id"] + SAMPLES
        assert frame["Hugo_Symbol"].tolist() == ["AKT1_pS473", "EGFR"]
        assert frame["Entrez_Gene_Id"].tolist()[0] < 0


class TestReimport:

    def test_reimport_against_same_catalog(self, phospho_export, catalog, registry):
        profile = make_profile(GeneticAlterationType.PROTEIN_LEVEL, profile_id=8)
        sink = InMemoryAlterationSink()
        result = TabDelimDataImporter(profile, catalog, registry, sink).import_data(phospho_export)
        assert result.n_stored == 2
        assert sink.rows[0].values == ("0.1", "0.2", "0.3")

    def test_phospho_rows_need_the_creating_catalog(self, phospho_export, registry):
        profile = make_profile(GeneticAlterationType.PROTEIN_LEVEL, profile_id=8)
        sink = InMemoryAlterationSink()
        fresh = InMemoryGeneCatalog(make_genes())
        result = TabDelimDataImporter(profile, fresh, registry, sink).import_data(phospho_export)
        assert result.n_stored == 1
        assert [row.entrez_gene_id for row in sink.rows] == [1956]
        assert result.status_counts["unresolved"] == 1

    def test_only_phospho_rows_fail_against_fresh_catalog(self, write_matrix, rppa_profile,
                                                         catalog, registry, sink, temp_dir):
        path = write_matrix(tsv(
            ["Composite.Element.Ref"] + SAMPLES,
            ["AKT2|Akt_pT308-R-V", "1", "2", "3"],
        ))
        TabDelimDataImporter(rppa_profile, catalog, registry, sink).import_data(path)
        exported = temp_dir / "phospho_only.tsv"
        write_alteration_matrix(sink, rppa_profile, catalog, registry, exported)

        profile = make_profile(GeneticAlterationType.PROTEIN_LEVEL, profile_id=8)
        with pytest.raises(NoRecordsStoredError):
            TabDelimDataImporter(
                profile, InMemoryGeneCatalog(make_genes()), registry, InMemoryAlterationSink()
            ).import_data(exported)

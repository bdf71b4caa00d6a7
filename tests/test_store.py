"""
Tests for core value types, the in-memory collaborators and ProgressMonitor.
"""

import logging

import pytest

from genomatrix.core.alteration import GeneticAlterationRow
from genomatrix.core.gene import CanonicalGene, GeneType
from genomatrix.core.profile import GeneticAlterationType
from genomatrix.progress import ProgressMonitor
from genomatrix.store.memory import InMemoryAlterationSink, InMemorySampleRegistry

from conftest import STUDY, make_profile


class TestCoreTypes:

    @pytest.mark.parametrize("label,gene_type", [
        ("protein-coding", GeneType.PROTEIN_CODING),
        ("MIRNA", GeneType.MICRO_RNA),
        ("", GeneType.UNKNOWN),
        (None, GeneType.UNKNOWN),
        ("snoRNA-ish", GeneType.OTHER),
    ])
    def test_gene_type_from_label(self, label, gene_type):
        assert GeneType.from_label(label) is gene_type

    def test_gene_requires_symbol(self):
        with pytest.raises(ValueError):
            CanonicalGene(1, " ")

    def test_alteration_type_parse(self):
        assert GeneticAlterationType.parse(" mrna_expression ") is GeneticAlterationType.MRNA_EXPRESSION
        with pytest.raises(ValueError, match="Choose from"):
            GeneticAlterationType.parse("RNA")

    def test_profile_kinds(self):
        assert make_profile(GeneticAlterationType.COPY_NUMBER_ALTERATION).is_discretized_cna
        assert not make_profile(GeneticAlterationType.COPY_NUMBER_ALTERATION,
                                show_in_analysis_tab=False).is_discretized_cna
        assert make_profile(GeneticAlterationType.PROTEIN_ARRAY_PHOSPHORYLATION).is_protein_array
        assert make_profile(GeneticAlterationType.MICRO_RNA_EXPRESSION).is_micro_rna


class TestGeneCatalog:

    def test_exact_symbol_beats_alias(self, catalog):
        catalog.add_gene(CanonicalGene(5000, "PKB"))
        assert [g.hugo_symbol for g in catalog.get_genes("PKB")] == ["PKB"]

    def test_alias_search_can_be_disabled(self, catalog):
        assert catalog.get_genes("HER2", search_aliases=False) == []
        assert catalog.get_gene_by_symbol("HER2") is None

    def test_ambiguous_alias_is_not_resolved(self, catalog):
        assert catalog.get_non_ambiguous_gene("MLL") is None
        assert catalog.get_non_ambiguous_gene("MLL2").hugo_symbol == "KMT2D"

    def test_fake_ids_are_negative_and_distinct(self, catalog):
        a = catalog.add_gene(CanonicalGene(None, "NEW1"))
        b = catalog.add_gene(CanonicalGene(None, "NEW2"))
        assert (a.entrez_gene_id, b.entrez_gene_id) == (-1, -2)
        assert catalog.get_gene(-2) == b

    def test_existing_symbol_is_returned(self, catalog):
        assert catalog.add_gene(CanonicalGene(None, "tp53")).entrez_gene_id == 7157

    def test_duplicate_id_raises(self, catalog):
        with pytest.raises(ValueError, match="already used"):
            catalog.add_gene(CanonicalGene(7157, "OTHER"))


class TestSampleRegistry:

    def test_sample_needs_patient(self):
        registry = InMemorySampleRegistry()
        with pytest.raises(ValueError, match="not registered"):
            registry.add_sample(STUDY, "S1", "P1")

    def test_ids_are_minted_in_order(self):
        registry = InMemorySampleRegistry()
        registry.add_patient(STUDY, "P1")
        first = registry.add_sample(STUDY, "S1", "P1")
        second = registry.add_sample(STUDY, "S2", "P1")
        assert (first.internal_id, second.internal_id) == (1, 2)
        assert registry.add_sample(STUDY, "S1", "P1") is first


class TestAlterationSink:

    def test_bulk_rows_visible_after_flush(self):
        sink = InMemoryAlterationSink()
        sink.bulk_load_on()
        sink.add_genetic_alterations(GeneticAlterationRow(7, 207, ("1",)))
        assert sink.rows == []
        sink.flush()
        sink.bulk_load_off()
        assert len(sink.rows) == 1
        assert not sink.is_bulk_load

    def test_leaving_bulk_mode_with_buffered_rows_raises(self):
        sink = InMemoryAlterationSink()
        sink.bulk_load_on()
        sink.add_genetic_alterations(GeneticAlterationRow(7, 207, ("1",)))
        with pytest.raises(RuntimeError, match="flush"):
            sink.bulk_load_off()

    def test_to_frame_pads_short_rows(self):
        sink = InMemoryAlterationSink()
        sink.set_profile_samples(7, [1, 2])
        sink.add_genetic_alterations(GeneticAlterationRow(7, 207, ("1",)))
        sink.add_genetic_alterations(GeneticAlterationRow(7, 208, ("1", "2")))
        frame = sink.to_frame(7)
        assert list(frame.columns) == [1, 2]
        assert frame.loc[207].tolist() == ["1", ""]


class TestProgressMonitor:

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            ProgressMonitor(progress_interval=0)

    def test_warnings_are_counted(self, caplog):
        monitor = ProgressMonitor()
        with caplog.at_level(logging.WARNING):
            monitor.log_warning("Gene not found: [FOO]")
            monitor.log_warning("Gene not found: [FOO]")
            monitor.log_warning("Gene not found: [BAR]")
        assert monitor.n_warnings == 3
        assert monitor.warnings()[0] == ("Gene not found: [FOO]", 2)
        assert "Gene not found: [BAR]" in caplog.text

    def test_distinct_warnings_are_capped(self, caplog):
        monitor = ProgressMonitor(max_distinct_warnings=2)
        with caplog.at_level(logging.WARNING):
            for symbol in ["FOO", "BAR", "BAZ", "QUX"]:
                monitor.log_warning(f"Gene not found: [{symbol}]")
            monitor.log_warning("Gene not found: [FOO]")
        assert monitor.warnings() == [
            ("Gene not found: [FOO]", 2), ("Gene not found: [BAR]", 1),
        ]
        assert monitor.n_untracked_warnings == 2
        assert monitor.n_warnings == 5
        assert "Gene not found: [QUX]" in caplog.text

    def test_summary_reports_untracked_warnings(self, caplog):
        monitor = ProgressMonitor(max_distinct_warnings=1)
        monitor.log_warning("a")
        monitor.log_warning("b")
        with caplog.at_level(logging.INFO, logger="genomatrix.progress"):
            monitor.log_summary()
        assert "1 further warnings not itemized" in caplog.text

    def test_progress_is_logged_every_interval(self, caplog):
        monitor = ProgressMonitor(progress_interval=2)
        monitor.set_max_value(4)
        with caplog.at_level(logging.INFO, logger="genomatrix.progress"):
            for _ in range(4):
                monitor.increment()
        assert "Processed 2/4 lines (50.0%)" in caplog.text
        assert "Processed 4/4 lines (100.0%)" in caplog.text

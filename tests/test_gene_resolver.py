"""
Tests for GeneResolver: Entrez, symbol and composite reference branches.
"""

import pytest

from genomatrix.core.gene import GeneType
from genomatrix.resolve.genes import (
    GeneResolver,
    ResolutionOutcome,
    RowIdentifiers,
    phospho_residue,
)


@pytest.fixture
def resolver(catalog, monitor):
    return GeneResolver(catalog, monitor)


@pytest.fixture
def array_resolver(catalog, monitor):
    return GeneResolver(catalog, monitor, protein_array=True)


def symbols(resolution):
    return [g.hugo_symbol for g in resolution.genes]


class TestEntrezAndSymbol:

    def test_entrez_wins_over_symbol(self, resolver):
        result = resolver.resolve(RowIdentifiers(symbol="EGFR", entrez_gene_id="207"))
        assert result.outcome is ResolutionOutcome.RESOLVED_ONE
        assert symbols(result) == ["AKT1"]

    def test_unknown_entrez_has_no_fallback(self, resolver):
        result = resolver.resolve(RowIdentifiers(symbol="TP53", entrez_gene_id="999999"))
        assert result.outcome is ResolutionOutcome.UNRESOLVED
        assert "Entrez_Id 999999 not found" in result.message

    def test_invalid_entrez_is_rejected(self, resolver):
        result = resolver.resolve(RowIdentifiers(symbol="TP53", entrez_gene_id="7157.0"))
        assert result.outcome is ResolutionOutcome.REJECTED_MALFORMED
        assert result.message == "Ignoring line with invalid Entrez_Id 7157.0"

    def test_first_pipe_alternative_is_used(self, resolver):
        result = resolver.resolve(RowIdentifiers(symbol="TP53|TP53P1"))
        assert result.outcome is ResolutionOutcome.RESOLVED_ONE
        assert symbols(result) == ["TP53"]
        assert result.identifier == "TP53"

    def test_alias_resolves(self, resolver):
        assert symbols(resolver.resolve(RowIdentifiers(symbol="her2"))) == ["ERBB2"]

    def test_ambiguous_alias(self, resolver):
        result = resolver.resolve(RowIdentifiers(symbol="MLL"))
        assert result.outcome is ResolutionOutcome.RESOLVED_MANY
        assert sorted(symbols(result)) == ["KMT2A", "KMT2D"]

    @pytest.mark.parametrize("symbol", ["TP53///AKT1", "---"])
    def test_marked_symbols_are_rejected(self, resolver, symbol):
        result = resolver.resolve(RowIdentifiers(symbol=symbol))
        assert result.outcome is ResolutionOutcome.REJECTED_MALFORMED
        assert result.message == f"Ignoring gene ID: {symbol}"

    def test_no_identifier_is_rejected(self, resolver):
        result = resolver.resolve(RowIdentifiers.from_fields("  ", "", None))
        assert result.outcome is ResolutionOutcome.REJECTED_MALFORMED

    def test_unknown_symbol_message(self, resolver):
        result = resolver.resolve(RowIdentifiers(symbol="NOTAGENE"))
        assert result.outcome is ResolutionOutcome.UNRESOLVED
        assert result.message.startswith("Gene not found: [NOTAGENE]")

    def test_unknown_micro_rna_message(self, resolver):
        result = resolver.resolve(RowIdentifiers(symbol="hsa-mir-9999"))
        assert result.message.startswith("microRNA is not known to me: [hsa-mir-9999]")


class TestCompositeReference:

    def test_plain_antibody(self, array_resolver):
        result = array_resolver.resolve(RowIdentifiers(composite_ref="EGFR|EGFR-R-C"))
        assert symbols(result) == ["EGFR"]

    def test_several_symbols(self, array_resolver):
        result = array_resolver.resolve(RowIdentifiers(composite_ref="AKT1 AKT2|Akt-R-V"))
        assert result.outcome is ResolutionOutcome.RESOLVED_MANY
        assert symbols(result) == ["AKT1", "AKT2"]

    def test_unknown_symbol_is_dropped_with_warning(self, array_resolver, monitor):
        result = array_resolver.resolve(RowIdentifiers(composite_ref="AKT1 FOO|Akt-R-V"))
        assert symbols(result) == ["AKT1"]
        assert monitor.warnings() == [
            ("Gene FOO not found in DB. Record will be skipped for this gene.", 1)
        ]

    def test_all_symbols_unknown(self, array_resolver):
        result = array_resolver.resolve(RowIdentifiers(composite_ref="FOO BAR|x-R-V"))
        assert result.outcome is ResolutionOutcome.UNRESOLVED

    def test_missing_separator_is_rejected(self, array_resolver):
        result = array_resolver.resolve(RowIdentifiers(composite_ref="AKT1"))
        assert result.outcome is ResolutionOutcome.REJECTED_MALFORMED

    def test_symbol_column_is_ignored(self, array_resolver):
        result = array_resolver.resolve(RowIdentifiers(symbol="TP53", composite_ref=None))
        assert result.outcome is ResolutionOutcome.REJECTED_MALFORMED


class TestPhosphoGenes:

    @pytest.mark.parametrize("array_id,residue", [
        ("Akt_pS473-R-V", "pS473"),
        ("EGFR_pY1068-R-C", "pY1068"),
        ("Akt_pT308", "pT308"),
        ("Akt-R-V", None),
    ])
    def test_phospho_residue(self, array_id, residue):
        assert phospho_residue(array_id) == residue

    def test_phospho_genes_are_created(self, array_resolver, catalog):
        n_genes = len(catalog)
        result = array_resolver.resolve(RowIdentifiers(composite_ref="AKT1 AKT2|Akt_pS473-R-V"))
        assert symbols(result) == ["AKT1_pS473", "AKT2_pS473"]
        assert len(catalog) == n_genes + 2

        akt1 = result.genes[0]
        assert akt1.gene_type is GeneType.PHOSPHOPROTEIN
        assert akt1.entrez_gene_id < 0
        assert akt1.cytoband == "14q32.33"
        assert {"rppa-phospho", "phosphoprotein", "phosphoAKT1", "AKT1"} <= akt1.aliases

    def test_phospho_creation_is_idempotent(self, array_resolver, catalog):
        first = array_resolver.resolve(RowIdentifiers(composite_ref="AKT1|Akt_pS473-R-V"))
        n_genes = len(catalog)
        second = array_resolver.resolve(RowIdentifiers(composite_ref="AKT1|Akt_pS473-R-C"))
        assert second.genes == first.genes
        assert len(catalog) == n_genes

    def test_parent_symbol_stays_unambiguous(self, array_resolver, catalog):
        array_resolver.resolve(RowIdentifiers(composite_ref="AKT1|Akt_pS473-R-V"))
        assert catalog.get_non_ambiguous_gene("AKT1").entrez_gene_id == 207

"""
genomatrix import command - Import one alteration matrix into one profile.

Runs the importer against in-memory collaborators seeded from tab-delimited
gene, sample and (optionally) CNA event tables, then exports the stored rows,
the CNA events and a JSON report.

Usage:
    genomatrix import --data data_CNA.txt --genes genes.tsv --samples samples.tsv \\
        --study brca_tcga --profile brca_tcga_gistic --alteration-type COPY_NUMBER_ALTERATION
"""

import argparse
import logging
from pathlib import Path

from genomatrix.cli._validators import _alteration_type, _positive_int


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the import subcommand."""
    parser = subparsers.add_parser(
        "import",
        help="Import a genes x samples matrix into a genetic profile",
        description=(
            "Import expression, discretized copy-number or protein array data. "
            "Rows are resolved to catalog genes; discretized copy-number calls "
            "additionally produce deduplicated CNA events."
        )
    )

    # Input/output
    parser.add_argument("--data", "-i", type=Path, default=None,
                        help="Tab-delimited data matrix (genes x samples)")
    parser.add_argument("--genes", type=Path, default=None,
                        help="Gene table (ENTREZ_GENE_ID, HUGO_GENE_SYMBOL, ...)")
    parser.add_argument("--samples", type=Path, default=None,
                        help="Sample table (SAMPLE_ID, PATIENT_ID)")
    parser.add_argument("--events", type=Path, default=None,
                        help="Existing CNA events (EVENT_ID, ENTREZ_GENE_ID, ALTERATION)")
    parser.add_argument("--output", "-o", type=Path, default=Path("results"),
                        help="Output directory (default: results)")
    parser.add_argument("--config", "-c", type=Path, default=None,
                        help="YAML/JSON config file; explicit flags override it")

    # Profile
    parser.add_argument("--study", default=None,
                        help="Cancer study id the sample columns belong to")
    parser.add_argument("--profile", default=None,
                        help="Stable id of the destination genetic profile")
    parser.add_argument("--profile-id", type=int, default=1,
                        help="Internal id of the destination profile (default: 1)")
    parser.add_argument("--alteration-type", type=_alteration_type, default=None,
                        help="Genetic alteration type, e.g. COPY_NUMBER_ALTERATION, MRNA_EXPRESSION")
    parser.add_argument("--hide-from-analysis-tab", dest="show_in_analysis_tab",
                        action="store_false", default=True,
                        help="Profile is not shown in the analysis tab (continuous CNA: no events)")

    # Import behaviour
    parser.add_argument("--target-line", default=None,
                        help="Deprecated: store only the row whose first column equals this value")
    parser.add_argument("--no-samples-on-the-fly", dest="samples_on_the_fly",
                        action="store_false", default=True,
                        help="Do not register samples missing from the sample table")
    parser.add_argument("--progress-interval", type=_positive_int, default=1000,
                        help="Log progress every N lines (default: 1000)")

    parser.set_defaults(func=run_import)


def _resolve_args(args: argparse.Namespace) -> argparse.Namespace:
    from genomatrix.cli.config import load_config, merge_config_with_args, validate_config
    from genomatrix.core.profile import GeneticAlterationType

    if args.config is not None:
        config = load_config(args.config)
        validate_config(config)
        args = merge_config_with_args(config, args, getattr(args, '_raw_args', None))

    missing = [
        flag for flag, value in (
            ('--data', args.data), ('--genes', args.genes), ('--samples', args.samples),
            ('--study', args.study), ('--profile', args.profile),
            ('--alteration-type', args.alteration_type),
        )
        if value is None
    ]
    if missing:
        raise ValueError(f"Missing required settings (flag or config): {', '.join(missing)}")

    args.alteration_type = GeneticAlterationType.parse(args.alteration_type)
    return args


def run_import(args: argparse.Namespace) -> int:
    """Execute the import command."""
    from genomatrix.core.profile import GeneticProfile
    from genomatrix.errors import MatrixImportError
    from genomatrix.importer.session import ImportOptions, TabDelimDataImporter
    from genomatrix.io.loaders import load_cna_events, load_gene_catalog, load_sample_registry
    from genomatrix.io.writers import write_alteration_matrix, write_cna_events, write_import_report
    from genomatrix.progress import ProgressMonitor
    from genomatrix.store.memory import InMemoryAlterationSink, InMemoryEventStore

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    try:
        args = _resolve_args(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    profile = GeneticProfile(
        profile_id=args.profile_id,
        stable_id=args.profile,
        cancer_study_id=args.study,
        alteration_type=args.alteration_type,
        show_profile_in_analysis_tab=args.show_in_analysis_tab,
    )

    try:
        catalog = load_gene_catalog(args.genes)
        registry = load_sample_registry(args.samples, profile.cancer_study_id)
        seed_events = load_cna_events(args.events, profile.profile_id) if args.events else []
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load input tables: {e}")
        return 1

    sink = InMemoryAlterationSink()
    event_store = InMemoryEventStore(seed_events)
    importer = TabDelimDataImporter(
        profile, catalog, registry, sink, event_store,
        monitor=ProgressMonitor(progress_interval=args.progress_interval),
        options=ImportOptions(
            target_line=args.target_line,
            add_samples_on_the_fly=args.samples_on_the_fly,
            progress_interval=args.progress_interval,
        ),
    )

    try:
        result = importer.import_data(args.data)
    except (FileNotFoundError, MatrixImportError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    output = Path(args.output)
    write_alteration_matrix(sink, profile, catalog, registry,
                            output / f"{profile.stable_id}.alterations.tsv")
    if profile.is_discretized_cna:
        write_cna_events(event_store,
                         output / f"{profile.stable_id}.cna_events.tsv",
                         output / f"{profile.stable_id}.case_events.tsv")
    write_import_report(result, output / f"{profile.stable_id}.import_report.json")

    logger.info(
        f"Imported {result.n_stored:,} rows into {profile.stable_id} "
        f"({result.n_new_events:,} new CNA events, {result.n_reused_events:,} reused)"
    )
    return 0

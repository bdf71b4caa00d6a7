"""
genomatrix CLI - Command-line interface for alteration matrix imports.

Commands:
    genomatrix import   - Import a genes x samples matrix into a genetic profile
"""

import argparse
import sys
from typing import Optional, List


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI dispatcher for genomatrix."""
    parser = argparse.ArgumentParser(
        prog="genomatrix",
        description="Genomic alteration matrix importer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  import        Import expression, discretized CNA or protein array data

Examples:
  genomatrix import --data data_CNA.txt --genes genes.tsv --samples samples.tsv \\
      --study brca_tcga --profile brca_tcga_gistic --alteration-type COPY_NUMBER_ALTERATION
  genomatrix import --config brca_gistic.yaml --output results/brca
        """
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version="%(prog)s 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    from genomatrix.cli import import_data
    import_data.register_parser(subparsers)

    raw_args = list(sys.argv[1:] if args is None else args)
    parsed_args = parser.parse_args(raw_args)

    if parsed_args.command is None:
        parser.print_help()
        return 0

    parsed_args._raw_args = raw_args
    return parsed_args.func(parsed_args)


if __name__ == "__main__":
    sys.exit(main())

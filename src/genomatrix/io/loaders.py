"""
Tab-delimited loaders for the tables that seed an import.

The command-line importer works against in-memory collaborators; these
loaders fill them from plain tables:

- gene table   -> InMemoryGeneCatalog
- sample table -> InMemorySampleRegistry
- event table  -> list of persisted CnaEvent (seeds the event cache)

Expected formats (tab-delimited, '#' comment lines allowed):
```
ENTREZ_GENE_ID  HUGO_GENE_SYMBOL  TYPE            CYTOBAND  ALIASES
207             AKT1              protein-coding  14q32.33  PKB|RAC
```
```
SAMPLE_ID         PATIENT_ID
TCGA-A1-A0SB-01   TCGA-A1-A0SB
```
```
EVENT_ID  GENETIC_PROFILE_ID  ENTREZ_GENE_ID  ALTERATION
1         7                   207             2
```
Column names are matched case-insensitively.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from genomatrix.core.alteration import CnaEvent
from genomatrix.core.gene import CanonicalGene, GeneType
from genomatrix.io import stable_ids
from genomatrix.store.memory import InMemoryGeneCatalog, InMemorySampleRegistry

logger = logging.getLogger(__name__)

__all__ = ['read_table', 'load_gene_catalog', 'load_sample_registry', 'load_cna_events']


def read_table(path: Path, required: Sequence[str]) -> pd.DataFrame:
    """
    Read a tab-delimited table as strings with upper-cased column names.

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the table is empty or lacks a required column
    """
    if not isinstance(path, Path):
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Table not found: {path}")

    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    try:
        df = pd.read_csv(path, sep='\t', comment='#', dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as e:
        raise ValueError(f"Table is empty: {path}") from e
    except Exception as e:
        raise ValueError(f"Failed to read table {path}: {e}") from e

    df.columns = [str(c).strip().upper() for c in df.columns]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(
            f"Table {path} is missing required columns: {missing}. "
            f"Found: {list(df.columns)}"
        )
    for column in df.columns:
        df[column] = df[column].str.strip()
    return df


def load_gene_catalog(path: Path) -> InMemoryGeneCatalog:
    """
    Load a gene table into an in-memory catalog.

    Rows with a non-integer id are skipped with a warning; so are rows
    whose symbol or id duplicates an earlier row.
    """
    df = read_table(path, required=['ENTREZ_GENE_ID', 'HUGO_GENE_SYMBOL'])

    bad_ids = ~df['ENTREZ_GENE_ID'].str.fullmatch(r'-?[0-9]+')
    if bad_ids.any():
        warnings.warn(
            f"Skipping {int(bad_ids.sum())} gene rows with non-integer ENTREZ_GENE_ID "
            f"(e.g. {df.loc[bad_ids, 'ENTREZ_GENE_ID'].head(3).tolist()})",
            UserWarning
        )
        df = df[~bad_ids]

    duplicated = df['ENTREZ_GENE_ID'].duplicated() | df['HUGO_GENE_SYMBOL'].str.upper().duplicated()
    if duplicated.any():
        warnings.warn(
            f"Found {int(duplicated.sum())} duplicate gene ids or symbols. "
            "Using first occurrence of each.",
            UserWarning
        )
        df = df[~duplicated]

    catalog = InMemoryGeneCatalog()
    for record in df.to_dict('records'):
        aliases = [a.strip() for a in record.get('ALIASES', '').split('|') if a.strip()]
        catalog.add_gene(CanonicalGene(
            entrez_gene_id=int(record['ENTREZ_GENE_ID']),
            hugo_symbol=record['HUGO_GENE_SYMBOL'],
            gene_type=GeneType.from_label(record.get('TYPE') or 'protein-coding'),
            cytoband=record.get('CYTOBAND') or None,
            aliases=frozenset(aliases),
        ))

    logger.info(f"Loaded {len(catalog):,} genes from {path}")
    return catalog


def load_sample_registry(
    path: Path,
    cancer_study_id: str,
    registry: Optional[InMemorySampleRegistry] = None,
) -> InMemorySampleRegistry:
    """
    Register the samples of a sample table under one study.

    A missing or empty PATIENT_ID is derived from the sample id.
    """
    df = read_table(path, required=['SAMPLE_ID'])
    registry = registry or InMemorySampleRegistry()

    for record in df.to_dict('records'):
        sample_id = stable_ids.get_sample_id(record['SAMPLE_ID'])
        if not sample_id:
            continue
        patient_id = record.get('PATIENT_ID') or stable_ids.get_patient_id(sample_id)
        registry.add_patient(cancer_study_id, patient_id)
        registry.add_sample(cancer_study_id, sample_id, patient_id)

    logger.info(f"Registered {len(registry):,} samples of {cancer_study_id} from {path}")
    return registry


def load_cna_events(path: Path, default_profile_id: int) -> List[CnaEvent]:
    """
    Load persisted canonical CNA events.

    Events carry no sample; sample_id is set to 0. GENETIC_PROFILE_ID
    defaults to ``default_profile_id`` when the column is absent or empty.
    """
    df = read_table(path, required=['EVENT_ID', 'ENTREZ_GENE_ID', 'ALTERATION'])

    events = []
    for i, record in enumerate(df.to_dict('records')):
        try:
            profile_id = int(record.get('GENETIC_PROFILE_ID') or default_profile_id)
            events.append(CnaEvent(
                sample_id=0,
                profile_id=profile_id,
                entrez_gene_id=int(record['ENTREZ_GENE_ID']),
                alteration=int(record['ALTERATION']),
                event_id=int(record['EVENT_ID']),
            ))
        except ValueError as e:
            raise ValueError(f"Invalid CNA event in {path}, row {i + 1}: {e}") from e

    logger.info(f"Loaded {len(events):,} CNA events from {path}")
    return events

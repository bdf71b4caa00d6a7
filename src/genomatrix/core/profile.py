"""
Genetic profiles and the alteration types they carry.

A genetic profile is the destination dataset an import run populates
(e.g. "mRNA expression, study X"). Its alteration type decides how rows are
resolved and whether discrete copy-number events are derived.

Profile kinds:
    - discretized CNA: COPY_NUMBER_ALTERATION shown in the analysis tab;
      cells holding an amplification or homozygous-deletion code produce
      CNA events
    - antibody-array: PROTEIN_ARRAY_* types, or PROTEIN_LEVEL data laid out
      with Composite.Element.Ref as first column; genes come from the
      composite reference and values are duplicated over every gene it names
    - micro-RNA: MICRO_RNA_EXPRESSION
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

__all__ = [
    'GeneticAlterationType',
    'GeneticProfile',
    'CnaCode',
    'normalize_cna_value',
    'event_alteration',
]


class GeneticAlterationType(Enum):
    """Kind of values held by a genetic profile."""
    COPY_NUMBER_ALTERATION = "COPY_NUMBER_ALTERATION"
    MRNA_EXPRESSION = "MRNA_EXPRESSION"
    MICRO_RNA_EXPRESSION = "MICRO_RNA_EXPRESSION"
    METHYLATION = "METHYLATION"
    PROTEIN_LEVEL = "PROTEIN_LEVEL"
    PROTEIN_ARRAY_PROTEIN_LEVEL = "PROTEIN_ARRAY_PROTEIN_LEVEL"
    PROTEIN_ARRAY_PHOSPHORYLATION = "PROTEIN_ARRAY_PHOSPHORYLATION"

    @classmethod
    def parse(cls, value: "str | GeneticAlterationType") -> "GeneticAlterationType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown genetic alteration type '{value}'. "
                f"Choose from: {', '.join(m.value for m in cls)}"
            ) from None


class CnaCode:
    """Discrete copy-number codes as they appear in data files."""
    HOMOZYGOUS_DELETION = "-2"
    HEMIZYGOUS_DELETION = "-1"
    ZERO = "0"
    GAIN = "1"
    AMPLIFICATION = "2"
    # Legacy code, imported as a homozygous deletion
    PARTIAL_DELETION = "-1.5"

    EVENT_CODES = frozenset({HOMOZYGOUS_DELETION, AMPLIFICATION})


def normalize_cna_value(value: str) -> str:
    """Rewrite the legacy partial-deletion code; all other values pass through."""
    if value == CnaCode.PARTIAL_DELETION:
        return CnaCode.HOMOZYGOUS_DELETION
    return value


def event_alteration(value: str) -> Optional[int]:
    """Alteration level for a cell value, or None if the value is not an event code."""
    if value in CnaCode.EVENT_CODES:
        return int(value)
    return None


@dataclass(frozen=True)
class GeneticProfile:
    """
    Destination dataset of an import run.

    Attributes:
        profile_id: Internal numeric identity.
        stable_id: Human-readable stable id (e.g. "brca_tcga_gistic").
        cancer_study_id: Study whose samples the profile's columns refer to.
        alteration_type: Kind of values the profile holds.
        show_profile_in_analysis_tab: Discretized CNA profiles are the ones
            shown in the analysis tab; continuous copy-number profiles are not.
    """
    profile_id: int
    stable_id: str
    cancer_study_id: str
    alteration_type: GeneticAlterationType
    show_profile_in_analysis_tab: bool = True

    @property
    def is_discretized_cna(self) -> bool:
        return (
            self.alteration_type is GeneticAlterationType.COPY_NUMBER_ALTERATION
            and self.show_profile_in_analysis_tab
        )

    @property
    def is_protein_array(self) -> bool:
        return self.alteration_type in (
            GeneticAlterationType.PROTEIN_ARRAY_PROTEIN_LEVEL,
            GeneticAlterationType.PROTEIN_ARRAY_PHOSPHORYLATION,
        )

    @property
    def is_micro_rna(self) -> bool:
        return self.alteration_type is GeneticAlterationType.MICRO_RNA_EXPRESSION

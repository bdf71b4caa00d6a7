"""
Stable sample and patient identifiers.

TCGA aliquot barcodes carry more than the sample identity
(TCGA-A1-A0SB-01A-11R-A144-07). Sample columns are matched on the first four
barcode fields; the patient is the first three. The two-digit sample-type
code tells tumor (01-09) from normal (10-19) and control (20-29) samples.
Identifiers that are not TCGA barcodes are used as given.
"""

from __future__ import annotations

import re

__all__ = ['get_sample_id', 'get_patient_id', 'is_normal']

_TCGA_SAMPLE = re.compile(r'^(TCGA-\w\w-\w\w\w\w-(\d\d))', re.IGNORECASE)
_TCGA_PATIENT = re.compile(r'^(TCGA-\w\w-\w\w\w\w)', re.IGNORECASE)


def get_sample_id(barcode: str) -> str:
    """
    Stable sample id for a sample column header.

    Examples:
        >>> get_sample_id("TCGA-A1-A0SB-01A-11R-A144-07")
        'TCGA-A1-A0SB-01'
        >>> get_sample_id("MB-0002")
        'MB-0002'
    """
    barcode = barcode.strip()
    match = _TCGA_SAMPLE.match(barcode)
    if match:
        return match.group(1)
    return barcode


def get_patient_id(barcode: str) -> str:
    """
    Stable patient id for a sample column header.

    Non-TCGA samples are assumed to be their own patient.
    """
    barcode = barcode.strip()
    match = _TCGA_PATIENT.match(barcode)
    if match:
        return match.group(1)
    return barcode


def is_normal(barcode: str) -> bool:
    """Whether the identifier is a TCGA barcode of a normal (type 10-19) sample."""
    match = _TCGA_SAMPLE.match(barcode.strip())
    if not match:
        return False
    return 10 <= int(match.group(2)) <= 19

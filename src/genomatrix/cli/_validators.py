"""Shared argparse type validators for CLI parameter bounds checking."""

from __future__ import annotations

import argparse

from genomatrix.core.profile import GeneticAlterationType


def _positive_int(value: str) -> int:
    """argparse type for positive integers (> 0)."""
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
    return ivalue


def _alteration_type(value: str) -> GeneticAlterationType:
    """argparse type for genetic alteration type names (case-insensitive)."""
    try:
        return GeneticAlterationType.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))

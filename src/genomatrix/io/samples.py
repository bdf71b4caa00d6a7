"""
Sample column resolution.

Maps every sample column of the header to an internal sample id of the
profile's study. Columns without a registered sample are taken to be normal
samples: they are filtered out of every value vector, at the same position
for every row, without aborting the import.

Biological Context:
    Tumor/normal matrices (e.g. TCGA GISTIC output) often carry matched
    normal columns next to the tumor ones. Only tumor samples are registered
    in the study, so the normal columns have nowhere to go.

Examples:
    >>> column_map = resolve_sample_columns(["S1", "TCGA-A1-A0SB-11", "S3"], profile, registry)
    >>> column_map.filtered_indices
    frozenset({1})
    >>> column_map.filter_values(["2", "0", "-2"])
    ['2', '-2']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from genomatrix.core.profile import GeneticProfile
from genomatrix.io import stable_ids
from genomatrix.store.base import SampleRegistry

logger = logging.getLogger(__name__)

__all__ = ['SampleColumnMap', 'resolve_sample_columns', 'register_samples_on_the_fly']


@dataclass(frozen=True)
class SampleColumnMap:
    """
    Sample columns in file order, each mapped to an internal sample id or
    None (filtered).

    Built once per import; value vectors of every row are aligned to
    ``live_sample_ids``.
    """
    column_headers: Tuple[str, ...]
    sample_ids: Tuple[Optional[int], ...]
    _keep_mask: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(self.column_headers) != len(self.sample_ids):
            raise ValueError(
                f"column_headers ({len(self.column_headers)}) and sample_ids "
                f"({len(self.sample_ids)}) must have the same length"
            )
        mask = np.array([sid is not None for sid in self.sample_ids], dtype=bool)
        mask.setflags(write=False)
        object.__setattr__(self, '_keep_mask', mask)

    @property
    def n_columns(self) -> int:
        return len(self.column_headers)

    @property
    def live_sample_ids(self) -> List[int]:
        return [sid for sid in self.sample_ids if sid is not None]

    @property
    def filtered_indices(self) -> FrozenSet[int]:
        return frozenset(int(i) for i in np.flatnonzero(~self._keep_mask))

    @property
    def filtered_headers(self) -> List[str]:
        return [h for h, sid in zip(self.column_headers, self.sample_ids) if sid is None]

    def filter_values(self, values: Sequence[str]) -> List[str]:
        """
        Drop the values of filtered columns.

        Values beyond the known columns are ignored; a short row yields a
        correspondingly short vector.
        """
        n = min(len(values), self.n_columns)
        if n == 0:
            return []
        selected = np.asarray(values[:n], dtype=object)[self._keep_mask[:n]]
        return selected.tolist()


def register_samples_on_the_fly(
    sample_columns: Sequence[str],
    profile: GeneticProfile,
    registry: SampleRegistry,
) -> int:
    """
    Register patients and samples for columns missing from the study.

    Normal samples and blank headers are never registered, so they stay
    filtered.

    Returns:
        Number of samples registered.
    """
    n_added = 0
    study = profile.cancer_study_id
    for header in sample_columns:
        if not header.strip() or stable_ids.is_normal(header):
            continue
        sample_id = stable_ids.get_sample_id(header)
        if registry.get_sample(study, sample_id) is not None:
            continue
        patient_id = stable_ids.get_patient_id(header)
        registry.add_patient(study, patient_id)
        registry.add_sample(study, sample_id, patient_id)
        logger.debug(f"Registered sample {sample_id} (patient {patient_id}) in {study}")
        n_added += 1
    return n_added


def resolve_sample_columns(
    sample_columns: Sequence[str],
    profile: GeneticProfile,
    registry: SampleRegistry,
) -> SampleColumnMap:
    """
    Resolve sample columns against the profile's study.

    Registered samples are linked to the profile if they are not members
    yet. Unregistered and blank columns are marked filtered.

    Args:
        sample_columns: Sample column headers in file order.
        profile: Profile being imported.
        registry: Sample registry of the study.

    Returns:
        Immutable SampleColumnMap.
    """
    resolved: List[Optional[int]] = []
    for header in sample_columns:
        sample_id = stable_ids.get_sample_id(header)
        sample = registry.get_sample(profile.cancer_study_id, sample_id) if sample_id else None
        if sample is None:
            if not stable_ids.is_normal(header):
                logger.debug(f"Sample column {header} has no registered sample; filtering it")
            resolved.append(None)
            continue
        if not registry.sample_in_profile(sample.internal_id, profile.profile_id):
            registry.add_sample_profile(sample.internal_id, profile.profile_id)
        resolved.append(sample.internal_id)

    return SampleColumnMap(
        column_headers=tuple(h.strip() for h in sample_columns),
        sample_ids=tuple(resolved),
    )

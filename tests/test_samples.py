"""
Tests for sample column resolution and on-the-fly registration.
"""

import numpy as np
import pytest

from genomatrix.io.samples import (
    SampleColumnMap,
    register_samples_on_the_fly,
    resolve_sample_columns,
)

from conftest import SAMPLES, STUDY


class TestSampleColumnMap:

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="same length"):
            SampleColumnMap(("A", "B"), (1,))

    def test_filter_values_drops_filtered_positions(self):
        column_map = SampleColumnMap(("A", "N", "B"), (1, None, 2))
        assert column_map.filter_values(["2", "0", "-2"]) == ["2", "-2"]
        assert column_map.filtered_indices == frozenset({1})
        assert column_map.filtered_headers == ["N"]
        assert column_map.live_sample_ids == [1, 2]

    def test_short_row_gives_short_vector(self):
        column_map = SampleColumnMap(("A", "N", "B"), (1, None, 2))
        assert column_map.filter_values(["5"]) == ["5"]
        assert column_map.filter_values([]) == []

    def test_extra_values_are_ignored(self):
        column_map = SampleColumnMap(("A", "B"), (1, 2))
        assert column_map.filter_values(["1", "2", "3"]) == ["1", "2"]

    def test_mask_is_read_only(self):
        column_map = SampleColumnMap(("A",), (1,))
        with pytest.raises(ValueError):
            column_map._keep_mask[0] = False
        assert isinstance(column_map._keep_mask, np.ndarray)


class TestResolveSampleColumns:

    def test_registered_samples_resolve_in_order(self, registry, expression_profile):
        column_map = resolve_sample_columns(SAMPLES, expression_profile, registry)
        assert column_map.live_sample_ids == [1, 2, 3]
        assert not column_map.filtered_indices

    def test_full_barcodes_are_normalized(self, registry, expression_profile):
        column_map = resolve_sample_columns(
            ["TCGA-A1-A0SB-01A-11R-A144-07"], expression_profile, registry
        )
        assert column_map.live_sample_ids == [1]

    def test_unregistered_column_is_filtered(self, registry, expression_profile):
        headers = [SAMPLES[0], "TCGA-A1-A0SB-11", SAMPLES[1]]
        column_map = resolve_sample_columns(headers, expression_profile, registry)
        assert column_map.filtered_indices == frozenset({1})
        assert column_map.live_sample_ids == [1, 2]

    def test_profile_membership_is_added(self, registry, expression_profile):
        resolve_sample_columns(SAMPLES[:1], expression_profile, registry)
        assert registry.sample_in_profile(1, expression_profile.profile_id)
        assert not registry.sample_in_profile(2, expression_profile.profile_id)

    def test_blank_header_is_filtered(self, registry, expression_profile):
        column_map = resolve_sample_columns([SAMPLES[0], ""], expression_profile, registry)
        assert column_map.filtered_indices == frozenset({1})
        assert column_map.live_sample_ids == [1]


class TestRegisterOnTheFly:

    def test_missing_samples_are_registered(self, registry, expression_profile):
        headers = SAMPLES + ["TCGA-B6-A0RE-01"]
        n_added = register_samples_on_the_fly(headers, expression_profile, registry)
        assert n_added == 1
        sample = registry.get_sample(STUDY, "TCGA-B6-A0RE-01")
        assert sample is not None
        assert sample.patient_id == "TCGA-B6-A0RE"
        assert registry.has_patient(STUDY, "TCGA-B6-A0RE")

    def test_normal_samples_are_never_registered(self, registry, expression_profile):
        n_added = register_samples_on_the_fly(["TCGA-A1-A0SB-11"], expression_profile, registry)
        assert n_added == 0
        assert registry.get_sample(STUDY, "TCGA-A1-A0SB-11") is None

    def test_blank_headers_are_skipped(self, registry, expression_profile):
        assert register_samples_on_the_fly(["", "  "], expression_profile, registry) == 0
        assert len(registry) == len(SAMPLES)

    def test_registration_is_idempotent(self, registry, expression_profile):
        assert register_samples_on_the_fly(["MB-0002"], expression_profile, registry) == 1
        assert register_samples_on_the_fly(["MB-0002"], expression_profile, registry) == 0
        assert len(registry) == len(SAMPLES) + 1

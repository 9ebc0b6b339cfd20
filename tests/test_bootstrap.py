"""Tests for bootstrap resampling variants."""
import numpy as np
import pandas as pd
import pytest

from openresample.resample import ResampleHandle
from openresample.resampling.bootstrap import (
    balanced_bootstrap,
    balanced_bootstrap_indices,
    bootstrap,
    bootstrap_indices,
    resample_bootstrap,
)
from openresample.utils.validation import ValidationError


def _samples(df):
    return [h.as_indices() for h in df["sample"]]


class TestBootstrapIndices:
    def test_length_and_range(self):
        idx = bootstrap_indices(10, rng=42)
        assert len(idx) == 10
        assert idx.min() >= 1 and idx.max() <= 10

    def test_matches_fixed_seed_recomputation(self):
        expected = np.random.default_rng(42).choice(10, size=10, replace=True) + 1
        np.testing.assert_array_equal(bootstrap_indices(10, rng=42), expected)

    def test_custom_size(self):
        assert len(bootstrap_indices(5, size=12, rng=0)) == 12

    def test_zero_weight_positions_never_drawn(self):
        weights = [0, 0, 0, 0, 0, 1, 1, 1, 1, 1]
        idx = bootstrap_indices(10, size=500, weights=weights, rng=3)
        assert idx.min() >= 6

    def test_weights_are_normalized(self):
        a = bootstrap_indices(4, weights=[1, 1, 2, 4], rng=5)
        b = bootstrap_indices(4, weights=[0.125, 0.125, 0.25, 0.5], rng=5)
        np.testing.assert_array_equal(a, b)

    @pytest.mark.parametrize("weights", [[1, -1, 1], [0, 0, 0], [1, np.nan, 1], [1, 1]])
    def test_invalid_weights(self, weights):
        with pytest.raises(ValidationError, match="weights"):
            bootstrap_indices(3, weights=weights)

    def test_bayesian_uses_dirichlet_then_weighted_draw(self):
        rng = np.random.default_rng(7)
        p = rng.dirichlet(np.ones(10))
        expected = rng.choice(10, size=10, replace=True, p=p) + 1
        np.testing.assert_array_equal(bootstrap_indices(10, bayesian=True, rng=7), expected)

    def test_rejects_empty_population(self):
        with pytest.raises(ValidationError, match="n"):
            bootstrap_indices(0)

    def test_rough_uniformity(self):
        # Pearson chi-square against the uniform distribution, 9 dof
        idx = bootstrap_indices(10, size=20000, rng=11)
        counts = np.bincount(idx, minlength=11)[1:]
        expected = len(idx) / 10
        chi2 = ((counts - expected) ** 2 / expected).sum()
        assert chi2 < 27.88  # 0.999 quantile


class TestBootstrapTable:
    def test_replicates_and_ids(self, series_df):
        bs = bootstrap(series_df, 5, rng=1)
        assert list(bs.columns) == ["sample", ".id"]
        assert bs[".id"].tolist() == [1, 2, 3, 4, 5]
        for idx in _samples(bs):
            assert len(idx) == 10
            assert set(idx) <= set(range(1, 11))

    def test_replicates_share_one_stream(self, series_df):
        bs = bootstrap(series_df, 3, rng=np.random.default_rng(3))
        gen = np.random.default_rng(3)
        expected = [bootstrap_indices(10, rng=gen) for _ in range(3)]
        for got, want in zip(_samples(bs), expected):
            np.testing.assert_array_equal(got, want)

    def test_handle_materializes(self, series_df):
        handle = resample_bootstrap(series_df, rng=0)
        assert isinstance(handle, ResampleHandle)
        frame = handle.as_frame()
        assert len(frame) == 10
        assert frame["value"].tolist() == [float(i - 1) for i in handle.as_indices()]

    def test_rejects_bad_replicate_count(self, series_df):
        with pytest.raises(ValidationError, match="n_replicates"):
            bootstrap(series_df, 0)

    def test_rejects_empty_data(self):
        with pytest.raises(ValidationError):
            bootstrap(pd.DataFrame({"x": []}), 3)


class TestGroupedBootstrap:
    def test_stratified_keeps_group_sizes(self, grouped_panel):
        bs = bootstrap(grouped_panel, 20, rng=0)
        for idx in _samples(bs):
            assert len(idx) == 10
            assert set(idx[:4]) <= {2, 4, 7, 10}
            assert set(idx[4:7]) <= {1, 5, 9}
            assert set(idx[7:]) <= {3, 6, 8}

    def test_cluster_draws_whole_groups(self, day_panel):
        bs = bootstrap(day_panel.groupby("day"), 20, stratify=False, groups=True, rng=0)
        for idx in _samples(bs):
            assert len(idx) == 10
            for i in range(0, 10, 2):
                assert idx[i] % 2 == 1
                assert idx[i + 1] == idx[i] + 1

    def test_cluster_and_stratified(self, day_panel):
        bs = bootstrap(day_panel.groupby("day"), 20, stratify=True, groups=True, rng=0)
        for idx in _samples(bs):
            for i in range(0, 10, 2):
                assert (idx[i] - 1) // 2 == (idx[i + 1] - 1) // 2

    def test_cluster_weights_are_per_group(self, day_panel):
        bs = bootstrap(day_panel.groupby("day"), 5, stratify=False, groups=True,
                       weights=[0, 0, 0, 0, 1], rng=0)
        for idx in _samples(bs):
            assert idx.tolist() == [9, 10] * 5

    def test_stratified_weights_are_per_row(self, day_panel):
        weights = [1, 0] * 5
        bs = bootstrap(day_panel.groupby("day"), 5, weights=weights, rng=0)
        for idx in _samples(bs):
            assert idx.tolist() == [1, 1, 3, 3, 5, 5, 7, 7, 9, 9]

    @pytest.mark.parametrize("groups", [False, True])
    @pytest.mark.parametrize("seed", range(8))
    def test_zero_weight_group_rejected_before_drawing(self, day_panel, groups, seed):
        weights = [1] * 8 + [0, 0]
        with pytest.raises(ValidationError, match="group 5 sum to zero"):
            bootstrap(day_panel.groupby("day"), 1, stratify=True, groups=groups,
                      weights=weights, rng=seed)

    def test_zero_weight_group_rejected_for_single_replicate(self, day_panel):
        with pytest.raises(ValidationError, match="group 1"):
            resample_bootstrap(day_panel.groupby("day"), weights=[0, 0] + [1] * 8, rng=0)

    def test_weights_length_checked(self, day_panel):
        with pytest.raises(ValidationError, match="length"):
            bootstrap(day_panel.groupby("day"), 5, weights=[1, 1, 1])

    def test_needs_a_grouped_mode(self, grouped_panel):
        with pytest.raises(ValidationError):
            bootstrap(grouped_panel, 3, stratify=False, groups=False)

    def test_handles_reference_ungrouped_frame(self, panel_df):
        bs = bootstrap(panel_df.groupby("g"), 2, rng=0)
        assert bs["sample"].iloc[0].data is panel_df


class TestBalancedBootstrap:
    def test_each_position_appears_once_per_replicate_overall(self):
        samples = balanced_bootstrap_indices(10, 4, rng=0)
        assert len(samples) == 4
        assert all(len(s) == 10 for s in samples)
        counts = np.bincount(np.concatenate(samples), minlength=11)[1:]
        assert counts.tolist() == [4] * 10

    def test_single_permutation_of_pool(self):
        pool = np.tile(np.arange(1, 6), 3)
        expected = np.random.default_rng(9).permutation(pool).reshape(3, 5)
        got = balanced_bootstrap_indices(5, 3, rng=9)
        np.testing.assert_array_equal(np.vstack(got), expected)

    def test_table(self, series_df):
        bb = balanced_bootstrap(series_df, 6, rng=2)
        assert bb[".id"].tolist() == list(range(1, 7))
        counts = np.bincount(np.concatenate(_samples(bb)), minlength=11)[1:]
        assert counts.tolist() == [6] * 10

    def test_balanced_within_groups(self, grouped_panel):
        bb = balanced_bootstrap(grouped_panel, 3, rng=4)
        samples = _samples(bb)
        for idx in samples:
            assert set(idx[:4]) <= {2, 4, 7, 10}
        counts = np.bincount(np.concatenate(samples), minlength=11)[1:]
        assert counts.tolist() == [3] * 10

    def test_balanced_over_groups(self, day_panel):
        bb = balanced_bootstrap(day_panel.groupby("day"), 4, stratify=False, groups=True, rng=4)
        counts = np.bincount(np.concatenate(_samples(bb)), minlength=11)[1:]
        assert counts.tolist() == [4] * 10

"""Resampling methods: index generators and replicate-table builders."""

from .bootstrap import (
    bootstrap_indices,
    balanced_bootstrap_indices,
    resample_bootstrap,
    bootstrap,
    balanced_bootstrap,
)
from .jackknife import jackknife_indices, jackknife
from .crossval import (
    fold_sizes,
    kfold_indices,
    lpo_indices,
    n_lpo_splits,
    crossv_kfold,
    crossv_lpo,
    crossv_loo,
)
from .permutation import permutation_indices, permute
from .rolling import rolling_windows, rolling_window
from .time_series import (
    Window,
    WindowPair,
    candidate_test_starts,
    generate_windows,
    crossv_ts,
)

__all__ = [
    "bootstrap_indices",
    "balanced_bootstrap_indices",
    "resample_bootstrap",
    "bootstrap",
    "balanced_bootstrap",
    "jackknife_indices",
    "jackknife",
    "fold_sizes",
    "kfold_indices",
    "lpo_indices",
    "n_lpo_splits",
    "crossv_kfold",
    "crossv_lpo",
    "crossv_loo",
    "permutation_indices",
    "permute",
    "rolling_windows",
    "rolling_window",
    "Window",
    "WindowPair",
    "candidate_test_starts",
    "generate_windows",
    "crossv_ts",
]

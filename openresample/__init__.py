"""openresample: resampling plans (bootstrap, cross-validation, permutations,
rolling and time-series windows) expressed as row-index sets."""

from .groups import Ungrouped, Grouped, resolve_groups, group_partition, expand_groups, within_groups
from .resample import ResampleHandle, to_resample_df
from .resampling import (
    bootstrap_indices,
    balanced_bootstrap_indices,
    resample_bootstrap,
    bootstrap,
    balanced_bootstrap,
    jackknife_indices,
    jackknife,
    kfold_indices,
    lpo_indices,
    crossv_kfold,
    crossv_lpo,
    crossv_loo,
    permutation_indices,
    permute,
    rolling_windows,
    rolling_window,
    Window,
    WindowPair,
    candidate_test_starts,
    generate_windows,
    crossv_ts,
)
from .planner import build_plan, available_methods
from .utils.validation import ValidationError

__version__ = "0.1.0"

__all__ = [
    "Ungrouped",
    "Grouped",
    "resolve_groups",
    "group_partition",
    "expand_groups",
    "within_groups",
    "ResampleHandle",
    "to_resample_df",
    "bootstrap_indices",
    "balanced_bootstrap_indices",
    "resample_bootstrap",
    "bootstrap",
    "balanced_bootstrap",
    "jackknife_indices",
    "jackknife",
    "kfold_indices",
    "lpo_indices",
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
    "build_plan",
    "available_methods",
    "ValidationError",
]

"""Permutation replicates (sampling without replacement)."""
from __future__ import annotations
from typing import Any

import numpy as np
import pandas as pd

from ..groups import Grouped, Grouping, resolve_groups, underlying_data, within_groups
from ..resample import to_resample_df
from ..utils.logging import get_logger
from ..utils.random import RandomState, get_rng
from ..utils.validation import ValidationError, validate_positive_int

LOGGER = get_logger(__name__)


def permutation_indices(n: int, rng: RandomState = None) -> np.ndarray:
    """Uniformly shuffle ``1..n``."""
    n = validate_positive_int(n, "n")
    return get_rng(rng).permutation(np.arange(1, n + 1, dtype=np.int64))


def _permute_rows(grouping: Grouping, stratify: bool, groups: bool,
                  rng: np.random.Generator) -> np.ndarray:
    if not isinstance(grouping, Grouped):
        return permutation_indices(grouping.n, rng=rng)
    partition = grouping.partition
    if groups:
        partition = tuple(partition[g - 1] for g in permutation_indices(grouping.n_groups, rng=rng))
    if stratify:
        return within_groups(partition, lambda rows: permutation_indices(len(rows), rng=rng))
    return np.concatenate(partition).astype(np.int64, copy=False)


def permute(
    data: Any,
    n_replicates: int,
    stratify: bool = True,
    groups: bool = False,
    rng: RandomState = None,
    id: str = ".id",
) -> pd.DataFrame:
    """Generate ``n_replicates`` random permutations of the rows of ``data``.

    For grouped data ``stratify`` shuffles rows within each group (group
    order kept) and ``groups`` shuffles the order of whole groups; the group
    shuffle is drawn first when both are set.
    """
    n_replicates = validate_positive_int(n_replicates, "n_replicates")
    grouping = resolve_groups(data)
    if isinstance(grouping, Grouped) and not (stratify or groups):
        raise ValidationError("grouped permutation needs stratify=True, groups=True or both")
    if grouping.n < 1:
        raise ValidationError("cannot permute an empty dataset")
    rng = get_rng(rng)

    samples = [_permute_rows(grouping, stratify, groups, rng) for _ in range(n_replicates)]

    LOGGER.info(
        f"permute: {n_replicates} permutations of {grouping.n} rows",
        extra={"method": "permutation", "n_units": grouping.n, "n_replicates": n_replicates,
               "grouped": isinstance(grouping, Grouped)},
    )
    return to_resample_df(underlying_data(data), samples=samples, id=id)

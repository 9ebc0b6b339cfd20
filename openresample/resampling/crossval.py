"""k-fold, leave-p-out and leave-one-out cross-validation.

Every replicate is a (train, test) pair where train is the complement of
test. For grouped data the folds/subsets are built over groups, so a group
is never split between train and test; ``crossv_kfold(..., stratify=True)``
instead splits each group into ``k`` folds so every fold draws rows from
every group.
"""
from __future__ import annotations
from itertools import combinations
from math import comb
from typing import Any, Iterator, List, Tuple

import numpy as np
import pandas as pd

from ..groups import Grouped, expand_groups, resolve_groups, underlying_data
from ..resample import to_resample_df
from ..utils.logging import get_logger
from ..utils.random import RandomState, get_rng
from ..utils.validation import ValidationError, validate_range

LOGGER = get_logger(__name__)

Split = Tuple[np.ndarray, np.ndarray]


def _complement(n: int, test: np.ndarray) -> np.ndarray:
    mask = np.ones(n, dtype=bool)
    mask[test - 1] = False
    return np.flatnonzero(mask).astype(np.int64) + 1


def fold_sizes(n: int, k: int) -> np.ndarray:
    """Near-equal fold sizes: the first ``n % k`` folds get one extra position."""
    sizes = np.full(k, n // k, dtype=np.int64)
    sizes[: n % k] += 1
    return sizes


def kfold_indices(n: int, k: int = 5, shuffle: bool = True, rng: RandomState = None) -> List[Split]:
    """Partition ``1..n`` into ``k`` folds and return (train, test) per fold.

    Args:
        n: Number of positions.
        k: Number of folds, ``2 <= k <= n``.
        shuffle: Assign positions to folds through one random permutation;
            otherwise folds are contiguous blocks.
        rng: Seed or Generator (used only when ``shuffle``).

    Returns:
        ``k`` (train, test) pairs, test positions sorted.
    """
    n = validate_range(n, "n", min_val=2)
    k = validate_range(k, "k", min_val=2, max_val=n)
    order = np.arange(1, n + 1, dtype=np.int64)
    if shuffle:
        order = get_rng(rng).permutation(order)
    bounds = np.concatenate([[0], np.cumsum(fold_sizes(n, k))])
    splits = []
    for j in range(k):
        test = np.sort(order[bounds[j]:bounds[j + 1]])
        splits.append((_complement(n, test), test))
    return splits


def lpo_indices(n: int, p: int) -> Iterator[Split]:
    """Iterate over every leave-``p``-out split of ``1..n``.

    Test sets come in lexicographic order. Arguments are checked before the
    iterator is returned.
    """
    n = validate_range(n, "n", min_val=2)
    p = validate_range(p, "p", min_val=1, max_val=n - 1)
    return _lpo_splits(n, p)


def _lpo_splits(n: int, p: int) -> Iterator[Split]:
    for test in combinations(range(1, n + 1), p):
        test = np.asarray(test, dtype=np.int64)
        yield _complement(n, test), test


def _stratified_folds(grouping: Grouped, k: int, shuffle: bool,
                      rng: np.random.Generator) -> List[Split]:
    small = [i + 1 for i, size in enumerate(grouping.sizes) if size < k]
    if small:
        raise ValidationError(f"stratified k-fold needs at least k={k} rows per group; groups {small} are smaller")
    tests: List[List[np.ndarray]] = [[] for _ in range(k)]
    for rows in grouping.partition:
        for j, (_, local_test) in enumerate(kfold_indices(len(rows), k, shuffle=shuffle, rng=rng)):
            tests[j].append(rows[local_test - 1])
    out = []
    for chunks in tests:
        test = np.sort(np.concatenate(chunks))
        out.append((_complement(grouping.n, test), test))
    return out


def crossv_kfold(
    data: Any,
    k: int = 5,
    shuffle: bool = True,
    stratify: bool = False,
    rng: RandomState = None,
    id: str = ".id",
) -> pd.DataFrame:
    """Generate k-fold cross-validation train/test sets.

    Args:
        data: Dataset or pandas ``groupby`` object.
        k: Number of folds.
        shuffle: Randomize fold membership.
        stratify: For grouped data, split each group into ``k`` folds instead
            of assigning whole groups to folds.
        rng: Seed or Generator.
        id: Name of the fold-number column.
    """
    grouping = resolve_groups(data)
    rng = get_rng(rng)
    if isinstance(grouping, Grouped):
        if stratify:
            k = validate_range(k, "k", min_val=2)
            splits = _stratified_folds(grouping, k, shuffle, rng)
        else:
            splits = [
                (expand_groups(grouping.partition, train), expand_groups(grouping.partition, test))
                for train, test in kfold_indices(grouping.n_groups, k, shuffle=shuffle, rng=rng)
            ]
    else:
        splits = kfold_indices(grouping.n, k, shuffle=shuffle, rng=rng)

    LOGGER.info(
        f"crossv_kfold: {len(splits)} folds over {grouping.n} rows",
        extra={"method": "kfold", "n_units": grouping.n, "n_replicates": len(splits),
               "grouped": isinstance(grouping, Grouped)},
    )
    return to_resample_df(underlying_data(data), train=[s[0] for s in splits],
                          test=[s[1] for s in splits], id=id)


def crossv_lpo(data: Any, p: int = 2, id: str = ".id") -> pd.DataFrame:
    """Generate leave-``p``-out cross-validation train/test sets.

    Produces ``C(n, p)`` replicates, where ``n`` counts rows, or groups for
    grouped data.
    """
    grouping = resolve_groups(data)
    if isinstance(grouping, Grouped):
        n_units = grouping.n_groups
        splits = [
            (expand_groups(grouping.partition, train), expand_groups(grouping.partition, test))
            for train, test in lpo_indices(n_units, p)
        ]
    else:
        n_units = grouping.n
        splits = list(lpo_indices(n_units, p))

    LOGGER.info(
        f"crossv_lpo: {len(splits)} replicates (n={n_units}, p={p})",
        extra={"method": "lpo", "n_units": n_units, "n_replicates": len(splits),
               "grouped": isinstance(grouping, Grouped)},
    )
    return to_resample_df(underlying_data(data), train=[s[0] for s in splits],
                          test=[s[1] for s in splits], id=id)


def crossv_loo(data: Any, id: str = ".id") -> pd.DataFrame:
    """Generate leave-one-out cross-validation train/test sets."""
    return crossv_lpo(data, p=1, id=id)


def n_lpo_splits(n: int, p: int) -> int:
    """Number of leave-``p``-out replicates for ``n`` units."""
    return comb(validate_range(n, "n", min_val=2), validate_range(p, "p", min_val=1, max_val=n - 1))

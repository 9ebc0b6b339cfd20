"""Bootstrap resampling: ordinary, weighted, Bayesian, clustered, stratified and balanced.

All variants share one primitive, ``bootstrap_indices``: draw positions from
``1..n`` with replacement under a probability vector that is uniform, user
supplied, or (Bayesian bootstrap) drawn from a flat Dirichlet.

Grouped data (a pandas ``groupby`` object):

- ``groups=True`` resamples whole groups with replacement (cluster bootstrap)
- ``stratify=True`` resamples rows within each group (stratified bootstrap)

Both may be combined. The group draw always comes first on the random
stream, followed by one row draw per selected group in output order.
"""
from __future__ import annotations
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..groups import Grouped, Grouping, expand_groups, resolve_groups, underlying_data, within_groups
from ..resample import ResampleHandle, to_resample_df
from ..utils.logging import get_logger
from ..utils.random import RandomState, get_rng
from ..utils.validation import ValidationError, normalize_weights, validate_positive_int

LOGGER = get_logger(__name__)


def bootstrap_indices(
    n: int,
    size: Optional[int] = None,
    weights: Optional[Sequence[float]] = None,
    bayesian: bool = False,
    rng: RandomState = None,
) -> np.ndarray:
    """Draw ``size`` (default ``n``) positions from ``1..n`` with replacement.

    Args:
        n: Population size.
        size: Number of draws.
        weights: Optional sampling weights, one per position.
        bayesian: Draw the probability vector from Dirichlet(1, ..., 1)
            (scaled by ``weights`` when given) before sampling.
        rng: Seed or Generator.

    Returns:
        1-based positions.
    """
    n = validate_positive_int(n, "n")
    size = n if size is None else validate_positive_int(size, "size", allow_zero=True)
    rng = get_rng(rng)
    p = None if weights is None else normalize_weights(weights, size=n)
    if bayesian:
        dirichlet = rng.dirichlet(np.ones(n))
        p = dirichlet if p is None else normalize_weights(dirichlet * p)
    return rng.choice(n, size=size, replace=True, p=p).astype(np.int64) + 1


def balanced_bootstrap_indices(n: int, n_replicates: int, rng: RandomState = None) -> List[np.ndarray]:
    """Balanced bootstrap: every position appears exactly ``n_replicates`` times overall.

    The pool ``1..n`` repeated ``n_replicates`` times is shuffled with a single
    permutation and cut into ``n_replicates`` samples of length ``n``.
    """
    n = validate_positive_int(n, "n")
    n_replicates = validate_positive_int(n_replicates, "n_replicates")
    rng = get_rng(rng)
    pool = np.tile(np.arange(1, n + 1, dtype=np.int64), n_replicates)
    return list(rng.permutation(pool).reshape(n_replicates, n))


def _check_grouped_flags(grouping: Grouping, stratify: bool, groups: bool) -> None:
    if isinstance(grouping, Grouped) and not (stratify or groups):
        raise ValidationError("grouped resampling needs stratify=True, groups=True or both")


def _check_weights(grouping: Grouping, weights: Optional[Sequence[float]],
                   stratify: bool, groups: bool) -> Optional[np.ndarray]:
    """Weights are per group for a cluster-only bootstrap, per row otherwise."""
    if weights is None:
        return None
    if isinstance(grouping, Grouped) and groups and not stratify:
        return normalize_weights(weights, size=grouping.n_groups)
    w = normalize_weights(weights, size=grouping.n)
    if isinstance(grouping, Grouped):
        # stratified draws run inside every group
        for i, rows in enumerate(grouping.partition, start=1):
            if not np.any(w[rows - 1] > 0):
                raise ValidationError(f"weights for group {i} sum to zero")
    return w


def _bootstrap_rows(grouping: Grouping, stratify: bool, groups: bool,
                    weights: Optional[np.ndarray], bayesian: bool,
                    rng: np.random.Generator) -> np.ndarray:
    if not isinstance(grouping, Grouped):
        return bootstrap_indices(grouping.n, weights=weights, bayesian=bayesian, rng=rng)

    partition = grouping.partition
    if groups:
        group_weights = weights if not stratify else None
        selected = bootstrap_indices(grouping.n_groups, weights=group_weights,
                                     bayesian=bayesian and not stratify, rng=rng)
        partition = tuple(partition[g - 1] for g in selected)
    if not stratify:
        return np.concatenate(partition).astype(np.int64, copy=False)

    def draw(rows: np.ndarray) -> np.ndarray:
        local = None if weights is None else weights[rows - 1]
        return bootstrap_indices(len(rows), weights=local, bayesian=bayesian, rng=rng)

    return within_groups(partition, draw)


def resample_bootstrap(
    data: Any,
    stratify: bool = True,
    groups: bool = False,
    weights: Optional[Sequence[float]] = None,
    bayesian: bool = False,
    rng: RandomState = None,
) -> ResampleHandle:
    """Generate a single bootstrap replicate of ``data``.

    Args:
        data: Dataset or pandas ``groupby`` object.
        stratify: Resample rows within groups (grouped data only).
        groups: Resample whole groups (grouped data only).
        weights: Sampling weights; per group when only ``groups`` is set,
            per row otherwise.
        bayesian: Use the Bayesian bootstrap probability vector.
        rng: Seed or Generator.
    """
    grouping = resolve_groups(data)
    _check_grouped_flags(grouping, stratify, groups)
    w = _check_weights(grouping, weights, stratify, groups)
    idx = _bootstrap_rows(grouping, stratify, groups, w, bayesian, get_rng(rng))
    return ResampleHandle(underlying_data(data), idx)


def bootstrap(
    data: Any,
    n_replicates: int,
    stratify: bool = True,
    groups: bool = False,
    weights: Optional[Sequence[float]] = None,
    bayesian: bool = False,
    rng: RandomState = None,
    id: str = ".id",
) -> pd.DataFrame:
    """Generate ``n_replicates`` bootstrap replicates.

    Replicates are drawn one after another from the same random stream.

    Returns:
        DataFrame with a ``sample`` column of resample handles and an ``id``
        column numbering the replicates ``1..n_replicates``.
    """
    n_replicates = validate_positive_int(n_replicates, "n_replicates")
    grouping = resolve_groups(data)
    _check_grouped_flags(grouping, stratify, groups)
    if grouping.n < 1:
        raise ValidationError("cannot bootstrap an empty dataset")
    w = _check_weights(grouping, weights, stratify, groups)
    rng = get_rng(rng)

    samples = [_bootstrap_rows(grouping, stratify, groups, w, bayesian, rng)
               for _ in range(n_replicates)]

    LOGGER.info(
        f"bootstrap: {n_replicates} replicates over {grouping.n} rows",
        extra={"method": "bootstrap", "n_units": grouping.n, "n_replicates": n_replicates,
               "grouped": isinstance(grouping, Grouped)},
    )
    return to_resample_df(underlying_data(data), samples=samples, id=id)


def balanced_bootstrap(
    data: Any,
    n_replicates: int,
    stratify: bool = True,
    groups: bool = False,
    rng: RandomState = None,
    id: str = ".id",
) -> pd.DataFrame:
    """Generate ``n_replicates`` balanced bootstrap replicates.

    Ungrouped data: each row appears exactly ``n_replicates`` times across
    all replicates. Grouped data: with ``groups=True`` the balance holds for
    groups (and rows inside a selected group are then drawn by an ordinary
    bootstrap when ``stratify`` is also set); with only ``stratify=True`` the
    balance holds within every group.
    """
    n_replicates = validate_positive_int(n_replicates, "n_replicates")
    grouping = resolve_groups(data)
    _check_grouped_flags(grouping, stratify, groups)
    if grouping.n < 1:
        raise ValidationError("cannot bootstrap an empty dataset")
    rng = get_rng(rng)

    if not isinstance(grouping, Grouped):
        samples = balanced_bootstrap_indices(grouping.n, n_replicates, rng=rng)
    elif groups:
        selections = balanced_bootstrap_indices(grouping.n_groups, n_replicates, rng=rng)
        samples = []
        for selected in selections:
            partition = tuple(grouping.partition[g - 1] for g in selected)
            if stratify:
                samples.append(within_groups(
                    partition, lambda rows: bootstrap_indices(len(rows), rng=rng)))
            else:
                samples.append(expand_groups(grouping.partition, selected))
    else:
        per_group = [balanced_bootstrap_indices(len(rows), n_replicates, rng=rng)
                     for rows in grouping.partition]
        samples = [
            np.concatenate([rows[draws[r] - 1] for rows, draws in zip(grouping.partition, per_group)])
            for r in range(n_replicates)
        ]

    LOGGER.info(
        f"balanced_bootstrap: {n_replicates} replicates over {grouping.n} rows",
        extra={"method": "balanced_bootstrap", "n_units": grouping.n,
               "n_replicates": n_replicates, "grouped": isinstance(grouping, Grouped)},
    )
    return to_resample_df(underlying_data(data), samples=samples, id=id)

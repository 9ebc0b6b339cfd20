"""Time-series cross-validation on a rolling forecasting origin.

Each candidate test start ``s`` gives one replicate:

- test rows ``s .. min(s + test_size - 1, n)``
- train rows ``max(s - horizon - train_size + 1, 1) .. s - horizon``

A window shorter than its target size is kept only when its partial policy
allows it (``False``: never, ``True``: any non-empty window, ``k``: at least
``k`` rows). Windows with no rows are never kept. A replicate is emitted only
when both windows are kept and is identified by ``s`` itself, so dropped
origins leave gaps in the ids rather than renumbering.

With grouped data the same windows are computed over groups and then
expanded into the rows of the selected groups.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..groups import Grouped, expand_groups, resolve_groups, underlying_data
from ..resample import to_resample_df
from ..utils.logging import get_logger
from ..utils.validation import (
    ValidationError,
    validate_partial_policy,
    validate_positions,
    validate_positive_int,
    validate_range,
)

LOGGER = get_logger(__name__)

PartialPolicy = Union[bool, int]


@dataclass(frozen=True)
class Window:
    """Contiguous inclusive range of 1-based positions."""
    start: int
    end: int

    def __post_init__(self):
        if self.start < 1:
            raise ValueError(f"window start must be >= 1, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"window end {self.end} is before start {self.start}")

    def __len__(self) -> int:
        return self.end - self.start + 1

    def indices(self) -> np.ndarray:
        return np.arange(self.start, self.end + 1, dtype=np.int64)


class WindowPair(NamedTuple):
    id: int
    train: Window
    test: Window


def _partial_threshold(policy: PartialPolicy) -> Optional[int]:
    if policy is True:
        return 1
    if policy is False:
        return None
    return int(policy)


def _admit(length: int, size: int, threshold: Optional[int]) -> bool:
    if length < 1:
        return False
    return length >= size or (threshold is not None and length >= threshold)


def candidate_test_starts(
    n: int,
    test_start: Optional[Sequence[int]] = None,
    from_: int = 1,
    to: Optional[int] = None,
    by: int = 1,
) -> np.ndarray:
    """Candidate test-start positions.

    Either the explicit ``test_start`` list (integers in ``[1, n]``, strictly
    increasing) or ``from_, from_ + by, ...`` up to ``to`` (default ``n``).
    """
    n = validate_positive_int(n, "n")
    if test_start is not None:
        return validate_positions(test_start, "test_start", n)
    to = n if to is None else to
    from_ = validate_range(from_, "from", min_val=1)
    to = validate_range(to, "to", min_val=from_, max_val=n)
    by = validate_positive_int(by, "by")
    return np.arange(from_, to + 1, by, dtype=np.int64)


def generate_windows(
    n: int,
    horizon: int = 1,
    test_size: int = 1,
    test_partial: PartialPolicy = False,
    train_partial: PartialPolicy = True,
    train_size: Optional[int] = None,
    test_starts: Optional[Sequence[int]] = None,
) -> List[WindowPair]:
    """Compute the admissible (train, test) windows of a series of length ``n``.

    Args:
        n: Series length (rows, or groups for grouped data).
        horizon: Gap between the last train position and the first test position.
        test_size: Target test window length.
        test_partial: Policy for test windows shorter than ``test_size``.
        train_partial: Policy for train windows shorter than ``train_size``.
        train_size: Maximum train window length; defaults to ``n`` (expanding window).
        test_starts: Candidate test starts in increasing order; defaults to ``1..n``.

    Returns:
        Admitted pairs in candidate order, each tagged with its test start.
    """
    n = validate_positive_int(n, "n")
    horizon = validate_positive_int(horizon, "horizon")
    test_size = validate_positive_int(test_size, "test_size")
    train_size = n if train_size is None else validate_positive_int(train_size, "train_size")
    test_partial = validate_partial_policy(test_partial, "test_partial")
    train_partial = validate_partial_policy(train_partial, "train_partial")
    if test_starts is None:
        starts = np.arange(1, n + 1, dtype=np.int64)
    else:
        starts = validate_positions(test_starts, "test_starts", n)

    test_threshold = _partial_threshold(test_partial)
    train_threshold = _partial_threshold(train_partial)

    pairs: List[WindowPair] = []
    for s in starts.tolist():
        test_end = min(s + test_size - 1, n)
        train_end = s - horizon
        train_start = max(train_end - train_size + 1, 1)
        if not _admit(test_end - s + 1, test_size, test_threshold):
            LOGGER.debug(f"test start {s}: test window [{s}, {test_end}] rejected")
            continue
        if not _admit(train_end - train_start + 1, train_size, train_threshold):
            LOGGER.debug(f"test start {s}: train window [{train_start}, {train_end}] rejected")
            continue
        pairs.append(WindowPair(s, Window(train_start, train_end), Window(s, test_end)))

    LOGGER.debug(
        f"generate_windows: {len(pairs)} of {len(starts)} candidates admitted (n={n})",
        extra={"method": "time_series", "n_units": n, "n_candidates": len(starts),
               "n_replicates": len(pairs)},
    )
    return pairs


def crossv_ts(
    data: Any,
    horizon: int = 1,
    test_size: int = 1,
    test_partial: PartialPolicy = False,
    train_partial: PartialPolicy = True,
    train_size: Optional[int] = None,
    test_start: Optional[Sequence[int]] = None,
    from_: int = 1,
    to: Optional[int] = None,
    by: int = 1,
    id: str = ".id",
) -> pd.DataFrame:
    """Generate time-series cross-validation train/test sets.

    Rows (or groups, for a pandas ``groupby`` object) are assumed to be in
    time order. See the module docstring for the window rules.

    Returns:
        DataFrame with ``train`` and ``test`` resample handles and an ``id``
        column holding each replicate's test start. Empty when no candidate
        is admissible.
    """
    grouping = resolve_groups(data)
    n = grouping.n_groups if isinstance(grouping, Grouped) else grouping.n
    if n < 1:
        raise ValidationError("cannot cross-validate an empty dataset")

    starts = candidate_test_starts(n, test_start=test_start, from_=from_, to=to, by=by)
    pairs = generate_windows(
        n,
        horizon=horizon,
        test_size=test_size,
        test_partial=test_partial,
        train_partial=train_partial,
        train_size=train_size,
        test_starts=starts,
    )

    if isinstance(grouping, Grouped):
        train = [expand_groups(grouping.partition, p.train.indices()) for p in pairs]
        test = [expand_groups(grouping.partition, p.test.indices()) for p in pairs]
    else:
        train = [p.train.indices() for p in pairs]
        test = [p.test.indices() for p in pairs]

    LOGGER.info(
        f"crossv_ts: {len(pairs)} replicates from {len(starts)} candidate origins",
        extra={"method": "time_series", "n_units": n, "n_candidates": len(starts),
               "n_replicates": len(pairs), "grouped": isinstance(grouping, Grouped)},
    )
    return to_resample_df(underlying_data(data), train=train, test=test,
                          ids=[p.id for p in pairs], id=id)

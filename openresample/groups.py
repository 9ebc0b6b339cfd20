"""Group resolution and group-to-row expansion.

A dataset is either ``Ungrouped`` (resampling unit = row) or ``Grouped``
(an ordered partition of its 1-based row positions). Group-level algorithms
run on ``n = n_groups`` and map their output back to rows with
``expand_groups``; stratified algorithms run inside each group through
``within_groups``.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence, Tuple, Union
import numpy as np
import pandas as pd
from pandas.core.groupby import DataFrameGroupBy, SeriesGroupBy

from .utils.validation import ValidationError


@dataclass(frozen=True)
class Ungrouped:
    """Plain dataset of ``n`` rows."""
    n: int


@dataclass(frozen=True)
class Grouped:
    """Dataset partitioned into ordered groups of 1-based row positions."""
    partition: Tuple[np.ndarray, ...]

    @property
    def n_groups(self) -> int:
        return len(self.partition)

    @property
    def n(self) -> int:
        return int(sum(len(g) for g in self.partition))

    @property
    def sizes(self) -> np.ndarray:
        return np.array([len(g) for g in self.partition], dtype=np.int64)


Grouping = Union[Ungrouped, Grouped]


def group_partition(labels: Iterable[Any]) -> Grouped:
    """Build a partition from one label per row.

    Groups are ordered by sorted label, rows within a group keep their
    original order (the same order ``DataFrame.groupby`` uses).
    """
    codes, uniques = pd.factorize(pd.Series(list(labels)), sort=True)
    if np.any(codes < 0):
        raise ValidationError("group labels cannot contain missing values")
    positions = np.arange(1, len(codes) + 1, dtype=np.int64)
    return Grouped(tuple(positions[codes == g] for g in range(len(uniques))))


def resolve_groups(data: Any) -> Grouping:
    """Resolve the resampling unit of ``data``.

    Args:
        data: An int row count, a pandas ``groupby`` object, an existing
            ``Ungrouped``/``Grouped`` value, or any sized dataset.

    Returns:
        ``Grouped`` for grouped input, ``Ungrouped`` otherwise.
    """
    if isinstance(data, (Ungrouped, Grouped)):
        return data
    if isinstance(data, (DataFrameGroupBy, SeriesGroupBy)):
        # ngroup numbers groups in the order the groupby defines (sorted keys
        # unless sort=False); rows whose key was dropped come back as NaN.
        raw = data.ngroup().to_numpy(dtype=float, na_value=np.nan)
        codes = np.where(np.isnan(raw), -1, raw).astype(np.int64)
        positions = np.arange(1, len(codes) + 1, dtype=np.int64)
        return Grouped(tuple(positions[codes == g] for g in range(data.ngroups)))
    if isinstance(data, (bool, np.bool_)):
        raise ValidationError(f"cannot resample a boolean, got {data!r}")
    if isinstance(data, (int, np.integer)):
        if data < 0:
            raise ValidationError(f"row count must be non-negative, got {data}")
        return Ungrouped(int(data))
    try:
        return Ungrouped(len(data))
    except TypeError as e:
        raise ValidationError(f"cannot determine the size of {type(data).__name__}") from e


def underlying_data(data: Any) -> Any:
    """Return the object resample handles should reference."""
    if isinstance(data, (DataFrameGroupBy, SeriesGroupBy)):
        return data.obj
    return data


def expand_groups(partition: Sequence[np.ndarray], group_positions: Iterable[int]) -> np.ndarray:
    """Concatenate the rows of the selected groups.

    Args:
        partition: Ordered row positions per group.
        group_positions: 1-based group positions, in output order; repeats
            are allowed.

    Returns:
        1-based row positions.
    """
    chunks = [partition[int(g) - 1] for g in group_positions]
    if not chunks:
        return np.empty(0, dtype=np.int64)
    return np.concatenate(chunks).astype(np.int64, copy=False)


def within_groups(partition: Sequence[np.ndarray],
                  draw: Callable[[np.ndarray], np.ndarray]) -> np.ndarray:
    """Apply ``draw`` inside every group and concatenate the results.

    ``draw(rows)`` receives a group's row positions and returns 1-based
    positions local to that group; groups are visited in partition order.
    """
    chunks = [rows[np.asarray(draw(rows), dtype=np.int64) - 1] for rows in partition]
    if not chunks:
        return np.empty(0, dtype=np.int64)
    return np.concatenate(chunks).astype(np.int64, copy=False)

"""Lazy resample handles and replicate tables.

A ``ResampleHandle`` pairs a dataset with 1-based row positions and only
builds the subset when asked. ``to_resample_df`` wraps the index sets
produced by a resampling method into one table row per replicate.
"""
from __future__ import annotations
from typing import Any, List, Optional, Sequence
import numpy as np
import pandas as pd


class ResampleHandle:
    """Reference to ``data`` restricted to ``idx`` (1-based row positions)."""

    __slots__ = ("data", "idx")

    def __init__(self, data: Any, idx: Sequence[int]):
        self.data = data
        self.idx = np.asarray(idx, dtype=np.int64)

    def __len__(self) -> int:
        return len(self.idx)

    def __repr__(self) -> str:
        head = ", ".join(str(i) for i in self.idx[:10])
        more = ", ..." if len(self.idx) > 10 else ""
        return f"<ResampleHandle [{len(self.idx)} x {type(self.data).__name__}] {head}{more}>"

    def as_indices(self) -> np.ndarray:
        """Return the 1-based row positions."""
        return self.idx.copy()

    def as_frame(self) -> Any:
        """Materialize the selected rows.

        Raises:
            TypeError: If the handle refers to a bare row count (or another
                object without rows); use ``as_indices()`` instead.
        """
        if isinstance(self.data, (bool, int, np.integer)) or not hasattr(self.data, "__getitem__"):
            raise TypeError(
                f"cannot materialize rows of {type(self.data).__name__} data; "
                "only as_indices() is available"
            )
        positions = self.idx - 1
        if isinstance(self.data, (pd.DataFrame, pd.Series)):
            return self.data.iloc[positions]
        if isinstance(self.data, np.ndarray):
            return self.data[positions]
        return [self.data[i] for i in positions]


def to_resample_df(
    data: Any,
    samples: Optional[Sequence[Sequence[int]]] = None,
    train: Optional[Sequence[Sequence[int]]] = None,
    test: Optional[Sequence[Sequence[int]]] = None,
    ids: Optional[Sequence[Any]] = None,
    id: str = ".id",
) -> pd.DataFrame:
    """Assemble a replicate table.

    Pass either ``samples`` (non-split methods, column ``sample``) or
    ``train`` and ``test`` (split methods). ``ids`` defaults to ``1..R``.
    """
    if samples is not None:
        columns = {"sample": samples}
    elif train is not None and test is not None:
        if len(train) != len(test):
            raise ValueError(f"train and test must have equal length, got {len(train)} and {len(test)}")
        columns = {"train": train, "test": test}
    else:
        raise ValueError("either samples or both train and test are required")

    n_rows = len(next(iter(columns.values())))
    if ids is None:
        ids = list(range(1, n_rows + 1))
    elif len(ids) != n_rows:
        raise ValueError(f"ids must have length {n_rows}, got {len(ids)}")

    out: dict = {}
    for name, index_sets in columns.items():
        handles: List[ResampleHandle] = [ResampleHandle(data, idx) for idx in index_sets]
        out[name] = pd.Series(handles, dtype=object)
    out[id] = pd.Series(list(ids), dtype="int64" if _all_int(ids) else object)
    return pd.DataFrame(out)


def _all_int(values: Sequence[Any]) -> bool:
    return all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in values)

"""Jackknife (leave-one-out) replicates."""
from __future__ import annotations
from typing import Any, List

import numpy as np
import pandas as pd

from ..groups import Grouped, expand_groups, resolve_groups, underlying_data
from ..resample import to_resample_df
from ..utils.logging import get_logger
from ..utils.validation import validate_range

LOGGER = get_logger(__name__)


def jackknife_indices(n: int) -> List[np.ndarray]:
    """Return ``n`` samples; sample ``i`` is ``1..n`` without position ``i``."""
    n = validate_range(n, "n", min_val=2)
    positions = np.arange(1, n + 1, dtype=np.int64)
    return [np.delete(positions, i) for i in range(n)]


def jackknife(data: Any, id: str = ".id") -> pd.DataFrame:
    """Generate jackknife replicates of ``data``.

    For grouped data each replicate drops one whole group. The ``id`` column
    holds the position (row or group) that was left out.
    """
    grouping = resolve_groups(data)
    if isinstance(grouping, Grouped):
        samples = [expand_groups(grouping.partition, kept)
                   for kept in jackknife_indices(grouping.n_groups)]
        n_units = grouping.n_groups
    else:
        samples = jackknife_indices(grouping.n)
        n_units = grouping.n

    LOGGER.info(
        f"jackknife: {n_units} replicates",
        extra={"method": "jackknife", "n_units": n_units, "n_replicates": n_units,
               "grouped": isinstance(grouping, Grouped)},
    )
    return to_resample_df(underlying_data(data), samples=samples,
                          ids=list(range(1, n_units + 1)), id=id)

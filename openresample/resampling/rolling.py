"""Fixed-width rolling windows."""
from __future__ import annotations
from typing import Any, List

import pandas as pd

from ..groups import Grouped, expand_groups, resolve_groups, underlying_data
from ..resample import to_resample_df
from ..utils.logging import get_logger
from ..utils.validation import ValidationError, validate_positive_int, validate_range
from .time_series import Window

LOGGER = get_logger(__name__)


def rolling_windows(n: int, width: int, step: int = 1, partial: bool = False) -> List[Window]:
    """Windows ``[s, s + width - 1]`` for ``s = 1, 1 + step, ...`` within ``1..n``.

    Args:
        n: Series length.
        width: Window length, ``1 <= width <= n``.
        step: Distance between consecutive window starts.
        partial: Also emit the trailing windows that run past ``n``, clipped.
    """
    n = validate_positive_int(n, "n")
    width = validate_range(width, "width", min_val=1, max_val=n)
    step = validate_positive_int(step, "step")
    last_start = n if partial else n - width + 1
    return [Window(s, min(s + width - 1, n)) for s in range(1, last_start + 1, step)]


def rolling_window(
    data: Any,
    width: int,
    step: int = 1,
    partial: bool = False,
    id: str = ".id",
) -> pd.DataFrame:
    """Generate rolling-window samples of ``data`` (windows of groups for grouped data).

    The ``id`` column holds each window's start position.
    """
    grouping = resolve_groups(data)
    n = grouping.n_groups if isinstance(grouping, Grouped) else grouping.n
    if n < 1:
        raise ValidationError("cannot build rolling windows over an empty dataset")
    windows = rolling_windows(n, width, step=step, partial=partial)
    if isinstance(grouping, Grouped):
        samples = [expand_groups(grouping.partition, w.indices()) for w in windows]
    else:
        samples = [w.indices() for w in windows]

    LOGGER.info(
        f"rolling_window: {len(windows)} windows of width {width}",
        extra={"method": "rolling", "n_units": n, "n_replicates": len(windows),
               "grouped": isinstance(grouping, Grouped)},
    )
    return to_resample_df(underlying_data(data), samples=samples,
                          ids=[w.start for w in windows], id=id)

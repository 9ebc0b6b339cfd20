"""Build a resampling plan from configuration.

``build_plan(data, "kfold")`` looks up the ``kfold`` section of the active
configuration, applies keyword overrides, and returns the replicate table.
"""
from __future__ import annotations
import inspect
from typing import Any, Callable, Dict, List, NamedTuple, Optional

import pandas as pd

from .config import ConfigManager, get_config
from .resampling import (
    balanced_bootstrap,
    bootstrap,
    crossv_kfold,
    crossv_loo,
    crossv_lpo,
    crossv_ts,
    jackknife,
    permute,
    rolling_window,
)
from .utils.logging import configure_logging, get_logger
from .utils.random import RandomState
from .utils.validation import ValidationError, validate_in_set

LOGGER = get_logger(__name__)


class _Method(NamedTuple):
    func: Callable[..., pd.DataFrame]
    section: Optional[str]
    random: bool


METHODS: Dict[str, _Method] = {
    "bootstrap": _Method(bootstrap, "bootstrap", True),
    "balanced_bootstrap": _Method(balanced_bootstrap, "balanced_bootstrap", True),
    "jackknife": _Method(jackknife, None, False),
    "kfold": _Method(crossv_kfold, "kfold", True),
    "lpo": _Method(crossv_lpo, "lpo", False),
    "loo": _Method(crossv_loo, None, False),
    "permutation": _Method(permute, "permutation", True),
    "rolling": _Method(rolling_window, "rolling", False),
    "time_series": _Method(crossv_ts, "time_series", False),
}


def available_methods() -> List[str]:
    """Names accepted by ``build_plan``."""
    return sorted(METHODS)


def build_plan(
    data: Any,
    method: str,
    config: Optional[ConfigManager] = None,
    rng: RandomState = None,
    **overrides: Any,
) -> pd.DataFrame:
    """Generate the replicate table for ``method`` using configured defaults.

    Args:
        data: Dataset or pandas ``groupby`` object.
        method: One of ``available_methods()``.
        config: Configuration to read; the global one when omitted.
        rng: Seed or Generator; falls back to the configured ``seed``.
        **overrides: Method parameters that take precedence over the config
            section (e.g. ``k=10``).

    Raises:
        ValidationError: If the method is unknown or a parameter is invalid.
    """
    validate_in_set(method, "method", set(METHODS))
    config = config or get_config()
    entry = METHODS[method]

    log_cfg = config.get_section("logging")
    configure_logging(log_cfg.level, log_cfg.log_dir)

    params: Dict[str, Any] = {}
    if entry.section is not None:
        # dump by field name: "from" is exposed as the from_ keyword
        params.update(config.get_section(entry.section).model_dump())
    params.update(overrides)
    params.setdefault("id", config.get("id_column"))
    if entry.random:
        params["rng"] = rng if rng is not None else config.get("seed")
    elif rng is not None:
        raise ValidationError(f"method {method!r} does not use random numbers")

    unknown = sorted(set(params) - set(inspect.signature(entry.func).parameters))
    if unknown:
        raise ValidationError(f"unknown parameters for {method!r}: {unknown}")

    LOGGER.info(f"build_plan: method={method}", extra={"method": method})
    return entry.func(data, **params)

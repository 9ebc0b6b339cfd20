"""Random stream handling shared by all resampling methods."""
from __future__ import annotations
from typing import Union
import numpy as np

RandomState = Union[None, int, np.random.Generator]


def get_rng(rng: RandomState = None) -> np.random.Generator:
    """Return a ``numpy.random.Generator`` for ``rng``.

    An existing Generator is returned as-is so several calls can draw from
    one shared stream; an int seeds a fresh Generator; ``None`` draws fresh
    OS entropy.
    """
    if isinstance(rng, np.random.Generator):
        return rng
    if rng is None or isinstance(rng, (int, np.integer)):
        return np.random.default_rng(rng)
    raise TypeError(f"rng must be None, an int seed or a numpy Generator, got {type(rng).__name__}")

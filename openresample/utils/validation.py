"""Parameter validation for resampling configurations.

All checks run before any index computation so a bad configuration fails
fast with a message naming the offending parameter.
"""
from __future__ import annotations
import numbers
from typing import Any, Iterable, Optional, Sequence, Set, Union
import numpy as np


class ValidationError(ValueError):
    """Raised when parameter validation fails."""
    pass


def _is_integer(value: Any) -> bool:
    return isinstance(value, (numbers.Integral, np.integer)) and not isinstance(value, (bool, np.bool_))


def validate_positive_int(value: Any, name: str, allow_zero: bool = False) -> int:
    """Validate that a value is a positive integer.

    Args:
        value: Value to validate.
        name: Parameter name for error message.
        allow_zero: If True, allow zero values.

    Returns:
        The validated value as ``int``.

    Raises:
        ValidationError: If value is not a positive integer.
    """
    if not _is_integer(value):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    val = int(value)
    if allow_zero:
        if val < 0:
            raise ValidationError(f"{name} must be non-negative integer, got {val}")
    else:
        if val <= 0:
            raise ValidationError(f"{name} must be positive integer, got {val}")
    return val


def validate_range(value: Any, name: str, min_val: Optional[int] = None,
                   max_val: Optional[int] = None) -> int:
    """Validate that an integer lies within ``[min_val, max_val]``.

    Args:
        value: Value to validate.
        name: Parameter name for error message.
        min_val: Minimum allowed value (None for no minimum).
        max_val: Maximum allowed value (None for no maximum).

    Returns:
        The validated value as ``int``.

    Raises:
        ValidationError: If value is not an integer or is out of range.
    """
    if not _is_integer(value):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    val = int(value)
    if min_val is not None and val < min_val:
        raise ValidationError(f"{name} must be >= {min_val}, got {val}")
    if max_val is not None and val > max_val:
        raise ValidationError(f"{name} must be <= {max_val}, got {val}")
    return val


def validate_in_set(value: Any, name: str, valid_values: Set[Any]) -> Any:
    """Validate that a value is in a set of allowed values."""
    if value not in valid_values:
        raise ValidationError(
            f"{name} must be one of {sorted(valid_values)}, got {value!r}"
        )
    return value


def validate_partial_policy(value: Any, name: str) -> Union[bool, int]:
    """Validate a partial-window policy.

    ``False`` rejects short windows, ``True`` accepts any non-empty short
    window and an integer ``k >= 1`` accepts short windows of at least ``k``.
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if _is_integer(value) and int(value) >= 1:
        return int(value)
    raise ValidationError(f"{name} must be a bool or an integer >= 1, got {value!r}")


def validate_positions(values: Iterable[Any], name: str, n: int,
                       strictly_increasing: bool = True) -> np.ndarray:
    """Validate a sequence of 1-based positions in ``[1, n]``.

    Returns:
        The positions as an ``int64`` array.
    """
    values = list(values)
    for v in values:
        if not _is_integer(v):
            raise ValidationError(f"{name} must contain integers, got {v!r}")
    arr = np.asarray(values, dtype=np.int64)
    if arr.size and (arr.min() < 1 or arr.max() > n):
        raise ValidationError(f"{name} values must lie in [1, {n}], got range [{arr.min()}, {arr.max()}]")
    if strictly_increasing and arr.size > 1 and np.any(np.diff(arr) <= 0):
        raise ValidationError(f"{name} must be strictly increasing")
    return arr


def normalize_weights(weights: Sequence[float], name: str = "weights",
                      size: Optional[int] = None) -> np.ndarray:
    """Normalize sampling weights to sum to 1.0.

    Args:
        weights: Weight values.
        name: Parameter name for error messages.
        size: Expected length, if known.

    Returns:
        Normalized weights as a float array.

    Raises:
        ValidationError: If weights cannot be normalized (e.g., all zero, negative values).
    """
    weights_array = np.asarray(weights, dtype=float).ravel()

    if weights_array.size == 0:
        raise ValidationError(f"{name} cannot be empty")

    if size is not None and weights_array.size != size:
        raise ValidationError(f"{name} must have length {size}, got {weights_array.size}")

    if not np.all(np.isfinite(weights_array)):
        raise ValidationError(f"{name} must contain finite values")

    if np.any(weights_array < 0):
        raise ValidationError(f"{name} cannot contain negative values")

    total = np.sum(weights_array)

    if total == 0:
        raise ValidationError(f"{name} cannot all be zero")

    return weights_array / total

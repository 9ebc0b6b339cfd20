"""Config helpers: read YAML files and environment settings (``.env`` aware)."""
from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional
import yaml
from dotenv import load_dotenv

# Load .env once at import time
load_dotenv()


def load_config(path: str | Path) -> Dict[str, Any]:
    """Read a YAML file that holds a mapping of resampling settings.

    Args:
        path: Path to a YAML file.

    Returns:
        Parsed mapping; an empty file yields ``{}``.

    Raises:
        FileNotFoundError: If the file does not exist.
        TypeError: If the document is not a mapping.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise TypeError(f"Config {p} must contain a mapping, got {type(data).__name__}")
    return data


def env(key: str, default: Any | None = None, cast: Optional[Callable[[str], Any]] = None) -> Any:
    """Fetch an ``OPENRESAMPLE_*`` style environment variable.

    Args:
        key: Environment variable name.
        default: Returned unchanged when the variable is unset or empty.
        cast: Optional converter applied to the raw string.
    """
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return cast(raw) if cast is not None else raw

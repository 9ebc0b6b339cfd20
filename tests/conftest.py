"""
Pytest Configuration and Fixtures
==================================
Shared fixtures and configuration for all tests.
"""
import pytest
import pandas as pd
import numpy as np
from pathlib import Path
import sys

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def series_df() -> pd.DataFrame:
    """Ten time-ordered rows."""
    dates = pd.date_range(start='2024-01-01', periods=10, freq='D')
    return pd.DataFrame({
        'value': np.arange(10, dtype=float),
    }, index=dates)


@pytest.fixture
def panel_df() -> pd.DataFrame:
    """Three groups of unequal size with interleaved rows."""
    return pd.DataFrame({
        'g': ['b', 'a', 'c', 'a', 'b', 'c', 'a', 'c', 'b', 'a'],
        'value': np.arange(10, dtype=float),
    })


@pytest.fixture
def grouped_panel(panel_df):
    return panel_df.groupby('g')


@pytest.fixture
def day_panel() -> pd.DataFrame:
    """Five days with two rows each, ordered by day."""
    return pd.DataFrame({
        'day': np.repeat(np.arange(1, 6), 2),
        'value': np.arange(10, dtype=float),
    })


@pytest.fixture
def config_path() -> Path:
    return PROJECT_ROOT / "configs" / "default.yaml"

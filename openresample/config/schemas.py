"""Pydantic schemas for resampling configuration."""
from __future__ import annotations
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Section(BaseModel):
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True, extra="forbid")


def _check_partial(v: Union[bool, int]) -> Union[bool, int]:
    if not isinstance(v, bool) and v < 1:
        raise ValueError('partial policy must be a bool or an integer >= 1')
    return v


class BootstrapConfig(_Section):
    """Bootstrap settings."""
    n_replicates: int = Field(default=100, ge=1, description="Number of bootstrap replicates")
    stratify: bool = Field(default=True, description="Resample rows within groups")
    groups: bool = Field(default=False, description="Resample whole groups (cluster bootstrap)")
    bayesian: bool = Field(default=False, description="Use Dirichlet-weighted Bayesian bootstrap")


class BalancedBootstrapConfig(_Section):
    """Balanced bootstrap settings."""
    n_replicates: int = Field(default=100, ge=1, description="Number of replicates")
    stratify: bool = Field(default=True, description="Balance rows within each group")
    groups: bool = Field(default=False, description="Balance whole groups")


class KFoldConfig(_Section):
    """k-fold cross-validation settings."""
    k: int = Field(default=5, ge=2, description="Number of folds")
    shuffle: bool = Field(default=True, description="Randomize fold membership")
    stratify: bool = Field(default=False, description="Split every group into k folds")


class LeavePOutConfig(_Section):
    """Leave-p-out cross-validation settings."""
    p: int = Field(default=2, ge=1, description="Size of every test set")


class PermutationConfig(_Section):
    """Permutation settings."""
    n_replicates: int = Field(default=100, ge=1, description="Number of permutations")
    stratify: bool = Field(default=True, description="Shuffle rows within groups")
    groups: bool = Field(default=False, description="Shuffle the order of groups")


class RollingWindowConfig(_Section):
    """Rolling window settings."""
    width: int = Field(default=10, ge=1, description="Window length")
    step: int = Field(default=1, ge=1, description="Distance between window starts")
    partial: bool = Field(default=False, description="Emit clipped trailing windows")


class TimeSeriesCVConfig(_Section):
    """Rolling-origin time-series cross-validation settings."""
    horizon: int = Field(default=1, ge=1, description="Gap between train end and test start")
    test_size: int = Field(default=1, ge=1, description="Target test window length")
    test_partial: Union[bool, int] = Field(default=False, description="Short test window policy")
    train_partial: Union[bool, int] = Field(default=True, description="Short train window policy")
    train_size: Optional[int] = Field(default=None, ge=1, description="Maximum train length (None = all history)")
    test_start: Optional[List[int]] = Field(default=None, description="Explicit test start positions")
    from_: int = Field(default=1, ge=1, alias="from", description="First candidate test start")
    to: Optional[int] = Field(default=None, ge=1, description="Last candidate test start (None = n)")
    by: int = Field(default=1, ge=1, description="Step between candidate test starts")

    @field_validator('test_partial', 'train_partial')
    @classmethod
    def validate_partial(cls, v):
        return _check_partial(v)

    @field_validator('test_start')
    @classmethod
    def validate_test_start(cls, v):
        if v is not None and any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError('test_start must be strictly increasing')
        return v

    @model_validator(mode='after')
    def validate_from_before_to(self):
        if self.to is not None and self.from_ > self.to:
            raise ValueError('from must not exceed to')
        return self


class LoggingConfig(_Section):
    """Logging settings."""
    level: str = Field(default="INFO", description="Log level name")
    log_dir: Optional[str] = Field(default=None, description="Directory for JSON log file")


class Config(BaseModel):
    """Main configuration schema."""
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    seed: Optional[int] = Field(default=None, description="Seed for the shared random stream")
    id_column: str = Field(default=".id", min_length=1, description="Name of the replicate id column")
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)
    balanced_bootstrap: BalancedBootstrapConfig = Field(default_factory=BalancedBootstrapConfig)
    kfold: KFoldConfig = Field(default_factory=KFoldConfig)
    lpo: LeavePOutConfig = Field(default_factory=LeavePOutConfig)
    permutation: PermutationConfig = Field(default_factory=PermutationConfig)
    rolling: RollingWindowConfig = Field(default_factory=RollingWindowConfig)
    time_series: TimeSeriesCVConfig = Field(default_factory=TimeSeriesCVConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

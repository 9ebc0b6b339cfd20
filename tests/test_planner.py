"""Tests for configuration-driven plan building."""
import numpy as np
import pytest

from openresample.config import ConfigManager, reset_global_config, set_global_config
from openresample.planner import available_methods, build_plan
from openresample.resampling import bootstrap, crossv_kfold
from openresample.utils.validation import ValidationError


def _indices(handles):
    return [h.as_indices().tolist() for h in handles]


def test_available_methods():
    assert available_methods() == [
        "balanced_bootstrap", "bootstrap", "jackknife", "kfold", "loo",
        "lpo", "permutation", "rolling", "time_series",
    ]


def test_kfold_from_config_matches_direct_call(series_df):
    plan = build_plan(series_df, "kfold", config=ConfigManager(), rng=0)
    direct = crossv_kfold(series_df, k=5, rng=0)

    assert len(plan) == 5
    assert _indices(plan["test"]) == _indices(direct["test"])


def test_overrides_take_precedence(series_df):
    plan = build_plan(series_df, "kfold", config=ConfigManager(), rng=0, k=2)
    assert len(plan) == 2


def test_configured_seed_is_used(series_df):
    config = ConfigManager.from_dict({"seed": 11, "bootstrap": {"n_replicates": 3}})
    plan = build_plan(series_df, "bootstrap", config=config)

    assert _indices(plan["sample"]) == _indices(bootstrap(series_df, 3, rng=11)["sample"])


def test_time_series_section_with_from_key(series_df):
    config = ConfigManager.from_dict({"time_series": {"from": 5, "test_size": 2}})
    plan = build_plan(series_df, "time_series", config=config)

    assert plan[".id"].tolist() == [5, 6, 7, 8, 9]
    assert plan.iloc[0]["test"].as_indices().tolist() == [5, 6]


def test_id_column_from_config(series_df):
    plan = build_plan(series_df, "jackknife", config=ConfigManager.from_dict({"id_column": "rep"}))
    assert list(plan.columns) == ["sample", "rep"]
    assert len(plan) == 10


@pytest.mark.parametrize(
    "method,overrides,rows",
    [
        ("loo", {}, 10),
        ("lpo", {}, 45),
        ("rolling", {"width": 3}, 8),
        ("permutation", {"n_replicates": 4}, 4),
        ("balanced_bootstrap", {"n_replicates": 2}, 2),
    ],
)
def test_methods_produce_tables(series_df, method, overrides, rows):
    plan = build_plan(series_df, method, config=ConfigManager(), **overrides)
    assert len(plan) == rows


def test_grouped_plan(grouped_panel):
    plan = build_plan(grouped_panel, "kfold", config=ConfigManager(), k=3, shuffle=False)
    assert _indices(plan["test"]) == [[2, 4, 7, 10], [1, 5, 9], [3, 6, 8]]


def test_unknown_method(series_df):
    with pytest.raises(ValidationError, match="method"):
        build_plan(series_df, "holdout", config=ConfigManager())


def test_rng_rejected_for_deterministic_method(series_df):
    with pytest.raises(ValidationError, match="random"):
        build_plan(series_df, "lpo", config=ConfigManager(), rng=np.random.default_rng(0))


def test_unknown_parameter(series_df):
    with pytest.raises(ValidationError, match="unknown parameters"):
        build_plan(series_df, "jackknife", config=ConfigManager(), k=3)


def test_invalid_override_fails_in_method(series_df):
    with pytest.raises(ValidationError, match="k"):
        build_plan(series_df, "kfold", config=ConfigManager(), k=11)


def test_global_config_is_default(series_df):
    reset_global_config()
    set_global_config(ConfigManager.from_dict({"kfold": {"k": 2}}))

    assert len(build_plan(series_df, "kfold", rng=0)) == 2

    reset_global_config()

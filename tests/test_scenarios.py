from __future__ import annotations

import pytest

from src.defaults import DEFAULTS, TUNABLE_FIELDS
from src.scenarios import (
    PERCENTILE_RANGES,
    SCENARIO_PRESETS,
    apply_percentile,
    load_scenario,
    parameter_from_percentile,
    percentile_inputs,
    resolve_scenario_name,
    scenario_names,
)


def test_three_presets_are_available():
    assert scenario_names() == ["conservative", "balanced", "aggressive"]
    assert load_scenario("balanced") == DEFAULTS


def test_loading_a_scenario_replaces_every_field():
    loaded = load_scenario("aggressive")
    assert set(loaded) == set(DEFAULTS)
    assert loaded["orders_per_day"] == 150.0
    assert loaded["cac"] == 60.0
    assert loaded["fixed_costs_per_month"] == 110000.0


def test_loaded_scenarios_are_independent_copies():
    loaded = load_scenario("conservative")
    loaded["aov"] = 1.0
    assert SCENARIO_PRESETS["conservative"]["aov"] == 80.0


def test_legacy_aliases_resolve():
    assert resolve_scenario_name("bull") == "aggressive"
    assert resolve_scenario_name(" Bear ") == "conservative"
    assert load_scenario("base") == load_scenario("balanced")
    with pytest.raises(ValueError, match="Unknown scenario"):
        resolve_scenario_name("sideways")


def test_percentile_anchors_are_reproduced():
    for field, anchors in PERCENTILE_RANGES.items():
        assert parameter_from_percentile(10, anchors) == anchors["p10"]
        assert parameter_from_percentile(50, anchors) == anchors["p50"]
        assert parameter_from_percentile(90, anchors) == anchors["p90"]


def test_percentile_is_clamped_to_slider_range():
    anchors = PERCENTILE_RANGES["aov"]
    assert parameter_from_percentile(0, anchors) == anchors["p10"]
    assert parameter_from_percentile(100, anchors) == anchors["p90"]


def test_thirtieth_percentile_interpolates_and_rounds_half_up():
    values = percentile_inputs(30)
    assert values == {
        "orders_per_day": 60.0,
        "aov": 73.0,
        "cac": 58.0,
        "monthly_churn": 8.0,
        "contribution_margin": 31.0,
        "fixed_costs_per_month": 67500.0,
    }


def test_seventieth_percentile_interpolates_upper_segment():
    values = percentile_inputs(70)
    assert values == {
        "orders_per_day": 150.0,
        "aov": 123.0,
        "cac": 98.0,
        "monthly_churn": 15.0,
        "contribution_margin": 43.0,
        "fixed_costs_per_month": 117500.0,
    }


def test_apply_percentile_keeps_investment():
    inputs = load_scenario("aggressive")
    adjusted = apply_percentile(inputs, 10)
    assert adjusted["investment"] == 500000.0
    for field in TUNABLE_FIELDS:
        assert adjusted[field] == PERCENTILE_RANGES[field]["p10"]
    assert inputs["orders_per_day"] == 150.0

from __future__ import annotations

from copy import deepcopy

import pytest

from src.sensitivity import (
    TARGET_OPTIONS,
    _shocked_value,
    available_sensitivity_drivers,
    evaluate_outputs,
    is_money_target,
    run_one_way_sensitivity,
    tornado_frame,
)
from src.model import run_model


def test_one_way_sensitivity_shocks_each_tunable_driver(base_inputs):
    sens = run_one_way_sensitivity(deepcopy(base_inputs), 0.1)

    assert len(sens) == 12
    assert set(sens["Case"]) == {"Low", "High"}
    assert "investment" not in set(sens["Driver"])
    for target in TARGET_OPTIONS:
        assert f"Delta {target}" in sens.columns


def test_higher_order_value_lifts_revenue(base_inputs):
    sens = run_one_way_sensitivity(deepcopy(base_inputs), 0.2, drivers=["aov"])
    high = sens.loc[sens["Case"] == "High"].iloc[0]
    low = sens.loc[sens["Case"] == "Low"].iloc[0]

    assert high["Input Value"] == 95.0 * 1.2
    assert high["Delta Month 12 Revenue"] > 0
    assert low["Delta Month 12 Revenue"] < 0


def test_unknown_drivers_are_skipped(base_inputs):
    sens = run_one_way_sensitivity(deepcopy(base_inputs), 0.1, drivers=["not_an_input", "cac"])
    assert set(sens["Driver"]) == {"cac"}


def test_percent_shocks_stay_in_range():
    assert _shocked_value("monthly_churn", 90.0, 1.5) == 100.0
    assert _shocked_value("monthly_churn", 0.0, 0.5) == 0.01
    assert _shocked_value("aov", 100.0, 1.5) == 150.0


def test_tornado_frame_orders_by_swing(base_inputs):
    sens = run_one_way_sensitivity(deepcopy(base_inputs), 0.1)
    tornado = tornado_frame(sens, "Month 12 EBITDA")

    assert list(tornado.columns) == ["Driver", "Low", "High", "Swing"]
    assert len(tornado) == 6
    assert tornado["Swing"].is_monotonic_increasing


def test_tornado_frame_handles_missing_target(base_inputs):
    sens = run_one_way_sensitivity(deepcopy(base_inputs), 0.1, drivers=["aov"])
    assert tornado_frame(sens, "Unknown Target").empty


def test_evaluate_outputs_and_driver_listing(base_inputs):
    outputs = evaluate_outputs(run_model(deepcopy(base_inputs)))
    assert set(outputs) == set(TARGET_OPTIONS)
    assert outputs["LTV/CAC Ratio"] == pytest.approx(342.0 / 75.0)
    drivers = available_sensitivity_drivers({**base_inputs, "label": "x", "flag": True})
    assert drivers == sorted(base_inputs)


def test_empty_driver_list_runs_nothing(base_inputs):
    sens = run_one_way_sensitivity(deepcopy(base_inputs), 0.1, drivers=[])
    assert sens.empty
    assert tornado_frame(sens, "Month 12 EBITDA").empty


def test_ratio_targets_are_not_money():
    assert is_money_target("Total Revenue")
    assert not is_money_target("LTV/CAC Ratio")

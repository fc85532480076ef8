from __future__ import annotations

from copy import deepcopy

import pytest

from src.goal_seek import goal_seek_tolerance, solve_bounded_scalar, solve_input_for_target
from src.model import run_model


def test_goal_seek_converges_on_simple_monotonic_function():
    result = solve_bounded_scalar(lambda x: 2 * x + 3, target=23, lower_bound=0, upper_bound=20, tol=1e-6)
    assert result.status == "solved"
    assert result.value is not None
    assert abs(result.value - 10.0) < 1e-4


def test_goal_seek_fails_when_target_not_bracketed():
    result = solve_bounded_scalar(lambda x: x * x + 1, target=0, lower_bound=0, upper_bound=5)
    assert result.status == "failed"
    assert "not bracketed" in result.message.lower()


def test_goal_seek_rejects_inverted_bounds():
    result = solve_bounded_scalar(lambda x: x, target=1, lower_bound=5, upper_bound=1)
    assert result.status == "failed"
    assert result.value is None


def test_solve_order_value_for_month_twelve_revenue(base_inputs):
    inputs = deepcopy(base_inputs)
    month_12_orders = float(run_model(inputs)["Monthly Orders"].iloc[11])

    result = solve_input_for_target(inputs, "aov", "Month 12 Revenue", month_12_orders * 120.0, 30.0, 400.0)

    assert result.status == "solved"
    assert result.value == pytest.approx(120.0, abs=1e-2)
    assert inputs["aov"] == 95.0


def test_solve_input_for_target_validates_names(base_inputs):
    assert solve_input_for_target(base_inputs, "nope", "Total Revenue", 1.0, 0.0, 1.0).status == "failed"
    result = solve_input_for_target(base_inputs, "aov", "Nope", 1.0, 0.0, 1.0)
    assert result.status == "failed"
    assert "Unknown target metric" in result.message


def test_ratio_targets_are_solved_to_a_tight_tolerance(base_inputs):
    result = solve_input_for_target(deepcopy(base_inputs), "cac", "LTV/CAC Ratio", 3.0, 20.0, 300.0)

    assert result.status == "solved"
    assert result.value == pytest.approx(114.0, abs=1e-2)
    assert result.achieved == pytest.approx(3.0, abs=1e-4)


def test_goal_seek_tolerance_depends_on_target_unit():
    assert goal_seek_tolerance("Ending Cumulative Cash") == 1.0
    assert goal_seek_tolerance("LTV/CAC Ratio") == 1e-4

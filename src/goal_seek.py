"""Bounded goal seek: find the value of one assumption that hits a target metric."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Callable

from src.model import run_model
from src.sensitivity import TARGET_OPTIONS, evaluate_outputs, is_money_target


MONEY_TARGET_TOLERANCE = 1.0
RATIO_TARGET_TOLERANCE = 1e-4


@dataclass
class GoalSeekResult:
    status: str
    value: float | None
    achieved: float | None
    iterations: int
    message: str


def solve_bounded_scalar(
    evaluator: Callable[[float], float],
    target: float,
    lower_bound: float,
    upper_bound: float,
    tol: float = 1e-3,
    max_iter: int = 60,
) -> GoalSeekResult:
    """Bisect evaluator(x) = target on [lower_bound, upper_bound]."""
    lo, hi = float(lower_bound), float(upper_bound)
    if hi <= lo:
        return GoalSeekResult("failed", None, None, 0, "Upper bound must be greater than lower bound.")

    gap_lo = float(evaluator(lo)) - target
    gap_hi = float(evaluator(hi)) - target
    if abs(gap_lo) <= tol:
        return GoalSeekResult("solved", lo, gap_lo + target, 0, "Solved at lower bound.")
    if abs(gap_hi) <= tol:
        return GoalSeekResult("solved", hi, gap_hi + target, 0, "Solved at upper bound.")
    if (gap_lo < 0) == (gap_hi < 0):
        return GoalSeekResult(
            "failed", None, None, 0, "Target is not bracketed in the selected bounds. Widen the search range."
        )

    mid, achieved = lo, gap_lo + target
    for iteration in range(1, max_iter + 1):
        mid = 0.5 * (lo + hi)
        achieved = float(evaluator(mid))
        gap_mid = achieved - target
        if abs(gap_mid) <= tol:
            return GoalSeekResult("solved", mid, achieved, iteration, "Converged.")
        if (gap_mid < 0) == (gap_lo < 0):
            lo, gap_lo = mid, gap_mid
        else:
            hi = mid

    return GoalSeekResult("failed", mid, achieved, max_iter, "Reached max iterations before tolerance was met.")


def goal_seek_tolerance(target_metric: str) -> float:
    """Acceptable miss for a target: one AED for money targets, tight for ratios."""
    if is_money_target(target_metric):
        return MONEY_TARGET_TOLERANCE
    return RATIO_TARGET_TOLERANCE


def solve_input_for_target(
    base_inputs: dict,
    input_key: str,
    target_metric: str,
    target_value: float,
    lower_bound: float,
    upper_bound: float,
    tol: float | None = None,
    max_iter: int = 80,
) -> GoalSeekResult:
    """Search input_key within bounds until target_metric reaches target_value."""
    if input_key not in base_inputs:
        return GoalSeekResult("failed", None, None, 0, f"Unknown input: {input_key}")
    if target_metric not in TARGET_OPTIONS:
        return GoalSeekResult("failed", None, None, 0, f"Unknown target metric: {target_metric}")

    def evaluator(x: float) -> float:
        scenario = deepcopy(base_inputs)
        scenario[input_key] = float(x)
        return evaluate_outputs(run_model(scenario))[target_metric]

    if tol is None:
        tol = goal_seek_tolerance(target_metric)
    return solve_bounded_scalar(evaluator, float(target_value), lower_bound, upper_bound, tol=tol, max_iter=max_iter)

from __future__ import annotations

from copy import deepcopy

import pytest

from src.metrics import compute_metrics, headline_row, runway_label, sample_every
from src.model import run_model


def test_headline_kpis_come_from_month_twelve(base_inputs):
    df = run_model(deepcopy(base_inputs))
    metrics = compute_metrics(df)
    m12 = df.iloc[11]

    assert metrics["headline_month"] == 12
    assert metrics["headline_revenue"] == pytest.approx(float(m12["Revenue"]))
    assert metrics["headline_active_customers"] == int(m12["Active Customers"])
    assert metrics["headline_ltv_cac"] == pytest.approx(4.56)
    assert metrics["headline_ltv_cac_healthy"] is True


def test_headline_row_falls_back_to_last_month(base_inputs):
    df = run_model(deepcopy(base_inputs)).head(6)
    assert int(headline_row(df)["Month_Number"]) == 6


def test_chart_sampling_takes_every_sixth_month(base_inputs):
    sampled = sample_every(run_model(deepcopy(base_inputs)))
    assert sampled["Month_Number"].tolist() == [1, 7, 13, 19, 25, 31, 37, 43, 49, 55]


def test_annual_rollups_and_totals(base_inputs):
    df = run_model(deepcopy(base_inputs))
    metrics = compute_metrics(df)

    assert metrics["full_years"] == 5
    assert metrics["revenue_by_year"]["Year"].tolist() == [1, 2, 3, 4, 5]
    assert metrics["revenue_by_year"]["Revenue"].sum() == pytest.approx(metrics["total_revenue"])
    assert metrics["ending_cumulative_cash"] == pytest.approx(float(df["Cumulative Cash"].iloc[-1]))
    assert metrics["minimum_cumulative_cash"] <= -base_inputs["investment"]
    assert metrics["revenue_cagr"] is not None


def test_profitable_plan_breaks_even_immediately(base_inputs):
    inputs = deepcopy(base_inputs)
    inputs.update({"investment": 0.0, "aov": 400.0, "contribution_margin": 60.0, "cac": 20.0})
    metrics = compute_metrics(run_model(inputs))

    assert metrics["ebitda_break_even_month"] == 1
    assert metrics["payback_month"] == 1
    assert metrics["burn_months"] == 0
    assert metrics["headline_runway_unbounded"] is True


def test_unhealthy_ltv_cac_is_flagged(base_inputs):
    inputs = deepcopy(base_inputs)
    inputs["cac"] = 200.0
    metrics = compute_metrics(run_model(inputs))
    assert metrics["headline_ltv_cac"] == pytest.approx(1.71)
    assert metrics["headline_ltv_cac_healthy"] is False


def test_runway_label():
    assert runway_label(float("inf")) == "∞"
    assert runway_label(2.5) == "3"
    assert runway_label(0.0) == "0"

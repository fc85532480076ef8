"""Input labels, slider ranges and advisory range checks."""

from __future__ import annotations

from typing import Any


INPUT_GUIDANCE: dict[str, dict[str, Any]] = {
    "investment": {
        "label": "Initial Investment",
        "min": 50000.0,
        "max": 2000000.0,
        "step": 10000.0,
        "unit": "currency",
        "note": "Seed capital; cumulative cash starts at minus this amount.",
    },
    "orders_per_day": {
        "label": "Daily Orders (Year 1)",
        "min": 5.0,
        "max": 500.0,
        "step": 1.0,
        "unit": "orders/day",
        "note": "Launch order volume before the tiered monthly growth is applied.",
    },
    "aov": {
        "label": "Average Order Value",
        "min": 30.0,
        "max": 400.0,
        "step": 1.0,
        "unit": "currency",
        "note": "Basket size per order; revenue scales linearly with it.",
    },
    "cac": {
        "label": "Customer Acquisition Cost",
        "min": 20.0,
        "max": 300.0,
        "step": 1.0,
        "unit": "currency",
        "note": "Marketing spend per newly acquired customer.",
    },
    "monthly_churn": {
        "label": "Monthly Churn Rate",
        "min": 2.0,
        "max": 30.0,
        "step": 1.0,
        "unit": "%",
        "note": "Share of active customers lost each month; sets average lifespan.",
    },
    "contribution_margin": {
        "label": "Contribution Margin",
        "min": 10.0,
        "max": 60.0,
        "step": 1.0,
        "unit": "%",
        "note": "Gross profit share of revenue after food and delivery costs.",
    },
    "fixed_costs_per_month": {
        "label": "Fixed Costs (Monthly)",
        "min": 30000.0,
        "max": 500000.0,
        "step": 1000.0,
        "unit": "currency",
        "note": "Rent, salaries and platform costs independent of order volume.",
    },
}


def _fmt(v: float) -> str:
    if abs(v - round(v)) < 1e-9:
        return f"{int(round(v)):,}"
    return f"{v:,.3f}".rstrip("0").rstrip(".")


def input_label(key: str) -> str:
    g = INPUT_GUIDANCE.get(key)
    return g["label"] if g else key.replace("_", " ").title()


def help_with_guidance(key: str, base_help: str = "") -> str:
    g = INPUT_GUIDANCE.get(key)
    if not g:
        return base_help
    unit = "" if g["unit"] == "currency" else f" {g['unit']}"
    text = f"{g['note']} Reasonable range: {_fmt(g['min'])} to {_fmt(g['max'])}{unit}."
    return f"{base_help} {text}".strip()


def advisory_warnings(inputs: dict) -> list[str]:
    warnings: list[str] = []
    for key, g in INPUT_GUIDANCE.items():
        if key not in inputs:
            continue
        try:
            v = float(inputs[key])
        except (TypeError, ValueError):
            continue
        if v < g["min"] or v > g["max"]:
            warnings.append(f"{key}={v:,.2f} is outside the recommended range [{_fmt(g['min'])}, {_fmt(g['max'])}].")
    return warnings

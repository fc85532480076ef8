"""Default assumptions for the unit-economics projection (balanced plan)."""

from __future__ import annotations


PROJECTION_MONTHS = 60

DEFAULTS = {
    "investment": 400000.0,
    "orders_per_day": 100.0,
    "aov": 95.0,
    "cac": 75.0,
    "monthly_churn": 10.0,
    "contribution_margin": 36.0,
    "fixed_costs_per_month": 85000.0,
}

# Fields driven by the percentile slider and replaced by scenario presets.
TUNABLE_FIELDS = [
    "orders_per_day",
    "aov",
    "cac",
    "monthly_churn",
    "contribution_margin",
    "fixed_costs_per_month",
]

PERCENT_FIELDS = {"monthly_churn", "contribution_margin"}
